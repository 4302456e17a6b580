"""Unit tests for field errors recorded by confirmation operations."""

from sms_confirmable.domain.value_objects.field_errors import (
    ConfirmationErrorCode,
    FieldError,
    FieldErrors,
)


class TestFieldError:

    def test_enum_code_is_stored_as_its_value(self):
        error = FieldError("phone_number", ConfirmationErrorCode.ALREADY_CONFIRMED)

        assert error.code == "already_confirmed"

    def test_message_is_translated(self):
        error = FieldError("phone_number", ConfirmationErrorCode.ALREADY_CONFIRMED)

        assert error.message("en") == "was already confirmed, please try signing in"
        assert error.message("es") == "ya fue confirmado, por favor intenta iniciar sesión"

    def test_message_interpolates_params(self):
        error = FieldError(
            "phone_number",
            ConfirmationErrorCode.CONFIRMATION_PERIOD_EXPIRED,
            {"period": "1 day"},
        )

        assert error.message("en") == "needs to be confirmed within 1 day, please request a new one"

    def test_full_message_prefixes_humanized_field(self):
        error = FieldError("confirmation_token", ConfirmationErrorCode.BLANK)

        assert error.full_message("en") == "Confirmation token can't be blank"


class TestFieldErrors:

    def test_starts_empty(self):
        errors = FieldErrors()

        assert errors.is_empty
        assert not errors
        assert len(errors) == 0

    def test_add_and_query(self):
        errors = FieldErrors()
        errors.add("phone_number", ConfirmationErrorCode.TAKEN)
        errors.add("confirmation_token", ConfirmationErrorCode.NOT_FOUND)

        assert "phone_number" in errors
        assert "unconfirmed_phone_number" not in errors
        assert errors.has("phone_number", ConfirmationErrorCode.TAKEN)
        assert errors.has("phone_number", "taken")
        assert not errors.has("phone_number", ConfirmationErrorCode.BLANK)
        assert errors.codes("confirmation_token") == ["not_found"]
        assert [e.field for e in errors] == ["phone_number", "confirmation_token"]

    def test_extend_and_clear(self):
        errors = FieldErrors()
        errors.extend([FieldError("phone_number", "invalid"), FieldError("phone_number", "taken")])

        assert errors.codes("phone_number") == ["invalid", "taken"]

        errors.clear()
        assert errors.is_empty

    def test_to_dict_groups_messages_by_field(self):
        errors = FieldErrors()
        errors.add("phone_number", ConfirmationErrorCode.BLANK)
        errors.add("phone_number", ConfirmationErrorCode.INVALID)

        assert errors.to_dict("en") == {"phone_number": ["can't be blank", "is invalid"]}

    def test_full_messages(self):
        errors = FieldErrors()
        errors.add("phone_number", ConfirmationErrorCode.NOT_FOUND)

        assert errors.full_messages("en") == ["Phone number not found"]
