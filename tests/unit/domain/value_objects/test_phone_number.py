"""Unit tests for the PhoneNumber value object."""

import pytest

from sms_confirmable.domain.value_objects.phone_number import PhoneNumber


class TestPhoneNumber:
    """Test cases for PhoneNumber value object."""

    def test_valid_number_is_kept(self):
        phone = PhoneNumber("+15550100")

        assert phone.value == "+15550100"
        assert str(phone) == "+15550100"

    @pytest.mark.parametrize(
        "raw",
        ["+1 555 0100", "+1-555-0100", "+1 (555) 01.00", " +15550100 "],
    )
    def test_human_formatting_is_normalized(self, raw):
        assert PhoneNumber(raw).value == "+15550100"

    @pytest.mark.parametrize("raw", ["15550100", "+0555010", "+12", "+1555abc0100", "+1234567890123456"])
    def test_invalid_numbers_are_rejected(self, raw):
        with pytest.raises(ValueError, match="E.164"):
            PhoneNumber(raw)

    def test_non_string_is_rejected(self):
        with pytest.raises(TypeError):
            PhoneNumber(15550100)

    def test_equality_uses_normalized_value(self):
        assert PhoneNumber("+1 555 0100") == PhoneNumber("+15550100")

    def test_is_valid_does_not_raise(self):
        assert PhoneNumber.is_valid("+1 555 0100") is True
        assert PhoneNumber.is_valid("not a number") is False
        assert PhoneNumber.is_valid(None) is False
        assert PhoneNumber.is_valid("") is False

    def test_normalize_passes_none_through(self):
        assert PhoneNumber.normalize(None) is None

    def test_mask_for_logging_keeps_last_four_digits(self):
        masked = PhoneNumber("+15550100").mask_for_logging()

        assert masked == "+****0100"
        assert "555" not in masked

    def test_is_immutable(self):
        phone = PhoneNumber("+15550100")

        with pytest.raises(AttributeError):
            phone.value = "+15550199"
