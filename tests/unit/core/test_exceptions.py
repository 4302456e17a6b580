"""Unit tests for the exception hierarchy."""

import pytest

from sms_confirmable.core.exceptions import (
    AccountValidationError,
    DatabaseError,
    DeliveryError,
    SmsConfirmableError,
    StaleAccountError,
    ValidationError,
)
from sms_confirmable.domain.value_objects import FieldError


def test_base_error_carries_message_and_code():
    error = SmsConfirmableError("something broke", "broken")

    assert str(error) == "something broke"
    assert error.message == "something broke"
    assert error.code == "broken"


@pytest.mark.parametrize(
    "error, base, code",
    [
        (ValidationError("bad"), SmsConfirmableError, "validation_error"),
        (DatabaseError("down"), SmsConfirmableError, "database_error"),
        (StaleAccountError(1, 2), DatabaseError, "stale_account"),
        (DeliveryError("timeout"), SmsConfirmableError, "delivery_failed"),
    ],
)
def test_hierarchy_and_default_codes(error, base, code):
    assert isinstance(error, base)
    assert error.code == code


def test_account_validation_error_lists_fields():
    error = AccountValidationError(
        [FieldError("phone_number", "taken"), FieldError("unconfirmed_phone_number", "invalid")]
    )

    assert isinstance(error, ValidationError)
    assert error.code == "account_invalid"
    assert len(error.errors) == 2
    assert str(error) == "Account failed validation on: phone_number, unconfirmed_phone_number"


def test_stale_account_error_details():
    error = StaleAccountError(account_id=7, expected_version=3)

    assert error.account_id == 7
    assert error.expected_version == 3
    assert "expected version 3" in str(error)


def test_delivery_error_is_retryable_by_default():
    assert DeliveryError("timeout").retryable is True
    assert DeliveryError("bad number", retryable=False).retryable is False
