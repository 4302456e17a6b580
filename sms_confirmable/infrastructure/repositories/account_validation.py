"""Domain validation rules applied by repositories before writing accounts."""

from typing import List

from sms_confirmable.domain.entities.account import Account
from sms_confirmable.domain.value_objects.field_errors import ConfirmationErrorCode, FieldError
from sms_confirmable.domain.value_objects.phone_number import PhoneNumber


def validate_account_format(account: Account) -> List[FieldError]:
    """Checks the phone-number fields without touching storage.

    Returns:
        The errors found; empty when the account is valid.
    """
    errors: List[FieldError] = []

    if not account.phone_number:
        errors.append(FieldError("phone_number", ConfirmationErrorCode.BLANK))
    elif not PhoneNumber.is_valid(account.phone_number):
        errors.append(FieldError("phone_number", ConfirmationErrorCode.INVALID))

    if account.unconfirmed_phone_number and not PhoneNumber.is_valid(account.unconfirmed_phone_number):
        errors.append(FieldError("unconfirmed_phone_number", ConfirmationErrorCode.INVALID))

    return errors


def phone_number_taken_error() -> FieldError:
    return FieldError("phone_number", ConfirmationErrorCode.TAKEN)
