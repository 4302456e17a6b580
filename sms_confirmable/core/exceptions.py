from __future__ import annotations

"""Centralized, structured exception hierarchy for sms-confirmable.

Only infrastructure and programming failures are raised. Domain outcomes of
the confirmation flow (already confirmed, expired code, unknown account, ...)
are recorded as field errors on the state machine instead, see
`sms_confirmable.domain.value_objects.field_errors`.

Each exception carries a machine-readable `code` for programmatic error
handling and a human-readable `message` for logging.
"""

from typing import TYPE_CHECKING, Final, Iterable, Optional

if TYPE_CHECKING:
    from sms_confirmable.domain.value_objects.field_errors import FieldError

__all__: Final = [
    "SmsConfirmableError",
    "DatabaseError",
    "ValidationError",
    "AccountValidationError",
    "StaleAccountError",
    "DeliveryError",
]


class SmsConfirmableError(Exception):
    """Base exception class for all custom errors in the package.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Validation errors
# ---------------------------------------------------------------------------


class ValidationError(SmsConfirmableError):
    """Raised for general data validation failures."""

    def __init__(self, message: str, code: str = "validation_error"):
        super().__init__(message, code)


class AccountValidationError(ValidationError):
    """Raised by a repository when it refuses to persist an account.

    The refusal is described field by field (for example ``phone_number`` is
    ``taken``) so that callers can copy the errors onto the record the user
    submitted.

    Attributes:
        errors: The field errors that prevented the save.
    """

    def __init__(
        self,
        errors: Iterable["FieldError"],
        message: Optional[str] = None,
        code: str = "account_invalid",
    ):
        self.errors = list(errors)
        if message is None:
            fields = ", ".join(sorted({error.field for error in self.errors})) or "account"
            message = f"Account failed validation on: {fields}"
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Persistence errors
# ---------------------------------------------------------------------------


class DatabaseError(SmsConfirmableError):
    """Raised for low-level database interaction errors."""

    def __init__(self, message: str, code: str = "database_error"):
        super().__init__(message, code)


class StaleAccountError(DatabaseError):
    """Raised when an account was modified by someone else since it was loaded.

    Repositories compare the stored ``lock_version`` with the one the caller
    loaded and refuse the write when they differ.
    """

    def __init__(self, account_id: Optional[int], expected_version: int, code: str = "stale_account"):
        self.account_id = account_id
        self.expected_version = expected_version
        super().__init__(
            f"Account {account_id} was modified concurrently (expected version {expected_version})",
            code,
        )


# ---------------------------------------------------------------------------
# Delivery errors
# ---------------------------------------------------------------------------


class DeliveryError(SmsConfirmableError):
    """Raised by a notifier when a confirmation code could not be delivered.

    This includes transport timeouts. It never invalidates a token that has
    already been persisted.
    """

    def __init__(self, message: str, code: str = "delivery_failed", retryable: bool = True):
        self.retryable = retryable
        super().__init__(message, code)
