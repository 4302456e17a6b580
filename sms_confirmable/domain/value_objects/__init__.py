"""Domain Value Objects for the phone confirmation domain.

Value objects are immutable objects that describe domain concepts by their attributes
rather than their identity.
"""

from .confirmation_config import ConfirmableConfig
from .confirmation_options import DEFAULT_OPTIONS, ConfirmationOptions
from .confirmation_token import ConfirmationToken
from .delivery_result import DeliveryResult, DeliveryStatus
from .field_errors import ConfirmationErrorCode, FieldError, FieldErrors
from .phone_number import PhoneNumber

__all__ = [
    "ConfirmableConfig",
    "ConfirmationOptions",
    "DEFAULT_OPTIONS",
    "ConfirmationToken",
    "DeliveryResult",
    "DeliveryStatus",
    "ConfirmationErrorCode",
    "FieldError",
    "FieldErrors",
    "PhoneNumber",
]
