"""Domain Events.

All events are immutable and represent significant business occurrences that
other parts of the system may need to react to.
"""

from .base import BaseDomainEvent
from .phone_confirmation_events import (
    PhoneConfirmationCompletedEvent,
    PhoneConfirmationFailedEvent,
    PhoneConfirmationRequestedEvent,
    PhoneNumberChangePostponedEvent,
)

__all__ = [
    "BaseDomainEvent",
    "PhoneConfirmationRequestedEvent",
    "PhoneConfirmationCompletedEvent",
    "PhoneConfirmationFailedEvent",
    "PhoneNumberChangePostponedEvent",
]
