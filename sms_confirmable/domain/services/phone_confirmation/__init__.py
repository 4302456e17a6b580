"""Phone confirmation domain services."""

from .confirmation_policy import ConfirmationPolicy
from .confirmation_state_machine import ConfirmationState, ConfirmationStateMachine
from .phone_confirmation_service import PhoneConfirmationService
from .token_generator import CONFIRMATION_PURPOSE, TokenGenerator

__all__ = [
    "CONFIRMATION_PURPOSE",
    "ConfirmationPolicy",
    "ConfirmationState",
    "ConfirmationStateMachine",
    "PhoneConfirmationService",
    "TokenGenerator",
]
