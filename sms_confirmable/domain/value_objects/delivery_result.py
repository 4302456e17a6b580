"""Outcome of handing a confirmation code to a notifier."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class DeliveryStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    """Transport-level result, reported separately from confirmation success.

    A failed delivery never invalidates the token that was stored before the
    attempt; the account holder can ask for the code to be resent.

    Attributes:
        status: What happened to the message.
        phone_number: The number the code was addressed to.
        error_code: Notifier error code when ``status`` is ``FAILED``.
        error_message: Notifier error message when ``status`` is ``FAILED``.
    """

    status: DeliveryStatus
    phone_number: Optional[str] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def delivered(self) -> bool:
        return self.status is DeliveryStatus.SENT

    @property
    def failed(self) -> bool:
        return self.status is DeliveryStatus.FAILED

    @classmethod
    def sent(cls, phone_number: str) -> "DeliveryResult":
        return cls(DeliveryStatus.SENT, phone_number)

    @classmethod
    def skipped(cls, phone_number: Optional[str] = None) -> "DeliveryResult":
        return cls(DeliveryStatus.SKIPPED, phone_number)

    @classmethod
    def failure(cls, phone_number: str, error_code: str, error_message: str) -> "DeliveryResult":
        return cls(DeliveryStatus.FAILED, phone_number, error_code, error_message)
