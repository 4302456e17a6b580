"""Phone Confirmation Domain Events.

These events represent significant business occurrences in the phone
confirmation domain that other parts of the system may need to react to
(audit logging, monitoring, welcome messages after confirmation).

Phone numbers carried by events are masked; codes are never included.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from .base import BaseDomainEvent


@dataclass(frozen=True)
class PhoneConfirmationRequestedEvent(BaseDomainEvent):
    """Event published when a confirmation code was handed to the notifier.

    Attributes:
        phone_number: Masked number the code was addressed to
        delivery_status: ``sent``, ``failed`` or ``skipped``
        reconfirmation: Whether the code confirms a phone-number change
    """

    phone_number: Optional[str] = None
    delivery_status: str = "sent"
    reconfirmation: bool = False

    @classmethod
    def create(
        cls,
        account_id: Optional[int],
        phone_number: Optional[str],
        delivery_status: str,
        reconfirmation: bool = False,
        correlation_id: Optional[str] = None,
    ) -> 'PhoneConfirmationRequestedEvent':
        """Create phone confirmation requested event with current timestamp."""
        return cls(
            occurred_at=datetime.now(timezone.utc),
            account_id=account_id,
            correlation_id=correlation_id,
            phone_number=phone_number,
            delivery_status=delivery_status,
            reconfirmation=reconfirmation,
        )


@dataclass(frozen=True)
class PhoneConfirmationCompletedEvent(BaseDomainEvent):
    """Event published when an account confirmed its phone number.

    This is the hook for work that has to happen after confirmation
    (activation, welcome messages, audit logging).

    Attributes:
        phone_number: Masked number that is now verified
        phone_number_changed: Whether a pending change was swapped in
    """

    phone_number: Optional[str] = None
    phone_number_changed: bool = False

    @classmethod
    def create(
        cls,
        account_id: Optional[int],
        phone_number: Optional[str],
        phone_number_changed: bool = False,
        correlation_id: Optional[str] = None,
    ) -> 'PhoneConfirmationCompletedEvent':
        """Create phone confirmation completed event with current timestamp."""
        return cls(
            occurred_at=datetime.now(timezone.utc),
            account_id=account_id,
            correlation_id=correlation_id,
            phone_number=phone_number,
            phone_number_changed=phone_number_changed,
        )


@dataclass(frozen=True)
class PhoneConfirmationFailedEvent(BaseDomainEvent):
    """Event published when a confirmation attempt was rejected.

    Attributes:
        failure_reason: Error code, e.g. ``confirmation_period_expired``
        token_prefix: First characters of the presented code, if any
    """

    failure_reason: str = "unknown"
    token_prefix: Optional[str] = None

    @classmethod
    def create(
        cls,
        account_id: Optional[int],
        failure_reason: str,
        token_prefix: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> 'PhoneConfirmationFailedEvent':
        """Create phone confirmation failed event with current timestamp."""
        return cls(
            occurred_at=datetime.now(timezone.utc),
            account_id=account_id,
            correlation_id=correlation_id,
            failure_reason=failure_reason,
            token_prefix=token_prefix,
        )


@dataclass(frozen=True)
class PhoneNumberChangePostponedEvent(BaseDomainEvent):
    """Event published when a phone-number change awaits reconfirmation.

    Attributes:
        phone_number: Masked verified number that stays active
        unconfirmed_phone_number: Masked number waiting for confirmation
    """

    phone_number: Optional[str] = None
    unconfirmed_phone_number: Optional[str] = None

    @classmethod
    def create(
        cls,
        account_id: Optional[int],
        phone_number: Optional[str],
        unconfirmed_phone_number: Optional[str],
        correlation_id: Optional[str] = None,
    ) -> 'PhoneNumberChangePostponedEvent':
        """Create phone number change postponed event with current timestamp."""
        return cls(
            occurred_at=datetime.now(timezone.utc),
            account_id=account_id,
            correlation_id=correlation_id,
            phone_number=phone_number,
            unconfirmed_phone_number=unconfirmed_phone_number,
        )
