"""Service interfaces used by the phone confirmation domain."""

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from sms_confirmable.domain.events.base import BaseDomainEvent
from sms_confirmable.domain.value_objects.confirmation_token import ConfirmationToken


class ITokenGenerator(ABC):
    """Interface for confirmation token generation and digesting."""

    @abstractmethod
    def generate(self, purpose: str) -> ConfirmationToken:
        """Generate a random raw token and the digest to store for it.

        Args:
            purpose: What the token is for (e.g. ``confirmation_token``).
                Digests for different purposes never collide.
        """
        raise NotImplementedError

    @abstractmethod
    def digest(self, raw_token: Optional[str], purpose: str) -> Optional[str]:
        """Recompute the stored digest for a presented raw token.

        Returns:
            The digest, or ``None`` when ``raw_token`` is blank.
        """
        raise NotImplementedError

    @abstractmethod
    def verify(self, raw_token: Optional[str], stored_digest: Optional[str], purpose: str) -> bool:
        """Check a presented raw token against a stored digest."""
        raise NotImplementedError


class INotifier(ABC):
    """Interface for delivering confirmation codes by SMS."""

    @abstractmethod
    async def send(self, phone_number: str, code: str, context: Mapping[str, Any]) -> None:
        """Deliver ``code`` to ``phone_number``.

        Args:
            phone_number: Recipient in E.164 format.
            code: The raw confirmation code.
            context: Extra information such as ``purpose``, ``account_id``
                and ``language``.

        Raises:
            DeliveryError: If the message could not be delivered, including
                transport timeouts.
        """
        raise NotImplementedError


class IEventPublisher(ABC):
    """Interface for domain event publishing."""

    @abstractmethod
    async def publish(self, event: BaseDomainEvent) -> None:
        """Publish a domain event.

        Args:
            event: Domain event to publish
        """
        pass

    @abstractmethod
    async def publish_many(self, events: List[BaseDomainEvent]) -> None:
        """Publish multiple domain events.

        Args:
            events: List of domain events to publish
        """
        pass
