"""Event Publisher Infrastructure Service.

This service provides a concrete implementation of the domain event
publishing interface, enabling the domain layer to publish events without
coupling to infrastructure concerns.
"""

import asyncio
from typing import Awaitable, Callable, List, Optional, Set, Type

import structlog

from sms_confirmable.domain.events.base import BaseDomainEvent
from sms_confirmable.domain.interfaces.services import IEventPublisher

logger = structlog.get_logger(__name__)

Subscriber = Callable[[BaseDomainEvent], Awaitable[None]]


class InMemoryEventPublisher(IEventPublisher):
    """In-memory event publisher for development and testing.

    This implementation stores events in memory and can be used for:
    - Development and testing environments
    - Event replay and debugging
    - Event filtering and inspection

    In production, this could be replaced with a message broker publisher.
    """

    def __init__(self):
        """Initialize event publisher with in-memory storage."""
        self._published_events: List[BaseDomainEvent] = []
        self._event_filters: Set[str] = set()
        self._subscribers: List[Subscriber] = []

        logger.info("InMemoryEventPublisher initialized")

    async def publish(self, event: BaseDomainEvent) -> None:
        """Publish a single domain event.

        Args:
            event: Domain event to publish
        """
        try:
            self._published_events.append(event)

            event_type = type(event).__name__
            if self._event_filters and event_type not in self._event_filters:
                logger.debug("Event filtered out", event_type=event_type)
                return

            if self._subscribers:
                await self._notify_subscribers(event)

            logger.info(
                "Domain event published",
                event_type=event_type,
                account_id=event.account_id,
                correlation_id=event.correlation_id,
                occurred_at=event.occurred_at.isoformat(),
            )

        except Exception as e:
            logger.error(
                "Failed to publish domain event",
                event_type=type(event).__name__,
                error=str(e),
            )
            # Don't re-raise to prevent domain operations from failing
            # due to event publishing issues

    async def publish_many(self, events: List[BaseDomainEvent]) -> None:
        """Publish multiple domain events.

        Args:
            events: List of domain events to publish
        """
        if not events:
            return

        await asyncio.gather(*(self.publish(event) for event in events))
        logger.info(
            "Multiple domain events published",
            event_count=len(events),
            event_types=[type(e).__name__ for e in events],
        )

    def add_event_filter(self, event_type: str) -> None:
        """Only events whose class name was added are delivered to subscribers."""
        self._event_filters.add(event_type)
        logger.debug("Event filter added", event_type=event_type)

    def add_subscriber(self, callback: Subscriber) -> None:
        """Add an async callback invoked for every published event."""
        self._subscribers.append(callback)
        logger.debug("Event subscriber added")

    def get_published_events(
        self,
        event_type: Optional[Type[BaseDomainEvent]] = None,
        account_id: Optional[int] = None,
    ) -> List[BaseDomainEvent]:
        """Get published events with optional filtering.

        Args:
            event_type: Filter by event class
            account_id: Filter by account ID

        Returns:
            List[BaseDomainEvent]: Filtered list of published events
        """
        events = self._published_events
        if event_type is not None:
            events = [e for e in events if isinstance(e, event_type)]
        if account_id is not None:
            events = [e for e in events if e.account_id == account_id]
        return list(events)

    def clear_published_events(self) -> None:
        """Clear all stored published events."""
        event_count = len(self._published_events)
        self._published_events.clear()
        logger.debug("Published events cleared", event_count=event_count)

    async def _notify_subscribers(self, event: BaseDomainEvent) -> None:
        for subscriber in self._subscribers:
            try:
                await subscriber(event)
            except Exception as e:
                logger.error(
                    "Event subscriber failed",
                    event_type=type(event).__name__,
                    error=str(e),
                )
