"""Base class for domain events."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class BaseDomainEvent:
    """Base class for all domain events.

    Attributes:
        occurred_at: When the event occurred
        account_id: ID of the account associated with the event
        correlation_id: Optional correlation ID for tracking
    """

    occurred_at: datetime
    account_id: Optional[int]
    correlation_id: Optional[str]

    def __post_init__(self):
        """Ensure occurred_at is timezone-aware."""
        if not self.occurred_at.tzinfo:
            object.__setattr__(self, 'occurred_at',
                               self.occurred_at.replace(tzinfo=timezone.utc))
