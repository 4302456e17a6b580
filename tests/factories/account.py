from __future__ import annotations

"""Factory for generating fake account data for testing."""

from datetime import datetime
from typing import Optional

from faker import Faker

from sms_confirmable.domain.entities.account import Account

fake = Faker()


def fake_phone_number() -> str:
    """A random E.164 number in the North American 555 range."""
    return f"+1555{fake.numerify('#######')}"


def create_fake_account(
    id: Optional[int] = None,
    phone_number: Optional[str] = None,
    unconfirmed_phone_number: Optional[str] = None,
    confirmation_token: Optional[str] = None,
    confirmation_sent_at: Optional[datetime] = None,
    confirmed_at: Optional[datetime] = None,
    lock_version: int = 0,
) -> Account:
    """Create a fake Account entity for testing.

    Args:
        id (Optional[int]): Account ID, defaults to ``None`` (not stored).
        phone_number (Optional[str]): Defaults to a random valid number.
        unconfirmed_phone_number (Optional[str]): Pending number, if any.
        confirmation_token (Optional[str]): Stored digest, if any.
        confirmation_sent_at (Optional[datetime]): When the code was issued.
        confirmed_at (Optional[datetime]): Confirmation timestamp.
        lock_version (int): Optimistic concurrency version.

    Returns:
        Account: A fake Account entity.
    """
    return Account(
        id=id,
        phone_number=phone_number if phone_number is not None else fake_phone_number(),
        unconfirmed_phone_number=unconfirmed_phone_number,
        confirmation_token=confirmation_token,
        confirmation_sent_at=confirmation_sent_at,
        confirmed_at=confirmed_at,
        lock_version=lock_version,
    )
