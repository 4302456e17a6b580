"""Dependencies for phone confirmation.

This module wires the domain service to its infrastructure: the SQL account
repository, the SMS notifier (wrapped with retries) and the event publisher.
Each factory depends only on interfaces so callers and tests can substitute
any piece.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from sms_confirmable.core.config.settings import settings
from sms_confirmable.core.logging import logger
from sms_confirmable.domain.interfaces.repositories import IAccountRepository
from sms_confirmable.domain.interfaces.services import (
    IEventPublisher,
    INotifier,
    ITokenGenerator,
)
from sms_confirmable.domain.services.phone_confirmation import (
    PhoneConfirmationService,
    TokenGenerator,
)
from sms_confirmable.domain.value_objects.confirmation_config import ConfirmableConfig
from sms_confirmable.infrastructure.database.async_db import get_async_db
from sms_confirmable.infrastructure.repositories import AccountRepository
from sms_confirmable.infrastructure.services.event_publisher import InMemoryEventPublisher
from sms_confirmable.infrastructure.services.sms import LoggingSmsNotifier, RetryingNotifier

_event_publisher: Optional[InMemoryEventPublisher] = None


def get_account_repository(db: AsyncSession) -> IAccountRepository:
    """Factory that returns the SQL account repository bound to ``db``."""
    return AccountRepository(db)


def get_notifier(transport: Optional[INotifier] = None) -> INotifier:
    """Factory that returns the SMS notifier, wrapped with delivery retries.

    Args:
        transport: Notifier that talks to the SMS provider. Required unless
            ``SMS_TEST_MODE`` is on, in which case messages go to a
            `LoggingSmsNotifier` outbox.

    Raises:
        RuntimeError: If no transport is given outside test mode.
    """
    if transport is None:
        if not settings.SMS_TEST_MODE:
            raise RuntimeError("An SMS transport is required when SMS_TEST_MODE is disabled")
        transport = LoggingSmsNotifier()
    return RetryingNotifier(transport)


def get_event_publisher() -> IEventPublisher:
    """Return the process-wide event publisher."""
    global _event_publisher
    if _event_publisher is None:
        _event_publisher = InMemoryEventPublisher()
    return _event_publisher


def get_token_generator(config: ConfirmableConfig) -> ITokenGenerator:
    return TokenGenerator(settings.SECRET_KEY, token_length=config.token_length)


def get_phone_confirmation_service(
    repository: IAccountRepository,
    notifier: Optional[INotifier] = None,
    config: Optional[ConfirmableConfig] = None,
    event_publisher: Optional[IEventPublisher] = None,
) -> PhoneConfirmationService:
    """Build a `PhoneConfirmationService` from its collaborators.

    Args:
        repository: Account storage.
        notifier: Transport-level notifier; see `get_notifier`.
        config: Per-type options. Defaults to the values in settings.
        event_publisher: Defaults to the process-wide publisher.
    """
    config = config or ConfirmableConfig.from_settings(settings)
    return PhoneConfirmationService(
        repository=repository,
        notifier=get_notifier(notifier),
        config=config,
        token_generator=get_token_generator(config),
        event_publisher=event_publisher or get_event_publisher(),
    )


@asynccontextmanager
async def phone_confirmation_service(
    notifier: Optional[INotifier] = None,
    config: Optional[ConfirmableConfig] = None,
) -> AsyncIterator[PhoneConfirmationService]:
    """Yield a service bound to a fresh database session.

    Example:
        async with phone_confirmation_service() as service:
            machine = await service.confirm_by_token(code)
    """
    async with get_async_db() as db:
        logger.debug("phone_confirmation_service_opened")
        yield get_phone_confirmation_service(
            get_account_repository(db), notifier=notifier, config=config
        )
