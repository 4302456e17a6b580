import os
from datetime import datetime, timedelta, timezone

# Settings are read at import time, so the environment has to be set first.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-at-least-32-characters")
os.environ.setdefault("LOG_JSON", "false")

import pytest

from sms_confirmable.domain.services.phone_confirmation import (
    PhoneConfirmationService,
    TokenGenerator,
)
from sms_confirmable.domain.value_objects import ConfirmableConfig
from sms_confirmable.infrastructure.repositories import InMemoryAccountRepository
from sms_confirmable.infrastructure.services.event_publisher import InMemoryEventPublisher
from sms_confirmable.infrastructure.services.sms import LoggingSmsNotifier
from sms_confirmable.utils.i18n import setup_i18n

TEST_SECRET_KEY = "unit-test-secret-key-0123456789abcdef"


class FakeClock:
    """Controllable replacement for ``utc_now``."""

    def __init__(self, now=None):
        self.now = now or datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture(scope="session", autouse=True)
def setup_translations():
    setup_i18n()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_generator():
    return TokenGenerator(secret_key=TEST_SECRET_KEY)


@pytest.fixture
def repository():
    return InMemoryAccountRepository()


@pytest.fixture
def notifier():
    return LoggingSmsNotifier(sender_id="TestSender")


@pytest.fixture
def event_publisher():
    return InMemoryEventPublisher()


@pytest.fixture
def make_service(repository, notifier, event_publisher, token_generator, clock):
    """Build a service over the shared in-memory collaborators."""

    def _make(**config_overrides):
        return PhoneConfirmationService(
            repository=repository,
            notifier=notifier,
            config=ConfirmableConfig(**config_overrides),
            token_generator=token_generator,
            event_publisher=event_publisher,
            clock=clock,
        )

    return _make


@pytest.fixture
def service(make_service):
    return make_service(confirm_within=timedelta(hours=24))
