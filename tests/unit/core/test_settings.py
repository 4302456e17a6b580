"""Unit tests for settings composition and validation."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from sms_confirmable.core.config.settings import Settings, settings


def test_test_environment_enables_sms_test_mode():
    assert settings.APP_ENV == "test"
    assert settings.SMS_TEST_MODE is True


def test_database_url_is_assembled():
    assert settings.DATABASE_URL.startswith("postgresql+asyncpg://")


def test_supported_languages_accept_comma_separated_string(monkeypatch):
    monkeypatch.setenv("SUPPORTED_LANGUAGES", "en, es ,fr")

    assert Settings().SUPPORTED_LANGUAGES == ["en", "es", "fr"]


def test_confirmation_durations_are_parsed(monkeypatch):
    monkeypatch.setenv("PHONE_CONFIRMATION_CONFIRM_WITHIN", "PT24H")
    monkeypatch.setenv("PHONE_CONFIRMATION_ALLOW_UNCONFIRMED_ACCESS_FOR", "P2D")

    configured = Settings()

    assert configured.PHONE_CONFIRMATION_CONFIRM_WITHIN == timedelta(days=1)
    assert configured.PHONE_CONFIRMATION_ALLOW_UNCONFIRMED_ACCESS_FOR == timedelta(days=2)


def test_empty_duration_means_unset(monkeypatch):
    monkeypatch.setenv("PHONE_CONFIRMATION_ALLOW_UNCONFIRMED_ACCESS_FOR", "")

    assert Settings().PHONE_CONFIRMATION_ALLOW_UNCONFIRMED_ACCESS_FOR is None


def test_confirmation_keys_are_split(monkeypatch):
    monkeypatch.setenv("PHONE_CONFIRMATION_KEYS", "phone_number,id")

    assert Settings().PHONE_CONFIRMATION_KEYS == ["phone_number", "id"]


def test_empty_confirmation_keys_are_rejected(monkeypatch):
    monkeypatch.setenv("PHONE_CONFIRMATION_KEYS", " , ")

    with pytest.raises(ValidationError):
        Settings()


def test_short_secret_only_warns_in_test(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "short")

    Settings().validate_required_fields()


def test_short_secret_is_fatal_in_production(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("SECRET_KEY", "short")

    with pytest.raises(ValueError, match="SECRET_KEY"):
        Settings().validate_required_fields()


def test_sms_delivery_timeout_is_configurable(monkeypatch):
    monkeypatch.setenv("SMS_DELIVERY_TIMEOUT_SECONDS", "2.5")

    assert Settings().SMS_DELIVERY_TIMEOUT_SECONDS == 2.5
