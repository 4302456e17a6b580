"""Unit tests for the SMS notifiers."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from sms_confirmable.core.exceptions import DeliveryError
from sms_confirmable.infrastructure.services.sms import (
    LoggingSmsNotifier,
    RetryingNotifier,
    render_confirmation_sms,
)


class TestRenderConfirmationSms:

    def test_confirmation_body(self):
        assert render_confirmation_sms("ABC123", {"purpose": "confirmation"}) == "Your confirmation code is ABC123"

    def test_reconfirmation_body(self):
        body = render_confirmation_sms("ABC123", {"purpose": "reconfirmation", "language": "en"})

        assert body == "Use ABC123 to confirm your new phone number"

    def test_spanish_body(self):
        body = render_confirmation_sms("ABC123", {"purpose": "confirmation", "language": "es"})

        assert body == "Tu código de confirmación es ABC123"

    def test_unknown_language_falls_back_to_default(self):
        body = render_confirmation_sms("ABC123", {"language": "xx"})

        assert body == "Your confirmation code is ABC123"


class TestLoggingSmsNotifier:

    @pytest.mark.asyncio
    async def test_records_message_in_outbox(self):
        notifier = LoggingSmsNotifier(sender_id="Acme")

        await notifier.send("+15550100", "ABC123", {"purpose": "confirmation", "account_id": 1})

        assert notifier.sender_id == "Acme"
        message = notifier.last_message_to("+15550100")
        assert message.code == "ABC123"
        assert message.body == "Your confirmation code is ABC123"
        assert message.context["account_id"] == 1
        assert message.sent_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_invalid_recipient_is_not_retryable(self):
        notifier = LoggingSmsNotifier()

        with pytest.raises(DeliveryError) as exc_info:
            await notifier.send("12345", "ABC123", {})

        assert exc_info.value.code == "invalid_recipient"
        assert exc_info.value.retryable is False
        assert notifier.outbox == []

    @pytest.mark.asyncio
    async def test_clear(self):
        notifier = LoggingSmsNotifier()
        await notifier.send("+15550100", "ABC123", {})

        notifier.clear()

        assert notifier.last_message_to("+15550100") is None


class TestRetryingNotifier:

    @pytest.mark.asyncio
    async def test_passes_through_on_success(self):
        transport = AsyncMock()
        notifier = RetryingNotifier(transport, max_attempts=3, wait_seconds=0)

        await notifier.send("+15550100", "ABC123", {"purpose": "confirmation"})

        transport.send.assert_awaited_once_with("+15550100", "ABC123", {"purpose": "confirmation"})

    @pytest.mark.asyncio
    async def test_retries_transient_failures(self):
        transport = AsyncMock()
        transport.send.side_effect = [DeliveryError("timeout"), DeliveryError("timeout"), None]
        notifier = RetryingNotifier(transport, max_attempts=3, wait_seconds=0)

        await notifier.send("+15550100", "ABC123", {})

        assert transport.send.await_count == 3

    @pytest.mark.asyncio
    async def test_reraises_after_last_attempt(self):
        transport = AsyncMock()
        transport.send.side_effect = DeliveryError("gateway down", code="gateway_down")
        notifier = RetryingNotifier(transport, max_attempts=2, wait_seconds=0)

        with pytest.raises(DeliveryError) as exc_info:
            await notifier.send("+15550100", "ABC123", {})

        assert exc_info.value.code == "gateway_down"
        assert transport.send.await_count == 2

    @pytest.mark.asyncio
    async def test_does_not_retry_permanent_failures(self):
        transport = AsyncMock()
        transport.send.side_effect = DeliveryError("bad number", code="invalid_recipient", retryable=False)
        notifier = RetryingNotifier(transport, max_attempts=5, wait_seconds=0)

        with pytest.raises(DeliveryError):
            await notifier.send("+15550100", "ABC123", {})

        assert transport.send.await_count == 1

    @pytest.mark.asyncio
    async def test_other_exceptions_are_not_retried(self):
        transport = AsyncMock()
        transport.send.side_effect = RuntimeError("bug")
        notifier = RetryingNotifier(transport, max_attempts=5, wait_seconds=0)

        with pytest.raises(RuntimeError):
            await notifier.send("+15550100", "ABC123", {})

        assert transport.send.await_count == 1

    @pytest.mark.asyncio
    async def test_slow_attempt_times_out_and_is_retried(self):
        calls = []

        class SlowThenFastTransport:
            async def send(self, phone_number, code, context):
                calls.append(phone_number)
                if len(calls) == 1:
                    await asyncio.sleep(1)

        notifier = RetryingNotifier(SlowThenFastTransport(), max_attempts=2, wait_seconds=0, timeout_seconds=0.01)

        await notifier.send("+15550100", "ABC123", {})

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_timeout_on_last_attempt_is_a_delivery_error(self):
        class HangingTransport:
            async def send(self, phone_number, code, context):
                await asyncio.sleep(1)

        notifier = RetryingNotifier(HangingTransport(), max_attempts=1, wait_seconds=0, timeout_seconds=0.01)

        with pytest.raises(DeliveryError) as exc_info:
            await notifier.send("+15550100", "ABC123", {})

        assert exc_info.value.code == "delivery_timeout"
        assert exc_info.value.retryable is True
