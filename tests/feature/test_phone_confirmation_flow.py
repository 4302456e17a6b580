"""Feature tests for the phone confirmation flow.

These tests walk an account through registration, confirmation, a
phone-number change and reconfirmation using the in-memory repository, the
test-mode SMS outbox and a controllable clock.
"""

from datetime import timedelta

import pytest

from sms_confirmable.domain.entities.account import Account
from sms_confirmable.domain.events import (
    PhoneConfirmationCompletedEvent,
    PhoneConfirmationRequestedEvent,
    PhoneNumberChangePostponedEvent,
)
from sms_confirmable.domain.services.phone_confirmation import ConfirmationState
from sms_confirmable.domain.value_objects import ConfirmationErrorCode, ConfirmationOptions


class TestPhoneConfirmationFlow:
    """Test cases for the confirmation and reconfirmation journey."""

    @pytest.fixture
    def flow_service(self, make_service):
        return make_service(reconfirmable=True, confirm_within=timedelta(hours=24))

    async def register_unnotified(self, service):
        return await service.register_account(
            Account(phone_number="+15550100"), ConfirmationOptions(skip_notification=True)
        )

    @pytest.mark.asyncio
    async def test_confirm_within_window(self, flow_service, repository, notifier, clock):
        registered = await self.register_unnotified(flow_service)
        machine = flow_service.machine_for(await repository.get_by_id(registered.account.id))

        await machine.send_confirmation_instructions()
        t1 = notifier.last_message_to("+15550100").code
        clock.advance(hours=23)
        confirmed = await flow_service.confirm_by_token(t1)

        assert confirmed.errors.is_empty
        stored = await repository.get_by_id(registered.account.id)
        assert stored.confirmed_at == clock()
        assert stored.phone_number == "+15550100"
        assert stored.confirmation_token is None
        assert confirmed.state is ConfirmationState.CONFIRMED

    @pytest.mark.asyncio
    async def test_reconfirm_changed_phone_number(self, flow_service, repository, notifier, clock, event_publisher):
        registered = await flow_service.register_account(Account(phone_number="+15550100"))
        await flow_service.confirm_by_token(registered.raw_confirmation_token)
        first_confirmed_at = clock()
        clock.advance(days=3)

        account = await repository.get_by_id(registered.account.id)
        changed = await flow_service.change_phone_number(account, "+15550199")

        stored = await repository.get_by_id(account.id)
        assert stored.phone_number == "+15550100"
        assert stored.unconfirmed_phone_number == "+15550199"
        assert stored.confirmed_at == first_confirmed_at
        assert changed.state is ConfirmationState.PENDING_RECONFIRMATION
        t2 = notifier.last_message_to("+15550199").code
        assert t2 != registered.raw_confirmation_token

        clock.advance(hours=1)
        reconfirmed = await flow_service.confirm_by_token(t2)

        assert reconfirmed.errors.is_empty
        stored = await repository.get_by_id(account.id)
        assert stored.phone_number == "+15550199"
        assert stored.unconfirmed_phone_number is None
        assert stored.confirmed_at == clock()
        assert stored.confirmation_token is None

        assert len(event_publisher.get_published_events(PhoneNumberChangePostponedEvent)) == 1
        completed = event_publisher.get_published_events(PhoneConfirmationCompletedEvent)
        assert [event.phone_number_changed for event in completed] == [False, True]

    @pytest.mark.asyncio
    async def test_expired_code_is_rejected(self, flow_service, repository, notifier, clock):
        registered = await flow_service.register_account(Account(phone_number="+15550100"))
        t1 = notifier.last_message_to("+15550100").code
        before = await repository.get_by_id(registered.account.id)

        clock.advance(hours=25)
        machine = await flow_service.confirm_by_token(t1)

        assert machine.errors.codes("phone_number") == [ConfirmationErrorCode.CONFIRMATION_PERIOD_EXPIRED.value]
        assert machine.errors.full_messages("en") == [
            "Phone number needs to be confirmed within 1 day, please request a new one"
        ]
        after = await repository.get_by_id(registered.account.id)
        assert after.model_dump() == before.model_dump()

    @pytest.mark.asyncio
    async def test_resend_after_expiry_allows_confirmation(self, flow_service, repository, notifier, clock):
        registered = await flow_service.register_account(Account(phone_number="+15550100"))
        old_code = registered.raw_confirmation_token
        old = await repository.get_by_id(registered.account.id)
        clock.advance(hours=30)

        resent = await flow_service.send_confirmation_instructions_for({"phone_number": "+15550100"})
        new_code = notifier.last_message_to("+15550100").code

        fresh = await repository.get_by_id(registered.account.id)
        assert resent.delivery.delivered
        assert new_code != old_code
        assert fresh.confirmation_token != old.confirmation_token
        assert fresh.confirmation_sent_at >= old.confirmation_sent_at

        stale_attempt = await flow_service.confirm_by_token(old_code)
        assert stale_attempt.errors.has("confirmation_token", ConfirmationErrorCode.NOT_FOUND)

        confirmed = await flow_service.confirm_by_token(new_code)
        assert confirmed.errors.is_empty

    @pytest.mark.asyncio
    async def test_confirmed_account_cannot_confirm_again(self, flow_service, repository):
        registered = await flow_service.register_account(Account(phone_number="+15550100"))
        await flow_service.confirm_by_token(registered.raw_confirmation_token)

        machine = flow_service.machine_for(await repository.get_by_id(registered.account.id))

        assert await machine.confirm() is False
        assert machine.errors.full_messages("en") == ["Phone number was already confirmed, please try signing in"]

    @pytest.mark.asyncio
    async def test_delivery_status_is_reported_in_events(self, flow_service, event_publisher):
        await flow_service.register_account(Account(phone_number="+15550100"))

        requested = event_publisher.get_published_events(PhoneConfirmationRequestedEvent)

        assert [event.delivery_status for event in requested] == ["sent"]
        assert requested[0].reconfirmation is False

    @pytest.mark.asyncio
    async def test_unconfirmed_account_is_blocked_after_grace_period(self, make_service, repository, clock):
        service = make_service(allow_unconfirmed_access_for=timedelta(days=2))
        registered = await service.register_account(Account(phone_number="+15550100"))

        assert registered.active_for_authentication()

        clock.advance(days=3)
        machine = service.machine_for(await repository.get_by_id(registered.account.id))
        assert not machine.active_for_authentication()
        assert machine.inactive_message() == "unconfirmed"
