"""Confirmation state machine for a single account.

The machine wraps one `Account` aggregate and owns its confirmation
sub-state:

    UNCONFIRMED ──confirm──────────────────────────▶ CONFIRMED
         │                                              │
         └──phone number changed (reconfirmable)──▶ PENDING_RECONFIRMATION
                                                        │
                         confirm (swap numbers) ◀───────┘

Domain failures (already confirmed, expired code, validation, concurrent
modification) are recorded on `errors` and reported through return values.
Only infrastructure failures raise.

A machine is bound to one load of an account. The raw code it generated and
the per-call flags live on the machine only, so nothing leaks into a later
load of the same account.
"""

import asyncio
from enum import Enum
from typing import Any, Dict, Optional

import structlog

from sms_confirmable.core.config.settings import settings
from sms_confirmable.core.exceptions import (
    AccountValidationError,
    DeliveryError,
    StaleAccountError,
)
from sms_confirmable.domain.entities.account import Account
from sms_confirmable.domain.events.phone_confirmation_events import (
    PhoneConfirmationCompletedEvent,
    PhoneConfirmationFailedEvent,
    PhoneConfirmationRequestedEvent,
)
from sms_confirmable.domain.interfaces.repositories import IAccountRepository
from sms_confirmable.domain.interfaces.services import (
    IEventPublisher,
    INotifier,
    ITokenGenerator,
)
from sms_confirmable.domain.services.phone_confirmation.confirmation_policy import (
    ConfirmationPolicy,
)
from sms_confirmable.domain.services.phone_confirmation.token_generator import (
    CONFIRMATION_PURPOSE,
)
from sms_confirmable.domain.value_objects.delivery_result import DeliveryResult
from sms_confirmable.domain.value_objects.field_errors import (
    ConfirmationErrorCode,
    FieldErrors,
)

logger = structlog.get_logger(__name__)

_TRACKED_FIELDS = (
    "phone_number",
    "unconfirmed_phone_number",
    "confirmation_token",
    "confirmation_sent_at",
    "confirmed_at",
)


class ConfirmationState(str, Enum):
    UNCONFIRMED = "unconfirmed"
    PENDING_RECONFIRMATION = "pending_reconfirmation"
    CONFIRMED = "confirmed"


class ConfirmationStateMachine:
    """Confirmation transitions for one account.

    Attributes:
        account: The account aggregate being confirmed.
        errors: Field errors recorded by the last operations.
        raw_confirmation_token: The raw code generated during this machine's
            lifetime, kept in memory only so it can be delivered once.
        confirmation_token: The raw code presented to ``confirm_by_token``,
            echoed back for display. Never the digest.
        delivery: Result of the last delivery attempt, if any.
        reconfirmation_required: Set when a phone-number change was postponed
            and reconfirmation instructions still have to be sent.
    """

    def __init__(
        self,
        account: Account,
        *,
        policy: ConfirmationPolicy,
        token_generator: ITokenGenerator,
        repository: IAccountRepository,
        notifier: INotifier,
        event_publisher: Optional[IEventPublisher] = None,
        language: str = settings.DEFAULT_LANGUAGE,
    ):
        self.account = account
        self.errors = FieldErrors()
        self.raw_confirmation_token: Optional[str] = None
        self.confirmation_token: Optional[str] = None
        self.delivery: Optional[DeliveryResult] = None
        self.reconfirmation_required = False
        self.language = language
        self._policy = policy
        self._token_generator = token_generator
        self._repository = repository
        self._notifier = notifier
        self._event_publisher = event_publisher

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> ConfirmationState:
        if self.pending_reconfirmation:
            return ConfirmationState.PENDING_RECONFIRMATION
        if self.confirmed:
            return ConfirmationState.CONFIRMED
        return ConfirmationState.UNCONFIRMED

    @property
    def confirmed(self) -> bool:
        return self._policy.confirmed(self.account)

    @property
    def pending_reconfirmation(self) -> bool:
        return self._policy.pending_reconfirmation(self.account)

    @property
    def confirmation_required(self) -> bool:
        return self._policy.confirmation_required(self.account)

    @property
    def persisted(self) -> bool:
        return self.account.persisted

    def active_for_authentication(self) -> bool:
        return self._policy.active_for_authentication(self.account)

    def inactive_message(self) -> Optional[str]:
        return self._policy.inactive_message(self.account)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def confirm(self) -> bool:
        """Confirm the account, consuming its outstanding code.

        For a pending phone-number change the new number replaces the
        verified one, and the save re-validates uniqueness. If the save is
        refused the account is left exactly as it was before the call.

        Returns:
            ``True`` on success; ``False`` with `errors` populated otherwise.
        """
        if not self._pending_any_confirmation():
            await self._publish_failed(ConfirmationErrorCode.ALREADY_CONFIRMED)
            return False

        if self._policy.confirmation_period_expired(self.account):
            self.errors.add(
                "phone_number",
                ConfirmationErrorCode.CONFIRMATION_PERIOD_EXPIRED,
                period=self._policy.expiry_period(self.language),
            )
            logger.info(
                "Phone confirmation rejected - code expired",
                account_id=self.account.id,
                confirmation_sent_at=self.account.confirmation_sent_at.isoformat(),
            )
            await self._publish_failed(ConfirmationErrorCode.CONFIRMATION_PERIOD_EXPIRED)
            return False

        snapshot = self.snapshot()
        swap_phone_number = self.pending_reconfirmation

        self.account.confirmation_token = None
        self.account.confirmed_at = self._policy.now()
        if swap_phone_number:
            self.account.phone_number = self.account.unconfirmed_phone_number
            self.account.unconfirmed_phone_number = None

        try:
            # Uniqueness of the incoming number has to be re-checked on swap
            self.account = await self._repository.save(self.account, validate=swap_phone_number)
        except AccountValidationError as exc:
            self.restore(snapshot)
            self.errors.extend(exc.errors)
            logger.info(
                "Phone confirmation rejected by validation",
                account_id=self.account.id,
                errors=[(error.field, error.code) for error in exc.errors],
            )
            await self._publish_failed(exc.code)
            return False
        except StaleAccountError:
            self.restore(snapshot)
            self.errors.add("confirmation_token", ConfirmationErrorCode.STALE)
            logger.warning(
                "Phone confirmation lost a race with a concurrent update",
                account_id=self.account.id,
            )
            await self._publish_failed(ConfirmationErrorCode.STALE)
            return False

        logger.info(
            "Phone confirmation completed",
            account_id=self.account.id,
            phone_number=self.account.mask_phone_number(),
            phone_number_changed=swap_phone_number,
        )
        await self._after_confirmation(swap_phone_number)
        return True

    async def send_confirmation_instructions(self) -> DeliveryResult:
        """Deliver the confirmation code, generating one if none is held.

        A new code is persisted before delivery is attempted; a failed
        delivery leaves it valid so the account holder can ask again.
        """
        if self.raw_confirmation_token is None:
            await self.generate_confirmation_token_and_save()

        reconfirmation = self.pending_reconfirmation
        to = self.account.unconfirmed_phone_number if reconfirmation else self.account.phone_number
        self.delivery = await self._deliver(to, reconfirmation)
        return self.delivery

    async def send_reconfirmation_instructions(self, skip_notification: bool = False) -> DeliveryResult:
        self.reconfirmation_required = False

        if skip_notification:
            self.delivery = DeliveryResult.skipped(self.account.unconfirmed_phone_number)
            return self.delivery
        return await self.send_confirmation_instructions()

    async def resend_confirmation_instructions(self) -> bool:
        """Issue a fresh code and deliver it.

        Resending always regenerates, whether or not the previous code has
        expired, and overwrites it.

        Returns:
            ``False`` with ``already_confirmed`` recorded when there is
            nothing left to confirm; ``True`` otherwise. The delivery outcome
            is available on `delivery`.
        """
        if not self._pending_any_confirmation():
            return False

        self.raw_confirmation_token = None
        await self.send_confirmation_instructions()
        return True

    def skip_confirmation(self) -> None:
        """Mark the account confirmed without issuing or consuming a code."""
        self.account.confirmed_at = self._policy.now()

    def generate_confirmation_token(self) -> str:
        """Store a new digest on the account and keep the raw code in memory.

        The digest and ``confirmation_sent_at`` always change together.
        """
        token = self._token_generator.generate(CONFIRMATION_PURPOSE)
        self.raw_confirmation_token = token.raw
        self.account.confirmation_token = token.digest
        self.account.confirmation_sent_at = self._policy.now()
        return token.raw

    async def generate_confirmation_token_and_save(self) -> str:
        raw = self.generate_confirmation_token()
        self.account = await self._repository.save(self.account, validate=False)
        return raw

    def postpone_phone_number_change(self, previous_phone_number: Optional[str]) -> None:
        """Move the new number aside until it is confirmed.

        ``account.phone_number`` must already hold the requested number.
        """
        self.reconfirmation_required = True
        self.account.unconfirmed_phone_number = self.account.phone_number
        self.account.phone_number = previous_phone_number
        self.generate_confirmation_token()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        return {name: getattr(self.account, name) for name in _TRACKED_FIELDS}

    def restore(self, snapshot: Dict[str, Any]) -> None:
        for name, value in snapshot.items():
            setattr(self.account, name, value)

    def _pending_any_confirmation(self) -> bool:
        if self._policy.pending_any_confirmation(self.account):
            return True
        self.errors.add("phone_number", ConfirmationErrorCode.ALREADY_CONFIRMED)
        return False

    async def _deliver(self, phone_number: Optional[str], reconfirmation: bool) -> DeliveryResult:
        if not phone_number:
            logger.warning("Confirmation code not sent - no phone number", account_id=self.account.id)
            return DeliveryResult.skipped()

        context = {
            "account_id": self.account.id,
            "purpose": "reconfirmation" if reconfirmation else "confirmation",
            "language": self.language,
        }
        masked = self.account.mask_phone_number(phone_number)
        try:
            await self._notifier.send(phone_number, self.raw_confirmation_token, context)
        except DeliveryError as exc:
            logger.error(
                "Confirmation code delivery failed",
                account_id=self.account.id,
                phone_number=masked,
                error=str(exc),
                error_code=exc.code,
            )
            result = DeliveryResult.failure(phone_number, exc.code, exc.message)
        except (asyncio.TimeoutError, TimeoutError) as exc:
            logger.error(
                "Confirmation code delivery timed out",
                account_id=self.account.id,
                phone_number=masked,
                error=str(exc),
            )
            result = DeliveryResult.failure(phone_number, "delivery_timeout", "SMS delivery timed out")
        else:
            logger.info(
                "Confirmation code delivered",
                account_id=self.account.id,
                phone_number=masked,
                reconfirmation=reconfirmation,
            )
            result = DeliveryResult.sent(phone_number)

        await self._publish(
            PhoneConfirmationRequestedEvent.create(
                account_id=self.account.id,
                phone_number=masked,
                delivery_status=result.status.value,
                reconfirmation=reconfirmation,
            )
        )
        return result

    async def _after_confirmation(self, phone_number_changed: bool) -> None:
        await self._publish(
            PhoneConfirmationCompletedEvent.create(
                account_id=self.account.id,
                phone_number=self.account.mask_phone_number(),
                phone_number_changed=phone_number_changed,
            )
        )

    async def _publish_failed(self, reason: str) -> None:
        if isinstance(reason, ConfirmationErrorCode):
            reason = reason.value
        await self._publish(
            PhoneConfirmationFailedEvent.create(
                account_id=self.account.id,
                failure_reason=reason,
                token_prefix=self.confirmation_token[:3] if self.confirmation_token else None,
            )
        )

    async def _publish(self, event) -> None:
        if self._event_publisher is None:
            return
        try:
            await self._event_publisher.publish(event)
        except Exception as e:
            logger.error(
                "Failed to publish phone confirmation event",
                event_type=type(event).__name__,
                account_id=self.account.id,
                error=str(e),
            )
