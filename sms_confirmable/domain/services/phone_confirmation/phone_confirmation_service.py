"""Phone Confirmation Domain Service.

This service is the entry point for the layers that trigger confirmation
flows (HTTP handlers, CLIs, background jobs). It binds a
`ConfirmationStateMachine` to each account and orchestrates the points in an
account's life where confirmation work happens:

- ``register_account``: before the account is stored a code is generated
  (unless confirmation is bypassed); after it is stored the code is sent.
- ``change_phone_number``: before the update a reconfirmable change is
  moved into ``unconfirmed_phone_number`` and a new code generated; after
  the update reconfirmation instructions are sent.
- ``find_for_confirmation_instructions`` / ``send_confirmation_instructions_for``:
  look up an account by its confirmation keys (and, for reconfirmable
  types, by the pending number) and resend its code.
- ``confirm_by_token``: confirm the account holding a presented code.

Lookups that find nothing return a placeholder machine carrying field
errors instead of raising.
"""

from typing import Any, Dict, Mapping, Optional

import structlog

from sms_confirmable.core.config.settings import settings
from sms_confirmable.core.exceptions import AccountValidationError
from sms_confirmable.domain.entities.account import Account
from sms_confirmable.domain.events.phone_confirmation_events import (
    PhoneConfirmationFailedEvent,
    PhoneNumberChangePostponedEvent,
)
from sms_confirmable.domain.interfaces.repositories import IAccountRepository
from sms_confirmable.domain.interfaces.services import (
    IEventPublisher,
    INotifier,
    ITokenGenerator,
)
from sms_confirmable.domain.services.phone_confirmation.confirmation_policy import (
    Clock,
    ConfirmationPolicy,
    utc_now,
)
from sms_confirmable.domain.services.phone_confirmation.confirmation_state_machine import (
    ConfirmationStateMachine,
)
from sms_confirmable.domain.services.phone_confirmation.token_generator import (
    CONFIRMATION_PURPOSE,
    TokenGenerator,
)
from sms_confirmable.domain.value_objects.confirmation_config import ConfirmableConfig
from sms_confirmable.domain.value_objects.confirmation_options import (
    DEFAULT_OPTIONS,
    ConfirmationOptions,
)
from sms_confirmable.domain.value_objects.field_errors import ConfirmationErrorCode
from sms_confirmable.domain.value_objects.phone_number import PhoneNumber

logger = structlog.get_logger(__name__)

_PHONE_NUMBER_FIELDS = {"phone_number", "unconfirmed_phone_number"}


class PhoneConfirmationService:
    """Domain service for phone-number confirmation.

    One service instance serves one account type: it carries that type's
    `ConfirmableConfig` and is otherwise stateless, so it can be shared
    across requests. All per-account state lives on the machines it returns.
    """

    def __init__(
        self,
        repository: IAccountRepository,
        notifier: INotifier,
        config: Optional[ConfirmableConfig] = None,
        token_generator: Optional[ITokenGenerator] = None,
        event_publisher: Optional[IEventPublisher] = None,
        clock: Clock = utc_now,
    ):
        """Initialize the service with its collaborators.

        Args:
            repository: Account persistence.
            notifier: SMS delivery of confirmation codes.
            config: Account type configuration; read from settings if omitted.
            token_generator: Code generator; keyed with ``SECRET_KEY`` if omitted.
            event_publisher: Optional publisher for domain events.
            clock: Source of the current UTC time.
        """
        self.config = config or ConfirmableConfig.from_settings()
        self.policy = ConfirmationPolicy(self.config, clock)
        self._repository = repository
        self._notifier = notifier
        self._token_generator = token_generator or TokenGenerator(token_length=self.config.token_length)
        self._event_publisher = event_publisher

        logger.info(
            "PhoneConfirmationService initialized",
            reconfirmable=self.config.reconfirmable,
            confirm_within=str(self.config.confirm_within),
            confirmation_keys=list(self.config.confirmation_keys),
        )

    def machine_for(
        self, account: Account, language: str = settings.DEFAULT_LANGUAGE
    ) -> ConfirmationStateMachine:
        """Bind a fresh state machine to ``account``."""
        return ConfirmationStateMachine(
            account,
            policy=self.policy,
            token_generator=self._token_generator,
            repository=self._repository,
            notifier=self._notifier,
            event_publisher=self._event_publisher,
            language=language,
        )

    async def register_account(
        self,
        account: Account,
        options: ConfirmationOptions = DEFAULT_OPTIONS,
        language: str = settings.DEFAULT_LANGUAGE,
    ) -> ConfirmationStateMachine:
        """Store a new account and start its confirmation.

        Args:
            account: The unsaved account.
            options: ``skip_confirmation`` stores it already confirmed;
                ``skip_notification`` generates the code without sending it.
            language: Language of the SMS.

        Returns:
            The machine for the stored account, or for the unsaved account
            with validation errors when the repository refused it.
        """
        account.phone_number = PhoneNumber.normalize(account.phone_number)
        machine = self.machine_for(account, language)

        if options.skip_confirmation:
            machine.skip_confirmation()
        if self.policy.confirmation_required(account):
            machine.generate_confirmation_token()

        try:
            machine.account = await self._repository.add(account)
        except AccountValidationError as exc:
            machine.errors.extend(exc.errors)
            machine.raw_confirmation_token = None
            logger.info(
                "Account registration rejected",
                errors=[(error.field, error.code) for error in exc.errors],
            )
            return machine

        if self.policy.send_confirmation_notification(machine.account, options.skip_notification):
            await machine.send_confirmation_instructions()
        return machine

    async def change_phone_number(
        self,
        account: Account,
        new_phone_number: Optional[str],
        options: ConfirmationOptions = DEFAULT_OPTIONS,
        language: str = settings.DEFAULT_LANGUAGE,
    ) -> ConfirmationStateMachine:
        """Update an account's phone number.

        For reconfirmable account types the verified number stays in place
        and the new one waits in ``unconfirmed_phone_number`` for its own
        code, unless ``options.skip_reconfirmation`` is set. Other types
        apply the change immediately.

        Returns:
            The account's machine. When the repository refuses the update
            the account is restored and the errors are on the machine.
        """
        machine = self.machine_for(account, language)
        snapshot = machine.snapshot()

        previous_phone_number = account.phone_number
        account.phone_number = PhoneNumber.normalize(new_phone_number)
        phone_number_changed = account.phone_number != previous_phone_number
        if not phone_number_changed:
            return machine

        if self.policy.postpone_phone_number_change(
            account, phone_number_changed, bypass=options.skip_reconfirmation
        ):
            machine.postpone_phone_number_change(previous_phone_number)

        try:
            machine.account = await self._repository.save(account, validate=True)
        except AccountValidationError as exc:
            machine.restore(snapshot)
            machine.raw_confirmation_token = None
            machine.reconfirmation_required = False
            machine.errors.extend(exc.errors)
            logger.info(
                "Phone number change rejected",
                account_id=account.id,
                errors=[(error.field, error.code) for error in exc.errors],
            )
            return machine

        if machine.reconfirmation_required:
            logger.info(
                "Phone number change postponed until confirmation",
                account_id=account.id,
                phone_number=account.mask_phone_number(),
                unconfirmed_phone_number=account.mask_phone_number(account.unconfirmed_phone_number),
            )
            await self._publish(
                PhoneNumberChangePostponedEvent.create(
                    account_id=account.id,
                    phone_number=account.mask_phone_number(),
                    unconfirmed_phone_number=account.mask_phone_number(account.unconfirmed_phone_number),
                )
            )

        if self.policy.reconfirmation_required(machine.account, machine.reconfirmation_required):
            await machine.send_reconfirmation_instructions(skip_notification=options.skip_notification)
        return machine

    async def find_for_confirmation_instructions(
        self,
        attributes: Mapping[str, Any],
        language: str = settings.DEFAULT_LANGUAGE,
    ) -> ConfirmationStateMachine:
        """Find the account confirmation instructions should go to.

        Reconfirmable types are searched by the pending number first, so a
        user who changed their number can ask for the code to be resent to
        the new one.

        Returns:
            The machine of the account found, or a placeholder machine whose
            ``errors`` carry ``not_found`` (or ``blank``) on the lookup fields.
        """
        attributes = self._normalize_lookup(attributes)
        machine: Optional[ConfirmationStateMachine] = None

        if self.config.reconfirmable:
            unconfirmed_attributes = dict(attributes)
            unconfirmed_attributes["unconfirmed_phone_number"] = unconfirmed_attributes.pop("phone_number", None)
            machine = await self._find_or_initialize_with_errors(
                self.config.unconfirmed_confirmation_keys,
                unconfirmed_attributes,
                ConfirmationErrorCode.NOT_FOUND,
                language,
            )

        if machine is None or not machine.persisted:
            machine = await self._find_or_initialize_with_errors(
                self.config.confirmation_keys,
                attributes,
                ConfirmationErrorCode.NOT_FOUND,
                language,
            )
        return machine

    async def send_confirmation_instructions_for(
        self,
        attributes: Mapping[str, Any],
        language: str = settings.DEFAULT_LANGUAGE,
    ) -> ConfirmationStateMachine:
        """Find an account by its confirmation keys and resend its code."""
        machine = await self.find_for_confirmation_instructions(attributes, language)
        if machine.persisted:
            await machine.resend_confirmation_instructions()
        return machine

    async def confirm_by_token(
        self,
        raw_token: Optional[str],
        language: str = settings.DEFAULT_LANGUAGE,
    ) -> ConfirmationStateMachine:
        """Confirm the account holding ``raw_token``.

        Returns:
            The account's machine after ``confirm`` ran, or a placeholder
            machine with a ``blank`` or ``not_found`` error on
            ``confirmation_token``. Either way ``confirmation_token`` on the
            machine echoes the presented raw code.
        """
        digest = self._token_generator.digest(raw_token, CONFIRMATION_PURPOSE)

        if digest is None:
            machine = self.machine_for(Account(), language)
            machine.errors.add("confirmation_token", ConfirmationErrorCode.BLANK)
        else:
            account = await self._repository.get_by_confirmation_token(digest)
            if account is None:
                machine = self.machine_for(Account(), language)
                machine.errors.add("confirmation_token", ConfirmationErrorCode.NOT_FOUND)
                logger.warning(
                    "Phone confirmation attempted with unknown code",
                    token_prefix=raw_token[:3],
                )
                await self._publish(
                    PhoneConfirmationFailedEvent.create(
                        account_id=None,
                        failure_reason=ConfirmationErrorCode.NOT_FOUND.value,
                        token_prefix=raw_token[:3],
                    )
                )
            else:
                machine = self.machine_for(account, language)
                machine.confirmation_token = raw_token
                await machine.confirm()

        machine.confirmation_token = raw_token
        return machine

    async def _find_or_initialize_with_errors(
        self,
        required_attributes,
        attributes: Mapping[str, Any],
        error: ConfirmationErrorCode,
        language: str,
    ) -> ConfirmationStateMachine:
        conditions = {
            key: attributes[key]
            for key in required_attributes
            if attributes.get(key) not in (None, "")
        }

        if len(conditions) == len(required_attributes):
            account = await self._repository.find_by(**conditions)
            if account is not None:
                return self.machine_for(account, language)

        placeholder = Account(**{key: value for key, value in conditions.items() if key in Account.model_fields})
        machine = self.machine_for(placeholder, language)
        for key in required_attributes:
            machine.errors.add(key, ConfirmationErrorCode.BLANK if key not in conditions else error)
        return machine

    @staticmethod
    def _normalize_lookup(attributes: Mapping[str, Any]) -> Dict[str, Any]:
        normalized: Dict[str, Any] = {}
        for key, value in attributes.items():
            if isinstance(value, str):
                value = value.strip()
                if key in _PHONE_NUMBER_FIELDS:
                    value = PhoneNumber.normalize(value)
            normalized[str(key)] = value
        return normalized

    async def _publish(self, event) -> None:
        if self._event_publisher is None:
            return
        try:
            await self._event_publisher.publish(event)
        except Exception as e:
            logger.error(
                "Failed to publish phone confirmation event",
                event_type=type(event).__name__,
                error=str(e),
            )
