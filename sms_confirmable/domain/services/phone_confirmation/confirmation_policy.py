"""Confirmation policy.

Pure decisions over an account's confirmation fields and the account type's
configuration. Nothing here performs I/O or mutates the account; the clock is
injected so that expiry can be evaluated at any instant.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

from sms_confirmable.core.config.settings import settings
from sms_confirmable.domain.entities.account import Account
from sms_confirmable.domain.value_objects.confirmation_config import ConfirmableConfig
from sms_confirmable.utils.i18n import format_period

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps read back from some databases are naive; they are UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class ConfirmationPolicy:
    """Decides when confirmation is required, expired or must be re-sent."""

    def __init__(self, config: ConfirmableConfig, clock: Clock = utc_now):
        self.config = config
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    def confirmed(self, account: Account) -> bool:
        return account.confirmed_at is not None

    def confirmation_required(self, account: Account) -> bool:
        return not self.confirmed(account)

    def pending_reconfirmation(self, account: Account) -> bool:
        return self.config.reconfirmable and bool(account.unconfirmed_phone_number)

    def pending_any_confirmation(self, account: Account) -> bool:
        """Whether there is anything left to confirm on this account."""
        return not self.confirmed(account) or self.pending_reconfirmation(account)

    def confirmation_period_expired(self, account: Account) -> bool:
        """Whether the outstanding code is older than ``confirm_within``.

        An account that was never sent a code has nothing to expire, so a
        missing ``confirmation_sent_at`` is reported as not expired.
        """
        confirm_within = self.config.confirm_within
        sent_at = as_utc(account.confirmation_sent_at)
        if confirm_within is None or sent_at is None:
            return False
        return self.now() > sent_at + confirm_within

    def confirmation_period_valid(self, account: Account) -> bool:
        """Whether an unconfirmed account is still inside its grace period."""
        grace_period = self.config.allow_unconfirmed_access_for
        if grace_period is None:
            return True
        sent_at = as_utc(account.confirmation_sent_at)
        return sent_at is not None and sent_at >= self.now() - grace_period

    def active_for_authentication(self, account: Account) -> bool:
        return (
            not self.confirmation_required(account)
            or self.confirmed(account)
            or self.confirmation_period_valid(account)
        )

    def inactive_message(self, account: Account) -> Optional[str]:
        """Message key explaining why authentication is refused, if it is."""
        return None if self.confirmed(account) else "unconfirmed"

    def postpone_phone_number_change(
        self,
        account: Account,
        phone_number_changed: bool,
        bypass: bool = False,
    ) -> bool:
        """Whether a new ``phone_number`` must wait for reconfirmation."""
        return (
            self.config.reconfirmable
            and phone_number_changed
            and not bypass
            and bool(account.phone_number)
        )

    def reconfirmation_required(self, account: Account, requested: bool) -> bool:
        return self.config.reconfirmable and requested and bool(account.phone_number)

    def send_confirmation_notification(self, account: Account, skip: bool = False) -> bool:
        return self.confirmation_required(account) and not skip and bool(account.phone_number)

    def expiry_period(self, language: str = settings.DEFAULT_LANGUAGE) -> Optional[str]:
        """``confirm_within`` in words, for the expiry error message."""
        if self.config.confirm_within is None:
            return None
        return format_period(self.config.confirm_within, language)
