"""Per account type confirmation configuration."""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Sequence, Tuple

from sms_confirmable.core.config.settings import Settings, settings as default_settings


@dataclass(frozen=True, slots=True)
class ConfirmableConfig:
    """How one account type is confirmed. Fixed at startup, read-only after.

    Attributes:
        allow_unconfirmed_access_for: Grace period during which an
            unconfirmed account may still authenticate. ``None`` means
            unconfirmed accounts are never blocked.
        confirm_within: Window after which a code is rejected. ``None`` means
            codes never expire.
        reconfirmable: Whether a phone-number change must be confirmed before
            it replaces the verified number.
        confirmation_keys: Fields used to look up an account when
            confirmation instructions are requested.
        token_length: Length of the raw confirmation code.
    """

    allow_unconfirmed_access_for: Optional[timedelta] = timedelta(0)
    confirm_within: Optional[timedelta] = None
    reconfirmable: bool = True
    confirmation_keys: Tuple[str, ...] = ("phone_number",)
    token_length: int = 20

    def __post_init__(self):
        keys: Sequence[str] = self.confirmation_keys
        if isinstance(keys, str):
            keys = (keys,)
        if not keys:
            raise ValueError("confirmation_keys must name at least one field")
        object.__setattr__(self, "confirmation_keys", tuple(keys))
        if self.token_length < 8:
            raise ValueError("token_length must be at least 8")

    @property
    def unconfirmed_confirmation_keys(self) -> Tuple[str, ...]:
        """Lookup keys with ``phone_number`` swapped for ``unconfirmed_phone_number``."""
        return tuple(
            "unconfirmed_phone_number" if key == "phone_number" else key
            for key in self.confirmation_keys
        )

    @classmethod
    def from_settings(cls, settings: Settings = default_settings) -> "ConfirmableConfig":
        """Builds the configuration from the application settings."""
        return cls(
            allow_unconfirmed_access_for=settings.PHONE_CONFIRMATION_ALLOW_UNCONFIRMED_ACCESS_FOR,
            confirm_within=settings.PHONE_CONFIRMATION_CONFIRM_WITHIN,
            reconfirmable=settings.PHONE_CONFIRMATION_RECONFIRMABLE,
            confirmation_keys=tuple(settings.PHONE_CONFIRMATION_KEYS),
            token_length=settings.PHONE_CONFIRMATION_TOKEN_LENGTH,
        )
