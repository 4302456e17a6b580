"""Phone-number confirmation settings.
"""

import logging
from datetime import timedelta
from typing import List, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class ConfirmationSettings(BaseSettings):
    """Defines how confirmable accounts behave.

    Durations are ISO 8601 durations (``P1D``, ``PT24H``). An empty value
    means "not configured".

    Attributes:
        PHONE_CONFIRMATION_ALLOW_UNCONFIRMED_ACCESS_FOR: Grace period during
            which an unconfirmed account may still authenticate.
        PHONE_CONFIRMATION_CONFIRM_WITHIN: Window after which a confirmation
            code is no longer accepted.
        PHONE_CONFIRMATION_RECONFIRMABLE: Whether phone-number changes must be
            confirmed before they take effect.
        PHONE_CONFIRMATION_KEYS: Fields used to look up an account when
            confirmation instructions are requested.
        PHONE_CONFIRMATION_TOKEN_LENGTH: Length of the raw code sent by SMS.
    """

    PHONE_CONFIRMATION_ALLOW_UNCONFIRMED_ACCESS_FOR: Optional[timedelta] = timedelta(0)
    PHONE_CONFIRMATION_CONFIRM_WITHIN: Optional[timedelta] = None
    PHONE_CONFIRMATION_RECONFIRMABLE: bool = True
    PHONE_CONFIRMATION_KEYS: Union[str, List[str]] = Field(default=["phone_number"])
    PHONE_CONFIRMATION_TOKEN_LENGTH: int = Field(default=20, ge=8, le=64)

    @field_validator(
        "PHONE_CONFIRMATION_ALLOW_UNCONFIRMED_ACCESS_FOR",
        "PHONE_CONFIRMATION_CONFIRM_WITHIN",
        mode="before",
    )
    @classmethod
    def empty_duration_is_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("PHONE_CONFIRMATION_KEYS", mode="before")
    @classmethod
    def assemble_confirmation_keys(cls, v: Union[str, List[str]]) -> List[str]:
        """Splits a comma-separated list of lookup fields."""
        if isinstance(v, str):
            v = [i.strip() for i in v.split(",") if i.strip()]
        if not v:
            logger.error("PHONE_CONFIRMATION_KEYS must name at least one field.")
            raise ValueError("PHONE_CONFIRMATION_KEYS must name at least one field.")
        return v
