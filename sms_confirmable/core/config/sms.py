"""SMS delivery settings.

The confirmation core does not talk to an SMS provider itself; these values
configure the notifiers shipped with the package (test-mode outbox and
delivery retries).
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class SmsSettings(BaseSettings):
    """SMS delivery configuration.

    Attributes:
        SMS_TEST_MODE: Log messages instead of handing them to a transport.
        SMS_SENDER_ID: Sender name or number shown to the recipient.
        SMS_DELIVERY_MAX_ATTEMPTS: Delivery attempts before giving up.
        SMS_DELIVERY_RETRY_WAIT_SECONDS: Base wait for exponential backoff.
        SMS_DELIVERY_TIMEOUT_SECONDS: Time allowed for a single delivery attempt.
    """

    SMS_TEST_MODE: bool = Field(
        default=False,
        description="Enable test mode (messages logged instead of sent)"
    )
    SMS_SENDER_ID: str = Field(
        default="SMSConfirm",
        max_length=11,
        description="Alphanumeric sender id or sending number"
    )
    SMS_DELIVERY_MAX_ATTEMPTS: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum delivery attempts per message"
    )
    SMS_DELIVERY_RETRY_WAIT_SECONDS: float = Field(
        default=0.5,
        ge=0,
        le=30,
        description="Base wait between delivery attempts (exponential backoff)"
    )
    SMS_DELIVERY_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Timeout for a single delivery attempt"
    )
