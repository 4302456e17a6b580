"""Test-mode SMS notifier.

Instead of handing messages to a transport, this notifier renders the SMS
body, logs a masked summary and keeps the message in an in-memory outbox.
It is what development and test environments use (``SMS_TEST_MODE``), and
it is the reference for how a transport-backed notifier renders messages.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

import structlog

from sms_confirmable.core.config.settings import settings
from sms_confirmable.core.exceptions import DeliveryError
from sms_confirmable.domain.interfaces.services import INotifier
from sms_confirmable.domain.value_objects.phone_number import PhoneNumber
from sms_confirmable.utils.i18n import get_translated_message

logger = structlog.get_logger(__name__)

MAX_SMS_LENGTH = 1600


@dataclass(frozen=True)
class OutboxMessage:
    phone_number: str
    body: str
    code: str
    context: Dict[str, Any]
    sent_at: datetime


def render_confirmation_sms(code: str, context: Mapping[str, Any]) -> str:
    """Render the SMS body for a confirmation code in the context's language."""
    language = context.get("language") or settings.DEFAULT_LANGUAGE
    key = "sms_reconfirmation_code" if context.get("purpose") == "reconfirmation" else "sms_confirmation_code"
    body = get_translated_message(key, language, code=code)
    if len(body) > MAX_SMS_LENGTH:
        body = body[:MAX_SMS_LENGTH - 3] + "..."
    return body


class LoggingSmsNotifier(INotifier):
    """Notifier that records messages instead of sending them."""

    def __init__(self, sender_id: Optional[str] = None):
        self.sender_id = sender_id or settings.SMS_SENDER_ID
        self.outbox: List[OutboxMessage] = []

        logger.info("LoggingSmsNotifier initialized", sender_id=self.sender_id)

    async def send(self, phone_number: str, code: str, context: Mapping[str, Any]) -> None:
        if not PhoneNumber.is_valid(phone_number):
            logger.warning("Invalid phone number format for SMS", recipient_suffix=phone_number[-4:] if phone_number else None)
            raise DeliveryError(
                "Cannot deliver SMS to an invalid phone number", code="invalid_recipient", retryable=False
            )

        body = render_confirmation_sms(code, context)
        message = OutboxMessage(
            phone_number=phone_number,
            body=body,
            code=code,
            context=dict(context),
            sent_at=datetime.now(timezone.utc),
        )
        self.outbox.append(message)

        logger.info(
            "SMS recorded (test mode)",
            sender_id=self.sender_id,
            phone_number=PhoneNumber(phone_number).mask_for_logging(),
            purpose=context.get("purpose"),
            account_id=context.get("account_id"),
            length=len(body),
        )

    def last_message_to(self, phone_number: str) -> Optional[OutboxMessage]:
        for message in reversed(self.outbox):
            if message.phone_number == phone_number:
                return message
        return None

    def clear(self) -> None:
        self.outbox.clear()
