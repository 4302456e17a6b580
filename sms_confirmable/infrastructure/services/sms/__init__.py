"""SMS notifier implementations."""

from .logging_notifier import LoggingSmsNotifier, OutboxMessage, render_confirmation_sms
from .retrying_notifier import RetryingNotifier

__all__ = ["LoggingSmsNotifier", "OutboxMessage", "RetryingNotifier", "render_confirmation_sms"]
