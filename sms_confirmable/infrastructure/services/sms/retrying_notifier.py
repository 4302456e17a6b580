"""Retry wrapper for notifiers.

Delivery is retried independently of token generation: the token is already
stored when the first attempt is made, so retrying only re-sends the same code.
Each attempt is bounded by ``SMS_DELIVERY_TIMEOUT_SECONDS``; an attempt that
runs out of time is a retryable ``delivery_timeout`` failure.
"""

import asyncio
from typing import Any, Mapping, Optional

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from sms_confirmable.core.config.settings import settings
from sms_confirmable.core.exceptions import DeliveryError
from sms_confirmable.domain.interfaces.services import INotifier

logger = structlog.get_logger(__name__)


def _is_retryable(error: BaseException) -> bool:
    return isinstance(error, DeliveryError) and error.retryable


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "SMS delivery attempt failed, retrying",
        attempt=retry_state.attempt_number,
        error=str(error),
    )


class RetryingNotifier(INotifier):
    """Retries retryable `DeliveryError` failures with exponential backoff.

    After the last attempt the final `DeliveryError` is re-raised unchanged.
    Non-retryable errors (e.g. an invalid recipient) are raised immediately.
    """

    def __init__(
        self,
        notifier: INotifier,
        max_attempts: Optional[int] = None,
        wait_seconds: Optional[float] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self._notifier = notifier
        self._max_attempts = max_attempts or settings.SMS_DELIVERY_MAX_ATTEMPTS
        self._wait_seconds = settings.SMS_DELIVERY_RETRY_WAIT_SECONDS if wait_seconds is None else wait_seconds
        self._timeout_seconds = timeout_seconds or settings.SMS_DELIVERY_TIMEOUT_SECONDS

    async def send(self, phone_number: str, code: str, context: Mapping[str, Any]) -> None:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=self._wait_seconds, max=self._wait_seconds * 8),
            retry=retry_if_exception(_is_retryable),
            before_sleep=_log_retry,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                await self._send_once(phone_number, code, context)

    async def _send_once(self, phone_number: str, code: str, context: Mapping[str, Any]) -> None:
        try:
            await asyncio.wait_for(
                self._notifier.send(phone_number, code, context),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise DeliveryError(
                f"SMS delivery timed out after {self._timeout_seconds}s",
                code="delivery_timeout",
                retryable=True,
            ) from exc
