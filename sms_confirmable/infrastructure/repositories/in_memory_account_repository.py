"""In-memory account repository.

Used for development, demos and tests. It behaves like the SQL repository
where it matters to the confirmation flow: stored rows are copies (each load
returns an independent `Account`), ``phone_number`` and
``confirmation_token`` are unique, and ``save`` is a compare-and-swap on
``lock_version``.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

import structlog

from sms_confirmable.core.exceptions import (
    AccountValidationError,
    DatabaseError,
    StaleAccountError,
)
from sms_confirmable.domain.entities.account import Account
from sms_confirmable.domain.interfaces.repositories import IAccountRepository
from sms_confirmable.domain.value_objects.field_errors import ConfirmationErrorCode, FieldError
from sms_confirmable.infrastructure.repositories.account_validation import (
    phone_number_taken_error,
    validate_account_format,
)

logger = structlog.get_logger(__name__)

_UNIQUE_FIELDS = ("phone_number", "confirmation_token")


class InMemoryAccountRepository(IAccountRepository):
    """Dictionary-backed implementation of `IAccountRepository`."""

    def __init__(self):
        self._rows: Dict[int, Dict[str, Any]] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

        logger.info("InMemoryAccountRepository initialized")

    async def get_by_id(self, account_id: int) -> Optional[Account]:
        row = self._rows.get(account_id)
        return Account(**row) if row is not None else None

    async def find_by(self, **attributes: Any) -> Optional[Account]:
        unknown = [name for name in attributes if name not in Account.model_fields]
        if unknown:
            raise ValueError(f"Unknown account attributes: {', '.join(unknown)}")

        for row in self._iter_rows():
            if all(row.get(name) == value for name, value in attributes.items()):
                return Account(**row)
        return None

    async def get_by_confirmation_token(self, token_digest: str) -> Optional[Account]:
        if not token_digest:
            return None
        return await self.find_by(confirmation_token=token_digest)

    async def add(self, account: Account) -> Account:
        async with self._lock:
            errors = validate_account_format(account)
            errors.extend(self._uniqueness_errors(account))
            if errors:
                raise AccountValidationError(errors)

            account.id = self._next_id
            self._next_id += 1
            account.lock_version = 0
            account.created_at = datetime.now(timezone.utc)
            self._rows[account.id] = account.model_dump()

        logger.debug("Account stored", account_id=account.id)
        return account

    async def save(self, account: Account, validate: bool = True) -> Account:
        async with self._lock:
            stored = self._rows.get(account.id) if account.id is not None else None
            if stored is None:
                raise DatabaseError(f"Account {account.id} does not exist")
            if stored["lock_version"] != account.lock_version:
                logger.warning(
                    "Stale account write rejected",
                    account_id=account.id,
                    expected_version=account.lock_version,
                    stored_version=stored["lock_version"],
                )
                raise StaleAccountError(account.id, account.lock_version)

            errors: List[FieldError] = validate_account_format(account) if validate else []
            errors.extend(self._uniqueness_errors(account))
            if errors:
                raise AccountValidationError(errors)

            account.lock_version += 1
            account.updated_at = datetime.now(timezone.utc)
            self._rows[account.id] = account.model_dump()

        logger.debug("Account updated", account_id=account.id, lock_version=account.lock_version)
        return account

    def __len__(self) -> int:
        return len(self._rows)

    def _iter_rows(self) -> Iterator[Dict[str, Any]]:
        return iter(list(self._rows.values()))

    def _uniqueness_errors(self, account: Account) -> List[FieldError]:
        errors: List[FieldError] = []
        for name in _UNIQUE_FIELDS:
            value = getattr(account, name)
            if value is None:
                continue
            clash = any(
                row_id != account.id and row.get(name) == value
                for row_id, row in self._rows.items()
            )
            if clash:
                errors.append(
                    phone_number_taken_error()
                    if name == "phone_number"
                    else FieldError(name, ConfirmationErrorCode.TAKEN)
                )
        return errors
