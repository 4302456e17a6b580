"""Account Repository implementation using SQLAlchemy.

This module provides the repository pattern implementation for the `Account`
entity, abstracting database access for the confirmation domain services.

Accounts handed out by this repository are detached from the session. Writes
go through an explicit ``UPDATE ... WHERE id = :id AND lock_version = :v``
so that a confirmation can never be applied on top of a version of the
account it did not read.
"""

from datetime import datetime, timezone
from typing import Any, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

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

logger = get_logger(__name__)

_UPDATABLE_FIELDS = (
    "phone_number",
    "unconfirmed_phone_number",
    "confirmation_token",
    "confirmation_sent_at",
    "confirmed_at",
)


class AccountRepository(IAccountRepository):
    """SQLAlchemy implementation of `IAccountRepository`.

    Responsibilities:
    - Account persistence (create, lookup, compare-and-swap update)
    - Domain validation before writes when requested
    - Mapping unique-index violations to field errors
    - Secure logging with masked phone numbers
    """

    def __init__(self, db_session: AsyncSession):
        """Initialize repository with database session.

        Args:
            db_session: SQLAlchemy async session for database operations
        """
        self.db_session = db_session
        logger.debug("AccountRepository initialized", repository_type="infrastructure")

    async def get_by_id(self, account_id: int) -> Optional[Account]:
        """Get account by ID.

        Raises:
            ValueError: If account_id is not a positive integer
        """
        if account_id <= 0:
            logger.warning("Invalid account ID provided", account_id=account_id)
            raise ValueError("Account ID must be a positive integer")

        return await self._first(select(Account).where(Account.id == account_id), "get_by_id")

    async def find_by(self, **attributes: Any) -> Optional[Account]:
        unknown = [name for name in attributes if name not in Account.model_fields]
        if unknown:
            raise ValueError(f"Unknown account attributes: {', '.join(unknown)}")

        conditions = [getattr(Account, name) == value for name, value in attributes.items()]
        return await self._first(select(Account).where(*conditions), "find_by")

    async def get_by_confirmation_token(self, token_digest: str) -> Optional[Account]:
        if not token_digest:
            return None
        statement = select(Account).where(Account.confirmation_token == token_digest)
        return await self._first(statement, "get_by_confirmation_token")

    async def add(self, account: Account) -> Account:
        errors = validate_account_format(account)
        if not errors and await self._phone_number_taken(account):
            errors.append(phone_number_taken_error())
        if errors:
            raise AccountValidationError(errors)

        account.lock_version = 0
        account.created_at = datetime.now(timezone.utc)
        self.db_session.add(account)
        try:
            await self.db_session.commit()
        except IntegrityError as e:
            await self.db_session.rollback()
            logger.info("Account insert violated a unique index", error=str(e.orig))
            raise AccountValidationError(self._errors_from_integrity_error(e)) from e
        except Exception as e:
            await self.db_session.rollback()
            logger.error(
                "Error storing account",
                error=str(e),
                error_type=type(e).__name__,
                operation="add",
            )
            raise

        await self.db_session.refresh(account)
        self.db_session.expunge(account)
        logger.info("Account stored", account_id=account.id, phone_number=account.mask_phone_number())
        return account

    async def save(self, account: Account, validate: bool = True) -> Account:
        if account.id is None:
            raise DatabaseError("Cannot update an account that was never stored")

        if validate:
            errors = validate_account_format(account)
            if not errors and await self._phone_number_taken(account):
                errors.append(phone_number_taken_error())
            if errors:
                raise AccountValidationError(errors)

        updated_at = datetime.now(timezone.utc)
        values = {name: getattr(account, name) for name in _UPDATABLE_FIELDS}
        values["lock_version"] = account.lock_version + 1
        values["updated_at"] = updated_at
        statement = (
            update(Account)
            .where(Account.id == account.id, Account.lock_version == account.lock_version)
            .values(**values)
        )

        try:
            result = await self.db_session.execute(statement)
        except IntegrityError as e:
            await self.db_session.rollback()
            logger.info("Account update violated a unique index", account_id=account.id, error=str(e.orig))
            raise AccountValidationError(self._errors_from_integrity_error(e)) from e
        except Exception as e:
            await self.db_session.rollback()
            logger.error(
                "Error updating account",
                account_id=account.id,
                error=str(e),
                error_type=type(e).__name__,
                operation="save",
            )
            raise

        if result.rowcount == 0:
            await self.db_session.rollback()
            logger.warning(
                "Stale account write rejected",
                account_id=account.id,
                expected_version=account.lock_version,
            )
            raise StaleAccountError(account.id, account.lock_version)

        await self.db_session.commit()
        account.lock_version += 1
        account.updated_at = updated_at
        logger.debug("Account updated", account_id=account.id, lock_version=account.lock_version)
        return account

    async def _first(self, statement, operation: str) -> Optional[Account]:
        try:
            result = await self.db_session.execute(statement)
            account = result.scalars().first()
        except Exception as e:
            logger.error(
                "Error retrieving account",
                error=str(e),
                error_type=type(e).__name__,
                operation=operation,
            )
            raise

        if account is not None:
            self.db_session.expunge(account)
        logger.debug("Account lookup completed", found=account is not None, operation=operation)
        return account

    async def _phone_number_taken(self, account: Account) -> bool:
        statement = select(Account.id).where(Account.phone_number == account.phone_number)
        if account.id is not None:
            statement = statement.where(Account.id != account.id)
        result = await self.db_session.execute(statement)
        return result.scalars().first() is not None

    @staticmethod
    def _errors_from_integrity_error(error: IntegrityError) -> List[FieldError]:
        detail = str(error.orig)
        if "confirmation_token" in detail:
            return [FieldError("confirmation_token", ConfirmationErrorCode.TAKEN)]
        return [phone_number_taken_error()]
