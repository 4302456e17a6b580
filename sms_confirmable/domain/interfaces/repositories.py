"""Repository interfaces for abstracting data persistence in the domain layer.

This module defines the abstract base classes (interfaces) for repositories,
which act as a "port" in the context of Hexagonal Architecture. The domain
layer uses these interfaces to load and store accounts without being coupled
to a specific storage technology.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from sms_confirmable.domain.entities.account import Account


class IAccountRepository(ABC):
    """An interface defining the contract for account persistence operations.

    Implementations must:
    - enforce storage-level uniqueness of ``phone_number`` and
      ``confirmation_token`` on every write;
    - treat ``save`` as a compare-and-swap on ``lock_version`` so that two
      writers holding the same loaded version cannot both succeed.
    """

    @abstractmethod
    async def get_by_id(self, account_id: int) -> Optional[Account]:
        """Retrieves an account by its unique identifier.

        Args:
            account_id: The unique integer ID of the account.

        Returns:
            An optional `Account` entity. Returns `None` if none is found.
        """
        raise NotImplementedError

    @abstractmethod
    async def find_by(self, **attributes: Any) -> Optional[Account]:
        """Retrieves the first account matching every given attribute.

        Args:
            **attributes: Account field names and the values they must equal,
                e.g. ``phone_number="+15550100"``.

        Returns:
            An optional `Account` entity.

        Raises:
            ValueError: If an attribute is not an account field.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_by_confirmation_token(self, token_digest: str) -> Optional[Account]:
        """Retrieves the account whose outstanding confirmation digest matches.

        Args:
            token_digest: The stored digest, never the raw code.
        """
        raise NotImplementedError

    @abstractmethod
    async def add(self, account: Account) -> Account:
        """Persists a new account, validating it first.

        Returns:
            The stored account with its ID and ``lock_version`` assigned.

        Raises:
            AccountValidationError: If the account is invalid or violates a
                uniqueness constraint.
        """
        raise NotImplementedError

    @abstractmethod
    async def save(self, account: Account, validate: bool = True) -> Account:
        """Updates an existing account.

        Args:
            account: The account as modified by the caller. Its
                ``lock_version`` must be the version that was loaded.
            validate: When ``True``, domain rules (phone-number format and
                phone number not in use by another account) are checked
                before writing. Storage-level uniqueness is enforced either way.

        Returns:
            The stored account with ``lock_version`` incremented.

        Raises:
            AccountValidationError: If validation or a uniqueness constraint fails.
            StaleAccountError: If the stored version differs from the loaded one.
            DatabaseError: If the account was never stored.
        """
        raise NotImplementedError
