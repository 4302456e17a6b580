"""Repository implementations."""

from .account_repository import AccountRepository
from .in_memory_account_repository import InMemoryAccountRepository

__all__ = ["AccountRepository", "InMemoryAccountRepository"]
