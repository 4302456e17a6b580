"""Export confirmation-related domain entities."""

from .account import Account

__all__ = ["Account"]
