from __future__ import annotations

"""Re-export factory functions for generating fake test data."""

# flake8: noqa: F401 – re-export

from .account import create_fake_account, fake_phone_number

__all__ = [
    "create_fake_account",
    "fake_phone_number",
]
