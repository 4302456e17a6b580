"""Confirmation token value object."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ConfirmationToken:
    """A freshly generated confirmation code and the digest stored for it.

    The raw value goes to the account holder exactly once (by SMS); only the
    digest is persisted.
    """

    raw: str
    digest: str

    def __repr__(self) -> str:
        return f"ConfirmationToken(raw='{self.raw[:3]}...', digest='{self.digest[:8]}...')"

    __str__ = __repr__
