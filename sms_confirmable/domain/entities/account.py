from datetime import datetime  # For timestamp fields
from typing import Optional  # For optional fields

from sqlalchemy import DateTime, Integer, String, text  # For explicit column types
from sqlmodel import Column, Field, SQLModel  # For ORM and table definition


class Account(SQLModel, table=True):
    """Represents the confirmable part of an account and acts as an Aggregate Root.

    Only the identity fields needed to prove control of a phone number are
    modelled here. The rest of the account schema belongs to the host
    application.

    Attributes:
        id: The unique identifier for the account (primary key).
        phone_number: The verified contact number in E.164 format.
        unconfirmed_phone_number: A new number waiting for reconfirmation.
            Only used by reconfirmable account types.
        confirmation_token: HMAC digest of the outstanding confirmation code.
            The raw code is never stored.
        confirmation_sent_at: When the outstanding code was issued.
        confirmed_at: When the account was last confirmed. ``None`` means the
            account was never confirmed.
        lock_version: Optimistic concurrency version, bumped on every save.
        created_at: The timestamp of when the account was created.
        updated_at: The timestamp of the last update to the account.
    """

    __tablename__ = "accounts"

    id: Optional[int] = Field(
        default=None,  # Auto-incremented by database
        primary_key=True,
        description="The unique identifier for the account.",
    )
    phone_number: Optional[str] = Field(
        default=None,
        sa_column=Column(String(16), unique=True, index=True, nullable=True),
        description="Primary verified phone number in E.164 format.",
    )
    unconfirmed_phone_number: Optional[str] = Field(
        default=None,
        sa_column=Column(String(16), index=True, nullable=True),
        description="Phone number awaiting reconfirmation.",
    )
    confirmation_token: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), unique=True, index=True, nullable=True),  # 32 bytes hex encoded
        description="Digest of the outstanding confirmation code.",
    )
    confirmation_sent_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
        description="When the outstanding confirmation code was issued.",
    )
    confirmed_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
        description="When the account was last confirmed.",
    )
    lock_version: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, server_default=text("0")),
        description="Optimistic concurrency version.",
    )
    created_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True),
            server_default=text("CURRENT_TIMESTAMP"),  # Database timestamp
            nullable=False,
        ),
        description="The timestamp of when the account was created.",
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
        description="The timestamp of the last update to the account.",
    )

    __table_args__ = ({"extend_existing": True},)

    @property
    def persisted(self) -> bool:
        """Whether the account has been stored by a repository."""
        return self.id is not None

    def mask_phone_number(self, value: Optional[str] = None) -> Optional[str]:
        """Returns a phone number safe for logging, keeping the last four digits."""
        number = self.phone_number if value is None else value
        if not number:
            return None
        return f"{'*' * max(len(number) - 4, 0)}{number[-4:]}"
