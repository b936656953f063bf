"""
Module: statement_kernel.models.account
Responsibility: ORM persistence for ledger account records -- the flat input
    the statement tables are built from.
Architecture position: Kernel > Models.  May import from db/base.py and the
    pure domain record type it converts to.

Invariants enforced:
    - account_id is unique across the table (uq_ledger_account_id).
    - parent_account_id is a plain string reference, never a foreign key:
      a dangling parent is legal and makes the account a root.

Failure modes:
    - InvalidAccountRecordError from to_record() when account_type holds a
      value outside AccountType.
"""

from typing import Any

from sqlalchemy import JSON, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from statement_kernel.db.base import TimestampedBase
from statement_kernel.domain.records import AccountRecord, AccountType
from statement_kernel.exceptions import InvalidAccountRecordError


class LedgerAccount(TimestampedBase):
    """
    One stored ledger account.

    Contract:
        ``fields`` holds the column-key -> raw value mapping exactly as it
        arrived; interpretation happens against the column schema at render
        time.

    Non-goals:
        - No hierarchy validation here.  Duplicates across imports and
          cycles are detected when forests are built.
    """

    __tablename__ = "ledger_accounts"

    __table_args__ = (
        UniqueConstraint("account_id", name="uq_ledger_account_id"),
        Index("idx_ledger_account_type", "account_type"),
        Index("idx_ledger_account_position", "position"),
    )

    # External account identifier
    account_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    # Parent account reference (subAccountId), None for roots
    parent_account_id: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    account_type: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
    )

    # Input order; sibling order in the rendered tree follows it
    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    fields: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )

    def __repr__(self) -> str:
        return f"<LedgerAccount {self.account_id} ({self.account_type})>"

    def to_record(self) -> AccountRecord:
        """Convert to the immutable domain record."""
        try:
            account_type = AccountType(self.account_type)
        except ValueError:
            raise InvalidAccountRecordError(
                self.account_id, f"unknown account type {self.account_type!r}",
            ) from None
        return AccountRecord(
            account_id=self.account_id,
            parent_id=self.parent_account_id or None,
            account_type=account_type,
            fields=dict(self.fields or {}),
        )

    @classmethod
    def from_record(cls, record: AccountRecord, position: int = 0) -> "LedgerAccount":
        """Build an unsaved row from a domain record."""
        return cls(
            account_id=record.account_id,
            parent_account_id=record.parent_id,
            account_type=record.account_type.value,
            position=position,
            fields=dict(record.fields),
        )
