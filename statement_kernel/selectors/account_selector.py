"""
Module: statement_kernel.selectors.account_selector
Responsibility: Read ledger account records in input order, optionally
    restricted to a set of account types.
Architecture position: Kernel > Selectors.

Failure modes:
    - InvalidAccountRecordError when a stored row carries an unknown
      account type (raised by LedgerAccount.to_record()).
    - Returns an empty list when no rows match.
"""

from sqlalchemy import select

from statement_kernel.domain.records import AccountRecord, AccountType
from statement_kernel.logging_config import get_logger
from statement_kernel.models.account import LedgerAccount
from statement_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.account")


class AccountRecordSelector(BaseSelector[LedgerAccount]):
    """Loads ``AccountRecord`` batches ordered by stored position."""

    def all_records(self) -> list[AccountRecord]:
        stmt = select(LedgerAccount).order_by(LedgerAccount.position, LedgerAccount.account_id)
        rows = self.session.execute(stmt).scalars().all()
        logger.debug("account_records_loaded", extra={"record_count": len(rows)})
        return [row.to_record() for row in rows]

    def records_of_type(self, *account_types: AccountType) -> list[AccountRecord]:
        """Records whose account type is one of ``account_types``."""
        if not account_types:
            return []
        values = [t.value for t in account_types]
        stmt = (
            select(LedgerAccount)
            .where(LedgerAccount.account_type.in_(values))
            .order_by(LedgerAccount.position, LedgerAccount.account_id)
        )
        rows = self.session.execute(stmt).scalars().all()
        logger.debug(
            "account_records_loaded",
            extra={"record_count": len(rows), "account_types": values},
        )
        return [row.to_record() for row in rows]

    def count(self) -> int:
        return len(self.session.execute(select(LedgerAccount.id)).all())
