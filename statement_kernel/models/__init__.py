"""ORM models for the statement kernel."""

from statement_kernel.models.account import LedgerAccount

__all__ = [
    "LedgerAccount",
]
