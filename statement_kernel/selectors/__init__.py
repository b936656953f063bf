"""Read-only selectors over the account record store."""

from statement_kernel.selectors.account_selector import AccountRecordSelector
from statement_kernel.selectors.base import BaseSelector

__all__ = [
    "BaseSelector",
    "AccountRecordSelector",
]
