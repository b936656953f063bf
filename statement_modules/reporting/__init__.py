"""
Statement reporting module.

Balance sheet and cash flow tables assembled from account forests.
"""

from statement_modules.reporting.config import ReportingConfig
from statement_modules.reporting.models import (
    BalanceSheetReport,
    CashFlowReport,
    CashPosition,
    ReportMetadata,
    StatementError,
    StatementType,
)
from statement_modules.reporting.service import StatementService
from statement_modules.reporting.statements import (
    build_balance_sheet,
    build_cash_flow,
    render_to_dict,
)

__all__ = [
    "StatementService",
    "ReportingConfig",
    "StatementType",
    "ReportMetadata",
    "StatementError",
    "CashPosition",
    "BalanceSheetReport",
    "CashFlowReport",
    "build_balance_sheet",
    "build_cash_flow",
    "render_to_dict",
]
