"""
Pure statement assembly functions.

These functions lay out the account forests of a ``ForestSet`` as the rows
of a balance sheet or cash flow table, with section headers, per-section
totals and the statement formulas.  ZERO I/O. ZERO side effects.

All monetary values are Decimal (per column, as ``ColumnAmounts``).

Functions in this module follow the statement_kernel/domain/ purity
convention:
- No database access
- No clock access
- No file I/O
- Deterministic: same inputs always produce same outputs
- The ``ColumnState`` passed in is read once (snapshot) and never mutated
"""

from __future__ import annotations

import dataclasses
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from statement_kernel.domain.amounts import ColumnAmounts
from statement_kernel.domain.columns import ColumnState, ColumnStateSnapshot
from statement_kernel.domain.records import AccountType
from statement_kernel.domain.rendering import (
    DisplayRow,
    RowKind,
    forest_amounts,
    render_forest,
    summary_row,
)
from statement_kernel.domain.tree import ForestSet
from statement_kernel.exceptions import MissingColumnSchemaError
from statement_kernel.logging_config import get_logger
from statement_modules.reporting.config import ReportingConfig
from statement_modules.reporting.models import (
    BalanceSheetReport,
    CashFlowReport,
    CashPosition,
    ReportMetadata,
    StatementError,
)

logger = get_logger("modules.reporting.statements")

BALANCE_SHEET_TYPES = (
    AccountType.CASH,
    AccountType.ASSET,
    AccountType.LIABILITY,
    AccountType.CAPITAL,
)

CASH_FLOW_TYPES = (
    AccountType.INCOME,
    AccountType.EXPENSE,
    AccountType.OTHER_INCOME,
    AccountType.OTHER_EXPENSE,
)


# =========================================================================
# Helpers
# =========================================================================


def bucket_errors(forests: ForestSet, *account_types: AccountType) -> tuple[StatementError, ...]:
    """Statement errors for the failed buckets among ``account_types``."""
    return tuple(
        StatementError(
            code=failure.error.code,
            account_type=failure.account_type.value,
            message=str(failure.error),
        )
        for failure in forests.failures_for(*account_types)
    )


def _missing_schema_error(statement: str) -> StatementError:
    exc = MissingColumnSchemaError(statement)
    return StatementError(code=exc.code, account_type=None, message=str(exc))


def _snapshot(state: ColumnState | ColumnStateSnapshot | None) -> ColumnStateSnapshot | None:
    if isinstance(state, ColumnState):
        return state.snapshot()
    return state


def _is_balanced(left: ColumnAmounts, right: ColumnAmounts, keys: tuple[str, ...]) -> bool:
    return all(left.get(k) == right.get(k) for k in keys)


class _TableWriter:
    """Appends header, section and total rows against one column snapshot."""

    def __init__(
        self,
        forests: ForestSet,
        state: ColumnStateSnapshot,
        config: ReportingConfig,
    ):
        self.forests = forests
        self.state = state
        self.config = config
        self.keys = state.schema.aggregatable_keys()
        self.rows: list[DisplayRow] = []

    def header(self, label: str, depth: int) -> None:
        self.rows.append(
            summary_row(
                label, depth, RowKind.HEADER, self.state,
                None, self.config.display_precision, self.config.indent_unit,
            )
        )

    def total(self, label: str, depth: int, amounts: ColumnAmounts | None) -> None:
        self.rows.append(
            summary_row(
                label, depth, RowKind.TOTAL, self.state,
                amounts, self.config.display_precision, self.config.indent_unit,
            )
        )

    def section(self, account_type: AccountType, depth: int) -> ColumnAmounts:
        """Render one bucket's forest at ``depth`` and return its total."""
        forest = self.forests.forest(account_type)
        self.rows.extend(
            render_forest(
                forest,
                self.state,
                start_depth=depth,
                precision=self.config.display_precision,
                indent_unit=self.config.indent_unit,
            )
        )
        return forest_amounts(forest, self.state.schema)

    @property
    def result_count(self) -> int:
        return sum(1 for r in self.rows if r.kind == RowKind.DETAIL)


# =========================================================================
# 1. BALANCE SHEET
# =========================================================================


def build_balance_sheet(
    forests: ForestSet,
    state: ColumnState | ColumnStateSnapshot | None,
    metadata: ReportMetadata,
    config: ReportingConfig,
) -> BalanceSheetReport:
    """
    Build the balance sheet table.

    Layout (headers and totals at depth 0, accounts from depth 1):

        ASSETS
        Cash
            <cash accounts>
        Total Cash
            <asset accounts>
        Total ASSETS                    = cash + asset
        LIABILITIES & CAPITAL
        Liabilities
            <liability accounts>
        Total Liabilities
        Capital
            <capital accounts>
        Total Capital
        Total LIABILITIES & CAPITAL     = liability + capital
    """
    errors = bucket_errors(forests, *BALANCE_SHEET_TYPES)
    snap = _snapshot(state)

    if snap is None:
        logger.warning(
            "missing_column_schema",
            extra={"statement_type": metadata.statement_type.value},
        )
        empty = ColumnAmounts()
        return BalanceSheetReport(
            metadata=metadata,
            rows=(),
            total_cash=empty,
            total_assets=empty,
            total_liabilities=empty,
            total_capital=empty,
            total_liabilities_and_capital=empty,
            is_balanced=True,
            result_count=0,
            errors=errors + (_missing_schema_error(metadata.statement_type.value),),
        )

    table = _TableWriter(forests, snap, config)

    table.header("ASSETS", 0)
    table.header("Cash", 0)
    total_cash = table.section(AccountType.CASH, 1)
    table.total("Total Cash", 0, total_cash)
    total_asset_accounts = table.section(AccountType.ASSET, 1)
    total_assets = total_cash + total_asset_accounts
    table.total("Total ASSETS", 0, total_assets)

    table.header("LIABILITIES & CAPITAL", 0)
    table.header("Liabilities", 0)
    total_liabilities = table.section(AccountType.LIABILITY, 1)
    table.total("Total Liabilities", 0, total_liabilities)
    table.header("Capital", 0)
    total_capital = table.section(AccountType.CAPITAL, 1)
    table.total("Total Capital", 0, total_capital)
    total_l_and_c = total_liabilities + total_capital
    table.total("Total LIABILITIES & CAPITAL", 0, total_l_and_c)

    is_balanced = _is_balanced(total_assets, total_l_and_c, table.keys)
    if not is_balanced:
        logger.warning(
            "balance_sheet_unbalanced",
            extra={
                "total_assets": total_assets.as_dict(),
                "total_liabilities_and_capital": total_l_and_c.as_dict(),
            },
        )

    return BalanceSheetReport(
        metadata=metadata,
        rows=tuple(table.rows),
        total_cash=total_cash,
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        total_capital=total_capital,
        total_liabilities_and_capital=total_l_and_c,
        is_balanced=is_balanced,
        result_count=table.result_count,
        errors=errors,
    )


# =========================================================================
# 2. CASH FLOW
# =========================================================================


def build_cash_flow(
    forests: ForestSet,
    state: ColumnState | ColumnStateSnapshot | None,
    metadata: ReportMetadata,
    config: ReportingConfig,
    cash: CashPosition | None = None,
) -> CashFlowReport:
    """
    Build the cash flow table.

    Layout (label depth in parentheses):

        Operating Income & Expense (0)
            Income (1) / <income accounts> (2) / Total Operating Income (1)
            Expense (1) / <expense accounts> (2) / Total Operating Expense (1)
            NOI - Net Operating Income (1)          = income - expense
            Other Income & Expense (1)
                Other Income (2) / <accounts> (3) / Total Other Income (2)
                Other Expense (2) / <accounts> (3) / Total Other Expense (2)
                Net Other Income (2)                = other income - other expense
                Total Income (2)                    = income + other income
                Total Expense (2)                   = expense + other expense
                Net Income (2)                      = NOI + net other income
        Cash Flow (0)
        Beginning Cash (0)
        Beginning Cash + Cash Flow (0)
        Actual Ending Cash (0)
    """
    cash = cash or CashPosition()
    errors = bucket_errors(forests, *CASH_FLOW_TYPES)
    snap = _snapshot(state)

    if snap is None:
        logger.warning(
            "missing_column_schema",
            extra={"statement_type": metadata.statement_type.value},
        )
        empty = ColumnAmounts()
        return CashFlowReport(
            metadata=metadata,
            rows=(),
            total_operating_income=empty,
            total_operating_expense=empty,
            net_operating_income=empty,
            total_other_income=empty,
            total_other_expense=empty,
            net_other_income=empty,
            total_income=empty,
            total_expense=empty,
            net_income=empty,
            cash_flow=cash.cash_flow or empty,
            beginning_cash=cash.beginning_cash or empty,
            ending_cash=(cash.beginning_cash or empty) + (cash.cash_flow or empty),
            actual_ending_cash=cash.actual_ending_cash,
            cash_reconciles=None,
            result_count=0,
            errors=errors + (_missing_schema_error(metadata.statement_type.value),),
        )

    table = _TableWriter(forests, snap, config)

    table.header("Operating Income & Expense", 0)
    table.header("Income", 1)
    income = table.section(AccountType.INCOME, 2)
    table.total("Total Operating Income", 1, income)
    table.header("Expense", 1)
    expense = table.section(AccountType.EXPENSE, 2)
    table.total("Total Operating Expense", 1, expense)
    noi = income - expense
    table.total("NOI - Net Operating Income", 1, noi)

    table.header("Other Income & Expense", 1)
    table.header("Other Income", 2)
    other_income = table.section(AccountType.OTHER_INCOME, 3)
    table.total("Total Other Income", 2, other_income)
    table.header("Other Expense", 2)
    other_expense = table.section(AccountType.OTHER_EXPENSE, 3)
    table.total("Total Other Expense", 2, other_expense)
    net_other_income = other_income - other_expense
    table.total("Net Other Income", 2, net_other_income)

    total_income = income + other_income
    total_expense = expense + other_expense
    net_income = noi + net_other_income
    table.total("Total Income", 2, total_income)
    table.total("Total Expense", 2, total_expense)
    table.total("Net Income", 2, net_income)

    cash_flow = cash.cash_flow if cash.cash_flow is not None else net_income
    beginning_cash = (
        cash.beginning_cash if cash.beginning_cash is not None
        else ColumnAmounts.zero(table.keys)
    )
    ending_cash = beginning_cash + cash_flow
    actual = cash.actual_ending_cash
    table.total("Cash Flow", 0, cash_flow)
    table.total("Beginning Cash", 0, beginning_cash)
    table.total("Beginning Cash + Cash Flow", 0, ending_cash)
    table.total("Actual Ending Cash", 0, actual)

    cash_reconciles = None
    if actual is not None:
        cash_reconciles = _is_balanced(actual, ending_cash, table.keys)
        if not cash_reconciles:
            logger.warning(
                "cash_flow_unreconciled",
                extra={
                    "ending_cash": ending_cash.as_dict(),
                    "actual_ending_cash": actual.as_dict(),
                },
            )

    return CashFlowReport(
        metadata=metadata,
        rows=tuple(table.rows),
        total_operating_income=income,
        total_operating_expense=expense,
        net_operating_income=noi,
        total_other_income=other_income,
        total_other_expense=other_expense,
        net_other_income=net_other_income,
        total_income=total_income,
        total_expense=total_expense,
        net_income=net_income,
        cash_flow=cash_flow,
        beginning_cash=beginning_cash,
        ending_cash=ending_cash,
        actual_ending_cash=actual,
        cash_reconciles=cash_reconciles,
        result_count=table.result_count,
        errors=errors,
    )


# =========================================================================
# 3. SERIALIZATION
# =========================================================================


def render_to_dict(obj: object) -> dict | list | str | int | float | bool | None:
    """
    Convert any report dataclass to a plain dict for JSON serialization.

    Handles:
    - Decimal -> str (preserving precision)
    - ColumnAmounts -> {column key: str}
    - UUID -> str
    - date -> ISO format string
    - Enum -> .value
    - Nested frozen dataclasses -> nested dicts
    - Tuples -> lists
    - None preserved
    """
    if obj is None:
        return None
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, ColumnAmounts):
        return {k: str(v) for k, v in obj.amounts}
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): render_to_dict(v) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: render_to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)
