"""
Statement Report Models (``statement_modules.reporting.models``).

Responsibility
--------------
Frozen dataclass value objects representing rendered statement outputs:
balance sheet and cash flow tables, their section totals and the
structural errors met while building them.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Consumed by
``StatementService`` and returned to callers.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields use ``Decimal`` (inside ``ColumnAmounts``) --
  NEVER ``float``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from statement_kernel.domain.amounts import ColumnAmounts
from statement_kernel.domain.rendering import DisplayRow


class StatementType(str, Enum):
    """Statements the engine renders."""

    BALANCE_SHEET = "balance_sheet"
    CASH_FLOW = "cash_flow"


@dataclass(frozen=True)
class ReportMetadata:
    """Metadata attached to every statement."""

    statement_type: StatementType
    entity_name: str
    currency: str
    generated_at: str  # ISO format timestamp from injected clock
    layout_name: str | None = None
    layout_checksum: str | None = None


@dataclass(frozen=True)
class StatementError:
    """A structural problem that emptied (part of) a statement."""

    code: str
    account_type: str | None
    message: str


@dataclass(frozen=True)
class CashPosition:
    """
    Caller-supplied cash figures for the bottom of the cash flow table.

    Any field left as None takes its default: ``cash_flow`` is the net
    income, ``beginning_cash`` is zero, ``actual_ending_cash`` is unknown.
    """

    beginning_cash: ColumnAmounts | None = None
    cash_flow: ColumnAmounts | None = None
    actual_ending_cash: ColumnAmounts | None = None


@dataclass(frozen=True)
class BalanceSheetReport:
    """
    Balance sheet table.

    ``total_assets == total_liabilities_and_capital`` per aggregatable
    column is reported as ``is_balanced``, never enforced.
    """

    metadata: ReportMetadata
    rows: tuple[DisplayRow, ...]

    total_cash: ColumnAmounts
    total_assets: ColumnAmounts
    total_liabilities: ColumnAmounts
    total_capital: ColumnAmounts
    total_liabilities_and_capital: ColumnAmounts
    is_balanced: bool

    result_count: int
    errors: tuple[StatementError, ...] = ()


@dataclass(frozen=True)
class CashFlowReport:
    """
    Cash flow table.

    NOI = income - expense
    NetOtherIncome = other_income - other_expense
    NetIncome = NOI + NetOtherIncome
    EndingCash = beginning_cash + cash_flow
    """

    metadata: ReportMetadata
    rows: tuple[DisplayRow, ...]

    total_operating_income: ColumnAmounts
    total_operating_expense: ColumnAmounts
    net_operating_income: ColumnAmounts
    total_other_income: ColumnAmounts
    total_other_expense: ColumnAmounts
    net_other_income: ColumnAmounts
    total_income: ColumnAmounts
    total_expense: ColumnAmounts
    net_income: ColumnAmounts

    cash_flow: ColumnAmounts
    beginning_cash: ColumnAmounts
    ending_cash: ColumnAmounts
    actual_ending_cash: ColumnAmounts | None
    cash_reconciles: bool | None

    result_count: int
    errors: tuple[StatementError, ...] = ()
