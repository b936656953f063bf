"""
Statement Service (``statement_modules.reporting.service``).

Responsibility
--------------
Orchestrates statement generation -- balance sheet and cash flow -- by
bridging the account record selector and the shipped column layouts to the
pure assembly functions in ``statements.py``.  This is a **read-only**
service.

Architecture position
---------------------
**Modules layer** -- thin glue.  Constructor: ``session`` + ``clock`` +
``config``.  The session is optional; without one, records must be passed
in explicitly.

Invariants enforced
-------------------
* Read-only -- no mutations to the account record store.
* Every ``ColumnState`` handed out by ``open_table`` is fresh.
* Report metadata carries the injected clock's timestamp.

Failure modes
-------------
* Selector query failure  -> exception propagates.
* Layout without columns  -> empty statement carrying a
  ``MISSING_COLUMN_SCHEMA`` error.
* Unknown layout name  -> ``FileNotFoundError`` propagates.
* Record dict without id or with an unknown type  ->
  ``InvalidAccountRecordError`` propagates.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy.orm import Session

from statement_config.loader import load_statement_layout
from statement_config.schema import StatementLayout
from statement_kernel.domain.clock import Clock, SystemClock
from statement_kernel.domain.columns import ColumnState
from statement_kernel.domain.records import AccountRecord, AccountType
from statement_kernel.domain.tree import build_forests
from statement_kernel.exceptions import MissingColumnSchemaError
from statement_kernel.logging_config import LogContext, get_logger
from statement_kernel.selectors.account_selector import AccountRecordSelector
from statement_modules.reporting.config import ReportingConfig
from statement_modules.reporting.models import (
    BalanceSheetReport,
    CashFlowReport,
    CashPosition,
    ReportMetadata,
    StatementType,
)
from statement_modules.reporting.statements import (
    BALANCE_SHEET_TYPES,
    CASH_FLOW_TYPES,
    build_balance_sheet,
    build_cash_flow,
)

logger = get_logger("modules.reporting.service")

RecordInput = AccountRecord | Mapping[str, Any]


class StatementService:
    """
    Statement table generation service.

    Contract
    --------
    * Every statement method returns a typed report DTO.
    * All methods are read-only.

    Guarantees
    ----------
    * Assembly delegates to pure functions in ``statements.py``; no layout
      logic lives in this class.
    * Clock is injectable for deterministic testing.
    """

    def __init__(
        self,
        session: Session | None = None,
        clock: Clock | None = None,
        config: ReportingConfig | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or ReportingConfig.with_defaults()
        self._selector = AccountRecordSelector(session) if session is not None else None

        logger.info(
            "statement_service_initialized",
            extra={
                "entity_name": self._config.entity_name,
                "default_currency": self._config.default_currency,
                "has_session": session is not None,
            },
        )

    # =========================================================================
    # Internal helpers
    # =========================================================================

    @staticmethod
    def _resolve_layout(layout: StatementLayout | str) -> StatementLayout | None:
        if isinstance(layout, StatementLayout):
            return layout
        try:
            return load_statement_layout(layout)
        except MissingColumnSchemaError:
            logger.warning("missing_column_schema", extra={"layout": layout})
            return None

    def _load_records(
        self,
        records: Iterable[RecordInput] | None,
        account_types: tuple[AccountType, ...],
    ) -> list[AccountRecord]:
        """Explicit records win; otherwise read the store (empty without one)."""
        if records is None:
            if self._selector is None:
                return []
            return self._selector.records_of_type(*account_types)

        parsed = [
            r if isinstance(r, AccountRecord) else AccountRecord.from_dict(r)
            for r in records
        ]
        wanted = set(account_types)
        return [r for r in parsed if r.account_type in wanted]

    def _metadata(
        self,
        statement_type: StatementType,
        layout: StatementLayout | None,
    ) -> ReportMetadata:
        return ReportMetadata(
            statement_type=statement_type,
            entity_name=self._config.entity_name,
            currency=self._config.default_currency,
            generated_at=self._clock.now().isoformat(),
            layout_name=layout.name if layout is not None else None,
            layout_checksum=layout.checksum if layout is not None else None,
        )

    def _prepare(
        self,
        statement_type: StatementType,
        state: ColumnState | None,
        layout: StatementLayout | str | None,
    ) -> tuple[ColumnState | None, StatementLayout | None]:
        resolved = None
        if layout is not None or state is None:
            resolved = self._resolve_layout(layout or statement_type.value)
        if state is None and resolved is not None:
            try:
                state = ColumnState.from_schema(resolved.schema, resolved.name)
            except MissingColumnSchemaError:
                logger.warning("missing_column_schema", extra={"layout": resolved.name})
        return state, resolved

    # =========================================================================
    # Public API
    # =========================================================================

    def open_table(self, layout: StatementLayout | str) -> ColumnState:
        """
        Fresh column state for one table session.

        Raises:
            MissingColumnSchemaError: the layout declares no columns.
        """
        resolved = layout if isinstance(layout, StatementLayout) else load_statement_layout(layout)
        state = ColumnState.from_schema(resolved.schema, resolved.name)
        logger.debug(
            "table_opened",
            extra={"layout": resolved.name, "column_count": len(resolved.schema)},
        )
        return state

    def balance_sheet(
        self,
        records: Iterable[RecordInput] | None = None,
        state: ColumnState | None = None,
        layout: StatementLayout | str | None = None,
    ) -> BalanceSheetReport:
        """Generate the balance sheet table."""
        statement_type = StatementType.BALANCE_SHEET
        with LogContext.bind(statement_type=statement_type.value):
            state, resolved = self._prepare(statement_type, state, layout)
            batch = self._load_records(records, BALANCE_SHEET_TYPES)
            report = build_balance_sheet(
                build_forests(batch),
                state,
                self._metadata(statement_type, resolved),
                self._config,
            )
            logger.info(
                "statement_generated",
                extra={
                    "record_count": len(batch),
                    "row_count": len(report.rows),
                    "result_count": report.result_count,
                    "error_count": len(report.errors),
                    "is_balanced": report.is_balanced,
                },
            )
        return report

    def cash_flow(
        self,
        records: Iterable[RecordInput] | None = None,
        state: ColumnState | None = None,
        layout: StatementLayout | str | None = None,
        cash: CashPosition | None = None,
    ) -> CashFlowReport:
        """Generate the cash flow table."""
        statement_type = StatementType.CASH_FLOW
        with LogContext.bind(statement_type=statement_type.value):
            state, resolved = self._prepare(statement_type, state, layout)
            batch = self._load_records(records, CASH_FLOW_TYPES)
            report = build_cash_flow(
                build_forests(batch),
                state,
                self._metadata(statement_type, resolved),
                self._config,
                cash,
            )
            logger.info(
                "statement_generated",
                extra={
                    "record_count": len(batch),
                    "row_count": len(report.rows),
                    "result_count": report.result_count,
                    "error_count": len(report.errors),
                    "cash_reconciles": report.cash_reconciles,
                },
            )
        return report
