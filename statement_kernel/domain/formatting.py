"""
Cell value resolution and formatting, dispatched on ``ColumnKind``.

Raw record fields are untyped.  Each column declares a kind; the formatter
registered for that kind decides both how the raw value is resolved and how
it is displayed, so the renderer never inspects a value's shape or a
column's key.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from statement_kernel.domain.amounts import coerce_amount
from statement_kernel.domain.columns import ColumnKind, ColumnSpec

Formatter = Callable[[Any, int], str]


def format_amount(value: Decimal, precision: int) -> str:
    """Grouped fixed-point text, e.g. ``-1,234.50``.  Not bound by context precision."""
    return f"{value:,.{precision}f}"


def _format_text(raw: Any, precision: int) -> str:
    return "" if raw is None else str(raw)


def _format_currency(raw: Any, precision: int) -> str:
    value = coerce_amount(raw)
    if value is None:
        return "" if raw is None else str(raw)
    return format_amount(value, precision)


def _format_number(raw: Any, precision: int) -> str:
    value = coerce_amount(raw)
    if value is None:
        return "" if raw is None else str(raw)
    return str(value)


def _format_date(raw: Any, precision: int) -> str:
    if isinstance(raw, datetime):
        return raw.date().isoformat()
    if isinstance(raw, date):
        return raw.isoformat()
    if isinstance(raw, str):
        try:
            return date.fromisoformat(raw[:10]).isoformat()
        except ValueError:
            return raw
    return "" if raw is None else str(raw)


FORMATTERS: dict[ColumnKind, Formatter] = {
    ColumnKind.TEXT: _format_text,
    ColumnKind.CURRENCY: _format_currency,
    ColumnKind.NUMBER: _format_number,
    ColumnKind.DATE: _format_date,
}

NUMERIC_KINDS = frozenset({ColumnKind.CURRENCY, ColumnKind.NUMBER})


def format_value(spec: ColumnSpec, raw: Any, precision: int = 2) -> str:
    """Display text for a raw value under ``spec``'s kind."""
    return FORMATTERS[spec.kind](raw, precision)


def resolve_amount(spec: ColumnSpec, raw: Any) -> Decimal | None:
    """Numeric value behind a cell, for numeric column kinds only."""
    if spec.kind not in NUMERIC_KINDS:
        return None
    return coerce_amount(raw)
