"""
Per-column monetary amounts.

Subtotals, section totals and statement formulas all operate on one
``Decimal`` per aggregatable column.  ``ColumnAmounts`` carries that vector
and supports the arithmetic the statement formulas need.

All amounts are ``Decimal`` -- NEVER ``float``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")


def coerce_amount(raw: Any) -> Decimal | None:
    """
    Resolve a raw field value to a Decimal, or None when it is not numeric.

    Accepts int, Decimal, float (via its string form) and numeric strings
    (thousands separators allowed).  bool is not numeric.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        return raw if raw.is_finite() else None
    if isinstance(raw, int):
        return Decimal(raw)
    if isinstance(raw, float):
        raw = repr(raw)
    if isinstance(raw, str):
        text = raw.strip().replace(",", "")
        if not text:
            return None
        try:
            value = Decimal(text)
        except InvalidOperation:
            return None
        return value if value.is_finite() else None
    return None


@dataclass(frozen=True)
class ColumnAmounts:
    """Immutable column-key -> Decimal vector, in column order."""

    amounts: tuple[tuple[str, Decimal], ...] = ()

    @classmethod
    def zero(cls, keys: Iterable[str]) -> ColumnAmounts:
        return cls(tuple((k, ZERO) for k in keys))

    @classmethod
    def from_mapping(cls, keys: Iterable[str], values: Mapping[str, Any]) -> ColumnAmounts:
        """Vector over ``keys``; missing or non-numeric values read as zero."""
        return cls(tuple((k, coerce_amount(values.get(k)) or ZERO) for k in keys))

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(k for k, _ in self.amounts)

    def get(self, key: str) -> Decimal:
        for k, v in self.amounts:
            if k == key:
                return v
        return ZERO

    def as_dict(self) -> dict[str, Decimal]:
        return dict(self.amounts)

    def _combine(self, other: ColumnAmounts, sign: int) -> ColumnAmounts:
        keys = list(self.keys)
        keys.extend(k for k in other.keys if k not in keys)
        return ColumnAmounts(
            tuple((k, self.get(k) + sign * other.get(k)) for k in keys)
        )

    def __add__(self, other: ColumnAmounts) -> ColumnAmounts:
        return self._combine(other, 1)

    def __sub__(self, other: ColumnAmounts) -> ColumnAmounts:
        return self._combine(other, -1)
