"""
Row rendering -- forest + column state -> ordered display rows.

Pure functions.  ZERO I/O.  Same forest and same column state always yield
the same rows.

Policy (depth-first, pre-order), for each node at depth ``d``:

1. one ``detail`` row with a cell per visible column; the label cell is
   prefixed with ``d`` indent units and is bold when the node has children;
2. when the node has children, its children at ``d + 1``, then one
   ``subtotal`` row at ``d`` labelled ``"Total <label>"`` whose aggregatable
   cells sum the node's whole subtree (detail values only).

Cells are produced per visible column by the formatter registered for the
column's kind; width comes from the live column state.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from statement_kernel.domain.amounts import ZERO, ColumnAmounts, coerce_amount
from statement_kernel.domain.columns import (
    Align,
    ColumnSchema,
    ColumnSpec,
    ColumnState,
    ColumnStateSnapshot,
)
from statement_kernel.domain.formatting import format_value, resolve_amount
from statement_kernel.domain.tree import Forest, TreeNode
from statement_kernel.logging_config import get_logger

logger = get_logger("domain.rendering")

# Four non-breaking spaces per depth level
INDENT_UNIT = "\u00a0" * 4


class RowKind(str, Enum):
    """What a display row represents."""

    DETAIL = "detail"
    SUBTOTAL = "subtotal"
    HEADER = "header"
    TOTAL = "total"


@dataclass(frozen=True)
class DisplayCell:
    key: str
    text: str
    align: Align
    bold: bool
    width_px: int
    value: Decimal | None = None


@dataclass(frozen=True)
class DisplayRow:
    """
    One rendered table row.

    ``label`` is the unindented label text, kept even when the label
    column is hidden.
    """

    depth: int
    kind: RowKind
    cells: tuple[DisplayCell, ...]
    label: str = ""

    def cell(self, key: str) -> DisplayCell | None:
        for c in self.cells:
            if c.key == key:
                return c
        return None


# =========================================================================
# Aggregation
# =========================================================================


def subtree_amounts(forest: Forest, node: TreeNode, schema: ColumnSchema) -> ColumnAmounts:
    """
    Sum every aggregatable column over ``node`` and its descendants.

    Missing or non-numeric values contribute zero.
    """
    keys = schema.aggregatable_keys()
    totals = {k: ZERO for k in keys}
    for n in forest.subtree(node):
        for k in keys:
            totals[k] += coerce_amount(n.record.value(k)) or ZERO
    return ColumnAmounts(tuple((k, totals[k]) for k in keys))


def forest_amounts(forest: Forest, schema: ColumnSchema) -> ColumnAmounts:
    """Sum every aggregatable column over the whole forest."""
    total = ColumnAmounts.zero(schema.aggregatable_keys())
    for root in forest.root_nodes():
        total = total + subtree_amounts(forest, root, schema)
    return total


# =========================================================================
# Row construction
# =========================================================================


def _indent(depth: int, unit: str = INDENT_UNIT) -> str:
    return unit * depth


def _label_of(node: TreeNode, schema: ColumnSchema) -> str:
    spec = schema.get(schema.label_key) if schema.label_key else None
    if spec is None:
        return ""
    return format_value(spec, node.record.value(spec.key))


def _detail_row(
    node: TreeNode,
    depth: int,
    state: ColumnStateSnapshot,
    precision: int,
    indent_unit: str = INDENT_UNIT,
) -> DisplayRow:
    label_key = state.schema.label_key
    cells = []
    for spec in state.visible_columns():
        raw = node.record.value(spec.key)
        text = format_value(spec, raw, precision)
        bold = False
        if spec.key == label_key:
            text = _indent(depth, indent_unit) + text
            bold = node.has_children
        cells.append(
            DisplayCell(
                key=spec.key,
                text=text,
                align=spec.align,
                bold=bold,
                width_px=state.width_of(spec.key),
                value=resolve_amount(spec, raw),
            )
        )
    return DisplayRow(
        depth=depth,
        kind=RowKind.DETAIL,
        cells=tuple(cells),
        label=_label_of(node, state.schema),
    )


def _amount_cell(
    spec: ColumnSpec,
    amounts: ColumnAmounts | None,
    state: ColumnStateSnapshot,
    precision: int,
) -> DisplayCell:
    value = amounts.get(spec.key) if amounts is not None and spec.aggregatable else None
    return DisplayCell(
        key=spec.key,
        text=format_value(spec, value, precision) if value is not None else "",
        align=spec.align,
        bold=True,
        width_px=state.width_of(spec.key),
        value=value,
    )


def summary_row(
    label: str,
    depth: int,
    kind: RowKind,
    state: ColumnState | ColumnStateSnapshot,
    amounts: ColumnAmounts | None = None,
    precision: int = 2,
    indent_unit: str = INDENT_UNIT,
) -> DisplayRow:
    """
    A bold row carrying ``label`` in the label column.

    Aggregatable columns show ``amounts`` (empty when None); every other
    non-label column is empty.  Used for subtotal, header and total rows.
    """
    snap = state.snapshot() if isinstance(state, ColumnState) else state
    label_key = snap.schema.label_key
    cells = []
    for spec in snap.visible_columns():
        if spec.key == label_key:
            cells.append(
                DisplayCell(
                    key=spec.key,
                    text=_indent(depth, indent_unit) + label,
                    align=spec.align,
                    bold=True,
                    width_px=snap.width_of(spec.key),
                )
            )
        else:
            cells.append(_amount_cell(spec, amounts, snap, precision))
    return DisplayRow(depth=depth, kind=kind, cells=tuple(cells), label=label)


def _render_node(
    forest: Forest,
    node: TreeNode,
    depth: int,
    state: ColumnStateSnapshot,
    precision: int,
    indent_unit: str,
    out: list[DisplayRow],
) -> None:
    out.append(_detail_row(node, depth, state, precision, indent_unit))
    if not node.has_children:
        return
    for child in forest.children_of(node):
        _render_node(forest, child, depth + 1, state, precision, indent_unit, out)
    out.append(
        summary_row(
            f"Total {_label_of(node, state.schema)}",
            depth,
            RowKind.SUBTOTAL,
            state,
            subtree_amounts(forest, node, state.schema),
            precision,
            indent_unit,
        )
    )


def render_forest(
    forest: Forest,
    column_state: ColumnState | ColumnStateSnapshot | None,
    start_depth: int = 0,
    total_label: str | None = None,
    precision: int = 2,
    indent_unit: str = INDENT_UNIT,
) -> list[DisplayRow]:
    """
    Render a forest to an ordered list of display rows.

    ``total_label``, when given, appends a ``total`` row summing the whole
    forest.  A missing column state (no schema) renders an empty table.
    """
    if column_state is None:
        logger.warning(
            "missing_column_schema",
            extra={"account_type": forest.account_type.value if forest.account_type else None},
        )
        return []

    state = column_state.snapshot() if isinstance(column_state, ColumnState) else column_state

    rows: list[DisplayRow] = []
    for root in forest.root_nodes():
        _render_node(forest, root, start_depth, state, precision, indent_unit, rows)

    if total_label is not None:
        rows.append(
            summary_row(
                total_label,
                start_depth,
                RowKind.TOTAL,
                state,
                forest_amounts(forest, state.schema),
                precision,
                indent_unit,
            )
        )
    return rows
