"""
Tests for row rendering (statement_kernel/domain/rendering.py).

Covers:
- Pre-order detail rows with subtotal rows after each parent's children
- Indentation and bold labels
- Subtree aggregation (missing and non-numeric values count as zero)
- Column visibility and widths honored per cell
- Missing column state renders nothing
"""

from decimal import Decimal

from statement_kernel.domain.columns import (
    Align,
    ColumnKind,
    ColumnSchema,
    ColumnSpec,
    ColumnState,
)
from statement_kernel.domain.records import AccountRecord, AccountType
from statement_kernel.domain.rendering import (
    INDENT_UNIT,
    RowKind,
    forest_amounts,
    render_forest,
    subtree_amounts,
    summary_row,
)
from statement_kernel.domain.tree import build_forest


def _schema() -> ColumnSchema:
    return ColumnSchema(
        columns=(
            ColumnSpec("accountName", "Account Name", default_width_px=300),
            ColumnSpec("glCode", "GL Code", default_width_px=120),
            ColumnSpec(
                "balance",
                "Balance",
                align=Align.RIGHT,
                kind=ColumnKind.CURRENCY,
                aggregatable=True,
            ),
        ),
    )


def _rec(account_id, name, balance=None, parent_id=None, **extra):
    fields = {"accountName": name, **extra}
    if balance is not None:
        fields["balance"] = balance
    return AccountRecord(account_id, parent_id, AccountType.ASSET, fields)


def _parent_with_two_children():
    return build_forest([
        _rec("p", "Parent"),
        _rec("c1", "Child One", "10", "p"),
        _rec("c2", "Child Two", "20", "p"),
    ])


class TestRenderForest:

    def test_leaf_only_forest(self):
        forest = build_forest([_rec("a", "Alpha", 5), _rec("b", "Beta", 7)])
        rows = render_forest(forest, ColumnState.from_schema(_schema()))
        assert [r.kind for r in rows] == [RowKind.DETAIL, RowKind.DETAIL]
        assert [r.label for r in rows] == ["Alpha", "Beta"]

    def test_subtotal_follows_children(self):
        rows = render_forest(_parent_with_two_children(), ColumnState.from_schema(_schema()))
        assert [(r.kind, r.label) for r in rows] == [
            (RowKind.DETAIL, "Parent"),
            (RowKind.DETAIL, "Child One"),
            (RowKind.DETAIL, "Child Two"),
            (RowKind.SUBTOTAL, "Total Parent"),
        ]

    def test_subtotal_sums_children(self):
        rows = render_forest(_parent_with_two_children(), ColumnState.from_schema(_schema()))
        subtotal = rows[-1]
        assert subtotal.cell("balance").value == Decimal("30")
        assert subtotal.cell("balance").text == "30.00"
        assert subtotal.depth == 0

    def test_missing_and_non_numeric_values_count_as_zero(self):
        forest = build_forest([
            _rec("p", "Parent"),
            _rec("c1", "One", "10", "p"),
            _rec("c2", "Two", None, "p"),
            _rec("c3", "Three", "n/a", "p"),
        ])
        rows = render_forest(forest, ColumnState.from_schema(_schema()))
        assert rows[-1].cell("balance").value == Decimal("10")

    def test_subtotal_includes_parent_own_value(self):
        forest = build_forest([_rec("p", "Parent", "5"), _rec("c", "Child", "10", "p")])
        assert subtree_amounts(forest, forest.node("p"), _schema()).get("balance") == Decimal("15")

    def test_nested_subtotals(self):
        forest = build_forest([
            _rec("a", "A"),
            _rec("b", "B", parent_id="a"),
            _rec("c", "C", "1.5", "b"),
            _rec("d", "D", "2.5", "a"),
        ])
        rows = render_forest(forest, ColumnState.from_schema(_schema()))
        assert [r.label for r in rows] == ["A", "B", "C", "Total B", "D", "Total A"]
        assert rows[3].cell("balance").value == Decimal("1.5")
        assert rows[5].cell("balance").value == Decimal("4.0")
        assert [r.depth for r in rows] == [0, 1, 2, 1, 1, 0]

    def test_label_indented_by_depth(self):
        rows = render_forest(
            _parent_with_two_children(),
            ColumnState.from_schema(_schema()),
            start_depth=1,
        )
        assert rows[0].cell("accountName").text == INDENT_UNIT + "Parent"
        assert rows[1].cell("accountName").text == INDENT_UNIT * 2 + "Child One"
        assert rows[3].cell("accountName").text == INDENT_UNIT + "Total Parent"

    def test_indent_unit_is_four_nbsp(self):
        assert INDENT_UNIT == "\u00a0" * 4

    def test_parent_label_bold_leaf_not(self):
        rows = render_forest(_parent_with_two_children(), ColumnState.from_schema(_schema()))
        assert rows[0].cell("accountName").bold
        assert not rows[1].cell("accountName").bold
        assert all(c.bold for c in rows[-1].cells)

    def test_hidden_column_has_no_cells(self):
        state = ColumnState.from_schema(_schema())
        state.set_visible("glCode", False)
        rows = render_forest(_parent_with_two_children(), state)
        assert all(r.cell("glCode") is None for r in rows)
        assert [c.key for c in rows[0].cells] == ["accountName", "balance"]

    def test_hidden_label_column_keeps_row_label(self):
        state = ColumnState.from_schema(_schema())
        state.set_visible("accountName", False)
        rows = render_forest(_parent_with_two_children(), state)
        assert rows[-1].label == "Total Parent"
        assert rows[-1].cell("accountName") is None

    def test_cells_carry_current_widths_and_alignment(self):
        state = ColumnState.from_schema(_schema())
        state.set_width("balance", 240)
        rows = render_forest(_parent_with_two_children(), state)
        cell = rows[1].cell("balance")
        assert cell.width_px == 240
        assert cell.align == Align.RIGHT
        assert cell.text == "10.00"

    def test_non_aggregatable_cells_empty_on_subtotal(self):
        forest = build_forest([
            _rec("p", "Parent", glCode="1000"),
            _rec("c", "Child", "3", "p", glCode="1010"),
        ])
        rows = render_forest(forest, ColumnState.from_schema(_schema()))
        assert rows[0].cell("glCode").text == "1000"
        assert rows[-1].cell("glCode").text == ""

    def test_total_label_appends_forest_total(self):
        forest = build_forest([
            _rec("a", "A", "1"),
            _rec("b", "B", "2"),
        ])
        rows = render_forest(forest, ColumnState.from_schema(_schema()), total_label="Total Things")
        assert rows[-1].kind == RowKind.TOTAL
        assert rows[-1].cell("balance").value == Decimal("3")

    def test_missing_column_state_renders_nothing(self, captured_logs):
        assert render_forest(_parent_with_two_children(), None) == []
        assert any(r["message"] == "missing_column_schema" for r in captured_logs())

    def test_rendering_does_not_mutate_state(self):
        state = ColumnState.from_schema(_schema())
        before = state.snapshot()
        render_forest(_parent_with_two_children(), state)
        assert state.snapshot() == before

    def test_rendering_is_deterministic(self):
        forest = _parent_with_two_children()
        state = ColumnState.from_schema(_schema())
        assert render_forest(forest, state) == render_forest(forest, state)


class TestAggregation:

    def test_forest_amounts_sums_roots(self):
        forest = build_forest([
            _rec("a", "A", "1"),
            _rec("a1", "A1", "2", "a"),
            _rec("b", "B", "3"),
        ])
        assert forest_amounts(forest, _schema()).get("balance") == Decimal("6")

    def test_empty_forest_total_is_zero(self):
        forest = build_forest([])
        assert forest_amounts(forest, _schema()).get("balance") == Decimal("0")


class TestSummaryRow:

    def test_header_row_has_empty_amounts(self):
        row = summary_row("ASSETS", 0, RowKind.HEADER, ColumnState.from_schema(_schema()))
        assert row.cell("accountName").text == "ASSETS"
        assert row.cell("balance").text == ""
        assert row.cell("balance").value is None

    def test_custom_indent_unit(self):
        row = summary_row("Cash", 2, RowKind.HEADER, ColumnState.from_schema(_schema()), indent_unit="--")
        assert row.cell("accountName").text == "----Cash"
