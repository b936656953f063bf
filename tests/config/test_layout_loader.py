"""Tests for the statement layout loader (statement_config/loader.py)."""

from pathlib import Path

import pytest

from statement_config.loader import (
    DEFAULT_WIDTH_PX,
    available_layouts,
    compute_checksum,
    load_statement_layout,
    parse_column_schema,
    parse_column_spec,
    parse_width,
)
from statement_kernel.domain.columns import Align, ColumnKind
from statement_kernel.exceptions import MissingColumnSchemaError


class TestParseColumnSpec:

    def test_external_shape_mapped(self):
        spec = parse_column_spec({
            "key": "balance",
            "name": "Balance",
            "width": 200,
            "textAlign": "text-end",
            "display": False,
            "checkBoxDisable": True,
        })
        assert spec.key == "balance"
        assert spec.label == "Balance"
        assert spec.default_width_px == 200
        assert spec.align == Align.RIGHT
        assert spec.default_visible is False
        assert spec.toggle_locked is True
        assert spec.resize_locked is False

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("left", Align.LEFT),
            ("text-start", Align.LEFT),
            ("right", Align.RIGHT),
            ("center", Align.CENTER),
            ("text-center", Align.CENTER),
            (None, Align.LEFT),
        ],
    )
    def test_text_align_spellings(self, raw, expected):
        assert parse_column_spec({"key": "k", "textAlign": raw}).align == expected

    def test_unknown_align_rejected(self):
        with pytest.raises(ValueError):
            parse_column_spec({"key": "k", "textAlign": "justify"})

    def test_optional_keys(self):
        spec = parse_column_spec({
            "key": "amount",
            "kind": "currency",
            "aggregatable": True,
            "resizeLocked": True,
        })
        assert spec.kind == ColumnKind.CURRENCY
        assert spec.aggregatable
        assert spec.resize_locked
        assert spec.label == "amount"

    @pytest.mark.parametrize(
        "raw, expected",
        [(None, DEFAULT_WIDTH_PX), ("240", 240), ("150px", 150), ("wide", DEFAULT_WIDTH_PX), (99.6, 100)],
    )
    def test_width_parsing(self, raw, expected):
        assert parse_column_spec({"key": "k", "width": raw}).default_width_px == expected

    def test_missing_key_raises(self):
        with pytest.raises(KeyError):
            parse_column_spec({"name": "No Key"})


class TestLoadStatementLayout:

    def test_shipped_layouts_available(self):
        assert available_layouts() == ["balance_sheet", "cash_flow"]

    def test_balance_sheet_layout(self):
        layout = load_statement_layout("balance_sheet")
        assert layout.title == "Balance Sheet"
        assert layout.schema.label_key == "accountName"
        assert layout.schema.aggregatable_keys() == ("balance",)
        assert layout.schema.get("accountName").toggle_locked

    def test_cash_flow_layout(self):
        layout = load_statement_layout("cash_flow")
        assert layout.schema.aggregatable_keys() == ("selectedPeriod", "fiscalYearToDate")

    def test_checksum_is_stable(self):
        assert load_statement_layout("cash_flow").checksum == load_statement_layout("cash_flow").checksum

    def test_unknown_layout_raises(self):
        with pytest.raises(FileNotFoundError):
            load_statement_layout("income_statement")

    def test_layout_without_columns(self, tmp_path: Path):
        (tmp_path / "empty.yaml").write_text("name: empty\ntitle: Empty\ncolumns: []\n")
        with pytest.raises(MissingColumnSchemaError) as exc_info:
            load_statement_layout("empty", tmp_path)
        assert exc_info.value.statement == "empty"

    def test_custom_directory(self, tmp_path: Path):
        (tmp_path / "custom.yaml").write_text(
            "title: Custom\n"
            "label_key: name\n"
            "columns:\n"
            "  - {key: code, name: Code}\n"
            "  - {key: name, name: Name, width: 260}\n"
        )
        layout = load_statement_layout("custom", tmp_path)
        assert layout.name == "custom"
        assert layout.column_keys == ("code", "name")
        assert layout.schema.label_key == "name"
        assert available_layouts(tmp_path) == ["custom"]


class TestHelpers:

    def test_parse_column_schema_defaults_label_to_first(self):
        schema = parse_column_schema([{"key": "a"}, {"key": "b"}])
        assert schema.label_key == "a"

    def test_checksum_ignores_key_order(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})

    def test_parse_width_accepts_px_suffix(self):
        assert parse_width("240px") == 240
        assert parse_width(199.6) == 200

    def test_parse_width_non_finite_falls_back_to_default(self):
        assert parse_width("inf") == DEFAULT_WIDTH_PX
        assert parse_width("NaN") == DEFAULT_WIDTH_PX
        assert parse_width(float("-inf")) == DEFAULT_WIDTH_PX
