"""
Statement layout configuration.

Column layouts ship as YAML under ``statement_config/sets`` and are loaded
with ``load_statement_layout``.
"""

from statement_config.loader import (
    available_layouts,
    compute_checksum,
    load_statement_layout,
    parse_column_schema,
    parse_column_spec,
)
from statement_config.schema import StatementLayout

__all__ = [
    "StatementLayout",
    "available_layouts",
    "compute_checksum",
    "load_statement_layout",
    "parse_column_schema",
    "parse_column_spec",
]
