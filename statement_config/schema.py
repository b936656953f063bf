"""
Statement layout schema.

A ``StatementLayout`` is the human-authored, reviewable source artifact for
one statement table: its name, its title and its column schema.  YAML
fragments under ``statement_config/sets`` are parsed into these types by the
loader.
"""

from __future__ import annotations

from dataclasses import dataclass

from statement_kernel.domain.columns import ColumnSchema


@dataclass(frozen=True)
class StatementLayout:
    """Column layout of one statement table."""

    name: str
    title: str
    schema: ColumnSchema
    checksum: str = ""

    @property
    def column_keys(self) -> tuple[str, ...]:
        return self.schema.keys
