"""
Column schema and runtime column state.

``ColumnSpec`` / ``ColumnSchema`` are the declarative, immutable layout of a
statement table.  ``ColumnState`` is the mutable per-session view layered on
top of it: current width and visibility per key.  Only the controllers in
``statement_kernel.domain.controllers`` mutate a ``ColumnState``; renderers
read it (or a frozen ``ColumnStateSnapshot`` of it).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from statement_kernel.exceptions import MissingColumnSchemaError, UnknownColumnKeyError

MIN_WIDTH = 80


class Align(str, Enum):
    """Horizontal alignment of a column's cells."""

    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


class ColumnKind(str, Enum):
    """Value kind a column's cells are resolved and formatted as."""

    TEXT = "text"
    CURRENCY = "currency"
    NUMBER = "number"
    DATE = "date"


@dataclass(frozen=True)
class ColumnSpec:
    """Definition of one table column."""

    key: str
    label: str
    default_width_px: int = 180
    align: Align = Align.LEFT
    default_visible: bool = True
    resize_locked: bool = False
    toggle_locked: bool = False
    kind: ColumnKind = ColumnKind.TEXT
    aggregatable: bool = False


@dataclass(frozen=True)
class ColumnSchema:
    """
    Ordered column definitions of a statement table.

    ``label_key`` designates the column that carries the account label (and
    its indentation); it defaults to the first column.
    """

    columns: tuple[ColumnSpec, ...]
    label_key: str | None = None

    def __post_init__(self) -> None:
        keys = [c.key for c in self.columns]
        if len(keys) != len(set(keys)):
            raise ValueError(f"Duplicate column keys in schema: {keys}")
        if self.label_key is None and self.columns:
            object.__setattr__(self, "label_key", self.columns[0].key)
        elif self.label_key is not None and self.label_key not in keys:
            raise ValueError(f"label_key {self.label_key!r} is not a column key")

    def __iter__(self):
        return iter(self.columns)

    def __len__(self) -> int:
        return len(self.columns)

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(c.key for c in self.columns)

    def get(self, key: str) -> ColumnSpec | None:
        for col in self.columns:
            if col.key == key:
                return col
        return None

    def aggregatable_keys(self) -> tuple[str, ...]:
        return tuple(c.key for c in self.columns if c.aggregatable)


@dataclass(frozen=True)
class ColumnStateSnapshot:
    """Immutable, hashable copy of a ColumnState at one instant."""

    schema: ColumnSchema
    widths: tuple[tuple[str, int], ...]
    visible: tuple[tuple[str, bool], ...]

    def width_of(self, key: str) -> int:
        for k, w in self.widths:
            if k == key:
                return w
        raise UnknownColumnKeyError(key)

    def is_visible(self, key: str) -> bool:
        for k, v in self.visible:
            if k == key:
                return v
        return False

    def visible_columns(self) -> tuple[ColumnSpec, ...]:
        return tuple(c for c in self.schema if self.is_visible(c.key))


class ColumnState:
    """
    Mutable runtime width/visibility per column key.

    Initialized from ``ColumnSpec`` defaults, rebuilt fresh every session,
    never persisted.  Widths never drop below ``MIN_WIDTH``.  A key missing
    from ``visible`` reads as hidden.
    """

    def __init__(
        self,
        schema: ColumnSchema,
        widths: dict[str, int] | None = None,
        visible: dict[str, bool] | None = None,
    ):
        self.schema = schema
        self.widths: dict[str, int] = dict(widths or {})
        self.visible: dict[str, bool] = dict(visible or {})

    @classmethod
    def from_schema(cls, schema: ColumnSchema | None, statement: str = "table") -> ColumnState:
        """
        Fresh state from the schema defaults.

        Raises:
            MissingColumnSchemaError: no schema, or a schema without columns.
        """
        if schema is None or not schema.columns:
            raise MissingColumnSchemaError(statement)
        return cls(
            schema,
            widths={c.key: max(MIN_WIDTH, int(c.default_width_px)) for c in schema},
            visible={c.key: c.default_visible for c in schema},
        )

    def _require(self, key: str) -> ColumnSpec:
        spec = self.schema.get(key)
        if spec is None:
            raise UnknownColumnKeyError(key)
        return spec

    def width_of(self, key: str) -> int:
        spec = self._require(key)
        return self.widths.get(key, max(MIN_WIDTH, int(spec.default_width_px)))

    def set_width(self, key: str, width_px: float) -> int:
        """
        Commit a width for ``key`` clamped to MIN_WIDTH; returns it.

        A non-finite width leaves the current width in place.
        """
        self._require(key)
        if not math.isfinite(width_px):
            return self.width_of(key)
        committed = max(MIN_WIDTH, int(round(width_px)))
        self.widths[key] = committed
        return committed

    def is_visible(self, key: str) -> bool:
        return self.visible.get(key, False)

    def set_visible(self, key: str, visible: bool) -> None:
        self._require(key)
        self.visible[key] = visible

    def visible_columns(self) -> tuple[ColumnSpec, ...]:
        return tuple(c for c in self.schema if self.is_visible(c.key))

    def snapshot(self) -> ColumnStateSnapshot:
        return ColumnStateSnapshot(
            schema=self.schema,
            widths=tuple((c.key, self.width_of(c.key)) for c in self.schema),
            visible=tuple((c.key, self.is_visible(c.key)) for c in self.schema),
        )
