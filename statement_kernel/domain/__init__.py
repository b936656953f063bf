"""
Pure domain layer of the table engine.

No dependencies on:
- ORM (SQLAlchemy)
- Database
- I/O

Forests and display rows are immutable and deterministic.  ColumnState is
the one mutable object, and only the controllers mutate it.
"""

from statement_kernel.domain.amounts import ColumnAmounts, coerce_amount
from statement_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from statement_kernel.domain.columns import (
    MIN_WIDTH,
    Align,
    ColumnKind,
    ColumnSchema,
    ColumnSpec,
    ColumnState,
    ColumnStateSnapshot,
)
from statement_kernel.domain.controllers import (
    ControlOutcome,
    DragSession,
    PointerEvents,
    ResizeController,
    VisibilityController,
)
from statement_kernel.domain.records import AccountRecord, AccountType
from statement_kernel.domain.rendering import (
    INDENT_UNIT,
    DisplayCell,
    DisplayRow,
    RowKind,
    forest_amounts,
    render_forest,
    subtree_amounts,
    summary_row,
)
from statement_kernel.domain.tree import (
    BucketFailure,
    Forest,
    ForestSet,
    TreeNode,
    build_forest,
    build_forests,
)

__all__ = [
    # Records
    "AccountRecord",
    "AccountType",
    # Tree
    "TreeNode",
    "Forest",
    "ForestSet",
    "BucketFailure",
    "build_forest",
    "build_forests",
    # Columns
    "MIN_WIDTH",
    "Align",
    "ColumnKind",
    "ColumnSpec",
    "ColumnSchema",
    "ColumnState",
    "ColumnStateSnapshot",
    # Amounts
    "ColumnAmounts",
    "coerce_amount",
    # Rendering
    "INDENT_UNIT",
    "RowKind",
    "DisplayCell",
    "DisplayRow",
    "render_forest",
    "summary_row",
    "subtree_amounts",
    "forest_amounts",
    # Controllers
    "ControlOutcome",
    "PointerEvents",
    "DragSession",
    "ResizeController",
    "VisibilityController",
    # Clock
    "Clock",
    "SystemClock",
    "DeterministicClock",
]
