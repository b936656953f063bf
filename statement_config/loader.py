"""
Layout Loader (``statement_config.loader``).

Responsibility
--------------
Loads statement layout YAML files and parses them into typed column
schemas.  The external column shape is::

    {key, name, width, textAlign, display, checkBoxDisable}

plus the optional ``kind``, ``aggregatable`` and ``resizeLocked`` keys.

Architecture position
---------------------
**Config layer**.  Depends on the kernel's column types only; never on
modules.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass.
* ``compute_checksum`` produces a deterministic SHA-256 hash for layout
  identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Column without ``key``  -> ``KeyError`` propagates.
* Unknown ``textAlign`` or ``kind``  -> ``ValueError``.
* Layout without columns  -> ``MissingColumnSchemaError``.
"""

from __future__ import annotations

import hashlib
import json
import math
from pathlib import Path
from typing import Any

import yaml

from statement_config.schema import StatementLayout
from statement_kernel.domain.columns import Align, ColumnKind, ColumnSchema, ColumnSpec
from statement_kernel.exceptions import MissingColumnSchemaError
from statement_kernel.logging_config import get_logger

logger = get_logger("config.loader")

SETS_DIR = Path(__file__).parent / "sets"

DEFAULT_WIDTH_PX = 180

# textAlign spellings, including the CSS utility-class forms
_ALIGNMENTS: dict[str, Align] = {
    "left": Align.LEFT,
    "right": Align.RIGHT,
    "center": Align.CENTER,
    "text-start": Align.LEFT,
    "text-end": Align.RIGHT,
    "text-center": Align.CENTER,
}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_align(value: Any) -> Align:
    """Parse a ``textAlign`` value; None means left."""
    if value is None:
        return Align.LEFT
    try:
        return _ALIGNMENTS[str(value).strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown textAlign {value!r}") from None


def parse_width(value: Any) -> int:
    """
    Parse a ``width`` value in pixels.

    Accepts numbers and numeric strings (optionally suffixed ``px``).
    Missing, non-numeric or non-finite widths fall back to the default
    width.
    """
    if value is None or isinstance(value, bool):
        return DEFAULT_WIDTH_PX
    if not isinstance(value, (int, float)):
        value = str(value).strip().lower().removesuffix("px").strip()
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return DEFAULT_WIDTH_PX
    if not math.isfinite(number):
        return DEFAULT_WIDTH_PX
    return int(round(number))


def parse_column_spec(data: dict[str, Any]) -> ColumnSpec:
    """
    Parse a ``ColumnSpec`` from the external column shape.

    Raises:
        KeyError: if ``key`` is missing.
        ValueError: on an unknown alignment or kind.
    """
    key = str(data["key"])
    return ColumnSpec(
        key=key,
        label=str(data.get("name", key)),
        default_width_px=parse_width(data.get("width")),
        align=parse_align(data.get("textAlign")),
        default_visible=bool(data.get("display", True)),
        resize_locked=bool(data.get("resizeLocked", False)),
        toggle_locked=bool(data.get("checkBoxDisable", False)),
        kind=ColumnKind(data.get("kind", ColumnKind.TEXT.value)),
        aggregatable=bool(data.get("aggregatable", False)),
    )


def parse_column_schema(
    columns: list[dict[str, Any]],
    label_key: str | None = None,
) -> ColumnSchema:
    """Parse an ordered list of column dicts into a ``ColumnSchema``."""
    return ColumnSchema(
        columns=tuple(parse_column_spec(c) for c in columns),
        label_key=label_key,
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def available_layouts(directory: Path | None = None) -> list[str]:
    """Names of the layouts in ``directory`` (the shipped sets by default)."""
    root = directory or SETS_DIR
    return sorted(p.stem for p in root.glob("*.yaml"))


def load_statement_layout(name: str, directory: Path | None = None) -> StatementLayout:
    """
    Load the layout ``<directory>/<name>.yaml``.

    Raises:
        FileNotFoundError: no such layout.
        MissingColumnSchemaError: the layout declares no columns.
    """
    path = (directory or SETS_DIR) / f"{name}.yaml"
    data = load_yaml_file(path)

    columns = data.get("columns") or []
    if not columns:
        raise MissingColumnSchemaError(name)

    layout = StatementLayout(
        name=str(data.get("name", name)),
        title=str(data.get("title", name)),
        schema=parse_column_schema(columns, data.get("label_key")),
        checksum=compute_checksum(data),
    )
    logger.info(
        "statement_layout_loaded",
        extra={
            "layout": layout.name,
            "column_count": len(layout.schema),
            "checksum": layout.checksum,
        },
    )
    return layout
