"""
Reporting Configuration Schema.

Display options shared by every statement: entity, currency, precision and
the indent unit of the label column.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Self

from statement_kernel.domain.rendering import INDENT_UNIT
from statement_kernel.logging_config import get_logger

logger = get_logger("modules.reporting.config")


@dataclass
class ReportingConfig:
    """
    Configuration schema for the reporting module.

    Controls report metadata and the formatting of rendered cells.
    """

    # Entity name shown on reports
    entity_name: str = "Company"

    # Default currency for reports
    default_currency: str = "USD"

    # Rounding precision for display
    display_precision: int = 2

    # Label prefix per hierarchy level
    indent_unit: str = INDENT_UNIT

    def __post_init__(self):
        if self.display_precision < 0:
            raise ValueError("display_precision cannot be negative")
        if len(self.default_currency) != 3:
            raise ValueError("default_currency must be a 3-letter ISO 4217 code")

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("reporting_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create config from dictionary."""
        logger.info(
            "reporting_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)
