"""
Pytest fixtures for the statement engine test suite.

Provides:
- Structured logging configuration and log capture
- A deterministic clock
- An in-memory SQLite session with the account record tables created
- Shipped column layouts and fresh column state
"""

import json
import logging
from io import StringIO
from typing import Generator

import pytest
from sqlalchemy.orm import Session

from statement_config.loader import load_statement_layout
from statement_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from statement_kernel.domain.clock import DeterministicClock
from statement_kernel.domain.columns import ColumnState
from statement_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

TEST_DATABASE_URL = "sqlite://"


@pytest.fixture(scope="session", autouse=True)
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture statement_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            build_forests(records)
            logs = captured_logs()
            assert any(r["message"] == "forest_built" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("statement_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


@pytest.fixture
def deterministic_clock():
    """Provide a deterministic clock for testing."""
    return DeterministicClock()


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """In-memory SQLite session with every table created."""
    init_engine_from_url(TEST_DATABASE_URL)
    create_tables()
    sess = get_session()
    try:
        yield sess
    finally:
        sess.rollback()
        sess.close()
        drop_tables()
        reset_engine()


@pytest.fixture
def balance_sheet_layout():
    return load_statement_layout("balance_sheet")


@pytest.fixture
def cash_flow_layout():
    return load_statement_layout("cash_flow")


@pytest.fixture
def balance_sheet_state(balance_sheet_layout) -> ColumnState:
    return ColumnState.from_schema(balance_sheet_layout.schema, balance_sheet_layout.name)


@pytest.fixture
def cash_flow_state(cash_flow_layout) -> ColumnState:
    return ColumnState.from_schema(cash_flow_layout.schema, cash_flow_layout.name)
