"""
Pytest fixtures for the estimation test suite.

Provides:
- Structured log capture
- A SQLite database per test (under tmp_path) with tables created
"""

import json
import logging
from collections.abc import Generator
from io import StringIO

import pytest
from sqlalchemy.orm import Session

from estimation_kernel.db.engine import (
    create_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from estimation_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture estimation_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            calculate_cocomo(params)
            logs = captured_logs()
            assert any(r["message"] == "ESTIMATION_ENGINE_TRACE" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("estimation_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'estimation.db'}"


@pytest.fixture
def db_engine(database_url):
    engine = init_engine_from_url(database_url)
    create_tables()
    yield engine
    reset_engine()


@pytest.fixture
def session(db_engine) -> Generator[Session, None, None]:
    """Session on a fresh per-test SQLite file; tests commit or not as they like."""
    sess = get_session()
    yield sess
    sess.close()

