"""Tests for estimation_kernel.logging_config."""

import json
import logging
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from estimation_kernel.domain import RiskLevel
from estimation_kernel.exceptions import CyclicDependencyError, UnknownDependencyError
from estimation_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def log_lines():
    """Configure JSON logging into a buffer; returns a reader of parsed lines."""
    stream = StringIO()
    configure_logging(handler=logging.StreamHandler(stream), level=logging.DEBUG)

    def read() -> list[dict]:
        return [json.loads(line) for line in stream.getvalue().splitlines() if line]

    return read


class TestStructuredFormatter:

    def test_header_fields(self, log_lines):
        get_logger("engines.pert_network").info("pert_schedule_built")

        record = log_lines()[0]
        assert record["level"] == "INFO"
        assert record["message"] == "pert_schedule_built"
        assert record["logger"] == "estimation_kernel.engines.pert_network"
        assert record["ts"].endswith("+00:00")

    def test_extra_fields(self, log_lines):
        get_logger("services").info(
            "project_estimates_recomputed",
            extra={"project_size": 50, "recommended_model": "slim"},
        )

        record = log_lines()[0]
        assert record["project_size"] == 50
        assert record["recommended_model"] == "slim"

    def test_context_fields(self, log_lines):
        LogContext.set(correlation_id="run-7", task_id="C")
        get_logger("services").info("pert_task_updated")

        record = log_lines()[0]
        assert record["correlation_id"] == "run-7"
        assert record["task_id"] == "C"
        assert "feature_id" not in record

    def test_extra_does_not_override_context(self, log_lines):
        with LogContext.bind(feature_id="feature-1"):
            get_logger("services").info("feature_added", extra={"feature_id": "other"})

        assert log_lines()[0]["feature_id"] == "feature-1"

    def test_value_serialization(self, log_lines):
        uid = uuid4()
        get_logger("x").info(
            "values",
            extra={"entry_id": uid, "risk": RiskLevel.HIGH, "amount": Decimal("1.50"), "ids": {"b", "a"}},
        )

        record = log_lines()[0]
        assert record["entry_id"] == str(uid)
        assert record["risk"] == "high"
        assert record["amount"] == "1.50"
        assert record["ids"] == ["a", "b"]

    def test_plain_exception(self, log_lines):
        try:
            raise ValueError("boom")
        except ValueError:
            get_logger("x").exception("failed")

        record = log_lines()[0]
        assert record["exc_type"] == "ValueError"
        assert record["exc_message"] == "boom"
        assert "exc_code" not in record
        assert "Traceback" in record["traceback"]

    def test_kernel_exception_fields(self, log_lines):
        try:
            raise UnknownDependencyError("D", "C")
        except UnknownDependencyError:
            get_logger("x").warning("pert_schedule_unsolvable", exc_info=True)

        record = log_lines()[0]
        assert record["exc_code"] == "UNKNOWN_DEPENDENCY"
        assert record["exc_task_id"] == "D"
        assert record["exc_dependency_id"] == "C"

    def test_list_attribute_on_exception(self, log_lines):
        try:
            raise CyclicDependencyError(["A", "B"])
        except CyclicDependencyError:
            get_logger("x").error("cycle", exc_info=True)

        assert log_lines()[0]["exc_task_ids"] == ["A", "B"]

    def test_level_filtering(self):
        stream = StringIO()
        configure_logging(handler=logging.StreamHandler(stream))
        logger = get_logger("x")
        logger.debug("hidden")
        logger.info("shown")

        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["message"] == "shown"

    def test_formatter_standalone(self):
        record = logging.LogRecord("estimation_kernel.x", logging.INFO, __file__, 1, "hi %s", ("there",), None)
        assert json.loads(StructuredFormatter().format(record))["message"] == "hi there"


class TestLogContext:

    def test_set_ignores_none(self):
        LogContext.set(session_id="s1")
        LogContext.set(session_id=None, trace_id="t1")

        assert LogContext.get_all() == {"session_id": "s1", "trace_id": "t1"}

    def test_unknown_field_rejected(self):
        with pytest.raises(TypeError):
            LogContext.set(user_id="u")

    def test_clear(self):
        LogContext.set(correlation_id="x", feature_id="f")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_nests_and_restores(self):
        LogContext.set(task_id="A")
        with LogContext.bind(task_id="B", feature_id="f"):
            assert LogContext.get_all() == {"feature_id": "f", "task_id": "B"}
            with LogContext.bind(task_id="C"):
                assert LogContext.get_all()["task_id"] == "C"
            assert LogContext.get_all()["task_id"] == "B"
        assert LogContext.get_all() == {"task_id": "A"}

    def test_bind_restores_on_error(self):
        with pytest.raises(RuntimeError):
            with LogContext.bind(feature_id="f"):
                raise RuntimeError
        assert "feature_id" not in LogContext.get_all()

    def test_all_fields(self):
        LogContext.set(
            correlation_id="c",
            session_id="s",
            feature_id="f",
            task_id="t",
            trace_id="r",
        )
        assert list(LogContext.get_all()) == [
            "correlation_id", "session_id", "feature_id", "task_id", "trace_id",
        ]


class TestConfigureLogging:

    def test_only_first_call_applies(self):
        configure_logging(handler=logging.StreamHandler(StringIO()))
        configure_logging(handler=logging.StreamHandler(StringIO()))

        kernel_logger = logging.getLogger("estimation_kernel")
        assert len(kernel_logger.handlers) == 1
        assert kernel_logger.propagate is False

    def test_reset_restores_propagation(self):
        configure_logging(handler=logging.StreamHandler(StringIO()))
        reset_logging()

        kernel_logger = logging.getLogger("estimation_kernel")
        assert kernel_logger.handlers == []
        assert kernel_logger.propagate is True

    def test_get_logger_namespace(self):
        assert get_logger("services.evm").name == "estimation_kernel.services.evm"
