"""Tests for workflow logging helpers and formatters."""

import json
import logging

import pytest

from iterative_workflow.gateway.time.fake import FakeTime
from iterative_workflow.observability.logging import (
    ConsoleLogFormatter,
    JsonLogFormatter,
    TraceContextFilter,
    WorkflowLogger,
    configure_logging,
)
from iterative_workflow.observability.tracer import Tracer

LOGGER_NAME = "iterative_workflow.tests.logging"


def _record(message: str, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(LOGGER_NAME, logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_workflow_logger_attaches_context(caplog: pytest.LogCaptureFixture) -> None:
    logger = WorkflowLogger(logging.getLogger(LOGGER_NAME))

    with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
        logger.agent_end("security-reviewer", passed=True, score=92, duration_ms=1500)
        logger.checkpoint_saved("trace-1", 2)

    agent_record, checkpoint_record = caplog.records
    assert agent_record.getMessage() == "Agent completed: security-reviewer"
    assert agent_record.context == {
        "agent": "security-reviewer",
        "passed": True,
        "score": 92,
        "duration_ms": 1500,
    }
    assert checkpoint_record.levelno == logging.DEBUG
    assert checkpoint_record.context == {"trace_id": "trace-1", "iteration": 2}


def test_workflow_logger_levels(caplog: pytest.LogCaptureFixture) -> None:
    logger = WorkflowLogger(logging.getLogger(LOGGER_NAME))

    with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
        logger.agent_start("code-writer", {"requirement": "x", "tech_stack": {}})
        logger.agent_error("code-writer", RuntimeError("boom"))
        logger.iteration_start(1, {"budget": 5})
        logger.iteration_end(1, passed=False, score=70, recommendation="ITERATE")
        logger.validation_error("AggregatorOutput", ["scores: Field required"])
        logger.stall_detected("STALLED_SCORE", {"rounds": 2})

    levels = [record.levelname for record in caplog.records]
    assert levels == ["INFO", "ERROR", "INFO", "INFO", "ERROR", "WARNING"]
    assert caplog.records[0].context["input_keys"] == ["requirement", "tech_stack"]
    assert caplog.records[1].context["error"] == "boom"
    assert caplog.records[2].context == {"iteration": 1, "budget": 5}
    assert caplog.records[4].context["error_count"] == 1
    assert caplog.records[5].context == {"stall_type": "STALLED_SCORE", "rounds": 2}


def test_trace_filter_stamps_active_trace() -> None:
    tracer = Tracer(FakeTime())
    trace_id = tracer.start_trace("req")
    tracer.start_iteration(3)
    record = _record("hello")

    assert TraceContextFilter(tracer).filter(record)

    assert record.trace_id == trace_id
    assert record.iteration == 3


def test_console_formatter() -> None:
    record = _record(
        "Agent completed",
        trace_id="abcdef1234567890",
        iteration=2,
        context={"agent": "quality-checker", "score": 81},
    )

    line = ConsoleLogFormatter().format(record)

    assert line.startswith("INFO    [abcdef12] [iter:2] [quality-checker] Agent completed")
    assert line.endswith('{"agent": "quality-checker", "score": 81}')


def test_console_formatter_without_trace() -> None:
    assert ConsoleLogFormatter().format(_record("plain")) == "INFO    plain"


def test_json_formatter() -> None:
    record = _record(
        "Iteration 1 completed",
        trace_id="trace-1",
        iteration=1,
        context={"agent": "result-aggregator", "passed": True},
    )

    entry = json.loads(JsonLogFormatter().format(record))

    assert entry["level"] == "INFO"
    assert entry["logger"] == LOGGER_NAME
    assert entry["traceId"] == "trace-1"
    assert entry["iteration"] == 1
    assert entry["agent"] == "result-aggregator"
    assert entry["context"] == {"agent": "result-aggregator", "passed": True}
    assert entry["message"] == "Iteration 1 completed"


def test_configure_logging_replaces_previous_handler() -> None:
    logger = logging.getLogger(f"{LOGGER_NAME}.configure")
    tracer = Tracer(FakeTime())
    try:
        first = configure_logging(logger, level="DEBUG", output="console", tracer=tracer)
        second = configure_logging(logger, level="WARNING", output="json", tracer=tracer)

        assert logger.handlers == [second]
        assert first not in logger.handlers
        assert isinstance(second.formatter, JsonLogFormatter)
        assert logger.level == logging.WARNING
        assert not logger.propagate

        silent = configure_logging(logger, level="INFO", output="silent", tracer=tracer)
        assert isinstance(silent, logging.NullHandler)
    finally:
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
