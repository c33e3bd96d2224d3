"""
Test suite for logging helpers: redaction, request ids and stage timing.

System role: Verification of the logging stack
"""

import logging
import re

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from specwright.observability.correlation import (
    clear_correlation_id,
    generate_request_id,
    get_correlation_id,
    set_correlation_id,
)
from specwright.observability.log_utils import log_stage, safe_log_value
from specwright.observability.logger import (
    REDACTED,
    RedactionFilter,
    RequestIdFilter,
    StructuredFormatter,
)
from specwright.observability.middleware import CorrelationMiddleware


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRedactionFilter:
    """Test suite for RedactionFilter."""

    def test_secrets_are_always_redacted(self) -> None:
        record = _record(api_key="sk-live", authorization="Bearer x", route="generate/prd")

        RedactionFilter(redact_content=False).filter(record)

        assert record.api_key == REDACTED
        assert record.authorization == REDACTED
        assert record.route == "generate/prd"

    def test_content_kept_outside_production(self) -> None:
        record = _record(prompt="Write a PRD")

        RedactionFilter(redact_content=False).filter(record)

        assert record.prompt == "Write a PRD"

    def test_content_redacted_in_production(self) -> None:
        record = _record(prompt="Write a PRD", response="# PRD")

        RedactionFilter(redact_content=True).filter(record)

        assert record.prompt == REDACTED
        assert record.response == REDACTED


class TestFormatting:
    def test_extras_are_appended_as_json(self) -> None:
        record = _record(session_id="abc", count=3)
        RequestIdFilter().filter(record)

        line = StructuredFormatter("[%(request_id)s] %(message)s").format(record)

        assert line.startswith("[-] message")
        assert '"session_id": "abc"' in line
        assert '"count": 3' in line

    def test_safe_log_value_truncates(self) -> None:
        assert safe_log_value("x" * 600).endswith("(truncated, 600 total)")
        assert safe_log_value([1, 2]) == "list(2 items)"


class TestCorrelation:
    """Test suite for request ids."""

    def test_generated_id_format(self) -> None:
        assert re.fullmatch(r"req_[0-9a-z]+_[0-9a-z]{6}", generate_request_id())

    def test_set_get_clear(self) -> None:
        set_correlation_id("req_given")
        assert get_correlation_id() == "req_given"
        clear_correlation_id()
        assert get_correlation_id() == ""

    def test_middleware_echoes_incoming_id(self) -> None:
        app = FastAPI()
        app.add_middleware(CorrelationMiddleware)
        seen: list[str] = []

        @app.get("/ping")
        async def ping():
            seen.append(get_correlation_id())
            return {"pong": True}

        client = TestClient(app)

        echoed = client.get("/ping", headers={"X-Request-ID": "req_client"})
        generated = client.get("/ping")

        assert echoed.headers["X-Request-ID"] == "req_client"
        assert seen[0] == "req_client"
        assert generated.headers["X-Request-ID"].startswith("req_")


class TestLogStage:
    """Test suite for log_stage."""

    def test_success_logs_start_and_duration(self, caplog) -> None:
        logger = logging.getLogger("specwright.test.stage")

        with caplog.at_level(logging.INFO, logger="specwright.test.stage"):
            with log_stage(logger, "generate.prd", session_id="s1") as result:
                result["output_length"] = 42

        events = [record.event for record in caplog.records]
        assert events == ["generate.prd.start", "generate.prd.success"]
        success = caplog.records[-1]
        assert success.output_length == 42
        assert success.session_id == "s1"
        assert success.duration_ms >= 0

    def test_error_is_logged_and_reraised(self, caplog) -> None:
        logger = logging.getLogger("specwright.test.stage")

        with caplog.at_level(logging.INFO, logger="specwright.test.stage"):
            with pytest.raises(ValueError):
                with log_stage(logger, "summarize"):
                    raise ValueError("bad output")

        error = caplog.records[-1]
        assert error.event == "summarize.error"
        assert error.levelno == logging.WARNING
        assert error.error_type == "ValueError"
