"""
구조화 로깅 테스트
"""

import asyncio
import json
import logging
import sys
from unittest.mock import Mock

import pytest

from structured_logging import (
    ContextFilter,
    JSONFormatter,
    LogContext,
    StructuredLogger,
    configure_json_logging,
    current_context,
    generate_session_id,
    get_component,
    get_structured_logger,
    get_user_id,
)


def make_record(message="hello", level=logging.INFO, **extra):
    record = logging.LogRecord("test", level, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLogContext:
    """LogContext 테스트"""

    def test_sets_and_restores(self):
        with LogContext(user_id="u-1", component="CampaignList", campaign_id="c-9"):
            assert get_user_id() == "u-1"
            assert current_context()["campaign_id"] == "c-9"

            with LogContext(component="Chart"):
                assert get_component() == "Chart"

            assert get_component() == "CampaignList"

        assert get_user_id() is None
        assert "campaign_id" not in current_context()

    def test_restores_after_exception(self):
        with pytest.raises(RuntimeError):
            with LogContext(user_id="u-2"):
                raise RuntimeError("boom")

        assert get_user_id() is None


class TestJSONFormatter:
    """JSONFormatter 테스트"""

    def test_format_with_context(self):
        formatter = JSONFormatter()
        record = make_record("Loaded", context={"rows": 3})

        with LogContext(user_id="u-1", action="load"):
            ContextFilter().filter(record)

        data = json.loads(formatter.format(record))

        assert data["message"] == "Loaded"
        assert data["level"] == "INFO"
        assert data["user_id"] == "u-1"
        assert data["action"] == "load"
        assert "session_id" not in data
        assert data["context"] == {"rows": 3}

    def test_format_exception(self):
        formatter = JSONFormatter()
        try:
            raise ValueError("bad value")
        except ValueError:
            record = make_record("failed", logging.ERROR)
            record.exc_info = sys.exc_info()

        data = json.loads(formatter.format(record))

        assert data["exception"]["type"] == "ValueError"
        assert data["exception"]["message"] == "bad value"

    def test_configure_json_logging(self, tmp_path):
        log_file = tmp_path / "app.log"
        target = configure_json_logging(
            level=logging.INFO, output="file", log_file=str(log_file), logger_name="json-test"
        )

        target.info("written", extra={"context": {"k": "v"}})
        for h in target.handlers:
            h.flush()

        line = json.loads(log_file.read_text(encoding="utf-8").strip())
        assert line["message"] == "written"
        assert line["context"] == {"k": "v"}

        for h in target.handlers[:]:
            h.close()
            target.removeHandler(h)


class TestStructuredLogger:
    """StructuredLogger 테스트"""

    def test_min_level_filters(self):
        log = StructuredLogger("min-level", min_level=logging.WARNING)

        assert log.info("skipped") is None
        assert log.warning("kept") is not None
        assert [e.message for e in log.get_recent_logs()] == ["kept"]

    def test_critical_always_logged(self):
        log = StructuredLogger("critical", min_level=logging.CRITICAL + 10)

        assert log.critical("disk gone") is not None

    def test_production_defaults_to_warning(self):
        assert StructuredLogger("prod", environment="production").min_level == logging.WARNING
        assert StructuredLogger("dev", environment="development").min_level == logging.DEBUG

    def test_buffer_keeps_last_entries(self):
        log = StructuredLogger("buffer", max_logs=3)
        for i in range(5):
            log.info(f"message {i}")

        assert [e.message for e in log.get_recent_logs(10)] == ["message 2", "message 3", "message 4"]
        assert [e.message for e in log.get_recent_logs(1)] == ["message 4"]

    def test_entry_context(self):
        log = StructuredLogger("ctx")

        entry = log.info("Loaded", component="Reports")

        assert entry.context["component"] == "Reports"
        assert entry.context["session_id"].startswith("session_")
        assert entry.context["environment"] == log.environment

    def test_with_context(self):
        log = StructuredLogger("component")
        component = log.with_context(component="Dashboard")

        entry = component.warn("Slow widget", widget="kpi")

        assert entry.context["component"] == "Dashboard"
        assert entry.context["widget"] == "kpi"
        assert entry.level == "WARNING"

    def test_error_stack(self):
        log = StructuredLogger("stack")
        try:
            raise KeyError("missing")
        except KeyError as e:
            entry = log.error("Lookup failed", e)

        assert entry.error is not None
        assert "KeyError" in entry.stack

    def test_export_logs(self):
        log = StructuredLogger("export")
        log.info("one")

        data = json.loads(log.export_logs())

        assert data[0]["message"] == "one"
        assert data[0]["level"] == "INFO"

    def test_start_timer(self):
        log = StructuredLogger("timer")

        stop = log.start_timer("load", component="Reports")
        duration = stop()

        assert duration >= 0
        started, completed = log.get_recent_logs()
        assert started.message == "Timer started: load"
        assert completed.message.startswith("Timer completed: load (")
        assert completed.context["action"] == "performance_timer"

    def test_api_logging(self):
        log = StructuredLogger("api")

        request = log.log_api_request("/campaigns", "GET")
        ok = log.log_api_response("/campaigns", 200, 120)
        failed = log.log_api_response("/campaigns", 503, 900)

        assert request.message == "API Request: GET /campaigns"
        assert ok.level == "INFO"
        assert failed.level == "ERROR"
        assert failed.context["status"] == 503

    def test_user_action(self):
        entry = StructuredLogger("ui").log_user_action("export_csv", page="reports")

        assert entry.message == "User Action: export_csv"
        assert entry.context["action"] == "user_interaction"

    def test_errors_forwarded_to_monitor(self):
        monitor = Mock()
        log = StructuredLogger("monitored", monitor=monitor)

        log.info("fine")
        log.error("Payment failed", component="Checkout")

        monitor.assert_called_once()
        message, context = monitor.call_args.args
        assert message == "Payment failed"
        assert context["component"] == "Checkout"

    def test_monitor_failure_contained(self):
        log = StructuredLogger("broken-monitor", monitor=Mock(side_effect=RuntimeError("down")))

        assert log.error("still logged") is not None

    @pytest.mark.asyncio
    async def test_forward_to_error_handler(self, handler):
        """error 로그를 ErrorHandler.log_error로 전달"""
        log = StructuredLogger("handler-bridge", monitor=handler.log_error)

        log.error("Sync job failed", component="Scheduler")
        await asyncio.gather(*list(log._tasks))

        entries = handler.store.all()
        assert [e.message for e in entries] == ["Sync job failed"]
        assert entries[0].context.component == "Scheduler"


class TestHelpers:
    def test_session_id_format(self):
        prefix, millis, suffix = generate_session_id().split("_")

        assert prefix == "session"
        assert millis.isdigit()
        assert len(suffix) == 7

    def test_get_structured_logger_cached(self):
        assert get_structured_logger("cached") is get_structured_logger("cached")
