"""
Unit tests for structured JSON logging setup.
"""

import importlib
import json
import logging
import sys
import warnings

from pythonjsonlogger.json import JsonFormatter

from pullsafe.core import logging_config
from pullsafe.core.logging_config import CustomJsonFormatter, setup_logging


def _format(formatter: CustomJsonFormatter, **extra) -> dict:
    record = logging.LogRecord(
        name="pullsafe.core.evaluator",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Authorization %s evaluated as %s",
        args=("0xab", "LIVE"),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return json.loads(formatter.format(record))


class TestCustomJsonFormatter:
    def test_module_imports_without_deprecation_warning(self, monkeypatch):
        monkeypatch.delitem(sys.modules, "pythonjsonlogger.jsonlogger", raising=False)
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            reloaded = importlib.reload(logging_config)

        assert issubclass(reloaded.CustomJsonFormatter, JsonFormatter)

    def test_context_fields(self):
        entry = _format(CustomJsonFormatter(environment="staging", service_name="pullsafe"))

        assert entry["message"] == "Authorization 0xab evaluated as LIVE"
        assert entry["environment"] == "staging"
        assert entry["service"] == "pullsafe"
        assert entry["level"] == "info"
        assert entry["timestamp"]
        assert entry["source"]["line"] == 10

    def test_extra_fields_included(self):
        entry = _format(CustomJsonFormatter(), event="evaluator.evaluated", status="LIVE")

        assert entry["event"] == "evaluator.evaluated"
        assert entry["status"] == "LIVE"


class TestSetupLogging:
    def test_file_handler_writes_json(self, tmp_path):
        log_file = tmp_path / "logs" / "pullsafe.json"
        logger = setup_logging(
            name="pullsafe.test_file",
            log_file=str(log_file),
            level="DEBUG",
            enable_console=False,
        )

        logger.info("hello", extra={"event": "test.hello"})
        for handler in logger.handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert entry["message"] == "hello"
        assert entry["event"] == "test.hello"
        assert entry["service"] == "pullsafe"

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging(name="pullsafe.test_dupes")
        logger = setup_logging(name="pullsafe.test_dupes", level="WARNING")

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
