"""
Property-based тесты для системы логирования.
Проверяют формат и структуру JSON логов.
"""

import json
import logging
import sys
from datetime import date
from decimal import Decimal

import pytest
from hypothesis import given, strategies as st

from budget_planner.config import settings
from budget_planner.utils.logger import JsonFormatter, setup_logging


def _record(msg="Сообщение", level=logging.INFO, **extra):
    record = logging.LogRecord(
        name="test_logger",
        level=level,
        pathname="test_path.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
        func="test_func"
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@given(
    message=st.text(),
    level=st.sampled_from([logging.INFO, logging.WARNING, logging.ERROR]),
)
def test_json_formatter_structure(message, level):
    """Любое сообщение (включая unicode) даёт валидный JSON с обязательными полями."""
    data = json.loads(JsonFormatter().format(_record(message, level)))

    assert "timestamp" in data
    assert data["level"] == logging.getLevelName(level)
    assert data["function"] == "test_func"
    assert data["message"] == message


def test_extra_fields_serialized():
    record = _record(year=2024, amount=Decimal("1500.50"), day=date(2024, 3, 15), ids=["a", "b"])

    data = json.loads(JsonFormatter().format(record))

    assert data["year"] == 2024
    assert data["amount"] == "1500.50"
    assert data["day"] == "2024-03-15"
    assert data["ids"] == ["a", "b"]


def test_json_formatter_exception():
    formatter = JsonFormatter()

    try:
        raise ValueError("Test exception")
    except ValueError:
        record = _record("Error occurred", logging.ERROR)
        record.exc_info = sys.exc_info()

        data = json.loads(formatter.format(record))

    assert "exception" in data
    assert "ValueError: Test exception" in data["exception"]


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


def test_setup_logging_writes_session_file(tmp_path, monkeypatch, restore_root_logger):
    log_dir = tmp_path / "logs"
    monkeypatch.setattr(settings, "log_file", str(log_dir / "budget_planner.log"))
    monkeypatch.setattr(settings, "log_level", "DEBUG")

    setup_logging()
    logging.getLogger("budget_planner.tests").debug("Генерация за год", extra={"year": 2024})
    for handler in restore_root_logger.handlers:
        handler.flush()

    files = list(log_dir.glob("budget_planner_*.log"))
    assert len(files) == 1
    lines = [json.loads(line) for line in files[0].read_text(encoding="utf-8").splitlines()]
    assert lines[-1]["message"] == "Генерация за год"
    assert lines[-1]["year"] == 2024
    assert restore_root_logger.level == logging.DEBUG


def test_setup_logging_without_log_dir_keeps_console(tmp_path, monkeypatch, restore_root_logger):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("")
    monkeypatch.setattr(settings, "log_file", str(blocker / "logs" / "budget_planner.log"))

    setup_logging()

    assert len(restore_root_logger.handlers) == 1
    assert not isinstance(restore_root_logger.handlers[0], logging.FileHandler)
