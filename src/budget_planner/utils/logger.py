"""
Логирование Budget Planner.

Каждый запуск приложения пишет JSON строки в отдельный файл в каталоге
логов и дублирует сообщения в консоль в читаемом виде.
"""

import json
import logging
import sys
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, List, Optional

from budget_planner.config import settings

CONSOLE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'

# Всё, что есть у пустой записи, не считается полем из extra
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def _to_json(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return repr(value)


class JsonFormatter(logging.Formatter):
    """Одна JSON строка на запись, поля из extra добавляются как есть."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, '%Y-%m-%d %H:%M:%S'),
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value) for key, value in vars(record).items() if key not in _STANDARD_ATTRS
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=_to_json)


def _session_file_handler(log_dir: Path) -> Optional[logging.Handler]:
    started = datetime.now().strftime('%Y%m%d_%H%M%S')
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_dir / f"budget_planner_{started}.log", encoding='utf-8')
    except OSError as e:
        print(f"Не удалось открыть файл логов в {log_dir}: {e}", file=sys.stderr)
        return None
    handler.setFormatter(JsonFormatter())
    return handler


def setup_logging() -> None:
    """
    Переустанавливает обработчики корневого логгера.

    Без доступного каталога логов приложение продолжает работу
    только с выводом в консоль.
    """
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
    handlers: List[logging.Handler] = [console]

    file_handler = _session_file_handler(Path(settings.log_file).parent)
    if file_handler is not None:
        handlers.append(file_handler)

    root = logging.getLogger()
    root.setLevel(settings.log_level)
    root.handlers = handlers

    if file_handler is not None:
        logging.getLogger(__name__).info(f"Лог сеанса: {file_handler.baseFilename}")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
