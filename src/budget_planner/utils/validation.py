import uuid
import logging
from datetime import date, datetime
from typing import Any, Optional

from dateutil.parser import isoparse

logger = logging.getLogger(__name__)


def validate_uuid_format(id_value: str, field_name: str = "ID") -> None:
    """
    Валидация формата UUID.

    Args:
        id_value: Значение для проверки
        field_name: Название поля для сообщения об ошибке

    Raises:
        ValueError: Если формат невалидный
    """
    try:
        uuid.UUID(str(id_value))
    except ValueError:
        error_msg = f'Невалидный формат {field_name}: {id_value}. Ожидается UUID формата: 550e8400-e29b-41d4-a716-446655440000'
        logger.error(error_msg)
        raise ValueError(error_msg)


def parse_iso_date(value: Any) -> Optional[date]:
    """
    Приводит значение к календарной дате без времени.

    Принимает date, datetime или строку ISO 8601 ("2024-03-15",
    "2024-03-15T00:00:00"). Время суток отбрасывается.

    Args:
        value: Дата или строка с датой

    Returns:
        Объект date или None, если значение пустое или не разбирается
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return isoparse(str(value).strip()).date()
    except (ValueError, TypeError, OverflowError):
        logger.debug(f"Не удалось разобрать дату: {value!r}")
        return None
