"""
Сервис генерации дат вхождений периодических статей.

Для периодической статьи (дата начала, необязательная дата окончания,
правило повторения) и целевого года возвращает упорядоченный список
календарных дат, в которые статья повторяется в этом году.

Правила:
- DAILY / WEEKLY: шаг 1 / 7 дней от якорной даты. Если дата начала в прошлом
  году, якорь сбрасывается на 1 января целевого года без выравнивания по дню недели
- BI_WEEKLY: шаг 14 дней. При сбросе на 1 января якорь сдвигается до того же
  дня недели, что и у даты начала (единственное правило с выравниванием)
- MONTHLY: по одной дате в каждый месяц, день обрезается до конца месяца.
  Первая дата после даты окончания прекращает генерацию
- SEMI_MONTHLY: две даты в месяц (день и день+15, для дня 1 - день+14),
  каждая проверяется по дате окончания отдельно
- ONCE_ONLY: только сама дата начала, если она в целевом году

Дата окончания включительна. Отсутствующая или неразбираемая дата окончания
не ограничивает генерацию.
"""

import logging
from calendar import monthrange
from datetime import date, timedelta
from typing import Callable, Dict, List, Optional, Union

from budget_planner.models.enums import RecurrenceRule
from budget_planner.utils.validation import parse_iso_date

logger = logging.getLogger(__name__)

DateLike = Union[date, str, None]


def is_beyond_end_date(current: date, end_date: DateLike) -> bool:
    """
    Проверяет, что дата строго позже даты окончания.

    Args:
        current: Проверяемая дата
        end_date: Дата окончания (date, ISO строка или None)

    Returns:
        False, если дата окончания не указана или не разбирается,
        иначе current > end_date
    """
    end = parse_iso_date(end_date)
    if end is None:
        return False
    return current > end


def _stepped_dates(year: int, anchor: date, step_days: int, end_date: DateLike) -> List[date]:
    """Даты от якоря с фиксированным шагом, пока не закончится год или период."""
    dates: List[date] = []
    current = anchor
    step = timedelta(days=step_days)

    while current.year == year:
        if is_beyond_end_date(current, end_date):
            break
        dates.append(current)
        try:
            current += step
        except OverflowError:
            break

    return dates


def _reset_anchor(year: int, start_date: date) -> date:
    """Якорь DAILY/WEEKLY: 1 января, если дата начала в прошлом году."""
    if start_date.year < year:
        return date(year, 1, 1)
    return start_date


def generate_daily_dates(year: int, start_date: date, end_date: DateLike = None) -> List[date]:
    """Ежедневные даты в пределах года."""
    return _stepped_dates(year, _reset_anchor(year, start_date), 1, end_date)


def generate_weekly_dates(year: int, start_date: date, end_date: DateLike = None) -> List[date]:
    """
    Еженедельные даты в пределах года.

    Example:
        >>> generate_weekly_dates(2024, date(2023, 6, 1))[0]
        datetime.date(2024, 1, 1)
    """
    return _stepped_dates(year, _reset_anchor(year, start_date), 7, end_date)


def generate_bi_weekly_dates(year: int, start_date: date, end_date: DateLike = None) -> List[date]:
    """
    Даты раз в две недели в пределах года.

    Если дата начала в прошлом году, первая дата - первый день года
    с тем же днём недели, что и у даты начала.

    Example:
        >>> generate_bi_weekly_dates(2024, date(2023, 6, 1))[:2]
        [datetime.date(2024, 1, 4), datetime.date(2024, 1, 18)]
    """
    anchor = start_date
    if start_date.year < year:
        anchor = date(year, 1, 1)
        while anchor.weekday() != start_date.weekday():
            anchor += timedelta(days=1)

    return _stepped_dates(year, anchor, 14, end_date)


def generate_monthly_dates(year: int, start_date: date, end_date: DateLike = None) -> List[date]:
    """
    Ежемесячные даты: день месяца из даты начала, обрезанный до конца месяца.

    Генерация прекращается на первом месяце, дата которого позже даты окончания.
    """
    dates: List[date] = []
    day = start_date.day

    for month in range(1, 13):
        last_day = monthrange(year, month)[1]
        current = date(year, month, min(day, last_day))
        if is_beyond_end_date(current, end_date):
            break
        dates.append(current)

    return dates


def generate_semi_monthly_dates(year: int, start_date: date, end_date: DateLike = None) -> List[date]:
    """
    Даты два раза в месяц.

    Первая дата - день из даты начала (обрезанный до конца месяца),
    вторая - на 15 дней позже (на 14, если день начала 1-е), тоже обрезанная.
    Если после обрезки обе даты совпали, вторая не добавляется.
    Каждая дата проверяется по дате окончания отдельно.
    """
    dates: List[date] = []
    day = start_date.day
    offset = 14 if day == 1 else 15

    for month in range(1, 13):
        last_day = monthrange(year, month)[1]

        first_day = min(day, last_day)
        first = date(year, month, first_day)
        if not is_beyond_end_date(first, end_date):
            dates.append(first)

        second_day = min(day + offset, last_day)
        if second_day != first_day:
            second = date(year, month, second_day)
            if not is_beyond_end_date(second, end_date):
                dates.append(second)

    return sorted(dates)


def generate_once_only_dates(year: int, start_date: date, end_date: DateLike = None) -> List[date]:
    """Однократная дата: дата начала, если она в целевом году."""
    if start_date.year == year and not is_beyond_end_date(start_date, end_date):
        return [start_date]
    return []


_GENERATORS: Dict[RecurrenceRule, Callable[[int, date, DateLike], List[date]]] = {
    RecurrenceRule.DAILY: generate_daily_dates,
    RecurrenceRule.WEEKLY: generate_weekly_dates,
    RecurrenceRule.BI_WEEKLY: generate_bi_weekly_dates,
    RecurrenceRule.MONTHLY: generate_monthly_dates,
    RecurrenceRule.SEMI_MONTHLY: generate_semi_monthly_dates,
    RecurrenceRule.ONCE_ONLY: generate_once_only_dates,
}


def generate_occurrence_dates(
    year: int,
    start_date: DateLike,
    end_date: DateLike,
    rule: Optional[RecurrenceRule]
) -> List[date]:
    """
    Генерирует даты вхождений периодической статьи на год.

    Args:
        year: Целевой год
        start_date: Дата начала (date или ISO строка)
        end_date: Дата окончания включительно (date, ISO строка или None)
        rule: Правило повторения

    Returns:
        Список дат по возрастанию. Пустой список, если дата начала
        не разбирается или правило неизвестно.

    Example:
        >>> generate_occurrence_dates(2024, "2024-03-15", None, RecurrenceRule.ONCE_ONLY)
        [datetime.date(2024, 3, 15)]
    """
    start = parse_iso_date(start_date)
    if start is None:
        logger.warning(f"Неразбираемая дата начала {start_date!r}, генерация пропущена")
        return []

    generator = _GENERATORS.get(rule) if rule is not None else None
    if generator is None:
        return []

    return generator(year, start, parse_iso_date(end_date))
