"""
Модуль перечислений (enums) для Budget Planner.

Содержит все Enum классы, используемые в моделях данных, а также таблицы
соответствия числовых кодов повторения для доходов и расходов.
"""

from enum import Enum
from typing import Dict, Optional


class ItemKind(str, Enum):
    """
    Вид периодической статьи.

    Attributes:
        INCOME: Доход (поступление средств)
        EXPENSE: Расход (трата средств)
    """
    INCOME = "income"
    EXPENSE = "expense"


class RecurrenceRule(str, Enum):
    """
    Правило повторения периодической статьи.

    Attributes:
        MONTHLY: Раз в месяц (день месяца из даты начала)
        SEMI_MONTHLY: Дважды в месяц (день начала и +15 дней)
        WEEKLY: Каждые 7 дней
        DAILY: Каждый день
        BI_WEEKLY: Каждые 14 дней с выравниванием по дню недели
        ONCE_ONLY: Однократно в дату начала
    """
    MONTHLY = "monthly"
    SEMI_MONTHLY = "semi_monthly"
    WEEKLY = "weekly"
    DAILY = "daily"
    BI_WEEKLY = "bi_weekly"
    ONCE_ONLY = "once_only"


class OccurrenceStatus(str, Enum):
    """
    Статус вхождения периодической статьи.

    Attributes:
        UNCONFIRMED: Сгенерировано, ещё не получено/не оплачено
        CONFIRMED: Отмечено как полученное/оплаченное (постоянная история)
    """
    UNCONFIRMED = "unconfirmed"
    CONFIRMED = "confirmed"


class RecordStatus(str, Enum):
    """
    Статус записи справочника или статьи (мягкое удаление).

    Attributes:
        ACTIVE: Запись видна и участвует в генерации
        OBSOLETE: Запись помечена удалённой, сохраняется для истории
    """
    ACTIVE = "active"
    OBSOLETE = "obsolete"


# Коды периодов дохода (совместимы с внешним CRUD слоем)
INCOME_PERIOD_CODES: Dict[int, RecurrenceRule] = {
    1: RecurrenceRule.MONTHLY,
    2: RecurrenceRule.SEMI_MONTHLY,
    3: RecurrenceRule.WEEKLY,
    4: RecurrenceRule.DAILY,
}

# Коды повторения расхода. Таблица отличается от доходной: код 4 = однократно
EXPENSE_OCCURRENCE_CODES: Dict[int, RecurrenceRule] = {
    1: RecurrenceRule.MONTHLY,
    2: RecurrenceRule.SEMI_MONTHLY,
    3: RecurrenceRule.WEEKLY,
    4: RecurrenceRule.ONCE_ONLY,
    5: RecurrenceRule.BI_WEEKLY,
}

RECURRENCE_CODES_BY_KIND: Dict[ItemKind, Dict[int, RecurrenceRule]] = {
    ItemKind.INCOME: INCOME_PERIOD_CODES,
    ItemKind.EXPENSE: EXPENSE_OCCURRENCE_CODES,
}


def resolve_recurrence_rule(kind: Optional[ItemKind], code: Optional[int]) -> Optional[RecurrenceRule]:
    """
    Переводит числовой код повторения в правило с учётом вида статьи.

    Таблицы кодов доходов и расходов различаются: код 4 у дохода - DAILY,
    у расхода - ONCE_ONLY.

    Args:
        kind: Вид статьи
        code: Числовой код (1-5)

    Returns:
        Правило повторения или None для неизвестного кода
    """
    if kind is None or code is None:
        return None
    return RECURRENCE_CODES_BY_KIND[ItemKind(kind)].get(code)
