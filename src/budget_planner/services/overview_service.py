"""
Сервис сводных показателей бюджета.

Фактические итоги (полученные доходы, оплаченные расходы, внесённые
накопления) за месяц или год и ожидаемые суммы (неподтверждённые
вхождения) за неделю или месяц.

Вхождения удалённых статей учитываются как история.
"""

import calendar
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from budget_planner.models.models import OccurrenceDB, RecurringItemDB, SavingDB
from budget_planner.models.enums import ItemKind, OccurrenceStatus, RecordStatus

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass
class PeriodTotals:
    """Фактические итоги за период."""
    period_start: date
    period_end: date
    income: Decimal
    expense: Decimal
    savings: Decimal

    @property
    def balance(self) -> Decimal:
        return self.income - self.expense - self.savings

    @property
    def savings_rate(self) -> Decimal:
        """Доля накоплений от дохода в процентах."""
        if not self.income:
            return ZERO
        return self.savings / self.income * 100


@dataclass
class ExpectedTotals:
    """Ожидаемые (ещё не подтверждённые) суммы за период."""
    period_start: date
    period_end: date
    income: Decimal
    expense: Decimal
    unpaid_savings: Decimal


def _month_bounds(reference_date: date) -> Tuple[date, date]:
    last_day = calendar.monthrange(reference_date.year, reference_date.month)[1]
    return reference_date.replace(day=1), reference_date.replace(day=last_day)


def _week_bounds(reference_date: date) -> Tuple[date, date]:
    # Неделя начинается с воскресенья
    start = reference_date - timedelta(days=(reference_date.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def _sum_occurrences(
    session: Session,
    kind: ItemKind,
    status: OccurrenceStatus,
    start_date: date,
    end_date: date
) -> Decimal:
    total = (
        session.query(func.coalesce(func.sum(OccurrenceDB.amount), 0))
        .select_from(OccurrenceDB)
        .join(RecurringItemDB, OccurrenceDB.item_id == RecurringItemDB.id)
        .filter(
            RecurringItemDB.kind == kind,
            OccurrenceDB.status == status,
            OccurrenceDB.occurrence_date >= start_date,
            OccurrenceDB.occurrence_date <= end_date,
        )
        .scalar()
    )
    return Decimal(str(total or 0))


def _sum_savings(session: Session, year: int, month: Optional[int], is_paid: bool) -> Decimal:
    query = session.query(func.coalesce(func.sum(SavingDB.amount), 0)).filter(
        SavingDB.year == year,
        SavingDB.is_paid == is_paid,
        SavingDB.status == RecordStatus.ACTIVE,
    )
    if month is not None:
        query = query.filter(SavingDB.month == month)
    return Decimal(str(query.scalar() or 0))


def get_period_totals(session: Session, reference_date: date, period: str = "monthly") -> PeriodTotals:
    """
    Фактические итоги за месяц или год, содержащий reference_date.

    Args:
        session: Активная сессия БД
        reference_date: Любая дата внутри периода
        period: "monthly" или "yearly"

    Raises:
        ValueError: Если период неизвестен
    """
    if period == "monthly":
        start, end = _month_bounds(reference_date)
        month = reference_date.month
    elif period == "yearly":
        start, end = date(reference_date.year, 1, 1), date(reference_date.year, 12, 31)
        month = None
    else:
        raise ValueError(f"Неизвестный период: {period}")

    try:
        totals = PeriodTotals(
            period_start=start,
            period_end=end,
            income=_sum_occurrences(session, ItemKind.INCOME, OccurrenceStatus.CONFIRMED, start, end),
            expense=_sum_occurrences(session, ItemKind.EXPENSE, OccurrenceStatus.CONFIRMED, start, end),
            savings=_sum_savings(session, reference_date.year, month, is_paid=True),
        )
    except SQLAlchemyError as e:
        logger.error(f"Ошибка при расчёте итогов за период {start} - {end}: {e}")
        raise

    logger.debug(f"Итоги {start} - {end}: доход {totals.income}, расход {totals.expense}, накопления {totals.savings}")
    return totals


def get_expected_totals(session: Session, reference_date: date, period: str = "weekly") -> ExpectedTotals:
    """
    Ожидаемые суммы за неделю (с воскресенья) или месяц.

    Невнесённые накопления считаются только для месячного периода.

    Raises:
        ValueError: Если период неизвестен
    """
    if period == "weekly":
        start, end = _week_bounds(reference_date)
    elif period == "monthly":
        start, end = _month_bounds(reference_date)
    else:
        raise ValueError(f"Неизвестный период: {period}")

    try:
        unpaid = ZERO
        if period == "monthly":
            unpaid = _sum_savings(session, reference_date.year, reference_date.month, is_paid=False)

        return ExpectedTotals(
            period_start=start,
            period_end=end,
            income=_sum_occurrences(session, ItemKind.INCOME, OccurrenceStatus.UNCONFIRMED, start, end),
            expense=_sum_occurrences(session, ItemKind.EXPENSE, OccurrenceStatus.UNCONFIRMED, start, end),
            unpaid_savings=unpaid,
        )
    except SQLAlchemyError as e:
        logger.error(f"Ошибка при расчёте ожидаемых сумм за {start} - {end}: {e}")
        raise
