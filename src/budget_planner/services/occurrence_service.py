"""
Сервис работы с вхождениями периодических статей.

Предоставляет функции:
- Получение вхождений за год или период с фильтром по виду статьи
- Подтверждение вхождения (доход получен / расход оплачен)
- Редактирование суммы вхождения

Подтверждение одностороннее: UNCONFIRMED -> CONFIRMED.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from budget_planner.models.models import OccurrenceDB, OccurrenceUpdate, RecurringItemDB
from budget_planner.models.enums import ItemKind, OccurrenceStatus
from budget_planner.utils.exceptions import BusinessLogicError, NotFoundError
from budget_planner.utils.validation import validate_uuid_format

logger = logging.getLogger(__name__)


def get_occurrences_by_date_range(
    session: Session,
    start_date: date,
    end_date: date,
    kind: Optional[ItemKind] = None
) -> List[OccurrenceDB]:
    """
    Получает вхождения за период (включительно), отсортированные по дате.

    Args:
        session: Активная сессия БД
        start_date: Начало периода
        end_date: Конец периода
        kind: Вид статьи. Если None, возвращаются оба вида.
    """
    try:
        query = session.query(OccurrenceDB).filter(
            OccurrenceDB.occurrence_date >= start_date,
            OccurrenceDB.occurrence_date <= end_date
        )
        if kind is not None:
            query = query.join(RecurringItemDB, OccurrenceDB.item_id == RecurringItemDB.id).filter(
                RecurringItemDB.kind == kind
            )
        return query.order_by(OccurrenceDB.occurrence_date, OccurrenceDB.created_at).all()

    except SQLAlchemyError as e:
        logger.error(f"Ошибка при получении вхождений за период {start_date} - {end_date}: {e}")
        raise


def get_occurrences_by_year(
    session: Session,
    year: int,
    kind: Optional[ItemKind] = None
) -> List[OccurrenceDB]:
    """Вхождения за календарный год."""
    return get_occurrences_by_date_range(session, date(year, 1, 1), date(year, 12, 31), kind)


def get_occurrence(session: Session, occurrence_id: str) -> OccurrenceDB:
    validate_uuid_format(occurrence_id, "occurrence_id")
    occurrence = session.query(OccurrenceDB).filter_by(id=occurrence_id).first()
    if not occurrence:
        raise NotFoundError(f"Вхождение {occurrence_id} не найдено")
    return occurrence


def confirm_occurrence(
    session: Session,
    occurrence_id: str,
    amount: Optional[Decimal] = None,
    confirmed_date: Optional[date] = None
) -> OccurrenceDB:
    """
    Подтверждает вхождение: доход получен или расход оплачен.

    Подтверждённое вхождение больше не удаляется при генерации года.

    Args:
        session: Активная сессия БД
        occurrence_id: ID вхождения (UUID)
        amount: Фактическая сумма (если отличается от плановой)
        confirmed_date: Дата подтверждения (по умолчанию сегодня)

    Returns:
        Обновлённое вхождение

    Raises:
        NotFoundError: Если вхождение не найдено
        BusinessLogicError: Если вхождение уже подтверждено
    """
    occurrence = get_occurrence(session, occurrence_id)

    if occurrence.status == OccurrenceStatus.CONFIRMED:
        raise BusinessLogicError(f"Вхождение {occurrence_id} уже подтверждено")
    if amount is not None and amount <= 0:
        raise ValueError("Сумма должна быть положительной")

    try:
        if amount is not None:
            occurrence.amount = amount
        occurrence.status = OccurrenceStatus.CONFIRMED
        occurrence.confirmed_date = confirmed_date or date.today()

        session.commit()
        session.refresh(occurrence)

        logger.info(f"Подтверждено вхождение {occurrence_id} на {occurrence.occurrence_date}, сумма {occurrence.amount}")
        return occurrence

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Ошибка при подтверждении вхождения {occurrence_id}: {e}")
        raise


def update_occurrence(session: Session, occurrence_id: str, data: OccurrenceUpdate) -> OccurrenceDB:
    """
    Редактирует сумму и/или подтверждает вхождение.

    Raises:
        NotFoundError: Если вхождение не найдено
        BusinessLogicError: При попытке снять подтверждение
    """
    occurrence = get_occurrence(session, occurrence_id)

    if data.confirmed is False and occurrence.status == OccurrenceStatus.CONFIRMED:
        raise BusinessLogicError("Подтверждённое вхождение нельзя вернуть в неподтверждённое")

    if data.confirmed and occurrence.status != OccurrenceStatus.CONFIRMED:
        return confirm_occurrence(session, occurrence_id, amount=data.amount)

    try:
        if data.amount is not None:
            occurrence.amount = data.amount
        session.commit()
        session.refresh(occurrence)

        logger.info(f"Обновлено вхождение {occurrence_id}, сумма {occurrence.amount}")
        return occurrence

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Ошибка при обновлении вхождения {occurrence_id}: {e}")
        raise
