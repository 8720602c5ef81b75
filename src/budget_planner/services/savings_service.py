"""
Сервис управления накоплениями.

Ежемесячные взносы в накопления за год, отметка о внесении,
заём из накоплений и его возврат.

Правило займа: суммарно за год можно занять не больше половины
внесённых (is_paid) взносов.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from budget_planner.models.models import SavingDB, SavingCreate
from budget_planner.models.enums import RecordStatus
from budget_planner.utils.exceptions import BusinessLogicError, NotFoundError
from budget_planner.utils.validation import validate_uuid_format

logger = logging.getLogger(__name__)

# Целевая сумма накоплений для индикатора прогресса
SAVINGS_THRESHOLD = Decimal("100000")
ZERO = Decimal("0")


@dataclass
class SavingsSummary:
    """Сводка накоплений за год."""
    year: int
    total_saved: Decimal
    total_borrowed: Decimal
    total_repaid: Decimal
    outstanding_borrowed: Decimal
    available: Decimal
    max_borrowable: Decimal
    remaining_borrowable: Decimal
    threshold_progress: Decimal

    @property
    def can_borrow_more(self) -> bool:
        return self.total_borrowed < self.max_borrowable


def get_savings_by_year(session: Session, year: int) -> List[SavingDB]:
    """Активные взносы за год, отсортированные по месяцу."""
    try:
        return (
            session.query(SavingDB)
            .filter(SavingDB.year == year, SavingDB.status == RecordStatus.ACTIVE)
            .order_by(SavingDB.month, SavingDB.created_at)
            .all()
        )
    except SQLAlchemyError as e:
        logger.error(f"Ошибка при получении накоплений за {year} год: {e}")
        raise


def get_saving(session: Session, saving_id: str) -> SavingDB:
    validate_uuid_format(saving_id, "saving_id")
    saving = session.query(SavingDB).filter_by(id=saving_id).first()
    if not saving:
        error_msg = f"Взнос с ID {saving_id} не найден"
        logger.error(error_msg)
        raise NotFoundError(error_msg)
    return saving


def create_saving(session: Session, data: SavingCreate) -> SavingDB:
    """Создаёт ежемесячный взнос в накопления."""
    try:
        saving = SavingDB(
            year=data.year,
            month=data.month,
            amount=data.amount,
            is_paid=data.is_paid,
            status=RecordStatus.ACTIVE,
        )
        session.add(saving)
        session.commit()
        session.refresh(saving)

        logger.info(f"Создан взнос {data.month:02d}.{data.year} на сумму {data.amount}")
        return saving

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Ошибка при создании взноса: {e}")
        raise


def update_saving(session: Session, saving_id: str, data: SavingCreate) -> SavingDB:
    """
    Обновляет взнос (месяц, год, сумма, признак внесения).

    Raises:
        NotFoundError: Если взнос не найден
        BusinessLogicError: Если взнос удалён
    """
    saving = get_saving(session, saving_id)
    if saving.status == RecordStatus.OBSOLETE:
        raise BusinessLogicError("Удалённый взнос нельзя изменить")

    try:
        saving.year = data.year
        saving.month = data.month
        saving.amount = data.amount
        saving.is_paid = data.is_paid
        session.commit()
        session.refresh(saving)

        logger.info(f"Обновлён взнос {saving_id}")
        return saving

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Ошибка при обновлении взноса {saving_id}: {e}")
        raise


def obsolete_saving(session: Session, saving_id: str) -> bool:
    """Помечает взнос удалённым (статус OBSOLETE)."""
    saving = get_saving(session, saving_id)

    try:
        saving.status = RecordStatus.OBSOLETE
        session.commit()
        logger.info(f"Взнос {saving_id} помечен удалённым")
        return True

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Ошибка при удалении взноса {saving_id}: {e}")
        raise


def summarize_savings(year: int, savings: List[SavingDB]) -> SavingsSummary:
    """
    Считает сводку по списку взносов одного года.

    Example:
        >>> summary = summarize_savings(2024, savings)
        >>> summary.max_borrowable == summary.total_saved / 2
        True
    """
    total_saved = sum((s.amount for s in savings if s.is_paid), ZERO)
    total_borrowed = sum((s.borrowed_amount or ZERO for s in savings), ZERO)
    total_repaid = sum((s.borrowed_amount_paid or ZERO for s in savings), ZERO)
    max_borrowable = total_saved / 2

    return SavingsSummary(
        year=year,
        total_saved=total_saved,
        total_borrowed=total_borrowed,
        total_repaid=total_repaid,
        outstanding_borrowed=total_borrowed - total_repaid,
        available=total_saved - total_borrowed,
        max_borrowable=max_borrowable,
        remaining_borrowable=max_borrowable - total_borrowed,
        threshold_progress=total_saved / SAVINGS_THRESHOLD * 100,
    )


def get_savings_summary(session: Session, year: int) -> SavingsSummary:
    """Сводка накоплений за год."""
    return summarize_savings(year, get_savings_by_year(session, year))


def borrow_from_saving(session: Session, saving_id: str, amount: Decimal) -> SavingDB:
    """
    Занимает сумму из внесённого взноса.

    Raises:
        ValueError: Если сумма не положительная
        BusinessLogicError: Если взнос не внесён или превышен лимит займа
    """
    if amount <= 0:
        raise ValueError("Сумма займа должна быть положительной")

    saving = get_saving(session, saving_id)
    if saving.status == RecordStatus.OBSOLETE:
        raise BusinessLogicError("Нельзя занять из удалённого взноса")
    if not saving.is_paid:
        raise BusinessLogicError("Занять можно только из внесённого взноса")

    summary = get_savings_summary(session, saving.year)
    if summary.total_borrowed + amount > summary.max_borrowable:
        raise BusinessLogicError(
            f"Нельзя занять {amount}. Доступно для займа: {summary.remaining_borrowable}"
        )

    try:
        saving.borrowed_amount = (saving.borrowed_amount or ZERO) + amount
        session.commit()
        session.refresh(saving)

        logger.info(f"Занято {amount} из взноса {saving_id}, всего занято {saving.borrowed_amount}")
        return saving

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Ошибка при займе из взноса {saving_id}: {e}")
        raise


def repay_saving(session: Session, saving_id: str, amount: Decimal) -> SavingDB:
    """
    Возвращает часть или весь заём из взноса.

    Сумма прибавляется к уже возвращённой, возврат сверх остатка долга
    не допускается.

    Raises:
        ValueError: Если сумма не положительная
        BusinessLogicError: Если из взноса ничего не занято или сумма больше остатка долга
    """
    if amount <= 0:
        raise ValueError("Сумма возврата должна быть положительной")

    saving = get_saving(session, saving_id)
    if not saving.borrowed_amount:
        raise BusinessLogicError("Из этого взноса ничего не занято")

    already_paid = saving.borrowed_amount_paid or ZERO
    outstanding = saving.borrowed_amount - already_paid
    if amount > outstanding:
        raise BusinessLogicError(
            f"Сумма возврата {amount} превышает остаток долга {outstanding}"
        )

    try:
        saving.borrowed_amount_paid = already_paid + amount
        session.commit()
        session.refresh(saving)

        logger.info(
            f"Возвращено {amount} по взносу {saving_id}, "
            f"остаток долга {saving.borrowed_amount - saving.borrowed_amount_paid}"
        )
        return saving

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Ошибка при возврате займа по взносу {saving_id}: {e}")
        raise
