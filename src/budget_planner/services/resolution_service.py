"""
Сервис целей (обещаний) на год.

Цель может быть общей (person_id = None) или принадлежать человеку.
Удаление физическое.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from budget_planner.models.models import ResolutionDB, ResolutionCreate, PersonDB
from budget_planner.utils.exceptions import NotFoundError
from budget_planner.utils.validation import validate_uuid_format

logger = logging.getLogger(__name__)


@dataclass
class ResolutionStats:
    """Статистика выполнения целей за год."""
    year: int
    total: int
    completed: int
    completion_rate: Decimal
    by_person: Dict[Optional[str], List[ResolutionDB]] = field(default_factory=dict)


def get_resolutions_by_year(session: Session, year: int) -> List[ResolutionDB]:
    """Цели за год в порядке создания."""
    try:
        return (
            session.query(ResolutionDB)
            .filter(ResolutionDB.year == year)
            .order_by(ResolutionDB.created_at)
            .all()
        )
    except SQLAlchemyError as e:
        logger.error(f"Ошибка при получении целей за {year} год: {e}")
        raise


def get_resolution(session: Session, resolution_id: str) -> ResolutionDB:
    validate_uuid_format(resolution_id, "resolution_id")
    resolution = session.query(ResolutionDB).filter_by(id=resolution_id).first()
    if not resolution:
        raise NotFoundError(f"Цель {resolution_id} не найдена")
    return resolution


def create_resolution(session: Session, data: ResolutionCreate) -> ResolutionDB:
    """
    Создаёт цель на год.

    Raises:
        NotFoundError: Если указанный человек не найден
    """
    if data.person_id is not None and not session.query(PersonDB).filter_by(id=data.person_id).first():
        error_msg = f"Человек с ID {data.person_id} не найден"
        logger.error(error_msg)
        raise NotFoundError(error_msg)

    try:
        resolution = ResolutionDB(
            title=data.title,
            year=data.year,
            person_id=data.person_id,
            is_completed=False,
        )
        session.add(resolution)
        session.commit()
        session.refresh(resolution)

        logger.info(f"Создана цель на {data.year} год: '{data.title}'")
        return resolution

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Ошибка при создании цели: {e}")
        raise


def set_resolution_completed(session: Session, resolution_id: str, completed: bool) -> ResolutionDB:
    """Отмечает цель выполненной или снимает отметку."""
    resolution = get_resolution(session, resolution_id)

    try:
        resolution.is_completed = completed
        session.commit()
        session.refresh(resolution)
        logger.info(f"Цель {resolution_id} {'выполнена' if completed else 'снова активна'}")
        return resolution

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Ошибка при обновлении цели {resolution_id}: {e}")
        raise


def delete_resolution(session: Session, resolution_id: str) -> bool:
    """Удаляет цель из БД."""
    resolution = get_resolution(session, resolution_id)

    try:
        session.delete(resolution)
        session.commit()
        logger.info(f"Удалена цель {resolution_id}")
        return True

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Ошибка при удалении цели {resolution_id}: {e}")
        raise


def get_resolution_stats(session: Session, year: int) -> ResolutionStats:
    """
    Статистика целей за год: всего, выполнено, процент выполнения
    (один знак после запятой) и группировка по человеку.
    """
    resolutions = get_resolutions_by_year(session, year)
    total = len(resolutions)
    completed = sum(1 for r in resolutions if r.is_completed)

    rate = Decimal("0")
    if total:
        rate = (Decimal(completed) / Decimal(total) * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

    by_person: Dict[Optional[str], List[ResolutionDB]] = {}
    for resolution in resolutions:
        by_person.setdefault(resolution.person_id, []).append(resolution)

    return ResolutionStats(year=year, total=total, completed=completed, completion_rate=rate, by_person=by_person)
