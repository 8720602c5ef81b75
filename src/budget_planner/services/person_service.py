"""
Сервис справочника людей (получатели доходов, владельцы целей).
"""

import logging
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from budget_planner.models import PersonDB, PersonCreate
from budget_planner.utils.exceptions import NotFoundError
from budget_planner.utils.validation import validate_uuid_format

logger = logging.getLogger(__name__)


def get_all_people(session: Session) -> List[PersonDB]:
    """Список людей, отсортированный по имени."""
    try:
        return session.query(PersonDB).order_by(PersonDB.name).all()
    except SQLAlchemyError as e:
        logger.error(f"Ошибка при получении списка людей: {e}")
        raise


def get_person(session: Session, person_id: str) -> PersonDB:
    validate_uuid_format(person_id, "person_id")
    person = session.query(PersonDB).filter_by(id=person_id).first()
    if not person:
        error_msg = f"Человек с ID {person_id} не найден"
        logger.error(error_msg)
        raise NotFoundError(error_msg)
    return person


def create_person(session: Session, data: PersonCreate) -> PersonDB:
    """
    Добавляет человека в справочник.

    Raises:
        ValueError: Если имя уже занято
    """
    if session.query(PersonDB).filter_by(name=data.name).first():
        error_msg = f"Человек с именем '{data.name}' уже существует"
        logger.error(error_msg)
        raise ValueError(error_msg)

    try:
        person = PersonDB(name=data.name)
        session.add(person)
        session.commit()
        session.refresh(person)
        logger.info(f"Добавлен человек '{data.name}' с ID {person.id}")
        return person

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Ошибка при добавлении человека '{data.name}': {e}")
        raise
