"""
Сервис управления категориями расходов.

Предоставляет функции для работы со справочником категорий:
- Получение списка категорий (по умолчанию только активные)
- Создание и переименование категорий
- Мягкое удаление (статус OBSOLETE)
- Создание предопределённых категорий при первом запуске
"""

import logging
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError, IntegrityError

from budget_planner.models import ExpenseCategoryDB, ExpenseCategoryCreate, RecordStatus
from budget_planner.utils.exceptions import NotFoundError
from budget_planner.utils.validation import validate_uuid_format

# Настройка логирования
logger = logging.getLogger(__name__)

DEFAULT_EXPENSE_CATEGORIES = [
    "Продукты",
    "Жильё",
    "Коммунальные услуги",
    "Транспорт",
    "Связь",
    "Здоровье",
    "Прочие расходы",
]


def init_default_categories(session: Session) -> None:
    """
    Создаёт предопределённые категории расходов при первом запуске.
    """
    try:
        existing_count = session.query(ExpenseCategoryDB).count()
        if existing_count > 0:
            logger.info(f"Категории уже существуют ({existing_count} шт.), пропускаем инициализацию")
            return

        for name in DEFAULT_EXPENSE_CATEGORIES:
            session.add(ExpenseCategoryDB(name=name))
            logger.debug(f"Добавлена категория расхода: {name}")

        session.commit()
        logger.info(f"Успешно создано {len(DEFAULT_EXPENSE_CATEGORIES)} предопределённых категорий")

    except SQLAlchemyError as e:
        logger.error(f"Ошибка при инициализации категорий: {e}")
        session.rollback()
        raise


def get_all_categories(session: Session, active_only: bool = True) -> List[ExpenseCategoryDB]:
    """
    Получает список категорий расходов, отсортированный по названию.

    Args:
        session: Активная сессия БД
        active_only: Только категории со статусом ACTIVE
    """
    try:
        query = session.query(ExpenseCategoryDB)
        if active_only:
            query = query.filter(ExpenseCategoryDB.status == RecordStatus.ACTIVE)
        return query.order_by(ExpenseCategoryDB.name).all()

    except SQLAlchemyError as e:
        logger.error(f"Ошибка при получении категорий: {e}")
        raise


def get_category(session: Session, category_id: str) -> ExpenseCategoryDB:
    """
    Получает категорию по ID.

    Raises:
        NotFoundError: Если категория не найдена
    """
    validate_uuid_format(category_id, "category_id")
    category = session.query(ExpenseCategoryDB).filter_by(id=category_id).first()
    if not category:
        error_msg = f"Категория с ID {category_id} не найдена"
        logger.error(error_msg)
        raise NotFoundError(error_msg)
    return category


def create_category(session: Session, data: ExpenseCategoryCreate) -> ExpenseCategoryDB:
    """
    Создаёт новую категорию расходов.

    Raises:
        ValueError: Если категория с таким названием уже существует
        SQLAlchemyError: При ошибках работы с БД
    """
    name = data.name
    existing = session.query(ExpenseCategoryDB).filter_by(name=name).first()
    if existing:
        error_msg = f"Категория с названием '{name}' уже существует"
        logger.error(error_msg)
        raise ValueError(error_msg)

    try:
        category = ExpenseCategoryDB(name=name)
        session.add(category)
        session.commit()
        session.refresh(category)

        logger.info(f"Создана категория расходов '{name}' с ID {category.id}")
        return category

    except IntegrityError as e:
        session.rollback()
        error_msg = f"Категория с названием '{name}' уже существует (constraint violation)"
        logger.error(f"{error_msg}: {e}")
        raise ValueError(error_msg)

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Ошибка при создании категории '{name}': {e}")
        raise


def rename_category(session: Session, category_id: str, data: ExpenseCategoryCreate) -> ExpenseCategoryDB:
    """
    Переименовывает категорию расходов.

    Raises:
        NotFoundError: Если категория не найдена
        ValueError: Если название уже занято другой категорией
    """
    category = get_category(session, category_id)

    duplicate = session.query(ExpenseCategoryDB).filter(
        ExpenseCategoryDB.name == data.name,
        ExpenseCategoryDB.id != category_id
    ).first()
    if duplicate:
        error_msg = f"Категория с названием '{data.name}' уже существует"
        logger.error(error_msg)
        raise ValueError(error_msg)

    try:
        old_name = category.name
        category.name = data.name
        session.commit()
        session.refresh(category)

        logger.info(f"Категория {category_id} переименована: '{old_name}' -> '{data.name}'")
        return category

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Ошибка при переименовании категории {category_id}: {e}")
        raise


def obsolete_category(session: Session, category_id: str) -> bool:
    """
    Помечает категорию удалённой (статус OBSOLETE).

    Расходы, ссылающиеся на категорию, сохраняют ссылку.
    """
    category = get_category(session, category_id)

    try:
        category.status = RecordStatus.OBSOLETE
        session.commit()
        logger.info(f"Категория {category_id} '{category.name}' помечена удалённой")
        return True

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Ошибка при удалении категории {category_id}: {e}")
        raise
