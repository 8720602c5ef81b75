"""
Сервис управления периодическими статьями доходов и расходов.

Предоставляет функции для работы со статьями:
- Создание статей с валидацией ссылок на справочники
- Обновление статей (поля расписания заблокированы после первого
  подтверждённого вхождения)
- Мягкое удаление (статус OBSOLETE, история вхождений сохраняется)
- Получение списка статей с фильтрацией
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from budget_planner.models.models import (
    RecurringItemDB,
    RecurringItemCreate,
    OccurrenceDB,
    ExpenseCategoryDB,
    PersonDB,
)
from budget_planner.models.enums import ItemKind, OccurrenceStatus, RecordStatus
from budget_planner.utils.exceptions import BusinessLogicError, NotFoundError
from budget_planner.utils.validation import validate_uuid_format

# Настройка логирования
logger = logging.getLogger(__name__)

# Поля, от которых зависит генерация вхождений
SCHEDULE_FIELDS = ("amount", "start_date", "end_date", "recurrence_code")


def _validate_references(session: Session, data: RecurringItemCreate) -> None:
    """Проверяет ссылки на категорию и человека с учётом вида статьи (Fail Fast)."""
    if data.category_id is not None:
        if data.kind != ItemKind.EXPENSE:
            raise ValueError("Категория указывается только для расходов")
        category = session.query(ExpenseCategoryDB).filter_by(id=data.category_id).first()
        if not category:
            error_msg = f"Категория с ID {data.category_id} не найдена"
            logger.error(error_msg)
            raise NotFoundError(error_msg)
        if category.status != RecordStatus.ACTIVE:
            raise BusinessLogicError(f"Категория '{category.name}' удалена")

    if data.person_id is not None:
        if data.kind != ItemKind.INCOME:
            raise ValueError("Получатель указывается только для доходов")
        person = session.query(PersonDB).filter_by(id=data.person_id).first()
        if not person:
            error_msg = f"Человек с ID {data.person_id} не найден"
            logger.error(error_msg)
            raise NotFoundError(error_msg)


def create_recurring_item(session: Session, data: RecurringItemCreate) -> RecurringItemDB:
    """
    Создаёт периодическую статью дохода или расхода.

    Вхождения не создаются: их материализует синхронизатор расписания
    при генерации года.

    Args:
        session: Активная сессия БД
        data: Данные статьи (Pydantic модель)

    Returns:
        Созданный объект RecurringItemDB с заполненным id

    Raises:
        NotFoundError: Если категория или человек не найдены
        ValueError: Если ссылка не соответствует виду статьи
        SQLAlchemyError: При ошибках работы с БД

    Example:
        >>> with get_db_session() as session:
        ...     salary = create_recurring_item(session, RecurringItemCreate(
        ...         kind=ItemKind.INCOME,
        ...         name="Зарплата",
        ...         amount=Decimal("50000.00"),
        ...         start_date=date(2024, 1, 15),
        ...         recurrence_code=2,
        ...     ))
    """
    _validate_references(session, data)

    try:
        item = RecurringItemDB(
            kind=data.kind,
            name=data.name,
            amount=data.amount,
            start_date=data.start_date,
            end_date=data.end_date,
            recurrence_code=data.recurrence_code,
            description=data.description,
            note=data.note,
            category_id=data.category_id,
            person_id=data.person_id,
            status=RecordStatus.ACTIVE,
        )
        session.add(item)
        session.commit()
        session.refresh(item)

        logger.info(
            f"Создана статья {data.kind.value} '{data.name}' ID {item.id}, "
            f"сумма {data.amount}, код повторения {data.recurrence_code}"
        )
        return item

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Ошибка при создании статьи '{data.name}': {e}")
        raise


def get_recurring_item(session: Session, item_id: str) -> RecurringItemDB:
    """
    Получает статью по ID.

    Raises:
        NotFoundError: Если статья не найдена
    """
    validate_uuid_format(item_id, "item_id")
    item = session.query(RecurringItemDB).filter_by(id=item_id).first()
    if not item:
        error_msg = f"Статья с ID {item_id} не найдена"
        logger.error(error_msg)
        raise NotFoundError(error_msg)
    return item


def has_confirmed_occurrences(session: Session, item_id: str) -> bool:
    """Есть ли у статьи подтверждённые вхождения."""
    return session.query(OccurrenceDB.id).filter(
        OccurrenceDB.item_id == item_id,
        OccurrenceDB.status == OccurrenceStatus.CONFIRMED
    ).first() is not None


def update_recurring_item(
    session: Session,
    item_id: str,
    data: RecurringItemCreate
) -> RecurringItemDB:
    """
    Обновляет периодическую статью.

    После первого подтверждённого вхождения поля расписания (сумма, даты,
    код повторения) изменить нельзя. Описательные поля меняются всегда.
    Неподтверждённые вхождения пересчитываются при следующей генерации года.

    Raises:
        NotFoundError: Если статья не найдена
        BusinessLogicError: Если статья удалена, меняется вид статьи или
            поля расписания при наличии подтверждённых вхождений
    """
    item = get_recurring_item(session, item_id)

    if item.status == RecordStatus.OBSOLETE:
        raise BusinessLogicError(f"Статья '{item.name}' удалена и не может быть изменена")
    if item.kind != data.kind:
        raise BusinessLogicError("Нельзя изменить вид статьи (доход/расход)")

    _validate_references(session, data)

    changed_schedule = [name for name in SCHEDULE_FIELDS if getattr(item, name) != getattr(data, name)]
    if changed_schedule and has_confirmed_occurrences(session, item_id):
        raise BusinessLogicError(
            f"У статьи '{item.name}' есть подтверждённые вхождения, "
            f"поля {', '.join(changed_schedule)} изменить нельзя"
        )

    try:
        item.name = data.name
        item.amount = data.amount
        item.start_date = data.start_date
        item.end_date = data.end_date
        item.recurrence_code = data.recurrence_code
        item.description = data.description
        item.note = data.note
        item.category_id = data.category_id
        item.person_id = data.person_id

        session.commit()
        session.refresh(item)

        logger.info(f"Обновлена статья ID {item_id}, новая сумма {data.amount}")
        return item

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Ошибка при обновлении статьи ID {item_id}: {e}")
        raise


def obsolete_recurring_item(session: Session, item_id: str) -> bool:
    """
    Помечает статью удалённой (статус OBSOLETE).

    Статья перестаёт участвовать в генерации, все вхождения (включая
    подтверждённые) остаются как история.
    """
    item = get_recurring_item(session, item_id)

    try:
        item.status = RecordStatus.OBSOLETE
        session.commit()
        logger.info(f"Статья ID {item_id} '{item.name}' помечена удалённой")
        return True

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Ошибка при удалении статьи ID {item_id}: {e}")
        raise


def get_recurring_items(
    session: Session,
    kind: Optional[ItemKind] = None,
    active_only: bool = True
) -> List[RecurringItemDB]:
    """
    Получает список статей с фильтрацией.

    Args:
        session: Активная сессия БД
        kind: Вид статьи. Если None, возвращаются оба вида.
        active_only: Только статьи со статусом ACTIVE

    Returns:
        Список статей, отсортированный по дате начала
    """
    try:
        query = session.query(RecurringItemDB)

        if active_only:
            query = query.filter(RecurringItemDB.status == RecordStatus.ACTIVE)
        if kind is not None:
            query = query.filter(RecurringItemDB.kind == kind)

        items = query.order_by(RecurringItemDB.start_date).all()

        logger.info(
            f"Получено {len(items)} статей "
            f"({'только активные' if active_only else 'все'})"
            f"{f', вид {kind.value}' if kind else ''}"
        )
        return items

    except SQLAlchemyError as e:
        logger.error(f"Ошибка при получении списка статей: {e}")
        raise
