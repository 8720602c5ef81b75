"""
Репозиторий расписания: доступ к хранилищу для синхронизатора.

Синхронизатор получает репозиторий явно (внедрение зависимости) и не
создаёт подключений к БД сам. Реализация на SQLAlchemy вставляет
вхождения с политикой "ON CONFLICT (item_id, occurrence_date) DO NOTHING"
для SQLite и PostgreSQL.
"""

import logging
import uuid
from datetime import date, datetime
from typing import List, Protocol, Sequence, Tuple

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from budget_planner.models.models import (
    RecurringItemDB,
    OccurrenceDB,
    RecurringItem,
    OccurrenceCreate,
)
from budget_planner.models.enums import ItemKind, OccurrenceStatus, RecordStatus
from budget_planner.utils.exceptions import DatabaseError

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class ScheduleRepository(Protocol):
    """
    Интерфейс хранилища, необходимый синхронизатору расписания.

    Каждый метод - отдельная единица работы. При ошибке хранилища метод
    выбрасывает DatabaseError.
    """

    def list_active_items(self, kind: ItemKind) -> List[RecurringItem]:
        """Активные (не удалённые) статьи указанного вида с датой начала."""
        ...

    def delete_unconfirmed(self, item_id: str, year: int) -> int:
        """Удаляет неподтверждённые вхождения статьи за год, возвращает их число."""
        ...

    def insert_ignoring_duplicates(self, rows: Sequence[OccurrenceCreate]) -> int:
        """Вставляет вхождения, пропуская конфликты по (item_id, дата)."""
        ...


def year_bounds(year: int) -> Tuple[date, date]:
    """Первый и последний день года."""
    return date(year, 1, 1), date(year, 12, 31)


class SqlAlchemyScheduleRepository:
    """
    Реализация ScheduleRepository поверх сессии SQLAlchemy.

    Args:
        session: Активная сессия БД
    """

    def __init__(self, session: Session):
        self.session = session

    def list_active_items(self, kind: ItemKind) -> List[RecurringItem]:
        try:
            rows = (
                self.session.query(RecurringItemDB)
                .filter(
                    RecurringItemDB.kind == kind,
                    RecurringItemDB.status == RecordStatus.ACTIVE,
                    RecurringItemDB.start_date.isnot(None),
                )
                .order_by(RecurringItemDB.start_date, RecurringItemDB.created_at)
                .all()
            )
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Ошибка при получении статей вида {kind.value}: {e}")
            raise DatabaseError(f"Не удалось получить статьи вида {kind.value}") from e

        return [RecurringItem.model_validate(row) for row in rows]

    def delete_unconfirmed(self, item_id: str, year: int) -> int:
        first_day, last_day = year_bounds(year)
        try:
            deleted = (
                self.session.query(OccurrenceDB)
                .filter(
                    OccurrenceDB.item_id == item_id,
                    OccurrenceDB.status == OccurrenceStatus.UNCONFIRMED,
                    OccurrenceDB.occurrence_date >= first_day,
                    OccurrenceDB.occurrence_date <= last_day,
                )
                .delete(synchronize_session=False)
            )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Ошибка при удалении вхождений статьи {item_id} за {year}: {e}")
            raise DatabaseError(f"Не удалось удалить вхождения статьи {item_id}") from e

        logger.debug(f"Удалено {deleted} неподтверждённых вхождений статьи {item_id} за {year}")
        return deleted

    def insert_ignoring_duplicates(self, rows: Sequence[OccurrenceCreate]) -> int:
        if not rows:
            return 0

        now = datetime.now()
        values = [
            {**row.model_dump(), "id": str(uuid.uuid4()), "created_at": now, "updated_at": now}
            for row in rows
        ]
        dialect = self.session.get_bind().dialect.name

        try:
            if dialect in _UPSERT_DIALECTS:
                statement = _UPSERT_DIALECTS[dialect](OccurrenceDB).values(values).on_conflict_do_nothing(
                    index_elements=[OccurrenceDB.item_id, OccurrenceDB.occurrence_date]
                )
                result = self.session.execute(statement)
                # rowcount = число реально вставленных строк
                inserted = result.rowcount if result.rowcount is not None and result.rowcount >= 0 else len(values)
            else:
                inserted = self._insert_missing(values)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Ошибка при вставке {len(values)} вхождений: {e}")
            raise DatabaseError("Не удалось вставить вхождения") from e

        logger.debug(f"Вставлено {inserted} из {len(values)} вхождений")
        return inserted

    def _insert_missing(self, values: List[dict]) -> int:
        """Вставка для диалектов без ON CONFLICT: пропускаем существующие пары."""
        inserted = 0
        for value in values:
            existing = self.session.query(OccurrenceDB.id).filter_by(
                item_id=value["item_id"],
                occurrence_date=value["occurrence_date"]
            ).first()
            if not existing:
                self.session.add(OccurrenceDB(**value))
                inserted += 1
        return inserted
