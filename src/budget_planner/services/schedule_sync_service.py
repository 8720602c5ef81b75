"""
Сервис синхронизации расписания периодических статей на год.

Для каждой статьи (в порядке списка):
1. Удаляются неподтверждённые вхождения статьи за год
2. Генерируются даты вхождений (recurrence_service)
3. Вставляются новые неподтверждённые вхождения с суммой статьи,
   конфликты по (статья, дата) игнорируются

Подтверждённые вхождения (получено/оплачено) не удаляются и не
перезаписываются. Ошибка по одной статье логируется и не прерывает
обработку остальных, повторные попытки не выполняются.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from budget_planner.models.enums import ItemKind
from budget_planner.models.models import RecurringItem, OccurrenceCreate
from budget_planner.services.recurrence_service import generate_occurrence_dates
from budget_planner.services.schedule_repository import ScheduleRepository
from budget_planner.utils.exceptions import DatabaseError

logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    """
    Итог синхронизации года. Только для информации: вызывающая сторона
    показывает общий статус завершения независимо от частичных ошибок.
    """
    year: int
    items_processed: int = 0
    items_skipped: int = 0
    occurrences_deleted: int = 0
    occurrences_inserted: int = 0
    failed_item_ids: List[str] = field(default_factory=list)

    def merge(self, other: "SyncReport") -> None:
        self.items_processed += other.items_processed
        self.items_skipped += other.items_skipped
        self.occurrences_deleted += other.occurrences_deleted
        self.occurrences_inserted += other.occurrences_inserted
        self.failed_item_ids.extend(other.failed_item_ids)


def build_occurrence_rows(item: RecurringItem, year: int) -> List[OccurrenceCreate]:
    """
    Строит неподтверждённые вхождения статьи на год.

    Args:
        item: Периодическая статья
        year: Целевой год

    Returns:
        Список OccurrenceCreate по возрастанию даты
    """
    dates = generate_occurrence_dates(year, item.start_date, item.end_date, item.recurrence_rule)
    return [
        OccurrenceCreate(item_id=item.id, occurrence_date=occurrence_date, amount=item.amount)
        for occurrence_date in dates
    ]


class ScheduleSynchronizer:
    """
    Идемпотентная материализация вхождений периодических статей на год.

    Args:
        repository: Хранилище расписания (ScheduleRepository)

    Example:
        >>> with get_db_session() as session:
        ...     synchronizer = ScheduleSynchronizer(SqlAlchemyScheduleRepository(session))
        ...     synchronizer.generate_year(2024)
    """

    def __init__(self, repository: ScheduleRepository):
        self.repository = repository

    def generate_year(self, year: int) -> SyncReport:
        """
        Генерирует расписание доходов, затем расходов на год.

        Ошибка получения списка статей одного вида логируется,
        этот вид пропускается.
        """
        logger.info(f"Генерация расписания на {year} год")
        report = SyncReport(year=year)

        for kind in (ItemKind.INCOME, ItemKind.EXPENSE):
            try:
                items = self.repository.list_active_items(kind)
            except DatabaseError as e:
                logger.error(f"Не удалось получить статьи вида {kind.value}: {e}")
                continue
            report.merge(self.synchronize_items(items, year))

        logger.info(
            f"Расписание на {year} год сгенерировано: статей {report.items_processed}, "
            f"пропущено {report.items_skipped}, удалено {report.occurrences_deleted}, "
            f"вставлено {report.occurrences_inserted}, ошибок {len(report.failed_item_ids)}"
        )
        return report

    def synchronize_items(self, items: Iterable[RecurringItem], year: int) -> SyncReport:
        """
        Синхронизирует вхождения набора статей одного вида за год.

        Args:
            items: Периодические статьи
            year: Целевой год

        Returns:
            SyncReport с итогами по набору
        """
        report = SyncReport(year=year)
        for item in items:
            self._synchronize_item(item, year, report)
        return report

    def _synchronize_item(self, item: RecurringItem, year: int, report: SyncReport) -> None:
        # Удаление строго до вставки: иначе устаревшие строки подавят новые как дубликаты
        try:
            report.occurrences_deleted += self.repository.delete_unconfirmed(item.id, year)
        except DatabaseError as e:
            logger.error(f"Ошибка удаления старых вхождений статьи {item.id}: {e}")

        if item.start_date is None:
            logger.warning(f"Статья {item.id} без корректной даты начала, пропущена")
            report.items_skipped += 1
            return

        rows = build_occurrence_rows(item, year)
        report.items_processed += 1

        if not rows:
            logger.debug(f"Статья {item.id}: нет вхождений в {year} году")
            return

        try:
            report.occurrences_inserted += self.repository.insert_ignoring_duplicates(rows)
        except DatabaseError as e:
            logger.error(f"Ошибка вставки вхождений статьи {item.id}: {e}")
            report.failed_item_ids.append(item.id)
