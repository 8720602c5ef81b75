import flet as ft
from datetime import date

from budget_planner.database import get_db_session
from budget_planner.services.schedule_repository import SqlAlchemyScheduleRepository
from budget_planner.services.schedule_sync_service import ScheduleSynchronizer, SyncReport
from budget_planner.utils.logger import get_logger
from budget_planner.utils.error_handler import safe_handler

logger = get_logger(__name__)

# Диапазон лет в выпадающем списке относительно текущего
YEARS_BACK = 5
YEARS_FORWARD = 4


class ScheduleView(ft.Column):
    """
    Экран генерации расписания доходов и расходов на год.
    """
    def __init__(self, page: ft.Page):
        super().__init__(expand=True)
        self.page = page

        current_year = date.today().year
        self.year_dropdown = ft.Dropdown(
            label="Год",
            width=160,
            value=str(current_year),
            options=[
                ft.dropdown.Option(str(year))
                for year in range(current_year - YEARS_BACK, current_year + YEARS_FORWARD + 1)
            ],
        )

        self.generate_button = ft.ElevatedButton(
            "Сгенерировать",
            icon=ft.Icons.AUTORENEW,
            on_click=self.on_generate_click
        )

        self.result_text = ft.Text(size=14, color=ft.Colors.GREY_700)

        self.controls = [
            ft.Text("Расписание на год", size=24, weight=ft.FontWeight.BOLD),
            ft.Row(
                controls=[self.year_dropdown, self.generate_button],
                vertical_alignment=ft.CrossAxisAlignment.END
            ),
            self.result_text,
        ]

    @property
    def selected_year(self) -> int:
        return int(self.year_dropdown.value)

    @safe_handler()
    def on_generate_click(self, e):
        """Генерирует вхождения всех активных статей за выбранный год."""
        year = self.selected_year
        logger.info(f"Запуск генерации расписания на {year} год")

        with get_db_session() as session:
            synchronizer = ScheduleSynchronizer(SqlAlchemyScheduleRepository(session))
            report = synchronizer.generate_year(year)

        self.result_text.value = self._format_report(report)
        self.page.open(ft.SnackBar(content=ft.Text(f"Расписание на {year} год обновлено")))
        self.page.update()

    @staticmethod
    def _format_report(report: SyncReport) -> str:
        text = (
            f"Обработано статей: {report.items_processed}, "
            f"удалено вхождений: {report.occurrences_deleted}, "
            f"добавлено: {report.occurrences_inserted}"
        )
        if report.items_skipped:
            text += f", пропущено: {report.items_skipped}"
        if report.failed_item_ids:
            text += f", ошибок записи: {len(report.failed_item_ids)}"
        return text
