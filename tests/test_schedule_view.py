"""
Тесты экрана генерации расписания.
"""
from datetime import date
from unittest.mock import patch

import flet as ft

from budget_planner.services.schedule_sync_service import SyncReport
from budget_planner.utils.exceptions import DatabaseError
from budget_planner.views.schedule_view import ScheduleView, YEARS_BACK, YEARS_FORWARD
from test_view_base import ViewTestBase


class TestScheduleView(ViewTestBase):

    def setUp(self):
        super().setUp()
        self.mock_get_db_session = self.add_patcher(
            'budget_planner.views.schedule_view.get_db_session',
            return_value=self.create_mock_db_context()
        )
        self.mock_synchronizer_cls = self.add_patcher('budget_planner.views.schedule_view.ScheduleSynchronizer')
        self.mock_repository_cls = self.add_patcher('budget_planner.views.schedule_view.SqlAlchemyScheduleRepository')
        self.view = ScheduleView(self.page)

    def test_initialization(self):
        self.assert_view_has_controls(self.view)
        current_year = date.today().year
        years = [int(option.key) for option in self.view.year_dropdown.options]

        self.assertEqual(self.view.selected_year, current_year)
        self.assertEqual(years[0], current_year - YEARS_BACK)
        self.assertEqual(years[-1], current_year + YEARS_FORWARD)

    def test_generate_runs_synchronizer_for_selected_year(self):
        self.view.year_dropdown.value = "2024"
        self.mock_synchronizer_cls.return_value.generate_year.return_value = SyncReport(
            year=2024, items_processed=3, occurrences_inserted=36
        )

        self.view.on_generate_click(None)

        self.mock_repository_cls.assert_called_once_with(self.mock_session)
        self.mock_synchronizer_cls.return_value.generate_year.assert_called_once_with(2024)
        self.assert_snackbar_shown(self.page, "2024")
        self.assertIn("36", self.view.result_text.value)

    def test_partial_failures_still_report_completion(self):
        self.mock_synchronizer_cls.return_value.generate_year.return_value = SyncReport(
            year=2024, items_processed=2, failed_item_ids=["a"]
        )

        self.view.on_generate_click(None)

        self.assert_snackbar_shown(self.page, "обновлено")
        self.assertIn("ошибок записи: 1", self.view.result_text.value)

    def test_error_shown_through_error_handler(self):
        self.mock_synchronizer_cls.return_value.generate_year.side_effect = DatabaseError("locked")

        self.view.on_generate_click(None)

        self.assert_snackbar_shown(self.page, "базой данных")
