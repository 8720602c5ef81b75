"""
Базовый класс для тестов View компонентов Budget Planner.

Предоставляет общие вспомогательные методы:
- Создание моков для page и session
- Мок контекстного менеджера get_db_session
- Регистрация патчей с автоматической очисткой
- Проверка показа SnackBar
"""
import unittest
from unittest.mock import Mock, MagicMock, patch
from typing import Optional, Any, List
import flet as ft


class ViewTestBase(unittest.TestCase):
    """
    Базовый класс для тестов View компонентов.
    """

    def setUp(self):
        self.page = self.create_mock_page()
        self.mock_session = self.create_mock_session()
        self.patchers: List[Any] = []

    def tearDown(self):
        for patcher in self.patchers:
            patcher.stop()
        self.patchers.clear()

    def create_mock_page(self) -> MagicMock:
        """
        Мок Flet Page с современным API диалогов (page.open / page.close).
        """
        page = MagicMock(spec=ft.Page)
        page.overlay = []
        page.update = MagicMock()
        page.open = MagicMock()
        page.close = MagicMock()
        return page

    def create_mock_session(self) -> Mock:
        session = Mock()
        session.commit = Mock()
        session.rollback = Mock()
        session.close = Mock()
        session.query = Mock()
        return session

    def create_mock_db_context(self, session: Optional[Mock] = None) -> MagicMock:
        """
        Мок контекстного менеджера get_db_session().

        Example:
            mock_cm = self.create_mock_db_context()
            self.add_patcher('budget_planner.views.schedule_view.get_db_session', return_value=mock_cm)
        """
        if session is None:
            session = self.mock_session

        mock_cm = MagicMock()
        mock_cm.__enter__ = Mock(return_value=session)
        mock_cm.__exit__ = Mock(return_value=None)
        return mock_cm

    def add_patcher(self, target: str, **kwargs) -> Mock:
        """Создаёт и запускает патч, который будет остановлен в tearDown."""
        patcher = patch(target, **kwargs)
        mock_obj = patcher.start()
        self.patchers.append(patcher)
        return mock_obj

    def assert_snackbar_shown(self, page_mock: MagicMock, message_contains: Optional[str] = None):
        """
        Проверка, что был показан SnackBar (опционально с подстрокой в тексте).
        """
        page_mock.open.assert_called()

        if message_contains is not None:
            found = False
            for call in page_mock.open.call_args_list:
                if call[0] and isinstance(call[0][0], ft.SnackBar):
                    content = call[0][0].content
                    if hasattr(content, 'value') and message_contains.lower() in content.value.lower():
                        found = True
                        break

            self.assertTrue(
                found,
                f"SnackBar с сообщением, содержащим '{message_contains}', не найден"
            )

    def assert_view_has_controls(self, view):
        count = len(getattr(view, 'controls', []) or [])
        self.assertGreater(count, 0, f"View должен содержать контролы, но их количество: {count}")
