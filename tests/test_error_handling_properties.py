"""
Property-based тесты для системы обработки ошибок.
Проверяют, что ошибки перехватываются и превращаются в понятные сообщения.
"""

from unittest.mock import MagicMock, patch
from hypothesis import given, strategies as st
import flet as ft

from budget_planner.utils.exceptions import (
    ValidationError,
    BusinessLogicError,
    DatabaseError,
    NotFoundError,
)
from budget_planner.utils.error_handler import ErrorHandler, safe_handler


def _snack_text(page_mock):
    snack_bar = page_mock.open.call_args[0][0]
    assert isinstance(snack_bar, ft.SnackBar)
    return snack_bar.content.value


@given(st.text())
def test_validation_error_handling(message):
    page_mock = MagicMock()

    ErrorHandler(page_mock).handle(ValidationError(message))

    page_mock.open.assert_called_once()
    assert f"Ошибка ввода: {message}" in _snack_text(page_mock)


@given(st.text())
def test_business_logic_error_handling(message):
    page_mock = MagicMock()

    ErrorHandler(page_mock).handle(BusinessLogicError(message))

    page_mock.open.assert_called_once()
    assert f"Невозможно выполнить операцию: {message}" in _snack_text(page_mock)


def test_database_error_handling():
    page_mock = MagicMock()

    with patch('budget_planner.utils.error_handler.logger') as logger_mock:
        ErrorHandler(page_mock).handle(DatabaseError("Connection failed"))

        logger_mock.error.assert_called()
        # Пользователю показывается общее сообщение без деталей подключения
        assert "Произошла ошибка при работе с базой данных" in _snack_text(page_mock)


def test_user_errors_logged_as_warning():
    with patch('budget_planner.utils.error_handler.logger') as logger_mock:
        ErrorHandler(None).handle(BusinessLogicError("Вхождение уже подтверждено"))

        logger_mock.warning.assert_called_once()
        logger_mock.error.assert_not_called()


def test_not_found_is_unexpected_error_message():
    assert ErrorHandler.get_user_message(NotFoundError("нет")).startswith("Произошла непредвиденная ошибка")


def test_safe_handler_takes_page_from_self():
    class Widget:
        def __init__(self, page):
            self.page = page

        @safe_handler()
        def on_click(self, e):
            raise BusinessLogicError("Нельзя")

    page_mock = MagicMock()

    assert Widget(page_mock).on_click(None) is None
    assert "Нельзя" in _snack_text(page_mock)


def test_safe_handler_uses_page_getter():
    page_mock = MagicMock()

    @safe_handler(page_getter=lambda: page_mock)
    def handler(e):
        raise ValueError("boom")

    handler(None)

    assert "boom" in _snack_text(page_mock)


def test_safe_handler_passes_result_through():
    @safe_handler()
    def handler(value):
        return value * 2

    assert handler(21) == 42
