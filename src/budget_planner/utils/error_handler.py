"""
Модуль централизованной обработки ошибок.
Предоставляет инструменты для перехвата, логирования и отображения ошибок в UI.
"""

import functools
import logging
import traceback
from typing import Callable, Optional
import flet as ft

from budget_planner.utils.exceptions import (
    ValidationError,
    BusinessLogicError,
    DatabaseError
)

logger = logging.getLogger(__name__)


class ErrorHandler:
    """
    Класс для централизованной обработки ошибок.
    """

    def __init__(self, page: Optional[ft.Page] = None):
        self.page = page

    def handle(self, exception: Exception, context_message: str = ""):
        """
        Обрабатывает возникшее исключение: логирует и показывает уведомление пользователю.

        Args:
            exception: Исключение, которое нужно обработать.
            context_message: Дополнительное сообщение о контексте ошибки.
        """
        error_message = self.get_user_message(exception)
        log_message = f"{context_message}: {exception}" if context_message else str(exception)

        if isinstance(exception, (ValidationError, BusinessLogicError)):
            logger.warning(f"Ошибка пользователя: {log_message}")
        else:
            logger.error(f"Системная ошибка: {log_message}\n{traceback.format_exc()}")

        if self.page:
            self._show_error(error_message)

    @staticmethod
    def get_user_message(exception: Exception) -> str:
        """Возвращает понятное пользователю сообщение об ошибке."""
        if isinstance(exception, ValidationError):
            return f"Ошибка ввода: {exception}"
        elif isinstance(exception, BusinessLogicError):
            return f"Невозможно выполнить операцию: {exception}"
        elif isinstance(exception, DatabaseError):
            return "Произошла ошибка при работе с базой данных. Попробуйте позже."
        else:
            return f"Произошла непредвиденная ошибка: {exception}"

    def _show_error(self, message: str):
        """Показывает SnackBar с ошибкой."""
        snack_bar = ft.SnackBar(
            content=ft.Text(message, color=ft.Colors.WHITE),
            bgcolor=ft.Colors.ERROR,
            action="OK",
        )
        self.page.open(snack_bar)


def safe_handler(page_getter: Optional[Callable[[], Optional[ft.Page]]] = None):
    """
    Декоратор для обработчиков событий UI.
    Перехватывает ошибки и передаёт их в ErrorHandler.

    Args:
        page_getter: Опциональная функция, возвращающая текущий объект ft.Page.
                     Если не указана, page берётся из self (первого аргумента).
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                page = None
                if args and hasattr(args[0], 'page'):
                    page = args[0].page
                if not page and callable(page_getter):
                    page = page_getter()

                ErrorHandler(page).handle(e, context_message=f"Ошибка в {func.__name__}")
        return wrapper
    return decorator
