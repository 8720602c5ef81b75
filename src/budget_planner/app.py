import flet as ft
from budget_planner.config import settings
from budget_planner.views.schedule_view import ScheduleView
from budget_planner.database import init_db
from budget_planner.utils.logger import setup_logging, get_logger

logger = get_logger(__name__)

def main(page: ft.Page):
    # 1. Настройка логирования
    setup_logging()
    logger.info("Запуск приложения Budget Planner")

    page.title = "Budget Planner"
    page.theme_mode = ft.ThemeMode.DARK if settings.theme_mode == "dark" else ft.ThemeMode.LIGHT
    page.window.width = settings.window_width
    page.window.height = settings.window_height

    # 2. Инициализация БД
    try:
        init_db()
    except Exception as e:
        logger.error(f"Ошибка инициализации БД: {e}")
        page.add(ft.Text(f"Критическая ошибка: {e}", color=ft.Colors.ERROR))
        return

    # 3. Экран расписания
    page.add(ScheduleView(page))
    page.update()
