"""
Точка входа для запуска через python -m budget_planner
"""
import flet as ft
from budget_planner.app import main


def run():
    # Нативное окно, не браузер
    ft.app(target=main, view=ft.AppView.FLET_APP)


if __name__ == "__main__":
    run()
