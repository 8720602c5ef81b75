"""
Модуль конфигурации приложения Budget Planner.

Содержит настройки:
- Основные параметры приложения (название, версия)
- Настройки базы данных (путь к SQLite или URL внешней БД)
- Настройки интерфейса (тема, размеры окна)
- Настройки логирования
- Персистентность настроек (загрузка/сохранение)
"""

import os
import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class Config:
    """
    Класс конфигурации приложения.
    Реализует паттерн Singleton для доступа к настройкам из любой части приложения.

    Все пользовательские данные (БД, логи, настройки) хранятся в
    директории ~/.budget_planner_data/.
    """

    _instance = None

    # Константы приложения
    APP_NAME = "Budget Planner"
    VERSION = "1.0.0"

    @staticmethod
    def get_user_data_dir() -> Path:
        """
        Возвращает путь к директории пользовательских данных.

        Создаёт директорию ~/.budget_planner_data/ и поддиректорию logs/.

        Returns:
            Path: Путь к ~/.budget_planner_data/
        """
        data_dir = Path.home() / ".budget_planner_data"
        data_dir.mkdir(exist_ok=True)

        logs_dir = data_dir / "logs"
        logs_dir.mkdir(exist_ok=True)
        logger.debug(f"Директория пользовательских данных: {data_dir}")

        return data_dir

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._initialized = True

        self.user_data_dir = self.get_user_data_dir()

        # Пути к файлам
        self.db_path: str = str(self.user_data_dir / "budget.db")
        self.config_file: str = str(self.user_data_dir / "config.json")
        self.log_file: str = str(self.user_data_dir / "logs" / "budget_planner.log")

        # Внешняя БД (например postgresql://...). None = локальный SQLite файл
        self.database_url_override: Optional[str] = None

        # Значения по умолчанию для UI
        self.theme_mode: str = "light"
        self.window_width: int = 1000
        self.window_height: int = 700

        # Настройки логирования
        self.log_level: str = "INFO"

        # Настройки форматов
        self.date_format: str = "%Y-%m-%d"

        self.load()

    @property
    def database_url(self) -> str:
        """URL подключения SQLAlchemy."""
        if self.database_url_override:
            return self.database_url_override
        return f"sqlite:///{self.db_path}"

    def load(self) -> None:
        """
        Загружает настройки из файла конфигурации.

        Если файл не существует или повреждён, используются значения по умолчанию.
        """
        if not os.path.exists(self.config_file):
            logger.info(f"Файл конфигурации не найден, используются значения по умолчанию: {self.config_file}")
            return

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)

            self.theme_mode = data.get("theme_mode", "light")
            self.window_width = data.get("window_width", 1000)
            self.window_height = data.get("window_height", 700)
            self.log_level = data.get("log_level", "INFO")
            self.date_format = data.get("date_format", "%Y-%m-%d")
            self.database_url_override = data.get("database_url")

            logger.info(f"Конфигурация загружена из {self.config_file}")

        except (OSError, ValueError) as e:
            logger.error(f"Ошибка при загрузке конфигурации: {e}")

    def save(self) -> None:
        """
        Сохраняет текущие настройки в файл конфигурации.
        """
        data = {
            "theme_mode": self.theme_mode,
            "window_width": self.window_width,
            "window_height": self.window_height,
            "log_level": self.log_level,
            "date_format": self.date_format,
            "database_url": self.database_url_override,
        }

        try:
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=4, ensure_ascii=False)
            logger.info(f"Конфигурация сохранена в {self.config_file}")
        except OSError as e:
            logger.error(f"Ошибка при сохранении конфигурации: {e}")


# Глобальный экземпляр конфигурации
settings = Config()
