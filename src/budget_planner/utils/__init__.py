"""Утилиты приложения."""

from budget_planner.utils.logger import setup_logging, get_logger
from budget_planner.utils.error_handler import ErrorHandler, safe_handler
from budget_planner.utils.exceptions import (
    BudgetPlannerError,
    ValidationError,
    BusinessLogicError,
    DatabaseError,
    NotFoundError,
)
from budget_planner.utils.validation import validate_uuid_format, parse_iso_date

__all__ = [
    "setup_logging",
    "get_logger",
    "ErrorHandler",
    "safe_handler",
    "BudgetPlannerError",
    "ValidationError",
    "BusinessLogicError",
    "DatabaseError",
    "NotFoundError",
    "validate_uuid_format",
    "parse_iso_date",
]
