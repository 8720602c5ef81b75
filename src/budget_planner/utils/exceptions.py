"""
Модуль пользовательских исключений приложения.
"""

class BudgetPlannerError(Exception):
    """Базовый класс для всех исключений приложения."""
    pass

class ValidationError(BudgetPlannerError):
    """Исключение при ошибке валидации данных (пользовательский ввод)."""
    pass

class BusinessLogicError(BudgetPlannerError):
    """Исключение при нарушении бизнес-правил (например, отмена подтверждения вхождения)."""
    pass

class DatabaseError(BudgetPlannerError):
    """Исключение при ошибках работы с базой данных."""
    pass

class NotFoundError(BudgetPlannerError, ValueError):
    """Исключение когда запись не найдена (совместимо с ValueError)."""
    pass
