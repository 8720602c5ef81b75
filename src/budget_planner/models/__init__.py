"""Модели данных Budget Planner."""

from budget_planner.models.enums import (
    ItemKind,
    RecurrenceRule,
    OccurrenceStatus,
    RecordStatus,
    INCOME_PERIOD_CODES,
    EXPENSE_OCCURRENCE_CODES,
    RECURRENCE_CODES_BY_KIND,
    resolve_recurrence_rule,
)
from budget_planner.models.models import (
    Base,
    PersonDB,
    ExpenseCategoryDB,
    RecurringItemDB,
    OccurrenceDB,
    SavingDB,
    ResolutionDB,
    RecurringItemCreate,
    RecurringItem,
    OccurrenceCreate,
    Occurrence,
    OccurrenceUpdate,
    SavingCreate,
    Saving,
    ResolutionCreate,
    Resolution,
    PersonCreate,
    Person,
    ExpenseCategoryCreate,
    ExpenseCategory,
)

__all__ = [
    "ItemKind",
    "RecurrenceRule",
    "OccurrenceStatus",
    "RecordStatus",
    "INCOME_PERIOD_CODES",
    "EXPENSE_OCCURRENCE_CODES",
    "RECURRENCE_CODES_BY_KIND",
    "resolve_recurrence_rule",
    "Base",
    "PersonDB",
    "ExpenseCategoryDB",
    "RecurringItemDB",
    "OccurrenceDB",
    "SavingDB",
    "ResolutionDB",
    "RecurringItemCreate",
    "RecurringItem",
    "OccurrenceCreate",
    "Occurrence",
    "OccurrenceUpdate",
    "SavingCreate",
    "Saving",
    "ResolutionCreate",
    "Resolution",
    "PersonCreate",
    "Person",
    "ExpenseCategoryCreate",
    "ExpenseCategory",
]
