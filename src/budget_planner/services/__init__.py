__all__ = [
    "generate_occurrence_dates",
    "ScheduleRepository",
    "SqlAlchemyScheduleRepository",
    "ScheduleSynchronizer",
    "SyncReport",
    "create_recurring_item",
    "get_recurring_item",
    "get_recurring_items",
    "update_recurring_item",
    "obsolete_recurring_item",
    "get_occurrences_by_date_range",
    "get_occurrences_by_year",
    "confirm_occurrence",
    "update_occurrence",
    "get_all_categories",
    "create_category",
    "rename_category",
    "obsolete_category",
    "init_default_categories",
    "get_all_people",
    "create_person",
    "create_saving",
    "update_saving",
    "obsolete_saving",
    "get_savings_by_year",
    "get_savings_summary",
    "borrow_from_saving",
    "repay_saving",
    "create_resolution",
    "set_resolution_completed",
    "delete_resolution",
    "get_resolutions_by_year",
    "get_resolution_stats",
    "get_period_totals",
    "get_expected_totals",
]

from budget_planner.services.recurrence_service import generate_occurrence_dates

from budget_planner.services.schedule_repository import (
    ScheduleRepository,
    SqlAlchemyScheduleRepository
)

from budget_planner.services.schedule_sync_service import (
    ScheduleSynchronizer,
    SyncReport
)

from budget_planner.services.recurring_item_service import (
    create_recurring_item,
    get_recurring_item,
    get_recurring_items,
    update_recurring_item,
    obsolete_recurring_item
)

from budget_planner.services.occurrence_service import (
    get_occurrences_by_date_range,
    get_occurrences_by_year,
    confirm_occurrence,
    update_occurrence
)

from budget_planner.services.category_service import (
    get_all_categories,
    create_category,
    rename_category,
    obsolete_category,
    init_default_categories
)

from budget_planner.services.person_service import (
    get_all_people,
    create_person
)

from budget_planner.services.savings_service import (
    create_saving,
    update_saving,
    obsolete_saving,
    get_savings_by_year,
    get_savings_summary,
    borrow_from_saving,
    repay_saving
)

from budget_planner.services.resolution_service import (
    create_resolution,
    set_resolution_completed,
    delete_resolution,
    get_resolutions_by_year,
    get_resolution_stats
)

from budget_planner.services.overview_service import (
    get_period_totals,
    get_expected_totals
)
