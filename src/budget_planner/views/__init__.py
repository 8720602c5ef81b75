__all__ = [
    "ScheduleView",
]

from budget_planner.views.schedule_view import ScheduleView
