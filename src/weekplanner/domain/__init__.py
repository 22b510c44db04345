"""Domain models for activities, time slots and generated schedules."""

from weekplanner.domain.catalog import ActivityCatalog
from weekplanner.domain.models import (
    DAY_PRESETS,
    DAYS_OF_WEEK,
    Activity,
    Dependency,
    GeneratedSchedule,
    ScheduleSlot,
    SchedulingAlgorithm,
    SearchStats,
    TimeSlot,
    Weekday,
)
from weekplanner.domain.timeutils import (
    TIME_OPTIONS,
    format_time,
    format_time_range,
    parse_time,
    time_to_decimal,
)

__all__ = [
    # Models
    "Activity",
    "Dependency",
    "GeneratedSchedule",
    "ScheduleSlot",
    "SchedulingAlgorithm",
    "SearchStats",
    "TimeSlot",
    "Weekday",
    # Working set
    "ActivityCatalog",
    # Constants
    "DAYS_OF_WEEK",
    "DAY_PRESETS",
    "TIME_OPTIONS",
    # Time helpers
    "format_time",
    "format_time_range",
    "parse_time",
    "time_to_decimal",
]
