"""Weekly activity planner: conflict-free schedule generation."""

from weekplanner.domain.models import Activity, Dependency, GeneratedSchedule, TimeSlot
from weekplanner.scheduling.scheduler import Scheduler, SchedulerConfig, generate_schedule

__version__ = "0.1.0"

__all__ = [
    "Activity",
    "Dependency",
    "GeneratedSchedule",
    "Scheduler",
    "SchedulerConfig",
    "TimeSlot",
    "generate_schedule",
]
