"""Assembly of GeneratedSchedule results shared by every solver."""

from collections.abc import Sequence

from weekplanner.domain.models import (
    Activity,
    GeneratedSchedule,
    ScheduleSlot,
    SchedulingAlgorithm,
    SearchStats,
)
from weekplanner.scheduling.dependencies import DependencyIndex


def conflict_messages(
    activities: Sequence[Activity],
    schedule: Sequence[ScheduleSlot],
) -> list[str]:
    """One message per activity missing from ``schedule``, in input order."""
    placed = {slot.activity_code.casefold() for slot in schedule}
    return [
        f"Could not schedule {activity.activity_code}"
        for activity in activities
        if activity.key not in placed
    ]


def dependency_violations(
    index: DependencyIndex,
    schedule: Sequence[ScheduleSlot],
) -> list[str]:
    """Re-check the direct dependencies of every placed slot.

    Diagnostic only: the schedule is reported on, never changed.
    """
    placed = {slot.key for slot in schedule}
    violations = []
    for slot in schedule:
        for dep in index.declared(slot.key):
            if dep.target_key not in placed:
                violations.append(f"{dep.describe()}, which is not scheduled")
    return violations


def build_result(
    activities: Sequence[Activity],
    index: DependencyIndex,
    schedule: Sequence[ScheduleSlot],
    algorithm: SchedulingAlgorithm,
    stats: SearchStats,
) -> GeneratedSchedule:
    return GeneratedSchedule(
        schedule=tuple(schedule),
        conflicts=tuple(conflict_messages(activities, schedule)),
        total_activities=len(activities),
        scheduled_activities=len({slot.activity_code.casefold() for slot in schedule}),
        algorithm=algorithm,
        dependency_violations=tuple(dependency_violations(index, schedule)),
        stats=stats,
    )
