"""Domain models for the scheduling system.

This module contains the core data structures used throughout weekplanner:
activities with their candidate time slots and dependencies on the input
side, and schedule placements plus the generated result on the output side.

The JSON shape produced by ``to_dict`` and read by ``from_dict`` uses the
camelCase field names of the wire format (``activityCode``,
``availableSlots``, ...).
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime, time, timezone
from enum import Enum
from typing import Optional, Union

from weekplanner.domain.timeutils import format_time, parse_time, time_to_decimal
from weekplanner.exceptions import (
    DuplicateDependencyError,
    InvalidActivityError,
    InvalidDayError,
    InvalidDependencyError,
    InvalidTimeSlotError,
)


class Weekday(Enum):
    """Days an activity can be scheduled on (Monday through Saturday)."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"

    @property
    def abbreviation(self) -> str:
        """Three-letter label, e.g. "Mon"."""
        return self.value[:3]

    @classmethod
    def parse(cls, value: Union[str, "Weekday"]) -> "Weekday":
        """Parse a full or three-letter day name (case-insensitive).

        Raises:
            InvalidDayError: For unknown names, including Sunday.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            needle = value.strip().lower()
            for day in cls:
                if needle in (day.value.lower(), day.abbreviation.lower()):
                    return day
        raise InvalidDayError(
            f"Invalid day {value!r}; expected one of {', '.join(DAYS_OF_WEEK)}"
        )


DAYS_OF_WEEK = tuple(day.value for day in Weekday)

# Common day combinations for a day picker.
DAY_PRESETS: dict[str, tuple[Weekday, ...]] = {
    "MTH": (Weekday.MONDAY, Weekday.THURSDAY),
    "TF": (Weekday.TUESDAY, Weekday.FRIDAY),
}


class SchedulingAlgorithm(Enum):
    """Algorithm that produced a GeneratedSchedule."""

    BACKTRACKING = "backtracking"
    GREEDY = "greedy"
    CPSAT = "cpsat"


def _parse_days(days: Iterable[Union[str, Weekday]]) -> tuple[Weekday, ...]:
    if isinstance(days, str):
        raise InvalidDayError(f"Expected a list of days, got the string {days!r}")
    if not isinstance(days, (list, tuple, set, frozenset)):
        raise InvalidDayError(f"Expected a list of days, got {days!r}")
    parsed: list[Weekday] = []
    for day in days:
        weekday = Weekday.parse(day)
        if weekday not in parsed:
            parsed.append(weekday)
    return tuple(parsed)


@dataclass(frozen=True)
class TimeSlot:
    """One candidate weekly time window for an activity.

    Attributes:
        days: Weekdays the slot repeats on. May be empty, in which case the
            slot never conflicts and is never selected.
        start_time: Start time of day.
        end_time: End time of day (strictly after start_time).
    """

    days: tuple[Weekday, ...]
    start_time: time
    end_time: time

    def __post_init__(self):
        object.__setattr__(self, "days", _parse_days(self.days))
        if self.end_time <= self.start_time:
            raise InvalidTimeSlotError(
                f"End time {format_time(self.end_time)} must be after "
                f"start time {format_time(self.start_time)}"
            )

    @classmethod
    def from_strings(
        cls,
        days: Iterable[Union[str, Weekday]],
        start_time: str,
        end_time: str,
    ) -> "TimeSlot":
        """Create a slot from day names and 12-hour time strings.

        Example:
            >>> TimeSlot.from_strings(["Monday", "Thursday"], "9:00 AM", "10:30 AM")
        """
        return cls(
            days=days,
            start_time=parse_time(start_time),
            end_time=parse_time(end_time),
        )

    @classmethod
    def from_dict(cls, data: dict) -> "TimeSlot":
        if not isinstance(data, dict):
            raise InvalidTimeSlotError(f"Time slot must be an object, got {data!r}")
        try:
            return cls.from_strings(data["days"], data["startTime"], data["endTime"])
        except KeyError as exc:
            raise InvalidTimeSlotError(f"Time slot is missing field {exc}") from exc

    def to_dict(self) -> dict:
        return {
            "days": [day.value for day in self.days],
            "startTime": format_time(self.start_time),
            "endTime": format_time(self.end_time),
        }

    @property
    def duration_hours(self) -> float:
        """Length of one occurrence in decimal hours."""
        return time_to_decimal(self.end_time) - time_to_decimal(self.start_time)

    def __str__(self) -> str:
        days = "/".join(day.abbreviation for day in self.days) or "no days"
        return f"{days} {format_time(self.start_time)}-{format_time(self.end_time)}"


@dataclass(frozen=True)
class Dependency:
    """Required co-placement between two (activity, slot) pairs.

    If ``activity_code``'s slot ``slot_index`` is chosen, then
    ``dependent_activity_code``'s slot ``dependent_slot_index`` must be
    chosen too. References to activities or slots that do not exist are
    tolerated and simply have no effect.
    """

    activity_code: str
    slot_index: int
    dependent_activity_code: str
    dependent_slot_index: int

    def __post_init__(self):
        for name in ("activity_code", "dependent_activity_code"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise InvalidDependencyError(
                    f"{name} must be a non-empty string, got {value!r}"
                )
        for name in ("slot_index", "dependent_slot_index"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidDependencyError(
                    f"{name} must be a non-negative integer, got {value!r}"
                )

    @property
    def source_key(self) -> tuple[str, int]:
        return (self.activity_code.casefold(), self.slot_index)

    @property
    def target_key(self) -> tuple[str, int]:
        return (self.dependent_activity_code.casefold(), self.dependent_slot_index)

    @classmethod
    def from_dict(cls, data: dict) -> "Dependency":
        if not isinstance(data, dict):
            raise InvalidDependencyError(f"Dependency must be an object, got {data!r}")
        try:
            return cls(
                activity_code=data["activityCode"],
                slot_index=data["slotIndex"],
                dependent_activity_code=data["dependentActivityCode"],
                dependent_slot_index=data["dependentSlotIndex"],
            )
        except KeyError as exc:
            raise InvalidDependencyError(f"Dependency is missing field {exc}") from exc

    def to_dict(self) -> dict:
        return {
            "activityCode": self.activity_code,
            "slotIndex": self.slot_index,
            "dependentActivityCode": self.dependent_activity_code,
            "dependentSlotIndex": self.dependent_slot_index,
        }

    def describe(self) -> str:
        """Human-readable form using 1-based slot numbers."""
        return (
            f"{self.activity_code} slot {self.slot_index + 1} requires "
            f"{self.dependent_activity_code} slot {self.dependent_slot_index + 1}"
        )


@dataclass(frozen=True)
class Activity:
    """A schedulable unit with candidate time slots.

    Slot order matters: a slot's position in ``available_slots`` is its
    identity for dependency references.

    Attributes:
        activity_code: Unique code (case-insensitive within a working set).
        available_slots: Candidate slots, possibly empty.
        dependencies: Dependencies rooted at this activity's slots.
    """

    activity_code: str
    available_slots: tuple[TimeSlot, ...] = ()
    dependencies: tuple[Dependency, ...] = ()

    def __post_init__(self):
        if not isinstance(self.activity_code, str) or not self.activity_code.strip():
            raise InvalidActivityError("Activity code is required")
        object.__setattr__(self, "activity_code", self.activity_code.strip())
        object.__setattr__(self, "available_slots", tuple(self.available_slots))
        object.__setattr__(self, "dependencies", tuple(self.dependencies))

    @property
    def key(self) -> str:
        """Case-insensitive identity used for lookups."""
        return self.activity_code.casefold()

    def has_slot(self, index: int) -> bool:
        return 0 <= index < len(self.available_slots)

    def dependencies_for_slot(self, slot_index: int) -> list[Dependency]:
        """Dependencies declared for one of this activity's slots."""
        return [
            dep for dep in self.dependencies
            if dep.source_key == (self.key, slot_index)
        ]

    def with_slot(self, slot: TimeSlot) -> "Activity":
        """Return a copy with ``slot`` appended."""
        return replace(self, available_slots=self.available_slots + (slot,))

    def without_slot(self, index: int) -> "Activity":
        """Return a copy with slot ``index`` removed.

        Dependencies rooted at the removed slot are dropped. Slot indices
        above it, on this activity's side of each dependency, shift down by
        one so they keep pointing at the same slots.
        """
        if not self.has_slot(index):
            raise IndexError(f"{self.activity_code} has no slot {index}")

        slots = self.available_slots[:index] + self.available_slots[index + 1:]
        dependencies = []
        for dep in self.dependencies:
            is_own = dep.activity_code.casefold() == self.key
            targets_own = dep.dependent_activity_code.casefold() == self.key
            if is_own and dep.slot_index == index:
                continue
            if targets_own and dep.dependent_slot_index == index:
                continue
            slot_index = dep.slot_index
            if is_own and slot_index > index:
                slot_index -= 1
            dependent_slot_index = dep.dependent_slot_index
            if targets_own and dependent_slot_index > index:
                dependent_slot_index -= 1
            dependencies.append(
                replace(
                    dep,
                    slot_index=slot_index,
                    dependent_slot_index=dependent_slot_index,
                )
            )
        return replace(
            self, available_slots=slots, dependencies=tuple(dependencies)
        )

    def with_dependency(
        self,
        slot_index: int,
        dependent_activity_code: str,
        dependent_slot_index: int,
    ) -> "Activity":
        """Return a copy with a new dependency rooted at ``slot_index``.

        Raises:
            DuplicateDependencyError: If the same dependency already exists.
        """
        dependency = Dependency(
            activity_code=self.activity_code,
            slot_index=slot_index,
            dependent_activity_code=dependent_activity_code,
            dependent_slot_index=dependent_slot_index,
        )
        for existing in self.dependencies:
            if (
                existing.source_key == dependency.source_key
                and existing.target_key == dependency.target_key
            ):
                raise DuplicateDependencyError(
                    f"Dependency already exists: {dependency.describe()}"
                )
        return replace(self, dependencies=self.dependencies + (dependency,))

    def without_dependency(self, dependency: Dependency) -> "Activity":
        """Return a copy without ``dependency`` (no-op if absent)."""
        return replace(
            self,
            dependencies=tuple(d for d in self.dependencies if d != dependency),
        )

    def without_dependencies_on(self, activity_code: str) -> "Activity":
        """Return a copy without dependencies that target ``activity_code``."""
        target = activity_code.casefold()
        return replace(
            self,
            dependencies=tuple(
                d for d in self.dependencies
                if d.dependent_activity_code.casefold() != target
            ),
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Activity":
        if not isinstance(data, dict):
            raise InvalidActivityError(f"Activity must be an object, got {data!r}")
        if "activityCode" not in data:
            raise InvalidActivityError("Activity is missing field 'activityCode'")
        slots = data.get("availableSlots") or []
        dependencies = data.get("dependencies") or []
        for name, value in (("availableSlots", slots), ("dependencies", dependencies)):
            if not isinstance(value, list):
                raise InvalidActivityError(
                    f"Activity {data['activityCode']!r}: {name} must be a list"
                )
        return cls(
            activity_code=data["activityCode"],
            available_slots=tuple(TimeSlot.from_dict(slot) for slot in slots),
            dependencies=tuple(Dependency.from_dict(dep) for dep in dependencies),
        )

    def to_dict(self) -> dict:
        result = {
            "activityCode": self.activity_code,
            "availableSlots": [slot.to_dict() for slot in self.available_slots],
        }
        if self.dependencies:
            result["dependencies"] = [dep.to_dict() for dep in self.dependencies]
        return result


@dataclass(frozen=True)
class ScheduleSlot:
    """A chosen placement: one activity in one of its candidate slots.

    Attributes:
        activity_code: Code of the placed activity.
        days: Weekdays of the chosen slot.
        start_time: Start time of the chosen slot.
        end_time: End time of the chosen slot.
        slot_index: Index of the chosen slot in the activity's slot list.
    """

    activity_code: str
    days: tuple[Weekday, ...]
    start_time: time
    end_time: time
    slot_index: int

    @classmethod
    def from_activity(cls, activity: Activity, slot_index: int) -> "ScheduleSlot":
        slot = activity.available_slots[slot_index]
        return cls(
            activity_code=activity.activity_code,
            days=slot.days,
            start_time=slot.start_time,
            end_time=slot.end_time,
            slot_index=slot_index,
        )

    @property
    def key(self) -> tuple[str, int]:
        return (self.activity_code.casefold(), self.slot_index)

    def to_dict(self) -> dict:
        return {
            "activityCode": self.activity_code,
            "days": [day.value for day in self.days],
            "startTime": format_time(self.start_time),
            "endTime": format_time(self.end_time),
            "slotIndex": self.slot_index,
        }


@dataclass(frozen=True)
class SearchStats:
    """Solver statistics attached to a GeneratedSchedule.

    Attributes:
        nodes_explored: Search nodes visited (0 for solvers that don't count).
        budget_exhausted: True if the search stopped at its node/time budget
            and the schedule is the best found so far rather than optimal.
        elapsed_seconds: Wall-clock solve time.
        solver_status: OPTIMAL, FEASIBLE, BUDGET_EXHAUSTED or HEURISTIC.
    """

    nodes_explored: int = 0
    budget_exhausted: bool = False
    elapsed_seconds: float = 0.0
    solver_status: str = "OPTIMAL"

    def to_dict(self) -> dict:
        return {
            "nodesExplored": self.nodes_explored,
            "budgetExhausted": self.budget_exhausted,
            "elapsedSeconds": round(self.elapsed_seconds, 6),
            "solverStatus": self.solver_status,
        }


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class GeneratedSchedule:
    """Result of a schedule generation run.

    Built once per run and never modified afterwards.

    Attributes:
        schedule: Chosen placements, at most one per activity.
        conflicts: One message per activity that could not be placed.
        total_activities: Number of activities in the input.
        scheduled_activities: Number of distinct activities placed.
        algorithm: Algorithm that produced the schedule.
        generated_at: ISO-8601 timestamp (UTC).
        dependency_violations: Diagnostics from re-checking dependencies of
            placed slots. Expected to be empty.
        stats: Solver statistics.
    """

    schedule: tuple[ScheduleSlot, ...]
    conflicts: tuple[str, ...]
    total_activities: int
    scheduled_activities: int
    algorithm: SchedulingAlgorithm
    generated_at: str = field(default_factory=_utc_timestamp)
    dependency_violations: tuple[str, ...] = ()
    stats: SearchStats = field(default_factory=SearchStats)

    @property
    def has_dependency_violations(self) -> bool:
        return bool(self.dependency_violations)

    @property
    def is_complete(self) -> bool:
        """True if every input activity was placed."""
        return self.scheduled_activities == self.total_activities

    def scheduled_codes(self) -> set[str]:
        return {slot.activity_code for slot in self.schedule}

    def slots_by_day(self) -> dict[Weekday, list[ScheduleSlot]]:
        """Placements grouped per weekday, each day sorted by start time."""
        by_day: dict[Weekday, list[ScheduleSlot]] = {day: [] for day in Weekday}
        for slot in self.schedule:
            for day in slot.days:
                by_day[day].append(slot)
        for slots in by_day.values():
            slots.sort(key=lambda s: (s.start_time, s.end_time, s.activity_code))
        return by_day

    def find_slot(self, activity_code: str) -> Optional[ScheduleSlot]:
        key = activity_code.casefold()
        for slot in self.schedule:
            if slot.activity_code.casefold() == key:
                return slot
        return None

    def to_dict(self) -> dict:
        result = {
            "schedule": [slot.to_dict() for slot in self.schedule],
            "conflicts": list(self.conflicts),
            "totalActivities": self.total_activities,
            "scheduledActivities": self.scheduled_activities,
            "algorithm": self.algorithm.value,
            "generatedAt": self.generated_at,
        }
        if self.dependency_violations:
            result["dependencyViolations"] = list(self.dependency_violations)
        result["stats"] = self.stats.to_dict()
        return result
