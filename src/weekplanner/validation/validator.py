"""Validation module for checking activity input and generated schedules.

ScheduleValidator independently re-checks a GeneratedSchedule against the
activities it was generated from. It is the reference for what a correct
schedule looks like and is used by the CLI and the tests.

InputValidator reports problems in an activity list before generation. It
covers the rules an activity entry form would enforce, such as the code format
and at least one day per slot. It never raises: the caller decides what to
do with the findings.
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from weekplanner.domain.models import Activity, GeneratedSchedule
from weekplanner.scheduling.conflicts import overlaps
from weekplanner.scheduling.dependencies import DependencyIndex

ACTIVITY_CODE_PATTERN = re.compile(r"^[A-Za-z0-9\s\-_]+$")
ACTIVITY_CODE_MAX_LENGTH = 20


class ValidationErrorType(Enum):
    """Types of validation errors."""

    # Generated schedule
    SLOT_OVERLAP = "slot_overlap"
    DOUBLE_BOOKED = "double_booked"
    UNKNOWN_ACTIVITY = "unknown_activity"
    UNKNOWN_SLOT = "unknown_slot"
    SLOT_MISMATCH = "slot_mismatch"
    DEPENDENCY_UNSATISFIED = "dependency_unsatisfied"
    MISSING_CONFLICT = "missing_conflict"
    SPURIOUS_CONFLICT = "spurious_conflict"
    COUNT_MISMATCH = "count_mismatch"
    # Activity input
    DUPLICATE_ACTIVITY = "duplicate_activity"
    INVALID_ACTIVITY_CODE = "invalid_activity_code"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    activity_code: Optional[str] = None
    slot_index: Optional[int] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.activity_code:
            parts.append(f"Activity {self.activity_code}:")
        parts.append(self.message)
        if self.slot_index is not None:
            parts.append(f"(slot {self.slot_index + 1})")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of a validation run."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)

    def has_error(self, error_type: ValidationErrorType) -> bool:
        return any(e.error_type == error_type for e in self.errors)


class ScheduleValidator:
    """Validates a generated schedule against its input activities.

    Example:
        >>> validator = ScheduleValidator()
        >>> result = validator.validate(generated, activities)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def validate(
        self,
        generated: GeneratedSchedule,
        activities: list[Activity],
    ) -> ValidationResult:
        """Validate a complete generated schedule.

        Args:
            generated: The result to check.
            activities: The activities it was generated from.

        Returns:
            ValidationResult with is_valid flag and any errors.
        """
        result = ValidationResult(is_valid=True)
        by_key = {a.key: a for a in activities}

        self._validate_placements(generated, by_key, result)
        self._validate_no_overlaps(generated, result)
        self._validate_dependencies(generated, activities, result)
        self._validate_conflicts(generated, activities, result)
        self._validate_counts(generated, activities, result)

        if generated.stats.budget_exhausted:
            result.add_warning(
                "Search budget was exhausted; schedule may not be optimal"
            )
        return result

    def _validate_placements(
        self,
        generated: GeneratedSchedule,
        by_key: dict[str, Activity],
        result: ValidationResult,
    ) -> None:
        """Each placement must match a real slot, once per activity."""
        counts = Counter(slot.activity_code.casefold() for slot in generated.schedule)
        for key, count in counts.items():
            if count > 1:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.DOUBLE_BOOKED,
                        message=f"Placed {count} times",
                        activity_code=key,
                    )
                )

        for placed in generated.schedule:
            activity = by_key.get(placed.activity_code.casefold())
            if activity is None:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.UNKNOWN_ACTIVITY,
                        message="Placed activity is not in the input",
                        activity_code=placed.activity_code,
                    )
                )
                continue
            if not activity.has_slot(placed.slot_index):
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.UNKNOWN_SLOT,
                        message="Placed slot does not exist",
                        activity_code=placed.activity_code,
                        slot_index=placed.slot_index,
                    )
                )
                continue
            source = activity.available_slots[placed.slot_index]
            if (
                tuple(source.days) != tuple(placed.days)
                or source.start_time != placed.start_time
                or source.end_time != placed.end_time
            ):
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.SLOT_MISMATCH,
                        message="Placement does not match the activity's slot",
                        activity_code=placed.activity_code,
                        slot_index=placed.slot_index,
                    )
                )

    def _validate_no_overlaps(
        self,
        generated: GeneratedSchedule,
        result: ValidationResult,
    ) -> None:
        slots = generated.schedule
        for i in range(len(slots)):
            for j in range(i + 1, len(slots)):
                if overlaps(slots[i], slots[j]):
                    result.add_error(
                        ValidationError(
                            error_type=ValidationErrorType.SLOT_OVERLAP,
                            message=f"Overlaps with {slots[j].activity_code}",
                            activity_code=slots[i].activity_code,
                            slot_index=slots[i].slot_index,
                        )
                    )

    def _validate_dependencies(
        self,
        generated: GeneratedSchedule,
        activities: list[Activity],
        result: ValidationResult,
    ) -> None:
        """Every direct dependent of a placed slot must be placed too.

        Closures are one hop, so a slot that another placed slot pulled in
        may leave its own dependents out. Such chain gaps are warnings. A gap
        at a slot nothing pulled in is an error.
        """
        index = DependencyIndex(activities)
        placed = {slot.key for slot in generated.schedule}
        pulled_in = {
            target for key in placed for target in index.targets(key)
        }
        for slot in generated.schedule:
            for dep in index.declared(slot.key):
                if dep.target_key in placed:
                    continue
                if slot.key in pulled_in:
                    result.add_warning(
                        f"{dep.describe()}, which is not scheduled "
                        f"(chain beyond a one-hop closure)"
                    )
                else:
                    result.add_error(
                        ValidationError(
                            error_type=ValidationErrorType.DEPENDENCY_UNSATISFIED,
                            message=f"{dep.describe()}, which is not scheduled",
                            activity_code=slot.activity_code,
                            slot_index=slot.slot_index,
                        )
                    )

    def _validate_conflicts(
        self,
        generated: GeneratedSchedule,
        activities: list[Activity],
        result: ValidationResult,
    ) -> None:
        """Each unplaced activity is reported exactly once, placed ones never."""
        placed = {slot.activity_code.casefold() for slot in generated.schedule}
        for activity in activities:
            mentions = [
                message for message in generated.conflicts
                if _names_activity(message, activity.activity_code)
            ]
            if activity.key in placed and mentions:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.SPURIOUS_CONFLICT,
                        message="Scheduled activity is reported as a conflict",
                        activity_code=activity.activity_code,
                    )
                )
            elif activity.key not in placed and len(mentions) != 1:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.MISSING_CONFLICT,
                        message=(
                            f"Unscheduled activity reported {len(mentions)} "
                            f"times, expected once"
                        ),
                        activity_code=activity.activity_code,
                    )
                )

    def _validate_counts(
        self,
        generated: GeneratedSchedule,
        activities: list[Activity],
        result: ValidationResult,
    ) -> None:
        distinct = len({slot.activity_code.casefold() for slot in generated.schedule})
        if generated.total_activities != len(activities):
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.COUNT_MISMATCH,
                    message=(
                        f"total_activities is {generated.total_activities}, "
                        f"expected {len(activities)}"
                    ),
                )
            )
        if generated.scheduled_activities != distinct:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.COUNT_MISMATCH,
                    message=(
                        f"scheduled_activities is {generated.scheduled_activities}, "
                        f"expected {distinct}"
                    ),
                )
            )


def _names_activity(message: str, activity_code: str) -> bool:
    prefix = f"Could not schedule {activity_code}"
    return message == prefix or message.startswith(prefix + " ")


class InputValidator:
    """Reports problems in an activity list before generation.

    Duplicate codes are errors (generation would refuse them). Everything
    else is a warning because the engine tolerates it.
    """

    def validate(self, activities: list[Activity]) -> ValidationResult:
        result = ValidationResult(is_valid=True)

        seen: dict[str, str] = {}
        for activity in activities:
            if activity.key in seen:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.DUPLICATE_ACTIVITY,
                        message=f"Code collides with {seen[activity.key]!r}",
                        activity_code=activity.activity_code,
                    )
                )
                continue
            seen[activity.key] = activity.activity_code
            self._check_activity(activity, result)

        if not result.is_valid:
            return result

        index = DependencyIndex(activities)
        for dep in index.dropped:
            result.add_warning(
                f"Dependency {dep.describe()} points at a missing activity or slot "
                f"and will be ignored"
            )
        return result

    def _check_activity(self, activity: Activity, result: ValidationResult) -> None:
        code = activity.activity_code
        if len(code) > ACTIVITY_CODE_MAX_LENGTH:
            result.add_warning(
                f"Activity code {code!r} is longer than "
                f"{ACTIVITY_CODE_MAX_LENGTH} characters"
            )
        if not ACTIVITY_CODE_PATTERN.match(code):
            result.add_warning(
                f"Activity code {code!r} should only contain letters, numbers, "
                f"spaces, hyphens and underscores"
            )
        if not activity.available_slots:
            result.add_warning(f"Activity {code} has no time slots and cannot be scheduled")
        for i, slot in enumerate(activity.available_slots):
            if not slot.days:
                result.add_warning(
                    f"Activity {code} slot {i + 1} has no days and will never be chosen"
                )
