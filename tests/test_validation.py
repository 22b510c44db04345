"""Tests for input and schedule validation."""

from dataclasses import replace

import pytest

from weekplanner.domain.models import (
    Activity,
    Dependency,
    GeneratedSchedule,
    ScheduleSlot,
    SchedulingAlgorithm,
    TimeSlot,
)
from weekplanner.scheduling.scheduler import Scheduler, SolverType
from weekplanner.validation.validator import (
    InputValidator,
    ScheduleValidator,
    ValidationErrorType,
)


def slot(days, start="9:00 AM", end="10:00 AM"):
    return TimeSlot.from_strings(days, start, end)


class TestScheduleValidator:
    """Tests for ScheduleValidator."""

    @pytest.fixture
    def validator(self):
        return ScheduleValidator()

    @pytest.fixture
    def activities(self):
        return [
            Activity(
                "A",
                (slot(["Monday"]), slot(["Tuesday"])),
                (Dependency("A", 0, "B", 0),),
            ),
            Activity("B", (slot(["Wednesday"]),)),
            Activity("C", (slot(["Monday"], "9:30 AM", "10:30 AM"),)),
        ]

    def build(self, activities, placements, conflicts):
        by_code = {a.activity_code: a for a in activities}
        schedule = tuple(
            ScheduleSlot.from_activity(by_code[code], index)
            for code, index in placements
        )
        return GeneratedSchedule(
            schedule=schedule,
            conflicts=tuple(f"Could not schedule {c}" for c in conflicts),
            total_activities=len(activities),
            scheduled_activities=len({code for code, _ in placements}),
            algorithm=SchedulingAlgorithm.BACKTRACKING,
        )

    @pytest.mark.parametrize("solver_type", list(SolverType))
    def test_generated_schedules_pass(self, validator, activities, solver_type):
        result = Scheduler().generate(activities, solver_type)
        validation = validator.validate(result, activities)

        assert validation.is_valid, [str(e) for e in validation.errors]

    def test_valid_hand_built_schedule(self, validator, activities):
        result = self.build(activities, [("A", 0), ("B", 0)], ["C"])

        assert validator.validate(result, activities).is_valid

    def test_overlap_detected(self, validator, activities):
        result = self.build(activities, [("A", 0), ("B", 0), ("C", 0)], [])
        validation = validator.validate(result, activities)

        assert validation.has_error(ValidationErrorType.SLOT_OVERLAP)

    def test_unsatisfied_dependency_detected(self, validator, activities):
        result = self.build(activities, [("A", 0)], ["B", "C"])
        validation = validator.validate(result, activities)

        assert validation.has_error(ValidationErrorType.DEPENDENCY_UNSATISFIED)
        error = validation.errors[0]
        assert error.activity_code == "A"
        assert "A slot 1 requires B slot 1" in str(error)

    def test_chain_gap_is_a_warning(self, validator):
        activities = [
            Activity("A", (slot(["Monday"]),), (Dependency("A", 0, "B", 0),)),
            Activity("B", (slot(["Tuesday"]),), (Dependency("B", 0, "C", 0),)),
            Activity("C", (slot([]),)),
        ]
        result = Scheduler().generate(activities)
        validation = validator.validate(result, activities)

        assert result.has_dependency_violations
        assert validation.is_valid, [str(e) for e in validation.errors]
        assert any("B slot 1 requires C slot 1" in w for w in validation.warnings)

    @pytest.mark.parametrize("seed", range(40))
    @pytest.mark.parametrize("solver_type", [SolverType.BACKTRACKING, SolverType.GREEDY])
    def test_dependency_graphs_validate(
        self, validator, seed, solver_type, dependency_graph_activities
    ):
        activities = dependency_graph_activities(seed)
        result = Scheduler().generate(activities, solver_type)

        validation = validator.validate(result, activities)
        assert validation.is_valid, [str(e) for e in validation.errors]

    def test_gap_at_unrequired_slot_is_an_error(self, validator):
        activities = [
            Activity("A", (slot(["Monday"]),), (Dependency("A", 0, "B", 0),)),
            Activity("B", (slot(["Tuesday"]),), (Dependency("B", 0, "C", 0),)),
            Activity("C", (slot(["Wednesday"]),)),
        ]
        result = self.build(activities, [("B", 0)], ["A", "C"])
        validation = validator.validate(result, activities)

        assert validation.has_error(ValidationErrorType.DEPENDENCY_UNSATISFIED)

    def test_double_booking_detected(self, validator, activities):
        result = self.build(activities, [("A", 1), ("A", 0), ("B", 0)], ["C"])
        validation = validator.validate(result, activities)

        assert validation.has_error(ValidationErrorType.DOUBLE_BOOKED)

    def test_missing_conflict_detected(self, validator, activities):
        result = self.build(activities, [("A", 0), ("B", 0)], [])
        validation = validator.validate(result, activities)

        assert validation.has_error(ValidationErrorType.MISSING_CONFLICT)

    def test_spurious_conflict_detected(self, validator, activities):
        result = self.build(activities, [("A", 1)], ["A", "B", "C"])
        validation = validator.validate(result, activities)

        assert validation.has_error(ValidationErrorType.SPURIOUS_CONFLICT)

    def test_unknown_activity_detected(self, validator, activities):
        stranger = Activity("X", (slot(["Saturday"]),))
        result = self.build(activities + [stranger], [("X", 0)], ["A", "B", "C"])
        validation = validator.validate(result, activities)

        assert validation.has_error(ValidationErrorType.UNKNOWN_ACTIVITY)

    def test_slot_mismatch_detected(self, validator, activities):
        result = self.build(activities, [("B", 0)], ["A", "C"])
        moved = replace(result.schedule[0], days=tuple(slot(["Friday"]).days))
        result = replace(result, schedule=(moved,))
        validation = validator.validate(result, activities)

        assert validation.has_error(ValidationErrorType.SLOT_MISMATCH)

    def test_unknown_slot_detected(self, validator, activities):
        result = self.build(activities, [("B", 0)], ["A", "C"])
        result = replace(result, schedule=(replace(result.schedule[0], slot_index=4),))
        validation = validator.validate(result, activities)

        assert validation.has_error(ValidationErrorType.UNKNOWN_SLOT)

    def test_count_mismatch_detected(self, validator, activities):
        result = self.build(activities, [("B", 0)], ["A", "C"])
        result = replace(result, scheduled_activities=2)
        validation = validator.validate(result, activities)

        assert validation.has_error(ValidationErrorType.COUNT_MISMATCH)

    def test_exhausted_budget_warns(self, validator, activities):
        result = Scheduler().generate(activities)
        result = replace(result, stats=replace(result.stats, budget_exhausted=True))
        validation = validator.validate(result, activities)

        assert validation.is_valid
        assert validation.warnings


class TestInputValidator:
    """Tests for InputValidator."""

    @pytest.fixture
    def validator(self):
        return InputValidator()

    def test_clean_input(self, validator):
        activities = [Activity("MATH 101", (slot(["Monday"]),))]
        validation = validator.validate(activities)

        assert validation.is_valid
        assert validation.warnings == []

    def test_duplicate_codes(self, validator):
        validation = validator.validate([Activity("Math"), Activity("math")])

        assert not validation.is_valid
        assert validation.has_error(ValidationErrorType.DUPLICATE_ACTIVITY)

    def test_code_format_warning(self, validator):
        validation = validator.validate([Activity("MATH#1", (slot(["Monday"]),))])

        assert validation.is_valid
        assert any("letters, numbers" in w for w in validation.warnings)

    def test_long_code_warning(self, validator):
        validation = validator.validate([Activity("X" * 21, (slot(["Monday"]),))])

        assert any("longer than 20" in w for w in validation.warnings)

    def test_missing_slots_and_days_warn(self, validator):
        activities = [Activity("A"), Activity("B", (slot([]),))]
        warnings = validator.validate(activities).warnings

        assert "Activity A has no time slots and cannot be scheduled" in warnings
        assert "Activity B slot 1 has no days and will never be chosen" in warnings

    def test_dangling_dependency_warns(self, validator):
        activities = [
            Activity("A", (slot(["Monday"]),), (Dependency("A", 0, "B", 3),)),
            Activity("B", (slot(["Tuesday"]),)),
        ]
        warnings = validator.validate(activities).warnings

        assert any("A slot 1 requires B slot 4" in w for w in warnings)
