"""Tests for the CP-SAT solver."""

import pytest

from weekplanner.domain.models import (
    Activity,
    Dependency,
    SchedulingAlgorithm,
    TimeSlot,
)
from weekplanner.scheduling.conflicts import overlaps
from weekplanner.scheduling.cpsat_solver import CPSATSolver


def slot(days, start="9:00 AM", end="10:00 AM"):
    return TimeSlot.from_strings(days, start, end)


class TestCPSATSolver:
    """Tests for CPSATSolver."""

    @pytest.fixture
    def solver(self):
        return CPSATSolver(time_limit_seconds=10.0)

    def test_simple_schedule(self, solver):
        activities = [
            Activity("A", (slot(["Monday"]), slot(["Tuesday"]))),
            Activity("B", (slot(["Monday"]),)),
        ]
        result = solver.solve(activities)

        assert result.algorithm == SchedulingAlgorithm.CPSAT
        assert result.is_complete
        assert result.find_slot("A").slot_index == 1
        assert result.stats.solver_status == "OPTIMAL"
        assert not result.stats.budget_exhausted

    def test_prefers_lower_slot_indices(self, solver):
        activities = [Activity("A", (slot(["Monday"]), slot(["Tuesday"]), slot(["Friday"])))]
        result = solver.solve(activities)

        assert result.find_slot("A").slot_index == 0

    def test_schedule_in_input_order(self, solver):
        activities = [
            Activity("Z", (slot(["Friday"]),)),
            Activity("A", (slot(["Monday"]),)),
        ]
        result = solver.solve(activities)

        assert [s.activity_code for s in result.schedule] == ["Z", "A"]

    def test_no_variables(self, solver):
        result = solver.solve([Activity("A", ()), Activity("B", (slot([]),))])

        assert result.schedule == ()
        assert result.conflicts == ("Could not schedule A", "Could not schedule B")

    def test_dependencies_are_transitive(self, solver):
        """B.0 needs an unplaceable C slot, so A.0 (which needs B.0) is
        ruled out too and A falls back to its second slot."""
        activities = [
            Activity(
                "A",
                (slot(["Monday"]), slot(["Thursday"])),
                (Dependency("A", 0, "B", 0),),
            ),
            Activity("B", (slot(["Tuesday"]),), (Dependency("B", 0, "C", 0),)),
            Activity("C", (slot([]),)),
        ]
        result = solver.solve(activities)

        assert [(s.activity_code, s.slot_index) for s in result.schedule] == [("A", 1)]
        assert result.dependency_violations == ()

    def test_dependency_pulls_in_target(self, solver):
        activities = [
            Activity("A", (slot(["Monday"]),), (Dependency("A", 0, "B", 1),)),
            Activity("B", (slot(["Tuesday"]), slot(["Wednesday"]))),
        ]
        result = solver.solve(activities)

        assert result.find_slot("B").slot_index == 1

    @pytest.mark.parametrize("seed", range(20))
    def test_matches_brute_force(self, seed, solver, random_activities, brute_force):
        activities = random_activities(seed, with_dependencies=seed % 2 == 1)
        result = solver.solve(activities)

        assert result.scheduled_activities == brute_force(activities)
        slots = result.schedule
        for i in range(len(slots)):
            for j in range(i + 1, len(slots)):
                assert not overlaps(slots[i], slots[j])
        assert result.dependency_violations == ()
