"""Main scheduler interface.

This module provides the high-level Scheduler class that checks the input,
picks a solver and returns the generated schedule.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from weekplanner.domain.catalog import ActivityCatalog
from weekplanner.domain.models import Activity, GeneratedSchedule
from weekplanner.exceptions import InvalidActivityError
from weekplanner.scheduling.backtracking_solver import BacktrackingSolver
from weekplanner.scheduling.conflicts import time_to_decimal
from weekplanner.scheduling.cpsat_solver import CPSATSolver
from weekplanner.scheduling.greedy_solver import GreedySolver

logger = logging.getLogger(__name__)

# Inputs up to this size are solved exactly by backtracking.
BACKTRACKING_ACTIVITY_LIMIT = 10


class SolverType(Enum):
    """Type of solver to use."""

    AUTO = "auto"  # Backtracking for small inputs, greedy otherwise
    BACKTRACKING = "backtracking"  # Exhaustive search (optimal)
    GREEDY = "greedy"  # Fast first-fit
    CPSAT = "cpsat"  # OR-Tools CP-SAT (optimal, scales further)


@dataclass
class SchedulerConfig:
    """Configuration for schedule generation.

    Attributes:
        solver_type: Which solver to use.
        backtracking_limit: Largest input AUTO sends to backtracking.
        max_nodes: Backtracking node budget (None = unlimited).
        time_limit_seconds: Optional backtracking wall-clock budget.
        cpsat_time_limit_seconds: Maximum CP-SAT runtime.
        cpsat_num_workers: CP-SAT parallel workers (1 keeps runs deterministic).
    """

    solver_type: SolverType = SolverType.AUTO
    backtracking_limit: int = BACKTRACKING_ACTIVITY_LIMIT
    max_nodes: Optional[int] = 1_000_000
    time_limit_seconds: Optional[float] = None
    cpsat_time_limit_seconds: float = 10.0
    cpsat_num_workers: int = 1


class Scheduler:
    """High-level scheduler for generating weekly schedules.

    Example:
        >>> scheduler = Scheduler()
        >>> result = scheduler.generate(activities)
        >>> result.conflicts
        ()
    """

    def __init__(self, config: Optional[SchedulerConfig] = None):
        self.config = config or SchedulerConfig()

        self.backtracking_solver = BacktrackingSolver(
            max_nodes=self.config.max_nodes,
            time_limit_seconds=self.config.time_limit_seconds,
        )
        self.greedy_solver = GreedySolver()
        self.cpsat_solver = CPSATSolver(
            time_limit_seconds=self.config.cpsat_time_limit_seconds,
            num_workers=self.config.cpsat_num_workers,
        )

    def select_solver(
        self,
        activity_count: int,
        solver_type: Optional[SolverType] = None,
    ) -> SolverType:
        """Resolve AUTO into a concrete solver for an input of this size."""
        solver_type = solver_type or self.config.solver_type
        if solver_type != SolverType.AUTO:
            return solver_type
        if activity_count <= self.config.backtracking_limit:
            return SolverType.BACKTRACKING
        return SolverType.GREEDY

    def generate(
        self,
        activities: Iterable[Activity],
        solver_type: Optional[SolverType] = None,
    ) -> GeneratedSchedule:
        """Generate a schedule for the activities.

        Args:
            activities: Activities to place. Not modified.
            solver_type: Overrides the configured solver for this call.

        Returns:
            GeneratedSchedule. Activities that could not be placed are
            listed in ``conflicts``.

        Raises:
            InvalidActivityError: If an element is not an Activity.
            DuplicateActivityError: If two activities share a code.
        """
        activities = list(activities)
        self._check_activities(activities)

        chosen = self.select_solver(len(activities), solver_type)
        logger.info(
            "Generating schedule for %d activities using %s",
            len(activities),
            chosen.value,
        )

        if chosen == SolverType.BACKTRACKING:
            result = self.backtracking_solver.solve(activities)
        elif chosen == SolverType.CPSAT:
            result = self.cpsat_solver.solve(activities)
        else:
            result = self.greedy_solver.solve(activities)

        for violation in result.dependency_violations:
            logger.warning("Dependency violation: %s", violation)
        logger.info(
            "Scheduled %d/%d activities (%s, %d conflicts)",
            result.scheduled_activities,
            result.total_activities,
            result.algorithm.value,
            len(result.conflicts),
        )
        return result

    def generate_with_stats(
        self,
        activities: Iterable[Activity],
        solver_type: Optional[SolverType] = None,
    ) -> tuple[GeneratedSchedule, dict]:
        """Generate a schedule and return summary statistics.

        Returns:
            Tuple of (result, stats_dict).
        """
        result = self.generate(activities, solver_type)
        return result, self._calculate_stats(result)

    def _check_activities(self, activities: list[Activity]) -> None:
        for activity in activities:
            if not isinstance(activity, Activity):
                raise InvalidActivityError(
                    f"Expected Activity, got {type(activity).__name__}"
                )
        # The catalog enforces case-insensitive code uniqueness
        ActivityCatalog(activities)

    def _calculate_stats(self, result: GeneratedSchedule) -> dict:
        """Calculate schedule statistics."""
        by_day = result.slots_by_day()
        weekly_hours = sum(
            (time_to_decimal(slot.end_time) - time_to_decimal(slot.start_time))
            * len(slot.days)
            for slot in result.schedule
        )
        return {
            "total_activities": result.total_activities,
            "scheduled_activities": result.scheduled_activities,
            "unscheduled_activities": result.total_activities - result.scheduled_activities,
            "algorithm": result.algorithm.value,
            "weekly_hours": weekly_hours,
            "busiest_day": (
                max(by_day, key=lambda d: len(by_day[d])).value
                if result.schedule
                else None
            ),
            "slots_per_day": {day.value: len(slots) for day, slots in by_day.items()},
            "dependency_violations": len(result.dependency_violations),
            "nodes_explored": result.stats.nodes_explored,
            "budget_exhausted": result.stats.budget_exhausted,
        }


def generate_schedule(
    activities: Iterable[Activity],
    algorithm: Union[SolverType, str, None] = None,
    config: Optional[SchedulerConfig] = None,
) -> GeneratedSchedule:
    """Generate a schedule with a one-off Scheduler.

    Args:
        activities: Activities to place.
        algorithm: Force "backtracking", "greedy" or "cpsat" (or "auto").
        config: Optional scheduler configuration.
    """
    solver_type = SolverType(algorithm) if isinstance(algorithm, str) else algorithm
    return Scheduler(config).generate(activities, solver_type)
