"""Scheduling engine for generating weekly activity schedules."""

from weekplanner.scheduling.backtracking_solver import BacktrackingSolver
from weekplanner.scheduling.conflicts import (
    conflicts_with_any,
    overlaps,
    time_to_decimal,
)
from weekplanner.scheduling.cpsat_solver import CPSATSolver
from weekplanner.scheduling.dependencies import DependencyIndex
from weekplanner.scheduling.greedy_solver import GreedySolver
from weekplanner.scheduling.placement import PartialSchedule
from weekplanner.scheduling.scheduler import (
    BACKTRACKING_ACTIVITY_LIMIT,
    Scheduler,
    SchedulerConfig,
    SolverType,
    generate_schedule,
)

__all__ = [
    # Core scheduler
    "Scheduler",
    "SchedulerConfig",
    "SolverType",
    "generate_schedule",
    "BACKTRACKING_ACTIVITY_LIMIT",
    # Solvers
    "BacktrackingSolver",
    "GreedySolver",
    "CPSATSolver",
    # Search building blocks
    "DependencyIndex",
    "PartialSchedule",
    # Conflict model
    "conflicts_with_any",
    "overlaps",
    "time_to_decimal",
]
