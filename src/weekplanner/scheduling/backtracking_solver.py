"""Exhaustive backtracking solver.

This module finds a placement that schedules the maximum number of
activities:
1. Walk the activities in input order
2. For each activity, try every slot (with its mandatory closure) in order
3. Also try leaving the activity out
4. Keep the first largest schedule found

The search is exponential in the number of activities, so it is meant for
small inputs and carries a node budget as a safety net.
"""

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional

from weekplanner.domain.models import (
    Activity,
    GeneratedSchedule,
    ScheduleSlot,
    SchedulingAlgorithm,
    SearchStats,
)
from weekplanner.scheduling.dependencies import DependencyIndex
from weekplanner.scheduling.placement import PartialSchedule
from weekplanner.scheduling.results import build_result

logger = logging.getLogger(__name__)

# How often (in nodes) the wall-clock limit is checked.
_CLOCK_CHECK_INTERVAL = 256


@dataclass
class _SearchState:
    """Accumulator threaded through the recursion."""

    target: int
    max_nodes: Optional[int]
    deadline: Optional[float]
    best: list[ScheduleSlot] = field(default_factory=list)
    nodes: int = 0
    pruned: int = 0
    exhausted: bool = False

    @property
    def finished(self) -> bool:
        """True once nothing better can be found or the budget ran out."""
        return self.exhausted or len(self.best) >= self.target

    def visit(self) -> bool:
        """Count a node. Returns False if the budget is exhausted."""
        self.nodes += 1
        if self.max_nodes is not None and self.nodes > self.max_nodes:
            self.exhausted = True
        elif (
            self.deadline is not None
            and self.nodes % _CLOCK_CHECK_INTERVAL == 0
            and time.perf_counter() > self.deadline
        ):
            self.exhausted = True
        return not self.exhausted


class BacktrackingSolver:
    """Depth-first search with undo over every activity/slot choice.

    Ties are broken by discovery order: a schedule only replaces the best
    one if it is strictly larger, so the result is stable for a given input.

    Example:
        >>> solver = BacktrackingSolver(max_nodes=100_000)
        >>> result = solver.solve(activities)
    """

    def __init__(
        self,
        max_nodes: Optional[int] = 1_000_000,
        time_limit_seconds: Optional[float] = None,
    ):
        """Initialize the solver.

        Args:
            max_nodes: Search nodes to visit before giving up and returning
                the best schedule so far. None means unlimited.
            time_limit_seconds: Optional wall-clock limit with the same
                give-up behaviour.
        """
        self.max_nodes = max_nodes
        self.time_limit_seconds = time_limit_seconds

    def solve(self, activities: Sequence[Activity]) -> GeneratedSchedule:
        """Find a maximal conflict-free placement.

        Args:
            activities: Activities in priority order (earlier activities win
                ties).

        Returns:
            GeneratedSchedule produced by backtracking.
        """
        activities = list(activities)
        started = time.perf_counter()
        index = DependencyIndex(activities)
        state = _SearchState(
            target=len(activities),
            max_nodes=self.max_nodes,
            deadline=(
                started + self.time_limit_seconds
                if self.time_limit_seconds is not None
                else None
            ),
        )

        self._backtrack(0, activities, index, PartialSchedule(), state)
        elapsed = time.perf_counter() - started

        if state.exhausted:
            logger.warning(
                "Backtracking budget exhausted after %d nodes; returning best "
                "schedule found so far (%d/%d activities)",
                state.nodes,
                len(state.best),
                len(activities),
            )
        logger.debug(
            "Backtracking visited %d nodes, pruned %d branches in %.3fs",
            state.nodes,
            state.pruned,
            elapsed,
        )

        stats = SearchStats(
            nodes_explored=state.nodes,
            budget_exhausted=state.exhausted,
            elapsed_seconds=elapsed,
            solver_status="BUDGET_EXHAUSTED" if state.exhausted else "OPTIMAL",
        )
        return build_result(
            activities, index, state.best, SchedulingAlgorithm.BACKTRACKING, stats
        )

    def _backtrack(
        self,
        position: int,
        activities: list[Activity],
        index: DependencyIndex,
        partial: PartialSchedule,
        state: _SearchState,
    ) -> None:
        if not state.visit():
            return

        if self._upper_bound(position, activities, index, partial) <= len(state.best):
            state.pruned += 1
            return

        if position == len(activities):
            # Strictly larger only: the first schedule of a given size wins.
            if len(partial) > len(state.best):
                state.best = partial.snapshot()
            return

        activity = activities[position]
        for slot_index in range(len(activity.available_slots)):
            closure = index.closure(activity, slot_index)
            if not partial.accepts(closure):
                continue

            partial.push(closure)
            self._backtrack(position + 1, activities, index, partial, state)
            partial.pop(len(closure))

            if state.finished:
                return

        # Leave this activity out (it may still arrive via a later closure).
        self._backtrack(position + 1, activities, index, partial, state)

    def _upper_bound(
        self,
        position: int,
        activities: list[Activity],
        index: DependencyIndex,
        partial: PartialSchedule,
    ) -> int:
        """Optimistic size of any schedule reachable from this node.

        Every activity contributes at most one slot. Unplaced activities at
        or after ``position`` may still be placed, and unplaced earlier ones
        only if a later closure can pull them in.
        """
        bound = len(partial)
        for activity in activities[position:]:
            if not partial.has_activity(activity.key):
                bound += 1
        for activity_key in index.earlier_targets(position):
            if not partial.has_activity(activity_key):
                bound += 1
        return bound
