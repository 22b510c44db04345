"""Greedy heuristic solver for large inputs.

This module implements a single first-fit pass:
1. Process activities in input order
2. Take the first slot whose closure fits the schedule so far
3. Never revisit a decision

It always terminates quickly but gives no optimality guarantee. Use the
backtracking solver when the input is small enough.
"""

import logging
import time
from collections.abc import Sequence

from weekplanner.domain.models import (
    Activity,
    GeneratedSchedule,
    SchedulingAlgorithm,
    SearchStats,
)
from weekplanner.scheduling.dependencies import DependencyIndex
from weekplanner.scheduling.placement import PartialSchedule
from weekplanner.scheduling.results import build_result

logger = logging.getLogger(__name__)


class GreedySolver:
    """First-fit solver.

    Dependencies are honoured with the same closure rules as backtracking:
    a slot is only taken together with every slot it requires.
    """

    def solve(self, activities: Sequence[Activity]) -> GeneratedSchedule:
        """Generate an approximate schedule in one pass.

        Args:
            activities: Activities in priority order.

        Returns:
            GeneratedSchedule produced by the greedy pass.
        """
        activities = list(activities)
        started = time.perf_counter()
        index = DependencyIndex(activities)
        partial = PartialSchedule()
        nodes = 0

        for activity in activities:
            if partial.has_activity(activity.key):
                # Already placed as part of an earlier closure.
                continue

            placed = False
            for slot_index in range(len(activity.available_slots)):
                nodes += 1
                closure = index.closure(activity, slot_index)
                reason = partial.rejection_reason(closure)
                if reason is None:
                    partial.push(closure)
                    placed = True
                    break
                logger.debug(
                    "Greedy: %s slot %d rejected (%s)",
                    activity.activity_code,
                    slot_index + 1,
                    reason,
                )

            if not placed:
                logger.debug(
                    "Greedy: %s skipped, no slot fits", activity.activity_code
                )

        stats = SearchStats(
            nodes_explored=nodes,
            elapsed_seconds=time.perf_counter() - started,
            solver_status="HEURISTIC",
        )
        return build_result(
            activities, index, partial.snapshot(), SchedulingAlgorithm.GREEDY, stats
        )
