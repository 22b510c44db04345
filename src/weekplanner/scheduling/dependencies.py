"""Dependency graph and mandatory closures.

Dependencies are stored on the activity that owns them, but logically form
one directed graph over (activity, slot index) pairs across the whole input.
This module builds that graph once per run and answers the question the
solvers ask at every node: "if I choose this slot, what else must come with
it?"

Closures are one hop: a slot pulls in its direct dependents only, not the
dependents of those dependents.
"""

import logging
from collections.abc import Sequence
from typing import Optional

from weekplanner.domain.models import Activity, Dependency, ScheduleSlot

logger = logging.getLogger(__name__)

SlotKey = tuple[str, int]


class DependencyIndex:
    """Directed dependency graph over the activities of one run.

    Edges whose source or target activity/slot does not exist are dropped
    (and remembered in ``dropped``). Duplicate edges are collapsed, and edge
    order follows declaration order so closures are deterministic.
    """

    def __init__(self, activities: Sequence[Activity]):
        self.activities = list(activities)
        self._by_key: dict[str, Activity] = {a.key: a for a in self.activities}
        self._position: dict[str, int] = {
            a.key: i for i, a in enumerate(self.activities)
        }
        self._edges: dict[SlotKey, list[SlotKey]] = {}
        self._declared: dict[SlotKey, list[Dependency]] = {}
        self.dropped: list[Dependency] = []

        for activity in self.activities:
            for dep in activity.dependencies:
                self._add_edge(dep)

        self._earlier_targets = self._build_earlier_targets()

    def _add_edge(self, dep: Dependency) -> None:
        source = self._by_key.get(dep.source_key[0])
        target = self._by_key.get(dep.target_key[0])
        if (
            source is None
            or target is None
            or not source.has_slot(dep.slot_index)
            or not target.has_slot(dep.dependent_slot_index)
        ):
            logger.debug("Ignoring dangling dependency: %s", dep.describe())
            self.dropped.append(dep)
            return
        if dep.source_key == dep.target_key:
            # A slot requiring itself is always satisfied.
            return

        targets = self._edges.setdefault(dep.source_key, [])
        if dep.target_key not in targets:
            targets.append(dep.target_key)
            self._declared.setdefault(dep.source_key, []).append(dep)

    def _build_earlier_targets(self) -> list[set[str]]:
        """For each position p, the activities before p that a closure rooted
        at p or later could still pull into the schedule."""
        earlier: list[set[str]] = [set() for _ in range(len(self.activities) + 1)]
        for source_key, targets in self._edges.items():
            source_pos = self._position[source_key[0]]
            for target_key in targets:
                target_pos = self._position[target_key[0]]
                for p in range(target_pos + 1, source_pos + 1):
                    earlier[p].add(target_key[0])
        return earlier

    def activity(self, activity_key: str) -> Optional[Activity]:
        return self._by_key.get(activity_key)

    def position(self, activity_key: str) -> int:
        return self._position[activity_key]

    def targets(self, key: SlotKey) -> list[SlotKey]:
        """Direct dependents of one (activity, slot) pair."""
        return list(self._edges.get(key, []))

    def declared(self, key: SlotKey) -> list[Dependency]:
        """The valid dependency records rooted at one (activity, slot) pair."""
        return list(self._declared.get(key, []))

    def edges(self) -> list[tuple[SlotKey, SlotKey]]:
        return [
            (source, target)
            for source, targets in self._edges.items()
            for target in targets
        ]

    def earlier_targets(self, position: int) -> set[str]:
        return self._earlier_targets[position]

    @property
    def has_dependencies(self) -> bool:
        return bool(self._edges)

    def closure(self, activity: Activity, slot_index: int) -> list[ScheduleSlot]:
        """The candidate slot followed by every slot it directly requires."""
        slots = [ScheduleSlot.from_activity(activity, slot_index)]
        for target_key, target_slot in self._edges.get((activity.key, slot_index), []):
            slots.append(
                ScheduleSlot.from_activity(self._by_key[target_key], target_slot)
            )
        return slots
