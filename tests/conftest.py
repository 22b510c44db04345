"""Shared fixtures for solver tests."""

import itertools
import random

import pytest

from weekplanner.domain.models import Activity, Dependency, TimeSlot
from weekplanner.exceptions import DuplicateDependencyError
from weekplanner.scheduling.conflicts import overlaps
from weekplanner.scheduling.dependencies import DependencyIndex
from weekplanner.scheduling.placement import PartialSchedule

DAY_POOL = ["Monday", "Tuesday", "Wednesday"]
START_POOL = ["8:00 AM", "9:00 AM", "9:30 AM", "10:00 AM"]
END_FOR = {
    "8:00 AM": ["9:00 AM", "10:00 AM"],
    "9:00 AM": ["10:00 AM", "11:00 AM"],
    "9:30 AM": ["10:30 AM", "11:00 AM"],
    "10:00 AM": ["11:00 AM", "12:00 PM"],
}


def make_random_activities(seed, max_activities=5, with_dependencies=False):
    """Small random inputs with plenty of overlaps.

    With dependencies, edges only run from the first half of the activities
    to the second half, so no slot that is a dependency target has
    dependencies of its own.
    """
    rng = random.Random(seed)
    count = rng.randint(2, max_activities)
    activities = []
    for i in range(count):
        slots = []
        for _ in range(rng.randint(0, 3)):
            days = rng.sample(DAY_POOL, rng.randint(1, 2))
            start = rng.choice(START_POOL)
            slots.append(TimeSlot.from_strings(days, start, rng.choice(END_FOR[start])))
        activities.append(Activity(f"ACT{i}", tuple(slots)))

    if with_dependencies:
        half = count // 2
        for i in range(half):
            source = activities[i]
            if not source.available_slots or rng.random() < 0.4:
                continue
            target = activities[rng.randint(half, count - 1)]
            if not target.available_slots:
                continue
            dep = Dependency(
                source.activity_code,
                rng.randrange(len(source.available_slots)),
                target.activity_code,
                rng.randrange(len(target.available_slots)),
            )
            activities[i] = Activity(
                source.activity_code, source.available_slots, (dep,)
            )
    return activities


def brute_force_max(activities):
    """Largest valid placement found by trying every combination."""
    index = DependencyIndex(activities)
    options = [
        [None] + list(range(len(a.available_slots))) for a in activities
    ]
    best = 0
    for choice in itertools.product(*options):
        chosen = [
            (a, i) for a, i in zip(activities, choice) if i is not None
        ]
        if len(chosen) <= best:
            continue
        slots = [a.available_slots[i] for a, i in chosen]
        if any(not s.days for s in slots):
            continue
        if any(
            overlaps(slots[p], slots[q])
            for p in range(len(slots))
            for q in range(p + 1, len(slots))
        ):
            continue
        keys = {(a.key, i) for a, i in chosen}
        if any(
            target not in keys
            for key in keys
            for target in index.targets(key)
        ):
            continue
        best = len(chosen)
    return best


def make_dependency_graph_activities(seed, max_activities=6):
    """Random inputs whose dependencies form an arbitrary graph.

    Unlike make_random_activities, edges may point backwards, form chains,
    share a target or point at another slot of the same activity.
    """
    rng = random.Random(seed)
    activities = make_random_activities(seed, max_activities)
    for _ in range(rng.randint(1, len(activities) + 2)):
        source_pos = rng.randrange(len(activities))
        source = activities[source_pos]
        target = source if rng.random() < 0.15 else rng.choice(activities)
        if not source.available_slots or not target.available_slots:
            continue
        try:
            activities[source_pos] = source.with_dependency(
                rng.randrange(len(source.available_slots)),
                target.activity_code,
                rng.randrange(len(target.available_slots)),
            )
        except DuplicateDependencyError:
            continue
    return activities


def first_largest_placement(activities):
    """Exhaustive search with no pruning and no early stop.

    Walks the same choices in the same order as the backtracking solver and
    under the same PartialSchedule rules, and keeps the first placement of
    the largest size.
    """
    index = DependencyIndex(activities)
    partial = PartialSchedule()
    best = []

    def search(position):
        nonlocal best
        if position == len(activities):
            if len(partial) > len(best):
                best = partial.snapshot()
            return
        activity = activities[position]
        for slot_index in range(len(activity.available_slots)):
            closure = index.closure(activity, slot_index)
            if partial.accepts(closure):
                partial.push(closure)
                search(position + 1)
                partial.pop(len(closure))
        search(position + 1)

    search(0)
    return [slot.key for slot in best]


@pytest.fixture
def random_activities():
    return make_random_activities


@pytest.fixture
def brute_force():
    return brute_force_max


@pytest.fixture
def dependency_graph_activities():
    return make_dependency_graph_activities


@pytest.fixture
def reference_search():
    return first_largest_placement
