"""Conflict model: decides whether two placements can coexist.

Two slots conflict when they share at least one weekday and their time
ranges overlap. Ranges are half-open, so a slot ending at 10:00 AM and
another starting at 10:00 AM do not conflict.

These functions accept anything with ``days``, ``start_time`` and
``end_time`` attributes, i.e. both TimeSlot and ScheduleSlot.
"""

from collections.abc import Iterable

from weekplanner.domain.timeutils import time_to_decimal

__all__ = [
    "conflicts_with_any",
    "find_conflicting_pairs",
    "overlaps",
    "shares_day",
    "time_to_decimal",
]


def shares_day(slot_a, slot_b) -> bool:
    """True if the two slots have at least one weekday in common."""
    return not set(slot_a.days).isdisjoint(slot_b.days)


def overlaps(slot_a, slot_b) -> bool:
    """Check whether two slots conflict.

    Symmetric by construction. A slot with no days never conflicts.
    """
    if not shares_day(slot_a, slot_b):
        return False
    return slot_a.start_time < slot_b.end_time and slot_b.start_time < slot_a.end_time


def conflicts_with_any(candidate, placed: Iterable) -> bool:
    """True if ``candidate`` overlaps any slot in ``placed``."""
    return any(overlaps(candidate, existing) for existing in placed)


def find_conflicting_pairs(slots: list) -> list[tuple[int, int]]:
    """Index pairs (i, j), i < j, of mutually conflicting slots."""
    pairs = []
    for i in range(len(slots)):
        for j in range(i + 1, len(slots)):
            if overlaps(slots[i], slots[j]):
                pairs.append((i, j))
    return pairs
