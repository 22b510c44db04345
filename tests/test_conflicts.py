"""Tests for the conflict model."""

import itertools

import pytest

from weekplanner.domain.models import Activity, ScheduleSlot, TimeSlot
from weekplanner.scheduling.conflicts import (
    conflicts_with_any,
    find_conflicting_pairs,
    overlaps,
    shares_day,
)


def slot(days, start, end):
    return TimeSlot.from_strings(days, start, end)


class TestOverlaps:
    """Tests for pairwise overlap."""

    def test_same_day_overlapping_times(self):
        a = slot(["Monday"], "9:00 AM", "10:00 AM")
        b = slot(["Monday"], "9:30 AM", "10:30 AM")
        assert overlaps(a, b)

    def test_touching_ranges_do_not_overlap(self):
        """Ranges are half-open: ending at 10 and starting at 10 is fine."""
        a = slot(["Monday"], "9:00 AM", "10:00 AM")
        b = slot(["Monday"], "10:00 AM", "11:00 AM")
        assert not overlaps(a, b)

    def test_different_days_never_overlap(self):
        a = slot(["Monday", "Wednesday"], "9:00 AM", "10:00 AM")
        b = slot(["Tuesday", "Thursday"], "9:00 AM", "10:00 AM")
        assert not overlaps(a, b)

    def test_one_shared_day_is_enough(self):
        a = slot(["Monday", "Thursday"], "1:00 PM", "2:30 PM")
        b = slot(["Thursday", "Friday"], "2:00 PM", "3:00 PM")
        assert overlaps(a, b)
        assert shares_day(a, b)

    def test_containment(self):
        a = slot(["Friday"], "8:00 AM", "5:00 PM")
        b = slot(["Friday"], "12:00 PM", "12:30 PM")
        assert overlaps(a, b)

    def test_identical_slots(self):
        a = slot(["Saturday"], "9:00 AM", "10:00 AM")
        assert overlaps(a, a)

    def test_empty_days_never_overlap(self):
        a = slot([], "9:00 AM", "10:00 AM")
        b = slot(["Monday"], "9:00 AM", "10:00 AM")
        assert not overlaps(a, b)
        assert not overlaps(a, a)

    def test_midnight_and_noon(self):
        a = slot(["Monday"], "12:00 AM", "1:00 AM")
        b = slot(["Monday"], "12:00 PM", "1:00 PM")
        assert not overlaps(a, b)

    def test_works_with_schedule_slots(self):
        activity = Activity("A", (slot(["Monday"], "9:00 AM", "10:00 AM"),))
        placed = ScheduleSlot.from_activity(activity, 0)
        assert overlaps(placed, slot(["Monday"], "9:59 AM", "11:00 AM"))

    def test_symmetry(self):
        """overlaps(a, b) == overlaps(b, a) for every pair in a varied pool."""
        pool = [
            slot(days, start, end)
            for days in (["Monday"], ["Tuesday"], ["Monday", "Tuesday"], [])
            for start, end in (
                ("8:00 AM", "9:00 AM"),
                ("8:30 AM", "9:30 AM"),
                ("9:00 AM", "10:00 AM"),
                ("8:00 AM", "12:00 PM"),
            )
        ]
        for a, b in itertools.product(pool, repeat=2):
            assert overlaps(a, b) == overlaps(b, a)


class TestConflictHelpers:
    """Tests for conflicts_with_any and find_conflicting_pairs."""

    @pytest.fixture
    def placed(self):
        return [
            slot(["Monday"], "9:00 AM", "10:00 AM"),
            slot(["Tuesday"], "1:00 PM", "2:00 PM"),
        ]

    def test_conflicts_with_any(self, placed):
        assert conflicts_with_any(slot(["Tuesday"], "1:30 PM", "3:00 PM"), placed)
        assert not conflicts_with_any(slot(["Wednesday"], "9:00 AM", "10:00 AM"), placed)

    def test_conflicts_with_nothing(self):
        assert not conflicts_with_any(slot(["Monday"], "9:00 AM", "10:00 AM"), [])

    def test_find_conflicting_pairs(self, placed):
        slots = placed + [slot(["Monday", "Tuesday"], "9:30 AM", "1:30 PM")]
        assert find_conflicting_pairs(slots) == [(0, 2), (1, 2)]
