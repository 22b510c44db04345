"""Partial schedule with closure-level push/pop."""

from typing import Optional

from weekplanner.domain.models import ScheduleSlot
from weekplanner.scheduling.conflicts import overlaps


class PartialSchedule:
    """Placements chosen so far during a search.

    Closures are pushed and popped as a unit so a backtracking search can
    undo a choice together with everything it pulled in.
    """

    def __init__(self):
        self.slots: list[ScheduleSlot] = []
        self._activity_keys: set[str] = set()

    def __len__(self) -> int:
        return len(self.slots)

    def has_activity(self, activity_key: str) -> bool:
        return activity_key in self._activity_keys

    def rejection_reason(self, closure: list[ScheduleSlot]) -> Optional[str]:
        """Why ``closure`` cannot be placed, or None if it can.

        A closure is rejected when a member has no days, when it names the
        same activity twice, when two members conflict, when a member's
        activity is already placed, or when a member conflicts with a
        placed slot.
        """
        seen: set[str] = set()
        for slot in closure:
            if not slot.days:
                return f"{slot.activity_code} slot {slot.slot_index + 1} has no days"
            key = slot.activity_code.casefold()
            if key in seen:
                return f"{slot.activity_code} appears twice in one closure"
            seen.add(key)

        for i in range(len(closure)):
            for j in range(i + 1, len(closure)):
                if overlaps(closure[i], closure[j]):
                    return (
                        f"{closure[i].activity_code} conflicts with required "
                        f"{closure[j].activity_code}"
                    )

        for slot in closure:
            if slot.activity_code.casefold() in self._activity_keys:
                return f"{slot.activity_code} is already scheduled"
            for existing in self.slots:
                if overlaps(slot, existing):
                    return (
                        f"{slot.activity_code} conflicts with "
                        f"{existing.activity_code}"
                    )
        return None

    def accepts(self, closure: list[ScheduleSlot]) -> bool:
        return self.rejection_reason(closure) is None

    def push(self, closure: list[ScheduleSlot]) -> None:
        for slot in closure:
            self.slots.append(slot)
            self._activity_keys.add(slot.activity_code.casefold())

    def pop(self, count: int) -> None:
        for _ in range(count):
            slot = self.slots.pop()
            self._activity_keys.discard(slot.activity_code.casefold())

    def snapshot(self) -> list[ScheduleSlot]:
        return list(self.slots)
