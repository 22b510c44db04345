"""Editable working set of activities.

The catalog is the in-memory list a user builds up before generating a
schedule. It enforces case-insensitive code uniqueness and keeps
dependencies consistent when activities or slots are removed. It also
loads and saves the activity list as JSON using the model's wire shape.
"""

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from weekplanner.domain.models import Activity, TimeSlot
from weekplanner.exceptions import (
    ActivityNotFoundError,
    DuplicateActivityError,
    InvalidInputError,
)

logger = logging.getLogger(__name__)


class ActivityCatalog:
    """Ordered collection of activities keyed by case-insensitive code.

    Example:
        >>> catalog = ActivityCatalog()
        >>> catalog.add(Activity("MATH101", (TimeSlot.from_strings(["Monday"], "9:00 AM", "10:00 AM"),)))
        >>> catalog.get("math101").activity_code
        'MATH101'
    """

    def __init__(self, activities: Optional[Iterable[Activity]] = None):
        self._activities: list[Activity] = []
        for activity in activities or []:
            self.add(activity)

    def __len__(self) -> int:
        return len(self._activities)

    def __iter__(self) -> Iterator[Activity]:
        return iter(self._activities)

    def __contains__(self, activity_code: str) -> bool:
        return self._index_of(activity_code) is not None

    @property
    def activities(self) -> list[Activity]:
        """Snapshot of the activities in insertion order."""
        return list(self._activities)

    def _index_of(self, activity_code: str) -> Optional[int]:
        key = activity_code.strip().casefold()
        for i, activity in enumerate(self._activities):
            if activity.key == key:
                return i
        return None

    def _require_index(self, activity_code: str) -> int:
        index = self._index_of(activity_code)
        if index is None:
            raise ActivityNotFoundError(f"Unknown activity {activity_code!r}")
        return index

    def get(self, activity_code: str) -> Activity:
        return self._activities[self._require_index(activity_code)]

    def add(self, activity: Activity) -> None:
        """Append a new activity.

        Raises:
            DuplicateActivityError: If the code already exists (any case).
        """
        if self._index_of(activity.activity_code) is not None:
            raise DuplicateActivityError(
                f"Activity code {activity.activity_code!r} already exists"
            )
        self._activities.append(activity)

    def update(self, activity_code: str, activity: Activity) -> None:
        """Replace an existing activity, keeping its position.

        The replacement may be renamed, but not onto another activity's code.
        """
        index = self._require_index(activity_code)
        other = self._index_of(activity.activity_code)
        if other is not None and other != index:
            raise DuplicateActivityError(
                f"Activity code {activity.activity_code!r} already exists"
            )
        self._activities[index] = activity

    def remove(self, activity_code: str) -> Activity:
        """Remove an activity and every dependency that targets it."""
        removed = self._activities.pop(self._require_index(activity_code))
        self._activities = [
            activity.without_dependencies_on(removed.activity_code)
            for activity in self._activities
        ]
        return removed

    def add_slot(self, activity_code: str, slot: TimeSlot) -> Activity:
        activity = self.get(activity_code).with_slot(slot)
        self.update(activity_code, activity)
        return activity

    def remove_slot(self, activity_code: str, slot_index: int) -> Activity:
        """Remove one slot of an activity.

        Other activities' dependencies on that slot are dropped and their
        references to later slots are shifted down to stay aligned.
        """
        owner = self.get(activity_code)
        updated = owner.without_slot(slot_index)
        self.update(activity_code, updated)

        for i, activity in enumerate(self._activities):
            if activity.key == owner.key:
                continue
            kept = []
            changed = False
            for dep in activity.dependencies:
                if dep.dependent_activity_code.casefold() != owner.key:
                    kept.append(dep)
                    continue
                changed = True
                if dep.dependent_slot_index == slot_index:
                    continue
                if dep.dependent_slot_index > slot_index:
                    kept.append(
                        replace(dep, dependent_slot_index=dep.dependent_slot_index - 1)
                    )
                else:
                    kept.append(dep)
            if changed:
                self._activities[i] = replace(activity, dependencies=tuple(kept))
        return updated

    def add_dependency(
        self,
        activity_code: str,
        slot_index: int,
        dependent_activity_code: str,
        dependent_slot_index: int,
    ) -> Activity:
        activity = self.get(activity_code).with_dependency(
            slot_index, dependent_activity_code, dependent_slot_index
        )
        self.update(activity_code, activity)
        return activity

    # JSON persistence

    @classmethod
    def from_json(cls, payload: Union[list, dict]) -> "ActivityCatalog":
        """Build a catalog from decoded JSON.

        Accepts either a bare list of activities or ``{"activities": [...]}``.
        """
        if isinstance(payload, dict):
            payload = payload.get("activities")
        if not isinstance(payload, list):
            raise InvalidInputError("Expected a list of activities")
        return cls(Activity.from_dict(item) for item in payload)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "ActivityCatalog":
        path = Path(path)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise InvalidInputError(f"{path} is not valid JSON: {exc}") from exc
        catalog = cls.from_json(payload)
        logger.info("Loaded %d activities from %s", len(catalog), path)
        return catalog

    def to_json(self) -> list[dict]:
        return [activity.to_dict() for activity in self._activities]

    def save(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.write_text(json.dumps(self.to_json(), indent=2), encoding="utf-8")
        logger.info("Saved %d activities to %s", len(self), path)
        return path
