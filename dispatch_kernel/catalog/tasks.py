"""
Task Catalog — static registry of activity definitions.

Read-only. Unknown keys are reported as None so the Dispatch Engine can turn
them into an UNKNOWN_ACTIVITY result; the catalog itself never raises on lookup.
"""

from typing import Dict, Iterable, List, Optional

from dispatch_kernel.models.catalog import ActivityDefinition


class TaskCatalog:
    """Immutable lookup of activity definitions, injected into the engine."""

    def __init__(self, activities: Iterable[ActivityDefinition]):
        self._activities: Dict[str, ActivityDefinition] = {}
        for activity in activities:
            if activity.type in self._activities:
                raise ValueError(f"Duplicate activity type: {activity.type}")
            self._activities[activity.type] = activity

    def get(self, activity_type: str) -> Optional[ActivityDefinition]:
        """Get an activity definition by type."""
        return self._activities.get(activity_type)

    def all(self) -> List[ActivityDefinition]:
        return list(self._activities.values())

    def types(self) -> List[str]:
        return list(self._activities)

    def __contains__(self, activity_type: object) -> bool:
        return activity_type in self._activities

    def __len__(self) -> int:
        return len(self._activities)


def _activity(
    type_: str,
    display_name: str,
    category: str,
    duration: float,
    facility: Optional[str] = None,
    level: int = 1,
) -> ActivityDefinition:
    return ActivityDefinition(
        type=type_,
        display_name=display_name,
        category=category,
        nominal_duration=duration,
        required_facility=facility,
        required_facility_level=level,
    )


def default_catalog() -> TaskCatalog:
    """The inn's shipped activities. Durations are game seconds."""
    return TaskCatalog([
        # Kitchen
        _activity("cooking", "Cooking", "kitchen", 300, "kitchen"),
        _activity("prep", "Food Prep", "kitchen", 180, "kitchen"),
        # Service
        _activity("serving", "Serving", "service", 120),
        _activity("greeting", "Greeting", "service", 30),
        _activity("cleaning", "Cleaning", "service", 240),
        _activity("tidying", "Tidying Rooms", "service", 180),
        _activity("reception", "Reception", "service", 60),
        # Open to everyone, efficiency varies widely
        _activity("performing", "Performing", "entertainment", 600),
        _activity("healing", "Healing", "medical", 300, "clinic"),
        _activity("security", "Security", "security", 600),
        _activity("accounting", "Accounting", "management", 300),
        # Facility-gated work
        _activity("mining", "Mining", "production", 600, "mine"),
        _activity("farming", "Farming", "production", 600, "farm"),
        _activity("fishing", "Fishing", "production", 480, "river"),
        _activity("training", "Martial Training", "training", 600, "trainingGround"),
        _activity("traveling", "Traveling", "expedition", 1200, "stable"),
        _activity("escort", "Caravan Escort", "expedition", 1800, "noticeBoard"),
        _activity("trading", "Trading", "commerce", 900, "noticeBoard"),
        _activity("investigation", "Investigation", "covert", 900, "secretRoom"),
        _activity("assassination", "Assassination", "covert", 1200, "secretRoom"),
    ])
