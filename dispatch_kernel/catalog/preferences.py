"""
Preference Table — per-agent favorite and disliked activities.

Preferences only shape fatigue and mood deltas on completion. They never
restrict who may attempt what.
"""

from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from dispatch_kernel.models.outcome import PreferenceModifier

FAVORITE_MODIFIER = PreferenceModifier(mood_change=-2, fatigue_rate=0.7)
DISLIKED_MODIFIER = PreferenceModifier(mood_change=-10, fatigue_rate=1.5)
NEUTRAL_MODIFIER = PreferenceModifier(mood_change=-5, fatigue_rate=1.0)

_EMPTY: FrozenSet[str] = frozenset()


class PreferenceTable:
    """Immutable favorite/disliked lookup. Agents with no entry are neutral."""

    def __init__(
        self,
        entries: Optional[Mapping[str, Tuple[Iterable[str], Iterable[str]]]] = None,
    ):
        self._favorites: Dict[str, FrozenSet[str]] = {}
        self._disliked: Dict[str, FrozenSet[str]] = {}
        for agent_id, (favorites, disliked) in (entries or {}).items():
            fav = frozenset(favorites)
            dis = frozenset(disliked)
            overlap = fav & dis
            if overlap:
                raise ValueError(
                    f"Agent {agent_id} both likes and dislikes: {sorted(overlap)}"
                )
            self._favorites[agent_id] = fav
            self._disliked[agent_id] = dis

    def favorites(self, agent_id: str) -> FrozenSet[str]:
        return self._favorites.get(agent_id, _EMPTY)

    def disliked(self, agent_id: str) -> FrozenSet[str]:
        return self._disliked.get(agent_id, _EMPTY)

    def is_favorite(self, agent_id: str, activity_type: str) -> bool:
        return activity_type in self.favorites(agent_id)

    def is_disliked(self, agent_id: str, activity_type: str) -> bool:
        return activity_type in self.disliked(agent_id)

    def modifier(self, agent_id: str, activity_type: str) -> PreferenceModifier:
        """Select the mood/fatigue modifier for an agent doing an activity."""
        if self.is_favorite(agent_id, activity_type):
            return FAVORITE_MODIFIER
        if self.is_disliked(agent_id, activity_type):
            return DISLIKED_MODIFIER
        return NEUTRAL_MODIFIER


def default_preferences() -> PreferenceTable:
    """Shipped roster tastes: (favorites, disliked)."""
    return PreferenceTable({
        "001": (["greeting", "accounting"], ["cleaning"]),
        "002": (["cooking", "prep"], ["security"]),
        "003": (["serving", "tidying"], ["mining"]),
        "004": (["healing"], ["performing"]),
        "005": (["performing"], ["cleaning", "mining"]),
        "006": (["serving", "greeting"], ["accounting"]),
        "007": (["greeting", "trading"], ["farming"]),
        "008": (["security", "training"], ["performing", "accounting"]),
        "009": (["performing", "investigation"], ["cleaning"]),
        "010": (["accounting"], ["training"]),
        "011": (["performing"], ["security"]),
    })
