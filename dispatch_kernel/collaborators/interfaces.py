"""
External collaborators consumed by the engine.

Each collaborator is a Protocol. The optional ones (economy, notifications,
clock) have null-object defaults selected at construction time, so business
logic never checks whether a collaborator is present. The facility provider
is the exception: its absence is meaningful (every facility gate passes) and
is represented as None.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, Protocol, Tuple

from pydantic import BaseModel

from dispatch_kernel.models.outcome import Reward


class NotificationKind(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"


class FacilityInfo(BaseModel):
    """What the facility layer knows about one facility."""

    name: str
    unlocked: bool
    level: int = 0
    unlock_at_inn_level: Optional[int] = None


class FacilityProvider(Protocol):
    """Unlock/level storage for inn facilities."""

    def get_facility_info(self, facility_id: str) -> Any: ...


class EconomySink(Protocol):
    def apply_reward(self, reward: Reward) -> None: ...


class NotificationSink(Protocol):
    def notify(self, kind: NotificationKind, title: str, message: str) -> None: ...


class Clock(Protocol):
    def now(self) -> float: ...


# --- Null objects ---


class NullEconomy:
    def apply_reward(self, reward: Reward) -> None:
        return None


class NullNotifier:
    def notify(self, kind: NotificationKind, title: str, message: str) -> None:
        return None


class NullClock:
    def now(self) -> float:
        return 0.0


# --- Simple in-memory implementations (embedding and tests) ---


class StaticFacilities:
    """Facility provider backed by a fixed table."""

    def __init__(self, facilities: Optional[dict] = None):
        self._facilities = {
            facility_id: FacilityInfo.model_validate(info)
            for facility_id, info in (facilities or {}).items()
        }

    def get_facility_info(self, facility_id: str) -> Optional[FacilityInfo]:
        return self._facilities.get(facility_id)

    def set_facility(self, facility_id: str, info: FacilityInfo) -> None:
        self._facilities[facility_id] = info


class Ledger:
    """Economy sink that accumulates gold, reputation and satisfaction."""

    def __init__(self, gold: int = 0, reputation: int = 0):
        self.gold = gold
        self.reputation = reputation
        self.satisfaction = 0
        self.rewards: List[Reward] = []

    def apply_reward(self, reward: Reward) -> None:
        self.gold += reward.gold
        self.reputation += reward.reputation_delta
        self.satisfaction += reward.satisfaction_delta
        self.rewards.append(reward)


class NotificationLog:
    """Notification sink that keeps every message it receives."""

    def __init__(self):
        self.messages: List[Tuple[NotificationKind, str, str]] = []

    def notify(self, kind: NotificationKind, title: str, message: str) -> None:
        self.messages.append((kind, title, message))

    def of_kind(self, kind: NotificationKind) -> List[Tuple[NotificationKind, str, str]]:
        return [m for m in self.messages if m[0] == kind]


class DayClock:
    """Clock that reports a caller-controlled day count."""

    def __init__(self, day: float = 1):
        self.day = day

    def now(self) -> float:
        return float(self.day)
