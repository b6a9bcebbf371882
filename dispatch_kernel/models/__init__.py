"""Dispatch Kernel data models."""

from dispatch_kernel.models.agent import AgentState, HistoryEntry, StatusDescriptor
from dispatch_kernel.models.assignment import (
    Assignment,
    AssignmentStatus,
    EfficiencySnapshot,
)
from dispatch_kernel.models.catalog import ActivityDefinition
from dispatch_kernel.models.config import EngineConfig
from dispatch_kernel.models.outcome import PreferenceModifier, Reward, TaskOutcome
from dispatch_kernel.models.persistence import SaveData
from dispatch_kernel.models.results import (
    CancelResult,
    DispatchError,
    DispatchResult,
    FacilityCheck,
    RestResult,
    Suitability,
)
from dispatch_kernel.models.statistics import StatsRecord

__all__ = [
    "ActivityDefinition",
    "AgentState",
    "Assignment",
    "AssignmentStatus",
    "CancelResult",
    "DispatchError",
    "DispatchResult",
    "EfficiencySnapshot",
    "EngineConfig",
    "FacilityCheck",
    "HistoryEntry",
    "PreferenceModifier",
    "RestResult",
    "Reward",
    "SaveData",
    "StatsRecord",
    "StatusDescriptor",
    "Suitability",
    "TaskOutcome",
]
