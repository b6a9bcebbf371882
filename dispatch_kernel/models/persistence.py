"""Save Data — the persisted shape of all mutable engine state."""

from typing import Dict, List

from pydantic import BaseModel

from dispatch_kernel.models.agent import AgentState, HistoryEntry
from dispatch_kernel.models.assignment import Assignment
from dispatch_kernel.models.statistics import StatsRecord


class SaveData(BaseModel):
    """
    Plain, JSON-serializable engine state.

    Efficiency snapshots inside in-flight assignments are stored verbatim;
    nothing derived is recomputed on load.
    """

    assignments: Dict[str, Assignment] = {}         # agent_id -> live assignment
    history: Dict[str, List[HistoryEntry]] = {}     # agent_id -> oldest-first entries
    agents: Dict[str, AgentState] = {}
    statistics: StatsRecord = StatsRecord()
