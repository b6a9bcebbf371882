"""
Agent Registry — mutable per-agent state with lazy materialization.

Updated by: Outcome Resolver (experience, skill, fatigue, mood, history) + rest
Queried by: Dispatch Engine + Efficiency Calculator + status queries

Agents never need upfront provisioning: the first get() for an id builds its
default state from the roster. Read-only queries use peek(), which returns a
default without storing it.
"""

from typing import Dict, Iterable, List, Optional

from dispatch_kernel.catalog.roster import Roster, default_roster
from dispatch_kernel.models.agent import AgentState, HistoryEntry, StatusDescriptor

DEFAULT_HISTORY_CAPACITY = 20


def default_agent_state(agent_id: str, roster: Roster) -> AgentState:
    """Fresh state for an agent seen for the first time: rested, content, untrained."""
    return AgentState(
        id=agent_id,
        display_name=roster.name(agent_id),
        skill_by_activity=roster.starting_skills(agent_id),
        experience_by_activity={},
        fatigue=0.0,
        mood=100.0,
    )


def adjust_fatigue(agent: AgentState, delta: float) -> float:
    """Shift fatigue by delta, clamped to [0, 1]. Returns the new value."""
    agent.fatigue = min(1.0, max(0.0, agent.fatigue + delta))
    return agent.fatigue


def adjust_mood(agent: AgentState, delta: float) -> float:
    """Shift mood by delta, clamped to [0, 100]. Returns the new value."""
    agent.mood = min(100.0, max(0.0, agent.mood + delta))
    return agent.mood


def fatigue_status(fatigue: float) -> StatusDescriptor:
    if fatigue < 0.3:
        return StatusDescriptor(level="rested", description="Full of energy")
    if fatigue < 0.5:
        return StatusDescriptor(level="normal", description="Doing fine")
    if fatigue < 0.7:
        return StatusDescriptor(level="tired", description="A little tired")
    if fatigue < 0.9:
        return StatusDescriptor(level="exhausted", description="Very tired")
    return StatusDescriptor(level="overworked", description="Overworked")


def mood_status(mood: float) -> StatusDescriptor:
    if mood >= 80:
        return StatusDescriptor(level="excellent", description="In high spirits")
    if mood >= 60:
        return StatusDescriptor(level="good", description="Cheerful")
    if mood >= 40:
        return StatusDescriptor(level="normal", description="Even-tempered")
    if mood >= 20:
        return StatusDescriptor(level="bad", description="Out of sorts")
    return StatusDescriptor(level="terrible", description="Miserable")


class HistoryRing:
    """
    Fixed-capacity ring of history entries.

    Writes go to slot _head; once full, each append overwrites the oldest
    entry in place.
    """

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self._slots: List[Optional[HistoryEntry]] = [None] * capacity
        self._head = 0
        self._size = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def __len__(self) -> int:
        return self._size

    def append(self, entry: HistoryEntry) -> None:
        self._slots[self._head] = entry
        self._head = (self._head + 1) % self.capacity
        self._size = min(self._size + 1, self.capacity)

    def extend(self, entries: Iterable[HistoryEntry]) -> None:
        for entry in entries:
            self.append(entry)

    def entries(self) -> List[HistoryEntry]:
        """All held entries, oldest first."""
        start = (self._head - self._size) % self.capacity
        return [
            self._slots[(start + i) % self.capacity]
            for i in range(self._size)
        ]

    def recent(self, limit: int) -> List[HistoryEntry]:
        """The newest `limit` entries, oldest first."""
        if limit <= 0:
            return []
        return self.entries()[-limit:]


class AgentRegistry:
    """
    In-memory keyed store of agent state and history.
    """

    def __init__(
        self,
        roster: Optional[Roster] = None,
        history_capacity: int = DEFAULT_HISTORY_CAPACITY,
    ):
        self.roster = roster or default_roster()
        self.history_capacity = history_capacity
        self._agents: Dict[str, AgentState] = {}
        self._history: Dict[str, HistoryRing] = {}

    def get(self, agent_id: str) -> AgentState:
        """Get an agent's state, materializing defaults on first access."""
        agent = self._agents.get(agent_id)
        if agent is None:
            agent = default_agent_state(agent_id, self.roster)
            self._agents[agent_id] = agent
        return agent

    def peek(self, agent_id: str) -> AgentState:
        """Get an agent's state without materializing it."""
        agent = self._agents.get(agent_id)
        if agent is None:
            return default_agent_state(agent_id, self.roster)
        return agent

    def name(self, agent_id: str) -> str:
        """Display name, or the 'unknown' sentinel for unmapped ids."""
        agent = self._agents.get(agent_id)
        if agent is not None:
            return agent.display_name
        return self.roster.name(agent_id)

    def known_ids(self) -> List[str]:
        return list(self._agents)

    def all_agents(self) -> Dict[str, AgentState]:
        return dict(self._agents)

    # --- History ---

    def record_history(self, agent_id: str, entry: HistoryEntry) -> None:
        ring = self._history.get(agent_id)
        if ring is None:
            ring = HistoryRing(self.history_capacity)
            self._history[agent_id] = ring
        ring.append(entry)

    def recent_history(
        self, agent_id: str, limit: Optional[int] = None
    ) -> List[HistoryEntry]:
        """Most recent history entries for an agent, oldest first."""
        ring = self._history.get(agent_id)
        if ring is None:
            return []
        if limit is None:
            return ring.entries()
        return ring.recent(limit)

    def all_history(self) -> Dict[str, List[HistoryEntry]]:
        return {agent_id: ring.entries() for agent_id, ring in self._history.items()}

    # --- Bulk replace (save/load) ---

    def replace_all(
        self,
        agents: Dict[str, AgentState],
        history: Dict[str, List[HistoryEntry]],
    ) -> None:
        """Swap in restored state. Histories longer than capacity keep their newest entries."""
        self._agents = dict(agents)
        self._history = {}
        for agent_id, entries in history.items():
            ring = HistoryRing(self.history_capacity)
            ring.extend(entries)
            self._history[agent_id] = ring
