"""Agent State — per-roster-member skill, experience, fatigue and mood."""

from typing import Annotated, Dict

from pydantic import BaseModel, Field

SkillLevel = Annotated[int, Field(ge=1, le=5)]
Experience = Annotated[float, Field(ge=0.0)]


class AgentState(BaseModel):
    """
    Mutable state of one roster member.

    Fatigue is on the canonical 0..1 scale, mood on 0..100. Both are clamped
    by every mutator in the engine. Skill levels stay within 1..5 and
    experience is never negative; the field bounds reject out-of-range
    values arriving from save data.
    """

    id: str
    display_name: str
    skill_by_activity: Dict[str, SkillLevel] = {}
    experience_by_activity: Dict[str, Experience] = {}
    fatigue: float = Field(ge=0.0, le=1.0, default=0.0)
    mood: float = Field(ge=0.0, le=100.0, default=100.0)

    def skill(self, activity_type: str) -> int:
        """Current skill level for an activity (1 if never trained)."""
        return self.skill_by_activity.get(activity_type, 1)

    def experience(self, activity_type: str) -> float:
        return self.experience_by_activity.get(activity_type, 0.0)


class HistoryEntry(BaseModel):
    """One completed assignment in an agent's recent history."""

    activity_type: str
    completed_at: float                     # Clock stamp (day count), 0 without a clock
    success: bool = True


class StatusDescriptor(BaseModel):
    """A coarse, display-friendly bucket for a fatigue or mood value."""

    level: str
    description: str
