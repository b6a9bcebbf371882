"""Assignment — one agent's active, in-progress activity instance."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class AssignmentStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class EfficiencySnapshot(BaseModel):
    """
    Speed/quality/success breakdown frozen at dispatch time.

    The three contributing terms are retained so callers and tests can see
    why an agent performs the way it does.
    """

    model_config = ConfigDict(frozen=True)

    speed_multiplier: float = Field(gt=0)
    quality_rating: float = Field(ge=0)                 # 1..5 stars, fractional allowed
    success_probability: float = Field(ge=0, le=1)
    base_skill: int
    experience_bonus: float
    fatigue_penalty: float


class Assignment(BaseModel):
    """Live work item, keyed by agent_id in the engine's assignment table."""

    id: str
    activity_type: str
    agent_id: str
    efficiency: EfficiencySnapshot
    started_at: float                       # Clock stamp at dispatch
    duration: float = Field(gt=0)           # Nominal duration in game seconds
    progress: float = Field(ge=0.0, le=1.0, default=0.0)
    status: AssignmentStatus = AssignmentStatus.IN_PROGRESS
