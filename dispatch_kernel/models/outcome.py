"""Outcome models — rewards, preference modifiers and resolved task outcomes."""

from pydantic import BaseModel, ConfigDict

from dispatch_kernel.models.assignment import Assignment


class Reward(BaseModel):
    """Payout (or penalty) forwarded to the Economy sink."""

    gold: int = 0
    reputation_delta: int = 0
    satisfaction_delta: int = 0


class PreferenceModifier(BaseModel):
    """How much an activity wears an agent down, given their taste for it."""

    model_config = ConfigDict(frozen=True)

    mood_change: float
    fatigue_rate: float


class TaskOutcome(BaseModel):
    """The resolution of one completed assignment."""

    assignment: Assignment
    success: bool
    roll: float                             # The uniform draw compared to success_probability
    reward: Reward
    experience_gained: float
    skill_before: int
    skill_after: int
    fatigue_after: float
    mood_after: float
    completed_at: float                     # Clock stamp

    @property
    def leveled_up(self) -> bool:
        return self.skill_after > self.skill_before
