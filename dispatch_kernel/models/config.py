"""Engine configuration — tuning constants for efficiency, growth and recovery."""

from pydantic import BaseModel, Field


class EngineConfig(BaseModel):
    """Configuration for the Dispatch Engine. Defaults match the shipped game balance."""

    history_capacity: int = Field(ge=1, default=20)
    max_skill_level: int = Field(ge=1, default=5)

    # Efficiency
    min_speed_multiplier: float = Field(gt=0, default=0.3)
    max_success_probability: float = Field(ge=0, le=1, default=0.95)
    base_success_probability: float = 0.5
    success_per_skill_level: float = 0.08
    experience_per_bonus_step: float = Field(gt=0, default=100.0)
    bonus_per_experience_step: float = 0.1
    max_fatigue_penalty: float = Field(ge=0, le=1, default=0.3)

    # Growth
    novice_skill_threshold: int = 3             # skills below this learn faster
    novice_experience_multiplier: float = 1.5
    success_experience: float = 10.0
    failure_experience: float = 5.0

    # Fatigue (canonical scale is 0..1)
    fatigue_seconds_per_unit: float = Field(gt=0, default=3600.0)
    rest_seconds_per_fatigue_unit: float = Field(gt=0, default=1800.0)

    # Suitability advisories
    exhaustion_threshold: float = 0.9
    low_mood_threshold: float = 40.0
    very_low_mood_threshold: float = 20.0
