"""
Efficiency Calculator — how well an agent performs an activity.

Pure function of (agent state, activity type). The snapshot it returns is
frozen into the Assignment at dispatch time, so fatigue gained mid-task never
changes the odds of a task already in flight.

  base_skill          = skill level for the activity (1 if untrained)
  experience_bonus    = floor(experience / 100) * 0.1
  fatigue_penalty     = fatigue * 0.3
  speed_multiplier    = max(0.3, base_skill * (1 + experience_bonus) * (1 - fatigue_penalty))
  quality_rating      = min(5, base_skill * (1 + experience_bonus * 0.5))
  success_probability = min(0.95, 0.5 + base_skill * 0.08 + experience_bonus)
"""

import math
from typing import Optional

from dispatch_kernel.models.agent import AgentState
from dispatch_kernel.models.assignment import EfficiencySnapshot
from dispatch_kernel.models.config import EngineConfig

_DEFAULT_CONFIG = EngineConfig()


def experience_bonus(experience: float, config: Optional[EngineConfig] = None) -> float:
    """10% per 100 accumulated experience, unbounded."""
    config = config or _DEFAULT_CONFIG
    steps = math.floor(experience / config.experience_per_bonus_step)
    return steps * config.bonus_per_experience_step


def calculate(
    agent: AgentState,
    activity_type: str,
    config: Optional[EngineConfig] = None,
) -> EfficiencySnapshot:
    """Compute the efficiency snapshot for an agent doing an activity."""
    config = config or _DEFAULT_CONFIG

    base_skill = agent.skill(activity_type)
    bonus = experience_bonus(agent.experience(activity_type), config)
    fatigue_penalty = agent.fatigue * config.max_fatigue_penalty

    speed = base_skill * (1 + bonus) * (1 - fatigue_penalty)
    quality = min(float(config.max_skill_level), base_skill * (1 + bonus * 0.5))
    success = min(
        config.max_success_probability,
        config.base_success_probability
        + base_skill * config.success_per_skill_level
        + bonus,
    )

    return EfficiencySnapshot(
        speed_multiplier=max(config.min_speed_multiplier, speed),
        quality_rating=quality,
        success_probability=success,
        base_skill=base_skill,
        experience_bonus=bonus,
        fatigue_penalty=fatigue_penalty,
    )


class EfficiencyCalculator:
    """Binds calculate() to an engine configuration."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def calculate(self, agent: AgentState, activity_type: str) -> EfficiencySnapshot:
        return calculate(agent, activity_type, self.config)
