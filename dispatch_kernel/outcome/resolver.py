"""
Outcome Resolver — closes the feedback loop on a completed assignment.

For each completed assignment, in order:
  1. Success roll: one uniform draw, success iff below the frozen success_probability
  2. Reward: quality-scaled payout on success, fixed penalty on failure
  3. Experience: 10 / 5, x1.5 for novices; crossing a 100 boundary raises skill by one
  4. Fatigue and mood: scaled by the agent's preference for the activity
  5. History: appended to the agent's ring buffer
  6. Statistics: counters updated

Experience gained here changes efficiency, and therefore outcomes, of every
later dispatch for the same agent and activity.
"""

import logging
import math
import random
from typing import Optional

from dispatch_kernel.agents.registry import AgentRegistry, adjust_fatigue, adjust_mood
from dispatch_kernel.catalog.preferences import PreferenceTable
from dispatch_kernel.catalog.tasks import TaskCatalog
from dispatch_kernel.collaborators.interfaces import (
    Clock,
    EconomySink,
    NotificationKind,
    NotificationSink,
    NullClock,
    NullEconomy,
    NullNotifier,
)
from dispatch_kernel.models.agent import AgentState, HistoryEntry
from dispatch_kernel.models.assignment import Assignment
from dispatch_kernel.models.config import EngineConfig
from dispatch_kernel.models.outcome import Reward, TaskOutcome
from dispatch_kernel.statistics.aggregator import StatisticsAggregator

logger = logging.getLogger(__name__)

FAILURE_PENALTY = Reward(gold=0, reputation_delta=-5, satisfaction_delta=-10)
BASELINE_QUALITY = 3.0  # 3 stars pays the base reward


def calculate_reward(quality_rating: float, success: bool) -> Reward:
    """Quality-scaled reward on success, fixed penalty on failure."""
    if not success:
        return FAILURE_PENALTY.model_copy()

    multiplier = quality_rating / BASELINE_QUALITY
    return Reward(
        gold=math.floor(50 * multiplier),
        reputation_delta=math.floor(10 * multiplier),
        satisfaction_delta=math.floor(20 * multiplier),
    )


class OutcomeResolver:
    """
    Resolves completed assignments against agent state.
    Does not own the assignment table; the engine removes resolved entries.
    """

    def __init__(
        self,
        registry: AgentRegistry,
        preferences: PreferenceTable,
        statistics: StatisticsAggregator,
        catalog: Optional[TaskCatalog] = None,
        economy: Optional[EconomySink] = None,
        notifier: Optional[NotificationSink] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.registry = registry
        self.preferences = preferences
        self.statistics = statistics
        self.catalog = catalog
        self.economy = economy or NullEconomy()
        self.notifier = notifier or NullNotifier()
        self.clock = clock or NullClock()
        self.rng = rng or random.Random()
        self.config = config or EngineConfig()

    def resolve(self, assignment: Assignment) -> TaskOutcome:
        """Resolve one completed assignment. Mutates agent state and statistics."""
        agent = self.registry.get(assignment.agent_id)
        snapshot = assignment.efficiency

        # 1. Success roll
        roll = self.rng.random()
        success = roll < snapshot.success_probability

        # 2. Reward
        reward = calculate_reward(snapshot.quality_rating, success)
        self.economy.apply_reward(reward)

        # 3. Experience and skill growth
        skill_before = agent.skill(assignment.activity_type)
        gained = self.grant_experience(agent, assignment.activity_type, success)
        skill_after = agent.skill(assignment.activity_type)

        # 4. Fatigue and mood
        modifier = self.preferences.modifier(agent.id, assignment.activity_type)
        fatigue_delta = (
            assignment.duration / self.config.fatigue_seconds_per_unit
        ) * modifier.fatigue_rate
        adjust_fatigue(agent, fatigue_delta)
        adjust_mood(agent, modifier.mood_change)

        # 5. History
        completed_at = self.clock.now()
        self.registry.record_history(
            agent.id,
            HistoryEntry(
                activity_type=assignment.activity_type,
                completed_at=completed_at,
                success=success,
            ),
        )

        # 6. Statistics
        self.statistics.record_outcome(success, gained)

        self._notify_outcome(agent, assignment, success)
        logger.info(
            "Resolved %s for %s: success=%s roll=%.3f p=%.3f exp=+%.1f",
            assignment.activity_type,
            agent.id,
            success,
            roll,
            snapshot.success_probability,
            gained,
        )

        return TaskOutcome(
            assignment=assignment,
            success=success,
            roll=roll,
            reward=reward,
            experience_gained=gained,
            skill_before=skill_before,
            skill_after=skill_after,
            fatigue_after=agent.fatigue,
            mood_after=agent.mood,
            completed_at=completed_at,
        )

    def grant_experience(
        self, agent: AgentState, activity_type: str, success: bool
    ) -> float:
        """
        Add experience for one completed task and level up on a 100 boundary.

        Novices (skill below 3) learn 1.5x faster whatever the outcome. A single
        grant advances skill by at most one level even if it crosses several
        boundaries.
        """
        config = self.config
        amount = config.success_experience if success else config.failure_experience
        current_skill = agent.skill(activity_type)
        if current_skill < config.novice_skill_threshold:
            amount *= config.novice_experience_multiplier

        old_exp = agent.experience(activity_type)
        new_exp = old_exp + amount
        agent.experience_by_activity[activity_type] = new_exp

        step = config.experience_per_bonus_step
        if math.floor(new_exp / step) > math.floor(old_exp / step):
            self.level_up(agent, activity_type)

        return amount

    def level_up(self, agent: AgentState, activity_type: str) -> bool:
        """Raise a skill by one level. Returns False at the cap."""
        current = agent.skill(activity_type)
        if current >= self.config.max_skill_level:
            return False

        agent.skill_by_activity[activity_type] = current + 1
        logger.info(
            "Skill up: %s %s %d -> %d", agent.id, activity_type, current, current + 1
        )
        self.notifier.notify(
            NotificationKind.SUCCESS,
            "Skill improved",
            f"{agent.display_name}'s {self._activity_name(activity_type)} skill "
            f"rose to {current + 1} stars!",
        )
        return True

    def _notify_outcome(
        self, agent: AgentState, assignment: Assignment, success: bool
    ) -> None:
        name = self._activity_name(assignment.activity_type)
        if success:
            stars = "★" * math.floor(assignment.efficiency.quality_rating)
            self.notifier.notify(
                NotificationKind.SUCCESS,
                "Task complete",
                f"{agent.display_name} finished {name}! Quality: {stars}",
            )
        else:
            self.notifier.notify(
                NotificationKind.WARNING,
                "Task failed",
                f"{agent.display_name} could not finish {name}",
            )

    def _activity_name(self, activity_type: str) -> str:
        activity = self.catalog.get(activity_type) if self.catalog else None
        return activity.display_name if activity else activity_type
