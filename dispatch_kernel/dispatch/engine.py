"""
Dispatch Engine — assigns agents to activities and drives them to completion.

Entry points:
  dispatch(agent_id, activity_type)  start work
  advance(delta_time)                one tick; completes and resolves finished work
  cancel(agent_id)                   no-cost abort
  rest(agent_id, duration_seconds)   explicit fatigue recovery

Behavioral Contract:
- An agent keys the assignment table at most once. The table's key space is
  the only locking discipline; there is no background execution.
- Dispatch validation order: unknown activity, agent materialization,
  already assigned, facility gate. The first failing check wins and nothing
  is mutated on failure.
- Failures are returned as result values, never raised.
- Every assignment that completes during advance() is resolved in that same
  call, before it returns.
"""

import logging
import random
from typing import Any, Dict, List, Optional
from uuid import uuid4

from dispatch_kernel.agents.registry import (
    AgentRegistry,
    adjust_fatigue,
    fatigue_status,
    mood_status,
)
from dispatch_kernel.catalog.preferences import PreferenceTable, default_preferences
from dispatch_kernel.catalog.roster import Roster
from dispatch_kernel.catalog.tasks import TaskCatalog, default_catalog
from dispatch_kernel.collaborators.interfaces import (
    Clock,
    EconomySink,
    FacilityProvider,
    NotificationKind,
    NotificationSink,
    NullClock,
    NullEconomy,
    NullNotifier,
)
from dispatch_kernel.dispatch.gating import check_facility_requirement
from dispatch_kernel.efficiency.calculator import EfficiencyCalculator
from dispatch_kernel.models.agent import HistoryEntry
from dispatch_kernel.models.assignment import Assignment
from dispatch_kernel.models.catalog import ActivityDefinition
from dispatch_kernel.models.config import EngineConfig
from dispatch_kernel.models.outcome import TaskOutcome
from dispatch_kernel.models.results import (
    CancelResult,
    DispatchError,
    DispatchResult,
    FacilityCheck,
    RestResult,
    Suitability,
)
from dispatch_kernel.models.statistics import StatsRecord
from dispatch_kernel.outcome.resolver import OutcomeResolver
from dispatch_kernel.persistence.adapter import (
    build_save_data,
    dump_save_data,
    parse_save_data,
    restore_save_data,
)
from dispatch_kernel.progress.tracker import ProgressTracker
from dispatch_kernel.statistics.aggregator import StatisticsAggregator

logger = logging.getLogger(__name__)


class DispatchEngine:
    """
    The engine's public API. Catalog, preferences and roster are read-only
    configuration injected here; everything mutable lives behind this object.
    """

    def __init__(
        self,
        catalog: Optional[TaskCatalog] = None,
        preferences: Optional[PreferenceTable] = None,
        roster: Optional[Roster] = None,
        facilities: Optional[FacilityProvider] = None,
        economy: Optional[EconomySink] = None,
        notifier: Optional[NotificationSink] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.config = config or EngineConfig()
        self.catalog = catalog or default_catalog()
        self.preferences = preferences or default_preferences()
        self.facilities = facilities
        self.economy = economy or NullEconomy()
        self.notifier = notifier or NullNotifier()
        self.clock = clock or NullClock()

        self.registry = AgentRegistry(
            roster=roster, history_capacity=self.config.history_capacity
        )
        self.calculator = EfficiencyCalculator(self.config)
        self.tracker = ProgressTracker()
        self.statistics = StatisticsAggregator()
        self.resolver = OutcomeResolver(
            registry=self.registry,
            preferences=self.preferences,
            statistics=self.statistics,
            catalog=self.catalog,
            economy=self.economy,
            notifier=self.notifier,
            clock=self.clock,
            rng=rng,
            config=self.config,
        )

        self._assignments: Dict[str, Assignment] = {}

    # === DISPATCH ===

    def dispatch(self, agent_id: str, activity_type: str) -> DispatchResult:
        """Start an agent on an activity."""
        # 1. Activity must be registered
        activity = self.catalog.get(activity_type)
        if activity is None:
            logger.debug("Dispatch rejected: unknown activity %s", activity_type)
            return DispatchResult(
                success=False,
                error=DispatchError.UNKNOWN_ACTIVITY,
                reason=f"Unknown activity type: {activity_type}",
            )

        # 2. Agent resolves (cannot fail)
        agent = self.registry.get(agent_id)

        # 3. One assignment per agent
        if agent_id in self._assignments:
            current = self._assignments[agent_id]
            logger.debug(
                "Dispatch rejected: %s already on %s", agent_id, current.activity_type
            )
            return DispatchResult(
                success=False,
                error=DispatchError.ALREADY_ASSIGNED,
                reason=(
                    f"{agent.display_name} is already assigned to "
                    f"{current.activity_type}"
                ),
            )

        # 4. Facility gate
        check = check_facility_requirement(activity, self.facilities)
        if not check.satisfied:
            logger.debug(
                "Dispatch rejected: %s for %s: %s", activity_type, agent_id, check.reason
            )
            return DispatchResult(
                success=False,
                error=DispatchError.FACILITY_UNMET,
                reason=check.reason,
                required_facility=check.required_facility,
                required_level=check.required_level,
                current_level=check.current_level,
            )

        assignment = Assignment(
            id=f"task_{uuid4().hex[:12]}",
            activity_type=activity_type,
            agent_id=agent_id,
            efficiency=self.calculator.calculate(agent, activity_type),
            started_at=self.clock.now(),
            duration=activity.nominal_duration,
        )
        self._assignments[agent_id] = assignment

        logger.info(
            "Dispatched %s to %s (speed=%.2f, p=%.2f)",
            agent_id,
            activity_type,
            assignment.efficiency.speed_multiplier,
            assignment.efficiency.success_probability,
        )
        self.notifier.notify(
            NotificationKind.INFO,
            "Dispatched",
            f"{agent.display_name} started {activity.display_name}",
        )
        return DispatchResult(success=True, assignment=assignment)

    def check_facility(self, activity_type: str) -> Optional[FacilityCheck]:
        """Facility gate for an activity, or None for unknown activities."""
        activity = self.catalog.get(activity_type)
        if activity is None:
            return None
        return check_facility_requirement(activity, self.facilities)

    def cancel(self, agent_id: str) -> CancelResult:
        """Abort an assignment with no reward, experience, fatigue or mood change."""
        assignment = self._assignments.pop(agent_id, None)
        if assignment is None:
            return CancelResult(
                success=False,
                error=DispatchError.NOT_ASSIGNED,
                reason=f"{self.registry.name(agent_id)} has no active task",
            )

        self.statistics.record_cancellation()
        logger.info("Cancelled %s for %s", assignment.activity_type, agent_id)
        return CancelResult(success=True, assignment=assignment)

    # === PROGRESS ===

    def advance(self, delta_time: float) -> List[TaskOutcome]:
        """
        Advance every in-progress assignment by delta_time game seconds.
        Completed assignments are resolved and removed before this returns.
        """
        completed = self.tracker.advance(list(self._assignments.values()), delta_time)

        outcomes = []
        for assignment in completed:
            # Leaves the table even if resolution raises
            del self._assignments[assignment.agent_id]
            outcomes.append(self.resolver.resolve(assignment))
        return outcomes

    # === RECOVERY ===

    def rest(self, agent_id: str, duration_seconds: float) -> RestResult:
        """Recover fatigue: 30 minutes of rest removes one full unit."""
        agent = self.registry.get(agent_id)
        previous = agent.fatigue
        recovery = max(0.0, duration_seconds) / self.config.rest_seconds_per_fatigue_unit
        new_fatigue = adjust_fatigue(agent, -recovery)
        return RestResult(
            agent_id=agent_id, previous_fatigue=previous, new_fatigue=new_fatigue
        )

    # === QUERIES ===

    def get_current_task(self, agent_id: str) -> Optional[Assignment]:
        return self._assignments.get(agent_id)

    def get_all_assignments(self) -> List[Assignment]:
        return list(self._assignments.values())

    def list_activities(self) -> List[ActivityDefinition]:
        return self.catalog.all()

    def get_recent_history(self, agent_id: str, limit: int = 10) -> List[HistoryEntry]:
        return self.registry.recent_history(agent_id, limit)

    def get_character_status(self, agent_id: str) -> Dict[str, Any]:
        """Display-oriented summary of one agent. Does not materialize state."""
        agent = self.registry.peek(agent_id)
        current = self._assignments.get(agent_id)
        return {
            "id": agent.id,
            "name": agent.display_name,
            "mood": agent.mood,
            "fatigue": agent.fatigue,
            "fatigue_percent": round(agent.fatigue * 100, 1),
            "mood_status": mood_status(agent.mood),
            "fatigue_status": fatigue_status(agent.fatigue),
            "skills": dict(agent.skill_by_activity),
            "experience": dict(agent.experience_by_activity),
            "current_task": current,
            "recent_history": self.registry.recent_history(agent_id, 5),
        }

    def is_suitable(self, agent_id: str, activity_type: str) -> Suitability:
        """Advisory fitness check for caller-side UX. Never blocks dispatch."""
        agent = self.registry.peek(agent_id)
        config = self.config
        reasons = []
        warnings = []

        if agent.fatigue >= config.exhaustion_threshold:
            reasons.append("fatigue too high")

        if agent.mood < config.very_low_mood_threshold:
            warnings.append("mood very low")
        elif agent.mood < config.low_mood_threshold:
            warnings.append("mood low")

        if self.preferences.is_disliked(agent_id, activity_type):
            warnings.append("dislikes this activity")

        return Suitability(suitable=not reasons, reasons=reasons, warnings=warnings)

    def get_statistics(self) -> StatsRecord:
        return self.statistics.snapshot()

    # === PERSISTENCE ===

    def get_save_data(self) -> dict:
        """Plain JSON-compatible snapshot of all mutable state."""
        save = build_save_data(self._assignments, self.registry, self.statistics)
        logger.info(
            "Saved %d assignments, %d agents", len(save.assignments), len(save.agents)
        )
        return dump_save_data(save)

    def load_save_data(self, data: Any) -> None:
        """
        Replace all mutable state with the given save data.
        Raises SaveDataError (leaving state untouched) if the payload is invalid.
        """
        save = parse_save_data(data)
        self._assignments = restore_save_data(save, self.registry, self.statistics)
        logger.info(
            "Loaded %d assignments, %d agents", len(save.assignments), len(save.agents)
        )
