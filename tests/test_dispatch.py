"""Tests for dispatch, cancellation, facility gating, rest and suitability."""

import pytest

from dispatch_kernel.catalog.tasks import TaskCatalog
from dispatch_kernel.collaborators.interfaces import (
    DayClock,
    FacilityInfo,
    NotificationKind,
    NotificationLog,
    StaticFacilities,
)
from dispatch_kernel.dispatch.engine import DispatchEngine
from dispatch_kernel.dispatch.gating import check_facility_requirement
from dispatch_kernel.models.assignment import AssignmentStatus
from dispatch_kernel.models.catalog import ActivityDefinition
from dispatch_kernel.models.results import DispatchError


def _make_facilities(**overrides) -> StaticFacilities:
    table = {
        "kitchen": {"name": "Kitchen", "unlocked": True, "level": 1},
        "mine": {
            "name": "Mine",
            "unlocked": False,
            "level": 0,
            "unlock_at_inn_level": 3,
        },
    }
    table.update(overrides)
    return StaticFacilities(table)


class _RecordingFacilities:
    def __init__(self):
        self.queried = []

    def get_facility_info(self, facility_id):
        self.queried.append(facility_id)
        return None


class TestDispatch:
    def setup_method(self):
        self.notifier = NotificationLog()
        self.engine = DispatchEngine(
            facilities=_make_facilities(),
            notifier=self.notifier,
            clock=DayClock(day=4),
        )

    def test_dispatch_creates_assignment(self):
        result = self.engine.dispatch("002", "cooking")

        assert result.success
        assert result.error is None
        assignment = result.assignment
        assert assignment.agent_id == "002"
        assert assignment.activity_type == "cooking"
        assert assignment.progress == 0.0
        assert assignment.status == AssignmentStatus.IN_PROGRESS
        assert assignment.duration == 300
        assert assignment.started_at == 4.0
        assert assignment.id.startswith("task_")
        assert assignment.efficiency.speed_multiplier == pytest.approx(5.0)
        assert self.engine.get_current_task("002") is assignment

    def test_dispatch_notifies(self):
        self.engine.dispatch("002", "cooking")
        info = self.notifier.of_kind(NotificationKind.INFO)
        assert len(info) == 1
        assert "Lin Yuyan" in info[0][2]

    def test_unknown_activity(self):
        result = self.engine.dispatch("001", "juggling")

        assert not result.success
        assert result.error == DispatchError.UNKNOWN_ACTIVITY
        assert result.assignment is None
        assert self.engine.get_all_assignments() == []

    def test_unknown_activity_does_not_materialize_agent(self):
        self.engine.dispatch("001", "juggling")
        assert self.engine.registry.known_ids() == []

    def test_unknown_agent_gets_defaults(self):
        result = self.engine.dispatch("999", "greeting")

        assert result.success
        agent = self.engine.registry.get("999")
        assert agent.display_name == "unknown"
        assert agent.fatigue == 0.0
        assert agent.mood == 100.0
        assert result.assignment.efficiency.base_skill == 1

    def test_already_assigned(self):
        first = self.engine.dispatch("002", "cooking")
        second = self.engine.dispatch("002", "serving")

        assert second.error == DispatchError.ALREADY_ASSIGNED
        assert "already assigned" in second.reason
        assert self.engine.get_current_task("002") is first.assignment
        assert len(self.engine.get_all_assignments()) == 1

    def test_unknown_activity_checked_before_assignment(self):
        self.engine.dispatch("002", "cooking")
        result = self.engine.dispatch("002", "juggling")
        assert result.error == DispatchError.UNKNOWN_ACTIVITY

    def test_assignment_checked_before_facility(self):
        self.engine.dispatch("001", "greeting")
        result = self.engine.dispatch("001", "mining")
        assert result.error == DispatchError.ALREADY_ASSIGNED

    def test_facility_locked(self):
        result = self.engine.dispatch("008", "mining")

        assert result.error == DispatchError.FACILITY_UNMET
        assert "not unlocked" in result.reason
        assert "3" in result.reason
        assert result.required_facility == "mine"
        assert result.required_level == 1
        assert result.current_level == 0
        assert self.engine.get_current_task("008") is None

    def test_facility_missing(self):
        result = self.engine.dispatch("004", "healing")

        assert result.error == DispatchError.FACILITY_UNMET
        assert "does not exist" in result.reason
        assert result.required_facility == "clinic"

    def test_facility_unlocked_allows_dispatch(self):
        self.engine.facilities.set_facility(
            "mine", FacilityInfo(name="Mine", unlocked=True, level=1)
        )
        assert self.engine.dispatch("008", "mining").success

    def test_without_facility_provider_everything_is_allowed(self):
        engine = DispatchEngine()
        assert engine.dispatch("004", "healing").success
        assert engine.dispatch("008", "assassination").success

    def test_ungated_activity_never_queries_provider(self):
        provider = _RecordingFacilities()
        engine = DispatchEngine(facilities=provider)
        assert engine.dispatch("005", "performing").success
        assert provider.queried == []

    def test_assignment_ids_unique(self):
        ids = set()
        for agent_id in ("001", "002", "003", "004", "005"):
            ids.add(self.engine.dispatch(agent_id, "greeting").assignment.id)
        assert len(ids) == 5

    def test_snapshot_frozen_at_dispatch(self):
        result = self.engine.dispatch("002", "cooking")
        self.engine.registry.get("002").fatigue = 1.0
        self.engine.registry.get("002").experience_by_activity["cooking"] = 900
        assert result.assignment.efficiency.speed_multiplier == pytest.approx(5.0)
        assert result.assignment.efficiency.success_probability == pytest.approx(0.9)

    def test_list_activities(self):
        types = [a.type for a in self.engine.list_activities()]
        assert "cooking" in types
        assert len(types) == len(set(types))


class TestFacilityGate:
    def test_level_too_low(self):
        activity = ActivityDefinition(
            type="banquet",
            display_name="Banquet",
            category="kitchen",
            nominal_duration=900,
            required_facility="kitchen",
            required_facility_level=3,
        )
        check = check_facility_requirement(activity, _make_facilities())

        assert not check.satisfied
        assert "current 1" in check.reason
        assert "required 3" in check.reason
        assert check.current_level == 1
        assert check.required_level == 3

    def test_accepts_plain_mapping(self):
        class DictFacilities:
            def get_facility_info(self, facility_id):
                return {"name": "Farm", "unlocked": True, "level": 2}

        activity = ActivityDefinition(
            type="farming", display_name="Farming", category="production",
            nominal_duration=600, required_facility="farm",
        )
        check = check_facility_requirement(activity, DictFacilities())
        assert check.satisfied
        assert check.current_level == 2

    def test_engine_check_facility(self):
        engine = DispatchEngine(facilities=_make_facilities())
        assert engine.check_facility("cooking").satisfied
        assert not engine.check_facility("mining").satisfied
        assert engine.check_facility("juggling") is None

    def test_alternate_catalog_with_engine(self):
        catalog = TaskCatalog([
            ActivityDefinition(
                type="sweeping", display_name="Sweeping", category="service",
                nominal_duration=10,
            )
        ])
        engine = DispatchEngine(catalog=catalog)
        assert engine.dispatch("001", "sweeping").success
        assert engine.dispatch("002", "cooking").error == DispatchError.UNKNOWN_ACTIVITY


class TestCancel:
    def setup_method(self):
        self.engine = DispatchEngine()

    def test_cancel_removes_assignment(self):
        self.engine.dispatch("003", "serving")
        before = self.engine.registry.get("003").model_copy(deep=True)

        result = self.engine.cancel("003")

        assert result.success
        assert result.assignment.activity_type == "serving"
        assert self.engine.get_current_task("003") is None
        after = self.engine.registry.get("003")
        assert after == before
        assert self.engine.get_recent_history("003") == []

    def test_cancel_counts_but_does_not_resolve(self):
        self.engine.dispatch("003", "serving")
        self.engine.cancel("003")

        stats = self.engine.get_statistics()
        assert stats.cancelled_tasks == 1
        assert stats.total_tasks == 0

    def test_cancel_without_assignment(self):
        result = self.engine.cancel("003")

        assert not result.success
        assert result.error == DispatchError.NOT_ASSIGNED
        assert "Wen Ruyu" in result.reason
        assert self.engine.registry.known_ids() == []

    def test_cancel_is_idempotent(self):
        self.engine.dispatch("003", "serving")
        self.engine.cancel("003")
        second = self.engine.cancel("003")
        assert second.error == DispatchError.NOT_ASSIGNED
        assert self.engine.get_statistics().cancelled_tasks == 1

    def test_redispatch_after_cancel(self):
        self.engine.dispatch("003", "serving")
        self.engine.cancel("003")
        assert self.engine.dispatch("003", "tidying").success


class TestRest:
    def setup_method(self):
        self.engine = DispatchEngine()

    def test_half_hour_rest_clears_half_fatigue(self):
        self.engine.registry.get("001").fatigue = 0.5
        result = self.engine.rest("001", 1800)

        assert result.previous_fatigue == 0.5
        assert result.new_fatigue == 0.0
        assert self.engine.registry.get("001").fatigue == 0.0

    def test_partial_rest(self):
        self.engine.registry.get("001").fatigue = 0.8
        result = self.engine.rest("001", 900)
        assert result.new_fatigue == pytest.approx(0.3)

    def test_rest_never_negative(self):
        result = self.engine.rest("001", 100000)
        assert result.new_fatigue == 0.0

    def test_negative_duration_is_noop(self):
        self.engine.registry.get("001").fatigue = 0.4
        assert self.engine.rest("001", -600).new_fatigue == pytest.approx(0.4)

    def test_rest_does_not_touch_assignment(self):
        self.engine.dispatch("001", "greeting")
        self.engine.rest("001", 600)
        assert self.engine.get_current_task("001") is not None


class TestSuitability:
    def setup_method(self):
        self.engine = DispatchEngine()

    def test_fresh_agent_is_suitable(self):
        result = self.engine.is_suitable("002", "cooking")
        assert result.suitable
        assert result.reasons == []
        assert result.warnings == []

    def test_exhausted_agent_unsuitable(self):
        self.engine.registry.get("002").fatigue = 0.95
        result = self.engine.is_suitable("002", "cooking")
        assert not result.suitable
        assert result.reasons == ["fatigue too high"]

    def test_low_mood_warns(self):
        self.engine.registry.get("002").mood = 30
        result = self.engine.is_suitable("002", "cooking")
        assert result.suitable
        assert result.warnings == ["mood low"]

    def test_very_low_mood_warns_once(self):
        self.engine.registry.get("002").mood = 10
        result = self.engine.is_suitable("002", "cooking")
        assert result.warnings == ["mood very low"]

    def test_disliked_activity_warns(self):
        result = self.engine.is_suitable("001", "cleaning")
        assert result.suitable
        assert "dislikes this activity" in result.warnings

    def test_advisory_only(self):
        self.engine.registry.get("002").fatigue = 1.0
        assert not self.engine.is_suitable("002", "cooking").suitable
        assert self.engine.dispatch("002", "cooking").success

    def test_query_does_not_materialize(self):
        self.engine.is_suitable("010", "accounting")
        assert self.engine.registry.known_ids() == []


class TestCharacterStatus:
    def test_status_of_idle_agent(self):
        engine = DispatchEngine()
        status = engine.get_character_status("006")

        assert status["name"] == "Cui'er"
        assert status["fatigue_status"].level == "rested"
        assert status["mood_status"].level == "excellent"
        assert status["current_task"] is None
        assert status["skills"]["security"] == 4
        assert engine.registry.known_ids() == []

    def test_status_shows_current_task(self):
        engine = DispatchEngine()
        engine.dispatch("006", "serving")
        engine.registry.get("006").fatigue = 0.55

        status = engine.get_character_status("006")
        assert status["current_task"].activity_type == "serving"
        assert status["fatigue_percent"] == 55.0
        assert status["fatigue_status"].level == "tired"
