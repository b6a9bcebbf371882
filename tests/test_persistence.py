"""Tests for saving and restoring engine state."""

import json

import pytest

from dispatch_kernel.dispatch.engine import DispatchEngine
from dispatch_kernel.persistence.adapter import SaveDataError, parse_save_data


class FixedRoll:
    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


def _make_played_engine() -> DispatchEngine:
    """Engine with finished work, history and one task in flight."""
    engine = DispatchEngine(rng=FixedRoll(0.0))
    engine.dispatch("001", "greeting")
    engine.advance(1000)
    engine.dispatch("003", "serving")
    engine.advance(10)
    engine.registry.get("003").fatigue = 0.25
    return engine


class TestSaveLoad:
    def test_save_is_json_compatible(self):
        engine = _make_played_engine()
        data = engine.get_save_data()

        text = json.dumps(data)
        assert "assignments" in json.loads(text)
        assert set(data) == {"assignments", "history", "agents", "statistics"}

    def test_round_trip_restores_in_flight_task(self):
        engine = _make_played_engine()
        original = engine.get_current_task("003")

        restored = DispatchEngine()
        restored.load_save_data(json.loads(json.dumps(engine.get_save_data())))

        task = restored.get_current_task("003")
        assert task.id == original.id
        assert task.activity_type == "serving"
        assert task.progress == pytest.approx(original.progress)
        assert task.efficiency == original.efficiency
        assert task.started_at == original.started_at

    def test_round_trip_restores_agents_history_and_statistics(self):
        engine = _make_played_engine()

        restored = DispatchEngine()
        restored.load_save_data(engine.get_save_data())

        assert restored.registry.get("003").fatigue == 0.25
        assert restored.registry.get("001").experience("greeting") == 10
        assert [e.activity_type for e in restored.get_recent_history("001")] == ["greeting"]
        assert restored.get_statistics() == engine.get_statistics()

    def test_restored_task_completes(self):
        engine = _make_played_engine()
        restored = DispatchEngine(rng=FixedRoll(0.0))
        restored.load_save_data(engine.get_save_data())

        outcomes = restored.advance(1000)
        assert [o.assignment.agent_id for o in outcomes] == ["003"]

    def test_load_accepts_json_text(self):
        engine = _make_played_engine()
        restored = DispatchEngine()
        restored.load_save_data(json.dumps(engine.get_save_data()))
        assert restored.get_current_task("003") is not None

    def test_load_replaces_existing_state(self):
        engine = DispatchEngine()
        engine.dispatch("005", "performing")

        engine.load_save_data(_make_played_engine().get_save_data())

        assert engine.get_current_task("005") is None
        assert engine.get_current_task("003") is not None

    def test_saved_data_is_detached(self):
        engine = _make_played_engine()
        data = engine.get_save_data()
        engine.advance(1000)
        assert "003" in data["assignments"]

    def test_empty_save_loads(self):
        engine = _make_played_engine()
        engine.load_save_data({})
        assert engine.get_all_assignments() == []
        assert engine.get_statistics().total_tasks == 0

    def test_long_history_trimmed_on_load(self):
        data = DispatchEngine().get_save_data()
        data["history"] = {
            "001": [
                {"activity_type": f"t{i}", "completed_at": i, "success": True}
                for i in range(30)
            ]
        }
        engine = DispatchEngine()
        engine.load_save_data(data)

        history = engine.registry.recent_history("001")
        assert len(history) == 20
        assert history[-1].activity_type == "t29"


class TestInvalidSaveData:
    def setup_method(self):
        self.engine = _make_played_engine()
        self.before = self.engine.get_save_data()

    def _assert_untouched(self):
        assert self.engine.get_save_data() == self.before

    def test_out_of_range_fatigue(self):
        data = json.loads(json.dumps(self.before))
        data["agents"]["003"]["fatigue"] = 2.0

        with pytest.raises(SaveDataError):
            self.engine.load_save_data(data)
        self._assert_untouched()

    def test_assignment_keyed_under_wrong_agent(self):
        data = json.loads(json.dumps(self.before))
        data["assignments"]["005"] = data["assignments"].pop("003")

        with pytest.raises(SaveDataError, match="keyed under 005"):
            self.engine.load_save_data(data)
        self._assert_untouched()

    def test_completed_assignment_rejected(self):
        data = json.loads(json.dumps(self.before))
        data["assignments"]["003"]["status"] = "completed"

        with pytest.raises(SaveDataError):
            self.engine.load_save_data(data)
        self._assert_untouched()

    def test_malformed_json(self):
        with pytest.raises(SaveDataError):
            self.engine.load_save_data("{not json")
        self._assert_untouched()

    def test_wrong_shape(self):
        with pytest.raises(SaveDataError):
            parse_save_data({"assignments": ["not", "a", "mapping"]})

    def test_skill_above_cap(self):
        data = json.loads(json.dumps(self.before))
        data["agents"]["001"]["skill_by_activity"]["greeting"] = 9

        with pytest.raises(SaveDataError):
            self.engine.load_save_data(data)
        self._assert_untouched()

    def test_skill_below_one(self):
        data = json.loads(json.dumps(self.before))
        data["agents"]["001"]["skill_by_activity"]["greeting"] = 0

        with pytest.raises(SaveDataError):
            self.engine.load_save_data(data)
        self._assert_untouched()

    def test_negative_experience(self):
        data = json.loads(json.dumps(self.before))
        data["agents"]["001"]["experience_by_activity"]["greeting"] = -10000

        with pytest.raises(SaveDataError):
            self.engine.load_save_data(data)
        self._assert_untouched()
        assert self.engine.dispatch("001", "greeting").success
