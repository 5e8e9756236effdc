"""
Tests for named scenario persistence.

Covers the scenario store on both key-value backends: save / load /
list / delete, the sorted name index, overwrite semantics and how
unreadable storage degrades (empty list, None, False) instead of raising.

Run: python -m pytest tests/ -v
"""

import json

import pytest

from spendwise.models import SavedScenario, ScenarioParameters, ValidationError
from spendwise.scenario_store import (
    SCENARIO_LIST_KEY,
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    ScenarioStore,
)


def _scenario(name, tariff=10):
    params = (
        ScenarioParameters.default("USA")
        .with_global_adjustments(tariff, -5)
        .with_category_adjustment("Castings", -10)
        .with_country_tariff_adjustment("China", 5)
    )
    return SavedScenario(name, f"{name} description", params)


@pytest.fixture(params=["memory", "json"])
def store(request, tmp_path):
    """ScenarioStore on each backend."""
    if request.param == "memory":
        return ScenarioStore(MemoryStore())
    return ScenarioStore(JsonFileStore(tmp_path / "scenarios.json"))


class _BrokenStore(KeyValueStore):
    """Every operation fails like an unreadable disk."""

    def get(self, key):
        raise OSError("disk unavailable")

    def set(self, key, value):
        raise OSError("disk unavailable")

    def delete(self, key):
        raise OSError("disk unavailable")

    def list_keys(self):
        raise OSError("disk unavailable")


class _IndexWriteFails(MemoryStore):
    """Records can be written; the name index cannot."""

    def set(self, key, value):
        if key == SCENARIO_LIST_KEY:
            raise OSError("index is read-only")
        super().set(key, value)


# ═══════════════════════════════════════════════════════════════════════════════
# 1. SAVE / LOAD / LIST / DELETE
# ═══════════════════════════════════════════════════════════════════════════════

class TestScenarioStore:
    def test_empty_store(self, store):
        assert store.list_scenario_names() == []
        assert store.load_scenario("anything") is None

    def test_save_and_load(self, store):
        scenario = _scenario("Base case")
        assert store.save_scenario(scenario) is True
        assert store.load_scenario("Base case") == scenario

    def test_names_are_sorted(self, store):
        for name in ("zeta", "Alpha", "mid"):
            store.save_scenario(_scenario(name))
        assert store.list_scenario_names() == ["Alpha", "mid", "zeta"]

    def test_overwrite_does_not_duplicate(self, store):
        store.save_scenario(_scenario("Hike", tariff=10))
        store.save_scenario(_scenario("Hike", tariff=25))
        assert store.list_scenario_names() == ["Hike"]
        assert store.load_scenario("Hike").parameters.global_tariff_adjustment_points == 25

    def test_delete(self, store):
        store.save_scenario(_scenario("a"))
        store.save_scenario(_scenario("b"))
        assert store.delete_scenario("a") is True
        assert store.list_scenario_names() == ["b"]
        assert store.load_scenario("a") is None
        assert store.delete_scenario("a") is False

    def test_blank_name_rejected(self, store):
        with pytest.raises(ValidationError):
            store.save_scenario(_scenario("  "))
        assert store.list_scenario_names() == []

    def test_neutral_scenario_round_trip(self, store):
        scenario = SavedScenario("Neutral", "", ScenarioParameters.default("Germany"))
        store.save_scenario(scenario)
        loaded = store.load_scenario("Neutral")
        assert loaded == scenario
        assert loaded.parameters.is_neutral("Germany")


# ═══════════════════════════════════════════════════════════════════════════════
# 2. STORAGE LAYOUT AND FAILURES
# ═══════════════════════════════════════════════════════════════════════════════

class TestStorageLayout:
    def test_keys_and_record_format(self):
        kv = MemoryStore()
        ScenarioStore(kv).save_scenario(_scenario("Q3"))
        assert kv.list_keys() == ["spendwise_scenario_data_v2_Q3", "spendwise_scenario_list_v2"]
        assert json.loads(kv.get(SCENARIO_LIST_KEY)) == ["Q3"]
        record = json.loads(kv.get("spendwise_scenario_data_v2_Q3"))
        assert record["analysisHomeCountry"] == "USA"
        assert record["globalLogisticsAdjustmentPoints"] == -5

    def test_json_file_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "scenarios.json"
        ScenarioStore(JsonFileStore(path)).save_scenario(_scenario("Kept"))
        reopened = ScenarioStore(JsonFileStore(path))
        assert reopened.list_scenario_names() == ["Kept"]
        assert reopened.load_scenario("Kept") == _scenario("Kept")

    def test_malformed_index_lists_nothing(self):
        store = ScenarioStore(MemoryStore({SCENARIO_LIST_KEY: "{not json"}))
        assert store.list_scenario_names() == []

    def test_index_that_is_not_a_list(self):
        store = ScenarioStore(MemoryStore({SCENARIO_LIST_KEY: json.dumps({"a": 1})}))
        assert store.list_scenario_names() == []

    def test_malformed_record_loads_as_none(self):
        kv = MemoryStore({
            SCENARIO_LIST_KEY: json.dumps(["bad", "partial"]),
            "spendwise_scenario_data_v2_bad": "[[[",
            "spendwise_scenario_data_v2_partial": json.dumps({"name": "partial"}),
        })
        store = ScenarioStore(kv)
        assert store.load_scenario("bad") is None
        assert store.load_scenario("partial") is None

    def test_corrupt_json_file(self, tmp_path):
        path = tmp_path / "scenarios.json"
        path.write_text("this is not json", encoding="utf-8")
        store = ScenarioStore(JsonFileStore(path))
        assert store.list_scenario_names() == []
        assert store.load_scenario("x") is None
        assert store.save_scenario(_scenario("x")) is False

    def test_json_file_that_is_not_an_object(self, tmp_path):
        path = tmp_path / "scenarios.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert ScenarioStore(JsonFileStore(path)).list_scenario_names() == []

    def test_unavailable_storage(self):
        store = ScenarioStore(_BrokenStore())
        assert store.list_scenario_names() == []
        assert store.load_scenario("x") is None
        assert store.save_scenario(_scenario("x")) is False
        assert store.delete_scenario("x") is False

    def test_memory_store_delete(self):
        kv = MemoryStore({"k": "v"})
        assert kv.delete("k") is True
        assert kv.delete("k") is False


# ═══════════════════════════════════════════════════════════════════════════════
# 3. PARTIAL FAILURES AND INDEX RECOVERY
# ═══════════════════════════════════════════════════════════════════════════════

class TestIndexConsistency:
    def test_failed_index_write_removes_new_record(self):
        kv = _IndexWriteFails()
        store = ScenarioStore(kv)
        assert store.save_scenario(_scenario("A")) is False
        assert store.list_scenario_names() == []
        assert store.load_scenario("A") is None
        assert kv.list_keys() == []

    def test_failed_index_write_restores_previous_record(self):
        """An unindexed record that already existed keeps its old value."""
        old = _scenario("A", tariff=3)
        kv = _IndexWriteFails({"spendwise_scenario_data_v2_A": json.dumps(old.to_record())})
        store = ScenarioStore(kv)
        assert store.save_scenario(_scenario("A", tariff=40)) is False
        assert store.load_scenario("A") == old

    def test_corrupt_index_is_rebuilt_from_records(self):
        kv = MemoryStore()
        store = ScenarioStore(kv)
        store.save_scenario(_scenario("A"))
        store.save_scenario(_scenario("C"))
        kv.set(SCENARIO_LIST_KEY, "{corrupt")
        assert store.list_scenario_names() == ["A", "C"]

    def test_save_after_corrupt_index_keeps_earlier_names(self):
        kv = MemoryStore()
        store = ScenarioStore(kv)
        store.save_scenario(_scenario("A"))
        kv.set(SCENARIO_LIST_KEY, "{corrupt")
        assert store.save_scenario(_scenario("B")) is True
        assert store.list_scenario_names() == ["A", "B"]
        # The repaired index is persisted
        assert json.loads(kv.get(SCENARIO_LIST_KEY)) == ["A", "B"]

    def test_delete_after_corrupt_index_repairs_it(self):
        kv = MemoryStore()
        store = ScenarioStore(kv)
        store.save_scenario(_scenario("A"))
        store.save_scenario(_scenario("B"))
        kv.set(SCENARIO_LIST_KEY, json.dumps({"not": "a list"}))
        assert store.delete_scenario("A") is True
        assert json.loads(kv.get(SCENARIO_LIST_KEY)) == ["B"]
