"""Tests for save envelopes and stores."""

import json
from datetime import datetime, timezone

import pytest

from nextera.core.constants import SAVE_VERSION
from nextera.core.result import ErrorCode
from nextera.core.save_system import (
    FileSaveStore,
    InMemorySaveStore,
    SaveEnvelope,
    SaveSystem,
    parse_envelope,
)
from nextera.data.loaders import get_item_by_id
from nextera.data.models import ProgressionCounters, Roster, RunContext
from nextera.exceptions import SaveFormatError, SlotNotFoundError

FIXED_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def context(make_unit):
    return RunContext(
        run_seed=12345,
        battle_index=3,
        roster=Roster(active_party=(make_unit(id="a"), make_unit(id="b")), bench=(make_unit(id="c"),)),
        inventory=(get_item_by_id("health_potion"),),
        gems=("ruby_gem",),
        progression=ProgressionCounters(runs_attempted=1, battles_won=3),
    )


@pytest.fixture
def saves():
    return SaveSystem(InMemorySaveStore(), clock=lambda: FIXED_TIME)


class TestSaveSystem:
    """Round trips through the in-memory store."""

    def test_round_trip(self, saves, context):
        assert saves.save("slot1", context).ok
        envelope = saves.load("slot1").unwrap()
        assert envelope.version == SAVE_VERSION
        assert envelope.timestamp == FIXED_TIME.isoformat()
        assert envelope.to_context() == context

    def test_missing_slot(self, saves):
        result = saves.load("nothing")
        assert result.code == ErrorCode.SAVE_NOT_FOUND

    def test_overwrite(self, saves, context):
        saves.save("slot1", context)
        saves.save("slot1", context.model_copy(update={"battle_index": 4}))
        assert saves.load("slot1").unwrap().battle_index == 4

    def test_delete(self, saves, context):
        saves.save("slot1", context)
        assert saves.delete_save("slot1").ok
        assert not saves.has_slot("slot1")
        assert saves.delete_save("slot1").code == ErrorCode.SAVE_NOT_FOUND

    def test_list_slots(self, saves, context):
        saves.save("b", context)
        saves.save("a", context)
        assert [info.slot for info in saves.list_slots().unwrap()] == ["a", "b"]
        assert saves.has_slot("a")

    def test_corrupted_raises(self, context):
        store = InMemorySaveStore()
        store.write("bad", "{not json")
        with pytest.raises(SaveFormatError):
            SaveSystem(store).load("bad")

    def test_no_random_state_persisted(self, saves, context):
        saves.save("slot1", context)
        data = json.loads(saves.store.read("slot1"))
        assert set(data) == set(SaveEnvelope.model_fields)
        assert data["run_seed"] == 12345


class TestParseEnvelope:
    """Every malformed envelope is a SaveFormatError."""

    @pytest.mark.parametrize("raw", [
        "{not json",
        "[]",
        json.dumps({"version": "v0", "timestamp": "t", "run_seed": 1, "battle_index": 0, "roster": {}}),
        json.dumps({"version": SAVE_VERSION, "timestamp": "t", "run_seed": 1}),
        json.dumps({"version": SAVE_VERSION, "timestamp": "t", "run_seed": 1, "battle_index": -1, "roster": {}}),
    ])
    def test_rejected(self, raw):
        with pytest.raises(SaveFormatError):
            parse_envelope(raw)

    def test_minimal_envelope(self):
        raw = json.dumps({"version": SAVE_VERSION, "timestamp": "t", "run_seed": 1, "battle_index": 0, "roster": {}})
        envelope = parse_envelope(raw)
        assert envelope.run_seed == 1
        assert envelope.gems == ()


class TestInMemorySaveStore:
    """Tests for the dict-backed store."""

    def test_read_missing(self):
        with pytest.raises(SlotNotFoundError):
            InMemorySaveStore().read("x")

    def test_list_reports_size(self):
        store = InMemorySaveStore(clock=lambda: FIXED_TIME)
        store.write("x", "abc")
        (info,) = store.list()
        assert info.size == 3
        assert info.modified == FIXED_TIME.isoformat()


class TestFileSaveStore:
    """Atomic file-per-slot store."""

    def test_write_and_read(self, tmp_path):
        store = FileSaveStore(tmp_path / "saves")
        store.write("slot1", '{"a": 1}')
        assert store.read("slot1") == '{"a": 1}'
        assert (tmp_path / "saves" / "slot1.json").exists()

    def test_no_temp_files_left(self, tmp_path):
        store = FileSaveStore(tmp_path)
        store.write("slot1", "one")
        store.write("slot1", "two")
        assert [p.name for p in tmp_path.iterdir()] == ["slot1.json"]
        assert store.read("slot1") == "two"

    def test_missing_slot(self, tmp_path):
        with pytest.raises(SlotNotFoundError):
            FileSaveStore(tmp_path).read("nope")

    def test_delete(self, tmp_path):
        store = FileSaveStore(tmp_path)
        store.write("slot1", "x")
        store.delete("slot1")
        assert store.list() == []
        with pytest.raises(SlotNotFoundError):
            store.delete("slot1")

    def test_list(self, tmp_path):
        store = FileSaveStore(tmp_path)
        store.write("b", "xx")
        store.write("a", "x")
        assert [(i.slot, i.size) for i in store.list()] == [("a", 1), ("b", 2)]

    def test_list_missing_directory(self, tmp_path):
        assert FileSaveStore(tmp_path / "absent").list() == []

    @pytest.mark.parametrize("slot", ["../escape", "", "a/b", "x" * 65])
    def test_invalid_slot_name(self, tmp_path, slot):
        with pytest.raises(OSError):
            FileSaveStore(tmp_path).write(slot, "x")

    def test_save_system_reports_failure(self, tmp_path, context):
        saves = SaveSystem(FileSaveStore(tmp_path))
        assert saves.save("../escape", context).code == ErrorCode.SAVE_FAILED

    def test_round_trip_on_disk(self, tmp_path, context):
        saves = SaveSystem(FileSaveStore(tmp_path))
        saves.save("slot1", context)
        reloaded = SaveSystem(FileSaveStore(tmp_path)).load("slot1").unwrap()
        assert reloaded.to_context() == context
