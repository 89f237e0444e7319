"""Tests for the progress store backends."""

import json

import pytest
from sqlmodel import Session

from noor_journey.core.database import make_engine
from noor_journey.core.errors import MalformedRecord, StorageUnavailable, UnknownMember
from noor_journey.models import Position, ProgressEntry, ProgressRecord
from noor_journey.services.progress_store import (
    MemoryProgressStore,
    SQLProgressStore,
    deserialize_record,
    serialize_record,
)

from .conftest import DAY_MS, START_MS


@pytest.fixture(params=["memory", "sql"])
def store(request, roster, notifier, clock, engine):
    if request.param == "memory":
        return MemoryProgressStore(roster, notifier, clock=clock)
    return SQLProgressStore(roster, engine, notifier, clock=clock)


def put_raw(store, key, payload):
    if isinstance(store, MemoryProgressStore):
        store.entries[key] = payload
        return
    with Session(store.engine) as session:
        session.add(ProgressEntry(key=key, payload=payload))
        session.commit()


class TestRead:
    def test_missing_record_reads_as_default(self, store):
        record = store.read("Hoorab")
        assert record.member == "Hoorab"
        assert record.position == Position(juz=0, surah=1, ayah=1)
        assert record.last_updated == START_MS

    def test_default_is_not_persisted(self, store, clock):
        store.read("Hoorab")
        clock.advance(days=3)
        assert store.read("Hoorab").last_updated == START_MS + 3 * DAY_MS

    def test_unknown_member_rejected(self, store):
        with pytest.raises(UnknownMember):
            store.read("Stranger")

    def test_malformed_json_falls_back_to_default(self, store):
        put_raw(store, "progress_Hoorab", "{not json")
        assert store.read("Hoorab").position == Position()

    def test_out_of_range_payload_falls_back_to_default(self, store):
        payload = json.dumps({"juz": 99, "surah": 1, "ayah": 1, "name": "Hoorab", "lastUpdated": 1})
        put_raw(store, "progress_Hoorab", payload)
        assert store.read("Hoorab").position == Position()

    def test_missing_field_falls_back_to_default(self, store):
        put_raw(store, "progress_Hoorab", json.dumps({"juz": 3, "name": "Hoorab"}))
        record = store.read("Hoorab")
        assert record.position.juz == 0


class TestSave:
    def test_save_then_read_round_trips(self, store, clock):
        clock.advance(ms=42)
        saved = store.save("Bilal Qureshi", Position(juz=12, surah=20, ayah=75))

        record = store.read("Bilal Qureshi")
        assert record == saved
        assert record.position == Position(juz=12, surah=20, ayah=75)
        assert record.last_updated == START_MS + 42

    def test_save_overwrites_whole_record(self, store, clock):
        store.save("Amna", Position(juz=3, surah=5, ayah=9))
        clock.advance(days=1)
        store.save("Amna", Position(juz=2, surah=2, ayah=2))

        record = store.read("Amna")
        assert record.position == Position(juz=2, surah=2, ayah=2)
        assert record.last_updated == START_MS + DAY_MS

    def test_saving_same_position_only_moves_timestamp(self, store, clock):
        first = store.save("Amna", Position(juz=4, surah=1, ayah=1))
        clock.advance(ms=10)
        second = store.save("Amna", Position(juz=4, surah=1, ayah=1))
        assert second.position == first.position
        assert second.last_updated == first.last_updated + 10

    def test_last_write_wins(self, store, roster, notifier, clock):
        # A second store over the same backend stands in for another tab.
        if isinstance(store, MemoryProgressStore):
            other = store
        else:
            other = SQLProgressStore(roster, store.engine, notifier, clock=clock)

        store.save("Umar Qureshi", Position(juz=7, surah=3, ayah=1))
        clock.advance(ms=1)
        other.save("Umar Qureshi", Position(juz=2, surah=9, ayah=4))

        assert store.read("Umar Qureshi").position == Position(juz=2, surah=9, ayah=4)

    def test_save_notifies(self, store, notifier):
        calls = []
        store.subscribe(lambda: calls.append(1))
        store.save("Amna", Position(juz=1, surah=1, ayah=1))
        assert calls == [1]
        assert notifier.revision == 1

    def test_unknown_member_rejected_without_notifying(self, store, notifier):
        with pytest.raises(UnknownMember):
            store.save("Stranger", Position(juz=1, surah=1, ayah=1))
        assert notifier.revision == 0

    def test_stored_payload_uses_wire_format(self, store):
        store.save("Bilal Qureshi", Position(juz=1, surah=2, ayah=3))
        if isinstance(store, MemoryProgressStore):
            raw = store.entries["progress_Bilal_Qureshi"]
        else:
            with Session(store.engine) as session:
                raw = session.get(ProgressEntry, "progress_Bilal_Qureshi").payload
        assert json.loads(raw) == {
            "juz": 1,
            "surah": 2,
            "ayah": 3,
            "name": "Bilal Qureshi",
            "lastUpdated": START_MS,
        }


class TestDelete:
    def test_delete_then_read_returns_default(self, store, clock):
        store.save("Hoorab", Position(juz=15, surah=18, ayah=10))
        clock.advance(days=2)
        returned = store.delete("Hoorab")

        record = store.read("Hoorab")
        assert record.position == Position(juz=0, surah=1, ayah=1)
        assert record.last_updated == START_MS + 2 * DAY_MS
        assert returned == record

    def test_delete_missing_record_is_harmless(self, store):
        assert store.delete("Amna").position == Position()

    def test_delete_notifies(self, store, notifier):
        store.delete("Amna")
        assert notifier.revision == 1


class TestSnapshot:
    def test_snapshot_covers_roster_in_order(self, store, roster):
        store.save("Amna", Position(juz=9, surah=1, ayah=1))
        snapshot = store.snapshot()

        assert list(snapshot) == list(roster)
        assert snapshot["Amna"].position.juz == 9
        assert snapshot["Hoorab"].position == Position()

    def test_snapshot_degrades_malformed_entries(self, store):
        store.save("Amna", Position(juz=9, surah=1, ayah=1))
        put_raw(store, "progress_Hoorab", "[]")
        snapshot = store.snapshot()
        assert snapshot["Hoorab"].position == Position()
        assert snapshot["Amna"].position.juz == 9


class TestUnavailableBackend:
    @pytest.fixture
    def broken_store(self, roster, notifier, clock):
        # No tables created, so every statement fails.
        return SQLProgressStore(roster, make_engine("sqlite://"), notifier, clock=clock)

    def test_read_falls_back_to_default(self, broken_store):
        assert broken_store.read("Amna").position == Position()

    def test_snapshot_falls_back_to_defaults(self, broken_store, roster):
        snapshot = broken_store.snapshot()
        assert list(snapshot) == list(roster)

    def test_write_failure_is_surfaced_and_not_notified(self, broken_store, notifier):
        with pytest.raises(StorageUnavailable):
            broken_store.save("Amna", Position(juz=1, surah=1, ayah=1))
        with pytest.raises(StorageUnavailable):
            broken_store.delete("Amna")
        assert notifier.revision == 0


class TestSerialization:
    def test_round_trip(self):
        record = ProgressRecord(
            member="Mama", position=Position(juz=30, surah=114, ayah=6), last_updated=123
        )
        assert deserialize_record("progress_Mama", serialize_record(record)) == record

    def test_non_object_payload_is_malformed(self):
        with pytest.raises(MalformedRecord):
            deserialize_record("progress_Mama", "42")

    def test_malformed_is_a_storage_error(self):
        assert issubclass(MalformedRecord, StorageUnavailable)
