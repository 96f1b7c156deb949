import json

from chiso_bookings.models.booking import StoredBooking
from chiso_bookings.services.db_service import BookingStore, date_index_key
from chiso_bookings.services.kv_store import (
    JsonFileKeyValueStore,
    MemoryKeyValueStore,
    create_store,
)


def make_booking(booking_id: str, day: str = "2030-01-15", time: str = "09:00") -> StoredBooking:
    return StoredBooking(
        id=booking_id,
        name="Store Guest",
        email="store@example.com",
        date=day,
        time=time,
        partySize=1,
    )


def test_prefix_listing_is_sorted_and_scoped():
    kv = MemoryKeyValueStore()
    kv.put("date:2030-01-15:b", "b")
    kv.put("date:2030-01-15:a", "a")
    kv.put("date:2030-01-16:c", "c")
    kv.put("booking:a", {"id": "a"})

    assert kv.list("date:2030-01-15:") == [("date:2030-01-15:a", "a"), ("date:2030-01-15:b", "b")]
    assert len(kv.list()) == 4
    assert kv.exists("booking:a")
    assert kv.get("booking:zzz") is None


def test_json_file_store_persists(tmp_path):
    path = tmp_path / "store" / "bookings.json"
    kv = JsonFileKeyValueStore(str(path))
    kv.put("booking:x", {"id": "x"})

    assert json.loads(path.read_text(encoding="utf-8")) == {"booking:x": {"id": "x"}}

    reopened = JsonFileKeyValueStore(str(path))
    assert reopened.get("booking:x") == {"id": "x"}


def test_json_file_stores_sharing_a_path_keep_each_others_keys(tmp_path):
    path = tmp_path / "bookings.json"
    first = JsonFileKeyValueStore(str(path))
    second = JsonFileKeyValueStore(str(path))

    first.put("booking:a", {"id": "a"})
    second.put("booking:b", {"id": "b"})

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "booking:a": {"id": "a"},
        "booking:b": {"id": "b"},
    }
    assert first.get("booking:b") == {"id": "b"}
    assert first.exists("booking:b")
    assert [key for key, _ in first.list("booking:")] == ["booking:a", "booking:b"]


def test_create_store_picks_backend(tmp_path):
    assert type(create_store("")) is MemoryKeyValueStore
    assert isinstance(create_store(str(tmp_path / "kv.json")), JsonFileKeyValueStore)


def test_booking_store_round_trip(fresh_store):
    booking = make_booking("CHISO-1-aaaaaa")
    fresh_store.save_booking(booking)

    assert fresh_store.booking_exists("CHISO-1-aaaaaa")
    assert fresh_store.get_booking("CHISO-1-aaaaaa").to_record() == booking.to_record()
    assert fresh_store.backend.get("booking:CHISO-1-aaaaaa")["partySize"] == 1
    assert [b.id for b in fresh_store.get_bookings_for_date("2030-01-15")] == [booking.id]
    assert fresh_store.get_bookings_for_date("2030-01-16") == []


def test_dangling_index_entries_are_skipped(fresh_store):
    fresh_store.save_booking(make_booking("CHISO-1-aaaaaa"))
    fresh_store.backend.put(date_index_key("2030-01-15", "CHISO-ghost"), "CHISO-ghost")

    bookings = fresh_store.get_bookings_for_date("2030-01-15")
    assert [b.id for b in bookings] == ["CHISO-1-aaaaaa"]


def test_booking_store_is_singleton():
    assert BookingStore() is BookingStore()
