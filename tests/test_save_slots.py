from datetime import datetime, timedelta, timezone
from pathlib import Path

from soulforge.services.save_service import SaveService
from soulforge.services.save_slots import INDEX_FILENAME, QUICK_SAVE_NAME, SaveSlotStore


class StepClock:
    """Returns a time one second later on every call."""

    def __init__(self) -> None:
        self.now = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


def _store(path: Path) -> SaveSlotStore:
    return SaveSlotStore(path, save_service=SaveService(clock=StepClock()))


def test_save_and_load_round_trip(make_session, tmp_path: Path) -> None:
    session = make_session()
    slots = _store(tmp_path)

    saved = slots.save_game(session.store.get_state(), "First Steps")
    loaded = slots.load_game(saved.payload)

    assert saved.success
    assert (tmp_path / f"{saved.payload}.json").exists()
    assert loaded.success
    assert loaded.payload == session.store.get_state()


def test_list_saves_newest_first(make_session, tmp_path: Path) -> None:
    state = make_session().store.get_state()
    slots = _store(tmp_path)

    first = slots.save_game(state, "One").payload
    second = slots.save_game(state, "Two").payload

    entries = slots.list_saves()
    assert [entry.key for entry in entries] == [second, first]
    assert [entry.name for entry in entries] == ["Two", "One"]


def test_same_timestamp_gets_unique_key(make_session, tmp_path: Path) -> None:
    state = make_session().store.get_state()
    fixed = datetime(2024, 3, 1, tzinfo=timezone.utc)
    slots = SaveSlotStore(tmp_path, save_service=SaveService(clock=lambda: fixed))

    first = slots.save_game(state).payload
    second = slots.save_game(state).payload

    assert first != second
    assert second.startswith(first)


def test_quick_save_and_quick_load(make_session, tmp_path: Path) -> None:
    session = make_session()
    slots = _store(tmp_path)
    assert slots.quick_load().reason == "save_not_found"

    slots.quick_save(session.store.get_state())
    slots.save_game(session.store.get_state(), "Manual")

    assert slots.list_saves()[1].name == QUICK_SAVE_NAME
    assert slots.quick_load().success


def test_delete_save_updates_index(make_session, tmp_path: Path) -> None:
    slots = _store(tmp_path)
    key = slots.save_game(make_session().store.get_state()).payload

    assert slots.delete_save(key).success
    assert slots.list_saves() == []
    assert slots.delete_save(key).reason == "save_not_found"


def test_missing_and_invalid_saves(tmp_path: Path) -> None:
    slots = _store(tmp_path)
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "hollow.json").write_text('{"version": "1.0.0"}', encoding="utf-8")

    assert slots.load_game("absent").reason == "save_not_found"
    assert slots.load_game("broken").reason == "invalid_save"
    assert slots.load_game("hollow").reason == "invalid_save"


def test_corrupt_index_reads_as_empty(tmp_path: Path) -> None:
    (tmp_path / INDEX_FILENAME).write_text("[oops", encoding="utf-8")
    assert _store(tmp_path).list_saves() == []

    (tmp_path / INDEX_FILENAME).write_text('[{"key": 3}, "junk", {"key": "a", "timestamp": 5}]', encoding="utf-8")
    entries = _store(tmp_path).list_saves()
    assert [entry.key for entry in entries] == ["a"]
