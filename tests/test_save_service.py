import json
import logging
from datetime import datetime, timezone

import pytest

from soulforge.domain.state import ItemInstance, NpcMemory
from soulforge.services.errors import SaveLoadError
from soulforge.services.save_service import SaveService

FIXED_NOW = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


def _service() -> SaveService:
    return SaveService(clock=lambda: FIXED_NOW)


def test_serialize_payload_shape(make_session) -> None:
    session = make_session()

    payload = _service().serialize(session.store.get_state())

    assert payload["version"] == SaveService.SAVE_VERSION
    assert payload["timestamp"] == int(FIXED_NOW.timestamp() * 1000)
    assert payload["name"] == "Save 2024-03-01"
    assert payload["state"]["player"]["name"] == "Tester"
    json.dumps(payload)


def test_round_trip_preserves_rich_state(make_session) -> None:
    session = make_session(role="forger")
    session.start()
    session.run(5)
    session.inventory.add_item("steel_sword")
    session.quests.accept_quest("quest_explore_region", {"region_id": "TheLuminousPlains"})
    session.forger.generate_essence(30)
    session.world.trigger_random_event("resource_boom")
    npc_id = next(iter(session.store.get_state().npcs))
    session.store.add_npc_memory(npc_id, NpcMemory(memory_type="met_player", content="A stranger", day=1))
    service = _service()

    payload = json.loads(json.dumps(service.serialize(session.store.get_state(), "Checkpoint")))
    restored = service.deserialize(payload)

    assert restored == session.store.get_state()
    assert isinstance(restored.player.inventory[0], ItemInstance)


def test_version_mismatch_is_logged(make_session, caplog) -> None:
    session = make_session()
    service = _service()
    payload = service.serialize(session.store.get_state())
    payload["version"] = "0.9.0"

    with caplog.at_level(logging.WARNING, logger="soulforge.services.save_service"):
        restored = service.deserialize(payload)

    assert restored.player.name == "Tester"
    assert "does not match" in caplog.text


def test_unknown_keys_are_ignored(make_session) -> None:
    session = make_session()
    service = _service()
    payload = service.serialize(session.store.get_state())
    payload["state"]["player"]["legacy_field"] = 12

    assert service.deserialize(payload).player.name == "Tester"


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"state": {}},
        {"version": "1.0.0"},
        {"version": "1.0.0", "state": {"player": "nope", "world": {}}},
        {"version": "1.0.0", "state": {"player": {"name": "x"}, "world": {}}},
    ],
)
def test_malformed_payloads_raise(payload) -> None:
    with pytest.raises(SaveLoadError):
        _service().deserialize(payload)


def test_bad_list_field_raises(make_session) -> None:
    service = _service()
    payload = service.serialize(make_session().store.get_state())
    payload["state"]["player"]["discovered_regions"] = "TheCentralNexus"

    with pytest.raises(SaveLoadError):
        service.deserialize(payload)
