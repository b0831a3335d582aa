import copy
import logging

import pytest

from soulforge.core.calendar import minutes_since_epoch
from soulforge.core.rng import RNG
from soulforge.domain.events import (
    HealthChanged,
    JournalEntryAdded,
    PlayerExperienceChanged,
    PlayerMoved,
    StateEvent,
    StateReplaced,
)
from soulforge.domain.state import NpcMemory, NpcState
from soulforge.services.errors import InvariantViolation
from soulforge.services.factories import create_new_game
from soulforge.services.state_store import NPC_MEMORY_LIMIT, StateStore


def _make_store(repos) -> StateStore:
    state = create_new_game(RNG(42), skills_repo=repos.skills, regions_repo=repos.regions, player_name="Tester")
    return StateStore(state, skills_repo=repos.skills)


def _add_npc(store: StateStore, npc_id: str = "npc_1") -> None:
    store.add_npc(NpcState(npc_id=npc_id, name="Ada Smith", role="blacksmith", settlement_id="TheCentralNexus"))


def test_each_mutation_emits_one_typed_event(repos) -> None:
    store = _make_store(repos)
    seen: list[StateEvent] = []
    store.subscribe(seen.append)

    store.set_location("TheLuminousPlains")
    store.set_health(50)

    assert [type(event) for event in seen] == [PlayerMoved, HealthChanged]
    assert seen[0] == PlayerMoved(from_region="TheCentralNexus", to_region="TheLuminousPlains")
    assert seen[1].new == 50


def test_failing_subscriber_is_logged_and_others_still_run(repos, caplog) -> None:
    store = _make_store(repos)
    seen: list[str] = []

    def broken(event: StateEvent) -> None:
        raise RuntimeError("boom")

    store.subscribe(broken)
    store.subscribe(lambda event: seen.append(event.kind))

    with caplog.at_level(logging.ERROR, logger="soulforge.services.state_store"):
        store.set_health(40)

    assert seen == ["health_changed"]
    assert store.player.health == 40
    assert any("subscriber" in record.getMessage() for record in caplog.records)


def test_mutation_from_subscriber_is_applied_then_queued(repos) -> None:
    store = _make_store(repos)
    order: list[str] = []

    def writer(event: StateEvent) -> None:
        if isinstance(event, PlayerMoved):
            store.add_journal_entry("Arrived", f"Reached {event.to_region}", category="Exploration")
            # Applied immediately even though its event is delivered later.
            assert store.player.journal[-1].title == "Arrived"
        order.append(f"writer:{event.kind}")

    store.subscribe(writer)
    store.subscribe(lambda event: order.append(f"reader:{event.kind}"))

    store.set_location("TheLuminousPlains")

    assert order == [
        "writer:player_moved",
        "reader:player_moved",
        "writer:journal_entry_added",
        "reader:journal_entry_added",
    ]


def test_reentrant_mutation_is_rejected(repos) -> None:
    store = _make_store(repos)
    with store._mutation():
        with pytest.raises(InvariantViolation):
            store.set_health(10)


def test_unsubscribe(repos) -> None:
    store = _make_store(repos)
    seen: list[StateEvent] = []
    store.subscribe(seen.append)

    assert store.unsubscribe(seen.append)
    assert not store.unsubscribe(seen.append)
    store.set_health(10)
    assert seen == []


def test_experience_levels_up_and_heals(repos) -> None:
    store = _make_store(repos)
    store.set_health(30)
    seen: list[StateEvent] = []
    store.subscribe(seen.append)

    gained = store.add_player_experience(250)

    player = store.player
    assert gained == 1
    assert player.level == 2
    assert player.experience == 150
    assert player.max_health == 110
    assert player.health == 110
    assert seen == [PlayerExperienceChanged(gained=250, experience=150, level=2, levels_gained=1)]


def test_experience_can_gain_several_levels(repos) -> None:
    store = _make_store(repos)

    assert store.add_player_experience(300) == 2
    assert store.player.level == 3
    assert store.player.experience == 0


def test_health_is_clamped(repos) -> None:
    store = _make_store(repos)

    assert store.set_health(500) == store.player.max_health
    assert store.set_health(-20) == 0


def test_essence_never_goes_negative(repos) -> None:
    store = _make_store(repos)
    store.adjust_essence(5)

    with pytest.raises(InvariantViolation):
        store.adjust_essence(-6)
    assert store.player.essence == 5


def test_skill_experience_levels_in_whole_steps(repos) -> None:
    store = _make_store(repos)
    skill_def = repos.skills.get("primordial_crafting")

    assert store.add_skill_experience("primordial_crafting", skill_def.base_xp_cost)

    skill = store.player.skills["primordial_crafting"]
    assert skill.level == 1
    assert skill.unlocked
    assert not store.add_skill_experience("unknown_skill", 10)


def test_journal_entries_are_stamped_with_world_time(repos) -> None:
    store = _make_store(repos)
    store.advance_time(90)
    seen: list[StateEvent] = []
    store.subscribe(seen.append)

    entry = store.add_journal_entry("Note", "Something happened", category="General")

    assert (entry.day, entry.hour, entry.minute) == (1, 13, 30)
    assert seen == [JournalEntryAdded(entry_id=entry.entry_id, title="Note", category="General")]


def test_achievements_unlock_once(repos) -> None:
    store = _make_store(repos)

    assert store.add_achievement("first_steps", "First Steps")
    assert not store.add_achievement("first_steps", "First Steps")
    assert len(store.player.achievements) == 1


def test_unknown_fields_are_rejected(repos) -> None:
    store = _make_store(repos)

    with pytest.raises(InvariantViolation):
        store.update_player(nickname="Bob")
    with pytest.raises(InvariantViolation):
        store.update_region("TheCentralNexus", weather="rain")


def test_region_updates_are_clamped(repos) -> None:
    store = _make_store(repos)

    region = store.update_region("TheCentralNexus", corruption_level=1.7, population=-5)

    assert region is not None
    assert region.corruption_level == 1.0
    assert region.population == 0
    assert store.update_region("Nowhere", population=3) is None


def test_world_corruption_is_clamped(repos) -> None:
    store = _make_store(repos)

    assert store.set_corruption_level(2.0) == 1.0
    assert store.set_corruption_level(-1.0) == 0.0


def test_negative_time_is_rejected(repos) -> None:
    store = _make_store(repos)
    with pytest.raises(InvariantViolation):
        store.advance_time(-5)


def test_npc_memories_are_capped(repos) -> None:
    store = _make_store(repos)
    _add_npc(store)

    for index in range(NPC_MEMORY_LIMIT + 5):
        store.add_npc_memory("npc_1", NpcMemory(memory_type="note", content=str(index)))

    memories = store.get_state().npcs["npc_1"].memories
    assert len(memories) == NPC_MEMORY_LIMIT
    assert memories[0].content == "5"
    assert not store.add_npc_memory("missing", NpcMemory(memory_type="note", content="x"))


def test_relationships_are_clamped(repos) -> None:
    store = _make_store(repos)
    _add_npc(store)

    assert store.set_npc_relationship("npc_1", "player", 150) == 100
    assert store.set_npc_relationship("npc_1", "player", -150) == -100
    assert store.set_npc_relationship("missing", "player", 5) is None


def test_duplicate_npc_is_rejected(repos) -> None:
    store = _make_store(repos)
    _add_npc(store)
    with pytest.raises(InvariantViolation):
        _add_npc(store)


def test_replace_state_notifies_once(repos) -> None:
    store = _make_store(repos)
    seen: list[StateEvent] = []
    store.subscribe(seen.append)
    replacement = create_new_game(RNG(7), skills_repo=repos.skills, regions_repo=repos.regions, player_name="Other")

    store.replace_state(replacement)

    assert store.player.name == "Other"
    assert seen == [StateReplaced()]


def test_update_forger_and_state_merge_known_fields(repos) -> None:
    store = _make_store(repos)
    seen: list[StateEvent] = []
    store.subscribe(seen.append)

    store.update_forger(essence=40, tools=["nexus_analyzer"])
    store.update_state(npcs={})

    assert store.get_state().forger.essence == 40
    assert store.get_state().forger.tools == ["nexus_analyzer"]
    assert [event.kind for event in seen] == ["forger_updated", "state_updated"]
    assert seen[0].fields == ("essence", "tools")


def test_update_forger_rejects_unknown_field(repos) -> None:
    store = _make_store(repos)

    with pytest.raises(InvariantViolation):
        store.update_forger(mana=5)

    assert store.get_state().forger.essence == 0


def test_zero_experience_grant_changes_nothing(repos) -> None:
    store = _make_store(repos)
    store.add_player_experience(130)
    before = copy.deepcopy(store.get_state())

    assert store.add_player_experience(0) == 0

    assert store.get_state() == before


@pytest.mark.parametrize("minutes", [1, 59, 60, 725, 1440, 3000, 90 * 1440 + 7, 400 * 1440])
def test_advance_time_moves_clock_by_exact_minutes(repos, minutes: int) -> None:
    store = _make_store(repos)
    store.advance_time(17)
    start = minutes_since_epoch(store.world.time)

    store.advance_time(minutes)

    time = store.world.time
    assert minutes_since_epoch(time) - start == minutes
    assert 0 <= time.minute < 60
    assert 0 <= time.hour < 24
