import re

import pytest

from soulforge.core.rng import RNG
from soulforge.domain.state import DEFAULT_LOCATION_ID
from soulforge.services.errors import FactoryError
from soulforge.services.factories import (
    copy_item_instance,
    create_item_instance,
    create_new_game,
    create_npc,
    make_instance_id,
)


def test_make_instance_id_is_deterministic() -> None:
    first = make_instance_id("item", RNG(5))
    second = make_instance_id("item", RNG(5))

    assert first == second
    assert re.fullmatch(r"item_\d{6}", first)


def test_make_instance_id_skips_taken_ids() -> None:
    taken = {make_instance_id("npc", RNG(5))}

    candidate = make_instance_id("npc", RNG(5), taken)

    assert candidate not in taken
    assert candidate.startswith("npc_")


def test_create_item_instance_copies_template(repos) -> None:
    item = create_item_instance("steel_sword", 1, repos.items, RNG(3))

    assert item.item_id == "steel_sword"
    assert item.name == "Steel Sword"
    assert item.type == "weapon"
    assert item.value == 150
    assert (item.damage.min, item.damage.max) == (10, 15)
    assert item.attribute_requirements == {"strength": 10}


def test_create_item_instance_rejects_unknown_item(repos) -> None:
    with pytest.raises(FactoryError):
        create_item_instance("missing_item", 1, repos.items, RNG(3))


def test_create_item_instance_rejects_empty_quantity(repos) -> None:
    with pytest.raises(FactoryError):
        create_item_instance("steel_sword", 0, repos.items, RNG(3))


def test_copy_item_instance_gets_new_id(repos) -> None:
    rng = RNG(3)
    original = create_item_instance("steel_sword", 3, repos.items, rng)

    copy = copy_item_instance(original, 2, rng, {original.instance_id})

    assert copy.instance_id != original.instance_id
    assert copy.quantity == 2
    assert copy.attribute_requirements is not original.attribute_requirements


def test_create_npc_draws_from_role(repos) -> None:
    role = repos.npc_roles.get("guard")

    npc = create_npc(role, "TheCentralNexus", RNG(11))

    assert npc.role == "guard"
    assert npc.name.split(" ", 1)[1] in role.names
    assert 3 <= len(npc.personality) <= 5
    assert len(set(npc.personality)) == len(npc.personality)
    assert 1 <= len(npc.traits) <= 3
    assert 1 <= len(npc.goals) <= 2
    assert all(goal.goal_id in role.goals for goal in npc.goals)
    assert npc.schedule == list(role.schedule)
    assert all(6 <= value <= 14 for value in npc.attributes.to_dict().values())


def test_create_new_game_seeds_player_and_regions(repos) -> None:
    state = create_new_game(RNG(1), skills_repo=repos.skills, regions_repo=repos.regions, role="forger")

    assert state.player.role == "forger"
    assert state.player.location == DEFAULT_LOCATION_ID
    assert state.player.discovered_regions == [DEFAULT_LOCATION_ID]
    assert set(state.player.skills) == {skill.id for skill in repos.skills.all()}
    assert set(state.world.regions) == {region.id for region in repos.regions.all()}


def test_create_new_game_rejects_unknown_role(repos) -> None:
    with pytest.raises(FactoryError):
        create_new_game(RNG(1), skills_repo=repos.skills, regions_repo=repos.regions, role="necromancer")
