from __future__ import annotations

from dataclasses import fields
from pathlib import Path

import pytest

from soulforge.data import paths
from soulforge.data.json_loader import load_json
from soulforge.services.game_session import Repositories


@pytest.fixture(scope="module")
def definitions_dir() -> Path:
    """Return the canonical definitions directory."""
    return paths.get_definitions_path()


@pytest.mark.parametrize(
    "filename",
    [
        "creatures.json",
        "forger_tools.json",
        "item_effects.json",
        "items.json",
        "landmarks.json",
        "loot_tables.json",
        "nexus_states.json",
        "npc_roles.json",
        "quest_chains.json",
        "quests.json",
        "recipes.json",
        "regions.json",
        "skills.json",
        "world_events.json",
    ],
)
def test_definition_files_are_valid_json(definitions_dir: Path, filename: str) -> None:
    """Every shipped definition file should be parsable JSON."""
    data = load_json(definitions_dir / filename)
    assert isinstance(data, (dict, list)), f"{filename} must contain an object or list"


def test_every_repository_loads(repos: Repositories) -> None:
    for item in fields(Repositories):
        assert getattr(repos, item.name).all(), f"{item.name} is empty"


def test_region_graph_is_symmetric(repos: Repositories) -> None:
    region_ids = {region.id for region in repos.regions.all()}
    for region in repos.regions.all():
        for neighbor in region.neighbors:
            assert neighbor in region_ids, f"{region.id} neighbors unknown region {neighbor}"
            assert region.id in repos.regions.get(neighbor).neighbors, f"{neighbor} does not link back to {region.id}"


def test_region_references(repos: Repositories) -> None:
    for region in repos.regions.all():
        for creature_id in region.spawnable_creatures:
            assert repos.creatures.has(creature_id), f"{region.id} spawns unknown creature {creature_id}"
        for resource in region.resources:
            assert repos.items.has(resource), f"{region.id} lists unknown resource {resource}"


def test_landmarks_sit_in_known_regions(repos: Repositories) -> None:
    for landmark in repos.landmarks.all():
        assert repos.regions.has(landmark.region_id), f"{landmark.id} is in unknown region {landmark.region_id}"


def test_creature_loot_tables_exist(repos: Repositories) -> None:
    for creature in repos.creatures.all():
        if creature.loot_table_id is not None:
            assert repos.loot_tables.has(creature.loot_table_id), f"{creature.id} uses unknown loot table"


def test_loot_drops_reference_items(repos: Repositories) -> None:
    for table in repos.loot_tables.all():
        for drop in table.drops:
            assert repos.items.has(drop.item_id), f"{table.id} drops unknown item {drop.item_id}"


def test_item_effects_exist(repos: Repositories) -> None:
    for item in repos.items.all():
        if item.effect_id is not None:
            assert repos.item_effects.has(item.effect_id), f"{item.id} uses unknown effect {item.effect_id}"


def test_fixed_quest_targets_resolve(repos: Repositories) -> None:
    lookups = {
        "use_forger_tool": repos.forger_tools.has,
        "find_item": repos.items.has,
        "gather_item": repos.items.has,
        "defeat_enemy": repos.creatures.has,
        "visit_location": repos.regions.has,
    }
    for quest in repos.quests.all():
        for objective in quest.objectives:
            target = objective.target
            if target is None or target.startswith("{") or objective.objective_type not in lookups:
                continue
            assert lookups[objective.objective_type](target), f"{quest.quest_id} targets unknown {target}"


def test_npc_schedules_are_ordered(repos: Repositories) -> None:
    for role in repos.npc_roles.all():
        hours = [entry.hour for entry in role.schedule]
        assert hours == sorted(hours), f"{role.id} schedule is out of order"
