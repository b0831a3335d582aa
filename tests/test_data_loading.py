import json
from pathlib import Path

import pytest

from soulforge.data.errors import DataLoadError, DataReferenceError, DataValidationError
from soulforge.data.repositories import (
    ItemsRepository,
    QuestChainsRepository,
    QuestsRepository,
    RecipesRepository,
    RegionsRepository,
    SkillsRepository,
)

SKILLS = {
    "soul_resonance": {
        "name": "Soul Resonance",
        "description": "Attune to the echoes of living things.",
        "category": "mystic",
        "max_level": 5,
        "base_xp_cost": 100,
    },
    "cosmic_insight": {
        "name": "Cosmic Insight",
        "description": "Read the patterns of the nexus.",
        "category": "mystic",
        "max_level": 3,
        "base_xp_cost": 200,
    },
}

ITEMS = {
    "iron_ore": {
        "name": "Iron Ore",
        "description": "Raw ore.",
        "type": "material",
        "value": 2,
        "rarity": "common",
        "max_stack_size": 50,
    },
}

QUESTS = {
    "quest_first_ore": {
        "name": "First Ore",
        "description": "Dig up some ore.",
        "type": "gathering",
        "objectives": [
            {"id": "gather", "description": "Gather ore", "type": "gather_item", "target": "iron_ore", "required_quantity": 3}
        ],
        "rewards": {"experience": 10, "items": [{"item_id": "iron_ore", "quantity": 1}]},
    },
}


def test_skills_repo_loads_sorted(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "skills.json", SKILLS)

    repo = SkillsRepository(base_path=definitions_dir)

    assert [skill.id for skill in repo.all()] == ["cosmic_insight", "soul_resonance"]
    assert repo.get("soul_resonance").base_xp_cost == 100
    assert repo.has("cosmic_insight")


def test_get_missing_raises_key_error(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "skills.json", SKILLS)

    with pytest.raises(KeyError):
        SkillsRepository(base_path=definitions_dir).get("void_walking")


def test_missing_file_raises_load_error(tmp_path: Path) -> None:
    with pytest.raises(DataLoadError):
        SkillsRepository(base_path=_make_definitions_dir(tmp_path)).all()


def test_invalid_json_raises_load_error(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    (definitions_dir / "skills.json").write_text("{", encoding="utf-8")

    with pytest.raises(DataLoadError):
        SkillsRepository(base_path=definitions_dir).all()


def test_top_level_must_be_object(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "skills.json", [SKILLS])

    with pytest.raises(DataValidationError):
        SkillsRepository(base_path=definitions_dir).all()


def test_region_cannot_neighbor_itself(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "regions.json",
        {
            "TheLoop": {
                "name": "The Loop",
                "description": "It leads back to itself.",
                "threat_level": 1,
                "neighbors": ["TheLoop"],
                "spawnable_creatures": [],
                "resources": [],
            }
        },
    )

    with pytest.raises(DataValidationError):
        RegionsRepository(base_path=definitions_dir).all()


def test_unknown_fields_are_rejected(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    skills = {key: dict(value) for key, value in SKILLS.items()}
    skills["soul_resonance"]["cooldown"] = 3
    _write_json(definitions_dir / "skills.json", skills)

    with pytest.raises(DataValidationError):
        SkillsRepository(base_path=definitions_dir).all()


def test_recipe_with_unknown_item_raises_reference_error(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "skills.json", SKILLS)
    _write_json(definitions_dir / "items.json", ITEMS)
    _write_json(
        definitions_dir / "recipes.json",
        {
            "craft_ghost_blade": {
                "name": "Ghost Blade",
                "description": "Forged from nothing.",
                "ingredients": [{"item_id": "iron_ore", "quantity": 2}],
                "output": {"item_id": "ghost_blade", "quantity": 1},
            }
        },
    )
    repo = RecipesRepository(
        items_repo=ItemsRepository(base_path=definitions_dir),
        skills_repo=SkillsRepository(base_path=definitions_dir),
        base_path=definitions_dir,
    )

    with pytest.raises(DataReferenceError):
        repo.all()


def test_quest_with_unknown_skill_reward_raises_reference_error(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "skills.json", SKILLS)
    _write_json(definitions_dir / "items.json", ITEMS)
    quests = json.loads(json.dumps(QUESTS))
    quests["quest_first_ore"]["rewards"]["skill_experience"] = {"void_walking": 5}
    _write_json(definitions_dir / "quests.json", quests)

    with pytest.raises(DataReferenceError):
        _quests_repo(definitions_dir).all()


def test_quest_placeholder_quantity_must_be_well_formed(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "skills.json", SKILLS)
    _write_json(definitions_dir / "items.json", ITEMS)
    quests = json.loads(json.dumps(QUESTS))
    quests["quest_first_ore"]["objectives"][0]["required_quantity"] = "many"
    _write_json(definitions_dir / "quests.json", quests)

    with pytest.raises(DataValidationError):
        _quests_repo(definitions_dir).all()


def test_chain_with_unknown_quest_raises_reference_error(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "skills.json", SKILLS)
    _write_json(definitions_dir / "items.json", ITEMS)
    _write_json(definitions_dir / "quests.json", QUESTS)
    _write_json(
        definitions_dir / "quest_chains.json",
        {
            "chain_miner": {
                "name": "Miner's Road",
                "description": "From ore to ingot.",
                "quests": ["quest_first_ore", "quest_second_ore"],
            }
        },
    )
    repo = QuestChainsRepository(quests_repo=_quests_repo(definitions_dir), base_path=definitions_dir)

    with pytest.raises(DataReferenceError):
        repo.all()


def _quests_repo(definitions_dir: Path) -> QuestsRepository:
    return QuestsRepository(
        items_repo=ItemsRepository(base_path=definitions_dir),
        skills_repo=SkillsRepository(base_path=definitions_dir),
        base_path=definitions_dir,
    )


def _make_definitions_dir(tmp_path: Path) -> Path:
    definitions_dir = tmp_path / "definitions"
    definitions_dir.mkdir()
    return definitions_dir


def _write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")
