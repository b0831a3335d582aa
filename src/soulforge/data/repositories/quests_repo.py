"""Repository for quest templates."""
from __future__ import annotations

import re
from typing import Dict, List

from soulforge.data.errors import DataReferenceError, DataValidationError
from soulforge.data.repositories.base import RepositoryBase
from soulforge.data.repositories.items_repo import ItemsRepository
from soulforge.data.repositories.skills_repo import SkillsRepository
from soulforge.domain.defs import (
    QuestDef,
    QuestObjectiveDef,
    QuestPrereqDef,
    QuestRewardDef,
    QuestRewardItemDef,
)

OBJECTIVE_TYPES = (
    "gather_item",
    "defeat_enemy",
    "visit_location",
    "find_item",
    "use_forger_tool",
    "interact_with_object",
)
PLACEHOLDER_PATTERN = re.compile(r"^\{[a-z_]+\}$")


class QuestsRepository(RepositoryBase[QuestDef]):
    """Loads and validates quest templates."""

    def __init__(
        self,
        *,
        items_repo: ItemsRepository,
        skills_repo: SkillsRepository,
        base_path=None,
    ) -> None:
        super().__init__("quests.json", base_path)
        self._items_repo = items_repo
        self._skills_repo = skills_repo

    def _build(self, raw: dict[str, object]) -> Dict[str, QuestDef]:
        definitions: Dict[str, QuestDef] = {}
        for quest_id, quest_payload in raw.items():
            context = f"quest '{quest_id}'"
            quest_map = self._require_mapping(quest_payload, context)
            self._assert_allowed_fields(
                quest_map,
                {"name", "description", "type", "objectives", "rewards"},
                {"prerequisites"},
                context,
            )
            definitions[quest_id] = QuestDef(
                quest_id=quest_id,
                name=self._require_str(quest_map["name"], f"{context} name"),
                description=self._require_str(quest_map["description"], f"{context} description"),
                quest_type=self._require_str(quest_map["type"], f"{context} type"),
                objectives=tuple(self._parse_objectives(quest_map["objectives"], context)),
                rewards=self._parse_rewards(quest_map["rewards"], context),
                prerequisites=tuple(self._parse_prereqs(quest_map.get("prerequisites"), context)),
            )
        return definitions

    def _parse_objectives(self, value: object, context: str) -> List[QuestObjectiveDef]:
        objectives_data = self._require_list(value, f"{context} objectives")
        if not objectives_data:
            raise DataValidationError(f"{context} must define at least one objective.")
        objectives: List[QuestObjectiveDef] = []
        seen: set[str] = set()
        for index, entry in enumerate(objectives_data):
            ctx = f"{context} objectives[{index}]"
            mapping = self._require_mapping(entry, ctx)
            self._assert_allowed_fields(mapping, {"id", "description", "type"}, {"target", "required_quantity"}, ctx)
            objective_id = self._require_str(mapping["id"], f"{ctx}.id")
            if objective_id in seen:
                raise DataValidationError(f"{ctx}.id '{objective_id}' is duplicated.")
            seen.add(objective_id)
            objective_type = self._require_str(mapping["type"], f"{ctx}.type")
            if objective_type not in OBJECTIVE_TYPES:
                raise DataValidationError(f"{ctx}.type must be one of {', '.join(OBJECTIVE_TYPES)}.")
            objectives.append(
                QuestObjectiveDef(
                    id=objective_id,
                    description=self._require_str(mapping["description"], f"{ctx}.description"),
                    objective_type=objective_type,  # type: ignore[arg-type]
                    target=self._optional_str(mapping.get("target"), f"{ctx}.target"),
                    required_quantity=self._parse_quantity(mapping.get("required_quantity", 1), ctx),
                )
            )
        return objectives

    def _parse_quantity(self, value: object, ctx: str) -> int | str:
        if isinstance(value, str):
            if not PLACEHOLDER_PATTERN.match(value):
                raise DataValidationError(f"{ctx}.required_quantity must be an integer or a {{placeholder}}.")
            return value
        quantity = self._require_int(value, f"{ctx}.required_quantity")
        if quantity <= 0:
            raise DataValidationError(f"{ctx}.required_quantity must be positive.")
        return quantity

    def _parse_rewards(self, value: object, context: str) -> QuestRewardDef:
        mapping = self._require_mapping(value, f"{context} rewards")
        self._assert_allowed_fields(
            mapping,
            set(),
            {"experience", "essence", "items", "skill_experience", "forger_essence"},
            f"{context} rewards",
        )
        items: List[QuestRewardItemDef] = []
        for index, entry in enumerate(self._require_list(mapping.get("items", []), f"{context} rewards.items")):
            ctx = f"{context} rewards.items[{index}]"
            item_map = self._require_mapping(entry, ctx)
            item_id = self._require_str(item_map.get("item_id"), f"{ctx}.item_id")
            if not self._items_repo.has(item_id):
                raise DataReferenceError(f"{ctx} references unknown item '{item_id}'.")
            quantity = self._require_int(item_map.get("quantity", 1), f"{ctx}.quantity")
            if quantity <= 0:
                raise DataValidationError(f"{ctx}.quantity must be positive.")
            items.append(QuestRewardItemDef(item_id=item_id, quantity=quantity))
        skill_experience = self._require_int_mapping(mapping.get("skill_experience"), f"{context} rewards.skill_experience")
        for skill_id in skill_experience:
            if not self._skills_repo.has(skill_id):
                raise DataReferenceError(f"{context} rewards reference unknown skill '{skill_id}'.")
        return QuestRewardDef(
            experience=self._require_int(mapping.get("experience", 0), f"{context} rewards.experience"),
            essence=self._require_int(mapping.get("essence", 0), f"{context} rewards.essence"),
            items=tuple(items),
            skill_experience=skill_experience,
            forger_essence=self._require_int(mapping.get("forger_essence", 0), f"{context} rewards.forger_essence"),
        )

    def _parse_prereqs(self, value: object, context: str) -> List[QuestPrereqDef]:
        prereqs: List[QuestPrereqDef] = []
        for index, entry in enumerate(self._require_list(value if value is not None else [], f"{context} prerequisites")):
            ctx = f"{context} prerequisites[{index}]"
            mapping = self._require_mapping(entry, ctx)
            self._assert_allowed_fields(mapping, set(), {"skill", "level", "role", "quest"}, ctx)
            skill = self._optional_str(mapping.get("skill"), f"{ctx}.skill")
            if skill is not None and not self._skills_repo.has(skill):
                raise DataReferenceError(f"{ctx} references unknown skill '{skill}'.")
            prereqs.append(
                QuestPrereqDef(
                    skill=skill,
                    level=self._require_int(mapping.get("level", 0), f"{ctx}.level"),
                    role=self._optional_str(mapping.get("role"), f"{ctx}.role"),
                    quest=self._optional_str(mapping.get("quest"), f"{ctx}.quest"),
                )
            )
        return prereqs
