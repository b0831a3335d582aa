"""Quest template data structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Tuple

QuestObjectiveType = Literal[
    "gather_item",
    "defeat_enemy",
    "visit_location",
    "find_item",
    "use_forger_tool",
    "interact_with_object",
]
COUNTED_OBJECTIVE_TYPES: Tuple[str, ...] = ("gather_item", "defeat_enemy")


@dataclass(slots=True)
class QuestPrereqDef:
    """One acceptance gate; only the populated fields apply."""

    skill: str | None = None
    level: int = 0
    role: str | None = None
    quest: str | None = None


@dataclass(slots=True)
class QuestObjectiveDef:
    """Objective template; ``target`` and ``required_quantity`` may hold ``{param}`` placeholders."""

    id: str
    description: str
    objective_type: QuestObjectiveType
    target: str | None = None
    required_quantity: int | str = 1


@dataclass(slots=True)
class QuestRewardItemDef:
    item_id: str
    quantity: int


@dataclass(slots=True)
class QuestRewardDef:
    experience: int = 0
    essence: int = 0
    items: Tuple[QuestRewardItemDef, ...] = ()
    skill_experience: Dict[str, int] = field(default_factory=dict)
    forger_essence: int = 0


@dataclass(slots=True)
class QuestDef:
    quest_id: str
    name: str
    description: str
    quest_type: str
    objectives: Tuple[QuestObjectiveDef, ...]
    rewards: QuestRewardDef
    prerequisites: Tuple[QuestPrereqDef, ...] = ()


@dataclass(slots=True)
class QuestChainDef:
    chain_id: str
    name: str
    description: str
    quest_ids: Tuple[str, ...]
