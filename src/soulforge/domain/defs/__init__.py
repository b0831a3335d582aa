"""Domain definition exports."""

from .creature_def import CreatureDef
from .effect_def import ItemEffectDef
from .forger_tool_def import (
    AnalysisEffect,
    CreationEffect,
    ForgerToolDef,
    InterventionEffect,
    PurificationEffect,
    TemporalEffect,
    ToolCategory,
    ToolEffect,
)
from .item_def import DamageRange, ItemDef
from .loot_def import LootDropDef, LootTableDef
from .npc_role_def import NpcRoleDef, ScheduleEntryDef
from .quest_def import (
    COUNTED_OBJECTIVE_TYPES,
    QuestChainDef,
    QuestDef,
    QuestObjectiveDef,
    QuestPrereqDef,
    QuestRewardDef,
    QuestRewardItemDef,
)
from .recipe_def import RecipeDef, RecipeIngredientDef, SkillRequirementDef
from .region_def import LandmarkDef, NexusStateDef, RegionDef
from .skill_def import SkillDef
from .world_event_def import WorldEventDef

__all__ = [
    "AnalysisEffect",
    "COUNTED_OBJECTIVE_TYPES",
    "CreationEffect",
    "CreatureDef",
    "DamageRange",
    "ForgerToolDef",
    "InterventionEffect",
    "ItemDef",
    "ItemEffectDef",
    "LandmarkDef",
    "LootDropDef",
    "LootTableDef",
    "NexusStateDef",
    "NpcRoleDef",
    "PurificationEffect",
    "QuestChainDef",
    "QuestDef",
    "QuestObjectiveDef",
    "QuestPrereqDef",
    "QuestRewardDef",
    "QuestRewardItemDef",
    "RecipeDef",
    "RecipeIngredientDef",
    "RegionDef",
    "ScheduleEntryDef",
    "SkillDef",
    "SkillRequirementDef",
    "TemporalEffect",
    "ToolCategory",
    "ToolEffect",
    "WorldEventDef",
]
