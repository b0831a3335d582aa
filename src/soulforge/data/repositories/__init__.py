"""Repository exports."""

from .items_repo import ItemsRepository
from .item_effects_repo import ItemEffectsRepository
from .loot_tables_repo import LootTablesRepository
from .creatures_repo import CreaturesRepository
from .skills_repo import SkillsRepository
from .regions_repo import RegionsRepository
from .nexus_states_repo import NexusStatesRepository
from .landmarks_repo import LandmarksRepository
from .quests_repo import QuestsRepository
from .quest_chains_repo import QuestChainsRepository
from .recipes_repo import RecipesRepository
from .forger_tools_repo import ForgerToolsRepository
from .npc_roles_repo import NpcRolesRepository
from .world_events_repo import WorldEventsRepository

__all__ = [
    "ItemsRepository",
    "ItemEffectsRepository",
    "LootTablesRepository",
    "CreaturesRepository",
    "SkillsRepository",
    "RegionsRepository",
    "NexusStatesRepository",
    "LandmarksRepository",
    "QuestsRepository",
    "QuestChainsRepository",
    "RecipesRepository",
    "ForgerToolsRepository",
    "NpcRolesRepository",
    "WorldEventsRepository",
]
