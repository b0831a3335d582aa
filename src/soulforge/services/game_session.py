"""Builds one isolated game session: repositories, store, services and scheduler."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from soulforge.config import SessionConfig
from soulforge.core.rng import RNG
from soulforge.core.scheduler import TickScheduler
from soulforge.core.types import PlayerRole
from soulforge.data.repositories import (
    CreaturesRepository,
    ForgerToolsRepository,
    ItemEffectsRepository,
    ItemsRepository,
    LandmarksRepository,
    LootTablesRepository,
    NexusStatesRepository,
    NpcRolesRepository,
    QuestChainsRepository,
    QuestsRepository,
    RecipesRepository,
    RegionsRepository,
    SkillsRepository,
    WorldEventsRepository,
)
from soulforge.domain.state import GameState
from soulforge.services.combat_service import CombatService
from soulforge.services.consciousness_service import ConsciousnessService
from soulforge.services.crafting_service import CraftingService
from soulforge.services.exploration_service import ExplorationService
from soulforge.services.factories import create_new_game
from soulforge.services.forger_service import ForgerService
from soulforge.services.inventory_service import InventoryService
from soulforge.services.npc_service import NpcService
from soulforge.services.quest_service import QuestService
from soulforge.services.results import OperationResult
from soulforge.services.save_slots import SaveSlotStore
from soulforge.services.state_store import StateStore
from soulforge.services.world_service import WorldService

logger = logging.getLogger(__name__)

AUTOSAVE_NAME = "Auto Save"


@dataclass(slots=True)
class Repositories:
    items: ItemsRepository
    item_effects: ItemEffectsRepository
    loot_tables: LootTablesRepository
    creatures: CreaturesRepository
    skills: SkillsRepository
    regions: RegionsRepository
    nexus_states: NexusStatesRepository
    landmarks: LandmarksRepository
    quests: QuestsRepository
    quest_chains: QuestChainsRepository
    recipes: RecipesRepository
    forger_tools: ForgerToolsRepository
    npc_roles: NpcRolesRepository
    world_events: WorldEventsRepository


def build_repositories(base_path: Path | None = None) -> Repositories:
    """Wire every definition table; quest, chain and recipe tables validate against the ones they reference."""
    items = ItemsRepository(base_path)
    item_effects = ItemEffectsRepository(base_path)
    loot_tables = LootTablesRepository(base_path)
    skills = SkillsRepository(base_path)
    quests = QuestsRepository(items_repo=items, skills_repo=skills, base_path=base_path)
    return Repositories(
        items=items,
        item_effects=item_effects,
        loot_tables=loot_tables,
        creatures=CreaturesRepository(base_path),
        skills=skills,
        regions=RegionsRepository(base_path),
        nexus_states=NexusStatesRepository(base_path),
        landmarks=LandmarksRepository(base_path),
        quests=quests,
        quest_chains=QuestChainsRepository(quests_repo=quests, base_path=base_path),
        recipes=RecipesRepository(items_repo=items, skills_repo=skills, base_path=base_path),
        forger_tools=ForgerToolsRepository(base_path),
        npc_roles=NpcRolesRepository(base_path),
        world_events=WorldEventsRepository(base_path),
    )


class GameSession:
    """Owns the store and every subsystem for one game; nothing here is process-global."""

    def __init__(
        self,
        rng: RNG,
        *,
        repositories: Repositories | None = None,
        config: SessionConfig | None = None,
        state: GameState | None = None,
        player_name: str = "Wanderer",
        role: PlayerRole = "wanderer",
    ) -> None:
        self.rng = rng
        self.config = config or SessionConfig()
        self.repos = repositories or build_repositories()
        repos = self.repos
        if state is None:
            state = create_new_game(
                rng,
                skills_repo=repos.skills,
                regions_repo=repos.regions,
                player_name=player_name,
                role=role,
            )
        self.store = StateStore(state, skills_repo=repos.skills)

        self.quests = QuestService(
            self.store,
            quests_repo=repos.quests,
            quest_chains_repo=repos.quest_chains,
            items_repo=repos.items,
            rng=rng,
        )
        self.inventory = InventoryService(
            self.store,
            items_repo=repos.items,
            item_effects_repo=repos.item_effects,
            rng=rng,
            quest_service=self.quests,
        )
        self.crafting = CraftingService(
            self.store,
            recipes_repo=repos.recipes,
            items_repo=repos.items,
            inventory_service=self.inventory,
            rng=rng,
        )
        self.combat = CombatService(
            self.store,
            creatures_repo=repos.creatures,
            loot_tables_repo=repos.loot_tables,
            inventory_service=self.inventory,
            rng=rng,
            quest_service=self.quests,
        )
        self.exploration = ExplorationService(
            self.store,
            regions_repo=repos.regions,
            landmarks_repo=repos.landmarks,
            creatures_repo=repos.creatures,
            combat_service=self.combat,
            inventory_service=self.inventory,
            rng=rng,
            quest_service=self.quests,
        )
        self.npcs = NpcService(self.store, npc_roles_repo=repos.npc_roles, regions_repo=repos.regions, rng=rng)
        self.forger = ForgerService(
            self.store,
            forger_tools_repo=repos.forger_tools,
            nexus_states_repo=repos.nexus_states,
            regions_repo=repos.regions,
            rng=rng,
            quest_service=self.quests,
        )
        self.world = WorldService(
            self.store,
            nexus_states_repo=repos.nexus_states,
            regions_repo=repos.regions,
            world_events_repo=repos.world_events,
            items_repo=repos.items,
            rng=rng,
        )
        self.consciousness = ConsciousnessService(self.store, rng=rng)
        self.saves = SaveSlotStore(self.config.resolved_save_dir())
        self.scheduler = TickScheduler()

    def start(self) -> None:
        """Populate settlements, wake the consciousness and register every periodic task."""
        self.npcs.populate_settlements()
        self.consciousness.awaken()
        config = self.config
        self.scheduler.register("npc_activities", config.npc_activity_interval, self.npcs.update_activities)
        self.scheduler.register("npc_moods", config.npc_mood_interval, self.npcs.update_moods)
        self.scheduler.register("npc_events", config.npc_event_interval, self.npcs.trigger_events)
        self.scheduler.register("world_step", config.world_step_interval, self.world.simulate_world_step)
        self.scheduler.register("consciousness_reflection", config.reflection_interval, self.consciousness.reflect)
        self.scheduler.register(
            "consciousness_emotion", config.emotion_drift_interval, self.consciousness.drift_emotion
        )
        if config.autosave_enabled:
            self.scheduler.register("autosave", config.autosave_interval, self.autosave)
        logger.info("Session started with %d scheduled tasks", len(self.scheduler.tasks()))

    def run(self, ticks: int) -> None:
        self.scheduler.tick(ticks)

    def autosave(self) -> OperationResult[str]:
        return self.saves.save_game(self.store.get_state(), AUTOSAVE_NAME)

    def save(self, name: str | None = None) -> OperationResult[str]:
        return self.saves.save_game(self.store.get_state(), name)

    def load(self, key: str) -> OperationResult[GameState]:
        """Replace the live state with a saved snapshot; the store notifies subscribers once."""
        loaded = self.saves.load_game(key)
        if loaded.success and loaded.payload is not None:
            self.store.replace_state(loaded.payload)
        return loaded
