"""Townsfolk simulation: schedules, moods, goals, life events and player interactions."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Dict, List

from soulforge.core.rng import RNG
from soulforge.data.repositories import NpcRolesRepository, RegionsRepository
from soulforge.domain import npc_dialogue
from soulforge.domain.npc_schedule import (
    LIFE_EVENT_MOODS,
    LIFE_EVENTS,
    RANDOM_MOODS,
    current_entry,
    mood_for_activity,
)
from soulforge.domain.state import NpcMemory, NpcState
from soulforge.services.factories import create_npc
from soulforge.services.results import OperationResult
from soulforge.services.state_store import StateStore

logger = logging.getLogger(__name__)

MIN_NPCS_PER_SETTLEMENT = 3
MAX_NPCS_PER_SETTLEMENT = 5
MOOD_REROLL_CHANCE = 0.1
GOAL_PROGRESS_CHANCE = 0.05
GOAL_PROGRESS_MAX = 10
GOAL_COMPLETE = 100
LIFE_EVENT_CHANCE = 0.2


@dataclass(slots=True)
class InteractionOutcome:
    npc_id: str
    npc_name: str
    interaction_type: str
    response: str
    relationship_change: int
    relationship: int


class NpcService:
    """Drives every NPC in ``GameState.npcs``; regions act as settlements."""

    def __init__(
        self,
        store: StateStore,
        *,
        npc_roles_repo: NpcRolesRepository,
        regions_repo: RegionsRepository,
        rng: RNG,
    ) -> None:
        self._store = store
        self._roles_repo = npc_roles_repo
        self._regions_repo = regions_repo
        self._rng = rng

    # ------------------------------------------------------------------ Views
    def get_npc(self, npc_id: str) -> NpcState | None:
        return self._store.get_state().npcs.get(npc_id)

    def all_npcs(self) -> List[NpcState]:
        return list(self._store.get_state().npcs.values())

    def npcs_in_settlement(self, settlement_id: str) -> List[NpcState]:
        return [npc for npc in self.all_npcs() if npc.settlement_id == settlement_id]

    def npc_count_by_role(self, role: str) -> int:
        return sum(1 for npc in self.all_npcs() if npc.role == role)

    def get_relationship(self, npc_id: str, entity_id: str | None = None) -> int:
        """Relationship value towards ``entity_id`` (the player by default); 0 when unknown."""
        npc = self.get_npc(npc_id)
        if npc is None:
            return 0
        return npc.relationships.get(entity_id or self._store.player.player_id, 0)

    # ------------------------------------------------------------- Population
    def populate_settlements(self) -> int:
        """Create 3-5 NPCs per region once; later calls leave the population alone."""
        if self._store.get_state().npcs:
            return 0
        roles = self._roles_repo.all()
        if not roles:
            return 0
        created = 0
        for region in self._regions_repo.all():
            for _ in range(self._rng.randint(MIN_NPCS_PER_SETTLEMENT, MAX_NPCS_PER_SETTLEMENT)):
                npc = create_npc(self._rng.choice(roles), region.id, self._rng, self._store.get_state().npcs)
                self._store.add_npc(npc)
                created += 1
        logger.info("Created %d NPCs across %d settlements", created, len(self._regions_repo.all()))
        return created

    # ------------------------------------------------------------- Simulation
    def update_activities(self) -> None:
        hour = self._store.world.time.hour
        for npc in self.all_npcs():
            entry = current_entry(npc.schedule, hour)
            if entry is None or entry.activity == npc.current_activity:
                continue
            changes: Dict[str, object] = {"current_activity": entry.activity, "current_location": entry.location}
            mood = mood_for_activity(entry.activity)
            if mood is not None:
                changes["mood"] = mood
            self._store.update_npc(npc.npc_id, **changes)

    def update_moods(self) -> None:
        """Occasionally reroll each mood and nudge unfinished goals forward."""
        for npc in self.all_npcs():
            if self._rng.chance(MOOD_REROLL_CHANCE):
                self._store.update_npc(npc.npc_id, mood=self._rng.choice(RANDOM_MOODS))

            goals = list(npc.goals)
            finished: List[str] = []
            changed = False
            for index, goal in enumerate(goals):
                if goal.completed or not self._rng.chance(GOAL_PROGRESS_CHANCE):
                    continue
                progress = min(GOAL_COMPLETE, goal.progress + self._rng.randint(1, GOAL_PROGRESS_MAX))
                goals[index] = replace(goal, progress=progress, completed=progress >= GOAL_COMPLETE)
                changed = True
                if progress >= GOAL_COMPLETE:
                    finished.append(goal.description)
            if changed:
                self._store.update_npc(npc.npc_id, goals=goals)
            for description in finished:
                self._remember(npc.npc_id, "goal_completed", f"Completed goal: {description}")

    def trigger_events(self) -> str | None:
        """Maybe give one random NPC a life event; returns the NPC id when one happened."""
        if not self._rng.chance(LIFE_EVENT_CHANCE):
            return None
        npcs = self.all_npcs()
        if not npcs:
            return None
        npc = self._rng.choice(npcs)
        event_type = self._rng.choice(tuple(LIFE_EVENTS))
        self._remember(npc.npc_id, event_type, LIFE_EVENTS[event_type])
        self._store.update_npc(npc.npc_id, mood=LIFE_EVENT_MOODS[event_type])
        return npc.npc_id

    # ----------------------------------------------------------- Interaction
    def interact(self, npc_id: str, interaction_type: str) -> OperationResult[InteractionOutcome]:
        npc = self.get_npc(npc_id)
        if npc is None:
            return OperationResult.not_found("NPC not found.", "npc_not_found")
        player = self._store.player
        relationship = npc.relationships.get(player.player_id, 0)

        match interaction_type:
            case "greet":
                response = npc_dialogue.greeting(npc, player.name, relationship, self._rng)
            case "trade":
                response = npc_dialogue.trade_line(npc)
            case "quest":
                region = self._store.world.regions.get(npc.settlement_id)
                response = npc_dialogue.quest_line(npc, region.corruption_level if region is not None else 0.0)
            case "chat":
                response = npc_dialogue.chat_line(npc, self._rng)
            case "help":
                response = npc_dialogue.help_line(npc)
            case _:
                response = f"{npc.name} looks at you with interest."

        change = npc_dialogue.INTERACTION_EFFECTS.get(interaction_type, 0)
        if change:
            stored = self._store.set_npc_relationship(npc_id, player.player_id, relationship + change)
            relationship = stored if stored is not None else relationship
            self._remember(npc_id, f"player_{interaction_type}", response)
        outcome = InteractionOutcome(
            npc_id=npc_id,
            npc_name=npc.name,
            interaction_type=interaction_type,
            response=response,
            relationship_change=change,
            relationship=relationship,
        )
        return OperationResult.ok(f"{npc.name}: {response}", outcome)

    def _remember(self, npc_id: str, memory_type: str, content: str) -> None:
        time = self._store.world.time
        self._store.add_npc_memory(
            npc_id,
            NpcMemory(memory_type=memory_type, content=content, day=time.day, hour=time.hour),
        )
