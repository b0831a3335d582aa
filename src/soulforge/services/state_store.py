"""Authoritative game state with named mutators and synchronous notifications."""
from __future__ import annotations

import logging
from collections import deque
from contextlib import contextmanager
from dataclasses import fields as dataclass_fields
from typing import Callable, Deque, Iterator, List

from soulforge.core import calendar
from soulforge.core.types import QuestStatus
from soulforge.data.repositories import SkillsRepository
from soulforge.domain.equipment import EQUIPMENT_SLOTS
from soulforge.domain.events import (
    AchievementUnlocked,
    CorruptionChanged,
    CreationRecorded,
    EquipmentChanged,
    EssenceChanged,
    ForgerEssenceChanged,
    ForgerUpdated,
    HealthChanged,
    InterventionRecorded,
    ItemAdded,
    ItemRemoved,
    JournalEntryAdded,
    LandmarkDiscovered,
    LocationDiscovered,
    NexusStateChanged,
    NpcAdded,
    NpcMemoryAdded,
    NpcUpdated,
    PlayerExperienceChanged,
    PlayerMoved,
    PlayerUpdated,
    QuestAdded,
    QuestCompleted,
    QuestFailed,
    QuestObjectiveProgressed,
    RegionUpdated,
    RelationshipChanged,
    SkillExperienceChanged,
    StateEvent,
    StateReplaced,
    StateUpdated,
    TimeAdvanced,
    ToolUpgraded,
    WorldEventEnded,
    WorldEventStarted,
    WorldUpdated,
)
from soulforge.domain.state import (
    Achievement,
    Creation,
    ForgerState,
    GameState,
    Intervention,
    ItemInstance,
    JournalEntry,
    NpcMemory,
    NpcState,
    PlayerState,
    QuestInstance,
    RegionState,
    WorldEventState,
    WorldState,
)
from soulforge.services.errors import InvariantViolation

logger = logging.getLogger(__name__)

Subscriber = Callable[[StateEvent], None]

XP_PER_LEVEL = 100
MAX_HEALTH_PER_LEVEL = 10
SKILL_XP_GROWTH = 1.5
NPC_MEMORY_LIMIT = 50
RELATIONSHIP_MIN = -100
RELATIONSHIP_MAX = 100
_REGION_FIELDS = ("population", "corruption_level", "events")


def _field_names(cls: type) -> frozenset[str]:
    return frozenset(f.name for f in dataclass_fields(cls))


class StateStore:
    """Owns the single GameState of a session.

    ``get_state()`` hands out the live object so reads stay cheap; callers treat
    it as read-only and change it only through the mutators below. Every
    mutator applies its change in full and then emits exactly one typed event.
    Lookups that miss (unknown item, quest, region or NPC) return a falsy
    value and emit nothing; malformed input raises ``InvariantViolation``.

    Subscribers run synchronously in registration order. If a subscriber calls
    a mutator, the change applies immediately and its event is queued behind
    the one being delivered, so no dispatch ever nests inside another.
    """

    def __init__(self, state: GameState, *, skills_repo: SkillsRepository) -> None:
        self._state = state
        self._skills_repo = skills_repo
        self._subscribers: List[Subscriber] = []
        self._pending: Deque[StateEvent] = deque()
        self._dispatching = False
        self._applying = False

    # ------------------------------------------------------------ Observers
    def subscribe(self, callback: Subscriber) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> bool:
        try:
            self._subscribers.remove(callback)
        except ValueError:
            return False
        return True

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _emit(self, event: StateEvent) -> None:
        self._pending.append(event)
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._pending:
                current = self._pending.popleft()
                for subscriber in list(self._subscribers):
                    try:
                        subscriber(current)
                    except Exception:
                        logger.exception("State subscriber %r failed while handling %s", subscriber, current.kind)
        finally:
            self._dispatching = False

    @contextmanager
    def _mutation(self) -> Iterator[None]:
        if self._applying:
            raise InvariantViolation("State mutators cannot be re-entered while a mutation is applying.")
        self._applying = True
        try:
            yield
        finally:
            self._applying = False

    # ---------------------------------------------------------------- Reads
    def get_state(self) -> GameState:
        return self._state

    @property
    def player(self) -> PlayerState:
        return self._state.player

    @property
    def world(self) -> WorldState:
        return self._state.world

    @property
    def forger(self) -> ForgerState:
        return self._state.forger

    # -------------------------------------------------------- Bulk updates
    def replace_state(self, state: GameState) -> None:
        """Swap in a loaded or freshly created state."""
        with self._mutation():
            self._state = state
        self._emit(StateReplaced())

    def update_state(self, **changes: object) -> None:
        self._merge(self._state, GameState, changes)
        self._emit(StateUpdated(fields=tuple(changes)))

    def update_player(self, **changes: object) -> None:
        self._merge(self._state.player, PlayerState, changes)
        self._emit(PlayerUpdated(fields=tuple(changes)))

    def update_world(self, **changes: object) -> None:
        self._merge(self._state.world, WorldState, changes)
        self._emit(WorldUpdated(fields=tuple(changes)))

    def update_forger(self, **changes: object) -> None:
        self._merge(self._state.forger, ForgerState, changes)
        self._emit(ForgerUpdated(fields=tuple(changes)))

    def _merge(self, target: object, cls: type, changes: dict[str, object]) -> None:
        unknown = sorted(set(changes) - _field_names(cls))
        if unknown:
            raise InvariantViolation(f"Unknown {cls.__name__} fields: {', '.join(unknown)}")
        with self._mutation():
            for name, value in changes.items():
                setattr(target, name, value)

    # --------------------------------------------------------------- Player
    def set_location(self, region_id: str) -> None:
        with self._mutation():
            previous = self._state.player.location
            self._state.player.location = region_id
        self._emit(PlayerMoved(from_region=previous, to_region=region_id))

    def set_health(self, value: int) -> int:
        """Set health clamped to ``[0, max_health]`` and return the stored value."""
        with self._mutation():
            player = self._state.player
            old = player.health
            player.health = max(0, min(player.max_health, value))
            new = player.health
        self._emit(HealthChanged(old=old, new=new, max_health=player.max_health))
        return new

    def adjust_essence(self, delta: int) -> int:
        with self._mutation():
            player = self._state.player
            old = player.essence
            if old + delta < 0:
                raise InvariantViolation(f"Essence cannot go negative ({old} + {delta}).")
            player.essence = old + delta
        self._emit(EssenceChanged(old=old, new=player.essence))
        return player.essence

    def add_player_experience(self, amount: int) -> int:
        """Grant experience, levelling up as many times as it pays for.

        Each level costs ``level * 100``; a level-up raises max health by 10
        and fully heals. Returns the number of levels gained.
        """
        if amount < 0:
            raise InvariantViolation("Experience grants cannot be negative.")
        with self._mutation():
            player = self._state.player
            player.experience += amount
            levels_gained = 0
            while player.experience >= player.level * XP_PER_LEVEL:
                player.experience -= player.level * XP_PER_LEVEL
                player.level += 1
                player.max_health += MAX_HEALTH_PER_LEVEL
                player.health = player.max_health
                levels_gained += 1
        self._emit(
            PlayerExperienceChanged(
                gained=amount,
                experience=player.experience,
                level=player.level,
                levels_gained=levels_gained,
            )
        )
        return levels_gained

    def add_skill_experience(self, skill_id: str, amount: float) -> bool:
        """Grant skill experience; unknown skills are ignored and return False.

        The next level costs ``base_xp_cost * 1.5 ** level``. Levels are only
        granted in whole steps and never beyond the skill's max level.
        """
        if amount < 0:
            raise InvariantViolation("Skill experience grants cannot be negative.")
        skill = self._state.player.skills.get(skill_id)
        if skill is None or not self._skills_repo.has(skill_id):
            return False
        skill_def = self._skills_repo.get(skill_id)
        with self._mutation():
            skill.experience += amount
            levels_gained = 0
            while skill.level < skill_def.max_level:
                cost = skill_def.base_xp_cost * SKILL_XP_GROWTH**skill.level
                if skill.experience < cost:
                    break
                skill.experience -= cost
                skill.level += 1
                levels_gained += 1
            if skill.level > 0:
                skill.unlocked = True
        self._emit(
            SkillExperienceChanged(skill_id=skill_id, gained=amount, level=skill.level, levels_gained=levels_gained)
        )
        return True

    def add_journal_entry(
        self,
        title: str,
        content: str,
        *,
        category: str = "General",
        icon: str | None = None,
    ) -> JournalEntry:
        with self._mutation():
            player = self._state.player
            time = self._state.world.time
            entry = JournalEntry(
                entry_id=f"journal_{len(player.journal) + 1}",
                title=title,
                content=content,
                category=category,
                icon=icon,
                day=time.day,
                hour=time.hour,
                minute=time.minute,
            )
            player.journal.append(entry)
        self._emit(JournalEntryAdded(entry_id=entry.entry_id, title=title, category=category))
        return entry

    def add_achievement(
        self,
        achievement_id: str,
        name: str,
        *,
        description: str = "",
        rarity: str = "common",
    ) -> bool:
        """Unlock an achievement once; returns False if it was already unlocked."""
        player = self._state.player
        if any(existing.achievement_id == achievement_id for existing in player.achievements):
            return False
        with self._mutation():
            player.achievements.append(
                Achievement(
                    achievement_id=achievement_id,
                    name=name,
                    description=description,
                    rarity=rarity,
                    unlocked_day=self._state.world.time.day,
                )
            )
        self._emit(AchievementUnlocked(achievement_id=achievement_id, name=name))
        return True

    def mark_discovered_region(self, region_id: str) -> bool:
        player = self._state.player
        if region_id in player.discovered_regions:
            return False
        with self._mutation():
            player.discovered_regions.append(region_id)
        self._emit(LocationDiscovered(region_id=region_id))
        return True

    def mark_discovered_landmark(self, landmark_id: str) -> bool:
        player = self._state.player
        if landmark_id in player.discovered_landmarks:
            return False
        with self._mutation():
            player.discovered_landmarks.append(landmark_id)
        self._emit(LandmarkDiscovered(landmark_id=landmark_id))
        return True

    # ------------------------------------------------------------ Inventory
    def add_to_inventory(self, item: ItemInstance) -> ItemInstance:
        if item.quantity <= 0:
            raise InvariantViolation(f"Cannot add '{item.item_id}' with quantity {item.quantity}.")
        player = self._state.player
        if player.find_item(item.instance_id) is not None:
            raise InvariantViolation(f"Instance id '{item.instance_id}' is already in the inventory.")
        with self._mutation():
            player.inventory.append(item)
        self._emit(ItemAdded(instance_id=item.instance_id, item_id=item.item_id, quantity=item.quantity))
        return item

    def remove_from_inventory(self, instance_id: str, quantity: int = 1) -> bool:
        """Take up to ``quantity`` units from an instance; an emptied instance is removed.

        Returns False without emitting anything when the instance is not held.
        """
        if quantity <= 0:
            raise InvariantViolation("Removal quantity must be positive.")
        player = self._state.player
        item = player.find_item(instance_id)
        if item is None:
            return False
        with self._mutation():
            removed = min(quantity, item.quantity)
            item.quantity -= removed
            removed_entirely = item.quantity <= 0
            if removed_entirely:
                player.inventory.remove(item)
        self._emit(
            ItemRemoved(
                instance_id=instance_id,
                item_id=item.item_id,
                quantity=removed,
                removed_entirely=removed_entirely,
            )
        )
        return True

    def set_equipment_slot(self, slot: str, item: ItemInstance) -> None:
        self._require_slot(slot)
        with self._mutation():
            self._state.player.equipment[slot] = item
        self._emit(EquipmentChanged(slot=slot, item_id=item.item_id))

    def clear_equipment_slot(self, slot: str) -> ItemInstance | None:
        self._require_slot(slot)
        equipment = self._state.player.equipment
        if slot not in equipment:
            return None
        with self._mutation():
            item = equipment.pop(slot)
        self._emit(EquipmentChanged(slot=slot, item_id=None))
        return item

    @staticmethod
    def _require_slot(slot: str) -> None:
        if slot not in EQUIPMENT_SLOTS:
            raise InvariantViolation(f"Unknown equipment slot '{slot}'.")

    # --------------------------------------------------------------- Quests
    def add_quest(self, quest: QuestInstance) -> None:
        if quest.status != "active":
            raise InvariantViolation("Quests are added in the active status.")
        with self._mutation():
            self._state.player.quests.append(quest)
        self._emit(QuestAdded(quest_id=quest.quest_id, name=quest.name))

    def update_quest_status(self, quest_id: str, status: QuestStatus) -> bool:
        """Move an active quest to a terminal status; returns False if no active quest matches."""
        if status not in ("completed", "failed"):
            raise InvariantViolation(f"Quests can only move to completed or failed, not '{status}'.")
        quest = self._state.player.find_quest(quest_id)
        if quest is None:
            return False
        with self._mutation():
            quest.status = status
        self._emit(QuestCompleted(quest_id=quest_id) if status == "completed" else QuestFailed(quest_id=quest_id))
        return True

    def update_quest_objective(
        self,
        quest_id: str,
        objective_id: str,
        *,
        current_quantity: int,
        completed: bool,
    ) -> bool:
        """Write objective progress on an active quest. A completed objective stays completed."""
        quest = self._state.player.find_quest(quest_id)
        if quest is None:
            return False
        objective = quest.find_objective(objective_id)
        if objective is None:
            return False
        if current_quantity < 0:
            raise InvariantViolation("Objective progress cannot be negative.")
        with self._mutation():
            objective.current_quantity = current_quantity
            objective.completed = objective.completed or completed
        self._emit(
            QuestObjectiveProgressed(
                quest_id=quest_id,
                objective_id=objective_id,
                current=objective.current_quantity,
                required=objective.required_quantity,
                completed=objective.completed,
            )
        )
        return True

    # ---------------------------------------------------------------- World
    def advance_time(self, minutes: int) -> int:
        """Move the world clock forward; returns the number of day boundaries crossed."""
        if minutes < 0:
            raise InvariantViolation("Cannot advance time by a negative amount.")
        with self._mutation():
            world = self._state.world
            world.time, days_crossed = calendar.advance(world.time, minutes)
            time = world.time
        self._emit(
            TimeAdvanced(
                minutes=minutes,
                day=time.day,
                hour=time.hour,
                minute=time.minute,
                season=time.season,
                year=time.year,
                days_crossed=days_crossed,
            )
        )
        return days_crossed

    def set_corruption_level(self, value: float) -> float:
        with self._mutation():
            world = self._state.world
            old = world.corruption_level
            world.corruption_level = max(0.0, min(1.0, value))
        self._emit(CorruptionChanged(old=old, new=world.corruption_level))
        return world.corruption_level

    def set_nexus_state(self, nexus_state: str) -> None:
        with self._mutation():
            world = self._state.world
            old = world.nexus_state
            world.nexus_state = nexus_state
        self._emit(NexusStateChanged(old=old, new=nexus_state))

    def update_region(self, region_id: str, **changes: object) -> RegionState | None:
        region = self._state.world.regions.get(region_id)
        if region is None:
            return None
        unknown = sorted(set(changes) - set(_REGION_FIELDS))
        if unknown:
            raise InvariantViolation(f"Unknown region fields: {', '.join(unknown)}")
        with self._mutation():
            for name, value in changes.items():
                if name == "corruption_level":
                    value = max(0.0, min(1.0, float(value)))  # type: ignore[arg-type]
                elif name == "population":
                    value = max(0, int(value))  # type: ignore[call-overload]
                setattr(region, name, value)
        self._emit(RegionUpdated(region_id=region_id, fields=tuple(changes)))
        return region

    def add_world_event(self, event: WorldEventState) -> None:
        with self._mutation():
            self._state.world.events.append(event)
        self._emit(WorldEventStarted(event_id=event.event_id, name=event.name))

    def remove_world_event(self, event_id: str) -> bool:
        events = self._state.world.events
        for event in events:
            if event.event_id == event_id:
                with self._mutation():
                    events.remove(event)
                self._emit(WorldEventEnded(event_id=event_id, name=event.name))
                return True
        return False

    # --------------------------------------------------------------- Forger
    def adjust_forger_essence(self, delta: int) -> int:
        with self._mutation():
            forger = self._state.forger
            old = forger.essence
            if old + delta < 0:
                raise InvariantViolation(f"Forger essence cannot go negative ({old} + {delta}).")
            forger.essence = old + delta
        self._emit(ForgerEssenceChanged(old=old, new=forger.essence))
        return forger.essence

    def record_intervention(self, intervention: Intervention) -> None:
        with self._mutation():
            self._state.forger.interventions.append(intervention)
        self._emit(InterventionRecorded(tool_id=intervention.tool_id, target=intervention.target))

    def record_creation(self, creation: Creation) -> None:
        with self._mutation():
            self._state.forger.creations.append(creation)
        self._emit(CreationRecorded(creation_id=creation.creation_id, creation_kind=creation.kind))

    def record_tool_upgrade(self, tool_id: str) -> int:
        with self._mutation():
            upgrades = self._state.forger.tool_upgrades
            upgrades[tool_id] = upgrades.get(tool_id, 0) + 1
            level = upgrades[tool_id]
        self._emit(ToolUpgraded(tool_id=tool_id, level=level))
        return level

    # ----------------------------------------------------------------- NPCs
    def add_npc(self, npc: NpcState) -> None:
        if npc.npc_id in self._state.npcs:
            raise InvariantViolation(f"NPC '{npc.npc_id}' already exists.")
        with self._mutation():
            self._state.npcs[npc.npc_id] = npc
        self._emit(NpcAdded(npc_id=npc.npc_id))

    def update_npc(self, npc_id: str, **changes: object) -> bool:
        npc = self._state.npcs.get(npc_id)
        if npc is None:
            return False
        self._merge(npc, NpcState, changes)
        self._emit(NpcUpdated(npc_id=npc_id, fields=tuple(changes)))
        return True

    def add_npc_memory(self, npc_id: str, memory: NpcMemory) -> bool:
        """Append a memory, dropping the oldest ones beyond the retention cap."""
        npc = self._state.npcs.get(npc_id)
        if npc is None:
            return False
        with self._mutation():
            npc.memories.append(memory)
            if len(npc.memories) > NPC_MEMORY_LIMIT:
                del npc.memories[: len(npc.memories) - NPC_MEMORY_LIMIT]
        self._emit(NpcMemoryAdded(npc_id=npc_id, memory_type=memory.memory_type))
        return True

    def set_npc_relationship(self, npc_id: str, entity_id: str, value: int) -> int | None:
        """Store a relationship clamped to [-100, 100]; returns the stored value."""
        npc = self._state.npcs.get(npc_id)
        if npc is None:
            return None
        with self._mutation():
            old = npc.relationships.get(entity_id, 0)
            new = max(RELATIONSHIP_MIN, min(RELATIONSHIP_MAX, value))
            npc.relationships[entity_id] = new
        self._emit(RelationshipChanged(npc_id=npc_id, entity_id=entity_id, old=old, new=new))
        return new
