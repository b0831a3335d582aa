"""Typed notifications emitted by the state store, one per applied mutation."""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple


@dataclass(slots=True, frozen=True)
class StateEvent:
    """Base of the event union; ``kind`` is the stable tag subscribers can match on."""

    kind: ClassVar[str] = "state_event"


@dataclass(slots=True, frozen=True)
class StateReplaced(StateEvent):
    kind: ClassVar[str] = "state_replaced"


@dataclass(slots=True, frozen=True)
class StateUpdated(StateEvent):
    fields: Tuple[str, ...]
    kind: ClassVar[str] = "state_updated"


@dataclass(slots=True, frozen=True)
class PlayerUpdated(StateEvent):
    fields: Tuple[str, ...]
    kind: ClassVar[str] = "player_updated"


@dataclass(slots=True, frozen=True)
class WorldUpdated(StateEvent):
    fields: Tuple[str, ...]
    kind: ClassVar[str] = "world_updated"


@dataclass(slots=True, frozen=True)
class ForgerUpdated(StateEvent):
    fields: Tuple[str, ...]
    kind: ClassVar[str] = "forger_updated"


@dataclass(slots=True, frozen=True)
class PlayerMoved(StateEvent):
    from_region: str
    to_region: str
    kind: ClassVar[str] = "player_moved"


@dataclass(slots=True, frozen=True)
class HealthChanged(StateEvent):
    old: int
    new: int
    max_health: int
    kind: ClassVar[str] = "health_changed"


@dataclass(slots=True, frozen=True)
class EssenceChanged(StateEvent):
    old: int
    new: int
    kind: ClassVar[str] = "essence_changed"


@dataclass(slots=True, frozen=True)
class ForgerEssenceChanged(StateEvent):
    old: int
    new: int
    kind: ClassVar[str] = "forger_essence_changed"


@dataclass(slots=True, frozen=True)
class CorruptionChanged(StateEvent):
    old: float
    new: float
    kind: ClassVar[str] = "corruption_changed"


@dataclass(slots=True, frozen=True)
class NexusStateChanged(StateEvent):
    old: str
    new: str
    kind: ClassVar[str] = "nexus_state_changed"


@dataclass(slots=True, frozen=True)
class RegionUpdated(StateEvent):
    region_id: str
    fields: Tuple[str, ...]
    kind: ClassVar[str] = "region_updated"


@dataclass(slots=True, frozen=True)
class WorldEventStarted(StateEvent):
    event_id: str
    name: str
    kind: ClassVar[str] = "world_event_started"


@dataclass(slots=True, frozen=True)
class WorldEventEnded(StateEvent):
    event_id: str
    name: str
    kind: ClassVar[str] = "world_event_ended"


@dataclass(slots=True, frozen=True)
class InterventionRecorded(StateEvent):
    tool_id: str
    target: str
    kind: ClassVar[str] = "intervention_recorded"


@dataclass(slots=True, frozen=True)
class CreationRecorded(StateEvent):
    creation_id: str
    creation_kind: str
    kind: ClassVar[str] = "creation_recorded"


@dataclass(slots=True, frozen=True)
class LocationDiscovered(StateEvent):
    region_id: str
    kind: ClassVar[str] = "location_discovered"


@dataclass(slots=True, frozen=True)
class LandmarkDiscovered(StateEvent):
    landmark_id: str
    kind: ClassVar[str] = "landmark_discovered"


@dataclass(slots=True, frozen=True)
class EquipmentChanged(StateEvent):
    slot: str
    item_id: str | None
    kind: ClassVar[str] = "equipment_changed"


@dataclass(slots=True, frozen=True)
class ItemAdded(StateEvent):
    instance_id: str
    item_id: str
    quantity: int
    kind: ClassVar[str] = "item_added"


@dataclass(slots=True, frozen=True)
class ItemRemoved(StateEvent):
    instance_id: str
    item_id: str
    quantity: int
    removed_entirely: bool
    kind: ClassVar[str] = "item_removed"


@dataclass(slots=True, frozen=True)
class PlayerExperienceChanged(StateEvent):
    gained: int
    experience: int
    level: int
    levels_gained: int
    kind: ClassVar[str] = "player_experience_changed"


@dataclass(slots=True, frozen=True)
class SkillExperienceChanged(StateEvent):
    skill_id: str
    gained: float
    level: int
    levels_gained: int
    kind: ClassVar[str] = "skill_experience_changed"


@dataclass(slots=True, frozen=True)
class JournalEntryAdded(StateEvent):
    entry_id: str
    title: str
    category: str
    kind: ClassVar[str] = "journal_entry_added"


@dataclass(slots=True, frozen=True)
class AchievementUnlocked(StateEvent):
    achievement_id: str
    name: str
    kind: ClassVar[str] = "achievement_unlocked"


@dataclass(slots=True, frozen=True)
class QuestAdded(StateEvent):
    quest_id: str
    name: str
    kind: ClassVar[str] = "quest_added"


@dataclass(slots=True, frozen=True)
class QuestObjectiveProgressed(StateEvent):
    quest_id: str
    objective_id: str
    current: int
    required: int
    completed: bool
    kind: ClassVar[str] = "quest_objective_progressed"


@dataclass(slots=True, frozen=True)
class QuestCompleted(StateEvent):
    quest_id: str
    kind: ClassVar[str] = "quest_completed"


@dataclass(slots=True, frozen=True)
class QuestFailed(StateEvent):
    quest_id: str
    kind: ClassVar[str] = "quest_failed"


@dataclass(slots=True, frozen=True)
class TimeAdvanced(StateEvent):
    minutes: int
    day: int
    hour: int
    minute: int
    season: str
    year: int
    days_crossed: int
    kind: ClassVar[str] = "time_advanced"


@dataclass(slots=True, frozen=True)
class NpcAdded(StateEvent):
    npc_id: str
    kind: ClassVar[str] = "npc_added"


@dataclass(slots=True, frozen=True)
class NpcUpdated(StateEvent):
    npc_id: str
    fields: Tuple[str, ...]
    kind: ClassVar[str] = "npc_updated"


@dataclass(slots=True, frozen=True)
class NpcMemoryAdded(StateEvent):
    npc_id: str
    memory_type: str
    kind: ClassVar[str] = "npc_memory_added"


@dataclass(slots=True, frozen=True)
class RelationshipChanged(StateEvent):
    npc_id: str
    entity_id: str
    old: int
    new: int
    kind: ClassVar[str] = "relationship_changed"


@dataclass(slots=True, frozen=True)
class ToolUpgraded(StateEvent):
    tool_id: str
    level: int
    kind: ClassVar[str] = "tool_upgraded"
