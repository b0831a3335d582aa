"""Runtime game state aggregate."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from soulforge.core.calendar import WorldTime
from soulforge.core.types import PlayerRole, QuestStatus
from soulforge.domain.defs import DamageRange, QuestRewardDef, ScheduleEntryDef

ATTRIBUTE_NAMES: tuple[str, ...] = (
    "strength",
    "intelligence",
    "charisma",
    "dexterity",
    "constitution",
    "wisdom",
)
DEFAULT_LOCATION_ID = "TheCentralNexus"
DEFAULT_NEXUS_STATE = "stable_flux"
INVENTORY_CAPACITY = 100


@dataclass(slots=True)
class Attributes:
    """The six named base attributes."""

    strength: int = 10
    intelligence: int = 10
    charisma: int = 10
    dexterity: int = 10
    constitution: int = 10
    wisdom: int = 10

    def get(self, name: str) -> int:
        if name not in ATTRIBUTE_NAMES:
            return 0
        return getattr(self, name)

    def to_dict(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in ATTRIBUTE_NAMES}


@dataclass(slots=True)
class SkillState:
    level: int = 0
    experience: float = 0.0
    unlocked: bool = False


@dataclass(slots=True)
class ItemInstance:
    """Template fields copied from the item table plus a unique instance id."""

    instance_id: str
    item_id: str
    name: str
    type: str
    quantity: int = 1
    value: int = 0
    rarity: str = "common"
    description: str = ""
    effect_id: str | None = None
    healing_amount: int = 0
    damage: DamageRange | None = None
    defense_rating: int = 0
    attribute_requirements: Dict[str, int] = field(default_factory=dict)
    attribute_modifiers: Dict[str, int] = field(default_factory=dict)
    lore_fragment_id: str | None = None


@dataclass(slots=True)
class JournalEntry:
    entry_id: str
    title: str
    content: str
    category: str
    icon: str | None = None
    day: int = 1
    hour: int = 0
    minute: int = 0


@dataclass(slots=True)
class Achievement:
    achievement_id: str
    name: str
    description: str = ""
    rarity: str = "common"
    unlocked_day: int = 1


@dataclass(slots=True)
class QuestObjective:
    """Per-instance objective progress. ``completed`` never reverts to False."""

    objective_id: str
    description: str
    objective_type: str
    target: str | None = None
    required_quantity: int = 1
    current_quantity: int = 0
    completed: bool = False


@dataclass(slots=True)
class QuestInstance:
    quest_id: str
    name: str
    description: str
    quest_type: str
    objectives: List[QuestObjective]
    rewards: QuestRewardDef
    status: QuestStatus = "active"
    accepted_day: int = 1

    def all_objectives_completed(self) -> bool:
        return all(objective.completed for objective in self.objectives)

    def find_objective(self, objective_id: str) -> QuestObjective | None:
        for objective in self.objectives:
            if objective.objective_id == objective_id:
                return objective
        return None


@dataclass(slots=True)
class PlayerState:
    player_id: str
    name: str
    role: PlayerRole = "wanderer"
    level: int = 1
    experience: int = 0
    attributes: Attributes = field(default_factory=Attributes)
    skills: Dict[str, SkillState] = field(default_factory=dict)
    inventory: List[ItemInstance] = field(default_factory=list)
    equipment: Dict[str, ItemInstance] = field(default_factory=dict)
    location: str = DEFAULT_LOCATION_ID
    health: int = 100
    max_health: int = 100
    essence: int = 0
    journal: List[JournalEntry] = field(default_factory=list)
    achievements: List[Achievement] = field(default_factory=list)
    quests: List[QuestInstance] = field(default_factory=list)
    discovered_regions: List[str] = field(default_factory=list)
    discovered_landmarks: List[str] = field(default_factory=list)

    def find_item(self, instance_id: str) -> ItemInstance | None:
        for item in self.inventory:
            if item.instance_id == instance_id:
                return item
        return None

    def find_quest(self, quest_id: str, status: QuestStatus | None = "active") -> QuestInstance | None:
        for quest in self.quests:
            if quest.quest_id == quest_id and (status is None or quest.status == status):
                return quest
        return None


@dataclass(slots=True)
class RegionState:
    region_id: str
    name: str
    population: int = 100
    corruption_level: float = 0.0
    events: List[str] = field(default_factory=list)


@dataclass(slots=True)
class WorldEventState:
    """A running world event; times are minutes since the calendar epoch."""

    event_id: str
    definition_id: str
    name: str
    description: str
    started_at: int
    ends_at: int
    resource_modifier: float = 0.0


@dataclass(slots=True)
class WorldState:
    regions: Dict[str, RegionState] = field(default_factory=dict)
    time: WorldTime = field(default_factory=WorldTime)
    events: List[WorldEventState] = field(default_factory=list)
    nexus_state: str = DEFAULT_NEXUS_STATE
    corruption_level: float = 0.0


@dataclass(slots=True)
class Intervention:
    tool_id: str
    tool_name: str
    target: str
    message: str
    day: int = 1


@dataclass(slots=True)
class Creation:
    creation_id: str
    kind: str
    name: str
    region_id: str | None = None
    day: int = 1


@dataclass(slots=True)
class ForgerState:
    """Forger-only pool and history; essence here is separate from player essence."""

    essence: int = 0
    tools: List[str] = field(default_factory=list)
    creations: List[Creation] = field(default_factory=list)
    interventions: List[Intervention] = field(default_factory=list)
    tool_upgrades: Dict[str, int] = field(default_factory=dict)


@dataclass(slots=True)
class NpcGoal:
    goal_id: str
    description: str
    progress: int = 0
    completed: bool = False


@dataclass(slots=True)
class NpcMemory:
    memory_type: str
    content: str
    day: int = 1
    hour: int = 0


@dataclass(slots=True)
class NpcState:
    npc_id: str
    name: str
    role: str
    settlement_id: str
    attributes: Attributes = field(default_factory=Attributes)
    personality: List[str] = field(default_factory=list)
    traits: List[str] = field(default_factory=list)
    mood: str = "neutral"
    relationships: Dict[str, int] = field(default_factory=dict)
    memories: List[NpcMemory] = field(default_factory=list)
    goals: List[NpcGoal] = field(default_factory=list)
    schedule: List[ScheduleEntryDef] = field(default_factory=list)
    current_activity: str | None = None
    current_location: str | None = None


@dataclass
class GameState:
    """Single authoritative state for one session."""

    player: PlayerState
    world: WorldState = field(default_factory=WorldState)
    forger: ForgerState = field(default_factory=ForgerState)
    npcs: Dict[str, NpcState] = field(default_factory=dict)
