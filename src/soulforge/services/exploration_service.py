"""Travel, random encounters, landmarks and resource gathering."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List

from soulforge.core.calendar import is_night
from soulforge.core.rng import RNG
from soulforge.data.repositories import CreaturesRepository, LandmarksRepository, RegionsRepository
from soulforge.domain.combat_models import CombatSession
from soulforge.domain.defs import LandmarkDef, RegionDef
from soulforge.services.combat_service import CombatService, FLEE_CHANCE
from soulforge.services.factories import make_instance_id
from soulforge.services.inventory_service import InventoryService
from soulforge.services.quest_service import QuestService
from soulforge.services.results import OperationResult
from soulforge.services.state_store import StateStore

TRAVEL_MINUTES = 30
LANDMARK_MINUTES = 60
GATHER_MINUTES = 30
THREAT_ENCOUNTER_FACTOR = 0.1
NIGHT_ENCOUNTER_MULTIPLIER = 1.5
OBSERVE_SUCCESS_CHANCE = 0.5
OBSERVE_AMBUSH_CHANCE = 0.5
OBSERVE_XP_MIN = 5
OBSERVE_XP_MAX = 14
ARTIFACT_ITEM_ID = "ancient_artifact"
ARTIFACT_FIND_CHANCE = 0.3
SURVIVAL_SKILL_ID = "wilderness_survival"
ENCOUNTER_OPTIONS: tuple[str, ...] = ("fight", "flee", "observe")


@dataclass(slots=True)
class Encounter:
    encounter_id: str
    creature_id: str
    creature_name: str
    region_id: str
    description: str
    options: tuple[str, ...] = ENCOUNTER_OPTIONS


@dataclass(slots=True)
class TravelOutcome:
    region_id: str
    encounter: Encounter | None = None


@dataclass(slots=True)
class EncounterOutcome:
    """``action`` is one of start_combat, flee_success, observation_success, observation_fail."""

    action: str
    combat: CombatSession | None = None
    experience: int = 0


@dataclass(slots=True)
class LandmarkOutcome:
    landmark: LandmarkDef
    items_found: List[str] = field(default_factory=list)


@dataclass(slots=True)
class GatherOutcome:
    item_id: str
    quantity: int


def encounter_chance(threat_level: int, hour: int) -> float:
    multiplier = NIGHT_ENCOUNTER_MULTIPLIER if is_night(hour) else 1.0
    return threat_level * THREAT_ENCOUNTER_FACTOR * multiplier


class ExplorationService:
    def __init__(
        self,
        store: StateStore,
        *,
        regions_repo: RegionsRepository,
        landmarks_repo: LandmarksRepository,
        creatures_repo: CreaturesRepository,
        combat_service: CombatService,
        inventory_service: InventoryService,
        rng: RNG,
        quest_service: QuestService | None = None,
    ) -> None:
        self._store = store
        self._regions_repo = regions_repo
        self._landmarks_repo = landmarks_repo
        self._creatures_repo = creatures_repo
        self._combat = combat_service
        self._inventory = inventory_service
        self._rng = rng
        self._quest_service = quest_service
        self._encounters: Dict[str, Encounter] = {}

    # ------------------------------------------------------------------ Views
    def current_region(self) -> RegionDef:
        return self._regions_repo.get(self._store.player.location)

    def nearby_regions(self) -> List[RegionDef]:
        region = self.current_region()
        return [self._regions_repo.get(region_id) for region_id in region.neighbors if self._regions_repo.has(region_id)]

    def landmarks_in_region(self, region_id: str) -> List[LandmarkDef]:
        return self._landmarks_repo.in_region(region_id)

    def discovered_regions(self) -> List[RegionDef]:
        return [
            self._regions_repo.get(region_id)
            for region_id in self._store.player.discovered_regions
            if self._regions_repo.has(region_id)
        ]

    def is_landmark_discovered(self, landmark_id: str) -> bool:
        return landmark_id in self._store.player.discovered_landmarks

    def get_encounter(self, encounter_id: str) -> Encounter | None:
        return self._encounters.get(encounter_id)

    # ----------------------------------------------------------------- Travel
    def travel_to_region(self, region_id: str) -> OperationResult[TravelOutcome]:
        """Move to a neighbouring region, spend travel time, then roll for an encounter."""
        if not self._regions_repo.has(region_id):
            return OperationResult.not_found("Region not found.", "region_not_found")
        current = self.current_region()
        if region_id == current.id:
            return OperationResult.precondition_failed("You are already in that region.", "region_not_adjacent")
        if region_id not in current.neighbors:
            return OperationResult.precondition_failed(
                "That region cannot be reached from here.", "region_not_adjacent"
            )

        destination = self._regions_repo.get(region_id)
        # Leaving a region abandons any encounter still waiting on a choice.
        self._encounters.clear()
        self._store.set_location(region_id)
        self._store.mark_discovered_region(region_id)
        self._store.advance_time(TRAVEL_MINUTES)
        encounter = self.check_for_encounter(region_id)
        if self._quest_service is not None:
            self._quest_service.track_quest_progress("location_visited", {"location_id": region_id})
        return OperationResult.ok(
            f"You travel to {destination.name}.",
            TravelOutcome(region_id=region_id, encounter=encounter),
        )

    def check_for_encounter(self, region_id: str) -> Encounter | None:
        region = self._regions_repo.get(region_id)
        chance = encounter_chance(region.threat_level, self._store.world.time.hour)
        if self._rng.random() >= chance:
            return None
        return self._generate_encounter(region)

    def _generate_encounter(self, region: RegionDef) -> Encounter | None:
        if not region.spawnable_creatures:
            return None
        creature_id = self._rng.choice(region.spawnable_creatures)
        if not self._creatures_repo.has(creature_id):
            return None
        creature = self._creatures_repo.get(creature_id)
        encounter = Encounter(
            encounter_id=make_instance_id("encounter", self._rng, self._encounters),
            creature_id=creature_id,
            creature_name=creature.name,
            region_id=region.id,
            description=f"You come across a {creature.name} in {region.name}.",
        )
        self._encounters[encounter.encounter_id] = encounter
        return encounter

    def handle_encounter_choice(self, encounter_id: str, choice: str) -> OperationResult[EncounterOutcome]:
        encounter = self._encounters.get(encounter_id)
        if encounter is None:
            return OperationResult.not_found("Encounter not found.", "encounter_not_found")
        if choice not in encounter.options:
            return OperationResult.precondition_failed("Invalid choice.", "invalid_choice")
        del self._encounters[encounter_id]
        name = encounter.creature_name

        if choice == "fight":
            return self._start_fight(encounter, f"Combat begins against {name}!")
        if choice == "flee":
            if self._rng.random() < FLEE_CHANCE:
                return OperationResult.ok(f"You slipped away from the {name}!", EncounterOutcome(action="flee_success"))
            return self._start_fight(encounter, f"Failed to flee! The {name} attacks!")

        if self._rng.random() < OBSERVE_SUCCESS_CHANCE:
            experience = self._rng.randint(OBSERVE_XP_MIN, OBSERVE_XP_MAX)
            self._store.add_player_experience(experience)
            return OperationResult.ok(
                f"You watch the {name} from afar and learn its habits. Gained {experience} EXP.",
                EncounterOutcome(action="observation_success", experience=experience),
            )
        message = f"You try to observe the {name}, but it notices you!"
        if self._rng.random() < OBSERVE_AMBUSH_CHANCE:
            return self._start_fight(encounter, f"{message} Combat begins!")
        return OperationResult.ok(message, EncounterOutcome(action="observation_fail"))

    def _start_fight(self, encounter: Encounter, message: str) -> OperationResult[EncounterOutcome]:
        started = self._combat.start_combat(encounter.creature_id)
        if not started.success:
            return OperationResult.not_found(started.message, started.reason or "creature_not_found")
        return OperationResult.ok(message, EncounterOutcome(action="start_combat", combat=started.payload))

    # -------------------------------------------------------------- Landmarks
    def explore_landmark(self, landmark_id: str) -> OperationResult[LandmarkOutcome]:
        try:
            landmark = self._landmarks_repo.get(landmark_id)
        except KeyError:
            return OperationResult.not_found("Landmark not found.", "landmark_not_found")
        if landmark.region_id != self._store.player.location:
            return OperationResult.precondition_failed("That landmark is not in this region.", "wrong_region")

        self._store.mark_discovered_landmark(landmark_id)
        self._store.add_journal_entry(
            f"Explored: {landmark.name}",
            landmark.description,
            category="Exploration",
            icon="landmark",
        )
        outcome = LandmarkOutcome(landmark=landmark)
        if self._rng.random() < ARTIFACT_FIND_CHANCE:
            added = self._inventory.add_item(ARTIFACT_ITEM_ID, 1)
            if added.success:
                outcome.items_found.append(ARTIFACT_ITEM_ID)
                if self._quest_service is not None:
                    self._quest_service.track_quest_progress("item_found", {"item_id": ARTIFACT_ITEM_ID})
        self._store.advance_time(LANDMARK_MINUTES)
        return OperationResult.ok(f"You explore {landmark.name}. {landmark.historical_lore}".strip(), outcome)

    def gather_resources(self) -> OperationResult[GatherOutcome]:
        """Collect 1-3 units of a random local resource, boosted 10% per survival level."""
        region = self.current_region()
        if not region.resources:
            return OperationResult.precondition_failed("There is nothing to gather here.", "no_resources")
        if self._inventory.is_inventory_full():
            return OperationResult.precondition_failed("Inventory is full.", "inventory_full")

        resource = self._rng.choice(region.resources)
        base_quantity = self._rng.randint(1, 3)
        skill = self._store.player.skills.get(SURVIVAL_SKILL_ID)
        modifier = 1.0 + (skill.level * 0.1 if skill is not None else 0.0)
        quantity = max(1, math.floor(base_quantity * modifier))

        added = self._inventory.add_item(resource, quantity)
        if not added.success or added.payload is None:
            return OperationResult.not_found(added.message, added.reason or "item_not_found")
        self._store.advance_time(GATHER_MINUTES)
        return OperationResult.ok(
            f"You gathered {quantity} {added.payload.name}.",
            GatherOutcome(item_id=resource, quantity=quantity),
        )
