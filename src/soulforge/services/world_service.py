"""World simulation: nexus state, corruption drift, seasons and global events."""
from __future__ import annotations

import logging
from typing import List

from soulforge.core.calendar import minutes_since_epoch, next_season
from soulforge.core.rng import RNG
from soulforge.data.repositories import ItemsRepository, NexusStatesRepository, RegionsRepository, WorldEventsRepository
from soulforge.domain.defs import NexusStateDef, WorldEventDef
from soulforge.domain.state import WorldEventState
from soulforge.services.errors import InvariantViolation
from soulforge.services.factories import make_instance_id
from soulforge.services.state_store import StateStore

logger = logging.getLogger(__name__)

CORRUPTED_THRESHOLD = 0.5
UNSTABLE_THRESHOLD = 0.2
NEXUS_DRIFT_CHANCE = 0.01
CORRUPTION_DECAY = 0.001
REGION_CORRUPTION_DECAY = 0.0005
REGION_DISCOVERY_CHANCE = 0.01
BASE_EVENT_CHANCE = 0.005
# Nexus state type -> multiplier applied to the base event chance.
EVENT_CHANCE_MULTIPLIERS = {"unstable": 2.0, "corrupted": 3.0}
STEP_MINUTES = 1
WORLD_EVENT_CATEGORY = "World Event"


def nexus_state_for_corruption(corruption_level: float) -> str:
    if corruption_level > CORRUPTED_THRESHOLD:
        return "corrupted_bleed"
    if corruption_level > UNSTABLE_THRESHOLD:
        return "unstable_resonance"
    return "stable_flux"


class WorldService:
    """Drives the world one step at a time through the store's world mutators."""

    def __init__(
        self,
        store: StateStore,
        *,
        nexus_states_repo: NexusStatesRepository,
        regions_repo: RegionsRepository,
        world_events_repo: WorldEventsRepository,
        items_repo: ItemsRepository,
        rng: RNG,
    ) -> None:
        self._store = store
        self._nexus_repo = nexus_states_repo
        self._regions_repo = regions_repo
        self._events_repo = world_events_repo
        self._items_repo = items_repo
        self._rng = rng

    # ------------------------------------------------------------------ Views
    def nexus_state_info(self) -> NexusStateDef | None:
        nexus_id = self._store.world.nexus_state
        if not self._nexus_repo.has(nexus_id):
            return None
        return self._nexus_repo.get(nexus_id)

    def active_events(self) -> List[WorldEventState]:
        return list(self._store.world.events)

    def corruption_level(self) -> float:
        return self._store.world.corruption_level

    # ------------------------------------------------------------ Simulation
    def simulate_world_step(self) -> None:
        """Advance one minute, then update the nexus, events and regions in that order."""
        self._store.advance_time(STEP_MINUTES)
        self.update_world_state()
        self.expire_events()
        self.check_for_random_events()
        self.update_regions()

    def update_world_state(self) -> str:
        """Recompute the nexus state from corruption, then let corruption decay."""
        world = self._store.world
        new_state = nexus_state_for_corruption(world.corruption_level)
        if self._rng.chance(NEXUS_DRIFT_CHANCE):
            new_state = self._rng.choice([nexus.id for nexus in self._nexus_repo.all()])
        if new_state != world.nexus_state:
            old_state = world.nexus_state
            self._store.set_nexus_state(new_state)
            logger.info("Nexus state changed from %s to %s", old_state, new_state)
            if self._nexus_repo.has(new_state):
                nexus = self._nexus_repo.get(new_state)
                self._store.add_journal_entry(
                    f"Nexus Shift: {nexus.name}",
                    nexus.description,
                    category=WORLD_EVENT_CATEGORY,
                    icon="globe",
                )
        if world.corruption_level > 0:
            self._store.set_corruption_level(world.corruption_level - CORRUPTION_DECAY)
        return self._store.world.nexus_state

    def event_chance(self) -> float:
        nexus = self.nexus_state_info()
        multiplier = EVENT_CHANCE_MULTIPLIERS.get(nexus.type, 1.0) if nexus is not None else 1.0
        return BASE_EVENT_CHANCE * multiplier

    def check_for_random_events(self) -> WorldEventState | None:
        if not self._rng.chance(self.event_chance()):
            return None
        return self.trigger_random_event()

    def trigger_random_event(self, definition_id: str | None = None) -> WorldEventState | None:
        """Start ``definition_id`` (or a random definition) as a running world event."""
        if definition_id is None:
            definitions = self._events_repo.all()
            if not definitions:
                return None
            definition = self._rng.choice(definitions)
        else:
            if not self._events_repo.has(definition_id):
                return None
            definition = self._events_repo.get(definition_id)
        return self._start_event(definition)

    def _start_event(self, definition: WorldEventDef) -> WorldEventState:
        now = minutes_since_epoch(self._store.world.time)
        taken = {event.event_id for event in self._store.world.events}
        event = WorldEventState(
            event_id=make_instance_id("event", self._rng, taken),
            definition_id=definition.id,
            name=definition.name,
            description=definition.description,
            started_at=now,
            ends_at=now + definition.duration_minutes,
            resource_modifier=definition.resource_modifier,
        )
        self._store.add_world_event(event)
        if definition.corruption_increase:
            self.add_corruption(definition.corruption_increase)
        self._store.add_journal_entry(
            f"World Event: {event.name}",
            event.description,
            category=WORLD_EVENT_CATEGORY,
            icon="gem",
        )
        logger.info("World event %s started, ends at minute %d", event.name, event.ends_at)
        return event

    def expire_events(self) -> List[str]:
        """End every event whose game-minute deadline has passed; returns the ended ids."""
        now = minutes_since_epoch(self._store.world.time)
        ended: List[str] = []
        for event in [event for event in self._store.world.events if event.ends_at <= now]:
            if self._store.remove_world_event(event.event_id):
                self._store.add_journal_entry(
                    f"World Event Ended: {event.name}",
                    f'The event "{event.name}" has ended.',
                    category=WORLD_EVENT_CATEGORY,
                    icon="clock",
                )
                logger.info("World event %s ended", event.name)
                ended.append(event.event_id)
        return ended

    def update_regions(self) -> None:
        for region_id, region in list(self._store.world.regions.items()):
            if region.corruption_level > 0:
                self._store.update_region(
                    region_id, corruption_level=region.corruption_level - REGION_CORRUPTION_DECAY
                )
            if self._rng.chance(REGION_DISCOVERY_CHANCE):
                self._discover_resource(region_id)

    def _discover_resource(self, region_id: str) -> None:
        if not self._regions_repo.has(region_id):
            return
        region = self._regions_repo.get(region_id)
        if not region.resources:
            return
        resource = self._rng.choice(region.resources)
        name = self._items_repo.get(resource).name if self._items_repo.has(resource) else resource
        self._store.add_journal_entry(
            "Resource Discovery",
            f"A new deposit of {name} was found in {region.name}!",
            category="Exploration",
            icon="search",
        )

    # --------------------------------------------------------------- Controls
    def change_season(self) -> str:
        time = self._store.world.time.copy()
        time.season = next_season(time.season)
        self._store.update_world(time=time)
        self._store.add_journal_entry(
            f"Season Change: {time.season.capitalize()}",
            f"The season has turned to {time.season}.",
            category=WORLD_EVENT_CATEGORY,
            icon="sun",
        )
        return time.season

    def set_corruption_level(self, level: float) -> float:
        return self._store.set_corruption_level(level)

    def add_corruption(self, amount: float) -> float:
        if amount < 0:
            raise InvariantViolation("Corruption increase must not be negative.")
        return self._store.set_corruption_level(self._store.world.corruption_level + amount)

    def reduce_corruption(self, amount: float) -> float:
        if amount < 0:
            raise InvariantViolation("Corruption reduction must not be negative.")
        return self._store.set_corruption_level(self._store.world.corruption_level - amount)
