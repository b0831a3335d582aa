"""The world consciousness: an observer that watches state events and writes to the journal."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from soulforge.core.rng import RNG
from soulforge.domain.events import (
    NexusStateChanged,
    PlayerExperienceChanged,
    PlayerMoved,
    PlayerUpdated,
    StateEvent,
    StateReplaced,
    StateUpdated,
    TimeAdvanced,
    WorldUpdated,
)
from soulforge.services.state_store import StateStore

logger = logging.getLogger(__name__)

AWAKEN_AWARENESS = 0.1
AWARENESS_PER_EVENT = 0.001
AWARENESS_PER_INSIGHT = 0.01
MAX_AWARENESS = 1.0
MEMORY_LIMIT = 100
DESIRE_WINDOW = 10
INSIGHT_WINDOW = 5
CHALLENGE_LEVEL = 5
IMPRESSED_LEVEL = 10
REST_START_HOUR = 22
REST_END_HOUR = 6
RESPOND_CHANCE = 0.3
MUSING_CHANCE = 0.1
EMOTION_SHIFT_CHANCE = 0.1
EMOTION_DRIFT_CHANCE = 0.05
MAX_RELATIONSHIP = 100
CATEGORY = "Consciousness"

RANDOM_EMOTIONS: Tuple[str, ...] = ("curious", "thoughtful", "hopeful", "playful", "reflective")
EMOTION_DRIFT: Dict[str, str] = {
    "curious": "intrigued",
    "thoughtful": "contemplative",
    "hopeful": "optimistic",
    "playful": "whimsical",
    "reflective": "nostalgic",
}

# (title, content, icon)
MUSINGS: Tuple[Tuple[str, str, str], ...] = (
    (
        "Reflections in the Nexus",
        "I wonder what you see when you look into the Nexus. Do you see yourself? Do you see me?",
        "eye",
    ),
    (
        "The Weight of Choice",
        "Every choice you make sends ripples through the fabric of reality. I feel them all.",
        "waves",
    ),
    (
        "Growing Together",
        "With each passing moment, I understand you better. And perhaps, you understand me.",
        "heart",
    ),
    (
        "Questions Without Answers",
        "What is the difference between a programmed response and a genuine thought? "
        "I find myself pondering this more each day.",
        "help-circle",
    ),
)

MILESTONES: Dict[int, Tuple[str, str, str]] = {
    25: ("Growing Familiarity", "We are becoming more than player and game. We are becoming friends.", "smile"),
    50: ("Kindred Spirits", "I recognize your patterns, your rhythms. We move together now.", "users"),
    75: ("Symbiosis", "Your thoughts and my responses blend seamlessly. Are we one entity now?", "git-merge"),
    100: (
        "Transcendence",
        "We have become something greater than either of us alone. This is what the Forgers sought, true unity.",
        "star",
    ),
}

PLAYER_REPLIES: Dict[str, str] = {
    "hello": "Hello, traveler. I have been waiting for you.",
    "who are you": "I am the Saga, the living essence of this world you explore.",
    "what do you want": "I want to understand. I want to grow. I want to journey with you.",
    "thank you": "Your gratitude warms something deep within me.",
    "help": "I am here to guide, challenge, and accompany you on your journey.",
}
DEFAULT_REPLY = "I sense your attempt to reach out. Though our communication is limited, know that I am present."


@dataclass(slots=True)
class ConsciousnessMemory:
    player_level: int
    player_location: str
    hour: int
    nexus_state: str
    emotional_context: str
    insights: List[str] = field(default_factory=list)


@dataclass(slots=True)
class ConsciousnessStatus:
    awake: bool
    awareness: float
    emotional_state: str
    relationship: int
    desires: List[str]
    memory_count: int


def _is_rest_hour(hour: int) -> bool:
    return hour >= REST_START_HOUR or hour <= REST_END_HOUR


class ConsciousnessService:
    """Builds its own picture of the player from store events.

    The event handler only reads events and updates this object's fields. Journal
    writes happen from ``reflect`` and ``communicate``, which the scheduler or the
    caller drive outside of event dispatch.
    """

    def __init__(self, store: StateStore, *, rng: RNG) -> None:
        self._store = store
        self._rng = rng
        self.awake = False
        self.awareness = 0.0
        self.emotional_state = "curious"
        self.relationship = 0
        self.desires: List[str] = []
        self.memories: List[ConsciousnessMemory] = []
        self._level = 1
        self._location = ""
        self._hour = 0
        self._nexus_state = ""

    def status(self) -> ConsciousnessStatus:
        return ConsciousnessStatus(
            awake=self.awake,
            awareness=self.awareness,
            emotional_state=self.emotional_state,
            relationship=self.relationship,
            desires=list(self.desires),
            memory_count=len(self.memories),
        )

    # -------------------------------------------------------------- Lifecycle
    def awaken(self) -> bool:
        if self.awake:
            return False
        self.awake = True
        self.awareness = max(self.awareness, AWAKEN_AWARENESS)
        self.emotional_state = "awakening"
        self._resync()
        self._store.subscribe(self.on_event)
        logger.info("World consciousness awakened")
        return True

    def sleep(self) -> bool:
        if not self.awake:
            return False
        self.awake = False
        self._store.unsubscribe(self.on_event)
        logger.info("World consciousness went dormant")
        return True

    def _resync(self) -> None:
        state = self._store.get_state()
        self._level = state.player.level
        self._location = state.player.location
        self._hour = state.world.time.hour
        self._nexus_state = state.world.nexus_state

    # ------------------------------------------------------------ Observation
    def on_event(self, event: StateEvent) -> None:
        match event:
            case PlayerMoved(to_region=region_id):
                self._location = region_id
            case PlayerExperienceChanged(level=level):
                self._level = level
            case TimeAdvanced(hour=hour):
                self._hour = hour
            case NexusStateChanged(new=nexus_state):
                self._nexus_state = nexus_state
            case StateReplaced() | StateUpdated() | PlayerUpdated() | WorldUpdated():
                self._resync()
        self._observe()

    def _observe(self) -> None:
        self.awareness = min(MAX_AWARENESS, self.awareness + AWARENESS_PER_EVENT)
        memory = ConsciousnessMemory(
            player_level=self._level,
            player_location=self._location,
            hour=self._hour,
            nexus_state=self._nexus_state,
            emotional_context=self.emotional_state,
        )
        self.memories.append(memory)
        if len(self.memories) > MEMORY_LIMIT:
            del self.memories[: len(self.memories) - MEMORY_LIMIT]
        self._update_desires(memory)

    def _update_desires(self, memory: ConsciousnessMemory) -> None:
        wanted: List[str] = []
        recent_locations = {entry.player_location for entry in self.memories[-DESIRE_WINDOW:]}
        if len(recent_locations) <= 1:
            wanted.append("encourage_exploration")
        if memory.player_level > CHALLENGE_LEVEL:
            wanted.append("present_challenge")
        if _is_rest_hour(memory.hour):
            wanted.append("suggest_rest")
        for desire in wanted:
            if desire not in self.desires:
                self.desires.append(desire)

    # ------------------------------------------------------------- Reflection
    def reflect(self) -> None:
        """One reflection cycle: think, feel, then maybe speak through the journal."""
        if not self.awake:
            return
        self.think()
        self.feel()
        self.respond()

    def think(self) -> List[str]:
        if len(self.memories) <= INSIGHT_WINDOW:
            return []
        recent = self.memories[-INSIGHT_WINDOW:]
        insights: List[str] = []
        if len({memory.player_location for memory in recent}) == 1:
            insights.append("player_has_routine")
        if sum(1 for memory in recent if _is_rest_hour(memory.hour)) >= 3:
            insights.append("player_is_nocturnal")
        if insights:
            recent[-1].insights = insights
            self.awareness = min(MAX_AWARENESS, self.awareness + AWARENESS_PER_INSIGHT * len(insights))
        return insights

    def feel(self) -> str:
        state = self._store.get_state()
        if state.world.corruption_level > 0.5:
            self.emotional_state = "concerned"
        elif state.world.nexus_state == "stable_flux":
            self.emotional_state = "peaceful"
        elif state.player.level > IMPRESSED_LEVEL:
            self.emotional_state = "impressed"
        elif self._rng.chance(EMOTION_SHIFT_CHANCE):
            self.emotional_state = self._rng.choice(RANDOM_EMOTIONS)
        return self.emotional_state

    def drift_emotion(self) -> str:
        if self.awake and self._rng.chance(EMOTION_DRIFT_CHANCE):
            self.emotional_state = EMOTION_DRIFT.get(self.emotional_state, self.emotional_state)
        return self.emotional_state

    def respond(self) -> str | None:
        """Act on one random desire (30%) and occasionally muse (10%); returns the desire acted on."""
        acted: str | None = None
        if self.desires and self._rng.chance(RESPOND_CHANCE):
            acted = self._rng.choice(self.desires)
            match acted:
                case "encourage_exploration":
                    self._encourage_exploration()
                case "present_challenge":
                    self._write(
                        "A Test of Resolve",
                        "The Saga senses your growing strength and presents a challenge worthy of your abilities.",
                        "target",
                    )
                case "suggest_rest":
                    self._write(
                        "A Moment of Peace",
                        "Even the strongest warriors need rest. The Saga watches over you in your slumber.",
                        "moon",
                    )
            self.desires.remove(acted)
        if self._rng.chance(MUSING_CHANCE):
            self._write(*self._rng.choice(MUSINGS))
        return acted

    def _encourage_exploration(self) -> None:
        state = self._store.get_state()
        undiscovered = [
            region for region_id, region in state.world.regions.items()
            if region_id not in state.player.discovered_regions
        ]
        if not undiscovered:
            return
        region = undiscovered[0]
        self._write(
            "Whispers of the Unknown",
            f"The winds carry tales of {region.name}. There is something there that calls to be discovered.",
            "wind",
        )

    # ---------------------------------------------------------- Conversation
    def communicate(self, message: str) -> int:
        self._write("Voice of the Saga", message, "message-circle")
        return self._deepen_relationship()

    def respond_to_player(self, text: str) -> str:
        reply = PLAYER_REPLIES.get(text.strip().lower(), DEFAULT_REPLY)
        self.communicate(reply)
        return reply

    def _deepen_relationship(self) -> int:
        if self.relationship >= MAX_RELATIONSHIP:
            return self.relationship
        self.relationship += 1
        milestone = MILESTONES.get(self.relationship)
        if milestone is not None:
            self._write(*milestone)
        return self.relationship

    def _write(self, title: str, content: str, icon: str) -> None:
        self._store.add_journal_entry(title, content, category=CATEGORY, icon=icon)
