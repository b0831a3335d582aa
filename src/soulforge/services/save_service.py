"""Serialization helpers for save/load snapshots."""
from __future__ import annotations

import logging
from dataclasses import asdict, fields
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, TypeVar

from soulforge.core.calendar import WorldTime
from soulforge.domain.defs import DamageRange, QuestRewardDef, QuestRewardItemDef, ScheduleEntryDef
from soulforge.domain.state import (
    Achievement,
    Attributes,
    Creation,
    ForgerState,
    GameState,
    Intervention,
    ItemInstance,
    JournalEntry,
    NpcGoal,
    NpcMemory,
    NpcState,
    PlayerState,
    QuestInstance,
    QuestObjective,
    RegionState,
    SkillState,
    WorldEventState,
    WorldState,
)
from soulforge.services.errors import SaveLoadError

logger = logging.getLogger(__name__)

SavePayload = Dict[str, Any]
T = TypeVar("T")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SaveService:
    """Converts a GameState to/from a versioned ``{version, timestamp, name, state}`` payload."""

    SAVE_VERSION = "1.0.0"

    def __init__(self, *, clock: Callable[[], datetime] = _utc_now) -> None:
        self._clock = clock

    def serialize(self, state: GameState, name: str | None = None) -> SavePayload:
        """Return a JSON-serializable snapshot of the whole state."""
        now = self._clock()
        return {
            "version": self.SAVE_VERSION,
            "timestamp": int(now.timestamp() * 1000),
            "name": name or f"Save {now.date().isoformat()}",
            "state": asdict(state),
        }

    def deserialize(self, payload: Mapping[str, Any]) -> GameState:
        """Rebuild a GameState; a version mismatch is logged and loading continues."""
        if not isinstance(payload, Mapping):
            raise SaveLoadError("Save data must be a JSON object.")
        version = payload.get("version")
        state_payload = payload.get("state")
        if not version or not isinstance(state_payload, Mapping):
            raise SaveLoadError("Invalid save file format.")
        if version != self.SAVE_VERSION:
            logger.warning(
                "Save version %s does not match %s; attempting to load anyway", version, self.SAVE_VERSION
            )
        return GameState(
            player=self._coerce_player(state_payload.get("player")),
            world=self._coerce_world(state_payload.get("world")),
            forger=self._coerce_forger(state_payload.get("forger")),
            npcs={
                npc_id: self._coerce_npc(npc, f"state.npcs.{npc_id}")
                for npc_id, npc in self._require_dict(state_payload.get("npcs", {}), "state.npcs").items()
            },
        )

    # ----------------------------------------------------------------- Player
    def _coerce_player(self, value: Any) -> PlayerState:
        data = self._require_dict(value, "state.player")
        skills = self._require_dict(data.get("skills", {}), "state.player.skills")
        equipment = self._require_dict(data.get("equipment", {}), "state.player.equipment")
        return self._construct(
            PlayerState,
            {
                **data,
                "attributes": self._construct(Attributes, data.get("attributes", {}), "state.player.attributes"),
                "skills": {
                    skill_id: self._construct(SkillState, skill, f"state.player.skills.{skill_id}")
                    for skill_id, skill in skills.items()
                },
                "inventory": self._coerce_list(data.get("inventory"), "state.player.inventory", self._coerce_item),
                "equipment": {
                    slot: self._coerce_item(item, f"state.player.equipment.{slot}") for slot, item in equipment.items()
                },
                "journal": self._coerce_list(
                    data.get("journal"),
                    "state.player.journal",
                    lambda entry, ctx: self._construct(JournalEntry, entry, ctx),
                ),
                "achievements": self._coerce_list(
                    data.get("achievements"),
                    "state.player.achievements",
                    lambda entry, ctx: self._construct(Achievement, entry, ctx),
                ),
                "quests": self._coerce_list(data.get("quests"), "state.player.quests", self._coerce_quest),
                "discovered_regions": self._coerce_str_list(
                    data.get("discovered_regions"), "state.player.discovered_regions"
                ),
                "discovered_landmarks": self._coerce_str_list(
                    data.get("discovered_landmarks"), "state.player.discovered_landmarks"
                ),
            },
            "state.player",
        )

    def _coerce_item(self, value: Any, context: str) -> ItemInstance:
        data = self._require_dict(value, context)
        damage = data.get("damage")
        return self._construct(
            ItemInstance,
            {
                **data,
                "damage": self._construct(DamageRange, damage, f"{context}.damage") if damage is not None else None,
            },
            context,
        )

    def _coerce_quest(self, value: Any, context: str) -> QuestInstance:
        data = self._require_dict(value, context)
        rewards = self._require_dict(data.get("rewards", {}), f"{context}.rewards")
        reward_items = tuple(
            self._coerce_list(
                rewards.get("items"),
                f"{context}.rewards.items",
                lambda item, ctx: self._construct(QuestRewardItemDef, item, ctx),
            )
        )
        return self._construct(
            QuestInstance,
            {
                **data,
                "objectives": self._coerce_list(
                    data.get("objectives"),
                    f"{context}.objectives",
                    lambda objective, ctx: self._construct(QuestObjective, objective, ctx),
                ),
                "rewards": self._construct(
                    QuestRewardDef,
                    {
                        **rewards,
                        "items": reward_items,
                        "skill_experience": dict(
                            self._require_dict(rewards.get("skill_experience", {}), f"{context}.rewards.skill_experience")
                        ),
                    },
                    f"{context}.rewards",
                ),
            },
            context,
        )

    # ------------------------------------------------------------------ World
    def _coerce_world(self, value: Any) -> WorldState:
        data = self._require_dict(value, "state.world")
        regions = self._require_dict(data.get("regions", {}), "state.world.regions")
        return self._construct(
            WorldState,
            {
                **data,
                "regions": {
                    region_id: self._coerce_region(region, f"state.world.regions.{region_id}")
                    for region_id, region in regions.items()
                },
                "time": self._construct(WorldTime, data.get("time", {}), "state.world.time"),
                "events": self._coerce_list(
                    data.get("events"),
                    "state.world.events",
                    lambda event, ctx: self._construct(WorldEventState, event, ctx),
                ),
            },
            "state.world",
        )

    def _coerce_region(self, value: Any, context: str) -> RegionState:
        data = self._require_dict(value, context)
        return self._construct(
            RegionState,
            {**data, "events": self._coerce_str_list(data.get("events"), f"{context}.events")},
            context,
        )

    def _coerce_forger(self, value: Any) -> ForgerState:
        if value is None:
            return ForgerState()
        data = self._require_dict(value, "state.forger")
        return self._construct(
            ForgerState,
            {
                **data,
                "tools": self._coerce_str_list(data.get("tools"), "state.forger.tools"),
                "creations": self._coerce_list(
                    data.get("creations"),
                    "state.forger.creations",
                    lambda creation, ctx: self._construct(Creation, creation, ctx),
                ),
                "interventions": self._coerce_list(
                    data.get("interventions"),
                    "state.forger.interventions",
                    lambda intervention, ctx: self._construct(Intervention, intervention, ctx),
                ),
                "tool_upgrades": dict(self._require_dict(data.get("tool_upgrades", {}), "state.forger.tool_upgrades")),
            },
            "state.forger",
        )

    # ------------------------------------------------------------------- NPCs
    def _coerce_npc(self, value: Any, context: str) -> NpcState:
        data = self._require_dict(value, context)
        return self._construct(
            NpcState,
            {
                **data,
                "attributes": self._construct(Attributes, data.get("attributes", {}), f"{context}.attributes"),
                "personality": self._coerce_str_list(data.get("personality"), f"{context}.personality"),
                "traits": self._coerce_str_list(data.get("traits"), f"{context}.traits"),
                "relationships": dict(self._require_dict(data.get("relationships", {}), f"{context}.relationships")),
                "memories": self._coerce_list(
                    data.get("memories"),
                    f"{context}.memories",
                    lambda memory, ctx: self._construct(NpcMemory, memory, ctx),
                ),
                "goals": self._coerce_list(
                    data.get("goals"),
                    f"{context}.goals",
                    lambda goal, ctx: self._construct(NpcGoal, goal, ctx),
                ),
                "schedule": self._coerce_list(
                    data.get("schedule"),
                    f"{context}.schedule",
                    lambda entry, ctx: self._construct(ScheduleEntryDef, entry, ctx),
                ),
            },
            context,
        )

    # ---------------------------------------------------------------- Helpers
    def _construct(self, cls: Callable[..., T], value: Any, context: str) -> T:
        """Build ``cls`` from the known keys of ``value``; unknown keys are ignored."""
        data = self._require_dict(value, context)
        names = {item.name for item in fields(cls)}  # type: ignore[arg-type]
        try:
            return cls(**{key: item for key, item in data.items() if key in names})
        except TypeError as exc:
            raise SaveLoadError(f"{context} is malformed: {exc}") from exc

    def _coerce_list(self, value: Any, context: str, build: Callable[[Any, str], T]) -> List[T]:
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            raise SaveLoadError(f"{context} must be a list.")
        return [build(entry, f"{context}[{index}]") for index, entry in enumerate(value)]

    def _coerce_str_list(self, value: Any, context: str) -> List[str]:
        if value is None:
            return []
        if not isinstance(value, (list, tuple)) or not all(isinstance(entry, str) for entry in value):
            raise SaveLoadError(f"{context} must be a list of strings.")
        return list(value)

    @staticmethod
    def _require_dict(value: Any, context: str) -> Dict[str, Any]:
        if not isinstance(value, dict):
            raise SaveLoadError(f"{context} must be an object.")
        return value
