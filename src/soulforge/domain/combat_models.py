"""Combat session domain models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from soulforge.core.types import CombatStatus, CombatTurn
from soulforge.domain.defs import DamageRange

COMBAT_ACTIONS: tuple[str, ...] = ("attack", "defend", "special_attack", "analyze_weakness")


@dataclass(slots=True)
class Combatant:
    """One side of a duel. ``defense_boost`` stacks for the whole combat."""

    name: str
    health: int
    max_health: int
    defense: int
    damage: DamageRange
    level: int = 1
    strength: int = 0
    defense_boost: int = 0

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    @property
    def effective_defense(self) -> int:
        return self.defense + self.defense_boost


@dataclass(slots=True)
class CombatSession:
    """Tracks one player-versus-enemy fight until it reaches a terminal status."""

    combat_id: str
    enemy_type: str
    player: Combatant
    enemy: Combatant
    actions: List[str]
    loot_table_id: str | None = None
    turn: CombatTurn = "player"
    status: CombatStatus = "active"
    log: List[str] = field(default_factory=list)

    @property
    def is_over(self) -> bool:
        return self.status != "active"
