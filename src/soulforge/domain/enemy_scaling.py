"""Enemy stat scaling from creature templates."""
from __future__ import annotations

import math
from dataclasses import dataclass

from soulforge.core.rng import RNG
from soulforge.domain.defs import CreatureDef, DamageRange

# Every stat is multiplied by enemy_level / base strength, so templates with
# high strength produce weaker enemies at the same level.
HEALTH_PER_CONSTITUTION = 5
DEFENSE_FACTOR = 0.2
DAMAGE_MIN_FACTOR = 0.3
DAMAGE_MAX_FACTOR = 0.6


@dataclass(slots=True)
class EnemyStats:
    level: int
    max_health: int
    strength: int
    dexterity: int
    defense: int
    damage: DamageRange


def roll_enemy_level(player_level: int, rng: RNG) -> int:
    return max(1, player_level + rng.randint(-1, 1))


def scale_enemy_stats(creature: CreatureDef, *, enemy_level: int) -> EnemyStats:
    attrs = creature.base_attributes
    strength = attrs.get("strength", 1) or 1
    level_scale = enemy_level / strength
    # A freshly spawned enemy always starts alive.
    max_health = max(1, math.floor(attrs.get("constitution", 0) * level_scale * HEALTH_PER_CONSTITUTION))
    return EnemyStats(
        level=enemy_level,
        max_health=max_health,
        strength=math.floor(strength * level_scale),
        dexterity=math.floor(attrs.get("dexterity", 0) * level_scale),
        defense=math.floor((strength + attrs.get("dexterity", 0)) * level_scale * DEFENSE_FACTOR),
        damage=DamageRange(
            min=math.floor(strength * level_scale * DAMAGE_MIN_FACTOR),
            max=math.floor(strength * level_scale * DAMAGE_MAX_FACTOR),
        ),
    )
