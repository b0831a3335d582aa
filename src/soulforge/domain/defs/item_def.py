"""Item template structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(slots=True, frozen=True)
class DamageRange:
    min: int
    max: int


@dataclass(slots=True)
class ItemDef:
    """Static item template copied into inventory instances."""

    id: str
    name: str
    description: str
    type: str
    value: int = 0
    rarity: str = "common"
    effect_id: str | None = None
    max_stack_size: int = 1
    healing_amount: int = 0
    damage: DamageRange | None = None
    defense_rating: int = 0
    attribute_requirements: Dict[str, int] = field(default_factory=dict)
    attribute_modifiers: Dict[str, int] = field(default_factory=dict)
    lore_fragment_id: str | None = None
