"""Item effect definition primitives."""
from __future__ import annotations

from dataclasses import dataclass

from .item_def import DamageRange


@dataclass(slots=True)
class ItemEffectDef:
    """Effect triggered when an item is used."""

    id: str
    name: str
    description: str
    type: str
    health_recovery_amount: int = 0
    damage_range: DamageRange | None = None
