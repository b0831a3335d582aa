"""Loot rolls against a loot table."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from soulforge.core.rng import RNG
from soulforge.domain.defs import LootTableDef


@dataclass(slots=True)
class LootRoll:
    items: List[Tuple[str, int]] = field(default_factory=list)
    currency: int = 0


def roll_loot(table: LootTableDef, rng: RNG) -> LootRoll:
    """Each drop rolls its own chance and quantity; currency is one further roll."""
    roll = LootRoll()
    for drop in table.drops:
        if rng.random() < drop.chance:
            quantity = rng.roll_range(drop.min_qty, drop.max_qty)
            if quantity > 0:
                roll.items.append((drop.item_id, quantity))
    if table.currency_max > 0:
        roll.currency = max(0, rng.roll_range(table.currency_min, table.currency_max))
    return roll
