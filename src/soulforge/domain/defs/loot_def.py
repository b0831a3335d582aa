"""Loot table definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass(slots=True)
class LootDropDef:
    item_id: str
    chance: float
    min_qty: int = 1
    max_qty: int = 1


@dataclass(slots=True)
class LootTableDef:
    """Independent drop rolls plus a currency range."""

    id: str
    name: str
    drops: List[LootDropDef]
    currency_min: int = 0
    currency_max: int = 0
