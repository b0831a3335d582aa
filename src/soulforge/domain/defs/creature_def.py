"""Creature template structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(slots=True)
class CreatureDef:
    """Base attributes a combat enemy is scaled from."""

    id: str
    name: str
    description: str
    base_attributes: Dict[str, int] = field(default_factory=dict)
    loot_table_id: str | None = None
