"""NPC role templates."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple


@dataclass(slots=True, frozen=True)
class ScheduleEntryDef:
    hour: int
    activity: str
    location: str


@dataclass(slots=True)
class NpcRoleDef:
    """Daily routine, goal pool and name pool for an NPC role."""

    id: str
    names: Tuple[str, ...]
    schedule: Tuple[ScheduleEntryDef, ...]
    goals: Dict[str, str] = field(default_factory=dict)
