"""Global world event definitions."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class WorldEventDef:
    id: str
    name: str
    description: str
    type: str
    duration_minutes: int
    resource_modifier: float = 0.0
    corruption_increase: float = 0.0
