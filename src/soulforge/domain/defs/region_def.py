"""Region, nexus and landmark definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(slots=True)
class RegionDef:
    """A travel destination with its threat profile and adjacency."""

    id: str
    name: str
    description: str
    threat_level: int
    neighbors: Tuple[str, ...]
    spawnable_creatures: Tuple[str, ...]
    resources: Tuple[str, ...]
    initial_population: int = 100
    dominant_faction: str | None = None


@dataclass(slots=True)
class NexusStateDef:
    id: str
    name: str
    description: str
    type: str
    stability_modifier: float = 0.0


@dataclass(slots=True)
class LandmarkDef:
    id: str
    name: str
    description: str
    type: str
    region_id: str
    historical_lore: str = ""
