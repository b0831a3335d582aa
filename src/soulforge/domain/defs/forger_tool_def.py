"""Forger tool definitions as explicit per-category variants."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class ToolCategory(str, Enum):
    ANALYSIS = "analysis"
    INTERVENTION = "intervention"
    PURIFICATION = "purification"
    CREATION = "creation"
    TEMPORAL = "temporal"


@dataclass(slots=True, frozen=True)
class AnalysisEffect:
    """Reports on the nexus or the current region; mutates nothing."""


@dataclass(slots=True, frozen=True)
class InterventionEffect:
    corruption_reduction: float
    purity_achievement_id: str


@dataclass(slots=True, frozen=True)
class PurificationEffect:
    corruption_reduction: float
    experience: int


@dataclass(slots=True, frozen=True)
class CreationEffect:
    essence_gain: int
    achievement_id: str


@dataclass(slots=True, frozen=True)
class TemporalEffect:
    minutes: int
    experience: int


ToolEffect = Union[AnalysisEffect, InterventionEffect, PurificationEffect, CreationEffect, TemporalEffect]


@dataclass(slots=True)
class ForgerToolDef:
    id: str
    name: str
    description: str
    category: ToolCategory
    power_level: int
    essence_cost: int
    effect: ToolEffect
