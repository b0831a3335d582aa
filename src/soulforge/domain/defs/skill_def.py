"""Skill tree definition structures."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class SkillDef:
    """Describes one skill of the player skill tree."""

    id: str
    name: str
    description: str
    category: str
    max_level: int
    base_xp_cost: int
