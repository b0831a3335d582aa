"""Crafting recipe structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(slots=True)
class RecipeIngredientDef:
    item_id: str
    quantity: int


@dataclass(slots=True)
class SkillRequirementDef:
    skill_id: str
    level: int


@dataclass(slots=True)
class RecipeDef:
    """Inputs, output and costs of a single craft."""

    id: str
    name: str
    description: str
    ingredients: Tuple[RecipeIngredientDef, ...]
    output_item_id: str
    output_quantity: int = 1
    required_level: int = 1
    required_skills: Tuple[SkillRequirementDef, ...] = ()
    time_required: int = 0
    tool_required: str | None = None
    experience: int = 0
