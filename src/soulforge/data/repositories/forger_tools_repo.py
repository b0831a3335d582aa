"""Forger tools repository."""
from __future__ import annotations

from typing import Dict

from soulforge.data.errors import DataValidationError
from soulforge.data.repositories.base import RepositoryBase
from soulforge.domain.defs import (
    AnalysisEffect,
    CreationEffect,
    ForgerToolDef,
    InterventionEffect,
    PurificationEffect,
    TemporalEffect,
    ToolCategory,
    ToolEffect,
)


class ForgerToolsRepository(RepositoryBase[ForgerToolDef]):
    """Loads forger tools and builds the effect variant for each category."""

    def __init__(self, base_path=None) -> None:
        super().__init__("forger_tools.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ForgerToolDef]:
        tools: Dict[str, ForgerToolDef] = {}
        for raw_id, payload in raw.items():
            context = f"forger tool '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_allowed_fields(
                data,
                {"name", "description", "category", "power_level", "essence_cost", "effect"},
                set(),
                context,
            )
            category_raw = self._require_str(data["category"], f"{context} category")
            try:
                category = ToolCategory(category_raw)
            except ValueError as exc:
                raise DataValidationError(f"{context} has unknown category '{category_raw}'.") from exc
            essence_cost = self._require_int(data["essence_cost"], f"{context} essence_cost")
            if essence_cost < 0:
                raise DataValidationError(f"{context} essence_cost must be non-negative.")
            tools[raw_id] = ForgerToolDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                description=self._require_str(data["description"], f"{context} description"),
                category=category,
                power_level=self._require_int(data["power_level"], f"{context} power_level"),
                essence_cost=essence_cost,
                effect=self._parse_effect(category, data["effect"], f"{context} effect"),
            )
        return tools

    def _parse_effect(self, category: ToolCategory, value: object, context: str) -> ToolEffect:
        data = self._require_mapping(value, context)
        if category is ToolCategory.ANALYSIS:
            self._assert_allowed_fields(data, set(), set(), context)
            return AnalysisEffect()
        if category is ToolCategory.INTERVENTION:
            self._assert_allowed_fields(data, {"corruption_reduction", "purity_achievement_id"}, set(), context)
            return InterventionEffect(
                corruption_reduction=self._require_float(data["corruption_reduction"], f"{context}.corruption_reduction"),
                purity_achievement_id=self._require_str(
                    data["purity_achievement_id"], f"{context}.purity_achievement_id"
                ),
            )
        if category is ToolCategory.PURIFICATION:
            self._assert_allowed_fields(data, {"corruption_reduction", "experience"}, set(), context)
            return PurificationEffect(
                corruption_reduction=self._require_float(data["corruption_reduction"], f"{context}.corruption_reduction"),
                experience=self._require_int(data["experience"], f"{context}.experience"),
            )
        if category is ToolCategory.CREATION:
            self._assert_allowed_fields(data, {"essence_gain", "achievement_id"}, set(), context)
            return CreationEffect(
                essence_gain=self._require_int(data["essence_gain"], f"{context}.essence_gain"),
                achievement_id=self._require_str(data["achievement_id"], f"{context}.achievement_id"),
            )
        self._assert_allowed_fields(data, {"minutes", "experience"}, set(), context)
        minutes = self._require_int(data["minutes"], f"{context}.minutes")
        if minutes <= 0:
            raise DataValidationError(f"{context}.minutes must be positive.")
        return TemporalEffect(minutes=minutes, experience=self._require_int(data["experience"], f"{context}.experience"))
