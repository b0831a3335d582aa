"""Skill tree repository."""
from __future__ import annotations

from typing import Dict

from soulforge.data.errors import DataValidationError
from soulforge.data.repositories.base import RepositoryBase
from soulforge.domain.defs import SkillDef


class SkillsRepository(RepositoryBase[SkillDef]):
    """Loads and validates skill definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("skills.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, SkillDef]:
        skills: Dict[str, SkillDef] = {}
        for raw_id, payload in raw.items():
            context = f"skill '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_allowed_fields(
                data,
                {"name", "description", "category", "max_level", "base_xp_cost"},
                set(),
                context,
            )
            max_level = self._require_int(data["max_level"], f"{context} max_level")
            base_xp_cost = self._require_int(data["base_xp_cost"], f"{context} base_xp_cost")
            if max_level <= 0 or base_xp_cost <= 0:
                raise DataValidationError(f"{context} max_level and base_xp_cost must be positive.")
            skills[raw_id] = SkillDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                description=self._require_str(data["description"], f"{context} description"),
                category=self._require_str(data["category"], f"{context} category"),
                max_level=max_level,
                base_xp_cost=base_xp_cost,
            )
        return skills
