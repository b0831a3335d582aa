"""Creature templates repository."""
from __future__ import annotations

from typing import Dict

from soulforge.data.errors import DataValidationError
from soulforge.data.repositories.base import RepositoryBase
from soulforge.domain.defs import CreatureDef


class CreaturesRepository(RepositoryBase[CreatureDef]):
    """Loads creature templates enemies are scaled from."""

    def __init__(self, base_path=None) -> None:
        super().__init__("creatures.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, CreatureDef]:
        creatures: Dict[str, CreatureDef] = {}
        for raw_id, payload in raw.items():
            context = f"creature '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_allowed_fields(
                data,
                {"name", "description", "base_attributes"},
                {"loot_table_id"},
                context,
            )
            attributes = self._require_int_mapping(data["base_attributes"], f"{context} base_attributes")
            if attributes.get("strength", 0) <= 0:
                raise DataValidationError(f"{context} base strength must be positive.")
            creatures[raw_id] = CreatureDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                description=self._require_str(data["description"], f"{context} description"),
                base_attributes=attributes,
                loot_table_id=self._optional_str(data.get("loot_table_id"), f"{context} loot_table_id"),
            )
        return creatures
