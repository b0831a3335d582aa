"""Regions repository."""
from __future__ import annotations

from typing import Dict

from soulforge.data.errors import DataValidationError
from soulforge.data.repositories.base import RepositoryBase
from soulforge.domain.defs import RegionDef


class RegionsRepository(RepositoryBase[RegionDef]):
    """Loads travel regions with their adjacency and spawn tables."""

    def __init__(self, base_path=None) -> None:
        super().__init__("regions.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, RegionDef]:
        regions: Dict[str, RegionDef] = {}
        for raw_id, payload in raw.items():
            context = f"region '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_allowed_fields(
                data,
                {"name", "description", "threat_level", "neighbors", "spawnable_creatures", "resources"},
                {"initial_population", "dominant_faction"},
                context,
            )
            threat_level = self._require_int(data["threat_level"], f"{context} threat_level")
            if threat_level < 0:
                raise DataValidationError(f"{context} threat_level must be non-negative.")
            neighbors = self._require_str_list(data["neighbors"], f"{context} neighbors")
            if raw_id in neighbors:
                raise DataValidationError(f"{context} cannot neighbor itself.")
            regions[raw_id] = RegionDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                description=self._require_str(data["description"], f"{context} description"),
                threat_level=threat_level,
                neighbors=tuple(neighbors),
                spawnable_creatures=tuple(
                    self._require_str_list(data["spawnable_creatures"], f"{context} spawnable_creatures")
                ),
                resources=tuple(self._require_str_list(data["resources"], f"{context} resources")),
                initial_population=self._require_int(
                    data.get("initial_population", 100), f"{context} initial_population"
                ),
                dominant_faction=self._optional_str(data.get("dominant_faction"), f"{context} dominant_faction"),
            )
        return regions
