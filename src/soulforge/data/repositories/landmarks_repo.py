"""Landmarks repository."""
from __future__ import annotations

from typing import Dict, List

from soulforge.data.repositories.base import RepositoryBase
from soulforge.domain.defs import LandmarkDef


class LandmarksRepository(RepositoryBase[LandmarkDef]):
    """Loads named sites that can be explored within a region."""

    def __init__(self, base_path=None) -> None:
        super().__init__("landmarks.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, LandmarkDef]:
        landmarks: Dict[str, LandmarkDef] = {}
        for raw_id, payload in raw.items():
            context = f"landmark '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_allowed_fields(
                data,
                {"name", "description", "type", "region_id"},
                {"historical_lore"},
                context,
            )
            landmarks[raw_id] = LandmarkDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                description=self._require_str(data["description"], f"{context} description"),
                type=self._require_str(data["type"], f"{context} type"),
                region_id=self._require_str(data["region_id"], f"{context} region_id"),
                historical_lore=self._require_str(data.get("historical_lore", ""), f"{context} historical_lore"),
            )
        return landmarks

    def in_region(self, region_id: str) -> List[LandmarkDef]:
        return [landmark for landmark in self.all() if landmark.region_id == region_id]
