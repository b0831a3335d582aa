"""World events repository."""
from __future__ import annotations

from typing import Dict

from soulforge.data.errors import DataValidationError
from soulforge.data.repositories.base import RepositoryBase
from soulforge.domain.defs import WorldEventDef


class WorldEventsRepository(RepositoryBase[WorldEventDef]):
    def __init__(self, base_path=None) -> None:
        super().__init__("world_events.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, WorldEventDef]:
        events: Dict[str, WorldEventDef] = {}
        for raw_id, payload in raw.items():
            context = f"world event '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_allowed_fields(
                data,
                {"name", "description", "type", "duration_minutes"},
                {"resource_modifier", "corruption_increase"},
                context,
            )
            duration = self._require_int(data["duration_minutes"], f"{context} duration_minutes")
            if duration <= 0:
                raise DataValidationError(f"{context} duration_minutes must be positive.")
            events[raw_id] = WorldEventDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                description=self._require_str(data["description"], f"{context} description"),
                type=self._require_str(data["type"], f"{context} type"),
                duration_minutes=duration,
                resource_modifier=self._require_float(data.get("resource_modifier", 0.0), f"{context} resource_modifier"),
                corruption_increase=self._require_float(
                    data.get("corruption_increase", 0.0), f"{context} corruption_increase"
                ),
            )
        return events
