"""Nexus states repository."""
from __future__ import annotations

from typing import Dict

from soulforge.data.repositories.base import RepositoryBase
from soulforge.domain.defs import NexusStateDef


class NexusStatesRepository(RepositoryBase[NexusStateDef]):
    def __init__(self, base_path=None) -> None:
        super().__init__("nexus_states.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, NexusStateDef]:
        states: Dict[str, NexusStateDef] = {}
        for raw_id, payload in raw.items():
            context = f"nexus state '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_allowed_fields(
                data,
                {"name", "description", "type"},
                {"stability_modifier"},
                context,
            )
            states[raw_id] = NexusStateDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                description=self._require_str(data["description"], f"{context} description"),
                type=self._require_str(data["type"], f"{context} type"),
                stability_modifier=self._require_float(
                    data.get("stability_modifier", 0.0), f"{context} stability_modifier"
                ),
            )
        return states
