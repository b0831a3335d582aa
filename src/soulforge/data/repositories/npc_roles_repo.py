"""NPC roles repository."""
from __future__ import annotations

from typing import Dict, List

from soulforge.data.errors import DataValidationError
from soulforge.data.repositories.base import RepositoryBase
from soulforge.domain.defs import NpcRoleDef, ScheduleEntryDef


class NpcRolesRepository(RepositoryBase[NpcRoleDef]):
    """Loads NPC role templates: surname pool, daily schedule and goal pool."""

    def __init__(self, base_path=None) -> None:
        super().__init__("npc_roles.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, NpcRoleDef]:
        roles: Dict[str, NpcRoleDef] = {}
        for raw_id, payload in raw.items():
            context = f"npc role '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_allowed_fields(data, {"names", "schedule", "goals"}, set(), context)
            names = self._require_str_list(data["names"], f"{context} names")
            if not names:
                raise DataValidationError(f"{context} must list at least one name.")
            goals_map = self._require_mapping(data["goals"], f"{context} goals")
            goals = {
                goal_id: self._require_str(description, f"{context} goals.{goal_id}")
                for goal_id, description in goals_map.items()
            }
            roles[raw_id] = NpcRoleDef(
                id=raw_id,
                names=tuple(names),
                schedule=tuple(self._parse_schedule(data["schedule"], context)),
                goals=goals,
            )
        return roles

    def _parse_schedule(self, value: object, context: str) -> List[ScheduleEntryDef]:
        entries: List[ScheduleEntryDef] = []
        for index, entry in enumerate(self._require_list(value, f"{context} schedule")):
            ctx = f"{context} schedule[{index}]"
            mapping = self._require_mapping(entry, ctx)
            self._assert_allowed_fields(mapping, {"hour", "activity", "location"}, set(), ctx)
            hour = self._require_int(mapping["hour"], f"{ctx}.hour")
            if not 0 <= hour <= 23:
                raise DataValidationError(f"{ctx}.hour must be between 0 and 23.")
            entries.append(
                ScheduleEntryDef(
                    hour=hour,
                    activity=self._require_str(mapping["activity"], f"{ctx}.activity"),
                    location=self._require_str(mapping["location"], f"{ctx}.location"),
                )
            )
        return entries
