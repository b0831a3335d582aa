"""Item effects repository."""
from __future__ import annotations

from typing import Dict

from soulforge.data.errors import DataValidationError
from soulforge.data.repositories.base import RepositoryBase
from soulforge.data.repositories.items_repo import ItemsRepository
from soulforge.domain.defs import ItemEffectDef

EFFECT_TYPES = {"healing", "lore_unlock", "damage", "buff", "debuff", "utility"}


class ItemEffectsRepository(RepositoryBase[ItemEffectDef]):
    """Loads the effects consumables trigger when used."""

    def __init__(self, base_path=None) -> None:
        super().__init__("item_effects.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ItemEffectDef]:
        effects: Dict[str, ItemEffectDef] = {}
        for raw_id, payload in raw.items():
            context = f"item effect '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_allowed_fields(
                data,
                {"name", "description", "type"},
                {"health_recovery_amount", "damage_range"},
                context,
            )
            effect_type = self._require_str(data["type"], f"{context} type")
            if effect_type not in EFFECT_TYPES:
                raise DataValidationError(f"{context} type '{effect_type}' is not supported.")
            damage_range = None
            if data.get("damage_range") is not None:
                damage_range = ItemsRepository.parse_damage_range(data["damage_range"], f"{context} damage_range")
            effects[raw_id] = ItemEffectDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                description=self._require_str(data["description"], f"{context} description"),
                type=effect_type,
                health_recovery_amount=self._require_int(
                    data.get("health_recovery_amount", 0), f"{context} health_recovery_amount"
                ),
                damage_range=damage_range,
            )
        return effects
