"""Items repository."""
from __future__ import annotations

from typing import Dict

from soulforge.data.errors import DataValidationError
from soulforge.data.repositories.base import RepositoryBase
from soulforge.domain.defs import DamageRange, ItemDef

_REQUIRED_FIELDS = {"name", "description", "type", "value", "rarity"}
_OPTIONAL_FIELDS = {
    "effect_id",
    "max_stack_size",
    "healing_amount",
    "damage",
    "defense_rating",
    "attribute_requirements",
    "attribute_modifiers",
    "lore_fragment_id",
}


class ItemsRepository(RepositoryBase[ItemDef]):
    """Loads and validates item templates."""

    def __init__(self, base_path=None) -> None:
        super().__init__("items.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ItemDef]:
        items: Dict[str, ItemDef] = {}
        for raw_id, payload in raw.items():
            context = f"item '{raw_id}'"
            item_data = self._require_mapping(payload, context)
            self._assert_allowed_fields(item_data, _REQUIRED_FIELDS, _OPTIONAL_FIELDS, context)

            value = self._require_int(item_data["value"], f"{context} value")
            if value < 0:
                raise DataValidationError(f"{context} value must be non-negative.")
            max_stack_size = self._require_int(item_data.get("max_stack_size", 1), f"{context} max_stack_size")
            if max_stack_size <= 0:
                raise DataValidationError(f"{context} max_stack_size must be positive.")

            items[raw_id] = ItemDef(
                id=raw_id,
                name=self._require_str(item_data["name"], f"{context} name"),
                description=self._require_str(item_data["description"], f"{context} description"),
                type=self._require_str(item_data["type"], f"{context} type"),
                value=value,
                rarity=self._require_str(item_data["rarity"], f"{context} rarity"),
                effect_id=self._optional_str(item_data.get("effect_id"), f"{context} effect_id"),
                max_stack_size=max_stack_size,
                healing_amount=self._require_int(item_data.get("healing_amount", 0), f"{context} healing_amount"),
                damage=self._parse_damage(item_data.get("damage"), context),
                defense_rating=self._require_int(item_data.get("defense_rating", 0), f"{context} defense_rating"),
                attribute_requirements=self._require_int_mapping(
                    item_data.get("attribute_requirements"), f"{context} attribute_requirements"
                ),
                attribute_modifiers=self._require_int_mapping(
                    item_data.get("attribute_modifiers"), f"{context} attribute_modifiers"
                ),
                lore_fragment_id=self._optional_str(item_data.get("lore_fragment_id"), f"{context} lore_fragment_id"),
            )
        return items

    @classmethod
    def parse_damage_range(cls, value: object, context: str) -> DamageRange:
        data = cls._require_mapping(value, context)
        low = cls._require_int(data.get("min"), f"{context}.min")
        high = cls._require_int(data.get("max"), f"{context}.max")
        if low < 0 or high < low:
            raise DataValidationError(f"{context} range invalid.")
        return DamageRange(min=low, max=high)

    def _parse_damage(self, value: object, context: str) -> DamageRange | None:
        if value is None:
            return None
        return self.parse_damage_range(value, f"{context} damage")
