"""Equipment slot rules and the derived stats fold."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping

from soulforge.domain.defs import DamageRange
from soulforge.domain.state import ATTRIBUTE_NAMES, Attributes, ItemInstance

EQUIPMENT_SLOTS: tuple[str, ...] = ("weapon", "armor", "helmet", "boots", "ring1", "ring2", "amulet")
EQUIPPABLE_TYPES: frozenset[str] = frozenset({"weapon", "armor", "helmet", "boots", "ring", "amulet"})
UNARMED_DAMAGE = DamageRange(min=1, max=4)


@dataclass(slots=True)
class DerivedStats:
    """Read-only view of the player with equipment folded in."""

    attributes: Attributes
    defense: int
    damage: DamageRange


def is_equippable(item_type: str) -> bool:
    return item_type in EQUIPPABLE_TYPES


def slot_for_item(item_type: str, equipment: Mapping[str, ItemInstance]) -> str | None:
    """Return the slot an item of ``item_type`` goes into, or None if it is not wearable.

    Rings fill ``ring1`` first and otherwise take ``ring2``.
    """
    if item_type == "ring":
        return "ring2" if "ring1" in equipment else "ring1"
    if item_type in EQUIPPABLE_TYPES:
        return item_type
    return None


def missing_requirements(attributes: Attributes, requirements: Mapping[str, int]) -> List[str]:
    """Names of attributes whose value falls short of ``requirements``."""
    return [name for name, needed in sorted(requirements.items()) if attributes.get(name) < needed]


def derive_stats(base: Attributes, equipment: Mapping[str, ItemInstance]) -> DerivedStats:
    totals: Dict[str, int] = base.to_dict()
    defense = 0
    damage = UNARMED_DAMAGE
    for slot in EQUIPMENT_SLOTS:
        item = equipment.get(slot)
        if item is None:
            continue
        for name, modifier in item.attribute_modifiers.items():
            if name in ATTRIBUTE_NAMES:
                totals[name] += modifier
        if item.type == "armor":
            defense += item.defense_rating
        if item.type == "weapon" and item.damage is not None:
            damage = item.damage
    return DerivedStats(attributes=Attributes(**totals), defense=defense, damage=damage)
