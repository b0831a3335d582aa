"""Pure helpers for resolving consumable item effects."""
from __future__ import annotations

from dataclasses import dataclass

from soulforge.core.rng import RNG
from soulforge.domain.defs import ItemEffectDef
from soulforge.domain.state import ItemInstance


@dataclass(slots=True)
class ItemEffectResult:
    """What using an item did; only ``health_after`` feeds back into state."""

    effect_type: str
    message: str
    health_after: int
    health_delta: int = 0
    damage: int = 0
    lore_fragment_id: str | None = None

    @property
    def had_effect(self) -> bool:
        return self.health_delta != 0 or self.damage != 0 or self.lore_fragment_id is not None


def resolve_item_effect(
    item: ItemInstance,
    effect: ItemEffectDef | None,
    *,
    health: int,
    max_health: int,
    rng: RNG,
) -> ItemEffectResult:
    if effect is None:
        return ItemEffectResult(effect_type="none", message="Item effect not found.", health_after=health)

    if effect.type == "healing":
        amount = effect.health_recovery_amount or item.healing_amount
        new_health = min(max_health, health + max(0, amount))
        healed = new_health - health
        return ItemEffectResult(
            effect_type="healing",
            message=f"Recovered {healed} health.",
            health_after=new_health,
            health_delta=healed,
        )

    if effect.type == "lore_unlock":
        fragment = item.lore_fragment_id or item.item_id
        return ItemEffectResult(
            effect_type="lore_unlock",
            message="Gained a fragment of ancient knowledge.",
            health_after=health,
            lore_fragment_id=fragment,
        )

    if effect.type == "damage":
        damage = 0
        if effect.damage_range is not None:
            damage = rng.roll_range(effect.damage_range.min, effect.damage_range.max)
        return ItemEffectResult(
            effect_type="damage",
            message=f"Dealt {damage} damage.",
            health_after=health,
            damage=damage,
        )

    return ItemEffectResult(effect_type=effect.type, message="Item used.", health_after=health)
