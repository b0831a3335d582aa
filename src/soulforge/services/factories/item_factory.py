"""Factory for inventory item instances."""
from __future__ import annotations

from typing import Container

from soulforge.core.rng import RNG
from soulforge.data.repositories import ItemsRepository
from soulforge.domain.state import ItemInstance
from soulforge.services.errors import FactoryError

from .id_factory import make_instance_id


def create_item_instance(
    item_id: str,
    quantity: int,
    items_repo: ItemsRepository,
    rng: RNG,
    taken: Container[str] = (),
) -> ItemInstance:
    """Copy an item template into a new instance with a fresh instance id."""
    try:
        item_def = items_repo.get(item_id)
    except KeyError as exc:
        raise FactoryError(f"Item '{item_id}' not found.") from exc
    if quantity <= 0:
        raise FactoryError(f"Cannot create '{item_id}' with quantity {quantity}.")
    return ItemInstance(
        instance_id=make_instance_id("item", rng, taken),
        item_id=item_def.id,
        name=item_def.name,
        type=item_def.type,
        quantity=quantity,
        value=item_def.value,
        rarity=item_def.rarity,
        description=item_def.description,
        effect_id=item_def.effect_id,
        healing_amount=item_def.healing_amount,
        damage=item_def.damage,
        defense_rating=item_def.defense_rating,
        attribute_requirements=dict(item_def.attribute_requirements),
        attribute_modifiers=dict(item_def.attribute_modifiers),
        lore_fragment_id=item_def.lore_fragment_id,
    )


def copy_item_instance(item: ItemInstance, quantity: int, rng: RNG, taken: Container[str] = ()) -> ItemInstance:
    """Split ``quantity`` units of an existing instance into a new one."""
    return ItemInstance(
        instance_id=make_instance_id("item", rng, taken),
        item_id=item.item_id,
        name=item.name,
        type=item.type,
        quantity=quantity,
        value=item.value,
        rarity=item.rarity,
        description=item.description,
        effect_id=item.effect_id,
        healing_amount=item.healing_amount,
        damage=item.damage,
        defense_rating=item.defense_rating,
        attribute_requirements=dict(item.attribute_requirements),
        attribute_modifiers=dict(item.attribute_modifiers),
        lore_fragment_id=item.lore_fragment_id,
    )
