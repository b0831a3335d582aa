"""Inventory and equipment orchestration services."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Mapping, Set

from soulforge.core.rng import RNG
from soulforge.data.repositories import ItemEffectsRepository, ItemsRepository
from soulforge.domain.equipment import DerivedStats, derive_stats, is_equippable, missing_requirements, slot_for_item
from soulforge.domain.item_effects import ItemEffectResult, resolve_item_effect
from soulforge.domain.state import INVENTORY_CAPACITY, ItemInstance
from soulforge.services.errors import FactoryError, InvariantViolation
from soulforge.services.factories import copy_item_instance, create_item_instance
from soulforge.services.quest_service import QuestService
from soulforge.services.results import OperationResult
from soulforge.services.state_store import StateStore

SELL_RATIO = 0.5


@dataclass(slots=True)
class EquipOutcome:
    slot: str
    item: ItemInstance
    replaced: ItemInstance | None = None


@dataclass(slots=True)
class SaleOutcome:
    item_id: str
    quantity: int
    essence_gained: int


class InventoryService:
    """Service responsible for the player's items and equipment slots."""

    def __init__(
        self,
        store: StateStore,
        *,
        items_repo: ItemsRepository,
        item_effects_repo: ItemEffectsRepository,
        rng: RNG,
        quest_service: QuestService | None = None,
    ) -> None:
        self._store = store
        self._items_repo = items_repo
        self._item_effects_repo = item_effects_repo
        self._rng = rng
        self._quest_service = quest_service

    # ------------------------------------------------------------------ Views
    def list_items(self, item_type: str | None = None, rarity: str | None = None) -> List[ItemInstance]:
        return [
            item
            for item in self._store.player.inventory
            if (item_type is None or item.type == item_type) and (rarity is None or item.rarity == rarity)
        ]

    def equipped_items(self) -> Dict[str, ItemInstance]:
        return dict(self._store.player.equipment)

    def count_item(self, item_id: str) -> int:
        return sum(item.quantity for item in self._store.player.inventory if item.item_id == item_id)

    def has_item(self, item_id: str, quantity: int = 1) -> bool:
        return self.count_item(item_id) >= quantity

    def inventory_space_remaining(self) -> int:
        return max(0, INVENTORY_CAPACITY - len(self._store.player.inventory))

    def is_inventory_full(self) -> bool:
        return self.inventory_space_remaining() == 0

    def slots_freed_by(self, quantities: Mapping[str, int]) -> int:
        """Instances that consuming ``quantities`` (oldest first, as ``consume_item`` does) would empty."""
        freed = 0
        for item_id, quantity in quantities.items():
            remaining = quantity
            for item in self._store.player.inventory:
                if remaining <= 0:
                    break
                if item.item_id != item_id:
                    continue
                if item.quantity <= remaining:
                    freed += 1
                remaining -= item.quantity
        return freed

    def player_stats_with_equipment(self) -> DerivedStats:
        player = self._store.player
        return derive_stats(player.attributes, player.equipment)

    # -------------------------------------------------------------- Mutations
    def add_item(self, item_id: str, quantity: int = 1) -> OperationResult[ItemInstance]:
        """Create a fresh instance of ``item_id`` and report the pickup to quests."""
        if quantity <= 0:
            raise InvariantViolation("Item quantity must be positive.")
        if self.is_inventory_full():
            return OperationResult.precondition_failed("Inventory is full.", "inventory_full")
        try:
            item = create_item_instance(item_id, quantity, self._items_repo, self._rng, self._taken_ids())
        except FactoryError:
            return OperationResult.not_found("Item not found.", "item_not_found")
        self._store.add_to_inventory(item)
        if self._quest_service is not None:
            self._quest_service.track_quest_progress("item_collected", {"item_id": item_id, "quantity": quantity})
        return OperationResult.ok(f"Added {quantity} {item.name} to the inventory.", item)

    def remove_item(self, instance_id: str, quantity: int = 1) -> OperationResult[ItemInstance]:
        if quantity <= 0:
            raise InvariantViolation("Item quantity must be positive.")
        item = self._store.player.find_item(instance_id)
        if item is None:
            return OperationResult.not_found("Item not found in the inventory.", "item_not_found")
        if item.quantity < quantity:
            return OperationResult.precondition_failed("Not enough of that item.", "insufficient_quantity")
        self._store.remove_from_inventory(instance_id, quantity)
        return OperationResult.ok(f"Removed {quantity} {item.name} from the inventory.", item)

    def consume_item(self, item_id: str, quantity: int = 1) -> OperationResult[int]:
        """Remove ``quantity`` units of ``item_id`` across instances, oldest first, or nothing at all."""
        if quantity <= 0:
            raise InvariantViolation("Item quantity must be positive.")
        if self.count_item(item_id) < quantity:
            return OperationResult.precondition_failed(f"Not enough {item_id}.", "insufficient_quantity")
        remaining = quantity
        for item in [entry for entry in self._store.player.inventory if entry.item_id == item_id]:
            if remaining <= 0:
                break
            taken = min(remaining, item.quantity)
            self._store.remove_from_inventory(item.instance_id, taken)
            remaining -= taken
        return OperationResult.ok(f"Consumed {quantity} {item_id}.", quantity)

    def use_item(self, instance_id: str) -> OperationResult[ItemEffectResult]:
        player = self._store.player
        item = player.find_item(instance_id)
        if item is None:
            return OperationResult.not_found("Item not found in the inventory.", "item_not_found")
        if item.type != "consumable":
            return OperationResult.precondition_failed("This item cannot be used.", "item_not_usable")

        effect = None
        if item.effect_id is not None and self._item_effects_repo.has(item.effect_id):
            effect = self._item_effects_repo.get(item.effect_id)
        outcome = resolve_item_effect(
            item,
            effect,
            health=player.health,
            max_health=player.max_health,
            rng=self._rng,
        )
        if outcome.health_delta:
            self._store.set_health(outcome.health_after)
        if outcome.lore_fragment_id is not None:
            self._store.add_journal_entry(
                f"Lore Fragment: {item.name}",
                f"You uncovered the lore fragment '{outcome.lore_fragment_id}'.",
                category="Lore",
                icon="book-open",
            )
        self._store.remove_from_inventory(instance_id, 1)
        return OperationResult.ok(f"Used {item.name}: {outcome.message}", outcome)

    def equip_item(self, instance_id: str) -> OperationResult[EquipOutcome]:
        """Move one unit of an inventory stack into its slot, unequipping any occupant first."""
        player = self._store.player
        item = player.find_item(instance_id)
        if item is None:
            return OperationResult.not_found("Item not found in the inventory.", "item_not_found")
        if not is_equippable(item.type):
            return OperationResult.precondition_failed("This item cannot be equipped.", "not_equippable")
        missing = missing_requirements(player.attributes, item.attribute_requirements)
        if missing:
            return OperationResult.precondition_failed(
                f"Attribute requirements not met: {', '.join(missing)}.",
                "attribute_requirement_not_met",
            )
        slot = slot_for_item(item.type, player.equipment)
        if slot is None:
            return OperationResult.precondition_failed("This item cannot be equipped.", "not_equippable")
        occupied = slot in player.equipment
        if occupied and item.quantity > 1 and self.is_inventory_full():
            return OperationResult.precondition_failed("Inventory is full.", "inventory_full")

        equipped = copy_item_instance(item, 1, self._rng, self._taken_ids())
        self._store.remove_from_inventory(instance_id, 1)
        replaced = None
        if occupied:
            unequipped = self.unequip_item(slot)
            replaced = unequipped.payload
        self._store.set_equipment_slot(slot, equipped)
        return OperationResult.ok(f"Equipped {equipped.name}.", EquipOutcome(slot=slot, item=equipped, replaced=replaced))

    def unequip_item(self, slot: str) -> OperationResult[ItemInstance]:
        """Return the item in ``slot`` to the inventory as a fresh instance."""
        player = self._store.player
        if slot not in player.equipment:
            return OperationResult.precondition_failed("Nothing is equipped in that slot.", "slot_empty")
        if self.is_inventory_full():
            return OperationResult.precondition_failed("Inventory is full.", "inventory_full")
        item = self._store.clear_equipment_slot(slot)
        assert item is not None
        returned = copy_item_instance(item, item.quantity, self._rng, self._taken_ids())
        self._store.add_to_inventory(returned)
        return OperationResult.ok(f"Unequipped {item.name}.", returned)

    def sell_item(self, instance_id: str, quantity: int = 1) -> OperationResult[SaleOutcome]:
        if quantity <= 0:
            raise InvariantViolation("Item quantity must be positive.")
        item = self._store.player.find_item(instance_id)
        if item is None:
            return OperationResult.not_found("Item not found in the inventory.", "item_not_found")
        if item.quantity < quantity:
            return OperationResult.precondition_failed("Not enough of that item.", "insufficient_quantity")
        price = math.floor(item.value * SELL_RATIO * quantity)
        self._store.remove_from_inventory(instance_id, quantity)
        self._store.adjust_essence(price)
        return OperationResult.ok(
            f"Sold {quantity} {item.name} for {price} essence.",
            SaleOutcome(item_id=item.item_id, quantity=quantity, essence_gained=price),
        )

    def _taken_ids(self) -> Set[str]:
        player = self._store.player
        taken = {item.instance_id for item in player.inventory}
        taken.update(item.instance_id for item in player.equipment.values())
        return taken
