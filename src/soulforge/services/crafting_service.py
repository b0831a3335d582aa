"""Crafting resolver backed by a runtime-editable recipe book."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List

from soulforge.core.rng import RNG
from soulforge.data.repositories import ItemsRepository, RecipesRepository
from soulforge.domain.defs import RecipeDef
from soulforge.domain.state import ItemInstance
from soulforge.services.inventory_service import InventoryService
from soulforge.services.results import OperationResult
from soulforge.services.state_store import StateStore

CRAFTING_SKILL_ID = "primordial_crafting"
TIME_REDUCTION_PER_LEVEL = 0.05

# (minimum skill level, ordered (chance, quality, modifier) rolls); first hit wins.
QUALITY_TIERS: tuple[tuple[int, tuple[tuple[float, str, float], ...]], ...] = (
    (10, ((0.1, "legendary", 1.5), (0.2, "excellent", 1.3), (0.3, "fine", 1.1))),
    (5, ((0.1, "excellent", 1.3), (0.2, "fine", 1.1))),
    (1, ((0.1, "fine", 1.1),)),
)


@dataclass(slots=True)
class CraftQuality:
    quality: str = "normal"
    modifier: float = 1.0


@dataclass(slots=True)
class RecipeView:
    recipe: RecipeDef
    can_craft: bool


@dataclass(slots=True)
class CraftOutcome:
    recipe_id: str
    item: ItemInstance
    quantity: int
    quality: CraftQuality
    experience: int
    minutes: int


class CraftingService:
    """Validates recipes against the inventory and turns ingredients into items."""

    def __init__(
        self,
        store: StateStore,
        *,
        recipes_repo: RecipesRepository,
        items_repo: ItemsRepository,
        inventory_service: InventoryService,
        rng: RNG,
    ) -> None:
        self._store = store
        self._items_repo = items_repo
        self._inventory = inventory_service
        self._rng = rng
        self._recipes: Dict[str, RecipeDef] = {recipe.id: recipe for recipe in recipes_repo.all()}

    # ------------------------------------------------------------ Recipe book
    def get_recipe(self, recipe_id: str) -> RecipeDef | None:
        return self._recipes.get(recipe_id)

    def all_recipes(self) -> List[RecipeDef]:
        return [self._recipes[key] for key in sorted(self._recipes)]

    def add_recipe(self, recipe: RecipeDef) -> OperationResult[RecipeDef]:
        unknown = [
            item_id
            for item_id in [recipe.output_item_id, *(ingredient.item_id for ingredient in recipe.ingredients)]
            if not self._items_repo.has(item_id)
        ]
        if unknown:
            return OperationResult.not_found(f"Unknown items in recipe: {', '.join(unknown)}.", "item_not_found")
        self._recipes[recipe.id] = recipe
        return OperationResult.ok("Recipe added.", recipe)

    def remove_recipe(self, recipe_id: str) -> OperationResult[RecipeDef]:
        recipe = self._recipes.pop(recipe_id, None)
        if recipe is None:
            return OperationResult.not_found("Recipe not found.", "recipe_not_found")
        return OperationResult.ok("Recipe removed.", recipe)

    def available_recipes(self) -> List[RecipeView]:
        """Recipes whose level, skill and tool gates are met, flagged with ingredient sufficiency."""
        return [
            RecipeView(recipe=recipe, can_craft=self.has_ingredients(recipe))
            for recipe in self.all_recipes()
            if self.meets_requirements(recipe)
        ]

    def recipes_by_category(self, item_type: str) -> List[RecipeDef]:
        return [
            recipe
            for recipe in self.all_recipes()
            if self._items_repo.has(recipe.output_item_id)
            and self._items_repo.get(recipe.output_item_id).type == item_type
        ]

    def recipes_using_ingredient(self, item_id: str) -> List[RecipeDef]:
        return [
            recipe
            for recipe in self.all_recipes()
            if any(ingredient.item_id == item_id for ingredient in recipe.ingredients)
        ]

    # ----------------------------------------------------------------- Rules
    def meets_requirements(self, recipe: RecipeDef) -> bool:
        player = self._store.player
        if player.level < recipe.required_level:
            return False
        for requirement in recipe.required_skills:
            skill = player.skills.get(requirement.skill_id)
            if skill is None or skill.level < requirement.level:
                return False
        if recipe.tool_required is not None and not self._inventory.has_item(recipe.tool_required):
            return False
        return True

    def has_ingredients(self, recipe: RecipeDef) -> bool:
        return all(self._inventory.has_item(ingredient.item_id, ingredient.quantity) for ingredient in recipe.ingredients)

    def crafting_time(self, recipe: RecipeDef) -> int:
        """Recipe time shortened by 5% per crafting skill level, never below one minute."""
        level = self._crafting_level()
        if level <= 0:
            return recipe.time_required
        return max(1, math.floor(recipe.time_required * (1.0 - level * TIME_REDUCTION_PER_LEVEL)))

    def roll_quality(self, recipe: RecipeDef) -> CraftQuality:
        level = self._crafting_level()
        for minimum, rolls in QUALITY_TIERS:
            if level < minimum:
                continue
            for chance, quality, modifier in rolls:
                if self._rng.random() < chance:
                    return CraftQuality(quality=quality, modifier=modifier)
            break
        return CraftQuality()

    def _crafting_level(self) -> int:
        skill = self._store.player.skills.get(CRAFTING_SKILL_ID)
        return skill.level if skill is not None else 0

    # ----------------------------------------------------------------- Craft
    def craft_item(self, recipe_id: str) -> OperationResult[CraftOutcome]:
        """Consume every ingredient in full, then add the output, grant experience and pass time."""
        recipe = self._recipes.get(recipe_id)
        if recipe is None:
            return OperationResult.not_found("Recipe not found.", "recipe_not_found")
        if not self.meets_requirements(recipe):
            return OperationResult.precondition_failed(
                "You do not meet the requirements for this recipe.", "requirements_not_met"
            )
        if not self.has_ingredients(recipe):
            return OperationResult.precondition_failed("Insufficient ingredients.", "insufficient_ingredients")
        consumed: Dict[str, int] = {}
        for ingredient in recipe.ingredients:
            consumed[ingredient.item_id] = consumed.get(ingredient.item_id, 0) + ingredient.quantity
        if self._inventory.inventory_space_remaining() + self._inventory.slots_freed_by(consumed) == 0:
            return OperationResult.precondition_failed("Inventory is full.", "inventory_full")

        quality = self.roll_quality(recipe)
        minutes = self.crafting_time(recipe)
        for ingredient in recipe.ingredients:
            self._inventory.consume_item(ingredient.item_id, ingredient.quantity)
        added = self._inventory.add_item(recipe.output_item_id, recipe.output_quantity)
        if not added.success or added.payload is None:
            return OperationResult.not_found("Crafted item not found.", "item_not_found")
        if recipe.experience:
            self._store.add_player_experience(recipe.experience)
        self._store.advance_time(minutes)

        outcome = CraftOutcome(
            recipe_id=recipe.id,
            item=added.payload,
            quantity=recipe.output_quantity,
            quality=quality,
            experience=recipe.experience,
            minutes=minutes,
        )
        return OperationResult.ok(f"Crafted {recipe.output_quantity} {added.payload.name}!", outcome)
