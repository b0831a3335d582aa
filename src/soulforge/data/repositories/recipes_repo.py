"""Recipes repository."""
from __future__ import annotations

from typing import Dict, List

from soulforge.data.errors import DataReferenceError, DataValidationError
from soulforge.data.repositories.base import RepositoryBase
from soulforge.data.repositories.items_repo import ItemsRepository
from soulforge.data.repositories.skills_repo import SkillsRepository
from soulforge.domain.defs import RecipeDef, RecipeIngredientDef, SkillRequirementDef


class RecipesRepository(RepositoryBase[RecipeDef]):
    """Loads crafting recipes and checks that every referenced item and skill exists."""

    def __init__(
        self,
        *,
        items_repo: ItemsRepository,
        skills_repo: SkillsRepository,
        base_path=None,
    ) -> None:
        super().__init__("recipes.json", base_path)
        self._items_repo = items_repo
        self._skills_repo = skills_repo

    def _build(self, raw: dict[str, object]) -> Dict[str, RecipeDef]:
        recipes: Dict[str, RecipeDef] = {}
        for raw_id, payload in raw.items():
            context = f"recipe '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_allowed_fields(
                data,
                {"name", "description", "ingredients", "output"},
                {"required_level", "required_skills", "time_required", "tool_required", "experience"},
                context,
            )
            output = self._require_mapping(data["output"], f"{context} output")
            output_item_id = self._require_str(output.get("item_id"), f"{context} output.item_id")
            self._check_item(output_item_id, f"{context} output")
            output_quantity = self._require_int(output.get("quantity", 1), f"{context} output.quantity")
            if output_quantity <= 0:
                raise DataValidationError(f"{context} output.quantity must be positive.")

            tool_required = self._optional_str(data.get("tool_required"), f"{context} tool_required")
            if tool_required is not None:
                self._check_item(tool_required, f"{context} tool_required")

            time_required = self._require_int(data.get("time_required", 0), f"{context} time_required")
            if time_required < 0:
                raise DataValidationError(f"{context} time_required must be non-negative.")

            recipes[raw_id] = RecipeDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                description=self._require_str(data["description"], f"{context} description"),
                ingredients=tuple(self._parse_ingredients(data["ingredients"], context)),
                output_item_id=output_item_id,
                output_quantity=output_quantity,
                required_level=self._require_int(data.get("required_level", 1), f"{context} required_level"),
                required_skills=tuple(self._parse_skills(data.get("required_skills"), context)),
                time_required=time_required,
                tool_required=tool_required,
                experience=self._require_int(data.get("experience", 0), f"{context} experience"),
            )
        return recipes

    def _check_item(self, item_id: str, context: str) -> None:
        if not self._items_repo.has(item_id):
            raise DataReferenceError(f"{context} references unknown item '{item_id}'.")

    def _parse_ingredients(self, value: object, context: str) -> List[RecipeIngredientDef]:
        entries = self._require_list(value, f"{context} ingredients")
        if not entries:
            raise DataValidationError(f"{context} must list at least one ingredient.")
        ingredients: List[RecipeIngredientDef] = []
        for index, entry in enumerate(entries):
            ctx = f"{context} ingredients[{index}]"
            mapping = self._require_mapping(entry, ctx)
            self._assert_allowed_fields(mapping, {"item_id", "quantity"}, set(), ctx)
            item_id = self._require_str(mapping["item_id"], f"{ctx}.item_id")
            self._check_item(item_id, ctx)
            quantity = self._require_int(mapping["quantity"], f"{ctx}.quantity")
            if quantity <= 0:
                raise DataValidationError(f"{ctx}.quantity must be positive.")
            ingredients.append(RecipeIngredientDef(item_id=item_id, quantity=quantity))
        return ingredients

    def _parse_skills(self, value: object, context: str) -> List[SkillRequirementDef]:
        requirements: List[SkillRequirementDef] = []
        entries = self._require_list(value if value is not None else [], f"{context} required_skills")
        for index, entry in enumerate(entries):
            ctx = f"{context} required_skills[{index}]"
            mapping = self._require_mapping(entry, ctx)
            self._assert_allowed_fields(mapping, {"skill_id", "level"}, set(), ctx)
            skill_id = self._require_str(mapping["skill_id"], f"{ctx}.skill_id")
            if not self._skills_repo.has(skill_id):
                raise DataReferenceError(f"{ctx} references unknown skill '{skill_id}'.")
            requirements.append(
                SkillRequirementDef(skill_id=skill_id, level=self._require_int(mapping["level"], f"{ctx}.level"))
            )
        return requirements
