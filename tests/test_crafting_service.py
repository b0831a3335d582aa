from soulforge.domain.defs import RecipeDef, RecipeIngredientDef
from soulforge.domain.state import INVENTORY_CAPACITY


def test_craft_iron_sword_consumes_ingredients(make_session) -> None:
    session = make_session()
    session.inventory.add_item("iron_ingot", 2)
    session.inventory.add_item("wood", 1)
    start_minutes = session.store.world.time.hour * 60 + session.store.world.time.minute

    result = session.crafting.craft_item("craft_iron_sword")

    assert result.success
    outcome = result.payload
    assert outcome.item.item_id == "steel_sword"
    assert outcome.quality.quality == "normal"
    assert outcome.minutes == 30
    assert session.inventory.count_item("iron_ingot") == 0
    assert session.inventory.count_item("wood") == 0
    assert session.inventory.count_item("steel_sword") == 1
    assert session.store.player.experience == 25
    time = session.store.world.time
    assert time.hour * 60 + time.minute == start_minutes + 30


def test_craft_without_ingredients_changes_nothing(make_session) -> None:
    session = make_session()
    session.inventory.add_item("iron_ingot", 1)
    session.inventory.add_item("wood", 1)

    result = session.crafting.craft_item("craft_iron_sword")

    assert not result.success
    assert result.reason == "insufficient_ingredients"
    assert session.inventory.count_item("iron_ingot") == 1
    assert session.inventory.count_item("wood") == 1
    assert session.inventory.count_item("steel_sword") == 0


def test_unknown_recipe(make_session) -> None:
    session = make_session()
    assert session.crafting.craft_item("craft_moon").reason == "recipe_not_found"


def test_tool_gated_recipe_needs_tool(make_session) -> None:
    session = make_session()
    session.inventory.add_item("wheat", 3)
    session.inventory.add_item("pure_water", 1)

    assert session.crafting.craft_item("craft_bread").reason == "requirements_not_met"

    session.inventory.add_item("oven")
    result = session.crafting.craft_item("craft_bread")
    assert result.success
    assert session.inventory.count_item("bread") == 2
    assert session.inventory.count_item("oven") == 1


def test_crafting_time_shrinks_with_skill(make_session) -> None:
    session = make_session()
    recipe = session.crafting.get_recipe("craft_iron_sword")
    session.store.player.skills["primordial_crafting"].level = 2

    assert session.crafting.crafting_time(recipe) == 27


def test_available_recipes_flag_ingredients(make_session) -> None:
    session = make_session()
    session.inventory.add_item("rabbit_pelt", 4)

    views = {view.recipe.id: view for view in session.crafting.available_recipes()}

    assert views["craft_leather_vest"].can_craft
    assert not views["craft_iron_sword"].can_craft
    assert "craft_bread" not in views


def test_recipe_book_is_editable(make_session) -> None:
    session = make_session()
    recipe = RecipeDef(
        id="craft_ingot",
        name="Smelt Ingot",
        description="Smelt ore into an ingot.",
        ingredients=(RecipeIngredientDef(item_id="iron_ore", quantity=2),),
        output_item_id="iron_ingot",
    )

    assert session.crafting.add_recipe(recipe).success
    assert [r.id for r in session.crafting.recipes_using_ingredient("iron_ore")] == ["craft_ingot"]
    assert session.crafting.remove_recipe("craft_ingot").success
    assert session.crafting.remove_recipe("craft_ingot").reason == "recipe_not_found"


def test_recipe_with_unknown_items_is_rejected(make_session) -> None:
    session = make_session()
    recipe = RecipeDef(
        id="craft_void",
        name="Void",
        description="Nothing.",
        ingredients=(RecipeIngredientDef(item_id="void_dust", quantity=1),),
        output_item_id="iron_ingot",
    )

    assert session.crafting.add_recipe(recipe).reason == "item_not_found"


def test_quality_is_normal_without_skill(make_session) -> None:
    session = make_session()
    recipe = session.crafting.get_recipe("craft_iron_sword")

    assert all(session.crafting.roll_quality(recipe).quality == "normal" for _ in range(20))


def test_recipes_by_category_filters_on_output_type(make_session) -> None:
    session = make_session()

    assert [recipe.id for recipe in session.crafting.recipes_by_category("weapon")] == ["craft_iron_sword"]
    assert [recipe.id for recipe in session.crafting.recipes_by_category("consumable")] == [
        "craft_bread",
        "craft_healing_potion",
    ]
    assert session.crafting.recipes_by_category("ring") == []


def _fill_with_bread(session) -> None:
    while not session.inventory.is_inventory_full():
        session.inventory.add_item("bread")


def test_full_inventory_crafts_when_ingredients_free_a_slot(make_session) -> None:
    session = make_session()
    session.inventory.add_item("iron_ingot", 2)
    session.inventory.add_item("wood", 1)
    _fill_with_bread(session)

    result = session.crafting.craft_item("craft_iron_sword")

    assert result.success
    assert session.inventory.count_item("steel_sword") == 1
    assert len(session.store.player.inventory) == INVENTORY_CAPACITY - 1


def test_full_inventory_refuses_craft_that_frees_nothing(make_session) -> None:
    session = make_session()
    session.inventory.add_item("iron_ingot", 3)
    session.inventory.add_item("wood", 2)
    _fill_with_bread(session)

    result = session.crafting.craft_item("craft_iron_sword")

    assert result.reason == "inventory_full"
    assert session.inventory.count_item("iron_ingot") == 3
    assert session.inventory.count_item("wood") == 2
