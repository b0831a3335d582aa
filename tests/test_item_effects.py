from __future__ import annotations

from soulforge.core.rng import RNG
from soulforge.domain.defs import DamageRange, ItemEffectDef
from soulforge.domain.item_effects import resolve_item_effect
from soulforge.domain.state import ItemInstance


def _item(**overrides) -> ItemInstance:
    fields = {"instance_id": "item_100001", "item_id": "healing_potion", "name": "Healing Potion", "type": "consumable"}
    fields.update(overrides)
    return ItemInstance(**fields)


def _effect(effect_type: str, **overrides) -> ItemEffectDef:
    return ItemEffectDef(id=f"effect_{effect_type}", name=effect_type.title(), description="", type=effect_type, **overrides)


def test_healing_effect_clamps_to_max_health() -> None:
    result = resolve_item_effect(
        _item(),
        _effect("healing", health_recovery_amount=30),
        health=85,
        max_health=100,
        rng=RNG(1),
    )

    assert result.health_after == 100
    assert result.health_delta == 15
    assert result.had_effect is True
    assert result.message == "Recovered 15 health."


def test_healing_effect_falls_back_to_item_amount() -> None:
    result = resolve_item_effect(
        _item(item_id="bread", name="Bread", healing_amount=5),
        _effect("healing"),
        health=50,
        max_health=100,
        rng=RNG(1),
    )

    assert result.health_after == 55


def test_healing_at_full_health_has_no_effect() -> None:
    result = resolve_item_effect(
        _item(), _effect("healing", health_recovery_amount=10), health=100, max_health=100, rng=RNG(1)
    )

    assert result.health_delta == 0
    assert result.had_effect is False


def test_lore_unlock_uses_fragment_or_item_id() -> None:
    scroll = _item(item_id="ancient_scroll", name="Ancient Scroll", lore_fragment_id="fragment_first_forge")
    tablet = _item(item_id="worn_tablet", name="Worn Tablet")

    first = resolve_item_effect(scroll, _effect("lore_unlock"), health=10, max_health=10, rng=RNG(1))
    second = resolve_item_effect(tablet, _effect("lore_unlock"), health=10, max_health=10, rng=RNG(1))

    assert first.lore_fragment_id == "fragment_first_forge"
    assert second.lore_fragment_id == "worn_tablet"
    assert first.health_after == 10


def test_damage_effect_rolls_inside_range() -> None:
    effect = _effect("damage", damage_range=DamageRange(min=8, max=12))

    rolls = {
        resolve_item_effect(_item(), effect, health=50, max_health=50, rng=RNG(seed)).damage for seed in range(20)
    }

    assert rolls <= set(range(8, 13))


def test_missing_effect_reports_not_found() -> None:
    result = resolve_item_effect(_item(), None, health=40, max_health=100, rng=RNG(1))

    assert result.effect_type == "none"
    assert result.health_after == 40
    assert result.had_effect is False
