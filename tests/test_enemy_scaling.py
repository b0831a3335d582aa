from __future__ import annotations

import pytest

from soulforge.core.rng import RNG
from soulforge.domain.defs import CreatureDef
from soulforge.domain.enemy_scaling import roll_enemy_level, scale_enemy_stats


def _creature(strength: int, dexterity: int, constitution: int) -> CreatureDef:
    return CreatureDef(
        id="test_creature",
        name="Test Creature",
        description="",
        base_attributes={"strength": strength, "dexterity": dexterity, "constitution": constitution},
    )


def test_scale_matches_template_at_level_equal_to_strength() -> None:
    stats = scale_enemy_stats(_creature(10, 10, 10), enemy_level=10)

    assert stats.level == 10
    assert stats.max_health == 50
    assert stats.strength == 10
    assert stats.dexterity == 10
    assert stats.defense == 4
    assert (stats.damage.min, stats.damage.max) == (3, 6)


def test_scale_below_template_level_floors_each_stat() -> None:
    stats = scale_enemy_stats(_creature(10, 10, 10), enemy_level=4)

    assert stats.max_health == 20
    assert stats.strength == 4
    assert stats.defense == 1
    assert (stats.damage.min, stats.damage.max) == (1, 2)


def test_stronger_template_scales_down() -> None:
    weak = scale_enemy_stats(_creature(10, 10, 10), enemy_level=10)
    strong = scale_enemy_stats(_creature(20, 10, 10), enemy_level=10)

    assert strong.max_health == 25
    assert strong.max_health < weak.max_health


def test_scaled_health_never_drops_below_one() -> None:
    stats = scale_enemy_stats(_creature(10, 1, 1), enemy_level=1)

    assert stats.max_health == 1


def test_zero_strength_template_does_not_divide_by_zero() -> None:
    stats = scale_enemy_stats(_creature(0, 5, 5), enemy_level=2)

    assert stats.max_health == 50


@pytest.mark.parametrize("player_level", [1, 5])
def test_enemy_level_stays_within_one_of_player(player_level: int) -> None:
    levels = {roll_enemy_level(player_level, RNG(seed)) for seed in range(40)}

    assert levels <= {max(1, player_level - 1), player_level, player_level + 1}
    assert min(levels) >= 1


def test_scaling_real_creature_templates(repos) -> None:
    for creature in repos.creatures.all():
        stats = scale_enemy_stats(creature, enemy_level=3)
        assert stats.max_health >= 1
        assert stats.damage.min <= stats.damage.max
