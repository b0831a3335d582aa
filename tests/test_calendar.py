import pytest

from soulforge.core.calendar import WorldTime, advance, is_night, minutes_since_epoch, next_season


def test_advance_carries_minutes_into_hours() -> None:
    advanced, days = advance(WorldTime(day=1, hour=12, minute=50), 15)

    assert (advanced.day, advanced.hour, advanced.minute) == (1, 13, 5)
    assert days == 0


def test_advance_crosses_midnight() -> None:
    advanced, days = advance(WorldTime(day=3, hour=23, minute=59), 2)

    assert (advanced.day, advanced.hour, advanced.minute) == (4, 0, 1)
    assert days == 1


def test_advance_rotates_season_on_day_ninety() -> None:
    advanced, days = advance(WorldTime(day=89, hour=23, minute=30, season="spring"), 60)

    assert advanced.day == 90
    assert advanced.season == "summer"
    assert days == 1


def test_advance_many_days_in_one_call() -> None:
    start = WorldTime(day=1, hour=0, minute=0, season="spring", year=1)
    advanced, days = advance(start, 365 * 24 * 60)

    assert days == 365
    assert advanced.day == 366
    assert advanced.year == 2
    # Days 90, 180, 270 and 360 each rotate once.
    assert advanced.season == "spring"


def test_advance_rejects_negative_minutes() -> None:
    with pytest.raises(ValueError):
        advance(WorldTime(), -1)


def test_advance_does_not_mutate_input() -> None:
    start = WorldTime(day=2, hour=5, minute=0)
    advance(start, 600)
    assert (start.day, start.hour, start.minute) == (2, 5, 0)


def test_minutes_since_epoch() -> None:
    assert minutes_since_epoch(WorldTime(day=1, hour=0, minute=0)) == 0
    assert minutes_since_epoch(WorldTime(day=2, hour=1, minute=30)) == 24 * 60 + 90


def test_next_season_wraps() -> None:
    assert next_season("winter") == "spring"
    assert next_season("spring") == "summer"


def test_night_hours() -> None:
    assert is_night(18)
    assert is_night(23)
    assert is_night(0)
    assert is_night(5)
    assert not is_night(6)
    assert not is_night(17)


def test_copy_is_independent() -> None:
    original = WorldTime(day=4)
    duplicate = original.copy()
    duplicate.day = 9
    assert original.day == 4
