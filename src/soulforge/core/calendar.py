"""In-game calendar arithmetic."""
from __future__ import annotations

from dataclasses import dataclass

from soulforge.core.types import SEASONS, Season

MINUTES_PER_HOUR = 60
HOURS_PER_DAY = 24
MINUTES_PER_DAY = MINUTES_PER_HOUR * HOURS_PER_DAY
DAYS_PER_SEASON = 90
DAYS_PER_YEAR = 365
NIGHT_START_HOUR = 18
NIGHT_END_HOUR = 6


@dataclass(slots=True)
class WorldTime:
    """Calendar position of the world clock."""

    day: int = 1
    hour: int = 12
    minute: int = 0
    season: Season = "spring"
    year: int = 1

    def copy(self) -> "WorldTime":
        return WorldTime(day=self.day, hour=self.hour, minute=self.minute, season=self.season, year=self.year)


def minutes_since_epoch(time: WorldTime) -> int:
    """Total minutes elapsed since day 1, 00:00."""
    return ((time.day - 1) * HOURS_PER_DAY + time.hour) * MINUTES_PER_HOUR + time.minute


def next_season(season: Season) -> Season:
    index = SEASONS.index(season)
    return SEASONS[(index + 1) % len(SEASONS)]


def advance(time: WorldTime, minutes: int) -> tuple[WorldTime, int]:
    """Return the clock ``minutes`` later plus the number of day boundaries crossed.

    Minute overflow carries into hours and hour overflow into days. Every day
    number reached that is a multiple of 90 rotates the season and every
    multiple of 365 starts a new year, so one call may cross many days.
    """
    if minutes < 0:
        raise ValueError("Cannot advance time by a negative amount.")
    carry_hours, minute = divmod(time.minute + minutes, MINUTES_PER_HOUR)
    days_crossed, hour = divmod(time.hour + carry_hours, HOURS_PER_DAY)

    season = time.season
    year = time.year
    for day in range(time.day + 1, time.day + days_crossed + 1):
        if day % DAYS_PER_SEASON == 0:
            season = next_season(season)
        if day % DAYS_PER_YEAR == 0:
            year += 1

    advanced = WorldTime(
        day=time.day + days_crossed,
        hour=hour,
        minute=minute,
        season=season,
        year=year,
    )
    return advanced, days_crossed


def is_night(hour: int) -> bool:
    """Hours in [18, 24) and [0, 6) count as night."""
    return hour >= NIGHT_START_HOUR or hour < NIGHT_END_HOUR
