"""
worldcal.engines.daylight
-------------------------
Sunrise and sunset for a date, interpolated linearly from the start of the
date's season towards the start of the next declared season.

Per-season times come from the season itself ("HH:MM"), else from Gregorian
defaults matched by season name, else from a 25% / 75% split of the day.
Dates outside every season (gaps) and calendars without seasons get the split.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Dict, Tuple

from worldcal.core.types import Season, StructuredDate, TimeUnits

if TYPE_CHECKING:
    from worldcal.engines.calendar import CalendarEngine

# Mid-latitude reference times, (sunrise, sunset)
GREGORIAN_DEFAULTS: Dict[str, Tuple[str, str]] = {
    "Winter": ("07:00", "16:45"),
    "Spring": ("06:30", "17:45"),
    "Summer": ("05:45", "20:15"),
    "Autumn": ("06:30", "19:30"),
    "Fall": ("06:30", "19:30"),
}


def clock_to_hours(clock: str, units: TimeUnits) -> float:
    hours, minutes = clock.split(":")
    return int(hours) + int(minutes) / units.minutes_per_hour

def hours_to_clock(hours: float, units: TimeUnits) -> str:
    h = math.floor(hours)
    m = round((hours - h) * units.minutes_per_hour)
    if m == units.minutes_per_hour:
        h, m = h + 1, 0
    return f"{h:02d}:{m:02d}"

def default_times(units: TimeUnits) -> Tuple[float, float]:
    return units.hours_per_day / 4, units.hours_per_day * 3 / 4

def season_times(season: Season, units: TimeUnits) -> Tuple[float, float]:
    if season.sunrise and season.sunset:
        return clock_to_hours(season.sunrise, units), clock_to_hours(season.sunset, units)
    named = GREGORIAN_DEFAULTS.get(season.name)
    if named is not None:
        return clock_to_hours(named[0], units), clock_to_hours(named[1], units)
    return default_times(units)


def season_progress(engine: "CalendarEngine", date: StructuredDate, current: Season, following: Season) -> float:
    """Fraction of the way from the start of `current` to the start of `following` (0 on the first day)."""
    start = engine.season_start(current, date.year)
    end = engine.season_start(following, date.year)
    if start is None or end is None:
        return 0.0
    year_days = engine.year_length(date.year)
    doy = engine.day_of_year(date) - 1

    total = end - start if end > start else year_days - start + end
    into = doy - start if doy >= start else year_days - start + doy
    return into / total if total > 0 else 0.0


def sunrise_sunset(engine: "CalendarEngine", date: StructuredDate) -> Tuple[float, float]:
    units = engine.definition.time
    seasons = engine.definition.seasons
    index = engine.season_index_for(date)
    if index is None:
        return default_times(units)

    current = seasons[index]
    following = seasons[(index + 1) % len(seasons)]
    rise0, set0 = season_times(current, units)
    rise1, set1 = season_times(following, units)
    p = season_progress(engine, date, current, following)
    return rise0 + (rise1 - rise0) * p, set0 + (set1 - set0) * p
