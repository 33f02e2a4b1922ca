# tests/test_daylight.py

import pytest

from worldcal.core.errors import MalformedDefinitionError
from worldcal.core.types import CalendarDefinition, Month, Season, TimeUnits, Weekday
from worldcal.engines.calendar import CalendarEngine
from worldcal.engines.daylight import clock_to_hours, hours_to_clock
from worldcal.engines.specs import GREGORIAN, HARPTOS

UNITS = TimeUnits()


def _quarters(*seasons, time=UNITS) -> CalendarEngine:
    defn = CalendarDefinition(
        id="quarters",
        months=tuple(Month(name, 10) for name in ("One", "Two", "Three", "Four")),
        weekdays=(Weekday("A"), Weekday("B")),
        seasons=seasons,
        time=time,
    )
    return CalendarEngine(defn)


LIGHT_DARK = (
    Season("Light", start_month=1, sunrise="04:00", sunset="20:00"),
    Season("Dark", start_month=3, sunrise="08:00", sunset="16:00"),
)


# ------------------------------------------------------------
# Season containment
# ------------------------------------------------------------

def test_open_ended_seasons_run_until_the_next_start():
    eng = _quarters(*LIGHT_DARK)
    assert eng.season_for(eng.date(0, 2, 10)).name == "Light"
    assert eng.season_for(eng.date(0, 3, 1)).name == "Dark"
    assert eng.season_for(eng.date(0, 4, 10)).name == "Dark"

def test_dates_between_bounded_seasons_have_no_season():
    eng = _quarters(
        Season("Wet", start_month=1, end_month=1, end_day=10),
        Season("Dry", start_month=3, start_day=1, end_month=3, end_day=5),
    )
    assert eng.season_for(eng.date(0, 1, 10)).name == "Wet"
    assert eng.season_for(eng.date(0, 2, 5)) is None
    assert eng.season_for(eng.date(0, 3, 5)).name == "Dry"
    assert eng.season_for(eng.date(0, 3, 6)) is None

def test_bounded_season_crossing_the_year_end():
    eng = _quarters(
        Season("Frost", start_month=4, start_day=6, end_month=1, end_day=5),
        Season("Bloom", start_month=2, end_month=3),
    )
    assert eng.season_for(eng.date(0, 4, 6)).name == "Frost"
    assert eng.season_for(eng.date(1, 1, 3)).name == "Frost"
    assert eng.season_for(eng.date(1, 1, 6)) is None
    assert eng.season_for(eng.date(1, 3, 10)).name == "Bloom"
    assert eng.season_for(eng.date(1, 4, 5)) is None

def test_end_month_without_end_day_covers_the_whole_month():
    eng = _quarters(Season("Long", start_month=2, start_day=5, end_month=3))
    assert eng.season_for(eng.date(0, 3, 10)).name == "Long"
    assert eng.season_for(eng.date(0, 2, 4)) is None

def test_intercalary_days_belong_to_the_surrounding_season():
    eng = CalendarEngine(HARPTOS)
    # Midwinter follows Hammer, inside Winter (starts Nightal 20)
    assert eng.season_for(eng.date(1372, 1, 1, intercalary="Midwinter")).name == "Winter"

def test_bad_season_bounds_and_times_are_rejected():
    with pytest.raises(MalformedDefinitionError):
        Season("Bad", start_month=1, end_month=0)
    with pytest.raises(MalformedDefinitionError):
        Season("Bad", start_month=1, sunrise="dawn")


# ------------------------------------------------------------
# Sunrise and sunset
# ------------------------------------------------------------

def test_interpolates_towards_the_next_season():
    eng = _quarters(*LIGHT_DARK)
    assert eng.sunrise_sunset(eng.date(0, 1, 1)) == pytest.approx((4.0, 20.0))
    # halfway from Light (day 0) to Dark (day 20)
    assert eng.sunrise_sunset(eng.date(0, 2, 1)) == pytest.approx((6.0, 18.0))
    # Dark wraps back to Light: 15 of 20 days in
    assert eng.sunrise_sunset(eng.date(0, 4, 6)) == pytest.approx((5.0, 19.0))

def test_gap_and_seasonless_calendars_split_the_day():
    gap = _quarters(Season("Wet", start_month=1, end_month=1))
    assert gap.sunrise_sunset(gap.date(0, 2, 1)) == pytest.approx((6.0, 18.0))
    bare = _quarters(time=TimeUnits(hours_per_day=20))
    assert bare.sunrise_sunset(bare.date(0, 1, 1)) == pytest.approx((5.0, 15.0))

def test_gregorian_defaults_by_season_name():
    eng = CalendarEngine(GREGORIAN)
    assert eng.sunrise_sunset(eng.date(2024, 3, 20)) == pytest.approx((6.5, 17.75))
    assert eng.sunrise_sunset(eng.date(2024, 6, 21)) == pytest.approx((5.75, 20.25))
    rise, sset = eng.sunrise_sunset(eng.date(2024, 5, 5))
    assert 5.75 < rise < 6.5
    assert 17.75 < sset < 20.25

def test_unnamed_season_without_times_uses_the_split():
    eng = _quarters(Season("Odd", start_month=1), Season("Even", start_month=3))
    assert eng.sunrise_sunset(eng.date(0, 2, 1)) == pytest.approx((6.0, 18.0))

def test_clock_conversion_uses_calendar_minutes():
    units = TimeUnits(hours_per_day=20, minutes_per_hour=100)
    assert clock_to_hours("05:50", units) == pytest.approx(5.5)
    assert hours_to_clock(5.5, units) == "05:50"
    assert hours_to_clock(6.999, UNITS) == "07:00"
