from __future__ import annotations

from typing import Dict, Sequence, Tuple

from ..core.types import (
    CalendarDefinition,
    CalendarEvent,
    CanonicalHour,
    FixedRecurrence,
    IntercalaryDay,
    LeapYearRule,
    Month,
    MoonDefinition,
    MoonPhase,
    MoonReference,
    OrdinalRecurrence,
    Season,
    VariantOverride,
    WeekConfig,
    Weekday,
    YearConfig,
)


def _months(*pairs: Tuple[str, int]) -> Tuple[Month, ...]:
    return tuple(Month(name, days) for name, days in pairs)

def _weekdays(names: Sequence[str]) -> Tuple[Weekday, ...]:
    return tuple(Weekday(n, abbreviation=n[:3]) for n in names)

def _eight_phases(quarter: float, cycle: float) -> Tuple[MoonPhase, ...]:
    """Standard eight-phase cycle: four one-day principal phases, four waxing/waning spans."""
    span = (cycle - 4) / 4
    spans = [round(span, 2)] * 3
    spans.append(round(cycle - 4 - sum(spans), 2))
    return (
        MoonPhase("New Moon", quarter, single_day=True, icon="new"),
        MoonPhase("Waxing Crescent", spans[0], icon="waxing-crescent"),
        MoonPhase("First Quarter", quarter, single_day=True, icon="first-quarter"),
        MoonPhase("Waxing Gibbous", spans[1], icon="waxing-gibbous"),
        MoonPhase("Full Moon", quarter, single_day=True, icon="full"),
        MoonPhase("Waning Gibbous", spans[2], icon="waning-gibbous"),
        MoonPhase("Last Quarter", quarter, single_day=True, icon="last-quarter"),
        MoonPhase("Waning Crescent", spans[3], icon="waning-crescent"),
    )


# ============================================================
# GREGORIAN
# ============================================================

# World time 0 is 1970-01-01, a Thursday.
GREGORIAN = CalendarDefinition(
    id="gregorian",
    name="Gregorian Calendar",
    months=_months(
        ("January", 31), ("February", 28), ("March", 31), ("April", 30),
        ("May", 31), ("June", 30), ("July", 31), ("August", 31),
        ("September", 30), ("October", 31), ("November", 30), ("December", 31),
    ),
    weekdays=_weekdays(["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]),
    year=YearConfig(epoch=1970, current_year=2024, suffix=" CE", start_day=4),
    leap_year=LeapYearRule(rule="gregorian", month="February", extra_days=1),
    seasons=(
        Season("Spring", start_month=3, start_day=20),
        Season("Summer", start_month=6, start_day=21),
        Season("Autumn", start_month=9, start_day=22),
        Season("Winter", start_month=12, start_day=21),
    ),
    moons=(
        MoonDefinition(
            name="Luna",
            cycle_length=29.53,
            first_new_moon=MoonReference(2000, 1, 6),
            phases=_eight_phases(1, 29.53),
            color="#f5f5dc",
        ),
    ),
    events=(
        CalendarEvent("new-year", "New Year's Day", FixedRecurrence(1, 1)),
        CalendarEvent("leap-day", "Leap Day", FixedRecurrence(2, 29, leap_year_only=True)),
        CalendarEvent("thanksgiving", "Thanksgiving", OrdinalRecurrence(month=11, weekday=4, occurrence=4)),
    ),
    weeks=WeekConfig(days_per_week=7, naming="numeric"),
    date_formats={
        "iso": "{{year}}-{{month}}-{{day}}",
        "widgets": {"mini": "{{month:short}} {{day}}", "main": "{{weekday}}, {{month}} {{day}}"},
    },
)


# ============================================================
# HARPTOS (Forgotten Realms)
# ============================================================

_HARPTOS_MONTHS = (
    "Hammer", "Alturiak", "Ches", "Tarsakh", "Mirtul", "Kythorn",
    "Flamerule", "Eleasis", "Eleint", "Marpenoth", "Uktar", "Nightal",
)

HARPTOS = CalendarDefinition(
    id="harptos",
    name="Calendar of Harptos",
    months=_months(*((m, 30) for m in _HARPTOS_MONTHS)),
    weekdays=_weekdays([
        "First-day", "Second-day", "Third-day", "Fourth-day", "Fifth-day",
        "Sixth-day", "Seventh-day", "Eighth-day", "Ninth-day", "Tenth-day",
    ]),
    year=YearConfig(epoch=0, current_year=1495, suffix=" DR"),
    # Shieldmeet is the only leap effect: no month gains a day.
    leap_year=LeapYearRule(rule="custom", interval=4, offset=0),
    intercalary=(
        IntercalaryDay("Midwinter", after="Hammer", counts_for_weekdays=False),
        IntercalaryDay("Greengrass", after="Tarsakh", counts_for_weekdays=False),
        IntercalaryDay("Midsummer", after="Flamerule", counts_for_weekdays=False),
        IntercalaryDay("Shieldmeet", after="Flamerule", leap_year_only=True, counts_for_weekdays=False),
        IntercalaryDay("Highharvestide", after="Eleint", counts_for_weekdays=False),
        IntercalaryDay("Feast of the Moon", after="Uktar", counts_for_weekdays=False),
    ),
    seasons=(
        Season("Spring", start_month=3, start_day=19),
        Season("Summer", start_month=6, start_day=20),
        Season("Autumn", start_month=9, start_day=21),
        Season("Winter", start_month=12, start_day=20),
    ),
    moons=(
        MoonDefinition(
            name="Selune",
            cycle_length=30.4375,
            first_new_moon=MoonReference(1372, 1, 1),
            phases=_eight_phases(1, 30.4375),
            color="#e8e8ff",
        ),
    ),
    canonical_hours=(
        CanonicalHour("Dawn", start_hour=5, end_hour=7),
        CanonicalHour("Morning", start_hour=7, end_hour=12),
        CanonicalHour("Highsun", start_hour=12, end_hour=13),
        CanonicalHour("Afternoon", start_hour=13, end_hour=17),
        CanonicalHour("Dusk", start_hour=17, end_hour=19),
        CanonicalHour("Evening", start_hour=19, end_hour=22),
        CanonicalHour("Night", start_hour=22, end_hour=5),
    ),
    weeks=WeekConfig(per_month=3, days_per_week=10, naming="ordinal"),
)


# ============================================================
# GOLARION (Pathfinder)
# ============================================================

GOLARION = CalendarDefinition(
    id="golarion",
    name="Golarion Calendar",
    months=_months(
        ("Abadius", 31), ("Calistril", 28), ("Pharast", 31), ("Gozran", 30),
        ("Desnus", 31), ("Sarenith", 30), ("Erastus", 31), ("Arodus", 31),
        ("Rova", 30), ("Lamashan", 31), ("Neth", 30), ("Kuthona", 31),
    ),
    weekdays=_weekdays(["Moonday", "Toilday", "Wealday", "Oathday", "Fireday", "Starday", "Sunday"]),
    year=YearConfig(epoch=0, current_year=4725, suffix=" AR"),
    leap_year=LeapYearRule(rule="custom", interval=8, offset=0, month="Calistril", extra_days=1),
    moons=(
        MoonDefinition(
            name="Somal",
            cycle_length=29.5,
            first_new_moon=MoonReference(4700, 1, 1),
            phases=_eight_phases(1, 29.5),
        ),
    ),
    date_formats={"widgets": {"mini": "{{day}} {{month:short}}", "main": "{{weekday}}, {{day}} {{month}}"}},
    variants={
        "absalom-reckoning": VariantOverride(
            name="Absalom Reckoning",
            description="Years counted from the founding of Absalom.",
            default=True,
        ),
        "imperial-calendar": VariantOverride(
            name="Imperial Calendar",
            description="Chelish reckoning, five centuries ahead of Absalom Reckoning.",
            year_offset=500,
            year={"suffix": " IC"},
            date_formats={"widgets": {"mini": "{{day}} {{month:short}} IC"}},
        ),
    },
)


ALL_SPECS: Dict[str, CalendarDefinition] = {
    "gregorian": GREGORIAN,
    "harptos": HARPTOS,
    "golarion": GOLARION,
}
