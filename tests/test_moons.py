# tests/test_moons.py

import random

import pytest

from worldcal.core.types import CalendarDefinition, Month, MoonDefinition, MoonPhase, MoonReference, Weekday
from worldcal.engines.calendar import CalendarEngine
from worldcal.engines.moons import cycle_position
from worldcal.engines.specs import GREGORIAN, HARPTOS


def _lunar(cycle: float = 28, phases=None) -> CalendarEngine:
    if phases is None:
        phases = (MoonPhase("New Moon", 14), MoonPhase("Full Moon", 1, single_day=True), MoonPhase("Waning", 13))
    defn = CalendarDefinition(
        id="lunar",
        months=tuple(Month(f"M{i}", 28) for i in range(1, 13)),
        weekdays=tuple(Weekday(n) for n in "ABCDEFG"),
        moons=(MoonDefinition("Pale", cycle, MoonReference(0, 1, 1), phases),),
    )
    return CalendarEngine(defn)


@pytest.mark.parametrize("year", [-7, -1, 0, 1, 12, 400])
def test_full_moon_on_the_fifteenth_of_every_month(year):
    eng = _lunar()
    for month in range(1, 13):
        (info,) = eng.moon_phases(eng.date(year, month, 15))
        assert info.phase.name == "Full Moon"
        assert info.phase_index == 1
        assert info.day_in_phase == 0
        assert info.days_until_next == 1

def test_reference_day_is_new_moon():
    eng = _lunar()
    (info,) = eng.moon_phases(eng.date(0, 1, 1))
    assert info.phase.name == "New Moon"
    assert info.day_in_phase_exact == 0.0
    assert info.days_until_next_exact == 14.0
    assert info.phase_progress == 0.0

def test_zero_cycle_reports_nothing():
    assert _lunar(cycle=0).moon_phases(_lunar(cycle=0).date(5, 1, 1)) == []

def test_zero_length_phases_report_nothing():
    eng = _lunar(phases=(MoonPhase("Void", 0),))
    assert eng.moon_phases(eng.date(0, 2, 3)) == []

def test_cycle_position_never_negative():
    moon = MoonDefinition("Pale", 29.5, MoonReference(0, 1, 1))
    assert cycle_position(moon, -1) == pytest.approx(28.5)
    assert cycle_position(moon, 59) == pytest.approx(0.0)

def test_values_stay_in_bounds():
    random.seed(11)
    for definition in (GREGORIAN, HARPTOS):
        eng = CalendarEngine(definition)
        for _ in range(500):
            t = random.randint(-10**11, 10**11)
            for info in eng.moon_phases_at(t):
                assert 0.0 <= info.phase_progress <= 1.0
                assert 0.0 <= info.day_in_phase_exact <= info.phase.length
                assert info.days_until_next_exact >= 0.0
                assert 0 <= info.phase_index < len(info.moon.phases)

def test_filter_by_moon_name():
    eng = CalendarEngine(GREGORIAN)
    d = eng.date(2024, 1, 1)
    assert [p.moon.name for p in eng.moon_phases(d, "Luna")] == ["Luna"]
    assert eng.moon_phases(d, "Phobos") == []

def test_luna_reference_new_moon():
    eng = CalendarEngine(GREGORIAN)
    (info,) = eng.moon_phases(eng.date(2000, 1, 6))
    assert info.phase.name == "New Moon"
