# tests/test_leap.py

import pytest

from worldcal.core.errors import MalformedDefinitionError
from worldcal.core.types import LeapYearRule
from worldcal.engines.leap import LeapYearEvaluator, cycle_years, extra_days_for_month, is_leap_year

GREG = LeapYearRule(rule="gregorian", month="February", extra_days=1)


@pytest.mark.parametrize("year,expected", [(2000, True), (1900, False), (2024, True), (2023, False)])
def test_gregorian_samples(year, expected):
    assert is_leap_year(GREG, year) is expected

def test_gregorian_negative_years():
    # proleptic: year 0 and -400 are leap, -100 is not
    assert is_leap_year(GREG, 0)
    assert is_leap_year(GREG, -4)
    assert is_leap_year(GREG, -400)
    assert not is_leap_year(GREG, -100)
    assert not is_leap_year(GREG, -1)

def test_custom_interval_offset_is_sign_correct():
    rule = LeapYearRule(rule="custom", interval=8, offset=3)
    leaps = [y for y in range(-20, 21) if is_leap_year(rule, y)]
    assert leaps == [-13, -5, 3, 11, 19]

def test_none_rule_never_leaps():
    rule = LeapYearRule()
    assert not any(is_leap_year(rule, y) for y in range(-50, 50))
    assert cycle_years(rule) == 1

def test_aliases_normalize_to_custom():
    assert LeapYearRule(rule="fixed-interval").rule == "custom"
    assert LeapYearRule(rule="custom-interval", interval=5).rule == "custom"
    with pytest.raises(MalformedDefinitionError):
        LeapYearRule(rule="lunar")
    with pytest.raises(MalformedDefinitionError):
        LeapYearRule(rule="custom", interval=0)

def test_extra_days_only_for_named_month_in_leap_years():
    assert extra_days_for_month(GREG, 2024, "February") == 1
    assert extra_days_for_month(GREG, 2023, "February") == 0
    assert extra_days_for_month(GREG, 2024, "March") == 0

def test_evaluator_binds_rule():
    ev = LeapYearEvaluator(LeapYearRule(rule="custom", interval=4, month="Hammer", extra_days=2))
    assert ev.is_leap_year(8)
    assert ev.extra_days_for_month(8, "Hammer") == 2
    assert ev.cycle_years == 4
    assert LeapYearEvaluator(GREG).cycle_years == 400
