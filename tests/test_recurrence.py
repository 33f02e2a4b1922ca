# tests/test_recurrence.py

import pytest

from worldcal.core.errors import MalformedDefinitionError
from worldcal.core.types import (
    CalendarDefinition,
    FixedRecurrence,
    IntervalRecurrence,
    Month,
    MonthlyRecurrence,
    Occurrence,
    OrdinalRecurrence,
    StructuredDate,
)
from worldcal.engines.calendar import CalendarEngine
from worldcal.engines.recurrence import EventRecurrenceCalculator
from worldcal.engines.specs import GREGORIAN

GREG = CalendarEngine(GREGORIAN)
CALC = EventRecurrenceCalculator(GREG)


@pytest.mark.parametrize(
    "policy,year,expected",
    [
        ("lastDay", 2023, Occurrence(2, 28)),
        ("beforeDay", 2023, Occurrence(2, 28)),
        ("afterDay", 2023, Occurrence(3, 1)),
        ("skip", 2023, None),
        ("lastDay", 2024, Occurrence(2, 29)),
        ("afterDay", 2024, Occurrence(3, 1)),
    ],
)
def test_missing_day_policies(policy, year, expected):
    rule = FixedRecurrence(2, 30, if_day_not_exists=policy)
    assert CALC.occurrence_in_year(rule, year) == expected

def test_after_day_wraps_into_next_year():
    rule = FixedRecurrence(12, 32, if_day_not_exists="afterDay")
    assert CALC.occurrence_in_year(rule, 2024) == Occurrence(1, 1, year_offset=1)
    assert CALC.dates_in_year(rule, 2024) == [GREG.date(2025, 1, 1)]

def test_unknown_policy_is_rejected():
    with pytest.raises(MalformedDefinitionError):
        FixedRecurrence(2, 30, if_day_not_exists="nearest")

def test_fixed_leap_year_only():
    rule = FixedRecurrence(2, 29, leap_year_only=True)
    assert CALC.occurrence_in_year(rule, 2024) == Occurrence(2, 29)
    assert CALC.occurrence_in_year(rule, 2023) is None
    assert CALC.occurrence_in_year(rule, 1900) is None

def test_ordinal_weekday_rules():
    # November 2024: Thursdays fall on 7, 14, 21, 28
    assert CALC.occurrence_in_year(OrdinalRecurrence(11, 4, 4), 2024) == Occurrence(11, 28)
    assert CALC.occurrence_in_year(OrdinalRecurrence(11, 4, -1), 2024) == Occurrence(11, 28)
    assert CALC.occurrence_in_year(OrdinalRecurrence(11, 4, 1), 2024) == Occurrence(11, 7)
    assert CALC.occurrence_in_year(OrdinalRecurrence(11, 4, 5), 2024) is None
    # February 2024 has five Thursdays
    assert CALC.occurrence_in_year(OrdinalRecurrence(2, 4, 5), 2024) == Occurrence(2, 29)

def test_ordinal_rule_without_weekdays():
    defn = CalendarDefinition(id="plain", months=(Month("Only", 30),), weekdays=())
    calc = EventRecurrenceCalculator(CalendarEngine(defn))
    assert calc.occurrence_in_year(OrdinalRecurrence(1, 0, 1), 5) is None

def test_interval_rule_uses_anchor_year():
    rule = IntervalRecurrence(anchor_year=2024, interval_years=4, month=7, day=4)
    assert CALC.occurrence_in_year(rule, 2024) == Occurrence(7, 4)
    assert CALC.occurrence_in_year(rule, 2028) == Occurrence(7, 4)
    assert CALC.occurrence_in_year(rule, 2020) == Occurrence(7, 4)
    assert CALC.occurrence_in_year(rule, 2023) is None
    assert CALC.occurrence_in_year(rule, 2025) is None

def test_monthly_rule_lands_in_every_month_that_has_the_day():
    rule = MonthlyRecurrence(31)
    months = [o.month for o in CALC.occurrences_in_year(rule, 2024)]
    assert months == [1, 3, 5, 7, 8, 10, 12]
    assert CALC.occurrence_in_year(rule, 2024) == Occurrence(1, 31)

def test_next_and_previous_are_exclusive():
    rule = FixedRecurrence(1, 1)
    nxt = CALC.next_occurrence(rule, GREG.date(2024, 6, 1))
    assert nxt == StructuredDate(2025, 1, 1, 3)
    prev = CALC.previous_occurrence(rule, GREG.date(2024, 6, 1))
    assert prev == StructuredDate(2024, 1, 1, 1)
    # an occurrence on the origin day itself does not count
    assert CALC.next_occurrence(rule, GREG.date(2024, 1, 1, 12)) == GREG.date(2025, 1, 1)
    assert CALC.previous_occurrence(rule, GREG.date(2024, 1, 1)) == GREG.date(2023, 1, 1)

def test_next_leap_day():
    rule = FixedRecurrence(2, 29, leap_year_only=True)
    assert CALC.next_occurrence(rule, GREG.date(2025, 3, 1)) == StructuredDate(2028, 2, 29, 2)
    assert CALC.previous_occurrence(rule, GREG.date(2025, 3, 1)) == GREG.date(2024, 2, 29)

def test_search_horizon_bounds_the_scan():
    rule = IntervalRecurrence(anchor_year=2000, interval_years=50, month=1, day=1)
    origin = GREG.date(2030, 6, 1)
    assert CALC.next_occurrence(rule, origin) is None
    wide = EventRecurrenceCalculator(GREG, horizon_years=20)
    assert wide.next_occurrence(rule, origin) == GREG.date(2050, 1, 1)
    assert wide.previous_occurrence(rule, origin) is None
    assert EventRecurrenceCalculator(GREG, horizon_years=30).previous_occurrence(rule, origin) == GREG.date(2000, 1, 1)

def test_previous_crosses_wrapped_occurrence():
    # day 32 of December lands on January 1 of the following year
    rule = FixedRecurrence(12, 32, if_day_not_exists="afterDay")
    prev = CALC.previous_occurrence(rule, GREG.date(2025, 6, 1))
    assert prev == GREG.date(2025, 1, 1)

def test_negative_horizon_is_rejected():
    with pytest.raises(ValueError):
        EventRecurrenceCalculator(GREG, horizon_years=-1)
