"""
worldcal.engines.leap
---------------------
Leap-year predicates and the extra-day allocation they grant to one named month.

All functions are total over signed years: Python's floor modulo keeps the
custom-interval test correct for years before the rule's offset.
"""

from __future__ import annotations

from worldcal.core.types import LeapYearRule

GREGORIAN_CYCLE = 400


def is_leap_year(rule: LeapYearRule, year: int) -> bool:
    if rule.rule == "none":
        return False
    if rule.rule == "gregorian":
        return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)
    if rule.rule == "custom":
        return (year - rule.offset) % rule.interval == 0
    return False

def extra_days_for_month(rule: LeapYearRule, year: int, month_name: str) -> int:
    """Extra days granted to `month_name` in `year` (0 unless a leap year for the rule's month)."""
    if rule.month is None or rule.month != month_name:
        return 0
    if not is_leap_year(rule, year):
        return 0
    return rule.extra_days

def cycle_years(rule: LeapYearRule) -> int:
    """
    Period (in years) after which the leap pattern repeats.
    Year lengths of any calendar driven by this rule share the same period.
    """
    if rule.rule == "gregorian":
        return GREGORIAN_CYCLE
    if rule.rule == "custom":
        return rule.interval
    return 1


class LeapYearEvaluator:
    """Binds a LeapYearRule so callers can ask about years without passing the rule around."""
    def __init__(self, rule: LeapYearRule):
        self.rule = rule

    def is_leap_year(self, year: int) -> bool:
        return is_leap_year(self.rule, year)

    def extra_days_for_month(self, year: int, month_name: str) -> int:
        return extra_days_for_month(self.rule, year, month_name)

    @property
    def cycle_years(self) -> int:
        return cycle_years(self.rule)
