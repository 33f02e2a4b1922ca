"""
worldcal.engines.recurrence
---------------------------
Where a recurrence rule lands in a given year, and bounded forward/backward
search for the nearest occurrence around a date.

Every miss (rule inactive this year, day missing under the "skip" policy,
no k-th weekday match, weekday-less calendar) is reported as None.
Weekdays always come from CalendarEngine.weekday_for.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from worldcal.core.types import (
    FixedRecurrence,
    IntervalRecurrence,
    MonthlyRecurrence,
    Occurrence,
    OrdinalRecurrence,
    RecurrenceRule,
    StructuredDate,
)
from worldcal.engines.calendar import CalendarEngine

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_YEARS = 10


class EventRecurrenceCalculator:
    def __init__(self, engine: CalendarEngine, horizon_years: int = DEFAULT_HORIZON_YEARS):
        if horizon_years < 0:
            raise ValueError("horizon_years must be non-negative")
        self.engine = engine
        self.horizon_years = horizon_years

    # ---------------------------------------------------------
    # Per-year resolution
    # ---------------------------------------------------------

    def occurrence_in_year(self, rule: RecurrenceRule, year: int) -> Optional[Occurrence]:
        if isinstance(rule, FixedRecurrence):
            if rule.leap_year_only and not self.engine.is_leap_year(year):
                return None
            return self._fixed_day(rule.month, rule.day, rule.if_day_not_exists, year)
        if isinstance(rule, OrdinalRecurrence):
            return self._ordinal(rule, year)
        if isinstance(rule, IntervalRecurrence):
            if (year - rule.anchor_year) % rule.interval_years != 0:
                return None
            return self._fixed_day(rule.month, rule.day, rule.if_day_not_exists, year)
        if isinstance(rule, MonthlyRecurrence):
            found = self.occurrences_in_year(rule, year)
            return found[0] if found else None
        raise TypeError(f"Unknown recurrence rule type: {type(rule)}")

    def occurrences_in_year(self, rule: RecurrenceRule, year: int) -> List[Occurrence]:
        """All landings of `rule` in `year`. Only monthly rules can land more than once."""
        if isinstance(rule, MonthlyRecurrence):
            return [
                Occurrence(month, rule.day)
                for month in range(1, self.engine.month_count + 1)
                if rule.day <= self.engine.month_length(month, year)
            ]
        occ = self.occurrence_in_year(rule, year)
        return [] if occ is None else [occ]

    def _fixed_day(self, month: int, day: int, policy: str, year: int) -> Optional[Occurrence]:
        length = self.engine.month_length(month, year)
        if length == 0:
            return None
        if day <= length:
            return Occurrence(month, day)
        if policy in ("lastDay", "beforeDay"):
            return Occurrence(month, length)
        if policy == "afterDay":
            if month == self.engine.month_count:
                return Occurrence(1, 1, year_offset=1)
            return Occurrence(month + 1, 1)
        return None

    def _ordinal(self, rule: OrdinalRecurrence, year: int) -> Optional[Occurrence]:
        if not self.engine.definition.has_weekdays:
            return None
        if self.engine.month_length(rule.month, year) == 0:
            return None
        matches = [
            i + 1
            for i, wd in enumerate(self.engine.weekdays_in_month(year, rule.month))
            if wd == rule.weekday
        ]
        if not matches:
            return None
        if rule.occurrence == -1:
            return Occurrence(rule.month, matches[-1])
        if rule.occurrence > len(matches):
            return None
        return Occurrence(rule.month, matches[rule.occurrence - 1])

    def dates_in_year(self, rule: RecurrenceRule, year: int) -> List[StructuredDate]:
        """Occurrences generated by `year`'s rule evaluation as full dates (weekday filled)."""
        return [
            self.engine.date(year + occ.year_offset, occ.month, occ.day)
            for occ in self.occurrences_in_year(rule, year)
        ]

    # ---------------------------------------------------------
    # Bounded search
    # ---------------------------------------------------------

    def next_occurrence(self, rule: RecurrenceRule, after: StructuredDate) -> Optional[StructuredDate]:
        return self.search(lambda y: self.dates_in_year(rule, y), after, forward=True)

    def previous_occurrence(self, rule: RecurrenceRule, before: StructuredDate) -> Optional[StructuredDate]:
        return self.search(lambda y: self.dates_in_year(rule, y), before, forward=False)

    def search(
        self,
        dates_for_year: Callable[[int], Iterable[StructuredDate]],
        origin: StructuredDate,
        forward: bool = True,
    ) -> Optional[StructuredDate]:
        """
        Nearest date strictly after (forward) or before `origin`, by whole days,
        landing no further than `horizon_years` years from origin.year.

        Scanning is per year rather than per day: each year's candidates are
        produced once and compared by day count, which gives the same answer as
        a day-by-day walk. The year preceding each window edge is evaluated too,
        because an afterDay shift can carry an occurrence into the next year.
        """
        eng = self.engine
        origin_days = eng.date_to_days(origin)
        lo_year = origin.year if forward else origin.year - self.horizon_years
        hi_year = origin.year + self.horizon_years if forward else origin.year

        best: Optional[StructuredDate] = None
        best_days = 0
        for year in range(lo_year - 1, hi_year + 1):
            for d in dates_for_year(year):
                if not lo_year <= d.year <= hi_year:
                    continue
                days = eng.date_to_days(d)
                if forward and days > origin_days and (best is None or days < best_days):
                    best, best_days = d, days
                elif not forward and days < origin_days and (best is None or days > best_days):
                    best, best_days = d, days

        if best is None:
            logger.debug(
                "No occurrence within %d years %s %s", self.horizon_years,
                "after" if forward else "before", origin,
            )
        return best
