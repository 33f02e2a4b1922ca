"""
worldcal.engines.calendar
-------------------------
The calendar engine. Maps a signed world-time second count to a StructuredDate
and back for one CalendarDefinition, and answers every structural question
(year/month lengths, weekdays, intercalary placement) the other engines need.

A year is laid out as a flat sequence of segments: for each month, the
intercalary spans declared `before` it, the month itself, then the spans
declared `after` it. Day counting walks that sequence; whole years are skipped
in leap-cycle strides so long walks stay cheap without any global table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from worldcal.core.errors import InvalidDateError, MalformedDefinitionError
from worldcal.core.time import hms_to_seconds, is_valid_hms, seconds_to_hms, split_world_time
from worldcal.core.types import (
    CalendarDefinition,
    CanonicalHour,
    IntercalaryDay,
    MoonPhaseInfo,
    Season,
    StructuredDate,
    WeekName,
)
from worldcal.engines import daylight as _daylight
from worldcal.engines import moons as _moons
from worldcal.engines.leap import LeapYearEvaluator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Segment:
    month: int  # 1-based; anchor month for intercalary spans
    length: int
    intercalary: Optional[str] = None
    counts_for_weekdays: bool = True

@dataclass(frozen=True)
class YearLayout:
    is_leap: bool
    month_lengths: Tuple[int, ...]
    segments: Tuple[Segment, ...]
    total_days: int
    weekday_days: int


class CalendarEngine:
    """
    Pure computation over one immutable CalendarDefinition.
    Per-year layouts are memoized; the cache only ever gains identical values,
    so concurrent readers can share one engine.
    """
    def __init__(self, definition: CalendarDefinition):
        self.definition = definition
        self.leap = LeapYearEvaluator(definition.leap_year)
        self._layouts: Dict[int, YearLayout] = {}  # keyed by position in the leap cycle
        self._cycle: Optional[Tuple[int, int, int]] = None
        self._clamp_warned = False

        names = set(definition.month_names)
        kept: List[IntercalaryDay] = []
        for ic in definition.intercalary:
            if ic.anchor not in names:
                logger.warning(
                    "Calendar %s: intercalary day '%s' refers to unknown month '%s'; ignoring it",
                    definition.id, ic.name, ic.anchor,
                )
                continue
            kept.append(ic)
        self._intercalary: Tuple[IntercalaryDay, ...] = tuple(kept)

        for moon in definition.moons:
            ref = moon.first_new_moon
            if self._find_segment(ref.year, ref.month, None) is None or not (
                1 <= ref.day <= self.month_length(ref.month, ref.year)
            ):
                raise MalformedDefinitionError(
                    f"Calendar '{definition.id}': moon '{moon.name}' reference new moon "
                    f"{ref.year}-{ref.month}-{ref.day} is not a valid date"
                )

        self._offset_seconds = self._world_time_offset_days() * definition.time.seconds_per_day

    # ---------------------------------------------------------
    # Basic properties
    # ---------------------------------------------------------

    @property
    def id(self) -> str:
        return self.definition.id

    @property
    def weekday_count(self) -> int:
        return len(self.definition.weekdays)

    @property
    def month_count(self) -> int:
        return len(self.definition.months)

    def info(self) -> Dict[str, Any]:
        d = self.definition
        return {
            "id": d.id,
            "label": d.label,
            "months": len(d.months),
            "weekdays": len(d.weekdays),
            "leap_rule": d.leap_year.rule,
            "epoch": d.year.epoch,
            "seconds_per_day": d.time.seconds_per_day,
        }

    # ---------------------------------------------------------
    # Year structure
    # ---------------------------------------------------------

    def is_leap_year(self, year: int) -> bool:
        return self.leap.is_leap_year(year)

    def layout(self, year: int) -> YearLayout:
        """
        Structure of `year`. A layout depends only on the year's position in the
        leap cycle, so the memo holds at most one leap cycle of entries.
        """
        key = (year - self.definition.year.epoch) % self.leap.cycle_years
        cached = self._layouts.get(key)
        if cached is not None:
            return cached
        return self._layouts.setdefault(key, self._build_layout(year))

    def _build_layout(self, year: int) -> YearLayout:
        d = self.definition
        leap = self.leap.is_leap_year(year)

        lengths: List[int] = []
        for m in d.months:
            n = m.days + self.leap.extra_days_for_month(year, m.name)
            if n < 1:
                if not self._clamp_warned:
                    logger.warning(
                        "Calendar %s: month '%s' clamped to 1 day in leap years (was %d)",
                        d.id, m.name, n,
                    )
                    self._clamp_warned = True
                n = 1
            lengths.append(n)

        active = [ic for ic in self._intercalary if leap or not ic.leap_year_only]
        segments: List[Segment] = []
        for i, m in enumerate(d.months, start=1):
            for ic in active:
                if ic.before == m.name:
                    segments.append(Segment(i, ic.days, ic.name, ic.counts_for_weekdays))
            segments.append(Segment(i, lengths[i - 1]))
            for ic in active:
                if ic.after == m.name:
                    segments.append(Segment(i, ic.days, ic.name, ic.counts_for_weekdays))

        return YearLayout(
            is_leap=leap,
            month_lengths=tuple(lengths),
            segments=tuple(segments),
            total_days=sum(s.length for s in segments),
            weekday_days=sum(s.length for s in segments if s.counts_for_weekdays),
        )

    def year_length(self, year: int) -> int:
        return self.layout(year).total_days

    def month_lengths(self, year: int) -> Tuple[int, ...]:
        return self.layout(year).month_lengths

    def month_length(self, month: int, year: int) -> int:
        """Leap-adjusted length of `month` in `year`; 0 for a month index that does not exist."""
        if not 1 <= month <= self.month_count:
            return 0
        return self.layout(year).month_lengths[month - 1]

    def intercalary_days(self, year: int) -> Tuple[IntercalaryDay, ...]:
        leap = self.leap.is_leap_year(year)
        return tuple(ic for ic in self._intercalary if leap or not ic.leap_year_only)

    def intercalary_after_month(self, year: int, month: int) -> Tuple[IntercalaryDay, ...]:
        if not 1 <= month <= self.month_count:
            return ()
        name = self.definition.months[month - 1].name
        return tuple(ic for ic in self.intercalary_days(year) if ic.after == name)

    def intercalary_before_month(self, year: int, month: int) -> Tuple[IntercalaryDay, ...]:
        if not 1 <= month <= self.month_count:
            return ()
        name = self.definition.months[month - 1].name
        return tuple(ic for ic in self.intercalary_days(year) if ic.before == name)

    # ---------------------------------------------------------
    # Whole-year day counting
    # ---------------------------------------------------------

    def _cycle_totals(self) -> Tuple[int, int, int]:
        """(years, days, weekday-counting days) in one full leap cycle."""
        if self._cycle is None:
            period = self.leap.cycle_years
            start = self.definition.year.epoch
            days = 0
            wdays = 0
            for i in range(period):
                lay = self.layout(start + i)
                days += lay.total_days
                wdays += lay.weekday_days
            self._cycle = (period, days, wdays)
        return self._cycle

    def days_before_year(self, year: int) -> int:
        """Days from the first day of the epoch year to the first day of `year` (negative before it)."""
        period, cdays, _ = self._cycle_totals()
        epoch = self.definition.year.epoch
        q, r = divmod(year - epoch, period)
        start = epoch + q * period
        return q * cdays + sum(self.layout(start + i).total_days for i in range(r))

    def _weekday_days_before_year(self, year: int) -> int:
        period, _, cwdays = self._cycle_totals()
        epoch = self.definition.year.epoch
        q, r = divmod(year - epoch, period)
        start = epoch + q * period
        return q * cwdays + sum(self.layout(start + i).weekday_days for i in range(r))

    def year_for_day(self, days: int) -> Tuple[int, int]:
        """
        Resolve a signed day count since the epoch into (year, 0-based day of year).
        Whole leap cycles are skipped first; the residual walk never exceeds one cycle.
        """
        period, cdays, _ = self._cycle_totals()
        q, rem = divmod(days, cdays)
        year = self.definition.year.epoch + q * period
        while rem >= self.year_length(year):
            rem -= self.year_length(year)
            year += 1
        return year, rem

    # ---------------------------------------------------------
    # Weekdays
    # ---------------------------------------------------------

    def _weekday_from_ordinal(self, counted_days: int) -> Optional[int]:
        """weekday = (start_day + weekday-counting days elapsed) mod weekday count."""
        n = self.weekday_count
        if n == 0:
            return None
        return (self.definition.year.start_day + counted_days) % n

    def weekday_for(self, year: int, month: int, day: int) -> Optional[int]:
        """
        Weekday index of the regular day (year, month, day); None for weekday-less calendars.
        Every component that needs a weekday goes through here.
        """
        if not 1 <= month <= self.month_count:
            raise InvalidDateError(f"Month {month} does not exist in calendar '{self.id}'")
        counted = self._weekday_days_before_year(year)
        for seg in self.layout(year).segments:
            if seg.month == month and seg.intercalary is None:
                break
            if seg.counts_for_weekdays:
                counted += seg.length
        return self._weekday_from_ordinal(counted + day - 1)

    def weekdays_in_month(self, year: int, month: int) -> List[Optional[int]]:
        first = self.weekday_for(year, month, 1)
        length = self.month_length(month, year)
        if first is None:
            return [None] * length
        return [(first + i) % self.weekday_count for i in range(length)]

    # ---------------------------------------------------------
    # Date validation and construction
    # ---------------------------------------------------------

    def _find_segment(self, year: int, month: int, intercalary: Optional[str]) -> Optional[Tuple[int, int, Segment]]:
        """(days before the segment, weekday days before it, segment) within `year`."""
        before = 0
        wbefore = 0
        for seg in self.layout(year).segments:
            if seg.month == month and seg.intercalary == intercalary:
                return before, wbefore, seg
            before += seg.length
            if seg.counts_for_weekdays:
                wbefore += seg.length
        return None

    def validate(self, d: StructuredDate) -> None:
        found = self._find_segment(d.year, d.month, d.intercalary)
        if found is None:
            if d.intercalary is not None:
                raise InvalidDateError(
                    f"Intercalary '{d.intercalary}' does not fall in month {d.month} of year {d.year}"
                )
            raise InvalidDateError(f"Month {d.month} does not exist in calendar '{self.id}'")
        seg = found[2]
        if not 1 <= d.day <= seg.length:
            raise InvalidDateError(
                f"Day {d.day} is out of range 1..{seg.length} for {d.year}-{d.month}"
                + (f" ({d.intercalary})" if d.intercalary else "")
            )
        if not is_valid_hms(d.hour, d.minute, d.second, self.definition.time):
            raise InvalidDateError(f"Time {d.hour}:{d.minute}:{d.second} is out of range")

    def is_valid(self, d: StructuredDate) -> bool:
        try:
            self.validate(d)
        except InvalidDateError:
            return False
        return True

    def date(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        *,
        intercalary: Optional[str] = None,
    ) -> StructuredDate:
        """Build a validated StructuredDate with its weekday filled in."""
        weekday = None
        if intercalary is None and 1 <= month <= self.month_count:
            weekday = self.weekday_for(year, month, day)
        d = StructuredDate(year, month, day, weekday, hour, minute, second, intercalary)
        self.validate(d)
        return d

    # ---------------------------------------------------------
    # Days <-> dates
    # ---------------------------------------------------------

    def date_to_days(self, d: StructuredDate) -> int:
        """Signed day count from the first day of the epoch year to `d`."""
        self.validate(d)
        before, _, _ = self._find_segment(d.year, d.month, d.intercalary)  # type: ignore[misc]
        return self.days_before_year(d.year) + before + d.day - 1

    def days_to_date(self, days: int, seconds_in_day: int = 0) -> StructuredDate:
        year, doy = self.year_for_day(days)
        return self._date_in_year(year, doy, seconds_in_day)

    def _date_in_year(self, year: int, doy: int, seconds_in_day: int) -> StructuredDate:
        hour, minute, second = seconds_to_hms(seconds_in_day, self.definition.time)
        counted = self._weekday_days_before_year(year)
        rem = doy
        for seg in self.layout(year).segments:
            if rem < seg.length:
                if seg.intercalary is not None:
                    return StructuredDate(year, seg.month, rem + 1, None, hour, minute, second, seg.intercalary)
                weekday = self._weekday_from_ordinal(counted + rem)
                return StructuredDate(year, seg.month, rem + 1, weekday, hour, minute, second)
            rem -= seg.length
            if seg.counts_for_weekdays:
                counted += seg.length
        raise RuntimeError(f"day {doy} overflows year {year}")  # pragma: no cover

    def day_of_year(self, d: StructuredDate) -> int:
        """1-based position of `d` within its year, intercalary days included."""
        return self.date_to_days(d) - self.days_before_year(d.year) + 1

    # ---------------------------------------------------------
    # World time <-> dates
    # ---------------------------------------------------------

    def _world_time_offset_days(self) -> int:
        wt = self.definition.world_time
        if wt is None or wt.interpretation == "epoch-based":
            return 0
        return self.days_before_year(wt.current_year) - self.days_before_year(wt.epoch_year)

    def world_time_to_date(self, t: int) -> StructuredDate:
        days, secs = split_world_time(int(t) + self._offset_seconds, self.definition.time)
        return self.days_to_date(days, secs)

    def date_to_world_time(self, d: StructuredDate) -> int:
        days = self.date_to_days(d)
        secs = days * self.definition.time.seconds_per_day
        secs += hms_to_seconds(d.hour, d.minute, d.second, self.definition.time)
        return secs - self._offset_seconds

    # ---------------------------------------------------------
    # Date arithmetic
    # ---------------------------------------------------------

    def add_seconds(self, d: StructuredDate, seconds: int) -> StructuredDate:
        return self.world_time_to_date(self.date_to_world_time(d) + seconds)

    def add_minutes(self, d: StructuredDate, minutes: int) -> StructuredDate:
        return self.add_seconds(d, minutes * self.definition.time.seconds_per_minute)

    def add_hours(self, d: StructuredDate, hours: int) -> StructuredDate:
        return self.add_seconds(d, hours * self.definition.time.seconds_per_hour)

    def add_days(self, d: StructuredDate, days: int) -> StructuredDate:
        secs = hms_to_seconds(d.hour, d.minute, d.second, self.definition.time)
        return self.days_to_date(self.date_to_days(d) + days, secs)

    def add_months(self, d: StructuredDate, months: int) -> StructuredDate:
        """Shift by whole months; the day is clamped to the target month. Intercalary dates shift from their anchor month."""
        self.validate(d)
        year, idx = divmod(d.month - 1 + months, self.month_count)
        year += d.year
        month = idx + 1
        day = min(d.day, self.month_length(month, year))
        return self.date(year, month, day, d.hour, d.minute, d.second)

    def add_years(self, d: StructuredDate, years: int) -> StructuredDate:
        self.validate(d)
        year = d.year + years
        if d.intercalary is not None and self._find_segment(year, d.month, d.intercalary) is not None:
            return self.date(year, d.month, d.day, d.hour, d.minute, d.second, intercalary=d.intercalary)
        day = min(d.day, self.month_length(d.month, year))
        return self.date(year, d.month, day, d.hour, d.minute, d.second)

    def days_between(self, a: StructuredDate, b: StructuredDate) -> int:
        return self.date_to_days(b) - self.date_to_days(a)

    # ---------------------------------------------------------
    # Weeks, seasons, canonical hours, moons
    # ---------------------------------------------------------

    def week_of_month(self, d: StructuredDate) -> Optional[int]:
        cfg = self.definition.weeks
        if cfg is None or cfg.kind == "year-based" or d.is_intercalary:
            return None
        per_week = cfg.days_per_week or self.weekday_count
        if per_week <= 0:
            return None

        raw = (d.day - 1) // per_week + 1
        month_days = self.month_length(d.month, d.year)
        if month_days % per_week == 0:
            return raw

        expected = cfg.per_month if cfg.per_month is not None else month_days // per_week
        if cfg.remainder == "extend-last" and raw == expected + 1:
            return expected
        if cfg.remainder == "none" and raw > expected:
            return None
        return raw

    def week_info(self, d: StructuredDate) -> Optional[WeekName]:
        week = self.week_of_month(d)
        cfg = self.definition.weeks
        if week is None or cfg is None:
            return None
        if week <= len(cfg.names):
            return cfg.names[week - 1]
        if cfg.naming == "ordinal":
            return WeekName(name=f"{_ordinal(week)} Week", abbreviation=str(week))
        if cfg.naming == "numeric":
            return WeekName(name=f"Week {week}", abbreviation=str(week))
        return None

    def season_start(self, season: Season, year: int) -> Optional[int]:
        """0-based day of `year` on which `season` starts; None when its month does not exist."""
        found = self._find_segment(year, season.start_month, None)
        if found is None:
            return None
        before, _, seg = found
        return before + min(season.start_day, seg.length) - 1

    def _season_spans(self, year: int) -> List[Tuple[int, int, int]]:
        """
        (start, end, index) per usable season as inclusive 0-based days of `year`,
        in declaration order. end < start means the span wraps the year end.
        An open-ended season stops the day before the next season starts.
        """
        seasons = self.definition.seasons
        starts = sorted(
            (start, i)
            for i, start in enumerate(self.season_start(s, year) for s in seasons)
            if start is not None
        )
        total = self.year_length(year)
        spans: List[Tuple[int, int, int]] = []
        for k, (start, i) in enumerate(starts):
            s = seasons[i]
            if s.end_month is None:
                end = (starts[(k + 1) % len(starts)][0] - 1) % total
            else:
                found = self._find_segment(year, s.end_month, None)
                if found is None:
                    continue
                before, _, seg = found
                end = before + (seg.length if s.end_day is None else min(s.end_day, seg.length)) - 1
            spans.append((start, end, i))
        spans.sort(key=lambda span: span[2])
        return spans

    def season_index_for(self, d: StructuredDate) -> Optional[int]:
        """Index into definition.seasons of the season containing `d`; None in a gap between seasons."""
        if not self.definition.seasons:
            return None
        doy = self.day_of_year(d) - 1
        for start, end, i in self._season_spans(d.year):
            if start <= end:
                if start <= doy <= end:
                    return i
            elif doy >= start or doy <= end:
                return i
        return None

    def season_for(self, d: StructuredDate) -> Optional[Season]:
        i = self.season_index_for(d)
        return None if i is None else self.definition.seasons[i]

    def sunrise_sunset(self, d: StructuredDate) -> Tuple[float, float]:
        """(sunrise, sunset) in fractional calendar hours, interpolated across the season of `d`."""
        return _daylight.sunrise_sunset(self, d)

    def canonical_hour_for(self, d: StructuredDate) -> Optional[CanonicalHour]:
        mph = self.definition.time.minutes_per_hour
        now = d.hour * mph + d.minute
        for ch in self.definition.canonical_hours:
            start = ch.start_hour * mph + ch.start_minute
            end = ch.end_hour * mph + ch.end_minute
            if start <= end:
                if start <= now < end:
                    return ch
            elif now >= start or now < end:
                return ch
        return None

    def moon_phases(self, d: StructuredDate, moon_name: Optional[str] = None) -> List[MoonPhaseInfo]:
        out: List[MoonPhaseInfo] = []
        for moon in self.definition.moons:
            if moon_name is not None and moon.name != moon_name:
                continue
            info = _moons.phase_for(self, moon, d)
            if info is not None:
                out.append(info)
        return out

    def moon_phases_at(self, t: int, moon_name: Optional[str] = None) -> List[MoonPhaseInfo]:
        return self.moon_phases(self.world_time_to_date(t), moon_name)

    # ---------------------------------------------------------
    # Diagnostics
    # ---------------------------------------------------------

    def explain(self, t: int) -> Dict[str, Any]:
        days, secs = split_world_time(int(t) + self._offset_seconds, self.definition.time)
        year, doy = self.year_for_day(days)
        lay = self.layout(year)
        return {
            "world_time": int(t),
            "offset_seconds": self._offset_seconds,
            "days_since_epoch": days,
            "seconds_in_day": secs,
            "year": year,
            "day_of_year": doy + 1,
            "year_length": lay.total_days,
            "is_leap": lay.is_leap,
            "date": self._date_in_year(year, doy, secs).to_dict(),
        }


def _ordinal(n: int) -> str:
    suffixes = ["th", "st", "nd", "rd"]
    v = n % 100
    if 10 <= v <= 20:
        return f"{n}th"
    return f"{n}{suffixes[v % 10] if v % 10 < 4 else 'th'}"
