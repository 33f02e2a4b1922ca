"""
worldcal.engines.events
-----------------------
The events index: a calendar's declared events merged with a world override
set, and the date / range / next / previous queries over them.

Merge rules:
  - an override with the id of a declared event replaces it entirely,
  - a disabled id removes the declared event (overrides are unaffected),
  - any other override is an addition.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from worldcal.core.errors import InvalidDateError
from worldcal.core.types import CalendarEvent, EventOccurrence, EventOverrides, StructuredDate
from worldcal.engines.calendar import CalendarEngine
from worldcal.engines.event_time import parse_duration, parse_start_time
from worldcal.engines.recurrence import DEFAULT_HORIZON_YEARS, EventRecurrenceCalculator

logger = logging.getLogger(__name__)


def merge_events(declared: Tuple[CalendarEvent, ...], overrides: EventOverrides) -> List[CalendarEvent]:
    merged: Dict[str, CalendarEvent] = {
        e.id: e for e in declared if e.id not in overrides.disabled_event_ids
    }
    for e in overrides.events:
        merged[e.id] = e
    return list(merged.values())


class EventsIndex:
    """
    Read-only query surface over the merged events of one calendar.

    `include_hidden` is the host's capability flag for gm-only events; the
    index never decides visibility on its own.
    """
    def __init__(
        self,
        engine: CalendarEngine,
        overrides: Optional[EventOverrides] = None,
        *,
        include_hidden: bool = True,
        horizon_years: int = DEFAULT_HORIZON_YEARS,
    ):
        self.engine = engine
        self.overrides = overrides if overrides is not None else EventOverrides()
        self.include_hidden = include_hidden
        self.recurrence = EventRecurrenceCalculator(engine, horizon_years)

        events = merge_events(engine.definition.events, self.overrides)
        if not include_hidden:
            events = [e for e in events if e.visibility != "gm-only"]
        self._events: Tuple[CalendarEvent, ...] = tuple(events)
        self._by_id: Dict[str, CalendarEvent] = {e.id: e for e in self._events}
        self._lookback_years = self._longest_span_years()

    def all_events(self) -> List[CalendarEvent]:
        return list(self._events)

    def get_event(self, event_id: str) -> Optional[CalendarEvent]:
        return self._by_id.get(event_id)

    def _longest_span_years(self) -> int:
        """
        How many earlier years can still produce an occurrence overlapping a
        given year: the longest event span (plus a day for late start times)
        measured in the calendar's shortest year, plus one for afterDay carries.
        """
        eng = self.engine
        units = eng.definition.time
        longest = max(
            (parse_duration(e.duration, units, eng.weekday_count) for e in self._events),
            default=units.seconds_per_day,
        )
        span_days = -(-longest // units.seconds_per_day) + 1
        epoch = eng.definition.year.epoch
        shortest = min(eng.year_length(epoch + i) for i in range(eng.leap.cycle_years))
        return 1 + span_days // shortest

    # ---------------------------------------------------------
    # Occurrence generation
    # ---------------------------------------------------------

    def occurrences_for_year(self, event: CalendarEvent, year: int) -> List[EventOccurrence]:
        """
        Occurrences produced by evaluating `event` for `year`, after start/end
        bounds and that year's exception. Dates carry the event start time.
        """
        if event.start_year is not None and year < event.start_year:
            return []
        if event.end_year is not None and year > event.end_year:
            return []

        exception = next((x for x in event.exceptions if x.year == year), None)
        if exception is not None and exception.kind == "skip":
            return []

        landings = self.recurrence.occurrences_in_year(event.recurrence, year)
        if not landings:
            return []
        if exception is not None:
            targets = [(year, exception.move_to_month, exception.move_to_day)]
        else:
            targets = [(year + o.year_offset, o.month, o.day) for o in landings]

        hms = parse_start_time(event.start_time, self.engine.definition.time)
        out: List[EventOccurrence] = []
        for y, m, d in targets:
            try:
                date = self.engine.date(y, m, d, *hms)  # type: ignore[arg-type]
            except InvalidDateError as e:
                logger.warning("Event %s: moved occurrence in %d is not a valid date (%s)", event.id, year, e)
                continue
            out.append(EventOccurrence(event, date))
        return out

    def time_range(self, occurrence: EventOccurrence) -> Tuple[int, int]:
        """Inclusive (start, end) world-time span covered by an occurrence."""
        units = self.engine.definition.time
        start = self.engine.date_to_world_time(occurrence.date)
        duration = parse_duration(occurrence.event.duration, units, self.engine.weekday_count)
        end = start + duration - 1 if duration > 0 else start
        return start, end

    def _day_span(self, date: StructuredDate) -> Tuple[int, int]:
        start = self.engine.date_to_world_time(
            StructuredDate(date.year, date.month, date.day, None, 0, 0, 0, date.intercalary)
        )
        return start, start + self.engine.definition.time.seconds_per_day - 1

    # ---------------------------------------------------------
    # Queries
    # ---------------------------------------------------------

    def events_on_date(self, date: StructuredDate) -> List[EventOccurrence]:
        """One occurrence per event whose time span overlaps the day of `date`."""
        lo, hi = self._day_span(date)
        out: List[EventOccurrence] = []
        for event in self._events:
            for year in range(date.year, date.year - self._lookback_years - 1, -1):
                hit = next(
                    (o for o in self.occurrences_for_year(event, year) if _overlaps(self.time_range(o), lo, hi)),
                    None,
                )
                if hit is not None:
                    out.append(hit)
                    break
        return out

    def has_events_on_date(self, date: StructuredDate) -> bool:
        lo, hi = self._day_span(date)
        for event in self._events:
            for year in range(date.year, date.year - self._lookback_years - 1, -1):
                if any(_overlaps(self.time_range(o), lo, hi) for o in self.occurrences_for_year(event, year)):
                    return True
        return False

    def events_in_range(self, start: StructuredDate, end: StructuredDate) -> List[EventOccurrence]:
        """
        Every occurrence overlapping the days start..end (inclusive), sorted by
        start time then event id. Empty when end precedes start.
        """
        lo = self._day_span(start)[0]
        hi = self._day_span(end)[1]
        if hi < lo:
            return []
        found: List[Tuple[int, str, EventOccurrence]] = []
        for year in range(start.year - self._lookback_years, end.year + 1):
            for event in self._events:
                for occ in self.occurrences_for_year(event, year):
                    span = self.time_range(occ)
                    if _overlaps(span, lo, hi):
                        found.append((span[0], event.id, occ))
        found.sort(key=lambda item: (item[0], item[1]))
        return [occ for _, _, occ in found]

    def next_occurrence(self, event_id: str, after: StructuredDate) -> Optional[EventOccurrence]:
        return self._search(event_id, after, forward=True)

    def previous_occurrence(self, event_id: str, before: StructuredDate) -> Optional[EventOccurrence]:
        return self._search(event_id, before, forward=False)

    def _search(self, event_id: str, origin: StructuredDate, forward: bool) -> Optional[EventOccurrence]:
        event = self.get_event(event_id)
        if event is None:
            return None
        hit = self.recurrence.search(
            lambda y: [o.date for o in self.occurrences_for_year(event, y)],
            origin,
            forward=forward,
        )
        return None if hit is None else EventOccurrence(event, hit)


def _overlaps(span: Tuple[int, int], lo: int, hi: int) -> bool:
    return span[0] <= hi and span[1] >= lo
