from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .attributes.registry import compute_attributes
from .core.errors import InvalidDateError
from .core.store import CalendarStore
from .core.types import (
    CalendarDefinition,
    DayInfo,
    EventOccurrence,
    EventOverrides,
    MoonPhaseInfo,
    StructuredDate,
)
from .engines.calendar import CalendarEngine
from .engines.factory import make_engine as _make_engine

DEFAULT_CALENDAR = "gregorian"
_store: Optional[CalendarStore] = None

def set_store(store: CalendarStore) -> None:
    global _store
    _store = store

def _st(store: Optional[CalendarStore]) -> CalendarStore:
    if store is not None:
        return store
    if _store is None:
        raise RuntimeError("Calendar store not initialized")
    return _store

# ============================================================
# Calendars
# ============================================================

def list_calendars(*, store: Optional[CalendarStore] = None) -> List[str]:
    return _st(store).list()

def calendar_info(calendar: str, *, store: Optional[CalendarStore] = None) -> Dict[str, Any]:
    return _st(store).engine(calendar).info()

def get_engine(calendar: str, *, store: Optional[CalendarStore] = None) -> CalendarEngine:
    return _st(store).engine(calendar)

def make_engine(definition: CalendarDefinition) -> CalendarEngine:
    return _make_engine(definition)

def register_calendar(
    definition: Union[CalendarDefinition, Mapping[str, Any]],
    *,
    overwrite: bool = False,
    store: Optional[CalendarStore] = None,
) -> List[str]:
    st = _st(store)
    if isinstance(definition, CalendarDefinition):
        return st.register(definition, overwrite=overwrite)
    return st.register_dict(definition, overwrite=overwrite)

def resolve(calendar: str, *, store: Optional[CalendarStore] = None) -> str:
    return _st(store).resolve(calendar)

# ============================================================
# Conversion
# ============================================================

def to_date(world_time: int, *, calendar: str = DEFAULT_CALENDAR, store: Optional[CalendarStore] = None) -> StructuredDate:
    return _st(store).engine(calendar).world_time_to_date(world_time)

def to_world_time(d: StructuredDate, *, calendar: str = DEFAULT_CALENDAR, store: Optional[CalendarStore] = None) -> int:
    return _st(store).engine(calendar).date_to_world_time(d)

def day_info(
    world_time: int,
    *,
    calendar: str = DEFAULT_CALENDAR,
    attributes: Sequence[str] = (),
    debug: bool = False,
    store: Optional[CalendarStore] = None,
) -> DayInfo:
    eng = _st(store).engine(calendar)
    info = DayInfo(
        world_time=int(world_time),
        calendar_id=eng.id,
        date=eng.world_time_to_date(world_time),
        debug=eng.explain(world_time) if debug else None,
    )
    if attributes:
        info = replace(info, attributes=compute_attributes(eng, info, attributes))
    return info

def explain(world_time: int, *, calendar: str = DEFAULT_CALENDAR, store: Optional[CalendarStore] = None) -> Dict[str, Any]:
    return _st(store).engine(calendar).explain(world_time)

def moon_phases(
    world_time: int,
    *,
    calendar: str = DEFAULT_CALENDAR,
    moon: Optional[str] = None,
    store: Optional[CalendarStore] = None,
) -> List[MoonPhaseInfo]:
    return _st(store).engine(calendar).moon_phases_at(world_time, moon)

# ============================================================
# Structure helpers
# ============================================================

def month_info(year: int, month: int, *, calendar: str = DEFAULT_CALENDAR, store: Optional[CalendarStore] = None) -> Dict[str, Any]:
    eng = _st(store).engine(calendar)
    if not 1 <= month <= eng.month_count:
        raise InvalidDateError(f"Month {month} does not exist in calendar '{eng.id}'")
    m = eng.definition.months[month - 1]
    return {
        "year": year,
        "month": month,
        "name": m.name,
        "days": eng.month_length(month, year),
        "weekdays": eng.weekdays_in_month(year, month),
        "intercalary_before": [ic.name for ic in eng.intercalary_before_month(year, month)],
        "intercalary_after": [ic.name for ic in eng.intercalary_after_month(year, month)],
    }

def year_info(year: int, *, calendar: str = DEFAULT_CALENDAR, store: Optional[CalendarStore] = None) -> Dict[str, Any]:
    eng = _st(store).engine(calendar)
    return {
        "year": year,
        "is_leap": eng.is_leap_year(year),
        "days": eng.year_length(year),
        "month_lengths": list(eng.month_lengths(year)),
        "intercalary": [ic.name for ic in eng.intercalary_days(year)],
        "first_weekday": eng.days_to_date(eng.days_before_year(year)).weekday,
    }

# ============================================================
# Events
# ============================================================

def events_on_date(
    d: StructuredDate,
    *,
    calendar: str = DEFAULT_CALENDAR,
    overrides: Optional[EventOverrides] = None,
    include_hidden: bool = True,
    store: Optional[CalendarStore] = None,
) -> List[EventOccurrence]:
    return _st(store).events_index(calendar, overrides, include_hidden=include_hidden).events_on_date(d)

def events_in_range(
    start: StructuredDate,
    end: StructuredDate,
    *,
    calendar: str = DEFAULT_CALENDAR,
    overrides: Optional[EventOverrides] = None,
    include_hidden: bool = True,
    store: Optional[CalendarStore] = None,
) -> List[EventOccurrence]:
    return _st(store).events_index(calendar, overrides, include_hidden=include_hidden).events_in_range(start, end)

def next_occurrence(
    event_id: str,
    after: StructuredDate,
    *,
    calendar: str = DEFAULT_CALENDAR,
    overrides: Optional[EventOverrides] = None,
    store: Optional[CalendarStore] = None,
) -> Optional[EventOccurrence]:
    return _st(store).events_index(calendar, overrides).next_occurrence(event_id, after)

def previous_occurrence(
    event_id: str,
    before: StructuredDate,
    *,
    calendar: str = DEFAULT_CALENDAR,
    overrides: Optional[EventOverrides] = None,
    store: Optional[CalendarStore] = None,
) -> Optional[EventOccurrence]:
    return _st(store).events_index(calendar, overrides).previous_occurrence(event_id, before)
