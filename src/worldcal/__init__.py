"""worldcal public API.

Keep this surface small: users should mostly interact with functions re-exported here.
"""

# Initialize the default store on import
from . import api_init as _api_init  # noqa: F401

from .api import (
    day_info,
    to_date,
    to_world_time,
    explain,
    list_calendars,
    calendar_info,
    get_engine,
    make_engine,
    register_calendar,
    resolve,
    moon_phases,
    month_info,
    year_info,
    events_on_date,
    events_in_range,
    next_occurrence,
    previous_occurrence,
)
from .adapters import TimeAdapter
from .core.errors import InvalidDateError, MalformedDefinitionError, UnknownCalendarError, WorldcalError
from .core.store import CalendarStore
from .core.types import CalendarDefinition, StructuredDate

__all__ = [
    "day_info",
    "to_date",
    "to_world_time",
    "explain",
    "list_calendars",
    "calendar_info",
    "get_engine",
    "make_engine",
    "register_calendar",
    "resolve",
    "moon_phases",
    "month_info",
    "year_info",
    "events_on_date",
    "events_in_range",
    "next_occurrence",
    "previous_occurrence",
    "TimeAdapter",
    "CalendarStore",
    "CalendarDefinition",
    "StructuredDate",
    "WorldcalError",
    "MalformedDefinitionError",
    "InvalidDateError",
    "UnknownCalendarError",
]
