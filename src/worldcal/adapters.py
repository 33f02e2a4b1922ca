"""
Thin translation layer for hosts that keep their own clock objects.

A host only needs two capabilities: turn a world time into named components,
and turn components back into a world time. Nothing here holds world time.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from .core.types import StructuredDate
from .engines.calendar import CalendarEngine


class TimeAdapter:
    def __init__(self, engine: CalendarEngine):
        self.engine = engine

    def decompose(self, world_time: int) -> Dict[str, Any]:
        d = self.engine.world_time_to_date(world_time)
        out = {
            "year": d.year,
            "month": d.month,
            "day": d.day,
            "weekday": d.weekday,
            "hour": d.hour,
            "minute": d.minute,
            "second": d.second,
            "day_of_year": self.engine.day_of_year(d),
            "is_leap_year": self.engine.is_leap_year(d.year),
        }
        if d.intercalary is not None:
            out["intercalary"] = d.intercalary
        return out

    def compose(self, components: Mapping[str, Any]) -> int:
        """
        Inverse of decompose. `year` is required; month and day default to 1,
        time fields to 0. Weekday and derived fields are ignored.
        """
        if "year" not in components:
            raise KeyError("compose() needs at least a 'year' component")
        d = StructuredDate(
            year=int(components["year"]),
            month=int(components.get("month", 1)),
            day=int(components.get("day", 1)),
            hour=int(components.get("hour", 0)),
            minute=int(components.get("minute", 0)),
            second=int(components.get("second", 0)),
            intercalary=components.get("intercalary"),
        )
        return self.engine.date_to_world_time(d)
