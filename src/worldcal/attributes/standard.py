from __future__ import annotations
from typing import Any, Dict

from ..engines.daylight import hours_to_clock
from .registry import register_attribute

def weekday_name(engine, info) -> Dict[str, Any]:
    wd = info.date.weekday
    name = engine.definition.weekdays[wd].name if wd is not None else None
    return {"weekday_name": name}

def season(engine, info) -> Dict[str, Any]:
    s = engine.season_for(info.date)
    return {"season": s.name if s is not None else None}

def moons(engine, info) -> Dict[str, Any]:
    return {
        "moons": [
            {
                "moon": p.moon.name,
                "phase": p.phase.name,
                "phase_index": p.phase_index,
                "day_in_phase": p.day_in_phase,
                "days_until_next": p.days_until_next,
                "progress": round(p.phase_progress, 4),
            }
            for p in engine.moon_phases(info.date)
        ]
    }

def week(engine, info) -> Dict[str, Any]:
    w = engine.week_info(info.date)
    return {
        "week_of_month": engine.week_of_month(info.date),
        "week_name": w.name if w is not None else None,
    }

def canonical_hour(engine, info) -> Dict[str, Any]:
    ch = engine.canonical_hour_for(info.date)
    return {"canonical_hour": ch.name if ch is not None else None}

def daylight(engine, info) -> Dict[str, Any]:
    sunrise, sunset = engine.sunrise_sunset(info.date)
    units = engine.definition.time
    return {"sunrise": hours_to_clock(sunrise, units), "sunset": hours_to_clock(sunset, units)}

register_attribute("weekday_name", weekday_name)
register_attribute("season", season)
register_attribute("moons", moons)
register_attribute("week", week)
register_attribute("canonical_hour", canonical_hour)
register_attribute("daylight", daylight)
