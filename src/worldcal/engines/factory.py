"""
worldcal.engines.factory
------------------------
Turns pure data definitions into live engines.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Optional

from worldcal.core.types import CalendarDefinition, EventOverrides
from worldcal.engines.calendar import CalendarEngine
from worldcal.engines.events import EventsIndex
from worldcal.engines.recurrence import DEFAULT_HORIZON_YEARS


def like(name: str) -> CalendarDefinition:
    """A built-in definition by name, as a starting point for tweak()."""
    from .specs import ALL_SPECS
    if name not in ALL_SPECS:
        raise KeyError(f"Unknown built-in calendar '{name}'. Available: {sorted(ALL_SPECS)}")
    return ALL_SPECS[name]

def tweak(definition: CalendarDefinition, **kwargs: Any) -> CalendarDefinition:
    """Copy-then-patch a definition. Nested configs are replaced whole."""
    return replace(definition, **kwargs)

def make_engine(definition: CalendarDefinition) -> CalendarEngine:
    return CalendarEngine(definition)

def make_events_index(
    engine: CalendarEngine,
    overrides: Optional[EventOverrides] = None,
    *,
    include_hidden: bool = True,
    horizon_years: int = DEFAULT_HORIZON_YEARS,
) -> EventsIndex:
    return EventsIndex(engine, overrides, include_hidden=include_hidden, horizon_years=horizon_years)
