from __future__ import annotations
from worldcal.core.store import CalendarStore
from worldcal.engines.specs import ALL_SPECS

def build_store() -> CalendarStore:
    return CalendarStore(ALL_SPECS.values())
