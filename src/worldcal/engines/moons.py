"""
worldcal.engines.moons
----------------------
Moon phase position for a date. Elapsed days are measured with the calendar
engine's own day arithmetic, so intercalary days and leap days count exactly
as they do for world-time conversion.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Optional

from worldcal.core.types import MoonDefinition, MoonPhaseInfo, StructuredDate

if TYPE_CHECKING:
    from worldcal.engines.calendar import CalendarEngine

# Phase boundaries are compared with this slack so fractional phase lengths
# (e.g. 7.38) that sum to the cycle do not leave a sliver of "next phase".
PHASE_BOUNDARY_TOLERANCE = 1e-6
_PRECISION = 1_000_000


def _clean(value: float) -> float:
    rounded = round(value * _PRECISION) / _PRECISION
    if rounded == 0 or not math.isfinite(rounded):
        return 0.0
    return rounded


def cycle_position(moon: MoonDefinition, elapsed_days: float) -> float:
    """Elapsed days reduced into [0, cycle_length). Never negative, also before the reference."""
    return elapsed_days % moon.cycle_length


def phase_for(engine: "CalendarEngine", moon: MoonDefinition, date: StructuredDate) -> Optional[MoonPhaseInfo]:
    """
    Phase of `moon` on `date`, or None when the moon carries no usable phase data
    (non-positive cycle, no phases, or phases of zero total length).
    """
    if moon.cycle_length <= 0 or not moon.phases:
        return None
    if sum(p.length for p in moon.phases) <= 0:
        return None

    ref = moon.first_new_moon
    ref_days = engine.date_to_days(engine.date(ref.year, ref.month, ref.day))
    elapsed = engine.date_to_days(date) - ref_days
    position = cycle_position(moon, elapsed)

    start = 0.0
    index = len(moon.phases) - 1
    for i, phase in enumerate(moon.phases):
        end = start + phase.length
        if position < end - PHASE_BOUNDARY_TOLERANCE:
            index = i
            break
        start = end
    else:
        start = sum(p.length for p in moon.phases[:-1])

    phase = moon.phases[index]
    in_phase = min(max(_clean(position - start), 0.0), phase.length)
    until_next = max(_clean(phase.length - in_phase), 0.0)
    progress = min(max(in_phase / phase.length, 0.0), 1.0) if phase.length > 0 else 0.0

    return MoonPhaseInfo(
        moon=moon,
        phase=phase,
        phase_index=index,
        day_in_phase=math.floor(in_phase),
        day_in_phase_exact=in_phase,
        days_until_next=max(math.ceil(until_next), 0),
        days_until_next_exact=until_next,
        phase_progress=progress,
    )
