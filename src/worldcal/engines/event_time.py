"""
worldcal.engines.event_time
---------------------------
Parsing of event start times ("hh", "hh:mm", "hh:mm:ss") and durations
("<n>s|m|h|d|w") against a calendar's own time units.

Malformed input never raises: it is logged and replaced by the default
(midnight start, one-day duration), so a single bad event cannot break a
whole events query.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Tuple

from worldcal.core.time import is_valid_hms
from worldcal.core.types import TimeUnits

logger = logging.getLogger(__name__)

_START_RE = re.compile(r"^(\d+)(?::(\d+)(?::(\d+))?)?$")
_DURATION_RE = re.compile(r"^(\d+)([smhdw])$")

MIDNIGHT: Tuple[int, int, int] = (0, 0, 0)


def parse_start_time(start_time: Optional[str], units: TimeUnits) -> Tuple[int, int, int]:
    if not start_time:
        return MIDNIGHT
    m = _START_RE.match(start_time.strip())
    if m is None:
        logger.warning("Invalid event start time format %r, using 00:00:00", start_time)
        return MIDNIGHT
    hour, minute, second = (int(g) if g else 0 for g in m.groups())
    if not is_valid_hms(hour, minute, second, units):
        logger.warning(
            "Event start time %r is outside %d:%d:%d, using 00:00:00",
            start_time, units.hours_per_day, units.minutes_per_hour, units.seconds_per_minute,
        )
        return MIDNIGHT
    return hour, minute, second


def parse_duration(duration: Optional[str], units: TimeUnits, days_per_week: int = 7) -> int:
    """Duration in seconds; one calendar day when unset or malformed."""
    one_day = units.seconds_per_day
    if not duration:
        return one_day
    m = _DURATION_RE.match(duration.strip())
    if m is None:
        logger.warning("Invalid event duration format %r, using 1d", duration)
        return one_day
    amount, unit = int(m.group(1)), m.group(2)
    scale = {
        "s": 1,
        "m": units.seconds_per_minute,
        "h": units.seconds_per_hour,
        "d": one_day,
        "w": (days_per_week or 7) * one_day,
    }[unit]
    return amount * scale
