from __future__ import annotations
from typing import Tuple

from .types import TimeUnits


def split_world_time(t: int, units: TimeUnits) -> Tuple[int, int]:
    """
    Split a signed second count into (whole days, seconds into the day).
    Floor semantics: the remainder is always in [0, seconds_per_day).
    """
    return divmod(int(t), units.seconds_per_day)

def seconds_to_hms(seconds_in_day: int, units: TimeUnits) -> Tuple[int, int, int]:
    hour, rem = divmod(seconds_in_day, units.seconds_per_hour)
    minute, second = divmod(rem, units.seconds_per_minute)
    return hour, minute, second

def hms_to_seconds(hour: int, minute: int, second: int, units: TimeUnits) -> int:
    return hour * units.seconds_per_hour + minute * units.seconds_per_minute + second

def is_valid_hms(hour: int, minute: int, second: int, units: TimeUnits) -> bool:
    return (
        0 <= hour < units.hours_per_day
        and 0 <= minute < units.minutes_per_hour
        and 0 <= second < units.seconds_per_minute
    )

def normalize_hms(hour: int, minute: int, second: int, units: TimeUnits) -> Tuple[int, int, int, int]:
    """
    Carry out-of-range components into larger units.
    Returns (day_carry, hour, minute, second) with every component in range.
    """
    total = hms_to_seconds(hour, minute, second, units)
    carry, rem = split_world_time(total, units)
    h, m, s = seconds_to_hms(rem, units)
    return carry, h, m, s
