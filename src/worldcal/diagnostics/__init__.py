"""Diagnostics package.

- round_trip, pretty_month, year_table: always available, no extras needed
- moon_chart: optional (requires the diagnostics extras: numpy + matplotlib)
"""

__all__ = ["pretty_month", "year_table", "round_trip", "moon_chart"]
