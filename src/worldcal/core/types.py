from __future__ import annotations
import re
from dataclasses import dataclass, field, fields
from typing import Any, Dict, FrozenSet, Literal, Mapping, Optional, Tuple, Union

from .errors import MalformedDefinitionError

LeapRuleKind = Literal["none", "gregorian", "custom"]
DayPolicy = Literal["skip", "lastDay", "beforeDay", "afterDay"]

LEAP_RULE_ALIASES: Dict[str, str] = {
    "fixed-interval": "custom",
    "custom-interval": "custom",
}
DAY_POLICIES: Tuple[str, ...] = ("skip", "lastDay", "beforeDay", "afterDay")


def _tupled(obj: Any, name: str) -> None:
    # Frozen dataclasses hold tuples so published definitions stay immutable.
    value = getattr(obj, name)
    if value is not None and not isinstance(value, tuple):
        object.__setattr__(obj, name, tuple(value))


# ============================================================
# Calendar structure
# ============================================================

@dataclass(frozen=True)
class Month:
    name: str
    days: int
    abbreviation: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise MalformedDefinitionError("Month name must be non-empty")
        if int(self.days) <= 0:
            raise MalformedDefinitionError(f"Month '{self.name}' must have a positive day count (got {self.days})")

@dataclass(frozen=True)
class Weekday:
    name: str
    abbreviation: Optional[str] = None
    description: Optional[str] = None

@dataclass(frozen=True)
class YearConfig:
    epoch: int = 0
    current_year: int = 0
    prefix: str = ""
    suffix: str = ""
    start_day: int = 0  # weekday index of the first day of the epoch year

@dataclass(frozen=True)
class LeapYearRule:
    rule: str = "none"
    month: Optional[str] = None
    extra_days: int = 1
    interval: int = 4
    offset: int = 0

    def __post_init__(self) -> None:
        rule = LEAP_RULE_ALIASES.get(self.rule, self.rule)
        object.__setattr__(self, "rule", rule)
        if rule not in ("none", "gregorian", "custom"):
            raise MalformedDefinitionError(f"Unknown leap year rule '{self.rule}'")
        if rule == "custom" and int(self.interval) <= 0:
            raise MalformedDefinitionError("Custom leap year interval must be positive")

@dataclass(frozen=True)
class TimeUnits:
    hours_per_day: int = 24
    minutes_per_hour: int = 60
    seconds_per_minute: int = 60

    def __post_init__(self) -> None:
        for f in fields(self):
            if int(getattr(self, f.name)) <= 0:
                raise MalformedDefinitionError(f"Time unit '{f.name}' must be positive")

    @property
    def seconds_per_hour(self) -> int:
        return self.minutes_per_hour * self.seconds_per_minute

    @property
    def seconds_per_day(self) -> int:
        return self.hours_per_day * self.seconds_per_hour

@dataclass(frozen=True)
class IntercalaryDay:
    """
    Days outside the regular month sequence, anchored either after or before a named month.
    """
    name: str
    after: Optional[str] = None
    before: Optional[str] = None
    days: int = 1
    leap_year_only: bool = False
    counts_for_weekdays: bool = True
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.after is None) == (self.before is None):
            raise MalformedDefinitionError(
                f"Intercalary day '{self.name}' must name exactly one of 'after' or 'before'"
            )
        if int(self.days) <= 0:
            raise MalformedDefinitionError(f"Intercalary day '{self.name}' must span a positive day count")

    @property
    def anchor(self) -> str:
        return self.after if self.after is not None else self.before  # type: ignore[return-value]

_CLOCK_RE = re.compile(r"^\d+:\d+$")

@dataclass(frozen=True)
class Season:
    """
    A named span of the year. Without end_month the season runs until the day
    before the next season starts; with it, dates after the end fall in a gap.
    sunrise/sunset are "HH:MM" in the calendar's own hours and minutes.
    """
    name: str
    start_month: int
    start_day: int = 1
    end_month: Optional[int] = None
    end_day: Optional[int] = None
    description: Optional[str] = None
    sunrise: Optional[str] = None
    sunset: Optional[str] = None

    def __post_init__(self) -> None:
        if self.start_month < 1 or self.start_day < 1:
            raise MalformedDefinitionError(f"Season '{self.name}' must start on a 1-based month and day")
        if self.end_month is not None and self.end_month < 1:
            raise MalformedDefinitionError(f"Season '{self.name}' must end on a 1-based month")
        if self.end_day is not None and self.end_day < 1:
            raise MalformedDefinitionError(f"Season '{self.name}' must end on a 1-based day")
        for which in ("sunrise", "sunset"):
            value = getattr(self, which)
            if value is not None and not _CLOCK_RE.match(value):
                raise MalformedDefinitionError(f"Season '{self.name}' {which} must be HH:MM (got {value!r})")

@dataclass(frozen=True)
class MoonReference:
    year: int
    month: int
    day: int

@dataclass(frozen=True)
class MoonPhase:
    name: str
    length: float
    single_day: bool = False
    icon: str = ""

    def __post_init__(self) -> None:
        if self.length < 0:
            raise MalformedDefinitionError(f"Moon phase '{self.name}' has a negative length")

@dataclass(frozen=True)
class MoonDefinition:
    name: str
    cycle_length: float
    first_new_moon: MoonReference
    phases: Tuple[MoonPhase, ...] = ()
    color: Optional[str] = None

    def __post_init__(self) -> None:
        _tupled(self, "phases")

@dataclass(frozen=True)
class CanonicalHour:
    name: str
    start_hour: int
    end_hour: int
    start_minute: int = 0
    end_minute: int = 0
    description: Optional[str] = None

@dataclass(frozen=True)
class WeekName:
    name: str
    abbreviation: Optional[str] = None
    prefix: Optional[str] = None
    suffix: Optional[str] = None

@dataclass(frozen=True)
class WeekConfig:
    kind: Literal["month-based", "year-based"] = "month-based"
    per_month: Optional[int] = None
    days_per_week: Optional[int] = None
    remainder: Literal["partial-last", "extend-last", "none"] = "partial-last"
    names: Tuple[WeekName, ...] = ()
    naming: Literal["ordinal", "numeric", "none"] = "numeric"

    def __post_init__(self) -> None:
        _tupled(self, "names")
        if self.days_per_week is not None and self.days_per_week <= 0:
            raise MalformedDefinitionError("days_per_week must be positive")

@dataclass(frozen=True)
class WorldTimeConfig:
    interpretation: Literal["epoch-based", "real-time-based"] = "epoch-based"
    epoch_year: int = 0
    current_year: int = 0

    def __post_init__(self) -> None:
        if self.interpretation not in ("epoch-based", "real-time-based"):
            raise MalformedDefinitionError(f"Unknown world time interpretation '{self.interpretation}'")


# ============================================================
# Variants
# ============================================================

def _field_names(cls: type) -> FrozenSet[str]:
    return frozenset(f.name for f in fields(cls))

@dataclass(frozen=True)
class VariantOverride:
    """Named override set deriving a variant calendar from its base."""
    name: str
    description: str = ""
    default: bool = False
    year_offset: Optional[int] = None
    year: Mapping[str, Any] = field(default_factory=dict, hash=False)
    months: Mapping[str, Mapping[str, Any]] = field(default_factory=dict, hash=False)
    weekdays: Mapping[str, Mapping[str, Any]] = field(default_factory=dict, hash=False)
    date_formats: Mapping[str, Any] = field(default_factory=dict, hash=False)
    moons: Optional[Tuple[MoonDefinition, ...]] = None
    canonical_hours: Optional[Tuple[CanonicalHour, ...]] = None

    def __post_init__(self) -> None:
        _tupled(self, "moons")
        _tupled(self, "canonical_hours")
        _check_keys(self.name, "year", self.year.keys(), _field_names(YearConfig))
        for target, patch in self.months.items():
            _check_keys(self.name, f"month '{target}'", patch.keys(), _field_names(Month))
        for target, patch in self.weekdays.items():
            _check_keys(self.name, f"weekday '{target}'", patch.keys(), _field_names(Weekday))

def _check_keys(variant: str, what: str, keys: Any, allowed: FrozenSet[str]) -> None:
    unknown = sorted(set(keys) - allowed)
    if unknown:
        raise MalformedDefinitionError(f"Variant '{variant}' overrides unknown {what} fields: {unknown}")


# ============================================================
# Recurrence rules and events
# ============================================================

def _check_policy(policy: str) -> None:
    if policy not in DAY_POLICIES:
        raise MalformedDefinitionError(f"ifDayNotExists must be one of {DAY_POLICIES} (got '{policy}')")

@dataclass(frozen=True)
class FixedRecurrence:
    month: int
    day: int
    leap_year_only: bool = False
    if_day_not_exists: str = "skip"

    def __post_init__(self) -> None:
        if self.month < 1 or self.day < 1:
            raise MalformedDefinitionError("Fixed recurrence needs a 1-based month and day")
        _check_policy(self.if_day_not_exists)

@dataclass(frozen=True)
class OrdinalRecurrence:
    month: int
    weekday: int
    occurrence: int  # 1..n, or -1 for the last match

    def __post_init__(self) -> None:
        if self.month < 1 or self.weekday < 0:
            raise MalformedDefinitionError("Ordinal recurrence needs a 1-based month and a 0-based weekday")
        if self.occurrence == 0 or self.occurrence < -1:
            raise MalformedDefinitionError("Ordinal occurrence must be a positive index or -1")

@dataclass(frozen=True)
class IntervalRecurrence:
    anchor_year: int
    interval_years: int
    month: int
    day: int
    if_day_not_exists: str = "skip"

    def __post_init__(self) -> None:
        if self.interval_years <= 0:
            raise MalformedDefinitionError("interval_years must be positive")
        if self.month < 1 or self.day < 1:
            raise MalformedDefinitionError("Interval recurrence needs a 1-based month and day")
        _check_policy(self.if_day_not_exists)

@dataclass(frozen=True)
class MonthlyRecurrence:
    day: int

    def __post_init__(self) -> None:
        if self.day < 1:
            raise MalformedDefinitionError("Monthly recurrence needs a 1-based day")

RecurrenceRule = Union[FixedRecurrence, OrdinalRecurrence, IntervalRecurrence, MonthlyRecurrence]

@dataclass(frozen=True)
class EventException:
    year: int
    kind: Literal["skip", "move"] = "skip"
    move_to_month: Optional[int] = None
    move_to_day: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind not in ("skip", "move"):
            raise MalformedDefinitionError(f"Unknown event exception type '{self.kind}'")
        if self.kind == "move" and (self.move_to_month is None or self.move_to_day is None):
            raise MalformedDefinitionError("A 'move' exception needs move_to_month and move_to_day")

@dataclass(frozen=True)
class CalendarEvent:
    id: str
    name: str
    recurrence: RecurrenceRule
    description: Optional[str] = None
    journal_ref: Optional[str] = None
    start_time: Optional[str] = None  # "hh", "hh:mm" or "hh:mm:ss"
    duration: Optional[str] = None    # "<n>[smhdw]", one day when unset
    start_year: Optional[int] = None
    end_year: Optional[int] = None
    exceptions: Tuple[EventException, ...] = ()
    visibility: Literal["player-visible", "gm-only"] = "player-visible"
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        _tupled(self, "exceptions")
        if not self.id:
            raise MalformedDefinitionError("Event id must be non-empty")

@dataclass(frozen=True)
class EventOverrides:
    """World-level event additions/replacements and disabled declared ids."""
    events: Tuple[CalendarEvent, ...] = ()
    disabled_event_ids: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        _tupled(self, "events")
        if not isinstance(self.disabled_event_ids, frozenset):
            object.__setattr__(self, "disabled_event_ids", frozenset(self.disabled_event_ids))


# ============================================================
# The definition
# ============================================================

@dataclass(frozen=True)
class CalendarDefinition:
    """
    Static description of one calendar. Published definitions are never mutated;
    variants are derived with copy-then-patch (see engines.variants).
    """
    id: str
    months: Tuple[Month, ...]
    weekdays: Tuple[Weekday, ...]
    year: YearConfig = YearConfig()
    leap_year: LeapYearRule = LeapYearRule()
    time: TimeUnits = TimeUnits()
    intercalary: Tuple[IntercalaryDay, ...] = ()
    seasons: Tuple[Season, ...] = ()
    moons: Tuple[MoonDefinition, ...] = ()
    canonical_hours: Tuple[CanonicalHour, ...] = ()
    events: Tuple[CalendarEvent, ...] = ()
    date_formats: Mapping[str, Any] = field(default_factory=dict, hash=False)
    variants: Mapping[str, VariantOverride] = field(default_factory=dict, hash=False)
    world_time: Optional[WorldTimeConfig] = None
    weeks: Optional[WeekConfig] = None
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("months", "weekdays", "intercalary", "seasons", "moons", "canonical_hours", "events"):
            _tupled(self, name)
        if not self.id:
            raise MalformedDefinitionError("Calendar id must be non-empty")
        if self.months is None or len(self.months) == 0:
            raise MalformedDefinitionError(f"Calendar '{self.id}' defines no months")
        if self.weekdays is None:
            raise MalformedDefinitionError(f"Calendar '{self.id}' defines no weekday list")
        names = self.month_names
        if len(set(names)) != len(names):
            raise MalformedDefinitionError(f"Calendar '{self.id}' has duplicate month names")
        lr = self.leap_year
        if lr.rule != "none" and lr.month is not None and lr.month not in names:
            raise MalformedDefinitionError(
                f"Calendar '{self.id}': leap year month '{lr.month}' is not one of its months"
            )

    @property
    def label(self) -> str:
        return self.name or self.id

    @property
    def month_names(self) -> Tuple[str, ...]:
        return tuple(m.name for m in self.months)

    @property
    def has_weekdays(self) -> bool:
        return len(self.weekdays) > 0

    def month_index(self, name: str) -> Optional[int]:
        """1-based index of the month called `name`, or None."""
        for i, m in enumerate(self.months, start=1):
            if m.name == name:
                return i
        return None


# ============================================================
# Computed values
# ============================================================

@dataclass(frozen=True)
class StructuredDate:
    year: int
    month: int  # 1-based; for intercalary dates, the anchor month
    day: int    # 1-based; for intercalary dates, the index inside the intercalary span
    weekday: Optional[int] = None  # 0-based; None on intercalary days and weekday-less calendars
    hour: int = 0
    minute: int = 0
    second: int = 0
    intercalary: Optional[str] = None

    @property
    def is_intercalary(self) -> bool:
        return self.intercalary is not None

    @property
    def time(self) -> Tuple[int, int, int]:
        return (self.hour, self.minute, self.second)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "year": self.year,
            "month": self.month,
            "day": self.day,
            "weekday": self.weekday,
            "time": {"hour": self.hour, "minute": self.minute, "second": self.second},
        }
        if self.intercalary is not None:
            out["intercalary"] = self.intercalary
        return out

    def __str__(self) -> str:
        tag = f" [{self.intercalary}]" if self.intercalary else ""
        return f"{self.year}-{self.month:02d}-{self.day:02d} {self.hour:02d}:{self.minute:02d}:{self.second:02d}{tag}"

@dataclass(frozen=True)
class Occurrence:
    """Where a recurrence rule lands within one year."""
    month: int
    day: int
    year_offset: int = 0  # 1 when an afterDay shift crosses into the next year

@dataclass(frozen=True)
class EventOccurrence:
    event: CalendarEvent
    date: StructuredDate

    @property
    def year(self) -> int:
        return self.date.year

    @property
    def month(self) -> int:
        return self.date.month

    @property
    def day(self) -> int:
        return self.date.day

@dataclass(frozen=True)
class MoonPhaseInfo:
    moon: MoonDefinition
    phase: MoonPhase
    phase_index: int
    day_in_phase: int
    day_in_phase_exact: float
    days_until_next: int
    days_until_next_exact: float
    phase_progress: float

@dataclass(frozen=True)
class DayInfo:
    world_time: int
    calendar_id: str
    date: StructuredDate
    attributes: Optional[Dict[str, Any]] = None
    debug: Optional[Dict[str, Any]] = None
