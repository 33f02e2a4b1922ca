"""
Ingestion of plain-data calendar payloads (the camelCase JSON shape used by
calendar packs) into frozen worldcal definitions.

Only structure is checked here; anything the dataclasses reject surfaces as
MalformedDefinitionError naming the offending calendar.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .errors import MalformedDefinitionError
from .types import (
    CalendarDefinition,
    CalendarEvent,
    CanonicalHour,
    EventException,
    EventOverrides,
    FixedRecurrence,
    IntercalaryDay,
    IntervalRecurrence,
    LeapYearRule,
    Month,
    MonthlyRecurrence,
    MoonDefinition,
    MoonPhase,
    MoonReference,
    OrdinalRecurrence,
    RecurrenceRule,
    Season,
    TimeUnits,
    VariantOverride,
    WeekConfig,
    WeekName,
    Weekday,
    WorldTimeConfig,
    YearConfig,
)

# camelCase key -> snake_case field, per target type
_YEAR_KEYS = {"epoch": "epoch", "currentYear": "current_year", "prefix": "prefix", "suffix": "suffix", "startDay": "start_day"}
_MONTH_KEYS = {"name": "name", "days": "days", "abbreviation": "abbreviation", "description": "description"}
_WEEKDAY_KEYS = {"name": "name", "abbreviation": "abbreviation", "description": "description"}


def _pick(data: Mapping[str, Any], keys: Mapping[str, str]) -> Dict[str, Any]:
    return {field: data[key] for key, field in keys.items() if key in data}

def _label(data: Mapping[str, Any]) -> Optional[str]:
    if data.get("name"):
        return data["name"]
    en = (data.get("translations") or {}).get("en") or {}
    return en.get("label")


def moon_from_dict(data: Mapping[str, Any]) -> MoonDefinition:
    ref = data["firstNewMoon"]
    return MoonDefinition(
        name=data["name"],
        cycle_length=float(data["cycleLength"]),
        first_new_moon=MoonReference(int(ref["year"]), int(ref["month"]), int(ref["day"])),
        phases=tuple(
            MoonPhase(
                name=p["name"],
                length=float(p["length"]),
                single_day=bool(p.get("singleDay", False)),
                icon=p.get("icon", ""),
            )
            for p in data.get("phases") or ()
        ),
        color=data.get("color"),
    )

def canonical_hour_from_dict(data: Mapping[str, Any]) -> CanonicalHour:
    return CanonicalHour(
        name=data["name"],
        start_hour=int(data["startHour"]),
        end_hour=int(data["endHour"]),
        start_minute=int(data.get("startMinute", 0)),
        end_minute=int(data.get("endMinute", 0)),
        description=data.get("description"),
    )


def recurrence_from_dict(data: Mapping[str, Any]) -> RecurrenceRule:
    kind = data.get("type")
    policy = data.get("ifDayNotExists") or "skip"
    if kind == "fixed":
        return FixedRecurrence(
            month=int(data["month"]),
            day=int(data["day"]),
            leap_year_only=bool(data.get("leapYearOnly", False)),
            if_day_not_exists=policy,
        )
    if kind == "ordinal":
        return OrdinalRecurrence(int(data["month"]), int(data["weekday"]), int(data["occurrence"]))
    if kind == "interval":
        return IntervalRecurrence(
            anchor_year=int(data["anchorYear"]),
            interval_years=int(data["intervalYears"]),
            month=int(data["month"]),
            day=int(data["day"]),
            if_day_not_exists=policy,
        )
    if kind == "monthly":
        return MonthlyRecurrence(int(data["day"]))
    raise MalformedDefinitionError(f"Unknown recurrence type '{kind}'")

def event_from_dict(data: Mapping[str, Any]) -> CalendarEvent:
    known = {
        "id", "name", "recurrence", "description", "journalEntryId", "startTime", "duration",
        "startYear", "endYear", "exceptions", "visibility",
    }
    return CalendarEvent(
        id=data["id"],
        name=data["name"],
        recurrence=recurrence_from_dict(data["recurrence"]),
        description=data.get("description"),
        journal_ref=data.get("journalEntryId"),
        start_time=data.get("startTime"),
        duration=data.get("duration"),
        start_year=data.get("startYear"),
        end_year=data.get("endYear"),
        exceptions=tuple(
            EventException(
                year=int(x["year"]),
                kind=x.get("type", "skip"),
                move_to_month=x.get("moveToMonth"),
                move_to_day=x.get("moveToDay"),
            )
            for x in data.get("exceptions") or ()
        ),
        visibility=data.get("visibility", "player-visible"),
        metadata={k: v for k, v in data.items() if k not in known},
    )

def overrides_from_dict(data: Optional[Mapping[str, Any]]) -> EventOverrides:
    """{events: [...], disabledEventIds: [...]} -> EventOverrides."""
    if not data:
        return EventOverrides()
    try:
        return EventOverrides(
            events=tuple(event_from_dict(e) for e in data.get("events") or ()),
            disabled_event_ids=frozenset(data.get("disabledEventIds") or ()),
        )
    except MalformedDefinitionError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedDefinitionError(f"Malformed event overrides: {e!r}") from e


def variant_from_dict(data: Mapping[str, Any]) -> VariantOverride:
    config = data.get("config") or {}
    ov = data.get("overrides") or {}
    moons = ov.get("moons")
    hours = ov.get("canonicalHours")
    return VariantOverride(
        name=data.get("name", ""),
        description=data.get("description", ""),
        default=bool(data.get("default", False)),
        year_offset=config.get("yearOffset"),
        year=_pick(ov.get("year") or {}, _YEAR_KEYS),
        months={k: _pick(v, _MONTH_KEYS) for k, v in (ov.get("months") or {}).items()},
        weekdays={k: _pick(v, _WEEKDAY_KEYS) for k, v in (ov.get("weekdays") or {}).items()},
        date_formats=dict(ov.get("dateFormats") or {}),
        moons=None if moons is None else tuple(moon_from_dict(m) for m in moons),
        canonical_hours=None if hours is None else tuple(canonical_hour_from_dict(h) for h in hours),
    )

def variant_set_from_dict(data: Mapping[str, Any]) -> Tuple[str, Dict[str, VariantOverride]]:
    """External variant file {baseCalendar, variants} -> (base id, overrides)."""
    base = data.get("baseCalendar")
    variants = data.get("variants")
    if not isinstance(base, str) or not isinstance(variants, Mapping):
        raise MalformedDefinitionError("External variant set needs 'baseCalendar' and a 'variants' mapping")
    try:
        return base, {k: variant_from_dict(v) for k, v in variants.items()}
    except (KeyError, TypeError) as e:
        raise MalformedDefinitionError(f"Malformed external variants for '{base}': {e!r}") from e


def _intercalary(data: Mapping[str, Any]) -> IntercalaryDay:
    return IntercalaryDay(
        name=data["name"],
        after=data.get("after"),
        before=data.get("before"),
        days=int(data.get("days", 1)),
        leap_year_only=bool(data.get("leapYearOnly", False)),
        counts_for_weekdays=bool(data.get("countsForWeekdays", True)),
        description=data.get("description"),
    )

def _weeks(data: Mapping[str, Any]) -> WeekConfig:
    return WeekConfig(
        kind=data.get("type", "month-based"),
        per_month=data.get("perMonth"),
        days_per_week=data.get("daysPerWeek"),
        remainder=data.get("remainderHandling", "partial-last"),
        names=tuple(
            WeekName(w["name"], w.get("abbreviation"), w.get("prefix"), w.get("suffix"))
            for w in data.get("names") or ()
        ),
        naming=data.get("namingPattern", "numeric"),
    )

def _seq(data: Mapping[str, Any], key: str) -> Sequence[Any]:
    return data.get(key) or ()


def definition_from_dict(data: Mapping[str, Any]) -> CalendarDefinition:
    cid = data.get("id") or "<unnamed>"
    for required in ("months", "weekdays", "time"):
        if data.get(required) is None:
            raise MalformedDefinitionError(f"Calendar '{cid}' is missing '{required}'")

    try:
        t = data["time"]
        time = TimeUnits(
            hours_per_day=int(t["hoursInDay"]),
            minutes_per_hour=int(t["minutesInHour"]),
            seconds_per_minute=int(t["secondsInMinute"]),
        )
        lr = data.get("leapYear") or {}
        leap = LeapYearRule(
            rule=lr.get("rule", "none"),
            month=lr.get("month"),
            extra_days=int(lr.get("extraDays", 1)),
            interval=int(lr.get("interval", 4)),
            offset=int(lr.get("offset", 0)),
        )
        wt = data.get("worldTime")
        return CalendarDefinition(
            id=data["id"],
            name=_label(data),
            description=data.get("description"),
            months=tuple(Month(**_pick(m, _MONTH_KEYS)) for m in data["months"]),
            weekdays=tuple(Weekday(**_pick(w, _WEEKDAY_KEYS)) for w in data["weekdays"]),
            year=YearConfig(**_pick(data.get("year") or {}, _YEAR_KEYS)),
            leap_year=leap,
            time=time,
            intercalary=tuple(_intercalary(i) for i in _seq(data, "intercalary")),
            seasons=tuple(
                Season(
                    name=s["name"],
                    start_month=int(s["startMonth"]),
                    start_day=int(s.get("startDay", 1)),
                    end_month=s.get("endMonth"),
                    end_day=s.get("endDay"),
                    description=s.get("description"),
                    sunrise=s.get("sunrise"),
                    sunset=s.get("sunset"),
                )
                for s in _seq(data, "seasons")
            ),
            moons=tuple(moon_from_dict(m) for m in _seq(data, "moons")),
            canonical_hours=tuple(canonical_hour_from_dict(h) for h in _seq(data, "canonicalHours")),
            events=tuple(event_from_dict(e) for e in _seq(data, "events")),
            date_formats=dict(data.get("dateFormats") or {}),
            variants={k: variant_from_dict(v) for k, v in (data.get("variants") or {}).items()},
            world_time=None if wt is None else WorldTimeConfig(
                interpretation=wt.get("interpretation", "epoch-based"),
                epoch_year=int(wt.get("epochYear", 0)),
                current_year=int(wt.get("currentYear", 0)),
            ),
            weeks=None if data.get("weeks") is None else _weeks(data["weeks"]),
        )
    except MalformedDefinitionError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedDefinitionError(f"Calendar '{cid}' is malformed: {e!r}") from e
