# tests/test_ingest.py

import pytest

from worldcal.core.errors import MalformedDefinitionError
from worldcal.core.ingest import (
    definition_from_dict,
    event_from_dict,
    overrides_from_dict,
    recurrence_from_dict,
    variant_set_from_dict,
)
from worldcal.core.types import FixedRecurrence, IntervalRecurrence, MonthlyRecurrence, OrdinalRecurrence
from worldcal.engines.calendar import CalendarEngine

TIME = {"hoursInDay": 20, "minutesInHour": 50, "secondsInMinute": 50}


def _minimal(**extra):
    data = {
        "id": "tiny",
        "months": [{"name": "Frost", "days": 20}, {"name": "Thaw", "days": 25}],
        "weekdays": [{"name": "Oneday"}, {"name": "Twoday"}, {"name": "Threeday"}],
        "time": TIME,
    }
    data.update(extra)
    return data


def test_minimal_definition():
    defn = definition_from_dict(_minimal())
    assert defn.id == "tiny"
    assert defn.month_names == ("Frost", "Thaw")
    assert defn.time.seconds_per_day == 20 * 50 * 50
    assert defn.leap_year.rule == "none"
    eng = CalendarEngine(defn)
    assert eng.year_length(0) == 45
    assert eng.world_time_to_date(50_000).day == 2

@pytest.mark.parametrize("missing", ["months", "weekdays", "time"])
def test_required_sections(missing):
    data = _minimal()
    del data[missing]
    with pytest.raises(MalformedDefinitionError):
        definition_from_dict(data)

def test_empty_weekday_list_is_allowed():
    defn = definition_from_dict(_minimal(weekdays=[]))
    assert not defn.has_weekdays

def test_bad_month_is_reported_as_malformed():
    with pytest.raises(MalformedDefinitionError):
        definition_from_dict(_minimal(months=[{"name": "Frost", "days": 0}]))
    with pytest.raises(MalformedDefinitionError):
        definition_from_dict(_minimal(months=[{"days": 10}]))

def test_leap_rule_alias_and_label_fallback():
    defn = definition_from_dict(_minimal(
        leapYear={"rule": "fixed-interval", "interval": 3, "month": "Thaw", "extraDays": 2},
        translations={"en": {"label": "Tiny Reckoning"}},
    ))
    assert defn.leap_year.rule == "custom"
    assert defn.label == "Tiny Reckoning"
    assert CalendarEngine(defn).year_length(3) == 47

def test_full_sections():
    defn = definition_from_dict(_minimal(
        year={"epoch": 10, "currentYear": 15, "suffix": " TR", "startDay": 1},
        intercalary=[{"name": "Gap", "before": "Thaw", "days": 2, "countsForWeekdays": False}],
        seasons=[{"name": "Cold", "startMonth": 1}],
        moons=[{
            "name": "Eye",
            "cycleLength": 15,
            "firstNewMoon": {"year": 10, "month": 1, "day": 1},
            "phases": [{"name": "Dark", "length": 7}, {"name": "Bright", "length": 8}],
        }],
        canonicalHours=[{"name": "Bell", "startHour": 2, "endHour": 4}],
        worldTime={"interpretation": "real-time-based", "epochYear": 10, "currentYear": 15},
        weeks={"perMonth": 2, "daysPerWeek": 10, "namingPattern": "ordinal"},
        dateFormats={"short": "{{day}}"},
    ))
    assert defn.year.start_day == 1
    assert defn.intercalary[0].before == "Thaw"
    assert defn.moons[0].phases[1].name == "Bright"
    assert defn.canonical_hours[0].end_hour == 4
    assert defn.world_time.current_year == 15
    assert defn.weeks.per_month == 2
    eng = CalendarEngine(defn)
    assert eng.world_time_to_date(0).year == 15
    assert eng.year_length(12) == 47

@pytest.mark.parametrize(
    "data,cls",
    [
        ({"type": "fixed", "month": 2, "day": 30, "ifDayNotExists": "lastDay"}, FixedRecurrence),
        ({"type": "ordinal", "month": 11, "weekday": 4, "occurrence": -1}, OrdinalRecurrence),
        ({"type": "interval", "anchorYear": 2000, "intervalYears": 4, "month": 1, "day": 1}, IntervalRecurrence),
        ({"type": "monthly", "day": 15}, MonthlyRecurrence),
    ],
)
def test_recurrence_types(data, cls):
    assert isinstance(recurrence_from_dict(data), cls)

def test_unknown_recurrence_type():
    with pytest.raises(MalformedDefinitionError):
        recurrence_from_dict({"type": "lunar", "day": 1})

def test_event_fields_and_metadata():
    ev = event_from_dict({
        "id": "feast",
        "name": "Feast",
        "recurrence": {"type": "fixed", "month": 1, "day": 2},
        "journalEntryId": "JournalEntry.abc",
        "startTime": "18:00",
        "duration": "4h",
        "exceptions": [{"year": 5, "type": "move", "moveToMonth": 1, "moveToDay": 3}],
        "visibility": "gm-only",
        "color": "#aa0000",
    })
    assert ev.journal_ref == "JournalEntry.abc"
    assert ev.exceptions[0].move_to_day == 3
    assert ev.metadata == {"color": "#aa0000"}

def test_overrides_from_dict():
    ov = overrides_from_dict({
        "events": [{"id": "x", "name": "X", "recurrence": {"type": "monthly", "day": 1}}],
        "disabledEventIds": ["new-year"],
    })
    assert [e.id for e in ov.events] == ["x"]
    assert ov.disabled_event_ids == frozenset({"new-year"})
    assert overrides_from_dict(None).events == ()
    with pytest.raises(MalformedDefinitionError):
        overrides_from_dict({"events": [{"name": "no id"}]})

def test_variants_read_year_offset():
    defn = definition_from_dict(_minimal(variants={
        "later": {
            "name": "Later Reckoning",
            "default": True,
            "config": {"yearOffset": 300},
            "overrides": {"year": {"suffix": " LR"}, "months": {"Frost": {"abbreviation": "Fr"}}},
        },
    }))
    ov = defn.variants["later"]
    assert ov.year_offset == 300
    assert ov.default
    assert ov.year == {"suffix": " LR"}
    assert ov.months == {"Frost": {"abbreviation": "Fr"}}

def test_external_variant_set():
    base, variants = variant_set_from_dict({
        "baseCalendar": "gregorian",
        "variants": {"holocene": {"name": "Holocene", "config": {"yearOffset": 11970}}},
    })
    assert base == "gregorian"
    assert variants["holocene"].year_offset == 11970
    with pytest.raises(MalformedDefinitionError):
        variant_set_from_dict({"variants": {}})
