# tests/test_api.py

import pytest

import worldcal
from worldcal.attributes.registry import available_attributes
from worldcal.core.store import CalendarStore
from worldcal.core.types import StructuredDate
from worldcal.engines.specs import HARPTOS


def test_default_store_is_ready():
    assert "gregorian" in worldcal.list_calendars()
    assert worldcal.to_date(0) == StructuredDate(1970, 1, 1, 4)
    assert worldcal.to_world_time(StructuredDate(1970, 1, 2)) == 86400

def test_explicit_store_is_isolated():
    st = CalendarStore([HARPTOS])
    assert worldcal.list_calendars(store=st) == ["harptos"]
    with pytest.raises(worldcal.UnknownCalendarError):
        worldcal.to_date(0, store=st)
    assert worldcal.to_date(0, calendar="harptos", store=st).intercalary is None

def test_day_info_attributes():
    t = worldcal.to_world_time(StructuredDate(1372, 1, 11, hour=23), calendar="harptos")
    info = worldcal.day_info(t, calendar="harptos", attributes=("weekday_name", "season", "week", "canonical_hour"))
    assert info.attributes["weekday_name"] == "First-day"
    assert info.attributes["season"] == "Winter"
    assert info.attributes["week_of_month"] == 2
    assert info.attributes["week_name"] == "2nd Week"
    assert info.attributes["canonical_hour"] == "Night"
    assert info.debug is None

def test_day_info_moons_and_debug():
    info = worldcal.day_info(0, attributes=("moons",), debug=True)
    assert [m["moon"] for m in info.attributes["moons"]] == ["Luna"]
    assert info.debug["year"] == 1970

def test_unknown_attribute():
    assert "moons" in available_attributes()
    with pytest.raises(KeyError):
        worldcal.day_info(0, attributes=("horoscope",))

def test_year_and_month_info():
    y = worldcal.year_info(2024)
    assert y["is_leap"] and y["days"] == 366
    assert y["first_weekday"] == 1
    assert y["month_lengths"][1] == 29

    m = worldcal.month_info(1372, 7, calendar="harptos")
    assert m["name"] == "Flamerule"
    assert m["intercalary_after"] == ["Midsummer", "Shieldmeet"]
    assert m["weekdays"][:2] == [0, 1]

def test_event_queries():
    d = StructuredDate(2024, 6, 1)
    assert worldcal.next_occurrence("thanksgiving", d).date == StructuredDate(2024, 11, 28, 4)
    assert worldcal.previous_occurrence("new-year", d).year == 2024
    assert [o.event.id for o in worldcal.events_on_date(StructuredDate(2024, 2, 29))] == ["leap-day"]
    assert worldcal.events_in_range(StructuredDate(2024, 3, 1), StructuredDate(2024, 3, 31)) == []

def test_resolve_and_register():
    st = CalendarStore()
    worldcal.register_calendar(HARPTOS, store=st)
    assert worldcal.resolve("harptos", store=st) == "harptos"
    assert worldcal.calendar_info("harptos", store=st)["weekdays"] == 10

def test_moon_phases_shortcut():
    (luna,) = worldcal.moon_phases(0)
    assert luna.moon.name == "Luna"
    assert worldcal.moon_phases(0, moon="Selune") == []

def test_time_adapter():
    adapter = worldcal.TimeAdapter(worldcal.get_engine("harptos"))
    parts = adapter.decompose(worldcal.to_world_time(StructuredDate(1372, 1, 1, intercalary="Midwinter"), calendar="harptos"))
    assert parts["intercalary"] == "Midwinter"
    assert parts["day_of_year"] == 31
    assert parts["is_leap_year"] is True
    assert adapter.compose(parts) == adapter.compose({"year": 1372, "month": 1, "day": 1, "intercalary": "Midwinter"})
    assert adapter.compose({"year": 1}) == worldcal.to_world_time(StructuredDate(1, 1, 1), calendar="harptos")
    with pytest.raises(KeyError):
        adapter.compose({"month": 2})

def test_month_info_rejects_missing_months():
    with pytest.raises(worldcal.InvalidDateError):
        worldcal.month_info(2024, 13)
    with pytest.raises(worldcal.InvalidDateError):
        worldcal.month_info(2024, 0)

def test_day_info_daylight():
    t = worldcal.to_world_time(StructuredDate(2024, 6, 21))
    info = worldcal.day_info(t, attributes=("daylight",))
    assert info.attributes == {"sunrise": "05:45", "sunset": "20:15"}
