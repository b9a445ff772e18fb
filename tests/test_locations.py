"""Gazetteer lookup and Location validation."""

import math

import pytest

from sizhu.errors import InvalidInputError, UnsupportedLocationError
from sizhu.locations import (
    CITIES,
    Location,
    all_cities,
    get_location,
    location_from_coordinates,
    search_cities,
)


def test_lookup_by_chinese_and_pinyin():
    assert get_location("北京") is get_location("Beijing")
    assert get_location("beijing") is get_location("BEIJING")


@pytest.mark.parametrize("name", ["西安", "Xi'an", "xian", "XI AN"])
def test_lookup_ignores_punctuation(name):
    assert get_location(name).pinyin == "Xi'an"


def test_gazetteer_city_fields():
    beijing = get_location("北京")
    assert beijing.longitude == pytest.approx(116.4074)
    assert beijing.utc_offset_minutes == 480
    assert beijing.timezone == "Asia/Shanghai"
    assert get_location("Hong Kong").timezone == "Asia/Hong_Kong"


@pytest.mark.parametrize("name", ["Atlantis", "", "   ", None])
def test_unknown_city_rejected(name):
    with pytest.raises(UnsupportedLocationError):
        get_location(name)


def test_unsupported_location_is_lookup_error():
    with pytest.raises(LookupError):
        get_location("Atlantis")


def test_all_cities():
    names = all_cities()
    assert len(names) == len(CITIES)
    assert "北京" in names
    assert "乌鲁木齐" in names


def test_search_cities():
    assert get_location("Shanghai") in search_cities("shang")
    assert get_location("Harbin") in search_cities("哈尔")
    assert len(search_cities("")) == 8
    assert search_cities("zzz") == []


@pytest.mark.parametrize("kwargs", [
    {"longitude": 200.0, "latitude": 0.0, "utc_offset_minutes": 0},
    {"longitude": 0.0, "latitude": -91.0, "utc_offset_minutes": 0},
    {"longitude": math.nan, "latitude": 0.0, "utc_offset_minutes": 0},
    {"longitude": "116", "latitude": 0.0, "utc_offset_minutes": 0},
    {"longitude": 0.0, "latitude": 0.0},
    {"longitude": 0.0, "latitude": 0.0, "utc_offset_minutes": math.inf},
])
def test_location_validation(kwargs):
    with pytest.raises(InvalidInputError):
        Location(name="bad", **kwargs)


def test_location_from_coordinates_detects_timezone():
    loc = location_from_coordinates(39.9042, 116.4074, name="Beijing")
    assert loc.timezone == "Asia/Shanghai"
    assert loc.utc_offset_minutes is None
    assert loc.name == "Beijing"


def test_location_from_coordinates_default_name():
    loc = location_from_coordinates(48.8566, 2.3522)
    assert loc.timezone == "Europe/Paris"
    assert loc.name == "48.8566,2.3522"


def test_location_from_coordinates_rejects_bad_latitude():
    with pytest.raises(InvalidInputError):
        location_from_coordinates(100.0, 0.0)
