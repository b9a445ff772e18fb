"""Chart facade: plain-data entry points and full orchestration."""

from datetime import datetime

import pytest

from sizhu import (
    InvalidInputError,
    UnsupportedLocationError,
    build_chart,
    classify_relationships,
    compute_chart,
    correct_solar_time,
    parse_birth_datetime,
    tally_elements,
)

BEIJING_FIXED = {"longitude": 116.4074, "latitude": 39.9042, "utc_offset_minutes": 480}


def test_parse_birth_datetime():
    assert parse_birth_datetime("1990-05-15", "14:30") == datetime(1990, 5, 15, 14, 30)
    assert parse_birth_datetime("1990-05-15", "9:05") == datetime(1990, 5, 15, 9, 5)


def test_parse_birth_datetime_reports_all_problems():
    with pytest.raises(InvalidInputError) as excinfo:
        parse_birth_datetime("1899-12-31", "24:00")
    message = str(excinfo.value)
    assert "year" in message
    assert "time" in message


@pytest.mark.parametrize("birth_date, birth_time", [
    ("1990-02-30", "12:00"),
    ("1990/05/15", "12:00"),
    ("2101-01-01", "12:00"),
    ("1990-05-15", "12:60"),
    ("1990-05-15", "noon"),
])
def test_parse_birth_datetime_rejects(birth_date, birth_time):
    with pytest.raises(InvalidInputError):
        parse_birth_datetime(birth_date, birth_time)


def test_correct_solar_time_accepts_plain_data():
    result = correct_solar_time("1990-05-15T14:30:00", BEIJING_FIXED)
    assert result["corrected_datetime"].startswith("1990-05-15T14:1")
    assert result["longitude_offset_minutes"] == pytest.approx(-14.3704, abs=1e-3)
    assert result["total_offset_minutes"] == pytest.approx(-10.7, abs=0.3)
    assert "description" in result


def test_correct_solar_time_by_city_name():
    result = correct_solar_time(datetime(2010, 3, 1, 12, 0), "上海")
    assert result["utc_offset_minutes"] == 480.0


def test_correct_solar_time_rejects_bad_input():
    with pytest.raises(InvalidInputError):
        correct_solar_time("not a date", BEIJING_FIXED)
    with pytest.raises(InvalidInputError):
        correct_solar_time("1990-05-15T14:30", {"latitude": 39.9})
    with pytest.raises(UnsupportedLocationError):
        correct_solar_time("1990-05-15T14:30", "Atlantis")


def test_compute_chart():
    chart = compute_chart("1990-05-15T14:30")
    assert chart["chinese"] == "庚午 辛巳 庚辰 癸未"
    assert chart["year_pillar"]["stem"]["chinese"] == "庚"
    assert chart["hour_pillar"]["branch"]["pinyin"] == "Wei"


def test_tally_elements_from_computed_chart():
    assert tally_elements(compute_chart(datetime(1990, 5, 15, 14, 30))) == {
        "wood": 1.0, "fire": 3.5, "earth": 4.0, "metal": 3.5, "water": 1.5,
    }


def test_tally_elements_from_symbols():
    chart = {
        "year": {"stem": "甲", "branch": "子"},
        "month": {"stem": "Jia", "branch": "Rat"},
        "day": {"stem": 0, "branch": 0},
        "hour": {"stem": "jia", "branch": "zi"},
    }
    assert tally_elements(chart) == {
        "wood": 4.0, "fire": 0.0, "earth": 0.0, "metal": 0.0, "water": 6.0,
    }


def test_classify_relationships_labels():
    result = classify_relationships(compute_chart("1990-05-15T14:30"))
    assert result["year_pillar"] == [
        "Companion (比肩 Bi Jian)",
        "Direct Officer (正官 Zheng Guan)",
        "Direct Officer (正官 Zheng Guan)",
        "Direct Resource (正印 Zheng Yin)",
    ]
    assert len(result["month_pillar"]) == 5


def test_classify_relationships_explicit_day_master():
    result = classify_relationships(compute_chart("1990-05-15T14:30"), day_master_stem="甲")
    assert result["day_pillar"][0] == "7 Killings (七杀 Qi Sha)"


def test_chart_missing_pillar_rejected():
    with pytest.raises(InvalidInputError):
        tally_elements({"year": {"stem": "甲", "branch": "子"}})


def test_chart_unknown_symbol_rejected():
    chart = {pos: {"stem": "甲", "branch": "子"} for pos in ("year", "month", "day")}
    chart["hour"] = {"stem": "Q", "branch": "子"}
    with pytest.raises(InvalidInputError):
        classify_relationships(chart)


def test_build_chart_with_city():
    chart = build_chart("1990-05-15", "14:30", location="Beijing")
    assert chart["solar_time"]["dst_minutes"] == 60.0
    assert chart["solar_time"]["net_shift_minutes"] == pytest.approx(
        chart["solar_time"]["total_offset_minutes"] - 60.0)
    assert "net clock shift" in chart["solar_time"]["description"]
    assert chart["pillars"]["chinese"] == "庚午 辛巳 庚辰 癸未"
    assert chart["input"]["location"]["pinyin"] == "Beijing"
    assert chart["input"]["use_true_solar_time"] is True
    assert "interpretation" not in chart
    assert len(chart["ten_gods"]["day_pillar"]) == 5


def test_build_chart_early_date_keeps_city_offset():
    """Gazetteer cities stay on UTC+8 even where the zone data still has local mean time."""
    chart = build_chart("1900-06-01", "12:00", location="Beijing")
    assert chart["solar_time"]["standard_meridian"] == 120.0
    assert chart["solar_time"]["utc_offset_minutes"] == 480.0


def test_build_chart_solar_time_policy():
    """No location, or the switch turned off, means the clock time is used."""
    without_location = build_chart("1990-05-15", "14:30")
    assert without_location["solar_time"] is None
    assert without_location["pillars"]["moment"] == "1990-05-15T14:30:00"

    switched_off = build_chart("1990-05-15", "14:30", location=BEIJING_FIXED,
                               use_true_solar_time=False)
    assert switched_off["solar_time"] is None
    assert switched_off["input"]["use_true_solar_time"] is False
    assert switched_off["input"]["location"]["longitude"] == 116.4074


def test_build_chart_solar_time_changes_hour():
    """Urumqi at 00:30 by the clock is the previous day's Zi hour by the sun."""
    civil = build_chart("2000-01-01", "00:30", use_true_solar_time=False)
    solar = build_chart("2000-01-01", "00:30", location="Urumqi")
    assert solar["solar_time"]["corrected_datetime"].startswith("1999-12-31T22:")
    assert solar["pillars"]["day_pillar"] != civil["pillars"]["day_pillar"]
    assert solar["pillars"]["hour_pillar"]["branch"]["pinyin"] == "Hai"


def test_build_chart_with_interpretation():
    chart = build_chart("1990-05-15", "14:30", location=BEIJING_FIXED,
                        interpret=True, categories=["wealth"])
    interpretation = chart["interpretation"]
    assert interpretation["basic"]["basic_info"]["day_master"] == "Geng"
    assert [d["category"] for d in interpretation["detailed"]] == ["wealth"]


def test_build_chart_rejects_bad_date():
    with pytest.raises(InvalidInputError):
        build_chart("15/05/1990", "14:30", location="Beijing")
