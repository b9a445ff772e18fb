"""Command-line entry point."""

import json

import pytest

from sizhu.locations import CITIES
from sizhu.run import main


def _run(capsys, *argv):
    main(list(argv))
    return json.loads(capsys.readouterr().out)


def test_chart_for_city(capsys):
    result = _run(capsys, "--birth-date", "1990-05-15", "--birth-time", "14:30", "--city", "北京")
    assert result["pillars"]["chinese"] == "庚午 辛巳 庚辰 癸未"
    assert result["solar_time"]["dst_minutes"] == 60.0


def test_output_keeps_chinese_characters(capsys):
    main(["--birth-date", "1990-05-15", "--birth-time", "14:30", "--no-solar-time"])
    out = capsys.readouterr().out
    assert "庚午" in out
    assert json.loads(out)["solar_time"] is None


def test_coordinates_with_fixed_offset(capsys):
    result = _run(capsys, "--birth-date", "1990-05-15", "--birth-time", "14:30",
                  "--longitude", "116.4074", "--latitude", "39.9042", "--utc-offset", "8")
    assert result["solar_time"]["utc_offset_minutes"] == 480.0
    assert result["solar_time"]["dst_minutes"] == 0.0


def test_coordinates_with_detected_timezone(capsys):
    result = _run(capsys, "--birth-date", "2010-03-01", "--birth-time", "12:00",
                  "--longitude", "116.4074", "--latitude", "39.9042")
    assert result["input"]["location"]["timezone"] == "Asia/Shanghai"


def test_interpret_with_categories(capsys):
    result = _run(capsys, "--birth-date", "1990-05-15", "--birth-time", "14:30",
                  "--city", "Beijing", "--categories", "career,health")
    assert [d["category"] for d in result["interpretation"]["detailed"]] == ["career", "health"]


def test_list_cities(capsys):
    result = _run(capsys, "--list-cities")
    assert len(result) == len(CITIES)
    assert result[0]["name"] == "北京"


def test_unknown_city_exits_with_status_2(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--birth-date", "1990-05-15", "--birth-time", "14:30", "--city", "Atlantis"])
    assert excinfo.value.code == 2
    captured = capsys.readouterr()
    assert "Atlantis" in captured.err
    assert captured.out == ""


def test_bad_time_exits_with_status_2(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--birth-date", "1990-05-15", "--birth-time", "25:00"])
    assert excinfo.value.code == 2
    assert "birth time" in capsys.readouterr().err


def test_half_coordinates_rejected(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--birth-date", "1990-05-15", "--birth-time", "14:30", "--longitude", "116.4"])
    assert excinfo.value.code == 2


def test_missing_birth_date_is_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        main(["--birth-time", "14:30"])
    assert excinfo.value.code == 2


def test_empty_categories_is_usage_error(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--birth-date", "1990-05-15", "--birth-time", "14:30", "--categories", ""])
    assert excinfo.value.code == 2
    captured = capsys.readouterr()
    assert "no categories given" in captured.err
    assert captured.out == ""


def test_unknown_category_is_usage_error():
    with pytest.raises(SystemExit):
        main(["--birth-date", "1990-05-15", "--birth-time", "14:30", "--categories", "lottery"])
