"""
Chart creation library.

Plain-data entry points for callers (web handlers, the CLI): inputs are
datetimes, ISO-8601 strings, gazetteer names or dicts; outputs are
JSON-ready dicts.

Usage from Python:
    from sizhu.chart import build_chart
    build_chart(birth_date="1990-05-15", birth_time="14:30", location="Beijing")
"""

import logging
import re
from collections.abc import Mapping
from datetime import datetime
from typing import Iterable, Optional, Union

from sizhu import bazi, elements, solar_time
from sizhu.bazi import POSITIONS, FourPillars, Pillar
from sizhu.errors import InvalidInputError
from sizhu.interpret import complete_interpretation
from sizhu.locations import Location, get_location
from sizhu.tables import branch_from_symbol, stem_from_symbol

logger = logging.getLogger(__name__)

TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Supported birth years for user-entered dates
MIN_YEAR = 1900
MAX_YEAR = 2100

LocationLike = Union[Location, str, Mapping]
ChartLike = Union[FourPillars, Mapping]


# ============================================================
# INPUT COERCION
# ============================================================

def parse_birth_datetime(birth_date: str, birth_time: str) -> datetime:
    """
    Turn a "YYYY-MM-DD" date and an "HH:MM" (24h) time into a datetime.

    Every problem is collected and reported in one InvalidInputError.
    """
    errors = []
    date_value = None

    if not isinstance(birth_date, str) or not DATE_PATTERN.match(birth_date.strip()):
        errors.append(f"birth date must be YYYY-MM-DD, got {birth_date!r}")
    else:
        try:
            date_value = datetime.strptime(birth_date.strip(), "%Y-%m-%d")
        except ValueError:
            errors.append(f"birth date {birth_date!r} is not a calendar date")
        else:
            if not MIN_YEAR <= date_value.year <= MAX_YEAR:
                errors.append(f"birth year must be between {MIN_YEAR} and {MAX_YEAR}")

    if not isinstance(birth_time, str) or not TIME_PATTERN.match(birth_time.strip()):
        errors.append(f"birth time must be HH:MM (24h), got {birth_time!r}")

    if errors:
        raise InvalidInputError("; ".join(errors))

    hour, minute = map(int, birth_time.strip().split(":"))
    return date_value.replace(hour=hour, minute=minute)


def coerce_datetime(value: Union[datetime, str]) -> datetime:
    """datetime or ISO-8601 string → naive wall-clock datetime."""
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str):
        try:
            moment = datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise InvalidInputError(f"Not an ISO-8601 date-time: {value!r}") from exc
    else:
        raise InvalidInputError(f"Expected a datetime or ISO-8601 string, got {type(value).__name__}")
    return moment.replace(tzinfo=None) if moment.tzinfo is not None else moment


def coerce_location(value: LocationLike) -> Location:
    """Location, gazetteer name, or a mapping with longitude/latitude/offset."""
    if isinstance(value, Location):
        return value
    if isinstance(value, str):
        return get_location(value)
    if isinstance(value, Mapping):
        try:
            longitude = value["longitude"]
            latitude = value["latitude"]
        except KeyError as exc:
            raise InvalidInputError(f"Location is missing {exc.args[0]!r}") from exc
        return Location(
            name=value.get("name", ""),
            longitude=longitude,
            latitude=latitude,
            utc_offset_minutes=value.get("utc_offset_minutes"),
            timezone=value.get("timezone"),
        )
    raise InvalidInputError(f"Unsupported location value: {value!r}")


def _pillar_from_data(position: str, data) -> Pillar:
    if isinstance(data, Pillar):
        return Pillar(stem_from_symbol(data.stem), branch_from_symbol(data.branch), position)
    if not isinstance(data, Mapping) or "stem" not in data or "branch" not in data:
        raise InvalidInputError(f"{position} pillar needs a stem and a branch, got {data!r}")
    stem, branch = data["stem"], data["branch"]
    # Accept the nested form produced by Pillar.to_dict()
    if isinstance(stem, Mapping):
        stem = stem.get("chinese") or stem.get("pinyin")
    if isinstance(branch, Mapping):
        branch = branch.get("chinese") or branch.get("pinyin")
    return Pillar(stem_from_symbol(stem), branch_from_symbol(branch), position)


def coerce_pillars(chart: ChartLike) -> FourPillars:
    """
    FourPillars, or a dict keyed year_pillar..hour_pillar (or year..hour)
    whose values hold a stem and a branch.

    Raises:
        InvalidInputError: missing pillar or unknown stem/branch symbol
    """
    if isinstance(chart, FourPillars):
        return chart
    if not isinstance(chart, Mapping):
        raise InvalidInputError(f"Expected a chart, got {type(chart).__name__}")
    built = {}
    for position in POSITIONS:
        data = chart.get(f"{position}_pillar", chart.get(position))
        if data is None:
            raise InvalidInputError(f"Chart is missing the {position} pillar")
        built[position] = _pillar_from_data(position, data)
    return FourPillars(**built)


# ============================================================
# EXTERNAL OPERATIONS
# ============================================================

def correct_solar_time(civil_datetime: Union[datetime, str], location: LocationLike) -> dict:
    """
    Returns:
        dict with corrected_datetime (ISO-8601) and the correction breakdown
        in minutes
    """
    corrected, breakdown = solar_time.correct(coerce_datetime(civil_datetime),
                                              coerce_location(location))
    result = {"corrected_datetime": corrected.isoformat()}
    result.update(breakdown.to_dict())
    result["net_shift_minutes"] = solar_time.net_shift_minutes(breakdown)
    result["description"] = solar_time.describe_correction(breakdown)
    return result


def compute_chart(moment: Union[datetime, str]) -> dict:
    """Four pillars for a date-time, as year_pillar..hour_pillar dicts."""
    return bazi.compute_four_pillars(coerce_datetime(moment)).to_dict()


def tally_elements(chart: ChartLike) -> dict:
    """{wood, fire, earth, metal, water} weights for a chart."""
    return elements.tally(coerce_pillars(chart)).as_dict()


def classify_relationships(chart: ChartLike, day_master_stem=None) -> dict:
    """
    Ten God labels per pillar, keyed year_pillar..hour_pillar.

    Each list holds stem, branch, then hidden stems, in that order.
    """
    relations = elements.classify(coerce_pillars(chart), day_master_stem)
    return {
        f"{position}_pillar": [entry.ten_god.label for entry in entries]
        for position, entries in relations.items()
    }


# ============================================================
# FULL CHART
# ============================================================

def build_chart(birth_date: str, birth_time: str,
                location: Optional[LocationLike] = None,
                use_true_solar_time: bool = True,
                interpret: bool = False,
                categories: Optional[Iterable[str]] = None) -> dict:
    """
    Compute a complete chart from user-entered birth data.

    Args:
        birth_date: "YYYY-MM-DD"
        birth_time: "HH:MM" (24h, local clock time)
        location: Location, gazetteer name or mapping; required for
            true solar time
        use_true_solar_time: False computes from the raw clock time
        interpret: include templated commentary
        categories: commentary categories (all by default)

    Returns:
        dict with input, solar_time (or None), pillars, elements,
        ten_gods and optionally interpretation
    """
    civil = parse_birth_datetime(birth_date, birth_time)
    loc = coerce_location(location) if location is not None else None

    solar = None
    moment = civil
    if use_true_solar_time and loc is not None:
        moment, breakdown = solar_time.correct(civil, loc)
        solar = {
            "corrected_datetime": moment.isoformat(),
            "formatted": solar_time.format_solar_time(moment),
            "description": solar_time.describe_correction(breakdown),
            **breakdown.to_dict(),
            "net_shift_minutes": solar_time.net_shift_minutes(breakdown),
        }
    elif use_true_solar_time:
        logger.info("No location given; computing from clock time %s", civil.isoformat())

    pillars = bazi.compute_four_pillars(moment)
    histogram = elements.tally(pillars)
    relations = elements.classify(pillars)

    chart = {
        "input": {
            "birth_date": birth_date,
            "birth_time": birth_time,
            "civil_datetime": civil.isoformat(),
            "location": loc.to_dict() if loc is not None else None,
            "use_true_solar_time": solar is not None,
        },
        "solar_time": solar,
        "pillars": pillars.to_dict(),
        "elements": histogram.as_dict(),
        "element_summary": elements.element_summary(histogram).to_dict(),
        "ten_gods": {
            f"{position}_pillar": [entry.to_dict() for entry in entries]
            for position, entries in relations.items()
        },
    }
    if interpret:
        chart["interpretation"] = complete_interpretation(pillars, categories)
    return chart
