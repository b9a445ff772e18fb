"""Four Pillars (BaZi) charts with true solar time correction."""

from sizhu.chart import (
    build_chart,
    classify_relationships,
    compute_chart,
    correct_solar_time,
    parse_birth_datetime,
    tally_elements,
)
from sizhu.errors import BaziError, InvalidInputError, UnsupportedLocationError
from sizhu.locations import (
    Location,
    all_cities,
    get_location,
    location_from_coordinates,
    search_cities,
)

__version__ = "0.1.0"

__all__ = [
    "BaziError",
    "InvalidInputError",
    "Location",
    "UnsupportedLocationError",
    "all_cities",
    "build_chart",
    "classify_relationships",
    "compute_chart",
    "correct_solar_time",
    "get_location",
    "location_from_coordinates",
    "parse_birth_datetime",
    "search_cities",
    "tally_elements",
]
