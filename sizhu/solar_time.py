"""
True solar time correction.

Clock time at a birth place differs from the Sun's own time for two reasons:

- Longitude: the clock follows the timezone's standard meridian
  (UTC+8 → 120°E); every degree east or west of it is 4 minutes.
- Equation of time: the apparent Sun runs up to ~16 minutes ahead of or
  behind the mean Sun over the year.

correct() applies both and carries the result across day, month and year
boundaries with ordinary calendar arithmetic.
"""

import logging
import math
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta

import swisseph as swe
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sizhu.errors import InvalidInputError
from sizhu.locations import Location

logger = logging.getLogger(__name__)

J2000 = 2451545.0  # JD of 2000-01-01 12:00 TT
DAYS_PER_CENTURY = 36525.0
MINUTES_PER_DEGREE = 4.0
DEGREES_PER_HOUR = 15.0

# Offsets further than this from the location's own meridian are legal but suspicious
_FAR_FROM_MERIDIAN_DEGREES = 30.0


@dataclass(frozen=True)
class TimeCorrection:
    julian_day: float  # UT
    equation_of_time_minutes: float
    longitude_offset_minutes: float
    total_offset_minutes: float
    standard_meridian: float  # degrees east
    utc_offset_minutes: float  # standard (non-DST) offset used
    dst_minutes: float = 0.0  # removed from clock time before correcting

    def to_dict(self):
        return asdict(self)


# ============================================================
# ASTRONOMY
# ============================================================

def julian_day(moment: datetime) -> float:
    """
    Julian Day of a (naive) date-time on the proleptic Gregorian calendar.

    January and February count as months 13 and 14 of the previous year,
    handled inside swe.julday.
    """
    hour = (moment.hour + moment.minute / 60.0 + moment.second / 3600.0
            + moment.microsecond / 3_600_000_000.0)
    return swe.julday(moment.year, moment.month, moment.day, hour, swe.GREG_CAL)


def equation_of_time(jd: float) -> float:
    """
    Equation of time in minutes for a Julian Day.

    Positive means the apparent (sundial) Sun is ahead of mean time.
    Low-precision solar theory after Meeus, *Astronomical Algorithms*,
    ch. 25 and eq. 28.3: good to a few seconds between 1800 and 2200.
    """
    t = (jd - J2000) / DAYS_PER_CENTURY

    # Geometric mean longitude and mean anomaly of the Sun (degrees)
    l0 = (280.46646 + 36000.76983 * t + 0.0003032 * t * t) % 360.0
    m = (357.52911 + 35999.05029 * t - 0.0001537 * t * t) % 360.0

    # Eccentricity of Earth's orbit
    e = 0.016708634 - 0.000042037 * t - 0.0000001267 * t * t

    # Obliquity of the ecliptic, with the main nutation term
    omega = 125.04 - 1934.136 * t
    eps0 = 23.0 + (26.0 + (21.448 - t * (46.815 + t * (0.00059 - t * 0.001813))) / 60.0) / 60.0
    eps = eps0 + 0.00256 * math.cos(math.radians(omega))

    y = math.tan(math.radians(eps) / 2.0) ** 2
    l0_rad = math.radians(l0)
    m_rad = math.radians(m)

    eot = (y * math.sin(2 * l0_rad)
           - 2 * e * math.sin(m_rad)
           + 4 * e * y * math.sin(m_rad) * math.cos(2 * l0_rad)
           - 0.5 * y * y * math.sin(4 * l0_rad)
           - 1.25 * e * e * math.sin(2 * m_rad))

    return math.degrees(eot) * MINUTES_PER_DEGREE


# ============================================================
# LONGITUDE CORRECTION
# ============================================================

def standard_meridian(utc_offset_minutes: float) -> float:
    """Standard meridian in degrees east for a UTC offset (UTC+8 → 120°E)."""
    return utc_offset_minutes / 60.0 * DEGREES_PER_HOUR


def longitude_correction(longitude: float, meridian: float = 120.0) -> float:
    """
    Local Mean Time correction in minutes.

    Args:
        longitude: birth location longitude in degrees (east positive)
        meridian: timezone standard meridian (120.0 for China/CST)

    Returns:
        Correction in minutes (negative = subtract from clock time)

    Example:
        Nanning (108.37°E): correction = (108.37 - 120.0) * 4 = -46.52 min
        So 2:05 PM clock time → ~1:18 PM LMT
    """
    return (longitude - meridian) * MINUTES_PER_DEGREE


def clock_offsets(civil: datetime, location: Location) -> tuple[float, float]:
    """
    Standard UTC offset and active DST, both in minutes, at a wall-clock time.

    A declared utc_offset_minutes fixes the standard meridian; the timezone,
    if any, only contributes the DST share in force at that moment. A
    location with a timezone alone takes its standard offset from the zone
    (historical changes included) with the DST share split off.
    """
    if not location.timezone:
        return float(location.utc_offset_minutes), 0.0

    try:
        zone = ZoneInfo(location.timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidInputError(f"Unknown timezone: {location.timezone!r}") from exc
    local_dt = civil.replace(tzinfo=zone)
    dst = local_dt.dst()
    dst_minutes = dst.total_seconds() / 60.0 if dst else 0.0

    if location.utc_offset_minutes is not None:
        return float(location.utc_offset_minutes), dst_minutes
    offset = local_dt.utcoffset().total_seconds() / 60.0
    return offset - dst_minutes, dst_minutes


# ============================================================
# CORRECTOR
# ============================================================

def correct(civil: datetime, location: Location) -> tuple[datetime, TimeCorrection]:
    """
    Convert a civil (clock) date-time at a location to true solar time.

    Args:
        civil: wall-clock date-time at the location; tzinfo, if any, is dropped
        location: where the clock was read

    Returns:
        (corrected date-time, TimeCorrection breakdown in minutes)

    Raises:
        InvalidInputError: not a datetime, unknown timezone, or the result
            leaves the representable date range
    """
    if not isinstance(civil, datetime):
        raise InvalidInputError(f"Expected a datetime, got {type(civil).__name__}")
    if not isinstance(location, Location):
        raise InvalidInputError(f"Expected a Location, got {type(location).__name__}")
    if civil.tzinfo is not None:
        civil = civil.replace(tzinfo=None)

    utc_offset, dst_minutes = clock_offsets(civil, location)
    standard_time = civil - timedelta(minutes=dst_minutes)

    try:
        jd = julian_day(standard_time - timedelta(minutes=utc_offset))
    except OverflowError as exc:
        raise InvalidInputError(f"Date out of range: {civil.isoformat()}") from exc

    meridian = standard_meridian(utc_offset)
    if abs(location.longitude - meridian) > _FAR_FROM_MERIDIAN_DEGREES:
        logger.warning(
            "%s lies %.1f° from its standard meridian %.1f°E",
            location.name, location.longitude - meridian, meridian,
        )

    eot = equation_of_time(jd)
    lon = longitude_correction(location.longitude, meridian)
    total = eot + lon

    try:
        corrected = standard_time + timedelta(minutes=total)
    except OverflowError as exc:
        raise InvalidInputError(f"Corrected date out of range: {civil.isoformat()}") from exc

    logger.debug(
        "True solar time for %s at %s: eot=%+.2f lon=%+.2f dst=%.0f → %s",
        location.name, civil.isoformat(), eot, lon, dst_minutes, corrected.isoformat(),
    )

    return corrected, TimeCorrection(
        julian_day=jd,
        equation_of_time_minutes=eot,
        longitude_offset_minutes=lon,
        total_offset_minutes=total,
        standard_meridian=meridian,
        utc_offset_minutes=utc_offset,
        dst_minutes=dst_minutes,
    )


# ============================================================
# FORMATTING
# ============================================================

def _signed(minutes: float) -> str:
    return f"{'+' if minutes > 0 else ''}{minutes:.2f} min"


def describe_correction(correction: TimeCorrection) -> str:
    """One-line breakdown, e.g. 'equation of time: +3.66 min, longitude: -14.37 min, total: -10.71 min'."""
    parts = [
        f"equation of time: {_signed(correction.equation_of_time_minutes)}",
        f"longitude: {_signed(correction.longitude_offset_minutes)}",
        f"total: {_signed(correction.total_offset_minutes)}",
    ]
    if correction.dst_minutes:
        parts.insert(0, f"daylight saving removed: {correction.dst_minutes:.0f} min")
        parts.append(f"net clock shift: {_signed(net_shift_minutes(correction))}")
    return ", ".join(parts)


def net_shift_minutes(correction: TimeCorrection) -> float:
    """Corrected time minus clock time: solar correction less any DST removed."""
    return correction.total_offset_minutes - correction.dst_minutes


def format_solar_time(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d %H:%M:%S")


if __name__ == "__main__":
    from sizhu.locations import get_location

    for city in ["Beijing", "Shanghai", "Guangzhou", "Urumqi", "Lhasa"]:
        loc = get_location(city)
        corrected, breakdown = correct(datetime(1990, 5, 15, 14, 30), loc)
        print(f"{loc.pinyin:10s} {format_solar_time(corrected)}  {describe_correction(breakdown)}")
