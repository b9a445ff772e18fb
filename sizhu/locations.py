"""
Birth locations.

A Location carries longitude/latitude plus either a fixed UTC offset or an
IANA timezone name. The gazetteer is a fixed table of Chinese cities, looked
up by Chinese or pinyin name. Arbitrary coordinates get their timezone from
timezonefinder (no network lookup).

Usage:
    from sizhu.locations import get_location, location_from_coordinates
    beijing = get_location("Beijing")
    nanning = location_from_coordinates(22.8170, 108.3665, name="Nanning")
"""

import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from timezonefinder import TimezoneFinder

from sizhu.errors import InvalidInputError, UnsupportedLocationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Location:
    name: str
    longitude: float  # degrees, east positive
    latitude: float  # degrees, north positive
    utc_offset_minutes: Optional[int] = None
    timezone: Optional[str] = None  # IANA name, wins over utc_offset_minutes
    pinyin: str = ""
    country: str = ""

    def __post_init__(self):
        for field_name in ("longitude", "latitude"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise InvalidInputError(f"{field_name} must be a finite number, got {value!r}")
        if not -180.0 <= self.longitude <= 180.0:
            raise InvalidInputError(f"longitude must be within [-180, 180], got {self.longitude}")
        if not -90.0 <= self.latitude <= 90.0:
            raise InvalidInputError(f"latitude must be within [-90, 90], got {self.latitude}")
        if self.utc_offset_minutes is None and not self.timezone:
            raise InvalidInputError(
                f"location {self.name!r} needs a utc_offset_minutes or a timezone name"
            )
        if self.utc_offset_minutes is not None and (
                isinstance(self.utc_offset_minutes, bool)
                or not isinstance(self.utc_offset_minutes, (int, float))
                or not math.isfinite(self.utc_offset_minutes)):
            raise InvalidInputError(
                f"utc_offset_minutes must be a finite number, got {self.utc_offset_minutes!r}"
            )

    def to_dict(self):
        return {
            "name": self.name,
            "pinyin": self.pinyin,
            "country": self.country,
            "longitude": self.longitude,
            "latitude": self.latitude,
            "utc_offset_minutes": self.utc_offset_minutes,
            "timezone": self.timezone,
        }


# ============================================================
# GAZETTEER
# ============================================================

def _city(chinese, pinyin, longitude, latitude, timezone="Asia/Shanghai"):
    return Location(
        name=chinese,
        pinyin=pinyin,
        longitude=longitude,
        latitude=latitude,
        utc_offset_minutes=480,
        timezone=timezone,
        country="中国",
    )


CITIES = (
    _city("北京", "Beijing", 116.4074, 39.9042),
    _city("上海", "Shanghai", 121.4737, 31.2304),
    _city("广州", "Guangzhou", 113.2644, 23.1291),
    _city("深圳", "Shenzhen", 114.0579, 22.5431),
    _city("天津", "Tianjin", 117.1994, 39.0851),
    _city("重庆", "Chongqing", 106.5504, 29.5630),
    _city("杭州", "Hangzhou", 120.1551, 30.2741),
    _city("南京", "Nanjing", 118.7969, 32.0603),
    _city("武汉", "Wuhan", 114.3054, 30.5928),
    _city("成都", "Chengdu", 104.0668, 30.5728),
    _city("西安", "Xi'an", 108.9402, 34.3416),
    _city("长沙", "Changsha", 112.9440, 28.2282),
    _city("郑州", "Zhengzhou", 113.6401, 34.7466),
    _city("济南", "Jinan", 117.1205, 36.6512),
    _city("青岛", "Qingdao", 120.3826, 36.0671),
    _city("大连", "Dalian", 121.6147, 38.9140),
    _city("沈阳", "Shenyang", 123.4315, 41.8057),
    _city("哈尔滨", "Harbin", 126.6424, 45.7576),
    _city("长春", "Changchun", 125.3245, 43.8868),
    _city("石家庄", "Shijiazhuang", 114.4995, 38.1006),
    _city("太原", "Taiyuan", 112.5492, 37.8706),
    _city("呼和浩特", "Hohhot", 111.7519, 40.8414),
    _city("乌鲁木齐", "Urumqi", 87.6168, 43.8256),
    _city("兰州", "Lanzhou", 103.8343, 36.0611),
    _city("西宁", "Xining", 101.7787, 36.6232),
    _city("银川", "Yinchuan", 106.2309, 38.4872),
    _city("拉萨", "Lhasa", 91.1119, 29.6625),
    _city("昆明", "Kunming", 102.8329, 24.8801),
    _city("贵阳", "Guiyang", 106.7070, 26.5982),
    _city("南宁", "Nanning", 108.3665, 22.8170),
    _city("海口", "Haikou", 110.3312, 20.0442),
    _city("福州", "Fuzhou", 119.2965, 26.0745),
    _city("厦门", "Xiamen", 118.0894, 24.4798),
    _city("南昌", "Nanchang", 115.8921, 28.6765),
    _city("合肥", "Hefei", 117.2830, 31.8612),
    _city("苏州", "Suzhou", 120.5853, 31.2990),
    _city("香港", "Hong Kong", 114.1734, 22.3193, timezone="Asia/Hong_Kong"),
    _city("澳门", "Macau", 113.5491, 22.1987, timezone="Asia/Macau"),
    _city("台北", "Taipei", 121.5654, 25.0330, timezone="Asia/Taipei"),
)


def _normalize(name: str) -> str:
    return "".join(ch for ch in name.casefold() if ch not in " '-_")


_CITY_INDEX = {}
for _loc in CITIES:
    _CITY_INDEX[_normalize(_loc.name)] = _loc
    _CITY_INDEX[_normalize(_loc.pinyin)] = _loc
del _loc


def get_location(name: str) -> Location:
    """
    Look up a gazetteer city by Chinese or pinyin name.

    Matching ignores case, spaces, hyphens and apostrophes, so "xian",
    "Xi'an" and "西安" are the same city.

    Raises:
        UnsupportedLocationError: the name is not in the gazetteer
    """
    if not isinstance(name, str) or not name.strip():
        raise UnsupportedLocationError(f"Unsupported location: {name!r}")
    location = _CITY_INDEX.get(_normalize(name))
    if location is None:
        raise UnsupportedLocationError(f"Unsupported location: {name!r}")
    return location


def all_cities() -> list[str]:
    """Chinese names of every gazetteer city, in table order."""
    return [c.name for c in CITIES]


def search_cities(query: str, limit: int = 8) -> list[Location]:
    """
    Substring search over Chinese name, pinyin and country.
    An empty query returns the first ``limit`` cities.
    """
    if not query:
        return list(CITIES[:limit])
    needle = _normalize(query)
    return [
        c for c in CITIES
        if needle in _normalize(c.name)
        or needle in _normalize(c.pinyin)
        or needle in _normalize(c.country)
    ]


# ============================================================
# COORDINATE LOOKUP
# ============================================================

@lru_cache(maxsize=1)
def _timezone_finder() -> TimezoneFinder:
    return TimezoneFinder()


def location_from_coordinates(latitude: float, longitude: float,
                              name: str = "") -> Location:
    """
    Build a Location for arbitrary coordinates, detecting its timezone.

    The offset itself is resolved per instant by the solar time corrector,
    which is what makes historical DST (e.g. China 1986-1991) work.

    Raises:
        InvalidInputError: coordinates out of range
        UnsupportedLocationError: no timezone covers the coordinates
    """
    # Validate before asking timezonefinder, which rejects bad input with its own error type
    Location(name=name, longitude=longitude, latitude=latitude, utc_offset_minutes=0)

    tz_name = _timezone_finder().timezone_at(lat=latitude, lng=longitude)
    if tz_name is None:
        raise UnsupportedLocationError(
            f"Could not determine timezone for ({latitude}, {longitude})"
        )
    logger.debug("Timezone for (%s, %s): %s", latitude, longitude, tz_name)
    return Location(
        name=name or f"{latitude:.4f},{longitude:.4f}",
        longitude=longitude,
        latitude=latitude,
        timezone=tz_name,
    )
