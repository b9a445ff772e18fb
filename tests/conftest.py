"""
Shared fixtures.

The reference chart is 1990-05-15 14:30, 庚午 辛巳 庚辰 癸未, a Geng Metal
day master.
"""

from datetime import datetime

import pytest

from sizhu.bazi import compute_four_pillars
from sizhu.locations import Location


@pytest.fixture
def reference_moment():
    return datetime(1990, 5, 15, 14, 30)


@pytest.fixture
def reference_pillars(reference_moment):
    return compute_four_pillars(reference_moment)


@pytest.fixture
def beijing_fixed_offset():
    """Beijing with a plain UTC+8 offset and no timezone, so no DST applies."""
    return Location(name="Beijing", longitude=116.4074, latitude=39.9042,
                    utc_offset_minutes=480)
