"""
BaZi (Four Pillars of Destiny) pillar computation.

Handles:
- Year pillar with the Li Chun (Start of Spring) cutover
- Month pillar from a fixed month → branch table (Five Tigers stems)
- Day pillar from Julian Day Number against a verified epoch
- Hour pillar from twelve two-hour slots (Five Rats stems)

Month boundaries are approximated by calendar dates, not solar-term
crossings. Every function here is pure: same instant in, same pillars out.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sizhu.errors import InvalidInputError
from sizhu.solar_time import julian_day
from sizhu.tables import (
    EARTHLY_BRANCHES,
    HEAVENLY_STEMS,
    EarthlyBranch,
    HeavenlyStem,
)

logger = logging.getLogger(__name__)

POSITIONS = ("year", "month", "day", "hour")


# ============================================================
# PILLARS
# ============================================================

@dataclass(frozen=True)
class Pillar:
    stem: HeavenlyStem
    branch: EarthlyBranch
    position: str  # "year", "month", "day", "hour"

    def __str__(self):
        return f"{self.stem.pinyin} {self.branch.pinyin} ({self.stem.polarity.value} {self.stem.element.value} {self.branch.animal})"

    @property
    def cycle_index(self) -> int:
        """Position 0-59 in the sexagenary cycle (0 = Jia Zi)."""
        return sexagenary_index(self.stem.index, self.branch.index)

    @property
    def label(self) -> str:
        return f"{self.stem.pinyin}-{self.branch.pinyin}"

    def to_dict(self):
        return {
            "position": self.position,
            "stem": {
                "chinese": self.stem.chinese,
                "pinyin": self.stem.pinyin,
                "element": self.stem.element.value,
                "polarity": self.stem.polarity.value,
            },
            "branch": {
                "chinese": self.branch.chinese,
                "pinyin": self.branch.pinyin,
                "animal": self.branch.animal,
                "element": self.branch.element.value,
                "polarity": self.branch.polarity.value,
                "hidden_stems": list(self.branch.hidden_stems),
            },
            "chinese": f"{self.stem.chinese}{self.branch.chinese}",
            "combined": f"{self.stem.pinyin} {self.branch.pinyin}",
            "cycle_index": self.cycle_index,
            "description": str(self),
        }


@dataclass(frozen=True)
class FourPillars:
    year: Pillar
    month: Pillar
    day: Pillar
    hour: Pillar
    moment: Optional[datetime] = None

    @property
    def day_master(self) -> HeavenlyStem:
        return self.day.stem

    def ordered(self) -> tuple:
        return (self.year, self.month, self.day, self.hour)

    def __str__(self):
        return " ".join(f"{p.stem.chinese}{p.branch.chinese}" for p in self.ordered())

    def to_dict(self):
        month_number = month_number_for_branch(self.month.branch.index)
        slot = HOUR_SLOTS[self.hour.branch.index]
        result = {
            "year_pillar": self.year.to_dict(),
            "month_pillar": self.month.to_dict(),
            "day_pillar": self.day.to_dict(),
            "hour_pillar": self.hour.to_dict(),
            "day_master": {
                "chinese": self.day_master.chinese,
                "pinyin": self.day_master.pinyin,
                "element": self.day_master.element.value,
                "polarity": self.day_master.polarity.value,
                "description": str(self.day_master),
            },
            "chinese": str(self),
        }
        result["month_pillar"]["month_number"] = month_number
        result["month_pillar"]["month_name"] = MONTH_NAMES[month_number - 1]
        result["hour_pillar"]["hour_name"] = slot.name
        result["hour_pillar"]["time_range"] = slot.time_range
        if self.moment is not None:
            result["moment"] = self.moment.isoformat()
        return result


def sexagenary_index(stem_index: int, branch_index: int) -> int:
    """
    Cycle position n with n % 10 == stem and n % 12 == branch.

    Only same-parity pairs exist in the cycle; anything else is rejected.
    """
    if (stem_index - branch_index) % 2:
        raise InvalidInputError(
            f"Stem {stem_index} and branch {branch_index} never pair in the sexagenary cycle"
        )
    return (6 * stem_index - 5 * branch_index) % 60


def pillar_from_index(cycle_index: int, position: str) -> Pillar:
    return Pillar(
        stem=HEAVENLY_STEMS[cycle_index % 10],
        branch=EARTHLY_BRANCHES[cycle_index % 12],
        position=position,
    )


def sexagenary_label(cycle_index: int) -> str:
    """'甲子' for 0, '乙丑' for 1, ... '癸亥' for 59 (wraps mod 60)."""
    pillar = pillar_from_index(cycle_index % 60, "")
    return f"{pillar.stem.chinese}{pillar.branch.chinese}"


# ============================================================
# YEAR PILLAR
# ============================================================

# Li Chun is approximated as Feb 4 every year
LI_CHUN_MONTH = 2
LI_CHUN_DAY = 4

# Year 4 CE was Jia Zi, the start of the cycle
YEAR_EPOCH = 4


def before_li_chun(month: int, day: int, li_chun_day: int = LI_CHUN_DAY) -> bool:
    return month < LI_CHUN_MONTH or (month == LI_CHUN_MONTH and day < li_chun_day)


def sexagenary_year(year: int, month: int, day: int, li_chun_day: int = LI_CHUN_DAY) -> int:
    """Gregorian year whose stem/branch label applies on the given date."""
    return year - 1 if before_li_chun(month, day, li_chun_day) else year


def year_pillar(year: int, month: int, day: int, li_chun_day: int = LI_CHUN_DAY) -> Pillar:
    """
    Compute the Year Pillar.

    The BaZi year starts at Li Chun (Start of Spring), usually Feb 3-5.
    If born before Li Chun, use previous year's pillar.

    Args:
        year: Gregorian year (may be zero or negative for astronomical years)
        month, day: birth month and day
        li_chun_day: February day Li Chun falls on
    """
    offset = sexagenary_year(year, month, day, li_chun_day) - YEAR_EPOCH

    # Python's % is already non-negative for years before 4 CE
    stem_index = offset % 10
    branch_index = offset % 12

    return Pillar(
        stem=HEAVENLY_STEMS[stem_index],
        branch=EARTHLY_BRANCHES[branch_index],
        position="year",
    )


def annual_pillar(year: int) -> Pillar:
    """Pillar of a whole year counted from Li Chun, e.g. 2024 → 甲辰."""
    return year_pillar(year, LI_CHUN_MONTH, LI_CHUN_DAY)


# ============================================================
# MONTH PILLAR
# ============================================================

# Calendar month → branch index of the solar month it mostly falls in.
# February before Li Chun is still Chou; see month_branch_index().
MONTH_BRANCHES = {
    1: 1,    # Chou (Ox)
    2: 2,    # Yin (Tiger), from Li Chun
    3: 3,    # Mao (Rabbit)
    4: 4,    # Chen (Dragon)
    5: 5,    # Si (Snake)
    6: 6,    # Wu (Horse)
    7: 7,    # Wei (Goat)
    8: 8,    # Shen (Monkey)
    9: 9,    # You (Rooster)
    10: 10,  # Xu (Dog)
    11: 11,  # Hai (Pig)
    12: 0,   # Zi (Rat)
}

# Traditional month names, month 1 = Tiger month
MONTH_NAMES = ("正月", "二月", "三月", "四月", "五月", "六月",
               "七月", "八月", "九月", "十月", "十一月", "十二月")

# Five Tigers Escape starting stems for month 1 (Tiger)
TIGER_START_STEMS = {
    0: 2, 5: 2,   # Jia/Ji year → Bing Tiger
    1: 4, 6: 4,   # Yi/Geng year → Wu Tiger
    2: 6, 7: 6,   # Bing/Xin year → Geng Tiger
    3: 8, 8: 8,   # Ding/Ren year → Ren Tiger
    4: 0, 9: 0,   # Wu/Gui year → Jia Tiger
}


def month_branch_index(month: int, day: int, li_chun_day: int = LI_CHUN_DAY) -> int:
    if month not in MONTH_BRANCHES:
        raise InvalidInputError(f"Month must be 1-12, got {month!r}")
    if month == LI_CHUN_MONTH and day < li_chun_day:
        return MONTH_BRANCHES[1]
    return MONTH_BRANCHES[month]


def month_number_for_branch(branch_index: int) -> int:
    """Traditional month number 1-12 (Tiger = 1, Ox = 12)."""
    return (branch_index - 2) % 12 + 1


def month_pillar(year_stem_index: int, month_branch_index: int) -> Pillar:
    """
    Month Pillar by Five Tigers Escape (Wu Hu Dun): the Tiger month stem
    comes from TIGER_START_STEMS, later months count on from it.

    Args:
        year_stem_index: stem index (0-9) of the sexagenary year
        month_branch_index: branch index (0-11); the Tiger month is 2
    """
    start_stem = TIGER_START_STEMS[year_stem_index]

    # Zi and Chou are months 11 and 12 of the same sexagenary year
    months_from_tiger = (month_branch_index - 2) % 12

    stem_index = (start_stem + months_from_tiger) % 10

    return Pillar(
        stem=HEAVENLY_STEMS[stem_index],
        branch=EARTHLY_BRANCHES[month_branch_index],
        position="month",
    )


# ============================================================
# DAY PILLAR
# ============================================================

# 1900-01-01 is a Jia Xu (甲戌) day, cycle index 10. Checked against
# 1949-10-01 Jia Zi and 2000-01-01 Wu Wu.
DAY_EPOCH = (1900, 1, 1)
DAY_EPOCH_CYCLE_INDEX = 10


def julian_day_number(year: int, month: int, day: int) -> int:
    """Integer Julian Day Number of a Gregorian date (JD at noon)."""
    return round(julian_day(datetime(year, month, day, 12)))


_DAY_EPOCH_JDN = julian_day_number(*DAY_EPOCH)


def day_cycle_index(year: int, month: int, day: int) -> int:
    days_since_epoch = julian_day_number(year, month, day) - _DAY_EPOCH_JDN
    return (days_since_epoch + DAY_EPOCH_CYCLE_INDEX) % 60


def day_pillar(date: datetime) -> Pillar:
    """
    Compute the Day Pillar by counting days from the 1900-01-01 epoch.

    The day changes at civil midnight; the Zi hour that starts at 23:00
    keeps the date it was born on.
    """
    return pillar_from_index(day_cycle_index(date.year, date.month, date.day), "day")


# ============================================================
# HOUR PILLAR
# ============================================================

@dataclass(frozen=True)
class HourSlot:
    name: str
    branch_index: int
    start: int  # inclusive hour
    end: int  # exclusive hour

    def contains(self, hour: int) -> bool:
        if not 0 <= hour < 24:
            return False
        if self.start > self.end:  # wraps midnight
            return hour >= self.start or hour < self.end
        return self.start <= hour < self.end

    @property
    def time_range(self) -> str:
        return f"{self.start:02d}:00-{self.end:02d}:00"


# Chinese hours (shi chen) are 2-hour blocks; Zi spans midnight
HOUR_SLOTS = (
    HourSlot("子时", 0, 23, 1),
    HourSlot("丑时", 1, 1, 3),
    HourSlot("寅时", 2, 3, 5),
    HourSlot("卯时", 3, 5, 7),
    HourSlot("辰时", 4, 7, 9),
    HourSlot("巳时", 5, 9, 11),
    HourSlot("午时", 6, 11, 13),
    HourSlot("未时", 7, 13, 15),
    HourSlot("申时", 8, 15, 17),
    HourSlot("酉时", 9, 17, 19),
    HourSlot("戌时", 10, 19, 21),
    HourSlot("亥时", 11, 21, 23),
)

# Five Rats Escape: starting stem for Zi hour based on day stem
RAT_START_STEMS = {
    0: 0, 5: 0,   # Jia/Ji day → Jia Zi hour
    1: 2, 6: 2,   # Yi/Geng day → Bing Zi hour
    2: 4, 7: 4,   # Bing/Xin day → Wu Zi hour
    3: 6, 8: 6,   # Ding/Ren day → Geng Zi hour
    4: 8, 9: 8,   # Wu/Gui day → Ren Zi hour
}


def hour_slot(hour: int) -> HourSlot:
    """
    Two-hour slot containing a clock hour.

    Raises:
        InvalidInputError: no slot matches; with 0-23 fully covered this
            means the caller passed a bad hour
    """
    for slot in HOUR_SLOTS:
        if slot.contains(hour):
            return slot
    raise InvalidInputError(f"Hour {hour!r} matches none of the twelve two-hour slots")


def hour_pillar(day_stem_index: int, hour: int) -> Pillar:
    """
    Compute the Hour Pillar using Five Rats Escape (Wu Shu Dun) formula.

    IMPORTANT: Use the solar-time-corrected hour, not clock time, unless
    the caller opted out of correction.

    Args:
        day_stem_index: index of the day's heavenly stem (0-9)
        hour: hour in 24h format
    """
    branch_index = hour_slot(hour).branch_index

    start_stem = RAT_START_STEMS[day_stem_index]
    stem_index = (start_stem + branch_index) % 10

    return Pillar(
        stem=HEAVENLY_STEMS[stem_index],
        branch=EARTHLY_BRANCHES[branch_index],
        position="hour",
    )


# ============================================================
# FOUR PILLARS
# ============================================================

def compute_four_pillars(moment: datetime) -> FourPillars:
    """
    Compute all four pillars for a (corrected or raw civil) date-time.

    Raises:
        InvalidInputError: moment is not a datetime
    """
    if not isinstance(moment, datetime):
        raise InvalidInputError(f"Expected a datetime, got {type(moment).__name__}")

    yp = year_pillar(moment.year, moment.month, moment.day)
    mp = month_pillar(yp.stem.index, month_branch_index(moment.month, moment.day))
    dp = day_pillar(moment)
    hp = hour_pillar(dp.stem.index, moment.hour)

    pillars = FourPillars(year=yp, month=mp, day=dp, hour=hp, moment=moment)
    logger.debug("Pillars for %s: %s", moment.isoformat(), pillars)
    return pillars


if __name__ == "__main__":
    print("Anchor: 1900-01-01 00:00 →", compute_four_pillars(datetime(1900, 1, 1)))
    print("Expected day pillar: 甲戌")
    sample = compute_four_pillars(datetime(1990, 5, 15, 14, 30))
    for pillar in sample.ordered():
        print(f"  {pillar.position.capitalize():6s}: {pillar}")
