"""
Static sexagenary lookup data.

Holds:
- The 10 Heavenly Stems and 12 Earthly Branches
- Element and polarity of every stem and branch
- Hidden stems of every branch (main qi first)
- The dense 10x10 Ten Gods (十神) table, indexed by stem index

Everything here is immutable and built once at import.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Union

from sizhu.errors import InvalidInputError


# ============================================================
# FUNDAMENTAL DATA STRUCTURES
# ============================================================

class Polarity(Enum):
    YANG = "yang"
    YIN = "yin"


class Element(Enum):
    WOOD = "wood"
    FIRE = "fire"
    EARTH = "earth"
    METAL = "metal"
    WATER = "water"

    @property
    def chinese(self) -> str:
        return _ELEMENT_CHINESE[self]


_ELEMENT_CHINESE = MappingProxyType({
    Element.WOOD: "木",
    Element.FIRE: "火",
    Element.EARTH: "土",
    Element.METAL: "金",
    Element.WATER: "水",
})


@dataclass(frozen=True)
class HeavenlyStem:
    chinese: str
    pinyin: str
    element: Element
    polarity: Polarity
    index: int  # 0-9 in the cycle

    def __str__(self):
        return f"{self.pinyin} ({self.polarity.value} {self.element.value})"


@dataclass(frozen=True)
class EarthlyBranch:
    chinese: str
    pinyin: str
    animal: str
    element: Element  # primary/season element
    polarity: Polarity
    index: int  # 0-11 in the cycle
    hidden_stems: tuple  # pinyin names [main_qi, middle_qi, residual_qi]

    def __str__(self):
        return f"{self.pinyin} ({self.animal})"

    @property
    def main_qi(self) -> "HeavenlyStem":
        return STEM_BY_PINYIN[self.hidden_stems[0]]


# ============================================================
# STEM AND BRANCH DEFINITIONS
# ============================================================

HEAVENLY_STEMS = (
    HeavenlyStem("甲", "Jia", Element.WOOD, Polarity.YANG, 0),
    HeavenlyStem("乙", "Yi", Element.WOOD, Polarity.YIN, 1),
    HeavenlyStem("丙", "Bing", Element.FIRE, Polarity.YANG, 2),
    HeavenlyStem("丁", "Ding", Element.FIRE, Polarity.YIN, 3),
    HeavenlyStem("戊", "Wu", Element.EARTH, Polarity.YANG, 4),
    HeavenlyStem("己", "Ji", Element.EARTH, Polarity.YIN, 5),
    HeavenlyStem("庚", "Geng", Element.METAL, Polarity.YANG, 6),
    HeavenlyStem("辛", "Xin", Element.METAL, Polarity.YIN, 7),
    HeavenlyStem("壬", "Ren", Element.WATER, Polarity.YANG, 8),
    HeavenlyStem("癸", "Gui", Element.WATER, Polarity.YIN, 9),
)

EARTHLY_BRANCHES = (
    EarthlyBranch("子", "Zi", "Rat", Element.WATER, Polarity.YANG, 0,
                  ("Gui",)),
    EarthlyBranch("丑", "Chou", "Ox", Element.EARTH, Polarity.YIN, 1,
                  ("Ji", "Gui", "Xin")),
    EarthlyBranch("寅", "Yin", "Tiger", Element.WOOD, Polarity.YANG, 2,
                  ("Jia", "Bing", "Wu")),
    EarthlyBranch("卯", "Mao", "Rabbit", Element.WOOD, Polarity.YIN, 3,
                  ("Yi",)),
    EarthlyBranch("辰", "Chen", "Dragon", Element.EARTH, Polarity.YANG, 4,
                  ("Wu", "Yi", "Gui")),
    EarthlyBranch("巳", "Si", "Snake", Element.FIRE, Polarity.YIN, 5,
                  ("Bing", "Wu", "Geng")),
    EarthlyBranch("午", "Wu", "Horse", Element.FIRE, Polarity.YANG, 6,
                  ("Ding", "Ji")),
    EarthlyBranch("未", "Wei", "Goat", Element.EARTH, Polarity.YIN, 7,
                  ("Ji", "Ding", "Yi")),
    EarthlyBranch("申", "Shen", "Monkey", Element.METAL, Polarity.YANG, 8,
                  ("Geng", "Ren", "Wu")),
    EarthlyBranch("酉", "You", "Rooster", Element.METAL, Polarity.YIN, 9,
                  ("Xin",)),
    EarthlyBranch("戌", "Xu", "Dog", Element.EARTH, Polarity.YANG, 10,
                  ("Wu", "Xin", "Ding")),
    EarthlyBranch("亥", "Hai", "Pig", Element.WATER, Polarity.YIN, 11,
                  ("Ren", "Jia")),
)

# Lookup helpers
STEM_BY_PINYIN = MappingProxyType({s.pinyin: s for s in HEAVENLY_STEMS})
STEM_BY_CHINESE = MappingProxyType({s.chinese: s for s in HEAVENLY_STEMS})
BRANCH_BY_PINYIN = MappingProxyType({b.pinyin: b for b in EARTHLY_BRANCHES})
BRANCH_BY_CHINESE = MappingProxyType({b.chinese: b for b in EARTHLY_BRANCHES})
BRANCH_BY_ANIMAL = MappingProxyType({b.animal: b for b in EARTHLY_BRANCHES})


def stem_from_symbol(symbol: Union[HeavenlyStem, str, int]) -> HeavenlyStem:
    """
    Resolve a stem given as a HeavenlyStem, Chinese character, pinyin
    (case-insensitive) or cycle index.

    Raises:
        InvalidInputError: symbol is not one of the ten stems
    """
    if isinstance(symbol, HeavenlyStem):
        if 0 <= symbol.index < 10 and HEAVENLY_STEMS[symbol.index] == symbol:
            return HEAVENLY_STEMS[symbol.index]
    elif isinstance(symbol, int) and not isinstance(symbol, bool):
        if 0 <= symbol < 10:
            return HEAVENLY_STEMS[symbol]
    elif isinstance(symbol, str):
        key = symbol.strip()
        if key in STEM_BY_CHINESE:
            return STEM_BY_CHINESE[key]
        if key.capitalize() in STEM_BY_PINYIN:
            return STEM_BY_PINYIN[key.capitalize()]
    raise InvalidInputError(f"Unknown heavenly stem: {symbol!r}")


def branch_from_symbol(symbol: Union[EarthlyBranch, str, int]) -> EarthlyBranch:
    """
    Resolve a branch given as an EarthlyBranch, Chinese character, pinyin,
    animal name (both case-insensitive) or cycle index.

    Raises:
        InvalidInputError: symbol is not one of the twelve branches
    """
    if isinstance(symbol, EarthlyBranch):
        if 0 <= symbol.index < 12 and EARTHLY_BRANCHES[symbol.index] == symbol:
            return EARTHLY_BRANCHES[symbol.index]
    elif isinstance(symbol, int) and not isinstance(symbol, bool):
        if 0 <= symbol < 12:
            return EARTHLY_BRANCHES[symbol]
    elif isinstance(symbol, str):
        key = symbol.strip()
        if key in BRANCH_BY_CHINESE:
            return BRANCH_BY_CHINESE[key]
        if key.capitalize() in BRANCH_BY_PINYIN:
            return BRANCH_BY_PINYIN[key.capitalize()]
        if key.capitalize() in BRANCH_BY_ANIMAL:
            return BRANCH_BY_ANIMAL[key.capitalize()]
    raise InvalidInputError(f"Unknown earthly branch: {symbol!r}")


# ============================================================
# FIVE ELEMENT CYCLES
# ============================================================

# Production cycle: Wood → Fire → Earth → Metal → Water → Wood
PRODUCTION_CYCLE = MappingProxyType({
    Element.WOOD: Element.FIRE,
    Element.FIRE: Element.EARTH,
    Element.EARTH: Element.METAL,
    Element.METAL: Element.WATER,
    Element.WATER: Element.WOOD,
})

# Control cycle: Wood → Earth → Water → Fire → Metal → Wood
CONTROL_CYCLE = MappingProxyType({
    Element.WOOD: Element.EARTH,
    Element.EARTH: Element.WATER,
    Element.WATER: Element.FIRE,
    Element.FIRE: Element.METAL,
    Element.METAL: Element.WOOD,
})


def element_relationship(day_master_element: Element, other_element: Element) -> str:
    """Determine the elemental relationship from DM's perspective."""
    if day_master_element == other_element:
        return "same"
    elif PRODUCTION_CYCLE[other_element] == day_master_element:
        return "produces_me"  # other produces DM
    elif PRODUCTION_CYCLE[day_master_element] == other_element:
        return "i_produce"  # DM produces other
    elif CONTROL_CYCLE[day_master_element] == other_element:
        return "i_control"  # DM controls other
    else:
        return "controls_me"  # other controls DM


# ============================================================
# TEN GODS (十神) TABLE
# ============================================================

class TenGod(Enum):
    COMPANION = "比肩"
    ROB_WEALTH = "劫财"
    EATING_GOD = "食神"
    HURTING_OFFICER = "伤官"
    INDIRECT_WEALTH = "偏财"
    DIRECT_WEALTH = "正财"
    SEVEN_KILLINGS = "七杀"
    DIRECT_OFFICER = "正官"
    INDIRECT_RESOURCE = "偏印"
    DIRECT_RESOURCE = "正印"

    @property
    def chinese(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        return _TEN_GOD_LABELS[self]


_TEN_GOD_LABELS = MappingProxyType({
    TenGod.COMPANION: "Companion (比肩 Bi Jian)",
    TenGod.ROB_WEALTH: "Rob Wealth (劫财 Jie Cai)",
    TenGod.EATING_GOD: "Eating God (食神 Shi Shen)",
    TenGod.HURTING_OFFICER: "Hurting Officer (伤官 Shang Guan)",
    TenGod.INDIRECT_WEALTH: "Indirect Wealth (偏财 Pian Cai)",
    TenGod.DIRECT_WEALTH: "Direct Wealth (正财 Zheng Cai)",
    TenGod.SEVEN_KILLINGS: "7 Killings (七杀 Qi Sha)",
    TenGod.DIRECT_OFFICER: "Direct Officer (正官 Zheng Guan)",
    TenGod.INDIRECT_RESOURCE: "Indirect Resource (偏印 Pian Yin)",
    TenGod.DIRECT_RESOURCE: "Direct Resource (正印 Zheng Yin)",
})

_C = TenGod.COMPANION
_RW = TenGod.ROB_WEALTH
_EG = TenGod.EATING_GOD
_HO = TenGod.HURTING_OFFICER
_IW = TenGod.INDIRECT_WEALTH
_DW = TenGod.DIRECT_WEALTH
_SK = TenGod.SEVEN_KILLINGS
_DO = TenGod.DIRECT_OFFICER
_IR = TenGod.INDIRECT_RESOURCE
_DR = TenGod.DIRECT_RESOURCE

# Row: day master stem index. Column: other stem index.
#            Jia  Yi   Bing Ding Wu   Ji   Geng Xin  Ren  Gui
TEN_GOD_TABLE = (
    (_C,  _RW, _EG, _HO, _IW, _DW, _SK, _DO, _IR, _DR),  # Jia
    (_RW, _C,  _HO, _EG, _DW, _IW, _DO, _SK, _DR, _IR),  # Yi
    (_IR, _DR, _C,  _RW, _EG, _HO, _IW, _DW, _SK, _DO),  # Bing
    (_DR, _IR, _RW, _C,  _HO, _EG, _DW, _IW, _DO, _SK),  # Ding
    (_SK, _DO, _IR, _DR, _C,  _RW, _EG, _HO, _IW, _DW),  # Wu
    (_DO, _SK, _DR, _IR, _RW, _C,  _HO, _EG, _DW, _IW),  # Ji
    (_IW, _DW, _SK, _DO, _IR, _DR, _C,  _RW, _EG, _HO),  # Geng
    (_DW, _IW, _DO, _SK, _DR, _IR, _RW, _C,  _HO, _EG),  # Xin
    (_EG, _HO, _IW, _DW, _SK, _DO, _IR, _DR, _C,  _RW),  # Ren
    (_HO, _EG, _DW, _IW, _DO, _SK, _DR, _IR, _RW, _C),   # Gui
)

# (relationship, same_polarity) → god, the rule the table encodes
_TEN_GOD_RULE = MappingProxyType({
    ("same", True): TenGod.COMPANION,
    ("same", False): TenGod.ROB_WEALTH,
    ("produces_me", True): TenGod.INDIRECT_RESOURCE,
    ("produces_me", False): TenGod.DIRECT_RESOURCE,
    ("i_produce", True): TenGod.EATING_GOD,
    ("i_produce", False): TenGod.HURTING_OFFICER,
    ("i_control", True): TenGod.INDIRECT_WEALTH,
    ("i_control", False): TenGod.DIRECT_WEALTH,
    ("controls_me", True): TenGod.SEVEN_KILLINGS,
    ("controls_me", False): TenGod.DIRECT_OFFICER,
})


def derive_ten_god(day_master: HeavenlyStem, other: HeavenlyStem) -> TenGod:
    """Ten God from element relationship + polarity match."""
    relationship = element_relationship(day_master.element, other.element)
    same_polarity = (day_master.polarity == other.polarity)
    return _TEN_GOD_RULE[(relationship, same_polarity)]


def ten_god(day_master: HeavenlyStem, other: HeavenlyStem) -> TenGod:
    """Table lookup of the Ten God of ``other`` seen from ``day_master``."""
    return TEN_GOD_TABLE[day_master.index][other.index]


def _verify_ten_god_table():
    if len(TEN_GOD_TABLE) != 10 or any(len(row) != 10 for row in TEN_GOD_TABLE):
        raise RuntimeError("Ten Gods table must be 10x10")
    for dm in HEAVENLY_STEMS:
        for other in HEAVENLY_STEMS:
            expected = derive_ten_god(dm, other)
            if TEN_GOD_TABLE[dm.index][other.index] is not expected:
                raise RuntimeError(
                    f"Ten Gods table entry {dm.pinyin}/{other.pinyin} "
                    f"should be {expected.name}"
                )


_verify_ten_god_table()
