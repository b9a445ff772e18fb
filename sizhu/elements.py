"""
Element distribution and Ten Gods mapping over a four-pillar chart.

Design principle: this module COMPUTES and FLAGS. It does not interpret;
sizhu.interpret turns these numbers into text.
"""

import logging
from dataclasses import dataclass
from typing import Union

from sizhu.bazi import FourPillars, Pillar
from sizhu.errors import InvalidInputError
from sizhu.tables import (
    EARTHLY_BRANCHES,
    HEAVENLY_STEMS,
    STEM_BY_PINYIN,
    Element,
    HeavenlyStem,
    TenGod,
    stem_from_symbol,
    ten_god,
)

logger = logging.getLogger(__name__)

ELEMENT_ORDER = tuple(Element)

# Weights in half-units so sums stay exact
STEM_WEIGHT = 2
BRANCH_WEIGHT = 2
HIDDEN_STEM_WEIGHT = 1


# ============================================================
# ELEMENT HISTOGRAM
# ============================================================

@dataclass(frozen=True)
class ElementHistogram:
    half_units: tuple  # one int per Element, in ELEMENT_ORDER

    def __getitem__(self, element: Element) -> float:
        return self.half_units[ELEMENT_ORDER.index(element)] / 2

    @property
    def total(self) -> float:
        return sum(self.half_units) / 2

    def as_dict(self) -> dict:
        return {e.value: units / 2 for e, units in zip(ELEMENT_ORDER, self.half_units)}


@dataclass(frozen=True)
class ElementSummary:
    strong: tuple
    weak: tuple
    missing: tuple
    balance_ratio: float  # strongest / weakest present element

    def to_dict(self):
        return {
            "strong": [e.value for e in self.strong],
            "weak": [e.value for e in self.weak],
            "missing": [e.value for e in self.missing],
            "balance_ratio": round(self.balance_ratio, 3),
        }


def _checked(pillar: Pillar) -> Pillar:
    stem_ok = 0 <= pillar.stem.index < 10 and HEAVENLY_STEMS[pillar.stem.index] == pillar.stem
    branch_ok = 0 <= pillar.branch.index < 12 and EARTHLY_BRANCHES[pillar.branch.index] == pillar.branch
    if not (stem_ok and branch_ok):
        raise InvalidInputError(f"Pillar {pillar.position!r} holds an unknown stem or branch")
    return pillar


def tally(pillars: FourPillars) -> ElementHistogram:
    """
    Count element presence across all four pillars.

    - Visible stem: weight 1.0
    - Branch (its own element): weight 1.0
    - Each hidden stem: weight 0.5
    """
    units = dict.fromkeys(ELEMENT_ORDER, 0)

    for pillar in map(_checked, pillars.ordered()):
        units[pillar.stem.element] += STEM_WEIGHT
        units[pillar.branch.element] += BRANCH_WEIGHT
        for hidden_pinyin in pillar.branch.hidden_stems:
            units[STEM_BY_PINYIN[hidden_pinyin].element] += HIDDEN_STEM_WEIGHT

    return ElementHistogram(tuple(units[e] for e in ELEMENT_ORDER))


def element_summary(histogram: ElementHistogram) -> ElementSummary:
    """
    Flag strong (> 1.2x mean), weak (< 0.8x mean) and missing elements.

    Thresholds are relative to the mean bucket, so they hold whatever the
    chart's total weight is.
    """
    weights = {e: histogram[e] for e in ELEMENT_ORDER}
    mean = histogram.total / len(ELEMENT_ORDER)
    present = [w for w in weights.values() if w > 0]
    return ElementSummary(
        strong=tuple(e for e, w in weights.items() if w > mean * 1.2),
        weak=tuple(e for e, w in weights.items() if w < mean * 0.8),
        missing=tuple(e for e, w in weights.items() if w == 0),
        balance_ratio=max(present) / min(present) if present else 0.0,
    )


# ============================================================
# TEN GODS (十神) RELATIONSHIP MAPPING
# ============================================================

@dataclass(frozen=True)
class RelationEntry:
    chinese: str
    pinyin: str
    kind: str  # "stem", "branch" or "hidden_stem"
    ten_god: TenGod

    def to_dict(self):
        return {
            "chinese": self.chinese,
            "pinyin": self.pinyin,
            "kind": self.kind,
            "ten_god": self.ten_god.label,
            "ten_god_chinese": self.ten_god.chinese,
        }


def classify(pillars: FourPillars,
             day_master: Union[HeavenlyStem, str, int, None] = None) -> dict:
    """
    Map Ten Gods for every character in the chart.

    Per pillar, in year → hour order: the visible stem, the branch (read
    through its main-qi hidden stem), then each hidden stem in table order.
    The day stem against itself is a Companion like any other equal stem.

    Args:
        pillars: the four pillars
        day_master: stem to compare against; defaults to the day stem

    Returns:
        {"year": [RelationEntry, ...], "month": [...], "day": [...], "hour": [...]}
    """
    dm = pillars.day_master if day_master is None else stem_from_symbol(day_master)

    results = {}
    for pillar in map(_checked, pillars.ordered()):
        entries = [
            RelationEntry(pillar.stem.chinese, pillar.stem.pinyin, "stem",
                          ten_god(dm, pillar.stem)),
            RelationEntry(pillar.branch.chinese, pillar.branch.pinyin, "branch",
                          ten_god(dm, pillar.branch.main_qi)),
        ]
        for hidden_pinyin in pillar.branch.hidden_stems:
            hidden = STEM_BY_PINYIN[hidden_pinyin]
            entries.append(RelationEntry(hidden.chinese, hidden.pinyin, "hidden_stem",
                                         ten_god(dm, hidden)))
        results[pillar.position] = entries

    logger.debug("Ten Gods against %s: %s", dm.pinyin,
                 {pos: [e.ten_god.name for e in ents] for pos, ents in results.items()})
    return results
