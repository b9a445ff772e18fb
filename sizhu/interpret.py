"""
Templated fortune commentary.

Selects text blocks keyed by day-master stem and element-balance
thresholds. No computation beyond what sizhu.elements flags; the rules are
plain lookup tables so they can be reviewed and edited as data.
"""

import logging
from typing import Iterable, Optional

from sizhu.bazi import FourPillars
from sizhu.elements import ElementHistogram, element_summary, tally
from sizhu.errors import InvalidInputError
from sizhu.tables import Element

logger = logging.getLogger(__name__)

CATEGORIES = ("wealth", "marriage", "career", "health", "academy")

# Balance ratio (strongest / weakest present element) bands
BALANCED_RATIO = 2.0
SLIGHTLY_BIASED_RATIO = 4.0


# ============================================================
# PERSONALITY TABLES
# ============================================================

DAY_MASTER_TRAITS = {
    "Jia": {
        "traits": ["independent", "enterprising", "natural leader", "strong sense of justice"],
        "strengths": ["decisive", "willing to innovate", "glad to help others"],
        "challenges": ["can be stubborn", "prone to impulsiveness"],
    },
    "Yi": {
        "traits": ["gentle", "attentive", "understanding", "adaptable"],
        "strengths": ["good at mediating", "patient", "artistic"],
        "challenges": ["hesitant", "oversensitive"],
    },
    "Bing": {
        "traits": ["warm", "outgoing", "creative", "expressive"],
        "strengths": ["optimistic", "inspiring", "leadership talent"],
        "challenges": ["changeable moods", "impatient"],
    },
    "Ding": {
        "traits": ["clever", "perceptive", "insightful", "creative"],
        "strengths": ["quick thinking", "analytical", "far-sighted"],
        "challenges": ["oversensitive", "prone to anxiety"],
    },
    "Wu": {
        "traits": ["steady", "reliable", "responsible", "patient"],
        "strengths": ["hard-working", "persevering", "trustworthy"],
        "challenges": ["overly conservative", "not flexible enough"],
    },
    "Ji": {
        "traits": ["gentle", "accommodating", "cooperative", "patient"],
        "strengths": ["good listener", "compassionate", "adaptable"],
        "challenges": ["indecisive", "lacks conviction"],
    },
    "Geng": {
        "traits": ["resolute", "brave", "strong sense of justice", "natural leader"],
        "strengths": ["bold", "takes responsibility", "gets things done"],
        "challenges": ["too rigid", "lacks tact"],
    },
    "Xin": {
        "traits": ["refined", "sensitive", "good taste", "perfectionist"],
        "strengths": ["attentive to detail", "discerning", "high standards"],
        "challenges": ["overly critical", "prone to anxiety"],
    },
    "Ren": {
        "traits": ["wise", "tolerant", "adaptable", "free-flowing"],
        "strengths": ["lively mind", "resourceful", "open-minded"],
        "challenges": ["changeable moods", "lacks focus"],
    },
    "Gui": {
        "traits": ["wise", "intuitive", "sensitive", "creative"],
        "strengths": ["insightful", "inventive", "sharp intuition"],
        "challenges": ["oversensitive", "overthinks"],
    },
}

# element → (trait if strong, strength if strong, challenge if weak)
ELEMENT_ADJUSTMENTS = {
    Element.WOOD: ("self-directed", "leadership ability", "may lack self-confidence"),
    Element.FIRE: ("warm and outgoing", "infectious energy", "may lack passion"),
    Element.EARTH: ("steady and dependable", "trustworthy", "may lack a sense of security"),
    Element.METAL: ("decisive", "strong execution", "may be indecisive"),
    Element.WATER: ("wise and flexible", "adaptable", "may think rigidly"),
}

LIFE_STAGES = {
    "childhood": "Childhood is fairly steady; family upbringing shapes character strongly.",
    "youth": "Youth brings out individuality, visible in study and social life.",
    "middle_age": "Middle age is the key stage for career; timing matters.",
    "old_age": "Later life is settled, with attention on health and family harmony.",
}


# ============================================================
# CATEGORY TABLES
# ============================================================

# Stem-specific blocks; anything missing falls back to the category defaults
DETAILED_BLOCKS = {
    "wealth": {
        "Jia": {
            "summary": "Wealth luck is good overall, but watch investment risk.",
            "analysis": "A Jia Wood day master is pioneering and earns well. Regular income is "
                        "stable; windfall chances exist but need careful handling.",
            "timing": ["25-35", "45-55"],
            "advice": ["invest steadily", "avoid speculation", "build connections"],
            "lucky": [Element.EARTH, Element.METAL],
            "unlucky": [Element.WOOD, Element.WATER],
        },
        "Yi": {
            "summary": "Wealth luck is mild; steady investment suits you.",
            "analysis": "A Yi Wood day master has gentle wealth luck and suits stable work. "
                        "Regular income is steady; windfalls are rare but so are losses.",
            "timing": ["30-40", "50-60"],
            "advice": ["manage money steadily", "invest long term", "avoid risk-taking"],
            "lucky": [Element.FIRE, Element.EARTH],
            "unlucky": [Element.METAL, Element.WATER],
        },
    },
    "marriage": {
        "Jia": {
            "summary": "Relationship luck is good, but mind how you communicate.",
            "analysis": "A Jia Wood day master takes the lead in love but can be overbearing. "
                        "Learn to listen and understand your partner.",
            "timing": ["28-35", "40-45"],
            "advice": ["talk more", "be tolerant", "stay patient"],
            "lucky": [Element.EARTH, Element.WATER],
            "unlucky": [Element.WOOD, Element.FIRE],
        },
        "Yi": {
            "summary": "Delicate feelings; likely to meet a gentle, caring partner.",
            "analysis": "A Yi Wood day master attracts considerate partners and should voice "
                        "their own needs more openly.",
            "timing": ["25-32", "38-43"],
            "advice": ["express yourself", "stay independent", "cherish who is near"],
            "lucky": [Element.WATER, Element.METAL],
            "unlucky": [Element.FIRE, Element.EARTH],
        },
    },
    "career": {
        "Jia": {
            "summary": "Suited to founding ventures or leading; career prospects are good.",
            "analysis": "A Jia Wood day master has leadership talent and suits management, "
                        "entrepreneurship or decision-making roles. The path has ups and "
                        "downs but trends upward.",
            "timing": ["28-38", "48-58"],
            "advice": ["use your leadership", "build experience", "work with a team"],
            "lucky": [Element.EARTH, Element.METAL],
            "unlucky": [Element.WOOD, Element.WATER],
        },
        "Yi": {
            "summary": "Suited to creative or service work; career develops steadily.",
            "analysis": "A Yi Wood day master suits creative, artistic or service work. "
                        "Progress is steady and rewards patience.",
            "timing": ["30-40", "45-55"],
            "advice": ["use your creativity", "sharpen your skills", "build a network"],
            "lucky": [Element.FIRE, Element.WATER],
            "unlucky": [Element.METAL, Element.EARTH],
        },
    },
}

CATEGORY_DEFAULTS = {
    "wealth": {
        "title": "Wealth",
        "summary": "Overall wealth trend, regular and windfall income, investment advice.",
        "timing": ["25-35", "45-55"],
        "advice": ["invest steadily", "avoid speculation", "build connections"],
    },
    "marriage": {
        "title": "Marriage",
        "summary": "Relationship luck, romance and marriage timing.",
        "timing": ["25-35", "35-45"],
        "advice": ["communicate more", "stay patient", "value the connection"],
    },
    "career": {
        "title": "Career",
        "summary": "Career direction and suitable kinds of work.",
        "timing": ["28-38", "40-50"],
        "advice": ["build skills", "gain experience", "work with a team"],
    },
    "health": {
        "title": "Health",
        "summary": "Constitution and health matters to watch.",
        "timing": ["take care after 30", "after 50"],
        "advice": ["keep regular hours", "exercise moderately", "get regular check-ups"],
    },
    "academy": {
        "title": "Study",
        "summary": "Learning ability and exam luck.",
        "timing": ["15-25", "25-35"],
        "advice": ["make a plan", "keep at it", "ask for help"],
    },
}

# Wealth luck by day master (lucky, unlucky)
WEALTH_ELEMENTS = {
    "Jia": ([Element.EARTH, Element.METAL], [Element.WOOD, Element.WATER]),
    "Yi": ([Element.FIRE, Element.EARTH], [Element.METAL, Element.WATER]),
    "Bing": ([Element.METAL, Element.WATER], [Element.FIRE, Element.WOOD]),
    "Ding": ([Element.WATER, Element.METAL], [Element.WOOD, Element.FIRE]),
    "Wu": ([Element.WATER, Element.WOOD], [Element.EARTH, Element.FIRE]),
    "Ji": ([Element.WOOD, Element.WATER], [Element.FIRE, Element.EARTH]),
    "Geng": ([Element.WOOD, Element.FIRE], [Element.METAL, Element.EARTH]),
    "Xin": ([Element.FIRE, Element.WOOD], [Element.EARTH, Element.METAL]),
    "Ren": ([Element.FIRE, Element.EARTH], [Element.WATER, Element.METAL]),
    "Gui": ([Element.EARTH, Element.FIRE], [Element.METAL, Element.WATER]),
}
DEFAULT_LUCKY = [Element.EARTH, Element.METAL]
DEFAULT_UNLUCKY = [Element.WOOD, Element.WATER]


# ============================================================
# HELPERS
# ============================================================

def _elements_line(histogram: ElementHistogram) -> str:
    return " ".join(f"{e.value}({e.chinese}) {histogram[e]:g}" for e in Element)


def _names(elements: Iterable[Element]) -> list[str]:
    return [e.value for e in elements]


def _personality(day_master: str, strong, weak) -> dict:
    base = DAY_MASTER_TRAITS[day_master]
    traits = list(base["traits"])
    strengths = list(base["strengths"])
    challenges = list(base["challenges"])

    for element in Element:
        strong_trait, strong_strength, weak_challenge = ELEMENT_ADJUSTMENTS[element]
        if element in strong:
            traits.append(strong_trait)
            strengths.append(strong_strength)
        if element in weak:
            challenges.append(weak_challenge)

    key = (f"As a {day_master} day master you are {' and '.join(traits[:2])}, "
           f"stand out for being {' and '.join(strengths[:2])}, "
           f"but should watch out for being {' and '.join(challenges[:2])}.")
    return {
        "main_traits": traits,
        "strengths": strengths,
        "challenges": challenges,
        "key_characteristics": key,
    }


def _overall_trend(balance_ratio: float) -> str:
    if balance_ratio < BALANCED_RATIO:
        return "The five elements are fairly balanced; fortune is steady and develops evenly."
    if balance_ratio < SLIGHTLY_BIASED_RATIO:
        return "The five elements lean to one side, but fortune is fair with some adjustment."
    return "The five elements are badly out of balance and need particular attention."


# ============================================================
# INTERPRETATIONS
# ============================================================

def basic_interpretation(pillars: FourPillars,
                         histogram: Optional[ElementHistogram] = None) -> dict:
    """Four pillars, element picture, personality, overview and life stages."""
    histogram = histogram or tally(pillars)
    summary = element_summary(histogram)
    dm = pillars.day_master.pinyin

    key_points = []
    if summary.strong:
        key_points.append(f"{', '.join(_names(summary.strong))} too strong; temper it")
    if summary.weak:
        key_points.append(f"{', '.join(_names(summary.weak))} weak; strengthen it")
    key_points.append("Stay positive and seek expert guidance when facing difficulties")
    key_points.append("Look after your health and keep good routines")

    return {
        "basic_info": {
            "four_pillars": str(pillars),
            "five_elements": _elements_line(histogram),
            "day_master": dm,
            "missing_elements": _names(summary.missing),
            "strong_elements": _names(summary.strong),
            "weak_elements": _names(summary.weak),
        },
        "personality": _personality(dm, summary.strong, summary.weak),
        "fortune_overview": {
            "overall_trend": _overall_trend(summary.balance_ratio),
            "current_phase": "growth",
            "key_points": key_points,
            "warnings": [
                "Avoid extreme actions and decisions",
                "Mind how you communicate in relationships",
            ],
        },
        "life_stages": dict(LIFE_STAGES),
    }


def detailed_interpretation(pillars: FourPillars, category: str,
                            histogram: Optional[ElementHistogram] = None) -> dict:
    """
    Commentary for one category: wealth, marriage, career, health or academy.

    Raises:
        InvalidInputError: unknown category
    """
    if category not in CATEGORIES:
        raise InvalidInputError(
            f"Unknown category {category!r}; expected one of {', '.join(CATEGORIES)}"
        )
    histogram = histogram or tally(pillars)
    dm = pillars.day_master.pinyin
    defaults = CATEGORY_DEFAULTS[category]
    block = DETAILED_BLOCKS.get(category, {}).get(dm)

    if block is not None:
        return {
            "category": category,
            "title": defaults["title"],
            "summary": block["summary"],
            "detailed_analysis": block["analysis"],
            "timing": list(block["timing"]),
            "advice": list(block["advice"]),
            "lucky_elements": _names(block["lucky"]),
            "unlucky_elements": _names(block["unlucky"]),
        }

    if category == "wealth":
        analysis = (f"As a {dm} day master your wealth follows the element balance: "
                    f"{_elements_line(histogram)}.")
        lucky, unlucky = WEALTH_ELEMENTS[dm]
    else:
        analysis = (f"A {dm} day master's {defaults['title'].lower()} outlook depends on "
                    f"the element balance; adjust to your own chart.")
        lucky, unlucky = DEFAULT_LUCKY, DEFAULT_UNLUCKY

    return {
        "category": category,
        "title": defaults["title"],
        "summary": defaults["summary"],
        "detailed_analysis": analysis,
        "timing": list(defaults["timing"]),
        "advice": list(defaults["advice"]),
        "lucky_elements": _names(lucky),
        "unlucky_elements": _names(unlucky),
    }


def complete_interpretation(pillars: FourPillars,
                            categories: Optional[Iterable[str]] = None) -> dict:
    """Basic interpretation plus one detailed block per category (all by default)."""
    histogram = tally(pillars)
    wanted = list(CATEGORIES) if categories is None else list(categories)
    logger.debug("Interpreting %s for categories %s", pillars, wanted)
    return {
        "basic": basic_interpretation(pillars, histogram),
        "detailed": [detailed_interpretation(pillars, c, histogram) for c in wanted],
    }
