"""Templated commentary selection."""

from datetime import datetime

import pytest

from sizhu.bazi import compute_four_pillars
from sizhu.errors import InvalidInputError
from sizhu.interpret import (
    CATEGORIES,
    DETAILED_BLOCKS,
    basic_interpretation,
    complete_interpretation,
    detailed_interpretation,
)


@pytest.fixture
def jia_pillars():
    """1949-10-01 is a Jia Zi day."""
    return compute_four_pillars(datetime(1949, 10, 1, 10, 0))


def test_basic_interpretation(reference_pillars):
    result = basic_interpretation(reference_pillars)
    info = result["basic_info"]
    assert info["four_pillars"] == "庚午 辛巳 庚辰 癸未"
    assert info["day_master"] == "Geng"
    assert "fire(火) 3.5" in info["five_elements"]
    assert info["strong_elements"] == ["fire", "earth", "metal"]
    assert info["weak_elements"] == ["wood", "water"]
    assert info["missing_elements"] == []
    assert set(result["life_stages"]) == {"childhood", "youth", "middle_age", "old_age"}


def test_personality_reflects_strong_and_weak_elements(reference_pillars):
    personality = basic_interpretation(reference_pillars)["personality"]
    assert personality["main_traits"][:4] == [
        "resolute", "brave", "strong sense of justice", "natural leader"]
    assert "warm and outgoing" in personality["main_traits"]
    assert "may lack self-confidence" in personality["challenges"]
    assert personality["key_characteristics"].startswith("As a Geng day master")


def test_overall_trend_uses_balance_ratio(reference_pillars):
    """A 4:1 spread between strongest and weakest is out of balance."""
    overview = basic_interpretation(reference_pillars)["fortune_overview"]
    assert "out of balance" in overview["overall_trend"]


def test_detailed_uses_stem_specific_block(jia_pillars):
    result = detailed_interpretation(jia_pillars, "career")
    assert result["summary"] == DETAILED_BLOCKS["career"]["Jia"]["summary"]
    assert result["lucky_elements"] == ["earth", "metal"]


def test_detailed_falls_back_to_defaults(reference_pillars):
    wealth = detailed_interpretation(reference_pillars, "wealth")
    assert wealth["lucky_elements"] == ["wood", "fire"]
    assert wealth["unlucky_elements"] == ["metal", "earth"]

    health = detailed_interpretation(reference_pillars, "health")
    assert health["title"] == "Health"
    assert health["lucky_elements"] == ["earth", "metal"]


def test_detailed_rejects_unknown_category(reference_pillars):
    with pytest.raises(InvalidInputError):
        detailed_interpretation(reference_pillars, "lottery")


def test_complete_interpretation(reference_pillars):
    result = complete_interpretation(reference_pillars)
    assert [block["category"] for block in result["detailed"]] == list(CATEGORIES)

    subset = complete_interpretation(reference_pillars, ["career"])
    assert len(subset["detailed"]) == 1


def test_empty_category_selection_gives_no_detail(reference_pillars):
    """Only None means every category; an empty selection means none."""
    result = complete_interpretation(reference_pillars, [])
    assert result["detailed"] == []
    assert result["basic"]["basic_info"]["day_master"] == "Geng"


def test_interpretation_is_deterministic(reference_pillars):
    assert complete_interpretation(reference_pillars) == complete_interpretation(reference_pillars)
