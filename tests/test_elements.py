"""Element tally and Ten Gods classification."""

from datetime import datetime

import pytest

from sizhu.bazi import FourPillars, Pillar, compute_four_pillars
from sizhu.elements import classify, element_summary, tally
from sizhu.errors import InvalidInputError
from sizhu.tables import Element, HeavenlyStem, Polarity, TenGod, branch_from_symbol, stem_from_symbol


def test_reference_tally(reference_pillars):
    histogram = tally(reference_pillars)
    assert histogram.as_dict() == {
        "wood": 1.0,
        "fire": 3.5,
        "earth": 4.0,
        "metal": 3.5,
        "water": 1.5,
    }
    assert histogram[Element.EARTH] == 4.0


def test_tally_total_counts_hidden_stems():
    """Total is 8 for the visible characters plus 0.5 per hidden stem."""
    for moment in [datetime(1900, 1, 1), datetime(1990, 5, 15, 14, 30), datetime(2024, 2, 4, 8)]:
        pillars = compute_four_pillars(moment)
        hidden = sum(len(p.branch.hidden_stems) for p in pillars.ordered())
        assert tally(pillars).total == 8 + 0.5 * hidden


def test_tally_is_exact():
    """Half-unit weights never accumulate float error."""
    histogram = tally(compute_four_pillars(datetime(1990, 5, 15, 14, 30)))
    assert all(isinstance(units, int) for units in histogram.half_units)


def test_element_summary(reference_pillars):
    summary = element_summary(tally(reference_pillars))
    assert summary.strong == (Element.FIRE, Element.EARTH, Element.METAL)
    assert summary.weak == (Element.WOOD, Element.WATER)
    assert summary.missing == ()
    assert summary.balance_ratio == pytest.approx(4.0)


def test_classify_reference_chart(reference_pillars):
    """Each pillar lists stem, branch (via main qi), then hidden stems."""
    result = classify(reference_pillars)
    gods = {pos: [e.ten_god for e in entries] for pos, entries in result.items()}

    assert gods["year"] == [TenGod.COMPANION, TenGod.DIRECT_OFFICER,
                            TenGod.DIRECT_OFFICER, TenGod.DIRECT_RESOURCE]
    assert gods["month"] == [TenGod.ROB_WEALTH, TenGod.SEVEN_KILLINGS, TenGod.SEVEN_KILLINGS,
                             TenGod.INDIRECT_RESOURCE, TenGod.COMPANION]
    assert gods["day"] == [TenGod.COMPANION, TenGod.INDIRECT_RESOURCE, TenGod.INDIRECT_RESOURCE,
                           TenGod.DIRECT_WEALTH, TenGod.HURTING_OFFICER]
    assert gods["hour"] == [TenGod.HURTING_OFFICER, TenGod.DIRECT_RESOURCE, TenGod.DIRECT_RESOURCE,
                            TenGod.DIRECT_OFFICER, TenGod.DIRECT_WEALTH]


def test_classify_entry_kinds(reference_pillars):
    entries = classify(reference_pillars)["day"]
    assert [e.kind for e in entries] == ["stem", "branch", "hidden_stem", "hidden_stem", "hidden_stem"]
    assert entries[1].chinese == "辰"
    assert entries[0].to_dict()["ten_god"] == "Companion (比肩 Bi Jian)"


def test_classify_with_other_day_master(reference_pillars):
    result = classify(reference_pillars, day_master="Jia")
    assert result["year"][0].ten_god is TenGod.SEVEN_KILLINGS
    assert result["day"][0].ten_god is TenGod.SEVEN_KILLINGS


def test_classify_rejects_unknown_day_master(reference_pillars):
    with pytest.raises(InvalidInputError):
        classify(reference_pillars, day_master="Foo")


def test_tally_rejects_foreign_stem():
    """A stem that is not one of the ten table entries is refused."""
    fake = HeavenlyStem("X", "X", Element.WOOD, Polarity.YANG, 0)
    zi = branch_from_symbol("Zi")
    good = Pillar(stem_from_symbol("Jia"), zi, "year")
    pillars = FourPillars(year=good, month=good, day=good, hour=Pillar(fake, zi, "hour"))
    with pytest.raises(InvalidInputError):
        tally(pillars)
