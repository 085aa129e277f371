"""Tests for focus boost matching and application."""
import pytest

from app.algos.mem_scoring.focus import (
    FocusBoost,
    apply_focus_boost,
    category_matches,
    encode_boost_factor,
)
from app.models.dto.retrieval import RankedResult


def result(vector_id: str, score: float, category: str = "") -> RankedResult:
    return RankedResult(
        vector_id=vector_id,
        score=score,
        similarity=score,
        metadata={"category": category},
    )


@pytest.mark.parametrize("category,focus,expected", [
    ("stewart-golf", ["golf"], True),
    ("Stewart-Golf", ["GOLF"], True),
    ("golf", ["stewart-golf"], False),
    ("work", ["golf", "work"], True),
    ("misc", ["golf"], False),
    ("", ["golf"], False),
    (None, ["golf"], False),
    ("golf", [""], False),
])
def test_category_matches(category, focus, expected):
    assert category_matches(category, focus) is expected


def test_boost_factor_round_trips_through_storage():
    assert encode_boost_factor(1.5) == 150
    assert FocusBoost.from_stored(["golf"], 150).boost_factor == 1.5


def test_only_matching_results_are_boosted():
    boost = FocusBoost(categories=("golf",), boost_factor=2.0)
    results = [result("a", 0.4, "stewart-golf"), result("b", 0.6, "misc")]

    boosted = apply_focus_boost(results, boost)

    assert boosted[0].score == pytest.approx(0.8)
    assert boosted[0].boosted is True
    assert boosted[1].score == pytest.approx(0.6)
    assert boosted[1].boosted is False


def test_apply_focus_boost_does_not_mutate_input():
    boost = FocusBoost(categories=("golf",), boost_factor=3.0)
    original = result("a", 0.5, "golf")

    apply_focus_boost([original], boost)

    assert original.score == 0.5
    assert original.boosted is False
