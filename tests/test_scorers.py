"""Tests for the pluggable similarity scorers."""

import pytest

from arbscanner.scorers import FuzzyScorer, KeywordOverlapScorer


def test_keyword_score_uses_smaller_set():
    """Test overlap is normalized by the smaller keyword set."""
    scorer = KeywordOverlapScorer()

    # shared: bill, june; sizes 3 and 3
    assert scorer.score("Will the bill pass by June?", "Bill passes before June") == 67


@pytest.mark.parametrize(
    "denominator, expected",
    [("min", 100), ("max", 60), ("union", 60), ("harmonic", 80)],
)
def test_keyword_score_denominators(denominator, expected):
    """Test each overlap denominator on a 5-vs-3 keyword subset."""
    scorer = KeywordOverlapScorer(denominator=denominator)

    score = scorer.score("Bitcoin price above 100k in December", "Bitcoin price December")

    assert score == expected


def test_keyword_score_overlap_floor():
    """Test a single shared keyword is not a candidate."""
    scorer = KeywordOverlapScorer()

    assert scorer.score("Bitcoin reaches record high", "Bitcoin mining difficulty drops") is None


def test_keyword_score_not_matchable():
    """Test texts with fewer than two keywords are not matchable."""
    scorer = KeywordOverlapScorer()

    assert scorer.prepare("Trump") is None
    assert scorer.prepare("") is None
    assert scorer.score("Trump", "Trump election") is None


def test_keyword_scorer_rejects_unknown_denominator():
    """Test configuration errors surface at construction."""
    with pytest.raises(ValueError):
        KeywordOverlapScorer(denominator="median")


def test_fuzzy_score_word_order():
    """Test token set ratio ignores word order."""
    scorer = FuzzyScorer()

    assert scorer.score("Bitcoin price December", "December bitcoin price") == 100


def test_fuzzy_score_paraphrase():
    """Test fuzzy scoring rewards near-identical phrasing."""
    scorer = FuzzyScorer()

    assert scorer.score("Fed cuts rates in March", "Fed cut rate March") >= 90


def test_fuzzy_score_blank_text():
    """Test blank text is not comparable."""
    scorer = FuzzyScorer()

    assert scorer.prepare("  ?? ") is None
    assert scorer.score("", "Fed cut rate March") is None


def test_fuzzy_scorer_rejects_unknown_method():
    """Test unknown rapidfuzz methods are rejected."""
    with pytest.raises(ValueError):
        FuzzyScorer(method="soundex")
