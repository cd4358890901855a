"""Tests for question normalization and keyword extraction."""

import pytest

from arbscanner.utils.text_processing import (
    extract_keywords,
    has_common_keywords,
    normalize_title,
)

SAMPLES = [
    "Will the bill pass by June?",
    "Bill passes before June",
    "Will Bitcoin reach $100,000 by 2025?",
    "  Trump   wins the 2024 election!!  ",
    "Theme of the day: is it on?",
    "Fed cuts rates in March",
    "",
    "   ",
    "???",
]


def test_normalize_basic():
    """Test lower-casing, punctuation and stop-word removal."""
    assert normalize_title("Will the bill pass by June?") == "bill pass june"
    assert normalize_title("Will Bitcoin reach $100,000 by 2025?") == "bitcoin reach 100000 2025"


def test_normalize_stop_words_whole_words_only():
    """Test stop words are not removed from inside longer words."""
    assert normalize_title("Theme of the day") == "theme day"
    assert normalize_title("Isabel onboards tobe") == "isabel onboards tobe"


def test_normalize_collapses_whitespace():
    """Test whitespace runs collapse and ends are trimmed."""
    assert normalize_title("  Trump   wins\tthe\n2024 election  ") == "trump wins 2024 election"


@pytest.mark.parametrize("text", ["", "   ", "\n\t", None, "?!."])
def test_normalize_degenerate_input(text):
    """Test blank input normalizes to an empty string."""
    assert normalize_title(text) == ""


@pytest.mark.parametrize("text", SAMPLES)
def test_normalize_is_idempotent(text):
    """Test normalizing twice gives the same result as once."""
    once = normalize_title(text)
    assert normalize_title(once) == once


def test_extract_keywords_filters_short_and_digit_tokens():
    """Test keywords exclude short tokens, years and generic words."""
    assert extract_keywords("Will Bitcoin reach $100,000 by 2025?") == {"bitcoin", "reach"}
    assert extract_keywords("Will Trump win the US election?") == {"trump", "election"}
    assert extract_keywords("Bill passes before June") == {"bill", "passes", "june"}


@pytest.mark.parametrize("text", SAMPLES)
def test_extract_keywords_invariants(text):
    """Test no keyword is short or purely numeric."""
    for keyword in extract_keywords(text):
        assert len(keyword) > 3
        assert not keyword.isdigit()


def test_extract_keywords_degenerate_input():
    """Test degenerate input yields an empty set."""
    assert extract_keywords("") == set()
    assert extract_keywords(None) == set()
    assert extract_keywords("Will it be?") == set()


def test_has_common_keywords():
    """Test shared-keyword check with the default floor of two."""
    assert has_common_keywords("Will the bill pass by June?", "Bill passes before June") is True
    assert has_common_keywords("Bitcoin reaches record high", "Bitcoin mining difficulty drops") is False
    assert has_common_keywords(
        "Bitcoin reaches record high", "Bitcoin mining difficulty drops", min_common=1
    ) is True
