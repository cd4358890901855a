"""
Text processing utilities for market question normalization.
"""

import re
from typing import Optional, Set

# Removed from normalized text as whole words
STOP_WORDS = ('will', 'the', 'be', 'to', 'in', 'on', 'by', 'of', 'a', 'an', 'is')

# Generic and temporal words that carry no topical signal
KEYWORD_STOP_WORDS = frozenset({
    'will', 'before', 'after', 'than', 'more', 'less', 'what', 'when',
    'which', 'where', 'this', 'that', 'these', 'those', 'with', 'from',
    'into', 'have', 'does', 'there', 'their', 'they', 'about', 'over',
    'under', 'between', 'during', 'until', 'year', 'years', 'month',
    'months', 'week', 'weeks', 'today', 'tomorrow', 'happen', 'next',
    'least', 'most', 'other', 'end', 'yes',
})

MIN_KEYWORD_LENGTH = 4

_NON_WORD_RE = re.compile(r'[^\w\s]')
_STOP_WORD_RE = re.compile(r'\b(?:' + '|'.join(STOP_WORDS) + r')\b')
_WHITESPACE_RE = re.compile(r'\s+')


def normalize_title(title: Optional[str]) -> str:
    """
    Normalize market question for comparison.

    Steps:
    1. Convert to lowercase
    2. Remove characters that are not word characters or whitespace
    3. Remove stop words (whole words only)
    4. Collapse whitespace and strip

    Args:
        title: Raw market question

    Returns:
        Normalized string, empty for blank input
    """
    if not title:
        return ''

    normalized = title.lower()
    normalized = _NON_WORD_RE.sub('', normalized)
    normalized = _STOP_WORD_RE.sub('', normalized)
    normalized = _WHITESPACE_RE.sub(' ', normalized)

    return normalized.strip()


def extract_keywords(title: Optional[str]) -> Set[str]:
    """
    Extract significant keywords from a question.

    Keeps tokens longer than three characters that are neither pure digits
    (years, counts) nor generic stop words.

    Args:
        title: Market question

    Returns:
        Set of keywords (empty for degenerate input)
    """
    words = normalize_title(title).split()

    return {
        w for w in words
        if len(w) >= MIN_KEYWORD_LENGTH
        and not w.isdigit()
        and w not in KEYWORD_STOP_WORDS
    }


def has_common_keywords(title1: str, title2: str, min_common: int = 2) -> bool:
    """
    Check if two questions share important keywords.

    Args:
        title1: First question
        title2: Second question
        min_common: Minimum number of common keywords required

    Returns:
        True if questions share at least min_common keywords
    """
    common = extract_keywords(title1) & extract_keywords(title2)

    return len(common) >= min_common
