"""
Matching engine for identifying the same proposition across platforms.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence, Set, Tuple

from . import config
from .models import Listing, Match, pair_key
from .scorers import FuzzyScorer, KeywordOverlapScorer, SimilarityScorer

logger = logging.getLogger(__name__)


@dataclass
class MatchAccumulator:
    """
    De-duplication state threaded through successive matching passes.

    pair_keys holds every accepted pair; claimed holds the ids of listings
    already taken as a matched counterpart.
    """

    pair_keys: Set[Tuple[str, str]] = field(default_factory=set)
    claimed: Set[str] = field(default_factory=set)

    def accepts(self, source: Listing, target: Listing) -> bool:
        return target.id not in self.claimed and pair_key(source, target) not in self.pair_keys

    def record(self, source: Listing, target: Listing) -> None:
        self.pair_keys.add(pair_key(source, target))
        self.claimed.add(target.id)


class MarketMatcher:
    """Cross-platform matcher combining keyword overlap and optional fuzzy search."""

    def __init__(
        self,
        similarity_threshold: float = config.MATCH_THRESHOLD,
        min_common_keywords: int = config.MIN_COMMON_KEYWORDS,
        min_keywords: int = config.MIN_KEYWORDS,
        denominator: str = config.OVERLAP_DENOMINATOR,
        fuzzy_threshold: Optional[float] = config.FUZZY_THRESHOLD,
        fuzzy_method: str = config.FUZZY_METHOD,
    ):
        """
        Initialize market matcher.

        Args:
            similarity_threshold: Minimum keyword score (0-100) to accept a match
            min_common_keywords: Minimum number of shared keywords for a candidate
            min_keywords: Listings with fewer keywords are skipped
            denominator: Overlap normalization ('min', 'max', 'union', 'harmonic')
            fuzzy_threshold: Minimum fuzzy score (0-100); None disables the fuzzy pass
            fuzzy_method: rapidfuzz ratio used by the fuzzy pass
        """
        for name, value in (("similarity_threshold", similarity_threshold),
                            ("fuzzy_threshold", fuzzy_threshold)):
            if value is not None and not 0 <= value <= 100:
                raise ValueError(f"{name} must be between 0 and 100, got {value}")

        self.similarity_threshold = similarity_threshold
        self.fuzzy_threshold = fuzzy_threshold
        self.keyword_scorer = KeywordOverlapScorer(
            min_keywords=min_keywords,
            min_common_keywords=min_common_keywords,
            denominator=denominator,
        )
        self.fuzzy_scorer = FuzzyScorer(fuzzy_method) if fuzzy_threshold is not None else None

    def _strategies(self) -> List[Tuple[SimilarityScorer, float]]:
        strategies = []
        if self.fuzzy_scorer is not None:
            strategies.append((self.fuzzy_scorer, self.fuzzy_threshold))
        strategies.append((self.keyword_scorer, self.similarity_threshold))
        return strategies

    def _prepare(self, scorer: SimilarityScorer, listing: Listing):
        """Comparison key for a listing, or None if it has too few keywords to match."""
        if scorer is not self.keyword_scorer and self.keyword_scorer.prepare(listing.question) is None:
            return None
        return scorer.prepare(listing.question)

    @staticmethod
    def _build_keyword_index(keys: Sequence[Optional[FrozenSet[str]]]) -> Dict[str, List[int]]:
        """Map each keyword to the positions of the listings containing it."""
        keyword_index: Dict[str, List[int]] = defaultdict(list)
        for position, keywords in enumerate(keys):
            for keyword in keywords or ():
                keyword_index[keyword].append(position)
        return keyword_index

    def _run_pass(
        self,
        scorer: SimilarityScorer,
        threshold: float,
        source_listings: Sequence[Listing],
        target_listings: Sequence[Listing],
        seen: MatchAccumulator,
        matched_sources: Set[str],
    ) -> List[Match]:
        target_keys = [self._prepare(scorer, listing) for listing in target_listings]
        keyword_index = None
        if isinstance(scorer, KeywordOverlapScorer):
            keyword_index = self._build_keyword_index(target_keys)

        matches = []
        for source in source_listings:
            if source.id in matched_sources:
                continue
            source_key = self._prepare(scorer, source)
            if source_key is None:
                continue

            if keyword_index is not None:
                candidates = sorted({
                    position
                    for keyword in source_key
                    for position in keyword_index.get(keyword, ())
                })
            else:
                candidates = range(len(target_listings))

            best_match = None
            best_score = None
            for position in candidates:
                target_key = target_keys[position]
                target = target_listings[position]
                if target_key is None or target.id in seen.claimed:
                    continue
                score = scorer.compare(source_key, target_key)
                if score is None:
                    continue
                # Ties keep the earliest candidate
                if best_score is None or score > best_score:
                    best_score = score
                    best_match = target

            if best_match is None or best_score < threshold:
                continue
            if not seen.accepts(source, best_match):
                continue

            seen.record(source, best_match)
            matched_sources.add(source.id)
            matches.append(Match(source, best_match, int(best_score), scorer.name))
            logger.debug(
                "Match found (%s, score=%d): %s <-> %s",
                scorer.name,
                best_score,
                source.question[:40],
                best_match.question[:40],
            )

        return matches

    def match_platforms(
        self,
        source_listings: Sequence[Listing],
        target_listings: Sequence[Listing],
        seen: Optional[MatchAccumulator] = None,
    ) -> Tuple[List[Match], MatchAccumulator]:
        """
        Find matching listings between two platforms.

        Each source listing gets at most one counterpart, and a counterpart
        already claimed in ``seen`` is never reused.

        Args:
            source_listings: Listings from the first platform
            target_listings: Listings from the second platform
            seen: De-duplication state from earlier passes (a fresh one if None)

        Returns:
            Tuple of (new matches, updated accumulator)
        """
        if seen is None:
            seen = MatchAccumulator()

        logger.info(
            "Matching %d listings (%s) vs %d listings (%s)...",
            len(source_listings),
            source_listings[0].platform if source_listings else "N/A",
            len(target_listings),
            target_listings[0].platform if target_listings else "N/A",
        )

        matches: List[Match] = []
        if not source_listings or not target_listings:
            return matches, seen

        matched_sources: Set[str] = set()
        for scorer, threshold in self._strategies():
            matches.extend(
                self._run_pass(
                    scorer, threshold, source_listings, target_listings, seen, matched_sources
                )
            )

        logger.info("Found %d matching pairs", len(matches))
        return matches, seen

    def find_matches(self, listings_by_platform: Mapping[str, Sequence[Listing]]) -> List[Match]:
        """
        Match every unordered pair of platforms and merge the results.

        Args:
            listings_by_platform: Listings grouped by platform name

        Returns:
            Conflict-free list of Match records
        """
        seen = MatchAccumulator()
        all_matches: List[Match] = []

        for platform_a, platform_b in combinations(list(listings_by_platform), 2):
            matches, seen = self.match_platforms(
                listings_by_platform[platform_a],
                listings_by_platform[platform_b],
                seen,
            )
            all_matches.extend(matches)

        logger.info(
            "Matched %d pairs across %d platforms",
            len(all_matches),
            len(listings_by_platform),
        )
        return all_matches
