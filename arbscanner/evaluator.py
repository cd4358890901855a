"""
Arbitrage evaluation for matched listing pairs.

Buying YES on one platform and NO on the other pays exactly $1 whichever way
the proposition resolves, so any basket costing less than $1 locks in the
difference.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from . import config
from .models import Arb, Listing, Match

logger = logging.getLogger(__name__)


def evaluate_hedges(x: Listing, y: Listing) -> Tuple[float, float, float, float]:
    """
    Price both hedge directions for a matched pair.

    Returns:
        (cost_1, spread_1, cost_2, spread_2) where hedge 1 buys YES on x and
        NO on y, and hedge 2 buys NO on x and YES on y
    """
    cost_1 = x.yes_price + y.no_price
    cost_2 = x.no_price + y.yes_price
    return cost_1, 1.0 - cost_1, cost_2, 1.0 - cost_2


class ArbitrageEvaluator:
    """Turns matched pairs into a ranked list of arbitrage opportunities."""

    def __init__(
        self,
        min_spread: float = config.MIN_SPREAD,
        excerpt_length: int = config.QUESTION_EXCERPT_LENGTH,
    ):
        """
        Initialize evaluator.

        Args:
            min_spread: A hedge must beat this spread to count (0 = any profit)
            excerpt_length: Characters of the question kept on each Arb
        """
        self.min_spread = min_spread
        self.excerpt_length = excerpt_length

    def evaluate_match(self, match: Match) -> Optional[Arb]:
        """Return the better hedge for one match, or None if neither pays."""
        x, y = match.listing_a, match.listing_b
        cost_1, spread_1, cost_2, spread_2 = evaluate_hedges(x, y)

        if not (spread_1 > self.min_spread or spread_2 > self.min_spread):
            return None

        if spread_1 >= spread_2:
            spread, cost = spread_1, cost_1
            strategy = (
                f"BUY YES@{x.platform}(${x.yes_price:.2f}) + "
                f"BUY NO@{y.platform}(${y.no_price:.2f})"
            )
        else:
            spread, cost = spread_2, cost_2
            strategy = (
                f"BUY NO@{x.platform}(${x.no_price:.2f}) + "
                f"BUY YES@{y.platform}(${y.yes_price:.2f})"
            )

        return Arb(
            question=x.question[:self.excerpt_length],
            score=match.score,
            spread=spread,
            cost=cost,
            roi_percent=(spread / cost) * 100 if cost > 0 else None,
            strategy=strategy,
            platform_a=x.platform,
            url_a=x.url,
            yes_a=x.yes_price,
            no_a=x.no_price,
            platform_b=y.platform,
            url_b=y.url,
            yes_b=y.yes_price,
            no_b=y.no_price,
        )

    def evaluate(self, matches: Iterable[Match]) -> List[Arb]:
        """
        Calculate arbitrage opportunities from matched pairs.

        Args:
            matches: Matched listing pairs

        Returns:
            List of Arb objects, sorted by spread descending
        """
        matches = list(matches)
        logger.info("Calculating arbitrage for %d matched pairs...", len(matches))

        opportunities = []
        for match in matches:
            arb = self.evaluate_match(match)
            if arb is None:
                continue
            opportunities.append(arb)
            logger.info(
                "Arbitrage found! spread=%.4f, cost=$%.4f, strategy=%s",
                arb.spread,
                arb.cost,
                arb.strategy,
            )

        opportunities.sort(key=lambda arb: arb.spread, reverse=True)

        logger.info("Found %d arbitrage opportunities", len(opportunities))
        return opportunities
