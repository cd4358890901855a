"""Cross-platform prediction market arbitrage scanner."""

from .evaluator import ArbitrageEvaluator, evaluate_hedges
from .matcher import MarketMatcher, MatchAccumulator
from .models import Arb, Listing, Match, ScanResult
from .scanner import scan

__version__ = "1.0.0"

__all__ = [
    "Arb",
    "ArbitrageEvaluator",
    "Listing",
    "MarketMatcher",
    "Match",
    "MatchAccumulator",
    "ScanResult",
    "evaluate_hedges",
    "scan",
]
