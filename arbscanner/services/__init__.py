"""Services package for data collection."""

from .kalshi import KalshiCollector
from .polymarket import PolymarketCollector

__all__ = ["KalshiCollector", "PolymarketCollector"]
