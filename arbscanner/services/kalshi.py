"""
Kalshi data collector using their public API.

Documentation: https://docs.kalshi.com/
API Endpoint: https://api.elections.kalshi.com/trade-api/v2
Authentication: Optional API key for higher rate limits
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests

from .. import config
from ..exceptions import CollectorError, MalformedListingError
from ..models import Listing

logger = logging.getLogger(__name__)


def _positive(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


class KalshiCollector:
    """Collector for Kalshi data."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = config.REQUEST_TIMEOUT_SECONDS,
        max_pages: int = config.KALSHI_MAX_PAGES,
        max_markets: int = config.KALSHI_MAX_MARKETS,
    ):
        """
        Initialize Kalshi collector.

        Args:
            api_key: Kalshi API key (optional, for authenticated requests)
            timeout: Request timeout in seconds
            max_pages: Maximum number of pages to request
            max_markets: Stop paging once this many listings are collected
        """
        self.base_url = config.KALSHI_API_BASE
        self.timeout = timeout
        self.max_pages = max_pages
        self.max_markets = max_markets
        self.api_key = api_key or os.getenv("KALSHI_API_KEY")

        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": config.USER_AGENT,
            "Accept": "application/json",
        })

        if self.api_key:
            self.session.headers.update({
                "Authorization": f"Bearer {self.api_key}"
            })
            logger.info("Kalshi API key configured")

    def close(self) -> None:
        """Release the pooled HTTP connections."""
        self.session.close()

    def fetch_active_markets(self, limit: Optional[int] = None) -> List[Listing]:
        """
        Fetch open markets from Kalshi.

        Args:
            limit: Maximum number of listings to return (None = all fetched)

        Returns:
            List of Listing objects (whatever was collected before an error)
        """
        url = f"{self.base_url}/markets"

        all_markets: List[Listing] = []
        cursor = None
        pages = 0

        try:
            logger.info("Fetching Kalshi markets...")

            while len(all_markets) < self.max_markets and pages < self.max_pages:
                pages += 1
                params = {
                    "status": "open",
                    "limit": config.KALSHI_PAGE_LIMIT,
                }
                if cursor:
                    params["cursor"] = cursor

                response = self.session.get(url, params=params, timeout=self.timeout)
                response.raise_for_status()

                data = response.json()
                if not isinstance(data, dict):
                    logger.warning("Unexpected Kalshi payload: %s", type(data).__name__)
                    break

                markets_data = data.get("markets") or []
                all_markets.extend(self.parse_markets(markets_data))

                cursor = data.get("cursor")

                # Stop if no more pages
                if not cursor or len(markets_data) < config.KALSHI_PAGE_LIMIT:
                    break

                logger.debug(f"Fetched {len(all_markets)} markets so far, continuing...")

        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Failed to fetch Kalshi markets: {e}")

        logger.info(f"Fetched {len(all_markets)} Kalshi markets")
        return all_markets[:limit] if limit else all_markets

    def parse_markets(self, markets_data: List[Dict[str, Any]]) -> List[Listing]:
        """Parse one page of markets, skipping those without usable prices."""
        listings = []
        for market_data in markets_data:
            if not isinstance(market_data, dict):
                continue
            try:
                listings.append(self._parse_market(market_data))
            except (CollectorError, MalformedListingError) as e:
                logger.warning(f"Failed to parse market: {e}")
        return listings

    def _parse_market(self, market: Dict[str, Any]) -> Listing:
        """
        Parse a single market from Kalshi API response.

        Kalshi quotes in cents (0-100); prices are converted to 0.0-1.0 using
        the bid/ask midpoint where both sides are quoted.

        Args:
            market: Market data from API

        Returns:
            Listing object

        Raises:
            CollectorError: If no YES price can be derived
        """
        ticker = market.get("ticker") or ""
        yes_bid = market.get("yes_bid")
        yes_ask = market.get("yes_ask")
        no_bid = market.get("no_bid")
        no_ask = market.get("no_ask")
        last_price = market.get("last_price")

        if _positive(yes_bid) and _positive(yes_ask):
            price_yes = (yes_bid + yes_ask) / 2 / 100
        elif _positive(yes_ask):
            price_yes = yes_ask / 100
        elif _positive(last_price):
            price_yes = last_price / 100
        else:
            raise CollectorError(f"No YES price for market {ticker}")

        if _positive(no_bid) and isinstance(no_ask, (int, float)):
            price_no = (no_bid + no_ask) / 2 / 100
        else:
            price_no = 1.0 - price_yes

        title = market.get("title") or ""
        subtitle = market.get("subtitle")
        question = f"{title} {subtitle}".strip() if subtitle else title

        return Listing(
            platform=config.KALSHI,
            id=ticker,
            question=question,
            event=market.get("event_ticker") or "",
            yes_price=round(price_yes, 4),
            no_price=round(price_no, 4),
            url=f"https://kalshi.com/markets/{ticker}",
        )
