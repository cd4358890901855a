"""
Polymarket data collector using Gamma API.

Documentation: https://docs.polymarket.com/#gamma-markets-api
"""

import json
import logging
from typing import Any, Dict, List, Optional

import requests

from .. import config
from ..exceptions import CollectorError, MalformedListingError
from ..models import Listing

logger = logging.getLogger(__name__)


class PolymarketCollector:
    """Collector for Polymarket data via Gamma API."""

    def __init__(self, timeout: float = config.REQUEST_TIMEOUT_SECONDS):
        """
        Initialize Polymarket collector.

        Args:
            timeout: Request timeout in seconds
        """
        self.base_url = config.GAMMA_API_BASE
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": config.USER_AGENT,
            "Accept": "application/json",
        })

    def close(self) -> None:
        """Release the pooled HTTP connections."""
        self.session.close()

    def fetch_active_markets(self, limit: Optional[int] = None) -> List[Listing]:
        """
        Fetch active, open markets from the first page of Polymarket events.

        Args:
            limit: Maximum number of listings to return (None = all fetched)

        Returns:
            List of Listing objects (empty if the API is unavailable)
        """
        url = f"{self.base_url}/events"
        params = {
            "active": "true",
            "closed": "false",
            "limit": config.POLYMARKET_EVENT_LIMIT,
        }

        try:
            logger.info("Fetching active Polymarket markets...")
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            events = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Failed to fetch Polymarket markets: {e}")
            return []

        listings = self.parse_events(events)
        logger.info(f"Fetched {len(listings)} active Polymarket markets")
        return listings[:limit] if limit else listings

    def parse_events(self, events: Any) -> List[Listing]:
        """Flatten a Gamma events payload into listings, skipping bad markets."""
        listings = []
        if not isinstance(events, list):
            logger.warning("Unexpected Polymarket payload: %s", type(events).__name__)
            return listings

        for event in events:
            if not isinstance(event, dict):
                continue
            for market in event.get("markets") or []:
                if not isinstance(market, dict):
                    continue
                # Only active, non-closed markets
                if market.get("closed") or not market.get("active"):
                    continue
                try:
                    listings.append(self._parse_market(market, event))
                except (CollectorError, MalformedListingError) as e:
                    logger.warning(f"Failed to parse market: {e}")

        return listings

    def _parse_market(self, market: Dict[str, Any], event: Dict[str, Any]) -> Listing:
        """
        Parse a single market from Gamma API response.

        Args:
            market: Market data from API
            event: Parent event data

        Returns:
            Listing object

        Raises:
            CollectorError: If the market has no usable outcome prices
        """
        outcome_prices = market.get("outcomePrices")

        # Gamma returns the price list JSON-encoded
        if isinstance(outcome_prices, str):
            try:
                outcome_prices = json.loads(outcome_prices)
            except ValueError as e:
                raise CollectorError(f"Unreadable outcomePrices: {outcome_prices!r}") from e

        if not isinstance(outcome_prices, list) or len(outcome_prices) < 2:
            raise CollectorError(f"Missing outcome prices for market {market.get('id')}")

        try:
            # Index 0 = Yes, Index 1 = No
            price_yes = float(outcome_prices[0])
            price_no = float(outcome_prices[1])
        except (TypeError, ValueError) as e:
            raise CollectorError(f"Non-numeric outcome prices: {outcome_prices!r}") from e

        return Listing(
            platform=config.POLYMARKET,
            id=market.get("conditionId") or market.get("id") or "",
            question=market.get("question") or event.get("title") or "",
            event=event.get("title") or "",
            yes_price=price_yes,
            no_price=price_no,
            url=f"https://polymarket.com/event/{event.get('slug') or ''}",
        )
