"""Tests for platform collectors (no network)."""

import json

import pytest
import requests

from arbscanner.services import KalshiCollector, PolymarketCollector


class FakeResponse:
    def __init__(self, payload):
        self._payload = payload

    def raise_for_status(self):
        pass

    def json(self):
        return self._payload


class FakeSession:
    """Returns queued payloads and records request params."""

    def __init__(self, payloads=None, error=None):
        self.payloads = list(payloads or [])
        self.error = error
        self.calls = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append(dict(params or {}))
        if self.error is not None:
            raise self.error
        return FakeResponse(self.payloads.pop(0))

    def close(self):
        self.closed = True


def kalshi_market(ticker, **prices):
    market = {"ticker": ticker, "title": f"Market {ticker}", "event_ticker": "EVT"}
    market.update(prices)
    return market


def test_polymarket_parse_events():
    """Test Gamma events flatten into listings with string-encoded prices."""
    events = [
        {
            "title": "Bill vote",
            "slug": "bill-vote",
            "markets": [
                {"conditionId": "0xabc", "question": "Will the bill pass by June?",
                 "outcomePrices": json.dumps(["0.40", "0.55"]), "active": True, "closed": False},
                {"conditionId": "0xdef", "question": "Closed market",
                 "outcomePrices": ["0.5", "0.5"], "active": True, "closed": True},
                {"id": "123", "question": "No prices", "active": True, "closed": False},
                {"id": "456", "outcomePrices": [0.2, 0.8], "active": True, "closed": False},
            ],
        },
    ]

    listings = PolymarketCollector().parse_events(events)

    assert [listing.id for listing in listings] == ["0xabc", "456"]
    first = listings[0]
    assert first.platform == "Polymarket"
    assert first.yes_price == 0.40
    assert first.no_price == 0.55
    assert first.url == "https://polymarket.com/event/bill-vote"
    assert first.event == "Bill vote"
    # Falls back to the event title
    assert listings[1].question == "Bill vote"


def test_polymarket_fetch_failure_returns_empty():
    """Test a network error degrades to an empty listing set."""
    collector = PolymarketCollector()
    collector.session = FakeSession(error=requests.exceptions.ConnectionError("down"))

    assert collector.fetch_active_markets() == []


def test_polymarket_fetch_applies_limit():
    """Test the limit caps the returned listings."""
    markets = [
        {"id": str(i), "question": f"Question {i}", "outcomePrices": ["0.5", "0.5"],
         "active": True, "closed": False}
        for i in range(5)
    ]
    collector = PolymarketCollector()
    collector.session = FakeSession([[{"title": "Event", "slug": "e", "markets": markets}]])

    listings = collector.fetch_active_markets(limit=3)

    assert len(listings) == 3
    assert collector.session.calls[0]["closed"] == "false"


def test_kalshi_midpoint_prices():
    """Test cents are converted using bid/ask midpoints."""
    market = kalshi_market("T1", yes_bid=40, yes_ask=44, no_bid=56, no_ask=60,
                           subtitle="Before June")

    listing = KalshiCollector().parse_markets([market])[0]

    assert listing.yes_price == pytest.approx(0.42)
    assert listing.no_price == pytest.approx(0.58)
    assert listing.question == "Market T1 Before June"
    assert listing.url == "https://kalshi.com/markets/T1"
    assert listing.platform == "Kalshi"


def test_kalshi_price_fallbacks():
    """Test ask-only, last-price-only and unpriced markets."""
    markets = [
        kalshi_market("ASK", yes_bid=0, yes_ask=30),
        kalshi_market("LAST", last_price=65),
        kalshi_market("NONE", yes_bid=0, yes_ask=0, last_price=0),
    ]

    listings = KalshiCollector().parse_markets(markets)

    assert [listing.id for listing in listings] == ["ASK", "LAST"]
    assert listings[0].yes_price == pytest.approx(0.30)
    assert listings[0].no_price == pytest.approx(0.70)
    assert listings[1].yes_price == pytest.approx(0.65)
    assert listings[1].no_price == pytest.approx(0.35)


def test_kalshi_pagination_stops_at_max_pages():
    """Test paging follows the cursor up to the page cap."""
    full_page = [kalshi_market(f"A{i}", yes_ask=50) for i in range(100)]
    second_page = [kalshi_market(f"B{i}", yes_ask=50) for i in range(100)]
    collector = KalshiCollector(max_pages=2, max_markets=1000)
    collector.session = FakeSession([
        {"markets": full_page, "cursor": "c1"},
        {"markets": second_page, "cursor": "c2"},
    ])

    listings = collector.fetch_active_markets()

    assert len(listings) == 200
    assert len(collector.session.calls) == 2
    assert "cursor" not in collector.session.calls[0]
    assert collector.session.calls[1]["cursor"] == "c1"


def test_kalshi_pagination_stops_on_short_page():
    """Test a short page ends paging."""
    collector = KalshiCollector()
    collector.session = FakeSession([
        {"markets": [kalshi_market("A", yes_ask=50)], "cursor": "c1"},
    ])

    listings = collector.fetch_active_markets()

    assert len(listings) == 1
    assert len(collector.session.calls) == 1


def test_kalshi_fetch_failure_returns_empty():
    """Test a network error degrades to an empty listing set."""
    collector = KalshiCollector()
    collector.session = FakeSession(error=requests.exceptions.Timeout("slow"))

    assert collector.fetch_active_markets() == []


def test_kalshi_non_object_page_keeps_earlier_pages():
    """Test a page that decodes to a list ends paging without losing data."""
    full_page = [kalshi_market(f"A{i}", yes_ask=50) for i in range(100)]
    collector = KalshiCollector(max_pages=3, max_markets=1000)
    collector.session = FakeSession([
        {"markets": full_page, "cursor": "c1"},
        ["unexpected"],
    ])

    listings = collector.fetch_active_markets()

    assert len(listings) == 100
    assert len(collector.session.calls) == 2


@pytest.mark.parametrize("collector_class", [PolymarketCollector, KalshiCollector])
def test_close_releases_session(collector_class):
    """Test close() closes the underlying HTTP session."""
    collector = collector_class()
    collector.session = FakeSession()

    collector.close()

    assert collector.session.closed
