"""
FastAPI Web Server for Arbitrage Scanner

Serves scan results as JSON for the dashboard layer.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .evaluator import ArbitrageEvaluator
from .matcher import MarketMatcher
from .models import Listing
from .scanner import scan
from .services import KalshiCollector, PolymarketCollector
from .utils.logging_config import setup_logging

logger = setup_logging().getChild("web_server")

app = FastAPI(title="Arbitrage Scanner", version="1.0.0")

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def build_collectors() -> Dict[str, Any]:
    """Collectors keyed by the platform name they report."""
    return {
        config.POLYMARKET: PolymarketCollector(),
        config.KALSHI: KalshiCollector(),
    }


def build_matcher() -> MarketMatcher:
    """Matcher using the configured thresholds."""
    return MarketMatcher()


async def gather_all_data(collectors: Dict[str, Any]) -> Dict[str, List[Listing]]:
    """
    Fetch every platform concurrently.

    A collector that raises is logged and contributes an empty list.
    """
    loop = asyncio.get_running_loop()
    platforms = list(collectors)

    # Run in executor to avoid blocking
    results = await asyncio.gather(
        *(
            loop.run_in_executor(None, collectors[platform].fetch_active_markets, None)
            for platform in platforms
        ),
        return_exceptions=True,
    )

    listings_by_platform: Dict[str, List[Listing]] = {}
    for platform, result in zip(platforms, results):
        if isinstance(result, Exception):
            logger.error(f"{platform} collection failed: {result}")
            result = []
        elif not result:
            logger.warning(f"No {platform} data collected")
        listings_by_platform[platform] = result

    return listings_by_platform


@app.get("/scan")
async def scan_markets() -> Dict[str, Any]:
    """Scan markets and return ranked opportunities."""
    logger.info("Starting market scan...")
    collectors = build_collectors()
    try:
        listings_by_platform = await gather_all_data(collectors)
    finally:
        for collector in collectors.values():
            collector.close()

    result = scan(
        listings_by_platform,
        matcher=build_matcher(),
        evaluator=ArbitrageEvaluator(),
    )
    return result.to_dict()


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.SERVER_HOST, port=config.SERVER_PORT)
