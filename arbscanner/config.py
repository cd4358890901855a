"""
Configuration module for the Arbitrage Scanner.

Contains API endpoints, matching/evaluation parameters, and server defaults.
Tunable values can be overridden through environment variables.
"""

import os
from typing import Optional


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return float(value)


# API Base URLs
GAMMA_API_BASE = "https://gamma-api.polymarket.com"
KALSHI_API_BASE = "https://api.elections.kalshi.com/trade-api/v2"

# Platform identifiers
POLYMARKET = "Polymarket"
KALSHI = "Kalshi"

# Collector parameters
REQUEST_TIMEOUT_SECONDS = _env_float("ARB_REQUEST_TIMEOUT", 15.0)
POLYMARKET_EVENT_LIMIT = 100
KALSHI_PAGE_LIMIT = 100
KALSHI_MAX_PAGES = 2
KALSHI_MAX_MARKETS = 200
USER_AGENT = "ArbitrageScanner/1.0"

# Matching parameters (scores are 0-100)
MATCH_THRESHOLD = _env_float("ARB_MATCH_THRESHOLD", 50.0)
FUZZY_THRESHOLD = _env_float("ARB_FUZZY_THRESHOLD", None)
FUZZY_METHOD = os.getenv("ARB_FUZZY_METHOD", "token_set_ratio")
OVERLAP_DENOMINATOR = os.getenv("ARB_OVERLAP_DENOMINATOR", "min")
MIN_COMMON_KEYWORDS = 2
MIN_KEYWORDS = 2

# Evaluation parameters
MIN_SPREAD = _env_float("ARB_MIN_SPREAD", 0.0)
QUESTION_EXCERPT_LENGTH = 80

# Web server
SERVER_HOST = os.getenv("ARB_HOST", "0.0.0.0")
SERVER_PORT = int(os.getenv("ARB_PORT", "8000"))

# Logging configuration
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_LEVEL = os.getenv("ARB_LOG_LEVEL", "INFO")
