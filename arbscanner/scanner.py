"""
Scan orchestration: validate listings, match them, and rank opportunities.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .evaluator import ArbitrageEvaluator
from .exceptions import MalformedListingError
from .matcher import MarketMatcher
from .models import Listing, ScanResult

logger = logging.getLogger(__name__)

ListingRecord = Union[Listing, Mapping[str, Any]]


def coerce_listings(
    platform: str, records: Optional[Iterable[ListingRecord]]
) -> Tuple[List[Listing], int]:
    """
    Turn raw records for one platform into valid listings.

    Args:
        platform: Platform name the records were collected under
        records: Listing objects or mappings (None is treated as empty)

    Returns:
        Tuple of (valid listings, number of rejected records)
    """
    listings = []
    rejected = 0

    for record in records or ():
        try:
            if isinstance(record, Listing):
                if record.platform != platform:
                    raise MalformedListingError(
                        f"Listing {record.id} is from {record.platform!r}, not {platform!r}"
                    )
                listings.append(record)
            else:
                listings.append(Listing.from_dict(record, platform=platform))
        except MalformedListingError as e:
            rejected += 1
            logger.warning("Skipping malformed %s listing: %s", platform, e)

    return listings, rejected


def scan(
    listings_by_platform: Mapping[str, Optional[Iterable[ListingRecord]]],
    matcher: Optional[MarketMatcher] = None,
    evaluator: Optional[ArbitrageEvaluator] = None,
) -> ScanResult:
    """
    Run one matching and evaluation cycle over already-fetched listings.

    Args:
        listings_by_platform: Listings (or plain records) grouped by platform
        matcher: Matcher to use (default configuration if None)
        evaluator: Evaluator to use (default configuration if None)

    Returns:
        ScanResult with counts and the ranked opportunities
    """
    start = time.monotonic()
    matcher = matcher or MarketMatcher()
    evaluator = evaluator or ArbitrageEvaluator()

    valid: Dict[str, List[Listing]] = {}
    platform_counts: Dict[str, int] = {}
    rejected_counts: Dict[str, int] = {}

    for platform, records in listings_by_platform.items():
        listings, rejected = coerce_listings(platform, records)
        valid[platform] = listings
        platform_counts[platform] = len(listings)
        rejected_counts[platform] = rejected
        if not listings:
            logger.warning("No %s listings to scan", platform)

    matches = matcher.find_matches(valid)
    opportunities = evaluator.evaluate(matches)

    result = ScanResult(
        timestamp=datetime.now(timezone.utc).isoformat(),
        scan_time_ms=int((time.monotonic() - start) * 1000),
        platform_counts=platform_counts,
        rejected_counts=rejected_counts,
        match_count=len(matches),
        opportunities=opportunities,
    )

    logger.info(
        "Scan complete: %d listings, %d matches, %d opportunities",
        result.total_count,
        result.match_count,
        len(opportunities),
    )
    return result
