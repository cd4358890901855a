"""
Data models for the Arbitrage Scanner.
"""

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .exceptions import MalformedListingError


def _coerce_price(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise MalformedListingError(f"Invalid {name}: {value!r}")
    try:
        price = float(value)
    except (TypeError, ValueError) as e:
        raise MalformedListingError(f"Invalid {name}: {value!r}") from e
    if math.isnan(price) or not 0.0 <= price <= 1.0:
        raise MalformedListingError(f"Invalid {name}: {value!r}")
    return price


@dataclass(frozen=True)
class Listing:
    """One binary-outcome contract on one platform."""
    platform: str        # 'Polymarket', 'Kalshi', etc.
    id: str              # Platform specific ID
    question: str        # Raw question text
    yes_price: float     # 0.00 ~ 1.00
    no_price: float      # 0.00 ~ 1.00
    url: str = ""        # Market Link
    event: str = ""      # Optional grouping label

    def __post_init__(self):
        """Validate data after initialization."""
        if not self.platform or not str(self.platform).strip():
            raise MalformedListingError("Listing has no platform")
        if not self.id or not str(self.id).strip():
            raise MalformedListingError("Listing has no id")
        if not isinstance(self.question, str) or not self.question.strip():
            raise MalformedListingError(f"Listing {self.id} has no question text")
        # Frozen dataclass: normalize numeric strings in place
        object.__setattr__(self, "yes_price", _coerce_price("yes_price", self.yes_price))
        object.__setattr__(self, "no_price", _coerce_price("no_price", self.no_price))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], platform: Optional[str] = None) -> "Listing":
        """
        Build a Listing from a plain mapping.

        Args:
            data: Record with listing fields
            platform: Platform the record was collected under; a record naming
                a different platform is rejected

        Raises:
            MalformedListingError: If required fields are missing or invalid
        """
        if not isinstance(data, Mapping):
            raise MalformedListingError(f"Listing record is not a mapping: {type(data).__name__}")
        record_platform = data.get("platform")
        if platform and record_platform and record_platform != platform:
            raise MalformedListingError(
                f"Listing record names platform {record_platform!r}, expected {platform!r}"
            )
        return cls(
            platform=platform or record_platform or "",
            id=str(data.get("id") or ""),
            question=data.get("question"),
            yes_price=data.get("yes_price"),
            no_price=data.get("no_price"),
            url=data.get("url") or "",
            event=data.get("event") or "",
        )


@dataclass(frozen=True)
class Match:
    """Claimed correspondence between two listings on different platforms."""

    listing_a: Listing
    listing_b: Listing
    score: int
    strategy: str = "keyword"

    @property
    def pair_key(self) -> Tuple[str, str]:
        return pair_key(self.listing_a, self.listing_b)


def pair_key(a: Listing, b: Listing) -> Tuple[str, str]:
    """Order-independent identity of a listing pair."""
    return (min(a.id, b.id), max(a.id, b.id))


@dataclass
class Arb:
    """Arbitrage opportunity between two matched listings."""

    question: str
    score: int
    spread: float
    cost: float
    roi_percent: Optional[float]
    strategy: str
    platform_a: str
    url_a: str
    yes_a: float
    no_a: float
    platform_b: str
    url_b: str
    yes_b: float
    no_b: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def __str__(self):
        return (
            f"Arbitrage Opportunity (spread: {self.spread:.4f})\n"
            f"  Question: {self.question}\n"
            f"  {self.platform_a}: YES ${self.yes_a:.4f} | NO ${self.no_a:.4f}\n"
            f"  {self.platform_b}: YES ${self.yes_b:.4f} | NO ${self.no_b:.4f}\n"
            f"  Match Score: {self.score}\n"
            f"  Total Cost: ${self.cost:.4f}\n"
            f"  Strategy: {self.strategy}\n"
        )


@dataclass
class ScanResult:
    """Outcome of one scan, ready for the API layer."""

    timestamp: str
    scan_time_ms: int
    platform_counts: Dict[str, int]
    rejected_counts: Dict[str, int]
    match_count: int
    opportunities: List[Arb] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        return sum(self.platform_counts.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "scan_time_ms": self.scan_time_ms,
            "platform_counts": dict(self.platform_counts),
            "rejected_counts": dict(self.rejected_counts),
            "total_count": self.total_count,
            "match_count": self.match_count,
            "opportunity_count": len(self.opportunities),
            "opportunities": [arb.to_dict() for arb in self.opportunities],
        }
