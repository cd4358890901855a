"""Custom exceptions for the Arbitrage Scanner."""


class ScannerError(Exception):
    """Base exception for all scanner errors."""


class MalformedListingError(ScannerError, ValueError):
    """Listing record is missing question text or carries unusable prices."""


class CollectorError(ScannerError):
    """Platform payload could not be turned into a listing."""
