"""Utilities package."""

from .logging_config import setup_logging
from .text_processing import extract_keywords, has_common_keywords, normalize_title

__all__ = ["extract_keywords", "has_common_keywords", "normalize_title", "setup_logging"]
