"""Utility functions for ragviz."""

from .json_extract import extract_json
from .logging import setup_logging
from .performance import Timing, timer

__all__ = [
    "extract_json",
    "setup_logging",
    "timer",
    "Timing",
]
