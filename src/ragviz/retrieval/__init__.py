"""Retrieval: heuristic relevance scoring over the in-memory chunk set."""

from .base import BaseScorer
from .keyword import KeywordRelevanceScorer

__all__ = ["BaseScorer", "KeywordRelevanceScorer"]
