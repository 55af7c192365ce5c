"""Heuristic keyword relevance scorer.

Stands in for vector similarity search in the visualizer: scores are a sum
of keyword hits, a small topical bonus and random jitter that mimics
vector-distance noise. There is deliberately no relevance threshold, so a
non-empty chunk set always yields at least one chunk of context.
"""

import random
import re

from loguru import logger

from ..config.models import RetrievalConfig
from ..core.chunk import Chunk
from .base import BaseScorer

TOKEN_SPLIT = re.compile(r"\W+")


class KeywordRelevanceScorer(BaseScorer):
    """Keyword-overlap scorer with seedable jitter.

    Attributes:
        keyword_weight: Score added per query token contained in the chunk
        bias_keyword: Marker word for the topical affinity bonus
        bias_weight: Bonus when both query and chunk contain the marker
        jitter: Upper bound of the uniform noise added to every score
        min_token_length: Tokens shorter than this are ignored
        rng: Source of jitter; pass a seeded ``random.Random`` for repeatable ranks
    """

    def __init__(
        self,
        keyword_weight: float = 1.0,
        bias_keyword: str = "rule",
        bias_weight: float = 0.3,
        jitter: float = 0.1,
        min_token_length: int = 3,
        rng: random.Random | None = None,
    ):
        if jitter < 0:
            raise ValueError("jitter must be non-negative")
        self.keyword_weight = keyword_weight
        self.bias_keyword = bias_keyword.lower()
        self.bias_weight = bias_weight
        self.jitter = jitter
        self.min_token_length = min_token_length
        self.rng = rng or random.Random()

    @classmethod
    def from_config(cls, config: RetrievalConfig, rng: random.Random | None = None) -> "KeywordRelevanceScorer":
        if rng is None and config.seed is not None:
            rng = random.Random(config.seed)
        return cls(
            keyword_weight=config.keyword_weight,
            bias_keyword=config.bias_keyword,
            bias_weight=config.bias_weight,
            jitter=config.jitter,
            min_token_length=config.min_token_length,
            rng=rng,
        )

    def tokenize(self, query: str) -> list[str]:
        """Lowercase and split the query, dropping short tokens."""
        return [
            token for token in TOKEN_SPLIT.split(query.lower())
            if len(token) >= self.min_token_length
        ]

    def deterministic_score(self, query: str, chunk: Chunk, tokens: list[str] | None = None) -> float:
        """Score without jitter: keyword hits plus the topical bonus."""
        if tokens is None:
            tokens = self.tokenize(query)
        text = chunk.text.lower()

        score = sum(self.keyword_weight for token in tokens if token in text)
        if self.bias_keyword and self.bias_keyword in query.lower() and self.bias_keyword in text:
            score += self.bias_weight
        return score

    def retrieve(self, query: str, chunks: list[Chunk], k: int) -> list[Chunk]:
        if k < 1:
            raise ValueError("k must be at least 1")
        if not chunks:
            return []

        tokens = self.tokenize(query)
        scored = []
        for chunk in chunks:
            score = self.deterministic_score(query, chunk, tokens)
            score += self.rng.uniform(0, self.jitter) if self.jitter else 0.0
            scored.append(chunk.model_copy(update={"score": score}))

        scored.sort(key=lambda c: c.score, reverse=True)
        results = scored[:k]

        logger.debug(
            f"Scored {len(chunks)} chunks for tokens {tokens}; "
            f"top={[(c.id, round(c.score, 3)) for c in results]}"
        )
        return results
