"""Matching path: lexical retrieval, factor scoring and ranking."""

from .factor_scorer import FactorScorer
from .lexical_index import LexicalIndex
from .ranker import MatchRanker

__all__ = ["LexicalIndex", "FactorScorer", "MatchRanker"]
