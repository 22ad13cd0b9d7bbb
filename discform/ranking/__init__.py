"""Ranking interaction for a single group."""

from discform.ranking.selector import RankSelector, RankValidationError

__all__ = [
    "RankSelector",
    "RankValidationError",
]
