"""Scoring engine and point accumulation."""

from discform.core.scores import DiscScores, ScoreVector, ValuesScores
from discform.scoring.engine import IncompleteDataError, ScoringEngine, ScoringError
from discform.scoring.methods import rank_points, sum_points

__all__ = [
    "DiscScores",
    "IncompleteDataError",
    "ScoreVector",
    "ScoringEngine",
    "ScoringError",
    "ValuesScores",
    "rank_points",
    "sum_points",
]
