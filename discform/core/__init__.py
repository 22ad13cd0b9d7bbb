"""Core shared infrastructure for discform.

Stage and factor domains, the persisted rank record, the score models
produced by the engine, and the protocols for the external stores the
engine reads from and writes to.
"""

from discform.core.models import (
    GROUPS_PER_STAGE,
    AssessmentStatus,
    DiscFactor,
    RankRecord,
    Stage,
    ValueFactor,
)
from discform.core.scores import (
    DiscScores,
    JungType,
    LeadershipStyle,
    ProfileClassification,
    SalesInsights,
    ScoreVector,
    Tension,
    ValuesScores,
)
from discform.core.stores import ResponseStore, ResultStore, StatusStore

__all__ = [
    # Models
    "GROUPS_PER_STAGE",
    "AssessmentStatus",
    "DiscFactor",
    "RankRecord",
    "Stage",
    "ValueFactor",
    # Scores
    "DiscScores",
    "JungType",
    "LeadershipStyle",
    "ProfileClassification",
    "SalesInsights",
    "ScoreVector",
    "Tension",
    "ValuesScores",
    # Stores
    "ResponseStore",
    "ResultStore",
    "StatusStore",
]
