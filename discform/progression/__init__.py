"""Questionnaire progression and finalization."""

from discform.progression.controller import (
    FinalizationError,
    NavigationError,
    ProgressionController,
)
from discform.progression.finalizer import (
    AssessmentFinalizer,
    DuplicateFinalizationError,
    FinalizationOutcome,
)
from discform.progression.session import STAGE_ORDER, AssessmentProgress

__all__ = [
    "STAGE_ORDER",
    "AssessmentFinalizer",
    "AssessmentProgress",
    "DuplicateFinalizationError",
    "FinalizationError",
    "FinalizationOutcome",
    "NavigationError",
    "ProgressionController",
]
