"""Interpretation layer: profiles, typology and insights from DISC scores."""

from discform.interpretation.insights import (
    SALES_RULES,
    VERSATILE_INSIGHTS,
    SalesRule,
    sales_insights,
)
from discform.interpretation.interpreter import (
    COMPETENCIES,
    classify_profile,
    competencies,
    jung_type,
    leadership_style,
    tension,
    tension_level,
)

__all__ = [
    "COMPETENCIES",
    "SALES_RULES",
    "VERSATILE_INSIGHTS",
    "SalesRule",
    "classify_profile",
    "competencies",
    "jung_type",
    "leadership_style",
    "sales_insights",
    "tension",
    "tension_level",
]
