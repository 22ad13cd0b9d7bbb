"""Validation of response sets before scoring."""

from discform.validation.checks import (
    CompletenessResult,
    CompletenessValidator,
    group_key_label,
    group_submissions,
)

__all__ = [
    "CompletenessResult",
    "CompletenessValidator",
    "group_key_label",
    "group_submissions",
]
