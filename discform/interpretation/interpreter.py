"""Derived typology computed from DISC score vectors.

Every function here is pure. Thresholds come from ScoringPolicy; the
tie-break rules (D, I, S, C precedence for profiles, strict ``>`` for the
first letter of each Jung pair) are fixed.
"""

from discform.catalog.models import Catalog
from discform.catalog.registry import get_default_catalog
from discform.config import ScoringPolicy
from discform.core.models import DiscFactor
from discform.core.scores import (
    DiscScores,
    JungType,
    LeadershipStyle,
    ProfileClassification,
    Tension,
    TensionLevel,
)

COMPETENCIES: dict[DiscFactor, tuple[str, ...]] = {
    DiscFactor.D: ("boldness", "command", "objectivity", "assertiveness"),
    DiscFactor.I: ("persuasion", "extroversion", "enthusiasm", "sociability"),
    DiscFactor.S: ("empathy", "patience", "persistence", "planning"),
    DiscFactor.C: ("organization", "detail", "prudence", "concentration"),
}


def tension_level(total: int, policy: ScoringPolicy | None = None) -> TensionLevel:
    """Bucket a total tension value."""
    policy = policy or ScoringPolicy()
    if total < policy.tension_low_below:
        return "low"
    if total < policy.tension_moderate_below:
        return "moderate"
    return "high"


def tension(
    natural: DiscScores,
    adapted: DiscScores,
    policy: ScoringPolicy | None = None,
) -> Tension:
    """Per-factor and total distance between natural and adapted vectors."""
    delta = DiscScores(
        **{f.value: abs(natural.get(f) - adapted.get(f)) for f in DiscFactor}
    )
    total = sum(delta.get(f) for f in DiscFactor)
    return Tension(delta=delta, total=total, level=tension_level(total, policy))


def classify_profile(
    natural: DiscScores,
    catalog: Catalog | None = None,
    policy: ScoringPolicy | None = None,
) -> ProfileClassification:
    """Primary profile, plus a secondary one when it is strong enough.

    Factors are ranked by descending natural score; ties keep D, I, S, C
    order. The runner-up becomes the secondary profile only when its score
    reaches ``secondary_profile_min``.
    """
    catalog = catalog or get_default_catalog()
    policy = policy or ScoringPolicy()

    ranked = natural.ranked()
    primary_factor, _ = ranked[0]
    runner_up, runner_up_score = ranked[1]

    primary = catalog.profile(primary_factor)
    secondary = (
        catalog.profile(runner_up)
        if runner_up_score >= policy.secondary_profile_min
        else None
    )

    description = f"Perfil {primary.name}"
    if secondary:
        description += f"/{secondary.name}"
    description += f" - {primary.description}"

    return ProfileClassification(
        primary_factor=primary_factor,
        primary_profile=primary.name,
        secondary_factor=secondary.factor if secondary else None,
        secondary_profile=secondary.name if secondary else None,
        description=description,
    )


def _half_up_mean(a: int, b: int) -> int:
    """Mean of two non-negative integers, .5 rounded up."""
    return (a + b + 1) // 2


def jung_type(natural: DiscScores, policy: ScoringPolicy | None = None) -> JungType:
    """Four-letter type from pairwise composites of the natural vector.

    The first option of each pair needs a strictly greater composite; ties
    fall to the second. The last letter is J when natural C exceeds
    ``judging_above``.
    """
    policy = policy or ScoringPolicy()
    d, i, s, c = (natural.get(f) for f in DiscFactor)

    extroversion = _half_up_mean(d, i)
    introversion = _half_up_mean(s, c)
    intuition = _half_up_mean(d, i)
    sensation = _half_up_mean(s, c)
    thinking = _half_up_mean(d, c)
    feeling = _half_up_mean(i, s)

    code = (
        ("E" if extroversion > introversion else "I")
        + ("N" if intuition > sensation else "S")
        + ("T" if thinking > feeling else "F")
        + ("J" if c > policy.judging_above else "P")
    )

    return JungType(
        type=code,
        extroversion=extroversion,
        introversion=introversion,
        intuition=intuition,
        sensation=sensation,
        thinking=thinking,
        feeling=feeling,
    )


def leadership_style(natural: DiscScores) -> LeadershipStyle:
    """Natural DISC scores relabeled as leadership styles."""
    return LeadershipStyle(
        executive=natural.D,
        motivator=natural.I,
        systematic=natural.S,
        methodical=natural.C,
    )


def competencies(natural: DiscScores, adapted: DiscScores) -> dict[str, int]:
    """Competency scores, four per factor, suffixed _n (natural) and _a (adapted)."""
    result: dict[str, int] = {}
    for suffix, scores in (("n", natural), ("a", adapted)):
        for factor, names in COMPETENCIES.items():
            for name in names:
                result[f"{name}_{suffix}"] = scores.get(factor)
    return result
