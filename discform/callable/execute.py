"""In-process entry point for scoring a stored response set.

Request handlers that already hold an assessment's rank records call
execute() directly instead of going through the stores.
"""

from __future__ import annotations

from typing import Any

from discform.callable.result import CallableResult, ExecuteStats
from discform.catalog.registry import CatalogRegistry, get_default_catalog
from discform.config import load_policy
from discform.core.models import RankRecord
from discform.scoring.engine import ScoringEngine
from discform.validation.checks import group_submissions


def execute(params: dict[str, Any]) -> dict[str, Any]:
    """Score one assessment's rank records into a score vector.

    Args:
        params: Dictionary containing:
            - assessment_id: str - The assessment being scored
            - items: list[dict] - Every rank record of the assessment
            - config: dict - Optional:
                - catalog_version: str - Catalog version (defaults to latest)
                - scoring: dict - ScoringPolicy overrides

    Returns:
        CallableResult dict with the serialized score vector as the single
        item and record counts under ``stats``.

    Raises:
        ValueError: If required parameters are missing or a record is
            malformed.
        IncompleteDataError: If the records do not cover every group.
    """
    assessment_id = params.get("assessment_id")
    if not assessment_id:
        raise ValueError("'assessment_id' is required in params")

    items = params.get("items")
    if items is None:
        raise ValueError("'items' is required in params")
    if not isinstance(items, list):
        raise ValueError("'items' must be a list of rank records")

    config = params.get("config") or {}
    catalog_version = config.get("catalog_version")
    catalog = CatalogRegistry().get(catalog_version) if catalog_version else get_default_catalog()
    engine = ScoringEngine(catalog=catalog, policy=load_policy(config.get("scoring")))

    records = [RankRecord.model_validate(item) for item in items]
    vector = engine.score(records, assessment_id=assessment_id)
    counted = sum(len(group) for group in group_submissions(records).values())

    result = CallableResult(
        assessment_id=assessment_id,
        items=[vector.model_dump(mode="json")],
        stats=ExecuteStats(input=len(records), output=1, skipped=len(records) - counted),
    )
    return result.to_dict()
