"""Result envelope returned by the discform execute() interface."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

SCHEMA_VERSION = "1.0"


class ExecuteStats(BaseModel):
    """Counts for one execute() call.

    ``skipped`` counts records from earlier attempts at revisited groups,
    which the latest attempt replaced.
    """

    input: int = Field(ge=0)
    output: int = Field(ge=0)
    skipped: int = Field(default=0, ge=0)
    errors: int = Field(default=0, ge=0)

    model_config = ConfigDict(extra="forbid")


class CallableResult(BaseModel):
    """Score vectors for one assessment, inline or by reference.

    Exactly one of ``items`` (serialized score vectors) or ``items_ref``
    (an artifact location) is set.
    """

    schema_version: str = SCHEMA_VERSION
    assessment_id: str
    items: list[dict[str, Any]] | None = None
    items_ref: str | None = None
    stats: ExecuteStats | None = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def check_single_payload(self) -> CallableResult:
        if self.items is not None and self.items_ref is not None:
            raise ValueError("Cannot set both 'items' and 'items_ref'; use exactly one")
        if self.items is None and self.items_ref is None:
            raise ValueError("Must set exactly one of 'items' or 'items_ref'")
        return self

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict without the unset payload field."""
        return self.model_dump(mode="json", exclude_none=True)
