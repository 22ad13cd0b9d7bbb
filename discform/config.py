"""Global configuration for discform.

Layout:
    $DISCFORM_HOME (default ~/.config/discform)/
        config.yaml
        data/            response log, statuses and results

config.yaml keys:
    data_dir: path to the data directory
    scoring: overrides for ScoringPolicy fields
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field


class ScoringPolicy(BaseModel):
    """Fixed-policy thresholds used by scoring and finalization.

    Scores are raw sums: DISC factors range 0-40, values 0-60.
    """

    tension_low_below: int = 8
    tension_moderate_below: int = 16
    secondary_profile_min: int = 20
    judging_above: int = 20
    sales_threshold: int = 24
    finalize_retries: int = Field(default=2, ge=0)
    finalize_retry_delay: float = Field(default=2.0, ge=0)  # seconds between attempts

    model_config = ConfigDict(frozen=True, extra="forbid")


def get_discform_home() -> Path:
    """Return the discform home directory."""
    env_home = os.environ.get("DISCFORM_HOME")
    if env_home:
        return Path(env_home)
    return Path.home() / ".config" / "discform"


def get_config_path() -> Path:
    return get_discform_home() / "config.yaml"


def load_global_config() -> dict[str, Any]:
    """Load config.yaml, or an empty dict when it does not exist."""
    path = get_config_path()
    if not path.exists():
        return {}
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data or {}


def get_data_dir() -> Path:
    """Resolve the data directory.

    Precedence: $DISCFORM_DATA_DIR, then ``data_dir`` in config.yaml,
    then <home>/data.
    """
    env_path = os.environ.get("DISCFORM_DATA_DIR")
    if env_path:
        return Path(env_path)
    configured = load_global_config().get("data_dir")
    if configured:
        return Path(configured).expanduser()
    return get_discform_home() / "data"


def load_policy(overrides: dict[str, Any] | None = None) -> ScoringPolicy:
    """Build the scoring policy from defaults, config.yaml and overrides."""
    values: dict[str, Any] = dict(load_global_config().get("scoring") or {})
    if overrides:
        values.update(overrides)
    return ScoringPolicy.model_validate(values)
