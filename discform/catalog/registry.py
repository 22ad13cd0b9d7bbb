"""Catalog registry for loading and caching stage catalogs."""

import json
from functools import lru_cache
from pathlib import Path

import jsonschema

from discform.catalog.models import Catalog, Group
from discform.core.models import GROUPS_PER_STAGE, Stage

DATA_DIR = Path(__file__).parent / "data"
SCHEMA_PATH = DATA_DIR / "catalog.schema.json"


class CatalogNotFoundError(Exception):
    """Raised when a catalog version is not found."""

    pass


class CatalogValidationError(Exception):
    """Raised when a catalog fails schema or structural validation."""

    pass


class CatalogRegistry:
    """Registry for loading and caching stage catalogs.

    Loads catalogs from a directory of versioned files:
        <registry_path>/<version>.json

    Where version uses dashes instead of dots (e.g., 1-0-0.json for 1.0.0).
    The packaged catalog directory is used when no path is given.
    """

    def __init__(
        self,
        registry_path: Path | str | None = None,
        schema_path: Path | str | None = SCHEMA_PATH,
    ) -> None:
        """Initialize the catalog registry.

        Args:
            registry_path: Directory holding versioned catalog files.
            schema_path: JSON schema to validate against, or None to skip.
        """
        self.registry_path = Path(registry_path) if registry_path else DATA_DIR
        self._cache: dict[str, Catalog] = {}
        self._schema: dict | None = None

        if schema_path:
            with open(schema_path, encoding="utf-8") as f:
                self._schema = json.load(f)

    def _version_to_filename(self, version: str) -> str:
        """Convert version string to filename (1.0.0 -> 1-0-0.json)."""
        return version.replace(".", "-") + ".json"

    def get(self, version: str) -> Catalog:
        """Get a catalog by version.

        Raises:
            CatalogNotFoundError: If the catalog file doesn't exist.
            CatalogValidationError: If the catalog is malformed.
        """
        if version in self._cache:
            return self._cache[version]

        path = self.registry_path / self._version_to_filename(version)
        if not path.exists():
            raise CatalogNotFoundError(
                f"Catalog not found: {version} (expected at {path})"
            )

        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        if self._schema:
            try:
                jsonschema.validate(data, self._schema)
            except jsonschema.ValidationError as e:
                raise CatalogValidationError(
                    f"Catalog validation failed for {version}: {e.message}"
                ) from e

        catalog = Catalog.model_validate(data)
        check_structure(catalog)
        self._cache[version] = catalog
        return catalog

    def list_versions(self) -> list[str]:
        """List all available catalog versions."""
        if not self.registry_path.exists():
            return []
        versions = []
        for f in self.registry_path.glob("*.json"):
            if f.name == SCHEMA_PATH.name:
                continue
            versions.append(f.stem.replace("-", "."))
        return sorted(versions, key=lambda v: tuple(int(p) for p in v.split(".")))

    def get_latest(self) -> Catalog:
        """Get the latest catalog version.

        Raises:
            CatalogNotFoundError: If no versions exist.
        """
        versions = self.list_versions()
        if not versions:
            raise CatalogNotFoundError(f"No catalogs found in {self.registry_path}")
        return self.get(versions[-1])


def check_structure(catalog: Catalog) -> None:
    """Check invariants the schema cannot express.

    Every stage has groups numbered 1..10, each carrying every factor of
    its stage exactly once, with distinct item texts.

    Raises:
        CatalogValidationError: On the first violation found.
    """
    for stage in (Stage.NATURAL, Stage.VALUES):
        groups = catalog.groups(stage)
        numbers = [g.group_number for g in groups]
        if numbers != list(range(1, GROUPS_PER_STAGE + 1)):
            raise CatalogValidationError(
                f"{stage.value} groups must be numbered 1..{GROUPS_PER_STAGE}, got {numbers}"
            )
        for group in groups:
            _check_group(stage, group)

    stages = {info.stage for info in catalog.stages}
    if stages != set(Stage):
        raise CatalogValidationError("Catalog must describe all three stages")

    factors = {p.factor.value for p in catalog.profiles}
    if factors != set(Stage.NATURAL.factors):
        raise CatalogValidationError("Catalog must carry one profile per DISC factor")


def _check_group(stage: Stage, group: Group) -> None:
    factors = sorted(item.factor for item in group.items)
    if factors != sorted(stage.factors):
        raise CatalogValidationError(
            f"{stage.value} group {group.group_number} must carry each of "
            f"{', '.join(stage.factors)} exactly once"
        )
    texts = [item.text for item in group.items]
    if len(set(texts)) != len(texts):
        raise CatalogValidationError(
            f"{stage.value} group {group.group_number} repeats an item text"
        )


@lru_cache(maxsize=1)
def get_default_catalog() -> Catalog:
    """Latest packaged catalog, loaded once per process."""
    return CatalogRegistry().get_latest()
