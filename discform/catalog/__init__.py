"""Stage catalog: the static adjective and phrase groups."""

from discform.catalog.models import Catalog, Group, Item, ProfileSpec, StageInfo
from discform.catalog.registry import (
    CatalogNotFoundError,
    CatalogRegistry,
    CatalogValidationError,
    get_default_catalog,
)

__all__ = [
    "Catalog",
    "CatalogNotFoundError",
    "CatalogRegistry",
    "CatalogValidationError",
    "Group",
    "Item",
    "ProfileSpec",
    "StageInfo",
    "get_default_catalog",
]
