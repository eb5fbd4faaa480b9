"""In-memory entity catalog: the store, its result values and startup seeding."""

from todo_catalog_mcp.catalog.results import (
    CatalogError,
    CatalogOperationError,
    CatalogResult,
    Completion,
    ErrorKind,
)
from todo_catalog_mcp.catalog.seed import (
    DEFAULT_SEED,
    SeedFileError,
    build_catalog,
    load_seed_file,
)
from todo_catalog_mcp.catalog.store import TodoCatalog

__all__ = [
    "CatalogError",
    "CatalogOperationError",
    "CatalogResult",
    "Completion",
    "DEFAULT_SEED",
    "ErrorKind",
    "SeedFileError",
    "TodoCatalog",
    "build_catalog",
    "load_seed_file",
]
