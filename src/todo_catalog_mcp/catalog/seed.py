"""Startup seeding for the catalog.

The catalog lives only as long as the process.  At startup it can be
pre-seeded with the built-in demo entries and/or with entries read from a
JSON file.  A seed file is either a list of entry objects or an object
with an ``entries`` list::

    [
      {"id": "1", "title": "Write spec", "completed": true},
      {"id": "2", "title": "Implement"}
    ]
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Union

from pydantic import ValidationError

from todo_catalog_mcp.catalog.store import TodoCatalog
from todo_catalog_mcp.models.entry import TodoEntry

if TYPE_CHECKING:
    from todo_catalog_mcp.config import CatalogConfig

logger = logging.getLogger(__name__)

DEFAULT_SEED: tuple[TodoEntry, ...] = (
    TodoEntry(id="1", title="Write spec", completed=True),
    TodoEntry(id="2", title="Implement", completed=True),
    TodoEntry(id="3", title="Test", completed=False),
)


class SeedFileError(ValueError):
    """A seed file is missing, unreadable or malformed."""


def load_seed_file(path: Union[str, Path]) -> list[TodoEntry]:
    """Read entries from a JSON seed file.

    Raises
    ------
    SeedFileError
        If the file cannot be read, is not valid JSON, has the wrong shape,
        contains an invalid entry or repeats an id.
    """
    seed_path = Path(path)
    try:
        with open(seed_path, "r", encoding="utf-8") as fp:
            data = json.load(fp)
    except OSError as exc:
        raise SeedFileError(f"Could not read seed file {seed_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise SeedFileError(f"Seed file {seed_path} is not valid JSON: {exc}") from exc

    if isinstance(data, dict):
        data = data.get("entries")
    if not isinstance(data, list):
        raise SeedFileError(
            f"Seed file {seed_path} must contain a list of entries "
            f"or an object with an 'entries' list."
        )

    entries: list[TodoEntry] = []
    seen: set[str] = set()
    for index, item in enumerate(data):
        try:
            entry = TodoEntry.from_json_dict(item)
        except ValidationError as exc:
            raise SeedFileError(
                f"Invalid entry #{index} in seed file {seed_path}: {exc}"
            ) from exc
        if entry.id in seen:
            raise SeedFileError(
                f"Duplicate id {entry.id!r} in seed file {seed_path}."
            )
        seen.add(entry.id)
        entries.append(entry)

    logger.info("Loaded %d seed entries from %s", len(entries), seed_path)
    return entries


def build_catalog(config: "CatalogConfig") -> TodoCatalog:
    """Create a catalog seeded according to *config*.

    File entries whose id matches a default entry replace it in place.
    """
    entries: dict[str, TodoEntry] = {}
    if config.seed_defaults:
        entries.update((entry.id, entry) for entry in DEFAULT_SEED)
    if config.seed_path is not None:
        entries.update((entry.id, entry) for entry in load_seed_file(config.seed_path))

    catalog = TodoCatalog(entries.values())
    logger.info("Catalog ready with %d entries.", len(catalog))
    return catalog
