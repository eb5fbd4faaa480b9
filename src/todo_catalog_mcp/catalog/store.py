"""TodoCatalog -- the in-memory entity catalog.

Holds the mapping from id to :class:`TodoEntry` and enforces the record
invariants.  The catalog is an explicitly owned object: the server, the
CLI and the tests each create or receive their own instance.

Typical usage::

    catalog = TodoCatalog(DEFAULT_SEED)

    result = catalog.create("Ship it")
    if result.ok:
        entry = result.value              # TodoEntry(id="4", ...)

    outcome = catalog.complete("4").unwrap()
    outcome.already_completed             # False the first time, True after

Ids come from a counter kept next to the mapping.  It starts after the
highest numeric id seen at construction (or after the entry count when no
id is numeric) and skips ids that are already taken, so an id is never
handed out twice.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Iterator, Optional

from todo_catalog_mcp.catalog.results import (
    CatalogResult,
    Completion,
    ErrorKind,
)
from todo_catalog_mcp.models.entry import MAX_ID_LENGTH, TodoEntry

logger = logging.getLogger(__name__)


class TodoCatalog:
    """In-memory mapping of id to entry with create/complete mutations.

    All operations run under one re-entrant lock so id allocation always
    sees an accurate counter, even when a thread-pooled HTTP layer shares
    the catalog.

    Parameters
    ----------
    entries:
        Entries to pre-seed the catalog with, in display order.

    Raises
    ------
    ValueError
        If two seed entries share an id.
    """

    def __init__(self, entries: Iterable[TodoEntry] = ()) -> None:
        self._entries: dict[str, TodoEntry] = {}
        self._lock = threading.RLock()

        for entry in entries:
            if entry.id in self._entries:
                raise ValueError(f"Duplicate entry id in seed: {entry.id!r}")
            self._entries[entry.id] = entry

        numeric_ids = [
            int(key)
            for key in self._entries
            if key.isascii() and key.isdigit() and len(key) < MAX_ID_LENGTH
        ]
        self._counter = max(numeric_ids, default=len(self._entries))

        logger.debug(
            "Catalog initialised with %d entries. Next id: %s",
            len(self._entries),
            self.next_id,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_entries(self) -> list[TodoEntry]:
        """Return all entries in insertion order."""
        with self._lock:
            return list(self._entries.values())

    def read(self, entry_id: str) -> CatalogResult[TodoEntry]:
        """Return the entry for *entry_id*, or a ``NOT_FOUND`` error."""
        with self._lock:
            entry = self._entries.get(entry_id) if isinstance(entry_id, str) else None
        if entry is None:
            logger.debug("Read of unknown entry %r.", entry_id)
            return CatalogResult.failure(
                ErrorKind.NOT_FOUND,
                f"Todo {entry_id} not found",
                entry_id=str(entry_id),
            )
        return CatalogResult.success(entry)

    def stats(self) -> dict:
        """Return total, completed and pending counts."""
        with self._lock:
            total = len(self._entries)
            completed = sum(1 for e in self._entries.values() if e.completed)
        return {
            "total": total,
            "completed": completed,
            "pending": total - completed,
        }

    @property
    def next_id(self) -> str:
        """The id the next successful :meth:`create` will assign."""
        with self._lock:
            return self._peek_next_id()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, title: Optional[str]) -> CatalogResult[TodoEntry]:
        """Create a pending entry with *title*.

        Fails with ``INVALID_ARGUMENT`` when the title is missing or blank.
        """
        if not isinstance(title, str) or not title.strip():
            logger.warning("Rejected create with empty title.")
            return CatalogResult.failure(
                ErrorKind.INVALID_ARGUMENT,
                "Title is required",
                field="title",
            )

        with self._lock:
            entry_id = self._peek_next_id()
            entry = TodoEntry(id=entry_id, title=title, completed=False)
            self._entries[entry_id] = entry
            self._counter = int(entry_id)

        logger.info("Created todo %s: %s", entry.id, entry.title)
        return CatalogResult.success(entry)

    def complete(self, entry_id: Optional[str]) -> CatalogResult[Completion]:
        """Mark the entry *entry_id* as completed.

        Completing an already-completed entry succeeds without change and
        reports ``already_completed=True``.
        """
        if not isinstance(entry_id, str) or not entry_id:
            logger.warning("Rejected complete with empty id.")
            return CatalogResult.failure(
                ErrorKind.INVALID_ARGUMENT,
                "ID is required",
                field="id",
            )

        with self._lock:
            entry = self._entries.get(entry_id)
            if entry is None:
                logger.warning("Rejected complete of unknown todo %s.", entry_id)
                return CatalogResult.failure(
                    ErrorKind.NOT_FOUND,
                    f"Todo {entry_id} not found",
                    entry_id=entry_id,
                )
            if entry.completed:
                logger.info("Todo %s is already completed.", entry_id)
                return CatalogResult.success(
                    Completion(entry=entry, already_completed=True)
                )
            updated = entry.mark_completed()
            self._entries[entry_id] = updated

        logger.info("Completed todo %s: %s", updated.id, updated.title)
        return CatalogResult.success(Completion(entry=updated, already_completed=False))

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        with self._lock:
            return entry_id in self._entries

    def __iter__(self) -> Iterator[TodoEntry]:
        return iter(self.list_entries())

    def __repr__(self) -> str:
        return f"TodoCatalog(entries={len(self)}, next_id={self.next_id!r})"

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _peek_next_id(self) -> str:
        candidate = self._counter + 1
        while str(candidate) in self._entries:
            candidate += 1
        return str(candidate)
