"""Result values returned by catalog operations.

Catalog operations never raise for caller mistakes.  They return a
:class:`CatalogResult` holding either a value or a :class:`CatalogError`,
and the request-handling layer decides how to report the error.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from todo_catalog_mcp.models.entry import TodoEntry

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Kinds of caller error.  None of them is retryable."""

    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    METHOD_NOT_FOUND = "method_not_found"


@dataclass(frozen=True)
class CatalogError:
    """A rejected operation.

    ``field`` names the offending argument for ``INVALID_ARGUMENT``;
    ``entry_id`` names the missing id for ``NOT_FOUND``.
    """

    kind: ErrorKind
    message: str
    entry_id: Optional[str] = None
    field: Optional[str] = None


class CatalogOperationError(Exception):
    """Raised by :meth:`CatalogResult.unwrap` on a failed result."""

    def __init__(self, error: CatalogError) -> None:
        super().__init__(error.message)
        self.error = error


@dataclass(frozen=True)
class Completion:
    """Outcome of completing an entry."""

    entry: TodoEntry
    already_completed: bool


@dataclass(frozen=True)
class CatalogResult(Generic[T]):
    """Either a ``value`` or an ``error``, never both."""

    value: Optional[T] = None
    error: Optional[CatalogError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "CatalogResult[T]":
        return cls(value=value)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        message: str,
        *,
        entry_id: Optional[str] = None,
        field: Optional[str] = None,
    ) -> "CatalogResult[T]":
        return cls(
            error=CatalogError(
                kind=kind, message=message, entry_id=entry_id, field=field
            )
        )

    def unwrap(self) -> T:
        """Return the value, or raise :class:`CatalogOperationError`."""
        if self.error is not None:
            raise CatalogOperationError(self.error)
        return self.value  # type: ignore[return-value]
