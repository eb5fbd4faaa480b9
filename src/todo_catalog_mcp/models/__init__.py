"""Pydantic data models for catalog entries."""

from todo_catalog_mcp.models.entry import EntryState, TodoEntry

__all__ = ["EntryState", "TodoEntry"]
