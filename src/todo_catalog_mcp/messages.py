"""Locale tables for the user-visible strings of the MCP surface.

Every string a client sees (resource names and descriptions, resource text,
tool confirmations and error messages) is looked up here by key, so the
server can answer in the configured locale.  ``ja`` carries the wording of
the first Japanese-language deployment; ``en`` is the default.
"""

from __future__ import annotations

from typing import Any

# Glyphs prefixed to resource names.
COMPLETED_GLYPH = "✓"
PENDING_GLYPH = "□"

DEFAULT_LOCALE = "en"

_MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "state.completed": "completed",
        "state.pending": "pending",
        "resource.name": "{glyph} {title}",
        "resource.description": "Status: {state}",
        "resource.text": "ID: {id}\nTitle: {title}\nStatus: {state}",
        "tool.add_todo.description": "Add a new todo",
        "tool.add_todo.title": "Title of the todo",
        "tool.add_todo.done": "Added todo - ID: {id}, Title: {title}",
        "tool.complete_todo.description": "Mark a todo as completed",
        "tool.complete_todo.id": "ID of the todo to complete",
        "tool.complete_todo.done": 'Completed todo {id}: "{title}"',
        "tool.complete_todo.already": "Todo {id} is already completed",
        "error.title_required": "Title is required",
        "error.id_required": "ID is required",
        "error.not_found": "Todo {id} not found",
        "error.unknown_tool": "Unknown tool: {name}",
    },
    "ja": {
        "state.completed": "完了",
        "state.pending": "未完了",
        "resource.name": "{glyph} {title}",
        "resource.description": "状態: {state}",
        "resource.text": "ID: {id}\nタイトル: {title}\n状態: {state}",
        "tool.add_todo.description": "新しいTODOを追加する",
        "tool.add_todo.title": "TODOのタイトル",
        "tool.add_todo.done": "TODOを追加しました - ID: {id}, タイトル: {title}",
        "tool.complete_todo.description": "TODOを完了状態に変更する",
        "tool.complete_todo.id": "完了するTODOのID",
        "tool.complete_todo.done": "ID {id} のTODO「{title}」を完了しました",
        "tool.complete_todo.already": "ID {id} のTODOはすでに完了しています",
        "error.title_required": "タイトルは必須です",
        "error.id_required": "IDは必須です",
        "error.not_found": "ID {id} のTODOは見つかりません",
        "error.unknown_tool": "不明なツールです: {name}",
    },
}

SUPPORTED_LOCALES: tuple[str, ...] = tuple(_MESSAGES)


class Messages:
    """Formats user-visible strings for one locale.

    Parameters
    ----------
    locale:
        One of :data:`SUPPORTED_LOCALES`.

    Raises
    ------
    ValueError
        If the locale is not supported.
    """

    def __init__(self, locale: str = DEFAULT_LOCALE) -> None:
        if locale not in _MESSAGES:
            raise ValueError(
                f"Unsupported locale '{locale}'. "
                f"Must be one of: {', '.join(SUPPORTED_LOCALES)}."
            )
        self._locale = locale
        self._table = _MESSAGES[locale]

    @property
    def locale(self) -> str:
        return self._locale

    def get(self, key: str, **params: Any) -> str:
        """Return the message for *key* formatted with *params*.

        Raises ``KeyError`` for an unknown key.
        """
        return self._table[key].format(**params)

    def state(self, completed: bool) -> str:
        """Localized state word for a completion flag."""
        return self.get("state.completed" if completed else "state.pending")

    @staticmethod
    def glyph(completed: bool) -> str:
        return COMPLETED_GLYPH if completed else PENDING_GLYPH

    def __repr__(self) -> str:
        return f"Messages(locale={self._locale!r})"
