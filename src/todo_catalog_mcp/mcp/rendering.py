"""EntryRenderer -- produces the text clients see for catalog entries.

Generates the strings of the MCP surface from :class:`TodoEntry` values:

- **Resource name**: completion glyph followed by the title.
- **Resource description**: the localized completion state.
- **Resource text**: ``ID`` / ``Title`` / ``Status`` lines.
- **Tool confirmations**: add and complete (fresh or already completed).

The renderer is pure -- it has no side effects and performs no I/O.

Typical usage::

    renderer = EntryRenderer(Messages("ja"))
    renderer.resource_name(entry)        # "□ Test"
    renderer.resource_text(entry)        # "ID: 3\\nタイトル: Test\\n状態: 未完了"
"""

from __future__ import annotations

from todo_catalog_mcp.catalog.results import Completion
from todo_catalog_mcp.messages import Messages
from todo_catalog_mcp.models.entry import TodoEntry

MIME_TYPE = "text/plain"


class EntryRenderer:
    """Formats entries and operation outcomes in one locale."""

    def __init__(self, messages: Messages, uri_scheme: str = "todo") -> None:
        self.messages = messages
        self.uri_scheme = uri_scheme

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    def uri(self, entry_id: str) -> str:
        return f"{self.uri_scheme}://{entry_id}"

    @property
    def uri_template(self) -> str:
        return f"{self.uri_scheme}://{{todo_id}}"

    def resource_name(self, entry: TodoEntry) -> str:
        return self.messages.get(
            "resource.name",
            glyph=self.messages.glyph(entry.completed),
            title=entry.title,
        )

    def resource_description(self, entry: TodoEntry) -> str:
        return self.messages.get(
            "resource.description",
            state=self.messages.state(entry.completed),
        )

    def resource_text(self, entry: TodoEntry) -> str:
        return self.messages.get(
            "resource.text",
            id=entry.id,
            title=entry.title,
            state=self.messages.state(entry.completed),
        )

    # ------------------------------------------------------------------
    # Tool confirmations
    # ------------------------------------------------------------------

    def added(self, entry: TodoEntry) -> str:
        return self.messages.get("tool.add_todo.done", id=entry.id, title=entry.title)

    def completed(self, outcome: Completion) -> str:
        """Confirmation for a completion; already-completed entries get their own wording."""
        entry = outcome.entry
        if outcome.already_completed:
            return self.messages.get("tool.complete_todo.already", id=entry.id)
        return self.messages.get(
            "tool.complete_todo.done", id=entry.id, title=entry.title
        )
