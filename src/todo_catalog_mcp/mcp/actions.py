"""Action registry -- the invokable tools of the MCP surface.

Each action is a named handler looked up at invocation time.  The server
registers every action in the registry as an MCP tool, and
:meth:`ActionRegistry.dispatch` offers the same lookup to callers that
hold a tool name and an argument dict (the CLI ``call`` command, tests).

Handlers translate catalog results at the boundary: a successful result
becomes a confirmation string, a failed one is raised as an ``McpError``.
"""

# No ``from __future__ import annotations``: handler annotations reference
# locals of build_actions().

import inspect
import logging
from dataclasses import dataclass
from typing import Annotated, Callable, Iterator, Optional

from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, ErrorData
from pydantic import Field

from todo_catalog_mcp.catalog.store import TodoCatalog
from todo_catalog_mcp.mcp.errors import to_protocol_error, unknown_tool_error
from todo_catalog_mcp.mcp.rendering import EntryRenderer
from todo_catalog_mcp.models.entry import TodoEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Action:
    """A named, described handler."""

    name: str
    description: str
    handler: Callable[..., str]


class ActionRegistry:
    """Mapping from action name to :class:`Action`."""

    def __init__(self, renderer: EntryRenderer) -> None:
        self._renderer = renderer
        self._actions: dict[str, Action] = {}

    def register(self, action: Action) -> Action:
        if action.name in self._actions:
            raise ValueError(f"Action {action.name!r} is already registered.")
        self._actions[action.name] = action
        logger.debug("Registered action %s", action.name)
        return action

    def get(self, name: str) -> Action:
        """Return the action called *name*.

        Raises
        ------
        McpError
            ``METHOD_NOT_FOUND`` when no such action exists.
        """
        action = self._actions.get(name)
        if action is None:
            logger.warning("Unknown action requested: %s", name)
            raise unknown_tool_error(name, self._renderer.messages)
        return action

    def dispatch(self, name: str, arguments: Optional[dict] = None) -> str:
        """Invoke the action *name* with *arguments*.

        Arguments that do not fit the handler's signature are reported as
        ``INVALID_PARAMS``.
        """
        action = self.get(name)
        arguments = dict(arguments or {})
        try:
            inspect.signature(action.handler).bind(**arguments)
        except TypeError as exc:
            raise McpError(
                ErrorData(code=INVALID_PARAMS, message=f"{name}: {exc}")
            ) from exc
        return action.handler(**arguments)

    def names(self) -> list[str]:
        return list(self._actions)

    def __iter__(self) -> Iterator[Action]:
        return iter(list(self._actions.values()))

    def __contains__(self, name: object) -> bool:
        return name in self._actions

    def __len__(self) -> int:
        return len(self._actions)


def build_actions(
    catalog: TodoCatalog,
    renderer: EntryRenderer,
    on_change: Optional[Callable[[TodoEntry], None]] = None,
) -> ActionRegistry:
    """Create the registry holding ``add_todo`` and ``complete_todo``.

    Parameters
    ----------
    catalog:
        The catalog the handlers operate on.
    renderer:
        Formats confirmations and error messages.
    on_change:
        Called with the stored entry after every mutation that changed the
        catalog (used to republish MCP resources).
    """
    messages = renderer.messages
    registry = ActionRegistry(renderer)

    title_help = messages.get("tool.add_todo.title")
    id_help = messages.get("tool.complete_todo.id")

    def add_todo(title: Annotated[str, Field(description=title_help)]) -> str:
        result = catalog.create(title)
        if not result.ok:
            raise to_protocol_error(result.error, messages)
        entry = result.value
        if on_change is not None:
            on_change(entry)
        return renderer.added(entry)

    def complete_todo(id: Annotated[str, Field(description=id_help)]) -> str:
        result = catalog.complete(id)
        if not result.ok:
            raise to_protocol_error(result.error, messages)
        outcome = result.value
        if not outcome.already_completed and on_change is not None:
            on_change(outcome.entry)
        return renderer.completed(outcome)

    registry.register(
        Action(
            name="add_todo",
            description=messages.get("tool.add_todo.description"),
            handler=add_todo,
        )
    )
    registry.register(
        Action(
            name="complete_todo",
            description=messages.get("tool.complete_todo.description"),
            handler=complete_todo,
        )
    )
    return registry
