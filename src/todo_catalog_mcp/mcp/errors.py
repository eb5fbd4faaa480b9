"""Translation of catalog errors into MCP protocol errors.

Catalog operations report caller mistakes as :class:`CatalogError` values.
Handlers turn them into :class:`McpError` with these codes:

=====================  ====================
ErrorKind              JSON-RPC code
=====================  ====================
``INVALID_ARGUMENT``   ``INVALID_PARAMS``
``NOT_FOUND``          ``INVALID_REQUEST``
``METHOD_NOT_FOUND``   ``METHOD_NOT_FOUND``
=====================  ====================

What a client sees depends on the request:

- ``resources/read`` of an unknown id fails with a JSON-RPC error carrying
  the code above and the localized message.
- ``tools/call`` failures are tool results with ``isError`` set and the
  localized message as their only text, since MCP reports tool execution
  errors inside the result.  Unknown tool names are reported the same way.
- The CLI ``call`` command dispatches directly and prints the code.

FastMCP wraps handler exceptions in its own ``ResourceError`` and
``ToolError`` with a prefixed message; :class:`ProtocolErrorMiddleware`
unwraps them.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional

from fastmcp.exceptions import NotFoundError, ToolError
from fastmcp.server.middleware import Middleware, MiddlewareContext
from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, INVALID_REQUEST, METHOD_NOT_FOUND, ErrorData

from todo_catalog_mcp.catalog.results import CatalogError, ErrorKind
from todo_catalog_mcp.messages import Messages

NextHandler = Callable[[MiddlewareContext], Awaitable[Any]]

ERROR_CODES: dict[ErrorKind, int] = {
    ErrorKind.INVALID_ARGUMENT: INVALID_PARAMS,
    ErrorKind.NOT_FOUND: INVALID_REQUEST,
    ErrorKind.METHOD_NOT_FOUND: METHOD_NOT_FOUND,
}


def localized_message(error: CatalogError, messages: Messages) -> str:
    """Render *error* in the locale of *messages*."""
    if error.kind == ErrorKind.NOT_FOUND:
        return messages.get("error.not_found", id=error.entry_id)
    if error.kind == ErrorKind.INVALID_ARGUMENT:
        if error.field == "title":
            return messages.get("error.title_required")
        if error.field == "id":
            return messages.get("error.id_required")
    return error.message


def to_protocol_error(error: CatalogError, messages: Messages) -> McpError:
    """Build the :class:`McpError` reported to the client for *error*."""
    return McpError(
        ErrorData(
            code=ERROR_CODES[error.kind],
            message=localized_message(error, messages),
        )
    )


def unknown_tool_error(name: str, messages: Messages) -> McpError:
    return to_protocol_error(
        CatalogError(
            kind=ErrorKind.METHOD_NOT_FOUND,
            message=messages.get("error.unknown_tool", name=name),
        ),
        messages,
    )


def protocol_cause(exc: Optional[BaseException]) -> Optional[McpError]:
    """Return the :class:`McpError` in *exc*'s ``__cause__`` chain, if any."""
    while exc is not None:
        if isinstance(exc, McpError):
            return exc
        exc = exc.__cause__
    return None


class ProtocolErrorMiddleware(Middleware):
    """Deliver handler errors to MCP clients without FastMCP's wrapping."""

    def __init__(self, messages: Messages) -> None:
        self.messages = messages

    async def on_read_resource(self, context: MiddlewareContext, call_next: NextHandler) -> Any:
        try:
            return await call_next(context)
        except Exception as exc:
            cause = protocol_cause(exc)
            if cause is None or cause is exc:
                raise
            raise cause from None

    async def on_call_tool(self, context: MiddlewareContext, call_next: NextHandler) -> Any:
        try:
            return await call_next(context)
        except NotFoundError as exc:
            message = self.messages.get("error.unknown_tool", name=context.message.name)
            raise ToolError(message) from exc
        except Exception as exc:
            cause = protocol_cause(exc)
            if cause is None:
                raise
            raise ToolError(cause.error.message) from exc
