"""FastMCP server for the todo catalog.

Builds a FastMCP server around an injected :class:`TodoCatalog` and
exposes it as:

- **Resources** -- one concrete ``<scheme>://<id>`` resource per entry,
  named ``"<glyph> <title>"`` and described by its localized state.  The
  listing is republished after every mutation.  A ``<scheme>://{todo_id}``
  template answers reads of ids that are not published and reports them
  as not found.
- **Tools** -- every action of the :class:`ActionRegistry` (``add_todo``,
  ``complete_todo``) plus ``health_check``.

Handler errors pass through :class:`ProtocolErrorMiddleware`, which hands
clients the localized message instead of FastMCP's wrapped one.

Typical usage as an MCP server entry point::

    # Via the registered entry point (pyproject.toml):
    # [project.entry-points."mcp.servers"]
    # todo-catalog = "todo_catalog_mcp.mcp:create_server"

    # Or programmatically:
    from todo_catalog_mcp.mcp.server import create_server
    server = create_server()
    server.run(transport="stdio")

The server holds no module-level state.  Each call to :func:`create_server`
returns an independent server bound to its own catalog, which keeps tests
isolated and lets the store be replaced without touching the tools.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from fastmcp import FastMCP
from fastmcp.resources import FunctionResource

from todo_catalog_mcp import __version__
from todo_catalog_mcp.catalog.seed import build_catalog
from todo_catalog_mcp.catalog.store import TodoCatalog
from todo_catalog_mcp.config import CatalogConfig
from todo_catalog_mcp.mcp.actions import ActionRegistry, build_actions
from todo_catalog_mcp.mcp.errors import ProtocolErrorMiddleware, to_protocol_error
from todo_catalog_mcp.mcp.rendering import MIME_TYPE, EntryRenderer
from todo_catalog_mcp.messages import Messages
from todo_catalog_mcp.models.entry import TodoEntry

logger = logging.getLogger(__name__)


def create_server(
    config: Optional[CatalogConfig] = None,
    catalog: Optional[TodoCatalog] = None,
    config_path: Optional[str] = None,
) -> FastMCP:
    """Create and configure the FastMCP server instance.

    This is the factory function registered in pyproject.toml as the
    ``mcp.servers`` entry point.  It:

    1. Loads configuration (CatalogConfig) unless one is given.
    2. Builds the catalog from the seed settings unless one is given.
    3. Instantiates the FastMCP server with metadata.
    4. Publishes every entry as a resource and registers the read template.
    5. Registers the action tools and health_check.

    Parameters
    ----------
    config:
        Explicit configuration.  When None, ``CatalogConfig.load`` is used.
    catalog:
        The catalog to serve.  When None, one is built from *config*.
    config_path:
        Config file passed to ``CatalogConfig.load`` when *config* is None.

    Returns
    -------
    FastMCP
        The configured server instance.
    """
    if config is None:
        config = CatalogConfig.load(config_path=config_path)
        config.configure_logging()

    if catalog is None:
        catalog = build_catalog(config)

    logger.info("Initializing todo catalog MCP server v%s", __version__)
    logger.info("Locale: %s, URI scheme: %s", config.locale, config.uri_scheme)

    renderer = EntryRenderer(Messages(config.locale), uri_scheme=config.uri_scheme)

    server = FastMCP(
        name=config.server_name,
        instructions=(
            "Todo catalog. Each todo is a resource; read it for its id, "
            "title and status. Use add_todo to create a todo and "
            "complete_todo to mark one as completed."
        ),
        version=__version__,
        on_duplicate_resources="replace",
    )
    server.add_middleware(ProtocolErrorMiddleware(renderer.messages))

    publisher = ResourcePublisher(server, catalog, renderer)
    publisher.publish_all()
    publisher.register_template()

    actions = build_actions(catalog, renderer, on_change=publisher.publish)
    _register_tools(server, actions, catalog, config)

    logger.info(
        "FastMCP server created. Entries: %d, tools: %s",
        len(catalog),
        ", ".join(actions.names() + ["health_check"]),
    )
    return server


# ---------------------------------------------------------------------------
# Resource publication
# ---------------------------------------------------------------------------


class ResourcePublisher:
    """Keeps the server's resource listing in step with the catalog.

    Each entry is registered as a concrete resource whose name and
    description reflect the entry's current state.  Re-publishing an entry
    replaces its resource in place, so the listing keeps catalog order.
    """

    def __init__(
        self,
        server: FastMCP,
        catalog: TodoCatalog,
        renderer: EntryRenderer,
    ) -> None:
        self.server = server
        self.catalog = catalog
        self.renderer = renderer

    def publish_all(self) -> None:
        for entry in self.catalog.list_entries():
            self.publish(entry)

    def publish(self, entry: TodoEntry) -> None:
        resource = FunctionResource.from_function(
            fn=self._reader(entry.id),
            uri=self.renderer.uri(entry.id),
            name=self.renderer.resource_name(entry),
            description=self.renderer.resource_description(entry),
            mime_type=MIME_TYPE,
        )
        self.server.add_resource(resource)
        logger.debug("Published resource %s", resource.uri)

    def register_template(self) -> None:
        @self.server.resource(
            self.renderer.uri_template,
            name="todo",
            description="A todo by id",
            mime_type=MIME_TYPE,
        )
        def read_todo(todo_id: str) -> str:
            return self.read_text(todo_id)

    def read_text(self, entry_id: str) -> str:
        """Plain-text rendering of the entry, or a not-found protocol error."""
        result = self.catalog.read(entry_id)
        if not result.ok:
            raise to_protocol_error(result.error, self.renderer.messages)
        return self.renderer.resource_text(result.value)

    def _reader(self, entry_id: str) -> Callable[[], str]:
        def read() -> str:
            return self.read_text(entry_id)

        return read


# ---------------------------------------------------------------------------
# Tool registration
# ---------------------------------------------------------------------------


def _register_tools(
    server: FastMCP,
    actions: ActionRegistry,
    catalog: TodoCatalog,
    config: CatalogConfig,
) -> None:
    """Register every action as a tool, plus health_check."""
    for action in actions:
        server.tool(action.handler, name=action.name, description=action.description)

    @server.tool()
    def health_check() -> dict:
        """Check the health and status of the todo catalog MCP server.

        Returns:
            A dictionary with health status information including:
            - server_version: The server version string
            - status: "healthy"
            - entries: Total number of todos
            - completed: Number of completed todos
            - pending: Number of pending todos
            - next_id: The id the next add_todo call will assign
            - locale: Locale of user-visible strings
            - uri_scheme: Scheme of the todo resource URIs
            - timestamp: ISO 8601 timestamp of this health check
        """
        stats = catalog.stats()
        return {
            "server_version": __version__,
            "status": "healthy",
            "entries": stats["total"],
            "completed": stats["completed"],
            "pending": stats["pending"],
            "next_id": catalog.next_id,
            "locale": config.locale,
            "uri_scheme": config.uri_scheme,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
