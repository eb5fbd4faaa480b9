"""Click CLI commands for running and inspecting the todo catalog.

Provides the ``todo-catalog`` CLI entry point with subcommands:
- ``todo-catalog serve``  -- Run the MCP server over stdio.
- ``todo-catalog api``    -- Run the HTTP stub API.
- ``todo-catalog list``   -- List the seeded entries.
- ``todo-catalog call``   -- Invoke a tool action against a seeded catalog.
- ``todo-catalog config`` -- Print the resolved configuration.
"""

from todo_catalog_mcp.cli.main import api, call, cli, list_entries, serve, show_config

__all__ = ["api", "call", "cli", "list_entries", "serve", "show_config"]
