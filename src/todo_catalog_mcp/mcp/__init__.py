"""FastMCP server, action registry and resource publication for the todo catalog."""

from todo_catalog_mcp.mcp.server import create_server

__all__ = ["create_server"]
