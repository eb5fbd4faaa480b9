"""Todo Catalog MCP - an in-memory TODO catalog exposed over MCP, with a stub HTTP API."""

__version__ = "0.1.0"

from todo_catalog_mcp.config import CatalogConfig

__all__ = ["CatalogConfig", "__version__"]
