"""FastAPI stub application for resources, prompt logs and RAG queries."""

from todo_catalog_mcp.api.app import create_app

__all__ = ["create_app"]
