"""HTTP stub API.

Placeholder routes grouped by resource family, mounted under
``config.api_prefix``:

- ``/resources`` -- list, create and fetch resources
- ``/prompts``   -- list and log prompts
- ``/rag``       -- retrieval-augmented queries

None of them is backed by real logic yet; each returns an acknowledgement
payload.  The application carries CORS and per-request logging middleware.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Awaitable, Callable, Optional

from fastapi import APIRouter, FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware

from todo_catalog_mcp import __version__
from todo_catalog_mcp.config import CatalogConfig

logger = logging.getLogger(__name__)

API_TITLE = "Todo Catalog Backend API"


# =============================================================================
# Route families
# =============================================================================

resources_router = APIRouter(prefix="/resources", tags=["resources"])
prompts_router = APIRouter(prefix="/prompts", tags=["prompts"])
rag_router = APIRouter(prefix="/rag", tags=["rag"])


@resources_router.get("")
def list_resources() -> dict[str, Any]:
    return {"message": "Resources API"}


@resources_router.post("", status_code=status.HTTP_201_CREATED)
def create_resource() -> dict[str, Any]:
    return {"message": "Resource created"}


@resources_router.get("/{resource_id}")
def get_resource(resource_id: str) -> dict[str, Any]:
    return {"id": resource_id, "message": f"Resource {resource_id}"}


@prompts_router.get("")
def list_prompts() -> dict[str, Any]:
    return {"message": "Prompts API"}


@prompts_router.post("", status_code=status.HTTP_201_CREATED)
def log_prompt() -> dict[str, Any]:
    return {"message": "Prompt logged"}


@rag_router.post("/query")
def rag_query() -> dict[str, Any]:
    return {"message": "RAG query processed"}


# =============================================================================
# Application factory
# =============================================================================


def create_app(config: Optional[CatalogConfig] = None) -> FastAPI:
    """Build the stub API application.

    Parameters
    ----------
    config:
        Supplies the API prefix and CORS origins.  Defaults are used when
        None.
    """
    config = config or CatalogConfig()

    app = FastAPI(
        title=API_TITLE,
        description="Placeholder routes for resources, prompt logs and RAG queries",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %d (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    @app.get("/")
    def root() -> dict[str, Any]:
        return {"message": API_TITLE, "version": __version__, "status": "running"}

    api = APIRouter()
    api.include_router(resources_router)
    api.include_router(prompts_router)
    api.include_router(rag_router)

    prefix = "" if config.api_prefix == "/" else config.api_prefix
    app.include_router(api, prefix=prefix)

    logger.info("HTTP stub API created with prefix %s", config.api_prefix)
    return app
