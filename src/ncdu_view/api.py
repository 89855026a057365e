"""
FastAPI router for browsing a loaded ncdu export.

Endpoints:
    GET /api/directories?path=a/b   listing of one directory, largest first
    GET /api/metadata               export-wide summary
    GET /health                     liveness and whether data is loaded
"""
import logging
from typing import Any, Callable, Dict

from fastapi import APIRouter, Query
from fastapi.responses import ORJSONResponse
from starlette.concurrency import run_in_threadpool

from .resolver import resolve, split_path
from .snapshot import SnapshotStore

logger = logging.getLogger(__name__)


def create_router(get_store: Callable[[], SnapshotStore]) -> APIRouter:
    """
    Factory function to create the router bound to a snapshot store.

    Args:
        get_store: Returns the SnapshotStore serving requests.

    Returns:
        Configured FastAPI APIRouter
    """
    router = APIRouter(tags=["Directories"])

    @router.get("/api/directories",
        summary="List the contents of a directory",
        response_class=ORJSONResponse
    )
    async def get_directory_api(
        path: str = Query("", description="Slash-separated path below the export root (default: root)"),
    ) -> ORJSONResponse:
        """Subdirectories and files of ``path``, each sorted largest first.

        An unknown path is not an HTTP error: the listing comes back with
        ``error`` set and ``path`` cut at the first segment that failed.
        """
        snapshot = await run_in_threadpool(get_store().current)
        segments = split_path(path)
        listing = snapshot.index.lookup(segments)
        if listing is None:
            listing = resolve(snapshot.root, segments)
            logger.debug(f"No index entry for '{path}': {listing.error}")
        return ORJSONResponse(content=listing.to_wire())

    @router.get("/api/metadata",
        summary="Get export metadata",
        response_class=ORJSONResponse
    )
    async def get_metadata_api() -> ORJSONResponse:
        snapshot = await run_in_threadpool(get_store().current)
        return ORJSONResponse(content=snapshot.summary.to_wire())

    @router.get("/health", summary="Health check")
    async def health_api() -> Dict[str, Any]:
        return {"status": "ok", "dataLoaded": get_store().is_loaded}

    return router
