import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.concurrency import run_in_threadpool

from .api import create_router
from .config import ViewerConfig, load_config
from .exceptions import NcduViewException
from .logging_config import setup_logging
from .snapshot import SnapshotStore

logger = logging.getLogger(__name__)


def create_app(config: Optional[ViewerConfig] = None, store: Optional[SnapshotStore] = None) -> FastAPI:
    """Application factory. Used by uvicorn with ``factory=True``."""
    config = config or load_config()
    store = store or SnapshotStore(config.export_path, config.refresh_interval_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(
            str(config.log_directory),
            base_logger_name="ncdu_view",
            level=config.log_level,
            json_format=config.log_json,
        )
        logger.info("Application startup initiated.")
        try:
            await run_in_threadpool(store.current)
        except NcduViewException as e:
            logger.critical(f"Failed to load initial export data: {e.detail}")
            raise
        logger.info(f"Serving {config.export_path} (refresh every {config.refresh_interval_hours}h)")
        yield
        logger.info("Application shutdown complete.")

    app = FastAPI(title="ncdu-view", lifespan=lifespan)
    app.state.config = config
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.exception_handler(NcduViewException)
    async def ncdu_view_exception_handler(request: Request, exc: NcduViewException):
        logger.error(f"Error serving {request.url.path}: {exc.detail}")
        content = {"error": exc.detail}
        if config.development:
            content["details"] = exc.context
        return ORJSONResponse(status_code=exc.status_code, content=content)

    app.include_router(create_router(lambda: store))
    return app
