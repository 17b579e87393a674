"""FastAPI application entry point."""
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from filehost.config import Settings, settings as default_settings
from filehost.errors import StoreError
from filehost.routes.files import build_router
from filehost.schemas.common import ErrorResponse
from filehost.services.categories import CATEGORIES
from filehost.store import build_managers

logger = logging.getLogger(__name__)


def _error(status: int, message: str) -> JSONResponse:
    body = ErrorResponse(status=status, message=message)
    return JSONResponse(status_code=status, content=body.model_dump())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load every category index on startup, flush pending snapshots on shutdown."""
    cfg: Settings = app.state.settings
    managers = build_managers(cfg)
    for manager in managers.values():
        await manager.load()
    app.state.managers = managers
    logger.info(f"Serving {', '.join(managers)} from {cfg.storage_root}")

    yield

    for manager in managers.values():
        await manager.flush()


def create_app(cfg: Optional[Settings] = None) -> FastAPI:
    app = FastAPI(
        title="File Host API",
        version="1.0.0",
        description="PDF and image host with per-category metadata indexes.",
        lifespan=lifespan,
    )
    app.state.settings = cfg or default_settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app.state.settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f} ms"
        )
        return response

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # unknown paths and unknown methods on known paths are both unmatched
        if exc.status_code in (404, 405):
            return _error(404, "Resource Not Found")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error(400, "Invalid request")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error(500, "Internal Server Error")

    @app.get("/", response_class=PlainTextResponse)
    async def welcome():
        return "Welcome to the CME pdf and image host server"

    for category in CATEGORIES:
        app.include_router(build_router(category))

    return app


app = create_app()
