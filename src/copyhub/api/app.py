"""
FastAPI Application Factory & Configuration.

This module initializes the FastAPI application instance. It is responsible for:
1.  **Middleware Setup**: CORS so browser front-ends can read the copy directly.
2.  **Exception Handling**: one place mapping domain errors to status codes.
3.  **Routing**: Mounting the copy router and the health check.
4.  **Lifecycle**: Building the `CopyService` at startup and closing it at shutdown.

Design Pattern
--------------
We use an **Application Factory** pattern (`create_app`). Tests pass their
own `CopyService` (wrapping a fake source) and `Settings`; production builds
both from the environment.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from copyhub import __version__
from copyhub.api.routers import copy
from copyhub.api.schemas import HealthPayload
from copyhub.core.errors import InvalidArgument, NotFound, RemoteFetchFailure
from copyhub.core.service import CopyService
from copyhub.core.settings import Settings, get_logger, load_settings

logger = get_logger("copyhub.api")


def create_app(
    service: CopyService | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Construct and configure the CopyHub FastAPI application.

    Parameters
    ----------
    service:
        Pre-built service to serve from. When omitted, the lifespan builds one
        from `settings`.
    settings:
        Configuration; defaults to the cached `load_settings()`.

    Returns
    -------
    FastAPI
        The configured ASGI application ready to be served by Uvicorn.
    """
    cfg = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        ASGI Lifespan context manager.

        - **Startup**: build the copy service if none was injected and
          optionally warm it from the remote source.
        - **Shutdown**: close the service; the snapshot is discarded.
        """
        logger.info("CopyHub API starting (env=%s, source=%s)", cfg.environment, cfg.source)
        if app.state.copy_service is None:
            app.state.copy_service = CopyService.from_settings(cfg)
        await run_in_threadpool(
            app.state.copy_service.start,
            refresh_on_startup=cfg.refresh_on_startup,
        )

        yield

        app.state.copy_service.close()
        logger.info("CopyHub API stopped")

    app = FastAPI(
        title="CopyHub API",
        description="Externally-managed UI copy, cached and served over HTTP.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.copy_service = service

    # -----------------------------------------------------------------------
    # Middleware
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Exception Handlers
    # -----------------------------------------------------------------------
    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
        """Key lookup miss -> 404 with the body consumers already match on."""
        logger.info("Key not found: %r", exc.key)
        return JSONResponse(status_code=404, content={"error": "Key not found"})

    @app.exception_handler(InvalidArgument)
    async def invalid_argument_handler(request: Request, exc: InvalidArgument) -> JSONResponse:
        """Malformed request parameters -> 400."""
        logger.warning("Bad request on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=400,
            content={"error": "Bad Request", "detail": str(exc)},
        )

    @app.exception_handler(RemoteFetchFailure)
    async def remote_failure_handler(request: Request, exc: RemoteFetchFailure) -> JSONResponse:
        """Remote source unavailable -> 502; the cached snapshot is untouched."""
        logger.error("Remote fetch failed on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=502,
            content={"error": "Remote fetch failed", "detail": str(exc)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler so unhandled exceptions still return structured JSON."""
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------
    app.include_router(copy.router)

    @app.get("/health", tags=["System"], response_model=HealthPayload)
    async def health_check(request: Request) -> HealthPayload:
        """Liveness check with the live snapshot's revision and size."""
        snap = request.app.state.copy_service.snapshot()
        return HealthPayload(
            status="ok",
            environment=cfg.environment,
            version=__version__,
            revision=snap.revision,
            records=len(snap),
        )

    return app


__all__ = ["create_app"]
