"""depwatch REST API — FastAPI application factory."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from depwatch import __version__
from depwatch.api.deps import close_http_client, init_http_client
from depwatch.api.errors import register_error_handlers
from depwatch.api.middleware.request_id import RequestIDMiddleware
from depwatch.api.routers import analyze
from depwatch.core.logging import setup_logging


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: open the shared HTTP client. Shutdown: close it."""
    init_http_client()
    yield
    await close_http_client()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    setup_logging()

    app = FastAPI(
        title="depwatch",
        version=__version__,
        lifespan=_lifespan,
    )

    register_error_handlers(app)

    cors_origins = os.environ.get("DEPWATCH_CORS_ORIGINS", "http://localhost:3000")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in cors_origins.split(",")],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health", tags=["ops"])
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    app.include_router(analyze.router, tags=["analyze"])

    return app
