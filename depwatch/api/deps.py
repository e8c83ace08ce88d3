"""Dependency injection — shared HTTP client and analyzer."""

from __future__ import annotations

import os

import httpx
import structlog
from fastapi import Depends

from depwatch.engines.dependency_scanner.scanner import DEFAULT_CONCURRENCY, DependencyAnalyzer

log = structlog.get_logger("depwatch.api")

# ---------------------------------------------------------------------------
# Shared HTTP client (initialised by app lifespan)
# ---------------------------------------------------------------------------
_http_client: httpx.AsyncClient | None = None


def init_http_client(timeout: float | None = None) -> httpx.AsyncClient:
    """Create the shared client used for manifest fetches and registry lookups."""
    global _http_client  # noqa: PLW0603
    if timeout is None:
        timeout = float(os.environ.get("DEPWATCH_HTTP_TIMEOUT", "15"))
    _http_client = httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": "depwatch"},
    )
    return _http_client


async def close_http_client() -> None:
    """Close the shared client and its pooled connections."""
    global _http_client  # noqa: PLW0603
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


def lookup_concurrency() -> int:
    """Semaphore bound for registry lookups; bad values fall back to the default."""
    raw = os.environ.get("DEPWATCH_LOOKUP_CONCURRENCY")
    if raw is None:
        return DEFAULT_CONCURRENCY
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value < 1:
        log.warning("config.invalid", key="DEPWATCH_LOOKUP_CONCURRENCY", value=raw)
        return DEFAULT_CONCURRENCY
    return value


# ---------------------------------------------------------------------------
# Getters (for Depends())
# ---------------------------------------------------------------------------


def get_http_client() -> httpx.AsyncClient:
    if _http_client is None:
        raise RuntimeError("call init_http_client() before handling requests")
    return _http_client


def get_dependency_analyzer(
    client: httpx.AsyncClient = Depends(get_http_client),
) -> DependencyAnalyzer:
    return DependencyAnalyzer(client, concurrency=lookup_concurrency())
