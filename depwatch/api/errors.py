"""Unified error handling — AnalysisError + RequestValidationError → JSON."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from depwatch.exceptions import AnalysisError, MissingInputError

log = structlog.get_logger("depwatch.api")

_STATUS_MAP: dict[type[AnalysisError], int] = {
    MissingInputError: 400,
}


def status_for(exc: AnalysisError) -> int:
    """Map an AnalysisError to its HTTP status (500 unless listed)."""
    for cls in type(exc).__mro__:
        if cls in _STATUS_MAP:
            return _STATUS_MAP[cls]
    return 500


async def _analysis_error_handler(_request: Request, exc: AnalysisError) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        log.error("analyze.failed", error_type=type(exc).__name__, error=str(exc))
    return JSONResponse(status_code=status, content={"error": str(exc)})


async def _validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = []
    for err in exc.errors():
        loc = " → ".join(str(part) for part in err["loc"])
        messages.append(f"{loc}: {err['msg']}")
    return JSONResponse(status_code=400, content={"error": "; ".join(messages)})


def register_error_handlers(app: FastAPI) -> None:
    """Register exception handlers on the app."""
    app.add_exception_handler(AnalysisError, _analysis_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
