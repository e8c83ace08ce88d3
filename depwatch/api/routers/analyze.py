"""Analyze router."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from depwatch.api.deps import get_dependency_analyzer
from depwatch.api.schemas.analyze import AnalyzeRequest
from depwatch.engines.dependency_scanner.scanner import DependencyAnalyzer
from depwatch.exceptions import MissingInputError

router = APIRouter()


@router.post("/analyze")
async def analyze(
    body: AnalyzeRequest,
    analyzer: DependencyAnalyzer = Depends(get_dependency_analyzer),
) -> dict[str, Any]:
    if not body.url or not body.language:
        raise MissingInputError("URL and language are required")
    return await analyzer.run(body.url, body.language)
