"""Dependency scanner engine — extract and resolve manifest dependencies."""

from depwatch.engines.dependency_scanner.models import (
    EnrichedDependency,
    ManifestParseResult,
    RawDependency,
    ResolvedDependency,
)
from depwatch.engines.dependency_scanner.scanner import (
    DependencyAnalyzer,
    analyze_manifest,
    extract,
    render,
)

__all__ = [
    "DependencyAnalyzer",
    "EnrichedDependency",
    "ManifestParseResult",
    "RawDependency",
    "ResolvedDependency",
    "analyze_manifest",
    "extract",
    "render",
]
