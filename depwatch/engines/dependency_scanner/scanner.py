"""DependencyAnalyzer — extract, resolve, look up latest versions, assemble."""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx
import structlog

# Ensure parsers are registered before any scan runs.
import depwatch.engines.dependency_scanner.parsers  # noqa: F401
from depwatch.engines.dependency_scanner.fetch import fetch_manifest
from depwatch.engines.dependency_scanner.models import (
    EnrichedDependency,
    ManifestParseResult,
    ResolvedDependency,
)
from depwatch.engines.dependency_scanner.registry import get_parser
from depwatch.lookup.dispatcher import VersionLookup

log = structlog.get_logger("depwatch.engine")

DEFAULT_CONCURRENCY = 10


def extract(content: str, language: str) -> list[ResolvedDependency]:
    """Parse and resolve *content* without any network access."""
    parser = get_parser(language)
    return parser.resolve(parser.parse(content))


async def analyze_manifest(
    content: str,
    language: str,
    lookup: VersionLookup | None,
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> ManifestParseResult:
    """Full pipeline on already-fetched content.

    Registry lookups run concurrently, at most *concurrency* at a time, and
    are all awaited before the result is assembled. With *lookup* None every
    ``latest_version`` is None (offline mode).
    """
    parser = get_parser(language)
    manifest = parser.parse(content)

    # Later declarations with the same key replace earlier ones
    keyed: dict[str, ResolvedDependency] = {}
    for dep in parser.resolve(manifest):
        keyed[parser.key(dep)] = dep

    sem = asyncio.Semaphore(max(concurrency, 1))

    async def _lookup_one(dep: ResolvedDependency) -> str | None:
        if lookup is None:
            return None
        async with sem:
            return await lookup.latest_version(parser.ecosystem, dep)

    latest = await asyncio.gather(*(_lookup_one(dep) for dep in keyed.values()))

    return ManifestParseResult(
        ecosystem=parser.ecosystem,
        dependencies={
            key: EnrichedDependency(dependency=dep, latest_version=version)
            for (key, dep), version in zip(keyed.items(), latest)
        },
        metadata=manifest.metadata,
    )


def render(result: ManifestParseResult) -> dict[str, Any]:
    """Shape *result* into its ecosystem's response object."""
    return get_parser(result.ecosystem).render(result)


class DependencyAnalyzer:
    """Integrated mode: fetch a manifest by URL and produce the report."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        self._client = client
        self._lookup = VersionLookup(client)
        self._concurrency = concurrency

    async def run(self, url: str, language: str) -> dict[str, Any]:
        """Fetch -> parse -> resolve -> look up -> render.

        The ecosystem is validated before anything is fetched.
        """
        parser = get_parser(language)
        start = time.perf_counter()

        content = await fetch_manifest(self._client, url)
        result = await analyze_manifest(
            content, parser.ecosystem, self._lookup, concurrency=self._concurrency
        )

        missing = sum(1 for e in result.dependencies.values() if e.latest_version is None)
        log.info(
            "analyze.completed",
            ecosystem=parser.ecosystem,
            dependencies=len(result.dependencies),
            latest_missing=missing,
            duration_ms=round((time.perf_counter() - start) * 1000, 1),
        )
        return render(result)
