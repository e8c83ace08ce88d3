"""VersionLookup — route a dependency to its ecosystem's registry client."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog

from depwatch.exceptions import UnsupportedEcosystemError
from depwatch.lookup import maven, npm, pypi

if TYPE_CHECKING:
    from depwatch.engines.dependency_scanner.models import ResolvedDependency

log = structlog.get_logger("depwatch.engine")

# Interpreter markers that appear in requirement files but are not packages
PYTHON_RUNTIME_NAMES = frozenset({"python", "python_version"})
PYTHON_RUNTIME_LATEST = "3.12.0"


class VersionLookup:
    """Issue exactly one registry lookup per dependency.

    Failures (network errors, non-200 responses, malformed payloads) are
    logged and reported as None; they never propagate to the caller.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def latest_version(self, ecosystem: str, dep: ResolvedDependency) -> str | None:
        if ecosystem == "python" and dep.name.lower() in PYTHON_RUNTIME_NAMES:
            return PYTHON_RUNTIME_LATEST

        try:
            if ecosystem == "nodejs":
                return await npm.latest_version(self._client, dep.name)
            if ecosystem in ("java", "gradle"):
                return await maven.latest_version(self._client, dep.group_id, dep.name)
            if ecosystem == "python":
                return await pypi.latest_version(self._client, dep.name)
        except (
            httpx.HTTPError,
            ValueError,
            AttributeError,
            KeyError,
            TypeError,
            IndexError,
        ) as exc:
            log.warning(
                "lookup.failed",
                ecosystem=ecosystem,
                package=dep.name,
                group_id=dep.group_id,
                error=str(exc) or type(exc).__name__,
            )
            return None

        raise UnsupportedEcosystemError(ecosystem)
