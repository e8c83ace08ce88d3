"""PyPI JSON API client."""

from __future__ import annotations

import httpx

PYPI_JSON_API = "https://pypi.org/pypi/{name}/json"


async def latest_version(client: httpx.AsyncClient, name: str) -> str | None:
    """Return ``info.version`` for *name*, or None if PyPI has no such project."""
    resp = await client.get(PYPI_JSON_API.format(name=name))
    if resp.status_code != 200:
        return None
    payload = resp.json()
    info = payload.get("info") if isinstance(payload, dict) else None
    if not isinstance(info, dict):
        return None
    version = info.get("version")
    return version if isinstance(version, str) else None
