"""npm registry client — latest published dist-tag."""

from __future__ import annotations

from urllib.parse import quote

import httpx

NPM_REGISTRY_URL = "https://registry.npmjs.org/{name}"


async def latest_version(client: httpx.AsyncClient, name: str) -> str | None:
    """Return ``dist-tags.latest`` for *name*, or None if the package is unknown."""
    # Scoped packages keep their "@" but need the slash encoded
    resp = await client.get(NPM_REGISTRY_URL.format(name=quote(name, safe="@")))
    if resp.status_code != 200:
        return None
    payload = resp.json()
    tags = payload.get("dist-tags") if isinstance(payload, dict) else None
    if not isinstance(tags, dict):
        return None
    version = tags.get("latest")
    return version if isinstance(version, str) else None
