"""Maven Central search client."""

from __future__ import annotations

import httpx

MAVEN_SEARCH_API = "https://search.maven.org/solrsearch/select"


def build_query(group_id: str | None, artifact_id: str) -> str:
    """Solr query for a coordinate; the group is omitted when unknown."""
    if group_id:
        return f'g:"{group_id}" AND a:"{artifact_id}"'
    return f'a:"{artifact_id}"'


async def latest_version(
    client: httpx.AsyncClient,
    group_id: str | None,
    artifact_id: str,
) -> str | None:
    """Return ``latestVersion`` of the first search hit, or None."""
    resp = await client.get(
        MAVEN_SEARCH_API,
        params={"q": build_query(group_id, artifact_id), "rows": 1, "wt": "json"},
    )
    if resp.status_code != 200:
        return None
    payload = resp.json()
    response = payload.get("response") if isinstance(payload, dict) else None
    docs = response.get("docs") if isinstance(response, dict) else None
    if not isinstance(docs, list) or not docs or not isinstance(docs[0], dict):
        return None
    version = docs[0].get("latestVersion")
    return version if isinstance(version, str) else None
