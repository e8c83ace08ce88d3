"""Manifest fetch helper for the dependency scanner."""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

import httpx

from depwatch.exceptions import FetchError

_GITHUB_HOSTS = ("github.com", "www.github.com")
_RAW_HOST = "raw.githubusercontent.com"


def to_raw_url(url: str) -> str:
    """Rewrite a GitHub ``blob`` page URL to its raw-content equivalent.

    Handles:
      - https://github.com/owner/repo/blob/main/pom.xml
        -> https://raw.githubusercontent.com/owner/repo/main/pom.xml

    Non-GitHub URLs are returned unchanged.
    """
    url = url.strip()
    parts = urlsplit(url)
    if parts.netloc.lower() not in _GITHUB_HOSTS:
        return url

    path = parts.path.replace("/blob/", "/", 1).rstrip("/")
    return urlunsplit((parts.scheme or "https", _RAW_HOST, path, parts.query, ""))


async def fetch_manifest(client: httpx.AsyncClient, url: str) -> str:
    """GET the manifest at *url* and return its text.

    Raises :class:`FetchError` on transport errors and non-2xx responses.
    """
    fetch_url = to_raw_url(url)
    try:
        resp = await client.get(fetch_url)
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise FetchError(url, f"{fetch_url} returned HTTP {exc.response.status_code}") from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise FetchError(url, str(exc) or type(exc).__name__) from exc
    return resp.text
