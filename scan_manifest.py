#!/usr/bin/env python3
"""Standalone manifest scanner — no server required.

Usage:
    python scan_manifest.py requirements.txt
    python scan_manifest.py path/to/pom.xml --offline                  # skip registry lookups
    python scan_manifest.py https://github.com/org/repo/blob/main/build.gradle
    python scan_manifest.py deps.txt --language python --json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path, PurePosixPath
from urllib.parse import urlsplit

import httpx

from depwatch.core.logging import setup_logging
from depwatch.engines.dependency_scanner.fetch import fetch_manifest
from depwatch.engines.dependency_scanner.models import ManifestParseResult
from depwatch.engines.dependency_scanner.registry import detect_ecosystem
from depwatch.engines.dependency_scanner.scanner import analyze_manifest, render
from depwatch.exceptions import AnalysisError
from depwatch.lookup.dispatcher import VersionLookup


def _is_url(target: str) -> bool:
    return target.startswith(("https://", "http://"))


def _file_name(target: str) -> str:
    if _is_url(target):
        return PurePosixPath(urlsplit(target).path.rstrip("/")).name
    return Path(target).name


def _print_result(result: ManifestParseResult, as_json: bool) -> None:
    if as_json:
        print(json.dumps(render(result), indent=2))
        return

    if not result.dependencies:
        print("No dependencies found.")
        return

    print(f"Found {len(result.dependencies)} dependencies ({result.ecosystem})\n")
    for key, enriched in result.dependencies.items():
        dep = enriched.dependency
        latest = enriched.latest_version or "?"
        marker = "" if latest in ("?", dep.declared_version) else "  *"
        print(f"  {key:<50} {dep.declared_version:<20} {latest:<20} ({dep.resolution_source}){marker}")
    print()


async def _scan(target: str, language: str, offline: bool) -> ManifestParseResult:
    timeout = float(os.environ.get("DEPWATCH_HTTP_TIMEOUT", "15"))
    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
        if _is_url(target):
            print(f"Fetching {target} ...", file=sys.stderr)
            content = await fetch_manifest(client, target)
        else:
            content = Path(target).read_text(encoding="utf-8", errors="replace")
        lookup = None if offline else VersionLookup(client)
        return await analyze_manifest(content, language, lookup)


def main() -> None:
    parser = argparse.ArgumentParser(description="Report declared and latest dependency versions")
    parser.add_argument("target", help="Local manifest path or URL")
    parser.add_argument(
        "--language",
        default=None,
        help="nodejs | java | gradle | python (default: inferred from file name)",
    )
    parser.add_argument("--json", action="store_true", dest="as_json", help="Output as JSON")
    parser.add_argument("--offline", action="store_true", help="Skip registry lookups")
    args = parser.parse_args()

    setup_logging(level="WARNING", stream="ext://sys.stderr")

    language = args.language or detect_ecosystem(_file_name(args.target))
    if language is None:
        print("Error: cannot infer ecosystem, pass --language", file=sys.stderr)
        sys.exit(2)

    if not _is_url(args.target) and not Path(args.target).is_file():
        print(f"Error: {args.target} is not a file", file=sys.stderr)
        sys.exit(1)

    try:
        result = asyncio.run(_scan(args.target, language, args.offline))
    except AnalysisError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    _print_result(result, args.as_json)


if __name__ == "__main__":
    main()
