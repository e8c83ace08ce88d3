"""Parser for npm package.json files."""

from __future__ import annotations

import json
from typing import Any

from depwatch.engines.dependency_scanner.models import (
    LiteralVersion,
    ManifestParseResult,
    ParsedManifest,
    RawDependency,
    ResolvedDependency,
)
from depwatch.engines.dependency_scanner.registry import register_parser
from depwatch.engines.dependency_scanner.resolver import resolve
from depwatch.exceptions import ManifestParseError

_SECTIONS = ("dependencies", "devDependencies")


class NpmPackageParser:
    ecosystem = "nodejs"
    file_patterns = ["package.json"]

    def parse(self, content: str) -> ParsedManifest:
        try:
            doc = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ManifestParseError(self.ecosystem, f"invalid JSON: {exc}") from exc
        if not isinstance(doc, dict):
            raise ManifestParseError(self.ecosystem, "package.json must be a JSON object")

        deps: list[RawDependency] = []
        for section in _SECTIONS:
            entries = doc.get(section) or {}
            if not isinstance(entries, dict):
                raise ManifestParseError(self.ecosystem, f"{section!r} must be an object")
            for name, spec in entries.items():
                deps.append(
                    RawDependency(
                        name=name,
                        version=LiteralVersion(spec if isinstance(spec, str) else str(spec)),
                        scope=section,
                    )
                )

        return ParsedManifest(ecosystem=self.ecosystem, dependencies=tuple(deps))

    def resolve(self, manifest: ParsedManifest) -> list[ResolvedDependency]:
        return [resolve(dep, manifest.table) for dep in manifest.dependencies]

    def key(self, dep: ResolvedDependency) -> str:
        # Sections are rendered separately, so the same name may appear in both.
        return f"{dep.scope}/{dep.name}"

    def render(self, result: ManifestParseResult) -> dict[str, Any]:
        out: dict[str, Any] = {section: {} for section in _SECTIONS}
        for enriched in result.dependencies.values():
            dep = enriched.dependency
            out[dep.scope or "dependencies"][dep.name] = {
                "current": dep.declared_version,
                "latest": enriched.latest_version,
            }
        return out


register_parser(NpmPackageParser())
