"""Parser for Maven pom.xml files.

Only direct ``<project><dependencies>`` entries are extracted;
``<dependencyManagement>`` and plugin dependencies are not declarations of
the project itself.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Any

from depwatch.engines.dependency_scanner.models import (
    LiteralVersion,
    ManifestParseResult,
    ParsedManifest,
    PropertyRef,
    RawDependency,
    ResolvedDependency,
    VersionExpression,
)
from depwatch.engines.dependency_scanner.registry import register_parser
from depwatch.engines.dependency_scanner.resolver import resolve
from depwatch.exceptions import ManifestParseError

_NS = "{http://maven.apache.org/POM/4.0.0}"

_PROP_REF_RE = re.compile(r"\$\{([^}]+)\}")


def _text(element: ET.Element | None) -> str | None:
    if element is None:
        return None
    return element.text.strip() if element.text and element.text.strip() else None


def _local(tag: str) -> str:
    """Strip the namespace from a tag name."""
    return tag.split("}")[-1] if "}" in tag else tag


def _version_expression(value: str | None) -> VersionExpression | None:
    if not value:
        return None
    if "${" in value:
        m = _PROP_REF_RE.search(value)
        return PropertyRef(name=m.group(1) if m else value, raw=value)
    return LiteralVersion(value)


class MavenPomParser:
    ecosystem = "java"
    file_patterns = ["pom.xml"]

    def parse(self, content: str) -> ParsedManifest:
        try:
            root = ET.fromstring(content)
        except ET.ParseError as exc:
            raise ManifestParseError(self.ecosystem, f"invalid XML: {exc}") from exc

        ns = _NS if root.tag.startswith(_NS) else ""

        parent_el = root.find(f"{ns}parent")
        parent_info: dict[str, str | None] | None = None
        parent_version: str | None = None
        if parent_el is not None:
            parent_version = _text(parent_el.find(f"{ns}version"))
            parent_info = {
                "groupId": _text(parent_el.find(f"{ns}groupId")),
                "artifactId": _text(parent_el.find(f"{ns}artifactId")),
                "version": parent_version,
            }

        props = self._extract_properties(root, ns)
        # Implicit project properties, unless <properties> overrides them
        project_version = _text(root.find(f"{ns}version")) or parent_version
        if project_version:
            props.setdefault("project.version", project_version)
        if parent_version:
            props.setdefault("project.parent.version", parent_version)

        deps: list[RawDependency] = []
        for dep_el in root.findall(f"{ns}dependencies/{ns}dependency"):
            artifact_id = _text(dep_el.find(f"{ns}artifactId"))
            if not artifact_id:
                continue
            deps.append(
                RawDependency(
                    name=artifact_id,
                    version=_version_expression(_text(dep_el.find(f"{ns}version"))),
                    scope=_text(dep_el.find(f"{ns}scope")),
                    group_id=_text(dep_el.find(f"{ns}groupId")),
                )
            )

        return ParsedManifest(
            ecosystem=self.ecosystem,
            dependencies=tuple(deps),
            table=props,
            parent_version=parent_version,
            metadata={"parentInfo": parent_info},
        )

    def resolve(self, manifest: ParsedManifest) -> list[ResolvedDependency]:
        return [
            resolve(dep, manifest.table, parent_version=manifest.parent_version, missing="unknown")
            for dep in manifest.dependencies
        ]

    def key(self, dep: ResolvedDependency) -> str:
        return dep.name

    def render(self, result: ManifestParseResult) -> dict[str, Any]:
        return {
            "dependencies": {
                key: {
                    "groupId": e.dependency.group_id,
                    "version": e.dependency.declared_version,
                    "latestVersion": e.latest_version,
                    "source": e.dependency.resolution_source,
                }
                for key, e in result.dependencies.items()
            },
            "parentInfo": (result.metadata or {}).get("parentInfo"),
        }

    @staticmethod
    def _extract_properties(root: ET.Element, ns: str) -> dict[str, str]:
        """Extract <properties> key-value pairs from the POM root."""
        props: dict[str, str] = {}
        props_el = root.find(f"{ns}properties")
        if props_el is not None:
            for child in props_el:
                if not isinstance(child.tag, str):
                    continue  # comments / processing instructions
                if child.text:
                    props[_local(child.tag)] = child.text.strip()
        return props


register_parser(MavenPomParser())
