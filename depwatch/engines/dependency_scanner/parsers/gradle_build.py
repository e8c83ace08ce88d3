"""Parser for Gradle build files (build.gradle / build.gradle.kts).

The file is scanned line by line with two states:

  OUTSIDE  ── "ext {" ──▶  IN_EXT
  IN_EXT   ──   "}"   ──▶  OUTSIDE   (a brace inside quotes does not count)

Inside an ``ext`` block, ``name = "value"`` assignments populate the variable
table. Dependency declarations are recognised in either state, in both Groovy
and Kotlin DSL form:

  - implementation 'group:artifact:version'
  - implementation("group:artifact:$version")
"""

from __future__ import annotations

import enum
import re
from typing import Any

from depwatch.engines.dependency_scanner.models import (
    ExtRef,
    LiteralVersion,
    ManifestParseResult,
    ParsedManifest,
    RawDependency,
    ResolvedDependency,
    VersionExpression,
)
from depwatch.engines.dependency_scanner.registry import register_parser
from depwatch.engines.dependency_scanner.resolver import resolve

_CONFIGS = (
    r"(implementation|api|compile|testImplementation|androidTestImplementation|runtimeOnly|"
    r"compileOnly|testCompileOnly|testRuntimeOnly|annotationProcessor)"
)

_DEP_RE = re.compile(
    rf"^\s*{_CONFIGS}"
    r"\s*\(?\s*"
    r"""["']"""
    r"([^:'\"\s]+)"  # group
    r":"
    r"([^:'\"\s]+)"  # artifact
    r":"
    r"([^'\"\s]+)"  # version
    r"""["']"""
)

_EXT_OPEN_RE = re.compile(r"\bext\s*\{")
_ASSIGN_RE = re.compile(r"""(\w+)\s*=\s*["']([^"']*)["']""")
_EXT_DOT_RE = re.compile(r"""^\s*(?:project\.)?ext\.(\w+)\s*=\s*["']([^"']*)["']""")


class _State(enum.Enum):
    OUTSIDE = "outside"
    IN_EXT = "in_ext"


def _closing_brace(text: str) -> int:
    """Index of the first ``}`` outside a quoted string, or -1."""
    quote = None
    for i, ch in enumerate(text):
        if quote:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == "}":
            return i
    return -1


def _version_expression(value: str) -> VersionExpression:
    if value.startswith("$"):
        return ExtRef(name=value.strip("${}"), raw=value)
    return LiteralVersion(value)


class GradleBuildParser:
    ecosystem = "gradle"
    file_patterns = ["build.gradle", "build.gradle.kts"]

    def parse(self, content: str) -> ParsedManifest:
        variables: dict[str, str] = {}
        deps: list[RawDependency] = []
        state = _State.OUTSIDE

        for line in content.splitlines():
            if state is _State.OUTSIDE:
                opened = _EXT_OPEN_RE.search(line)
                if opened:
                    body = line[opened.end() :]
                    end = _closing_brace(body)
                    if end >= 0:
                        body = body[:end]
                    else:
                        state = _State.IN_EXT
                    variables.update(_ASSIGN_RE.findall(body))
                    continue
                m = _EXT_DOT_RE.match(line)
                if m:
                    variables[m.group(1)] = m.group(2)
                    continue
            else:
                end = _closing_brace(line)
                if end >= 0:
                    variables.update(_ASSIGN_RE.findall(line[:end]))
                    state = _State.OUTSIDE
                    continue
                variables.update(_ASSIGN_RE.findall(line))

            m = _DEP_RE.match(line)
            if m:
                config, group, artifact, version = m.groups()
                deps.append(
                    RawDependency(
                        name=artifact,
                        version=_version_expression(version),
                        scope=config,
                        group_id=group,
                    )
                )

        return ParsedManifest(ecosystem=self.ecosystem, dependencies=tuple(deps), table=variables)

    def resolve(self, manifest: ParsedManifest) -> list[ResolvedDependency]:
        return [resolve(dep, manifest.table) for dep in manifest.dependencies]

    def key(self, dep: ResolvedDependency) -> str:
        return f"{dep.group_id}:{dep.name}"

    def render(self, result: ManifestParseResult) -> dict[str, Any]:
        return {
            "dependencies": {
                key: {
                    "groupId": e.dependency.group_id,
                    "artifactId": e.dependency.name,
                    "scope": e.dependency.scope,
                    "version": e.dependency.declared_version,
                    "latestVersion": e.latest_version,
                    "source": e.dependency.resolution_source,
                }
                for key, e in result.dependencies.items()
            }
        }


register_parser(GradleBuildParser())
