"""Parser for pip requirements.txt files."""

from __future__ import annotations

import re
from typing import Any

from depwatch.engines.dependency_scanner.models import (
    ConstraintType,
    LiteralVersion,
    ManifestParseResult,
    ParsedManifest,
    RawDependency,
    ResolvedDependency,
)
from depwatch.engines.dependency_scanner.registry import register_parser
from depwatch.engines.dependency_scanner.resolver import resolve

# Name ends at the first operator, separator, extras bracket or whitespace
_NAME_END_RE = re.compile(r"[=<>~!,\[\s]")

_INLINE_COMMENT_RE = re.compile(r"\s+#.*$")

# Order matters: ">=" must be tried before ">" and "<=" before "<".
_OPERATORS: tuple[tuple[str, ConstraintType], ...] = (
    ("==", "exact"),
    (">=", "minimum"),
    (">", "greater"),
    ("<=", "maximum"),
    ("<", "less"),
)


def split_requirement(clause: str) -> tuple[str, str | None, ConstraintType]:
    """Split a requirement clause into (name, version, constraint type).

    The first operator in precedence order wins; the version runs up to the
    next ``,`` and has quotes stripped.
    """
    name = _NAME_END_RE.split(clause.strip(), maxsplit=1)[0]
    for op, constraint in _OPERATORS:
        if op in clause:
            version = clause.split(op, 1)[1].split(",", 1)[0]
            return name, version.strip().replace('"', "").replace("'", ""), constraint
    return name, None, "none"


class PipRequirementsParser:
    ecosystem = "python"
    file_patterns = ["requirements.txt", "requirements*.txt", "requirements/*.txt"]

    def parse(self, content: str) -> ParsedManifest:
        deps: list[RawDependency] = []

        for raw_line in content.splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("-"):
                continue
            line = _INLINE_COMMENT_RE.sub("", line)

            # Anything after ";" is an environment marker
            clause = line.split(";", 1)[0]
            if not clause.strip():
                continue

            name, version, constraint = split_requirement(clause)
            if not name:
                continue

            deps.append(
                RawDependency(
                    name=name,
                    version=LiteralVersion(version) if version is not None else None,
                    constraint_type=constraint,
                )
            )

        return ParsedManifest(ecosystem=self.ecosystem, dependencies=tuple(deps))

    def resolve(self, manifest: ParsedManifest) -> list[ResolvedDependency]:
        return [resolve(dep, manifest.table, missing="unspecified") for dep in manifest.dependencies]

    def key(self, dep: ResolvedDependency) -> str:
        return dep.name

    def render(self, result: ManifestParseResult) -> dict[str, Any]:
        return {
            "dependencies": {
                key: {
                    "current": e.dependency.declared_version,
                    "latest": e.latest_version or "unknown",
                    "constraintType": e.dependency.constraint_type,
                }
                for key, e in result.dependencies.items()
            }
        }


register_parser(PipRequirementsParser())
