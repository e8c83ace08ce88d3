"""Parser registry — match ecosystem tags and manifest file names to parsers."""

from __future__ import annotations

from fnmatch import fnmatch
from typing import Any, Protocol, runtime_checkable

from depwatch.engines.dependency_scanner.models import (
    ManifestParseResult,
    ParsedManifest,
    ResolvedDependency,
)
from depwatch.exceptions import UnsupportedEcosystemError


@runtime_checkable
class ManifestParser(Protocol):
    """Interface that every manifest parser must satisfy."""

    ecosystem: str
    file_patterns: list[str]

    def parse(self, content: str) -> ParsedManifest: ...

    def resolve(self, manifest: ParsedManifest) -> list[ResolvedDependency]: ...

    def key(self, dep: ResolvedDependency) -> str: ...

    def render(self, result: ManifestParseResult) -> dict[str, Any]: ...


PARSER_REGISTRY: dict[str, ManifestParser] = {}


def register_parser(parser: ManifestParser) -> None:
    """Register a parser instance by its ecosystem tag."""
    PARSER_REGISTRY[parser.ecosystem] = parser


def get_parser(language: str) -> ManifestParser:
    """Return the parser for *language* (case-insensitive).

    Raises :class:`UnsupportedEcosystemError` for unknown tags.
    """
    parser = PARSER_REGISTRY.get(language.strip().lower())
    if parser is None:
        raise UnsupportedEcosystemError(language)
    return parser


def detect_ecosystem(filename: str) -> str | None:
    """Guess the ecosystem tag from a manifest file name, or None."""
    for parser in PARSER_REGISTRY.values():
        if any(fnmatch(filename, pattern) for pattern in parser.file_patterns):
            return parser.ecosystem
    return None
