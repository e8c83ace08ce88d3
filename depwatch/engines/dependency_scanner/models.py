"""Data models for the dependency scanner engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, Union

ResolutionSource = Literal["direct", "ext", "property", "parent", "unspecified"]
ConstraintType = Literal["exact", "minimum", "maximum", "greater", "less", "none"]

# name -> literal version, scoped to a single manifest
IndirectionTable = Mapping[str, str]


# ── version expressions ──────────────────────────────────────────────────


@dataclass(frozen=True)
class LiteralVersion:
    """A version written out in the manifest."""

    value: str


@dataclass(frozen=True)
class ExtRef:
    """A Gradle ``$name`` / ``${name}`` reference into the ``ext`` block."""

    name: str
    raw: str


@dataclass(frozen=True)
class PropertyRef:
    """A Maven version holding one or more ``${name}`` references.

    ``name`` is the first referenced property; ``raw`` is the full template,
    e.g. ``${major}.${minor}``.
    """

    name: str
    raw: str


VersionExpression = Union[LiteralVersion, ExtRef, PropertyRef]


# ── dependency records ───────────────────────────────────────────────────


@dataclass(frozen=True)
class RawDependency:
    """A single declaration as extracted from a manifest, version unresolved."""

    name: str
    version: VersionExpression | None
    scope: str | None = None
    group_id: str | None = None
    constraint_type: ConstraintType | None = None


@dataclass(frozen=True)
class ParsedManifest:
    """Extractor output: raw declarations plus the manifest's indirection table."""

    ecosystem: str
    dependencies: tuple[RawDependency, ...]
    table: IndirectionTable = field(default_factory=dict)
    parent_version: str | None = None
    metadata: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "table", MappingProxyType(dict(self.table)))


@dataclass(frozen=True)
class ResolvedDependency:
    """A declaration whose version has been fully dereferenced."""

    name: str
    declared_version: str
    resolution_source: ResolutionSource
    group_id: str | None = None
    scope: str | None = None
    constraint_type: ConstraintType | None = None


@dataclass(frozen=True)
class EnrichedDependency:
    """A resolved declaration plus the registry's latest version (None if not found)."""

    dependency: ResolvedDependency
    latest_version: str | None


@dataclass
class ManifestParseResult:
    """Per-request result: dependency key -> enriched record, plus metadata."""

    ecosystem: str
    dependencies: dict[str, EnrichedDependency]
    metadata: dict[str, Any] | None = None
