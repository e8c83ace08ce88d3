"""Version resolver — dereference version expressions through an indirection table.

Resolution order for a single declaration:

1. literal version                      -> ``direct``
2. ``$name`` ext reference              -> ``ext`` (raw token kept if unknown)
3. ``${name}`` property template        -> ``property`` (*missing* if any name unknown)
4. no version, parent version declared  -> ``parent``
5. nothing at all                       -> *missing*, ``unspecified``

A property reference never falls through to the parent version, even when the
property itself cannot be resolved.
"""

from __future__ import annotations

import re

from depwatch.engines.dependency_scanner.models import (
    ExtRef,
    IndirectionTable,
    LiteralVersion,
    PropertyRef,
    RawDependency,
    ResolutionSource,
    ResolvedDependency,
)

_PROP_RE = re.compile(r"\$\{([^}]+)\}")


def resolve(
    dep: RawDependency,
    table: IndirectionTable,
    *,
    parent_version: str | None = None,
    missing: str = "unknown",
) -> ResolvedDependency:
    """Resolve *dep* to a concrete version."""
    expr = dep.version
    source: ResolutionSource

    if isinstance(expr, LiteralVersion):
        version, source = expr.value, "direct"
    elif isinstance(expr, ExtRef):
        version, source = dereference(expr.name, table) or table.get(expr.name, expr.raw), "ext"
    elif isinstance(expr, PropertyRef):
        version, source = interpolate(expr.raw, table) or missing, "property"
    elif parent_version:
        version, source = parent_version, "parent"
    else:
        version, source = missing, "unspecified"

    return ResolvedDependency(
        name=dep.name,
        declared_version=version,
        resolution_source=source,
        group_id=dep.group_id,
        scope=dep.scope,
        constraint_type=dep.constraint_type,
    )


def dereference(name: str, table: IndirectionTable) -> str | None:
    """Look up *name* and expand any ``${...}`` in its value.

    Returns None if any reference along the chain is undefined or cyclic.
    """
    return _expand(name, table, frozenset())


def interpolate(template: str, table: IndirectionTable) -> str | None:
    """Expand every ``${...}`` in *template*, or None if any stays unresolved."""
    value = _interpolate(template, table, frozenset())
    if value is None or "${" in value:
        return None
    return value


def _expand(name: str, table: IndirectionTable, seen: frozenset[str]) -> str | None:
    if name in seen or name not in table:
        return None
    return _interpolate(table[name], table, seen | {name})


def _interpolate(value: str, table: IndirectionTable, seen: frozenset[str]) -> str | None:
    parts: list[str] = []
    pos = 0
    for m in _PROP_RE.finditer(value):
        inner = _expand(m.group(1), table, seen)
        if inner is None:
            return None
        parts.append(value[pos : m.start()])
        parts.append(inner)
        pos = m.end()
    parts.append(value[pos:])
    return "".join(parts)
