"""Manifest parsers — auto-registered on import."""

from depwatch.engines.dependency_scanner.parsers import (
    gradle_build,  # noqa: F401
    maven_pom,  # noqa: F401
    npm_package,  # noqa: F401
    pip_requirements,  # noqa: F401
)
