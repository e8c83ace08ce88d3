"""Custom exceptions for depwatch."""


class AnalysisError(Exception):
    """Base exception for all analysis errors (-> HTTP 500)."""


class MissingInputError(AnalysisError):
    """Raised when a required request field is absent (-> HTTP 400)."""


class FetchError(AnalysisError):
    """Raised when the manifest content cannot be retrieved."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch file: {reason}")


class UnsupportedEcosystemError(AnalysisError):
    """Raised when the language tag matches no registered parser."""

    def __init__(self, language: str):
        self.language = language
        super().__init__(f"Unsupported project language: {language!r}")


class ManifestParseError(AnalysisError):
    """Raised when manifest content is malformed for its declared ecosystem."""

    def __init__(self, ecosystem: str, reason: str):
        self.ecosystem = ecosystem
        self.reason = reason
        super().__init__(f"Failed to parse dependencies: {reason}")
