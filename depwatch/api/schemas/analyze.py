"""Analyze request schema."""

from __future__ import annotations

from pydantic import BaseModel, field_validator


class AnalyzeRequest(BaseModel):
    # Both optional here so that a missing field maps to 400, not 422.
    url: str | None = None
    language: str | None = None

    @field_validator("url", "language", mode="before")
    @classmethod
    def _strip_whitespace(cls, v: str | None) -> str | None:
        return v.strip() if isinstance(v, str) else v
