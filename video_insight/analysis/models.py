"""Data models for the structured content analysis."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from video_insight.models import CamelModel

MAX_KEY_POINTS = 5


class Fact(CamelModel):
    """A factual statement and, when the model offered one, its source."""

    statement: str
    source: str | None = None

    def display_source(self) -> str | None:
        """Return the source as an absolute URL for presentation.

        The stored ``source`` is left untouched; only this view gains a scheme.
        """
        if not self.source:
            return None
        if self.source.startswith(("http://", "https://")):
            return self.source
        return f"https://{self.source}"


class AnalysisResult(CamelModel):
    """Summary, key points, sourced facts, and educational notes."""

    summary: str
    key_points: list[str] = Field(default_factory=list)
    facts: list[Fact] = Field(default_factory=list)
    educational_content: str = ""

    @field_validator("key_points")
    @classmethod
    def _limit_key_points(cls, value: list[str]) -> list[str]:
        return value[:MAX_KEY_POINTS]

    @field_validator("facts", mode="before")
    @classmethod
    def _coerce_plain_facts(cls, value: Any) -> Any:
        # Models sometimes list facts as bare strings.
        if isinstance(value, list):
            return [{"statement": v} if isinstance(v, str) else v for v in value]
        return value

    @field_validator("key_points", "facts", mode="before")
    @classmethod
    def _null_to_empty_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("educational_content", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value
