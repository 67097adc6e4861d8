"""Data models for the acquisition stage."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from video_insight.models import CamelModel


class AcquisitionResult(CamelModel):
    """Playable media returned by the acquisition service."""

    media_url: str
    title: str | None = None
    raw_status: dict[str, Any] = Field(default_factory=dict)
