"""Data models for the transcription stage."""

from __future__ import annotations

from pydantic import Field

from video_insight.models import CamelModel


class TranscriptSegment(CamelModel):
    """A word, spacing or audio event as reported by the provider."""

    text: str
    start_offset: float | None = None
    end_offset: float | None = None
    kind: str | None = None  # "word", "spacing", "audio_event"
    speaker_id: str | None = None


class TranscriptionResult(CamelModel):
    """Finished transcript plus provider metadata.

    Segments keep the provider's temporal order.
    """

    full_text: str = Field(alias="text")
    language_code: str | None = None
    language_confidence: float | None = None
    segments: list[TranscriptSegment] = Field(default_factory=list)
    job_id: str | None = None
