"""Response contract assembled by the orchestrator."""

from __future__ import annotations

from pydantic import model_validator

from video_insight.analysis.models import AnalysisResult
from video_insight.models import CamelModel
from video_insight.transcription.models import TranscriptionResult


class PipelineResponse(CamelModel):
    """Unified result of transcription plus best-effort analysis.

    ``success`` reflects the mandatory stages only. A failed analysis is
    reported through ``analysis_error`` and leaves ``success`` untouched.
    """

    success: bool
    title: str | None = None
    transcription: TranscriptionResult | None = None
    analysis: AnalysisResult | None = None
    analysis_error: str | None = None
    request_id: str | None = None

    @model_validator(mode="after")
    def _analysis_xor_error(self) -> PipelineResponse:
        if self.analysis is not None and self.analysis_error is not None:
            raise ValueError("analysis and analysis_error are mutually exclusive")
        return self
