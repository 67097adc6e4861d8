"""Pipeline orchestrator: Acquisition -> Transcription -> Analysis.

Acquisition and transcription are mandatory; a failure there is a hard
failure and ends the request. Analysis is an enrichment; its failure is a soft
failure folded into ``analysis_error`` of an otherwise successful response.

Stages report tagged StageResult values and ``assemble_response`` turns them
into the final response without touching any remote service.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from video_insight.acquisition.forwarder import AcquisitionForwarder
from video_insight.acquisition.models import AcquisitionResult
from video_insight.analysis.extractor import CompletionExtractor
from video_insight.analysis.models import AnalysisResult
from video_insight.config import Settings, settings
from video_insight.errors import (
    AnalysisError,
    TranscriptionError,
    UpstreamError,
    ValidationError,
)
from video_insight.models import PipelineRequest
from video_insight.pipeline.models import PipelineResponse
from video_insight.pipeline.results import StageResult
from video_insight.pipeline_config import PipelineState, StageOutcome
from video_insight.transcription.client import TranscriptionClient
from video_insight.transcription.models import TranscriptionResult

logger = logging.getLogger(__name__)


def _enter(state: PipelineState, subject: str) -> None:
    logger.info("[%s] -> %s", subject, state.value)


def _upstream_status_error(raw_status: dict[str, Any]) -> str | None:
    """Error reported inside an otherwise successful acquisition payload."""
    nested = raw_status.get("transcription_status")
    if isinstance(nested, dict) and nested.get("error"):
        return str(nested["error"])
    if raw_status.get("error"):
        return str(raw_status["error"])
    return None


def assemble_response(
    title: str | None,
    transcription: StageResult[TranscriptionResult],
    analysis: StageResult[AnalysisResult] | None,
) -> StageResult[PipelineResponse]:
    """Fold stage results into the unified response.

    A failed transcription is passed through as the hard failure. Otherwise
    the response is successful and carries either the analysis or the reason
    it is missing.
    """
    if not transcription.is_ok:
        return StageResult.hard_fail(transcription.failure())

    result = transcription.unwrap()
    analysis_value: AnalysisResult | None = None
    analysis_error: str | None = None
    if analysis is not None:
        if analysis.outcome is StageOutcome.OK:
            analysis_value = analysis.value
        elif analysis.error is not None:
            analysis_error = analysis.error.message or analysis.error.label

    return StageResult.ok(
        PipelineResponse(
            success=True,
            title=title,
            transcription=result,
            analysis=analysis_value,
            analysis_error=analysis_error,
            request_id=result.job_id,
        )
    )


class PipelineOrchestrator:
    """Sequences the three remote stages for one request at a time.

    Holds only collaborators, never per-request state, so one instance can
    serve concurrent requests.
    """

    def __init__(
        self,
        forwarder: AcquisitionForwarder,
        transcriber: TranscriptionClient,
        extractor: CompletionExtractor,
    ) -> None:
        self.forwarder = forwarder
        self.transcriber = transcriber
        self.extractor = extractor

    @classmethod
    def from_settings(cls, settings: Settings) -> PipelineOrchestrator:
        return cls(
            forwarder=AcquisitionForwarder.from_settings(settings),
            transcriber=TranscriptionClient.from_settings(settings),
            extractor=CompletionExtractor.from_settings(settings),
        )

    async def run_download(self, request: PipelineRequest) -> StageResult[AcquisitionResult]:
        """Acquire playable media for ``request.source_url``."""
        subject = request.source_url or "<empty>"
        _enter(PipelineState.ACQUIRING, subject)
        try:
            acquired = await self.forwarder.forward(request.source_url)
        except (ValidationError, UpstreamError) as exc:
            logger.error("[%s] acquisition failed: %s", subject, exc.message)
            _enter(PipelineState.FAILED, subject)
            return StageResult.hard_fail(exc)

        status_error = _upstream_status_error(acquired.raw_status)
        if status_error:
            logger.error("[%s] acquisition reported an error: %s", subject, status_error)
            _enter(PipelineState.FAILED, subject)
            return StageResult.hard_fail(UpstreamError(status_error))

        _enter(PipelineState.ACQUIRED, subject)
        return StageResult.ok(acquired)

    async def run_transcribe_and_analyze(
        self,
        media_url: str,
        title: str | None = None,
    ) -> StageResult[PipelineResponse]:
        """Transcribe ``media_url`` and, on success, analyze the transcript."""
        subject = title or media_url or "<empty>"
        logger.info("Received transcription request for: %s", subject)

        transcription = await self._transcribe(media_url, subject)
        analysis: StageResult[AnalysisResult] | None = None
        if transcription.is_ok:
            analysis = await self._analyze(transcription.unwrap().full_text, subject)

        response = assemble_response(title, transcription, analysis)
        _enter(PipelineState.DONE if response.is_ok else PipelineState.FAILED, subject)
        return response

    async def run_pipeline(self, request: PipelineRequest) -> StageResult[PipelineResponse]:
        """Acquire, transcribe and analyze in one call."""
        acquired = await self.run_download(request)
        if not acquired.is_ok:
            return StageResult.hard_fail(acquired.failure())

        media = acquired.unwrap()
        return await self.run_transcribe_and_analyze(
            media.media_url,
            title=request.display_title or media.title,
        )

    async def _transcribe(self, media_url: str, subject: str) -> StageResult[TranscriptionResult]:
        _enter(PipelineState.TRANSCRIBING, subject)
        try:
            result = await self.transcriber.transcribe(media_url)
        except (ValidationError, TranscriptionError) as exc:
            logger.error("[%s] transcription failed: %s", subject, exc.message)
            return StageResult.hard_fail(exc)
        _enter(PipelineState.TRANSCRIBED, subject)
        return StageResult.ok(result)

    async def _analyze(self, transcript_text: str, subject: str) -> StageResult[AnalysisResult]:
        _enter(PipelineState.ANALYZING, subject)
        try:
            result = await self.extractor.analyze(transcript_text)
        except AnalysisError as exc:
            logger.warning("[%s] analysis failed (%s): %s", subject, exc.kind.value, exc.message)
            return StageResult.soft_fail(exc)
        return StageResult.ok(result)


@lru_cache(maxsize=1)
def get_orchestrator() -> PipelineOrchestrator:
    """Return the process-wide orchestrator built from settings."""
    return PipelineOrchestrator.from_settings(settings)
