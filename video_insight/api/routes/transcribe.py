"""Transcription endpoints: transcript plus best-effort analysis."""

from __future__ import annotations

from fastapi import APIRouter

from video_insight.api.models import ErrorResponse, ProcessRequest, TranscribeRequest
from video_insight.models import PipelineRequest
from video_insight.pipeline.models import PipelineResponse
from video_insight.pipeline.orchestrator import get_orchestrator

router = APIRouter()


@router.post(
    "/transcribe",
    response_model=PipelineResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def transcribe(request: TranscribeRequest) -> PipelineResponse:
    """Transcribe a media URL and analyze the transcript.

    Always 200 once transcription succeeds; a failed analysis is reported in
    ``analysisError`` instead of failing the request.
    """
    result = await get_orchestrator().run_transcribe_and_analyze(request.media_url, request.title)
    return result.unwrap()


@router.post(
    "/process",
    response_model=PipelineResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def process(request: ProcessRequest) -> PipelineResponse:
    """Run download, transcription and analysis for a video URL in one call."""
    pipeline_request = PipelineRequest(source_url=request.url, display_title=request.title)
    result = await get_orchestrator().run_pipeline(pipeline_request)
    return result.unwrap()
