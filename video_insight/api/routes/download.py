"""Download endpoint: forward a video URL to the acquisition service."""

from __future__ import annotations

from fastapi import APIRouter

from video_insight.acquisition.models import AcquisitionResult
from video_insight.api.models import DownloadRequest, ErrorResponse
from video_insight.models import PipelineRequest
from video_insight.pipeline.orchestrator import get_orchestrator

router = APIRouter()


@router.post(
    "/download",
    response_model=AcquisitionResult,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def download(request: DownloadRequest) -> AcquisitionResult:
    """Fetch audio for a video URL and return its playable media URL.

    An empty URL is rejected with 400 before anything is sent upstream;
    acquisition service failures come back as 502.
    """
    result = await get_orchestrator().run_download(PipelineRequest(source_url=request.url))
    return result.unwrap()
