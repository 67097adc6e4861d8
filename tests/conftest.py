"""Shared fakes for the remote services (no network access in tests)."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from video_insight.acquisition.forwarder import AcquisitionForwarder
from video_insight.analysis.extractor import CompletionExtractor
from video_insight.pipeline.orchestrator import PipelineOrchestrator
from video_insight.transcription.client import TranscriptionClient

ACQUISITION_URL = "http://acquisition.test/download"
QUEUE_URL = "https://queue.test"
MODEL_ID = "fal-ai/elevenlabs/speech-to-text"

WELL_FORMED_COMPLETION = (
    '{"summary":"s","keyPoints":["k1"],"facts":[],"educationalContent":""}'
)

TRANSCRIPT_PAYLOAD: dict[str, Any] = {
    "text": "hello world",
    "language_code": "eng",
    "language_probability": 0.98,
    "words": [
        {"text": "hello", "start": 0.0, "end": 0.4, "type": "word", "speaker_id": "speaker_0"},
        {"text": " ", "start": 0.4, "end": 0.5, "type": "spacing", "speaker_id": "speaker_0"},
        {"text": "world", "start": 0.5, "end": 0.9, "type": "word", "speaker_id": "speaker_0"},
    ],
}


def acquisition_transport(
    status_code: int = 200,
    body: Any = None,
    calls: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """Fake acquisition service answering every POST the same way."""
    if body is None:
        body = {"mediaUrl": "https://cdn/x.mp3", "title": "T"}

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return httpx.Response(status_code, json=body)

    return httpx.MockTransport(handler)


def fal_transport(
    result: Any = None,
    statuses: tuple[str, ...] = ("IN_QUEUE", "IN_PROGRESS", "COMPLETED"),
    logs: list[str] | None = None,
    calls: list[httpx.Request] | None = None,
    result_status_code: int = 200,
) -> httpx.MockTransport:
    """Fake fal queue: submit, then one status per poll, then the result."""
    if result is None:
        result = TRANSCRIPT_PAYLOAD
    pending = iter(statuses)

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        if request.method == "POST":
            return httpx.Response(
                200,
                json={
                    "request_id": "req-1",
                    "status_url": f"{QUEUE_URL}/requests/req-1/status",
                    "response_url": f"{QUEUE_URL}/requests/req-1",
                },
            )
        if request.url.path.endswith("/status"):
            return httpx.Response(
                200,
                json={"status": next(pending), "logs": [{"message": m} for m in logs or []]},
            )
        return httpx.Response(result_status_code, json=result)

    return httpx.MockTransport(handler)


def make_orchestrator(
    acquisition: httpx.MockTransport | None = None,
    transcription: httpx.MockTransport | None = None,
) -> PipelineOrchestrator:
    return PipelineOrchestrator(
        forwarder=AcquisitionForwarder(ACQUISITION_URL, transport=acquisition or acquisition_transport()),
        transcriber=TranscriptionClient(
            api_key="test-key",
            queue_url=QUEUE_URL,
            model_id=MODEL_ID,
            poll_interval=0,
            transport=transcription or fal_transport(),
        ),
        extractor=CompletionExtractor(api_key="test-key", base_url="https://completions.test/v1"),
    )


def completion_response(text: str) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock(text=text)]
    return response


@pytest.fixture
def completion() -> Iterator[Callable[..., AsyncMock]]:
    """Patch AsyncOpenAI; call the fixture with a text or an exception."""
    with patch("video_insight.analysis.extractor.AsyncOpenAI") as mock_cls:

        def configure(text: str | None = None, error: Exception | None = None) -> AsyncMock:
            create = AsyncMock()
            if error is not None:
                create.side_effect = error
            else:
                create.return_value = completion_response(text or "")
            client = mock_cls.return_value
            client.__aenter__.return_value = client
            client.completions.create = create
            return create

        configure(WELL_FORMED_COMPLETION)
        yield configure
