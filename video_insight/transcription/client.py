"""Speech-to-text client for the fal.ai queue (ElevenLabs speech-to-text).

The queue protocol is submit -> poll status (with logs) -> fetch result. The
call only returns once the job reaches a terminal state.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from pydantic import ValidationError as SchemaValidationError

from video_insight.config import Settings
from video_insight.errors import TranscriptionError, ValidationError
from video_insight.transcription.models import TranscriptionResult, TranscriptSegment
from video_insight.transcription.progress import ProgressChannel, ProgressUpdate, log_progress

logger = logging.getLogger(__name__)

PENDING_STATUSES = {"IN_QUEUE", "IN_PROGRESS"}
COMPLETED_STATUS = "COMPLETED"


def build_transcription_result(payload: Any, job_id: str | None = None) -> TranscriptionResult:
    """Map the provider's terminal payload into a TranscriptionResult.

    Raises:
        TranscriptionError: The payload is not an object, has no text, or a
            word entry is malformed.
    """
    if not isinstance(payload, dict):
        raise TranscriptionError("Malformed transcription payload")

    text = payload.get("text")
    if not isinstance(text, str) or not text:
        raise TranscriptionError("Transcription completed without text")

    words = payload.get("words") or []
    try:
        segments = [
            TranscriptSegment(
                text=word["text"],
                start_offset=word.get("start"),
                end_offset=word.get("end"),
                kind=word.get("type"),
                speaker_id=word.get("speaker_id"),
            )
            for word in words
        ]
        return TranscriptionResult(
            full_text=text,
            language_code=payload.get("language_code"),
            language_confidence=payload.get("language_probability"),
            segments=segments,
            job_id=job_id,
        )
    except (KeyError, TypeError, AttributeError, SchemaValidationError) as exc:
        raise TranscriptionError(f"Malformed transcription payload: {exc}") from exc


class TranscriptionClient:
    """Async client for one speech-to-text job per ``transcribe`` call.

    Example:
        client = TranscriptionClient.from_settings(settings)
        client.progress.subscribe(print)
        result = await client.transcribe("https://cdn.example/audio.mp3")
    """

    def __init__(
        self,
        api_key: str,
        queue_url: str = "https://queue.fal.run",
        model_id: str = "fal-ai/elevenlabs/speech-to-text",
        default_language: str = "en",
        poll_interval: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.queue_url = queue_url.rstrip("/")
        self.model_id = model_id
        self.default_language = default_language
        self.poll_interval = poll_interval
        self._transport = transport
        self.progress = ProgressChannel()
        self.progress.subscribe(log_progress)

    @classmethod
    def from_settings(cls, settings: Settings) -> TranscriptionClient:
        return cls(
            api_key=settings.fal_key,
            queue_url=settings.fal_queue_url,
            model_id=settings.transcription_model_id,
            default_language=settings.transcription_language,
            poll_interval=settings.transcription_poll_interval,
        )

    async def transcribe(self, media_url: str, language_hint: str | None = None) -> TranscriptionResult:
        """Run a speech-to-text job and wait for its terminal state.

        Args:
            media_url: Publicly reachable audio URL.
            language_hint: ISO language code; defaults to the configured one.

        Raises:
            ValidationError: ``media_url`` is empty.
            TranscriptionError: Provider failure, HTTP error or malformed payload.
        """
        if not media_url or not media_url.strip():
            raise ValidationError("Public URL is required")
        if not self.api_key:
            raise TranscriptionError("Speech-to-text provider is not configured (set FAL_KEY)")

        headers = {"Authorization": f"Key {self.api_key}"}
        try:
            async with httpx.AsyncClient(headers=headers, transport=self._transport) as client:
                job = await self._submit(client, media_url, language_hint or self.default_language)
                request_id = job["request_id"]
                await self._wait_for_completion(client, request_id, job["status_url"])
                payload = await self._fetch_result(client, job["response_url"])
        except httpx.HTTPError as exc:
            raise TranscriptionError(f"Speech-to-text provider unreachable: {exc}") from exc

        result = build_transcription_result(payload, job_id=request_id)
        logger.info(
            "Transcription %s completed: %d chars, %d segments",
            request_id,
            len(result.full_text),
            len(result.segments),
        )
        return result

    async def _submit(self, client: httpx.AsyncClient, media_url: str, language: str) -> dict[str, str]:
        response = await client.post(
            f"{self.queue_url}/{self.model_id}",
            json={"audio_url": media_url, "language_code": language},
        )
        body = self._json_or_raise(response, "submit")
        request_id = body.get("request_id")
        if not request_id:
            raise TranscriptionError("Speech-to-text provider did not return a request id")

        base = f"{self.queue_url}/{self.model_id}/requests/{request_id}"
        logger.info("Submitted transcription job %s for %s", request_id, media_url)
        return {
            "request_id": request_id,
            "status_url": body.get("status_url") or f"{base}/status",
            "response_url": body.get("response_url") or base,
        }

    async def _wait_for_completion(self, client: httpx.AsyncClient, request_id: str, status_url: str) -> None:
        while True:
            response = await client.get(status_url, params={"logs": 1})
            body = self._json_or_raise(response, "status")
            status = str(body.get("status", ""))
            logs = tuple(
                entry["message"]
                for entry in body.get("logs") or []
                if isinstance(entry, dict) and entry.get("message")
            )
            self.progress.publish(ProgressUpdate(status=status, logs=logs, request_id=request_id))

            if body.get("error"):
                raise TranscriptionError(f"Transcription job {request_id} failed: {body['error']}")
            if status == COMPLETED_STATUS:
                return
            if status not in PENDING_STATUSES:
                raise TranscriptionError(f"Transcription job {request_id} ended with status {status or 'unknown'}")
            await asyncio.sleep(self.poll_interval)

    async def _fetch_result(self, client: httpx.AsyncClient, response_url: str) -> dict[str, Any]:
        response = await client.get(response_url)
        return self._json_or_raise(response, "result")

    @staticmethod
    def _json_or_raise(response: httpx.Response, step: str) -> dict[str, Any]:
        if response.is_error:
            detail = response.text[:500] or response.reason_phrase
            raise TranscriptionError(f"Speech-to-text {step} failed with {response.status_code}: {detail}")
        try:
            body = response.json()
        except ValueError as exc:
            raise TranscriptionError(f"Speech-to-text {step} returned a non-JSON body") from exc
        if not isinstance(body, dict):
            raise TranscriptionError(f"Speech-to-text {step} returned an unexpected payload")
        return body
