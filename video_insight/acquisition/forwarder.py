"""Relay download requests to the external acquisition service."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from video_insight.acquisition.models import AcquisitionResult
from video_insight.config import Settings
from video_insight.errors import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

# The yt download service reports the playable URL as ``public_url``.
MEDIA_URL_KEYS = ("mediaUrl", "media_url", "public_url")


def _upstream_message(response: httpx.Response) -> str:
    """Best description of a failed upstream response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("detail", "error", "message"):
            if body.get(key):
                return f"{response.status_code}: {body[key]}"
    return f"{response.status_code} {response.reason_phrase}".strip()


def to_acquisition_result(payload: dict[str, Any]) -> AcquisitionResult:
    """Split an upstream payload into media URL, title and everything else.

    Raises:
        UpstreamError: The payload has no media URL.
    """
    media_url = next((payload[k] for k in MEDIA_URL_KEYS if payload.get(k)), None)
    if not isinstance(media_url, str) or not media_url:
        raise UpstreamError("No media URL returned by acquisition service")

    raw_status = {k: v for k, v in payload.items() if k not in MEDIA_URL_KEYS and k != "title"}
    title = payload.get("title")
    return AcquisitionResult(
        media_url=media_url,
        title=title if isinstance(title, str) else None,
        raw_status=raw_status,
    )


class AcquisitionForwarder:
    """Forwards ``{url}`` to the acquisition service, no retries."""

    def __init__(
        self,
        service_url: str,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.service_url = service_url
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> AcquisitionForwarder:
        return cls(
            service_url=settings.acquisition_service_url,
            timeout=settings.acquisition_timeout,
        )

    async def forward(self, source_url: str) -> AcquisitionResult:
        """Ask the acquisition service to fetch ``source_url``.

        Raises:
            ValidationError: ``source_url`` is empty. No request is sent.
            UpstreamError: Network failure, non-2xx status or unusable payload.
        """
        if not isinstance(source_url, str) or not source_url.strip():
            raise ValidationError("YouTube URL is required")

        logger.info("Forwarding download request for %s", source_url)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.service_url, json={"url": source_url})
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Acquisition service unreachable: {exc}") from exc

        if response.is_error:
            raise UpstreamError(_upstream_message(response))

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError("Acquisition service returned a non-JSON body") from exc
        if not isinstance(payload, dict):
            raise UpstreamError("Acquisition service returned an unexpected payload")

        result = to_acquisition_result(payload)
        logger.info("Acquisition service returned media %s", result.media_url)
        return result
