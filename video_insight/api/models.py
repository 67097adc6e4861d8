"""Pydantic request/response schemas for the Video Insight API."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, Field


class DownloadRequest(BaseModel):
    """Request body for the /download endpoint."""

    url: str = ""


class TranscribeRequest(BaseModel):
    """Request body for the /transcribe endpoint.

    The legacy web client posts ``public_url``; ``mediaUrl``
    is the documented name.
    """

    media_url: str = Field(
        default="",
        validation_alias=AliasChoices("mediaUrl", "media_url", "public_url"),
    )
    title: str | None = None


class ProcessRequest(BaseModel):
    """Request body for the /process endpoint (download + transcribe + analyze)."""

    url: str = ""
    title: str | None = None


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    error: str
    details: str | None = None
