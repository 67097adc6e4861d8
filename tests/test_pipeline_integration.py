"""End-to-end tests against a running API with live providers.

# MANUAL RUN REQUIRED: these tests need FAL_KEY, COMPLETION_API_KEY, a running
# acquisition service and the API itself:
#   uvicorn video_insight.api.main:app --port 8080
#   pytest -m expensive tests/test_pipeline_integration.py -v
#
# Deselected by default (see addopts in pyproject.toml).
"""

from __future__ import annotations

import os

import httpx
import pytest

API_BASE_URL = os.getenv("API_URL", "http://localhost:8080")

# Short, public, speech-heavy clip.
SAMPLE_VIDEO_URL = os.getenv("SAMPLE_VIDEO_URL", "https://www.youtube.com/watch?v=jNQXAC9IVRw")


@pytest.mark.expensive
def test_download_then_transcribe() -> None:
    """Golden path: /download -> /transcribe returns transcript and analysis."""
    with httpx.Client(timeout=600.0) as client:
        download = client.post(f"{API_BASE_URL}/download", json={"url": SAMPLE_VIDEO_URL})
        assert download.status_code == 200, f"Download failed ({download.status_code}): {download.text}"
        media = download.json()
        assert media["mediaUrl"]

        resp = client.post(
            f"{API_BASE_URL}/transcribe",
            json={"mediaUrl": media["mediaUrl"], "title": media.get("title")},
        )

    assert resp.status_code == 200, f"Transcribe failed ({resp.status_code}): {resp.text}"
    data = resp.json()
    assert data["success"] is True
    assert data["transcription"]["text"].strip()
    # Analysis is best-effort: exactly one of analysis / analysisError may be set.
    assert not (data["analysis"] and data["analysisError"])
    if data["analysis"]:
        assert data["analysis"]["summary"]
        assert len(data["analysis"]["keyPoints"]) <= 5


@pytest.mark.expensive
def test_unreachable_media_is_transcription_failure() -> None:
    """A media URL the provider cannot fetch is a hard failure, not a 200."""
    with httpx.Client(timeout=600.0) as client:
        resp = client.post(
            f"{API_BASE_URL}/transcribe",
            json={"mediaUrl": "https://example.invalid/missing.mp3"},
        )
    assert resp.status_code == 500, f"Expected 500, got {resp.status_code}: {resp.text}"
    assert resp.json()["error"] == "Transcription failed"
