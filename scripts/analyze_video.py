"""Run a video URL through the Video Insight API and print the analysis."""

import argparse
import os
import sys
from pathlib import Path

import httpx

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from video_insight.pipeline.models import PipelineResponse

API_URL = os.getenv("API_URL", "http://localhost:8080")


def request_pipeline(url: str, title: str | None = None, timeout: float | None = None) -> dict:  # type: ignore[type-arg]
    """Download, transcribe and analyze ``url``.

    Two calls, mirroring the web client: /download for the media URL, then
    /transcribe for transcript and analysis.
    """
    r = httpx.post(f"{API_URL}/download", json={"url": url}, timeout=timeout)
    r.raise_for_status()
    media = r.json()

    r = httpx.post(
        f"{API_URL}/transcribe",
        json={"mediaUrl": media["mediaUrl"], "title": title or media.get("title") or "YouTube Video"},
        timeout=timeout,
    )
    r.raise_for_status()
    return r.json()  # type: ignore[no-any-return]


def render(response: PipelineResponse, show_transcript: bool = False) -> str:
    """Format a pipeline response for the terminal."""
    lines: list[str] = [f"# {response.title or 'Untitled video'}", ""]

    if response.analysis is not None:
        analysis = response.analysis
        lines += ["## Summary", analysis.summary, ""]
        if analysis.key_points:
            lines.append("## Key points")
            lines += [f"- {point}" for point in analysis.key_points]
            lines.append("")
        if analysis.facts:
            lines.append("## Facts")
            for fact in analysis.facts:
                source = fact.display_source()
                lines.append(f"- {fact.statement}" + (f" ({source})" if source else ""))
            lines.append("")
        if analysis.educational_content:
            lines += ["## Learnings", analysis.educational_content, ""]
    elif response.analysis_error:
        lines += [f"Analysis unavailable: {response.analysis_error}", ""]

    if show_transcript and response.transcription is not None:
        lines += ["## Transcript", response.transcription.full_text, ""]

    return "\n".join(lines)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("url")
    parser.add_argument("--title", default=None)
    parser.add_argument("--transcript", action="store_true", help="also print the full transcript")
    args = parser.parse_args()

    try:
        data = request_pipeline(args.url, args.title)
    except httpx.HTTPStatusError as e:
        print(f"Request failed ({e.response.status_code}): {e.response.text}")
        sys.exit(1)
    except httpx.HTTPError as e:
        print(f"Request failed: {e}")
        sys.exit(1)

    print(render(PipelineResponse.model_validate(data), show_transcript=args.transcript))
