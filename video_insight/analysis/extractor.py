"""Completion-powered content analysis of a transcript.

The completion provider answers in free text. Structured data is recovered in
two phases: locate the outermost ``{...}`` candidate, then parse it strictly
against the AnalysisResult schema. Any failure is reported as AnalysisError.
"""

from __future__ import annotations

import json
import logging

import httpx
from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError as SchemaValidationError

from video_insight.analysis.models import AnalysisResult
from video_insight.config import Settings
from video_insight.errors import AnalysisError, AnalysisFailure
from video_insight.pipeline_config import CompletionParams

logger = logging.getLogger(__name__)

ANALYSIS_PROMPT = """
You are analyzing a YouTube video transcript. Your task is to:
1. Provide a concise summary of the content (max 3 paragraphs)
2. Identify the main points/key takeaways (max 5)
3. List any factual statements with source links when possible
4. If it's educational content, what are the most important learnings?
5. Organize your response as a single JSON object in the following format:
{{
  "summary": "...",
  "keyPoints": ["...", "..."],
  "facts": [
    {{"statement": "...", "source": "..."}},
    {{"statement": "...", "source": "..."}}
  ],
  "educationalContent": "..."
}}

DO NOT include timestamps in your analysis. Focus only on content and meaning.
If you're unsure about sources for facts, provide your best guess for reliable sources.

Here is the transcript:
{transcript}
"""


def build_prompt(transcript: str) -> str:
    """Embed the transcript into the fixed analysis instructions."""
    return ANALYSIS_PROMPT.format(transcript=transcript)


def locate_json_candidate(text: str) -> str | None:
    """Return the substring from the first ``{`` to the last ``}``, if any."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return None
    return text[start : end + 1]


def parse_analysis(candidate: str) -> AnalysisResult:
    """Strictly parse a JSON candidate into an AnalysisResult.

    Raises:
        AnalysisError: MALFORMED_OUTPUT when the candidate is not valid JSON,
            not an object, or does not match the analysis shape.
    """
    try:
        data = json.loads(candidate)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise AnalysisError(
            AnalysisFailure.MALFORMED_OUTPUT,
            f"Failed to parse completion response: {exc}",
        ) from exc

    if not isinstance(data, dict):
        raise AnalysisError(AnalysisFailure.MALFORMED_OUTPUT, "Completion JSON is not an object")

    try:
        return AnalysisResult.model_validate(data)
    except SchemaValidationError as exc:
        raise AnalysisError(
            AnalysisFailure.MALFORMED_OUTPUT,
            f"Completion JSON does not match the analysis shape: {exc.error_count()} error(s)",
        ) from exc


def extract_analysis(completion_text: str) -> AnalysisResult:
    """Recover an AnalysisResult from a free-text completion."""
    candidate = locate_json_candidate(completion_text)
    if candidate is None:
        raise AnalysisError(
            AnalysisFailure.MALFORMED_OUTPUT,
            "Could not extract JSON from completion response",
        )
    return parse_analysis(candidate)


class CompletionExtractor:
    """Runs the analysis prompt against an OpenAI-compatible completions API."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        params: CompletionParams | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.params = params or CompletionParams()

    @classmethod
    def from_settings(cls, settings: Settings) -> CompletionExtractor:
        return cls(
            api_key=settings.completion_api_key,
            base_url=settings.completion_base_url,
            params=CompletionParams.from_settings(settings),
        )

    async def analyze(self, transcript_text: str) -> AnalysisResult:
        """Analyze a transcript with one completion call.

        Raises:
            AnalysisError: PROVIDER_FAILURE if the call fails, MALFORMED_OUTPUT
                if the completion holds no usable JSON.
        """
        completion_text = await self._complete(build_prompt(transcript_text))
        result = extract_analysis(completion_text)
        logger.info(
            "Analysis completed: %d key points, %d facts",
            len(result.key_points),
            len(result.facts),
        )
        return result

    async def _complete(self, prompt: str) -> str:
        logger.info("Calling %s for transcript analysis...", self.params.model)
        try:
            # No SDK-level retries.
            async with AsyncOpenAI(api_key=self.api_key, base_url=self.base_url, max_retries=0) as client:
                response = await client.completions.create(
                    model=self.params.model,
                    prompt=prompt,
                    max_tokens=self.params.max_tokens,
                    temperature=self.params.temperature,
                    top_p=self.params.top_p,
                )
        except (OpenAIError, httpx.HTTPError) as exc:
            raise AnalysisError(AnalysisFailure.PROVIDER_FAILURE, str(exc)) from exc

        if not response.choices:
            raise AnalysisError(AnalysisFailure.PROVIDER_FAILURE, "Completion provider returned no choices")
        return response.choices[0].text or ""
