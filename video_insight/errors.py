"""Error taxonomy for the pipeline.

Every error carries the HTTP status it maps to at the API boundary and a short
label used as the ``error`` field of the response body.
"""

from __future__ import annotations

from enum import Enum


class PipelineError(Exception):
    """Base class for all pipeline failures."""

    status_code: int = 500
    label: str = "Pipeline failed"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PipelineError):
    """Bad or missing input. Raised before any remote call is made."""

    status_code = 400
    label = "Invalid request"


class UpstreamError(PipelineError):
    """The acquisition service failed or returned an unusable payload."""

    status_code = 502
    label = "Failed to download from acquisition service"


class TranscriptionError(PipelineError):
    """The speech-to-text job failed. Terminal for the whole pipeline."""

    status_code = 500
    label = "Transcription failed"


class AnalysisFailure(str, Enum):
    """Why the analysis stage produced no result."""

    PROVIDER_FAILURE = "ProviderFailure"
    MALFORMED_OUTPUT = "MalformedOutput"


class AnalysisError(PipelineError):
    """The analysis stage failed. Recorded in the response, never terminal."""

    label = "Analysis failed"

    def __init__(self, kind: AnalysisFailure, message: str) -> None:
        super().__init__(message)
        self.kind = kind
