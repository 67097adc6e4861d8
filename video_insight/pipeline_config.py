"""Pipeline configuration: state/outcome enums and CompletionParams dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from video_insight.config import Settings


class PipelineState(str, Enum):
    """States a single request moves through in the orchestrator."""

    ACQUIRING = "acquiring"
    ACQUIRED = "acquired"
    TRANSCRIBING = "transcribing"
    TRANSCRIBED = "transcribed"
    ANALYZING = "analyzing"
    DONE = "done"
    FAILED = "failed"


class StageOutcome(str, Enum):
    """Tag carried by every stage result."""

    OK = "ok"
    HARD_FAIL = "hard_fail"
    SOFT_FAIL = "soft_fail"


@dataclass(frozen=True)
class CompletionParams:
    """Immutable sampling parameters for the analysis completion call.

    Defaults favour a short, deterministic answer: low temperature and a
    bounded output length.
    """

    model: str = "deepseek-ai/DeepSeek-V3"
    max_tokens: int = 1500
    temperature: float = 0.3
    top_p: float = 0.9

    @classmethod
    def from_settings(cls, settings: Settings) -> CompletionParams:
        return cls(
            model=settings.completion_model,
            max_tokens=settings.completion_max_tokens,
            temperature=settings.completion_temperature,
            top_p=settings.completion_top_p,
        )
