"""Tagged per-stage results: ``OK(value) | HARD_FAIL(error) | SOFT_FAIL(error)``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, cast

from video_insight.errors import PipelineError
from video_insight.pipeline_config import StageOutcome

T = TypeVar("T")


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Outcome of one pipeline stage."""

    outcome: StageOutcome
    value: T | None = None
    error: PipelineError | None = None

    @classmethod
    def ok(cls, value: T) -> StageResult[T]:
        return cls(outcome=StageOutcome.OK, value=value)

    @classmethod
    def hard_fail(cls, error: PipelineError) -> StageResult[T]:
        return cls(outcome=StageOutcome.HARD_FAIL, error=error)

    @classmethod
    def soft_fail(cls, error: PipelineError) -> StageResult[T]:
        return cls(outcome=StageOutcome.SOFT_FAIL, error=error)

    @property
    def is_ok(self) -> bool:
        return self.outcome is StageOutcome.OK

    def failure(self) -> PipelineError:
        """Return the carried error of a failed stage."""
        if self.error is None:
            raise ValueError(f"{self.outcome.value} stage result carries no error")
        return self.error

    def unwrap(self) -> T:
        """Return the value, or raise the carried error for any failure."""
        if self.outcome is not StageOutcome.OK:
            raise self.failure()
        return cast(T, self.value)
