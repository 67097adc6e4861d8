"""Tests for Settings, pipeline enums and CompletionParams."""

from __future__ import annotations

import logging

import pytest

from video_insight.analysis.extractor import CompletionExtractor
from video_insight.config import Settings
from video_insight.logging_config import StructuredFormatter
from video_insight.pipeline_config import CompletionParams, PipelineState, StageOutcome
from video_insight.transcription.client import TranscriptionClient


def _settings(**overrides: object) -> Settings:
    return Settings(_env_file=None, **overrides)  # type: ignore[call-arg, arg-type]


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("COMPLETION_MODEL", raising=False)
        cfg = _settings()
        assert cfg.transcription_model_id == "fal-ai/elevenlabs/speech-to-text"
        assert cfg.transcription_language == "en"
        assert cfg.completion_base_url == "https://api.together.xyz/v1"
        assert cfg.completion_max_tokens == 1500
        assert cfg.completion_temperature == 0.3
        assert cfg.completion_top_p == 0.9
        assert cfg.acquisition_timeout is None

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FAL_KEY", "fal-secret")
        monkeypatch.setenv("ACQUISITION_SERVICE_URL", "http://yt:9000/download")
        cfg = _settings()
        assert cfg.fal_key == "fal-secret"
        assert cfg.acquisition_service_url == "http://yt:9000/download"

    def test_clients_from_settings(self) -> None:
        cfg = _settings(fal_key="k", transcription_poll_interval=2.5, completion_model="m")
        transcriber = TranscriptionClient.from_settings(cfg)
        extractor = CompletionExtractor.from_settings(cfg)
        assert transcriber.api_key == "k"
        assert transcriber.poll_interval == 2.5
        assert extractor.params.model == "m"


class TestEnums:
    def test_pipeline_states(self) -> None:
        assert [s.value for s in PipelineState] == [
            "acquiring",
            "acquired",
            "transcribing",
            "transcribed",
            "analyzing",
            "done",
            "failed",
        ]

    def test_stage_outcome_from_string(self) -> None:
        assert StageOutcome("soft_fail") is StageOutcome.SOFT_FAIL

    def test_is_str_subclass(self) -> None:
        assert isinstance(StageOutcome.OK, str)


class TestCompletionParams:
    def test_defaults_favour_determinism(self) -> None:
        params = CompletionParams()
        assert params.temperature == 0.3
        assert params.max_tokens == 1500

    def test_from_settings(self) -> None:
        params = CompletionParams.from_settings(_settings(completion_temperature=0.0, completion_top_p=1.0))
        assert params.temperature == 0.0
        assert params.top_p == 1.0

    def test_immutable(self) -> None:
        params = CompletionParams()
        with pytest.raises(AttributeError):
            params.temperature = 1.0  # type: ignore[misc]


class TestStructuredFormatter:
    def test_strips_package_prefix(self) -> None:
        record = logging.LogRecord(
            "video_insight.pipeline.orchestrator", logging.INFO, __file__, 1, "hello %s", ("world",), None
        )
        line = StructuredFormatter().format(record)
        assert "| INFO     |" in line
        assert "pipeline.orchestrator" in line
        assert "video_insight." not in line
        assert line.endswith("hello world")
