"""Unit tests for video_digest.exceptions."""

from __future__ import annotations

import pytest

from video_digest.exceptions import (
    AllChunksFailedError,
    EmptyInputError,
    EmptyTranscriptError,
    ErrorKind,
    PipelineError,
    ProviderConfigError,
    ProviderRuntimeError,
    SynthesisCallFailure,
    TranscriptUnavailableError,
    UpstreamFetchError,
)


@pytest.mark.unit
class TestPipelineErrors:
    """Classification and HTTP status of pipeline errors."""

    @pytest.mark.parametrize(
        "error,kind,status",
        [
            (EmptyTranscriptError("empty"), ErrorKind.SOURCE_MISSING, 404),
            (UpstreamFetchError("down"), ErrorKind.UPSTREAM_FAILURE, 502),
            (
                TranscriptUnavailableError("disabled", reason="disabled"),
                ErrorKind.UPSTREAM_FAILURE,
                404,
            ),
            (AllChunksFailedError(3), ErrorKind.GENERATION_UNAVAILABLE, 503),
            (SynthesisCallFailure("failed"), ErrorKind.GENERATION_UNAVAILABLE, 503),
        ],
    )
    def test_kind_and_status(self, error, kind, status):
        assert isinstance(error, PipelineError)
        assert error.kind is kind
        assert error.http_status == status

    def test_kind_override(self):
        error = PipelineError("custom", video_id="v", kind=ErrorKind.SOURCE_MISSING)

        assert error.http_status == 404
        assert error.video_id == "v"
        assert str(error) == "custom"

    def test_empty_input_is_value_error(self):
        assert issubclass(EmptyInputError, ValueError)
        assert not issubclass(EmptyInputError, PipelineError)


@pytest.mark.unit
class TestProviderErrors:
    """Message formatting of provider errors."""

    def test_runtime_error_format(self):
        error = ProviderRuntimeError("Generation failed", provider="Groq", suggestion="Retry")

        assert str(error) == "[Groq] Generation failed Suggestion: Retry"

    def test_config_error_mentions_config_key(self):
        error = ProviderConfigError("API key not configured", "Groq", "generation_api_key")

        assert "(config key: generation_api_key)" in str(error)
        assert error.config_key == "generation_api_key"
