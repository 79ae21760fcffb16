#!/usr/bin/env python3
"""Unit tests for OpenAIGenerationService (Groq and OpenAI via the OpenAI SDK).

The SDK client is replaced by a mock; no network calls are made.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, Mock, patch

import httpx
import pytest
from conftest import create_test_config
from openai import APITimeoutError, AuthenticationError

from video_digest import config_constants
from video_digest.exceptions import (
    ProviderAuthError,
    ProviderConfigError,
    ProviderRuntimeError,
    ProviderTimeoutError,
)
from video_digest.providers.base import GenerationRequest, GenerationService
from video_digest.providers.factory import create_generation_service
from video_digest.providers.openai import OpenAIGenerationService

REQUEST = GenerationRequest(
    model="llama3-70b-8192",
    system_prompt="system",
    user_prompt="user",
    temperature=0.2,
)


def _completion(content):
    return Mock(choices=[Mock(message=Mock(content=content))])


def _mock_client(*responses):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(side_effect=list(responses))
    client.close = AsyncMock()
    return client


def _generate(service, request=REQUEST):
    return asyncio.run(service.generate(request))


@pytest.mark.unit
class TestOpenAIGenerationServiceInit:
    """Client construction."""

    def test_missing_api_key_raises_config_error(self):
        with pytest.raises(ProviderConfigError) as exc_info:
            OpenAIGenerationService(create_test_config(generation_api_key=None))

        assert exc_info.value.config_key == "generation_api_key"
        assert "GROQ_API_KEY" in str(exc_info.value)
        assert str(exc_info.value).startswith("[Groq]")

    def test_openai_provider_names_openai_env_var(self):
        cfg = create_test_config(generation_provider="openai", generation_api_key=None)

        with pytest.raises(ProviderConfigError, match="OPENAI_API_KEY"):
            OpenAIGenerationService(cfg)

    @patch("video_digest.providers.openai.openai_provider.AsyncOpenAI")
    def test_groq_client_uses_groq_base_url_and_no_sdk_retries(self, mock_client_cls):
        cfg = create_test_config(request_timeout_seconds=12.5)

        service = OpenAIGenerationService(cfg)

        mock_client_cls.assert_called_once_with(
            api_key=cfg.generation_api_key,
            timeout=12.5,
            max_retries=0,
            base_url=config_constants.GROQ_API_BASE,
        )
        assert service.name == "Groq"

    @patch("video_digest.providers.openai.openai_provider.AsyncOpenAI")
    def test_openai_client_uses_default_base_url(self, mock_client_cls):
        service = OpenAIGenerationService(create_test_config(generation_provider="openai"))

        assert "base_url" not in mock_client_cls.call_args.kwargs
        assert service.name == "OpenAI"

    def test_satisfies_protocol(self):
        service = OpenAIGenerationService(create_test_config(), client=_mock_client())

        assert isinstance(service, GenerationService)


@pytest.mark.unit
class TestOpenAIGenerationServiceGenerate:
    """generate() behaviour."""

    def test_returns_message_content(self):
        client = _mock_client(_completion("A summary."))
        service = OpenAIGenerationService(create_test_config(), client=client)

        assert _generate(service) == "A summary."
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "llama3-70b-8192"
        assert kwargs["temperature"] == 0.2
        assert kwargs["messages"] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "user"},
        ]
        assert "response_format" not in kwargs
        assert "max_tokens" not in kwargs

    def test_json_request_sets_response_format_and_max_tokens(self):
        client = _mock_client(_completion("{}"))
        service = OpenAIGenerationService(create_test_config(), client=client)
        request = GenerationRequest(
            model="m",
            system_prompt="s",
            user_prompt="u",
            temperature=0.5,
            response_format="json_object",
            max_tokens=512,
        )

        _generate(service, request)

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["max_tokens"] == 512

    @pytest.mark.parametrize("completion", [_completion(None), Mock(choices=[])])
    def test_empty_content_returns_empty_string(self, completion):
        service = OpenAIGenerationService(create_test_config(), client=_mock_client(completion))

        assert _generate(service) == ""

    @patch("video_digest.utils.retry.asyncio.sleep", new_callable=AsyncMock)
    def test_transient_error_retried(self, _sleep):
        client = _mock_client(Exception("503 Service Unavailable"), _completion("ok"))
        service = OpenAIGenerationService(create_test_config(max_retries=2), client=client)

        assert _generate(service) == "ok"
        assert client.chat.completions.create.await_count == 2

    @patch("video_digest.utils.retry.asyncio.sleep", new_callable=AsyncMock)
    def test_exhausted_retries_raise_runtime_error(self, _sleep):
        client = _mock_client(*[Exception("429 rate limit")] * 3)
        service = OpenAIGenerationService(create_test_config(max_retries=2), client=client)

        with pytest.raises(ProviderRuntimeError, match="Generation failed: 429 rate limit"):
            _generate(service)
        assert client.chat.completions.create.await_count == 3

    @patch("video_digest.utils.retry.asyncio.sleep", new_callable=AsyncMock)
    def test_transport_timeout_retried_then_raises_timeout_error(self, _sleep):
        timeout = APITimeoutError(request=httpx.Request("POST", "https://example.com"))
        client = _mock_client(timeout, timeout)
        service = OpenAIGenerationService(create_test_config(max_retries=1), client=client)

        with pytest.raises(ProviderTimeoutError, match="Generation timed out"):
            _generate(service)
        assert client.chat.completions.create.await_count == 2

    def test_authentication_error_not_retried(self):
        response = httpx.Response(401, request=httpx.Request("POST", "https://example.com"))
        error = AuthenticationError("Invalid API Key", response=response, body=None)
        client = _mock_client(error, _completion("never"))
        service = OpenAIGenerationService(create_test_config(max_retries=3), client=client)

        with pytest.raises(ProviderAuthError, match="Authentication failed"):
            _generate(service)
        assert client.chat.completions.create.await_count == 1

    def test_aclose_closes_client(self):
        client = _mock_client()
        service = OpenAIGenerationService(create_test_config(), client=client)

        asyncio.run(service.aclose())

        client.close.assert_awaited_once()


@pytest.mark.unit
class TestCreateGenerationService:
    """Tests for the provider factory."""

    @pytest.mark.parametrize("provider", ["groq", "openai"])
    @patch("video_digest.providers.openai.openai_provider.AsyncOpenAI")
    def test_creates_openai_compatible_service(self, _client_cls, provider):
        service = create_generation_service(create_test_config(generation_provider=provider))

        assert isinstance(service, OpenAIGenerationService)

    def test_unsupported_provider_raises(self):
        cfg = Mock(generation_provider="ollama")

        with pytest.raises(ValueError, match="ollama"):
            create_generation_service(cfg)
