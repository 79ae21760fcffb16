"""OpenAI-compatible chat completions provider.

Groq exposes an OpenAI-compatible endpoint, so both the "groq" and "openai"
generation providers are served by the OpenAI SDK's AsyncOpenAI client with a
different base URL. The SDK's own retry loop is disabled; transient errors are
retried here with exponential backoff so retries are logged consistently.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from openai import APITimeoutError, AsyncOpenAI, AuthenticationError, PermissionDeniedError

from ... import config, config_constants
from ...exceptions import (
    ProviderAuthError,
    ProviderConfigError,
    ProviderRuntimeError,
    ProviderTimeoutError,
)
from ...utils.retry import retry_with_exponential_backoff
from ..base import GenerationRequest

logger = logging.getLogger(__name__)

_PROVIDER_LABELS = {"groq": "Groq", "openai": "OpenAI"}
_API_KEY_ENV = {"groq": "GROQ_API_KEY", "openai": "OPENAI_API_KEY"}


class OpenAIGenerationService:
    """GenerationService backed by an OpenAI-compatible chat completions API.

    Implements the GenerationService protocol.
    """

    def __init__(self, cfg: config.Config, client: AsyncOpenAI | None = None):
        """Initialize the provider.

        Args:
            cfg: Configuration with generation credentials, base URL and retry settings
            client: Optional pre-built client (used by tests)

        Raises:
            ProviderConfigError: If no API key is configured
        """
        self.cfg = cfg
        self._name = _PROVIDER_LABELS.get(cfg.generation_provider, cfg.generation_provider)

        if client is None:
            if not cfg.generation_api_key:
                env_name = _API_KEY_ENV.get(cfg.generation_provider, "GROQ_API_KEY")
                raise ProviderConfigError(
                    message="API key not configured",
                    provider=self._name,
                    config_key="generation_api_key",
                    suggestion=f"Set {env_name} environment variable",
                )
            client_kwargs: Dict[str, Any] = {
                "api_key": cfg.generation_api_key,
                "timeout": cfg.request_timeout_seconds,
                "max_retries": 0,
            }
            if cfg.resolved_api_base:
                client_kwargs["base_url"] = cfg.resolved_api_base
            client = AsyncOpenAI(**client_kwargs)

        self.client = client
        logger.debug(
            "Initialized %s generation service (base_url: %s)", self._name, cfg.resolved_api_base
        )

    @property
    def name(self) -> str:
        return self._name

    async def generate(self, request: GenerationRequest) -> str:
        """Run one chat completion and return its message content.

        Args:
            request: Generation request

        Returns:
            Message content, or "" when the API returned no content

        Raises:
            ProviderAuthError: If the API rejects the credentials
            ProviderTimeoutError: If the last attempt timed out
            ProviderRuntimeError: If the call fails after retries
        """
        kwargs: Dict[str, Any] = {
            "model": request.model,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.user_prompt},
            ],
            "temperature": request.temperature,
        }
        if request.response_format == "json_object":
            kwargs["response_format"] = {"type": "json_object"}
        if request.max_tokens:
            kwargs["max_tokens"] = request.max_tokens

        async def _make_api_call():
            return await self.client.chat.completions.create(**kwargs)

        try:
            response = await retry_with_exponential_backoff(
                _make_api_call,
                max_retries=self.cfg.max_retries,
                initial_delay=config_constants.DEFAULT_RETRY_INITIAL_DELAY,
                max_delay=config_constants.DEFAULT_RETRY_MAX_DELAY,
            )
        except (AuthenticationError, PermissionDeniedError) as exc:
            raise ProviderAuthError(
                message=f"Authentication failed: {exc}",
                provider=self._name,
                suggestion="Check the generation API key",
            ) from exc
        except APITimeoutError as exc:
            logger.error("%s API timed out (model: %s): %s", self._name, request.model, exc)
            raise ProviderTimeoutError(
                message=f"Generation timed out: {exc}", provider=self._name
            ) from exc
        except Exception as exc:
            logger.error("%s API error (model: %s): %s", self._name, request.model, exc)
            raise ProviderRuntimeError(
                message=f"Generation failed: {exc}", provider=self._name
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            logger.warning("%s API returned empty content (model: %s)", self._name, request.model)
            return ""

        logger.debug(
            "%s generation completed: %d characters (model: %s)",
            self._name,
            len(content),
            request.model,
        )
        return content

    async def aclose(self) -> None:
        await self.client.close()
