"""Factory for creating generation services.

This module provides a factory function to create the generation service
selected by configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from video_digest import config
    from video_digest.providers.base import GenerationService


def create_generation_service(cfg: config.Config) -> GenerationService:
    """Create a generation service based on configuration.

    Args:
        cfg: Configuration object

    Returns:
        GenerationService instance

    Raises:
        ValueError: If provider type is not supported
        ProviderConfigError: If the provider is missing credentials
    """
    provider_type = cfg.generation_provider

    if provider_type in ("groq", "openai"):
        from .openai import OpenAIGenerationService

        return OpenAIGenerationService(cfg)
    raise ValueError(
        f"Unsupported generation provider: {provider_type}. "
        "Supported providers: 'groq', 'openai'."
    )
