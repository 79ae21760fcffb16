"""OpenAI-compatible generation provider (serves both Groq and OpenAI)."""

from .openai_provider import OpenAIGenerationService

__all__ = ["OpenAIGenerationService"]
