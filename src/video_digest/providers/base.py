"""GenerationService protocol definition.

This module defines the request type and protocol that every text-generation
backend must implement. The pipeline receives a GenerationService instance
explicitly; it never constructs a client itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Protocol, runtime_checkable

ResponseFormat = Literal["text", "json_object"]


@dataclass(frozen=True)
class GenerationRequest:
    """A single chat-completion style generation request.

    Attributes:
        model: Model identifier
        system_prompt: System message
        user_prompt: User message
        temperature: Sampling temperature
        response_format: "text" for free text, "json_object" for machine-parseable output
        max_tokens: Optional completion token cap
    """

    model: str
    system_prompt: str
    user_prompt: str
    temperature: float
    response_format: ResponseFormat = "text"
    max_tokens: Optional[int] = None


@runtime_checkable
class GenerationService(Protocol):
    """Protocol for text-generation backends."""

    @property
    def name(self) -> str:
        """Provider name used in logs and error messages."""
        ...

    async def generate(self, request: GenerationRequest) -> str:
        """Run one generation request and return the raw response text.

        Args:
            request: Generation request

        Returns:
            Raw response text (may be empty if the service returned no content)

        Raises:
            ProviderError: If the call fails
        """
        ...

    async def aclose(self) -> None:
        """Release network resources held by the service."""
        ...
