"""Generation service protocol, implementations and factory.

This package contains:
- base.py: GenerationRequest and the GenerationService protocol
- openai/: OpenAI-compatible implementation (Groq and OpenAI)
- factory.py: Factory function for creating generation services
"""

from .base import GenerationRequest, GenerationService
from .factory import create_generation_service

__all__ = ["GenerationRequest", "GenerationService", "create_generation_service"]
