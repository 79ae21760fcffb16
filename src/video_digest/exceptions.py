"""Custom exceptions for video_digest.

Two families of errors live here:

Pipeline errors are the only errors the pipeline raises to its caller. Each
carries an ``ErrorKind`` classification and the HTTP status a web layer would
answer with.

Exception Hierarchy:
    PipelineError (base)
    ├── EmptyTranscriptError - transcript missing or blank
    ├── UpstreamFetchError - transcript/metadata collaborator failed
    │   └── TranscriptUnavailableError - transcript disabled or not found
    ├── AllChunksFailedError - no chunk summary succeeded
    └── SynthesisCallFailure - the article synthesis call failed

    ProviderError (base)
    ├── ProviderConfigError - Configuration issues
    ├── ProviderAuthError - Authentication failures
    └── ProviderRuntimeError - Runtime operation failures
        └── ProviderTimeoutError - Transport timeouts

``EmptyInputError`` is raised by the chunker for token-less input and is
converted to ``EmptyTranscriptError`` by the orchestrator.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Classification of fatal pipeline errors."""

    SOURCE_MISSING = "source_missing"
    UPSTREAM_FAILURE = "upstream_failure"
    GENERATION_UNAVAILABLE = "generation_unavailable"


_HTTP_STATUS_BY_KIND = {
    ErrorKind.SOURCE_MISSING: 404,
    ErrorKind.UPSTREAM_FAILURE: 502,
    ErrorKind.GENERATION_UNAVAILABLE: 503,
}


class PipelineError(Exception):
    """Base exception for fatal pipeline errors.

    Attributes:
        message: Human-readable error message
        kind: Error classification
        video_id: Video being processed, when known
    """

    kind: ErrorKind = ErrorKind.UPSTREAM_FAILURE

    def __init__(
        self,
        message: str,
        video_id: Optional[str] = None,
        kind: Optional[ErrorKind] = None,
    ) -> None:
        self.message = message
        self.video_id = video_id
        if kind is not None:
            self.kind = kind
        super().__init__(message)

    @property
    def http_status(self) -> int:
        """HTTP status code matching this error's classification."""
        return _HTTP_STATUS_BY_KIND.get(self.kind, 500)


class EmptyTranscriptError(PipelineError):
    """Raised when the joined transcript text is blank."""

    kind = ErrorKind.SOURCE_MISSING


class UpstreamFetchError(PipelineError):
    """Raised when the transcript or metadata collaborator fails."""

    kind = ErrorKind.UPSTREAM_FAILURE


class TranscriptUnavailableError(UpstreamFetchError):
    """Raised when a video has no retrievable transcript.

    Attributes:
        reason: "disabled", "not_found" or "video_unavailable"
    """

    def __init__(self, message: str, reason: str, video_id: Optional[str] = None) -> None:
        self.reason = reason
        super().__init__(message, video_id=video_id)

    @property
    def http_status(self) -> int:
        return 404


class AllChunksFailedError(PipelineError):
    """Raised when every chunk summarization call failed.

    Attributes:
        failed_count: Number of chunks attempted
    """

    kind = ErrorKind.GENERATION_UNAVAILABLE

    def __init__(self, failed_count: int, video_id: Optional[str] = None) -> None:
        self.failed_count = failed_count
        super().__init__(
            f"Failed to generate summaries for video sections ({failed_count} chunks failed)",
            video_id=video_id,
        )


class SynthesisCallFailure(PipelineError):
    """Raised when the article synthesis call fails, times out or returns nothing."""

    kind = ErrorKind.GENERATION_UNAVAILABLE


class EmptyInputError(ValueError):
    """Raised by the chunker when the input contains no tokens."""


class ProviderError(Exception):
    """Base exception for all generation provider errors.

    Attributes:
        provider: Name of the provider (e.g., "OpenAI", "Groq")
        message: Human-readable error message
        suggestion: Optional suggestion for resolving the error
    """

    def __init__(
        self,
        message: str,
        provider: str = "Unknown",
        suggestion: Optional[str] = None,
    ) -> None:
        self.provider = provider
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message with provider and suggestion."""
        parts = [f"[{self.provider}] {self.message}"]
        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")
        return " ".join(parts)


class ProviderConfigError(ProviderError):
    """Raised when provider configuration is invalid or missing.

    Example:
        >>> raise ProviderConfigError(
        ...     message="API key not provided",
        ...     provider="Groq",
        ...     config_key="generation_api_key",
        ...     suggestion="Set GROQ_API_KEY environment variable"
        ... )
    """

    def __init__(
        self,
        message: str,
        provider: str = "Unknown",
        config_key: Optional[str] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.config_key = config_key
        if config_key and config_key not in message:
            message = f"{message} (config key: {config_key})"
        super().__init__(message=message, provider=provider, suggestion=suggestion)


class ProviderAuthError(ProviderError):
    """Raised when authentication with a provider fails."""


class ProviderRuntimeError(ProviderError):
    """Raised when a generation call fails at runtime.

    Common causes:
    - Network errors
    - API rate limiting
    - Empty or malformed API responses
    """


class ProviderTimeoutError(ProviderRuntimeError):
    """Raised when every attempt of a generation call timed out at the transport."""
