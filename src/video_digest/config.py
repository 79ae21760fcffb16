from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from . import config_constants


# SKIP .env loading in test environments - tests should use Config objects and
# environment variables directly, never rely on .env files
def _is_test_environment() -> bool:
    """Check if we're running in a test environment."""
    import sys

    if "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ:
        return True
    if os.environ.get("TESTING", "").lower() in ("1", "true", "yes"):
        return True
    return False


if not _is_test_environment():
    try:
        load_dotenv(override=False)
    except (PermissionError, OSError):
        # Continue without .env file
        pass

# Re-exported for convenience
DEFAULT_LOG_LEVEL = config_constants.DEFAULT_LOG_LEVEL
VALID_LOG_LEVELS = config_constants.VALID_LOG_LEVELS
DEFAULT_CHUNK_SIZE = config_constants.DEFAULT_CHUNK_SIZE
DEFAULT_MAX_CHUNKS = config_constants.DEFAULT_MAX_CHUNKS
DEFAULT_CONCURRENCY_LIMIT = config_constants.DEFAULT_CONCURRENCY_LIMIT
DEFAULT_CHUNK_TEMPERATURE = config_constants.DEFAULT_CHUNK_TEMPERATURE
DEFAULT_SYNTHESIS_TEMPERATURE = config_constants.DEFAULT_SYNTHESIS_TEMPERATURE
DEFAULT_REQUEST_TIMEOUT_SECONDS = config_constants.DEFAULT_REQUEST_TIMEOUT_SECONDS
DEFAULT_METADATA_TIMEOUT_SECONDS = config_constants.DEFAULT_METADATA_TIMEOUT_SECONDS
DEFAULT_MAX_RETRIES = config_constants.DEFAULT_MAX_RETRIES


def _default_chunk_model(provider: str) -> str:
    if provider == config_constants.GENERATION_PROVIDER_OPENAI:
        return config_constants.OPENAI_DEFAULT_CHUNK_MODEL
    return config_constants.GROQ_DEFAULT_CHUNK_MODEL


def _default_synthesis_model(provider: str) -> str:
    if provider == config_constants.GENERATION_PROVIDER_OPENAI:
        return config_constants.OPENAI_DEFAULT_SYNTHESIS_MODEL
    return config_constants.GROQ_DEFAULT_SYNTHESIS_MODEL


class Config(BaseModel):
    """Configuration model for the transcript-to-article pipeline.

    The configuration is organized into several categories:

    - **Generation**: Provider, credentials, models and sampling temperatures
    - **Chunking**: Words per chunk and the maximum number of chunks
    - **Concurrency**: Bound on parallel chunk summarization calls
    - **Timeouts/Retries**: Per-call timeouts and transient-error retries
    - **Sources**: YouTube Data API key and transcript languages
    - **Logging**: Log level and optional log file

    The model is immutable (frozen) after creation.

    Attributes:
        generation_provider: "groq" (default) or "openai". Both use the OpenAI SDK.
        generation_api_key: API key for the generation service. Loaded from
            GROQ_API_KEY or OPENAI_API_KEY depending on the provider.
        generation_api_base: Optional base URL override (e.g. for a mock server).
        chunk_model: Model used for per-chunk summaries.
        synthesis_model: Model used for the final article synthesis.
        chunk_size: Words per chunk (alias: unit_size).
        max_chunks: Maximum number of chunks; trailing words are dropped (alias: max_units).
        concurrency_limit: Maximum chunk summarization calls in flight.
        chunk_temperature: Temperature for chunk summaries.
        synthesis_temperature: Temperature for article synthesis.
        synthesis_max_tokens: Optional completion token cap for synthesis.
        request_timeout_seconds: Transport timeout for each generation attempt. A call
            with retries is bounded by generation_deadline_seconds.
        max_retries: Retries for transient generation errors (429, 5xx, network).
        youtube_api_key: YouTube Data API key used for video titles (optional).
        metadata_timeout_seconds: HTTP timeout for the metadata lookup.
        transcript_languages: Preferred transcript languages, in priority order.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional log file path.
    """

    generation_provider: Literal["groq", "openai"] = Field(
        default=config_constants.DEFAULT_GENERATION_PROVIDER,
        alias="generation_provider",
        description="Generation service provider",
    )
    generation_api_key: Optional[str] = Field(
        default=None,
        alias="generation_api_key",
        description="Generation service API key (prefer environment variables)",
    )
    generation_api_base: Optional[str] = Field(
        default=None,
        alias="generation_api_base",
        description="Generation service base URL override",
    )
    chunk_model: str = Field(
        default=config_constants.GROQ_DEFAULT_CHUNK_MODEL, alias="chunk_model"
    )
    synthesis_model: str = Field(
        default=config_constants.GROQ_DEFAULT_SYNTHESIS_MODEL, alias="synthesis_model"
    )
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, alias="unit_size", gt=0)
    max_chunks: int = Field(default=DEFAULT_MAX_CHUNKS, alias="max_units", gt=0)
    concurrency_limit: int = Field(
        default=DEFAULT_CONCURRENCY_LIMIT,
        alias="concurrency_limit",
        gt=0,
        le=config_constants.MAX_CONCURRENCY_LIMIT,
    )
    chunk_temperature: float = Field(default=DEFAULT_CHUNK_TEMPERATURE, alias="chunk_temperature")
    synthesis_temperature: float = Field(
        default=DEFAULT_SYNTHESIS_TEMPERATURE, alias="synthesis_temperature"
    )
    synthesis_max_tokens: Optional[int] = Field(
        default=None, alias="synthesis_max_tokens", gt=0
    )
    request_timeout_seconds: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT_SECONDS, alias="request_timeout_seconds", gt=0
    )
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, alias="max_retries", ge=0)
    youtube_api_key: Optional[str] = Field(default=None, alias="youtube_api_key")
    metadata_timeout_seconds: float = Field(
        default=DEFAULT_METADATA_TIMEOUT_SECONDS, alias="metadata_timeout_seconds", gt=0
    )
    transcript_languages: List[str] = Field(
        default_factory=lambda: list(config_constants.DEFAULT_TRANSCRIPT_LANGUAGES),
        alias="transcript_languages",
    )
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, alias="log_level")
    log_file: Optional[str] = Field(default=None, alias="log_file")

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _preprocess_config_data(cls, data: Any) -> Any:
        """Load values from environment variables where the config leaves them unset."""
        if not isinstance(data, dict):
            return data
        data = dict(data)

        # LOG_LEVEL: Environment variable takes precedence (special case)
        env_log_level = os.getenv("LOG_LEVEL")
        if env_log_level:
            env_value = str(env_log_level).strip().upper()
            if env_value in VALID_LOG_LEVELS:
                data["log_level"] = env_value

        if data.get("log_file") is None:
            env_log_file = (os.getenv("LOG_FILE") or "").strip()
            if env_log_file:
                data["log_file"] = env_log_file

        provider = data.get("generation_provider") or config_constants.DEFAULT_GENERATION_PROVIDER
        if data.get("generation_api_key") is None:
            env_name = "OPENAI_API_KEY" if provider == "openai" else "GROQ_API_KEY"
            env_key = (os.getenv(env_name) or "").strip()
            if env_key:
                data["generation_api_key"] = env_key

        if not data.get("chunk_model"):
            data["chunk_model"] = _default_chunk_model(provider)
        if not data.get("synthesis_model"):
            data["synthesis_model"] = _default_synthesis_model(provider)

        if data.get("generation_api_base") is None:
            env_base = (os.getenv("GENERATION_API_BASE") or "").strip()
            if env_base:
                data["generation_api_base"] = env_base

        if data.get("youtube_api_key") is None:
            env_yt = (os.getenv("YOUTUBE_API_KEY") or "").strip()
            if env_yt:
                data["youtube_api_key"] = env_yt

        return data

    @field_validator("generation_api_key", "youtube_api_key", "generation_api_base", mode="before")
    @classmethod
    def _strip_optional(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("chunk_temperature", "synthesis_temperature", mode="after")
    @classmethod
    def _validate_temperature(cls, value: float) -> float:
        if not config_constants.MIN_TEMPERATURE <= value <= config_constants.MAX_TEMPERATURE:
            raise ValueError(
                f"temperature must be between {config_constants.MIN_TEMPERATURE} and "
                f"{config_constants.MAX_TEMPERATURE}, got: {value}"
            )
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, value: Any) -> str:
        if value is None:
            return DEFAULT_LOG_LEVEL
        level = str(value).strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {VALID_LOG_LEVELS}, got: {value}")
        return level

    @field_validator("transcript_languages", mode="before")
    @classmethod
    def _coerce_languages(cls, value: Any) -> List[str]:
        if value is None:
            return list(config_constants.DEFAULT_TRANSCRIPT_LANGUAGES)
        if isinstance(value, str):
            value = value.split(",")
        languages = [str(item).strip() for item in value if str(item).strip()]
        if not languages:
            raise ValueError("transcript_languages cannot be empty")
        return languages

    @property
    def resolved_api_base(self) -> Optional[str]:
        """Base URL passed to the OpenAI SDK (Groq's endpoint unless overridden)."""
        if self.generation_api_base:
            return self.generation_api_base
        if self.generation_provider == config_constants.GENERATION_PROVIDER_GROQ:
            return config_constants.GROQ_API_BASE
        return None

    @property
    def generation_deadline_seconds(self) -> float:
        """Upper bound for one generation call including its retries.

        ``request_timeout_seconds`` bounds each attempt at the transport; the
        deadline adds room for every retry and the backoff delays between them.
        """
        backoff = 0.0
        delay = config_constants.DEFAULT_RETRY_INITIAL_DELAY
        for _ in range(self.max_retries):
            backoff += delay
            delay = min(delay * 2, config_constants.DEFAULT_RETRY_MAX_DELAY)
        return self.request_timeout_seconds * (self.max_retries + 1) + backoff


def load_config_file(path: str) -> Dict[str, Any]:
    """Load configuration from a JSON or YAML file.

    The file format is auto-detected from the extension (`.json`, `.yaml`, `.yml`).
    The returned dictionary can be unpacked into the `Config` constructor.

    Args:
        path: Path to configuration file. Supports tilde expansion.

    Returns:
        Dictionary of configuration values (field names or aliases).

    Raises:
        ValueError: If the path is empty, missing, unreadable, has an unsupported
            extension, fails to parse, or does not contain a mapping.

    Example:
        >>> cfg = Config(**load_config_file("config.yaml"))
    """
    if not path:
        raise ValueError("Config path cannot be empty")

    cfg_path = Path(path).expanduser()
    try:
        resolved = cfg_path.resolve()
    except (OSError, RuntimeError) as exc:
        raise ValueError(f"Invalid config path: {path} ({exc})") from exc

    if not resolved.exists():
        raise ValueError(f"Config file not found: {resolved}")

    suffix = resolved.suffix.lower()
    try:
        text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Failed to read config file {resolved}: {exc}") from exc

    if suffix == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON config file {resolved}: {exc}") from exc
    elif suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML config file {resolved}: {exc}") from exc
    else:
        raise ValueError(f"Unsupported config file type: {resolved.suffix}")

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping/object at the top level")

    return data
