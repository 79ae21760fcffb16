"""Error classification utilities for retry logic.

This module classifies exceptions raised by the generation service as
retryable (transient) or non-retryable (permanent).
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

_RATE_LIMIT_INDICATORS = (
    "rate limit",
    "rate_limit",
    "too many requests",
    "quota",
    "resource exhausted",
)
_SERVER_ERROR_INDICATORS = (
    "server error",
    "internal server error",
    "bad gateway",
    "service unavailable",
    "gateway timeout",
    "overloaded",
)
_CONNECTION_INDICATORS = (
    "connection",
    "connect",
    "network",
    "socket",
    "timeout",
    "timed out",
    "broken pipe",
)
_SERVER_STATUS_CODES = ("500", "502", "503", "504")


def _status_code(error: Exception) -> int | None:
    status = getattr(error, "status_code", None)
    if isinstance(status, int):
        return status
    response = getattr(error, "response", None)
    status = getattr(response, "status_code", None)
    return status if isinstance(status, int) else None


def is_retryable_error(error: Exception) -> bool:
    """Determine if an error is retryable.

    Retryable errors are transient failures that may succeed on retry:
    - Rate limits (429)
    - Server errors (5xx)
    - Connection and timeout errors

    Non-retryable errors are permanent failures:
    - Client errors (4xx except 429), including authentication (401, 403),
      validation (400) and not found (404)

    Args:
        error: Exception to classify

    Returns:
        True if error is retryable, False otherwise
    """
    status = _status_code(error)
    if status is not None:
        return status == 429 or status >= 500

    if is_non_retryable_http_error(error):
        return False

    error_str = str(error).lower()
    error_type_name = type(error).__name__.lower()

    if "429" in error_str or any(ind in error_str for ind in _RATE_LIMIT_INDICATORS):
        return True

    if any(code in error_str for code in _SERVER_STATUS_CODES) or any(
        ind in error_str for ind in _SERVER_ERROR_INDICATORS
    ):
        return True

    if any(ind in error_str for ind in _CONNECTION_INDICATORS):
        return True

    if any(pattern in error_type_name for pattern in ("connection", "timeout", "network")):
        return True

    logger.debug("Unknown error type %s, not retrying: %s", type(error).__name__, error)
    return False


def is_non_retryable_http_error(error: Exception) -> bool:
    """Check if error is a non-retryable HTTP error (4xx except 429).

    Args:
        error: Exception to check

    Returns:
        True if error is a non-retryable HTTP error, False otherwise
    """
    status = _status_code(error)
    if status is not None:
        return 400 <= status < 500 and status != 429

    error_str = str(error).lower()
    for code, phrase in (
        ("400", "bad request"),
        ("401", "unauthorized"),
        ("403", "forbidden"),
        ("404", "not found"),
        ("422", "unprocessable entity"),
    ):
        if code in error_str or phrase in error_str:
            return True
    return "authentication" in error_str or "invalid api key" in error_str


def get_retry_reason(error: Exception) -> str:
    """Get a short reason for a retry (e.g., "429", "503", "timeout").

    Args:
        error: Exception that triggered retry

    Returns:
        String describing why retry is happening
    """
    status = _status_code(error)
    if status is not None:
        return str(status)

    error_str = str(error).lower()
    if "429" in error_str or "rate limit" in error_str:
        return "429"
    for code in _SERVER_STATUS_CODES:
        if code in error_str:
            return code
    if "timeout" in error_str or "timed out" in error_str:
        return "timeout"
    if "connection" in error_str:
        return "connection_error"
    return type(error).__name__
