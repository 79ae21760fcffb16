"""Core utilities for video_digest.

This module provides:
- Retry with exponential backoff for transient generation errors
- Retryable error classification
- Root logger configuration
"""

from .log_config import apply_log_level
from .retry import retry_with_exponential_backoff
from .retryable_errors import get_retry_reason, is_retryable_error

__all__ = [
    "apply_log_level",
    "get_retry_reason",
    "is_retryable_error",
    "retry_with_exponential_backoff",
]
