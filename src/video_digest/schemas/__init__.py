"""Schemas package for video_digest.

This package contains the article model and the validator for synthesis output.
"""

from .article_schema import (
    Article,
    ArticleSection,
    validate_article_output,
    ValidationResult,
)

__all__ = [
    "Article",
    "ArticleSection",
    "ValidationResult",
    "validate_article_output",
]
