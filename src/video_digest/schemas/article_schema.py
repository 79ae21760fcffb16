"""Article schema and strict validation of synthesis output.

This module defines the structured article returned by the pipeline and the
validator applied to the raw text of the synthesis call:

- Trims the raw text and unwraps a surrounding Markdown code fence
- Parses JSON strictly (no repair of malformed JSON)
- Ignores keys outside the article schema
- Validates every field against the article invariants

Any parse error or invariant violation yields a failed ValidationResult; the
validator never returns a partial or guessed article.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

logger = logging.getLogger(__name__)

_CODE_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?```$", re.DOTALL | re.IGNORECASE)


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must be a non-empty string")
    return value


class ArticleSection(BaseModel):
    """One titled section of an article."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: StrictStr = Field(description="Section title")
    content: StrictStr = Field(description="Section body")

    @field_validator("title", "content")
    @classmethod
    def _non_blank(cls, value: str) -> str:
        return _require_text(value)


class Article(BaseModel):
    """Structured article synthesized from a video transcript.

    All string fields must be non-blank and ``sections`` must contain at least
    one section. Values are kept exactly as supplied.

    Attributes:
        title: Article title
        introduction: Opening paragraph
        sections: Ordered article sections
        conclusion: Closing paragraph
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: StrictStr
    introduction: StrictStr
    sections: List[ArticleSection] = Field(min_length=1)
    conclusion: StrictStr

    @field_validator("title", "introduction", "conclusion")
    @classmethod
    def _non_blank(cls, value: str) -> str:
        return _require_text(value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert article to a JSON-compatible dictionary."""
        return self.model_dump(mode="json")

    def to_markdown(self) -> str:
        """Render the article as Markdown."""
        parts = [f"# {self.title}", self.introduction]
        for section in self.sections:
            parts.append(f"## {section.title}\n\n{section.content}")
        parts.append(f"## Conclusion\n\n{self.conclusion}")
        return "\n\n".join(parts) + "\n"


@dataclass
class ValidationResult:
    """Result of validating raw synthesis output."""

    article: Optional[Article]
    success: bool
    error: Optional[str] = None


def _unwrap_code_fence(text: str) -> str:
    match = _CODE_FENCE_PATTERN.match(text)
    if match:
        return match.group(1).strip()
    return text


def _format_validation_error(exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "<root>"
        problems.append(f"{location}: {err.get('msg')}")
    return "; ".join(problems)


def validate_article_output(raw_text: Optional[str]) -> ValidationResult:
    """Parse and schema-check the raw text returned by the synthesis call.

    A surrounding Markdown code fence is unwrapped before parsing. Keys outside
    the article schema are ignored, so the returned Article equals the parsed
    object only when the object carries no extra keys. Values are never coerced
    or repaired.

    Args:
        raw_text: Raw response text

    Returns:
        ValidationResult with the article on success, or the failure reason
    """
    if raw_text is None or not raw_text.strip():
        return ValidationResult(article=None, success=False, error="Empty article text")

    text = _unwrap_code_fence(raw_text.strip())

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        return ValidationResult(article=None, success=False, error=f"Invalid JSON: {exc}")

    if not isinstance(data, dict):
        return ValidationResult(
            article=None,
            success=False,
            error=f"Expected a JSON object, got {type(data).__name__}",
        )

    try:
        article = Article.model_validate(data)
    except ValidationError as exc:
        return ValidationResult(
            article=None, success=False, error=f"Schema violation: {_format_validation_error(exc)}"
        )

    logger.debug("Article output validated (%d sections)", len(article.sections))
    return ValidationResult(article=article, success=True)
