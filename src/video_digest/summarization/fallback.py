"""Deterministic fallback article built from chunk summaries alone."""

from __future__ import annotations

from typing import Sequence

from ..schemas.article_schema import Article, ArticleSection

FALLBACK_SECTION_TITLE = "Key Points"
FALLBACK_CONCLUSION = "Please refer to the original video for full details."


def assemble_fallback_article(title_hint: str, summaries: Sequence[str]) -> Article:
    """Build a minimal schema-valid article when synthesis output is unusable.

    Args:
        title_hint: Video title
        summaries: Usable chunk summaries in index order (non-empty)

    Returns:
        Article with a single "Key Points" section

    Raises:
        ValueError: If summaries is empty or contains only blank text
    """
    content = "\n\n".join(summaries)
    if not content.strip():
        raise ValueError("Cannot assemble a fallback article without summaries")

    return Article(
        title=f"{title_hint} - Summary",
        introduction=(
            f'This is a summary of the key points discussed in the video "{title_hint}".'
        ),
        sections=[ArticleSection(title=FALLBACK_SECTION_TITLE, content=content)],
        conclusion=FALLBACK_CONCLUSION,
    )
