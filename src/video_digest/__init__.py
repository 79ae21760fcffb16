"""Video Digest - Turn YouTube video transcripts into structured articles.

The pipeline fetches a transcript, splits it into word-window chunks,
summarizes the chunks concurrently, and synthesizes one JSON article from the
summaries. Unusable synthesis output is replaced by a deterministic fallback
article built from the chunk summaries.

Programmatic API Example:
    >>> import asyncio
    >>> import video_digest
    >>> from video_digest.providers import create_generation_service
    >>> from video_digest.sources import YouTubeMetadataSource, YouTubeTranscriptSource
    >>>
    >>> cfg = video_digest.Config(max_chunks=3)
    >>> article = asyncio.run(
    ...     video_digest.produce_article(
    ...         "dQw4w9WgXcQ",
    ...         YouTubeTranscriptSource(),
    ...         YouTubeMetadataSource(cfg.youtube_api_key),
    ...         create_generation_service(cfg),
    ...         cfg,
    ...     )
    ... )
    >>> print(article.title)

Service API Example:
    >>> from video_digest import service
    >>> result = service.run_from_config_file("config.yaml", "dQw4w9WgXcQ")
    >>> if not result.success:
    ...     print(f"Error ({result.http_status}): {result.error}")

CLI Usage:
    $ video-digest dQw4w9WgXcQ --format markdown
    $ python -m video_digest https://youtu.be/dQw4w9WgXcQ --config config.yaml
"""

from __future__ import annotations

from .config import Config, load_config_file
from .pipeline import PipelineOrchestrator, produce_article
from .schemas.article_schema import Article, ArticleSection

__all__ = [
    "Article",
    "ArticleSection",
    "Config",
    "PipelineOrchestrator",
    "load_config_file",
    "produce_article",
    "__version__",
]
# Note: 'cli' and 'service' are available via __getattr__ for lazy loading
__version__ = "1.0.0"

_import_cache: dict[str, object] = {}


def __getattr__(name: str):
    if name in _import_cache:
        return _import_cache[name]

    if name in ("cli", "service"):
        import importlib

        module = importlib.import_module(f"{__name__}.{name}")
        _import_cache[name] = module
        return module
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
