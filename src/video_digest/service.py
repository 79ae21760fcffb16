"""Service API for programmatic use of video_digest.

This module wraps the async pipeline in a synchronous, non-interactive
interface suitable for daemons, job runners and web handlers.

The service API is designed to:
- Build real collaborators (YouTube sources, generation service) from Config
- Translate pipeline errors into a structured result with an HTTP status
- Release network clients after every run

Example:
    >>> from video_digest import service, config
    >>>
    >>> cfg = config.Config(**config.load_config_file("config.yaml"))
    >>> result = service.run(cfg, "dQw4w9WgXcQ")
    >>> if result.success:
    ...     print(result.article.to_markdown())
    ... else:
    ...     print(f"Error ({result.http_status}): {result.error}")
"""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import __version__, config
from .exceptions import PipelineError, ProviderError
from .pipeline import PipelineOrchestrator, PipelineResult
from .providers.base import GenerationService
from .providers.factory import create_generation_service
from .schemas.article_schema import Article
from .sources.base import MetadataSource, TranscriptSource, parse_video_id
from .sources.metadata import YouTubeMetadataSource
from .sources.transcript import YouTubeTranscriptSource
from .utils.log_config import apply_log_level

logger = logging.getLogger(__name__)


@dataclass
class ServiceResult:
    """Result of a service run.

    Attributes:
        success: Whether an article was produced
        video_id: Resolved video id (None if the input could not be parsed)
        article: Produced article if success is True
        video_title: Title hint used for synthesis
        error: Error message if success is False, None otherwise
        error_kind: ErrorKind value of a pipeline error
        http_status: Status a web layer would answer with
        truncated: True if transcript words beyond the chunk limit were dropped
        used_fallback: True if the article came from the fallback assembler
    """

    success: bool
    video_id: Optional[str] = None
    article: Optional[Article] = None
    video_title: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    http_status: int = 200
    truncated: bool = False
    used_fallback: bool = False

    @classmethod
    def from_pipeline_result(cls, result: PipelineResult) -> "ServiceResult":
        return cls(
            success=True,
            video_id=result.video_id,
            article=result.article,
            video_title=result.video_title,
            truncated=result.truncated,
            used_fallback=result.used_fallback,
        )


async def _run_pipeline(
    cfg: config.Config,
    video_id: str,
    transcript_source: Optional[TranscriptSource],
    metadata_source: Optional[MetadataSource],
    generation_service: Optional[GenerationService],
) -> PipelineResult:
    owns_service = generation_service is None
    service = generation_service or create_generation_service(cfg)
    try:
        orchestrator = PipelineOrchestrator(
            cfg,
            transcript_source or YouTubeTranscriptSource(languages=cfg.transcript_languages),
            metadata_source
            or YouTubeMetadataSource(cfg.youtube_api_key, timeout=cfg.metadata_timeout_seconds),
            service,
        )
        return await orchestrator.run(video_id)
    finally:
        if owns_service:
            await service.aclose()


def run(
    cfg: config.Config,
    video: str,
    *,
    transcript_source: Optional[TranscriptSource] = None,
    metadata_source: Optional[MetadataSource] = None,
    generation_service: Optional[GenerationService] = None,
) -> ServiceResult:
    """Produce an article for one video with the given configuration.

    Collaborators default to the YouTube sources and the configured
    generation provider; tests and embedding applications may inject their own.

    Args:
        cfg: Configuration object
        video: Video id or YouTube URL
        transcript_source: Optional transcript source override
        metadata_source: Optional metadata source override
        generation_service: Optional generation service override (not closed by run)

    Returns:
        ServiceResult describing the article or the failure
    """
    if cfg.log_file or cfg.log_level:
        apply_log_level(level=cfg.log_level, log_file=cfg.log_file)

    try:
        video_id = parse_video_id(video)
    except ValueError as exc:
        logger.error("Invalid video reference: %s", exc)
        return ServiceResult(success=False, error=str(exc), http_status=400)

    try:
        result = asyncio.run(
            _run_pipeline(cfg, video_id, transcript_source, metadata_source, generation_service)
        )
    except PipelineError as exc:
        return ServiceResult(
            success=False,
            video_id=video_id,
            error=exc.message,
            error_kind=exc.kind.value,
            http_status=exc.http_status,
        )
    except ProviderError as exc:
        logger.error("Generation provider unavailable: %s", exc)
        return ServiceResult(success=False, video_id=video_id, error=str(exc), http_status=500)
    except Exception as exc:
        logger.error("Pipeline execution failed: %s", exc, exc_info=True)
        return ServiceResult(success=False, video_id=video_id, error=str(exc), http_status=500)

    return ServiceResult.from_pipeline_result(result)


def run_from_config_file(config_path: str | Path, video: str) -> ServiceResult:
    """Run the pipeline from a configuration file.

    Args:
        config_path: Path to configuration file (JSON or YAML)
        video: Video id or YouTube URL

    Returns:
        ServiceResult; configuration problems are reported as failures
    """
    try:
        config_dict = config.load_config_file(str(config_path))
        cfg = config.Config(**config_dict)
    except Exception as exc:
        error_msg = f"Failed to load configuration file: {exc}"
        logger.error(error_msg)
        return ServiceResult(success=False, error=error_msg, http_status=500)

    return run(cfg, video)


def main() -> int:
    """Entry point for service mode: ``python -m video_digest.service --config FILE VIDEO``.

    Prints the article as JSON on success.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    import argparse
    import json

    parser = argparse.ArgumentParser(
        description="Video Digest Service - Produce an article from a configuration file",
    )
    parser.add_argument("--config", required=True, help="Path to configuration file (JSON or YAML)")
    parser.add_argument("video", help="YouTube video id or URL")
    parser.add_argument("--version", action="version", version=f"video_digest {__version__}")
    args = parser.parse_args()

    result = run_from_config_file(args.config, args.video)
    if result.success and result.article is not None:
        print(json.dumps(result.article.to_dict(), indent=2, ensure_ascii=False))
        return 0
    print(f"Error: {result.error}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
