"""Transcript-to-article pipeline orchestration.

The orchestrator sequences the pipeline stages and owns the error taxonomy:

    IDLE -> FETCHING -> CHUNKING -> SUMMARIZING -> GATING -> SYNTHESIZING
         -> VALIDATING -> DONE
                       -> FALLING_BACK -> DONE
    (any stage) -> FAILED

It is the only component that raises to the caller. Inner stages convert
their failures into typed results (ChunkResult, ValidationResult) or typed
PipelineErrors before crossing a stage boundary. The returned article comes
either from validated synthesis output or from the fallback assembler.

Cancelling the task running the pipeline cancels every in-flight generation
call; asyncio.CancelledError propagates and no partial result is returned.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from . import config
from .exceptions import EmptyInputError, EmptyTranscriptError, PipelineError, UpstreamFetchError
from .models import ChunkResult, TranscriptSegment
from .prompts import get_prompt_metadata
from .providers.base import GenerationService
from .schemas.article_schema import Article, validate_article_output
from .sources.base import MetadataSource, TranscriptSource
from .summarization.chunk_summarizer import (
    CHUNK_SYSTEM_PROMPT,
    CHUNK_USER_PROMPT,
    summarize_chunks,
)
from .summarization.chunking import chunk_transcript, count_words, join_segments
from .summarization.fallback import assemble_fallback_article
from .summarization.gate import gate_chunk_results
from .summarization.synthesis import (
    ARTICLE_SYSTEM_PROMPT,
    ARTICLE_USER_PROMPT,
    synthesize_article,
)

logger = logging.getLogger(__name__)

PROMPT_NAMES = (
    CHUNK_SYSTEM_PROMPT,
    CHUNK_USER_PROMPT,
    ARTICLE_SYSTEM_PROMPT,
    ARTICLE_USER_PROMPT,
)


class PipelineState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    CHUNKING = "chunking"
    SUMMARIZING = "summarizing"
    GATING = "gating"
    SYNTHESIZING = "synthesizing"
    VALIDATING = "validating"
    FALLING_BACK = "falling_back"
    DONE = "done"
    FAILED = "failed"


def placeholder_title(video_id: str) -> str:
    """Title used when video metadata is unavailable."""
    return f"Video {video_id}"


@dataclass
class PipelineResult:
    """Outcome of a successful pipeline run.

    Attributes:
        article: The produced article
        video_id: Processed video
        video_title: Title hint used for synthesis (placeholder if metadata was missing)
        chunk_results: Per-chunk outcomes in index order
        truncated: True if transcript words beyond the chunk limit were dropped
        used_fallback: True if the article came from the fallback assembler
        validation_error: Why synthesis output was rejected, when it was
        prompts: Name, file and SHA256 of every prompt template used
    """

    article: Article
    video_id: str
    video_title: str
    chunk_results: List[ChunkResult] = field(default_factory=list)
    truncated: bool = False
    used_fallback: bool = False
    validation_error: Optional[str] = None
    prompts: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def chunk_count(self) -> int:
        return len(self.chunk_results)

    @property
    def failed_chunks(self) -> int:
        return sum(1 for result in self.chunk_results if not result.ok)


class PipelineOrchestrator:
    """Runs the chunk-summarize-synthesize pipeline for one video at a time.

    All collaborators are injected: the orchestrator never builds network
    clients itself.
    """

    def __init__(
        self,
        cfg: config.Config,
        transcript_source: TranscriptSource,
        metadata_source: Optional[MetadataSource],
        generation_service: GenerationService,
    ):
        self.cfg = cfg
        self.transcript_source = transcript_source
        self.metadata_source = metadata_source
        self.generation_service = generation_service
        self.state = PipelineState.IDLE

    def _transition(self, state: PipelineState) -> None:
        logger.debug("Pipeline state: %s -> %s", self.state.value, state.value)
        self.state = state

    async def run(self, video_id: str) -> PipelineResult:
        """Produce an article for a video.

        Args:
            video_id: YouTube video identifier

        Returns:
            PipelineResult holding the article and run diagnostics

        Raises:
            EmptyTranscriptError: Transcript missing or blank
            UpstreamFetchError: Transcript retrieval failed
            AllChunksFailedError: No chunk summary succeeded
            SynthesisCallFailure: The synthesis call failed
            asyncio.CancelledError: The caller cancelled the run
        """
        self.state = PipelineState.IDLE
        try:
            result = await self._run(video_id)
        except PipelineError as exc:
            self._transition(PipelineState.FAILED)
            logger.error(
                "Pipeline failed for video %s (%s): %s", video_id, exc.kind.value, exc.message
            )
            raise
        except asyncio.CancelledError:
            self._transition(PipelineState.FAILED)
            logger.warning("Pipeline cancelled for video %s", video_id)
            raise
        self._transition(PipelineState.DONE)
        return result

    async def _run(self, video_id: str) -> PipelineResult:
        self._transition(PipelineState.FETCHING)
        segments = await self._fetch_segments(video_id)
        transcript_text = join_segments(segments)
        if not transcript_text.strip():
            logger.warning("No transcript text available for video %s", video_id)
            raise EmptyTranscriptError(
                "No transcript text available for this video", video_id=video_id
            )
        title = await self._resolve_title(video_id)

        self._transition(PipelineState.CHUNKING)
        try:
            chunks = chunk_transcript(transcript_text, self.cfg.chunk_size, self.cfg.max_chunks)
        except EmptyInputError as exc:
            raise EmptyTranscriptError(str(exc), video_id=video_id) from exc
        truncated = sum(chunk.word_count for chunk in chunks) < count_words(transcript_text)
        logger.info("Processing %d chunks for video %s", len(chunks), video_id)

        self._transition(PipelineState.SUMMARIZING)
        chunk_results = await summarize_chunks(
            chunks,
            self.generation_service,
            model=self.cfg.chunk_model,
            concurrency_limit=self.cfg.concurrency_limit,
            temperature=self.cfg.chunk_temperature,
            timeout=self.cfg.generation_deadline_seconds,
        )

        self._transition(PipelineState.GATING)
        usable = gate_chunk_results(chunk_results, video_id=video_id)

        self._transition(PipelineState.SYNTHESIZING)
        raw_text = await synthesize_article(
            title,
            usable,
            self.generation_service,
            model=self.cfg.synthesis_model,
            temperature=self.cfg.synthesis_temperature,
            timeout=self.cfg.generation_deadline_seconds,
            max_tokens=self.cfg.synthesis_max_tokens,
            video_id=video_id,
        )

        self._transition(PipelineState.VALIDATING)
        validation = validate_article_output(raw_text)
        if validation.success and validation.article is not None:
            logger.info("Successfully generated and parsed article for video %s", video_id)
            article = validation.article
            used_fallback = False
        else:
            self._transition(PipelineState.FALLING_BACK)
            logger.warning(
                "Article output rejected for video %s (%s); using fallback article",
                video_id,
                validation.error,
            )
            logger.debug("Raw synthesis response: %s", raw_text)
            article = assemble_fallback_article(title, [r.summary_text for r in usable])
            used_fallback = True

        return PipelineResult(
            article=article,
            video_id=video_id,
            video_title=title,
            chunk_results=list(chunk_results),
            truncated=truncated,
            used_fallback=used_fallback,
            validation_error=validation.error,
            prompts=[get_prompt_metadata(name) for name in PROMPT_NAMES],
        )

    async def _fetch_segments(self, video_id: str) -> List[TranscriptSegment]:
        try:
            return list(await self.transcript_source.fetch_segments(video_id))
        except PipelineError:
            raise
        except Exception as exc:
            raise UpstreamFetchError(
                f"Failed to fetch transcript: {exc}", video_id=video_id
            ) from exc

    async def _resolve_title(self, video_id: str) -> str:
        """Return the video title, or the placeholder if metadata is unavailable."""
        if self.metadata_source is None:
            return placeholder_title(video_id)
        try:
            metadata = await self.metadata_source.fetch_metadata(video_id)
        except Exception as exc:
            logger.warning("Video details fetch failed for %s: %s", video_id, exc)
            return placeholder_title(video_id)
        if metadata is None or not metadata.title.strip():
            return placeholder_title(video_id)
        return metadata.title


async def produce_article(
    video_id: str,
    transcript_source: TranscriptSource,
    metadata_source: Optional[MetadataSource],
    generation_service: GenerationService,
    cfg: config.Config,
) -> Article:
    """Produce a structured article for a video.

    Args:
        video_id: YouTube video identifier
        transcript_source: Supplies transcript segments
        metadata_source: Supplies the video title (optional)
        generation_service: Text-generation capability
        cfg: Pipeline configuration

    Returns:
        Schema-valid Article

    Raises:
        PipelineError: One typed fatal error (see PipelineOrchestrator.run)
        asyncio.CancelledError: The caller cancelled the run
    """
    orchestrator = PipelineOrchestrator(cfg, transcript_source, metadata_source, generation_service)
    result = await orchestrator.run(video_id)
    return result.article
