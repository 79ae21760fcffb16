"""Per-chunk summarization with bounded concurrency.

Each chunk gets one independent generation request. Requests run as asyncio
tasks gated by a semaphore so at most ``concurrency_limit`` calls are in
flight against the generation service. A failed, timed-out or empty call is
recorded on that chunk's ChunkResult and never affects its siblings.
Cancellation of the caller propagates to every pending and in-flight call.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Optional, Sequence

from ..config_constants import DEFAULT_CHUNK_TEMPERATURE, DEFAULT_CONCURRENCY_LIMIT
from ..exceptions import ProviderTimeoutError
from ..models import Chunk, ChunkResult
from ..prompts import render_prompt
from ..providers.base import GenerationRequest, GenerationService

logger = logging.getLogger(__name__)

CHUNK_SYSTEM_PROMPT = "chunk/system_v1"
CHUNK_USER_PROMPT = "chunk/user_v1"
TIMEOUT_DETAIL = "timeout"
EMPTY_RESPONSE_DETAIL = "empty response"


def build_chunk_request(
    chunk: Chunk,
    total_chunks: int,
    model: str,
    temperature: float = DEFAULT_CHUNK_TEMPERATURE,
) -> GenerationRequest:
    """Build the free-text summarization request for one chunk.

    Args:
        chunk: Chunk to summarize
        total_chunks: Number of chunks in the transcript (for "Part i of N")
        model: Model identifier
        temperature: Sampling temperature

    Returns:
        GenerationRequest with response_format "text"
    """
    return GenerationRequest(
        model=model,
        system_prompt=render_prompt(CHUNK_SYSTEM_PROMPT),
        user_prompt=render_prompt(
            CHUNK_USER_PROMPT,
            part_number=chunk.index + 1,
            part_count=total_chunks,
            chunk_text=chunk.text,
        ),
        temperature=temperature,
        response_format="text",
    )


async def summarize_chunks(
    chunks: Sequence[Chunk],
    service: GenerationService,
    model: str,
    concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT,
    temperature: float = DEFAULT_CHUNK_TEMPERATURE,
    timeout: Optional[float] = None,
) -> List[ChunkResult]:
    """Summarize every chunk concurrently and return results ordered by index.

    Args:
        chunks: Chunks to summarize
        service: Generation service
        model: Model identifier for chunk summaries
        concurrency_limit: Maximum number of generation calls in flight
        temperature: Sampling temperature
        timeout: Per-call timeout in seconds (None disables the timeout)

    Returns:
        One ChunkResult per chunk, sorted by chunk index

    Raises:
        ValueError: If concurrency_limit is not positive
    """
    if concurrency_limit <= 0:
        raise ValueError(f"concurrency_limit must be positive, got: {concurrency_limit}")

    total_chunks = len(chunks)
    semaphore = asyncio.Semaphore(concurrency_limit)
    start_time = time.monotonic()

    async def _summarize_chunk(chunk: Chunk) -> ChunkResult:
        async with semaphore:
            request = build_chunk_request(chunk, total_chunks, model, temperature)
            logger.debug("Summarizing chunk %d/%d...", chunk.index + 1, total_chunks)
            try:
                summary = await asyncio.wait_for(service.generate(request), timeout=timeout)
            except (asyncio.TimeoutError, TimeoutError, ProviderTimeoutError) as exc:
                logger.warning(
                    "Chunk %d/%d timed out: %s",
                    chunk.index + 1,
                    total_chunks,
                    str(exc) or f"no response after {timeout}s",
                )
                return ChunkResult.failure(chunk.index, TIMEOUT_DETAIL)
            except Exception as exc:
                logger.error("Error summarizing chunk %d/%d: %s", chunk.index + 1, total_chunks, exc)
                return ChunkResult.failure(chunk.index, str(exc) or type(exc).__name__)

        if not summary or not summary.strip():
            logger.warning("Chunk %d/%d returned an empty summary", chunk.index + 1, total_chunks)
            return ChunkResult.failure(chunk.index, EMPTY_RESPONSE_DETAIL)
        return ChunkResult.success(chunk.index, summary.strip())

    results = await asyncio.gather(*(_summarize_chunk(chunk) for chunk in chunks))

    # Completion order is arbitrary; reassemble by chunk index
    ordered = sorted(results, key=lambda result: result.index)
    failed = sum(1 for result in ordered if not result.ok)
    logger.info(
        "Summarized %d/%d chunks in %.1fs (%d failed, concurrency=%d)",
        total_chunks - failed,
        total_chunks,
        time.monotonic() - start_time,
        failed,
        concurrency_limit,
    )
    return ordered
