"""Article synthesis from usable chunk summaries.

A single generation request asks the service for a JSON article built from
every usable chunk summary. Each summary keeps the part number of its original
chunk so a gap left by a failed chunk remains visible to the model.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

from ..config_constants import DEFAULT_SYNTHESIS_TEMPERATURE
from ..exceptions import SynthesisCallFailure
from ..models import ChunkResult
from ..prompts import render_prompt
from ..providers.base import GenerationRequest, GenerationService

logger = logging.getLogger(__name__)

ARTICLE_SYSTEM_PROMPT = "article/system_v1"
ARTICLE_USER_PROMPT = "article/user_v1"
SECTIONS_MIN = 3
SECTIONS_MAX = 5


def build_synthesis_request(
    title_hint: str,
    summaries: Sequence[ChunkResult],
    model: str,
    temperature: float = DEFAULT_SYNTHESIS_TEMPERATURE,
    max_tokens: Optional[int] = None,
) -> GenerationRequest:
    """Build the JSON-only article synthesis request.

    Args:
        title_hint: Video title used to steer the article title
        summaries: Usable chunk results in index order
        model: Model identifier
        temperature: Sampling temperature
        max_tokens: Optional completion token cap

    Returns:
        GenerationRequest with response_format "json_object"
    """
    parts = [
        {"number": result.index + 1, "summary": result.summary_text} for result in summaries
    ]
    return GenerationRequest(
        model=model,
        system_prompt=render_prompt(
            ARTICLE_SYSTEM_PROMPT, sections_min=SECTIONS_MIN, sections_max=SECTIONS_MAX
        ),
        user_prompt=render_prompt(
            ARTICLE_USER_PROMPT,
            title=title_hint,
            parts=parts,
            sections_min=SECTIONS_MIN,
            sections_max=SECTIONS_MAX,
        ),
        temperature=temperature,
        response_format="json_object",
        max_tokens=max_tokens,
    )


async def synthesize_article(
    title_hint: str,
    summaries: Sequence[ChunkResult],
    service: GenerationService,
    model: str,
    temperature: float = DEFAULT_SYNTHESIS_TEMPERATURE,
    timeout: Optional[float] = None,
    max_tokens: Optional[int] = None,
    video_id: Optional[str] = None,
) -> str:
    """Request the structured article and return the raw response text.

    Args:
        title_hint: Video title
        summaries: Usable chunk results in index order
        service: Generation service
        model: Model identifier
        temperature: Sampling temperature
        timeout: Call timeout in seconds (None disables the timeout)
        max_tokens: Optional completion token cap
        video_id: Video being processed (for error context)

    Returns:
        Raw, unvalidated response text

    Raises:
        SynthesisCallFailure: If the call fails, times out or returns no content
    """
    request = build_synthesis_request(title_hint, summaries, model, temperature, max_tokens)
    logger.info("Generating final article structure from %d summaries...", len(summaries))
    try:
        raw_text = await asyncio.wait_for(service.generate(request), timeout=timeout)
    except asyncio.TimeoutError as exc:
        raise SynthesisCallFailure(
            f"Article synthesis timed out after {timeout}s", video_id=video_id
        ) from exc
    except Exception as exc:
        raise SynthesisCallFailure(
            f"Failed to generate the final article structure: {exc}", video_id=video_id
        ) from exc

    if not raw_text or not raw_text.strip():
        raise SynthesisCallFailure(
            "Generation service did not return content for the final article",
            video_id=video_id,
        )
    return raw_text
