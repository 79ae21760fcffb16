"""Text chunking utilities for summarization.

This module splits a transcript into consecutive, non-overlapping word windows
for the chunk-summarize-synthesize workflow. Word counting is a whitespace
split; no language-aware tokenization is attempted.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from ..config_constants import DEFAULT_CHUNK_SIZE, DEFAULT_MAX_CHUNKS
from ..exceptions import EmptyInputError
from ..models import Chunk, TranscriptSegment

logger = logging.getLogger(__name__)


def join_segments(segments: Iterable[TranscriptSegment]) -> str:
    """Join segment text with single spaces, in segment order."""
    return " ".join(segment.text for segment in segments)


def count_words(text: str) -> int:
    """Count whitespace-delimited words in ``text``."""
    return len(text.split())


def chunk_transcript(
    text: str,
    unit_size: int = DEFAULT_CHUNK_SIZE,
    max_units: int = DEFAULT_MAX_CHUNKS,
) -> List[Chunk]:
    """Split text into at most ``max_units`` chunks of ``unit_size`` words.

    Words beyond ``unit_size * max_units`` are dropped. Joining the chunk texts
    with spaces reproduces the original word sequence whenever nothing was dropped.

    Args:
        text: Input text
        unit_size: Words per chunk
        max_units: Maximum number of chunks

    Returns:
        Chunks with contiguous indices starting at 0

    Raises:
        ValueError: If unit_size or max_units is not positive
        EmptyInputError: If text contains no words
    """
    if unit_size <= 0:
        raise ValueError(f"unit_size must be positive, got: {unit_size}")
    if max_units <= 0:
        raise ValueError(f"max_units must be positive, got: {max_units}")

    words = text.split()
    if not words:
        raise EmptyInputError("Transcript too short to process: no words found")

    chunks: List[Chunk] = []
    for start in range(0, len(words), unit_size):
        if len(chunks) >= max_units:
            logger.warning(
                "Reached max chunks (%d); dropping the last %d of %d words",
                max_units,
                len(words) - start,
                len(words),
            )
            break
        window = words[start : start + unit_size]
        chunks.append(Chunk(index=len(chunks), text=" ".join(window), word_count=len(window)))

    logger.debug(
        "Chunked %d words into %d chunks (unit_size=%d, max_units=%d)",
        len(words),
        len(chunks),
        unit_size,
        max_units,
    )
    return chunks
