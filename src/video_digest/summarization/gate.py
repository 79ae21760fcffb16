"""Selection of usable chunk summaries before synthesis."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..exceptions import AllChunksFailedError
from ..models import ChunkResult

logger = logging.getLogger(__name__)


def gate_chunk_results(
    results: Sequence[ChunkResult], video_id: Optional[str] = None
) -> List[ChunkResult]:
    """Keep successful chunk results in ascending index order.

    This is the only point where partial failure escalates to total failure:
    with no successful summary there is nothing to synthesize from.

    Args:
        results: Chunk results in any order
        video_id: Video being processed (for error context)

    Returns:
        Successful results sorted by index (never empty)

    Raises:
        AllChunksFailedError: If no result succeeded
    """
    usable = sorted((result for result in results if result.ok), key=lambda r: r.index)
    if not usable:
        logger.error("All %d chunk summaries failed", len(results))
        raise AllChunksFailedError(failed_count=len(results), video_id=video_id)

    dropped = len(results) - len(usable)
    if dropped:
        logger.warning(
            "Proceeding with %d/%d chunk summaries (%d failed)", len(usable), len(results), dropped
        )
    return usable

