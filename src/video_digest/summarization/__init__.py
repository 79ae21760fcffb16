"""Chunk-summarize-synthesize stages of the article pipeline.

This package contains:
- chunking.py: Word-window transcript chunking
- chunk_summarizer.py: Bounded-concurrency per-chunk summaries
- gate.py: Selection of usable summaries
- synthesis.py: Single JSON article synthesis call
- fallback.py: Deterministic fallback article
"""

from .chunk_summarizer import build_chunk_request, summarize_chunks
from .chunking import chunk_transcript, count_words, join_segments
from .fallback import assemble_fallback_article
from .gate import gate_chunk_results
from .synthesis import build_synthesis_request, synthesize_article

__all__ = [
    "assemble_fallback_article",
    "build_chunk_request",
    "build_synthesis_request",
    "chunk_transcript",
    "count_words",
    "gate_chunk_results",
    "join_segments",
    "summarize_chunks",
    "synthesize_article",
]
