from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class TranscriptSegment:
    """One timed caption line from a video transcript.

    Attributes:
        text: Caption text.
        offset_ms: Start of the segment from the beginning of the video, in milliseconds.
        duration_ms: Segment duration in milliseconds.

    Example:
        >>> TranscriptSegment(text="hello world", offset_ms=1200, duration_ms=1800)
    """

    text: str
    offset_ms: int
    duration_ms: int


@dataclass(frozen=True)
class VideoMetadata:
    """Video details returned by the metadata source.

    Attributes:
        video_id: YouTube video identifier.
        title: Video title.
        channel_title: Channel name, if reported.
        published_at: ISO-8601 publish timestamp, if reported.
    """

    video_id: str
    title: str
    channel_title: Optional[str] = None
    published_at: Optional[str] = None


@dataclass(frozen=True)
class Chunk:
    """A bounded, word-count-limited slice of a transcript.

    Attributes:
        index: 0-based position; defines processing and reassembly order.
        text: Chunk words joined by single spaces.
        word_count: Number of words in ``text``.
    """

    index: int
    text: str
    word_count: int


class ChunkStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"


@dataclass(frozen=True)
class ChunkResult:
    """Outcome of summarizing one chunk.

    Attributes:
        index: Index of the summarized chunk.
        status: OK or FAILED.
        summary_text: Summary text; empty when the call failed.
        error_detail: Short failure description ("timeout", exception text, ...).
    """

    index: int
    status: ChunkStatus
    summary_text: str = ""
    error_detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is ChunkStatus.OK

    @classmethod
    def success(cls, index: int, summary_text: str) -> "ChunkResult":
        return cls(index=index, status=ChunkStatus.OK, summary_text=summary_text)

    @classmethod
    def failure(cls, index: int, error_detail: str) -> "ChunkResult":
        return cls(index=index, status=ChunkStatus.FAILED, error_detail=error_detail)
