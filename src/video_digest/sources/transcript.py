"""Transcript retrieval from YouTube captions.

Uses youtube-transcript-api to fetch caption segments and converts them to
TranscriptSegment objects (milliseconds). The library is blocking, so the
fetch runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence

from youtube_transcript_api import (
    NoTranscriptFound,
    TranscriptsDisabled,
    VideoUnavailable,
    YouTubeTranscriptApi,
)

from ..exceptions import TranscriptUnavailableError, UpstreamFetchError
from ..models import TranscriptSegment

logger = logging.getLogger(__name__)


class YouTubeTranscriptSource:
    """Transcript source backed by YouTube captions."""

    def __init__(
        self,
        languages: Optional[Sequence[str]] = None,
        api: Optional[YouTubeTranscriptApi] = None,
    ):
        self.languages = list(languages or ["en"])
        self.api = api or YouTubeTranscriptApi()

    async def fetch_segments(self, video_id: str) -> List[TranscriptSegment]:
        """Fetch the ordered caption segments of a video.

        Args:
            video_id: YouTube video identifier

        Returns:
            Segments ordered by offset (may be empty for an empty transcript)

        Raises:
            TranscriptUnavailableError: Transcript disabled, missing, or video unavailable
            UpstreamFetchError: Any other retrieval failure
        """
        logger.info("Fetching transcript for video %s", video_id)
        segments = await asyncio.to_thread(self._fetch_blocking, video_id)
        logger.info("Fetched transcript for video %s (%d segments)", video_id, len(segments))
        return segments

    def _fetch_blocking(self, video_id: str) -> List[TranscriptSegment]:
        try:
            fetched = self.api.fetch(video_id, languages=self.languages)
        except TranscriptsDisabled as exc:
            raise TranscriptUnavailableError(
                "Transcript is disabled or unavailable for this video.",
                reason="disabled",
                video_id=video_id,
            ) from exc
        except NoTranscriptFound as exc:
            raise TranscriptUnavailableError(
                "Transcript is disabled or unavailable for this video.",
                reason="not_found",
                video_id=video_id,
            ) from exc
        except VideoUnavailable as exc:
            raise TranscriptUnavailableError(
                "The video is unavailable.", reason="video_unavailable", video_id=video_id
            ) from exc
        except Exception as exc:
            raise UpstreamFetchError(
                f"Failed to fetch transcript: {exc}", video_id=video_id
            ) from exc

        segments = [
            TranscriptSegment(
                text=snippet.text,
                offset_ms=int(round(snippet.start * 1000)),
                duration_ms=int(round(snippet.duration * 1000)),
            )
            for snippet in fetched
        ]
        return sorted(segments, key=lambda segment: segment.offset_ms)
