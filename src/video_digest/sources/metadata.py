"""Video metadata retrieval from the YouTube Data API v3."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from .. import config_constants
from ..exceptions import UpstreamFetchError
from ..models import VideoMetadata

logger = logging.getLogger(__name__)


class YouTubeMetadataSource:
    """Metadata source calling the ``videos?part=snippet`` endpoint.

    Without an API key the source reports no metadata and the pipeline falls
    back to a placeholder title.
    """

    def __init__(
        self,
        api_key: Optional[str],
        timeout: float = config_constants.DEFAULT_METADATA_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    async def fetch_metadata(self, video_id: str) -> Optional[VideoMetadata]:
        """Fetch title and channel details for a video.

        Args:
            video_id: YouTube video identifier

        Returns:
            VideoMetadata, or None if no API key is configured or the video has no snippet

        Raises:
            UpstreamFetchError: If the HTTP call fails or returns an error status
        """
        if not self.api_key:
            logger.warning("YouTube API key is not configured; skipping metadata lookup")
            return None
        return await asyncio.to_thread(self._fetch_blocking, video_id)

    def _fetch_blocking(self, video_id: str) -> Optional[VideoMetadata]:
        params = {"part": "snippet", "id": video_id, "key": self.api_key}
        try:
            response = self.session.get(
                config_constants.YOUTUBE_VIDEOS_ENDPOINT, params=params, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise UpstreamFetchError(
                f"Failed to fetch video details: {exc}", video_id=video_id
            ) from exc

        if not response.ok:
            raise UpstreamFetchError(
                _error_message(response) or f"Failed to fetch video details: {response.reason}",
                video_id=video_id,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamFetchError(
                f"Invalid video details response: {exc}", video_id=video_id
            ) from exc

        items = payload.get("items") or []
        snippet: Dict[str, Any] = (items[0].get("snippet") or {}) if items else {}
        title = snippet.get("title")
        if not title:
            logger.debug("No snippet title returned for video %s", video_id)
            return None
        return VideoMetadata(
            video_id=video_id,
            title=title,
            channel_title=snippet.get("channelTitle"),
            published_at=snippet.get("publishedAt"),
        )


def _error_message(response: requests.Response) -> Optional[str]:
    try:
        payload = response.json()
    except ValueError:
        return None
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict):
        return error.get("message")
    return None
