"""TranscriptSource / MetadataSource protocols and video id parsing."""

from __future__ import annotations

import re
from typing import List, Optional, Protocol, runtime_checkable
from urllib.parse import parse_qs, urlparse

from ..models import TranscriptSegment, VideoMetadata

_VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")
_PATH_PREFIXES = ("/shorts/", "/embed/", "/live/", "/v/")


@runtime_checkable
class TranscriptSource(Protocol):
    async def fetch_segments(self, video_id: str) -> List[TranscriptSegment]: ...


@runtime_checkable
class MetadataSource(Protocol):
    async def fetch_metadata(self, video_id: str) -> Optional[VideoMetadata]: ...


def parse_video_id(value: str) -> str:
    """Extract a YouTube video id from a raw id or a watch/share URL.

    Args:
        value: Video id, ``youtube.com/watch?v=...``, ``youtu.be/...``,
            ``/shorts/...`` or ``/embed/...`` URL

    Returns:
        The 11-character video id

    Raises:
        ValueError: If no video id can be found
    """
    candidate = (value or "").strip()
    if not candidate:
        raise ValueError("Video ID is required")
    if _VIDEO_ID_PATTERN.match(candidate):
        return candidate

    parsed = urlparse(candidate if "://" in candidate else f"https://{candidate}")
    host = (parsed.hostname or "").lower()
    found: Optional[str] = None
    if host.endswith("youtu.be"):
        found = parsed.path.lstrip("/").split("/")[0]
    elif host.endswith("youtube.com"):
        if parsed.path == "/watch":
            found = (parse_qs(parsed.query).get("v") or [""])[0]
        else:
            for prefix in _PATH_PREFIXES:
                if parsed.path.startswith(prefix):
                    found = parsed.path[len(prefix) :].split("/")[0]
                    break

    if found and _VIDEO_ID_PATTERN.match(found):
        return found
    raise ValueError(f"Could not extract a YouTube video ID from: {value}")
