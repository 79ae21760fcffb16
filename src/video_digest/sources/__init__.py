"""Collaborators that supply transcript text and video metadata.

This package contains:
- base.py: TranscriptSource / MetadataSource protocols and parse_video_id()
- transcript.py: YouTube captions via youtube-transcript-api
- metadata.py: YouTube Data API v3 video details via requests
"""

from .base import MetadataSource, parse_video_id, TranscriptSource
from .metadata import YouTubeMetadataSource
from .transcript import YouTubeTranscriptSource

__all__ = [
    "MetadataSource",
    "TranscriptSource",
    "YouTubeMetadataSource",
    "YouTubeTranscriptSource",
    "parse_video_id",
]
