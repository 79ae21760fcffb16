"""Shared fixtures and test utilities for video_digest tests.

This module contains:
- Test constants
- Helper functions for creating test objects
- Deterministic fakes for the generation service and the YouTube sources
- Fixtures isolating tests from the caller's environment

Test modules import the helpers directly (``from conftest import ...``).
"""

from __future__ import annotations

import asyncio
import json
import re
from typing import Any, Callable, List, Optional, Union

import pytest

from video_digest import config
from video_digest.models import TranscriptSegment, VideoMetadata
from video_digest.providers.base import GenerationRequest

# Test constants
TEST_VIDEO_ID = "dQw4w9WgXcQ"
TEST_VIDEO_TITLE = "How Rivers Shape Valleys"
TEST_API_KEY = "test-api-key"
TEST_YOUTUBE_KEY = "test-youtube-key"

VALID_ARTICLE = {
    "title": "How Rivers Shape Valleys",
    "introduction": "Rivers carve the land over millions of years.",
    "sections": [
        {"title": "Erosion", "content": "Water wears rock away grain by grain."},
        {"title": "Deposition", "content": "Slow water drops sediment on the plain."},
        {"title": "Meanders", "content": "Bends migrate as banks erode and build."},
    ],
    "conclusion": "Valleys record the long work of moving water.",
}
VALID_ARTICLE_JSON = json.dumps(VALID_ARTICLE)

_ENV_VARS = (
    "GROQ_API_KEY",
    "OPENAI_API_KEY",
    "GENERATION_API_BASE",
    "YOUTUBE_API_KEY",
    "LOG_LEVEL",
    "LOG_FILE",
    "PROMPT_DIR",
)

_PART_PATTERN = re.compile(r"\(Part (\d+) of (\d+)\)")

Response = Union[str, Exception, Callable[[GenerationRequest], str]]


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    """Keep developer credentials and log settings out of every test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# Test helper functions
def make_words(count: int, prefix: str = "w") -> str:
    """Return ``count`` distinct words: "w0 w1 w2 ..."."""
    return " ".join(f"{prefix}{i}" for i in range(count))


def make_segments(text: str, words_per_segment: int = 10) -> List[TranscriptSegment]:
    """Split text into consecutive 2-second transcript segments."""
    words = text.split()
    segments = []
    for position, start in enumerate(range(0, len(words), words_per_segment)):
        segments.append(
            TranscriptSegment(
                text=" ".join(words[start : start + words_per_segment]),
                offset_ms=position * 2000,
                duration_ms=2000,
            )
        )
    return segments


def create_test_config(**overrides: Any) -> config.Config:
    """Create a Config with a fake API key, no retries and short timeouts."""
    defaults: dict = {
        "generation_api_key": TEST_API_KEY,
        "max_retries": 0,
        "request_timeout_seconds": 5.0,
    }
    defaults.update(overrides)
    return config.Config(**defaults)


def part_number(request: GenerationRequest) -> int:
    """Return the 1-based part number a chunk request was built for."""
    match = _PART_PATTERN.search(request.user_prompt)
    if match is None:
        raise AssertionError(f"Not a chunk request: {request.user_prompt[:80]}")
    return int(match.group(1))


def default_chunk_summary(request: GenerationRequest) -> str:
    chunk_text = request.user_prompt.split("Transcript section:\n", 1)[1]
    return f"Part {part_number(request)} opens with {chunk_text.split()[0]}"


class FakeGenerationService:
    """Deterministic GenerationService.

    Chunk requests ("text") and synthesis requests ("json_object") get separate
    responses. A response may be a string, an exception instance to raise, or a
    callable receiving the request. Tracks every request and the highest number
    of concurrent calls.
    """

    def __init__(
        self,
        chunk_response: Response = default_chunk_summary,
        synthesis_response: Response = VALID_ARTICLE_JSON,
        delay: float = 0.0,
    ):
        self.chunk_response = chunk_response
        self.synthesis_response = synthesis_response
        self.delay = delay
        self.requests: List[GenerationRequest] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    @property
    def name(self) -> str:
        return "Fake"

    @property
    def chunk_requests(self) -> List[GenerationRequest]:
        return [r for r in self.requests if r.response_format == "text"]

    @property
    def synthesis_requests(self) -> List[GenerationRequest]:
        return [r for r in self.requests if r.response_format == "json_object"]

    async def generate(self, request: GenerationRequest) -> str:
        self.requests.append(request)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            response = (
                self.synthesis_response
                if request.response_format == "json_object"
                else self.chunk_response
            )
            if isinstance(response, Exception):
                raise response
            if callable(response):
                return response(request)
            return response
        finally:
            self.in_flight -= 1

    async def aclose(self) -> None:
        self.closed = True


class FakeTranscriptSource:
    """TranscriptSource returning fixed segments or raising a fixed error."""

    def __init__(
        self,
        segments: Optional[List[TranscriptSegment]] = None,
        error: Optional[Exception] = None,
    ):
        self.segments = segments or []
        self.error = error
        self.calls: List[str] = []

    async def fetch_segments(self, video_id: str) -> List[TranscriptSegment]:
        self.calls.append(video_id)
        if self.error is not None:
            raise self.error
        return list(self.segments)


class FakeMetadataSource:
    """MetadataSource returning fixed metadata or raising a fixed error."""

    def __init__(self, title: Optional[str] = TEST_VIDEO_TITLE, error: Optional[Exception] = None):
        self.title = title
        self.error = error
        self.calls: List[str] = []

    async def fetch_metadata(self, video_id: str) -> Optional[VideoMetadata]:
        self.calls.append(video_id)
        if self.error is not None:
            raise self.error
        if self.title is None:
            return None
        return VideoMetadata(video_id=video_id, title=self.title)


@pytest.fixture
def test_config() -> config.Config:
    return create_test_config()


@pytest.fixture
def fake_service() -> FakeGenerationService:
    return FakeGenerationService()
