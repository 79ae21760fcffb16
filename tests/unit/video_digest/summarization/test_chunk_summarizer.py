"""Unit tests for video_digest.summarization.chunk_summarizer."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from conftest import create_test_config, FakeGenerationService, part_number
from openai import APITimeoutError

from video_digest.exceptions import ProviderRuntimeError
from video_digest.models import Chunk, ChunkStatus
from video_digest.providers.openai import OpenAIGenerationService
from video_digest.summarization.chunk_summarizer import (
    build_chunk_request,
    EMPTY_RESPONSE_DETAIL,
    summarize_chunks,
    TIMEOUT_DETAIL,
)

MODEL = "test-chunk-model"


def _chunks(count: int):
    return [Chunk(index=i, text=f"chunk{i} words here", word_count=3) for i in range(count)]


def _run(chunks, service, **kwargs):
    kwargs.setdefault("model", MODEL)
    return asyncio.run(summarize_chunks(chunks, service, **kwargs))


@pytest.mark.unit
class TestBuildChunkRequest:
    """Tests for build_chunk_request."""

    def test_request_contains_part_label_and_text(self):
        request = build_chunk_request(
            Chunk(index=1, text="the middle part", word_count=3), 3, MODEL, 0.2
        )

        assert "(Part 2 of 3)" in request.user_prompt
        assert request.user_prompt.endswith("the middle part")
        assert "summarizer" in request.system_prompt
        assert request.model == MODEL
        assert request.temperature == 0.2
        assert request.response_format == "text"
        assert request.max_tokens is None


@pytest.mark.unit
class TestSummarizeChunks:
    """Tests for summarize_chunks."""

    def test_all_chunks_succeed_in_index_order(self):
        service = FakeGenerationService()

        results = _run(_chunks(4), service)

        assert [r.index for r in results] == [0, 1, 2, 3]
        assert all(r.status is ChunkStatus.OK for r in results)
        assert results[2].summary_text == "Part 3 opens with chunk2"
        assert len(service.chunk_requests) == 4

    def test_results_ordered_by_index_regardless_of_completion(self):
        """Earlier chunks finishing last does not change result order."""

        class ReverseLatencyService(FakeGenerationService):
            async def generate(self, request):
                await asyncio.sleep(0.01 * (5 - part_number(request)))
                return await super().generate(request)

        results = _run(_chunks(4), ReverseLatencyService(), concurrency_limit=4)

        assert [r.index for r in results] == [0, 1, 2, 3]
        assert [r.summary_text.split()[-1] for r in results] == [
            "chunk0",
            "chunk1",
            "chunk2",
            "chunk3",
        ]

    @pytest.mark.parametrize("limit", [1, 2, 3])
    def test_in_flight_calls_bounded_by_concurrency_limit(self, limit):
        service = FakeGenerationService(delay=0.01)

        _run(_chunks(6), service, concurrency_limit=limit)

        assert service.max_in_flight == limit

    def test_failure_is_isolated_to_its_chunk(self):
        """One failing call is recorded without affecting its siblings."""

        def respond(request):
            if part_number(request) == 2:
                raise ProviderRuntimeError("Generation failed: 500", provider="Fake")
            return f"summary {part_number(request)}"

        results = _run(_chunks(3), FakeGenerationService(chunk_response=respond))

        assert [r.status for r in results] == [
            ChunkStatus.OK,
            ChunkStatus.FAILED,
            ChunkStatus.OK,
        ]
        assert results[1].summary_text == ""
        assert "Generation failed: 500" in results[1].error_detail
        assert results[2].summary_text == "summary 3"

    def test_timeout_recorded_as_failure(self):
        service = FakeGenerationService(delay=0.5)

        results = _run(_chunks(2), service, timeout=0.01)

        assert all(r.status is ChunkStatus.FAILED for r in results)
        assert all(r.error_detail == TIMEOUT_DETAIL for r in results)

    def test_transport_timeout_recorded_as_timeout(self):
        """A timeout reported by the SDK is recorded like a deadline timeout."""
        client = MagicMock()
        client.chat.completions.create = AsyncMock(
            side_effect=APITimeoutError(request=httpx.Request("POST", "https://example.com"))
        )
        service = OpenAIGenerationService(create_test_config(max_retries=0), client=client)

        results = _run(_chunks(2), service, timeout=5)

        assert [r.status for r in results] == [ChunkStatus.FAILED, ChunkStatus.FAILED]
        assert [r.error_detail for r in results] == [TIMEOUT_DETAIL, TIMEOUT_DETAIL]

    @pytest.mark.parametrize("response", ["", "   \n  "])
    def test_blank_response_recorded_as_failure(self, response):
        results = _run(_chunks(1), FakeGenerationService(chunk_response=response))

        assert results[0].status is ChunkStatus.FAILED
        assert results[0].error_detail == EMPTY_RESPONSE_DETAIL

    def test_summary_text_is_stripped(self):
        results = _run(_chunks(1), FakeGenerationService(chunk_response="  key facts \n"))

        assert results[0].summary_text == "key facts"

    def test_exception_without_message_uses_type_name(self):
        results = _run(_chunks(1), FakeGenerationService(chunk_response=RuntimeError()))

        assert results[0].error_detail == "RuntimeError"

    def test_model_and_temperature_forwarded(self):
        service = FakeGenerationService()

        _run(_chunks(2), service, model="other-model", temperature=0.7)

        assert {r.model for r in service.requests} == {"other-model"}
        assert {r.temperature for r in service.requests} == {0.7}

    def test_empty_chunk_list_returns_empty(self):
        service = FakeGenerationService()

        assert _run([], service) == []
        assert service.requests == []

    @pytest.mark.parametrize("limit", [0, -2])
    def test_non_positive_concurrency_limit_raises(self, limit):
        with pytest.raises(ValueError, match="concurrency_limit"):
            _run(_chunks(1), FakeGenerationService(), concurrency_limit=limit)

    def test_cancellation_propagates(self):
        """Cancelling the caller cancels in-flight calls instead of recording failures."""
        service = FakeGenerationService(delay=10)

        async def scenario():
            task = asyncio.create_task(summarize_chunks(_chunks(3), service, MODEL))
            await asyncio.sleep(0.01)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(scenario())
        assert service.in_flight == 0
