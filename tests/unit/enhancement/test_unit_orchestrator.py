# tests/unit/enhancement/test_unit_orchestrator.py — v1
"""Tests for enhancement/orchestrator.py — request lifecycle, retry, cache, batch."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, call

import pytest

from clipenhancer.cache.enhancement_cache import EnhancementCache
from clipenhancer.classification.classifier import ContextClassifier
from clipenhancer.core.models import ProviderConfig
from clipenhancer.enhancement.orchestrator import EnhancementOrchestrator
from clipenhancer.llm.errors import MESSAGE_PREFIX, EnhancementError, ErrorKind, ProviderError
from clipenhancer.llm.models import LLMResponse
from clipenhancer.logging.context import get_context

EXPECTED = "Could you check the numbers before tomorrow's meeting?"


def _response(content: str) -> LLMResponse:
    return LLMResponse(content=content, model="mock-model", provider="mock")


def _orchestrator(client, **kwargs) -> EnhancementOrchestrator:
    kwargs.setdefault("sleep", AsyncMock())
    return EnhancementOrchestrator(client=client, **kwargs)


class TestEnhance:
    @pytest.mark.asyncio
    async def test_returns_processed_output(self, mock_llm_client, sample_message):
        orch = _orchestrator(mock_llm_client)
        result = await orch.enhance(sample_message, "general")
        assert result == EXPECTED
        mock_llm_client.complete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_call_arguments(self, mock_llm_client, sample_message):
        orch = _orchestrator(mock_llm_client, temperature=0.3, max_tokens=321)
        await orch.enhance(sample_message, "agent")
        args, kwargs = mock_llm_client.complete.call_args
        messages = args[0]
        assert len(messages) == 1
        assert messages[0].role == "user"
        assert sample_message in messages[0].content
        assert kwargs["max_tokens"] == 321
        assert kwargs["temperature"] == 0.3
        assert kwargs["system"]

    @pytest.mark.asyncio
    async def test_output_is_cleaned_and_repaired(self, mock_llm_client):
        mock_llm_client.complete.return_value = _response(
            "[ENHANCED] Please send the file. 🎉\n\nNote: I made it polite."
        )
        orch = _orchestrator(mock_llm_client)
        result = await orch.enhance("send the file pls", "general")
        assert result == "Please send the file."

    @pytest.mark.asyncio
    async def test_note_reply_cached_intact(self, mock_llm_client):
        mock_llm_client.complete.return_value = _response("Note: The meeting has moved to 3 PM.")
        cache = EnhancementCache()
        orch = _orchestrator(mock_llm_client, cache=cache)
        result = await orch.enhance("note meeting moved to 3pm", "general")
        assert result == "Note: The meeting has moved to 3 PM."
        assert cache.get("note meeting moved to 3pm", "general") == result

    @pytest.mark.asyncio
    async def test_empty_text_rejected(self, mock_llm_client):
        orch = _orchestrator(mock_llm_client)
        with pytest.raises(EnhancementError) as exc_info:
            await orch.enhance("   \n", "general")
        assert exc_info.value.kind is ErrorKind.INVALID_REQUEST
        assert exc_info.value.message.startswith(MESSAGE_PREFIX)
        mock_llm_client.complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_mode(self, mock_llm_client):
        orch = _orchestrator(mock_llm_client)
        with pytest.raises(ValueError, match="Unknown enhancement mode"):
            await orch.enhance("hello", "poetry")

    @pytest.mark.asyncio
    async def test_context_cleared_afterwards(self, mock_llm_client, sample_message):
        orch = _orchestrator(mock_llm_client)
        await orch.enhance(sample_message)
        assert get_context().as_dict() == {}

    @pytest.mark.asyncio
    async def test_resolver_receives_provider_config(self, mock_llm_client, sample_message):
        resolver = MagicMock(return_value=mock_llm_client)
        config = ProviderConfig(provider="google", api_key="key")
        orch = _orchestrator(resolver)
        assert await orch.enhance(sample_message, "general", config) == EXPECTED
        resolver.assert_called_once_with(config)


class TestAnswerMode:
    @pytest.mark.asyncio
    async def test_skips_classifier_and_cache(self, mock_llm_client):
        mock_llm_client.complete.return_value = _response("[ANSWER] The capital is Paris.")
        classifier = MagicMock(spec=ContextClassifier)
        cache = EnhancementCache()
        orch = _orchestrator(mock_llm_client, classifier=classifier, cache=cache)

        result = await orch.enhance("What is the capital of France?", "answer")

        assert result == "The capital is Paris."
        classifier.classify.assert_not_called()
        assert len(cache) == 0
        assert mock_llm_client.complete.call_args.kwargs["max_tokens"] == 1000

    @pytest.mark.asyncio
    async def test_answer_with_instructions(self, mock_llm_client):
        orch = _orchestrator(mock_llm_client)
        await orch.enhance("Can we meet?", "answer", instructions="Decline politely")
        user_prompt = mock_llm_client.complete.call_args.args[0][0].content
        assert "TEXT TO RESPOND TO:\nCan we meet?" in user_prompt
        assert "Decline politely" in user_prompt


class TestRetry:
    @pytest.mark.asyncio
    async def test_rate_limit_then_success(self, mock_llm_client, sample_message):
        mock_llm_client.complete.side_effect = [
            ProviderError("slow down", status=429),
            ProviderError("slow down", status=429),
            _response(EXPECTED),
        ]
        sleep = AsyncMock()
        orch = _orchestrator(mock_llm_client, sleep=sleep)
        assert await orch.enhance(sample_message) == EXPECTED
        assert mock_llm_client.complete.await_count == 3
        assert sleep.await_args_list == [call(1.0), call(2.0)]

    @pytest.mark.asyncio
    async def test_invalid_credentials_not_retried(self, mock_llm_client, sample_message):
        mock_llm_client.complete.side_effect = ProviderError("bad key", status=401, provider="openai")
        sleep = AsyncMock()
        orch = _orchestrator(mock_llm_client, sleep=sleep)
        with pytest.raises(EnhancementError) as exc_info:
            await orch.enhance(sample_message)
        assert exc_info.value.kind is ErrorKind.INVALID_CREDENTIALS
        assert "Invalid OpenAI API key" in exc_info.value.message
        assert mock_llm_client.complete.await_count == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_server_errors_exhaust_attempts(self, mock_llm_client, sample_message):
        mock_llm_client.complete.side_effect = ProviderError("boom", status=500)
        sleep = AsyncMock()
        orch = _orchestrator(mock_llm_client, sleep=sleep)
        with pytest.raises(EnhancementError) as exc_info:
            await orch.enhance(sample_message)
        assert exc_info.value.kind is ErrorKind.PROVIDER_SERVER_ERROR
        assert mock_llm_client.complete.await_count == 3
        assert sleep.await_args_list == [call(1.0), call(2.0)]

    @pytest.mark.asyncio
    async def test_foreign_exception_wrapped(self, mock_llm_client, sample_message):
        mock_llm_client.complete.side_effect = RuntimeError("boom")
        orch = _orchestrator(mock_llm_client)
        with pytest.raises(EnhancementError) as exc_info:
            await orch.enhance(sample_message)
        assert exc_info.value.kind is ErrorKind.UNKNOWN
        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestCaching:
    @pytest.mark.asyncio
    async def test_second_call_hits_cache(self, mock_llm_client, sample_message):
        cache = EnhancementCache()
        orch = _orchestrator(mock_llm_client, cache=cache)
        first = await orch.enhance(sample_message)
        second = await orch.enhance(sample_message)
        assert first == second == EXPECTED
        assert mock_llm_client.complete.await_count == 1
        assert cache.stats().hits == 1

    @pytest.mark.asyncio
    async def test_cache_is_per_mode(self, mock_llm_client, sample_message):
        orch = _orchestrator(mock_llm_client, cache=EnhancementCache())
        await orch.enhance(sample_message, "general")
        await orch.enhance(sample_message, "agent")
        assert mock_llm_client.complete.await_count == 2

    @pytest.mark.asyncio
    async def test_no_cache_always_calls(self, mock_llm_client, sample_message):
        cache = EnhancementCache()
        orch = _orchestrator(mock_llm_client, cache=cache)
        await orch.enhance(sample_message, no_cache=True)
        await orch.enhance(sample_message, no_cache=True)
        assert mock_llm_client.complete.await_count == 2
        assert len(cache) == 0
        user_prompt = mock_llm_client.complete.call_args.args[0][0].content
        assert "regeneration request" in user_prompt

    @pytest.mark.asyncio
    async def test_instructions_bypass_cache(self, mock_llm_client, sample_message):
        cache = EnhancementCache()
        orch = _orchestrator(mock_llm_client, cache=cache)
        await orch.enhance(sample_message, instructions="shorter")
        await orch.enhance(sample_message, instructions="longer")
        assert mock_llm_client.complete.await_count == 2
        assert len(cache) == 0
        user_prompt = mock_llm_client.complete.call_args.args[0][0].content
        assert user_prompt.startswith("Additional instructions: longer")

    @pytest.mark.asyncio
    async def test_failure_not_cached(self, mock_llm_client, sample_message):
        mock_llm_client.complete.side_effect = [
            ProviderError("bad key", status=401),
            _response(EXPECTED),
        ]
        cache = EnhancementCache()
        orch = _orchestrator(mock_llm_client, cache=cache)
        with pytest.raises(EnhancementError):
            await orch.enhance(sample_message)
        assert len(cache) == 0
        assert await orch.enhance(sample_message) == EXPECTED
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_concurrent_requests_share_call(self, mock_llm_client, sample_message):
        async def slow_complete(*args, **kwargs):
            await asyncio.sleep(0.01)
            return _response(EXPECTED)

        mock_llm_client.complete.side_effect = slow_complete
        orch = _orchestrator(mock_llm_client, cache=EnhancementCache())
        results = await asyncio.gather(*(orch.enhance(sample_message) for _ in range(3)))
        assert results == [EXPECTED] * 3
        assert mock_llm_client.complete.await_count == 1


class TestOutcomes:
    @pytest.mark.asyncio
    async def test_outcome_ok(self, mock_llm_client, sample_message):
        outcome = await _orchestrator(mock_llm_client).enhance_outcome(sample_message)
        assert outcome.ok
        assert outcome.text == EXPECTED
        assert outcome.completed_at is not None

    @pytest.mark.asyncio
    async def test_outcome_error(self, mock_llm_client, sample_message):
        mock_llm_client.complete.side_effect = ProviderError("bad key", status=403)
        outcome = await _orchestrator(mock_llm_client).enhance_outcome(sample_message)
        assert not outcome.ok
        assert outcome.error_kind == "invalid_credentials"
        assert outcome.error_message.startswith(MESSAGE_PREFIX)
        assert outcome.text == ""


class TestBatch:
    @pytest.mark.asyncio
    async def test_order_and_concurrency(self, mock_llm_client):
        words = ["alpha", "bravo", "charlie", "delta", "echo"]
        active = 0
        peak = 0

        async def fake_complete(messages, **kwargs):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            word = next(w for w in words if w in messages[0].content)
            return _response(f"Result {word}")

        mock_llm_client.complete.side_effect = fake_complete
        orch = _orchestrator(mock_llm_client)
        outcomes = await orch.batch_enhance([f"{w} item" for w in words], concurrency=2)

        assert [o.text for o in outcomes] == [f"Result {w}" for w in words]
        assert peak <= 2

    @pytest.mark.asyncio
    async def test_failures_reported_per_item(self, mock_llm_client, sample_message):
        orch = _orchestrator(mock_llm_client)
        outcomes = await orch.batch_enhance([sample_message, ""])
        assert outcomes[0].ok
        assert outcomes[1].error_kind == "invalid_request"

    @pytest.mark.asyncio
    async def test_invalid_concurrency(self, mock_llm_client):
        with pytest.raises(ValueError):
            await _orchestrator(mock_llm_client).batch_enhance(["a"], concurrency=0)
