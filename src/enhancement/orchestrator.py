# src/enhancement/orchestrator.py — v1
"""Enhancement orchestrator — classify, compose, call, repair.

Request lifecycle (each step is recorded in the log context):

    classifying → composing → cache_hit → done
                            → calling:N → post_processing → done
    any failure → failed

Only the provider call can fail. Failures are retried per RetryPolicy and
surface as EnhancementError; the cache never stores a failure.

Collaborators are constructed once by the facade and injected here.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable, Union

from clipenhancer.cache.enhancement_cache import EnhancementCache
from clipenhancer.classification.classifier import ContextClassifier
from clipenhancer.core.models import (
    MODES,
    ClassificationResult,
    EnhancementOutcome,
    PromptSpec,
    ProviderConfig,
)
from clipenhancer.enhancement.cleanup import clean_model_output
from clipenhancer.enhancement.postprocessor import ResultPostProcessor
from clipenhancer.llm.base_client import BaseLLMClient
from clipenhancer.llm.errors import (
    MESSAGE_PREFIX,
    EnhancementError,
    ErrorKind,
    to_enhancement_error,
)
from clipenhancer.llm.models import Message
from clipenhancer.llm.retry import DEFAULT_RETRY_POLICY, RetryPolicy, SleepFn, with_retry
from clipenhancer.logging.context import clear_context, set_request_context, set_step
from clipenhancer.prompts.composer import PromptComposer

logger = logging.getLogger(__name__)

ClientResolver = Callable[[Union[ProviderConfig, None]], BaseLLMClient]

DEFAULT_BATCH_CONCURRENCY = 5


class EnhancementOrchestrator:
    """Run one enhancement request end to end.

    Args:
        client: A BaseLLMClient, or a callable mapping the per-call
            ProviderConfig (or None) to one.
        classifier: ContextClassifier instance.
        composer: PromptComposer instance.
        cache: Shared EnhancementCache. None disables caching.
        postprocessor: ResultPostProcessor instance.
        retry_policy: Attempt budget and backoff.
        sleep: Awaitable sleep used between attempts.
        temperature: Sampling temperature for every call.
        max_tokens: Output budget for agent/general modes.
        answer_max_tokens: Output budget for answer mode.
        batch_concurrency: Default parallelism of batch_enhance.
    """

    def __init__(
        self,
        client: BaseLLMClient | ClientResolver,
        classifier: ContextClassifier | None = None,
        composer: PromptComposer | None = None,
        cache: EnhancementCache | None = None,
        postprocessor: ResultPostProcessor | None = None,
        retry_policy: RetryPolicy | None = None,
        sleep: SleepFn = asyncio.sleep,
        temperature: float = 0.7,
        max_tokens: int = 500,
        answer_max_tokens: int = 1000,
        batch_concurrency: int = DEFAULT_BATCH_CONCURRENCY,
    ) -> None:
        self._client = client
        self._classifier = classifier or ContextClassifier()
        self._composer = composer or PromptComposer()
        self._cache = cache
        self._postprocessor = postprocessor or ResultPostProcessor()
        self._retry_policy = retry_policy or DEFAULT_RETRY_POLICY
        self._sleep = sleep
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._answer_max_tokens = answer_max_tokens
        self._batch_concurrency = batch_concurrency

    @property
    def cache(self) -> EnhancementCache | None:
        return self._cache

    @property
    def classifier(self) -> ContextClassifier:
        return self._classifier

    async def enhance(
        self,
        text: str,
        mode: str = "general",
        provider: ProviderConfig | None = None,
        *,
        no_cache: bool = False,
        instructions: str | None = None,
    ) -> str:
        """Enhance ``text`` and return the repaired output.

        Args:
            text: Input text (e.g. clipboard contents).
            mode: "agent", "general" or "answer".
            provider: Per-call provider selection; None uses the default client.
            no_cache: Bypass the cache and ask for a different variant.
            instructions: Optional caller instructions added to the prompt.

        Raises:
            ValueError: If ``mode`` is not a known enhancement mode.
            EnhancementError: If the text is empty or the provider call failed.
        """
        if mode not in MODES:
            raise ValueError(f"Unknown enhancement mode {mode!r}. Available: {', '.join(MODES)}")

        request_id = uuid.uuid4().hex[:12]
        set_request_context(request_id, mode)
        try:
            if not text or not text.strip():
                raise EnhancementError(
                    ErrorKind.INVALID_REQUEST,
                    MESSAGE_PREFIX + "Invalid request: there is no text to enhance.",
                )
            client = self._resolve_client(provider)
            logger.info(
                "Enhancement started: mode=%s, provider=%s, chars=%d, no_cache=%s",
                mode, client.provider_name, len(text), no_cache,
            )
            result = await self._run(client, text, mode, no_cache, instructions)
            _enter("done")
            logger.info("Enhancement complete: chars=%d", len(result))
            return result
        except EnhancementError as e:
            _enter("failed")
            logger.warning("Enhancement failed: kind=%s", e.kind.value)
            raise
        except Exception as e:
            _enter("failed")
            error = to_enhancement_error(e)
            logger.warning("Enhancement failed: kind=%s", error.kind.value)
            raise error from e
        finally:
            clear_context()

    async def enhance_outcome(
        self,
        text: str,
        mode: str = "general",
        provider: ProviderConfig | None = None,
        *,
        no_cache: bool = False,
        instructions: str | None = None,
    ) -> EnhancementOutcome:
        """Like enhance(), but report failures in the returned outcome."""
        try:
            result = await self.enhance(
                text, mode, provider, no_cache=no_cache, instructions=instructions,
            )
        except Exception as e:
            error = to_enhancement_error(e)
            return EnhancementOutcome(
                error_kind=error.kind.value,
                error_message=error.message,
                completed_at=datetime.now(timezone.utc),
            )
        return EnhancementOutcome(text=result, completed_at=datetime.now(timezone.utc))

    async def batch_enhance(
        self,
        texts: Iterable[str],
        mode: str = "general",
        provider: ProviderConfig | None = None,
        concurrency: int | None = None,
    ) -> list[EnhancementOutcome]:
        """Enhance many texts with bounded parallelism; outcomes keep input order."""
        limit = self._batch_concurrency if concurrency is None else concurrency
        if limit < 1:
            raise ValueError("concurrency must be >= 1")
        semaphore = asyncio.Semaphore(limit)

        async def _one(item: str) -> EnhancementOutcome:
            async with semaphore:
                return await self.enhance_outcome(item, mode, provider)

        outcomes = await asyncio.gather(*(_one(t) for t in texts))
        failed = sum(1 for o in outcomes if not o.ok)
        logger.info("Batch complete: %d items, %d failed", len(outcomes), failed)
        return list(outcomes)

    # -- internals --------------------------------------------------------

    async def _run(
        self,
        client: BaseLLMClient,
        text: str,
        mode: str,
        no_cache: bool,
        instructions: str | None,
    ) -> str:
        if mode == "answer":
            _enter("composing")
            prompt = self._composer.compose_answer(text, instructions=instructions, regenerate=no_cache)
            raw = await self._call(client, prompt, self._answer_max_tokens)
            return clean_model_output(raw)

        _enter("classifying")
        classification = self._classifier.classify(text)

        _enter("composing")
        prompt = self._composer.compose(
            classification, mode, text, instructions=instructions, regenerate=no_cache,
        )

        async def compute(_text: str, _mode: str) -> str:
            raw = await self._call(client, prompt, self._max_tokens)
            return self._finish(raw, classification, text)

        # The cache key covers text and mode only; instructed requests bypass it.
        if no_cache or self._cache is None or instructions:
            return await compute(text, mode)

        if self._cache.get(text, mode) is not None:
            _enter("cache_hit")
        return await self._cache.get_or_compute(text, mode, compute)

    async def _call(self, client: BaseLLMClient, prompt: PromptSpec, max_tokens: int) -> str:
        attempts = 0

        async def _attempt() -> str:
            nonlocal attempts
            attempts += 1
            _enter(f"calling:{attempts}")
            response = await client.complete(
                [Message(role="user", content=prompt.user_prompt)],
                system=prompt.system_prompt,
                max_tokens=max_tokens,
                temperature=self._temperature,
            )
            logger.debug(
                "Completion received: attempt=%d, chars=%d, latency_ms=%d",
                attempts, len(response.content), response.latency_ms,
            )
            return response.content

        return await with_retry(
            _attempt,
            policy=self._retry_policy,
            sleep=self._sleep,
            label=f"{client.provider_name} completion",
        )

    def _finish(self, raw: str, classification: ClassificationResult, original: str) -> str:
        _enter("post_processing")
        return self._postprocessor.process(
            clean_model_output(raw),
            classification.platform,
            original,
            classification.format,
        )

    def _resolve_client(self, provider: ProviderConfig | None) -> BaseLLMClient:
        if isinstance(self._client, BaseLLMClient):
            return self._client
        return self._client(provider)


def _enter(step: str) -> None:
    set_step(step)
    logger.debug("Step: %s", step)
