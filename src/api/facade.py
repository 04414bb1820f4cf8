# src/api/facade.py — v2
"""Public API facade — wiring and single-call entry points.

Usage:
    from clipenhancer.api.facade import build_orchestrator, enhance_text

    orchestrator = build_orchestrator(settings)      # once per process
    result = await enhance_text(text, "general", orchestrator=orchestrator)

The classifier, composer and cache are built once here and injected into the
orchestrator. Hosts that enhance repeatedly should keep the orchestrator
alive so the cache and in-flight de-duplication are shared.
"""

from __future__ import annotations

import logging

from clipenhancer.cache.enhancement_cache import EnhancementCache
from clipenhancer.classification.classifier import ContextClassifier
from clipenhancer.config.settings import Settings, load_settings
from clipenhancer.core.models import ClassificationResult, ProviderConfig
from clipenhancer.enhancement.orchestrator import EnhancementOrchestrator
from clipenhancer.enhancement.postprocessor import ResultPostProcessor
from clipenhancer.llm.base_client import BaseLLMClient
from clipenhancer.llm.client_factory import canonical_provider, create_llm_client
from clipenhancer.llm.errors import MissingCredentialsError
from clipenhancer.llm.retry import RetryPolicy
from clipenhancer.prompts.composer import PromptComposer
from clipenhancer.prompts.templates import FileTemplateStore

logger = logging.getLogger(__name__)

_KEY_LABELS = {"openai": "OpenAI", "google": "Gemini"}


def provider_config_from_settings(
    settings: Settings,
    provider: str | None = None,
    model: str | None = None,
) -> ProviderConfig:
    """Provider selection from settings, with optional per-call overrides."""
    name = canonical_provider(provider or settings.provider_name)
    return ProviderConfig(
        provider=name,
        model=model if model is not None else settings.llm_model,
        api_key=settings.api_key_for(name),
    )


def require_credentials(config: ProviderConfig) -> ProviderConfig:
    """Raise MissingCredentialsError unless ``config`` carries a usable key."""
    if not config.has_credentials:
        label = _KEY_LABELS.get(canonical_provider(config.provider), config.provider)
        raise MissingCredentialsError(
            f"{label} API key not found. Please add your API key in settings."
        )
    return config


def build_orchestrator(
    settings: Settings | None = None,
    client: BaseLLMClient | None = None,
) -> EnhancementOrchestrator:
    """Construct the orchestrator and its collaborators from settings.

    Args:
        settings: Global settings. Loaded from .env if None.
        client: Fixed completion client. When None, a client is created
            per call from the ProviderConfig passed to enhance().
    """
    settings = settings or load_settings()
    default_config = provider_config_from_settings(settings)

    def _resolve(config: ProviderConfig | None) -> BaseLLMClient:
        return create_llm_client(config or default_config)

    store = FileTemplateStore(settings.template_dir) if settings.template_dir else None
    cache = (
        EnhancementCache(max_entries=settings.cache_max_entries, ttl_s=settings.cache_ttl_s)
        if settings.cache_enabled
        else None
    )
    logger.debug(
        "Building orchestrator: provider=%s, cache=%s, templates=%s",
        default_config.provider, settings.cache_enabled, settings.template_dir,
    )
    return EnhancementOrchestrator(
        client=client or _resolve,
        classifier=ContextClassifier(),
        composer=PromptComposer(template_store=store),
        cache=cache,
        postprocessor=ResultPostProcessor(),
        retry_policy=RetryPolicy(
            max_attempts=settings.retry_max_attempts,
            base_delay_s=settings.retry_base_delay_s,
        ),
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        answer_max_tokens=settings.llm_answer_max_tokens,
        batch_concurrency=settings.batch_concurrency,
    )


def classify_text(text: str, classifier: ContextClassifier | None = None) -> ClassificationResult:
    """Classify ``text`` without calling any provider."""
    return (classifier or ContextClassifier()).classify(text)


async def enhance_text(
    text: str,
    mode: str = "general",
    *,
    settings: Settings | None = None,
    orchestrator: EnhancementOrchestrator | None = None,
    provider: str | None = None,
    model: str | None = None,
    no_cache: bool = False,
    instructions: str | None = None,
) -> str:
    """Enhance ``text`` with the configured (or overridden) provider.

    Raises:
        MissingCredentialsError: If the selected provider has no API key.
        EnhancementError: If the provider call failed.
    """
    settings = settings or load_settings()
    config = require_credentials(provider_config_from_settings(settings, provider, model))
    orchestrator = orchestrator or build_orchestrator(settings)
    return await orchestrator.enhance(
        text, mode, config, no_cache=no_cache, instructions=instructions,
    )
