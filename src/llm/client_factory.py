# src/llm/client_factory.py — v3
"""Factory: instantiate an LLM client from a provider selection.

Called by the orchestrator once per enhancement with the ProviderConfig
resolved by the facade. Model names are normalized per provider before the
adapter is built.
"""

from __future__ import annotations

import logging

from clipenhancer.core.models import ProviderConfig
from clipenhancer.llm.adapters.google_adapter import DEFAULT_GEMINI_MODEL, GEMINI_MODELS
from clipenhancer.llm.adapters.openai_adapter import DEFAULT_OPENAI_MODEL
from clipenhancer.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

# Registry of provider name → adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "openai": "clipenhancer.llm.adapters.openai_adapter.OpenAIAdapter",
    "google": "clipenhancer.llm.adapters.google_adapter.GoogleAdapter",
}

_PROVIDER_ALIASES: dict[str, str] = {"gemini": "google"}

DEFAULT_MODELS: dict[str, str] = {
    "openai": DEFAULT_OPENAI_MODEL,
    "google": DEFAULT_GEMINI_MODEL,
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def canonical_provider(provider: str) -> str:
    """Lower-cased provider name with aliases resolved."""
    name = (provider or "").strip().lower()
    return _PROVIDER_ALIASES.get(name, name)


def normalize_model(provider: str, model: str | None) -> str:
    """Model name the adapter should receive.

    Empty names resolve to the provider default. Gemini names outside the
    known set also resolve to the default; a leading ``models/`` is dropped.
    """
    provider = canonical_provider(provider)
    name = (model or "").strip()
    if provider == "google" and name.startswith("models/"):
        name = name[len("models/"):]
    if not name:
        return DEFAULT_MODELS.get(provider, "")
    if provider == "google" and name not in GEMINI_MODELS:
        logger.warning("Unrecognized Gemini model %r, using %s", name, DEFAULT_GEMINI_MODEL)
        return DEFAULT_GEMINI_MODEL
    return name


def create_llm_client(
    config: ProviderConfig | str,
    model: str | None = None,
    api_key: str | None = None,
    **kwargs: object,
) -> BaseLLMClient:
    """Instantiate the correct adapter.

    Args:
        config: ProviderConfig, or a bare provider name (openai, google, gemini).
        model: Overrides ``config.model`` when given.
        api_key: Overrides ``config.api_key`` when given.
        **kwargs: Additional provider-specific arguments.

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    if isinstance(config, ProviderConfig):
        provider = config.provider
        model = model if model is not None else config.model
        api_key = api_key if api_key is not None else config.api_key
    else:
        provider = config

    provider = canonical_provider(provider)
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])
    init_kwargs = dict(kwargs)
    init_kwargs["model"] = normalize_model(provider, model)
    init_kwargs["api_key"] = api_key or ""

    logger.debug("Creating LLM client: provider=%s, model=%s", provider, init_kwargs["model"])
    return adapter_cls(**init_kwargs)


def register_provider(name: str, class_path: str) -> None:
    """Register a custom provider adapter.

    Args:
        name: Provider identifier.
        class_path: Fully qualified class path implementing BaseLLMClient.
    """
    _PROVIDER_REGISTRY[name.lower()] = class_path
    logger.info("Registered LLM provider: %s → %s", name, class_path)


def available_providers() -> list[str]:
    return sorted(_PROVIDER_REGISTRY)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    import importlib

    module = importlib.import_module(module_path)
    return getattr(module, class_name)
