"""
Language model backends for report rewriting.

A model name picks the backend: hosted Anthropic and OpenAI models, or a
local Ollama model so redacted reports never leave the host. Anything not
given explicitly to ``get_provider`` is taken from ``Settings``.
"""

from typing import TYPE_CHECKING, Dict, Optional, Type

from .anthropic import ANTHROPIC_MODELS, AnthropicProvider
from .base import BaseLLMProvider, CompletionResult, ModelInfo
from .ollama import OLLAMA_MODELS, OllamaProvider
from .openai import OPENAI_MODELS, OpenAIProvider

if TYPE_CHECKING:
    from ..config import Settings

PROVIDERS: Dict[str, Type[BaseLLMProvider]] = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
    "ollama": OllamaProvider,
}

_CATALOGUES = {
    "anthropic": ANTHROPIC_MODELS,
    "openai": OPENAI_MODELS,
    "ollama": OLLAMA_MODELS,
}

MODELS = {
    name: {**info, "provider": provider}
    for provider, catalogue in _CATALOGUES.items()
    for name, info in catalogue.items()
}

DEFAULT_MODEL = "gpt-4o-mini"


def is_local_model(model: str) -> bool:
    """True for names Ollama serves that are not in the catalogue.

    Tagged names (``qwen2.5:7b``) and llama/mistral variants qualify.
    """
    return ":" in model or model.startswith(("llama", "mistral"))


def resolve_provider_name(model: str) -> str:
    """Name of the backend serving ``model``.

    Raises:
        ValueError: If the model is neither catalogued nor a local name.
    """
    if model in MODELS:
        return MODELS[model]["provider"]
    if is_local_model(model):
        return "ollama"
    raise ValueError(f"Unknown model: {model}. Available models: {list(MODELS)}")


def get_provider(
    model: Optional[str] = None,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    settings: Optional["Settings"] = None,
) -> BaseLLMProvider:
    """
    Build the provider for a model.

    Args:
        model: Model name (e.g., 'gpt-4o-mini', 'claude-haiku', 'qwen2.5:7b').
            Defaults to ``settings.model``.
        api_key: API key. Defaults to ``settings.api_key``. Ignored for Ollama.
        base_url: Endpoint override. Defaults to ``settings.base_url``.
        settings: Settings to read defaults from (cached settings if None)

    Returns:
        Initialized provider instance

    Raises:
        ValueError: If the model is not recognized
    """
    if settings is None:
        from ..config import get_settings

        settings = get_settings()

    model = model or settings.model
    base_url = base_url or settings.base_url
    provider_name = resolve_provider_name(model)

    if provider_name == "ollama":
        return OllamaProvider(model=model, base_url=base_url)
    return PROVIDERS[provider_name](
        model=model, api_key=api_key or settings.api_key, base_url=base_url
    )


def list_models(provider: Optional[str] = None) -> Dict[str, dict]:
    """List catalogued models, optionally for one provider only."""
    return {
        name: dict(info)
        for name, info in MODELS.items()
        if provider is None or info["provider"] == provider
    }


def list_providers() -> list:
    """List all available providers."""
    return list(PROVIDERS)


__all__ = [
    "BaseLLMProvider",
    "CompletionResult",
    "ModelInfo",
    "AnthropicProvider",
    "OpenAIProvider",
    "OllamaProvider",
    "MODELS",
    "PROVIDERS",
    "DEFAULT_MODEL",
    "get_provider",
    "is_local_model",
    "list_models",
    "list_providers",
    "resolve_provider_name",
]
