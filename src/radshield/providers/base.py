"""
Base provider abstraction for LLM providers.

The rewriting pipeline only ever hands redacted text to a provider.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ModelInfo:
    """Information about an LLM model."""

    name: str
    provider: str
    model_id: str
    input_cost_per_million: float
    output_cost_per_million: float
    max_tokens: int = 4096
    context_window: int = 128000


@dataclass
class CompletionResult:
    """Unified result from an LLM completion."""

    success: bool
    content: str
    input_tokens: int = 0
    output_tokens: int = 0
    model: str = ""
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "",
        base_url: Optional[str] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url

    @staticmethod
    def build_messages(prompt: str, system: Optional[str] = None) -> List[Dict[str, str]]:
        """Chat messages for APIs that take the system prompt as a message."""
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    @abstractmethod
    def complete(
        self,
        prompt: str,
        system: Optional[str] = None,
        max_tokens: int = 4000,
        temperature: float = 0.0,
    ) -> CompletionResult:
        """
        Generate a completion for the given prompt.

        Args:
            prompt: The user prompt
            system: Optional system prompt
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature (0.0 for deterministic)

        Returns:
            CompletionResult with the generated content. Failures are
            reported with success=False instead of raising.
        """
        pass

    @abstractmethod
    def get_model_info(self) -> ModelInfo:
        """Get information about the current model."""
        pass

    @classmethod
    @abstractmethod
    def get_provider_name(cls) -> str:
        """Get the provider name (e.g., 'anthropic', 'openai')."""
        pass
