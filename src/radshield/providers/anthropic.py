"""
Anthropic Claude provider implementation.
"""

import os
from typing import Optional

from anthropic import Anthropic

from .base import BaseLLMProvider, CompletionResult, ModelInfo

ANTHROPIC_MODELS = {
    "claude-haiku": {
        "id": "claude-haiku-4-5-20251001",
        "input_cost": 1.0,
        "output_cost": 5.0,
        "context_window": 200000,
    },
    "claude-sonnet": {
        "id": "claude-sonnet-4-5-20250929",
        "input_cost": 3.0,
        "output_cost": 15.0,
        "context_window": 200000,
    },
    "claude-opus": {
        "id": "claude-opus-4-5-20251101",
        "input_cost": 15.0,
        "output_cost": 75.0,
        "context_window": 200000,
    },
}


class AnthropicProvider(BaseLLMProvider):
    """Anthropic Claude provider."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "claude-haiku",
        base_url: Optional[str] = None,
        timeout: float = 30.0,
    ):
        api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise ValueError(
                "Anthropic API key required. Set ANTHROPIC_API_KEY env var or pass api_key."
            )

        super().__init__(api_key=api_key, model=model, base_url=base_url)

        if model not in ANTHROPIC_MODELS:
            raise ValueError(
                f"Unknown Anthropic model: {model}. "
                f"Available: {list(ANTHROPIC_MODELS.keys())}"
            )

        self.model_config = ANTHROPIC_MODELS[model]
        self.model_id = self.model_config["id"]
        self.client = Anthropic(api_key=api_key, base_url=base_url, timeout=timeout)

    def complete(
        self,
        prompt: str,
        system: Optional[str] = None,
        max_tokens: int = 4000,
        temperature: float = 0.0,
    ) -> CompletionResult:
        request = {
            "model": self.model_id,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            request["system"] = system

        try:
            response = self.client.messages.create(**request)

            return CompletionResult(
                success=True,
                content=response.content[0].text.strip(),
                input_tokens=response.usage.input_tokens,
                output_tokens=response.usage.output_tokens,
                model=self.model_id,
                metadata={"stop_reason": response.stop_reason},
            )

        except Exception as e:
            return CompletionResult(
                success=False,
                content="",
                model=self.model_id,
                error=str(e),
            )

    def get_model_info(self) -> ModelInfo:
        return ModelInfo(
            name=self.model,
            provider="anthropic",
            model_id=self.model_id,
            input_cost_per_million=self.model_config["input_cost"],
            output_cost_per_million=self.model_config["output_cost"],
            context_window=self.model_config.get("context_window", 200000),
        )

    @classmethod
    def get_provider_name(cls) -> str:
        return "anthropic"
