"""Pytest configuration and fixtures."""

from unittest.mock import MagicMock

import pytest

from radshield.config import Settings
from radshield.privacy import PatternRegistry, PIIRedactor
from radshield.providers import BaseLLMProvider, CompletionResult, ModelInfo


@pytest.fixture
def sample_report() -> str:
    """Provide a CT report with typical identifiers."""
    return """Patient: Max Mustermann, geb. 12.03.1965
Fallnummer: A1234567
Kontakt: max.mustermann@example.com, Tel. +49 30 12345678
Adresse: Hauptstraße 12, 10115 Berlin

CT Thorax vom 2024-01-15

Befund:
Rundherd im rechten Oberlappen, Durchmesser 12 mm, Dichte 35 HU.
Keine pathologisch vergrößerten Lymphknoten.

Untersucht von Anna Weber.
Dr. med. Schmidt"""


@pytest.fixture
def mixed_text() -> str:
    return (
        "Patient: Max Mustermann\n"
        "Email: max@example.com\n"
        "Telefon: +49 30 12345678\n"
        "Geburtsdatum: 15.03.1985"
    )


@pytest.fixture
def registry() -> PatternRegistry:
    """Provide a fresh reference registry."""
    return PatternRegistry.with_defaults()


@pytest.fixture
def redactor(registry) -> PIIRedactor:
    return PIIRedactor(registry=registry)


@pytest.fixture
def settings() -> Settings:
    """Settings that ignore the environment and any .env file."""
    return Settings(_env_file=None, model="gpt-4o-mini", api_key="sk-test-key")


class EchoProvider(BaseLLMProvider):
    """Provider that returns the redacted report unchanged."""

    def __init__(self, transform=None):
        super().__init__(model="echo")
        self.transform = transform or (lambda text: text)
        self.calls = []

    def complete(self, prompt, system=None, max_tokens=4000, temperature=0.0):
        self.calls.append({"prompt": prompt, "system": system})
        body = prompt.split("---\n", 1)[1].rsplit("\n---", 1)[0]
        return CompletionResult(
            success=True,
            content=self.transform(body),
            input_tokens=120,
            output_tokens=80,
            model="echo-1",
        )

    def get_model_info(self) -> ModelInfo:
        return ModelInfo(
            name="echo",
            provider="test",
            model_id="echo-1",
            input_cost_per_million=0.0,
            output_cost_per_million=0.0,
        )

    @classmethod
    def get_provider_name(cls) -> str:
        return "test"


@pytest.fixture
def echo_provider() -> EchoProvider:
    return EchoProvider()


@pytest.fixture
def echo_provider_factory():
    """Build echo providers that alter the model output."""
    return EchoProvider


@pytest.fixture
def failing_provider() -> MagicMock:
    """Provider whose completion always fails."""
    provider = MagicMock(spec=BaseLLMProvider)
    provider.complete.return_value = CompletionResult(
        success=False, content="", model="gpt-4o-mini", error="Rate limit exceeded"
    )
    return provider


@pytest.fixture
def mock_anthropic_response():
    """Mock Anthropic API response."""

    class MockUsage:
        input_tokens = 1000
        output_tokens = 500

    class MockContent:
        text = "Befund: Rundherd bei [PATIENT_NAME_0]."

    class MockResponse:
        usage = MockUsage()
        content = [MockContent()]
        stop_reason = "end_turn"

    return MockResponse()


@pytest.fixture
def mock_openai_response():
    """Mock OpenAI chat completion response."""
    response = MagicMock()
    response.choices[0].message.content = "  Befund: unauffällig.  "
    response.choices[0].finish_reason = "stop"
    response.usage.prompt_tokens = 300
    response.usage.completion_tokens = 40
    return response


@pytest.fixture
def api_key() -> str:
    """Provide test API key."""
    return "sk-ant-test-key-12345"


@pytest.fixture(autouse=True)
def clear_cached_settings():
    """Reset cached settings and the default redactor between tests."""
    from radshield.config import get_settings
    from radshield.privacy import get_default_redactor

    get_settings.cache_clear()
    get_default_redactor.cache_clear()
    yield
    get_settings.cache_clear()
    get_default_redactor.cache_clear()
