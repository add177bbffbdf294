"""
Report rewriting pipeline: redact, ask the model, reinsert, validate.

Only redacted text crosses the provider boundary.
"""

import logging
import time
import uuid
from typing import Optional

from ..config import Settings, get_settings
from ..errors import ProviderError
from ..logging import audit_event
from ..privacy import PIIRedactor
from ..providers import BaseLLMProvider, get_provider
from ..schemas.rewrite import RewriteOptions, RewriteResult
from .prompts import PromptBuilder

logger = logging.getLogger(__name__)


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ReportRewriter:
    """
    Rewrites radiology reports through a language model without exposing PII.

    Usage:
        rewriter = ReportRewriter(model="gpt-4o-mini")
        result = rewriter.rewrite(report_text, RewriteOptions(mode="2"))
        print(result.content)
    """

    def __init__(
        self,
        provider: Optional[BaseLLMProvider] = None,
        model: Optional[str] = None,
        redactor: Optional[PIIRedactor] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        settings: Optional[Settings] = None,
        prompt_builder: Optional[PromptBuilder] = None,
    ):
        """
        Initialize the rewriter.

        Args:
            provider: Ready provider instance. Built from model/settings if None.
            model: Model name (e.g., 'gpt-4o-mini', 'claude-haiku', 'llama3.2')
            redactor: PII redactor to use (default registry if None)
            api_key: API key (uses settings or provider env var if not provided)
            base_url: Optional base URL override for the provider
            settings: Settings instance (cached settings if None)
            prompt_builder: Custom prompt builder
        """
        self.settings = settings or get_settings()
        self.model_name = model or self.settings.model

        if provider is None:
            provider = get_provider(
                model=self.model_name,
                api_key=api_key,
                base_url=base_url,
                settings=self.settings,
            )
        self.provider = provider
        self.redactor = redactor or PIIRedactor()
        self.prompt_builder = prompt_builder or PromptBuilder()

    def rewrite(
        self,
        text: str,
        options: Optional[RewriteOptions] = None,
        request_id: Optional[str] = None,
    ) -> RewriteResult:
        """
        Rewrite a report.

        Args:
            text: Original report text, PII included
            options: Rewrite options (defaults to proofreading only)
            request_id: Identifier for audit logs (generated if not provided)

        Returns:
            RewriteResult with the reinserted content and validation report

        Raises:
            InvalidArgumentError: If text is not a string
            ProviderError: If the model call fails
        """
        start_time = time.time()
        options = options or RewriteOptions()
        request_id = request_id or new_request_id()

        redaction = self.redactor.redact(text)
        audit_event(
            "pii_redacted",
            request_id,
            total_redactions=redaction.stats.total_redactions,
            by_type=redaction.stats.by_type,
        )

        system, prompt = self.prompt_builder.build(redaction.redacted, options)
        completion = self.provider.complete(
            prompt,
            system=system,
            max_tokens=self.settings.max_tokens,
            temperature=self.settings.temperature,
        )

        if not completion.success:
            audit_event(
                "rewrite_failed",
                request_id,
                level=logging.ERROR,
                model=completion.model,
                duration_ms=(time.time() - start_time) * 1000,
            )
            raise ProviderError(
                completion.error or "Model returned no content", model=completion.model
            )

        content = self.redactor.reinsert(completion.content, redaction.placeholders)
        validation = self.redactor.validate(text, content, redaction.placeholders)

        duration_ms = (time.time() - start_time) * 1000
        below_threshold = validation.score < self.settings.min_validation_score
        audit_event(
            "rewrite_validated",
            request_id,
            level=logging.WARNING if below_threshold else logging.INFO,
            score=validation.score,
            issues=validation.issues,
            duration_ms=duration_ms,
            model=completion.model,
            tokens_total=completion.total_tokens,
        )

        return RewriteResult(
            request_id=request_id,
            content=content,
            redaction_stats=redaction.stats,
            validation=validation,
            model=completion.model,
            tokens_used=completion.total_tokens,
            duration_ms=duration_ms,
        )
