"""Reversible PII redaction for text sent to an external language model.

Pure and local: no network, no persistence. The only shared state is the
pattern registry, which is safe to extend while redactions are running.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional, Union

from ..schemas.redaction import Placeholder, RedactionResult, ValidationReport
from .contextual import ContextualRedactor
from .primary import PrimaryRedactor, RedactionState, build_result, require_text
from .registry import Detector, PatternRegistry
from .reinsertion import reinsert as _reinsert
from .reinsertion import restore as _restore

logger = logging.getLogger(__name__)


class PIIRedactor:
    """Redact, reinsert and validate against one pattern registry.

    Detects:
    - Direct identifiers (email, phone, SSN, IP address, card numbers)
    - Clinical identifiers (patient id, MRN, insurance and record numbers,
      DICOM UIDs)
    - Dates, including labelled birth dates
    - Doctor, patient and examiner names, postal addresses
    - Bare 6-12 digit numbers that are not measurements

    Example:
        redactor = PIIRedactor()
        result = redactor.redact("Kontakt: max@example.com")
        # result.redacted = "Kontakt: [EMAIL_0]"
        redactor.reinsert(result.redacted, result.placeholders)
        # "Kontakt: max@example.com"
    """

    def __init__(
        self,
        registry: Optional[PatternRegistry] = None,
        contextual: bool = True,
        checks: Optional[List] = None,
    ):
        """Initialize the PII redactor.

        Args:
            registry: Pattern registry to use. If None, the reference
                registry is created.
            contextual: Run the contextual pass after the detectors.
            checks: Additional validation checks.
        """
        self.registry = registry if registry is not None else PatternRegistry.with_defaults()
        self._primary = PrimaryRedactor(self.registry)
        self._contextual = ContextualRedactor() if contextual else None

        from ..validators import ValidationEngine

        self._validation_engine = ValidationEngine(checks=checks)

    def redact(self, text: str) -> RedactionResult:
        """Detect and replace PII in text.

        Args:
            text: The text to redact

        Returns:
            RedactionResult with redacted text, placeholders and stats
        """
        require_text(text, "text")

        state = self._primary.run(RedactionState.initial(text))
        if self._contextual is not None:
            state = self._contextual.apply(state)

        result = build_result(state)
        logger.debug(
            "PII redaction completed",
            extra={
                "original_length": len(text),
                "redacted_length": len(result.redacted),
                "total_redactions": result.stats.total_redactions,
                "by_type": result.stats.by_type,
            },
        )
        return result

    def reinsert(self, text: str, placeholders: Iterable[Placeholder]) -> str:
        """Replace placeholder tokens in text with the original values."""
        return _reinsert(text, placeholders)

    def restore(self, data: Any, placeholders: Iterable[Placeholder]) -> Any:
        """Restore original values in strings, dicts and lists."""
        return _restore(data, placeholders)

    def validate(
        self,
        original: str,
        final_text: str,
        placeholders: Iterable[Placeholder],
    ) -> ValidationReport:
        """Score a round-tripped text; defects are reported, never raised."""
        return self._validation_engine.validate(original, final_text, placeholders)

    def register_pattern(
        self,
        name: str,
        rule: Union[str, re.Pattern],
        semantic_type: str,
        confidence: float,
    ) -> Detector:
        """Add or replace a detector at runtime."""
        detector = self.registry.register(name, rule, semantic_type, confidence)
        logger.info(
            "Custom PII pattern added",
            extra={"pattern_name": name, "semantic_type": semantic_type, "confidence": confidence},
        )
        return detector

    def remove_pattern(self, name: str) -> bool:
        removed = self.registry.remove_by_name(name)
        if removed:
            logger.info("PII pattern removed", extra={"pattern_name": name})
        return removed

    def get_supported_types(self) -> List[str]:
        """Return the semantic types this redactor can produce."""
        types = self.registry.semantic_types()
        if self._contextual is not None:
            types.extend(t for t in self._contextual.semantic_types if t not in types)
        return types

    def get_pattern_stats(self) -> Dict[str, float]:
        return self.registry.summary()


@lru_cache(maxsize=1)
def get_default_redactor() -> PIIRedactor:
    """Shared redactor over the reference registry."""
    return PIIRedactor()


def redact(text: str) -> RedactionResult:
    """One-liner redaction with the shared default redactor."""
    return get_default_redactor().redact(text)


def reinsert(text: str, placeholders: Iterable[Placeholder]) -> str:
    return _reinsert(text, placeholders)


def validate(
    original: str, final_text: str, placeholders: Iterable[Placeholder]
) -> ValidationReport:
    return get_default_redactor().validate(original, final_text, placeholders)
