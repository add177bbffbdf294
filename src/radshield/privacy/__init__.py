"""Reversible PII redaction engine.

Pattern registry, primary and contextual redaction passes, reinsertion.
"""

from .contextual import ContextualRedactor, apply_contextual
from .primary import PrimaryRedactor, RedactionState
from .redactor import PIIRedactor, get_default_redactor, redact, reinsert, validate
from .registry import (
    DEFAULT_DETECTORS,
    PLACEHOLDER_PATTERN,
    Detector,
    PatternRegistry,
    make_placeholder_id,
)
from .reinsertion import restore

__all__ = [
    "PIIRedactor",
    "PatternRegistry",
    "Detector",
    "PrimaryRedactor",
    "ContextualRedactor",
    "RedactionState",
    "DEFAULT_DETECTORS",
    "PLACEHOLDER_PATTERN",
    "apply_contextual",
    "get_default_redactor",
    "make_placeholder_id",
    "redact",
    "reinsert",
    "restore",
    "validate",
]
