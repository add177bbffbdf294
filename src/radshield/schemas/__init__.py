"""Data models for radshield."""

from .redaction import (
    ConfidenceTiers,
    Placeholder,
    RedactionResult,
    RedactionStats,
    ValidationReport,
    confidence_tier,
)
from .rewrite import RewriteOptions, RewriteResult

__all__ = [
    "Placeholder",
    "ConfidenceTiers",
    "RedactionStats",
    "RedactionResult",
    "ValidationReport",
    "RewriteOptions",
    "RewriteResult",
    "confidence_tier",
]
