"""
Validation of redaction round trips.

Scores a reinserted text and lists unresolved placeholders, leaked
identifiers and PII that no detector caught.
"""

from ..schemas.redaction import ValidationReport
from .base import BaseCheck, CheckFinding
from .checks import LeakCheck, MissedPIICheck, UnresolvedPlaceholderCheck
from .engine import ValidationEngine


def validate(original, final_text, placeholders, checks=None, include_defaults=True) -> ValidationReport:
    """
    One-liner validation function.

    Args:
        original: Text before redaction
        final_text: Text after reinsertion
        placeholders: Placeholders from the redaction call
        checks: Optional custom checks
        include_defaults: Include built-in checks (default: True)

    Returns:
        ValidationReport
    """
    engine = ValidationEngine(checks=checks, include_defaults=include_defaults)
    return engine.validate(original, final_text, placeholders)


__all__ = [
    "BaseCheck",
    "CheckFinding",
    "LeakCheck",
    "MissedPIICheck",
    "UnresolvedPlaceholderCheck",
    "ValidationEngine",
    "validate",
]
