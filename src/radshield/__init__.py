"""
radshield - Reversible PII redaction for German radiology reports

Replaces identifiers with typed placeholder tokens before a report is sent
to a language model, puts the originals back into the model's answer and
scores the round trip for leaks.
"""

__version__ = "0.1.0"

import sys

if sys.version_info < (3, 10):
    raise RuntimeError("radshield requires Python 3.10 or higher")

from .errors import (
    InvalidArgumentError,
    InvalidDetectorRuleError,
    ProviderError,
    RadshieldError,
)
from .schemas import (
    Placeholder,
    RedactionResult,
    RedactionStats,
    RewriteOptions,
    RewriteResult,
    ValidationReport,
)

# privacy must be imported before validators
from .privacy import (
    DEFAULT_DETECTORS,
    PIIRedactor,
    PatternRegistry,
    apply_contextual,
    get_default_redactor,
    redact,
    reinsert,
    restore,
)
from .validators import ValidationEngine, validate
from .config import DEFAULT_MODEL, MODELS, Settings, get_settings
from .core import PromptBuilder, ReportRewriter
from .providers import get_provider, list_models, list_providers

__all__ = [
    "__version__",
    # Main API
    "redact",
    "reinsert",
    "restore",
    "validate",
    "apply_contextual",
    "PIIRedactor",
    "PatternRegistry",
    "DEFAULT_DETECTORS",
    "get_default_redactor",
    "ValidationEngine",
    "ReportRewriter",
    "PromptBuilder",
    # Result types
    "Placeholder",
    "RedactionResult",
    "RedactionStats",
    "ValidationReport",
    "RewriteOptions",
    "RewriteResult",
    # Errors
    "RadshieldError",
    "InvalidArgumentError",
    "InvalidDetectorRuleError",
    "ProviderError",
    # Config
    "Settings",
    "get_settings",
    "MODELS",
    "DEFAULT_MODEL",
    "get_provider",
    "list_models",
    "list_providers",
]
