"""Typed exceptions raised by radshield."""


class RadshieldError(Exception):
    """Base class for all radshield errors."""


class InvalidArgumentError(RadshieldError, ValueError):
    """Raised when an engine operation receives malformed input."""


class InvalidDetectorRuleError(RadshieldError, ValueError):
    """Raised at registration time for a rule that cannot be used safely."""


class ProviderError(RadshieldError):
    """Raised when the language model call behind a rewrite fails."""

    def __init__(self, message: str, model: str = ""):
        super().__init__(message)
        self.model = model
