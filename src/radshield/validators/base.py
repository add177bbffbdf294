"""Base abstractions for redaction quality checks."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from ..schemas.redaction import Placeholder


@dataclass
class CheckFinding:
    """A single defect reported by a check."""

    check_name: str
    message: str
    penalty: int = 0
    category: Optional[str] = None


class BaseCheck(ABC):
    """Abstract base class for all validation checks.

    Checks are advisory: they report defects as findings and never raise
    for a defect in the text under validation.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this check."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what this check looks for."""
        ...

    @abstractmethod
    def check(
        self,
        original: str,
        final_text: str,
        placeholders: List[Placeholder],
    ) -> List[CheckFinding]:
        """
        Inspect a round-tripped text.

        Args:
            original: Text as it was before redaction
            final_text: Text after the external processor and reinsertion
            placeholders: Placeholders produced by the redaction call

        Returns:
            List of findings (empty list means the check passed)
        """
        ...
