"""Result types produced by the redaction engine and the validator."""

from datetime import datetime
from typing import Dict, Iterable, List

from pydantic import BaseModel, ConfigDict, Field

HIGH_CONFIDENCE = 0.8
MEDIUM_CONFIDENCE = 0.6


def confidence_tier(confidence: float) -> str:
    """Bucket a confidence value into 'high', 'medium' or 'low'."""
    if confidence >= HIGH_CONFIDENCE:
        return "high"
    if confidence >= MEDIUM_CONFIDENCE:
        return "medium"
    return "low"


class Placeholder(BaseModel):
    """A token substituted for one detected sensitive span."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Token embedded in the text, e.g. [EMAIL_0]")
    original: str = Field(..., description="Exact substring that was replaced")
    type: str = Field(..., description="Semantic type of the detector")
    confidence: float = Field(..., ge=0.0, le=1.0)


class ConfidenceTiers(BaseModel):
    """Placeholder counts per confidence tier."""

    high: int = 0
    medium: int = 0
    low: int = 0


class RedactionStats(BaseModel):
    """Aggregate statistics over the placeholders of one redaction call."""

    total_redactions: int = 0
    by_type: Dict[str, int] = Field(default_factory=dict)
    confidence: ConfidenceTiers = Field(default_factory=ConfidenceTiers)

    @classmethod
    def from_placeholders(cls, placeholders: Iterable[Placeholder]) -> "RedactionStats":
        stats = cls()
        for placeholder in placeholders:
            stats.total_redactions += 1
            stats.by_type[placeholder.type] = stats.by_type.get(placeholder.type, 0) + 1
            tier = confidence_tier(placeholder.confidence)
            setattr(stats.confidence, tier, getattr(stats.confidence, tier) + 1)
        return stats


class RedactionResult(BaseModel):
    """Redacted text together with the placeholders needed to reverse it."""

    redacted: str
    placeholders: List[Placeholder] = Field(default_factory=list)
    stats: RedactionStats = Field(default_factory=RedactionStats)

    def to_summary(self) -> Dict[str, object]:
        """Audit-safe summary: counts and types only, never original values."""
        return {
            "total_redactions": self.stats.total_redactions,
            "by_type": dict(self.stats.by_type),
            "confidence": self.stats.confidence.model_dump(),
            "redacted_length": len(self.redacted),
        }


class ValidationReport(BaseModel):
    """Outcome of validating a round-tripped text."""

    is_valid: bool
    issues: List[str] = Field(default_factory=list)
    score: int = Field(100, ge=0, le=100)
    checks_run: List[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=datetime.now)
