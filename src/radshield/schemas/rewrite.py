"""Request and result types for the report rewriting pipeline."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from .redaction import RedactionStats, ValidationReport


class RewriteOptions(BaseModel):
    """How the language model should rework a report."""

    mode: Literal["1", "2", "3", "4", "5"] = Field(
        "1", description="Rewrite depth, from pure proofreading (1) to differentials (5)"
    )
    style: Literal["knapp", "neutral", "ausführlicher"] = "neutral"
    address: Literal["sie", "neutral"] = "neutral"
    layout: Optional[str] = Field(
        None,
        description="Predefined layout name or a custom template containing [BEFUND]",
    )
    include_recommendations: bool = False


class RewriteResult(BaseModel):
    """Final rewritten report plus the audit data gathered along the way."""

    request_id: str
    content: str
    redaction_stats: RedactionStats
    validation: ValidationReport
    model: str = ""
    tokens_used: int = 0
    duration_ms: float = 0.0

    def to_summary(self) -> str:
        """Short human readable summary of the rewrite."""
        lines = [
            f"Request: {self.request_id}",
            f"Model: {self.model}",
            f"Redactions: {self.redaction_stats.total_redactions}",
            f"Validation score: {self.validation.score}",
            f"Tokens: {self.tokens_used}",
            f"Duration: {self.duration_ms:.0f}ms",
        ]
        if self.validation.issues:
            lines.append("Issues: " + "; ".join(self.validation.issues))
        return "\n".join(lines)
