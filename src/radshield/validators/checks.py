"""Built-in checks: unresolved placeholders, leaks and missed PII."""

import re
from typing import Dict, List, Tuple

from ..privacy.registry import (
    EMAIL_PATTERN,
    IP_ADDRESS_PATTERN,
    PAYMENT_CARD_PATTERN,
    PHONE_PATTERN,
    SSN_PATTERN,
)
from ..schemas.redaction import Placeholder
from .base import BaseCheck, CheckFinding


def reinserted_spans(
    final_text: str, placeholders: List[Placeholder]
) -> List[Tuple[int, int]]:
    """Spans of final_text where a placeholder's original value occurs.

    Text that still carries placeholder tokens has not been through
    reinsertion, so it has no such spans.
    """
    if any(p.id in final_text for p in placeholders):
        return []
    spans = []
    for p in placeholders:
        if not p.original:
            continue
        start = final_text.find(p.original)
        while start != -1:
            spans.append((start, start + len(p.original)))
            start = final_text.find(p.original, start + 1)
    return spans


def is_attributable(start: int, end: int, spans: List[Tuple[int, int]]) -> bool:
    """True if text[start:end] overlaps a reinserted value."""
    return any(
        start < span_end and span_start < end for span_start, span_end in spans
    )


class UnresolvedPlaceholderCheck(BaseCheck):
    """Flag placeholders whose token survived while the original is missing."""

    def __init__(self, penalty_per_placeholder: int = 10):
        self.penalty_per_placeholder = penalty_per_placeholder

    @property
    def name(self) -> str:
        return "unresolved_placeholders"

    @property
    def description(self) -> str:
        return "Verifies that every placeholder token was replaced by its original value"

    def check(
        self,
        original: str,
        final_text: str,
        placeholders: List[Placeholder],
    ) -> List[CheckFinding]:
        unresolved = [
            p for p in placeholders if p.original not in final_text and p.id in final_text
        ]
        if not unresolved:
            return []

        ids = ", ".join(p.id for p in unresolved)
        return [
            CheckFinding(
                check_name=self.name,
                message=f"{len(unresolved)} placeholders not reinserted: {ids}",
                penalty=self.penalty_per_placeholder * len(unresolved),
            )
        ]


class PatternCategoryCheck(BaseCheck):
    """Report each category whose pattern finds unattributable matches."""

    categories: Dict[str, re.Pattern] = {}
    penalty_per_category: int = 0
    message_prefix: str = ""

    def check(
        self,
        original: str,
        final_text: str,
        placeholders: List[Placeholder],
    ) -> List[CheckFinding]:
        findings = []
        spans = reinserted_spans(final_text, placeholders)
        for category, pattern in self.categories.items():
            offending = [
                m.group()
                for m in pattern.finditer(final_text)
                if not is_attributable(m.start(), m.end(), spans)
            ]
            if offending:
                findings.append(
                    CheckFinding(
                        check_name=self.name,
                        message=f"{self.message_prefix}: {category}",
                        penalty=self.penalty_per_category,
                        category=category,
                    )
                )
        return findings


class LeakCheck(PatternCategoryCheck):
    """Structural identifiers that should have stayed behind a placeholder."""

    categories = {
        "email addresses": EMAIL_PATTERN,
        "phone numbers": PHONE_PATTERN,
    }
    penalty_per_category = 15
    message_prefix = "Potential data leak detected"

    @property
    def name(self) -> str:
        return "data_leaks"

    @property
    def description(self) -> str:
        return "Re-runs email and phone detection against the final text"


class MissedPIICheck(PatternCategoryCheck):
    """Independent structural checks for identifiers nobody redacted."""

    categories = {
        "SSN": SSN_PATTERN,
        "credit card": PAYMENT_CARD_PATTERN,
        "IP address": IP_ADDRESS_PATTERN,
    }
    penalty_per_category = 20
    message_prefix = "Missed PII"

    @property
    def name(self) -> str:
        return "missed_pii"

    @property
    def description(self) -> str:
        return "Looks for government ids, card numbers and network addresses"


def get_all_default_checks() -> List[BaseCheck]:
    """Instantiate all built-in checks with default configuration."""
    return [
        UnresolvedPlaceholderCheck(),
        LeakCheck(),
        MissedPIICheck(),
    ]
