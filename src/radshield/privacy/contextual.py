"""Second redaction pass driven by surrounding context.

Catches what pure patterns cannot: long bare numbers that are not clinical
measurements, and examiner names following a reporting verb phrase.
"""

from __future__ import annotations

import re
from typing import Iterator, List, Optional, Tuple

from ..schemas.redaction import Placeholder
from .primary import RedactionState, require_text, substitute
from .registry import EXAMINER_TYPE, NAME_PART, NUMERIC_ID_TYPE

NUMERIC_ID_PATTERN = re.compile(r"\b\d{6,12}\b")

EXAMINER_PATTERN = re.compile(
    r"\b(?i:untersucht|beurteilt|befundet)[ \t]+(?i:von)[ \t]+"
    r"(?!(?:Dr|Prof|PD)\b)"
    rf"(?P<value>{NAME_PART}(?:[ \t]+{NAME_PART})*)\b"
)

# Length, volume, mass, temperature, pressure, rate and frequency units
MEASUREMENT_UNIT_PATTERN = re.compile(
    r"(?<![A-Za-zÄÖÜäöüß])"
    r"(?:mmHg|mm|cm|ml|mL|mg|µg|kg|°C|bpm|/min|kHz|MHz|Hz|m|l|L|g)"
    r"(?![A-Za-zÄÖÜäöüß])"
)

MEASUREMENT_WINDOW = 20

NUMERIC_ID_CONFIDENCE = 0.6
EXAMINER_CONFIDENCE = 0.7


def is_near_measurement(text: str, start: int, end: int) -> bool:
    """True if a unit token lies within the window around text[start:end]."""
    window = text[max(0, start - MEASUREMENT_WINDOW) : end + MEASUREMENT_WINDOW]
    return MEASUREMENT_UNIT_PATTERN.search(window) is not None


def _numeric_candidates(text: str) -> Iterator[Tuple[int, int, str]]:
    for match in NUMERIC_ID_PATTERN.finditer(text):
        value = match.group()
        if "[" in value or is_near_measurement(text, match.start(), match.end()):
            continue
        yield match.start(), match.end(), value


def _examiner_candidates(text: str) -> Iterator[Tuple[int, int, str]]:
    for match in EXAMINER_PATTERN.finditer(text):
        start, end = match.span("value")
        yield start, end, match.group("value")


class ContextualRedactor:
    """Heuristic rules applied after the primary pass."""

    def __init__(self, numeric_ids: bool = True, examiner_names: bool = True):
        self.numeric_ids = numeric_ids
        self.examiner_names = examiner_names

    def apply(self, state: RedactionState) -> RedactionState:
        if self.numeric_ids:
            state = substitute(
                state,
                _numeric_candidates(state.text),
                NUMERIC_ID_TYPE,
                NUMERIC_ID_CONFIDENCE,
            )
        if self.examiner_names:
            state = substitute(
                state,
                _examiner_candidates(state.text),
                EXAMINER_TYPE,
                EXAMINER_CONFIDENCE,
            )
        return state

    @property
    def semantic_types(self) -> List[str]:
        types = []
        if self.numeric_ids:
            types.append(NUMERIC_ID_TYPE)
        if self.examiner_names:
            types.append(EXAMINER_TYPE)
        return types


def apply_contextual(
    text: str,
    placeholders: List[Placeholder],
    start_index: Optional[int] = None,
) -> str:
    """Run the contextual pass on partially redacted text.

    New placeholders are appended to ``placeholders``. Numbering continues
    from ``start_index``, which defaults to the number of placeholders
    already present.
    """
    require_text(text, "text")
    if start_index is None:
        start_index = len(placeholders)
    known = len(placeholders)
    state = ContextualRedactor().apply(
        RedactionState(text, tuple(placeholders), start_index)
    )
    placeholders.extend(state.placeholders[known:])
    return state.text
