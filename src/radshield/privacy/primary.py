"""Primary redaction pass: detectors applied as a fold over the text.

Each detector is one step taking a ``RedactionState`` and returning a new one.
Steps see the already partially redacted text, so a span consumed by an
earlier detector can never be matched again.
"""

from __future__ import annotations

from functools import reduce
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

from ..errors import InvalidArgumentError
from ..schemas.redaction import Placeholder, RedactionResult, RedactionStats
from .registry import PLACEHOLDER_PATTERN, Detector, PatternRegistry, make_placeholder_id


class RedactionState(NamedTuple):
    """Text and placeholders at one point of a redaction call."""

    text: str
    placeholders: Tuple[Placeholder, ...] = ()
    next_index: int = 0

    @classmethod
    def initial(cls, text: str) -> "RedactionState":
        return cls(text=text)


def require_text(value: object, argument: str) -> str:
    """Fail fast on non-text input."""
    if not isinstance(value, str):
        raise InvalidArgumentError(
            f"'{argument}' must be a string, got {type(value).__name__}"
        )
    return value


def token_spans(text: str) -> List[Tuple[int, int]]:
    """Spans of every placeholder token already present in text."""
    return [m.span() for m in PLACEHOLDER_PATTERN.finditer(text)]


def _overlaps(start: int, end: int, spans: Sequence[Tuple[int, int]]) -> bool:
    return any(start < s_end and end > s_start for s_start, s_end in spans)


def substitute(
    state: RedactionState,
    matches: Iterable[Tuple[int, int, str]],
    semantic_type: str,
    confidence: float,
) -> RedactionState:
    """Replace matched spans with freshly numbered placeholders.

    Matches must be in ascending, non-overlapping order. Matches that touch
    an existing placeholder token are skipped.
    """
    text = state.text
    protected = token_spans(text)
    placeholders = list(state.placeholders)
    index = state.next_index
    pieces: List[str] = []
    cursor = 0

    for start, end, value in matches:
        if start < cursor or _overlaps(start, end, protected):
            continue
        placeholder_id = make_placeholder_id(semantic_type, index)
        placeholders.append(
            Placeholder(
                id=placeholder_id,
                original=value,
                type=semantic_type,
                confidence=confidence,
            )
        )
        index += 1
        pieces.append(text[cursor:start])
        pieces.append(placeholder_id)
        cursor = end

    if index == state.next_index:
        return state

    pieces.append(text[cursor:])
    return RedactionState("".join(pieces), tuple(placeholders), index)


def apply_detector(state: RedactionState, detector: Detector) -> RedactionState:
    """One redaction pass of a single detector over the current text."""
    return substitute(
        state,
        detector.find(state.text),
        detector.semantic_type,
        detector.confidence,
    )


def build_result(state: RedactionState) -> RedactionResult:
    placeholders = list(state.placeholders)
    return RedactionResult(
        redacted=state.text,
        placeholders=placeholders,
        stats=RedactionStats.from_placeholders(placeholders),
    )


class PrimaryRedactor:
    """Applies a registry's detectors sequentially, in registration order."""

    def __init__(self, registry: PatternRegistry):
        self.registry = registry

    def run(
        self,
        state: RedactionState,
        detectors: Optional[Sequence[Detector]] = None,
    ) -> RedactionState:
        """Fold the detectors over a state.

        Uses one registry snapshot for the whole call unless explicit
        detectors are given.
        """
        if detectors is None:
            detectors = self.registry.snapshot()
        return reduce(apply_detector, detectors, state)

    def redact(self, text: str) -> RedactionResult:
        require_text(text, "text")
        return build_result(self.run(RedactionState.initial(text)))
