"""Ordered registry of named PII detectors.

Detectors run in registration order, so the order of the seed list below is
significant: structurally unambiguous identifiers first, label-anchored and
name heuristics last.
"""

from __future__ import annotations

import re
import sys
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

if sys.version_info >= (3, 11):
    from re import _parser as sre_parse
else:
    import sre_parse

from ..errors import InvalidArgumentError, InvalidDetectorRuleError

# Reserved placeholder syntax: [TYPE_INDEX]
PLACEHOLDER_PATTERN = re.compile(r"\[[A-Z][A-Z0-9_]*_\d+\]")

_SEMANTIC_TYPE = re.compile(r"[a-z][a-z0-9_]*")

# Capitalized German name part, optionally hyphenated (Müller-Lüdenscheidt)
NAME_PART = r"[A-ZÄÖÜ][a-zäöüß]+(?:-[A-ZÄÖÜ][a-zäöüß]+)?"

EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

# German numbers: +49 or trunk prefix 0, at least six digits in total
PHONE_PATTERN = re.compile(
    r"(?<![\w+])(?=(?:\+49|0)(?:[ /-]?\d){6,})"
    r"(?:\+49[ ]?|0)[1-9]\d{1,4}(?:[ /-]?\d{1,4}){1,3}(?!\d)"
)

# Not the tail of a digit group chain such as "030 123-45-6789"
SSN_PATTERN = re.compile(r"(?<!\d[ /-])\b\d{3}-\d{2}-\d{4}\b")

PAYMENT_CARD_PATTERN = re.compile(r"\b\d{4}(?:[ -]?\d{4}){3}\b")

IP_ADDRESS_PATTERN = re.compile(
    r"\b(?:(?:25[0-5]|2[0-4]\d|1?\d?\d)\.){3}(?:25[0-5]|2[0-4]\d|1?\d?\d)\b(?!\.\d)"
)

DICOM_UID_PATTERN = re.compile(r"\b\d+(?:\.\d+){4,}\b")

_DOCTOR_TITLE = r"(?:PD[ \t]+Dr\.?|Prof\.?(?:[ \t]+Dr\.?)?|Dr\.?)(?:[ \t]+med\.)?"
_STREET = (
    r"(?:[A-ZÄÖÜ][a-zäöüß]*(?:straße|strasse|str\.|weg|platz|allee|ring|gasse|damm)"
    r"|[A-ZÄÖÜ][a-zäöüß]+[ \t-](?:Straße|Str\.|Weg|Platz|Allee|Ring|Gasse|Damm))"
    r"[ \t]+\d{1,4}[a-z]?"
)
_POSTAL_CITY = rf"\d{{5}}[ \t]+{NAME_PART}(?:[ \t]{NAME_PART})?"

# (name, rule, semantic type, confidence) in application order
DEFAULT_DETECTORS: List[Tuple[str, str, str, float]] = [
    ("email", EMAIL_PATTERN.pattern, "email", 0.95),
    ("dicom_uid", DICOM_UID_PATTERN.pattern, "dicom_uid", 0.95),
    ("ip_address", IP_ADDRESS_PATTERN.pattern, "ip_address", 0.9),
    ("payment_card", PAYMENT_CARD_PATTERN.pattern, "payment_card", 0.9),
    ("phone", PHONE_PATTERN.pattern, "phone", 0.9),
    ("ssn", SSN_PATTERN.pattern, "ssn", 0.95),
    (
        "patient_id",
        r"\b(?i:Patient|Pat\.?|Fall)[ \t]*[:\-]?[ \t]*"
        r"(?P<value>(?=[A-Z]*\d)[A-Z0-9]{6,12})\b",
        "patient_id",
        0.85,
    ),
    (
        "mrn",
        r"\b(?i:MRN|Fallnummer|Aktenzeichen)[ \t]*[:\-]?[ \t]*"
        r"(?P<value>(?=[A-Z]*\d)[A-Z0-9]{6,12})\b",
        "mrn",
        0.9,
    ),
    (
        "insurance_number",
        r"\b(?i:Versicherten(?:nummer|nr\.?)|Versicherungs(?:nummer|nr\.?)"
        r"|Versicherung|Vers\.?|Kasse)[ \t]*[:\-]?[ \t]*"
        r"(?P<value>(?=[A-Z]*\d)[A-Z0-9]{8,12})\b",
        "insurance_number",
        0.8,
    ),
    (
        "medical_record",
        r"\b(?i:Krankenakte|Akte|Befund(?:nummer|nr\.?)?)[ \t]*[:\-]?[ \t]*"
        r"(?P<value>(?=[A-Z]*\d)[A-Z0-9]{4,10})\b",
        "medical_record",
        0.75,
    ),
    (
        "birth_date",
        r"\b(?i:geboren(?:[ \t]+am)?|geb\.?|DOB)[ \t]*[:\-]?[ \t]*"
        r"(?P<value>\d{1,2}[./-]\d{1,2}[./-]\d{2,4})\b",
        "birth_date",
        0.85,
    ),
    ("date_iso", r"\b\d{4}-\d{2}-\d{2}\b", "date", 0.8),
    ("date_local", r"\b\d{1,2}[./-]\d{1,2}[./-]\d{2,4}\b", "date", 0.7),
    (
        "doctor_name",
        rf"\b{_DOCTOR_TITLE}[ \t]+(?P<value>{NAME_PART}(?:[ \t]+{NAME_PART})*)\b",
        "doctor_name",
        0.8,
    ),
    (
        "patient_name",
        r"\b(?i:Name|Patientin|Patient|Pat\.?|Herr|Frau)[ \t]*[:\-]?[ \t]*"
        rf"(?!(?:Dr|Prof|PD)\b)(?P<value>{NAME_PART}(?:[ \t]+{NAME_PART})?)\b",
        "patient_name",
        0.75,
    ),
    (
        "address",
        rf"\b(?:{_STREET}(?:,?[ \t]*{_POSTAL_CITY})?|{_POSTAL_CITY})\b",
        "address",
        0.7,
    ),
]

# Types the contextual pass assigns without a registered detector
NUMERIC_ID_TYPE = "numeric_id"
EXAMINER_TYPE = "examiner_name"

# Synthetic type names spanning the token alphabet
_SYNTHETIC_TYPES = ("x", "q9", "ab_cd", "shouty_type_x")
_TOKEN_INDICES = (0, 7, 12, 345)
_TOKEN_CONTEXTS = ("{}", "Befund {} vom", "Befund:{}.", "\n{}\n")


@dataclass(frozen=True)
class Detector:
    """A named rule associating a match pattern with a semantic type."""

    name: str
    pattern: re.Pattern
    semantic_type: str
    confidence: float

    def find(self, text: str) -> Iterator[Tuple[int, int, str]]:
        """Yield (start, end, value) for every non-empty match in text.

        If the pattern defines a ``value`` group, only that group is reported.
        """
        has_value_group = "value" in self.pattern.groupindex
        for match in self.pattern.finditer(text):
            start, end = match.span()
            if has_value_group and match.group("value") is not None:
                start, end = match.span("value")
            if start == end:
                continue
            yield start, end, text[start:end]


def make_placeholder_id(semantic_type: str, index: int) -> str:
    """Build the placeholder token for a semantic type and global index."""
    return f"[{semantic_type.upper()}_{index}]"


def _compile_rule(rule: Union[str, re.Pattern]) -> re.Pattern:
    if isinstance(rule, re.Pattern):
        if isinstance(rule.pattern, bytes):
            raise InvalidDetectorRuleError("Rule must be a text pattern, not bytes")
        return rule
    if not isinstance(rule, str):
        raise InvalidDetectorRuleError(
            f"Rule must be a string or compiled pattern, got {type(rule).__name__}"
        )
    try:
        return re.compile(rule)
    except re.error as e:
        raise InvalidDetectorRuleError(f"Rule does not compile: {e}") from e


def _min_width(pattern: re.Pattern) -> int:
    return sre_parse.parse(pattern.pattern, pattern.flags).getwidth()[0]


def _sample_tokens(semantic_types: Iterable[str]) -> Iterator[str]:
    types = dict.fromkeys(
        list(semantic_types)
        + [semantic_type for _, _, semantic_type, _ in DEFAULT_DETECTORS]
        + [NUMERIC_ID_TYPE, EXAMINER_TYPE]
        + list(_SYNTHETIC_TYPES)
    )
    for semantic_type in types:
        for index in _TOKEN_INDICES:
            yield make_placeholder_id(semantic_type, index)


def _check_rule(
    name: str, pattern: re.Pattern, semantic_types: Iterable[str]
) -> None:
    if _min_width(pattern) == 0:
        raise InvalidDetectorRuleError(
            f"Rule for detector '{name}' can match an empty string"
        )

    for token in _sample_tokens(semantic_types):
        for context in _TOKEN_CONTEXTS:
            text = context.format(token)
            token_start = text.index(token)
            token_end = token_start + len(token)
            for match in pattern.finditer(text):
                if match.start() <= token_start and match.end() >= token_end:
                    raise InvalidDetectorRuleError(
                        f"Rule for detector '{name}' matches placeholder token {token}"
                    )


class PatternRegistry:
    """Thread-safe, copy-on-write registry of detectors keyed by name.

    Writers swap in a new ordered dict under a lock; readers take an
    immutable snapshot, so a redaction call never sees a torn detector set.

    Example:
        registry = PatternRegistry.with_defaults()
        registry.register("case_no", r"\\bKS-\\d{6}\\b", "case_number", 0.9)
        [d.name for d in registry.list_detectors()][-1]  # 'case_no'
    """

    def __init__(self, detectors: Optional[Iterable[Detector]] = None):
        self._lock = threading.RLock()
        self._detectors: Dict[str, Detector] = {}
        for detector in detectors or ():
            self.register(
                detector.name,
                detector.pattern,
                detector.semantic_type,
                detector.confidence,
            )

    @classmethod
    def with_defaults(cls) -> "PatternRegistry":
        """Create a registry seeded with the reference detectors."""
        registry = cls()
        for name, rule, semantic_type, confidence in DEFAULT_DETECTORS:
            registry.register(name, rule, semantic_type, confidence)
        return registry

    def register(
        self,
        name: str,
        rule: Union[str, re.Pattern],
        semantic_type: str,
        confidence: float,
    ) -> Detector:
        """Add a detector, or replace the one registered under ``name``.

        A replaced detector keeps its position in the application order.

        Raises:
            InvalidArgumentError: If name, type or confidence are malformed.
            InvalidDetectorRuleError: If the rule does not compile, can match
                an empty string, or can match a placeholder token.
        """
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgumentError("Detector name must be a non-empty string")
        if not isinstance(semantic_type, str) or not _SEMANTIC_TYPE.fullmatch(
            semantic_type
        ):
            raise InvalidArgumentError(
                f"Semantic type must be a lowercase identifier, got {semantic_type!r}"
            )
        if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
            raise InvalidArgumentError("Confidence must be a number")
        if not 0.0 <= confidence <= 1.0:
            raise InvalidArgumentError(
                f"Confidence must be within [0, 1], got {confidence}"
            )

        pattern = _compile_rule(rule)
        _check_rule(
            name,
            pattern,
            [semantic_type] + [d.semantic_type for d in self.snapshot()],
        )

        detector = Detector(
            name=name,
            pattern=pattern,
            semantic_type=semantic_type,
            confidence=float(confidence),
        )
        with self._lock:
            updated = dict(self._detectors)
            updated[name] = detector
            self._detectors = updated
        return detector

    def remove_by_name(self, name: str) -> bool:
        """Unregister a detector. Returns whether the name existed."""
        with self._lock:
            if name not in self._detectors:
                return False
            updated = dict(self._detectors)
            del updated[name]
            self._detectors = updated
            return True

    def snapshot(self) -> Tuple[Detector, ...]:
        """Return a consistent, immutable view of the detectors in order."""
        with self._lock:
            return tuple(self._detectors.values())

    def list_detectors(self) -> List[Detector]:
        return list(self.snapshot())

    def get(self, name: str) -> Optional[Detector]:
        return self._detectors.get(name)

    def names(self) -> List[str]:
        return [d.name for d in self.snapshot()]

    def semantic_types(self) -> List[str]:
        """Distinct semantic types, in first-registration order."""
        return list(dict.fromkeys(d.semantic_type for d in self.snapshot()))

    def summary(self) -> Dict[str, float]:
        """Aggregate figures about the registered patterns."""
        detectors = self.snapshot()
        total = len(detectors)
        return {
            "total_patterns": total,
            "types": len({d.semantic_type for d in detectors}),
            "average_confidence": (
                sum(d.confidence for d in detectors) / total if total else 0.0
            ),
            "high_confidence_patterns": sum(
                1 for d in detectors if d.confidence >= 0.8
            ),
        }

    def __len__(self) -> int:
        return len(self._detectors)

    def __contains__(self, name: object) -> bool:
        return name in self._detectors
