"""Tests for the detector registry."""

import re
import threading

import pytest

from radshield.errors import InvalidArgumentError, InvalidDetectorRuleError
from radshield.privacy import (
    DEFAULT_DETECTORS,
    PLACEHOLDER_PATTERN,
    PatternRegistry,
    PIIRedactor,
    make_placeholder_id,
)
from radshield.privacy.registry import SSN_PATTERN


class TestDefaults:
    """Test the reference registry."""

    def test_seed_order_is_preserved(self, registry):
        assert registry.names() == [name for name, *_ in DEFAULT_DETECTORS]

    def test_structural_detectors_come_first(self, registry):
        names = registry.names()
        assert names[0] == "email"
        assert names.index("birth_date") < names.index("date_local")
        assert names.index("doctor_name") < names.index("patient_name")

    def test_phone_runs_before_ssn(self, registry):
        names = registry.names()
        assert names.index("payment_card") < names.index("phone")
        assert names.index("phone") < names.index("ssn")

    def test_ssn_pattern_skips_digit_group_tails(self):
        assert SSN_PATTERN.search("SSN 123-45-6789")
        assert not SSN_PATTERN.search("Tel 030 123-45-6789")
        assert not SSN_PATTERN.search("Tel 030/123-45-6789")

    def test_summary(self, registry):
        stats = registry.summary()

        assert stats["total_patterns"] == len(DEFAULT_DETECTORS)
        assert stats["types"] == len({t for _, _, t, _ in DEFAULT_DETECTORS})
        assert 0.7 < stats["average_confidence"] < 0.95
        assert stats["high_confidence_patterns"] >= 10

    def test_semantic_types_are_distinct(self, registry):
        types = registry.semantic_types()
        assert len(types) == len(set(types))
        assert "date" in types
        assert "email" in types

    def test_empty_registry(self):
        registry = PatternRegistry()
        assert len(registry) == 0
        assert registry.summary()["average_confidence"] == 0.0


class TestRegister:
    """Test registration and its validation."""

    def test_register_appends(self, registry):
        detector = registry.register("case_no", r"\bKS-\d{6}\b", "case_number", 0.9)

        assert registry.names()[-1] == "case_no"
        assert detector.semantic_type == "case_number"
        assert "case_no" in registry

    def test_register_accepts_compiled_pattern(self, registry):
        registry.register("ticket", re.compile(r"\bT#\d{4}\b"), "ticket", 0.5)
        assert registry.get("ticket").pattern.pattern == r"\bT#\d{4}\b"

    def test_overwrite_keeps_position(self, registry):
        position = registry.names().index("ssn")
        registry.register("ssn", r"\b\d{3}\.\d{2}\.\d{4}\b", "ssn", 0.8)

        assert registry.names().index("ssn") == position
        assert registry.get("ssn").confidence == 0.8
        assert len(registry) == len(DEFAULT_DETECTORS)

    def test_empty_match_rule_rejected(self, registry):
        with pytest.raises(InvalidDetectorRuleError, match="empty string"):
            registry.register("digits", r"\d*", "digits", 0.5)

    def test_placeholder_matching_rule_rejected(self, registry):
        with pytest.raises(InvalidDetectorRuleError, match="placeholder token"):
            registry.register("tokens", r"\[[A-Z_]+\d*\]", "token", 0.5)

    def test_rule_matching_own_token_rejected(self, registry):
        with pytest.raises(InvalidDetectorRuleError):
            registry.register("shouty", r"\[SHOUTY_\d+\]", "shouty", 0.5)

    @pytest.mark.parametrize("rule", [r"(?=Z)", r"(?<=X)", r"\b", r"(?:Z|)"])
    def test_zero_width_rule_rejected(self, rule):
        with pytest.raises(InvalidDetectorRuleError, match="empty string"):
            PatternRegistry().register("bad", rule, "custom", 0.5)

    def test_other_types_tokens_rejected_on_empty_registry(self):
        """Tokens of every type are reserved, not only registered ones."""
        with pytest.raises(InvalidDetectorRuleError, match="placeholder token"):
            PatternRegistry().register("tok", r"\[PHONE_\d+\]", "custom", 0.5)

    def test_unknown_type_tokens_rejected(self):
        with pytest.raises(InvalidDetectorRuleError, match="placeholder token"):
            PatternRegistry().register("tok", r"\[[A-Z]+_\d+\]", "custom", 0.5)

    def test_bytes_rule_rejected(self):
        with pytest.raises(InvalidDetectorRuleError, match="bytes"):
            PatternRegistry().register("raw", re.compile(rb"\d{6}"), "custom", 0.5)

    def test_rule_touching_part_of_token_accepted(self):
        detector = PatternRegistry().register("digits", r"\d{3,}", "custom", 0.5)
        assert detector.name == "digits"

    def test_invalid_regex_rejected(self, registry):
        with pytest.raises(InvalidDetectorRuleError, match="does not compile"):
            registry.register("broken", r"(unclosed", "broken", 0.5)

    def test_non_string_rule_rejected(self, registry):
        with pytest.raises(InvalidDetectorRuleError):
            registry.register("number", 42, "number", 0.5)

    @pytest.mark.parametrize("confidence", [-0.1, 1.5, "high", True])
    def test_bad_confidence_rejected(self, registry, confidence):
        with pytest.raises(InvalidArgumentError):
            registry.register("case_no", r"\bKS-\d{6}\b", "case_number", confidence)

    @pytest.mark.parametrize("semantic_type", ["", "Case", "case-no", "1case"])
    def test_bad_semantic_type_rejected(self, registry, semantic_type):
        with pytest.raises(InvalidArgumentError):
            registry.register("case_no", r"\bKS-\d{6}\b", semantic_type, 0.5)

    def test_empty_name_rejected(self, registry):
        with pytest.raises(InvalidArgumentError):
            registry.register("  ", r"\bKS-\d{6}\b", "case_number", 0.5)

    def test_failed_registration_leaves_registry_unchanged(self, registry):
        before = registry.names()
        with pytest.raises(InvalidDetectorRuleError):
            registry.register("email", r"x*", "email", 0.9)
        assert registry.names() == before
        assert registry.get("email").confidence == 0.95


class TestRemove:
    def test_remove_existing(self, registry):
        assert registry.remove_by_name("address") is True
        assert "address" not in registry

    def test_remove_missing(self, registry):
        assert registry.remove_by_name("nope") is False

    def test_removed_detector_no_longer_applies(self):
        redactor = PIIRedactor(contextual=False)
        redactor.remove_pattern("email")

        result = redactor.redact("Kontakt: a@b.de")
        assert result.redacted == "Kontakt: a@b.de"


class TestSnapshots:
    """Test copy-on-write behaviour."""

    def test_snapshot_is_not_affected_by_later_writes(self, registry):
        snapshot = registry.snapshot()
        registry.register("case_no", r"\bKS-\d{6}\b", "case_number", 0.9)
        registry.remove_by_name("email")

        assert len(snapshot) == len(DEFAULT_DETECTORS)
        assert snapshot[0].name == "email"

    def test_concurrent_register_during_redaction(self, registry):
        """Redaction calls stay consistent while the registry changes."""
        redactor = PIIRedactor(registry=registry)
        text = "Kontakt: a@b.de, Vorgang KS-123456"
        results = []
        errors = []

        def redact_many():
            try:
                for _ in range(50):
                    results.append(redactor.redact(text))
            except Exception as e:  # pragma: no cover
                errors.append(e)

        def register_many():
            for i in range(50):
                registry.register(f"custom_{i}", rf"\bKS-{i:06d}\b", "case_number", 0.9)
                registry.remove_by_name(f"custom_{i}")

        threads = [threading.Thread(target=redact_many) for _ in range(3)]
        threads.append(threading.Thread(target=register_many))
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        for result in results:
            assert result.stats.total_redactions == len(result.placeholders)
            assert "a@b.de" not in result.redacted


class TestPlaceholderIds:
    def test_make_placeholder_id(self):
        assert make_placeholder_id("patient_name", 3) == "[PATIENT_NAME_3]"

    def test_ids_match_reserved_syntax(self):
        assert PLACEHOLDER_PATTERN.fullmatch(make_placeholder_id("ip_address", 12))

    def test_custom_detector_applied_in_order(self, registry):
        registry.register("case_no", r"\bKS-\d{6}\b", "case_number", 0.9)
        result = PIIRedactor(registry=registry).redact("Vorgang KS-123456")

        assert result.redacted == "Vorgang [CASE_NUMBER_0]"
        assert result.placeholders[0].original == "KS-123456"
