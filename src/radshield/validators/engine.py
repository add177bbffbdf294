"""Validation engine that runs checks and produces a ValidationReport."""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from ..privacy.primary import require_text
from ..privacy.reinsertion import coerce_placeholders
from ..schemas.redaction import Placeholder, ValidationReport
from .base import BaseCheck, CheckFinding

logger = logging.getLogger(__name__)

MAX_SCORE = 100


class ValidationEngine:
    """
    Runs checks against a round-tripped text and scores the result.

    Usage:
        engine = ValidationEngine()  # loads built-in checks
        report = engine.validate(original, final_text, placeholders)

        # Custom checks only:
        engine = ValidationEngine(checks=[MyCheck()], include_defaults=False)
    """

    def __init__(
        self,
        checks: Optional[List[BaseCheck]] = None,
        include_defaults: bool = True,
    ):
        self._checks: List[BaseCheck] = []
        if include_defaults:
            self._checks.extend(self._get_default_checks())
        if checks:
            self._checks.extend(checks)

    @staticmethod
    def _get_default_checks() -> List[BaseCheck]:
        from .checks import get_all_default_checks

        return get_all_default_checks()

    @property
    def checks(self) -> List[BaseCheck]:
        return list(self._checks)

    def add_check(self, check: BaseCheck) -> None:
        self._checks.append(check)

    def remove_check(self, check_name: str) -> None:
        self._checks = [c for c in self._checks if c.name != check_name]

    def validate(
        self,
        original: str,
        final_text: str,
        placeholders: Iterable[Placeholder],
    ) -> ValidationReport:
        require_text(original, "original")
        require_text(final_text, "final_text")
        placeholders = coerce_placeholders(placeholders)

        all_findings: List[CheckFinding] = []
        checks_run: List[str] = []

        for check in self._checks:
            checks_run.append(check.name)
            try:
                all_findings.extend(check.check(original, final_text, placeholders))
            except Exception:
                logger.exception("Validation check '%s' failed", check.name)
                all_findings.append(
                    CheckFinding(
                        check_name=check.name,
                        message=f"Check '{check.name}' raised an exception and was skipped",
                    )
                )

        return self._build_report(all_findings, checks_run)

    @staticmethod
    def _build_report(
        findings: List[CheckFinding], checks_run: List[str]
    ) -> ValidationReport:
        issues = [f.message for f in findings]
        score = MAX_SCORE - sum(f.penalty for f in findings)

        return ValidationReport(
            is_valid=len(issues) == 0,
            issues=issues,
            score=max(0, score),
            checks_run=checks_run,
            timestamp=datetime.now(),
        )
