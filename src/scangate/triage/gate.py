"""Risk gate — the terminal pass/fail verdict of a scan session."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from scangate.errors import RiskThresholdExceeded
from scangate.scanner.models import Finding, Risk
from scangate.triage.engine import AlertTriageEngine


@dataclass(frozen=True)
class GateVerdict:
    """Result of checking triaged findings against an accepted risk rating."""

    passed: bool
    rating: Risk
    findings: tuple[Finding, ...]
    report: str

    @property
    def count(self) -> int:
        return len(self.findings)


class RiskGate:
    """Fails when any finding is at or above the accepted rating (inclusive)."""

    @staticmethod
    def evaluate(findings: Iterable[Finding], rating: Risk | str) -> GateVerdict:
        rating = Risk.parse(rating)
        offending = AlertTriageEngine.filter_by_minimum_risk(findings, rating)
        return GateVerdict(
            passed=not offending,
            rating=rating,
            findings=tuple(offending),
            report=AlertTriageEngine.render_details(offending),
        )

    def assert_no_risk_at_or_above(
        self,
        findings: Iterable[Finding],
        rating: Risk | str,
    ) -> GateVerdict:
        verdict = self.evaluate(findings, rating)
        if not verdict.passed:
            raise RiskThresholdExceeded(verdict.rating, verdict.findings, verdict.report)
        return verdict
