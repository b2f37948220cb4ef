"""Alert triage — false-positive suppression, dedupe, risk filtering, reports."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from scangate.policy.models import FalsePositiveRule
from scangate.scanner.base import RemoteScannerClient
from scangate.scanner.models import Finding, Risk
from scangate.session.models import ScanSession

logger = logging.getLogger(__name__)

# Backend-native equality between two alerts
MatchPredicate = Callable[[Finding, Finding], bool]


class AlertTriageEngine:
    """Reduces the raw alert stream to actionable findings.

    Two findings are the same issue only when their (cwe id, parameter, URL)
    tuples are equal *and* the backend's own predicate says they match.
    Findings with different CWE ids are never merged.
    """

    def __init__(
        self,
        client: RemoteScannerClient,
        session: ScanSession,
        matches: MatchPredicate | None = None,
    ) -> None:
        self._client = client
        self._session = session
        self._matches = matches if matches is not None else client.findings_match

    def fetch_raw(self) -> list[Finding]:
        """Replace the session's findings with the backend's current alerts."""
        findings = list(self._client.fetch_alerts())
        self._session.findings = findings
        logger.info("Retrieved %d raw alerts", len(findings))
        return findings

    def triage(self, rules: Iterable[FalsePositiveRule] = ()) -> list[Finding]:
        """Fetch, drop false positives and dedupe; the result becomes session state."""
        raw = self.fetch_raw()
        clean = self.dedupe(self.suppress_false_positives(raw, rules))
        self._session.findings = clean
        logger.info("Triage kept %d of %d alerts", len(clean), len(raw))
        return clean

    @staticmethod
    def suppress_false_positives(
        findings: Iterable[Finding],
        rules: Iterable[FalsePositiveRule],
    ) -> list[Finding]:
        rules = list(rules)
        kept: list[Finding] = []
        for finding in findings:
            cwe = str(finding.cwe_id)
            if any(rule.matches(finding.url, finding.param, cwe) for rule in rules):
                logger.debug(
                    "Suppressed false positive: %s at %s (param=%s, cwe=%s)",
                    finding.name,
                    finding.url,
                    finding.param,
                    cwe,
                )
                continue
            kept.append(finding)
        return kept

    def same_issue(self, first: Finding, second: Finding) -> bool:
        if first.identity != second.identity:
            return False
        return self._matches(first, second)

    def dedupe(self, findings: Iterable[Finding]) -> list[Finding]:
        kept: list[Finding] = []
        for finding in findings:
            if not any(self.same_issue(finding, existing) for existing in kept):
                kept.append(finding)
        return kept

    @staticmethod
    def filter_by_minimum_risk(findings: Iterable[Finding], rating: Risk | str) -> list[Finding]:
        rating = Risk.parse(rating)
        return [f for f in findings if f.risk >= rating]

    @staticmethod
    def render_details(findings: Sequence[Finding]) -> str:
        return "".join(
            f"{f.name}\n"
            f"URL: {f.url}\n"
            f"Parameter: {f.param}\n"
            f"CWE: {f.cwe_id}\n"
            for f in findings
        )
