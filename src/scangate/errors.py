"""Error taxonomy shared by the coordinators, triage engine and risk gate."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scangate.scanner.models import Finding, Risk


class ScanGateError(Exception):
    """Base class for all ScanGate errors."""


class ConfigurationError(ScanGateError, ValueError):
    """A plan or command asked for something the scanner cannot be set up with."""


class UnknownPolicyError(ConfigurationError, LookupError):
    """A policy category name did not match any registry entry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No matching policy found for: {name}")
        self.name = name


class PolicyNotSelectedError(ConfigurationError):
    """Attack strength or alert threshold was set before selecting a category."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"Cannot set {operation}: select a scanning policy category first"
        )
        self.operation = operation


class InvalidLevelError(ConfigurationError):
    """An attack strength or alert threshold name is not recognised."""

    def __init__(self, what: str, level: str, allowed: Sequence[str]) -> None:
        super().__init__(
            f"Invalid {what} '{level}' (expected one of: {', '.join(allowed)})"
        )
        self.level = level


class ScanInfrastructureError(ScanGateError):
    """The scanning backend failed during submit, poll or configuration."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        rule_ids: Sequence[int] = (),
    ) -> None:
        super().__init__(message)
        self.url = url
        self.rule_ids = tuple(rule_ids)


class ScannerApiError(ScanInfrastructureError):
    """Transport or protocol level failure reported by a scanner client."""


class Cancelled(ScanGateError):
    """A poll loop was interrupted by an external cancellation signal."""


class PollTimeout(Cancelled):
    """A poll loop exceeded its deadline before progress reached 100%."""


class RiskThresholdExceeded(ScanGateError, AssertionError):
    """Triaged findings at or above the accepted risk rating are present."""

    def __init__(
        self,
        rating: Risk,
        findings: Sequence[Finding],
        report: str,
    ) -> None:
        self.rating = rating
        self.findings = tuple(findings)
        self.count = len(self.findings)
        self.report = report
        super().__init__(
            f"{self.count} {rating.label} or higher risk vulnerabilities found.\n"
            f"Details:\n{report}"
        )
