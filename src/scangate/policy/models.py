"""Policy data models — immutable dataclasses used across the entire codebase."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class AttackStrength(enum.Enum):
    """How many requests an active scan rule may send per insertion point."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    INSANE = "INSANE"
    DEFAULT = "DEFAULT"


class AlertThreshold(enum.Enum):
    """How readily an active scan rule raises alerts."""

    OFF = "OFF"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    DEFAULT = "DEFAULT"


@dataclass(frozen=True)
class PolicyCategory:
    """A named vulnerability class and the scanner rules that cover it."""

    name: str
    rule_ids: tuple[int, ...]
    description: str = ""


@dataclass(frozen=True)
class FalsePositiveRule:
    """Declarative suppression of a known-incorrect finding."""

    url: str
    param: str
    cwe_id: str

    def matches(self, url: str, param: str, cwe_id: str) -> bool:
        return self.url == url and self.param == param and self.cwe_id == cwe_id
