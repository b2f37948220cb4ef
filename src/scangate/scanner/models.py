"""Scanner data models — risk ratings, confidence levels and findings."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class _Ordered(enum.Enum):
    """Enum whose members compare by declaration order."""

    @property
    def rank(self) -> int:
        return list(type(self)).index(self)

    def __lt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.rank >= other.rank

    @property
    def label(self) -> str:
        return self.value


class Risk(_Ordered):
    """Qualitative risk rating, ordered Informational < Low < Medium < High."""

    INFORMATIONAL = "Informational"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, value: str | Risk) -> Risk:
        """Parse a rating name case-insensitively ('info' is accepted)."""
        if isinstance(value, Risk):
            return value
        key = value.strip().upper()
        if key == "INFO":
            key = "INFORMATIONAL"
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown risk rating: {value!r}") from None


class Confidence(_Ordered):
    """Scanner confidence (reliability) that a finding is genuine."""

    FALSE_POSITIVE = "False Positive"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CONFIRMED = "Confirmed"

    @classmethod
    def parse(cls, value: str | Confidence) -> Confidence:
        if isinstance(value, Confidence):
            return value
        key = value.strip().upper().replace(" ", "_")
        # Older ZAP releases report "Warning" where newer ones say "Low"
        if key == "WARNING":
            key = "LOW"
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown confidence level: {value!r}") from None


@dataclass(frozen=True)
class Finding:
    """A single alert reported by the scanning backend."""

    name: str
    risk: Risk
    confidence: Confidence
    url: str
    param: str = ""
    cwe_id: int = -1
    description: str = ""
    plugin_id: int = -1

    @property
    def identity(self) -> tuple[int, str, str]:
        """Structural part of the dedupe key: (cwe id, parameter, URL)."""
        return (self.cwe_id, self.param, self.url)
