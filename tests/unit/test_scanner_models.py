"""Tests for risk / confidence ordering and parsing."""

import pytest

from scangate.scanner.models import Confidence, Finding, Risk


def test_risk_total_order():
    assert Risk.INFORMATIONAL < Risk.LOW < Risk.MEDIUM < Risk.HIGH
    assert sorted([Risk.HIGH, Risk.INFORMATIONAL, Risk.MEDIUM, Risk.LOW]) == list(Risk)
    assert Risk.HIGH >= Risk.HIGH
    assert not Risk.LOW > Risk.LOW


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("high", Risk.HIGH),
        ("Medium", Risk.MEDIUM),
        ("LOW", Risk.LOW),
        ("info", Risk.INFORMATIONAL),
        ("Informational", Risk.INFORMATIONAL),
    ],
)
def test_risk_parse(text: str, expected: Risk):
    assert Risk.parse(text) is expected


def test_risk_parse_unknown():
    with pytest.raises(ValueError, match="critical"):
        Risk.parse("critical")


def test_cross_enum_comparison_unsupported():
    with pytest.raises(TypeError):
        Risk.HIGH < Confidence.HIGH  # noqa: B015


def test_confidence_parse():
    assert Confidence.parse("False Positive") is Confidence.FALSE_POSITIVE
    assert Confidence.parse("warning") is Confidence.LOW
    assert Confidence.parse("Confirmed") > Confidence.HIGH


def test_finding_identity_and_immutability():
    finding = Finding(
        name="XSS",
        risk=Risk.HIGH,
        confidence=Confidence.MEDIUM,
        url="/search",
        param="q",
        cwe_id=79,
    )
    assert finding.identity == (79, "q", "/search")
    with pytest.raises(AttributeError):
        finding.url = "/other"  # type: ignore[misc]
