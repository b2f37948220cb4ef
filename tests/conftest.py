"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from scangate.policy.loader import CategoryRegistry, load_registry
from scangate.scanner.models import Finding
from scangate.session.models import ScanSession


def native_match(first: Finding, second: Finding) -> bool:
    """Stand-in for the backend predicate: title, risk and confidence."""
    return (first.name, first.risk, first.confidence) == (
        second.name,
        second.risk,
        second.confidence,
    )


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def plan_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "nightly_plan.yaml"


@pytest.fixture
def client() -> MagicMock:
    mock = MagicMock()
    mock.proxy_url = "http://127.0.0.1:8080"
    mock.findings_match.side_effect = native_match
    mock.spider_progress.return_value = 100
    mock.active_scan_progress.return_value = 100
    mock.spider_results.return_value = []
    mock.fetch_alerts.return_value = []
    return mock


@pytest.fixture
def session() -> ScanSession:
    return ScanSession()


@pytest.fixture
def registry() -> CategoryRegistry:
    return load_registry()
