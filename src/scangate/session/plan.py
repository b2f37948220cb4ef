"""Load ScanPlan objects from YAML files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from scangate.policy.loader import parse_false_positives
from scangate.policy.models import FalsePositiveRule
from scangate.scanner.models import Risk
from scangate.session.models import SpiderSettings


@dataclass(frozen=True)
class PolicyStep:
    """Enable one category, then optionally tune its rules."""

    category: str
    strength: str | None = None
    threshold: str | None = None


@dataclass(frozen=True)
class ScanPlan:
    """Everything one scan session does, in the order it does it."""

    name: str
    target: str
    risk: Risk = Risk.HIGH
    disable_all_rules: bool = False
    passive_scan: bool | None = None
    policies: tuple[PolicyStep, ...] = ()
    spider_urls: tuple[str, ...] = ()
    spider: SpiderSettings = field(default_factory=SpiderSettings)
    scenarios: tuple[str, ...] = ()
    false_positives: tuple[FalsePositiveRule, ...] = ()
    description: str = ""


def load_plan(path: str | Path) -> ScanPlan:
    """Load a scan plan from a YAML file path."""
    text = Path(path).read_text(encoding="utf-8")
    return load_plan_from_string(text)


def load_plan_from_string(text: str) -> ScanPlan:
    data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError("Scan plan YAML must be a mapping")
    return _build_plan(data)


def _build_plan(data: dict) -> ScanPlan:
    if "target" not in data:
        raise ValueError("Scan plan must name a target URL")

    spider_data = data.get("spider") or {}
    urls = spider_data.get("urls", [])
    if isinstance(urls, str):
        urls = [urls]
    excluded = spider_data.get("exclude", [])
    if isinstance(excluded, str):
        excluded = [excluded]

    scenarios = data.get("scenarios", [])
    if isinstance(scenarios, str):
        scenarios = [scenarios]

    passive = data.get("passive_scan")

    return ScanPlan(
        name=data.get("name", "unnamed"),
        target=str(data["target"]),
        risk=Risk.parse(str(data.get("risk", "high"))),
        disable_all_rules=bool(data.get("disable_all_rules", False)),
        passive_scan=None if passive is None else bool(passive),
        policies=tuple(_parse_policies(data.get("policies", []))),
        spider_urls=tuple(str(u) for u in urls),
        spider=SpiderSettings(
            max_depth=_optional_int(spider_data.get("max_depth")),
            thread_count=_optional_int(spider_data.get("threads")),
            excluded=[str(r) for r in excluded],
        ),
        scenarios=tuple(str(s) for s in scenarios),
        false_positives=tuple(parse_false_positives(data.get("false_positives", []))),
        description=data.get("description", ""),
    )


def _parse_policies(entries: list) -> list[PolicyStep]:
    steps: list[PolicyStep] = []
    for entry in entries:
        if isinstance(entry, str):
            steps.append(PolicyStep(category=entry))
            continue
        if not isinstance(entry, dict):
            continue
        steps.append(
            PolicyStep(
                category=entry["category"],
                strength=entry.get("strength"),
                threshold=entry.get("threshold"),
            )
        )
    return steps


def _optional_int(value) -> int | None:
    return None if value is None else int(value)
