"""Load the policy category registry and false-positive rules from YAML."""

from __future__ import annotations

import importlib.resources
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

import yaml

from scangate.errors import UnknownPolicyError
from scangate.policy.models import FalsePositiveRule, PolicyCategory

_BUILTIN_PRESET = "categories.yaml"


class CategoryRegistry(Mapping[str, PolicyCategory]):
    """Immutable, case-insensitive mapping of category name → PolicyCategory."""

    def __init__(self, categories: Mapping[str, PolicyCategory] | None = None) -> None:
        entries = {
            name.lower(): category for name, category in (categories or {}).items()
        }
        self._categories = MappingProxyType(entries)

    def __getitem__(self, name: str) -> PolicyCategory:
        return self._categories[name.strip().lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def lookup(self, name: str) -> PolicyCategory:
        """Like ``registry[name]`` but raises UnknownPolicyError on a miss."""
        try:
            return self[name]
        except KeyError:
            raise UnknownPolicyError(name) from None

    def extended(self, categories: Mapping[str, PolicyCategory]) -> CategoryRegistry:
        """Return a new registry with ``categories`` added or overriding entries."""
        merged = dict(self._categories)
        merged.update({n.lower(): c for n, c in categories.items()})
        return CategoryRegistry(merged)


def load_registry(extra_path: str | Path | None = None) -> CategoryRegistry:
    """Build the registry from the built-in preset plus an optional user file."""
    pkg = importlib.resources.files("scangate.policy.presets")
    text = pkg.joinpath(_BUILTIN_PRESET).read_text(encoding="utf-8")
    registry = CategoryRegistry(_parse_categories(_load_mapping(text)))

    if extra_path is not None and Path(extra_path).is_file():
        extra_text = Path(extra_path).read_text(encoding="utf-8")
        registry = registry.extended(_parse_categories(_load_mapping(extra_text)))
    return registry


def load_registry_from_string(text: str) -> CategoryRegistry:
    """Parse a YAML string into a registry without the built-in preset."""
    return CategoryRegistry(_parse_categories(_load_mapping(text)))


def load_false_positives(path: str | Path) -> list[FalsePositiveRule]:
    """Load false-positive rules from a YAML file."""
    text = Path(path).read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    if isinstance(data, dict):
        data = data.get("false_positives", [])
    if not isinstance(data, list):
        raise ValueError("False positive YAML must be a list or contain 'false_positives'")
    return parse_false_positives(data)


def parse_false_positives(rows: list) -> list[FalsePositiveRule]:
    """Build rules from table rows with url / parameter / cweid columns."""
    rules: list[FalsePositiveRule] = []
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            raise ValueError(f"False positive row {index} must be a mapping: {row!r}")
        url = row.get("url")
        cwe = row.get("cweid", row.get("cwe_id"))
        if url is None or cwe is None or str(cwe).strip() == "":
            raise ValueError(
                f"False positive row {index} needs 'url' and 'cweid': {row!r}"
            )
        param = row.get("parameter", row.get("param"))
        rules.append(
            FalsePositiveRule(
                url=str(url),
                param="" if param is None else str(param),
                cwe_id=str(cwe).strip(),
            )
        )
    return rules


def _load_mapping(text: str) -> dict:
    data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError("Category YAML must be a mapping")
    return data


def _parse_categories(data: dict) -> dict[str, PolicyCategory]:
    categories: dict[str, PolicyCategory] = {}
    for entry in data.get("categories", []):
        if not isinstance(entry, dict):
            continue
        name = entry["name"]
        rules_raw = entry.get("rules", ())
        if isinstance(rules_raw, int):
            rules_raw = (rules_raw,)
        rule_ids = tuple(int(r) for r in rules_raw)
        if not rule_ids:
            raise ValueError(f"Category '{name}' has no rules")
        categories[name] = PolicyCategory(
            name=name,
            rule_ids=rule_ids,
            description=entry.get("description", ""),
        )
    return categories
