"""Tests for the category registry and false-positive rule loading."""

from pathlib import Path

import pytest

from scangate.errors import UnknownPolicyError
from scangate.policy.loader import (
    CategoryRegistry,
    load_false_positives,
    load_registry,
    load_registry_from_string,
    parse_false_positives,
)
from scangate.policy.models import FalsePositiveRule, PolicyCategory


def test_builtin_registry_contents(registry: CategoryRegistry):
    assert registry["cross-site-scripting"].rule_ids == (40012, 40014, 40016, 40017)
    assert registry["sql-injection"].rule_ids == (40018,)
    assert registry["directory-browsing"].rule_ids == (0,)
    assert len(registry) == 10


def test_lookup_is_case_insensitive(registry: CategoryRegistry):
    assert registry.lookup("Cross-Site-Scripting") == registry.lookup("cross-site-scripting")
    assert registry.lookup("  SQL-INJECTION ").name == "sql-injection"


def test_lookup_miss_names_input(registry: CategoryRegistry):
    with pytest.raises(UnknownPolicyError, match="no-such-thing"):
        registry.lookup("no-such-thing")


def test_registry_is_immutable(registry: CategoryRegistry):
    with pytest.raises(TypeError):
        registry["new"] = PolicyCategory(name="new", rule_ids=(1,))  # type: ignore[index]


def test_extended_returns_new_registry(registry: CategoryRegistry):
    bigger = registry.extended({"xxe": PolicyCategory(name="xxe", rule_ids=(90023,))})
    assert "xxe" in bigger
    assert "xxe" not in registry


def test_user_file_extends_and_overrides(fixtures_dir: Path):
    registry = load_registry(fixtures_dir / "extra_categories.yaml")
    assert registry["xxe"].rule_ids == (90023,)
    assert registry["sql-injection"].rule_ids == (40018, 40019, 40020)
    assert registry["path-traversal"].rule_ids == (6,)


def test_missing_user_file_is_ignored(tmp_path: Path):
    registry = load_registry(tmp_path / "absent.yaml")
    assert "cross-site-scripting" in registry


def test_registry_from_string_single_rule():
    registry = load_registry_from_string(
        """
categories:
  - name: Custom
    rules: 12345
"""
    )
    assert registry["custom"].rule_ids == (12345,)
    assert registry["custom"].name == "Custom"


def test_category_without_rules_rejected():
    with pytest.raises(ValueError, match="no rules"):
        load_registry_from_string("categories:\n  - name: empty\n    rules: []\n")


def test_invalid_yaml_raises():
    with pytest.raises(ValueError, match="mapping"):
        load_registry_from_string("just a string")


def test_load_false_positives(tmp_path: Path):
    path = tmp_path / "fp.yaml"
    path.write_text(
        "false_positives:\n"
        "  - url: http://app.test/search\n"
        "    parameter: q\n"
        "    cweid: 79\n"
        "  - url: http://app.test/\n"
        "    parameter:\n"
        "    cweid: 16\n"
    )
    rules = load_false_positives(path)
    assert rules == [
        FalsePositiveRule(url="http://app.test/search", param="q", cwe_id="79"),
        FalsePositiveRule(url="http://app.test/", param="", cwe_id="16"),
    ]


@pytest.mark.parametrize(
    "row",
    [
        {"url": "/x", "parameter": "q", "cweid": None},
        {"URL": "/y", "cwe": 79},
        {"parameter": "q", "cweid": 79},
        {"url": "/x", "parameter": "q", "cweid": ""},
    ],
)
def test_false_positive_row_missing_key_rejected(row: dict):
    with pytest.raises(ValueError, match="row 0"):
        parse_false_positives([row])


def test_false_positive_non_mapping_row_rejected():
    good = {"url": "/x", "parameter": "q", "cweid": 79}
    with pytest.raises(ValueError, match="row 1"):
        parse_false_positives([good, "/y q 79"])


def test_false_positive_null_parameter_is_empty():
    rules = parse_false_positives([{"url": "/x", "param": None, "cwe_id": 89}])
    assert rules == [FalsePositiveRule(url="/x", param="", cwe_id="89")]


def test_false_positive_rule_matches_exactly():
    rule = FalsePositiveRule(url="/item", param="id", cwe_id="89")
    assert rule.matches("/item", "id", "89")
    assert not rule.matches("/item/", "id", "89")
    assert not rule.matches("/item", "ID", "89")
    assert not rule.matches("/item", "id", "79")
