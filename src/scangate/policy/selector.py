"""Policy selector — category lookup and per-rule strength/threshold settings."""

from __future__ import annotations

import enum
import logging

from scangate.errors import (
    InvalidLevelError,
    PolicyNotSelectedError,
    ScanInfrastructureError,
)
from scangate.policy.loader import CategoryRegistry
from scangate.policy.models import AlertThreshold, AttackStrength
from scangate.scanner.base import RemoteScannerClient
from scangate.session.models import ScanSession

logger = logging.getLogger(__name__)


class PolicySelector:
    """Enables scanner rules by category and tunes the selected rules."""

    def __init__(
        self,
        client: RemoteScannerClient,
        registry: CategoryRegistry,
        session: ScanSession,
    ) -> None:
        self._client = client
        self._registry = registry
        self._session = session

    @property
    def selected(self) -> tuple[int, ...] | None:
        return self._session.selected_rule_ids

    def disable_all(self) -> None:
        """Disable every active scan rule on the backend."""
        self._client.disable_all_rules()
        logger.info("All scanner rules disabled")

    def select_category(self, name: str) -> tuple[int, ...]:
        """Select a category by name and enable its rules on the backend."""
        category = self._registry.lookup(name)
        self._session.selected_rule_ids = category.rule_ids
        self._session.selected_category = category.name
        self._client.set_rules_enabled(category.rule_ids, True)
        logger.info(
            "Enabled policy '%s' (rules %s)",
            category.name,
            ",".join(str(r) for r in category.rule_ids),
        )
        return category.rule_ids

    def set_attack_strength(self, level: str) -> None:
        rule_ids = self._require_selection("attack strength")
        strength = _parse_level(AttackStrength, level, "attack strength")
        self._apply(rule_ids, strength.value, self._client.set_rule_strength, "attack strength")

    def set_alert_threshold(self, level: str) -> None:
        rule_ids = self._require_selection("alert threshold")
        threshold = _parse_level(AlertThreshold, level, "alert threshold")
        self._apply(
            rule_ids,
            threshold.value,
            self._client.set_rule_alert_threshold,
            "alert threshold",
        )

    def _require_selection(self, operation: str) -> tuple[int, ...]:
        rule_ids = self._session.selected_rule_ids
        if rule_ids is None:
            raise PolicyNotSelectedError(operation)
        return rule_ids

    def _apply(self, rule_ids, level, setter, what: str) -> None:
        # Every rule is attempted; failures are reported once all have run
        failed: list[int] = []
        errors: list[str] = []
        for rule_id in rule_ids:
            try:
                setter(rule_id, level)
            except Exception as exc:
                logger.warning("Failed to set %s %s on rule %d: %s", what, level, rule_id, exc)
                failed.append(rule_id)
                errors.append(str(exc))

        if failed:
            raise ScanInfrastructureError(
                f"Failed to set {what} {level} on rule(s) "
                f"{','.join(str(r) for r in failed)}: {'; '.join(errors)}",
                rule_ids=failed,
            )
        logger.debug("Set %s %s on rules %s", what, level, rule_ids)


def _parse_level(enum_cls: type[enum.Enum], level: str, what: str):
    try:
        return enum_cls(level.strip().upper())
    except ValueError:
        raise InvalidLevelError(what, level, [m.value for m in enum_cls]) from None
