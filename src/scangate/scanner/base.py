"""RemoteScannerClient protocol — all scanning backends must satisfy this."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from scangate.scanner.models import Finding


@runtime_checkable
class RemoteScannerClient(Protocol):
    """Protocol for the remote scanning service (spider, active scan, alerts).

    Implementations report backend and transport failures as ScannerApiError.
    The coordinators also wrap a raw OSError, but any other exception type
    propagates unwrapped.
    """

    @property
    def proxy_url(self) -> str:
        """Address application traffic must be routed through."""
        ...

    def clear_state(self) -> None:
        """Reset backend-side session and alert state."""
        ...

    def set_rules_enabled(self, rule_ids: Iterable[int], enabled: bool) -> None:
        ...

    def disable_all_rules(self) -> None:
        ...

    def set_rule_strength(self, rule_id: int, level: str) -> None:
        ...

    def set_rule_alert_threshold(self, rule_id: int, level: str) -> None:
        ...

    def spider_submit(self, url: str) -> None:
        ...

    def spider_progress(self) -> int:
        """Progress of the most recently submitted spider, 0-100."""
        ...

    def spider_results(self) -> list[str]:
        ...

    def spider_set_max_depth(self, depth: int) -> None:
        ...

    def spider_set_thread_count(self, threads: int) -> None:
        ...

    def spider_exclude(self, regex: str) -> None:
        ...

    def active_scan_submit(self, url: str) -> None:
        ...

    def active_scan_progress(self) -> int:
        """Progress of the most recently submitted active scan, 0-100."""
        ...

    def set_passive_scan_enabled(self, enabled: bool) -> None:
        ...

    def fetch_alerts(self) -> list[Finding]:
        ...

    def findings_match(self, first: Finding, second: Finding) -> bool:
        """Backend-native notion of two alerts being the same issue."""
        ...
