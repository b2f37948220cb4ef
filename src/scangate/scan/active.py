"""Active scan coordinator — launches the attack phase and waits for it."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from scangate.errors import ScanInfrastructureError, ScannerApiError
from scangate.scan.polling import wait_for_progress
from scangate.scanner.base import RemoteScannerClient

logger = logging.getLogger(__name__)


class ActiveScanCoordinator:
    """Drives the active attack phase against a single target URL."""

    def __init__(
        self,
        client: RemoteScannerClient,
        poll_interval: float = 1.0,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
        on_progress: Callable[[str, int], None] | None = None,
    ) -> None:
        self._client = client
        self._poll_interval = poll_interval
        self._cancel = cancel if cancel is not None else threading.Event()
        self._timeout = timeout
        self._on_progress = on_progress

    def set_passive_scan(self, enabled: bool) -> None:
        """Toggle passive analysis of proxied traffic alongside active attacks."""
        self._client.set_passive_scan_enabled(enabled)
        logger.info("Passive scanner %s", "enabled" if enabled else "disabled")

    def run(self, target_url: str) -> int:
        """Scan ``target_url`` to completion. Returns the number of progress polls."""
        logger.info("Scanning: %s", target_url)

        on_progress = None
        if self._on_progress is not None:
            callback = self._on_progress

            def on_progress(percent: int) -> None:
                callback(target_url, percent)

        try:
            self._client.active_scan_submit(target_url)
            polls = wait_for_progress(
                self._client.active_scan_progress,
                interval=self._poll_interval,
                cancel=self._cancel,
                timeout=self._timeout,
                on_progress=on_progress,
                label=f"Scan of {target_url}",
            )
        except (ScannerApiError, OSError) as exc:
            raise ScanInfrastructureError(
                f"Active scan of {target_url} failed: {exc}", url=target_url
            ) from exc

        logger.info("Active scan of %s complete", target_url)
        return polls
