"""Spider coordinator — seeds discovery and waits for the crawl to finish."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping

from scangate.errors import ScanInfrastructureError, ScannerApiError
from scangate.scan.polling import wait_for_progress
from scangate.scanner.base import RemoteScannerClient
from scangate.session.models import ScanSession

logger = logging.getLogger(__name__)


class SpiderCoordinator:
    """Drives the discovery phase of a scan session."""

    def __init__(
        self,
        client: RemoteScannerClient,
        session: ScanSession,
        poll_interval: float = 1.0,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
        aliases: Mapping[str, str] | None = None,
        on_progress: Callable[[str, int], None] | None = None,
    ) -> None:
        self._client = client
        self._session = session
        self._poll_interval = poll_interval
        self._cancel = cancel if cancel is not None else threading.Event()
        self._timeout = timeout
        # Table aliases such as "baseurl" → configured target URL
        self._aliases = {k.lower(): v for k, v in (aliases or {}).items() if v}
        self._on_progress = on_progress

    def configure(
        self,
        max_depth: int | None = None,
        thread_count: int | None = None,
        excluded: Iterable[str] = (),
    ) -> None:
        """Push any of depth, thread count and exclusions to the backend."""
        if max_depth is not None:
            self.set_max_depth(max_depth)
        if thread_count is not None:
            self.set_thread_count(thread_count)
        for regex in excluded:
            self.exclude(regex)

    def set_max_depth(self, depth: int) -> None:
        self._check_not_started("max depth")
        self._client.spider_set_max_depth(depth)
        self._session.spider.max_depth = depth
        logger.debug("Spider max depth set to %d", depth)

    def set_thread_count(self, threads: int) -> None:
        self._check_not_started("thread count")
        self._client.spider_set_thread_count(threads)
        self._session.spider.thread_count = threads
        logger.debug("Spider thread count set to %d", threads)

    def exclude(self, regex: str) -> None:
        self._check_not_started("exclusions")
        self._client.spider_exclude(regex)
        self._session.spider.excluded.append(regex)
        logger.debug("Spider excludes %s", regex)

    def resolve(self, url: str) -> str:
        return self._aliases.get(url.strip().lower(), url)

    def run_against(self, url: str) -> list[str]:
        """Spider ``url`` to completion and return the discovered URLs."""
        url = self.resolve(url)
        self._session.spider_started = True
        logger.info("Spidering %s", url)
        try:
            self._client.spider_submit(url)
            self._wait(url)
            results = list(self._client.spider_results())
        except (ScannerApiError, OSError) as exc:
            raise ScanInfrastructureError(f"Spider of {url} failed: {exc}", url=url) from exc

        for found in results:
            logger.debug("Found URL: %s", found)
        self._session.discovered_urls.extend(results)
        logger.info("Spider of %s found %d URLs", url, len(results))
        return results

    def run_for_each(self, urls: Iterable[str]) -> dict[str, list[str]]:
        """Spider each URL in order; the first failure aborts the rest."""
        results: dict[str, list[str]] = {}
        for url in urls:
            results[self.resolve(url)] = self.run_against(url)
        return results

    def wait_for_completion(self) -> None:
        """Wait for an already-submitted spider to reach 100%."""
        try:
            self._wait("current spider")
        except (ScannerApiError, OSError) as exc:
            raise ScanInfrastructureError(f"Spider status check failed: {exc}") from exc

    def _wait(self, url: str) -> None:
        on_progress = None
        if self._on_progress is not None:
            callback = self._on_progress

            def on_progress(percent: int) -> None:
                callback(url, percent)

        wait_for_progress(
            self._client.spider_progress,
            interval=self._poll_interval,
            cancel=self._cancel,
            timeout=self._timeout,
            on_progress=on_progress,
            label=f"Spidering of {url}",
        )

    def _check_not_started(self, what: str) -> None:
        if self._session.spider_started:
            raise RuntimeError(f"Spider {what} must be configured before spidering starts")
