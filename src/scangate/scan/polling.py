"""Cancellable progress polling for long-running scanner jobs."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from scangate.errors import Cancelled, PollTimeout

logger = logging.getLogger(__name__)

COMPLETE = 100


def wait_for_progress(
    read_progress: Callable[[], int],
    interval: float = 1.0,
    cancel: threading.Event | None = None,
    timeout: float | None = None,
    on_progress: Callable[[int], None] | None = None,
    label: str = "job",
    clock: Callable[[], float] = time.monotonic,
) -> int:
    """Block until ``read_progress()`` first reports 100. Returns the query count.

    One query per ``interval``; the wait between queries is
    ``cancel.wait(interval)`` so setting ``cancel`` from another thread ends
    the loop with Cancelled. With a ``timeout`` the loop raises PollTimeout
    instead of issuing a query past the deadline.
    """
    if cancel is None:
        cancel = threading.Event()
    deadline = clock() + timeout if timeout is not None else None
    queries = 0

    while True:
        if cancel.is_set():
            raise Cancelled(f"{label} cancelled after {queries} progress queries")

        progress = read_progress()
        queries += 1
        logger.debug("%s is %d%% complete", label, progress)
        if on_progress is not None:
            on_progress(progress)
        if progress >= COMPLETE:
            return queries

        if deadline is not None and clock() + interval > deadline:
            if cancel.wait(timeout=max(0.0, deadline - clock())):
                raise Cancelled(f"{label} cancelled after {queries} progress queries")
            raise PollTimeout(
                f"{label} did not complete within {timeout}s (last progress {progress}%)"
            )

        if cancel.wait(timeout=interval):
            raise Cancelled(f"{label} cancelled after {queries} progress queries")
