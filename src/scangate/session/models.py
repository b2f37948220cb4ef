"""Session data models — spider settings and per-session scan state."""

from __future__ import annotations

import enum
import time
import uuid
from dataclasses import dataclass, field

from scangate.scanner.models import Finding


class SessionStatus(enum.Enum):
    """Lifecycle state of a scan session."""

    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    ERROR = "error"


@dataclass
class SpiderSettings:
    """Spider configuration pushed to the backend before the first run."""

    max_depth: int | None = None
    thread_count: int | None = None
    excluded: list[str] = field(default_factory=list)


@dataclass
class ScanSession:
    """Mutable state owned by exactly one scan session."""

    selected_rule_ids: tuple[int, ...] | None = None
    selected_category: str | None = None
    findings: list[Finding] = field(default_factory=list)
    spider: SpiderSettings = field(default_factory=SpiderSettings)
    discovered_urls: list[str] = field(default_factory=list)
    spider_started: bool = False
    status: SessionStatus = SessionStatus.PENDING
    start_time: float = field(default_factory=time.time)
    end_time: float | None = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    def reset(self) -> None:
        """Clear all state at the start of a new scan session."""
        self.selected_rule_ids = None
        self.selected_category = None
        self.findings = []
        self.spider = SpiderSettings()
        self.discovered_urls = []
        self.spider_started = False
        self.status = SessionStatus.RUNNING
        self.start_time = time.time()
        self.end_time = None
        self.id = uuid.uuid4().hex[:12]
