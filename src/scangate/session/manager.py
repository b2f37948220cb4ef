"""Session manager — sequences policy setup, spidering, scanning, triage, gate."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from scangate.config import ScanGateConfig
from scangate.errors import Cancelled, RiskThresholdExceeded, ScanInfrastructureError
from scangate.policy.loader import CategoryRegistry
from scangate.policy.selector import PolicySelector
from scangate.scan.active import ActiveScanCoordinator
from scangate.scan.spider import SpiderCoordinator
from scangate.scanner.base import RemoteScannerClient
from scangate.session.models import ScanSession, SessionStatus
from scangate.session.plan import ScanPlan
from scangate.triage.engine import AlertTriageEngine
from scangate.triage.gate import GateVerdict, RiskGate

logger = logging.getLogger(__name__)

# Called as (scenario id, proxy URL) to drive the application under test
ExerciseCallback = Callable[[str, str], None]


class ScanSessionManager:
    """Owns one ScanSession and the coordinators that mutate it."""

    def __init__(
        self,
        client: RemoteScannerClient,
        registry: CategoryRegistry,
        config: ScanGateConfig | None = None,
        on_progress: Callable[[str, str, int], None] | None = None,
    ) -> None:
        self._config = config or ScanGateConfig()
        self._client = client
        self._session = ScanSession()
        self._stop_event = threading.Event()
        self._on_progress = on_progress

        self.policy = PolicySelector(client, registry, self._session)
        self.spider = SpiderCoordinator(
            client,
            self._session,
            poll_interval=self._config.poll_interval,
            cancel=self._stop_event,
            timeout=self._config.poll_timeout,
            aliases={
                "baseurl": self._config.base_url,
                "basesecureurl": self._config.base_secure_url,
            },
            on_progress=self._progress_callback("spider"),
        )
        self.active = ActiveScanCoordinator(
            client,
            poll_interval=self._config.poll_interval,
            cancel=self._stop_event,
            timeout=self._config.poll_timeout,
            on_progress=self._progress_callback("scan"),
        )
        self.triage = AlertTriageEngine(client, self._session)
        self.gate = RiskGate()

    @property
    def session(self) -> ScanSession:
        return self._session

    def start(self) -> ScanSession:
        """Begin a new scan session: fresh local state and a cleared backend."""
        self._stop_event.clear()
        self._session.reset()
        try:
            self._client.clear_state()
        except ScanInfrastructureError:
            self._session.status = SessionStatus.ERROR
            raise
        logger.info("Started scan session %s", self._session.id)
        return self._session

    def stop(self) -> None:
        """Signal any in-progress poll loop to stop with Cancelled."""
        self._stop_event.set()

    def exercise(self, callback: ExerciseCallback, scenario_id: str) -> None:
        """Run an application scenario with traffic routed through the scanner."""
        proxy = self._client.proxy_url
        if not proxy:
            raise ScanInfrastructureError(
                f"No scanner proxy available for scenario '{scenario_id}'"
            )
        logger.debug("Navigating scenario '%s' through %s", scenario_id, proxy)
        callback(scenario_id, proxy)

    def run_plan(
        self,
        plan: ScanPlan,
        exercise: ExerciseCallback | None = None,
    ) -> GateVerdict:
        """Run every phase of ``plan`` in order and return the passing verdict.

        Raises RiskThresholdExceeded when the gate fails.
        """
        if plan.scenarios and exercise is None:
            raise ValueError(
                f"Plan '{plan.name}' lists scenarios but no exercise callback was given"
            )

        self.start()
        logger.info("Running scan plan '%s' against %s", plan.name, plan.target)
        try:
            self._configure(plan)

            for scenario in plan.scenarios:
                self.exercise(exercise, scenario)

            self.spider.run_for_each(plan.spider_urls)
            self.active.run(self.spider.resolve(plan.target))

            findings = self.triage.triage(plan.false_positives)
            verdict = self.gate.assert_no_risk_at_or_above(findings, plan.risk)
            self._session.status = SessionStatus.PASSED
            return verdict
        except RiskThresholdExceeded:
            self._session.status = SessionStatus.FAILED
            raise
        except Cancelled:
            self._session.status = SessionStatus.CANCELLED
            raise
        except Exception:
            self._session.status = SessionStatus.ERROR
            raise
        finally:
            self._session.end_time = time.time()

    def _configure(self, plan: ScanPlan) -> None:
        if plan.disable_all_rules:
            self.policy.disable_all()

        for step in plan.policies:
            self.policy.select_category(step.category)
            if step.strength:
                self.policy.set_attack_strength(step.strength)
            if step.threshold:
                self.policy.set_alert_threshold(step.threshold)

        if plan.passive_scan is not None:
            self.active.set_passive_scan(plan.passive_scan)

        self.spider.configure(
            max_depth=plan.spider.max_depth,
            thread_count=plan.spider.thread_count,
            excluded=plan.spider.excluded,
        )

    def _progress_callback(self, phase: str) -> Callable[[str, int], None] | None:
        if self._on_progress is None:
            return None
        callback = self._on_progress

        def report(url: str, percent: int) -> None:
            callback(phase, url, percent)

        return report
