"""OWASP ZAP backend — RemoteScannerClient over the ZAP JSON API.

Every call is a ``GET {zap_url}/JSON/{component}/{action|view}/{name}/`` with
the API key in the ``apikey`` query parameter. Spider and active scans are
tracked by the id returned in the ``scan`` field of the submit response, so
progress and results always refer to the most recently submitted job.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import httpx

from scangate.errors import ScannerApiError
from scangate.scanner.models import Confidence, Finding, Risk

logger = logging.getLogger(__name__)

# Page size for core/view/alerts
_ALERT_PAGE_SIZE = 500


class ZapClient:
    """Synchronous ZAP API client."""

    def __init__(
        self,
        zap_url: str = "http://127.0.0.1:8080",
        api_key: str = "",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._zap_url = zap_url.rstrip("/")
        self._api_key = api_key
        self._http = httpx.Client(
            base_url=self._zap_url,
            timeout=timeout,
            transport=transport,
        )
        self._spider_id: str | None = None
        self._ascan_id: str | None = None

    def __enter__(self) -> ZapClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    @property
    def proxy_url(self) -> str:
        # ZAP serves the API and the intercepting proxy on the same port
        return self._zap_url

    # -- session / policy ---------------------------------------------------

    def clear_state(self) -> None:
        self._call("core", "action", "newSession", overwrite="true")
        self._call("core", "action", "deleteAllAlerts")
        self._spider_id = None
        self._ascan_id = None

    def set_rules_enabled(self, rule_ids: Iterable[int], enabled: bool) -> None:
        ids = ",".join(str(i) for i in rule_ids)
        name = "enableScanners" if enabled else "disableScanners"
        self._call("ascan", "action", name, ids=ids)

    def disable_all_rules(self) -> None:
        self._call("ascan", "action", "disableAllScanners")

    def set_rule_strength(self, rule_id: int, level: str) -> None:
        self._call(
            "ascan",
            "action",
            "setScannerAttackStrength",
            id=str(rule_id),
            attackStrength=level,
        )

    def set_rule_alert_threshold(self, rule_id: int, level: str) -> None:
        self._call(
            "ascan",
            "action",
            "setScannerAlertThreshold",
            id=str(rule_id),
            alertThreshold=level,
        )

    # -- spider -------------------------------------------------------------

    def spider_submit(self, url: str) -> None:
        data = self._call("spider", "action", "scan", url=url)
        self._spider_id = str(data.get("scan", "0"))
        logger.debug("Spider %s started for %s", self._spider_id, url)

    def spider_progress(self) -> int:
        data = self._call("spider", "view", "status", **self._scan_id(self._spider_id))
        return _parse_progress(data)

    def spider_results(self) -> list[str]:
        data = self._call("spider", "view", "results", **self._scan_id(self._spider_id))
        return [str(u) for u in data.get("results", [])]

    def spider_set_max_depth(self, depth: int) -> None:
        self._call("spider", "action", "setOptionMaxDepth", Integer=str(depth))

    def spider_set_thread_count(self, threads: int) -> None:
        self._call("spider", "action", "setOptionThreadCount", Integer=str(threads))

    def spider_exclude(self, regex: str) -> None:
        self._call("spider", "action", "excludeFromScan", regex=regex)

    # -- active / passive scan ----------------------------------------------

    def active_scan_submit(self, url: str) -> None:
        data = self._call("ascan", "action", "scan", url=url, recurse="true")
        self._ascan_id = str(data.get("scan", "0"))
        logger.debug("Active scan %s started for %s", self._ascan_id, url)

    def active_scan_progress(self) -> int:
        data = self._call("ascan", "view", "status", **self._scan_id(self._ascan_id))
        return _parse_progress(data)

    def set_passive_scan_enabled(self, enabled: bool) -> None:
        self._call("pscan", "action", "setEnabled", enabled=str(enabled).lower())

    # -- alerts -------------------------------------------------------------

    def fetch_alerts(self) -> list[Finding]:
        findings: list[Finding] = []
        start = 0
        while True:
            data = self._call(
                "core",
                "view",
                "alerts",
                start=str(start),
                count=str(_ALERT_PAGE_SIZE),
            )
            page = data.get("alerts", [])
            findings.extend(_parse_alert(a) for a in page)
            if len(page) < _ALERT_PAGE_SIZE:
                break
            start += _ALERT_PAGE_SIZE
        logger.debug("Fetched %d alerts from ZAP", len(findings))
        return findings

    def findings_match(self, first: Finding, second: Finding) -> bool:
        # Mirrors ZAP's Alert.matches(): title, risk and confidence only
        return (
            first.name == second.name
            and first.risk == second.risk
            and first.confidence == second.confidence
        )

    # -- transport ----------------------------------------------------------

    @staticmethod
    def _scan_id(scan_id: str | None) -> dict[str, str]:
        return {"scanId": scan_id} if scan_id is not None else {}

    def _call(self, component: str, kind: str, name: str, **params: str) -> dict[str, Any]:
        path = f"/JSON/{component}/{kind}/{name}/"
        if self._api_key:
            params["apikey"] = self._api_key
        try:
            response = self._http.get(path, params=params)
        except httpx.HTTPError as exc:
            raise ScannerApiError(f"ZAP request {path} failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            raise ScannerApiError(
                f"ZAP request {path} returned non-JSON response "
                f"(HTTP {response.status_code})"
            ) from None

        if response.is_error or (isinstance(data, dict) and "code" in data):
            message = data.get("message", "") if isinstance(data, dict) else ""
            code = data.get("code", response.status_code) if isinstance(data, dict) else response.status_code
            raise ScannerApiError(f"ZAP request {path} failed: {code} {message}".rstrip())

        if not isinstance(data, dict):
            raise ScannerApiError(f"ZAP request {path} returned unexpected payload")
        return data


def _parse_progress(data: dict[str, Any]) -> int:
    try:
        value = int(data["status"])
    except (KeyError, TypeError, ValueError):
        raise ScannerApiError(f"Malformed progress response: {data!r}") from None
    return max(0, min(100, value))


def _parse_alert(raw: dict[str, Any]) -> Finding:
    name = raw.get("alert") or raw.get("name", "")
    try:
        risk = Risk.parse(raw.get("risk", "Informational"))
        confidence = Confidence.parse(raw.get("confidence") or raw.get("reliability", "Medium"))
    except (AttributeError, ValueError) as exc:
        raise ScannerApiError(f"Malformed alert '{name}' at {raw.get('url', '')}: {exc}") from None
    return Finding(
        name=name,
        risk=risk,
        confidence=confidence,
        url=raw.get("url", ""),
        param=raw.get("param", ""),
        cwe_id=_int_or(raw.get("cweid"), -1),
        description=raw.get("description", ""),
        plugin_id=_int_or(raw.get("pluginId"), -1),
    )


def _int_or(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
