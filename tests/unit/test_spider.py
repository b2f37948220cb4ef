"""Tests for the spider coordinator."""

from __future__ import annotations

import threading
from unittest.mock import MagicMock

import pytest

from scangate.errors import Cancelled, ScanInfrastructureError, ScannerApiError
from scangate.scan.spider import SpiderCoordinator
from scangate.session.models import ScanSession


def _spider(client: MagicMock, session: ScanSession, **kwargs) -> SpiderCoordinator:
    kwargs.setdefault("poll_interval", 0.0)
    return SpiderCoordinator(client, session, **kwargs)


def test_configure_pushes_settings(client: MagicMock, session: ScanSession):
    spider = _spider(client, session)
    spider.configure(max_depth=5, thread_count=4, excluded=[".*logout.*", ".*\\.pdf"])

    client.spider_set_max_depth.assert_called_once_with(5)
    client.spider_set_thread_count.assert_called_once_with(4)
    assert [c.args[0] for c in client.spider_exclude.call_args_list] == [".*logout.*", ".*\\.pdf"]
    assert session.spider.max_depth == 5
    assert session.spider.thread_count == 4
    assert session.spider.excluded == [".*logout.*", ".*\\.pdf"]


def test_configure_skips_unset_values(client: MagicMock, session: ScanSession):
    _spider(client, session).configure(thread_count=2)
    client.spider_set_max_depth.assert_not_called()
    client.spider_exclude.assert_not_called()


def test_run_against_polls_until_complete(client: MagicMock, session: ScanSession):
    client.spider_progress.side_effect = [0, 30, 30, 70, 100]
    client.spider_results.return_value = ["http://app.test/", "http://app.test/login"]

    found = _spider(client, session).run_against("http://app.test/")

    client.spider_submit.assert_called_once_with("http://app.test/")
    assert client.spider_progress.call_count == 5
    assert found == ["http://app.test/", "http://app.test/login"]
    assert session.discovered_urls == found


def test_progress_callback_receives_url(client: MagicMock, session: ScanSession):
    client.spider_progress.side_effect = [50, 100]
    seen: list[tuple[str, int]] = []

    _spider(client, session, on_progress=lambda u, p: seen.append((u, p))).run_against(
        "http://app.test/"
    )

    assert seen == [("http://app.test/", 50), ("http://app.test/", 100)]


def test_configure_after_run_rejected(client: MagicMock, session: ScanSession):
    spider = _spider(client, session)
    spider.run_against("http://app.test/")
    with pytest.raises(RuntimeError, match="max depth"):
        spider.set_max_depth(3)


def test_transport_error_mid_poll(client: MagicMock, session: ScanSession):
    client.spider_progress.side_effect = [10, ScannerApiError("connection refused")]

    with pytest.raises(ScanInfrastructureError, match="http://app.test/") as excinfo:
        _spider(client, session).run_against("http://app.test/")

    assert excinfo.value.url == "http://app.test/"
    # No retry after the failure
    assert client.spider_progress.call_count == 2
    client.spider_results.assert_not_called()


def test_run_for_each_in_order(client: MagicMock, session: ScanSession):
    client.spider_results.side_effect = [["a"], ["b"]]

    results = _spider(client, session).run_for_each(["http://one.test/", "http://two.test/"])

    assert [c.args[0] for c in client.spider_submit.call_args_list] == [
        "http://one.test/",
        "http://two.test/",
    ]
    assert results == {"http://one.test/": ["a"], "http://two.test/": ["b"]}


def test_run_for_each_fails_fast(client: MagicMock, session: ScanSession):
    client.spider_submit.side_effect = [None, ScannerApiError("500"), None]

    with pytest.raises(ScanInfrastructureError) as excinfo:
        _spider(client, session).run_for_each(
            ["http://one.test/", "http://two.test/", "http://three.test/"]
        )

    assert excinfo.value.url == "http://two.test/"
    assert client.spider_submit.call_count == 2


def test_aliases_resolve_case_insensitively(client: MagicMock, session: ScanSession):
    spider = _spider(
        client,
        session,
        aliases={"baseurl": "http://app.test/", "basesecureurl": "https://app.test/"},
    )
    spider.run_for_each(["BaseUrl", "basesecureurl", "http://other.test/"])

    assert [c.args[0] for c in client.spider_submit.call_args_list] == [
        "http://app.test/",
        "https://app.test/",
        "http://other.test/",
    ]


def test_unset_alias_is_left_alone(client: MagicMock, session: ScanSession):
    spider = _spider(client, session, aliases={"baseurl": ""})
    assert spider.resolve("baseurl") == "baseurl"


def test_cancel_interrupts_run(client: MagicMock, session: ScanSession):
    cancel = threading.Event()

    def progress() -> int:
        cancel.set()
        return 40

    client.spider_progress.side_effect = progress

    with pytest.raises(Cancelled):
        _spider(client, session, poll_interval=10.0, cancel=cancel).run_against("http://app.test/")
    client.spider_results.assert_not_called()


def test_wait_for_completion(client: MagicMock, session: ScanSession):
    client.spider_progress.side_effect = [20, 100]
    _spider(client, session).wait_for_completion()
    assert client.spider_progress.call_count == 2
    client.spider_submit.assert_not_called()
