import json
import threading

import httpx
import pytest

import configuse
from configuse import client
from configuse import exceptions
from configuse import fetchers
from configuse.entries import ConfigurationEntry
from configuse.settings import Settings

from tests.helpers import ScriptedFetcher
from tests.helpers import failure
from tests.helpers import is_expected_getitem


def fast_settings(**kwargs):
    kwargs.setdefault("refresh_interval_s", 0.01)
    kwargs.setdefault("retry_delay_s", 0.01)
    return Settings(project_key="p", **kwargs)


def test_get_before_initialization_returns_missing():
    c = client.Client(fast_settings(), fetcher=ScriptedFetcher([("a", "1")]))
    assert not c.is_initialized
    assert c.get("a") is ConfigurationEntry.missing


def test_getitem():
    fetcher = ScriptedFetcher([("a", "1"), ("b", "2")])
    with client.init(fast_settings(), fetcher=fetcher, wait=True, timeout=5) as c:
        test_cases = [
            ("a", "1"),
            ("b", "2"),
            ("c", KeyError),
        ]
        for k, res in test_cases:
            assert is_expected_getitem(c, k, res)
        assert "a" in c
        assert "c" not in c


def test_init_waits_for_first_load():
    fetcher = ScriptedFetcher(failure(), failure(), [("timeout", "30"), ("debug", "true")])
    with client.init(fast_settings(), fetcher=fetcher, wait=True, timeout=5) as c:
        assert c.is_initialized
        assert c.get("timeout").as_int() == 30
        assert c.get("debug").as_bool()
        assert c.last_successful_load is not None


def test_init_raises_when_first_load_gives_up():
    fetcher = ScriptedFetcher(failure())
    with pytest.raises(exceptions.FirstLoadFailure):
        client.init(fast_settings(first_load_retry_count=2), fetcher=fetcher, wait=True, timeout=5)
    assert fetcher.calls == 3
    assert fetcher.closed


def test_wait_until_initialized_times_out():
    fetcher = ScriptedFetcher(failure())
    c = client.Client(fast_settings(retry_delay_s=10, first_load_retry_count=5), fetcher=fetcher).start()
    try:
        assert c.wait_until_initialized(timeout=0.05) is False
        assert not c.is_initialized
    finally:
        c.close(timeout=5)


def test_background_refresh_picks_up_changes():
    changed = threading.Event()

    class ChangingFetcher(ScriptedFetcher):
        def fetch(self):
            pairs = super().fetch()
            if self.calls >= 3:
                changed.set()
            return pairs

    fetcher = ChangingFetcher([("a", "1")], failure(), [("a", "2"), ("b", "x")])
    with client.init(fast_settings(), fetcher=fetcher, wait=True, timeout=5) as c:
        assert changed.wait(timeout=5)
        c.refresher.stop(timeout=5)
        assert c.get("a").value == "2"
        assert c.get("b").value == "x"


def test_close_stops_refresher_and_closes_fetcher():
    fetcher = ScriptedFetcher([("a", "1")])
    c = client.init(fast_settings(), fetcher=fetcher, wait=True, timeout=5)
    c.close(timeout=5)
    assert not c.refresher.is_alive()
    assert fetcher.closed


def test_clients_do_not_share_state():
    with client.init(fast_settings(), fetcher=ScriptedFetcher([("a", "1")]), wait=True, timeout=5) as c1:
        with client.init(fast_settings(), fetcher=ScriptedFetcher([("a", "2")]), wait=True, timeout=5) as c2:
            assert c1.get("a").value == "1"
            assert c2.get("a").value == "2"


def test_default_fetcher_is_http():
    c = client.Client(fast_settings())
    assert isinstance(c.fetcher, fetchers.HttpFetcher)
    c.close()


def test_init_over_http():
    def handler(request):
        return httpx.Response(200, json=[{"key": "a", "value": "1"}])
    s = fast_settings(base_url="https://config.example/api")
    fetcher = fetchers.HttpFetcher(s, client=httpx.Client(transport=httpx.MockTransport(handler)))
    with configuse.init(s, fetcher=fetcher, wait=True, timeout=5) as c:
        assert c.get("a").as_int() == 1


def test_init_from_file(tmp_path):
    f = tmp_path / "config.json"
    f.write_text(json.dumps({"feature": {"enabled": True}}))
    with configuse.init(fast_settings(), fetcher=configuse.FileFetcher(f), wait=True, timeout=5) as c:
        assert c.get("feature.enabled").as_bool()


def test_close_releases_threads_waiting_for_first_load():
    fetcher = ScriptedFetcher(failure())
    c = client.Client(fast_settings(retry_delay_s=10, first_load_retry_count=5), fetcher=fetcher).start()
    assert fetcher.fetched.wait(timeout=5)
    errors = []

    def wait():
        try:
            c.wait_until_initialized()
        except exceptions.RefresherStopped as e:
            errors.append(e)

    waiter = threading.Thread(target=wait)
    waiter.start()
    c.close(timeout=5)
    waiter.join(timeout=5)
    assert not waiter.is_alive()
    assert len(errors) == 1
    assert not c.is_initialized
