import threading

import pytest

from configuse import exceptions


def is_expected_getitem(client, key, res):
    if res is KeyError:
        with pytest.raises(KeyError):
            _ = client[key]
        return True
    else:
        return client[key].value == res


class ScriptedFetcher:
    """Plays back a list of results, one per fetch.

    Each result is either a list of (key, value) pairs or an exception
    instance to raise. The last result repeats once the script runs out.
    """
    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0
        self.closed = False
        self.fetched = threading.Event()

    def fetch(self):
        result = self.results[min(self.calls, len(self.results) - 1)]
        self.calls += 1
        self.fetched.set()
        if isinstance(result, BaseException):
            raise result
        return list(result)

    def close(self):
        self.closed = True


def failure():
    return exceptions.FetchFailure("connection refused")
