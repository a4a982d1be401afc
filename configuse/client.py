"""The high level interface for reading remote configuration."""

import logging
from typing import Optional

from configuse import cache
from configuse import exceptions
from configuse import fetchers
from configuse import initialization
from configuse import refresher
from configuse.entries import ConfigurationEntry
from configuse.settings import Settings


logger = logging.getLogger(__name__)


class Client:
    """Owns one cache, its refresher and the initialization signal.

    Reads go straight to the cache and never wait on the network.
    Several clients can live in one process without sharing state.
    """
    def __init__(self, settings: Settings, fetcher: Optional[fetchers.AbstractFetcher] = None):
        self.settings = settings
        self.fetcher = fetcher or fetchers.HttpFetcher(settings)
        self.cache = cache.Cache()
        self.initialized = initialization.InitializationSignal()
        self.refresher = refresher.Refresher(settings, self.fetcher, self.cache, self.initialized)

    def start(self) -> "Client":
        logger.info(
            "starting configuration refresher for project %s", self.settings.project_key,
            extra={"project_key": self.settings.project_key},
        )
        self.refresher.start()
        return self

    def close(self, timeout: Optional[float] = None) -> None:
        self.refresher.stop(timeout)
        self.fetcher.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def get(self, key: str) -> ConfigurationEntry:
        return self.cache.get(key)

    def __getitem__(self, key: str) -> ConfigurationEntry:
        if key not in self.cache:
            raise KeyError("key {} not found".format(key))
        return self.cache.get(key)

    def __contains__(self, key):
        return key in self.cache

    @property
    def last_successful_load(self) -> Optional[float]:
        """Epoch seconds of the last fetch that reached the cache, or None."""
        return self.refresher.last_successful_load

    @property
    def is_initialized(self) -> bool:
        return self.initialized.is_set()

    def wait_until_initialized(self, timeout: Optional[float] = None) -> bool:
        """Blocks until the first load finished.

        Returns False on timeout. Raises FirstLoadFailure if the first
        load gave up and RefresherStopped if the client was closed first.
        """
        return self.initialized.wait(timeout)


def init(settings: Settings, fetcher=None, wait=False, timeout=None) -> Client:
    client = Client(settings, fetcher=fetcher).start()
    if wait:
        try:
            client.wait_until_initialized(timeout)
        except (exceptions.FirstLoadFailure, exceptions.RefresherStopped):
            client.close()
            raise
    return client
