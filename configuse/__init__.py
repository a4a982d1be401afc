"""Client for the configuse remote configuration service.

Usage:

    import configuse

    client = configuse.init(configuse.Settings(project_key="my-project"), wait=True)
    timeout = client.get("http.timeout").as_int()

"""

import logging

from configuse.client import Client
from configuse.client import init
from configuse.entries import BOOL_DEFAULT
from configuse.entries import ConfigurationEntry
from configuse.entries import INT_DEFAULT
from configuse.entries import get_environment_variable
from configuse.exceptions import DataSourceMissing
from configuse.exceptions import FetchFailure
from configuse.exceptions import FirstLoadFailure
from configuse.exceptions import InvalidValue
from configuse.exceptions import LoadFailure
from configuse.exceptions import RefresherStopped
from configuse.fetchers import AbstractFetcher
from configuse.fetchers import FileFetcher
from configuse.fetchers import HttpFetcher
from configuse.settings import Settings

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Client",
    "init",
    "BOOL_DEFAULT",
    "ConfigurationEntry",
    "INT_DEFAULT",
    "get_environment_variable",
    "DataSourceMissing",
    "FetchFailure",
    "FirstLoadFailure",
    "InvalidValue",
    "LoadFailure",
    "RefresherStopped",
    "AbstractFetcher",
    "FileFetcher",
    "HttpFetcher",
    "Settings",
]
