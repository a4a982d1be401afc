"""Fetchers retrieve the full configuration set as key/value pairs.

A fetcher performs one round trip per call, bounds its own duration,
and reports every transport or decode problem as a FetchFailure. It
must be safe to call again after a failure.
"""

import logging
import time
import uuid
from typing import Optional

import httpx

from configuse import converters
from configuse import exceptions
from configuse import formats


logger = logging.getLogger(__name__)

AGENT_NAME = "configUse-python-client"


class AbstractFetcher:
    def fetch(self) -> converters.Pairs:
        raise NotImplementedError

    def close(self) -> None:
        pass


class HttpFetcher(AbstractFetcher):
    """Fetches a project's configurations from the configuse service."""
    def __init__(self, settings, client: Optional[httpx.Client] = None):
        self.settings = settings
        self._client = client
        self._closed = False

    def get_client(self) -> httpx.Client:
        if self._closed:
            raise exceptions.FetchFailure("fetcher is closed")
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(timeout=self.settings.request_timeout_s)
        return self._client

    def close(self) -> None:
        self._closed = True
        if self._client is not None and not self._client.is_closed:
            self._client.close()
        self._client = None

    def headers(self):
        return {
            "x-correlationid": str(uuid.uuid4()),
            "x-agentname": AGENT_NAME,
        }

    def fetch(self) -> converters.Pairs:
        url = self.settings.request_url
        headers = self.headers()
        start = time.monotonic()
        try:
            response = self.get_client().get(url, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise exceptions.FetchFailure("request to {} failed: {}".format(url, e)) from e
        finally:
            logger.debug(
                "configuration request took %.3fs",
                time.monotonic() - start,
                extra={"url": url, "correlation_id": headers["x-correlationid"]},
            )
        try:
            return converters.pairs_from_wire(response.text)
        except exceptions.LoadFailure as e:
            raise exceptions.FetchFailure("an error occurred while decoding response: {}".format(e)) from e


def simple_reader(filename):
    with open(filename, 'rb') as f:
        return f.read()


class FileFetcher(AbstractFetcher):
    """Reads the configuration set from a local file.

    The format comes from the file suffix unless one is given.
    """
    def __init__(self, filename, format: Optional[formats.Format] = None, reader=simple_reader):
        self.filename = filename
        self.format = format
        self.reader = reader or simple_reader

    def pairs_converter(self):
        try:
            if self.format is not None:
                return formats.pairs_converter_for_format(self.format)
            return formats.pairs_converter_for_filename(self.filename)
        except KeyError as e:
            raise exceptions.FetchFailure("no known format for {}".format(self.filename)) from e

    def fetch(self) -> converters.Pairs:
        convert = self.pairs_converter()
        try:
            data = self.reader(self.filename)
        except FileNotFoundError as e:
            raise exceptions.DataSourceMissing(str(self.filename)) from e
        except OSError as e:
            raise exceptions.FetchFailure("cannot read {}: {}".format(self.filename, e)) from e
        try:
            return convert(data)
        except exceptions.LoadFailure as e:
            raise exceptions.FetchFailure("cannot parse {}: {}".format(self.filename, e)) from e
