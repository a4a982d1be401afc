"""Caller supplied settings for a configuse client."""

from typing import NamedTuple

from configuse import entries


BASE_URL = "https://configuse.tech/api"

DEFAULT_REFRESH_INTERVAL_S = 60
DEFAULT_FIRST_LOAD_RETRY_COUNT = 3
DEFAULT_REQUEST_TIMEOUT_S = 30
DEFAULT_RETRY_DELAY_S = 5


class Settings(NamedTuple):
    """Where to fetch from and how to pace the polling.

    refresh_interval_s is the steady delay between polls. Values under a
    millisecond are replaced with 60 seconds once the first load succeeds.
    first_load_retry_count is how many failures are tolerated before the
    first successful load; one more failure than that is fatal.
    """
    project_key: str
    refresh_interval_s: float = DEFAULT_REFRESH_INTERVAL_S
    first_load_retry_count: int = DEFAULT_FIRST_LOAD_RETRY_COUNT
    base_url: str = BASE_URL
    request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S
    retry_delay_s: float = DEFAULT_RETRY_DELAY_S

    @property
    def request_url(self) -> str:
        return "{}/configurations/v1/{}".format(self.base_url.rstrip("/"), self.project_key)

    @classmethod
    def from_env(cls, prefix="CONFIGUSE_", **overrides):
        """Builds settings from environment variables.

        Reads PROJECT_KEY, REFRESH_INTERVAL_S, FIRST_LOAD_RETRY_COUNT,
        BASE_URL, REQUEST_TIMEOUT_S and RETRY_DELAY_S under the prefix.
        Unset variables keep their defaults; keyword overrides win over
        both.
        """
        kwargs = {}
        for field, parse in _env_fields:
            entry = entries.get_environment_variable(prefix + field.upper())
            if entry.value != "":
                kwargs[field] = parse(entry)
        kwargs.update(overrides)
        if "project_key" not in kwargs:
            raise KeyError("{}PROJECT_KEY is not set".format(prefix))
        return cls(**kwargs)


_env_fields = [
    ("project_key", entries.ConfigurationEntry.as_string),
    ("refresh_interval_s", entries.ConfigurationEntry.as_float),
    ("first_load_retry_count", entries.ConfigurationEntry.as_int),
    ("base_url", entries.ConfigurationEntry.as_string),
    ("request_timeout_s", entries.ConfigurationEntry.as_float),
    ("retry_delay_s", entries.ConfigurationEntry.as_float),
]
