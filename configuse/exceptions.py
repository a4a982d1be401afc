class InvalidValue(ValueError):
    """Propagates an error generated while parsing a configuration value.

    Raised when the raw text of an entry cannot be read as the requested
    type. There is no fallback: the caller gets the error, not a default.
    """
    def __init__(self, key, raw_value, exception=None, *args):
        super().__init__(
            "could not parse value {!r} for key {!r}".format(raw_value, key), *args)
        self.key = key
        self.raw_value = raw_value
        self.exception = exception


class FetchFailure(Exception):
    pass


class DataSourceMissing(FetchFailure):
    pass


class LoadFailure(Exception):
    pass


class FirstLoadFailure(Exception):
    """No fetch succeeded before the first-load retry budget ran out."""
    def __init__(self, attempts, *args):
        super().__init__(
            "arrived max retry count before first load ({} attempts)".format(attempts), *args)
        self.attempts = attempts


class RefresherStopped(Exception):
    """The refresher ended before any fetch succeeded."""
