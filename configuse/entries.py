"""Cached configuration entries and their typed views."""

import os
import re
from typing import AnyStr
from typing import NamedTuple

from configuse import exceptions


INT_DEFAULT = 0
INT_MIN = -(1 << 63)
INT_MAX = (1 << 63) - 1
BOOL_DEFAULT = False

_int_ptrn = re.compile(r"[+-]?[0-9]+")
_float_ptrn = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")

_bool_by_text = {
    "1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
    "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False,
}


class ConfigurationEntry(NamedTuple):
    """One key/value pair as cached locally.

    The value is always kept in its raw textual form. Typed views are
    parsed on every call, so a refreshed value is never shadowed by an
    earlier parse.
    """
    key: str
    value: str

    def as_string(self) -> str:
        return self.value

    def as_int(self) -> int:
        if not _int_ptrn.fullmatch(self.value):
            raise exceptions.InvalidValue(self.key, self.value)
        n = int(self.value)
        if not INT_MIN <= n <= INT_MAX:
            raise exceptions.InvalidValue(self.key, self.value)
        return n

    def as_float(self) -> float:
        if not _float_ptrn.fullmatch(self.value):
            raise exceptions.InvalidValue(self.key, self.value)
        return float(self.value)

    def as_bool(self) -> bool:
        try:
            return _bool_by_text[self.value]
        except KeyError as e:
            raise exceptions.InvalidValue(self.key, self.value, e)

    def with_value(self, value: str) -> "ConfigurationEntry":
        return ConfigurationEntry(key=self.key, value=value)

    def __str__(self):
        return self.value


ConfigurationEntry.missing = ConfigurationEntry(key="", value="")


def get_environment_variable(name: AnyStr) -> ConfigurationEntry:
    """Wraps a process environment lookup as an entry.

    Unset variables read as the empty string, the same as unknown keys
    in the cache.
    """
    return ConfigurationEntry(key=name, value=os.environ.get(name, ""))
