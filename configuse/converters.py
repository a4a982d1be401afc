"""Tools for turning fetched bytes into key/value pairs.

The remote service answers with a JSON array of ``{"key", "value"}``
objects. Local files can be any of the registered formats; they are
parsed into an object and then flattened, so that

    {"db": {"host": "localhost", "port": 5432}}

becomes ``[("db.host", "localhost"), ("db.port", "5432")]``.

"""

import configparser
import json
from typing import Any
from typing import AnyStr
from typing import List
from typing import Tuple

import jproperties
import toml

from configuse.exceptions import LoadFailure


try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader

import yaml


Pairs = List[Tuple[str, str]]


def string_from_bytes(x: bytes, encoding='utf8') -> AnyStr:
    try:
        return x.decode(encoding)
    except Exception:
        raise LoadFailure("cannot decode bytes as {}".format(encoding))


def obj_from_json(x: AnyStr) -> Any:
    try:
        return json.loads(x)
    except Exception as e:
        raise LoadFailure(e)


def obj_from_toml(x: AnyStr) -> Any:
    try:
        return toml.loads(x)
    except Exception as e:
        raise LoadFailure(e)


def obj_from_yaml(x: AnyStr) -> Any:
    try:
        return yaml.load(x, Loader=Loader)
    except Exception as e:
        raise LoadFailure(e)


def obj_from_ini(x: AnyStr) -> Any:
    c = configparser.ConfigParser(interpolation=None)
    try:
        c.read_string(x)
    except Exception as e:
        raise LoadFailure(e)
    return {section: dict(c[section]) for section in c.sections()}


def obj_from_properties(x: bytes) -> Any:
    p = jproperties.Properties()
    try:
        p.load(x, "utf-8")
    except Exception as e:
        raise LoadFailure(e)
    return {k: v.data for k, v in p.items()}


def pairs_from_wire(x: AnyStr) -> Pairs:
    """Decodes the service response body."""
    if not x or not x.strip():
        raise LoadFailure("empty response body")
    obj = obj_from_json(x)
    if not isinstance(obj, list):
        raise LoadFailure("expected a list of configurations, got {}".format(type(obj).__name__))
    pairs = []
    for item in obj:
        if not isinstance(item, dict):
            raise LoadFailure("configuration item is not an object: {!r}".format(item))
        key = item.get("key")
        value = item.get("value")
        if not isinstance(key, str) or not isinstance(value, str):
            raise LoadFailure("configuration item needs string key and value: {!r}".format(item))
        pairs.append((key, value))
    return pairs


def pairs_from_obj(obj: Any) -> Pairs:
    if obj is None:
        return []
    if not isinstance(obj, dict):
        raise LoadFailure("expected a mapping at the top level, got {}".format(type(obj).__name__))
    pairs = []
    _flatten("", obj, pairs)
    return pairs


def _flatten(prefix, v, pairs):
    if isinstance(v, dict):
        for k, sub in v.items():
            _flatten("{}.{}".format(prefix, k) if prefix else str(k), sub, pairs)
    else:
        pairs.append((prefix, text_from_scalar(v)))


def text_from_scalar(v: Any) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    if v is None:
        return ""
    if isinstance(v, list):
        return ",".join(text_from_scalar(x) for x in v)
    return str(v)
