import os
from typing import AnyStr
from typing import List

import aenum

from configuse import converters


@aenum.unique
class Format(aenum.Enum):
    pass


def register_format(x):
    aenum.extend_enum(Format, x, x.lower())


pairs_converter_by_format = {}


def register_pairs_converter(format: Format, pairs_converter) -> None:
    pairs_converter_by_format[format.value] = pairs_converter


format_by_suffix = {}


def register_file_formats(format: Format, suffixes: List[AnyStr]) -> None:
    for suffix in suffixes:
        format_by_suffix[suffix] = format


def format_for_filename(filename) -> Format:
    _, suffix = os.path.splitext(str(filename))
    if suffix not in format_by_suffix:
        raise KeyError("suffix %r not known" % suffix)
    return format_by_suffix[suffix]


def pairs_converter_for_filename(filename):
    return pairs_converter_for_format(format_for_filename(filename))


def pairs_converter_for_format(format):
    return pairs_converter_by_format[format.value]


register_format("Wire")
register_pairs_converter(
    Format.Wire,
    lambda x: converters.pairs_from_wire(converters.string_from_bytes(x, encoding='utf8'))
)

register_format("Properties")
register_pairs_converter(
    Format.Properties,
    lambda x: converters.pairs_from_obj(converters.obj_from_properties(x))
)
register_file_formats(Format.Properties, [".prop", ".props", ".properties"])

register_format("Ini")
register_pairs_converter(
    Format.Ini,
    lambda x: converters.pairs_from_obj(
        converters.obj_from_ini(converters.string_from_bytes(x, encoding='utf8')))
)
register_file_formats(Format.Ini, [".ini"])

register_format("Json")
register_pairs_converter(
    Format.Json,
    lambda x: converters.pairs_from_obj(
        converters.obj_from_json(converters.string_from_bytes(x, encoding='utf8')))
)
register_file_formats(Format.Json, [".json"])

register_format("Toml")
register_pairs_converter(
    Format.Toml,
    lambda x: converters.pairs_from_obj(
        converters.obj_from_toml(converters.string_from_bytes(x, encoding='utf8')))
)
register_file_formats(Format.Toml, [".toml"])

register_format("Yaml")
register_pairs_converter(
    Format.Yaml,
    lambda x: converters.pairs_from_obj(
        converters.obj_from_yaml(converters.string_from_bytes(x, encoding='utf8')))
)
register_file_formats(Format.Yaml, [".yaml", ".yml"])
