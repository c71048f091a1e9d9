"""Validation for per-hex attribute values.

Hex records carry an open, string-keyed bag of attributes.  Values are
restricted to what a JSON document can hold: strings, finite numbers,
booleans, ``None`` and nested lists / string-keyed mappings of the same.
Anything else is rejected up front so a map always saves and reloads to
the same content.
"""
from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping, Union

AttrValue = Union[str, int, float, bool, None, List["AttrValue"], Dict[str, "AttrValue"]]

RESERVED_KEYS = frozenset({"coordinate"})


class InvalidAttribute(ValueError):
    """Raised for attribute keys or values outside the supported variants."""


def validate_value(value: Any, path: str = "value") -> AttrValue:
    """Return ``value`` as a plain attribute value or raise :class:`InvalidAttribute`.

    Lists and mappings are copied so the caller's containers are never shared
    with a hex record.
    """
    if value is None or isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidAttribute(f"{path}: non-finite number {value!r}")
        return value
    if isinstance(value, (list, tuple)):
        return [validate_value(v, f"{path}[{i}]") for i, v in enumerate(value)]
    if isinstance(value, Mapping):
        out: Dict[str, AttrValue] = {}
        for k, v in value.items():
            if not isinstance(k, str):
                raise InvalidAttribute(f"{path}: mapping key {k!r} is not a string")
            out[k] = validate_value(v, f"{path}.{k}")
        return out
    raise InvalidAttribute(f"{path}: unsupported type {type(value).__name__}")


def validate_attributes(attributes: Mapping[str, Any]) -> Dict[str, AttrValue]:
    """Validate a whole attribute bag, preserving key order."""
    out: Dict[str, AttrValue] = {}
    for key, value in attributes.items():
        if not isinstance(key, str):
            raise InvalidAttribute(f"attribute key {key!r} is not a string")
        if key in RESERVED_KEYS:
            raise InvalidAttribute(f"attribute key {key!r} is reserved")
        out[key] = validate_value(value, key)
    return out
