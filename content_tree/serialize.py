"""Convert content-tree records into JSON-ready structures."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt
import enum
import json
import typing as typ
from pathlib import PurePath


def to_record(obj: typ.Any) -> typ.Any:
    """Return ``obj`` as nested dicts, lists, and scalars.

    Dataclasses become dicts keyed by field name, tuples and lists become
    lists, sets become sorted lists, paths become strings, and dates become
    ISO-8601 strings.

    Examples
    --------
    >>> from content_tree.models import VersionInfo
    >>> to_record(VersionInfo(id="v1", label="v1"))["label"]
    'v1'
    """
    if dc.is_dataclass(obj) and not isinstance(obj, type):
        return {
            field.name: to_record(getattr(obj, field.name)) for field in dc.fields(obj)
        }
    match obj:
        case enum.Enum():
            return obj.value
        case PurePath():
            return str(obj)
        case dt.datetime() | dt.date():
            return obj.isoformat()
        case str() | int() | float() | bool() | None:
            return obj
        case cabc.Mapping():
            return {str(key): to_record(value) for key, value in obj.items()}
        case set() | frozenset():
            return sorted(to_record(item) for item in obj)
        case cabc.Iterable():
            return [to_record(item) for item in obj]
        case _:
            return str(obj)


def dumps(obj: typ.Any, *, indent: int | None = 2) -> str:
    """Serialize ``obj`` to a JSON string via :func:`to_record`."""
    return json.dumps(to_record(obj), indent=indent, ensure_ascii=False)


__all__ = ["dumps", "to_record"]
