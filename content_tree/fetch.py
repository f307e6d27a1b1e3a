"""Normalize data-binding declarations found in pages and sections.

A ``fetch`` value may be a bare path string, a collection reference, or a
full mapping. The collector never executes fetches; it only records the
normalized form so prerendering and dynamic routes know which data schema a
page iterates.

Examples
--------
>>> from content_tree.fetch import parse_fetch_config
>>> parse_fetch_config("/data/team.json").schema
'team'
>>> parse_fetch_config({"collection": "articles", "limit": 3}).path
'/data/articles.json'
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

_EXTENSION_PATTERN = re.compile(r"\.(json|yaml|yml)$", re.IGNORECASE)


@dc.dataclass(frozen=True, slots=True)
class FetchConfig:
    """Normalized data-fetch declaration."""

    path: str | None = None
    url: str | None = None
    schema: str = "data"
    prerender: bool = True
    merge: bool = False
    transform: str | None = None
    limit: int | None = None
    sort: str | None = None
    filter: typ.Any = None


def infer_schema_from_path(path_or_url: str | None) -> str:
    """Return the schema name implied by the last segment of a path or URL."""
    if not path_or_url:
        return "data"
    segment = path_or_url.rsplit("/", 1)[-1]
    filename = segment.split("?", 1)[0]
    return _EXTENSION_PATTERN.sub("", filename)


def parse_fetch_config(value: object) -> FetchConfig | None:
    """Normalize a fetch declaration.

    Parameters
    ----------
    value : object
        A path string, a ``{"collection": name}`` reference, or a mapping
        with ``path`` or ``url`` plus optional post-processing options.

    Returns
    -------
    FetchConfig or None
        ``None`` when ``value`` is empty, of an unsupported type, or a mapping
        that names neither a collection, a path, nor a URL.
    """
    match value:
        case str() as path if path:
            return FetchConfig(path=path, schema=infer_schema_from_path(path))
        case dict() as payload:
            return _parse_fetch_mapping(payload)
        case _:
            return None


def _parse_fetch_mapping(payload: typ.Mapping[str, typ.Any]) -> FetchConfig | None:
    options = {
        "prerender": bool(payload.get("prerender", True)),
        "merge": bool(payload.get("merge", False)),
        "transform": payload.get("transform"),
        "limit": payload.get("limit"),
        "sort": payload.get("sort"),
        "filter": payload.get("filter"),
    }
    collection = payload.get("collection")
    if collection:
        return FetchConfig(
            path=f"/data/{collection}.json",
            schema=payload.get("schema") or str(collection),
            **options,
        )

    path = payload.get("path")
    url = payload.get("url")
    if not path and not url:
        return None
    return FetchConfig(
        path=path,
        url=url,
        schema=payload.get("schema") or infer_schema_from_path(path or url),
        **options,
    )


__all__ = [
    "FetchConfig",
    "infer_schema_from_path",
    "parse_fetch_config",
]
