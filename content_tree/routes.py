"""Helpers for building and inspecting route strings."""

from __future__ import annotations

import re

from ._constants import LAYOUT_AREA_PREFIX, ROOT_ROUTE

DYNAMIC_SEGMENT_PATTERN = re.compile(r"^\[(\w+)\]$")


def join_route(parent_route: str, segment: str) -> str:
    """Append ``segment`` to ``parent_route`` without doubling slashes."""
    if parent_route == ROOT_ROUTE:
        return f"/{segment}"
    return f"{parent_route}/{segment}"


def route_segments(route: str) -> list[str]:
    """Split a route into its non-empty path segments."""
    return [segment for segment in route.split("/") if segment]


def parent_route_of(route: str) -> str | None:
    """Return the route one segment up, or None for top-level routes."""
    segments = route_segments(route)
    if len(segments) <= 1:
        return None
    return "/" + "/".join(segments[:-1])


def extract_route_param(folder_name: str) -> str | None:
    """Return ``slug`` for a ``[slug]`` folder, or None for a regular folder."""
    match = DYNAMIC_SEGMENT_PATTERN.match(folder_name)
    return match.group(1) if match else None


def is_dynamic_folder(folder_name: str) -> bool:
    """Return True for folders named like ``[param]``."""
    return extract_route_param(folder_name) is not None


def is_layout_area(folder_name: str) -> bool:
    """Return True for ``@name`` layout-area folders."""
    return folder_name.startswith(LAYOUT_AREA_PREFIX)


def folder_segment(folder_name: str) -> str:
    """Return the route segment a folder contributes.

    ``[slug]`` becomes ``:slug``; every other name, including ``@area``
    names, is used as-is.
    """
    param = extract_route_param(folder_name)
    if param is not None:
        return f":{param}"
    return folder_name


def get_direct_child_name(route: str | None, parent_route: str) -> str | None:
    """Return the segment naming ``route`` as a direct child of ``parent_route``.

    Examples
    --------
    >>> get_direct_child_name("/docs/guide", "/docs")
    'guide'
    >>> get_direct_child_name("/docs/a/b", "/docs") is None
    True
    """
    if not route or route == parent_route:
        return None
    prefix = ROOT_ROUTE if parent_route == ROOT_ROUTE else f"{parent_route}/"
    if not route.startswith(prefix):
        return None
    remainder = route[len(prefix) :]
    if not remainder or "/" in remainder:
        return None
    return remainder


__all__ = [
    "DYNAMIC_SEGMENT_PATTERN",
    "extract_route_param",
    "folder_segment",
    "get_direct_child_name",
    "is_dynamic_folder",
    "is_layout_area",
    "join_route",
    "parent_route_of",
    "route_segments",
]
