"""Detect version folders (``v1``, ``v2.1``) and build version metadata.

A directory whose child folders match ``v<major>[.<minor>]`` is a versioned
scope. The latest version is served at the scope's own route; every other
version lives under ``<scope>/<version id>``. Labels, deprecation, and an
explicit latest choice come from the scope directory's ``versions`` mapping.

Examples
--------
>>> from content_tree.versions import build_version_meta, detect_versions
>>> detected = detect_versions(["v1", "guides", "v2.1", "v2.0"])
>>> detected
['v2.1', 'v2.0', 'v1']
>>> build_version_meta(detected, {}).latest_id
'v2.1'
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import re
import typing as typ

from .models import VersionInfo, VersionMeta
from .routes import join_route

logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"^v(\d+)(?:\.(\d+))?$")


def is_version_folder(name: str) -> bool:
    """Return True when ``name`` follows the ``v<major>[.<minor>]`` pattern."""
    return VERSION_PATTERN.match(name) is not None


def version_sort_key(name: str) -> int:
    """Return ``major * 1000 + minor`` for a version folder name.

    Raises
    ------
    ValueError
        If ``name`` is not a version folder name.
    """
    match = VERSION_PATTERN.match(name)
    if match is None:
        msg = f"'{name}' is not a version folder name."
        raise ValueError(msg)
    major = int(match.group(1))
    minor = int(match.group(2) or 0)
    return major * 1000 + minor


def detect_versions(names: cabc.Iterable[str]) -> list[str]:
    """Return the version folder names in ``names``, newest first."""
    found = [name for name in names if is_version_folder(name)]
    return sorted(found, key=version_sort_key, reverse=True)


def build_version_meta(
    detected: cabc.Sequence[str], overrides: typ.Mapping[str, typ.Any]
) -> VersionMeta | None:
    """Build the VersionMeta for a scope.

    Parameters
    ----------
    detected : Sequence[str]
        Version folder names sorted newest first (see :func:`detect_versions`).
    overrides : Mapping[str, Any]
        The scope's ``versions`` configuration mapping version ids to
        ``{label, latest, deprecated}``.

    Returns
    -------
    VersionMeta or None
        ``None`` when nothing was detected. Exactly one version is flagged
        latest: the first explicitly marked one, otherwise the newest.
    """
    if not detected:
        return None

    settings: dict[str, typ.Mapping[str, typ.Any]] = {}
    for version_id in detected:
        entry = overrides.get(version_id)
        settings[version_id] = entry if isinstance(entry, dict) else {}

    explicit = [vid for vid in detected if settings[vid].get("latest") is True]
    if len(explicit) > 1:
        logger.warning(
            "Several versions marked latest (%s); using %s",
            ", ".join(explicit),
            explicit[0],
        )
    latest_id = explicit[0] if explicit else detected[0]

    versions = tuple(
        VersionInfo(
            id=version_id,
            label=str(settings[version_id].get("label") or version_id),
            latest=version_id == latest_id,
            deprecated=bool(settings[version_id].get("deprecated", False)),
            sort_key=version_sort_key(version_id),
        )
        for version_id in detected
    )
    return VersionMeta(versions=versions, latest_id=latest_id)


def version_route(parent_route: str, version_id: str, meta: VersionMeta) -> str:
    """Return the route for ``version_id`` within the scope at ``parent_route``."""
    if version_id == meta.latest_id:
        return parent_route
    return join_route(parent_route, version_id)


__all__ = [
    "VERSION_PATTERN",
    "build_version_meta",
    "detect_versions",
    "is_version_folder",
    "version_route",
    "version_sort_key",
]
