"""Validate and resolve external directories mounted into the page tree.

``site.yml`` may graft directories that live outside the pages directory onto
a top-level route segment::

    mounts:
      docs: ../shared-docs

Every declaration is checked before page collection starts. Any violation
raises :class:`~content_tree.config.ConfigError` naming the offending
declaration, so a build never discovers a conflict halfway through the walk.

Example
-------
>>> from pathlib import Path
>>> from content_tree.mounts import resolve_mounts
>>> mounts = resolve_mounts(
...     {"docs": "../shared-docs"}, site_root=Path("site"), pages_dir=Path("site/pages")
... )  # doctest: +SKIP
>>> mounts["docs"].path  # doctest: +SKIP
PosixPath('/work/shared-docs')
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from .config import ConfigError

NODE_MODULES = "node_modules"


@dc.dataclass(frozen=True, slots=True)
class Mount:
    """A validated mount: a route segment backed by a canonical directory."""

    segment: str
    path: Path


def resolve_mounts(
    declarations: typ.Mapping[str, typ.Any],
    *,
    site_root: Path,
    pages_dir: Path,
) -> dict[str, Mount]:
    """Validate mount declarations and resolve their canonical targets.

    Parameters
    ----------
    declarations : Mapping[str, Any]
        Route segment to path, relative paths resolving against
        ``site_root``.
    site_root : Path
        The site directory.
    pages_dir : Path
        The site's own pages directory; mounts may not overlap it.

    Returns
    -------
    dict[str, Mount]
        Mounts keyed by segment, in declaration order.

    Raises
    ------
    ConfigError
        If a segment is invalid, a target is missing or not a directory, lies
        under ``node_modules``, or overlaps the pages directory or another
        mount.
    """
    pages_real = pages_dir.resolve()
    resolved: dict[str, Mount] = {}
    for segment, target in declarations.items():
        segment_name = str(segment)
        _validate_segment(segment_name)
        canonical = _resolve_target(segment_name, target, site_root)
        if NODE_MODULES in canonical.parts:
            msg = f"Mount '{segment_name}' points inside {NODE_MODULES}: {canonical}"
            raise ConfigError(msg)
        if _overlaps(canonical, pages_real):
            msg = (
                f"Mount '{segment_name}' ({canonical}) overlaps the pages "
                f"directory {pages_real}."
            )
            raise ConfigError(msg)
        for other in resolved.values():
            if _overlaps(canonical, other.path):
                msg = (
                    f"Mount '{segment_name}' ({canonical}) overlaps mount "
                    f"'{other.segment}' ({other.path})."
                )
                raise ConfigError(msg)
        resolved[segment_name] = Mount(segment=segment_name, path=canonical)
    return resolved


def _validate_segment(segment: str) -> None:
    if not segment or "/" in segment or "\\" in segment:
        msg = f"Mount segment '{segment}' must be a single path segment."
        raise ConfigError(msg)
    if segment.startswith((".", "_")):
        msg = f"Mount segment '{segment}' may not start with '.' or '_'."
        raise ConfigError(msg)


def _resolve_target(segment: str, target: object, site_root: Path) -> Path:
    if not isinstance(target, str) or not target.strip():
        msg = f"Mount '{segment}' must declare a directory path."
        raise ConfigError(msg)
    candidate = Path(target)
    if not candidate.is_absolute():
        candidate = site_root / candidate
    if not candidate.exists():
        msg = f"Mount '{segment}' target does not exist: {candidate}"
        raise ConfigError(msg)
    if not candidate.is_dir():
        msg = f"Mount '{segment}' target is not a directory: {candidate}"
        raise ConfigError(msg)
    return candidate.resolve(strict=True)


def _overlaps(first: Path, second: Path) -> bool:
    """Return True when the paths are equal or one contains the other."""
    return (
        first == second
        or first.is_relative_to(second)
        or second.is_relative_to(first)
    )


__all__ = ["NODE_MODULES", "Mount", "resolve_mounts"]
