"""Collect icon references used in section content.

Icons appear in rich documents as image nodes carrying ``role="icon"`` plus a
``library`` and ``name``. The collector gathers them per section, merges the
results across the site, and emits a manifest so tooling can preload or
validate the icon families a site depends on.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

FAMILY_MAP: dict[str, str] = {
    "lucide": "lu",
    "heroicons": "hi",
    "heroicons2": "hi2",
    "phosphor": "pi",
    "tabler": "tb",
    "feather": "fi",
    "fa": "fa",
    "fa6": "fa6",
    "bootstrap": "bs",
    "material-design": "md",
    "ant-design": "ai",
    "remix": "ri",
    "simple-icons": "si",
    "vscode": "vsc",
    "weather": "wi",
    "game": "gi",
}
FAMILY_MAP.update({code: code for code in set(FAMILY_MAP.values())})


def normalize_library(library: str | None, *, known_only: bool = False) -> str | None:
    """Return the short family code for ``library``.

    Unknown families are returned lower-cased unless ``known_only`` is set,
    in which case they yield ``None``.
    """
    if not library:
        return None
    lowered = library.lower()
    code = FAMILY_MAP.get(lowered)
    if code is not None or known_only:
        return code
    return lowered


@dc.dataclass(frozen=True, slots=True)
class IconCollection:
    """Icon references and the source files that use each one."""

    icons: frozenset[str] = frozenset()
    by_source: typ.Mapping[str, tuple[str, ...]] = dc.field(default_factory=dict)


def _walk_icons(node: object) -> cabc.Iterator[tuple[str, str]]:
    if not isinstance(node, dict):
        return
    attrs = node.get("attrs") or {}
    if node.get("type") == "image" and attrs.get("role") == "icon":
        library, name = attrs.get("library"), attrs.get("name")
        if library and name:
            yield str(library), str(name)
    for child in node.get("content") or ():
        yield from _walk_icons(child)


def collect_section_icons(content: object, source: str) -> IconCollection:
    """Collect the icons referenced in one section's rich document.

    Parameters
    ----------
    content : object
        The section's rich document.
    source : str
        Path of the content file, recorded against every icon it uses.

    Returns
    -------
    IconCollection
        Normalized ``family:name`` references found in ``content``.
    """
    icons: set[str] = set()
    by_source: dict[str, tuple[str, ...]] = {}
    for library, name in _walk_icons(content):
        family = normalize_library(library)
        if family is None:
            continue
        ref = f"{family}:{name}"
        icons.add(ref)
        by_source[ref] = (*by_source.get(ref, ()), source)
    return IconCollection(icons=frozenset(icons), by_source=by_source)


def merge_icon_collections(*collections: IconCollection | None) -> IconCollection:
    """Combine icon collections, concatenating sources in argument order."""
    icons: set[str] = set()
    by_source: dict[str, tuple[str, ...]] = {}
    for collection in collections:
        if collection is None:
            continue
        icons.update(collection.icons)
        for ref, sources in collection.by_source.items():
            by_source[ref] = (*by_source.get(ref, ()), *sources)
    return IconCollection(icons=frozenset(icons), by_source=by_source)


def build_icon_manifest(collection: IconCollection) -> dict[str, typ.Any]:
    """Return the JSON-ready icon manifest for ``collection``.

    Examples
    --------
    >>> manifest = build_icon_manifest(
    ...     IconCollection(icons=frozenset({"lu:house"}), by_source={"lu:house": ("a.md", "a.md")})
    ... )
    >>> manifest["families"], manifest["by_source"]
    (['lu'], {'lu:house': ['a.md']})
    """
    families = {ref.split(":", 1)[0] for ref in collection.icons}
    return {
        "used": sorted(collection.icons),
        "families": sorted(families),
        "by_source": {
            ref: list(dict.fromkeys(sources))
            for ref, sources in collection.by_source.items()
        },
        "count": len(collection.icons),
    }


__all__ = [
    "FAMILY_MAP",
    "IconCollection",
    "build_icon_manifest",
    "collect_section_icons",
    "merge_icon_collections",
    "normalize_library",
]
