"""Resolve local media referenced by section content.

Local files referenced from Markdown images or from common media parameters
in front matter are recorded in an asset manifest, keyed by the path as it
was written. Downstream build steps use the manifest to copy or optimize
files; this module only resolves where each file lives.

Example
-------
>>> from pathlib import Path
>>> from content_tree.assets import resolve_asset_path
>>> info = resolve_asset_path("./hero.png", Path("/site/pages/home/1-hero.md"), Path("/site"))
>>> str(info.resolved), info.is_image
('/site/pages/home/hero.png', True)
>>> resolve_asset_path("https://example.com/a.png", Path("a.md"), Path("/site")) is None
True
"""

from __future__ import annotations

import dataclasses as dc
import os
import re
import typing as typ
from pathlib import Path

from .document import iter_nodes

if typ.TYPE_CHECKING:
    from .context import BuildContext, Capabilities

IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".webp", ".gif", ".svg", ".avif"})
VIDEO_EXTENSIONS = frozenset({".mp4", ".webm", ".mov", ".avi", ".mkv"})
PDF_EXTENSION = ".pdf"
MEDIA_PARAMS = (
    "image",
    "background",
    "background_image",
    "thumbnail",
    "poster",
    "avatar",
    "logo",
    "icon",
    "video",
    "video_src",
    "media",
    "file",
    "pdf",
    "document",
)
_EXTERNAL_PATTERN = re.compile(r"^(?:https?:)?//", re.IGNORECASE)


@dc.dataclass(frozen=True, slots=True)
class AssetInfo:
    """A local file referenced by content.

    Attributes
    ----------
    original : str
        The path exactly as written in the content.
    resolved : Path
        Filesystem location the reference points to. It may not exist yet
        for site-absolute paths.
    extract_poster : bool
        Set on videos without an explicit poster when poster extraction is
        available for this build.
    """

    original: str
    resolved: Path
    is_image: bool = False
    is_video: bool = False
    is_pdf: bool = False
    extract_poster: bool = False


@dc.dataclass(frozen=True, slots=True)
class AssetCollection:
    """Assets found in one or more sections."""

    assets: typ.Mapping[str, AssetInfo] = dc.field(default_factory=dict)
    explicit_posters: frozenset[str] = frozenset()
    explicit_previews: frozenset[str] = frozenset()


def is_external_url(src: str) -> bool:
    """Return True for ``http(s)://``, protocol-relative, and ``data:`` sources."""
    return bool(_EXTERNAL_PATTERN.match(src)) or src.startswith("data:")


def _suffix(src: str) -> str:
    return Path(src.split("?", 1)[0]).suffix.lower()


def resolve_asset_path(src: str, context_path: Path, site_root: Path) -> AssetInfo | None:
    """Resolve ``src`` as referenced from the file at ``context_path``.

    Parameters
    ----------
    src : str
        The reference as written.
    context_path : Path
        The content file containing the reference.
    site_root : Path
        The site directory holding ``public/`` and ``assets/``.

    Returns
    -------
    AssetInfo or None
        ``None`` for external URLs and empty references. Site-absolute
        references (``/img/x.png``) resolve to ``public/`` when the file
        exists there, then ``assets/``, and otherwise default to ``public/``.
    """
    if not src or is_external_url(src):
        return None
    if src.startswith("/"):
        relative = src.lstrip("/")
        public_path = site_root / "public" / relative
        assets_path = site_root / "assets" / relative
        if public_path.exists():
            resolved = public_path
        elif assets_path.exists():
            resolved = assets_path
        else:
            resolved = public_path
    else:
        resolved = Path(os.path.normpath(context_path.parent / src))

    suffix = _suffix(src)
    return AssetInfo(
        original=src,
        resolved=resolved,
        is_image=suffix in IMAGE_EXTENSIONS,
        is_video=suffix in VIDEO_EXTENSIONS,
        is_pdf=suffix == PDF_EXTENSION,
    )


def collect_section_assets(
    content: object,
    params: typ.Mapping[str, typ.Any],
    markdown_path: Path,
    context: BuildContext,
) -> AssetCollection:
    """Collect the local assets one section references.

    Image nodes contribute their ``src`` plus any ``poster``/``preview``
    attribute; string values of the media parameters in :data:`MEDIA_PARAMS`
    contribute themselves.
    """
    assets: dict[str, AssetInfo] = {}
    posters: set[str] = set()
    previews: set[str] = set()

    def _add(src: object) -> None:
        if not isinstance(src, str):
            return
        info = resolve_asset_path(src, markdown_path, context.site_root)
        if info is not None:
            assets[src] = info

    for node in iter_nodes(content):
        attrs = node.get("attrs") or {}
        src = attrs.get("src")
        if node.get("type") != "image" or not src:
            continue
        _add(src)
        if attrs.get("poster"):
            posters.add(src)
            _add(attrs["poster"])
        if attrs.get("preview"):
            previews.add(src)
            _add(attrs["preview"])

    for field in MEDIA_PARAMS:
        _add(params.get(field))

    return AssetCollection(
        assets=assets,
        explicit_posters=frozenset(posters),
        explicit_previews=frozenset(previews),
    )


def merge_asset_collections(*collections: AssetCollection) -> AssetCollection:
    """Combine collections; later entries win for the same reference."""
    assets: dict[str, AssetInfo] = {}
    posters: set[str] = set()
    previews: set[str] = set()
    for collection in collections:
        assets.update(collection.assets)
        posters.update(collection.explicit_posters)
        previews.update(collection.explicit_previews)
    return AssetCollection(
        assets=assets,
        explicit_posters=frozenset(posters),
        explicit_previews=frozenset(previews),
    )


def build_asset_manifest(
    collection: AssetCollection, capabilities: Capabilities
) -> dict[str, AssetInfo]:
    """Return the final manifest, flagging videos that need a poster frame."""
    manifest: dict[str, AssetInfo] = {}
    for src, info in collection.assets.items():
        needs_poster = (
            capabilities.ffmpeg
            and info.is_video
            and src not in collection.explicit_posters
        )
        manifest[src] = dc.replace(info, extract_poster=needs_poster)
    return manifest


__all__ = [
    "MEDIA_PARAMS",
    "AssetCollection",
    "AssetInfo",
    "build_asset_manifest",
    "collect_section_assets",
    "is_external_url",
    "merge_asset_collections",
    "resolve_asset_path",
]
