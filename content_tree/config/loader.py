"""Load site and directory configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from content_tree._constants import (
    DEFAULT_PAGES_DIR,
    FOLDER_CONFIG,
    PAGE_CONFIG,
    SITE_CONFIG,
)
from content_tree.fetch import parse_fetch_config

from .helpers import (
    _build_layout_options,
    _build_seo_options,
    _layout_name,
    _mapping,
    _optional_number,
    _optional_str,
    read_yaml_file,
)
from .models import ContentMode, DirectoryConfig, OrderConfig, SiteConfig


def load_site_config(site_root: Path, *, pages_dir: Path | str | None = None) -> SiteConfig:
    """Load ``site.yml`` from ``site_root`` into a :class:`SiteConfig`.

    Parameters
    ----------
    site_root : Path
        Directory holding ``site.yml`` and the pages directory.
    pages_dir : Path or str, optional
        Override for the pages directory. Relative values resolve against
        ``site_root``. When ``None`` the ``pages_dir`` key of ``site.yml`` is
        used, falling back to ``pages``.

    Returns
    -------
    SiteConfig
        Parsed configuration. A missing or malformed ``site.yml`` yields the
        defaults rather than an error.

    Examples
    --------
    >>> from pathlib import Path
    >>> from content_tree.config import load_site_config
    >>> config = load_site_config(Path("site"))  # doctest: +SKIP
    >>> config.pages_dir.name  # doctest: +SKIP
    'pages'
    """
    raw = read_yaml_file(site_root / SITE_CONFIG)
    pages_value = pages_dir if pages_dir is not None else raw.get("pages_dir")
    pages_path = Path(pages_value or DEFAULT_PAGES_DIR)
    if not pages_path.is_absolute():
        pages_path = site_root / pages_path

    return SiteConfig(
        root=site_root,
        pages_dir=pages_path,
        raw=raw,
        ordering=_build_order_config(raw),
        mounts=_mapping(raw.get("mounts"), key="mounts"),
        layout_name=_layout_name(raw.get("layout")),
        versions=_mapping(raw.get("versions"), key="versions"),
        fetch=parse_fetch_config(raw.get("fetch")),
    )


def load_directory_config(directory: Path) -> DirectoryConfig:
    """Load the ``folder.yml`` or ``page.yml`` declared in ``directory``.

    ``folder.yml`` takes precedence and switches the directory to pages mode;
    ``page.yml`` switches it to sections mode. A directory with neither
    returns a config whose ``mode`` is ``None`` so the caller inherits its
    parent's mode.
    """
    folder_path = directory / FOLDER_CONFIG
    page_path = directory / PAGE_CONFIG
    if folder_path.is_file():
        mode: ContentMode | None = ContentMode.PAGES
        raw = read_yaml_file(folder_path)
    elif page_path.is_file():
        mode = ContentMode.SECTIONS
        raw = read_yaml_file(page_path)
    else:
        return DirectoryConfig()
    return build_directory_config(raw, mode=mode)


def build_directory_config(
    raw: typ.Mapping[str, typ.Any], *, mode: ContentMode | None
) -> DirectoryConfig:
    """Build a DirectoryConfig from an already-parsed mapping."""
    return DirectoryConfig(
        mode=mode,
        raw=dict(raw),
        title=_optional_str(raw.get("title")),
        description=_optional_str(raw.get("description")),
        label=_optional_str(raw.get("label")),
        id=_optional_str(raw.get("id")),
        order=_optional_number(raw.get("order")),
        ordering=_build_order_config(raw),
        sections=raw.get("sections"),
        has_sections_key="sections" in raw,
        hidden=bool(raw.get("hidden", False)),
        hide_in_header=bool(raw.get("hide_in_header", False)),
        hide_in_footer=bool(raw.get("hide_in_footer", False)),
        layout=_build_layout_options(raw.get("layout")),
        seo=_build_seo_options(raw.get("seo")),
        fetch=parse_fetch_config(raw.get("fetch")),
        versions=_mapping(raw.get("versions"), key="versions"),
    )


def _build_order_config(raw: typ.Mapping[str, typ.Any]) -> OrderConfig:
    """Extract the ``pages``/``index`` ordering declarations from ``raw``."""
    pages = raw.get("pages")
    return OrderConfig(
        pages=list(pages) if isinstance(pages, list) else None,
        index=_optional_str(raw.get("index")),
    )


__all__ = ["build_directory_config", "load_directory_config", "load_site_config"]
