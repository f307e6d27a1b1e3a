"""Typed dataclasses describing site and directory configuration."""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ
from pathlib import Path

if typ.TYPE_CHECKING:
    from content_tree.fetch import FetchConfig
    from content_tree.models import LayoutOptions, SeoOptions


class ConfigError(ValueError):
    """Raised when the site configuration is invalid and the build must stop."""


class ContentMode(enum.StrEnum):
    """How a directory's children are interpreted."""

    PAGES = "pages"
    SECTIONS = "sections"


@dc.dataclass(frozen=True, slots=True)
class OrderConfig:
    """Ordering declarations a directory applies to its child pages."""

    pages: list[typ.Any] | None = None
    index: str | None = None


@dc.dataclass(frozen=True, slots=True)
class DirectoryConfig:
    """A parsed ``page.yml`` or ``folder.yml`` for a single directory.

    Attributes
    ----------
    mode : ContentMode or None
        ``PAGES`` when ``folder.yml`` exists, ``SECTIONS`` when ``page.yml``
        exists, ``None`` when the directory inherits its parent's mode.
    raw : Mapping[str, Any]
        The untouched YAML mapping.
    has_sections_key : bool
        Whether ``sections`` was declared at all, which distinguishes an
        explicitly empty page from an undeclared list.
    """

    mode: ContentMode | None = None
    raw: typ.Mapping[str, typ.Any] = dc.field(default_factory=dict)
    title: str | None = None
    description: str | None = None
    label: str | None = None
    id: str | None = None
    order: float | None = None
    ordering: OrderConfig = dc.field(default_factory=OrderConfig)
    sections: typ.Any = None
    has_sections_key: bool = False
    hidden: bool = False
    hide_in_header: bool = False
    hide_in_footer: bool = False
    layout: LayoutOptions | None = None
    seo: SeoOptions | None = None
    fetch: FetchConfig | None = None
    versions: typ.Mapping[str, typ.Any] = dc.field(default_factory=dict)


@dc.dataclass(frozen=True, slots=True)
class SiteConfig:
    """Site-wide settings sourced from ``site.yml``."""

    root: Path
    pages_dir: Path
    raw: typ.Mapping[str, typ.Any] = dc.field(default_factory=dict)
    ordering: OrderConfig = dc.field(default_factory=OrderConfig)
    mounts: typ.Mapping[str, typ.Any] = dc.field(default_factory=dict)
    layout_name: str | None = None
    versions: typ.Mapping[str, typ.Any] = dc.field(default_factory=dict)
    fetch: FetchConfig | None = None


__all__ = [
    "ConfigError",
    "ContentMode",
    "DirectoryConfig",
    "OrderConfig",
    "SiteConfig",
]
