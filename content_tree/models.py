"""Immutable records that make up the site content tree.

Every object the collector produces is a frozen dataclass. Downstream
consumers (translation extraction, search indexing, asset rewriting) receive
these records directly or as plain dictionaries via
:func:`content_tree.serialize.to_record`.

Examples
--------
>>> from content_tree.models import Page
>>> page = Page(route="/about", source_path="/about", title="About")
>>> page.has_content
False
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from ._constants import DEFAULT_SECTION_TYPE

if typ.TYPE_CHECKING:
    from .assets import AssetInfo
    from .fetch import FetchConfig


@dc.dataclass(frozen=True, slots=True)
class Inset:
    """Inline component reference lifted out of a section body.

    Attributes
    ----------
    ref_id : str
        Placeholder identifier left in the document (``inset_0``...).
    type : str
        Component name referenced with ``@Component``.
    params : Mapping[str, Any]
        Attributes declared on the reference besides ``component``/``alt``.
    description : str or None
        The reference's alt text.
    """

    ref_id: str
    type: str
    params: typ.Mapping[str, typ.Any] = dc.field(default_factory=dict)
    description: str | None = None


@dc.dataclass(frozen=True, slots=True)
class Section:
    """One content block inside a page.

    Attributes
    ----------
    id : str
        Positional identifier: ``.`` orders siblings, ``,`` nests children.
    stable_id : str
        Identifier that survives reordering (front matter ``id`` or the file
        name without its numeric prefix).
    type : str
        Component name.
    params : Mapping[str, Any]
        Front matter keys that are not reserved, with ``props`` merged on top.
    content : Mapping[str, Any]
        Rich document produced by the Markdown converter.
    subsections : tuple[Section, ...]
        Nested sections in order.
    """

    id: str
    stable_id: str
    type: str = DEFAULT_SECTION_TYPE
    preset: str | None = None
    input: typ.Any = None
    params: typ.Mapping[str, typ.Any] = dc.field(default_factory=dict)
    content: typ.Mapping[str, typ.Any] = dc.field(default_factory=dict)
    fetch: FetchConfig | None = None
    data: typ.Any = None
    subsections: tuple[Section, ...] = ()
    insets: tuple[Inset, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class LayoutOptions:
    """Layout assignment and per-page layout area toggles."""

    name: str | None = None
    header: bool = True
    footer: bool = True
    left_panel: bool = True
    right_panel: bool = True


@dc.dataclass(frozen=True, slots=True)
class SeoOptions:
    """Search-engine metadata for a page."""

    noindex: bool = False
    image: str | None = None
    changefreq: str | None = None
    priority: float | None = None


@dc.dataclass(frozen=True, slots=True)
class VersionInfo:
    """A single detected version folder."""

    id: str
    label: str
    latest: bool = False
    deprecated: bool = False
    sort_key: int = 0


@dc.dataclass(frozen=True, slots=True)
class VersionMeta:
    """Versions available within one versioned route scope."""

    versions: tuple[VersionInfo, ...]
    latest_id: str

    def get(self, version_id: str) -> VersionInfo | None:
        """Return the version record for ``version_id`` if it exists."""
        for info in self.versions:
            if info.id == version_id:
                return info
        return None


@dc.dataclass(frozen=True, slots=True)
class Page:
    """One navigable unit of the site.

    Attributes
    ----------
    route : str
        Canonical URL path; unique once the finalizer has run.
    source_path : str
        Route derived purely from folder position. Differs from ``route``
        when the page was promoted to index or is the latest version.
    parent : str or None
        Route of the structural parent; assigned by the finalizer.
    """

    route: str
    source_path: str
    title: str
    id: str | None = None
    description: str = ""
    label: str | None = None
    order: float | None = None
    sections: tuple[Section, ...] = ()
    is_index: bool = False
    is_dynamic: bool = False
    param_name: str | None = None
    parent_schema: str | None = None
    version: str | None = None
    version_meta: VersionMeta | None = None
    version_scope: str | None = None
    layout: LayoutOptions = dc.field(default_factory=LayoutOptions)
    hidden: bool = False
    hide_in_header: bool = False
    hide_in_footer: bool = False
    seo: SeoOptions = dc.field(default_factory=SeoOptions)
    fetch: FetchConfig | None = None
    last_modified: str | None = None
    parent: str | None = None

    @property
    def has_content(self) -> bool:
        """Return True when the page carries at least one section."""
        return bool(self.sections)


@dc.dataclass(frozen=True, slots=True)
class SiteContent:
    """The complete output of a collection run.

    Attributes
    ----------
    config : Mapping[str, Any]
        The raw ``site.yml`` mapping with a normalized ``fetch`` entry.
    pages : tuple[Page, ...]
        Finalized pages in walk order.
    areas : Mapping[str, Page]
        Top-level layout areas keyed by name without the ``@`` prefix.
    not_found : Page or None
        The top-level ``404`` page, if any.
    assets : Mapping[str, AssetInfo]
        Asset manifest keyed by the path written in the content.
    icons : Mapping[str, Any]
        Icon manifest built by :func:`content_tree.icons.build_icon_manifest`.
    versions : Mapping[str, VersionMeta]
        Versioned route scopes.
    """

    config: typ.Mapping[str, typ.Any]
    pages: tuple[Page, ...] = ()
    areas: typ.Mapping[str, Page] = dc.field(default_factory=dict)
    not_found: Page | None = None
    assets: typ.Mapping[str, AssetInfo] = dc.field(default_factory=dict)
    icons: typ.Mapping[str, typ.Any] = dc.field(default_factory=dict)
    versions: typ.Mapping[str, VersionMeta] = dc.field(default_factory=dict)

    def get_page(self, route: str) -> Page:
        """Return the page registered at ``route``."""
        for page in self.pages:
            if page.route == route:
                return page
        available = ", ".join(sorted(page.route for page in self.pages))
        msg = f"Unknown route '{route}'. Known routes: {available}"
        raise KeyError(msg)


__all__ = [
    "Inset",
    "LayoutOptions",
    "Page",
    "Section",
    "SeoOptions",
    "SiteContent",
    "VersionInfo",
    "VersionMeta",
]
