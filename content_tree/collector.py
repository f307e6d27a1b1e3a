"""Walk a site's pages directory and build the site content tree.

The collector visits every directory below the pages directory and decides
what each one is:

* a **page** whose Markdown files are its sections (``sections`` mode, the
  default and what ``page.yml`` selects), or
* a **container** whose Markdown files are independent single-section pages
  (``pages`` mode, selected by ``folder.yml``).

Directories without a configuration file inherit their parent's mode. While
walking, the collector derives routes (``[slug]`` folders become ``:slug``
segments), promotes one child per level to its parent's route (the index
page), grafts mounted directories onto the top level, and turns ``v1``/``v2``
folders into versioned scopes. A final pass deduplicates routes and links
each page to its parent.

Directory listings and file reads run in worker threads; siblings are
processed concurrently with :func:`asyncio.gather` and their results are
merged in declared order, so output never depends on completion order.

Example
-------
>>> from content_tree.collector import collect_site_content
>>> site = collect_site_content("my-site")  # doctest: +SKIP
>>> [page.route for page in site.pages]  # doctest: +SKIP
['/', '/about', '/docs', '/docs/install']
"""

from __future__ import annotations

import asyncio
import collections.abc as cabc
import dataclasses as dc
import datetime as dt
import enum
import logging
import typing as typ
from pathlib import Path

from ._constants import (
    CONTENT_SUFFIX,
    DRAFT_PREFIX,
    NOT_FOUND_PAGE,
    ROOT_ROUTE,
    WILDCARD,
)
from .assets import (
    AssetCollection,
    build_asset_manifest,
    collect_section_assets,
    merge_asset_collections,
)
from .config import (
    ContentMode,
    DirectoryConfig,
    OrderConfig,
    load_directory_config,
    load_site_config,
)
from .context import BuildContext, Capabilities
from .document import ProseDocumentConverter, extract_insets
from .finalizer import finalize_pages
from .frontmatter import SectionFrontmatter, read_source_text, split_frontmatter
from .icons import (
    IconCollection,
    build_icon_manifest,
    collect_section_icons,
    merge_icon_collections,
)
from .models import LayoutOptions, Page, Section, SeoOptions, SiteContent, VersionMeta
from .mounts import Mount, resolve_mounts
from .ordering import (
    OrderMode,
    apply_order,
    extract_item_name,
    numeric_sort_key,
    parse_numeric_prefix,
    parse_order_spec,
)
from .routes import (
    extract_route_param,
    folder_segment,
    is_dynamic_folder,
    is_layout_area,
    join_route,
)
from .sections import build_section_hierarchy, child_id
from .versions import build_version_meta, detect_versions, version_route

if typ.TYPE_CHECKING:
    from .document import MarkdownConverter
    from .fetch import FetchConfig

logger = logging.getLogger(__name__)

ROOT_TITLE = "Home"
FILE_PAGE_SECTION_ID = "1"


@dc.dataclass(frozen=True, slots=True)
class CollectResult:
    """Everything one branch of the walk produced.

    Results from sibling branches are combined with :func:`merge_results`,
    which is associative: pages concatenate, manifests union.
    """

    pages: tuple[Page, ...] = ()
    areas: typ.Mapping[str, Page] = dc.field(default_factory=dict)
    not_found: Page | None = None
    assets: AssetCollection = dc.field(default_factory=AssetCollection)
    icons: IconCollection = dc.field(default_factory=IconCollection)
    versions: typ.Mapping[str, VersionMeta] = dc.field(default_factory=dict)


def merge_results(*results: CollectResult) -> CollectResult:
    """Combine branch results in argument order."""
    pages: list[Page] = []
    areas: dict[str, Page] = {}
    versions: dict[str, VersionMeta] = {}
    not_found: Page | None = None
    for result in results:
        pages.extend(result.pages)
        areas.update(result.areas)
        versions.update(result.versions)
        not_found = not_found or result.not_found
    return CollectResult(
        pages=tuple(pages),
        areas=areas,
        not_found=not_found,
        assets=merge_asset_collections(*(result.assets for result in results)),
        icons=merge_icon_collections(*(result.icons for result in results)),
        versions=versions,
    )


@dc.dataclass(frozen=True, slots=True)
class _Scope:
    """State inherited by every child of the directory being listed."""

    parent_route: str
    mode: ContentMode
    parent_fetch: FetchConfig | None = None
    layout_name: str | None = None
    version: str | None = None
    version_meta: VersionMeta | None = None
    version_scope: str | None = None
    top_level: bool = False


@dc.dataclass(frozen=True, slots=True)
class _Listing:
    folders: tuple[tuple[str, Path], ...] = ()
    files: tuple[Path, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class _LoadedSection:
    path: Path
    section: Section
    assets: AssetCollection
    icons: IconCollection
    mtime: float


class _ChildKind(enum.Enum):
    FOLDER = "folder"
    FILE = "file"


@dc.dataclass(frozen=True, slots=True)
class _Child:
    """A child entry awaiting ordering and processing."""

    name: str
    sort_name: str
    path: Path
    kind: _ChildKind
    order: float | None = None
    config: DirectoryConfig = dc.field(default_factory=DirectoryConfig)
    loaded: _LoadedSection | None = None


def _list_directory(directory: Path) -> _Listing:
    """Return subdirectories and content files.

    Dot-entries are ignored, as are ``_``-prefixed content files (drafts and
    partials).
    """
    try:
        entries = list(directory.iterdir())
    except FileNotFoundError:
        logger.debug("Directory %s does not exist; treating as empty", directory)
        return _Listing()
    folders = [
        (entry.name, entry)
        for entry in entries
        if not entry.name.startswith(".") and entry.is_dir()
    ]
    files = [
        entry
        for entry in entries
        if not entry.name.startswith((".", DRAFT_PREFIX))
        and entry.suffix == CONTENT_SUFFIX
        and entry.is_file()
    ]
    folders.sort(key=lambda item: numeric_sort_key(item[0]))
    files.sort(key=lambda path: numeric_sort_key(path.stem))
    return _Listing(folders=tuple(folders), files=tuple(files))


def _section_name(path: Path) -> str:
    return parse_numeric_prefix(path.stem)[1]


def _timestamp(mtime: float | None) -> str | None:
    if mtime is None:
        return None
    return dt.datetime.fromtimestamp(mtime, tz=dt.UTC).isoformat()


def _optional_float(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return value


def plan_sections(
    config: DirectoryConfig, files: cabc.Sequence[Path], *, directory: Path
) -> list[tuple[Path, str]]:
    """Decide which content files become sections and their positional ids.

    Parameters
    ----------
    config : DirectoryConfig
        The page's configuration; its ``sections`` entry selects the
        strategy.
    files : Sequence[Path]
        Content files in the page directory, sorted by numeric prefix.
    directory : Path
        The page directory, used in log messages.

    Returns
    -------
    list[tuple[Path, str]]
        ``(file, id)`` pairs in final order, flattened; nesting is encoded in
        the ids. Three strategies apply:

        * no ``sections`` key, ``"*"``, or only wildcards: every file, id
          taken from its numeric prefix (or its name);
        * a list with a wildcard: files ordered by the list, unlisted files
          spliced in at the wildcard, ids assigned sequentially;
        * a list without a wildcard: exactly the listed files, ids assigned
          sequentially. A listed name with no file logs a warning and its
          position is skipped.

        A ``sections`` key that is empty or null yields no sections.
    """
    value = config.sections
    if not config.has_sections_key or value == "*":
        return _plan_discovered(files)
    if not isinstance(value, list) or not value:
        return []
    spec = parse_order_spec(value)
    by_name = _files_by_name(files)
    match spec.mode if spec else OrderMode.ALL:
        case OrderMode.ALL:
            return _plan_discovered(files)
        case OrderMode.STRICT:
            return _plan_explicit(value, by_name, None, directory)
        case OrderMode.INCLUSIVE:
            return _plan_spliced(value, files, by_name, directory)


def _plan_discovered(files: cabc.Sequence[Path]) -> list[tuple[Path, str]]:
    planned: list[tuple[Path, str]] = []
    for path in files:
        prefix, _ = parse_numeric_prefix(path.stem)
        planned.append((path, prefix or path.stem))
    return planned


def _files_by_name(files: cabc.Sequence[Path]) -> dict[str, Path]:
    """Index files by stem and by name without numeric prefix."""
    by_name = {path.stem: path for path in files}
    for path in files:
        by_name.setdefault(_section_name(path), path)
    return by_name


def _plan_explicit(
    entries: cabc.Sequence[typ.Any],
    by_name: typ.Mapping[str, Path],
    parent_id: str | None,
    directory: Path,
) -> list[tuple[Path, str]]:
    planned: list[tuple[Path, str]] = []
    index = 0
    for entry in entries:
        if entry == WILDCARD:
            continue
        name = extract_item_name(entry)
        if name is None:
            logger.warning("Ignoring invalid section entry %r in %s", entry, directory)
            continue
        index += 1
        section_id = child_id(parent_id, index)
        path = by_name.get(name)
        if path is None:
            logger.warning("Section file not found: %s%s in %s", name, CONTENT_SUFFIX, directory)
            continue
        planned.append((path, section_id))
        nested = entry.get(name) if isinstance(entry, dict) else None
        if isinstance(nested, list) and nested:
            planned.extend(_plan_explicit(nested, by_name, section_id, directory))
    return planned


def _nested_declarations(entries: cabc.Iterable[typ.Any]) -> dict[str, list[typ.Any]]:
    nested: dict[str, list[typ.Any]] = {}
    for entry in entries:
        name = extract_item_name(entry)
        if isinstance(entry, dict) and name is not None:
            children = entry.get(name)
            if isinstance(children, list):
                nested[name] = children
    return nested


def _claimed_names(declarations: cabc.Iterable[list[typ.Any]]) -> set[str]:
    claimed: set[str] = set()
    for children in declarations:
        for child in children:
            name = extract_item_name(child)
            if name is None:
                continue
            claimed.add(name)
            claimed |= _claimed_names(_nested_declarations([child]).values())
    return claimed


def _plan_spliced(
    entries: list[typ.Any],
    files: cabc.Sequence[Path],
    by_name: typ.Mapping[str, Path],
    directory: Path,
) -> list[tuple[Path, str]]:
    spec = parse_order_spec(entries)
    nested = _nested_declarations(entries)
    claimed = _claimed_names(nested.values())
    top_level = [path for path in files if _section_name(path) not in claimed]
    ordered = apply_order(top_level, spec, key=_section_name)
    planned: list[tuple[Path, str]] = []
    for index, path in enumerate(ordered, start=1):
        section_id = str(index)
        planned.append((path, section_id))
        children = nested.get(_section_name(path)) or nested.get(path.stem)
        if children:
            planned.extend(_plan_explicit(children, by_name, section_id, directory))
    return planned


def select_index_page(
    ordering: OrderConfig, candidates: cabc.Sequence[tuple[str, float | None]]
) -> str | None:
    """Choose which child is served at its parent's route.

    Parameters
    ----------
    ordering : OrderConfig
        The parent's ``pages`` list and ``index`` entry.
    candidates : Sequence[tuple[str, float | None]]
        ``(name, order)`` for each child at this level. Dynamic ``[param]``
        folders and ``@area`` folders are never eligible.

    Returns
    -------
    str or None
        The first non-wildcard entry of ``pages`` when it names an eligible
        child, else the ``index`` entry when it names one, else the eligible
        child with the lowest ``order`` (unordered children last), ties
        broken alphabetically. ``None`` when nothing is eligible.

    Examples
    --------
    >>> select_index_page(OrderConfig(index="about"), [("home", None), ("about", None)])
    'about'
    >>> select_index_page(OrderConfig(), [("[slug]", 0), ("blog", 5)])
    'blog'
    """
    eligible = {
        name: order
        for name, order in candidates
        if not is_dynamic_folder(name) and not is_layout_area(name)
    }
    if not eligible:
        return None
    for entry in ordering.pages or ():
        if entry == WILDCARD:
            continue
        first = extract_item_name(entry)
        if first in eligible:
            return first
        break
    if ordering.index in eligible:
        return ordering.index
    return min(
        eligible,
        key=lambda name: (eligible[name] is None, eligible[name] or 0, name),
    )


def _inject_mounts(
    folders: cabc.Sequence[tuple[str, Path]], mounts: typ.Mapping[str, Mount]
) -> list[tuple[str, Path]]:
    """Replace or add top-level folders with mounted directories."""
    merged = [(name, path) for name, path in folders if name not in mounts]
    merged.extend((segment, mount.path) for segment, mount in mounts.items())
    return merged


class ContentCollector:
    """Build the content tree for one site.

    Parameters
    ----------
    context : BuildContext
        Loaded site configuration, validated mounts, the Markdown converter,
        and tool capabilities for this build.
    """

    def __init__(self, context: BuildContext) -> None:
        self.context = context

    async def collect(self) -> SiteContent:
        """Walk the pages directory and return the finalized site content."""
        site = self.context.site
        root_config = await asyncio.to_thread(load_directory_config, site.pages_dir)
        ordering = site.ordering
        if ordering.pages is None and ordering.index is None:
            ordering = root_config.ordering
        root_config = dc.replace(
            root_config,
            ordering=ordering,
            versions=root_config.versions or site.versions,
        )
        scope = _Scope(
            parent_route=ROOT_ROUTE,
            mode=ContentMode.SECTIONS,
            parent_fetch=site.fetch,
            layout_name=site.layout_name,
        )
        result = await self._process_directory(
            site.pages_dir,
            root_config,
            scope,
            title=ROOT_TITLE,
            route=ROOT_ROUTE,
            source_path=ROOT_ROUTE,
            child_route=ROOT_ROUTE,
            optional_page=True,
        )

        pages = finalize_pages(result.pages)
        assets = build_asset_manifest(result.assets, self.context.capabilities)
        icons = build_icon_manifest(result.icons)
        logger.info(
            "Collected %d pages, %d assets, %d icons from %s",
            len(pages),
            len(assets),
            icons["count"],
            site.pages_dir,
        )
        return SiteContent(
            config={**site.raw, "fetch": site.fetch},
            pages=tuple(pages),
            areas=result.areas,
            not_found=result.not_found,
            assets=assets,
            icons=icons,
            versions=result.versions,
        )

    async def _process_directory(
        self,
        path: Path,
        config: DirectoryConfig,
        scope: _Scope,
        *,
        title: str,
        route: str,
        source_path: str,
        child_route: str,
        is_index: bool = False,
        hidden: bool = False,
        recurse: bool = True,
        optional_page: bool = False,
        name: str | None = None,
    ) -> CollectResult:
        """Build the page for ``path`` and, when ``recurse`` is set, its children.

        ``optional_page`` drops the page itself when it has no sections and
        no ``page.yml`` asked for it; the pages root uses it so a root
        without content does not shadow the promoted index page.
        ``name`` is the folder name as it appears in the route, which differs
        from ``path.name`` for mounted directories.
        """
        logger.debug("Collecting %s at %s", path, route)
        listing = await asyncio.to_thread(_list_directory, path)
        mode = config.mode or scope.mode
        loaded: list[_LoadedSection] = []
        if mode is ContentMode.SECTIONS:
            loaded = await self._load_sections(path, config, listing.files)

        name = name or path.name
        is_dynamic = is_dynamic_folder(name)
        layout = config.layout or LayoutOptions()
        page = Page(
            route=route,
            source_path=source_path,
            title=config.title or title,
            id=config.id,
            description=config.description or "",
            label=config.label,
            order=config.order,
            sections=build_section_hierarchy([item.section for item in loaded]),
            is_index=is_index,
            is_dynamic=is_dynamic,
            param_name=extract_route_param(name) if is_dynamic else None,
            parent_schema=(
                scope.parent_fetch.schema if is_dynamic and scope.parent_fetch else None
            ),
            version=scope.version,
            version_meta=scope.version_meta,
            version_scope=scope.version_scope,
            layout=dc.replace(layout, name=layout.name or scope.layout_name),
            hidden=config.hidden or hidden,
            hide_in_header=config.hide_in_header,
            hide_in_footer=config.hide_in_footer,
            seo=config.seo or SeoOptions(),
            fetch=config.fetch,
            last_modified=_timestamp(max((item.mtime for item in loaded), default=None)),
        )
        keep_page = not optional_page or page.has_content or config.mode is ContentMode.SECTIONS
        own = CollectResult(
            pages=(page,) if keep_page else (),
            assets=merge_asset_collections(*(item.assets for item in loaded)),
            icons=merge_icon_collections(*(item.icons for item in loaded)),
        )
        if not recurse:
            return own

        child_scope = dc.replace(
            scope,
            parent_route=child_route,
            mode=mode,
            parent_fetch=config.fetch or scope.parent_fetch,
            layout_name=page.layout.name,
            top_level=source_path == ROOT_ROUTE,
        )
        has_content = mode is ContentMode.SECTIONS and bool(listing.files)
        children = await self._collect_children(
            listing, config, child_scope, has_content=has_content
        )
        return merge_results(own, children)

    async def _collect_children(
        self,
        listing: _Listing,
        config: DirectoryConfig,
        scope: _Scope,
        *,
        has_content: bool,
    ) -> CollectResult:
        folders: list[tuple[str, Path]] = list(listing.folders)
        if scope.top_level and self.context.mounts:
            folders = _inject_mounts(folders, self.context.mounts)

        version_ids: list[str] = []
        if scope.version_meta is None:
            version_ids = detect_versions(name for name, _ in folders)
        meta = build_version_meta(version_ids, config.versions)
        version_folders = [item for item in folders if item[0] in version_ids]
        regular = [item for item in folders if item[0] not in version_ids]

        configs = await asyncio.gather(
            *(
                asyncio.to_thread(load_directory_config, path)
                for _, path in (*regular, *version_folders)
            )
        )
        version_configs = configs[len(regular) :]
        children = [
            _Child(
                name=name,
                sort_name=name,
                path=path,
                kind=_ChildKind.FOLDER,
                order=child_config.order,
                config=child_config,
            )
            for (name, path), child_config in zip(regular, configs[: len(regular)], strict=True)
        ]
        if scope.mode is ContentMode.PAGES:
            children.extend(await self._load_file_children(listing.files))

        ordered, unlisted = _order_children(children, config.ordering)
        index_name = None
        if not has_content and meta is None:
            candidates = [
                (child.name, child.order)
                for child in ordered
                if not (scope.top_level and child.name == NOT_FOUND_PAGE)
            ]
            index_name = select_index_page(config.ordering, candidates)

        tasks: list[cabc.Awaitable[CollectResult]] = [
            self._process_child(
                child,
                scope,
                is_index=child.name == index_name,
                hidden=child.name in unlisted,
            )
            for child in ordered
        ]
        if meta is not None:
            tasks.extend(
                self._process_version(name, path, version_config, scope, meta)
                for (name, path), version_config in zip(
                    version_folders, version_configs, strict=True
                )
            )
        results = await asyncio.gather(*tasks)
        if meta is not None:
            results.append(CollectResult(versions={scope.parent_route: meta}))
        return merge_results(*results)

    async def _process_child(
        self, child: _Child, scope: _Scope, *, is_index: bool, hidden: bool
    ) -> CollectResult:
        if child.kind is _ChildKind.FILE:
            return self._file_page(child, scope, is_index=is_index, hidden=hidden)

        source_path = join_route(scope.parent_route, folder_segment(child.name))
        special = scope.top_level and (
            is_layout_area(child.name) or child.name == NOT_FOUND_PAGE
        )
        result = await self._process_directory(
            child.path,
            child.config,
            scope,
            title=child.name,
            route=scope.parent_route if is_index else source_path,
            source_path=source_path,
            child_route=source_path,
            is_index=is_index,
            hidden=hidden,
            recurse=not is_layout_area(child.name) and not special,
            name=child.name,
        )
        if not special:
            return result
        page = result.pages[0]
        if child.name == NOT_FOUND_PAGE:
            return dc.replace(result, pages=(), not_found=page)
        area = child.name.removeprefix("@")
        return dc.replace(result, pages=(), areas={area: page})

    async def _process_version(
        self,
        version_id: str,
        path: Path,
        config: DirectoryConfig,
        scope: _Scope,
        meta: VersionMeta,
    ) -> CollectResult:
        route = version_route(scope.parent_route, version_id, meta)
        info = meta.get(version_id)
        versioned = dc.replace(
            scope,
            version=version_id,
            version_meta=meta,
            version_scope=scope.parent_route,
        )
        return await self._process_directory(
            path,
            config,
            versioned,
            title=info.label if info else version_id,
            route=route,
            source_path=join_route(scope.parent_route, version_id),
            child_route=route,
            name=version_id,
        )

    def _file_page(
        self, child: _Child, scope: _Scope, *, is_index: bool, hidden: bool
    ) -> CollectResult:
        """Build a single-section page from a content file in pages mode."""
        loaded = child.loaded
        if loaded is None:
            return CollectResult()
        params = loaded.section.params
        source_path = join_route(scope.parent_route, child.name)
        page = Page(
            route=scope.parent_route if is_index else source_path,
            source_path=source_path,
            title=str(params.get("title") or child.name),
            id=loaded.section.stable_id,
            description=str(params.get("description") or ""),
            label=params.get("label"),
            order=child.order,
            sections=(loaded.section,),
            is_index=is_index,
            version=scope.version,
            version_meta=scope.version_meta,
            version_scope=scope.version_scope,
            layout=LayoutOptions(name=scope.layout_name),
            hidden=bool(params.get("hidden")) or hidden,
            fetch=loaded.section.fetch,
            last_modified=_timestamp(loaded.mtime),
        )
        return CollectResult(pages=(page,), assets=loaded.assets, icons=loaded.icons)

    async def _load_file_children(self, files: cabc.Sequence[Path]) -> list[_Child]:
        loaded = await asyncio.gather(
            *(
                asyncio.to_thread(self._load_section, path, FILE_PAGE_SECTION_ID)
                for path in files
            )
        )
        return [
            _Child(
                name=_section_name(item.path),
                sort_name=item.path.stem,
                path=item.path,
                kind=_ChildKind.FILE,
                order=_optional_float(item.section.params.get("order")),
                loaded=item,
            )
            for item in loaded
        ]

    async def _load_sections(
        self, directory: Path, config: DirectoryConfig, files: cabc.Sequence[Path]
    ) -> list[_LoadedSection]:
        planned = plan_sections(config, files, directory=directory)
        return list(
            await asyncio.gather(
                *(
                    asyncio.to_thread(self._load_section, path, section_id)
                    for path, section_id in planned
                )
            )
        )

    def _load_section(self, path: Path, section_id: str) -> _LoadedSection:
        """Read one content file into a Section plus its asset and icon usage."""
        text = read_source_text(path)
        metadata, body = split_frontmatter(text, source=str(path))
        frontmatter = SectionFrontmatter.from_metadata(metadata)
        document, insets = extract_insets(self.context.converter(body))
        section = Section(
            id=section_id,
            stable_id=frontmatter.id or _section_name(path),
            type=frontmatter.type,
            preset=frontmatter.preset,
            input=frontmatter.input,
            params=frontmatter.params,
            content=document,
            fetch=frontmatter.fetch,
            data=frontmatter.data,
            insets=tuple(insets),
        )
        return _LoadedSection(
            path=path,
            section=section,
            assets=collect_section_assets(document, frontmatter.params, path, self.context),
            icons=collect_section_icons(document, str(path)),
            mtime=path.stat().st_mtime,
        )


def _order_children(
    children: cabc.Sequence[_Child], ordering: OrderConfig
) -> tuple[list[_Child], set[str]]:
    """Order children and report the names a strict list leaves out.

    Children are first sorted by explicit ``order`` (unordered last) and
    numeric filename prefix, then rearranged by the ``pages`` list.
    """
    ranked = sorted(
        children,
        key=lambda child: (
            child.order is None,
            child.order or 0,
            numeric_sort_key(child.sort_name),
        ),
    )
    spec = parse_order_spec(ordering.pages)
    ordered = apply_order(ranked, spec, key=lambda child: child.name)
    unlisted: set[str] = set()
    if spec is not None and spec.mode is OrderMode.STRICT:
        listed = set(spec.pinned_names())
        unlisted = {child.name for child in ordered if child.name not in listed}
    return ordered, unlisted


async def collect_site_content_async(
    site_root: Path | str,
    *,
    pages_dir: Path | str | None = None,
    converter: MarkdownConverter | None = None,
    capabilities: Capabilities | None = None,
) -> SiteContent:
    """Collect the content tree for the site at ``site_root``.

    Parameters
    ----------
    site_root : Path or str
        Directory holding ``site.yml`` and the pages directory.
    pages_dir : Path or str, optional
        Override for the pages directory.
    converter : MarkdownConverter, optional
        Markdown to rich-document converter; defaults to
        :class:`~content_tree.document.ProseDocumentConverter`.
    capabilities : Capabilities, optional
        Tool availability; probed once for this build when omitted.

    Returns
    -------
    SiteContent
        The finalized tree plus asset, icon, and version side tables.

    Raises
    ------
    ConfigError
        If a mount declaration is invalid. Raised before any page is read.
    """
    root = Path(site_root)
    site = await asyncio.to_thread(load_site_config, root, pages_dir=pages_dir)
    mounts = resolve_mounts(site.mounts, site_root=root, pages_dir=site.pages_dir)
    context = BuildContext(
        site=site,
        converter=converter or ProseDocumentConverter(),
        mounts=mounts,
        capabilities=capabilities or Capabilities.probe(),
    )
    return await ContentCollector(context).collect()


def collect_site_content(
    site_root: Path | str,
    *,
    pages_dir: Path | str | None = None,
    converter: MarkdownConverter | None = None,
    capabilities: Capabilities | None = None,
) -> SiteContent:
    """Run :func:`collect_site_content_async` on a fresh event loop."""
    return asyncio.run(
        collect_site_content_async(
            site_root,
            pages_dir=pages_dir,
            converter=converter,
            capabilities=capabilities,
        )
    )


__all__ = [
    "CollectResult",
    "ContentCollector",
    "collect_site_content",
    "collect_site_content_async",
    "merge_results",
    "plan_sections",
    "select_index_page",
]
