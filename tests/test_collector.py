"""End-to-end tests for walking a pages directory into a content tree.

Each test lays out a small site with the ``write_tree`` fixture, runs the
collector with optional tools disabled, and inspects the finalized pages.
"""

from __future__ import annotations

import asyncio
import logging
import os
import typing as typ
from pathlib import Path

import pytest

from content_tree.collector import (
    collect_site_content,
    collect_site_content_async,
    plan_sections,
    select_index_page,
)
from content_tree.config import ConfigError, ContentMode, DirectoryConfig, OrderConfig
from content_tree.context import Capabilities
from content_tree.models import Section, SiteContent

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    WriteTree = cabc.Callable[[typ.Mapping[str, str]], Path]


def _collect(site_root: Path) -> SiteContent:
    return collect_site_content(site_root, capabilities=Capabilities())


def _routes(site: SiteContent) -> list[str]:
    return [page.route for page in site.pages]


def _flatten(sections: cabc.Iterable[Section]) -> list[str]:
    ids: list[str] = []
    for section in sections:
        ids.append(section.id)
        ids.extend(_flatten(section.subsections))
    return ids


def test_root_sections_become_the_home_page(write_tree: WriteTree) -> None:
    site_root = write_tree(
        {
            "pages/1-hero.md": """
                ---
                type: Hero
                title: Welcome
                ---
                # Welcome
            """,
            "pages/2-features.md": "Plain text.\n",
        }
    )

    site = _collect(site_root)

    assert _routes(site) == ["/"]
    home = site.get_page("/")
    assert home.title == "Home"
    assert [(s.id, s.stable_id, s.type) for s in home.sections] == [
        ("1", "hero", "Hero"),
        ("2", "features", "Section"),
    ]
    assert home.sections[0].params == {"title": "Welcome"}
    assert home.parent is None


def test_missing_pages_directory_yields_no_pages(write_tree: WriteTree) -> None:
    site = _collect(write_tree({"site.yml": "name: Empty\n"}))

    assert site.pages == ()
    assert site.config == {"name": "Empty", "fetch": None}
    assert site.icons["count"] == 0


def test_index_entry_promotes_a_child_to_the_root(write_tree: WriteTree) -> None:
    site_root = write_tree(
        {
            "site.yml": "index: home\n",
            "pages/about/1-story.md": "Story\n",
            "pages/home/1-hero.md": "Hero\n",
            "pages/home/team/1-people.md": "People\n",
        }
    )

    site = _collect(site_root)

    home = site.get_page("/")
    assert (home.source_path, home.is_index) == ("/home", True)
    about = site.get_page("/about")
    assert about.is_index is False
    team = site.get_page("/home/team")
    assert team.parent == "/", "children of a promoted page link to its new route"


def test_alphabetical_fallback_when_nothing_is_declared(write_tree: WriteTree) -> None:
    site_root = write_tree(
        {
            "pages/zeta/1-a.md": "Z\n",
            "pages/alpha/1-a.md": "A\n",
        }
    )

    site = _collect(site_root)

    assert site.get_page("/").source_path == "/alpha"
    assert _routes(site) == ["/", "/zeta"]


def test_root_content_keeps_children_at_their_own_routes(write_tree: WriteTree) -> None:
    site_root = write_tree(
        {
            "pages/1-hero.md": "Hero\n",
            "pages/about/1-story.md": "Story\n",
        }
    )

    site = _collect(site_root)

    assert site.get_page("/").source_path == "/"
    assert site.get_page("/about").is_index is False


def test_dynamic_folders_are_never_promoted(write_tree: WriteTree) -> None:
    site_root = write_tree(
        {
            "site.yml": "index: home\n",
            "pages/home/1-hero.md": "Hero\n",
            "pages/blog/page.yml": "fetch: /data/posts.json\n",
            "pages/blog/[slug]/1-body.md": "Body\n",
            "pages/blog/archive/1-list.md": "List\n",
        }
    )

    site = _collect(site_root)

    blog = site.get_page("/blog")
    assert blog.source_path == "/blog/archive"
    post = site.get_page("/blog/:slug")
    assert post.is_dynamic is True
    assert post.param_name == "slug"
    assert post.parent_schema == "posts"
    assert post.parent == "/blog"


def test_folder_config_turns_files_into_pages(write_tree: WriteTree) -> None:
    site_root = write_tree(
        {
            "site.yml": "index: home\n",
            "pages/home/1-hero.md": "Hero\n",
            "pages/blog/folder.yml": "title: Blog\nindex: second\n",
            "pages/blog/1-first.md": """
                ---
                title: First Post
                description: Hello
                ---
                First body
            """,
            "pages/blog/2-second.md": "---\ntitle: Second Post\nhidden: true\n---\nSecond\n",
        }
    )

    site = _collect(site_root)

    blog = site.get_page("/blog")
    assert blog.source_path == "/blog/second"
    assert blog.title == "Second Post"
    assert blog.hidden is True
    first = site.get_page("/blog/first")
    assert (first.title, first.description) == ("First Post", "Hello")
    assert [section.id for section in first.sections] == ["1"]
    assert first.id == "first"
    assert first.parent == "/blog"


def test_strict_page_list_orders_and_hides_unlisted(write_tree: WriteTree) -> None:
    site_root = write_tree(
        {
            "site.yml": "pages: [home, about]\n",
            "pages/about/1-a.md": "About\n",
            "pages/legal/1-a.md": "Legal\n",
            "pages/home/1-a.md": "Home\n",
        }
    )

    site = _collect(site_root)

    assert _routes(site) == ["/", "/about", "/legal"]
    assert site.get_page("/").source_path == "/home"
    assert site.get_page("/legal").hidden is True
    assert site.get_page("/about").hidden is False


def test_order_field_ranks_children(write_tree: WriteTree) -> None:
    site_root = write_tree(
        {
            "pages/alpha/page.yml": "order: 3\n",
            "pages/alpha/1-a.md": "A\n",
            "pages/beta/page.yml": "order: 1\n",
            "pages/beta/1-a.md": "B\n",
            "pages/gamma/1-a.md": "C\n",
        }
    )

    site = _collect(site_root)

    assert site.get_page("/").source_path == "/beta"
    assert _routes(site) == ["/", "/alpha", "/gamma"]


def test_explicit_sections_nest_and_skip_missing_files(
    write_tree: WriteTree, caplog: pytest.LogCaptureFixture
) -> None:
    site_root = write_tree(
        {
            "pages/page.yml": """
                sections:
                  - intro
                  - features:
                      - speed
                      - safety
                  - missing
                  - outro
            """,
            "pages/1-intro.md": "Intro\n",
            "pages/features.md": "Features\n",
            "pages/speed.md": "Speed\n",
            "pages/safety.md": "Safety\n",
            "pages/outro.md": "Outro\n",
            "pages/unused.md": "Unused\n",
        }
    )

    with caplog.at_level(logging.WARNING, logger="content_tree.collector"):
        site = _collect(site_root)

    home = site.get_page("/")
    assert [section.id for section in home.sections] == ["1", "2", "4"]
    assert _flatten(home.sections) == ["1", "2", "2,1", "2,2", "4"]
    assert [section.stable_id for section in home.sections[1].subsections] == [
        "speed",
        "safety",
    ]
    assert "Section file not found: missing.md" in caplog.text


def test_wildcard_sections_splice_unlisted_files(write_tree: WriteTree) -> None:
    site_root = write_tree(
        {
            "pages/page.yml": "sections: [hero, '...', footer]\n",
            "pages/a.md": "A\n",
            "pages/b.md": "B\n",
            "pages/footer.md": "Footer\n",
            "pages/hero.md": "Hero\n",
        }
    )

    site = _collect(site_root)

    sections = site.get_page("/").sections
    assert [(s.id, s.stable_id) for s in sections] == [
        ("1", "hero"),
        ("2", "a"),
        ("3", "b"),
        ("4", "footer"),
    ]


def test_empty_sections_list_keeps_an_empty_page(write_tree: WriteTree) -> None:
    site_root = write_tree(
        {
            "pages/page.yml": "title: Landing\nsections: []\n",
            "pages/1-a.md": "A\n",
        }
    )

    site = _collect(site_root)

    home = site.get_page("/")
    assert home.title == "Landing"
    assert home.sections == ()


def test_mounts_graft_directories_onto_the_top_level(
    write_tree: WriteTree, tmp_path: Path
) -> None:
    site_root = write_tree(
        {
            "site.yml": "index: home\nmounts:\n  docs: ../shared-docs\n",
            "pages/home/1-a.md": "Home\n",
        }
    )
    shared = tmp_path / "shared-docs"
    (shared / "setup").mkdir(parents=True)
    (shared / "1-intro.md").write_text("Intro\n", encoding="utf-8")
    (shared / "setup" / "1-steps.md").write_text("Steps\n", encoding="utf-8")

    site = _collect(site_root)

    docs = site.get_page("/docs")
    assert [section.stable_id for section in docs.sections] == ["intro"]
    assert site.get_page("/docs/setup").parent == "/docs"


def test_invalid_mount_stops_the_build(write_tree: WriteTree) -> None:
    site_root = write_tree(
        {
            "site.yml": "mounts:\n  docs: ../missing\n",
            "pages/1-a.md": "A\n",
        }
    )

    with pytest.raises(ConfigError, match="docs"):
        _collect(site_root)


def test_mounted_directory_takes_its_name_from_the_mount(
    write_tree: WriteTree, tmp_path: Path
) -> None:
    site_root = write_tree(
        {
            "site.yml": "index: home\nmounts:\n  blog: '../[id]'\n",
            "pages/home/1-a.md": "Home\n",
        }
    )
    target = tmp_path / "[id]"
    target.mkdir()
    (target / "1-post.md").write_text("Post\n", encoding="utf-8")

    site = _collect(site_root)

    blog = site.get_page("/blog")
    assert blog.is_dynamic is False, (
        "the mount segment decides whether a route is dynamic"
    )
    assert blog.param_name is None
    assert blog.title == "blog"


def test_versioned_scope_serves_latest_version_beside_regular_folders(
    write_tree: WriteTree,
) -> None:
    site_root = write_tree(
        {
            "site.yml": "index: home\n",
            "pages/home/1-a.md": "Home\n",
            "pages/docs/v1/1-guide.md": "Old guide\n",
            "pages/docs/v2/1-guide.md": "New guide\n",
            "pages/docs/guides/1-intro.md": "Guides\n",
        }
    )

    site = _collect(site_root)

    docs = site.get_page("/docs")
    assert (docs.version, docs.source_path) == ("v2", "/docs/v2"), (
        "the latest version must own the scope route"
    )
    guides = site.get_page("/docs/guides")
    assert guides.is_index is False
    assert guides.version is None
    assert site.get_page("/docs/v1").version == "v1"
    assert sorted(page.version for page in site.pages if page.version) == ["v1", "v2"]


def test_underscore_files_are_drafts_in_sections_mode(write_tree: WriteTree) -> None:
    site_root = write_tree(
        {
            "pages/1-hero.md": "Hero\n",
            "pages/_draft.md": "Not yet\n",
        }
    )

    site = _collect(site_root)

    assert [s.stable_id for s in site.get_page("/").sections] == ["hero"]


def test_underscore_files_are_drafts_in_pages_mode(write_tree: WriteTree) -> None:
    site_root = write_tree(
        {
            "site.yml": "index: home\n",
            "pages/home/1-a.md": "Home\n",
            "pages/blog/folder.yml": "title: Blog\n",
            "pages/blog/1-first.md": "First\n",
            "pages/blog/_partial.md": "Partial\n",
        }
    )

    site = _collect(site_root)

    assert not [route for route in _routes(site) if "partial" in route]
    assert all("partial" not in page.source_path for page in site.pages), (
        "underscore-prefixed files must not be published"
    )


def test_misencoded_section_is_read_with_replacement_characters(
    write_tree: WriteTree, caplog: pytest.LogCaptureFixture
) -> None:
    site_root = write_tree({"pages/1-good.md": "Good\n"})
    (site_root / "pages" / "2-bad.md").write_bytes(b"# caf\xe9\n")

    with caplog.at_level(logging.WARNING, logger="content_tree.frontmatter"):
        site = _collect(site_root)

    sections = site.get_page("/").sections
    assert [s.stable_id for s in sections] == ["good", "bad"]
    assert "caf\ufffd" in str(sections[1].content)
    assert "2-bad.md" in caplog.text


def test_duplicate_prefixes_nest_children_once(
    write_tree: WriteTree, caplog: pytest.LogCaptureFixture
) -> None:
    site_root = write_tree(
        {
            "pages/1-a.md": "A\n",
            "pages/1-b.md": "B\n",
            "pages/1,1-child.md": "Child\n",
        }
    )

    with caplog.at_level(logging.WARNING, logger="content_tree.sections"):
        site = _collect(site_root)

    sections = site.get_page("/").sections
    assert _flatten(sections).count("1,1") == 1, "a child must not be duplicated"
    assert [s.stable_id for s in sections if s.subsections] == ["b"]
    assert "Duplicate section id 1" in caplog.text


def test_layout_areas_and_not_found_are_set_aside(write_tree: WriteTree) -> None:
    site_root = write_tree(
        {
            "pages/@header/1-nav.md": "Nav\n",
            "pages/@header/nested/1-x.md": "Ignored\n",
            "pages/404/1-message.md": "Not here\n",
            "pages/home/1-a.md": "Home\n",
        }
    )

    site = _collect(site_root)

    assert _routes(site) == ["/"]
    assert site.get_page("/").source_path == "/home"
    assert list(site.areas) == ["header"]
    assert site.areas["header"].sections[0].stable_id == "nav"
    assert site.not_found is not None
    assert site.not_found.route == "/404"


def test_layout_name_cascades_to_descendants(write_tree: WriteTree) -> None:
    site_root = write_tree(
        {
            "site.yml": "index: home\nlayout:\n  name: marketing\n",
            "pages/home/1-a.md": "Home\n",
            "pages/docs/page.yml": "layout: docs\n",
            "pages/docs/1-overview.md": "Overview\n",
            "pages/docs/guide/1-a.md": "Guide\n",
        }
    )

    site = _collect(site_root)

    assert site.get_page("/").layout.name == "marketing"
    assert site.get_page("/docs").layout.name == "docs"
    assert site.get_page("/docs/guide").layout.name == "docs"


def test_insets_assets_and_icons_are_collected(write_tree: WriteTree) -> None:
    site_root = write_tree(
        {
            "pages/1-hero.md": """
                ---
                type: Hero
                image: ./hero.png
                ---
                # Hi ![](lu:star)

                ![Quarterly sales](@Chart){kind=bar}
            """,
        }
    )

    site = _collect(site_root)

    section = site.get_page("/").sections[0]
    assert [(inset.ref_id, inset.type) for inset in section.insets] == [("inset_0", "Chart")]
    assert section.insets[0].params == {"kind": "bar"}
    assert section.content["content"][-1] == {
        "type": "inset_placeholder",
        "attrs": {"refId": "inset_0"},
    }
    assert site.assets["./hero.png"].resolved == site_root / "pages" / "hero.png"
    assert site.icons["used"] == ["lu:star"]
    assert site.icons["by_source"]["lu:star"] == [str(site_root / "pages" / "1-hero.md")]


def test_last_modified_uses_newest_section(write_tree: WriteTree) -> None:
    site_root = write_tree({"pages/1-a.md": "A\n", "pages/2-b.md": "B\n"})
    os.utime(site_root / "pages" / "1-a.md", (1_600_000_000, 1_600_000_000))
    os.utime(site_root / "pages" / "2-b.md", (1_700_000_000, 1_700_000_000))

    site = _collect(site_root)

    assert site.get_page("/").last_modified == "2023-11-14T22:13:20+00:00"


def test_malformed_page_config_is_tolerated(
    write_tree: WriteTree, caplog: pytest.LogCaptureFixture
) -> None:
    site_root = write_tree(
        {
            "pages/page.yml": "title: [broken\n",
            "pages/1-a.md": "A\n",
        }
    )

    with caplog.at_level(logging.WARNING):
        site = _collect(site_root)

    home = site.get_page("/")
    assert home.title == "Home"
    assert len(home.sections) == 1
    assert "page.yml" in caplog.text


def test_get_page_names_known_routes(write_tree: WriteTree) -> None:
    site = _collect(write_tree({"pages/1-a.md": "A\n"}))

    with pytest.raises(KeyError, match="Known routes: /"):
        site.get_page("/nope")


def test_async_entry_point_matches_sync(write_tree: WriteTree) -> None:
    site_root = write_tree({"pages/1-a.md": "A\n", "pages/about/1-b.md": "B\n"})

    async_site = asyncio.run(
        collect_site_content_async(site_root, capabilities=Capabilities())
    )

    assert async_site == _collect(site_root)


def test_pages_dir_override(write_tree: WriteTree) -> None:
    site_root = write_tree({"content/1-a.md": "A\n"})

    site = collect_site_content(site_root, pages_dir="content", capabilities=Capabilities())

    assert _routes(site) == ["/"]


@pytest.mark.parametrize(
    ("ordering", "candidates", "expected"),
    [
        (OrderConfig(pages=["...", "b", "a"], index="a"), [("a", None), ("b", None)], "b"),
        (OrderConfig(pages=["[slug]", "..."], index="a"), [("[slug]", 0), ("a", 5)], "a"),
        (OrderConfig(pages=[{"docs": ["x"]}]), [("blog", 1), ("docs", 9)], "docs"),
        (OrderConfig(index="missing"), [("b", 2), ("a", None), ("c", 1)], "c"),
        (OrderConfig(), [("b", None), ("a", None)], "a"),
        (OrderConfig(), [("@header", 0), ("[id]", 0)], None),
        (OrderConfig(), [], None),
    ],
)
def test_select_index_page(
    ordering: OrderConfig,
    candidates: list[tuple[str, float | None]],
    expected: str | None,
) -> None:
    assert select_index_page(ordering, candidates) == expected


@pytest.mark.parametrize(
    ("config", "expected"),
    [
        (DirectoryConfig(), [("1-a.md", "1"), ("1.5-b.md", "1.5"), ("c.md", "c")]),
        (
            DirectoryConfig(mode=ContentMode.SECTIONS, sections="*", has_sections_key=True),
            [("1-a.md", "1"), ("1.5-b.md", "1.5"), ("c.md", "c")],
        ),
        (DirectoryConfig(sections=None, has_sections_key=True), []),
        (DirectoryConfig(sections="c", has_sections_key=True), []),
        (
            DirectoryConfig(sections=["c", "a"], has_sections_key=True),
            [("c.md", "1"), ("1-a.md", "2")],
        ),
        (
            DirectoryConfig(sections=["...", "a"], has_sections_key=True),
            [("1.5-b.md", "1"), ("c.md", "2"), ("1-a.md", "3")],
        ),
    ],
)
def test_plan_sections(
    config: DirectoryConfig, expected: list[tuple[str, str]], tmp_path: Path
) -> None:
    files = [tmp_path / "1-a.md", tmp_path / "1.5-b.md", tmp_path / "c.md"]

    planned = plan_sections(config, files, directory=tmp_path)

    assert [(path.name, section_id) for path, section_id in planned] == expected
