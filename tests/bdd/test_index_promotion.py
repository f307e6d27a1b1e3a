"""Behaviour tests for promoting a child page to its parent's route.

Each scenario lays out a small pages directory, collects it, and checks which
folder ends up serving the root route.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from content_tree.collector import collect_site_content
from content_tree.context import Capabilities

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "index_promotion.feature"
scenarios(FEATURE_FILE)

ScenarioState = dict[str, typ.Any]


@pytest.fixture
def scenario_state(tmp_path: Path) -> ScenarioState:
    """Share the site layout and collected content between steps.

    Parameters
    ----------
    tmp_path : Path
        Temporary directory that holds the generated site.

    Returns
    -------
    ScenarioState
        Mutable dictionary with the site root and accumulated ``site.yml``
        lines.
    """
    site_root = tmp_path / "site"
    (site_root / "pages").mkdir(parents=True)
    return {"site_root": site_root, "site_yml": []}


@given(parsers.parse('a site whose config declares "{line}"'))
def given_site_config_line(scenario_state: ScenarioState, line: str) -> None:
    """Append ``line`` to the site's ``site.yml``.

    Parameters
    ----------
    scenario_state : ScenarioState
        Shared scenario storage.
    line : str
        A single YAML line such as ``index: about``.
    """
    scenario_state["site_yml"].append(line)


@given(parsers.parse('top-level pages "{first}" and "{second}"'))
def given_top_level_pages(scenario_state: ScenarioState, first: str, second: str) -> None:
    """Create two top-level page folders with one section each."""
    pages_dir: Path = scenario_state["site_root"] / "pages"
    for name in (first, second):
        folder = pages_dir / name
        folder.mkdir()
        (folder / "1-body.md").write_text(f"# {name}\n", encoding="utf-8")


@given(parsers.parse('a root section file "{filename}"'))
def given_root_section(scenario_state: ScenarioState, filename: str) -> None:
    """Give the pages root a section of its own."""
    pages_dir: Path = scenario_state["site_root"] / "pages"
    (pages_dir / filename).write_text("# Home\n", encoding="utf-8")


@when("the content tree is collected")
def when_collected(scenario_state: ScenarioState) -> None:
    """Write ``site.yml`` and collect the site."""
    site_root: Path = scenario_state["site_root"]
    lines: list[str] = scenario_state["site_yml"]
    if lines:
        (site_root / "site.yml").write_text("\n".join(lines) + "\n", encoding="utf-8")
    scenario_state["content"] = collect_site_content(site_root, capabilities=Capabilities())


@then(parsers.parse('the root route is served from "{source_path}"'))
def then_root_served_from(scenario_state: ScenarioState, source_path: str) -> None:
    """Assert which folder provides the root page."""
    root = scenario_state["content"].get_page("/")
    assert root.source_path == source_path, (
        f"expected / to come from {source_path}, got {root.source_path}"
    )
    assert root.is_index is (source_path != "/")


@then(parsers.parse('the page at "{route}" is not an index page'))
def then_not_index(scenario_state: ScenarioState, route: str) -> None:
    """Assert the page keeps its own route."""
    page = scenario_state["content"].get_page(route)
    assert page.is_index is False
    assert page.source_path == route


@then(parsers.parse('the page at "{route}" is dynamic'))
def then_dynamic(scenario_state: ScenarioState, route: str) -> None:
    """Assert the page was built from a ``[param]`` folder."""
    page = scenario_state["content"].get_page(route)
    assert page.is_dynamic is True
    assert page.param_name == route.rsplit(":", 1)[-1]
