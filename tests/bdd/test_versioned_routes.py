"""Behaviour tests for versioned documentation scopes.

The scenarios build ``pages/docs/v1`` and ``pages/docs/v2`` trees, each with
an overview section plus ``intro`` and ``guide`` child pages, and check how
routes and version metadata come out of the collector.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, scenarios, then, when
from ruamel.yaml import YAML

from content_tree.collector import collect_site_content
from content_tree.context import Capabilities

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "versioned_routes.feature"
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
        Mutable dictionary holding the site root and the ``versions``
        mapping written to ``docs/page.yml``.
    """
    site_root = tmp_path / "site"
    home = site_root / "pages" / "home"
    home.mkdir(parents=True)
    (home / "1-body.md").write_text("# Home\n", encoding="utf-8")
    (site_root / "site.yml").write_text("index: home\n", encoding="utf-8")
    return {"site_root": site_root, "versions": {}}


@given(parsers.parse('a docs directory with versions "{first}" and "{second}"'))
def given_versions(scenario_state: ScenarioState, first: str, second: str) -> None:
    """Create version folders with an overview section and two child pages."""
    docs: Path = scenario_state["site_root"] / "pages" / "docs"
    for version in (first, second):
        (docs / version).mkdir(parents=True)
        (docs / version / "1-overview.md").write_text(
            f"# Overview {version}\n", encoding="utf-8"
        )
        for child in ("intro", "guide"):
            (docs / version / child).mkdir()
            (docs / version / child / "1-body.md").write_text(
                f"# {child} {version}\n", encoding="utf-8"
            )


@given(
    parsers.parse('the docs config labels "{version}" as "{label}" and marks it deprecated')
)
def given_label(scenario_state: ScenarioState, version: str, label: str) -> None:
    """Record a label and the deprecated flag for ``version``."""
    entry = scenario_state["versions"].setdefault(version, {})
    entry.update(label=label, deprecated=True)


@given(parsers.parse('the docs config marks "{version}" as latest'))
def given_latest(scenario_state: ScenarioState, version: str) -> None:
    """Mark ``version`` as the explicit latest version."""
    scenario_state["versions"].setdefault(version, {})["latest"] = True


@when("the content tree is collected")
def when_collected(scenario_state: ScenarioState) -> None:
    """Write ``docs/page.yml`` and collect the site."""
    site_root: Path = scenario_state["site_root"]
    yaml = YAML(typ="safe")
    yaml.default_flow_style = False
    with (site_root / "pages" / "docs" / "page.yml").open("w", encoding="utf-8") as handle:
        yaml.dump({"versions": scenario_state["versions"]}, handle)
    scenario_state["content"] = collect_site_content(site_root, capabilities=Capabilities())


@then(parsers.parse('the latest version of "{scope}" is "{version}"'))
def then_latest(scenario_state: ScenarioState, scope: str, version: str) -> None:
    """Assert the scope's latest version id."""
    meta = scenario_state["content"].versions[scope]
    assert meta.latest_id == version
    assert [info.id for info in meta.versions if info.latest] == [version]


@then(parsers.parse('the page at "{route}" belongs to version "{version}"'))
def then_page_version(scenario_state: ScenarioState, route: str, version: str) -> None:
    """Assert the version a page was collected under."""
    page = scenario_state["content"].get_page(route)
    assert page.version == version, f"{route} has version {page.version}"
    assert page.version_meta is not None


@then(parsers.parse('version "{version}" of "{scope}" is labelled "{label}" and deprecated'))
def then_label(scenario_state: ScenarioState, version: str, scope: str, label: str) -> None:
    """Assert the configured label and deprecation flag."""
    info = scenario_state["content"].versions[scope].get(version)
    assert info is not None
    assert (info.label, info.deprecated) == (label, True)


@then(parsers.parse('the page at "{route}" is scoped to "{scope}"'))
def then_scope(scenario_state: ScenarioState, route: str, scope: str) -> None:
    """Assert the route of the versioned scope a page belongs to."""
    assert scenario_state["content"].get_page(route).version_scope == scope


@then(parsers.parse('the page at "{route}" has parent "{parent}"'))
def then_parent(scenario_state: ScenarioState, route: str, parent: str) -> None:
    """Assert the finalized parent route."""
    assert scenario_state["content"].get_page(route).parent == parent
