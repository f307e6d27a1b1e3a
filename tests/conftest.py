"""Shared fixtures for content tree tests.

``write_tree`` materializes a site layout from a mapping of relative paths to
file contents, which keeps each test's directory structure readable inline.
"""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

from content_tree.context import Capabilities

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


@pytest.fixture
def write_tree(tmp_path: Path) -> cabc.Callable[[typ.Mapping[str, str]], Path]:
    """Return a helper writing ``{relative path: text}`` under ``tmp_path/site``.

    Paths ending in ``/`` create empty directories. Text is dedented so tests
    can indent YAML and Markdown naturally.
    """
    site_root = tmp_path / "site"
    site_root.mkdir()

    def _write(files: typ.Mapping[str, str]) -> Path:
        for relative, text in files.items():
            target = site_root / relative
            if relative.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(dedent(text).lstrip("\n"), encoding="utf-8")
        return site_root

    return _write


@pytest.fixture
def no_tools() -> Capabilities:
    """Capabilities for a build with no optional tools installed."""
    return Capabilities(ffmpeg=False)
