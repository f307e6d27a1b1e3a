"""Utility helpers shared by the configuration loader."""

from __future__ import annotations

import logging
import typing as typ

from content_tree.frontmatter import parse_yaml_mapping, read_source_text
from content_tree.models import LayoutOptions, SeoOptions

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def read_yaml_file(path: Path) -> dict[str, typ.Any]:
    """Return the mapping stored in ``path`` or an empty dict when it is absent."""
    try:
        text = read_source_text(path)
    except FileNotFoundError:
        return {}
    return parse_yaml_mapping(text, source=str(path))


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_number(value: object | None) -> float | None:
    """Return ``value`` as a number, or None when it is missing or not numeric."""
    match value:
        case bool():
            return None
        case int() | float():
            return value
        case str() as text:
            try:
                return float(text)
            except ValueError:
                return None
        case _:
            return None


def _layout_name(value: object | None) -> str | None:
    """Return the layout name from a string or ``{name: ...}`` declaration."""
    match value:
        case str():
            return _optional_str(value)
        case dict():
            return _optional_str(value.get("name"))
        case _:
            return None


def _build_layout_options(
    value: object | None, *, inherited_name: str | None = None
) -> LayoutOptions:
    """Build LayoutOptions from a page's ``layout`` value.

    Area toggles default to shown; only an explicit ``false`` hides an area.
    """
    name = _layout_name(value) or inherited_name
    if not isinstance(value, dict):
        return LayoutOptions(name=name)
    return LayoutOptions(
        name=name,
        header=value.get("header") is not False,
        footer=value.get("footer") is not False,
        left_panel=value.get("left_panel") is not False,
        right_panel=value.get("right_panel") is not False,
    )


def _build_seo_options(value: object | None) -> SeoOptions:
    """Build SeoOptions from a page's ``seo`` mapping."""
    if not isinstance(value, dict):
        return SeoOptions()
    return SeoOptions(
        noindex=bool(value.get("noindex", False)),
        image=_optional_str(value.get("image")),
        changefreq=_optional_str(value.get("changefreq")),
        priority=_optional_number(value.get("priority")),
    )


def _mapping(value: object | None, *, key: str) -> dict[str, typ.Any]:
    """Return ``value`` when it is a mapping, logging and discarding anything else."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        logger.warning("Ignoring '%s': expected a mapping", key)
        return {}
    return dict(value)


__all__ = [
    "_build_layout_options",
    "_build_seo_options",
    "_layout_name",
    "_mapping",
    "_optional_number",
    "_optional_str",
    "read_yaml_file",
]
