"""Deduplicate collected pages and link each one to its structural parent."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging

from .models import Page
from .routes import get_direct_child_name, parent_route_of

logger = logging.getLogger(__name__)


def _dedupe(pages: cabc.Sequence[Page]) -> list[Page]:
    """Keep one page per route.

    The first page with content wins; when none of the pages at a route has
    content, the first one seen is kept. The survivor takes the position of
    the first page seen at that route.
    """
    slots: dict[str, int] = {}
    kept: list[Page] = []
    for page in pages:
        slot = slots.get(page.route)
        if slot is None:
            slots[page.route] = len(kept)
            kept.append(page)
            continue
        current = kept[slot]
        if not page.has_content:
            continue
        if current.has_content:
            logger.warning(
                "Duplicate route %s: keeping %s, dropping %s",
                page.route,
                current.source_path,
                page.source_path,
            )
            continue
        kept[slot] = page
    return kept


def finalize_pages(pages: cabc.Sequence[Page]) -> list[Page]:
    """Return deduplicated pages with ``parent`` assigned.

    Parameters
    ----------
    pages : Sequence[Page]
        Pages in walk order; routes may repeat when an index page was
        promoted onto its parent's route.

    Returns
    -------
    list[Page]
        New page objects with unique routes. The parent of ``/a/b`` is the
        page whose ``route`` (or failing that, ``source_path``) is ``/a``.
        Top-level pages and pages whose parent route matches nothing keep
        ``parent=None``.
    """
    unique = _dedupe(pages)
    by_route = {page.route: page for page in unique}
    by_source: dict[str, Page] = {}
    for page in unique:
        by_source.setdefault(page.source_path, page)

    finalized: list[Page] = []
    for page in unique:
        parent_path = parent_route_of(page.route)
        parent: Page | None = None
        if parent_path is not None:
            parent = by_route.get(parent_path) or by_source.get(parent_path)
        finalized.append(dc.replace(page, parent=parent.route if parent else None))
    return finalized


def children_of(pages: cabc.Iterable[Page], parent_route: str) -> list[Page]:
    """Return pages whose route is a direct child of ``parent_route``."""
    return [
        page
        for page in pages
        if get_direct_child_name(page.route, parent_route) is not None
    ]


__all__ = ["children_of", "finalize_pages", "get_direct_child_name"]
