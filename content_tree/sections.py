"""Decode positional section ids and nest sections into a tree.

Section ids keep the on-disk encoding used by numeric filename prefixes:
``.`` orders siblings (``1.5`` sits between ``1`` and ``2``) and ``,`` nests
a child under its parent (``1,2`` is the second child of ``1``). The id is
decoded once into a :class:`SectionId`; tree logic works on the decoded
form only.

Example
-------
>>> from content_tree.models import Section
>>> from content_tree.sections import build_section_hierarchy
>>> flat = [Section(id=i, stable_id=i) for i in ["1", "1,1", "1,2", "2"]]
>>> [s.id for s in build_section_hierarchy(flat)[0].subsections]
['1,1', '1,2']
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import re

from .models import Section

logger = logging.getLogger(__name__)

NESTING_SEPARATOR = ","
ORDER_SEPARATOR = "."
_NUMERIC_ID = re.compile(r"^\d+(?:[.,]\d+)*$")


@dc.dataclass(frozen=True, slots=True)
class SectionId:
    """A positional id decoded into ordering and nesting parts.

    Attributes
    ----------
    raw : str
        The id as written (``"1.5,2"``).
    levels : tuple[tuple[int, ...], ...]
        One entry per nesting level, each holding that level's ordering
        components: ``"1.5,2"`` decodes to ``((1, 5), (2,))``. Empty for
        non-numeric ids such as plain section names.
    """

    raw: str
    levels: tuple[tuple[int, ...], ...] = ()

    @classmethod
    def parse(cls, raw: str) -> SectionId:
        """Decode ``raw``; non-numeric ids are kept whole as top-level ids."""
        if not _NUMERIC_ID.match(raw):
            return cls(raw=raw)
        levels = tuple(
            tuple(int(part) for part in level.split(ORDER_SEPARATOR))
            for level in raw.split(NESTING_SEPARATOR)
        )
        return cls(raw=raw, levels=levels)

    @property
    def order_path(self) -> tuple[int, ...]:
        """Return every ordering component across all levels."""
        return tuple(part for level in self.levels for part in level)

    @property
    def parent_path(self) -> tuple[int, ...]:
        """Return the ordering components of every level above this one."""
        return tuple(part for level in self.levels[:-1] for part in level)

    @property
    def parent(self) -> str | None:
        """Return the raw id of the parent section, or None at the top level."""
        if len(self.levels) < 2:
            return None
        return self.raw.rsplit(NESTING_SEPARATOR, 1)[0]


def child_id(parent_id: str | None, index: int) -> str:
    """Return the positional id of the ``index``-th child of ``parent_id``."""
    if not parent_id:
        return str(index)
    return f"{parent_id}{NESTING_SEPARATOR}{index}"


def build_section_hierarchy(sections: cabc.Sequence[Section]) -> tuple[Section, ...]:
    """Nest a flat, id-tagged list of sections.

    Parameters
    ----------
    sections : Sequence[Section]
        Sections in their final order. When two sections share a positional
        id the last one owns any children and a warning is logged.

    Returns
    -------
    tuple[Section, ...]
        Top-level sections, each rebuilt with its children appended (in
        input order) after any subsections it already carried. A section
        whose parent id is absent stays at the top level.
    """
    owners: dict[str, int] = {}
    for position, section in enumerate(sections):
        if section.id in owners:
            logger.warning(
                "Duplicate section id %s; nesting children under the last one",
                section.id,
            )
        owners[section.id] = position

    children: dict[int, list[int]] = {}
    top_level: list[int] = []
    for position, section in enumerate(sections):
        parent = SectionId.parse(section.id).parent
        if parent is not None and parent in owners:
            children.setdefault(owners[parent], []).append(position)
        else:
            top_level.append(position)

    def _attach(position: int) -> Section:
        section = sections[position]
        nested = children.get(position)
        if not nested:
            return section
        subsections = (*section.subsections, *(_attach(child) for child in nested))
        return dc.replace(section, subsections=subsections)

    return tuple(_attach(position) for position in top_level)


__all__ = [
    "NESTING_SEPARATOR",
    "ORDER_SEPARATOR",
    "SectionId",
    "build_section_hierarchy",
    "child_id",
]
