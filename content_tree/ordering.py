"""Interpret ordering declarations and numeric filename prefixes.

Two mechanisms decide the order of pages and sections:

* Ordering lists declared in configuration (``pages:`` or ``sections:``).
  A list without the ``...`` wildcard is *strict*: listed items come first
  and unlisted items are hidden from navigation. A list with the wildcard is
  *inclusive*: items before the first marker are pinned to the start, items
  after the last marker to the end, and everything else keeps its discovery
  order in between.
* Numeric filename prefixes (``1-hero.md``, ``1.5-quote.md``,
  ``1,2-detail.md``), compared component by component.

Names that do not match any discovered item are dropped without complaint so
configuration can mention content that does not exist yet.

Examples
--------
>>> from content_tree.ordering import apply_order, parse_order_spec
>>> spec = parse_order_spec(["c", "...", "a"])
>>> apply_order(["a", "b", "c", "d"], spec, key=str)
['c', 'b', 'd', 'a']
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import functools
import re
import typing as typ

from ._constants import WILDCARD

T = typ.TypeVar("T")

NUMERIC_PREFIX_PATTERN = re.compile(r"^(\d+(?:[.,]\d+)*)-?(.*)$")
_PREFIX_SEPARATORS = re.compile(r"[.,]")


class OrderMode(enum.StrEnum):
    """How an ordering declaration constrains the discovered items."""

    STRICT = "strict"
    INCLUSIVE = "inclusive"
    ALL = "all"


@dc.dataclass(frozen=True, slots=True)
class OrderSpec:
    """Parsed ordering declaration.

    Attributes
    ----------
    mode : OrderMode
        ``STRICT`` without a wildcard, ``INCLUSIVE`` with one, ``ALL`` when the
        declaration is only wildcards.
    before : tuple
        Items pinned ahead of the rest, as declared (strings or single-key
        mappings).
    after : tuple
        Items pinned after the rest.
    """

    mode: OrderMode
    before: tuple[typ.Any, ...] = ()
    after: tuple[typ.Any, ...] = ()

    def pinned_names(self) -> list[str]:
        """Return the names of all pinned items, ``before`` first."""
        names = (extract_item_name(item) for item in (*self.before, *self.after))
        return [name for name in names if name is not None]


def extract_item_name(item: object) -> str | None:
    """Return the name an ordering entry refers to.

    Strings name themselves; a single-key mapping (``{features: [a, b]}``)
    names its key. Anything else has no name.
    """
    match item:
        case str():
            return item
        case dict() if len(item) == 1:
            return str(next(iter(item)))
        case _:
            return None


def parse_order_spec(items: object) -> OrderSpec | None:
    """Parse an ordering declaration.

    Parameters
    ----------
    items : object
        The declared list. Anything that is not a non-empty list yields
        ``None``.

    Returns
    -------
    OrderSpec or None
        The parsed declaration. With several wildcard markers, entries
        between the first and last marker are not pinned; they fall into the
        unlisted rest.
    """
    if not isinstance(items, list) or not items:
        return None
    markers = [index for index, item in enumerate(items) if item == WILDCARD]
    if not markers:
        return OrderSpec(OrderMode.STRICT, before=tuple(items))
    if len(markers) == len(items):
        return OrderSpec(OrderMode.ALL)
    return OrderSpec(
        OrderMode.INCLUSIVE,
        before=tuple(items[: markers[0]]),
        after=tuple(items[markers[-1] + 1 :]),
    )


def apply_order(
    items: cabc.Sequence[T],
    spec: OrderSpec | None,
    *,
    key: cabc.Callable[[T], str],
) -> list[T]:
    """Order ``items`` according to ``spec``.

    Parameters
    ----------
    items : Sequence
        Discovered items in discovery order.
    spec : OrderSpec or None
        Parsed declaration; ``None`` and ``ALL`` leave the order untouched.
    key : Callable
        Returns the name each item is matched against.

    Returns
    -------
    list
        A permutation of ``items``: pinned-before, then the rest in discovery
        order, then pinned-after. Pinned names with no matching item are
        skipped.
    """
    if spec is None or spec.mode is OrderMode.ALL:
        return list(items)

    positions: dict[str, int] = {}
    for position, item in enumerate(items):
        positions.setdefault(key(item), position)

    pinned: list[int] = []

    def _pick(entries: tuple[typ.Any, ...]) -> list[int]:
        picked: list[int] = []
        for entry in entries:
            position = positions.get(extract_item_name(entry) or "")
            if position is None or position in pinned:
                continue
            pinned.append(position)
            picked.append(position)
        return picked

    head = _pick(spec.before)
    tail = _pick(spec.after)
    rest = [position for position in range(len(items)) if position not in pinned]
    return [items[position] for position in (*head, *rest, *tail)]


def parse_numeric_prefix(stem: str) -> tuple[str | None, str]:
    """Split ``1.5-quote`` into ``("1.5", "quote")``.

    A stem that is only a prefix (``"2"``) uses the prefix as its name; a stem
    without a prefix returns ``(None, stem)``.
    """
    match = NUMERIC_PREFIX_PATTERN.match(stem)
    if not match:
        return None, stem
    prefix, name = match.group(1), match.group(2)
    return prefix, name or prefix


def prefix_components(prefix: str) -> tuple[int, ...]:
    """Return the integer components of a numeric prefix."""
    return tuple(int(part) for part in _PREFIX_SEPARATORS.split(prefix))


def compare_filenames(left: str, right: str) -> int:
    """Compare two file or folder stems by numeric prefix.

    Components separated by ``.`` or ``,`` are compared positionally and a
    missing component counts as zero. Prefixed names sort before unprefixed
    ones; ties fall back to the plain name.
    """
    prefix_left, _ = parse_numeric_prefix(left)
    prefix_right, _ = parse_numeric_prefix(right)
    if prefix_left is None and prefix_right is None:
        return _cmp(left, right)
    if prefix_left is None:
        return 1
    if prefix_right is None:
        return -1

    parts_left = prefix_components(prefix_left)
    parts_right = prefix_components(prefix_right)
    width = max(len(parts_left), len(parts_right))
    for index in range(width):
        a = parts_left[index] if index < len(parts_left) else 0
        b = parts_right[index] if index < len(parts_right) else 0
        if a != b:
            return _cmp(a, b)
    return _cmp(left, right)


def _cmp(left: typ.Any, right: typ.Any) -> int:
    return (left > right) - (left < right)


numeric_sort_key = functools.cmp_to_key(compare_filenames)


__all__ = [
    "NUMERIC_PREFIX_PATTERN",
    "OrderMode",
    "OrderSpec",
    "apply_order",
    "compare_filenames",
    "extract_item_name",
    "numeric_sort_key",
    "parse_numeric_prefix",
    "parse_order_spec",
    "prefix_components",
]
