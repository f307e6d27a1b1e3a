r"""Split content files into YAML front matter and a Markdown body.

Content files may open with a ``---`` fenced YAML block. Reserved keys in that
block configure the section itself (component type, preset, data binding,
stable id); every other key is passed through to the component as a
parameter.

Malformed YAML never aborts a build: the loader logs a warning and behaves as
if the block were empty.

Example
-------
>>> from content_tree.frontmatter import split_frontmatter
>>> meta, body = split_frontmatter("---\ntype: Hero\n---\n# Welcome\n")
>>> meta["type"], body
('Hero', '# Welcome\n')
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ._constants import DEFAULT_SECTION_TYPE
from .fetch import FetchConfig, parse_fetch_config

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

FENCE = "---"
RESERVED_KEYS = frozenset(
    {"type", "component", "preset", "input", "props", "fetch", "data", "id"}
)


def read_source_text(path: Path) -> str:
    """Read a UTF-8 source file, replacing undecodable bytes with U+FFFD."""
    raw = path.read_bytes()
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        logger.warning(
            "Invalid UTF-8 in %s (%s); replacing undecodable bytes", path, exc.reason
        )
        return raw.decode("utf-8", errors="replace")


def _build_safe_yaml() -> YAML:
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    return loader


def parse_yaml(text: str, *, source: str = "<string>") -> typ.Any:
    """Parse YAML text, returning ``None`` and logging when it is malformed."""
    try:
        return _build_safe_yaml().load(text)
    except YAMLError as exc:
        logger.warning("Could not parse YAML in %s: %s", source, exc)
        return None


def parse_yaml_mapping(text: str, *, source: str = "<string>") -> dict[str, typ.Any]:
    """Parse YAML text that is expected to hold a mapping.

    Parameters
    ----------
    text : str
        YAML document text.
    source : str, optional
        Label used in log messages, typically the file path.

    Returns
    -------
    dict[str, Any]
        The parsed mapping; an empty dict when the text is empty, malformed,
        or holds something other than a mapping.
    """
    loaded = parse_yaml(text, source=source)
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        logger.warning(
            "Expected a YAML mapping in %s, got %s", source, type(loaded).__name__
        )
        return {}
    return dict(loaded)


def split_frontmatter(
    text: str, *, source: str = "<string>"
) -> tuple[dict[str, typ.Any], str]:
    """Return ``(metadata, body)`` for a content file's text.

    A file carries front matter only when its first non-blank line is ``---``
    and a later line closes the block with ``---``. Anything else is treated
    as a plain Markdown body.
    """
    stripped = text.lstrip()
    if not stripped.startswith(FENCE):
        return {}, text
    lines = stripped.splitlines(keepends=True)
    if lines[0].strip() != FENCE:
        return {}, text
    for index in range(1, len(lines)):
        if lines[index].strip() == FENCE:
            header = "".join(lines[1:index])
            body = "".join(lines[index + 1 :])
            return parse_yaml_mapping(header, source=source), body
    return {}, text


@dc.dataclass(frozen=True, slots=True)
class SectionFrontmatter:
    """Reserved front matter fields plus the remaining parameter bag."""

    type: str = DEFAULT_SECTION_TYPE
    preset: str | None = None
    input: typ.Any = None
    fetch: FetchConfig | None = None
    data: typ.Any = None
    id: str | None = None
    params: typ.Mapping[str, typ.Any] = dc.field(default_factory=dict)

    @classmethod
    def from_metadata(cls, metadata: typ.Mapping[str, typ.Any]) -> SectionFrontmatter:
        """Extract reserved keys from ``metadata`` before building the params bag.

        ``component`` is accepted as an alias for ``type``; ``props`` entries
        are merged over the other parameters.
        """
        params = {
            key: value for key, value in metadata.items() if key not in RESERVED_KEYS
        }
        props = metadata.get("props")
        if isinstance(props, dict):
            params.update(props)
        component = metadata.get("type") or metadata.get("component")
        stable_id = metadata.get("id")
        return cls(
            type=str(component) if component else DEFAULT_SECTION_TYPE,
            preset=metadata.get("preset"),
            input=metadata.get("input"),
            fetch=parse_fetch_config(metadata.get("fetch")),
            data=metadata.get("data"),
            id=str(stable_id) if stable_id is not None else None,
            params=params,
        )


__all__ = [
    "RESERVED_KEYS",
    "SectionFrontmatter",
    "parse_yaml",
    "parse_yaml_mapping",
    "read_source_text",
    "split_frontmatter",
]
