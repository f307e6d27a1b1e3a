"""Convert Markdown bodies into rich-document node trees.

Section bodies are parsed with Python-Markdown. A tree processor registered
after inline processing captures the element tree and converts it into plain
nested nodes (``{"type": ..., "attrs": ..., "content": [...]}``) that
downstream consumers can walk without knowing anything about HTML.

Two image conventions are recognized while converting:

* ``![alt](@Component){variant=compact}`` becomes an ``inset_ref`` node: an
  inline component reference that :func:`extract_insets` later lifts out of
  the document and replaces with a placeholder.
* ``![](lu:house)`` (``<icon family>:<icon name>``) becomes an icon image with
  ``role="icon"``.

Example
-------
>>> from content_tree.document import ProseDocumentConverter
>>> doc = ProseDocumentConverter()("# Title\n\nHello *there*")
>>> [node["type"] for node in doc["content"]]
['heading', 'paragraph']
"""

from __future__ import annotations

import collections.abc as cabc
import html
import re
import typing as typ

from markdown import Markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from markdown.util import HTML_PLACEHOLDER_RE

from .icons import normalize_library
from .models import Inset

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element
else:  # pragma: no cover - type-checking fallback
    Element = typ.Any

Node = dict[str, typ.Any]

INSET_PREFIX = "@"
ICON_SOURCE_PATTERN = re.compile(r"^([A-Za-z0-9-]+):([A-Za-z0-9_-]+)$")
STASHED_CODE_PATTERN = re.compile(
    r'^<pre[^>]*><code(?: class="(?:language-)?([^"]+)")?[^>]*>(.*)</code></pre>\s*$',
    re.DOTALL,
)
_HEADING_TAGS = {f"h{level}": level for level in range(1, 7)}
_INLINE_MARKS = {
    "strong": "bold",
    "b": "bold",
    "em": "italic",
    "i": "italic",
    "code": "code",
    "del": "strike",
    "s": "strike",
}
_BLOCK_TAGS = {
    "p",
    "ul",
    "ol",
    "li",
    "pre",
    "blockquote",
    "hr",
    "table",
    "thead",
    "tbody",
    "tr",
    "th",
    "td",
    "div",
    *_HEADING_TAGS,
}
_DEFAULT_EXTENSIONS = ["attr_list", "fenced_code", "tables", "sane_lists"]


class MarkdownConverter(typ.Protocol):
    """Callable turning a Markdown body into a rich-document tree."""

    def __call__(self, markdown_text: str) -> Node:
        """Return the rich document for ``markdown_text``."""
        ...


class ProseDocumentConverter:
    """Default Markdown converter backed by Python-Markdown."""

    def __init__(self, extensions: cabc.Sequence[str | Extension] | None = None) -> None:
        """Initialize the converter.

        Parameters
        ----------
        extensions : Sequence[str | Extension], optional
            Python-Markdown extensions to enable. Defaults to ``attr_list``,
            ``fenced_code``, ``tables``, and ``sane_lists``.
        """
        self._extensions = list(extensions or _DEFAULT_EXTENSIONS)

    def __call__(self, markdown_text: str) -> Node:
        """Convert ``markdown_text`` and return the captured document."""
        capture = DocumentCaptureExtension()
        md = Markdown(extensions=[*self._extensions, capture])
        md.convert(markdown_text)
        return capture.document


class DocumentCaptureExtension(Extension):
    """Record the parsed element tree as a rich document."""

    def __init__(self) -> None:
        super().__init__()
        self.document: Node = {"type": "doc", "content": []}

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the capture treeprocessor after inline processing."""
        processor = DocumentCaptureTreeprocessor(md, self)
        md.treeprocessors.register(processor, "content_tree_capture", -10)


class DocumentCaptureTreeprocessor(Treeprocessor):
    """Convert the finished element tree into document nodes."""

    def __init__(self, md: Markdown, extension: DocumentCaptureExtension) -> None:
        super().__init__(md)
        self.extension = extension

    def run(self, root: Element) -> None:
        """Store the converted tree on the owning extension."""
        builder = _NodeBuilder(self._stashed_html)
        self.extension.document = {
            "type": "doc",
            "content": builder.blocks(root),
        }

    def _stashed_html(self, index: int) -> str:
        blocks = self.md.htmlStash.rawHtmlBlocks
        if 0 <= index < len(blocks):
            return str(blocks[index])
        return ""


class _NodeBuilder:
    """Walk ElementTree elements and emit document nodes."""

    def __init__(self, stash: cabc.Callable[[int], str]) -> None:
        self._stash = stash

    def blocks(self, parent: Element) -> list[Node]:
        nodes: list[Node] = []
        pending: list[Node] = []

        def _flush() -> None:
            if any(node.get("type") != "text" or node.get("text", "").strip() for node in pending):
                nodes.append(_paragraph(list(pending)))
            pending.clear()

        pending.extend(self._text(parent.text, ()))
        for child in parent:
            if child.tag in _BLOCK_TAGS:
                _flush()
                nodes.extend(self.block(child))
            else:
                pending.extend(self.inline(child, ()))
            pending.extend(self._text(child.tail, ()))
        _flush()
        return nodes

    def block(self, element: Element) -> list[Node]:
        tag = element.tag
        if tag in _HEADING_TAGS:
            attrs = {"level": _HEADING_TAGS[tag]}
            if element.get("id"):
                attrs["id"] = element.get("id")
            return [{"type": "heading", "attrs": attrs, "content": self.inlines(element)}]
        match tag:
            case "p":
                return self._paragraph_block(element)
            case "ul":
                return [{"type": "bullet_list", "content": self.blocks(element)}]
            case "ol":
                attrs = {"start": int(element.get("start", "1") or 1)}
                return [{"type": "ordered_list", "attrs": attrs, "content": self.blocks(element)}]
            case "li":
                return [{"type": "list_item", "content": self.blocks(element)}]
            case "blockquote":
                return [{"type": "blockquote", "content": self.blocks(element)}]
            case "hr":
                return [{"type": "horizontal_rule"}]
            case "pre":
                return [self._code_block(element)]
            case "table":
                return [{"type": "table", "content": self.blocks(element)}]
            case "thead" | "tbody" | "div":
                return self.blocks(element)
            case "tr":
                return [{"type": "table_row", "content": self.blocks(element)}]
            case "th":
                return [{"type": "table_header", "content": self.blocks(element)}]
            case "td":
                return [{"type": "table_cell", "content": self.blocks(element)}]
            case _:
                return [{"type": tag, "content": self.blocks(element)}]

    def inlines(self, element: Element, marks: tuple[Node, ...] = ()) -> list[Node]:
        nodes = self._text(element.text, marks)
        for child in element:
            nodes.extend(self.inline(child, marks))
            nodes.extend(self._text(child.tail, marks))
        return nodes

    def inline(self, element: Element, marks: tuple[Node, ...]) -> list[Node]:
        tag = element.tag
        if tag == "img":
            return [_image_node(element)]
        if tag == "br":
            return [{"type": "hard_break"}]
        if tag == "a":
            attrs = {"href": element.get("href", "")}
            if element.get("title"):
                attrs["title"] = element.get("title")
            return self.inlines(element, (*marks, {"type": "link", "attrs": attrs}))
        mark = _INLINE_MARKS.get(tag)
        if mark is not None:
            return self.inlines(element, (*marks, {"type": mark}))
        return self.inlines(element, marks)

    def _paragraph_block(self, element: Element) -> list[Node]:
        stashed = self._stashed_block(element)
        if stashed is not None:
            return [stashed]
        content = self.inlines(element)
        meaningful = [
            node
            for node in content
            if node.get("type") != "text" or node.get("text", "").strip()
        ]
        if len(meaningful) == 1 and meaningful[0]["type"] == "inset_ref":
            return [meaningful[0]]
        return [_paragraph(content)]

    def _stashed_block(self, element: Element) -> Node | None:
        if len(element):
            return None
        match = HTML_PLACEHOLDER_RE.fullmatch((element.text or "").strip())
        if match is None:
            return None
        raw = self._stash(int(match.group(1)))
        code = STASHED_CODE_PATTERN.match(raw.strip())
        if code is not None:
            return _code_node(code.group(2), code.group(1))
        return {"type": "html", "attrs": {"html": raw}}

    def _code_block(self, element: Element) -> Node:
        code = element.find("code")
        source = code if code is not None else element
        classes = (source.get("class") or "").split()
        language = next(
            (name.removeprefix("language-") for name in classes if name), None
        )
        return _code_node(source.text or "", language, escaped=False)

    def _text(self, text: str | None, marks: tuple[Node, ...]) -> list[Node]:
        if not text:
            return []
        expanded = HTML_PLACEHOLDER_RE.sub(
            lambda match: self._stash(int(match.group(1))), text
        )
        node: Node = {"type": "text", "text": expanded}
        if marks:
            node["marks"] = [dict(mark) for mark in marks]
        return [node]


def _paragraph(content: list[Node]) -> Node:
    return {"type": "paragraph", "content": content}


def _code_node(text: str, language: str | None, *, escaped: bool = True) -> Node:
    body = html.unescape(text) if escaped else text
    return {
        "type": "code_block",
        "attrs": {"language": language},
        "content": [{"type": "text", "text": body.rstrip("\n")}],
    }


def _image_node(element: Element) -> Node:
    attributes = {key: value for key, value in element.attrib.items()}
    src = attributes.pop("src", "")
    alt = attributes.pop("alt", None) or None
    if src.startswith(INSET_PREFIX) and len(src) > 1:
        return {
            "type": "inset_ref",
            "attrs": {"component": src[1:], "alt": alt, **attributes},
        }
    attrs: Node = {"src": src, "alt": alt, **attributes}
    icon = ICON_SOURCE_PATTERN.match(src)
    if icon is not None and normalize_library(icon.group(1), known_only=True):
        attrs.update(role="icon", library=icon.group(1), name=icon.group(2))
    return {"type": "image", "attrs": attrs}


def iter_nodes(node: object) -> cabc.Iterator[Node]:
    """Yield ``node`` and every nested node depth-first."""
    if not isinstance(node, dict):
        return
    yield node
    for child in node.get("content") or ():
        yield from iter_nodes(child)


def extract_insets(doc: object) -> tuple[Node, list[Inset]]:
    """Lift ``inset_ref`` nodes out of ``doc``.

    Parameters
    ----------
    doc : object
        A rich document. ``None`` or a document without content yields no
        insets.

    Returns
    -------
    tuple[dict, list[Inset]]
        A copy of the document in which each ``inset_ref`` is replaced by an
        ``inset_placeholder`` node carrying ``refId``, and the extracted
        insets in document order (``inset_0``, ``inset_1``, ...).
    """
    insets: list[Inset] = []
    if not isinstance(doc, dict):
        return {"type": "doc", "content": []}, insets

    def _rewrite(node: Node) -> Node:
        if node.get("type") == "inset_ref":
            attrs = dict(node.get("attrs") or {})
            ref_id = f"inset_{len(insets)}"
            component = str(attrs.pop("component", ""))
            description = attrs.pop("alt", None)
            insets.append(
                Inset(ref_id=ref_id, type=component, params=attrs, description=description)
            )
            return {"type": "inset_placeholder", "attrs": {"refId": ref_id}}
        content = node.get("content")
        if not isinstance(content, list):
            return dict(node)
        return {**node, "content": [_rewrite(child) for child in content]}

    return _rewrite(doc), insets


__all__ = [
    "DocumentCaptureExtension",
    "MarkdownConverter",
    "ProseDocumentConverter",
    "extract_insets",
    "iter_nodes",
]
