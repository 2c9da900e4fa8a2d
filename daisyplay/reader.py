"""Walking the elements and text of DAISY's HTML, SMIL, NCX and OPF files."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Iterable, Iterator, Mapping

_INT_RE = re.compile(r"\s*[+-]?\d+")


def _leading_int(text: str) -> int:
    match = _INT_RE.match(text)
    return int(match.group()) if match else 0


class NodeKind(enum.Enum):
    """What a node read from a document is."""

    ELEMENT = "element"
    END_ELEMENT = "end-element"
    TEXT = "text"


@dataclass
class Node:
    """An element start, an element end or a piece of text."""

    kind: NodeKind
    tag: str = ""
    attributes: dict[str, str] = field(default_factory=dict)
    label: str = ""

    @property
    def id(self) -> str:
        """The element's ``id`` attribute, or an empty string."""
        return self.attributes.get("id", "")


def clean_label(text: str) -> str:
    """Strip surrounding white space and blank out control characters."""
    return "".join(
        " " if ord(ch) < 128 and not ch.isprintable() else ch
        for ch in text.strip()
    )


class _Collector(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.nodes: list[Node] = []

    def handle_starttag(self, tag, attrs):
        attributes = {name.lower(): value or "" for name, value in attrs}
        self.nodes.append(Node(NodeKind.ELEMENT, tag.lower(), attributes))

    def handle_endtag(self, tag):
        self.nodes.append(Node(NodeKind.END_ELEMENT, tag.lower()))

    def handle_data(self, data):
        self.nodes.append(Node(NodeKind.TEXT, label=clean_label(data)))


def iter_nodes(text: str) -> Iterator[Node]:
    """Yield the nodes of an HTML or XML document in document order.

    Tag and attribute names are lower-cased; text is cleaned with
    :func:`clean_label`.
    """
    collector = _Collector()
    collector.feed(text)
    collector.close()
    yield from collector.nodes


def iter_file_nodes(path) -> Iterator[Node]:
    """Yield the nodes of the document stored at *path*."""
    with open(path, encoding="utf-8", errors="replace") as handle:
        text = handle.read()
    yield from iter_nodes(text)


def skip_to_anchor(nodes: Iterable[Node], anchor: str) -> Node | None:
    """Advance *nodes* up to and including the element whose id is *anchor*.

    Ids are compared ignoring case.  With an empty *anchor* nothing is
    consumed.  Pass an iterator to keep reading after the anchor.
    """
    if not anchor:
        return None
    wanted = anchor.lower()
    for node in nodes:
        if node.id.lower() == wanted:
            return node
    return None


@dataclass
class BookInfo:
    """Book-wide facts gathered from ``meta`` elements."""

    daisy_version: str = ""
    daisy_title: str = ""
    bookmark_title: str = ""
    total_pages: int = 0
    total_time: str = ""

    def update_from(self, attributes: Mapping[str, str]) -> None:
        """Take what a ``meta`` element's ``name`` and ``content`` tell."""
        name = attributes.get("name")
        if name is None:
            return
        name = name.lower()
        content = attributes.get("content") or ""
        if "dc:format" in name:
            self.daisy_version = content
        if "dc:title" in name and not self.daisy_title:
            self.daisy_title = content
            self.bookmark_title = content.replace("/", "-", 1)
        for key in ("dtb:totalpagecount", "ncc:maxpagenormal",
                    "ncc:pagenormal", "ncc:page-normal"):
            if key in name:
                self.total_pages = _leading_int(content)
        if "dtb:totaltime" in name or "ncc:totaltime" in name:
            self.total_time = content.split(".", 1)[0]