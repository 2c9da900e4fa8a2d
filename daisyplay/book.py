"""Building the item table of a DAISY book from its index files."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Iterator, Sequence
from xml.sax.saxutils import escape, quoteattr

from .paths import find_index_names
from .reader import Node, NodeKind, iter_file_nodes, skip_to_anchor
from .timeparse import get_clips

NO_ITEMS_MESSAGE = 'Please try to play this book with "eBook-speaker"'
NO_AUDIO_MESSAGE = 'This book has no audio. Play this book with "eBook-speaker"'
LABEL_COLUMNS = 60
_HEADINGS = frozenset(f"h{level}" for level in range(1, 7))


class BookError(Exception):
    """The book cannot be played."""


@dataclass
class Item:
    """One navigable entry of a book."""

    label: str = ""
    smil_file: str = ""
    smil_anchor: str = ""
    first_id: str = ""
    last_id: str = ""
    level: int = 1
    page_number: int = 0
    begin: float = 0.0
    duration: float = 0.0
    x: int = 0
    y: int = 0
    screen: int = 0


@dataclass
class Book:
    """Where a book lives, which index files it has and its items."""

    mount_point: str
    daisy_version: str = ""
    ncc_html: str | None = None
    ncx_name: str | None = None
    opf_name: str | None = None
    items_in_opf: int = 0
    items_in_ncx: int = 0
    items: list[Item] = field(default_factory=list)

    @property
    def total_items(self) -> int:
        """Number of items in the book."""
        return len(self.items)


def _elements(path) -> Iterator[Node]:
    if not path:
        return
    try:
        for node in iter_file_nodes(path):
            if node.kind is NodeKind.ELEMENT:
                yield node
    except OSError:
        return


def count_tags(path, name: str) -> int:
    """Count the elements called *name* in the document at *path*.

    A missing or unreadable document counts as having none.
    """
    wanted = name.lower()
    return sum(1 for node in _elements(path) if node.tag == wanted)


def count_ncc_items(path) -> int:
    """Count the headings ``h1`` to ``h6`` of an ``ncc.html`` file."""
    return sum(1 for node in _elements(path) if node.tag in _HEADINGS)


def _smil_title(path: str) -> str:
    for node in _elements(path):
        if node.tag == "body":
            break
        if node.tag == "meta" and node.attributes.get("name", "").lower() == "title":
            return node.attributes.get("content", "")
    return ""


def _smil_names(directory: str) -> list[str]:
    with os.scandir(directory) as entries:
        names = [
            entry.name for entry in entries
            if entry.name.lower().endswith(".smil") and not entry.name.startswith(".")
        ]
    return sorted(names)


def create_ncc_html(directory) -> str:
    """Write an ``ncc.html`` listing every SMIL file of *directory*.

    Each SMIL file becomes an ``h1`` heading linking to it, labelled with
    the file's ``title`` meta data.  Returns the path written.
    """
    directory = os.fspath(directory)
    path = os.path.join(directory, "ncc.html")
    lines = ['<?xml version="1.0"?>', "<html>", "<head>", "   </head>", "<body>"]
    for name in _smil_names(directory):
        label = _smil_title(os.path.join(directory, name))
        lines.append("<h1>")
        lines.append(f"<a href={quoteattr(name)}>{escape(label)}")
        lines.append("         </a></h1>")
    lines.extend(["</body></html>", ""])
    try:
        with open(path, "w", encoding="utf-8") as handle:
            handle.write("\n".join(lines))
    except OSError as exc:
        raise BookError(f"{path}: {exc.strerror}") from exc
    return path


def _ncc_book(ncc_html: str) -> Book:
    total = count_ncc_items(ncc_html)
    if total == 0:
        raise BookError(NO_ITEMS_MESSAGE)
    return Book(
        mount_point=os.path.dirname(ncc_html),
        daisy_version="2.02",
        ncc_html=ncc_html,
        items=[Item() for _ in range(total)],
    )


def create_book(mount_point) -> Book:
    """Find the book's index files below *mount_point* and size its item table.

    A DAISY 2.02 book is read from ``ncc.html``; a DAISY 3 book from its
    OPF and NCX files.  A directory with neither gets an ``ncc.html``
    generated from its SMIL files.
    """
    names = find_index_names(mount_point)
    if names.ncc_html:
        return _ncc_book(names.ncc_html)

    ncx_name = names.ncx_name if names.ncx_name and len(names.ncx_name) >= 4 else None
    opf_name = names.opf_name if names.opf_name and len(names.opf_name) >= 4 else None
    if not ncx_name and not opf_name:
        return _ncc_book(create_ncc_html(names.mount_point))

    items_in_opf = count_tags(opf_name, "itemref")
    items_in_ncx = count_tags(ncx_name, "navpoint")
    if items_in_opf == 0 and items_in_ncx == 0:
        raise BookError(NO_ITEMS_MESSAGE)
    total = max(items_in_opf, items_in_ncx)
    return Book(
        mount_point=names.mount_point,
        daisy_version="3",
        ncx_name=ncx_name,
        opf_name=opf_name,
        items_in_opf=items_in_opf,
        items_in_ncx=items_in_ncx,
        items=[Item() for _ in range(total)],
    )


def _clip_attributes(node: Node) -> tuple[str, str]:
    attrs = node.attributes
    begin = attrs.get("clipbegin") or attrs.get("clip-begin", "")
    end = attrs.get("clipend") or attrs.get("clip-end", "")
    return begin, end


def calculate_times(items: Sequence[Item]) -> float:
    """Set each item's begin and duration from the audio clips of its SMIL file.

    An item's audio runs from its anchor up to the anchor of the next item.
    Returns the book's total playing time in seconds.
    """
    total_time = 0.0
    last_clip = (0.0, 0.0)

    def clip(node: Node) -> tuple[float, float]:
        nonlocal last_clip
        found = get_clips(*_clip_attributes(node))
        if found is not None:
            last_clip = found
        return last_clip

    for index, item in enumerate(items):
        item.duration = 0.0
        if not item.smil_file:
            continue
        try:
            nodes = list(iter_file_nodes(item.smil_file))
        except OSError as exc:
            raise BookError(f"Cannot read {item.smil_file}") from exc
        stream = iter(nodes)
        skip_to_anchor(stream, item.smil_anchor)

        following = items[index + 1].smil_anchor.lower() if index + 1 < len(items) else ""
        for node in stream:
            if not (node.kind is NodeKind.ELEMENT and node.tag == "audio"):
                continue
            begin, end = clip(node)
            item.begin = begin
            item.duration += end - begin
            reached_next = False
            for inner in stream:
                if following and inner.id.lower() == following:
                    reached_next = True
                    break
                if inner.kind is NodeKind.ELEMENT and inner.tag == "audio":
                    begin, end = clip(inner)
                    item.duration += end - begin
            if reached_next:
                break
        total_time += item.duration

    if total_time == 0:
        raise BookError(NO_AUDIO_MESSAGE)
    return total_time


def layout_items(items: Sequence[Item], max_y: int) -> None:
    """Place items on screens of *max_y* lines and cut labels to fit."""
    if max_y < 1:
        raise ValueError("screen height must be positive")
    for index, item in enumerate(items):
        item.screen = index // max_y
        item.y = index - item.screen * max_y
        if len(item.label) + item.x > LABEL_COLUMNS:
            item.label = item.label[: LABEL_COLUMNS - item.x]