import os

import pytest

from daisyplay.book import (
    Book,
    BookError,
    Item,
    calculate_times,
    count_ncc_items,
    count_tags,
    create_book,
    create_ncc_html,
    layout_items,
)
from daisyplay.reader import NodeKind, iter_file_nodes

NCC = (
    "<html><head><title>Book</title></head><body>"
    '<h1 id="a"><a href="one.smil#a">One</a></h1>'
    '<h2 id="b"><a href="one.smil#b">Two</a></h2>'
    '<h3 id="c"><a href="two.smil#c">Three</a></h3>'
    "<p>not a heading</p>"
    "</body></html>"
)

SMIL = (
    '<?xml version="1.0"?><smil><head>'
    '<meta name="title" content="{title}"/></head><body>'
    '<par id="a"><audio src="x.mp3" clip-begin="npt=0.000s" clip-end="npt=2.500s"/>'
    '<audio src="x.mp3" clip-begin="npt=2.500s" clip-end="npt=4.000s"/></par>'
    '<par id="b"><audio src="x.mp3" clip-begin="npt=4.000s" clip-end="npt=10.000s"/></par>'
    "</body></smil>"
)


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_count_ncc_items_counts_headings(tmp_path):
    path = _write(tmp_path / "ncc.html", NCC)
    assert count_ncc_items(path) == 3


def test_count_tags_missing_file_is_zero(tmp_path):
    assert count_tags(tmp_path / "absent.opf", "itemref") == 0
    assert count_tags(None, "itemref") == 0


def test_count_tags_ignores_case(tmp_path):
    path = _write(tmp_path / "b.ncx", "<ncx><navPoint/><NAVPOINT/><other/></ncx>")
    assert count_tags(path, "navPoint") == 2


def test_create_ncc_html_lists_smil_files(tmp_path):
    _write(tmp_path / "b.smil", SMIL.format(title="Second"))
    _write(tmp_path / "a.smil", SMIL.format(title="First"))
    _write(tmp_path / "notes.txt", "x")
    path = create_ncc_html(tmp_path)
    assert path == os.path.join(str(tmp_path), "ncc.html")
    assert count_ncc_items(path) == 2
    nodes = list(iter_file_nodes(path))
    hrefs = [n.attributes["href"] for n in nodes if n.kind is NodeKind.ELEMENT and n.tag == "a"]
    assert hrefs == ["a.smil", "b.smil"]
    labels = [n.label for n in nodes if n.kind is NodeKind.TEXT and n.label]
    assert labels == ["First", "Second"]


def test_create_book_from_ncc(tmp_path):
    book_dir = tmp_path / "book"
    book_dir.mkdir()
    _write(book_dir / "NCC.HTML", NCC)
    book = create_book(tmp_path)
    assert book.daisy_version == "2.02"
    assert book.total_items == 3
    assert book.mount_point == str(book_dir)
    assert all(isinstance(item, Item) for item in book.items)


def test_create_book_ncc_without_headings(tmp_path):
    _write(tmp_path / "ncc.html", "<html><body><p>x</p></body></html>")
    with pytest.raises(BookError):
        create_book(tmp_path)


def test_create_book_daisy3_takes_larger_count(tmp_path):
    _write(tmp_path / "book.opf",
           "<package><spine><itemref/><itemref/><itemref/></spine></package>")
    _write(tmp_path / "book.ncx", "<ncx><navPoint/><navPoint/></ncx>")
    book = create_book(tmp_path)
    assert book.daisy_version == "3"
    assert book.items_in_opf == 3
    assert book.items_in_ncx == 2
    assert book.total_items == 3
    assert book.mount_point == str(tmp_path)


def test_create_book_daisy3_without_items(tmp_path):
    _write(tmp_path / "book.opf", "<package></package>")
    with pytest.raises(BookError):
        create_book(tmp_path)


def test_create_book_generates_ncc_from_smil(tmp_path):
    _write(tmp_path / "one.smil", SMIL.format(title="One"))
    book = create_book(tmp_path)
    assert book.daisy_version == "2.02"
    assert book.total_items == 1
    assert os.path.exists(tmp_path / "ncc.html")


def test_create_book_empty_directory(tmp_path):
    with pytest.raises(BookError):
        create_book(tmp_path)


def test_calculate_times_splits_at_anchors(tmp_path):
    smil = _write(tmp_path / "one.smil", SMIL.format(title="One"))
    items = [Item(smil_file=smil, smil_anchor="a"), Item(smil_file=smil, smil_anchor="b")]
    total = calculate_times(items)
    assert items[0].duration == pytest.approx(4.0)
    assert items[1].duration == pytest.approx(6.0)
    assert items[0].begin == pytest.approx(0.0)
    assert items[1].begin == pytest.approx(4.0)
    assert total == pytest.approx(sum(item.duration for item in items))


def test_calculate_times_item_without_smil(tmp_path):
    smil = _write(tmp_path / "one.smil", SMIL.format(title="One"))
    items = [Item(duration=99.0), Item(smil_file=smil, smil_anchor="b")]
    total = calculate_times(items)
    assert items[0].duration == 0
    assert total == pytest.approx(items[1].duration)


def test_calculate_times_without_audio(tmp_path):
    smil = _write(tmp_path / "one.smil", "<smil><body><par id='a'/></body></smil>")
    with pytest.raises(BookError):
        calculate_times([Item(smil_file=smil, smil_anchor="a")])


def test_calculate_times_missing_smil(tmp_path):
    with pytest.raises(BookError):
        calculate_times([Item(smil_file=str(tmp_path / "gone.smil"))])


def test_layout_items_screens_and_rows():
    items = [Item(label=f"item {n}") for n in range(5)]
    layout_items(items, 2)
    assert [item.screen for item in items] == [0, 0, 1, 1, 2]
    assert [item.y for item in items] == [0, 1, 0, 1, 0]


def test_layout_items_cuts_long_labels():
    items = [Item(label="x" * 100, x=1), Item(label="short", x=1)]
    layout_items(items, 10)
    assert all(len(item.label) + item.x <= 60 for item in items)
    assert items[1].label == "short"


def test_layout_items_rejects_bad_height():
    with pytest.raises(ValueError):
        layout_items([Item()], 0)


def test_book_total_items_follows_items():
    book = Book(mount_point="/m", items=[Item(), Item()])
    assert book.total_items == 2