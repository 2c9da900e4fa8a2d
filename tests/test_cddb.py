import pytest

from daisyplay.cddb import (
    CddbInfo,
    Track,
    build_audiocd_toc,
    fetch_cddb,
    parse_cddb,
)

RECORD = """# xmcd
DISCID=0a0b0c0d
DTITLE=Artist / Album
TTITLE0=First song
TTITLE1=Second
TTITLE1= continued
TTITLE2=Third
EXTD=
"""


def make_tracks(count=3):
    lsns = [750 * n for n in range(count)]
    tracks, _ = build_audiocd_toc(lsns, 750 * count, 23)
    return tracks


def test_parse_cddb_titles():
    tracks = make_tracks()
    info = parse_cddb(RECORD, tracks)
    assert info.title == "Artist / Album"
    assert info.bookmark_title == "Artist - Album"
    assert [t.label for t in tracks] == ["First song", "Second", "Third"]


def test_parse_cddb_only_first_slash_replaced():
    info = parse_cddb("DTITLE=a/b/c\n", [])
    assert info.bookmark_title == info.title.replace("/", "-", 1)
    assert "/" in info.bookmark_title


def test_parse_cddb_without_title():
    tracks = make_tracks(1)
    original = tracks[0].label
    info = parse_cddb("DISCID=1\n", tracks)
    assert info == CddbInfo()
    assert tracks[0].label == original


def test_parse_cddb_extra_titles_ignored():
    tracks = make_tracks(1)
    parse_cddb("TTITLE0=One\nTTITLE1=Two\n", tracks)
    assert [t.label for t in tracks] == ["One"]


def test_parse_cddb_long_label_truncated():
    tracks = [Track(x=1)]
    parse_cddb("TTITLE0=" + "x" * 100 + "\n", tracks)
    assert len(tracks[0].label) == 64 - tracks[0].x
    assert set(tracks[0].label) == {"x"}


def test_build_toc_labels_and_files():
    tracks, _ = build_audiocd_toc([0, 750, 2250], 3000, 23)
    assert tracks[0].label == "Track  1"
    assert tracks[0].filename == "/Track-01.wav"
    assert all(t.x == 1 for t in tracks)


def test_build_toc_sectors_chain():
    lsns = [150, 900, 2400, 5000]
    tracks, total = build_audiocd_toc(lsns, 9000, 23)
    assert [t.first_lsn for t in tracks] == lsns
    assert [t.last_lsn for t in tracks[:-1]] == lsns[1:]
    assert tracks[-1].last_lsn == 9000
    assert total == (9000 - 150) // 75
    assert all(t.duration == (t.last_lsn - t.first_lsn) // 75 for t in tracks)


def test_build_toc_screens():
    tracks, _ = build_audiocd_toc([0, 75, 150, 225, 300], 375, 2)
    assert [t.screen for t in tracks] == [0, 0, 1, 1, 2]
    assert [t.y for t in tracks] == [0, 1, 0, 1, 0]


def test_build_toc_requires_tracks():
    with pytest.raises(ValueError):
        build_audiocd_toc([], 100, 23)


def test_fetch_cddb_runs_cddbget():
    calls = []

    def run(argv):
        calls.append(list(argv))
        return RECORD

    tracks = make_tracks()
    info = fetch_cddb("/dev/sr0", tracks, run)
    assert calls == [["cddbget", "-c", "/dev/sr0", "-I", "-d"]]
    assert info.title == "Artist / Album"
    assert tracks[2].label == "Third"


def test_fetch_cddb_without_program():
    def run(argv):
        raise FileNotFoundError(argv[0])

    tracks = make_tracks(1)
    info = fetch_cddb("/dev/sr0", tracks, run)
    assert info.title is None
    assert tracks[0].label == "Track  1"