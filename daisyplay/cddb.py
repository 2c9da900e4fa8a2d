"""Audio-CD track tables and CDDB titles."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Callable, Sequence

FRAMES_PER_SECOND = 75
_LABEL_LIMIT = 80
_LABEL_COLUMNS = 65

Runner = Callable[[Sequence[str]], str]


@dataclass
class Track:
    """One track of an Audio-CD with its place on the screen."""

    label: str = ""
    filename: str = ""
    first_lsn: int = 0
    last_lsn: int = 0
    duration: int = 0
    x: int = 1
    y: int = 0
    screen: int = 0


@dataclass
class CddbInfo:
    """Disc title as reported by CDDB; ``None`` when none was given."""

    title: str | None = None
    bookmark_title: str | None = None


def parse_cddb(text: str, tracks: Sequence[Track]) -> CddbInfo:
    """Read the disc title and track titles from a CDDB record.

    Track labels are set on *tracks* in order; continuation lines of a
    title spanning several lines are ignored.
    """
    info = CddbInfo()
    index = 0
    for line in text.splitlines():
        upper = line.upper()
        if "DTITLE" in upper and "=" in line:
            value = line.split("=", 1)[1]
            info.title = value
            info.bookmark_title = value.replace("/", "-", 1)
        if "TTITLE" in upper and index < len(tracks):
            if f"TTITLE{index}=" not in line:
                continue
            track = tracks[index]
            label = line.split("=", 1)[1][:_LABEL_LIMIT]
            if len(label) - track.x >= _LABEL_COLUMNS:
                label = label[: _LABEL_COLUMNS - 1 - track.x]
            track.label = label
            index += 1
    return info


def _run(argv: Sequence[str]) -> str:
    completed = subprocess.run(
        list(argv), stdout=subprocess.PIPE, stderr=subprocess.DEVNULL,
        text=True, check=False,
    )
    return completed.stdout


def fetch_cddb(device: str, tracks: Sequence[Track],
               run: Runner | None = None) -> CddbInfo:
    """Ask ``cddbget`` about the disc in *device* and apply its titles."""
    run = run or _run
    try:
        text = run(["cddbget", "-c", device, "-I", "-d"])
    except FileNotFoundError:
        return CddbInfo()
    return parse_cddb(text, tracks)


def build_audiocd_toc(lsns: Sequence[int], leadout: int,
                      max_y: int) -> tuple[list[Track], int]:
    """Build the track list from each track's first sector and the lead-out.

    Returns the tracks and the disc's total length in seconds.
    """
    starts = list(lsns)
    if not starts:
        raise ValueError("the disc has no tracks")
    if max_y < 1:
        raise ValueError("screen height must be positive")
    ends = starts[1:] + [leadout]
    tracks = []
    for number, (first, last) in enumerate(zip(starts, ends)):
        screen = number // max_y
        tracks.append(
            Track(
                label=f"Track {number + 1:2d}",
                filename=f"/Track-{number + 1:02d}.wav",
                first_lsn=first,
                last_lsn=last,
                duration=(last - first) // FRAMES_PER_SECOND,
                x=1,
                y=number - screen * max_y,
                screen=screen,
            )
        )
    total_time = (leadout - starts[0]) // FRAMES_PER_SECOND
    return tracks, total_time