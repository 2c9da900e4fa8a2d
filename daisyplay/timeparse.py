"""Clock values as they appear in SMIL clip attributes and NCC metadata."""

from __future__ import annotations

import re

_INT_RE = re.compile(r"\s*[+-]?\d+")
_FLOAT_RE = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _leading_int(text: str) -> int:
    match = _INT_RE.match(text)
    return int(match.group()) if match else 0


def _leading_float(text: str) -> float:
    match = _FLOAT_RE.match(text)
    return float(match.group()) if match else 0.0


def read_time(text: str) -> float:
    """Convert ``[[h:]m:]s`` to seconds.

    Each field is read leniently: a field without a leading number counts
    as zero and trailing characters are ignored.
    """
    hours, minutes, seconds = "0", "0", text
    if ":" in text:
        head, seconds = text.rsplit(":", 1)
        if ":" in head:
            hours, minutes = head.rsplit(":", 1)
        else:
            minutes = head
    return (_leading_int(hours) * 3600 + _leading_int(minutes) * 60
            + _leading_float(seconds))


def parse_clip_value(value: str) -> float:
    """Convert a clip value such as ``npt=12.5s`` or ``0:00:04.25`` to seconds."""
    match = re.search(r"\d", value)
    if match is None:
        raise ValueError(f"clip value without a number: {value!r}")
    text = value[match.start():].split("s", 1)[0]
    if ":" not in text:
        return _leading_float(text)
    return read_time(text)


def get_clips(clip_begin: str, clip_end: str) -> tuple[float, float] | None:
    """Return the begin and end of a clip in seconds.

    ``None`` is returned when the clip has no begin value.
    """
    if not clip_begin:
        return None
    return parse_clip_value(clip_begin), parse_clip_value(clip_end)


def split_clock(seconds: float) -> tuple[int, int, int]:
    """Split a number of seconds into whole hours, minutes and seconds."""
    hours = int(seconds // 3600)
    minutes = int((seconds - hours * 3600) // 60)
    rest = int(seconds - (hours * 3600 + minutes * 60))
    return hours, minutes, rest