"""Moving through a book's items: levels, screens, searching and seeking."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .book import Item
from .timeparse import split_clock

FORWARD_MODES = ("/", "n")
BACKWARD_MODE = "N"


def format_total_length(seconds: float, speed: float = 1.0) -> str:
    """Format a book's length, scaled by the playing *speed*, as ``HH:MM:SS``."""
    if speed <= 0:
        raise ValueError("speed must be positive")
    hours, minutes, rest = split_clock(seconds / speed)
    return f"{hours:02d}:{minutes:02d}:{rest:02d}"


def format_minutes(seconds: float) -> str:
    """Format a duration as ``MM:SS``, rounded to the nearest second."""
    whole = int(seconds + 0.5)
    return f"{whole // 60:02d}:{whole % 60:02d}"


@dataclass
class Navigator:
    """The cursor, the playing item and the level being shown in a book."""

    items: list[Item]
    max_y: int = 23
    level: int = 1
    depth: int | None = None
    current: int = 0
    playing: int = -1
    displaying: int = 0
    just_this_item: int = -1
    speed: float = 1.0
    total_pages: int = 0
    _unused: list = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if not self.items:
            raise ValueError("a book needs at least one item")
        if self.max_y < 1:
            raise ValueError("screen height must be positive")
        if self.depth is None:
            self.depth = max(item.level for item in self.items)

    @property
    def total_items(self) -> int:
        """Number of items in the book."""
        return len(self.items)

    def next_item(self) -> bool:
        """Move the cursor to the next item at or above the current level.

        Returns ``False`` when there is no such item.
        """
        last = self.total_items - 1
        if self.current >= last:
            return False
        while True:
            self.current += 1
            if self.items[self.current].level <= self.level:
                return True
            if self.current >= last:
                self.previous_item()
                return False

    def previous_item(self) -> int:
        """Move the cursor back to an item at or above the current level."""
        if self.current == 0:
            return self.current
        while self.current > 0 and self.items[self.current].level > self.level:
            self.current -= 1
        if self.playing == -1:
            self.displaying = self.current
        return self.current

    def change_level(self, key: str) -> int:
        """Cycle the shown level: ``"l"`` goes deeper, ``"L"`` shallower."""
        if self.depth == 1:
            return self.level
        if key == "l":
            self.level += 1
            if self.level > self.depth:
                self.level = 1
        elif key == "L":
            self.level -= 1
            if self.level < 1:
                self.level = self.depth
        else:
            raise ValueError(f"unknown level key: {key!r}")
        if self.items[self.current].level > self.level:
            self.previous_item()
        return self.level

    def _matches(self, index: int, needle: str) -> bool:
        return needle in self.items[index].label.lower()

    def search(self, text: str, start: int, mode: str = "/") -> int | None:
        """Find an item whose label contains *text*, ignoring case.

        Modes ``"/"`` and ``"n"`` search forwards from *start* and wrap
        around; ``"N"`` searches backwards.  The found item becomes the
        current and playing one.  Returns its index, or ``None``.
        """
        needle = text.lower()
        total = self.total_items
        if mode in FORWARD_MODES:
            order = [*range(max(start, 0), total), *range(0, min(start, total))]
        elif mode == BACKWARD_MODE:
            order = [*range(min(start, total - 1), -1, -1),
                     *range(total - 1, max(start, -1), -1)]
        else:
            raise ValueError(f"unknown search mode: {mode!r}")
        for index in order:
            if self._matches(index, needle):
                self.playing = self.displaying = self.current = index
                self.just_this_item = -1
                return index
        return None

    def page_down(self) -> bool:
        """Move the cursor to the first item of the next screen."""
        old_screen = self.items[self.current].screen
        if old_screen == self.items[-1].screen:
            return False
        while self.items[self.current].screen == old_screen:
            self.current += 1
        return True

    def page_up(self) -> bool:
        """Move the cursor to the first item of the previous screen."""
        old_screen = self.items[self.current].screen
        if old_screen == 0:
            return False
        while self.current > 0 and self.items[self.current].screen == old_screen:
            self.current -= 1
        self.current = max(self.current - (self.max_y - 1), 0)
        return True

    def item_duration(self, nth: int) -> float:
        """Playing time of item *nth* with its deeper sub-items, at the set speed.

        While *nth* is playing only its own duration counts.
        """
        if not 0 <= nth < self.total_items:
            raise IndexError(nth)
        total = 0.0
        index = nth
        while True:
            total += self.items[index].duration
            index += 1
            if index >= self.total_items:
                break
            if self.playing == nth or self.items[index].level <= self.level:
                break
        return total / self.speed

    def seek_clip(self, clips: Sequence[tuple[float, float]],
                  seconds: float) -> tuple[int, float]:
        """Find where *seconds* into the current item falls among its *clips*.

        A position past the item's end starts it from the beginning.
        Returns the clip's index and the time within the audio file.
        """
        item = self.items[self.current]
        if seconds >= item.duration / self.speed:
            seconds = 0
        elapsed = 0.0
        for index, (begin, end) in enumerate(clips):
            before = elapsed
            elapsed += end - begin
            if elapsed >= seconds:
                return index, begin + (seconds - before)
        raise ValueError("position lies beyond the item's audio")

    def find_page(self, page: int) -> int | None:
        """Return the item holding *page*, or the item to search it from.

        ``None`` is returned for a page outside the book.
        """
        if page <= 0 or page > self.total_pages:
            return None
        for index, item in enumerate(self.items):
            if item.page_number == page:
                return index
        for index in range(self.total_items - 1, -1, -1):
            if self.items[index].page_number < page:
                return index
        return None