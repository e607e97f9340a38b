"""Rectangle geometry for laying out terminal regions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass(frozen=True)
class Rect:
    """A rectangular region of the terminal, in cells."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def inner(self, margin: int) -> "Rect":
        """Shrink the rect by ``margin`` cells on every side."""
        if self.width < 2 * margin or self.height < 2 * margin:
            return Rect(self.x, self.y, 0, 0)
        return Rect(
            self.x + margin,
            self.y + margin,
            self.width - 2 * margin,
            self.height - 2 * margin,
        )

    def intersection(self, other: "Rect") -> "Rect":
        x = max(self.x, other.x)
        y = max(self.y, other.y)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        return Rect(x, y, max(0, right - x), max(0, bottom - y))


def split_rows(area: Rect, heights: Sequence[Optional[int]]) -> list[Rect]:
    """
    Split an area into stacked rows.

    Fixed heights are honoured top to bottom while space remains; entries
    of ``None`` share whatever height is left over.

    Args:
        area: Region to split
        heights: Row height, or None for a flexible row

    Returns:
        One rect per entry, top to bottom
    """
    fixed = sum(h for h in heights if h is not None)
    flexible = [i for i, h in enumerate(heights) if h is None]
    spare = max(0, area.height - fixed)
    share, extra = divmod(spare, len(flexible)) if flexible else (0, 0)

    rows: list[Rect] = []
    y = area.y
    for index, height in enumerate(heights):
        if height is None:
            size = share + (1 if flexible.index(index) < extra else 0)
        else:
            size = height
        size = max(0, min(size, area.bottom - y))
        rows.append(Rect(area.x, y, area.width, size))
        y += size
    return rows


def centered_rect(area: Rect, percent_x: int, percent_y: int) -> Rect:
    """Return a rect of the given percentage size centered inside ``area``."""
    width = area.width * percent_x // 100
    height = area.height * percent_y // 100
    x = area.x + area.width * ((100 - percent_x) // 2) // 100
    y = area.y + area.height * ((100 - percent_y) // 2) // 100
    return Rect(x, y, width, height)
