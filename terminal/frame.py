"""Character-grid frame that widgets are drawn into.

A frame holds one row of rich segments per terminal line. Widgets are any
rich renderable: each is rendered to the size of its target rect and
spliced into the grid, so later widgets paint over earlier ones.
"""

from __future__ import annotations

from typing import Iterable, Optional

from rich.console import Console, ConsoleOptions, RenderableType, RenderResult
from rich.segment import Segment
from rich.style import Style

from terminal.layout import Rect

CURSOR_STYLE = Style(reverse=True)


def _splice(row: list[Segment], line: list[Segment], x: int, width: int, total: int) -> list[Segment]:
    before, _, after = Segment.divide(row, [x, x + width, total])
    return before + Segment.adjust_line_length(line, width) + after


class Frame:
    """Drawing surface for one rendered frame."""

    def __init__(self, console: Console, width: int, height: int) -> None:
        self.console = console
        self._area = Rect(0, 0, width, height)
        self._rows: list[list[Segment]] = [[Segment(" " * width)] for _ in range(height)]
        self.cursor: Optional[tuple[int, int]] = None

    @classmethod
    def for_console(cls, console: Console) -> "Frame":
        width, height = console.size
        return cls(console, width, height)

    def size(self) -> Rect:
        return self._area

    def render_widget(self, widget: RenderableType, area: Rect) -> None:
        """Render ``widget`` clipped to ``area``, painting over what is there."""
        area = area.intersection(self._area)
        if area.is_empty:
            return
        options = self.console.options.update_dimensions(area.width, area.height)
        lines = self.console.render_lines(widget, options, pad=True)
        for offset, line in enumerate(lines[:area.height]):
            row = area.y + offset
            self._rows[row] = _splice(self._rows[row], line, area.x, area.width, self._area.width)

    def set_cursor(self, x: int, y: int) -> None:
        """Show the text caret at the given cell after the frame is drawn."""
        self.cursor = (x, y)

    def _row_with_cursor(self, y: int) -> list[Segment]:
        row = self._rows[y]
        if self.cursor is None or self.cursor[1] != y:
            return row
        x = self.cursor[0]
        if not 0 <= x < self._area.width:
            return row
        before, cell, after = Segment.divide(row, [x, x + 1, self._area.width])
        return before + list(Segment.apply_style(cell, post_style=CURSOR_STYLE)) + after

    def lines(self) -> Iterable[list[Segment]]:
        for y in range(self._area.height):
            yield self._row_with_cursor(y)

    def text_lines(self) -> list[str]:
        """Plain text of every row, without styling."""
        return ["".join(segment.text for segment in row) for row in self._rows]

    def style_at(self, x: int, y: int) -> Optional[Style]:
        """Style of the cell at ``(x, y)``."""
        _, cell, _ = Segment.divide(self._rows[y], [x, x + 1, self._area.width])
        return cell[0].style if cell else None

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        new_line = Segment.line()
        for index, row in enumerate(self.lines()):
            yield from row
            if index < self._area.height - 1:
                yield new_line
