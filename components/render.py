"""Render a todo screen snapshot into a frame."""

from __future__ import annotations

from dataclasses import dataclass

from rich import box
from rich.panel import Panel
from rich.style import Style
from rich.text import Text

from components.input_buffer import scrolled_text, visual_cursor, visual_scroll
from components.mode import Mode
from terminal.frame import Frame
from terminal.layout import Rect, centered_rect, split_rows

HIGHLIGHT_SYMBOL = ">>"
HIGHLIGHT_STYLE = Style(bgcolor="bright_black")
HELP_TITLE = "Help Menu"
HELP_PERCENT = 35


@dataclass(frozen=True)
class ScreenSnapshot:
    """Immutable view of everything the renderer needs."""

    mode: Mode
    titles: tuple[str, ...]
    input_value: str
    input_cursor: int
    cursor_row: int

    @property
    def selected(self) -> int | None:
        if self.mode is Mode.BROWSE and 0 <= self.cursor_row < len(self.titles):
            return self.cursor_row
        return None


@dataclass(frozen=True)
class ScreenLayout:
    todo_list: Rect
    status: Rect
    input_box: Rect
    mode_indicator: Rect


def screen_layout(area: Rect) -> ScreenLayout:
    todo_list, status, input_box, mode_indicator = split_rows(area.inner(2), [None, 1, 3, 1])
    return ScreenLayout(todo_list, status, input_box, mode_indicator)


def list_offset(selected: int | None, visible: int) -> int:
    """First list row to show so the selected row stays visible."""
    if selected is None or visible <= 0:
        return 0
    return max(0, selected - visible + 1)


def _key_hint(*parts: str) -> Text:
    # Alternating plain text and bold key names
    text = Text(no_wrap=True, overflow="crop")
    for index, part in enumerate(parts):
        text.append(part, style="bold" if index % 2 else None)
    return text


def status_line(mode: Mode) -> Text:
    if mode is Mode.NORMAL:
        text = _key_hint("Press ", "CTRL+C", " to exit, ", "i", " to insert todo.")
        text.stylize(Style(blink2=True))
        return text
    if mode is Mode.EDITING:
        return _key_hint("Press ", "Esc", " to stop editing, ", "Enter", " to record the todo")
    if mode is Mode.BROWSE:
        return _key_hint(
            "Press ", "j", " to scroll down, ", "k", " to scroll up, ", "Esc", " to exit browse mode ",
        )
    return Text(no_wrap=True)


def single_line(title: str) -> str:
    """Replace line breaks, tabs and other control characters with spaces."""
    return "".join(ch if ch.isprintable() else " " for ch in title)


def has_room_for_border(area: Rect) -> bool:
    return area.width >= 3 and area.height >= 2


def todo_list(snapshot: ScreenSnapshot, area: Rect) -> Panel:
    inner_width = max(0, area.width - 2)
    visible = max(0, area.height - 2)
    selected = snapshot.selected
    offset = list_offset(selected, visible)

    rows = []
    for index in range(offset, min(len(snapshot.titles), offset + visible)):
        is_selected = index == selected
        prefix = HIGHLIGHT_SYMBOL if is_selected else " " * len(HIGHLIGHT_SYMBOL)
        row = Text(f"{prefix}{index}: {single_line(snapshot.titles[index])}", no_wrap=True)
        row.truncate(inner_width, overflow="crop", pad=True)
        if is_selected:
            row.stylize(HIGHLIGHT_STYLE)
        rows.append(row)

    body = Text("\n", no_wrap=True).join(rows)
    body.no_wrap = True
    return Panel(body, title="Todo's", title_align="left", box=box.SQUARE, padding=0)


def input_box(snapshot: ScreenSnapshot, scroll: int) -> Panel:
    style = Style(color="yellow") if snapshot.mode is Mode.EDITING else Style()
    text = Text(scrolled_text(snapshot.input_value, scroll), no_wrap=True, overflow="crop")
    return Panel(text, title="Input", title_align="left", box=box.SQUARE, padding=0, style=style)


def help_overlay() -> Panel:
    return Panel(Text(), title=HELP_TITLE, title_align="left", box=box.SQUARE, padding=0)


def draw_screen(frame: Frame, area: Rect, snapshot: ScreenSnapshot) -> None:
    """
    Draw the todo screen into ``frame``.

    Regions, top to bottom: todo list, status line, input box, mode
    indicator. The caret is placed only while editing, and the help box is
    drawn last so it sits on top.
    """
    layout = screen_layout(area)

    if has_room_for_border(layout.todo_list):
        frame.render_widget(todo_list(snapshot, layout.todo_list), layout.todo_list)
    frame.render_widget(status_line(snapshot.mode), layout.status)

    # 2 columns for the borders and 1 for the caret
    width = max(layout.input_box.width, 3) - 3
    scroll = visual_scroll(snapshot.input_value, snapshot.input_cursor, width)
    if has_room_for_border(layout.input_box):
        frame.render_widget(input_box(snapshot, scroll), layout.input_box)

    if snapshot.mode is Mode.EDITING:
        cursor = visual_cursor(snapshot.input_value, snapshot.input_cursor)
        frame.set_cursor(
            layout.input_box.x + (max(cursor, scroll) - scroll) + 1,
            layout.input_box.y + 1,
        )

    frame.render_widget(Text(snapshot.mode.display_name, no_wrap=True), layout.mode_indicator)

    if snapshot.mode is Mode.HELP:
        help_area = centered_rect(area, HELP_PERCENT, HELP_PERCENT)
        if has_room_for_border(help_area):
            frame.render_widget(help_overlay(), help_area)
