"""Single-line editable text buffer used while composing a todo."""

from __future__ import annotations

from rich.cells import cell_len

from terminal.keys import KeyEvent


def visual_cursor(value: str, cursor: int) -> int:
    """Cursor position in terminal cells."""
    return cell_len(value[:cursor])


def visual_scroll(value: str, cursor: int, width: int) -> int:
    """Horizontal scroll, in cells, that keeps the cursor inside ``width``."""
    scroll = max(visual_cursor(value, cursor), width) - width
    # Round up to a character boundary so wide characters are not split
    offset = 0
    for ch in value:
        if offset >= scroll:
            break
        offset += cell_len(ch)
    return offset


def scrolled_text(value: str, scroll: int) -> str:
    """The part of ``value`` that starts ``scroll`` cells in."""
    offset = 0
    for index, ch in enumerate(value):
        if offset >= scroll:
            return value[index:]
        offset += cell_len(ch)
    return ""


class InputBuffer:
    """Text plus a cursor measured in characters.

    Scrolling is not stored: ``visual_scroll`` derives it from the cursor
    and the width available at render time.
    """

    def __init__(self, value: str = "") -> None:
        self._value = value
        self._cursor = len(value)

    @property
    def value(self) -> str:
        return self._value

    @property
    def cursor(self) -> int:
        return self._cursor

    def reset(self) -> None:
        self._value = ""
        self._cursor = 0

    def visual_cursor(self) -> int:
        return visual_cursor(self._value, self._cursor)

    def visual_scroll(self, width: int) -> int:
        return visual_scroll(self._value, self._cursor, width)

    def handle_key(self, key: KeyEvent) -> bool:
        """
        Apply an editing key.

        Returns:
            True if the value or cursor changed
        """
        before = (self._value, self._cursor)
        if key.is_printable:
            self._insert(key.code)
        elif key.is_ctrl:
            self._handle_ctrl(key.code)
        elif not key.modifiers:
            self._handle_named(key.code)
        return (self._value, self._cursor) != before

    def _insert(self, text: str) -> None:
        self._value = self._value[:self._cursor] + text + self._value[self._cursor:]
        self._cursor += len(text)

    def _handle_named(self, code: str) -> None:
        if code == "backspace":
            if self._cursor > 0:
                self._value = self._value[:self._cursor - 1] + self._value[self._cursor:]
                self._cursor -= 1
        elif code == "delete":
            self._value = self._value[:self._cursor] + self._value[self._cursor + 1:]
        elif code == "left":
            self._cursor = max(0, self._cursor - 1)
        elif code == "right":
            self._cursor = min(len(self._value), self._cursor + 1)
        elif code == "home":
            self._cursor = 0
        elif code == "end":
            self._cursor = len(self._value)

    def _handle_ctrl(self, code: str) -> None:
        if code == "a":
            self._cursor = 0
        elif code == "e":
            self._cursor = len(self._value)
        elif code == "u":
            self._value = self._value[self._cursor:]
            self._cursor = 0
        elif code == "k":
            self._value = self._value[:self._cursor]
        elif code == "w":
            head = self._value[:self._cursor].rstrip()
            cut = head.rfind(" ") + 1
            self._value = self._value[:cut] + self._value[self._cursor:]
            self._cursor = cut
