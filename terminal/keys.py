"""Key events and the background terminal key reader."""

from __future__ import annotations

import codecs
import os
import queue
import sys
import threading
import time
from dataclasses import dataclass, field
from typing import TextIO

from common.logging_setup import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class KeyEvent:
    """A decoded key press.

    ``code`` is either a single printable character or a named key such as
    ``"enter"``, ``"esc"``, ``"backspace"`` or ``"left"``. Control chords are
    reported as the lowercase letter with ``"ctrl"`` in ``modifiers``.
    """

    code: str
    modifiers: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def ctrl(cls, letter: str) -> "KeyEvent":
        return cls(letter.lower(), frozenset({"ctrl"}))

    @property
    def is_ctrl(self) -> bool:
        return "ctrl" in self.modifiers

    @property
    def is_printable(self) -> bool:
        return len(self.code) == 1 and self.code.isprintable() and not self.modifiers

    def __str__(self) -> str:
        if self.modifiers:
            return "+".join(sorted(self.modifiers) + [self.code])
        return self.code


_CSI_KEYS = {
    "[A": "up",
    "[B": "down",
    "[C": "right",
    "[D": "left",
    "[H": "home",
    "[F": "end",
    "OH": "home",
    "OF": "end",
    "[1~": "home",
    "[7~": "home",
    "[4~": "end",
    "[8~": "end",
    "[3~": "delete",
    "[5~": "pgup",
    "[6~": "pgdn",
}

_WINDOWS_KEYS = {
    "H": "up",
    "P": "down",
    "K": "left",
    "M": "right",
    "G": "home",
    "O": "end",
    "S": "delete",
    "I": "pgup",
    "Q": "pgdn",
}


def decode_char(ch: str) -> KeyEvent | None:
    """Decode a single character read from a raw-mode terminal."""
    if ch in ("\r", "\n"):
        return KeyEvent("enter")
    if ch == "\t":
        return KeyEvent("tab")
    if ch in ("\x7f", "\x08"):
        return KeyEvent("backspace")
    if ch == "\x1b":
        return KeyEvent("esc")
    code = ord(ch)
    if 1 <= code <= 26:
        return KeyEvent.ctrl(chr(code + ord("a") - 1))
    if ch.isprintable():
        return KeyEvent(ch)
    return None


def decode_keys(data: str) -> list[KeyEvent]:
    """
    Decode a chunk of raw terminal input into key events.

    A chunk may hold several keys (fast typing or a paste). An ESC that is
    followed by ``[`` or ``O`` starts a CSI/SS3 sequence, which is dropped
    when it names a key with no mapping (function keys, modified arrows).
    An ESC followed by any other character is reported as that character
    with ``alt``; a trailing ESC is the Escape key itself.

    Args:
        data: Characters read from the terminal in one go

    Returns:
        Decoded keys in input order; unmappable input is dropped
    """
    keys: list[KeyEvent] = []
    i = 0
    while i < len(data):
        ch = data[i]
        i += 1
        if ch != "\x1b" or i >= len(data):
            key = decode_char(ch)
            if key:
                keys.append(key)
            continue
        nxt = data[i]
        if nxt in ("[", "O"):
            end = i + 1
            while end < len(data) and not (data[end].isalpha() or data[end] == "~"):
                end += 1
            sequence = data[i:end + 1]
            i = end + 1
            name = _CSI_KEYS.get(sequence)
            if name:
                keys.append(KeyEvent(name))
        elif nxt == "\x1b":
            keys.append(KeyEvent("esc"))
        else:
            i += 1
            key = decode_char(nxt)
            if key:
                keys.append(KeyEvent(key.code, key.modifiers | {"alt"}))
    return keys


def _read_key_windows() -> KeyEvent | None:
    import msvcrt

    ch = msvcrt.getwch()
    if ch in ("\x00", "\xe0"):
        name = _WINDOWS_KEYS.get(msvcrt.getwch())
        return KeyEvent(name) if name else None
    return decode_char(ch)


class KeyReader:
    """Reads keys on a daemon thread and queues them for the event loop.

    On POSIX the terminal is put in raw mode for as long as the reader runs
    and restored when it stops.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdin
        self._queue: queue.Queue[KeyEvent] = queue.Queue()
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            daemon=True,
            name="ui-key-reader",
        )

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread.is_alive():
            self._thread.join(timeout=1.0)

    def get_key(self) -> KeyEvent | None:
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def _run(self) -> None:
        try:
            if os.name == "nt":
                self._run_windows()
            else:
                self._run_posix()
        except Exception as e:
            logger.error(f"Key reader stopped: {e}")

    def _run_windows(self) -> None:
        import msvcrt

        while not self._stop_event.is_set():
            if not msvcrt.kbhit():
                time.sleep(0.05)
                continue
            key = _read_key_windows()
            if key:
                self._queue.put(key)

    def _run_posix(self) -> None:
        import select
        import termios
        import tty

        fd = self._stream.fileno()
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        old_settings = termios.tcgetattr(fd)
        tty.setraw(fd)
        try:
            while not self._stop_event.is_set():
                readable, _, _ = select.select([fd], [], [], 0.1)
                if not readable:
                    continue
                chunk = os.read(fd, 1024)
                if not chunk:
                    break
                for key in decode_keys(decoder.decode(chunk)):
                    self._queue.put(key)
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
