"""Terminal plumbing: key input, frame drawing and the event loop."""

from terminal.frame import Frame
from terminal.keys import KeyEvent, KeyReader, decode_keys
from terminal.layout import Rect

__all__ = ["Frame", "KeyEvent", "KeyReader", "Rect", "decode_keys"]
