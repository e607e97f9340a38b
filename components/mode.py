"""Interaction modes of the todo screen."""

from __future__ import annotations

from enum import Enum


class Mode(Enum):
    """Exactly one mode is active at a time; the screen starts in NORMAL."""

    NORMAL = "Normal"
    EDITING = "Editing"
    BROWSE = "Browsing"
    HELP = "Help"

    @property
    def display_name(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value
