"""Intents produced by key handling and consumed by ``update``.

Each intent is its own frozen dataclass so handlers can match on type
without sharing fields across variants.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from terminal.keys import KeyEvent


class Direction(Enum):
    UP = -1
    DOWN = 1


@dataclass(frozen=True)
class EnterEditing:
    pass


@dataclass(frozen=True)
class EnterBrowse:
    pass


@dataclass(frozen=True)
class EnterHelp:
    pass


@dataclass(frozen=True)
class ExitMode:
    pass


@dataclass(frozen=True)
class CommitTodo:
    pass


@dataclass(frozen=True)
class EditInput:
    key: KeyEvent


@dataclass(frozen=True)
class MoveSelection:
    direction: Direction


@dataclass(frozen=True)
class TodoAdded:
    """Notification that a todo was appended to the store."""

    title: str


# Harness-level actions
@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Render:
    pass


@dataclass(frozen=True)
class Quit:
    pass


Intent = Union[
    EnterEditing,
    EnterBrowse,
    EnterHelp,
    ExitMode,
    CommitTodo,
    EditInput,
    MoveSelection,
]

Action = Union[Intent, TodoAdded, Tick, Render, Quit]
