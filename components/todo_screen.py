"""Mode-driven todo list screen.

Key presses are mapped to intents by ``handle_key_events`` according to the
current mode; ``update`` applies an intent to the mode, the store and the
input buffer in one step. Mode changes go through the pure ``transition``
function so the state machine can be exercised without a terminal.
"""

from __future__ import annotations

from typing import Optional

from common.config import Config
from common.logging_setup import get_logger
from components.actions import (
    Action,
    CommitTodo,
    Direction,
    EditInput,
    EnterBrowse,
    EnterEditing,
    EnterHelp,
    ExitMode,
    Intent,
    MoveSelection,
    TodoAdded,
)
from components.input_buffer import InputBuffer
from components.mode import Mode
from components.render import ScreenSnapshot, draw_screen
from components.sinks import ActionSink, NullSink
from terminal.frame import Frame
from terminal.keys import KeyEvent
from terminal.layout import Rect
from todos.store import TodoStore

logger = get_logger(__name__)


_TRANSITIONS: dict[tuple[Mode, type], Mode] = {
    (Mode.NORMAL, EnterEditing): Mode.EDITING,
    (Mode.NORMAL, EnterBrowse): Mode.BROWSE,
    (Mode.NORMAL, EnterHelp): Mode.HELP,
    (Mode.EDITING, ExitMode): Mode.NORMAL,
    (Mode.BROWSE, ExitMode): Mode.NORMAL,
    (Mode.HELP, ExitMode): Mode.NORMAL,
}

# Intents each mode responds to; anything else is ignored by ``update``
_MODE_INTENTS: dict[Mode, tuple[type, ...]] = {
    Mode.NORMAL: (EnterEditing, EnterBrowse, EnterHelp),
    Mode.EDITING: (ExitMode, CommitTodo, EditInput),
    Mode.BROWSE: (ExitMode, MoveSelection),
    Mode.HELP: (ExitMode,),
}

_NORMAL_KEYS = {
    "i": EnterEditing(),
    "v": EnterBrowse(),
    "h": EnterHelp(),
}

_BROWSE_KEYS = {
    "j": MoveSelection(Direction.DOWN),
    "k": MoveSelection(Direction.UP),
    "esc": ExitMode(),
}

_HELP_KEYS = {
    "h": ExitMode(),
}


def transition(mode: Mode, intent: object) -> Mode:
    """Mode that follows ``mode`` once ``intent`` is applied."""
    return _TRANSITIONS.get((mode, type(intent)), mode)


def map_key(mode: Mode, key: KeyEvent) -> Optional[Intent]:
    """Intent a key press means in ``mode``, or None if the key is unbound."""
    if mode is Mode.EDITING:
        if key.modifiers:
            return EditInput(key)
        if key.code == "enter":
            return CommitTodo()
        if key.code == "esc":
            return ExitMode()
        return EditInput(key)
    if key.modifiers:
        return None
    if mode is Mode.NORMAL:
        return _NORMAL_KEYS.get(key.code)
    if mode is Mode.BROWSE:
        return _BROWSE_KEYS.get(key.code)
    return _HELP_KEYS.get(key.code)


class TodoScreen:
    """Owns the todo list, the current mode and the input buffer."""

    def __init__(self, config: Optional[Config] = None, store: Optional[TodoStore] = None) -> None:
        self.config = config or Config()
        self.store = store if store is not None else TodoStore()
        self.mode = Mode.NORMAL
        self.input = InputBuffer()
        self.cursor_row = 0
        self._sink: ActionSink = NullSink()

    def register_action_handler(self, sink: ActionSink) -> None:
        self._sink = sink

    def register_config_handler(self, config: Config) -> None:
        self.config = config

    def buildup(self) -> None:
        """Load the persisted todo list. A corrupt file raises TodoLoadError."""
        self.store = TodoStore.load(self.config.data_path)

    def teardown(self) -> None:
        """Persist the todo list. Write failures raise TodoSaveError."""
        self.store.save(self.config.data_path)
        logger.info(f"Saved {len(self.store)} todos to {self.config.data_path}")

    def handle_key_events(self, key: KeyEvent) -> Optional[Intent]:
        return map_key(self.mode, key)

    def update(self, action: Action) -> Optional[Action]:
        """
        Apply an action to the screen state.

        Intents that do not belong to the current mode, and harness actions
        such as Tick or Render, leave the state untouched.

        Args:
            action: Intent or harness action to apply

        Returns:
            A follow-up action for the harness, if any
        """
        if not isinstance(action, _MODE_INTENTS[self.mode]):
            return None

        next_mode = transition(self.mode, action)
        if isinstance(action, CommitTodo):
            self._commit()
        elif isinstance(action, EditInput):
            self.input.handle_key(action.key)
        elif isinstance(action, MoveSelection):
            self._move_selection(action.direction)

        if next_mode is not self.mode:
            logger.debug(f"Mode {self.mode} -> {next_mode}")
            self.mode = next_mode
        return None

    def _commit(self) -> None:
        item = self.store.append(self.input.value)
        self.input.reset()
        logger.debug(f"Added todo #{len(self.store) - 1}: {item.title!r}")
        self._sink.send(TodoAdded(item.title))

    def _move_selection(self, direction: Direction) -> None:
        if not self.store:
            return
        row = self.cursor_row + direction.value
        self.cursor_row = max(0, min(row, len(self.store) - 1))

    def snapshot(self) -> ScreenSnapshot:
        return ScreenSnapshot(
            mode=self.mode,
            titles=tuple(self.store.titles()),
            input_value=self.input.value,
            input_cursor=self.input.cursor,
            cursor_row=self.cursor_row,
        )

    def draw(self, frame: Frame, area: Rect) -> None:
        draw_screen(frame, area, self.snapshot())
