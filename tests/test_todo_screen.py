"""Tests for the todo screen state machine."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest
from pubsub import pub

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from common.config import Config
from components.actions import (
    CommitTodo,
    Direction,
    EditInput,
    EnterBrowse,
    EnterEditing,
    EnterHelp,
    ExitMode,
    MoveSelection,
    Render,
    Tick,
    TodoAdded,
)
from components.mode import Mode
from components.sinks import PubSubSink
from components.todo_screen import TodoScreen, map_key, transition
from terminal.keys import KeyEvent, decode_keys
from todos.store import TodoLoadError, TodoStore


class RecordingSink:
    def __init__(self):
        self.sent = []

    def send(self, action):
        self.sent.append(action)


def key(code: str) -> KeyEvent:
    return KeyEvent(code)


def press(screen: TodoScreen, *codes: str) -> None:
    """Feed keys through handle_key_events and update, like the event loop does."""
    for code in codes:
        intent = screen.handle_key_events(key(code))
        if intent is not None:
            screen.update(intent)


def type_text(screen: TodoScreen, text: str) -> None:
    press(screen, *text)


def state(screen: TodoScreen):
    return (screen.mode, screen.store.titles(), screen.input.value, screen.cursor_row)


@pytest.fixture
def screen():
    return TodoScreen(Config(data_path="unused.json"))


# Pure transition function

@pytest.mark.parametrize(
    "mode, intent, expected",
    [
        (Mode.NORMAL, EnterEditing(), Mode.EDITING),
        (Mode.NORMAL, EnterBrowse(), Mode.BROWSE),
        (Mode.NORMAL, EnterHelp(), Mode.HELP),
        (Mode.NORMAL, ExitMode(), Mode.NORMAL),
        (Mode.EDITING, ExitMode(), Mode.NORMAL),
        (Mode.EDITING, CommitTodo(), Mode.EDITING),
        (Mode.EDITING, EnterBrowse(), Mode.EDITING),
        (Mode.BROWSE, ExitMode(), Mode.NORMAL),
        (Mode.BROWSE, MoveSelection(Direction.DOWN), Mode.BROWSE),
        (Mode.BROWSE, EnterHelp(), Mode.BROWSE),
        (Mode.HELP, ExitMode(), Mode.NORMAL),
        (Mode.HELP, EnterEditing(), Mode.HELP),
    ],
)
def test_transition(mode, intent, expected):
    assert transition(mode, intent) is expected


def test_mode_display_names():
    assert [m.display_name for m in Mode] == ["Normal", "Editing", "Browsing", "Help"]


# Key mapping

def test_normal_mode_keys():
    assert map_key(Mode.NORMAL, key("i")) == EnterEditing()
    assert map_key(Mode.NORMAL, key("v")) == EnterBrowse()
    assert map_key(Mode.NORMAL, key("h")) == EnterHelp()
    assert map_key(Mode.NORMAL, key("j")) is None
    assert map_key(Mode.NORMAL, key("esc")) is None
    assert map_key(Mode.NORMAL, KeyEvent.ctrl("i")) is None


def test_editing_mode_keys():
    assert map_key(Mode.EDITING, key("enter")) == CommitTodo()
    assert map_key(Mode.EDITING, key("esc")) == ExitMode()
    assert map_key(Mode.EDITING, key("i")) == EditInput(key("i"))
    assert map_key(Mode.EDITING, key("backspace")) == EditInput(key("backspace"))
    assert map_key(Mode.EDITING, KeyEvent.ctrl("w")) == EditInput(KeyEvent.ctrl("w"))


def test_browse_mode_keys():
    assert map_key(Mode.BROWSE, key("j")) == MoveSelection(Direction.DOWN)
    assert map_key(Mode.BROWSE, key("k")) == MoveSelection(Direction.UP)
    assert map_key(Mode.BROWSE, key("esc")) == ExitMode()
    assert map_key(Mode.BROWSE, key("i")) is None


def test_help_mode_keys():
    assert map_key(Mode.HELP, key("h")) == ExitMode()
    assert map_key(Mode.HELP, key("esc")) is None
    assert map_key(Mode.HELP, key("i")) is None


# Scenarios

def test_initial_state(screen):
    assert state(screen) == (Mode.NORMAL, [], "", 0)


def test_type_and_commit_stays_in_editing(screen):
    press(screen, "i")
    assert screen.mode is Mode.EDITING
    type_text(screen, "Buy milk")
    assert screen.input.value == "Buy milk"
    press(screen, "enter")
    assert screen.store.titles() == ["Buy milk"]
    assert screen.input.value == ""
    assert screen.mode is Mode.EDITING


def test_multiple_commits_keep_order(screen):
    press(screen, "i")
    for title in ["one", "two", "three"]:
        type_text(screen, title)
        press(screen, "enter")
    assert screen.store.titles() == ["one", "two", "three"]


def test_escape_leaves_editing_and_keeps_buffer(screen):
    press(screen, "i")
    type_text(screen, "draft")
    press(screen, "esc")
    assert screen.mode is Mode.NORMAL
    assert screen.input.value == "draft"
    assert screen.store.titles() == []


def test_mode_keys_are_text_while_editing(screen):
    press(screen, "i")
    type_text(screen, "vhijk")
    assert screen.mode is Mode.EDITING
    assert screen.input.value == "vhijk"


def test_browse_clamps_at_end():
    screen = TodoScreen(store=TodoStore())
    for title in ["A", "B", "C"]:
        screen.store.append(title)
    press(screen, "v")
    assert screen.mode is Mode.BROWSE
    press(screen, "j", "j")
    assert screen.cursor_row == 2
    press(screen, "j")
    assert screen.cursor_row == 2


def test_browse_clamps_at_start():
    screen = TodoScreen(store=TodoStore())
    screen.store.append("A")
    screen.store.append("B")
    press(screen, "v", "k", "k")
    assert screen.cursor_row == 0
    press(screen, "j", "k")
    assert screen.cursor_row == 0


def test_browse_empty_store_never_moves(screen):
    press(screen, "v", "j", "j", "k", "j")
    assert screen.cursor_row == 0
    assert screen.snapshot().selected is None


@pytest.mark.parametrize("length", [1, 2, 5])
def test_cursor_row_stays_in_range(length):
    screen = TodoScreen(store=TodoStore())
    for i in range(length):
        screen.store.append(str(i))
    press(screen, "v")
    for code in "jjjkjjjjjkkkkkkkkjkjkjjjjjjjkk":
        press(screen, code)
        assert 0 <= screen.cursor_row <= length - 1


def test_browse_exit_returns_to_normal(screen):
    press(screen, "v", "esc")
    assert screen.mode is Mode.NORMAL


def test_help_toggles_with_h(screen):
    press(screen, "h")
    assert screen.mode is Mode.HELP
    press(screen, "i", "v", "esc", "j")
    assert screen.mode is Mode.HELP
    press(screen, "h")
    assert screen.mode is Mode.NORMAL


def test_unbound_keys_leave_state_unchanged(screen):
    screen.store.append("A")
    noise_by_mode = [
        (None, "xyzjk"),
        ("v", "xyzih"),
        ("h", "xyzjkv"),
    ]
    for enter_key, noise in noise_by_mode:
        if enter_key:
            press(screen, enter_key)
        before = state(screen)
        for code in noise:
            assert screen.handle_key_events(key(code)) is None
        assert state(screen) == before
        press(screen, "h" if screen.mode is Mode.HELP else "esc")
        assert screen.mode is Mode.NORMAL


@pytest.mark.parametrize("enter_key", ["i", "v"])
def test_function_and_modified_keys_keep_mode(screen, enter_key):
    screen.store.append("A")
    press(screen, enter_key)
    before = state(screen)
    for raw in ["\x1b[15~", "\x1b[1;2A", "\x1b[1;5C", "\x1bOP"]:
        for event in decode_keys(raw):
            intent = screen.handle_key_events(event)
            if intent is not None:
                screen.update(intent)
    assert state(screen) == before


def test_intents_for_other_modes_are_ignored(screen):
    screen.update(CommitTodo())
    screen.update(MoveSelection(Direction.DOWN))
    screen.update(ExitMode())
    assert state(screen) == (Mode.NORMAL, [], "", 0)


def test_harness_actions_are_ignored(screen):
    press(screen, "i")
    assert screen.update(Tick()) is None
    assert screen.update(Render()) is None
    assert screen.mode is Mode.EDITING


# Notifications

def test_commit_notifies_sink(screen):
    sink = RecordingSink()
    screen.register_action_handler(sink)
    press(screen, "i")
    type_text(screen, "X")
    press(screen, "enter")
    assert sink.sent == [TodoAdded("X")]


def test_failing_pubsub_listener_is_logged(screen, caplog):
    topic = "todo.test.failing"
    sink = PubSubSink(topic)

    def broken_listener(action):
        raise RuntimeError("listener down")

    pub.subscribe(broken_listener, topic)
    try:
        screen.register_action_handler(sink)
        press(screen, "i", "a", "enter")
    finally:
        pub.unsubAll(topic)

    assert screen.store.titles() == ["a"]
    assert "Failed to send action" in caplog.text


def test_pubsub_sink_delivers(screen):
    topic = "todo.test.delivery"
    received = []

    def listener(action):
        received.append(action)

    pub.subscribe(listener, topic)
    try:
        screen.register_action_handler(PubSubSink(topic))
        press(screen, "i", "o", "k", "enter")
    finally:
        pub.unsubAll(topic)
    assert received == [TodoAdded("ok")]


# Lifecycle

def test_buildup_loads_persisted_items(tmp_path):
    path = tmp_path / "home.json"
    path.write_text('[{"title":"X"}]', encoding="utf-8")
    screen = TodoScreen(Config(data_path=str(path)))
    screen.buildup()
    assert screen.store.titles() == ["X"]


def test_buildup_without_file(tmp_path):
    screen = TodoScreen(Config(data_path=str(tmp_path / "absent.json")))
    screen.buildup()
    assert screen.store.titles() == []


def test_buildup_corrupt_file_raises(tmp_path):
    path = tmp_path / "home.json"
    path.write_text("not json", encoding="utf-8")
    screen = TodoScreen(Config(data_path=str(path)))
    with pytest.raises(TodoLoadError):
        screen.buildup()


def test_teardown_saves(tmp_path, caplog):
    caplog.set_level(logging.INFO)
    path = tmp_path / ".data" / "home.json"
    screen = TodoScreen()
    screen.register_config_handler(Config(data_path=str(path)))
    press(screen, "i", "A", "enter", "B", "enter")
    screen.teardown()
    assert json.loads(path.read_text(encoding="utf-8")) == [{"title": "A"}, {"title": "B"}]
    assert "Saved 2 todos" in caplog.text
