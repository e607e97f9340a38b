"""Todo screen component: modes, intents, input buffer and renderer."""

from components.mode import Mode
from components.sinks import ActionSink, NullSink, PubSubSink
from components.todo_screen import TodoScreen, map_key, transition

__all__ = [
    "Mode",
    "ActionSink",
    "NullSink",
    "PubSubSink",
    "TodoScreen",
    "map_key",
    "transition",
]
