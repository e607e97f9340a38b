"""Event loop that drives the todo screen in a live terminal."""

from __future__ import annotations

import queue
import time
from typing import Optional

from pubsub import pub
from rich.console import Console
from rich.live import Live

from common.config import Config
from common.logging_setup import get_logger
from components.actions import Action, Quit, Render, Tick, TodoAdded
from components.sinks import PubSubSink
from components.todo_screen import TodoScreen
from terminal.frame import Frame
from terminal.keys import KeyEvent, KeyReader

logger = get_logger(__name__)

QUIT_KEYS = {KeyEvent.ctrl("c"), KeyEvent.ctrl("d")}

# Upper bound on how long the loop sleeps between polls
POLL_INTERVAL = 0.01


class App:
    """
    Runs the todo screen until the user quits.

    Keys come from a KeyReader thread; ticks and frames are scheduled from
    the configured rates. Every action, including those the screen posts
    through its sink, passes through one queue and is applied on the loop
    thread.
    """

    def __init__(
        self,
        config: Config,
        screen: Optional[TodoScreen] = None,
        console: Optional[Console] = None,
        key_reader: Optional[KeyReader] = None,
    ) -> None:
        self.config = config
        self.screen = screen or TodoScreen(config)
        self.console = console or Console()
        self.key_reader = key_reader or KeyReader()
        self.sink = PubSubSink()
        self.should_quit = False
        self._actions: queue.Queue[Action] = queue.Queue()
        self._dirty = True
        self._last_size = None

    def _on_action(self, action: object) -> None:
        self._actions.put(action)  # type: ignore[arg-type]

    def handle_key(self, key: KeyEvent) -> None:
        if key in QUIT_KEYS:
            self._actions.put(Quit())
            return
        intent = self.screen.handle_key_events(key)
        if intent is not None:
            self._actions.put(intent)

    def render(self) -> Frame:
        frame = Frame.for_console(self.console)
        self.screen.draw(frame, frame.size())
        return frame

    def dispatch(self, live: Optional[Live] = None) -> None:
        """Apply every queued action."""
        while True:
            try:
                action = self._actions.get_nowait()
            except queue.Empty:
                return
            if isinstance(action, Quit):
                self.should_quit = True
            elif isinstance(action, Render):
                size = self.console.size
                if live is not None and (self._dirty or size != self._last_size):
                    live.update(self.render(), refresh=True)
                    self._dirty = False
                    self._last_size = size
            elif isinstance(action, TodoAdded):
                logger.info(f"Todo added: {action.title!r}")
            elif not isinstance(action, Tick):
                follow_up = self.screen.update(action)
                if follow_up is not None:
                    self._actions.put(follow_up)
                self._dirty = True

    def run(self) -> None:
        """Load, run the loop until quit, then save."""
        self.screen.register_config_handler(self.config)
        self.screen.register_action_handler(self.sink)
        self.screen.buildup()

        tick_interval = 1.0 / self.config.tick_rate
        frame_interval = 1.0 / self.config.frame_rate
        pub.subscribe(self._on_action, self.sink.topic)
        self.key_reader.start()
        try:
            with Live(
                self.render(),
                console=self.console,
                screen=True,
                auto_refresh=False,
            ) as live:
                next_tick = next_frame = time.monotonic()
                while not self.should_quit:
                    key = self.key_reader.get_key()
                    while key is not None:
                        # Each key is mapped against the mode left by the previous one
                        self.handle_key(key)
                        self.dispatch(live)
                        key = self.key_reader.get_key()
                    now = time.monotonic()
                    if now >= next_tick:
                        self._actions.put(Tick())
                        next_tick = now + tick_interval
                    if now >= next_frame:
                        self._actions.put(Render())
                        next_frame = now + frame_interval
                    self.dispatch(live)
                    time.sleep(min(POLL_INTERVAL, frame_interval))
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")
        finally:
            self.key_reader.stop()
            pub.unsubscribe(self._on_action, self.sink.topic)

        self.screen.teardown()
