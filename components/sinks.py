"""Fire-and-forget channels the screen uses to post actions to the harness."""

from __future__ import annotations

from typing import Protocol

from pubsub import pub

from common.logging_setup import get_logger

logger = get_logger(__name__)

ACTION_TOPIC = "todo.action"


def _action_listener_spec(action: object) -> None:
    """Message signature of the action topic."""


class ActionSink(Protocol):
    def send(self, action: object) -> None:
        ...


class NullSink:
    """Discards every action."""

    def send(self, action: object) -> None:
        pass


class PubSubSink:
    """Publishes actions on a pypubsub topic.

    Listener failures are logged and never reach the caller, so a broken
    subscriber cannot stall key handling.
    """

    def __init__(self, topic: str = ACTION_TOPIC) -> None:
        self.topic = topic
        pub.getDefaultTopicMgr().getOrCreateTopic(topic, _action_listener_spec)

    def send(self, action: object) -> None:
        try:
            pub.sendMessage(self.topic, action=action)
        except Exception as e:
            logger.error(f"Failed to send action {action!r}: {e}")
