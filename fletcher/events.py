"""Global event system for decoupling user feedback from the quiver engine.

This event bus carries feedback only. The quiver core publishes to it and
never waits on it, so a game front end can subscribe whatever widgets it has.

USE FOR:
- One-line status messages ("Nothing suitable", "You are too injured...")
- Audio cues (the quiver-change sound)
- Redraw notifications for the quiver and wielded-weapon displays

DO NOT USE FOR:
- Action validity or enablement (use the Action queries)
- Operations that need immediate return values or synchronous confirmation
- Error handling or exception propagation

The event bus is fire-and-forget: publish an event without expecting return values
or confirmations. All handlers execute immediately (synchronously). If you need a
return value or confirmation, use direct method calls.
"""

import logging
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass
from enum import Enum, auto

from fletcher import colors

logger = logging.getLogger(__name__)


class MessageChannel(Enum):
    """Which message stream a status line belongs to."""

    PLAIN = auto()
    WARNING = auto()
    ERROR = auto()


@dataclass
class GameEvent:
    """Base class for all game events."""

    pass


@dataclass
class MessageEvent(GameEvent):
    """Event for adding a status line to the message log."""

    text: str
    color: colors.Color = colors.MESSAGE_PLAIN
    channel: MessageChannel = MessageChannel.PLAIN


@dataclass
class SoundEvent(GameEvent):
    """Event for triggering a one-shot sound effect."""

    sound_id: str


@dataclass
class QuiverRedrawEvent(GameEvent):
    """Event signalling that quiver displays are out of date.

    Attributes:
        weapon_changed: True when the wielded-weapon display must also be
            redrawn (the launcher quiver is shown alongside the weapon).
    """

    weapon_changed: bool = False


@dataclass
class ClearMessagesEvent(GameEvent):
    """Event asking the message log to drop its temporary lines."""

    pass


class EventBus:
    """Simple event bus for publish/subscribe pattern."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable]] = {}

    def subscribe(self, event_type: type, handler: Callable) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Callable) -> None:
        """Unsubscribe a handler from an event type."""
        if event_type in self._handlers:
            with suppress(ValueError):
                self._handlers[event_type].remove(handler)

    def publish(self, event: GameEvent) -> None:
        """Publish an event to all subscribed handlers."""
        event_type = type(event)
        if event_type in self._handlers:
            for handler in self._handlers[event_type]:
                try:
                    handler(event)
                except Exception:
                    logger.exception(f"Error handling event {event_type.__name__}")


# Global event bus instance
_global_event_bus = EventBus()


# Public API functions


def subscribe_to_event(event_type: type, handler: Callable) -> None:
    """Subscribe to an event type globally."""
    _global_event_bus.subscribe(event_type, handler)


def unsubscribe_from_event(event_type: type, handler: Callable) -> None:
    """Unsubscribe from an event type globally."""
    _global_event_bus.unsubscribe(event_type, handler)


def publish_event(event: GameEvent) -> None:
    """Publish an event globally."""
    _global_event_bus.publish(event)


def message(text: str, channel: MessageChannel = MessageChannel.PLAIN) -> None:
    """Publish a status line on the given channel."""
    color = {
        MessageChannel.PLAIN: colors.MESSAGE_PLAIN,
        MessageChannel.WARNING: colors.MESSAGE_WARNING,
        MessageChannel.ERROR: colors.MESSAGE_ERROR,
    }[channel]
    publish_event(MessageEvent(text=text, color=color, channel=channel))


def reset_event_bus_for_testing() -> None:
    """Reset the global event bus. Use only in tests."""
    global _global_event_bus
    _global_event_bus = EventBus()
