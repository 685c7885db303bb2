"""Mouse bindings: the context, button or scroll direction, event and actions."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from labrc.action import Action
from labrc.keybind import Modifier, parse_modifier

log = logging.getLogger(__name__)


class Button(enum.IntEnum):
    """Mouse buttons, numbered by their input event codes."""

    LEFT = 0x110
    RIGHT = 0x111
    MIDDLE = 0x112


class Direction(enum.IntEnum):
    """Scroll directions."""

    INVALID = 0
    LEFT = 1
    RIGHT = 2
    UP = 3
    DOWN = 4


class MouseEvent(enum.IntEnum):
    """The kind of pointer event a binding reacts to."""

    NONE = 0
    DOUBLECLICK = 1
    CLICK = 2
    PRESS = 3
    RELEASE = 4
    DRAG = 5
    SCROLL = 6


class SsdContext(enum.Enum):
    """Parts of the screen and of window decorations a binding applies to."""

    NONE = enum.auto()
    BUTTON_CLOSE = enum.auto()
    BUTTON_MAXIMIZE = enum.auto()
    BUTTON_ICONIFY = enum.auto()
    BUTTON_WINDOW_MENU = enum.auto()
    TITLEBAR = enum.auto()
    TITLE = enum.auto()
    CORNER_TOP_LEFT = enum.auto()
    CORNER_TOP_RIGHT = enum.auto()
    CORNER_BOTTOM_RIGHT = enum.auto()
    CORNER_BOTTOM_LEFT = enum.auto()
    TOP = enum.auto()
    RIGHT = enum.auto()
    BOTTOM = enum.auto()
    LEFT = enum.auto()
    FRAME = enum.auto()
    CLIENT = enum.auto()
    ROOT = enum.auto()


_BUTTONS = {
    "left": Button.LEFT,
    "right": Button.RIGHT,
    "middle": Button.MIDDLE,
}

_DIRECTIONS = {
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
    "up": Direction.UP,
    "down": Direction.DOWN,
}

_EVENTS = {
    "doubleclick": MouseEvent.DOUBLECLICK,
    "click": MouseEvent.CLICK,
    "press": MouseEvent.PRESS,
    "release": MouseEvent.RELEASE,
    "drag": MouseEvent.DRAG,
    "scroll": MouseEvent.SCROLL,
}

_CONTEXTS = {
    "close": SsdContext.BUTTON_CLOSE,
    "maximize": SsdContext.BUTTON_MAXIMIZE,
    "iconify": SsdContext.BUTTON_ICONIFY,
    "windowmenu": SsdContext.BUTTON_WINDOW_MENU,
    "titlebar": SsdContext.TITLEBAR,
    "title": SsdContext.TITLE,
    "tlcorner": SsdContext.CORNER_TOP_LEFT,
    "trcorner": SsdContext.CORNER_TOP_RIGHT,
    "brcorner": SsdContext.CORNER_BOTTOM_RIGHT,
    "blcorner": SsdContext.CORNER_BOTTOM_LEFT,
    "top": SsdContext.TOP,
    "right": SsdContext.RIGHT,
    "bottom": SsdContext.BOTTOM,
    "left": SsdContext.LEFT,
    "frame": SsdContext.FRAME,
    "client": SsdContext.CLIENT,
    "desktop": SsdContext.ROOT,
    "root": SsdContext.ROOT,
}


def _split_modifiers(text: str, what: str) -> tuple[Modifier, str]:
    modifiers = Modifier.NONE
    while len(text) >= 2 and text[1] == "-":
        modifier = parse_modifier(text[0])
        if not modifier:
            log.error("unknown %s (%s)", what, text)
            raise ValueError(f"unknown {what} ({text})")
        modifiers |= modifier
        text = text[2:]
    return modifiers, text


def button_from_str(text: str) -> tuple[Button, Modifier]:
    """Parse a button such as ``Left`` or ``A-Right`` into button and modifiers.

    Raises ``ValueError`` for an unknown button or modifier.
    """
    modifiers, name = _split_modifiers(text, "button")
    button = _BUTTONS.get(name.lower())
    if button is None:
        log.error("unknown button (%s)", name)
        raise ValueError(f"unknown button ({name})")
    return button, modifiers


def direction_from_str(text: str) -> tuple[Direction, Modifier]:
    """Parse a scroll direction such as ``Up`` or ``C-Down``.

    Raises ``ValueError`` for an unknown direction or modifier.
    """
    modifiers, name = _split_modifiers(text, "direction")
    direction = _DIRECTIONS.get(name.lower())
    if direction is None:
        log.error("unknown direction (%s)", name)
        raise ValueError(f"unknown direction ({name})")
    return direction, modifiers


def event_from_str(text: str) -> MouseEvent:
    """Parse a mouse event name, ignoring case.

    Raises ``ValueError`` for an unknown event.
    """
    event = _EVENTS.get(text.lower())
    if event is None:
        log.error("unknown mouse action (%s)", text)
        raise ValueError(f"unknown mouse action ({text})")
    return event


def context_from_str(text: str) -> SsdContext:
    """Parse a context name, ignoring case; unknown names give ``SsdContext.NONE``."""
    context = _CONTEXTS.get(text.lower())
    if context is None:
        log.error("unknown mouse context (%s)", text)
        return SsdContext.NONE
    return context


@dataclass
class Mousebind:
    """A pointer event in a context and the actions it runs."""

    context: SsdContext
    button: int = 0
    direction: Direction = Direction.INVALID
    mouse_event: MouseEvent = MouseEvent.NONE
    modifiers: Modifier = Modifier.NONE
    actions: list[Action] = field(default_factory=list)
    pressed_in_context: bool = False

    def same_as(self, other: Mousebind) -> bool:
        return (
            self.context == other.context
            and self.button == other.button
            and self.direction == other.direction
            and self.mouse_event == other.mouse_event
            and self.modifiers == other.modifiers
        )


def create_mousebind(context: str | None) -> Mousebind:
    """Create a binding for the named context.

    An unknown context gives a binding whose context is ``SsdContext.NONE``;
    such bindings are not meant to be registered. Raises ``ValueError`` when
    no context is given.
    """
    if context is None:
        log.error("mousebind context not specified")
        raise ValueError("mousebind context not specified")
    return Mousebind(context_from_str(context))