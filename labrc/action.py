"""Actions bound to keys, mouse buttons and window rules, with their arguments."""

from __future__ import annotations

import enum
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from labrc.parse_bool import parse_bool
from labrc.textutil import truncate_at_pattern

log = logging.getLogger(__name__)

_ATOI = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


class ActionType(enum.Enum):
    """Kinds of action; each value is the name used in configuration."""

    INVALID = "INVALID"
    NONE = "None"
    CLOSE = "Close"
    KILL = "Kill"
    DEBUG = "Debug"
    EXECUTE = "Execute"
    EXIT = "Exit"
    MOVE_TO_EDGE = "MoveToEdge"
    SNAP_TO_EDGE = "SnapToEdge"
    NEXT_WINDOW = "NextWindow"
    PREVIOUS_WINDOW = "PreviousWindow"
    RECONFIGURE = "Reconfigure"
    SHOW_MENU = "ShowMenu"
    TOGGLE_MAXIMIZE = "ToggleMaximize"
    MAXIMIZE = "Maximize"
    TOGGLE_FULLSCREEN = "ToggleFullscreen"
    TOGGLE_DECORATIONS = "ToggleDecorations"
    TOGGLE_ALWAYS_ON_TOP = "ToggleAlwaysOnTop"
    TOGGLE_ALWAYS_ON_BOTTOM = "ToggleAlwaysOnBottom"
    FOCUS = "Focus"
    ICONIFY = "Iconify"
    MOVE = "Move"
    RAISE = "Raise"
    LOWER = "Lower"
    RESIZE = "Resize"
    RESIZE_RELATIVE = "ResizeRelative"
    MOVETO = "MoveTo"
    MOVE_RELATIVE = "MoveRelative"
    SEND_TO_DESKTOP = "SendToDesktop"
    GO_TO_DESKTOP = "GoToDesktop"
    SNAP_TO_REGION = "SnapToRegion"
    TOGGLE_KEYBINDS = "ToggleKeybinds"
    FOCUS_OUTPUT = "FocusOutput"


class ViewEdge(enum.IntEnum):
    """Screen edges a view can be moved or snapped to."""

    INVALID = 0
    LEFT = 1
    RIGHT = 2
    UP = 3
    DOWN = 4
    CENTER = 5


_EDGE_NAMES = {
    "left": ViewEdge.LEFT,
    "right": ViewEdge.RIGHT,
    "up": ViewEdge.UP,
    "down": ViewEdge.DOWN,
    "center": ViewEdge.CENTER,
}


def view_edge_parse(text: str | None) -> ViewEdge:
    """Return the edge named by *text*, ignoring case, or ``ViewEdge.INVALID``."""
    if text is None:
        return ViewEdge.INVALID
    return _EDGE_NAMES.get(text.lower(), ViewEdge.INVALID)


_REQUIRED_ARG = {
    ActionType.EXECUTE: "command",
    ActionType.MOVE_TO_EDGE: "direction",
    ActionType.SNAP_TO_EDGE: "direction",
    ActionType.SHOW_MENU: "menu",
    ActionType.GO_TO_DESKTOP: "to",
    ActionType.SEND_TO_DESKTOP: "to",
    ActionType.SNAP_TO_REGION: "region",
    ActionType.FOCUS_OUTPUT: "output",
}


@dataclass
class ActionArg:
    """One named argument of an action."""

    key: str
    value: str | bool | int


@dataclass
class Action:
    """An action of a given type with its ordered arguments."""

    type: ActionType
    args: list[ActionArg] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.type.value

    def add_str(self, key: str, value: str) -> None:
        if value is None:
            raise ValueError("Tried to add None action string argument")
        self.args.append(ActionArg(key, str(value)))

    def add_bool(self, key: str, value: bool) -> None:
        self.args.append(ActionArg(key, bool(value)))

    def add_int(self, key: str, value: int) -> None:
        self.args.append(ActionArg(key, int(value)))

    def add_arg_from_xml_node(self, nodename: str, content: str) -> None:
        """Add the argument an ``<action>`` child element or attribute gives.

        Arguments that do not belong to this action type are logged and
        dropped.
        """
        argument = truncate_at_pattern(nodename, ".action")
        kind = self.type

        if kind is ActionType.EXECUTE:
            # <execute> is deprecated but still accepted.
            if argument in ("command", "execute"):
                self.add_str("command", content)
                return
        elif kind in (ActionType.MOVE_TO_EDGE, ActionType.SNAP_TO_EDGE):
            if argument == "direction":
                edge = view_edge_parse(content)
                if edge is ViewEdge.INVALID or (
                    edge is ViewEdge.CENTER and kind is not ActionType.SNAP_TO_EDGE
                ):
                    log.error(
                        "Invalid argument for action %s: '%s' (%s)",
                        self.name, argument, content,
                    )
                else:
                    self.add_int(argument, edge)
                return
        elif kind is ActionType.SHOW_MENU:
            if argument == "menu":
                self.add_str(argument, content)
                return
        elif kind is ActionType.RESIZE_RELATIVE:
            if argument in ("left", "right", "top", "bottom"):
                self.add_int(argument, _atoi(content))
                return
        elif kind in (ActionType.MOVETO, ActionType.MOVE_RELATIVE):
            if argument in ("x", "y"):
                self.add_int(argument, _atoi(content))
                return
        elif kind in (ActionType.SEND_TO_DESKTOP, ActionType.GO_TO_DESKTOP):
            if kind is ActionType.SEND_TO_DESKTOP and argument == "follow":
                self.add_bool(argument, parse_bool(content, True))
                return
            if argument == "to":
                self.add_str(argument, content)
                return
            if argument == "wrap":
                self.add_bool(argument, parse_bool(content, True))
                return
        elif kind is ActionType.SNAP_TO_REGION:
            if argument == "region":
                self.add_str(argument, content)
                return
        elif kind is ActionType.FOCUS_OUTPUT:
            if argument == "output":
                self.add_str(argument, content)
                return

        log.error("Invalid argument for action %s: '%s'", self.name, argument)

    def _find(self, key: str) -> ActionArg | None:
        wanted = key.lower()
        return next((arg for arg in self.args if arg.key.lower() == wanted), None)

    def has_arg(self, key: str) -> bool:
        """Whether an argument named *key* (ignoring case) exists."""
        return self._find(key) is not None

    def get_str(self, key: str, default: str | None = None) -> str | None:
        arg = self._find(key)
        if arg is None:
            return default
        if not isinstance(arg.value, str):
            raise TypeError(f"argument {key!r} is not a string")
        return arg.value

    def get_bool(self, key: str, default: bool) -> bool:
        arg = self._find(key)
        if arg is None:
            return default
        if not isinstance(arg.value, bool):
            raise TypeError(f"argument {key!r} is not a boolean")
        return arg.value

    def get_int(self, key: str, default: int) -> int:
        arg = self._find(key)
        if arg is None:
            return default
        if isinstance(arg.value, bool) or not isinstance(arg.value, int):
            raise TypeError(f"argument {key!r} is not an integer")
        return arg.value

    def first_arg(self) -> ActionArg | None:
        return self.args[0] if self.args else None

    def is_valid(self) -> bool:
        """Whether every argument this action type requires is present."""
        required = _REQUIRED_ARG.get(self.type)
        if required is None or self.has_arg(required):
            return True
        log.error("Missing required argument for %s: %s", self.name, required)
        return False


def action_type_from_str(name: str) -> ActionType:
    """Return the action type named *name*, ignoring case."""
    wanted = name.lower()
    for kind in ActionType:
        if kind is not ActionType.INVALID and kind.value.lower() == wanted:
            return kind
    log.error("Invalid action: %s", name)
    return ActionType.INVALID


def create_action(name: str | None) -> Action | None:
    """Create an action by name.

    Returns ``None`` for a missing name and for the ``None`` action, which
    stands for "no action". Unknown names give an ``INVALID`` action.
    """
    if name is None:
        log.error("action name not specified")
        return None
    kind = action_type_from_str(name)
    if kind is ActionType.NONE:
        return None
    return Action(kind)


def actions_contain_toggle_keybinds(actions: Iterable[Action]) -> bool:
    return any(action.type is ActionType.TOGGLE_KEYBINDS for action in actions)