"""The compositor configuration model: defaults, built-in bindings and checks."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

from labrc.action import Action, create_action
from labrc.keybind import Keybind, create_keybind
from labrc.libinput import LibinputCategory, default_category
from labrc.mousebind import (
    MouseEvent,
    Mousebind,
    SsdContext,
    button_from_str,
    create_mousebind,
    direction_from_str,
    event_from_str,
)

log = logging.getLogger(__name__)


class FontSlant(enum.Enum):
    NORMAL = enum.auto()
    ITALIC = enum.auto()


class FontWeight(enum.Enum):
    NORMAL = enum.auto()
    BOLD = enum.auto()


@dataclass
class Font:
    """A font description; ``name`` is filled in by post-processing if unset."""

    name: str | None = None
    size: int = 10
    slant: FontSlant = FontSlant.NORMAL
    weight: FontWeight = FontWeight.NORMAL


class Property(enum.Enum):
    """A tri-state setting: explicitly on, explicitly off, or left alone."""

    UNSET = enum.auto()
    FALSE = enum.auto()
    TRUE = enum.auto()


@dataclass
class UsableAreaOverride:
    """Margins reserved on an output (or on all outputs if ``output`` is None)."""

    output: str | None = None
    left: int = 0
    right: int = 0
    top: int = 0
    bottom: int = 0


@dataclass
class Region:
    """A named snapping region, given in percent of the output."""

    name: str | None = None
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    def _is_valid(self) -> bool:
        return (
            self.name is not None
            and 0 <= self.x <= 100
            and 0 <= self.y <= 100
            and 0 < self.width <= 100
            and 0 < self.height <= 100
        )


class FieldContent(enum.Enum):
    NONE = enum.auto()
    TYPE = enum.auto()
    APP_ID = enum.auto()
    TITLE = enum.auto()


@dataclass
class WindowSwitcherField:
    """One column of the window switcher, its width in percent."""

    content: FieldContent = FieldContent.NONE
    width: int = 0


@dataclass
class WindowSwitcher:
    show: bool = True
    preview: bool = True
    outlines: bool = True
    fields: list[WindowSwitcherField] = field(default_factory=list)


class WindowRuleEvent(enum.Enum):
    ON_FIRST_MAP = enum.auto()


@dataclass
class WindowRule:
    """Criteria matching windows and what to do with the ones that match."""

    identifier: str | None = None
    title: str | None = None
    match_once: bool = False
    event: WindowRuleEvent = WindowRuleEvent.ON_FIRST_MAP
    server_decoration: Property = Property.UNSET
    skip_taskbar: Property = Property.UNSET
    skip_window_switcher: Property = Property.UNSET
    actions: list[Action] = field(default_factory=list)


@dataclass
class WorkspaceConfig:
    """Workspace names and the popup time; ``None`` means not configured."""

    names: list[str] = field(default_factory=list)
    popuptime: int | None = None
    min_nr_workspaces: int = 1


_KEY_COMBOS: tuple[tuple[str, str, str | None, str | None], ...] = (
    ("A-Tab", "NextWindow", None, None),
    ("W-Return", "Execute", "command", "alacritty"),
    ("A-F3", "Execute", "command", "bemenu-run"),
    ("A-F4", "Close", None, None),
    ("W-a", "ToggleMaximize", None, None),
    ("A-Left", "MoveToEdge", "direction", "left"),
    ("A-Right", "MoveToEdge", "direction", "right"),
    ("A-Up", "MoveToEdge", "direction", "up"),
    ("A-Down", "MoveToEdge", "direction", "down"),
    ("W-Left", "SnapToEdge", "direction", "left"),
    ("W-Right", "SnapToEdge", "direction", "right"),
    ("W-Up", "SnapToEdge", "direction", "up"),
    ("W-Down", "SnapToEdge", "direction", "down"),
    ("A-Space", "ShowMenu", "menu", "client-menu"),
    ("XF86_AudioLowerVolume", "Execute", "command", "amixer sset Master 5%-"),
    ("XF86_AudioRaiseVolume", "Execute", "command", "amixer sset Master 5%+"),
    ("XF86_AudioMute", "Execute", "command", "amixer sset Master toggle"),
    ("XF86_MonBrightnessUp", "Execute", "command", "brightnessctl set +10%"),
    ("XF86_MonBrightnessDown", "Execute", "command", "brightnessctl set 10%-"),
)

# context, button or direction, event, action, attribute, value
_MOUSE_COMBOS: tuple[tuple[str, str, str, str, str | None, str | None], ...] = (
    ("Left", "Left", "Drag", "Resize", None, None),
    ("Top", "Left", "Drag", "Resize", None, None),
    ("Bottom", "Left", "Drag", "Resize", None, None),
    ("Right", "Left", "Drag", "Resize", None, None),
    ("TLCorner", "Left", "Drag", "Resize", None, None),
    ("TRCorner", "Left", "Drag", "Resize", None, None),
    ("BRCorner", "Left", "Drag", "Resize", None, None),
    ("BLCorner", "Left", "Drag", "Resize", None, None),
    ("Frame", "A-Left", "Press", "Focus", None, None),
    ("Frame", "A-Left", "Press", "Raise", None, None),
    ("Frame", "A-Left", "Drag", "Move", None, None),
    ("Frame", "A-Right", "Press", "Focus", None, None),
    ("Frame", "A-Right", "Press", "Raise", None, None),
    ("Frame", "A-Right", "Drag", "Resize", None, None),
    ("Titlebar", "Left", "Press", "Focus", None, None),
    ("Titlebar", "Left", "Press", "Raise", None, None),
    ("Title", "Left", "Drag", "Move", None, None),
    ("Title", "Left", "DoubleClick", "ToggleMaximize", None, None),
    ("TitleBar", "Right", "Click", "Focus", None, None),
    ("TitleBar", "Right", "Click", "Raise", None, None),
    ("TitleBar", "Right", "Click", "ShowMenu", "menu", "client-menu"),
    ("Close", "Left", "Click", "Close", None, None),
    ("Iconify", "Left", "Click", "Iconify", None, None),
    ("Maximize", "Left", "Click", "ToggleMaximize", None, None),
    ("WindowMenu", "Left", "Click", "ShowMenu", "menu", "client-menu"),
    ("Root", "Left", "Press", "ShowMenu", "menu", "root-menu"),
    ("Root", "Right", "Press", "ShowMenu", "menu", "root-menu"),
    ("Root", "Middle", "Press", "ShowMenu", "menu", "root-menu"),
    ("Root", "Up", "Scroll", "GoToDesktop", "to", "left"),
    ("Root", "Down", "Scroll", "GoToDesktop", "to", "right"),
    ("Client", "Left", "Press", "Focus", None, None),
    ("Client", "Left", "Press", "Raise", None, None),
    ("Client", "Right", "Press", "Focus", None, None),
    ("Client", "Right", "Press", "Raise", None, None),
    ("Client", "Middle", "Press", "Focus", None, None),
    ("Client", "Middle", "Press", "Raise", None, None),
)

_DEFAULT_FIELDS: tuple[tuple[FieldContent, int], ...] = (
    (FieldContent.TYPE, 25),
    (FieldContent.APP_ID, 25),
    (FieldContent.TITLE, 50),
)


class _Binding(Protocol):
    actions: list[Action]

    def same_as(self, other: _Binding) -> bool: ...


_B = TypeVar("_B", Keybind, Mousebind)


def _deduplicate(bindings: list[_B], what: str) -> None:
    """Drop bindings that a later equal one replaces, then empty ones."""
    kept = [
        binding
        for index, binding in enumerate(bindings)
        if not any(binding.same_as(later) for later in bindings[index + 1:])
    ]
    replaced = len(bindings) - len(kept)
    non_empty = [binding for binding in kept if binding.actions]
    cleared = len(kept) - len(non_empty)
    bindings[:] = non_empty
    if replaced:
        log.debug("Replaced %u %s", replaced, what)
    if cleared:
        log.debug("Cleared %u %s", cleared, what)


def _drop_invalid_actions(actions: list[Action], what: str) -> None:
    valid = [action for action in actions if action.is_valid()]
    for _ in range(len(actions) - len(valid)):
        log.error("Removed invalid %s action", what)
    actions[:] = valid


@dataclass
class RcConfig:
    """All settings read from the configuration file."""

    config_dir: str | None = None
    xdg_shell_server_side_deco: bool = True
    gap: int = 0
    adaptive_sync: bool = False
    reuse_output_mode: bool = False
    theme_name: str | None = None
    corner_radius: int = 8
    font_activewindow: Font = field(default_factory=Font)
    font_menuitem: Font = field(default_factory=Font)
    font_osd: Font = field(default_factory=Font)
    focus_follow_mouse: bool = False
    focus_follow_mouse_requires_movement: bool = True
    raise_on_focus: bool = False
    doubleclick_time: int = 500
    scroll_factor: float = 1.0
    repeat_rate: int = 25
    repeat_delay: int = 600
    screen_edge_strength: int = 20
    snap_edge_range: int = 1
    snap_top_maximize: bool = True
    window_switcher: WindowSwitcher = field(default_factory=WindowSwitcher)
    workspace_config: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    usable_area_overrides: list[UsableAreaOverride] = field(default_factory=list)
    keybinds: list[Keybind] = field(default_factory=list)
    mousebinds: list[Mousebind] = field(default_factory=list)
    libinput_categories: list[LibinputCategory] = field(default_factory=list)
    regions: list[Region] = field(default_factory=list)
    window_rules: list[WindowRule] = field(default_factory=list)

    def load_default_key_bindings(self) -> None:
        """Append the built-in key bindings."""
        for binding, action_name, attribute, value in _KEY_COMBOS:
            try:
                keybind = create_keybind(binding)
            except ValueError:
                continue
            self.keybinds.append(keybind)
            action = create_action(action_name)
            if action is None:
                continue
            keybind.actions.append(action)
            if attribute is not None and value is not None:
                action.add_str(attribute, value)

    def load_default_mouse_bindings(self) -> None:
        """Append the built-in mouse bindings, merging consecutive equal ones."""
        count = 0
        current: Mousebind | None = None
        previous: tuple[str, str, str] | None = None
        for context, button, event, action_name, attribute, value in _MOUSE_COMBOS:
            key = (context, button, event)
            if current is None or key != previous:
                current = create_mousebind(context)
                if current.context is not SsdContext.NONE:
                    self.mousebinds.append(current)
                current.mouse_event = event_from_str(event)
                if current.mouse_event is MouseEvent.SCROLL:
                    current.direction, current.modifiers = direction_from_str(button)
                else:
                    parsed, current.modifiers = button_from_str(button)
                    current.button = int(parsed)
                count += 1
            previous = key
            action = create_action(action_name)
            if action is None:
                continue
            current.actions.append(action)
            if attribute is not None and value is not None:
                action.add_str(attribute, value)
        log.debug("Loaded %u merged mousebinds", count)

    def deduplicate_bindings(self) -> None:
        """Let later bindings replace earlier equal ones; drop empty bindings.

        This is what lets a ``None`` action remove a default binding.
        """
        _deduplicate(self.keybinds, "keybinds")
        _deduplicate(self.mousebinds, "mousebinds")

    def post_process(self) -> None:
        """Fill in defaults for everything the configuration left out."""
        if not self.keybinds:
            log.info("load default key bindings")
            self.load_default_key_bindings()
        if not self.mousebinds:
            log.info("load default mouse bindings")
            self.load_default_mouse_bindings()

        self.deduplicate_bindings()

        for font in (self.font_activewindow, self.font_menuitem, self.font_osd):
            if font.name is None:
                font.name = "sans"

        if default_category(self.libinput_categories) is None:
            # Keeps tap-to-click enabled by default.
            self.libinput_categories.insert(0, LibinputCategory())

        workspaces = self.workspace_config
        for number in range(len(workspaces.names), workspaces.min_nr_workspaces):
            workspaces.names.append(f"Workspace {number + 1}")
        if workspaces.popuptime is None:
            workspaces.popuptime = 1000

        if not self.window_switcher.fields:
            log.info("load default window switcher fields")
            self.window_switcher.fields.extend(
                WindowSwitcherField(content, width) for content, width in _DEFAULT_FIELDS
            )

    def validate(self) -> None:
        """Remove regions, window rules and actions that cannot be used."""
        valid_regions = []
        for region in self.regions:
            if region._is_valid():
                valid_regions.append(region)
            else:
                log.error(
                    "Removing invalid region '%s': %d%% x %d%% @ %d%%,%d%%",
                    region.name, region.width, region.height, region.x, region.y,
                )
        self.regions[:] = valid_regions

        valid_rules = []
        for rule in self.window_rules:
            if rule.identifier is None and rule.title is None:
                log.error("Deleting rule %r as it has no criteria", rule)
            else:
                valid_rules.append(rule)
        self.window_rules[:] = valid_rules

        for keybind in self.keybinds:
            _drop_invalid_actions(keybind.actions, "keybind")
        for mousebind in self.mousebinds:
            _drop_invalid_actions(mousebind.actions, "mousebind")
        for rule in self.window_rules:
            _drop_invalid_actions(rule.actions, "window rule")