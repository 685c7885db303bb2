"""Reading the XML configuration file into an :class:`RcConfig`."""

from __future__ import annotations

import enum
import logging
import os
import re
import xml.etree.ElementTree as ET
from collections.abc import Sequence

from labrc.action import Action, create_action
from labrc.keybind import Keybind, Modifier, create_keybind
from labrc.libinput import (
    AccelProfile,
    LibinputCategory,
    TapButtonMap,
    device_type_from_str,
)
from labrc.mousebind import (
    Direction,
    MouseEvent,
    Mousebind,
    SsdContext,
    button_from_str,
    create_mousebind,
    direction_from_str,
    event_from_str,
)
from labrc.parse_bool import parse_bool
from labrc.rcconfig import (
    FieldContent,
    Font,
    FontSlant,
    FontWeight,
    Property,
    RcConfig,
    Region,
    UsableAreaOverride,
    WindowRule,
    WindowRuleEvent,
    WindowSwitcherField,
)
from labrc.textutil import grab_file, nodename, truncate_at_pattern

log = logging.getLogger(__name__)

_INVALID_BUTTON = 0xFFFFFFFF
_XML_BLANK = frozenset(" \t\n\r")
_ATOI = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_ATOF = re.compile(
    r"[ \t\n\v\f\r]*([+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


def _atof(text: str) -> float:
    match = _ATOF.match(text)
    return float(match.group(1)) if match else 0.0


def _is_blank(text: str) -> bool:
    return all(char in _XML_BLANK for char in text)


def _local(tag: str) -> str:
    return tag.rpartition("}")[2]


class _Section(enum.Enum):
    MARGIN = "margin"
    KEYBIND = "keybind"
    MOUSEBIND = "mousebind"
    DEVICE = "device"
    REGIONS = "regions"
    FIELDS = "fields"
    WINDOW_RULES = "windowrules"


_SECTIONS = {section.value: section for section in _Section}


class _FontPlace(enum.Enum):
    NONE = enum.auto()
    UNKNOWN = enum.auto()
    ACTIVEWINDOW = enum.auto()
    MENUITEM = enum.auto()
    OSD = enum.auto()


_FONT_PLACES = {
    "activewindow": _FontPlace.ACTIVEWINDOW,
    "menuitem": _FontPlace.MENUITEM,
    "onscreendisplay": _FontPlace.OSD,
    "osd": _FontPlace.OSD,
}


def _font_place(text: str | None) -> _FontPlace:
    if not text:
        return _FontPlace.NONE
    return _FONT_PLACES.get(text.lower(), _FontPlace.UNKNOWN)


def _set_font_attr(font: Font, attr: str, content: str) -> None:
    if attr == "name":
        font.name = content
    elif attr == "size":
        font.size = _atoi(content)
    elif attr == "slant":
        font.slant = FontSlant.ITALIC if content.lower() == "italic" else FontSlant.NORMAL
    elif attr == "weight":
        font.weight = FontWeight.BOLD if content.lower() == "bold" else FontWeight.NORMAL


def _property(content: str | None, current: Property) -> Property:
    """Boolean parse that also accepts ``default``."""
    if content is None or content.lower() == "default":
        return Property.UNSET
    value = parse_bool(content, None)
    if value is None:
        return current
    return Property.TRUE if value else Property.FALSE


# nodename -> (sub-object attribute or None, attribute)
_BOOL_OPTIONS: dict[str, tuple[str | None, str]] = {
    "adaptivesync.core": (None, "adaptive_sync"),
    "reuseoutputmode.core": (None, "reuse_output_mode"),
    "followmouse.focus": (None, "focus_follow_mouse"),
    "followmouserequiresmovement.focus": (None, "focus_follow_mouse_requires_movement"),
    "raiseonfocus.focus": (None, "raise_on_focus"),
    "topmaximize.snapping": (None, "snap_top_maximize"),
    "show.windowswitcher": ("window_switcher", "show"),
    "preview.windowswitcher": ("window_switcher", "preview"),
    "outlines.windowswitcher": ("window_switcher", "outlines"),
}

_INT_OPTIONS = {
    "gap.core": "gap",
    "cornerradius.theme": "corner_radius",
    "repeatrate.keyboard": "repeat_rate",
    "repeatdelay.keyboard": "repeat_delay",
    "screenedgestrength.resistance": "screen_edge_strength",
    "range.snapping": "snap_edge_range",
}

_DEPRECATED_SWITCHER = {
    "cycleviewosd.core": ("show", "<cycleViewOSD> is deprecated. Use <windowSwitcher show=\"\" />"),
    "cycleviewpreview.core": (
        "preview",
        "<cycleViewPreview> is deprecated. Use <windowSwitcher preview=\"\" />",
    ),
    "cycleviewoutlines.core": (
        "outlines",
        "<cycleViewOutlines> is deprecated. Use <windowSwitcher outlines=\"\" />",
    ),
}

_FONT_NODES = frozenset(
    {"name.font.theme", "size.font.theme", "slant.font.theme", "weight.font.theme"}
)

_FIELD_CONTENTS = {
    "type": FieldContent.TYPE,
    "app_id": FieldContent.APP_ID,
    "title": FieldContent.TITLE,
}

_MARGIN_SIDES = frozenset({"left", "right", "top", "bottom"})
_REGION_COORDS = frozenset({"x", "y", "width", "height"})


class RcParser:
    """Walks a configuration document and fills in an :class:`RcConfig`.

    Every element, attribute value and non-blank text is reported to
    :meth:`entry` under a dotted name built from the node and its ancestors,
    innermost first, e.g. ``key.keybind.keyboard``.
    """

    def __init__(self, config: RcConfig | None = None) -> None:
        self.config = config if config is not None else RcConfig()
        self._sections: set[_Section] = set()
        self._font_place = _FontPlace.NONE
        self._override: UsableAreaOverride | None = None
        self._keybind: Keybind | None = None
        self._keybind_action: Action | None = None
        self._mouse_context: str | None = None
        self._mousebind: Mousebind | None = None
        self._mousebind_action: Action | None = None
        self._category: LibinputCategory | None = None
        self._region: Region | None = None
        self._field: WindowSwitcherField | None = None
        self._rule: WindowRule | None = None
        self._rule_action: Action | None = None

    # Document walking

    def feed(self, text: str) -> None:
        """Parse an XML document and apply it. Raises ``ValueError`` if malformed."""
        try:
            root = ET.fromstring(text.encode("utf-8"))
        except ET.ParseError as exc:
            raise ValueError(f"error parsing config file: {exc}") from exc
        self._walk(root, [])

    def _walk(self, element: ET.Element, outer: Sequence[str]) -> None:
        name = _local(element.tag)
        lowered = name.lower()
        if lowered == "comment":
            return
        section = _SECTIONS.get(lowered)
        if section is not None:
            self._sections.add(section)
        try:
            self._traverse(element, name, outer)
        finally:
            if section is not None:
                self._sections.discard(section)

    def _traverse(self, element: ET.Element, name: str, outer: Sequence[str]) -> None:
        path = [name, *outer]
        self._process(path, None)
        for attr, value in element.attrib.items():
            if not _is_blank(value):
                self._process(["text", _local(attr), *path], value)
        if element.text and not _is_blank(element.text):
            self._process(["text", *path], element.text)
        for child in element:
            self._walk(child, path)
            if child.tail and not _is_blank(child.tail):
                self._process(["text", *path], child.tail)

    def _process(self, path: list[str], content: str | None) -> None:
        self.entry(nodename(path), content)

    # Dispatch

    def entry(self, nodename: str | None, content: str | None) -> None:
        """Apply one node, given its dotted lower-case name and its text."""
        if nodename is None:
            return
        name = truncate_at_pattern(nodename, ".openbox_config")
        name = truncate_at_pattern(name, ".labwc_config")

        if os.environ.get("LABWC_DEBUG_CONFIG_NODENAMES") is not None:
            print(f"{name}: {'(null)' if content is None else content}")

        active = self._sections
        if _Section.MARGIN in active:
            name = self._fill_usable_area_override(name, content)
        if _Section.KEYBIND in active:
            name = self._fill_keybind(name, content)
        if _Section.MOUSEBIND in active:
            name = self._fill_mousebind(name, content)
        if _Section.DEVICE in active:
            name = self._fill_libinput_category(name, content)
        if _Section.REGIONS in active:
            self._fill_region(name, content)
            return
        if _Section.FIELDS in active:
            self._fill_window_switcher_field(name, content)
            return
        if _Section.WINDOW_RULES in active:
            self._fill_window_rule(name, content)
            return
        self._fill_general(name, content)

    # Sections

    def _fill_usable_area_override(self, name: str, content: str | None) -> str:
        if name.lower() == "margin":
            self._override = UsableAreaOverride()
            self.config.usable_area_overrides.append(self._override)
            return name
        name = truncate_at_pattern(name, ".margin")
        override = self._override
        if content is None:
            pass
        elif override is None:
            log.error("no usable-area-override object")
        elif name == "output":
            override.output = content
        elif name in _MARGIN_SIDES:
            setattr(override, name, _atoi(content))
        else:
            log.error(
                'Unexpected data usable-area-override parser: %s="%s"', name, content
            )
        return name

    def _fill_keybind(self, name: str, content: str | None) -> str:
        if content is None:
            return name
        name = truncate_at_pattern(name, ".keybind.keyboard")
        if name == "key":
            self._keybind_action = None
            try:
                keybind = create_keybind(content)
            except ValueError:
                self._keybind = None
                log.error("Invalid keybind: %s", content)
                return name
            self.config.keybinds.append(keybind)
            self._keybind = keybind
        elif self._keybind is None:
            log.error(
                "expect <keybind key=\"\"> element first. nodename: '%s' content: '%s'",
                name, content,
            )
        elif name == "name.action":
            self._keybind_action = create_action(content)
            if self._keybind_action is not None:
                self._keybind.actions.append(self._keybind_action)
        elif self._keybind_action is None:
            log.error(
                "expect <action name=\"\"> element first. nodename: '%s' content: '%s'",
                name, content,
            )
        else:
            self._keybind_action.add_arg_from_xml_node(name, content)
        return name

    def _fill_mousebind(self, name: str, content: str | None) -> str:
        if self._mouse_context is None:
            log.error(
                "expect <context name=\"\"> element first. nodename: '%s' content: '%s'",
                name, content,
            )
            return name
        if name == "mousebind.context.mouse":
            log.info("create mousebind for %s", self._mouse_context)
            mousebind = create_mousebind(self._mouse_context)
            if mousebind.context is not SsdContext.NONE:
                self.config.mousebinds.append(mousebind)
            self._mousebind = mousebind
            self._mousebind_action = None
            return name
        if content is None:
            return name

        name = truncate_at_pattern(name, ".mousebind.context.mouse")
        mousebind = self._mousebind
        if mousebind is None:
            log.error(
                "expect <mousebind button=\"\" action=\"\"> element first. "
                "nodename: '%s' content: '%s'",
                name, content,
            )
        elif name == "button":
            try:
                button, mousebind.modifiers = button_from_str(content)
                mousebind.button = int(button)
            except ValueError:
                mousebind.button = _INVALID_BUTTON
                mousebind.modifiers = Modifier.NONE
        elif name == "direction":
            try:
                mousebind.direction, mousebind.modifiers = direction_from_str(content)
            except ValueError:
                mousebind.direction = Direction.INVALID
                mousebind.modifiers = Modifier.NONE
        elif name == "action":
            try:
                mousebind.mouse_event = event_from_str(content)
            except ValueError:
                mousebind.mouse_event = MouseEvent.NONE
        elif name == "name.action":
            self._mousebind_action = create_action(content)
            if self._mousebind_action is not None:
                mousebind.actions.append(self._mousebind_action)
        elif self._mousebind_action is None:
            log.error(
                "expect <action name=\"\"> element first. nodename: '%s' content: '%s'",
                name, content,
            )
        else:
            self._mousebind_action.add_arg_from_xml_node(name, content)
        return name

    def _fill_libinput_category(self, name: str, content: str | None) -> str:
        if name == "category.device.libinput":
            self._category = LibinputCategory()
            self.config.libinput_categories.insert(0, self._category)
        category = self._category
        if content is None or category is None:
            return name

        name = truncate_at_pattern(name, ".device.libinput")
        if name == "category":
            if content in ("touch", "non-touch", "default"):
                category.type = device_type_from_str(content)
            else:
                category.name = content
        elif name == "naturalscroll":
            value = parse_bool(content, None)
            if value is not None:
                category.natural_scroll = value
        elif name == "lefthanded":
            value = parse_bool(content, None)
            if value is not None:
                category.left_handed = value
        elif name == "pointerspeed":
            category.pointer_speed = min(max(_atof(content), -1.0), 1.0)
        elif name == "tap":
            value = parse_bool(content, None)
            if value is not None:
                category.tap = value
        elif name == "tapbuttonmap":
            if content == "lrm":
                category.tap_button_map = TapButtonMap.LRM
            elif content == "lmr":
                category.tap_button_map = TapButtonMap.LMR
            else:
                log.error("invalid tapButtonMap")
        elif name == "accelprofile":
            category.accel_profile = (
                AccelProfile.ADAPTIVE if content.lower() == "adaptive" else AccelProfile.FLAT
            )
        elif name == "middleemulation":
            value = parse_bool(content, None)
            if value is not None:
                category.middle_emulation = value
        elif name == "disablewhiletyping":
            value = parse_bool(content, None)
            if value is not None:
                category.disable_while_typing = value
        return name

    def _fill_region(self, name: str, content: str | None) -> None:
        name = truncate_at_pattern(name, ".region.regions")
        region = self._region
        if name == "region.regions":
            self._region = Region()
            self.config.regions.append(self._region)
        elif content is None:
            pass
        elif region is None:
            log.error("Expecting <region name=\"\" before %s='%s'", name, content)
        elif name == "name":
            if region.name is None:
                region.name = content
        elif name in "xywidtheight" and "%" not in content:
            log.error(
                "Removing invalid region '%s': %s='%s' misses a trailing %%",
                region.name, name, content,
            )
            self.config.regions[:] = [r for r in self.config.regions if r is not region]
            self._region = None
        elif name in _REGION_COORDS:
            setattr(region, name, _atoi(content))
        else:
            log.error('Unexpected data in region parser: %s="%s"', name, content)

    def _fill_window_switcher_field(self, name: str, content: str | None) -> None:
        fields = self.config.window_switcher.fields
        if name == "field.fields.windowswitcher":
            self._field = WindowSwitcherField()
            fields.append(self._field)
            return
        name = truncate_at_pattern(name, ".field.fields.windowswitcher")
        current = self._field
        if content is None:
            pass
        elif current is None:
            log.error("no <field>")
        elif name == "content":
            kind = _FIELD_CONTENTS.get(content)
            if kind is None:
                log.error("bad windowSwitcher field '%s'", content)
            else:
                current.content = kind
        elif name == "width" and "%" not in content:
            log.error(
                "Removing invalid field, %s='%s' misses trailing %%", name, content
            )
            fields[:] = [f for f in fields if f is not current]
            self._field = None
        elif name == "width":
            current.width = _atoi(content)
        else:
            log.error('Unexpected data in field parser: %s="%s"', name, content)

    def _fill_window_rule(self, name: str, content: str | None) -> None:
        if name == "windowrule.windowrules":
            self._rule = WindowRule()
            self.config.window_rules.append(self._rule)
            return
        name = truncate_at_pattern(name, ".windowrule.windowrules")
        rule = self._rule
        if content is None:
            pass
        elif rule is None:
            log.error("no window-rule")
        elif name == "identifier":
            rule.identifier = content
        elif name == "title":
            rule.title = content
        elif name == "matchonce":
            value = parse_bool(content, None)
            if value is not None:
                rule.match_once = value
        elif name == "event":
            if content.lower() == "onfirstmap":
                rule.event = WindowRuleEvent.ON_FIRST_MAP
        elif name == "serverdecoration":
            rule.server_decoration = _property(content, rule.server_decoration)
        elif name == "skiptaskbar":
            rule.skip_taskbar = _property(content, rule.skip_taskbar)
        elif name == "skipwindowswitcher":
            rule.skip_window_switcher = _property(content, rule.skip_window_switcher)
        elif name == "name.action":
            self._rule_action = create_action(content)
            if self._rule_action is not None:
                rule.actions.append(self._rule_action)
        elif self._rule_action is None:
            log.error(
                "expect <action name=\"\"> element first. nodename: '%s' content: '%s'",
                name, content,
            )
        else:
            self._rule_action.add_arg_from_xml_node(name, content)

    def _fill_font(self, name: str, content: str) -> None:
        attr = truncate_at_pattern(name, ".font.theme")
        config = self.config
        targets = {
            _FontPlace.NONE: (config.font_activewindow, config.font_menuitem, config.font_osd),
            _FontPlace.ACTIVEWINDOW: (config.font_activewindow,),
            _FontPlace.MENUITEM: (config.font_menuitem,),
            _FontPlace.OSD: (config.font_osd,),
        }.get(self._font_place, ())
        for font in targets:
            _set_font_attr(font, attr, content)

    def _fill_general(self, name: str, content: str | None) -> None:
        config = self.config
        if name == "default.keyboard":
            config.load_default_key_bindings()
            return
        if name in ("devault.mouse", "default.mouse"):
            config.load_default_mouse_bindings()
            return
        if content is None:
            return

        if name == "place.font.theme":
            self._font_place = _font_place(content)
            if self._font_place is _FontPlace.UNKNOWN:
                log.error("invalid font place %s", content)

        if name == "decoration.core":
            config.xdg_shell_server_side_deco = content != "client"
        elif name in _INT_OPTIONS:
            setattr(config, _INT_OPTIONS[name], _atoi(content))
        elif name in _BOOL_OPTIONS:
            sub, attr = _BOOL_OPTIONS[name]
            target = config if sub is None else getattr(config, sub)
            value = parse_bool(content, None)
            if value is not None:
                setattr(target, attr, value)
        elif name == "name.theme":
            config.theme_name = content
        elif name in _FONT_NODES:
            self._fill_font(name, content)
        elif name == "doubleclicktime.mouse":
            value = _atoi(content)
            if value > 0:
                config.doubleclick_time = value
            else:
                log.error("invalid doubleClickTime")
        elif name == "scrollfactor.mouse":
            config.scroll_factor = _atof(content)
        elif name == "name.context.mouse":
            self._mouse_context = content
            self._mousebind = None
        elif "windowswitcher.core" in name:
            log.error("<windowSwitcher> should not be child of <core>")
        elif name in _DEPRECATED_SWITCHER:
            attr, message = _DEPRECATED_SWITCHER[name]
            value = parse_bool(content, None)
            if value is not None:
                setattr(config.window_switcher, attr, value)
            log.error("%s", message)
        elif name == "name.names.desktops":
            config.workspace_config.names.append(content)
        elif name == "popuptime.desktops":
            config.workspace_config.popuptime = _atoi(content)
        elif name == "number.desktops":
            config.workspace_config.min_nr_workspaces = max(1, _atoi(content))


def parse_xml(text: str, config: RcConfig | None = None) -> RcConfig:
    """Apply an XML document to *config* (a new one if not given).

    A malformed document is logged and leaves the configuration as it was.
    No defaults are filled in.
    """
    parser = RcParser(config)
    try:
        parser.feed(text)
    except ValueError:
        log.error("error parsing config file")
    return parser.config


def read_config(
    filename: str | os.PathLike[str] | None = None, config: RcConfig | None = None
) -> RcConfig:
    """Read ``rc.xml`` and return the finished configuration.

    Without *filename*, ``rc.xml`` in ``config.config_dir`` is read. A missing
    or unreadable file leaves only the defaults.
    """
    if config is None:
        config = RcConfig()
    path: str | None
    if filename is not None:
        path = os.fspath(filename)
    elif config.config_dir:
        path = f"{config.config_dir}/rc.xml"
    else:
        path = None

    if path is None:
        log.info("cannot find rc.xml config file")
    else:
        try:
            text = grab_file(path)
        except OSError:
            log.error("cannot read (%s)", path)
        else:
            log.info("read config file %s", path)
            parse_xml(text, config)

    config.post_process()
    config.validate()
    return config