import pytest

from labrc.action import ActionType, create_action
from labrc.keybind import create_keybind
from labrc.libinput import DeviceType, LibinputCategory
from labrc.mousebind import Direction, MouseEvent, SsdContext, create_mousebind
from labrc.rcconfig import (
    FieldContent,
    Property,
    RcConfig,
    Region,
    WindowRule,
)


def _keybind_with(spec, action_name, **args):
    keybind = create_keybind(spec)
    action = create_action(action_name)
    for key, value in args.items():
        action.add_str(key, value)
    keybind.actions.append(action)
    return keybind


def test_defaults():
    rc = RcConfig()
    assert rc.corner_radius == 8
    assert rc.doubleclick_time == 500
    assert rc.repeat_rate == 25
    assert rc.repeat_delay == 600
    assert rc.font_osd.size == 10
    assert rc.workspace_config.popuptime is None
    assert rc.keybinds == []


def test_default_key_bindings_have_actions():
    rc = RcConfig()
    rc.load_default_key_bindings()
    assert len(rc.keybinds) == 19
    assert all(len(k.actions) == 1 for k in rc.keybinds)
    assert rc.keybinds[0].actions[0].type is ActionType.NEXT_WINDOW
    commands = [
        k.actions[0].get_str("command")
        for k in rc.keybinds
        if k.actions[0].type is ActionType.EXECUTE
    ]
    assert "alacritty" in commands
    assert "amixer sset Master toggle" in commands


def test_default_key_bindings_are_distinct_and_valid():
    rc = RcConfig()
    rc.load_default_key_bindings()
    for index, keybind in enumerate(rc.keybinds):
        assert not any(keybind.same_as(other) for other in rc.keybinds[index + 1:])
        assert all(action.is_valid() for action in keybind.actions)


def test_default_mouse_bindings_are_merged():
    rc = RcConfig()
    rc.load_default_mouse_bindings()
    for index, mousebind in enumerate(rc.mousebinds):
        assert not any(mousebind.same_as(o) for o in rc.mousebinds[index + 1:])
        assert mousebind.context is not SsdContext.NONE
    menu_binds = [
        m for m in rc.mousebinds
        if m.context is SsdContext.TITLEBAR and m.mouse_event is MouseEvent.CLICK
    ]
    assert len(menu_binds) == 1
    assert [a.type for a in menu_binds[0].actions] == [
        ActionType.FOCUS, ActionType.RAISE, ActionType.SHOW_MENU,
    ]


def test_default_scroll_bindings_use_direction():
    rc = RcConfig()
    rc.load_default_mouse_bindings()
    scrolls = [m for m in rc.mousebinds if m.mouse_event is MouseEvent.SCROLL]
    assert {m.direction for m in scrolls} == {Direction.UP, Direction.DOWN}
    assert all(m.button == 0 for m in scrolls)
    for m in scrolls:
        assert m.actions[0].get_str("to") in ("left", "right")


def test_deduplicate_keeps_later_binding():
    rc = RcConfig()
    rc.keybinds.append(_keybind_with("W-a", "Close"))
    rc.keybinds.append(_keybind_with("W-a", "Iconify"))
    rc.deduplicate_bindings()
    assert len(rc.keybinds) == 1
    assert rc.keybinds[0].actions[0].type is ActionType.ICONIFY


def test_empty_binding_removes_default():
    rc = RcConfig()
    rc.load_default_key_bindings()
    before = len(rc.keybinds)
    removed = create_keybind("A-Tab")
    rc.keybinds.append(removed)
    rc.deduplicate_bindings()
    assert len(rc.keybinds) == before - 1
    assert not any(k.same_as(removed) for k in rc.keybinds)


def test_deduplicate_mousebinds():
    rc = RcConfig()
    first = create_mousebind("Root")
    first.actions.append(create_action("Close"))
    second = create_mousebind("root")
    second.actions.append(create_action("Raise"))
    empty = create_mousebind("Client")
    rc.mousebinds.extend([first, second, empty])
    rc.deduplicate_bindings()
    assert rc.mousebinds == [second]


def test_post_process_loads_defaults():
    rc = RcConfig()
    rc.post_process()
    assert rc.keybinds
    assert rc.mousebinds
    assert rc.font_activewindow.name == "sans"
    assert rc.font_menuitem.name == "sans"
    assert rc.workspace_config.popuptime == 1000
    assert rc.workspace_config.names == ["Workspace 1"]
    assert [f.content for f in rc.window_switcher.fields] == [
        FieldContent.TYPE, FieldContent.APP_ID, FieldContent.TITLE,
    ]
    assert sum(f.width for f in rc.window_switcher.fields) == 100


def test_post_process_keeps_user_settings():
    rc = RcConfig()
    rc.keybinds.append(_keybind_with("C-x", "Close"))
    rc.font_osd.name = "mono"
    rc.workspace_config.popuptime = 0
    rc.workspace_config.names = ["One"]
    rc.workspace_config.min_nr_workspaces = 3
    rc.post_process()
    assert len(rc.keybinds) == 1
    assert rc.font_osd.name == "mono"
    assert rc.workspace_config.popuptime == 0
    assert rc.workspace_config.names == ["One", "Workspace 2", "Workspace 3"]


def test_post_process_adds_default_libinput_category_first():
    rc = RcConfig()
    rc.libinput_categories.append(LibinputCategory(type=DeviceType.TOUCH))
    rc.post_process()
    assert len(rc.libinput_categories) == 2
    first = rc.libinput_categories[0]
    assert first.type is DeviceType.DEFAULT and first.name is None
    assert first.tap is True


def test_validate_regions():
    rc = RcConfig()
    good = Region("top-left", 0, 0, 50, 50)
    rc.regions.extend([
        good,
        Region(None, 0, 0, 50, 50),
        Region("wide", 0, 0, 101, 50),
        Region("flat", 0, 0, 50, 0),
        Region("off", -1, 0, 50, 50),
    ])
    rc.validate()
    assert rc.regions == [good]


def test_validate_window_rules():
    rc = RcConfig()
    by_id = WindowRule(identifier="foot")
    by_title = WindowRule(title="*vim*", skip_taskbar=Property.TRUE)
    rc.window_rules.extend([WindowRule(), by_id, by_title])
    rc.validate()
    assert rc.window_rules == [by_id, by_title]


def test_validate_removes_invalid_actions():
    rc = RcConfig()
    keybind = create_keybind("W-Return")
    keybind.actions.append(create_action("Execute"))
    keybind.actions.append(create_action("Close"))
    rc.keybinds.append(keybind)
    rule = WindowRule(identifier="foot")
    rule.actions.append(create_action("ShowMenu"))
    rc.window_rules.append(rule)
    rc.validate()
    assert [a.type for a in keybind.actions] == [ActionType.CLOSE]
    assert rule.actions == []


@pytest.mark.parametrize("loader", ["keys", "mouse"])
def test_default_actions_all_valid(loader):
    rc = RcConfig()
    if loader == "keys":
        rc.load_default_key_bindings()
        binds = rc.keybinds
    else:
        rc.load_default_mouse_bindings()
        binds = rc.mousebinds
    counts = [len(b.actions) for b in binds]
    rc.validate()
    assert [len(b.actions) for b in binds] == counts