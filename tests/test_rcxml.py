import pytest

from labrc.action import ActionType
from labrc.keybind import Modifier, create_keybind, keysym_from_name
from labrc.libinput import DeviceType, TapButtonMap
from labrc.mousebind import Button, MouseEvent, SsdContext
from labrc.rcconfig import FieldContent, FontWeight, Property, RcConfig
from labrc.rcxml import RcParser, parse_xml, read_config


def _parse(body: str) -> RcConfig:
    return parse_xml(f"<labwc_config>{body}</labwc_config>")


def test_core_gap_and_decoration():
    config = _parse("<core><gap>10</gap><decoration>client</decoration></core>")
    assert config.gap == 10
    assert config.xdg_shell_server_side_deco is False


def test_decoration_other_than_client_is_server_side():
    config = _parse("<core><decoration>server</decoration></core>")
    assert config.xdg_shell_server_side_deco is True


def test_openbox_root_is_accepted():
    config = parse_xml("<openbox_config><theme><name>Clearlooks</name></theme></openbox_config>")
    assert config.theme_name == "Clearlooks"


def test_keybind_with_attribute_argument():
    config = _parse(
        '<keyboard><keybind key="W-Return">'
        '<action name="Execute" command="foot"/></keybind></keyboard>'
    )
    assert len(config.keybinds) == 1
    keybind = config.keybinds[0]
    assert keybind.modifiers == Modifier.LOGO
    assert keybind.keysyms == (keysym_from_name("Return"),)
    assert keybind.actions[0].type is ActionType.EXECUTE
    assert keybind.actions[0].get_str("command") == "foot"


def test_keybind_with_child_element_argument():
    config = _parse(
        '<keyboard><keybind key="A-F3">'
        "<action name=\"Execute\"><command>foot</command></action>"
        "</keybind></keyboard>"
    )
    assert config.keybinds[0].actions[0].get_str("command") == "foot"


def test_unknown_key_creates_no_keybind():
    config = _parse(
        '<keyboard><keybind key="W-Nosuchkey"><action name="Close"/></keybind></keyboard>'
    )
    assert config.keybinds == []


def test_none_action_removes_default_binding():
    reference = RcConfig()
    reference.load_default_key_bindings()
    config = _parse(
        "<keyboard><default/>"
        '<keybind key="A-Tab"><action name="None"/></keybind>'
        "</keyboard>"
    )
    config.post_process()
    target = create_keybind("A-Tab")
    assert not any(k.same_as(target) for k in config.keybinds)
    assert len(config.keybinds) == len(reference.keybinds) - 1


def test_default_mouse_bindings_loaded_from_element():
    reference = RcConfig()
    reference.load_default_mouse_bindings()
    config = _parse("<mouse><default/></mouse>")
    assert len(config.mousebinds) == len(reference.mousebinds)
    assert len(config.mousebinds) > 0


def test_mousebind_parsing():
    config = _parse(
        '<mouse><context name="Root">'
        '<mousebind button="A-Left" action="Press">'
        '<action name="ShowMenu" menu="root-menu"/>'
        "</mousebind></context></mouse>"
    )
    assert len(config.mousebinds) == 1
    mousebind = config.mousebinds[0]
    assert mousebind.context is SsdContext.ROOT
    assert mousebind.button == Button.LEFT
    assert mousebind.modifiers == Modifier.ALT
    assert mousebind.mouse_event is MouseEvent.PRESS
    assert mousebind.actions[0].get_str("menu") == "root-menu"


def test_mousebind_without_context_is_ignored():
    config = _parse(
        '<mouse><mousebind button="Left" action="Press"><action name="Focus"/>'
        "</mousebind></mouse>"
    )
    assert config.mousebinds == []


def test_libinput_category():
    config = _parse(
        '<libinput><device category="touch">'
        "<naturalScroll>yes</naturalScroll>"
        "<pointerSpeed>5</pointerSpeed>"
        "<tapButtonMap>lmr</tapButtonMap>"
        "</device></libinput>"
    )
    assert len(config.libinput_categories) == 1
    category = config.libinput_categories[0]
    assert category.type is DeviceType.TOUCH
    assert category.natural_scroll is True
    assert category.pointer_speed == 1.0
    assert category.tap_button_map is TapButtonMap.LMR


def test_libinput_named_device():
    config = _parse('<libinput><device category="my-mouse"><tap>no</tap></device></libinput>')
    category = config.libinput_categories[0]
    assert category.name == "my-mouse"
    assert category.tap is False


def test_regions_missing_percent_is_removed():
    config = _parse(
        "<regions>"
        '<region name="top-left" x="0%" y="0%" width="50%" height="50%"/>'
        '<region name="bad" x="0" y="0%" width="50%" height="50%"/>'
        "</regions>"
    )
    assert [r.name for r in config.regions] == ["top-left"]
    assert config.regions[0].width == 50


def test_window_switcher_fields():
    config = _parse(
        '<windowSwitcher show="no"><fields>'
        '<field content="title" width="75%"/>'
        '<field content="app_id" width="25"/>'
        "</fields></windowSwitcher>"
    )
    assert config.window_switcher.show is False
    fields = config.window_switcher.fields
    assert len(fields) == 1
    assert fields[0].content is FieldContent.TITLE
    assert fields[0].width == 75


def test_window_switcher_under_core_is_ignored():
    config = _parse('<core><windowSwitcher show="no"/></core>')
    assert config.window_switcher.show is True


def test_deprecated_cycle_view_osd_still_applies():
    config = _parse("<core><cycleViewOSD>no</cycleViewOSD></core>")
    assert config.window_switcher.show is False


def test_window_rule():
    config = _parse(
        "<windowRules>"
        '<windowRule identifier="foot" serverDecoration="no" matchOnce="true">'
        '<action name="Maximize"/>'
        "</windowRule></windowRules>"
    )
    assert len(config.window_rules) == 1
    rule = config.window_rules[0]
    assert rule.identifier == "foot"
    assert rule.server_decoration is Property.FALSE
    assert rule.match_once is True
    assert [a.type for a in rule.actions] == [ActionType.MAXIMIZE]


def test_window_rule_without_criteria_removed_by_validate():
    config = _parse('<windowRules><windowRule><action name="Close"/></windowRule></windowRules>')
    assert len(config.window_rules) == 1
    config.validate()
    assert config.window_rules == []


def test_font_with_place():
    config = _parse(
        '<theme><font place="ActiveWindow"><name>Mono</name>'
        "<size>12</size><weight>Bold</weight></font></theme>"
    )
    assert config.font_activewindow.name == "Mono"
    assert config.font_activewindow.size == 12
    assert config.font_activewindow.weight is FontWeight.BOLD
    assert config.font_osd.name is None


def test_font_without_place_sets_all():
    config = _parse("<theme><font><name>Mono</name></font></theme>")
    names = {config.font_activewindow.name, config.font_menuitem.name, config.font_osd.name}
    assert names == {"Mono"}


def test_desktops_filled_by_post_process():
    config = _parse('<desktops number="3"><names><name>one</name></names></desktops>')
    config.post_process()
    assert config.workspace_config.names == ["one", "Workspace 2", "Workspace 3"]


def test_usable_area_override():
    config = _parse('<margin output="DP-1" top="20"/>')
    assert len(config.usable_area_overrides) == 1
    override = config.usable_area_overrides[0]
    assert override.output == "DP-1"
    assert override.top == 20


def test_focus_and_invalid_doubleclick_time():
    default_time = RcConfig().doubleclick_time
    config = _parse(
        "<focus><followMouse>yes</followMouse></focus>"
        "<mouse><doubleClickTime>0</doubleClickTime></mouse>"
    )
    assert config.focus_follow_mouse is True
    assert config.doubleclick_time == default_time


def test_entry_directly():
    parser = RcParser()
    parser.entry("gap.core.openbox_config", "7")
    assert parser.config.gap == 7


def test_feed_malformed_raises():
    with pytest.raises(ValueError):
        RcParser().feed("<labwc_config>")


def test_parse_xml_malformed_keeps_defaults():
    config = parse_xml("<labwc_config><core><gap>5</gap>")
    assert config.gap == RcConfig().gap


def test_read_config_file(tmp_path):
    path = tmp_path / "rc.xml"
    path.write_text("<labwc_config>\n  <core>\n    <gap>10</gap>\n  </core>\n</labwc_config>\n")
    config = read_config(str(path))
    assert config.gap == 10
    assert config.font_osd.name == "sans"
    assert config.keybinds


def test_read_config_from_config_dir(tmp_path):
    (tmp_path / "rc.xml").write_text("<labwc_config><core><gap>4</gap></core></labwc_config>")
    config = read_config(config=RcConfig(config_dir=str(tmp_path)))
    assert config.gap == 4


def test_read_config_missing_file_gives_defaults(tmp_path):
    reference = RcConfig()
    reference.load_default_key_bindings()
    config = read_config(str(tmp_path / "missing.xml"))
    assert len(config.keybinds) == len(reference.keybinds)
    assert config.workspace_config.popuptime == 1000
    assert config.font_activewindow.name == "sans"