import pytest

from labrc.textutil import (
    expand_shell_variables,
    grab_file,
    match_glob,
    nodename,
    strip,
    truncate_at_pattern,
)


def test_strip_removes_surrounding_whitespace():
    assert strip("  \t a b \n\r") == "a b"


def test_strip_of_blank_is_empty():
    assert strip(" \t\n") == ""


def test_truncate_at_pattern():
    assert truncate_at_pattern("name.action", ".action") == "name"


def test_truncate_without_pattern_is_unchanged():
    assert truncate_at_pattern("command", ".action") == "command"


def test_truncate_uses_first_occurrence():
    assert truncate_at_pattern("a.x.b.x", ".x") == "a"


def test_expand_plain_variable():
    env = {"HOME": "/home/user"}
    assert expand_shell_variables("$HOME/bin", env) == env["HOME"] + "/bin"


def test_expand_braced_variable():
    env = {"FOO": "value"}
    assert expand_shell_variables("${FOO}/bar", env) == env["FOO"] + "/bar"


def test_expand_tilde():
    env = {"HOME": "/home/user"}
    assert expand_shell_variables("~/cfg", env) == env["HOME"] + "/cfg"


def test_unset_variable_expands_to_nothing():
    assert expand_shell_variables("a$NOPE b", {}) == "a b"


def test_variable_name_stops_at_punctuation():
    env = {"A": "1"}
    assert expand_shell_variables("$A-x", env) == env["A"] + "-x"


def test_text_without_specials_round_trips():
    text = "amixer sset Master 5%+"
    assert expand_shell_variables(text, {}) == text


def test_grab_file_joins_lines(tmp_path):
    path = tmp_path / "f.txt"
    path.write_text("<a>\n<b/>\n</a>\n")
    assert grab_file(path) == "<a><b/></a>"


def test_grab_file_missing_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        grab_file(tmp_path / "missing")


@pytest.mark.parametrize(
    "pattern, text, expected",
    [
        ("*.Foo", "bar.foo", True),
        ("a?c", "ABC", True),
        ("a?c", "abbc", False),
        ("[ab]", "a", False),
        ("[ab]", "[ab]", True),
        ("*", "", True),
        ("foo", "foobar", False),
    ],
)
def test_match_glob(pattern, text, expected):
    assert match_glob(pattern, text) is expected


def test_nodename_joins_outwards():
    path = ["key", "keybind", "keyboard", "openbox_config"]
    assert nodename(path) == ".".join(path)


def test_nodename_lowercases():
    assert nodename(["doubleClickTime", "mouse"]) == "doubleclicktime.mouse"


def test_nodename_skips_text_with_parent():
    assert nodename(["text", "name", "theme"]) == "name.theme"


def test_nodename_keeps_lone_text():
    assert nodename(["text"]) == "text"


def test_nodename_truncates():
    result = nodename(["abcdef", "ghi"], 4)
    assert result == "abc"
    assert len(result) == 3


def test_nodename_empty_path():
    assert nodename([]) is None