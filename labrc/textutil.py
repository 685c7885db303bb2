"""Small text helpers used when reading configuration."""

from __future__ import annotations

import os
import re
import string
from collections.abc import Mapping, Sequence

_C_SPACE = string.whitespace
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_SHELL_EXPANSION = re.compile(r"\$([A-Za-z0-9_{}]*)|~")


def strip(text: str) -> str:
    """Remove leading and trailing ASCII whitespace."""
    return text.strip(_C_SPACE)


def truncate_at_pattern(text: str, pattern: str) -> str:
    """Return *text* cut off where *pattern* first occurs in it."""
    head, _, _ = text.partition(pattern)
    return head


def _variable_name(raw: str) -> str:
    if len(raw) >= 2 and raw.startswith("{") and raw.endswith("}"):
        return raw[1:-1]
    return raw


def expand_shell_variables(text: str, env: Mapping[str, str] | None = None) -> str:
    """Expand ``$VAR``, ``${VAR}`` and ``~`` in *text*.

    Unset variables expand to nothing. ``~`` expands to ``$HOME`` wherever
    it appears.
    """
    if env is None:
        env = os.environ

    def replace(match: re.Match[str]) -> str:
        if match.group(0) == "~":
            return env.get("HOME", "")
        name = _variable_name(match.group(1))
        if not name:
            return ""
        return env.get(name, "")

    return _SHELL_EXPANSION.sub(replace, text)


def grab_file(path: str | os.PathLike[str]) -> str:
    """Read a file and return its lines joined with the newlines removed.

    Raises ``OSError`` if the file cannot be read.
    """
    with open(path, encoding="utf-8", errors="replace") as stream:
        return "".join(line.removesuffix("\n") for line in stream)


def _glob_to_regex(pattern: str) -> re.Pattern[str]:
    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)


def match_glob(pattern: str, text: str) -> bool:
    """Match *text* against a simple ``*``/``?`` glob, ignoring case."""
    return _glob_to_regex(pattern.casefold()).fullmatch(text.casefold()) is not None


def nodename(path: Sequence[str], max_len: int = 256) -> str | None:
    """Build a dotted, lower-case name for an XML node.

    *path* holds element names from the node itself outwards to the root,
    so ``["key", "keybind", "keyboard"]`` gives ``"key.keybind.keyboard"``.
    A leading ``text`` element with a parent is skipped. The result is at
    most ``max_len - 1`` characters long. An empty path gives ``None``.
    """
    names = list(path)
    if not names:
        return None
    if len(names) > 1 and names[0] == "text":
        names = names[1:]
    joined = ".".join(name.translate(_ASCII_LOWER) for name in names)
    return joined[: max(max_len - 1, 0)]