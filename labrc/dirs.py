"""Locating the configuration and theme directories."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator, Mapping

_CONFIG_DIRS: tuple[tuple[str | None, str], ...] = (
    ("XDG_CONFIG_HOME", "labwc"),
    ("HOME", ".config/labwc"),
    ("XDG_CONFIG_DIRS", "labwc"),
    (None, "/etc/xdg/labwc"),
)

_THEME_DIRS: tuple[tuple[str | None, str], ...] = (
    ("XDG_DATA_HOME", "themes"),
    ("HOME", ".local/share/themes"),
    ("HOME", ".themes"),
    ("XDG_DATA_DIRS", "themes"),
    (None, "/usr/share/themes"),
    (None, "/usr/local/share/themes"),
    (None, "/opt/share/themes"),
)

_DEBUG_VARIABLE = "LABWC_DEBUG_DIR_CONFIG_AND_THEME"


def _candidates(
    dirs: tuple[tuple[str | None, str], ...],
    build: Callable[[str | None, str], str],
    env: Mapping[str, str],
) -> Iterator[str]:
    for variable, path in dirs:
        if variable is None:
            yield build(None, path)
            continue
        value = env.get(variable)
        if value is None:
            continue
        for prefix in value.split(":"):
            yield build(prefix, path)


def _find_dir(
    dirs: tuple[tuple[str | None, str], ...],
    build: Callable[[str | None, str], str],
    env: Mapping[str, str] | None,
) -> str | None:
    if env is None:
        env = os.environ
    debug = env.get(_DEBUG_VARIABLE) is not None
    for candidate in _candidates(dirs, build, env):
        if debug:
            print(candidate, file=sys.stderr)
        if os.path.isdir(candidate):
            return candidate
    return None


def config_dir(env: Mapping[str, str] | None = None) -> str | None:
    """Return the first existing configuration directory, or ``None``."""

    def build(prefix: str | None, path: str) -> str:
        return path if prefix is None else f"{prefix}/{path}"

    return _find_dir(_CONFIG_DIRS, build, env)


def theme_dir(theme_name: str, env: Mapping[str, str] | None = None) -> str | None:
    """Return the first existing ``openbox-3`` directory of a theme, or ``None``."""

    def build(prefix: str | None, path: str) -> str:
        if prefix is None:
            return f"{path}/{theme_name}/openbox-3"
        return f"{prefix}/{path}/{theme_name}/openbox-3"

    return _find_dir(_THEME_DIRS, build, env)