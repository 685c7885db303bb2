"""Session start-up: environment file and autostart script."""

from __future__ import annotations

import logging
import os
from collections.abc import MutableMapping

from labrc.spawn import spawn_async_no_shell
from labrc.textutil import expand_shell_variables, strip

log = logging.getLogger(__name__)


def parse_environment_line(
    line: str, env: MutableMapping[str, str] | None = None
) -> tuple[str, str] | None:
    """Apply one ``KEY=value`` line to *env*.

    Comments, blank lines, lines without ``=`` and lines with an empty key
    or value are skipped. The value is stripped and has shell variables
    expanded. Returns the pair that was set, or ``None``.
    """
    if env is None:
        env = os.environ
    if not line or line.startswith("#"):
        return None
    key, sep, rest = line.partition("=")
    if not sep:
        return None
    key = strip(key)
    value = expand_shell_variables(strip(rest), env)
    if not key or not value:
        return None
    env[key] = value
    return key, value


def read_environment_file(
    path: str | os.PathLike[str], env: MutableMapping[str, str] | None = None
) -> None:
    """Apply every line of an environment file; a missing file is ignored."""
    try:
        stream = open(path, encoding="utf-8", errors="replace")
    except OSError:
        return
    with stream:
        log.info("read environment file %s", path)
        for line in stream:
            parse_environment_line(line.removesuffix("\n"), env)


def build_path(directory: str | None, filename: str | None) -> str | None:
    """Join *directory* and *filename*, or return ``None`` if either is empty."""
    if not directory or not filename:
        return None
    return f"{directory}/{filename}"


def session_environment_init(
    directory: str | None, env: MutableMapping[str, str] | None = None
) -> None:
    """Set session defaults and read ``<directory>/environment``."""
    if env is None:
        env = os.environ
    env.setdefault("XDG_CURRENT_DESKTOP", "wlroots")
    environment = build_path(directory, "environment")
    if environment is None:
        return
    read_environment_file(environment, env)


def update_activation_env(
    env_keys: str, env: MutableMapping[str, str] | None = None
) -> None:
    """Export *env_keys* to the dbus and systemd user environments."""
    if env is None:
        env = os.environ
    if "DBUS_SESSION_BUS_ADDRESS" not in env:
        log.info(
            "Not updating dbus execution environment: "
            "DBUS_SESSION_BUS_ADDRESS not set"
        )
        return
    log.info("Updating dbus execution environment")
    spawn_async_no_shell(f"dbus-update-activation-environment {env_keys}")
    spawn_async_no_shell(f"systemctl --user import-environment {env_keys}")


def session_autostart_init(
    directory: str | None, env: MutableMapping[str, str] | None = None
) -> None:
    """Update the activation environment and run ``<directory>/autostart``."""
    update_activation_env("DISPLAY WAYLAND_DISPLAY XDG_CURRENT_DESKTOP", env)
    autostart = build_path(directory, "autostart")
    if autostart is None:
        return
    if not os.path.exists(autostart):
        log.error("no autostart file")
        return
    log.info("run autostart file %s", autostart)
    spawn_async_no_shell(f"sh {autostart}")