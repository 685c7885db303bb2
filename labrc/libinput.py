"""Per-device input settings grouped into categories."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass


class DeviceType(enum.Enum):
    """Which devices a category applies to."""

    DEFAULT = enum.auto()
    TOUCH = enum.auto()
    NON_TOUCH = enum.auto()


class TapButtonMap(enum.IntEnum):
    """Which buttons one-, two- and three-finger taps produce."""

    LRM = 0
    LMR = 1


class AccelProfile(enum.IntEnum):
    """Pointer acceleration profiles."""

    FLAT = 1
    ADAPTIVE = 2


@dataclass
class LibinputCategory:
    """Settings for a device type or a named device.

    ``None`` means "leave the device default alone".
    """

    type: DeviceType = DeviceType.DEFAULT
    name: str | None = None
    pointer_speed: float | None = None
    natural_scroll: bool | None = None
    left_handed: bool | None = None
    tap: bool = True
    tap_button_map: TapButtonMap = TapButtonMap.LRM
    accel_profile: AccelProfile | None = None
    middle_emulation: bool | None = None
    disable_while_typing: bool | None = None


_DEVICE_TYPES = {
    "touch": DeviceType.TOUCH,
    "non-touch": DeviceType.NON_TOUCH,
}


def device_type_from_str(text: str | None) -> DeviceType:
    """Return the device type named by *text*, ignoring case; else ``DEFAULT``."""
    if text is None:
        return DeviceType.DEFAULT
    return _DEVICE_TYPES.get(text.lower(), DeviceType.DEFAULT)


def default_category(
    categories: Iterable[LibinputCategory],
) -> LibinputCategory | None:
    """Return the first category of type ``DEFAULT`` that has no name."""
    return next(
        (c for c in categories if c.type is DeviceType.DEFAULT and c.name is None),
        None,
    )