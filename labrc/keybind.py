"""Key bindings: modifier letters and key names joined by dashes."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from labrc.action import Action

log = logging.getLogger(__name__)

MAX_KEYSYMS = 32


class Modifier(enum.IntFlag):
    """Keyboard modifier bits."""

    NONE = 0
    SHIFT = 1
    CAPS = 2
    CTRL = 4
    ALT = 8
    MOD2 = 16
    MOD3 = 32
    LOGO = 64
    MOD5 = 128


_MODIFIER_LETTERS = {
    "S": Modifier.SHIFT,
    "C": Modifier.CTRL,
    "A": Modifier.ALT,
    "W": Modifier.LOGO,
}


def parse_modifier(name: str) -> Modifier:
    """Return the modifier for ``S``, ``C``, ``A`` or ``W``, else ``Modifier.NONE``."""
    return _MODIFIER_LETTERS.get(name, Modifier.NONE)


_NAMED_KEYSYMS = {
    "space": 0x20, "exclam": 0x21, "quotedbl": 0x22, "numbersign": 0x23,
    "dollar": 0x24, "percent": 0x25, "ampersand": 0x26, "apostrophe": 0x27,
    "parenleft": 0x28, "parenright": 0x29, "asterisk": 0x2A, "plus": 0x2B,
    "comma": 0x2C, "minus": 0x2D, "period": 0x2E, "slash": 0x2F,
    "colon": 0x3A, "semicolon": 0x3B, "less": 0x3C, "equal": 0x3D,
    "greater": 0x3E, "question": 0x3F, "at": 0x40, "bracketleft": 0x5B,
    "backslash": 0x5C, "bracketright": 0x5D, "asciicircum": 0x5E,
    "underscore": 0x5F, "grave": 0x60, "braceleft": 0x7B, "bar": 0x7C,
    "braceright": 0x7D, "asciitilde": 0x7E,
    "BackSpace": 0xFF08, "Tab": 0xFF09, "Linefeed": 0xFF0A, "Clear": 0xFF0B,
    "Return": 0xFF0D, "Pause": 0xFF13, "Scroll_Lock": 0xFF14,
    "Sys_Req": 0xFF15, "Escape": 0xFF1B, "Delete": 0xFFFF,
    "Home": 0xFF50, "Left": 0xFF51, "Up": 0xFF52, "Right": 0xFF53,
    "Down": 0xFF54, "Prior": 0xFF55, "Page_Up": 0xFF55, "Next": 0xFF56,
    "Page_Down": 0xFF56, "End": 0xFF57, "Begin": 0xFF58,
    "Select": 0xFF60, "Print": 0xFF61, "Execute": 0xFF62, "Insert": 0xFF63,
    "Undo": 0xFF65, "Redo": 0xFF66, "Menu": 0xFF67, "Find": 0xFF68,
    "Cancel": 0xFF69, "Help": 0xFF6A, "Break": 0xFF6B, "Num_Lock": 0xFF7F,
    "KP_Enter": 0xFF8D, "KP_Add": 0xFFAB, "KP_Subtract": 0xFFAD,
    "KP_Multiply": 0xFFAA, "KP_Divide": 0xFFAF,
    "Shift_L": 0xFFE1, "Shift_R": 0xFFE2, "Control_L": 0xFFE3,
    "Control_R": 0xFFE4, "Caps_Lock": 0xFFE5, "Meta_L": 0xFFE7,
    "Meta_R": 0xFFE8, "Alt_L": 0xFFE9, "Alt_R": 0xFFEA,
    "Super_L": 0xFFEB, "Super_R": 0xFFEC,
    "XF86MonBrightnessUp": 0x1008FF02, "XF86MonBrightnessDown": 0x1008FF03,
    "XF86AudioLowerVolume": 0x1008FF11, "XF86AudioMute": 0x1008FF12,
    "XF86AudioRaiseVolume": 0x1008FF13, "XF86AudioPlay": 0x1008FF14,
    "XF86AudioStop": 0x1008FF15, "XF86AudioPrev": 0x1008FF16,
    "XF86AudioNext": 0x1008FF17, "XF86HomePage": 0x1008FF18,
    "XF86Mail": 0x1008FF19, "XF86Search": 0x1008FF1B,
    "XF86AudioRecord": 0x1008FF1C, "XF86Calculator": 0x1008FF1D,
    "XF86PowerOff": 0x1008FF2A, "XF86Sleep": 0x1008FF2F,
    "XF86AudioPause": 0x1008FF31, "XF86AudioMicMute": 0x1008FFB2,
}
_NAMED_KEYSYMS.update({f"F{n}": 0xFFBD + n for n in range(1, 36)})
_NAMED_KEYSYMS.update({f"KP_{n}": 0xFFB0 + n for n in range(10)})

_BY_FOLDED_NAME = {name.lower(): sym for name, sym in _NAMED_KEYSYMS.items()}


def _keysym_to_lower(sym: int) -> int:
    if 0x41 <= sym <= 0x5A:
        return sym + 0x20
    if 0xC0 <= sym <= 0xDE and sym != 0xD7:
        return sym + 0x20
    return sym


def _is_latin1(code: int) -> bool:
    return 0x20 <= code <= 0x7E or 0xA0 <= code <= 0xFF


def _lookup(name: str) -> int | None:
    if len(name) == 1 and _is_latin1(ord(name)):
        return ord(name)
    sym = _BY_FOLDED_NAME.get(name.lower())
    if sym is not None:
        return sym
    lowered = name.lower()
    if lowered.startswith("u") and len(name) > 1:
        try:
            code = int(name[1:], 16)
        except ValueError:
            return None
        if _is_latin1(code):
            return code
        if 0x100 <= code <= 0x10FFFF:
            return 0x01000000 + code
        return None
    if lowered.startswith("0x") and len(name) > 2:
        try:
            return int(name[2:], 16)
        except ValueError:
            return None
    if lowered.startswith("xf86_"):
        return _BY_FOLDED_NAME.get("xf86" + lowered[5:])
    return None


def keysym_from_name(name: str) -> int | None:
    """Return the lower-case keysym for a key name, or ``None`` if unknown.

    Names are matched without regard to case.
    """
    if not name:
        return None
    sym = _lookup(name)
    return None if sym is None else _keysym_to_lower(sym)


@dataclass
class Keybind:
    """A key combination and the actions it runs."""

    modifiers: Modifier = Modifier.NONE
    keysyms: tuple[int, ...] = ()
    actions: list[Action] = field(default_factory=list)

    def same_as(self, other: Keybind) -> bool:
        return self.modifiers == other.modifiers and self.keysyms == other.keysyms


def create_keybind(spec: str) -> Keybind:
    """Parse a binding such as ``W-Return`` or ``C-A-Delete``.

    Raises ``ValueError`` if a key name is unknown. At most ``MAX_KEYSYMS``
    keys are kept.
    """
    modifiers = Modifier.NONE
    keysyms: list[int] = []
    for symname in spec.split("-"):
        modifier = parse_modifier(symname)
        if modifier:
            modifiers |= modifier
            continue
        sym = keysym_from_name(symname)
        if sym is None:
            log.error("unknown keybind (%s)", symname)
            raise ValueError(f"unknown keybind ({symname})")
        keysyms.append(sym)
        if len(keysyms) == MAX_KEYSYMS:
            log.error(
                "There are a lot of fingers involved. We stopped counting at %u.",
                MAX_KEYSYMS,
            )
            log.error("Offending keybind was %s", spec)
            break
    return Keybind(modifiers, tuple(keysyms))