"""Parsing of boolean values as they appear in configuration files."""

from __future__ import annotations

import logging
from typing import TypeVar

log = logging.getLogger(__name__)

_T = TypeVar("_T")

_TRUE_WORDS = frozenset({"yes", "true"})
_FALSE_WORDS = frozenset({"no", "false"})


def parse_bool(text: str | None, default: _T) -> bool | _T:
    """Return the boolean that *text* spells, or *default* if it spells none.

    The words ``yes``/``true`` and ``no``/``false`` are recognised without
    regard to case. Anything else is logged as an error.
    """
    if text is not None:
        word = text.lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    log.error("(%s) is not a boolean value", text)
    return default