"""Find identifiers in C source files, ignoring those inside comments."""

from __future__ import annotations

import enum
import re
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

USAGE = (
    "Usage: find-banned [OPTIONS...] FILE\n"
    "When FILE is -, read stdin\n"
    "OPTIONS:\n"
    "  --tokens=<tokens>     Comma-separated string of idents to grep for\n"
)


class TokenKind(enum.Enum):
    NONE = 0
    IDENTIFIER = 1
    LITERAL = 2
    SPECIAL = 3


class Special(enum.IntEnum):
    """Codes of multi-character specials; single characters use their code point."""

    ELLIPSIS = 256
    ASSIGN = 257
    BIT_OP = 258
    INC_OP = 259
    DEC_OP = 260
    PTR_OP = 261
    AND_OP = 262
    OR_OP = 263
    COMPARISON_OP = 264
    COMMENT_BEGIN = 265
    COMMENT_END = 266
    COMMENT_LINE_BEGIN = 267


@dataclass
class Token:
    line: int
    kind: TokenKind
    name: str = ""
    special: int = 0


_MULTI_SPECIALS: tuple[tuple[str, Special], ...] = (
    ("...", Special.ELLIPSIS),
    (">>=", Special.ASSIGN),
    ("<<=", Special.ASSIGN),
    ("+=", Special.ASSIGN),
    ("-=", Special.ASSIGN),
    ("*=", Special.ASSIGN),
    ("/=", Special.ASSIGN),
    ("%=", Special.ASSIGN),
    ("&=", Special.ASSIGN),
    ("^=", Special.ASSIGN),
    ("|=", Special.ASSIGN),
    (">>", Special.BIT_OP),
    ("<<", Special.BIT_OP),
    ("++", Special.INC_OP),
    ("--", Special.DEC_OP),
    ("->", Special.PTR_OP),
    ("&&", Special.AND_OP),
    ("||", Special.OR_OP),
    ("<=", Special.COMPARISON_OP),
    (">=", Special.COMPARISON_OP),
    ("==", Special.COMPARISON_OP),
    ("!=", Special.COMPARISON_OP),
    ("/*", Special.COMMENT_BEGIN),
    ("*/", Special.COMMENT_END),
    ("//", Special.COMMENT_LINE_BEGIN),
)
_SINGLE_SPECIALS = ";{},:=()[].&!~-+*/%<>^|?"

_SPECIAL_CODES: dict[str, int] = dict(_MULTI_SPECIALS)
_SPECIAL_CODES.update({char: ord(char) for char in _SINGLE_SPECIALS})

# Alternatives are ordered longest first, so the first match is the longest.
_SPECIAL = re.compile(
    "|".join(re.escape(combo) for combo, _ in _MULTI_SPECIALS)
    + "|"
    + "|".join(re.escape(char) for char in _SINGLE_SPECIALS)
)
_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_#]*")
_NUMBER = re.compile(r"[0-9][0-9a-fA-Fx]*")
_DIRECTIVE = re.compile(r"#[^\n]*")

_IDENT_START = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
_DIGITS = frozenset("0123456789")
_SPECIAL_START = frozenset("+-*/%.><=!&|^{}(),;:[]~?")


def lex(text: str) -> list[Token]:
    """Split C source into identifier, literal and special tokens.

    Preprocessor lines are skipped. A ``//`` comment yields a
    ``COMMENT_BEGIN`` token and a ``COMMENT_END`` token at the end of the line.
    """
    tokens: list[Token] = []
    line = 1
    in_single_comment = False
    pos = 0
    end = len(text)
    while pos < end:
        char = text[pos]
        if char in _IDENT_START:
            match = _IDENTIFIER.match(text, pos)
            tokens.append(Token(line, TokenKind.IDENTIFIER, match.group()))
            pos = match.end()
        elif char in _DIGITS:
            match = _NUMBER.match(text, pos)
            tokens.append(Token(line, TokenKind.LITERAL, match.group()))
            pos = match.end()
        elif char in _SPECIAL_START:
            match = _SPECIAL.match(text, pos)
            combo = match.group()
            special = _SPECIAL_CODES[combo]
            if special == Special.COMMENT_LINE_BEGIN:
                special = Special.COMMENT_BEGIN
                in_single_comment = True
            tokens.append(Token(line, TokenKind.SPECIAL, combo, special))
            pos = match.end()
        elif char == "#":
            pos = _DIRECTIVE.match(text, pos).end()
            if pos < end:
                line += 1
                pos += 1
        elif char == "\n":
            if in_single_comment:
                tokens.append(Token(line, TokenKind.SPECIAL, "", Special.COMMENT_END))
                in_single_comment = False
            line += 1
            pos += 1
        else:
            pos += 1
    return tokens


def grep(tokens: Iterable[Token], pattern: str | None = None) -> list[Token]:
    """Return identifier tokens outside comments that equal *pattern*.

    With no pattern, every identifier outside comments is returned.
    """
    found: list[Token] = []
    depth = 0
    for token in tokens:
        if token.kind is TokenKind.SPECIAL:
            if token.special == Special.COMMENT_BEGIN:
                depth += 1
            elif token.special == Special.COMMENT_END:
                depth -= 1
        if depth:
            continue
        if token.kind is TokenKind.IDENTIFIER and (
            pattern is None or token.name == pattern
        ):
            found.append(token)
    return found


class _UnreadableFile(Exception):
    pass


def _process_file(filename: str, patterns: Sequence[str] | None) -> bool:
    try:
        with open(filename, encoding="utf-8", errors="replace", newline="") as stream:
            text = stream.read()
    except OSError as exc:
        print(f"warn: cannot read '{filename}'", file=sys.stderr)
        raise _UnreadableFile(filename) from exc

    tokens = lex(text)
    searches: Sequence[str | None] = [None] if patterns is None else patterns
    found = False
    for pattern in searches:
        matches = grep(tokens, pattern)
        for token in matches:
            print(f"{filename}:{token.line}\t{token.name}")
        if pattern is not None and matches:
            found = True
    return found


def main(argv: Sequence[str] | None = None) -> int:
    """Report identifiers in a file; return 1 if a searched-for one was found."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print(USAGE, end="")
        return 0

    patterns: list[str] | None = None
    found = False
    try:
        for arg in args:
            if arg.startswith("--tokens="):
                patterns = arg[len("--tokens="):].split(",")
            if arg == "-":
                for line in sys.stdin:
                    found |= _process_file(line.removesuffix("\n"), patterns)
                break
            if not arg.startswith("-"):
                found |= _process_file(arg, patterns)
                break
    except _UnreadableFile:
        return 1
    return int(found)