"""Parsing of ANSI escape sequences and tracking of the colours they set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import Callable, Optional


class Attr(IntFlag):
    """Text attributes set by SGR sequences."""

    BOLD = 1
    DIM = 2
    ITALIC = 4
    UNDERLINE = 8
    BLINK = 16
    REVERSE = 32
    STRIKE_THROUGH = 64


_NO_ATTR = Attr(0)

_ATTR_CODES = (
    (Attr.BOLD, "1"),
    (Attr.DIM, "2"),
    (Attr.ITALIC, "3"),
    (Attr.UNDERLINE, "4"),
    (Attr.BLINK, "5"),
    (Attr.REVERSE, "7"),
    (Attr.STRIKE_THROUGH, "9"),
)

_SET_ATTR = {
    1: Attr.BOLD,
    2: Attr.DIM,
    3: Attr.ITALIC,
    4: Attr.UNDERLINE,
    5: Attr.BLINK,
    7: Attr.REVERSE,
    9: Attr.STRIKE_THROUGH,
}


@dataclass(frozen=True)
class AnsiState:
    """Colours and attributes in effect; -1 means the terminal default."""

    fg: int = -1
    bg: int = -1
    attr: Attr = _NO_ATTR
    lbg: int = -1

    def colored(self) -> bool:
        """Return True if anything differs from the plain default."""
        return self.fg != -1 or self.bg != -1 or self.attr > 0 or self.lbg >= 0

    def to_string(self) -> str:
        """Return the SGR sequence that reproduces this state, or "" if plain."""
        if not self.colored():
            return ""
        parts = "".join(code + ";" for flag, code in _ATTR_CODES if self.attr & flag)
        parts += _color_code(self.fg, 30) + _color_code(self.bg, 40)
        return "\x1b[" + parts.removesuffix(";") + "m"


@dataclass
class AnsiOffset:
    """A run of characters from ``start`` to ``end`` drawn in ``color``."""

    start: int
    end: int
    color: AnsiState


def _color_code(color: int, offset: int) -> str:
    if color == -1:
        code = str(offset + 9)
    elif color < 8:
        code = str(offset + color)
    elif color < 16:
        code = str(offset - 30 + 90 + color - 8)
    elif color < 256:
        code = f"{offset + 8};5;{color}"
    elif color >= 1 << 24:
        red, green, blue = (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF
        code = f"{offset + 8};2;{red};{green};{blue}"
    else:
        code = ""
    return code + ";"


def _is_print(char: str) -> bool:
    return "\x20" <= char <= "\x7e"


def _match_operating_system_command(text: str, start: int) -> int:
    # \x1b][0-9][;:][[:print:]]+(?:\x1b\\|\x07), the first five characters already matched
    i = start + 5
    while i < len(text) and _is_print(text[i]):
        i += 1
    if i < len(text):
        if text[i] == "\x07":
            return i + 1
        if text[i] == "\x1b" and i < len(text) - 1 and text[i + 1] == "\\":
            return i + 2
    return -1


def _match_control_sequence(text: str, start: int) -> int:
    # \x1b[\[()][0-9;:?]*[a-zA-Z@], the first two characters already matched
    for i in range(start + 2, len(text)):
        char = text[i]
        if char in "0123456789;:?":
            continue
        if "a" <= char <= "z" or "A" <= char <= "Z" or char == "@":
            return i + 1
        return -1
    return -1


def _find_escape(text: str, start: int) -> Optional[tuple[int, int]]:
    length = len(text)
    for i in range(start, length):
        char = text[i]
        if char == "\x08":
            if i > start and text[i - 1] != "\n":
                return i - 1, i + 1
        elif char == "\x1b":
            if i + 2 < length and text[i + 1] in "\\[()":
                end = _match_control_sequence(text, i)
                if end != -1:
                    return i, end
            if (
                i + 5 < length
                and text[i + 1] == "]"
                and text[i + 2] in "0123456789"
                and text[i + 3] in ";:"
                and _is_print(text[i + 4])
            ):
                end = _match_operating_system_command(text, i)
                if end != -1:
                    return i, end
            if i + 1 < length and text[i + 1] != "\n":
                return i, i + 2
        elif char in "\x0e\x0f":
            return i, i + 1
    return None


def next_ansi_escape_sequence(text: str) -> Optional[tuple[int, int]]:
    """Return the span of the first ANSI escape sequence in ``text``, or None.

    Equivalent to searching for
    ``(?:\\x1b[\\[()][0-9;:?]*[a-zA-Z@]|\\x1b][0-9][;:][[:print:]]+(?:\\x1b\\\\|\\x07)|\\x1b.|[\\x0e\\x0f]|.\\x08)``.
    """
    return _find_escape(text, 0)


def parse_ansi_code(text: str, delimiter: Optional[str]) -> tuple[int, Optional[str], str]:
    """Split off the first numeric parameter of an SGR body.

    Returns the number (-1 if not a non-negative integer), the delimiter in use
    and the remaining text. With no delimiter given, ";" or else ":" is used.
    """
    remaining = ""
    if delimiter is None:
        i = text.find(";")
        if i < 0:
            i = text.find(":")
    else:
        i = text.find(delimiter)
    if i >= 0:
        delimiter = text[i]
        remaining = text[i + 1:]
        text = text[:i]

    if not text or any(char not in "0123456789" for char in text):
        return -1, delimiter, remaining
    return int(text), delimiter, remaining


def interpret_code(ansi_code: str, prev_state: Optional[AnsiState]) -> AnsiState:
    """Return the state after applying one escape sequence to ``prev_state``."""
    if prev_state is None:
        fg, bg, attr, lbg = -1, -1, _NO_ATTR, -1
    else:
        fg, bg, attr, lbg = prev_state.fg, prev_state.bg, prev_state.attr, prev_state.lbg

    if not (ansi_code.startswith("\x1b[") and ansi_code.endswith("m")):
        if prev_state is not None and ansi_code.endswith("0K"):
            lbg = prev_state.bg
        return AnsiState(fg, bg, attr, lbg)

    if len(ansi_code) <= 3:
        return AnsiState(-1, -1, _NO_ATTR, lbg)

    body = ansi_code[2:-1]
    colors = {"fg": fg, "bg": bg}
    target = "fg"
    stage = 0
    delimiter: Optional[str] = None
    while body:
        num, delimiter, body = parse_ansi_code(body, delimiter)
        if num == -1:
            continue
        if stage == 0:
            if num == 38:
                target, stage = "fg", 1
            elif num == 48:
                target, stage = "bg", 1
            elif num == 39:
                colors["fg"] = -1
            elif num == 49:
                colors["bg"] = -1
            elif num in _SET_ATTR:
                attr |= _SET_ATTR[num]
            elif num == 23:
                attr &= ~Attr.ITALIC
            elif num == 24:
                attr &= ~Attr.UNDERLINE
            elif num == 0:
                colors["fg"] = colors["bg"] = -1
                attr = _NO_ATTR
            elif 30 <= num <= 37:
                colors["fg"] = num - 30
            elif 40 <= num <= 47:
                colors["bg"] = num - 40
            elif 90 <= num <= 97:
                colors["fg"] = num - 90 + 8
            elif 100 <= num <= 107:
                colors["bg"] = num - 100 + 8
        elif stage == 1:
            if num == 2:
                stage = 10
            elif num == 5:
                stage = 2
            else:
                stage = 0
        elif stage == 2:
            colors[target] = num
            stage = 0
        elif stage == 10:
            colors[target] = (1 << 24) | (num << 16)
            stage = 11
        elif stage == 11:
            colors[target] |= num << 8
            stage = 12
        elif stage == 12:
            colors[target] |= num
            stage = 0

    if stage > 0:
        colors[target] = -1
    return AnsiState(colors["fg"], colors["bg"], Attr(attr), lbg)


def _same_state(new: AnsiState, old: Optional[AnsiState]) -> bool:
    if old is None:
        return not new.colored()
    return new == old


Processor = Callable[[str, Optional[AnsiState]], bool]


def extract_color(
    text: str,
    state: Optional[AnsiState],
    proc: Optional[Processor],
) -> tuple[str, Optional[list[AnsiOffset]], Optional[AnsiState]]:
    """Strip escape sequences from ``text`` and report the coloured runs.

    Returns the plain text, the coloured runs (None if there are none) and the
    state in effect at the end. ``proc`` sees every plain segment with the
    state before it; returning False stops with ``("", None, None)``.
    """
    offsets: list[AnsiOffset] = []
    if state is not None:
        offsets.append(AnsiOffset(0, 0, state))

    output: list[str] = []
    prev_idx = 0
    rune_count = 0
    idx = 0
    while idx < len(text):
        found = _find_escape(text, idx)
        if found is None:
            break
        start, end = found
        idx = end

        prev = text[prev_idx:start]
        if proc is not None and not proc(prev, state):
            return "", None, None
        prev_idx = idx

        if prev:
            rune_count += len(prev)
            output.append(prev)

        new_state = interpret_code(text[start:idx], state)
        if not _same_state(new_state, state):
            if state is not None:
                offsets[-1].end = rune_count
            if new_state.colored():
                state = new_state
                offsets.append(AnsiOffset(rune_count, rune_count, new_state))
            else:
                state = None

    if prev_idx == 0:
        rest = text
        trimmed = text
    else:
        rest = text[prev_idx:]
        output.append(rest)
        trimmed = "".join(output)
    if proc is not None:
        proc(rest, state)
    if offsets:
        if rest and state is not None:
            rune_count += len(rest)
            offsets[-1].end = rune_count
        return trimmed, offsets, state
    return trimmed, None, state