"""Character classes, bonus points and scoring shared by the matching algorithms."""

from __future__ import annotations

import os
import unicodedata
from dataclasses import dataclass
from enum import IntEnum

from fzfcore.normalize import normalize_rune


class CharClass(IntEnum):
    """Class of a character; classes above NON_WORD are word characters."""

    WHITE = 0
    NON_WORD = 1
    DELIMITER = 2
    LOWER = 3
    UPPER = 4
    LETTER = 5
    NUMBER = 6


SCORE_MATCH = 16
SCORE_GAP_START = -3
SCORE_GAP_EXTENSION = -1

# Chosen so the bonus is cancelled once the gap between acronym characters
# grows beyond about 8 characters.
BONUS_BOUNDARY = SCORE_MATCH // 2
BONUS_NON_WORD = SCORE_MATCH // 2
BONUS_CAMEL123 = BONUS_BOUNDARY + SCORE_GAP_EXTENSION
BONUS_CONSECUTIVE = -(SCORE_GAP_START + SCORE_GAP_EXTENSION)
BONUS_FIRST_CHAR_MULTIPLIER = 2

_WHITE_CHARS = " \t\n\v\f\r\x85\xa0"


@dataclass
class _SchemeSettings:
    bonus_boundary_white: int = BONUS_BOUNDARY + 2
    bonus_boundary_delimiter: int = BONUS_BOUNDARY + 1
    delimiter_chars: str = "/,:;|"
    initial_char_class: CharClass = CharClass.WHITE


scheme = _SchemeSettings()
_active = scheme


def set_scheme(scheme: str) -> None:
    """Switch the scoring scheme to "default", "path" or "history"."""
    if scheme == "default":
        _active.bonus_boundary_white = BONUS_BOUNDARY + 2
        _active.bonus_boundary_delimiter = BONUS_BOUNDARY + 1
    elif scheme == "path":
        _active.bonus_boundary_white = BONUS_BOUNDARY
        _active.bonus_boundary_delimiter = BONUS_BOUNDARY + 1
        _active.delimiter_chars = "/" if os.sep == "/" else os.sep + "/"
        _active.initial_char_class = CharClass.DELIMITER
    elif scheme == "history":
        _active.bonus_boundary_white = BONUS_BOUNDARY
        _active.bonus_boundary_delimiter = BONUS_BOUNDARY
    else:
        raise ValueError(f"unknown scoring scheme: {scheme!r}")


def _char_class_of_ascii(char: str) -> CharClass:
    if "a" <= char <= "z":
        return CharClass.LOWER
    if "A" <= char <= "Z":
        return CharClass.UPPER
    if "0" <= char <= "9":
        return CharClass.NUMBER
    if char in _WHITE_CHARS:
        return CharClass.WHITE
    if char in _active.delimiter_chars:
        return CharClass.DELIMITER
    return CharClass.NON_WORD


def _char_class_of_non_ascii(char: str) -> CharClass:
    category = unicodedata.category(char)
    if category == "Ll":
        return CharClass.LOWER
    if category == "Lu":
        return CharClass.UPPER
    if category.startswith("N"):
        return CharClass.NUMBER
    if category.startswith("L"):
        return CharClass.LETTER
    if char.isspace():
        return CharClass.WHITE
    if char in _active.delimiter_chars:
        return CharClass.DELIMITER
    return CharClass.NON_WORD


def char_class_of(char: str) -> CharClass:
    """Return the class of a single character."""
    if ord(char) < 128:
        return _char_class_of_ascii(char)
    return _char_class_of_non_ascii(char)


def bonus_for(prev_class: CharClass, char_class: CharClass) -> int:
    """Return the bonus for a character of one class following another."""
    if char_class > CharClass.NON_WORD:
        if prev_class == CharClass.WHITE:
            return _active.bonus_boundary_white
        if prev_class == CharClass.DELIMITER:
            return _active.bonus_boundary_delimiter
        if prev_class == CharClass.NON_WORD:
            return BONUS_BOUNDARY
    if (prev_class == CharClass.LOWER and char_class == CharClass.UPPER) or (
        prev_class != CharClass.NUMBER and char_class == CharClass.NUMBER
    ):
        return BONUS_CAMEL123
    if char_class == CharClass.NON_WORD:
        return BONUS_NON_WORD
    if char_class == CharClass.WHITE:
        return _active.bonus_boundary_white
    return 0


def bonus_at(text: str, idx: int) -> int:
    """Return the bonus for the character at ``idx`` of ``text``."""
    if idx == 0:
        return _active.bonus_boundary_white
    return bonus_for(char_class_of(text[idx - 1]), char_class_of(text[idx]))


def _lower_rune(char: str) -> str:
    """Lowercase one character, keeping it a single character."""
    lowered = char.lower()
    if len(lowered) == 1:
        return lowered
    return lowered[0] if lowered[0].isascii() else char


def _try_skip(text: str, case_sensitive: bool, char: str, start: int) -> int:
    rest = text[start:]
    idx = rest.find(char)
    if idx == 0:
        return start
    if not case_sensitive and "a" <= char <= "z":
        region = rest[:idx] if idx > 0 else rest
        upper_idx = region.find(char.upper())
        if upper_idx >= 0:
            idx = upper_idx
    if idx < 0:
        return -1
    return start + idx


def ascii_fuzzy_index(text: str, pattern: str, case_sensitive: bool) -> int:
    """Return where a fuzzy match may start in ASCII text, 0 if unknown, -1 if impossible."""
    if not text.isascii():
        return 0
    if not pattern.isascii():
        return -1

    first_idx = idx = 0
    for pidx, char in enumerate(pattern):
        idx = _try_skip(text, case_sensitive, char, idx)
        if idx < 0:
            return -1
        if pidx == 0 and idx > 0:
            # Step back so the bonus of the first character is computed correctly
            first_idx = idx - 1
        idx += 1
    return first_idx


def calculate_score(
    case_sensitive: bool,
    normalize: bool,
    text: str,
    pattern: str,
    sidx: int,
    eidx: int,
    with_pos: bool,
) -> tuple[int, list[int] | None]:
    """Score the match of ``pattern`` within ``text[sidx:eidx]``; positions if asked."""
    pidx = 0
    score = 0
    in_gap = False
    consecutive = 0
    first_bonus = 0
    positions: list[int] | None = [] if with_pos else None
    prev_class = _active.initial_char_class
    if sidx > 0:
        prev_class = char_class_of(text[sidx - 1])

    for idx, char in enumerate(text[sidx:eidx], start=sidx):
        char_class = char_class_of(char)
        if not case_sensitive:
            char = _lower_rune(char)
        if normalize:
            char = normalize_rune(char)
        if pidx < len(pattern) and char == pattern[pidx]:
            if positions is not None:
                positions.append(idx)
            score += SCORE_MATCH
            bonus = bonus_for(prev_class, char_class)
            if consecutive == 0:
                first_bonus = bonus
            else:
                if bonus >= BONUS_BOUNDARY and bonus > first_bonus:
                    first_bonus = bonus
                bonus = max(bonus, first_bonus, BONUS_CONSECUTIVE)
            if pidx == 0:
                score += bonus * BONUS_FIRST_CHAR_MULTIPLIER
            else:
                score += bonus
            in_gap = False
            consecutive += 1
            pidx += 1
        else:
            score += SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START
            in_gap = True
            consecutive = 0
            first_bonus = 0
        prev_class = char_class
    return score, positions