"""Fuzzy, exact, prefix, suffix and equality matching of a pattern within a text.

Every matcher assumes that ``pattern`` is already lowercase when matching is
case-insensitive, and already normalized when ``normalize`` is set.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from fzfcore.normalize import normalize_rune
from fzfcore.scoring import (
    BONUS_BOUNDARY,
    BONUS_CONSECUTIVE,
    BONUS_FIRST_CHAR_MULTIPLIER,
    SCORE_GAP_EXTENSION,
    SCORE_GAP_START,
    SCORE_MATCH,
    CharClass,
    ascii_fuzzy_index,
    bonus_at,
    bonus_for,
    calculate_score,
    char_class_of,
    scheme,
)

_WHITE_LATIN1 = " \t\n\v\f\r\x85\xa0"


@dataclass(frozen=True)
class MatchResult:
    """Span of a match, its score and, when requested, the matched positions."""

    start: int
    end: int
    score: int
    positions: Optional[list[int]] = None

    @property
    def matched(self) -> bool:
        return self.start >= 0


Algo = Callable[[bool, bool, bool, str, str, bool], MatchResult]

_NO_MATCH = MatchResult(-1, -1, 0)


def _index_at(index: int, length: int, forward: bool) -> int:
    return index if forward else length - index - 1


def _is_space(char: str) -> bool:
    if ord(char) < 256:
        return char in _WHITE_LATIN1
    return char.isspace()


def _to_lower(char: str) -> str:
    """Lowercase one character with a single-character result."""
    lowered = char.lower()
    return lowered[0] if lowered else char


def _fold_case(char: str) -> str:
    if "A" <= char <= "Z":
        return chr(ord(char) + 32)
    if ord(char) > 127:
        return _to_lower(char)
    return char


def _leading_whitespaces(text: str) -> int:
    return len(text) - len(text.lstrip(_WHITE_LATIN1)) if text else 0


def _count_leading(text: str) -> int:
    count = 0
    for char in text:
        if not _is_space(char):
            break
        count += 1
    return count


def _count_trailing(text: str) -> int:
    count = 0
    for char in reversed(text):
        if not _is_space(char):
            break
        count += 1
    return count


def fuzzy_match_v2(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
) -> MatchResult:
    """Find the highest-scoring fuzzy occurrence of ``pattern`` in ``text``."""
    m = len(pattern)
    if m == 0:
        return MatchResult(0, 0, 0, [] if with_pos else None)
    n = len(text)

    # Phase 1: quick rejection for ASCII text
    idx = ascii_fuzzy_index(text, pattern, case_sensitive)
    if idx < 0:
        return _NO_MATCH

    h0 = [0] * n
    c0 = [0] * n
    bonuses = [0] * n
    first = [0] * m
    chars = list(text)

    # Phase 2: bonus for each position and the first row of the score matrix
    max_score, max_score_pos = 0, 0
    pidx, last_idx = 0, 0
    pchar0 = pchar = pattern[0]
    prev_h0 = 0
    prev_class = scheme.initial_char_class
    in_gap = False
    for off, char in enumerate(text[idx:], start=idx):
        char_class = char_class_of(char)
        if ord(char) < 128:
            if not case_sensitive and char_class == CharClass.UPPER:
                char = chr(ord(char) + 32)
        else:
            if not case_sensitive and char_class == CharClass.UPPER:
                char = _to_lower(char)
            if normalize:
                char = normalize_rune(char)

        chars[off] = char
        bonus = bonus_for(prev_class, char_class)
        bonuses[off] = bonus
        prev_class = char_class

        if char == pchar:
            if pidx < m:
                first[pidx] = off
                pidx += 1
                pchar = pattern[min(pidx, m - 1)]
            last_idx = off

        if char == pchar0:
            score = SCORE_MATCH + bonus * BONUS_FIRST_CHAR_MULTIPLIER
            h0[off] = score
            c0[off] = 1
            if m == 1 and (forward and score > max_score or not forward and score >= max_score):
                max_score, max_score_pos = score, off
                if forward and bonus >= BONUS_BOUNDARY:
                    break
            in_gap = False
        else:
            gap = SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START
            h0[off] = max(prev_h0 + gap, 0)
            c0[off] = 0
            in_gap = True
        prev_h0 = h0[off]

    if pidx != m:
        return _NO_MATCH
    if m == 1:
        return MatchResult(
            max_score_pos,
            max_score_pos + 1,
            max_score,
            [max_score_pos] if with_pos else None,
        )

    # Phase 3: fill in the score matrix; omission of pattern characters is not allowed
    f0 = first[0]
    width = last_idx - f0 + 1
    scores = [0] * (width * m)
    scores[:width] = h0[f0:last_idx + 1]
    runs = [0] * (width * m)
    runs[:width] = c0[f0:last_idx + 1]

    for pidx in range(1, m):
        start = first[pidx]
        pchar = pattern[pidx]
        row = pidx * width
        in_gap = False
        scores[row + start - f0 - 1] = 0
        for col, char in enumerate(chars[start:last_idx + 1], start=start):
            j0 = col - f0
            gap = SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START
            s2 = scores[row + j0 - 1] + gap
            s1 = 0
            consecutive = 0

            if pchar == char:
                s1 = scores[row - width + j0 - 1] + SCORE_MATCH
                bonus = bonuses[col]
                consecutive = runs[row - width + j0 - 1] + 1
                if consecutive > 1:
                    first_bonus = bonuses[col - consecutive + 1]
                    if bonus >= BONUS_BOUNDARY and bonus > first_bonus:
                        # Break the consecutive chunk
                        consecutive = 1
                    else:
                        bonus = max(bonus, BONUS_CONSECUTIVE, first_bonus)
                if s1 + bonus < s2:
                    s1 += bonuses[col]
                    consecutive = 0
                else:
                    s1 += bonus
            runs[row + j0] = consecutive

            in_gap = s1 < s2
            score = max(s1, s2, 0)
            if pidx == m - 1 and (
                forward and score > max_score or not forward and score >= max_score
            ):
                max_score, max_score_pos = score, col
            scores[row + j0] = score

    # Phase 4: optional backtrace for character positions
    positions: Optional[list[int]] = None
    j = f0
    if with_pos:
        positions = []
        i = m - 1
        j = max_score_pos
        prefer_match = True
        while True:
            base = i * width
            j0 = j - f0
            s = scores[base + j0]
            s1 = s2 = 0
            if i > 0 and j >= first[i]:
                s1 = scores[base - width + j0 - 1]
            if j > first[i]:
                s2 = scores[base + j0 - 1]

            if s > s1 and (s > s2 or s == s2 and prefer_match):
                positions.append(j)
                if i == 0:
                    break
                i -= 1
            below = base + width + j0 + 1
            prefer_match = runs[base + j0] > 1 or (below < len(runs) and runs[below] > 0)
            j -= 1

    # The start offset is exact only after a backtrace
    return MatchResult(j, max_score_pos + 1, max_score, positions)


def fuzzy_match_v1(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
) -> MatchResult:
    """Find the first fuzzy occurrence of ``pattern``, then shorten it backwards."""
    if not pattern:
        return MatchResult(0, 0, 0)
    if ascii_fuzzy_index(text, pattern, case_sensitive) < 0:
        return _NO_MATCH

    n = len(text)
    lp = len(pattern)
    pidx = 0
    sidx = eidx = -1

    for index in range(n):
        char = text[_index_at(index, n, forward)]
        if not case_sensitive:
            char = _fold_case(char)
        if normalize:
            char = normalize_rune(char)
        if char == pattern[_index_at(pidx, lp, forward)]:
            if sidx < 0:
                sidx = index
            pidx += 1
            if pidx == lp:
                eidx = index + 1
                break

    if sidx < 0 or eidx < 0:
        return _NO_MATCH

    pidx -= 1
    for index in range(eidx - 1, sidx - 1, -1):
        char = text[_index_at(index, n, forward)]
        if not case_sensitive:
            char = _fold_case(char)
        if char == pattern[_index_at(pidx, lp, forward)]:
            pidx -= 1
            if pidx < 0:
                sidx = index
                break

    if not forward:
        sidx, eidx = n - eidx, n - sidx

    score, positions = calculate_score(
        case_sensitive, normalize, text, pattern, sidx, eidx, with_pos
    )
    return MatchResult(sidx, eidx, score, positions)


def exact_match_naive(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
) -> MatchResult:
    """Find the exact occurrence of ``pattern`` with the best bonus at its first character."""
    if not pattern:
        return MatchResult(0, 0, 0)

    n = len(text)
    lp = len(pattern)
    if n < lp:
        return _NO_MATCH
    if ascii_fuzzy_index(text, pattern, case_sensitive) < 0:
        return _NO_MATCH

    pidx = 0
    best_pos, bonus, best_bonus = -1, 0, -1
    index = 0
    while index < n:
        text_idx = _index_at(index, n, forward)
        char = text[text_idx]
        if not case_sensitive:
            char = _fold_case(char)
        if normalize:
            char = normalize_rune(char)
        pattern_idx = _index_at(pidx, lp, forward)
        if pattern[pattern_idx] == char:
            if pattern_idx == 0:
                bonus = bonus_at(text, text_idx)
            pidx += 1
            if pidx == lp:
                if bonus > best_bonus:
                    best_pos, best_bonus = index, bonus
                if bonus >= BONUS_BOUNDARY:
                    break
                index -= pidx - 1
                pidx, bonus = 0, 0
        else:
            index -= pidx
            pidx, bonus = 0, 0
        index += 1

    if best_pos < 0:
        return _NO_MATCH
    if forward:
        sidx = best_pos - lp + 1
        eidx = best_pos + 1
    else:
        sidx = n - (best_pos + 1)
        eidx = n - (best_pos - lp + 1)
    score, _ = calculate_score(case_sensitive, normalize, text, pattern, sidx, eidx, False)
    return MatchResult(sidx, eidx, score)


def prefix_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
) -> MatchResult:
    """Match ``pattern`` at the start of ``text``, ignoring leading whitespace."""
    if not pattern:
        return MatchResult(0, 0, 0)

    trimmed = 0 if _is_space(pattern[0]) else _count_leading(text)
    if len(text) - trimmed < len(pattern):
        return _NO_MATCH

    for char, pchar in zip(text[trimmed:], pattern):
        if not case_sensitive:
            char = _to_lower(char)
        if normalize:
            char = normalize_rune(char)
        if char != pchar:
            return _NO_MATCH

    end = trimmed + len(pattern)
    score, _ = calculate_score(case_sensitive, normalize, text, pattern, trimmed, end, False)
    return MatchResult(trimmed, end, score)


def suffix_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
) -> MatchResult:
    """Match ``pattern`` at the end of ``text``, ignoring trailing whitespace."""
    trimmed_len = len(text)
    if not pattern or not _is_space(pattern[-1]):
        trimmed_len -= _count_trailing(text)
    if not pattern:
        return MatchResult(trimmed_len, trimmed_len, 0)

    diff = trimmed_len - len(pattern)
    if diff < 0:
        return _NO_MATCH

    for char, pchar in zip(text[diff:], pattern):
        if not case_sensitive:
            char = _to_lower(char)
        if normalize:
            char = normalize_rune(char)
        if char != pchar:
            return _NO_MATCH

    sidx = trimmed_len - len(pattern)
    score, _ = calculate_score(
        case_sensitive, normalize, text, pattern, sidx, trimmed_len, False
    )
    return MatchResult(sidx, trimmed_len, score)


def equal_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
) -> MatchResult:
    """Match when ``text`` equals ``pattern``, ignoring surrounding whitespace."""
    lp = len(pattern)
    if lp == 0:
        return _NO_MATCH

    leading = 0 if _is_space(pattern[0]) else _count_leading(text)
    trailing = 0 if _is_space(pattern[-1]) else _count_trailing(text)
    if len(text) - leading - trailing != lp:
        return _NO_MATCH

    if normalize:
        match = True
        for char, pchar in zip(text[leading:], pattern):
            if not case_sensitive:
                char = _to_lower(char)
            if normalize_rune(pchar) != normalize_rune(char):
                match = False
                break
    else:
        core = text[leading:len(text) - trailing]
        if not case_sensitive:
            core = core.lower()
        match = core == pattern

    if not match:
        return _NO_MATCH
    white = scheme.bonus_boundary_white
    score = (SCORE_MATCH + white) * lp + (BONUS_FIRST_CHAR_MULTIPLIER - 1) * white
    return MatchResult(leading, leading + lp, score)