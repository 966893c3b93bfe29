import pytest

from fzfcore.algo import (
    MatchResult,
    equal_match,
    exact_match_naive,
    fuzzy_match_v1,
    fuzzy_match_v2,
    prefix_match,
    suffix_match,
)
from fzfcore.scoring import (
    BONUS_BOUNDARY,
    BONUS_CAMEL123,
    BONUS_CONSECUTIVE,
    BONUS_FIRST_CHAR_MULTIPLIER,
    BONUS_NON_WORD,
    SCORE_GAP_EXTENSION,
    SCORE_GAP_START,
    SCORE_MATCH,
    CharClass,
    scheme,
    set_scheme,
)

BBW = BONUS_BOUNDARY + 2
BBD = BONUS_BOUNDARY + 1
MULT = BONUS_FIRST_CHAR_MULTIPLIER
DIRS = [True, False]


@pytest.fixture(autouse=True)
def default_scheme():
    set_scheme("default")
    scheme.delimiter_chars = "/,:;|"
    scheme.initial_char_class = CharClass.WHITE
    yield


def _pat(pattern, case_sensitive):
    return pattern if case_sensitive else pattern.lower()


def _span(res):
    if res.positions:
        positions = sorted(res.positions)
        return positions[0], positions[-1] + 1, res.score
    return res.start, res.end, res.score


FUZZY_CASES = [
    (False, "fooBarbaz1", "oBZ", 2, 9,
     SCORE_MATCH * 3 + BONUS_CAMEL123 + SCORE_GAP_START + SCORE_GAP_EXTENSION * 3),
    (False, "foo bar baz", "fbb", 0, 9,
     SCORE_MATCH * 3 + BBW * MULT + BBW * 2 + 2 * SCORE_GAP_START + 4 * SCORE_GAP_EXTENSION),
    (False, "/AutomatorDocument.icns", "rdoc", 9, 13,
     SCORE_MATCH * 4 + BONUS_CAMEL123 + BONUS_CONSECUTIVE * 2),
    (False, "/man1/zshcompctl.1", "zshc", 6, 10,
     SCORE_MATCH * 4 + BBD * MULT + BBD * 3),
    (False, "/.oh-my-zsh/cache", "zshc", 8, 13,
     SCORE_MATCH * 4 + BONUS_BOUNDARY * MULT + BONUS_BOUNDARY * 2 + SCORE_GAP_START + BBD),
    (False, "ab0123 456", "12356", 3, 10,
     SCORE_MATCH * 5 + BONUS_CONSECUTIVE * 3 + SCORE_GAP_START + SCORE_GAP_EXTENSION),
    (False, "abc123 456", "12356", 3, 10,
     SCORE_MATCH * 5 + BONUS_CAMEL123 * MULT + BONUS_CAMEL123 * 2 + BONUS_CONSECUTIVE
     + SCORE_GAP_START + SCORE_GAP_EXTENSION),
    (False, "foo/bar/baz", "fbb", 0, 9,
     SCORE_MATCH * 3 + BBW * MULT + BBD * 2 + 2 * SCORE_GAP_START + 4 * SCORE_GAP_EXTENSION),
    (False, "fooBarBaz", "fbb", 0, 7,
     SCORE_MATCH * 3 + BBW * MULT + BONUS_CAMEL123 * 2 + 2 * SCORE_GAP_START
     + 2 * SCORE_GAP_EXTENSION),
    (False, "foo barbaz", "fbb", 0, 8,
     SCORE_MATCH * 3 + BBW * MULT + BBW + SCORE_GAP_START * 2 + SCORE_GAP_EXTENSION * 3),
    (False, "fooBar Baz", "foob", 0, 4,
     SCORE_MATCH * 4 + BBW * MULT + BBW * 3),
    (False, "xFoo-Bar Baz", "foo-b", 1, 6,
     SCORE_MATCH * 5 + BONUS_CAMEL123 * MULT + BONUS_CAMEL123 * 2 + BONUS_NON_WORD
     + BONUS_BOUNDARY),
    (True, "fooBarbaz", "oBz", 2, 9,
     SCORE_MATCH * 3 + BONUS_CAMEL123 + SCORE_GAP_START + SCORE_GAP_EXTENSION * 3),
    (True, "Foo/Bar/Baz", "FBB", 0, 9,
     SCORE_MATCH * 3 + BBW * MULT + BBD * 2 + SCORE_GAP_START * 2 + SCORE_GAP_EXTENSION * 4),
    (True, "FooBarBaz", "FBB", 0, 7,
     SCORE_MATCH * 3 + BBW * MULT + BONUS_CAMEL123 * 2 + SCORE_GAP_START * 2
     + SCORE_GAP_EXTENSION * 2),
    (True, "FooBar Baz", "FooB", 0, 4,
     SCORE_MATCH * 4 + BBW * MULT + BBW * 2 + max(BONUS_CAMEL123, BBW)),
    (True, "foo-bar", "o-ba", 2, 6, SCORE_MATCH * 4 + BONUS_BOUNDARY * 3),
    (True, "fooBarbaz", "oBZ", -1, -1, 0),
    (True, "Foo Bar Baz", "fbb", -1, -1, 0),
    (True, "fooBarbaz", "fooBarbazz", -1, -1, 0),
]


@pytest.mark.parametrize("forward", DIRS)
@pytest.mark.parametrize("case_sensitive,text,pattern,sidx,eidx,score", FUZZY_CASES)
def test_fuzzy_match_v1(forward, case_sensitive, text, pattern, sidx, eidx, score):
    res = fuzzy_match_v1(case_sensitive, False, forward, text, _pat(pattern, case_sensitive), True)
    assert _span(res) == (sidx, eidx, score)


@pytest.mark.parametrize("forward", DIRS)
@pytest.mark.parametrize("case_sensitive,text,pattern,sidx,eidx,score", FUZZY_CASES)
def test_fuzzy_match_v2(forward, case_sensitive, text, pattern, sidx, eidx, score):
    res = fuzzy_match_v2(case_sensitive, False, forward, text, _pat(pattern, case_sensitive), True)
    assert _span(res) == (sidx, eidx, score)


def test_fuzzy_match_backward():
    res = fuzzy_match_v1(False, False, True, "foobar fb", "fb", True)
    assert _span(res) == (0, 4, SCORE_MATCH * 2 + BBW * MULT + SCORE_GAP_START + SCORE_GAP_EXTENSION)
    res = fuzzy_match_v1(False, False, False, "foobar fb", "fb", True)
    assert _span(res) == (7, 9, SCORE_MATCH * 2 + BBW * MULT + BBW)


EXACT_CASES = [
    (True, "fooBarbaz", "oBA", -1, -1, 0),
    (True, "fooBarbaz", "fooBarbazz", -1, -1, 0),
    (False, "fooBarbaz", "oBA", 2, 5, SCORE_MATCH * 3 + BONUS_CAMEL123 + BONUS_CONSECUTIVE),
    (False, "/AutomatorDocument.icns", "rdoc", 9, 13,
     SCORE_MATCH * 4 + BONUS_CAMEL123 + BONUS_CONSECUTIVE * 2),
    (False, "/man1/zshcompctl.1", "zshc", 6, 10, SCORE_MATCH * 4 + BBD * (MULT + 3)),
    (False, "/.oh-my-zsh/cache", "zsh/c", 8, 13,
     SCORE_MATCH * 5 + BONUS_BOUNDARY * (MULT + 3) + BBD),
]


@pytest.mark.parametrize("forward", DIRS)
@pytest.mark.parametrize("case_sensitive,text,pattern,sidx,eidx,score", EXACT_CASES)
def test_exact_match_naive(forward, case_sensitive, text, pattern, sidx, eidx, score):
    res = exact_match_naive(case_sensitive, False, forward, text, _pat(pattern, case_sensitive), True)
    assert _span(res) == (sidx, eidx, score)


def test_exact_match_naive_backward():
    res = exact_match_naive(False, False, True, "foobar foob", "oo", True)
    assert _span(res) == (1, 3, SCORE_MATCH * 2 + BONUS_CONSECUTIVE)
    res = exact_match_naive(False, False, False, "foobar foob", "oo", True)
    assert _span(res) == (8, 10, SCORE_MATCH * 2 + BONUS_CONSECUTIVE)


PREFIX_SCORE = SCORE_MATCH * 3 + BBW * MULT + BBW * 2
PREFIX_CASES = [
    (True, "fooBarbaz", "Foo", -1, -1, 0),
    (False, "fooBarBaz", "baz", -1, -1, 0),
    (False, "fooBarbaz", "Foo", 0, 3, PREFIX_SCORE),
    (False, "foOBarBaZ", "foo", 0, 3, PREFIX_SCORE),
    (False, "f-oBarbaz", "f-o", 0, 3, PREFIX_SCORE),
    (False, " fooBar", "foo", 1, 4, PREFIX_SCORE),
    (False, " fooBar", " fo", 0, 3, PREFIX_SCORE),
    (False, "     fo", "foo", -1, -1, 0),
]


@pytest.mark.parametrize("forward", DIRS)
@pytest.mark.parametrize("case_sensitive,text,pattern,sidx,eidx,score", PREFIX_CASES)
def test_prefix_match(forward, case_sensitive, text, pattern, sidx, eidx, score):
    res = prefix_match(case_sensitive, False, forward, text, _pat(pattern, case_sensitive), True)
    assert _span(res) == (sidx, eidx, score)


SUFFIX_CASES = [
    (True, "fooBarbaz", "Baz", -1, -1, 0),
    (False, "fooBarbaz", "Foo", -1, -1, 0),
    (False, "fooBarbaz", "baz", 6, 9, SCORE_MATCH * 3 + BONUS_CONSECUTIVE * 2),
    (False, "fooBarBaZ", "baz", 6, 9,
     (SCORE_MATCH + BONUS_CAMEL123) * 3 + BONUS_CAMEL123 * (MULT - 1)),
    (False, "fooBarbaz ", "baz", 6, 9, SCORE_MATCH * 3 + BONUS_CONSECUTIVE * 2),
    (False, "fooBarbaz ", "baz ", 6, 10, SCORE_MATCH * 4 + BONUS_CONSECUTIVE * 2 + BBW),
]


@pytest.mark.parametrize("forward", DIRS)
@pytest.mark.parametrize("case_sensitive,text,pattern,sidx,eidx,score", SUFFIX_CASES)
def test_suffix_match(forward, case_sensitive, text, pattern, sidx, eidx, score):
    res = suffix_match(case_sensitive, False, forward, text, _pat(pattern, case_sensitive), True)
    assert _span(res) == (sidx, eidx, score)


@pytest.mark.parametrize("forward", DIRS)
def test_empty_pattern(forward):
    assert _span(fuzzy_match_v1(True, False, forward, "foobar", "", True)) == (0, 0, 0)
    assert _span(fuzzy_match_v2(True, False, forward, "foobar", "", True)) == (0, 0, 0)
    assert _span(exact_match_naive(True, False, forward, "foobar", "", True)) == (0, 0, 0)
    assert _span(prefix_match(True, False, forward, "foobar", "", True)) == (0, 0, 0)
    assert _span(suffix_match(True, False, forward, "foobar", "", True)) == (6, 6, 0)


def test_normalize_short_prefix():
    text, pattern = "Só Danço Samba", "so"
    expected = (0, 2, 62)
    assert _span(fuzzy_match_v1(False, True, True, text, pattern, True)) == expected
    assert _span(fuzzy_match_v2(False, True, True, text, pattern, True)) == expected
    assert _span(prefix_match(False, True, True, text, pattern, True)) == expected
    assert _span(exact_match_naive(False, True, True, text, pattern, True)) == expected


def test_normalize_fuzzy():
    text, pattern = "Só Danço Samba", "sodc"
    expected = (0, 7, 97)
    assert _span(fuzzy_match_v1(False, True, True, text, pattern, True)) == expected
    assert _span(fuzzy_match_v2(False, True, True, text, pattern, True)) == expected


def test_normalize_whole_word():
    text, pattern = "Danço", "danco"
    expected = (0, 5, 140)
    assert _span(fuzzy_match_v1(False, True, True, text, pattern, True)) == expected
    assert _span(fuzzy_match_v2(False, True, True, text, pattern, True)) == expected
    assert _span(prefix_match(False, True, True, text, pattern, True)) == expected
    assert _span(suffix_match(False, True, True, text, pattern, True)) == expected
    assert _span(exact_match_naive(False, True, True, text, pattern, True)) == expected
    assert _span(equal_match(False, True, True, text, pattern, True)) == expected


def test_long_string():
    size = 65535
    text = "x" * size + "z" + "x" * (size - 1)
    res = fuzzy_match_v2(True, False, True, text, "zx", True)
    assert _span(res) == (size, size + 2, SCORE_MATCH * 2 + BONUS_CONSECUTIVE)


def test_fuzzy_v2_positions():
    res = fuzzy_match_v2(False, False, True, "foo bar baz", "fbb", True)
    assert sorted(res.positions) == [0, 4, 8]


def test_fuzzy_v2_without_positions():
    res = fuzzy_match_v2(False, False, True, "foo bar baz", "fbb", False)
    assert res.positions is None
    assert res.end == 9


def test_equal_match():
    white = BBW
    expected = (SCORE_MATCH + white) * 3 + (MULT - 1) * white
    assert equal_match(False, False, True, "  Foo ", "foo", False) == MatchResult(2, 5, expected)
    assert equal_match(True, False, True, "Foo", "foo", False) == MatchResult(-1, -1, 0)
    assert equal_match(False, False, True, "foobar", "", False) == MatchResult(-1, -1, 0)


def test_no_match_flag():
    assert not fuzzy_match_v1(True, False, True, "abc", "xyz", False).matched
    assert fuzzy_match_v1(True, False, True, "abc", "ac", False).matched