import re

import pytest
from gapgrep.error import InvalidPatternError
from gapgrep.matcher import _MATCHER_CACHE, LineMatcher, from_pattern, search
from gapgrep.pattern import Concatenation, Symbol

# Patterns that mean the same for the python `re` module
RE_COMPATIBLE_PATTERNS = [
    "a(bc)*d",
    "^abc$",
    "cat|dog",
    "[0123456789]+",
    "a*",
    "^$",
    "b+a?c",
    "(a|b)*c",
    "x.y",
    "^(ab|a)b$",
    "(^a|b$)",
    "a?b?c?$",
    "[xyz].",
    "(ab)+$",
    "^.*$",
    "((a|b)c)+d",
    "[.]",
    "c(a|at)s?$",
]

RE_CHECK_LINES = [
    "",
    "a",
    "abc",
    "abcd",
    "abbbbd",
    "xabc",
    "abcx",
    "I have a dog",
    "ccat",
    "cats",
    "room42",
    "ab",
    "aab",
    "xzy",
    "xay",
    "abab",
    "acbcd",
    "bbc",
    "a.b",
]


@pytest.mark.parametrize(
    "pattern,line,expected",
    [
        ("a(bc)*d", "abcd", True),
        ("a(bc)*d", "abbbbd", False),
        ("^abc$", "abc", True),
        ("^abc$", "xabc", False),
        ("^abc$", "abcx", False),
        ("cat|dog", "I have a dog", True),
        ("cat|dog", "I have a fish", False),
        ("[0123456789]+", "room42", True),
        ("[0123456789]+", "noroom", False),
        ("a*", "", True),
        ("^", "", True),
        ("$", "anything", True),
        ("^$", "", True),
        ("^$", "x", False),
        (".", "", False),
        ("[]", "abc", False),
        ("[]*", "abc", True),
        ("a^", "a", False),
        ("$a", "a", False),
        ("(^|x)y", "y", True),
        ("(^|x)y", "zy", False),
        ("(^|x)y", "zxy", True),
        ("b(a|$)", "cb", True),
        ("b(a|$)", "bc", False),
    ],
)
def test_search(pattern: str, line: str, expected: bool) -> None:
    assert search(pattern, line) is expected
    assert from_pattern(pattern).matches(line) is expected


@pytest.mark.parametrize("pattern", RE_COMPATIBLE_PATTERNS)
def test_agrees_with_re(pattern: str) -> None:
    matcher = from_pattern(pattern)
    compiled = re.compile(pattern)

    for line in RE_CHECK_LINES:
        assert matcher.matches(line) is (compiled.search(line) is not None), line


def test_match_positions() -> None:
    matcher = from_pattern("ab+")

    assert matcher.match_positions("abbb") == (False, False, True, True, True)
    assert matcher.match_positions("") == (False,)
    assert from_pattern("a*").match_positions("") == (True,)


@pytest.mark.parametrize(
    "pattern,line,expected",
    [
        ("ab+", "abbb", " a b*b*b*"),
        ("a(bc)*d", "abcd", " a b c d*"),
        ("^", "ab", "*a b "),
        ("$", "ab", " a b*"),
        ("x", "ab", " a b "),
        ("a*", "", "*"),
    ],
)
def test_marks(pattern: str, line: str, expected: str) -> None:
    assert from_pattern(pattern).marks(line) == expected


def test_filter() -> None:
    matcher = from_pattern("^abc$")
    lines = ["abc\n", "xabc\r\n", "abc\r\n", "abcx\n", "abc"]

    assert list(matcher.filter(lines)) == ["abc\n", "abc\r\n", "abc"]
    assert list(matcher.filter([])) == []


def test_filter_is_lazy() -> None:
    def lines():
        yield "match"
        raise AssertionError("Read past the first line")

    assert next(from_pattern("at").filter(lines())) == "match"


def test_matcher_from_tree() -> None:
    matcher = LineMatcher(Concatenation(Symbol("a"), Symbol("b")))

    assert matcher.matches("cab")
    assert not matcher.matches("ba")


def test_from_pattern_cache() -> None:
    matcher = from_pattern("cached|pattern")

    assert from_pattern("cached|pattern") is matcher
    assert LineMatcher.from_pattern("cached|pattern") is matcher
    assert _MATCHER_CACHE["cached|pattern"] is matcher


def test_invalid_pattern_is_not_cached() -> None:
    with pytest.raises(InvalidPatternError):
        from_pattern("[abc")

    assert "[abc" not in _MATCHER_CACHE

    with pytest.raises(InvalidPatternError):
        search("(a", "a")


def test_matching_with_trace_logging(gapgrep_config, caplog: pytest.LogCaptureFixture) -> None:
    matcher = from_pattern("a(bc)*d")

    with gapgrep_config(logging=True), caplog.at_level("DEBUG", logger="gapgrep"):
        assert matcher.matches("abcd")
        from_pattern("a(bc)*d")

    assert "Repetition of <bc> reached a fixed point" in caplog.text
    assert "Matched <a(bc)*d>: ' a b c d*'" in caplog.text
    assert "Reusing cached matcher for pattern <a(bc)*d>" in caplog.text


def test_long_literal_pattern() -> None:
    pattern = "a" * 5000

    assert search(pattern, "x" + "a" * 5000)
    assert not search(pattern, "aaa")


def test_long_pattern_of_optional_parts() -> None:
    matcher = from_pattern("a?" * 2500)

    assert matcher.matches("")
    assert matcher.match_positions("b") == (True, True)


def test_deeply_nested_groups() -> None:
    pattern = "(a" * 100 + ")" * 100

    assert search(pattern, "x" + "a" * 100)
    assert not search(pattern, "a" * 99)
