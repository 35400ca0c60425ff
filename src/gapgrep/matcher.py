from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator

from . import config
from .file import strip_terminator
from .parser import parse
from .pattern import PatternNode
from .positions import PositionSet, any_reachable, render_marks, seed

logger = logging.getLogger(__name__)

_MATCHER_CACHE: dict[str, LineMatcher] = {}


def from_pattern(pattern: str) -> LineMatcher:
    """Create a LineMatcher from a pattern.

    Matchers are cached by pattern, so compiling the same pattern twice returns the same
    matcher.

    Args:
        pattern: The pattern to parse.

    Returns:
        A LineMatcher instance.

    Raises:
        InvalidPatternError: Raised if the pattern is not valid
        PatternTooDeepError: Raised if groups in the pattern are nested too deep

    """
    matcher = _MATCHER_CACHE.get(pattern, None)

    if matcher is not None:
        if config.TRACE_LOGGING:
            logger.debug(f"Reusing cached matcher for pattern <{pattern}>")

        return matcher

    matcher = LineMatcher(parse(pattern))

    _MATCHER_CACHE[pattern] = matcher

    return matcher


@dataclass(frozen=True, slots=True)
class LineMatcher:
    """Matches whole lines against a pattern tree.

    A line matches if any of its substrings matches the pattern. The tree is only read, so one
    matcher may be used for any number of lines.

    Use `from_pattern` to create a matcher from a pattern string.

    """

    tree: PatternNode

    def match_positions(self, line: str) -> PositionSet:
        """Get the gaps of `line` where a match of the pattern can end.

        Every gap is a possible start of a match, so the initial position set has all entries
        marked. Anchors still only hold at the very first and last gap.

        """
        after = self.tree.match(seed(len(line)), line)

        if config.TRACE_LOGGING:
            logger.debug(f"Matched <{self.tree.to_pattern()}>: {render_marks(line, after)!r}")

        return after

    def matches(self, line: str) -> bool:
        """Check whether any substring of `line` matches the pattern.

        `line` must not include a line terminator, it would be matched as a regular character.

        """
        return any_reachable(self.match_positions(line))

    def marks(self, line: str) -> str:
        """Render `line` with every gap where a match can end marked by an asterisk."""
        return render_marks(line, self.match_positions(line))

    def filter(self, lines: Iterable[str]) -> Iterator[str]:
        """Yield the lines that match the pattern.

        A trailing line terminator is ignored for matching, but the lines are yielded unchanged.

        """
        for line in lines:
            if self.matches(strip_terminator(line)):
                yield line

    from_pattern = staticmethod(from_pattern)


def search(pattern: str, line: str) -> bool:
    """Check whether any substring of `line` matches `pattern`.

    Raises:
        InvalidPatternError: Raised if the pattern is not valid
        PatternTooDeepError: Raised if groups in the pattern are nested too deep

    """
    return from_pattern(pattern).matches(line)
