"""This module implements a simple recursive descent parser for the pattern syntax.

Rules are listed from the lowest precedence (binds widest) to the highest:

alternation: concatenation ("|" concatenation)*

concatenation: repetition+

repetition: atom ("*" | "+" | "?")*

atom: SYMBOL | "." | "^" | "$" | char_class | "(" alternation ")"

char_class: "[" CLASS_CHAR* "]"

SYMBOL: any character except . ^ $ * ? + | ( ) [ {

CLASS_CHAR: any character except ] and newline

Both binary operators are left-associative. The parser reads the text strictly left to right
with a single cursor and never backtracks. There is no tokenizer, since every token is
exactly one character.

"""
import logging
from enum import Enum, auto
from typing import Callable, Sequence

from . import config
from .error import GapGrepError, InvalidPatternError, PatternTooDeepError
from .helpers import assert_never, point_at_index
from .pattern import (
    SPECIAL_CHARS,
    Alternation,
    CharClass,
    Concatenation,
    Dot,
    EndAnchor,
    PatternNode,
    Plus,
    QMark,
    Star,
    StartAnchor,
    Symbol,
)

logger = logging.getLogger(__name__)


class Expected(Enum):
    """What the parser was looking for when it failed. Used for error reporting only."""

    ATOM = auto()
    RPAREN = auto()
    RBRACKET = auto()
    PIPE = auto()
    REPETITION = auto()
    END = auto()


def _pretty_print_expected(expected: Expected) -> str:
    """Outputs a human readable version of the expected input."""
    match expected:
        case Expected.ATOM:
            return "an atom (ordinary character, '.', '^', '$', '[' or '(')"
        case Expected.RPAREN:
            return "')' (group end)"
        case Expected.RBRACKET:
            return "']' (character class end)"
        case Expected.PIPE:
            return "'|' (alternative separator)"
        case Expected.REPETITION:
            return "'*', '+' or '?' (repetition)"
        case Expected.END:
            return "end of pattern"
        case _ as unreachable:
            assert_never(unreachable)


def _pretty_print_char(char: str | None) -> str:
    """Outputs a human readable version of the character found in the pattern."""
    match char:
        case None:
            return "end of pattern"
        case "\n":
            return "a newline"
        case "*" | "+" | "?":
            return f"'{char}' (repetition with nothing to repeat)"
        case ")":
            return "')' (unmatched group end)"
        case "{":
            return "'{' (reserved character)"
        case "|":
            return "'|' (alternative with an empty side)"
        case _:
            return repr(char)


_REPETITIONS: dict[str, Callable[[PatternNode], PatternNode]] = {
    "*": Star,
    "+": Plus,
    "?": QMark,
}

# Characters that end a concatenation (besides the end of the pattern)
_CONCATENATION_FOLLOW_SET = frozenset("|)")


class Parser:
    def __init__(self) -> None:
        self._reset("")

    def _reset(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self._depth = 0

    @property
    def text(self) -> str:
        """Get the pattern text being parsed."""
        return self._text

    @property
    def pos(self) -> int:
        """Get the cursor position, i.e. the index of the next unconsumed character."""
        return self._pos

    def _peek(self) -> str | None:
        """Get the next unconsumed character or None at the end of the pattern."""
        if self._pos >= len(self._text):
            return None

        return self._text[self._pos]

    def _consume(self) -> str:
        char = self._text[self._pos]
        self._pos += 1
        return char

    def _get_grammar_error_exception(
        self,
        msg: str,
        expected: Sequence[Expected],
        *,
        index: int | None = None,
    ) -> InvalidPatternError:
        """Build an error pointing at `index` (defaults to the cursor) in the pattern."""
        if index is None:
            index = self._pos

        if expected:
            expected_str = ", ".join(_pretty_print_expected(e) for e in expected)

            one_of = ""
            if len(expected) > 1:
                one_of = " one of"

            msg += f"\nExpected{one_of}: {expected_str}. Got: {_pretty_print_char(self._peek())}"

        msg += f"\n\nPattern:\n{point_at_index(self._text, index)}"

        if config.TRACE_LOGGING:
            logger.debug(f"Pattern <{self._text}> failed to parse at index {index}")

        return InvalidPatternError(msg, pattern=self._text, index=index)

    def _match_or_raise(
        self, char: str, expected: Expected, msg: str, *, error_index: int | None = None
    ) -> str:
        """Consume the next character if it is `char` or raise an error.

        Raises:
            InvalidPatternError: if the next character is not `char`

        """
        if self._peek() != char:
            raise self._get_grammar_error_exception(msg, [expected], index=error_index)

        return self._consume()

    def parse(self, text: str) -> PatternNode:
        """Parse a pattern into a pattern tree.

        The whole text must be consumed.

        Raises:
            InvalidPatternError: if the text is not a valid pattern
            PatternTooDeepError: if groups are nested deeper than `config.MAX_GROUP_DEPTH`

        """
        self._reset(text)

        tree = self._alternation()

        if self._peek() is not None:
            # The only way to get here is an unmatched ')'
            raise self._get_grammar_error_exception(
                "Unexpected input after the end of the pattern.",
                [Expected.REPETITION, Expected.PIPE, Expected.ATOM, Expected.END],
            )

        if config.TRACE_LOGGING:
            logger.debug(f"Parsed pattern <{text}> into a {type(tree).__name__} tree")

        return tree

    def _alternation(self) -> PatternNode:
        """alternation: concatenation ("|" concatenation)*"""
        node = self._concatenation()

        while self._peek() == "|":
            self._consume()
            node = Alternation(node, self._concatenation())

        return node

    def _concatenation(self) -> PatternNode:
        """concatenation: repetition+"""
        node = self._repetition()

        while (char := self._peek()) is not None and char not in _CONCATENATION_FOLLOW_SET:
            node = Concatenation(node, self._repetition())

        return node

    def _repetition(self) -> PatternNode:
        """repetition: atom ("*" | "+" | "?")*"""
        node = self._atom()

        while (char := self._peek()) is not None and char in _REPETITIONS:
            self._consume()
            node = _REPETITIONS[char](node)

        return node

    def _atom(self) -> PatternNode:
        """atom: SYMBOL | "." | "^" | "$" | char_class | "(" alternation ")" """
        char = self._peek()

        match char:
            case None:
                raise self._get_grammar_error_exception(
                    "Unexpected end of pattern.", [Expected.ATOM]
                )
            case ".":
                self._consume()
                return Dot()
            case "^":
                self._consume()
                return StartAnchor()
            case "$":
                self._consume()
                return EndAnchor()
            case "[":
                return self._char_class()
            case "(":
                return self._group()
            case _ if char not in SPECIAL_CHARS:
                return Symbol(self._consume())
            case _:
                raise self._get_grammar_error_exception(
                    "Incorrect pattern definition.", [Expected.ATOM]
                )

    def _char_class(self) -> CharClass:
        """char_class: "[" CLASS_CHAR* "]" """
        start = self._pos
        self._match_or_raise("[", Expected.ATOM, "Incorrect character class definition.")

        chars: list[str] = []

        while (char := self._peek()) not in (None, "]", "\n"):
            chars.append(self._consume())

        self._match_or_raise(
            "]",
            Expected.RBRACKET,
            "Unterminated character class.",
            # a newline is pointed at directly, otherwise point at the class start
            error_index=self._pos if char == "\n" else start,
        )

        return CharClass(chars)

    def _group(self) -> PatternNode:
        """group: "(" alternation ")" """
        start = self._pos
        self._match_or_raise("(", Expected.ATOM, "Incorrect group definition.")

        if self._depth >= config.MAX_GROUP_DEPTH:
            if config.TRACE_LOGGING:
                logger.debug(f"Pattern <{self._text}> nests groups too deep at index {start}")

            raise PatternTooDeepError(
                f"Groups are nested deeper than {config.MAX_GROUP_DEPTH} levels."
                f"\n\nPattern:\n{point_at_index(self._text, start)}",
                pattern=self._text,
                index=start,
                limit=config.MAX_GROUP_DEPTH,
            )

        self._depth += 1
        node = self._alternation()
        self._depth -= 1

        self._match_or_raise(
            ")",
            Expected.RPAREN,
            "Unmatched '(' in pattern.",
            error_index=start,
        )

        return node


def parse(pattern: str) -> PatternNode:
    """Parse a pattern into a pattern tree.

    Args:
        pattern: The pattern to parse.

    Returns:
        The root node of the pattern tree.

    Raises:
        InvalidPatternError: Raised if the pattern is not valid. No tree is returned in this case.
        PatternTooDeepError: Raised if groups are nested deeper than `config.MAX_GROUP_DEPTH`.

    """
    try:
        return Parser().parse(pattern)
    except GapGrepError:
        raise
    except Exception as e:
        if config.TRACE_LOGGING:
            logger.debug(f"Unexpected error while parsing pattern <{pattern}>: {e}")

        raise InvalidPatternError(
            "Failed to parse the pattern due to an internal error. Please report it!",
            pattern=pattern,
        ) from e
