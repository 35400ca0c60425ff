"""Pattern tree.

A parsed pattern is a tree of immutable nodes. Every node transforms a set of reachable gap
positions (see `gapgrep.positions`) into the set of positions reachable after matching the node
itself. Feeding a set with every position marked into the root gives unanchored, grep-like
search: the line matches iff anything is reachable at the end.

All matching logic lives in `match_positions`, a single exhaustive dispatch over node types.

"""
from __future__ import annotations

import logging
from abc import ABC
from dataclasses import dataclass, fields
from typing import Iterator

from rich.markup import escape
from rich.tree import Tree

from . import config
from .helpers import assert_never
from .positions import PositionSet, any_reachable, union

logger = logging.getLogger(__name__)

SPECIAL_CHARS = frozenset(".^$*?+|()[{")
"""Characters that can't be used as an ordinary symbol in a pattern."""

# Binding strength, used to decide where parentheses are needed when rendering a pattern back
_ALTERNATION_LEVEL = 0
_CONCATENATION_LEVEL = 1
_REPETITION_LEVEL = 2
_ATOM_LEVEL = 3


@dataclass(frozen=True, slots=True)
class PatternNode(ABC):
    """Base class for all pattern tree nodes.

    Nodes are frozen and own their sub-nodes exclusively, hence a tree is never shared or cyclic
    and is released children first once its root is no longer referenced.

    """

    def match(self, before: PositionSet, line: str) -> PositionSet:
        """Compute the positions reachable after matching this node. See `match_positions`."""
        return match_positions(self, before, line)

    def iter_child_fields(self) -> Iterator[tuple[PatternNode, str]]:
        """Iterate over direct sub-nodes along with the names of the fields holding them."""
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, PatternNode):
                yield value, f.name

    def children(self) -> tuple[PatternNode, ...]:
        return tuple(child for child, _ in self.iter_child_fields())

    def iter_postorder(self) -> Iterator[PatternNode]:
        """Iterate over the whole sub-tree, sub-nodes before their owner.

        This is the order in which a tree is torn down.

        """
        stack: list[tuple[PatternNode, bool]] = [(self, False)]

        while stack:
            node, expanded = stack.pop()

            if expanded:
                yield node
                continue

            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children()))

    def to_pattern(self) -> str:
        """Render the node back to pattern syntax.

        For trees built by the parser, parsing the result gives back an equal tree.

        """
        match self:
            case Symbol(char):
                return char
            case Dot():
                return "."
            case StartAnchor():
                return "^"
            case EndAnchor():
                return "$"
            case CharClass(chars):
                return f"[{''.join(sorted(chars))}]"
            case Concatenation():
                first, *rest = _left_spine(self)
                return _wrap(first, _CONCATENATION_LEVEL) + "".join(
                    _wrap(operand, _REPETITION_LEVEL) for operand in rest
                )
            case Alternation():
                first, *rest = _left_spine(self)
                return "|".join(
                    [
                        _wrap(first, _ALTERNATION_LEVEL),
                        *(_wrap(operand, _CONCATENATION_LEVEL) for operand in rest),
                    ]
                )
            case Star() | Plus() | QMark():
                suffixes: list[str] = []
                node: PatternNode = self
                while isinstance(node, (Star, Plus, QMark)):
                    suffixes.append(_REPETITION_SUFFIXES[type(node)])
                    node = node.inner

                return _wrap(node, _REPETITION_LEVEL) + "".join(reversed(suffixes))
            case _ as unreachable:
                assert_never(unreachable)  # type: ignore[arg-type]

    def __rich__(self, parent: Tree | None = None) -> Tree:
        """Returns a tree widget for the 'rich' library."""
        return self._rich(parent)

    def _rich(self, parent: Tree | None, field_name: str | None = None) -> Tree:
        root: Tree | None = None
        stack: list[tuple[PatternNode, Tree | None, str | None]] = [(self, parent, field_name)]

        while stack:
            node, node_parent, node_field = stack.pop()
            name = (
                f":deciduous_tree:[bold green]{node_field or 'root'}"
                f"({node.__class__.__name__})[/bold green]"
            )

            if node_parent is not None:
                tree = node_parent.add(name)
            else:
                tree = Tree(name)

            if root is None:
                root = tree

            match node:
                case Symbol(char):
                    tree.add(f":spiral_notepad: [yellow]char[/]={escape(repr(char))}")
                case CharClass(chars):
                    chars_str = "".join(sorted(chars))
                    tree.add(f":spiral_notepad: [yellow]chars[/]={escape(repr(chars_str))}")
                case _:
                    pass

            stack.extend(
                (child, tree, child_field)
                for child, child_field in reversed(list(node.iter_child_fields()))
            )

        assert root is not None
        return root


def _precedence(node: PatternNode) -> int:
    match node:
        case Alternation():
            return _ALTERNATION_LEVEL
        case Concatenation():
            return _CONCATENATION_LEVEL
        case Star() | Plus() | QMark():
            return _REPETITION_LEVEL
        case _:
            return _ATOM_LEVEL


def _wrap(node: PatternNode, min_level: int) -> str:
    text = node.to_pattern()

    if _precedence(node) < min_level:
        return f"({text})"

    return text


def _left_spine(node: Concatenation | Alternation) -> list[PatternNode]:
    """Flatten a left-leaning chain of same-type binary nodes into its operands, in order.

    The parser builds `abc` as `(ab)c`, so long literals turn into long chains that must not be
    walked recursively.

    """
    kind = type(node)
    seconds: list[PatternNode] = []
    current: PatternNode = node

    while isinstance(current, kind):
        seconds.append(current.second)
        current = current.first

    seconds.append(current)
    seconds.reverse()

    return seconds


def _collapse_repetitions(node: Star | Plus | QMark) -> tuple[type[PatternNode], PatternNode]:
    """Reduce a run of directly nested repetitions to one equivalent repetition.

    Repeating a repetition of the same kind changes nothing. Any mix of kinds, or any Star in the
    run, repeats zero or more times.

    Returns:
        The repetition type and the innermost node it applies to.

    """
    kinds: set[type[PatternNode]] = set()
    current: PatternNode = node

    while isinstance(current, (Star, Plus, QMark)):
        kinds.add(type(current))
        current = current.inner

    kind = kinds.pop() if len(kinds) == 1 else Star

    return kind, current


@dataclass(frozen=True, slots=True)
class Symbol(PatternNode):
    """Matches exactly one given character."""

    char: str

    def __post_init__(self) -> None:
        if len(self.char) != 1:
            raise ValueError(f"Symbol must be a single character, got {self.char!r}")


@dataclass(frozen=True, slots=True)
class Dot(PatternNode):
    """Matches any one character."""


@dataclass(frozen=True, slots=True)
class StartAnchor(PatternNode):
    """Zero-width assertion, only holds at the very beginning of a line."""


@dataclass(frozen=True, slots=True)
class EndAnchor(PatternNode):
    """Zero-width assertion, only holds at the very end of a line."""


@dataclass(frozen=True, slots=True)
class CharClass(PatternNode):
    """Matches any one character from a set. An empty class never matches."""

    chars: frozenset[str]

    def __post_init__(self) -> None:
        # Accept any iterable of characters
        object.__setattr__(self, "chars", frozenset(self.chars))

        if any(len(char) != 1 for char in self.chars):
            raise ValueError("Character class members must be single characters")


@dataclass(frozen=True, slots=True)
class Concatenation(PatternNode):
    first: PatternNode
    second: PatternNode


@dataclass(frozen=True, slots=True)
class Alternation(PatternNode):
    first: PatternNode
    second: PatternNode


@dataclass(frozen=True, slots=True)
class Star(PatternNode):
    """Zero or more repetitions."""

    inner: PatternNode


@dataclass(frozen=True, slots=True)
class Plus(PatternNode):
    """One or more repetitions."""

    inner: PatternNode


@dataclass(frozen=True, slots=True)
class QMark(PatternNode):
    """Zero or one repetition."""

    inner: PatternNode


_REPETITION_SUFFIXES: dict[type[PatternNode], str] = {Star: "*", Plus: "+", QMark: "?"}


def match_positions(node: PatternNode, before: PositionSet, line: str) -> PositionSet:
    """Compute the gap positions reachable after matching `node`.

    Args:
        node: the pattern to match
        before: gaps reachable before matching `node`, one entry per gap of `line`
        line: the text being matched, without a line terminator

    Returns:
        A new position set of the same length as `before`.

    Raises:
        ValueError: if `before` doesn't have exactly `len(line) + 1` entries

    """
    if len(before) != len(line) + 1:
        raise ValueError(
            f"Expected {len(line) + 1} positions for a line of {len(line)} characters,"
            f" got {len(before)}"
        )

    return _match(node, before, line)


def _match(node: PatternNode, before: PositionSet, line: str) -> PositionSet:
    match node:
        case Symbol(char):
            # Gap 0 can't be reached by consuming a character
            return (False, *(reached and c == char for reached, c in zip(before, line)))
        case Dot():
            return (False, *before[:-1])
        case CharClass(chars):
            return (False, *(reached and c in chars for reached, c in zip(before, line)))
        case StartAnchor():
            return (before[0], *(False,) * len(line))
        case EndAnchor():
            return (*(False,) * len(line), before[-1])
        case Concatenation():
            positions = before
            for operand in _left_spine(node):
                if not any_reachable(positions):
                    # Nothing becomes reachable from nothing
                    break

                positions = _match(operand, positions, line)

            return positions
        case Alternation():
            first, *rest = _left_spine(node)
            reached = _match(first, before, line)
            # Every alternative is matched, even once everything is reachable
            for operand in rest:
                reached = union(reached, _match(operand, before, line))

            return reached
        case Star() | Plus() | QMark():
            kind, inner = _collapse_repetitions(node)

            if kind is QMark:
                return union(before, _match(inner, before, line))

            if kind is Plus:
                return _closure(inner, _match(inner, before, line), line)

            return _closure(inner, before, line)
        case _ as unreachable:
            assert_never(unreachable)  # type: ignore[arg-type]


def _closure(inner: PatternNode, start: PositionSet, line: str) -> PositionSet:
    """Smallest superset of `start` closed under matching `inner` once more.

    Every non-final iteration marks at least one new gap, so after `len(line) + 1` iterations the
    set is either stable or full (and a full set is trivially closed).

    """
    reached = start
    iterations = 0

    for iterations in range(1, len(line) + 2):
        grown = union(reached, _match(inner, reached, line))

        if grown == reached:
            break

        reached = grown

    if config.TRACE_LOGGING:
        logger.debug(
            f"Repetition of <{inner.to_pattern()}> reached a fixed point"
            f" after {iterations} iteration(s) on a line of {len(line)} characters"
        )

    return reached
