from .error import GapGrepError, InvalidPatternError, PatternTooDeepError
from .matcher import LineMatcher, from_pattern, search
from .parser import parse
from .pattern import (
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
    match_positions,
)
from .positions import PositionSet

__all__ = [
    "Alternation",
    "CharClass",
    "Concatenation",
    "Dot",
    "EndAnchor",
    "GapGrepError",
    "InvalidPatternError",
    "PatternTooDeepError",
    "LineMatcher",
    "PatternNode",
    "Plus",
    "PositionSet",
    "QMark",
    "Star",
    "StartAnchor",
    "Symbol",
    "from_pattern",
    "match_positions",
    "parse",
    "search",
]
