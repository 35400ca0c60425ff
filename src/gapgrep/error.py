class GapGrepError(Exception):
    """Base class for all gapgrep errors."""

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message})"


class InvalidPatternError(GapGrepError):
    """Raised by the parser when a pattern does not conform to the pattern grammar.

    A tree is never returned alongside this error, so nothing can be matched with a partially
    parsed pattern.

    """

    def __init__(self, message: str, *, pattern: str | None = None, index: int | None = None) -> None:
        self.pattern = pattern
        self.index = index
        super().__init__(message, pattern, index)


class PatternTooDeepError(GapGrepError):
    """Raised by the parser when groups are nested deeper than `config.MAX_GROUP_DEPTH`.

    The pattern may well be grammatical, it is just too deep to be handled.

    """

    def __init__(self, message: str, *, pattern: str, index: int, limit: int) -> None:
        self.pattern = pattern
        self.index = index
        self.limit = limit
        super().__init__(message, pattern, index, limit)
