"""Position sets.

For a line of length n there are n + 1 gap positions: 0 is before the first character and n is
after the last one. A position set marks the gaps where a match of everything considered so far
can end.

Position sets are plain tuples of booleans, so no pattern node can mutate the set it receives.

"""

PositionSet = tuple[bool, ...]


def seed(length: int) -> PositionSet:
    """Every gap of a line of `length` characters, i.e. a match may start anywhere."""
    return (True,) * (length + 1)


def union(first: PositionSet, second: PositionSet) -> PositionSet:
    """Elementwise `or` of two position sets of the same line.

    Raises:
        ValueError: if the sets are of different lengths

    """
    if len(first) != len(second):
        raise ValueError(
            f"Can't combine position sets of different lengths: {len(first)} and {len(second)}"
        )

    return tuple(a or b for a, b in zip(first, second))


def any_reachable(positions: PositionSet) -> bool:
    return any(positions)


def render_marks(line: str, marks: PositionSet) -> str:
    """Render a line with its marked gaps shown as asterisks.

    Each character of the line is preceded by either `*` (gap is marked) or a space, and the
    string ends with the mark of the last gap. E.g. `ab+` on "abbb" renders as " a b*b*b*".

    Raises:
        ValueError: if `marks` doesn't have exactly one more entry than `line` has characters

    """
    if len(marks) != len(line) + 1:
        raise ValueError(
            f"Expected {len(line) + 1} marks for a line of {len(line)} characters, got {len(marks)}"
        )

    rendered = "".join(f"{'*' if mark else ' '}{char}" for mark, char in zip(marks, line))

    return rendered + ("*" if marks[-1] else " ")
