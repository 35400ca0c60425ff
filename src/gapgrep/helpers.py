from typing import NoReturn


def assert_never(arg: NoReturn, /) -> NoReturn:
    """Fallback of an exhaustive `match`, only reached for an unhandled type."""
    raise AssertionError(f"Unhandled type: {type(arg).__name__!r}")


def point_at_index(text: str, index: int, length: int = 1) -> str:
    """Add a pointer line under the given index of a text.

    The pointer is inserted right after the line containing `index`. Pointing one past the end of
    the text (or at a newline) is allowed and puts the pointer right after the line content,
    which is how errors at the end of a pattern are shown.

    Args:
        text (str): text to add a pointer to
        index (int): index of the first character to point at
        length (int, optional): number of characters to point at. Defaults to 1.
            The pointer never extends past the end of the line.

    Raises:
        ValueError: if the index is out of range

    Returns:
        str: the text with the pointer line added

    """
    if index < 0 or index > len(text):
        raise ValueError("Index is out of range")

    line_start = text.rfind("\n", 0, index) + 1
    line_end = text.find("\n", index)
    if line_end == -1:
        line_end = len(text)

    pointer = " " * (index - line_start) + "^" * max(1, min(length, line_end - index))

    return f"{text[:line_end]}\n{pointer}{text[line_end:]}"
