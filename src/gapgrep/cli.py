"""Command line interface.

Prints every line of the input that contains a match for the pattern:

    gapgrep 'a(bc)*d' input.txt
    cat input.txt | gapgrep '^[0123456789]+$'

"""
import io
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

import typer
from rich.console import Console

from . import config
from .error import InvalidPatternError, PatternTooDeepError
from .file import iter_lines, read_text_unknown_encoding, strip_terminator
from .matcher import LineMatcher, from_pattern

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1

app = typer.Typer(
    name="gapgrep",
    help="Print lines that contain a match for a pattern.",
    add_completion=False,
)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    config.TRACE_LOGGING = verbose


def _error(message: str) -> None:
    typer.echo(message, err=True)


def _read_input(input_file: Path) -> Iterable[str]:
    try:
        text = read_text_unknown_encoding(input_file)
    except OSError as e:
        logger.debug(f"Failed to read {input_file}: {e}")
        text = None

    if text is None:
        _error(f"Can't open input file: {input_file}")
        raise typer.Exit(code=EXIT_ERROR)

    return iter_lines(text)


def _read_stdin() -> Iterable[str]:
    # Only "\n" ends a line, a "\r" stays part of the line it is in
    if isinstance(sys.stdin, io.TextIOWrapper):
        sys.stdin.reconfigure(newline="\n")

    return sys.stdin


@app.command()
def main(
    pattern: str = typer.Argument(..., help="Pattern to search for"),
    input_file: Optional[Path] = typer.Argument(
        None,
        help="File to read lines from. Standard input is used if omitted",
        show_default=False,
    ),
    marks: bool = typer.Option(
        False,
        "--marks",
        help="Print every line with the positions where a match can end marked by '*'",
    ),
    show_tree: bool = typer.Option(
        False,
        "--show-tree",
        help="Print the parsed pattern tree before matching",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging (very noisy)",
    ),
) -> None:
    """Print lines that contain a match for PATTERN.

    Supported syntax: ordinary characters, '.', '^', '$', character classes '[...]',
    groups '(...)', alternation '|' and the repetitions '*', '+' and '?'.
    """
    _setup_logging(verbose)

    # Input problems are reported before the pattern is even looked at
    lines = _read_input(input_file) if input_file is not None else _read_stdin()

    try:
        matcher = from_pattern(pattern)
    except InvalidPatternError as e:
        logger.debug(str(e))
        _error("Invalid pattern")
        raise typer.Exit(code=EXIT_ERROR) from None
    except PatternTooDeepError as e:
        logger.debug(str(e))
        _error(f"Pattern is nested too deep (more than {e.limit} levels of groups)")
        raise typer.Exit(code=EXIT_ERROR) from None

    if show_tree:
        Console().print(matcher.tree)

    if marks:
        _print_marks(matcher, lines)
    else:
        for line in matcher.filter(lines):
            # Lines are printed as read, only the last one may lack a terminator
            typer.echo(line, nl=not line.endswith("\n"))

    raise typer.Exit(code=EXIT_SUCCESS)


def _print_marks(matcher: LineMatcher, lines: Iterable[str]) -> None:
    for line in lines:
        typer.echo(matcher.marks(strip_terminator(line)))
