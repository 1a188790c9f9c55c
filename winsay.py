#!/usr/bin/env python3
"""winsay -- a cow with something to say.

A single-file CLI that frames a message in an ASCII speech or thought
bubble and prints it above a cow. The message comes from the command
line, from piped standard input, or from a random line of the bundled
quotes file, in that order.

Typical usage:

    python winsay.py hello
    python winsay.py --wrap 20 "a longer message, wrapped narrowly"
    echo "hi from stdin" | python winsay.py --thought
"""

from __future__ import annotations

import argparse
import enum
import logging
import random
import sys
import textwrap
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

PROG: str = "winsay"

DEFAULT_WRAP: int = 40
MIN_WRAP: int = 5

QUOTES_PATH: Path = Path(__file__).resolve().with_name("quotes.txt")
QUOTES_ENCODING: str = "utf-8-sig"
QUOTE_SEPARATOR: str = "|"
SPEAKER_PREFIX: str = "— "

_WRAP_FLAG: str = "--wrap"
_THOUGHT_FLAG: str = "--thought"
_HELP_FLAGS: frozenset[str] = frozenset({"-h", "--help"})
_HELP_WIDTH: int = 80

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logger: logging.Logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class WinsayError(Exception):
    """Base class for failures reported as ``winsay: <message>``."""


class QuotesUnavailableError(WinsayError):
    """The quotes file is missing, unreadable, or has no usable lines."""

    def __init__(self) -> None:
        super().__init__("quotes file missing or empty")


class EmptyMessageError(WinsayError):
    """Every message source came up empty."""

    def __init__(self) -> None:
        super().__init__("message is empty")


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


class BubbleStyle(enum.Enum):
    """Shape of the frame drawn around the message."""

    SPEECH = "speech"
    THOUGHT = "thought"


@dataclass(frozen=True, slots=True)
class Quote:
    """A message to say, optionally attributed to someone."""

    text: str
    speaker: str | None = None


@dataclass(frozen=True, slots=True)
class Options:
    """Settings for a single run, as read from the command line."""

    wrap: int = DEFAULT_WRAP
    thought: bool = False
    help: bool = False
    positional: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Text wrapping
# ---------------------------------------------------------------------------


def normalize_newlines(text: str) -> str:
    """Folds ``\\r\\n`` and lone ``\\r`` line endings into ``\\n``."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _pad(lines: Sequence[str]) -> list[str]:
    """Right-pads every line with spaces to the length of the longest."""
    width = max((len(line) for line in lines), default=0)
    return [line.ljust(width) for line in lines]


def _wrap_line(line: str, width: int) -> list[str]:
    """Wraps a single non-blank source line on word boundaries.

    Words longer than ``width`` are cut into ``width``-sized chunks; the
    last chunk stays open so a following short word may join it.

    Args:
        line: One line of the message, free of newlines.
        width: Maximum row length, at least 1.

    Returns:
        Unpadded rows, none longer than ``width``.
    """
    rows: list[str] = []
    current = ""

    for word in line.split():
        if len(word) > width:
            if current:
                rows.append(current)
            chunks = [word[i : i + width] for i in range(0, len(word), width)]
            rows.extend(chunks[:-1])
            current = chunks[-1]
        elif not current:
            current = word
        elif len(current) + 1 + len(word) <= width:
            current = f"{current} {word}"
        else:
            rows.append(current)
            current = word

    if current:
        rows.append(current)
    return rows


def wrap_text(text: str, width: int) -> list[str]:
    """Wraps a message to ``width`` columns and pads it to a uniform width.

    Line endings are normalised and the whole message is trimmed first.
    Explicit line breaks are kept; a blank source line becomes a blank
    row so paragraph breaks survive. Runs of whitespace between words
    collapse to a single space. No character of a word is ever dropped.

    Args:
        text: The raw message.
        width: Column limit. Values below 1 are treated as 1.

    Returns:
        Rows of identical length, or an empty list for a blank message.
    """
    width = max(1, width)
    normalized = normalize_newlines(text).strip()
    if not normalized:
        return []

    rows: list[str] = []
    for source_line in normalized.split("\n"):
        if not source_line.strip():
            rows.append("")
            continue
        rows.extend(_wrap_line(source_line, width))

    return _pad(rows)


# ---------------------------------------------------------------------------
# Bubble rendering
# ---------------------------------------------------------------------------


def _speech_row(line: str, index: int, total: int) -> str:
    """Frames one interior row of a speech bubble by its position."""
    if total == 1:
        return f"< {line} >"
    if index == 0:
        return f"/ {line} \\"
    if index == total - 1:
        return f"\\ {line} /"
    return f"| {line} |"


def render_bubble(
    lines: Sequence[str],
    style: BubbleStyle = BubbleStyle.SPEECH,
) -> list[str]:
    """Draws a speech or thought bubble around the given rows.

    Rows are padded to the longest one before framing, so a row appended
    after wrapping (such as an attribution) still lines up.

    Args:
        lines: Interior rows, top to bottom.
        style: Speech bubble with angled corners, or a cloud of parentheses.

    Returns:
        The top border, one framed row per input row, and the bottom
        border. Empty when ``lines`` is empty.
    """
    if not lines:
        return []

    rows = _pad(lines)
    width = len(rows[0])

    if style is BubbleStyle.THOUGHT:
        top = f" ({'_' * width}) "
        bottom = f" ({'-' * width}) "
        body = [f"( {row} )" for row in rows]
    else:
        top = " " + "_" * (width + 2)
        bottom = " " + "-" * (width + 2)
        body = [_speech_row(row, i, len(rows)) for i, row in enumerate(rows)]

    return [top, *body, bottom]


# ---------------------------------------------------------------------------
# The cow
# ---------------------------------------------------------------------------

_COW = r"""
        \   ^__^
         \  (oo)\_______
            (__)\       )\/\
                ||----w |
                ||     ||
"""

_COW_FIGURE: str = textwrap.dedent(_COW).strip("\n")


def get_cow() -> str:
    """Returns the cow, with its decorative indentation removed."""
    return _COW_FIGURE


# ---------------------------------------------------------------------------
# Quotes
# ---------------------------------------------------------------------------


def parse_quote_line(line: str) -> Quote:
    """Splits a quotes-file line into text and an optional speaker.

    Everything before the first ``|`` is the text and everything after
    it is the speaker. A blank speaker counts as none.
    """
    text, separator, speaker = line.partition(QUOTE_SEPARATOR)
    if not separator:
        return Quote(text=line.strip())
    return Quote(text=text.strip(), speaker=speaker.strip() or None)


def load_quotes(path: Path = QUOTES_PATH) -> list[str]:
    """Reads the non-blank, trimmed lines of a quotes file.

    Raises:
        QuotesUnavailableError: If the file cannot be read or decoded,
            or holds no usable lines.
    """
    logger.debug("Reading quotes from %s", path)
    try:
        raw = path.read_text(encoding=QUOTES_ENCODING)
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Could not read quotes file %s: %s", path, exc)
        raise QuotesUnavailableError from exc

    candidates = (line.strip() for line in normalize_newlines(raw).split("\n"))
    quotes = [line for line in candidates if line]
    if not quotes:
        raise QuotesUnavailableError
    return quotes


def random_quote(
    path: Path = QUOTES_PATH,
    rng: random.Random | None = None,
) -> Quote:
    """Picks one quote uniformly at random from a quotes file.

    Args:
        path: The quotes file to draw from.
        rng: Random source; the module-level generator when None.

    Returns:
        The chosen line, parsed into a Quote.

    Raises:
        QuotesUnavailableError: If the file is missing or empty.
    """
    quotes = load_quotes(path)
    source = rng if rng is not None else random
    index = source.randrange(len(quotes))  # noqa: S311
    return parse_quote_line(quotes[index])


# ---------------------------------------------------------------------------
# Message sources
# ---------------------------------------------------------------------------


def read_stdin() -> str:
    """Reads standard input to end of file."""
    if sys.stdin is None:
        return ""
    return sys.stdin.read()


def _stdin_is_tty() -> bool:
    """Reports whether standard input is attached to a terminal."""
    return sys.stdin is not None and sys.stdin.isatty()


@dataclass(frozen=True, slots=True)
class MessageSources:
    """Where a message may come from when none is given as arguments.

    ``stdin_is_tty`` of None means "ask the operating system".
    """

    stdin_reader: Callable[[], str] = read_stdin
    quote_provider: Callable[[], Quote | str] = random_quote
    stdin_is_tty: bool | None = None


def select_message(
    fragments: Sequence[str],
    sources: MessageSources | None = None,
) -> Quote:
    """Chooses the message to say.

    Arguments win, then piped standard input, then a quote. Standard
    input is never read while it is a terminal, so a bare ``winsay``
    does not sit waiting for someone to type.

    Args:
        fragments: Positional words from the command line.
        sources: Stdin and quote capabilities; real ones when None.

    Returns:
        The selected message. Failures of the quote provider propagate.
    """
    if sources is None:
        sources = MessageSources()

    message = " ".join(fragments).strip()
    if message:
        logger.debug("Using message from arguments")
        return Quote(text=message)

    is_tty = sources.stdin_is_tty
    if is_tty is None:
        is_tty = _stdin_is_tty()

    if is_tty:
        logger.debug("stdin is a terminal, skipping it")
    else:
        piped = sources.stdin_reader().strip()
        if piped:
            logger.debug("Using message from stdin")
            return Quote(text=piped)

    logger.debug("Falling back to a random quote")
    quote = sources.quote_provider()
    if isinstance(quote, str):
        return Quote(text=quote)
    return quote


# ---------------------------------------------------------------------------
# CLI parsing
# ---------------------------------------------------------------------------


def parse_wrap(value: str) -> int:
    """Reads a ``--wrap`` value, falling back to the default on junk.

    Args:
        value: Raw token following ``--wrap``.

    Returns:
        Column width, never below MIN_WRAP.
    """
    try:
        width = int(value)
    except ValueError:
        return DEFAULT_WRAP
    return max(MIN_WRAP, width)


def parse_args(argv: Sequence[str]) -> Options:
    """Turns command-line tokens into Options.

    Only ``--wrap N``, ``--thought`` and ``-h``/``--help`` are flags.
    Every other token, including ``--`` and unknown dashed words, is
    kept in order as part of the message. Parsing never fails.
    """
    wrap = DEFAULT_WRAP
    thought = False
    show_help = False
    positional: list[str] = []

    tokens = iter(argv)
    for token in tokens:
        if token == _WRAP_FLAG:
            value = next(tokens, None)
            if value is not None:
                wrap = parse_wrap(value)
        elif token == _THOUGHT_FLAG:
            thought = True
        elif token in _HELP_FLAGS:
            show_help = True
        else:
            positional.append(token)

    return Options(
        wrap=wrap,
        thought=thought,
        help=show_help,
        positional=tuple(positional),
    )


def _build_parser() -> argparse.ArgumentParser:
    """Constructs the parser that formats ``--help`` output.

    Tokens themselves go through parse_args, which passes unknown
    flags through as words where argparse would reject them. The
    ``store_true`` actions only keep a metavar out of the usage line.
    """
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Print a message in an ASCII bubble, said by a cow.",
        epilog=(
            "With no message, reads piped standard input, then falls back"
            " to a random quote."
        ),
        add_help=False,
        formatter_class=lambda prog: argparse.HelpFormatter(prog, width=_HELP_WIDTH),
    )
    parser.add_argument(
        "message",
        nargs="*",
        help="words to say, joined with single spaces",
    )
    parser.add_argument(
        _WRAP_FLAG,
        metavar="N",
        help=f"wrap text to N columns (default: {DEFAULT_WRAP}, minimum: {MIN_WRAP})",
    )
    parser.add_argument(
        _THOUGHT_FLAG,
        action="store_true",
        help="draw a thought bubble instead of a speech bubble",
    )
    parser.add_argument(
        "-h",
        "--help",
        action="store_true",
        help="show this help message and exit",
    )
    return parser


def usage() -> str:
    """Returns the ``--help`` text."""
    return _build_parser().format_help()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def render_output(quote: Quote, options: Options) -> list[str]:
    """Builds every output line: the bubble, then the cow.

    An attribution row goes inside the bubble, below the wrapped text.
    """
    lines = wrap_text(quote.text, options.wrap)
    if quote.speaker:
        lines.append(f"{SPEAKER_PREFIX}{quote.speaker}")

    style = BubbleStyle.THOUGHT if options.thought else BubbleStyle.SPEECH
    return [*render_bubble(lines, style), *get_cow().split("\n")]


def run(argv: Sequence[str], sources: MessageSources | None = None) -> int:
    """Runs winsay against the given tokens and returns the exit code.

    Output goes to stdout; a single ``winsay: <reason>`` line goes to
    stderr when no message can be found.
    """
    options = parse_args(argv)
    if options.help:
        print(usage(), end="")
        return 0

    try:
        quote = select_message(options.positional, sources)
        if not quote.text.strip():
            raise EmptyMessageError
    except (WinsayError, OSError) as exc:
        print(f"{PROG}: {exc}", file=sys.stderr)
        return 1

    for line in render_output(quote, options):
        print(line)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
    if argv is None:
        argv = sys.argv[1:]
    return run(argv)


if __name__ == "__main__":
    raise SystemExit(main())
