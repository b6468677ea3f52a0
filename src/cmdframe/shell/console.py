"""Console collaborators of the dispatch loop.

Input sources (plain stream, GNU readline, scripted lines), terminal
geometry and the word wrapper used by ``help``.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Callable, Iterable, Iterator, NamedTuple, Optional, Protocol, TextIO, Union

logger = logging.getLogger(__name__)

try:
    import readline
    HAS_READLINE = True
except ImportError:
    HAS_READLINE = False
    logger.debug("readline not available - command history disabled")


class InputSource(Protocol):
    """Where the dispatch loop gets its lines from."""

    def read_line(self, prompt: str) -> Optional[str]:
        """Show ``prompt`` and read one line.

        Returns:
            The line, or None at end of input
        """
        ...

    def add_history(self, line: str) -> None:
        """Record a non-empty line for later recall."""
        ...


class StreamInput:
    """Read lines from a text stream, like ``fgets`` on stdin.

    Lines longer than ``max_length - 1`` characters are returned in
    chunks, one chunk per read.
    """

    def __init__(
        self,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        max_length: int = 256
    ):
        """Initialize stream input.

        Args:
            stdin: Stream to read from (default: sys.stdin)
            stdout: Stream the prompt is written to (default: sys.stdout)
            max_length: Size of the line buffer, terminator slot included
        """
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.max_length = max_length

    def read_line(self, prompt: str) -> Optional[str]:
        self.stdout.write(prompt)
        self.stdout.flush()
        line = self.stdin.readline(self.max_length - 1)
        if not line:
            return None
        return line

    def add_history(self, line: str) -> None:
        pass


class ReadlineInput:
    """Read lines with GNU readline editing, history and tab completion."""

    def __init__(
        self,
        completer: Optional[Callable[[str, int], Optional[str]]] = None,
        history_file: Optional[Path] = None,
        history_length: int = 1000
    ):
        """Initialize readline input.

        Args:
            completer: ``complete(text, state)`` callback for command names
            history_file: File to load history from and save it to at exit
            history_length: Maximum number of history entries kept

        Raises:
            RuntimeError: If the readline module is unavailable
        """
        if not HAS_READLINE:
            raise RuntimeError("readline is not available on this platform")

        self.history_file = history_file
        # History is recorded by the dispatch loop from trimmed, non-empty lines
        readline.set_auto_history(False)
        readline.set_history_length(history_length)

        if history_file is not None:
            self._setup_history(history_file)

        if completer is not None:
            readline.set_completer(completer)
            readline.set_completer_delims(" \t\n\"")
            readline.parse_and_bind("tab: complete")

    def _setup_history(self, history_file: Path) -> None:
        """Load history and arrange for it to be saved at exit."""
        try:
            readline.read_history_file(str(history_file))
        except FileNotFoundError:
            pass

        import atexit
        atexit.register(readline.write_history_file, str(history_file))

    def read_line(self, prompt: str) -> Optional[str]:
        try:
            return input(prompt)
        except EOFError:
            # Ctrl+D
            print()
            return None

    def add_history(self, line: str) -> None:
        readline.add_history(line)


class ScriptedInput:
    """Feed a fixed sequence of lines to the dispatch loop.

    Used for scripts and tests. With ``echo`` set, every prompt and line
    is written to ``stdout`` so the output reads like a transcript.
    """

    def __init__(
        self,
        lines: Iterable[str],
        echo: bool = False,
        stdout: Optional[TextIO] = None
    ):
        self._lines: Iterator[str] = iter(lines)
        self.echo = echo
        self.stdout = stdout or sys.stdout
        self.history: list[str] = []

    @classmethod
    def from_file(cls, script_path: Union[str, Path], **kwargs) -> ScriptedInput:
        """Read a script file; blank lines and ``#`` comments are skipped.

        Args:
            script_path: Path to script file
            **kwargs: Passed to the constructor

        Returns:
            Scripted input over the file's commands
        """
        with open(script_path) as f:
            lines = [
                line for line in f
                if line.strip() and not line.lstrip().startswith('#')
            ]
        logger.debug(f"Loaded {len(lines)} lines from {script_path}")
        return cls(lines, **kwargs)

    def read_line(self, prompt: str) -> Optional[str]:
        line = next(self._lines, None)
        if self.echo:
            self.stdout.write(prompt)
            self.stdout.write(line.rstrip('\n') + '\n' if line is not None else '\n')
        return line

    def add_history(self, line: str) -> None:
        self.history.append(line)


class TerminalSize(NamedTuple):
    """Terminal dimensions; zero when unknown."""
    rows: int
    columns: int


def get_terminal_size(stream: Optional[TextIO] = None) -> TerminalSize:
    """Query the size of the terminal attached to ``stream``.

    Args:
        stream: Stream to query (default: sys.stdin)

    Returns:
        Terminal size, or ``TerminalSize(0, 0)`` if it cannot be determined
    """
    stream = stream or sys.stdin
    try:
        size = os.get_terminal_size(stream.fileno())
    except (AttributeError, OSError, ValueError):
        return TerminalSize(0, 0)
    return TerminalSize(rows=size.lines, columns=size.columns)


def pprint(
    out: TextIO,
    loffset: int,
    text: str,
    width: int,
    right_offset: int = 1,
    tab_size: int = 8
) -> None:
    """Write ``text`` word by word, wrapping at the terminal width.

    The cursor is assumed to already be ``loffset`` columns in; wrapped
    lines are indented by ``loffset`` spaces. A word that would run past
    ``width - right_offset`` moves to the next line. When the width is
    unknown (``width <= 0``) the text is written unwrapped with tabs
    expanded.

    Args:
        out: Output stream
        loffset: Current column and indentation of continuation lines
        text: Text to write
        width: Terminal width in columns
        right_offset: Columns kept free at the right edge
        tab_size: Tab expansion width for unwrapped output
    """
    indent = ' ' * loffset

    if width <= 0:
        lines = text.expandtabs(tab_size).splitlines() or ['']
        out.write(lines[0] + '\n')
        for line in lines[1:]:
            out.write(indent + line + '\n')
        return

    limit = width - right_offset
    printed = loffset
    for word in text.split():
        if printed + len(word) + 1 > limit:
            out.write('\n' + indent)
            printed = loffset
        out.write(word + ' ')
        printed += len(word) + 1

    out.write('\n')
