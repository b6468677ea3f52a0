"""Parser for command lines.

Splits a line like ``printargs a "b c" d`` into the command word and an
argument list, honoring double-quoted spans as single arguments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

QUOTE = '"'


class _ScanState(Enum):
    OUTSIDE = "outside"
    IN_WORD = "in_word"
    IN_QUOTES = "in_quotes"


@dataclass
class ArgList:
    """Arguments parsed from one input line.

    Owned by the dispatch loop for the duration of a single handler call
    and released afterwards; handlers must copy anything they keep.
    """

    args: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        """Number of arguments."""
        return len(self.args)

    def __len__(self) -> int:
        return len(self.args)

    def __iter__(self) -> Iterator[str]:
        return iter(self.args)

    def __getitem__(self, index: int) -> str:
        return self.args[index]

    def release(self) -> None:
        """Drop every token, leaving an empty list."""
        self.args.clear()

    def __repr__(self) -> str:
        """String representation."""
        return f"ArgList({', '.join(repr(a) for a in self.args)})"


def tokenize(argline: Optional[str]) -> Optional[ArgList]:
    """Split an argument fragment into arguments.

    Whitespace separates arguments outside quotes. A ``"`` at the start of
    an argument opens a quoted span that runs to the next ``"`` and may
    contain whitespace; a ``"`` inside an unquoted word is an ordinary
    character. An unterminated quote keeps everything up to the end of the
    input.

    Args:
        argline: Text after the command word, or None when there was none

    Returns:
        ArgList of the parsed arguments, or None if ``argline`` is None

    Raises:
        MemoryError: If the argument list cannot be built; no partial
            list is returned

    Example:
        >>> tokenize('a "b c" d').args
        ['a', 'b c', 'd']
    """
    if argline is None:
        return None

    args: List[str] = []
    state = _ScanState.OUTSIDE
    start = 0

    for pos, char in enumerate(argline):
        if state is _ScanState.OUTSIDE:
            if char.isspace():
                continue
            if char == QUOTE:
                state = _ScanState.IN_QUOTES
                start = pos + 1
            else:
                state = _ScanState.IN_WORD
                start = pos
        elif state is _ScanState.IN_WORD:
            if char.isspace():
                args.append(argline[start:pos])
                state = _ScanState.OUTSIDE
        elif char == QUOTE:
            args.append(argline[start:pos])
            state = _ScanState.OUTSIDE

    if state is not _ScanState.OUTSIDE:
        args.append(argline[start:])

    return ArgList(args)


def trim_line(line: str) -> str:
    """Strip the line terminator and surrounding whitespace.

    Args:
        line: Raw line from the input source

    Returns:
        Trimmed line, possibly empty
    """
    if line.endswith('\n'):
        line = line[:-1]
    return line.strip()


def split_command_line(line: str) -> Tuple[str, Optional[str]]:
    """Split a trimmed line at its first whitespace run.

    Args:
        line: Non-empty, trimmed input line

    Returns:
        Tuple of (command word, rest); rest is None if the line is a
        single word
    """
    parts = line.split(None, 1)
    command_word = parts[0]
    rest = parts[1] if len(parts) > 1 else None
    return command_word, rest

