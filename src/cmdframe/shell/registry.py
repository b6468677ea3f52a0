"""Command registry shared by all sessions.

Entries live in one flat arena. Each session owns a ``RegistrySlice``, a
contiguous range of the arena that only it can see. Slices are stacked:
only the innermost slice may grow, and releasing it truncates the arena
back to where the slice began so the slots can be reused.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from cmdframe.errors import SessionStateError, TooManyCommandsError
from cmdframe.shell.parser import ArgList

logger = logging.getLogger(__name__)

CommandHandler = Callable[[Optional[ArgList]], int]


@dataclass(frozen=True)
class CommandEntry:
    """A registered command."""

    name: str
    handler: CommandHandler
    help: Optional[str] = None

    @property
    def documented(self) -> bool:
        return self.help is not None


@dataclass
class RegistrySlice:
    """Handle to the range of the arena owned by one session."""

    start: int
    capacity: int
    count: int = 0
    documented_count: int = 0
    undocumented_count: int = 0
    released: bool = False

    @property
    def end(self) -> int:
        """Index one past the last entry of the slice."""
        return self.start + self.count

    @property
    def full(self) -> bool:
        return self.count >= self.capacity


class CommandTable:
    """Fixed-capacity arena of command entries.

    Example:
        >>> table = CommandTable(capacity=48)
        >>> outer = table.open_slice(24)
        >>> table.append(outer, CommandEntry("hello", lambda args: 1))
        >>> table.lookup(outer, "hello").name
        'hello'
    """

    def __init__(self, capacity: int):
        """Initialize table.

        Args:
            capacity: Total number of entry slots across all slices
        """
        self.capacity = capacity
        self._entries: List[CommandEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def open_slice(self, capacity: int) -> RegistrySlice:
        """Open a new, empty slice after the current innermost one.

        Args:
            capacity: Maximum number of entries the slice may hold

        Returns:
            Slice handle
        """
        slice_ = RegistrySlice(start=len(self._entries), capacity=capacity)
        logger.debug(f"Opened registry slice at {slice_.start} (capacity {capacity})")
        return slice_

    def append(self, slice_: RegistrySlice, entry: CommandEntry) -> CommandEntry:
        """Append an entry to a slice.

        Args:
            slice_: Slice to grow; must be the innermost open slice
            entry: Entry to store

        Returns:
            The stored entry

        Raises:
            TooManyCommandsError: If the slice or the arena is full
            SessionStateError: If the slice is released or not innermost
        """
        self._check_innermost(slice_)
        if slice_.full or len(self._entries) >= self.capacity:
            raise TooManyCommandsError(entry.name, slice_.capacity)

        self._entries.append(entry)
        slice_.count += 1
        if entry.documented:
            slice_.documented_count += 1
        else:
            slice_.undocumented_count += 1

        logger.debug(f"Registered command '{entry.name}' at slot {slice_.end - 1}")
        return entry

    def entries(self, slice_: RegistrySlice) -> List[CommandEntry]:
        """Entries of a slice in registration order."""
        return self._entries[slice_.start:slice_.end]

    def lookup(self, slice_: RegistrySlice, name: str) -> Optional[CommandEntry]:
        """Find the first entry registered under ``name`` in a slice.

        Args:
            slice_: Slice to search
            name: Exact command name

        Returns:
            Entry if found, None otherwise
        """
        for entry in self.entries(slice_):
            if entry.name == name:
                return entry
        return None

    def iter_names(self, slice_: RegistrySlice, prefix: str = "") -> Iterator[str]:
        """Yield the names in a slice that start with ``prefix``.

        Args:
            slice_: Slice to search
            prefix: Name prefix; empty matches everything

        Yields:
            Matching command names in registration order
        """
        for entry in self.entries(slice_):
            if entry.name.startswith(prefix):
                yield entry.name

    def release(self, slice_: RegistrySlice) -> None:
        """Release a slice and reclaim its slots.

        Args:
            slice_: Innermost open slice

        Raises:
            SessionStateError: If the slice is not the innermost one
        """
        if slice_.released:
            return
        self._check_innermost(slice_)
        del self._entries[slice_.start:]
        slice_.released = True
        logger.debug(f"Released registry slice at {slice_.start} ({slice_.count} slots)")

    def _check_innermost(self, slice_: RegistrySlice) -> None:
        if slice_.released:
            raise SessionStateError(f"Registry slice at {slice_.start} was already released")
        if slice_.end != len(self._entries):
            raise SessionStateError(
                f"Registry slice at {slice_.start} is not the innermost slice"
            )


class NameCompleter:
    """Readline-style completer over the current session's commands.

    ``complete(text, 0)`` starts a fresh scan; subsequent calls with
    increasing ``state`` return the next match, then None.
    """

    def __init__(self, table: CommandTable, current_slice: Callable[[], RegistrySlice]):
        """Initialize completer.

        Args:
            table: Command table to search
            current_slice: Returns the slice of the current session
        """
        self.table = table
        self.current_slice = current_slice
        self._matches: Iterator[str] = iter(())

    def complete(self, text: str, state: int) -> Optional[str]:
        """Return the next command name starting with ``text``.

        Args:
            text: Prefix being completed
            state: 0 to restart the scan, >0 to continue it

        Returns:
            Next matching name, or None when there are no more
        """
        if state == 0:
            self._matches = self.table.iter_names(self.current_slice(), text)
        return next(self._matches, None)
