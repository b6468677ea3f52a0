"""Return codes and exceptions for the command shell.

Recoverable failures are reported as ``ReturnCode`` values; fatal ones raise
``FatalShellError``, which subclasses ``SystemExit`` so an unhandled one ends
the process with the matching (negative) exit code.
"""

from __future__ import annotations

from enum import IntEnum


class ReturnCode(IntEnum):
    """Status values returned by command handlers and registration."""
    OK = 1
    TOO_MANY_COMMANDS = -1
    TOO_MANY_ARGS = -2
    UNKNOWN_COMMAND = -3
    ARGUMENT_ERROR = -4
    OUT_OF_MEMORY = -5
    NESTING_DEPTH_EXCEEDED = -6


class ShellError(Exception):
    """Base class for recoverable shell errors."""
    pass


class TooManyCommandsError(ShellError):
    """Raised when a frame's registry slice is full."""

    def __init__(self, name: str, capacity: int):
        super().__init__(
            f"Cannot register '{name}': frame already holds {capacity} commands"
        )
        self.name = name
        self.capacity = capacity


class NoActiveSessionError(ShellError):
    """Raised when a current-frame operation runs with an empty frame stack."""
    pass


class SessionStateError(ShellError):
    """Raised when frames are popped out of order."""
    pass


class FatalShellError(SystemExit):
    """Unrecoverable condition; terminates the process unless intercepted."""

    return_code: ReturnCode = ReturnCode.ARGUMENT_ERROR

    def __init__(self, message: str):
        super().__init__(int(self.return_code))
        self.message = message

    def __str__(self) -> str:
        return self.message


class NestingDepthExceeded(FatalShellError):
    """Raised when starting a session would exceed the maximum depth."""
    return_code = ReturnCode.NESTING_DEPTH_EXCEEDED


class OutOfMemory(FatalShellError):
    """Raised when the input source cannot allocate a line."""
    return_code = ReturnCode.OUT_OF_MEMORY
