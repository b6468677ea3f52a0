"""Shell module: nested, line-oriented command sessions.

Provides the quote-aware argument parser, the per-session command
registry, the session frame stack and the REPL that drives them.
"""

from __future__ import annotations

from cmdframe.shell.console import ReadlineInput, ScriptedInput, StreamInput, get_terminal_size
from cmdframe.shell.parser import ArgList, split_command_line, tokenize, trim_line
from cmdframe.shell.registry import CommandEntry, CommandTable, RegistrySlice
from cmdframe.shell.repl import CommandShell, get_shell, reset_shell
from cmdframe.shell.session import FrameStack, FrameState, SessionFrame

__all__ = [
    "CommandShell",
    "ArgList",
    "CommandEntry",
    "CommandTable",
    "RegistrySlice",
    "FrameStack",
    "FrameState",
    "SessionFrame",
    "StreamInput",
    "ReadlineInput",
    "ScriptedInput",
    "tokenize",
    "trim_line",
    "split_command_line",
    "get_terminal_size",
    "get_shell",
    "reset_shell",
]
