"""Shared fixtures for shell tests."""

import io

import pytest

from cmdframe.lib.config_parser import ShellSettings
from cmdframe.shell.console import ScriptedInput, TerminalSize
from cmdframe.shell.repl import CommandShell


@pytest.fixture
def out():
    """Output sink capturing everything the shell writes."""
    return io.StringIO()


@pytest.fixture
def make_shell(out):
    """Build a shell fed from a list of lines, with an 80-column terminal."""
    def factory(lines=(), width=80, **settings):
        return CommandShell(
            settings=ShellSettings(**settings),
            stdout=out,
            input_source=ScriptedInput(lines),
            terminal_size=lambda: TerminalSize(24, width),
        )
    return factory
