"""Built-in commands for the shell.

Every session gets ``help``; ``exit`` is installed on request. Handlers
here take the owning shell as their first argument and are bound to it
with ``functools.partial`` when a session starts.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, TextIO

from cmdframe.errors import ReturnCode
from cmdframe.shell.console import pprint
from cmdframe.shell.parser import ArgList

if TYPE_CHECKING:
    from cmdframe.shell.repl import CommandShell

logger = logging.getLogger(__name__)

HELP_DESCRIPTION = "Get information on a command or list commands."
EXIT_DESCRIPTION = "Quit the application"


def print_title(out: TextIO, title: str, ruler: str) -> None:
    """Write a title underlined with the ruler glyph."""
    out.write(f"\n{title}\n")
    out.write(ruler * (len(title) + 1) + '\n')


def _print_names(out: TextIO, names: list[str], width: int) -> None:
    """Write names separated by spaces, breaking lines before ``width``."""
    printed = 0
    for name in names:
        if width > 0 and printed + len(name) + 1 >= width:
            out.write('\n')
            printed = 0
        out.write(f"{name} ")
        printed += len(name) + 1
    out.write('\n')


def print_command_list(shell: CommandShell) -> None:
    """List the current session's commands, documented ones first.

    The undocumented group is left out when it is empty.

    Args:
        shell: Shell whose current session is listed
    """
    frame = shell.current_frame
    out = shell.stdout
    width = shell.terminal_size().columns
    entries = shell.table.entries(frame.registry)

    print_title(out, frame.doc_header, frame.ruler)
    _print_names(out, [e.name for e in entries if e.documented], width)

    if frame.registry.undocumented_count > 0:
        print_title(out, frame.undoc_header, frame.ruler)
        _print_names(out, [e.name for e in entries if not e.documented], width)


def help_command(shell: CommandShell, args: Optional[ArgList]) -> int:
    """Show help information.

    With no arguments, lists all commands of the current session. With one
    argument, shows that command's help text.

    Args:
        shell: Owning shell
        args: Parsed arguments

    Returns:
        OK, UNKNOWN_COMMAND if the named command does not exist, or
        TOO_MANY_ARGS with more than one argument
    """
    out = shell.stdout

    if not args:
        print_command_list(shell)
        out.write('\n')
        return ReturnCode.OK

    if args.count > 1:
        out.write("Too many arguments for the 'help' command!\n")
        return ReturnCode.TOO_MANY_ARGS

    entry = shell.lookup(args[0])
    if entry is None:
        out.write(f"Command '{args[0]}' was not found.\n")
        return ReturnCode.UNKNOWN_COMMAND

    if entry.help is None:
        out.write("\n(No documentation)\n")
        return ReturnCode.OK

    prefix = f"{entry.name}   "
    out.write(prefix)
    settings = shell.settings
    pprint(
        out,
        len(prefix),
        entry.help,
        width=shell.terminal_size().columns,
        right_offset=settings.pprint_right_offset,
        tab_size=settings.tab_to_spaces,
    )
    return ReturnCode.OK


def exit_command(shell: CommandShell, args: Optional[ArgList]) -> int:
    """Terminate the current session.

    Args:
        shell: Owning shell
        args: Ignored

    Returns:
        OK
    """
    logger.debug("Exit requested")
    shell.current_frame.terminate()
    return ReturnCode.OK


def emptyline_command(args: Optional[ArgList]) -> int:
    """Default empty-line handler: do nothing."""
    return ReturnCode.OK


def unknown_command(shell: CommandShell, name: str, args: Optional[ArgList]) -> int:
    """Default handler for names not registered in the current session."""
    shell.stdout.write(f"Unknown command '{name}'.\n")
    return ReturnCode.UNKNOWN_COMMAND
