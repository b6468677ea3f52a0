"""REPL (Read-Eval-Print Loop) driving nested command sessions.

A ``CommandShell`` owns the command table and the frame stack. Starting a
session pushes a frame with its own prompt and commands; ``commandloop``
reads, parses and dispatches lines for that frame until it terminates,
then pops it. A command handler may start and run another session, which
suspends the outer loop until the inner one ends.

Example:
    >>> shell = CommandShell()
    >>> shell.start_session(prompt="demo> ")
    >>> @shell.command("hello", help="Say hello")
    ... def hello(args):
    ...     print("Hello, world!")
    ...     return ReturnCode.OK
    >>> shell.commandloop()
"""

from __future__ import annotations

import functools
import logging
import sys
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TextIO

from cmdframe.errors import OutOfMemory, ReturnCode, TooManyCommandsError
from cmdframe.lib.config_parser import ShellSettings
from cmdframe.shell.builtins import (
    EXIT_DESCRIPTION,
    HELP_DESCRIPTION,
    emptyline_command,
    exit_command,
    help_command,
    unknown_command,
)
from cmdframe.shell.console import InputSource, StreamInput, TerminalSize, get_terminal_size
from cmdframe.shell.parser import ArgList, split_command_line, tokenize, trim_line
from cmdframe.shell.registry import (
    CommandEntry,
    CommandHandler,
    CommandTable,
    NameCompleter,
)
from cmdframe.shell.session import FrameStack, SessionFrame, UnknownCommandHandler

logger = logging.getLogger(__name__)


def _check_ruler(ruler: Optional[str]) -> None:
    """Reject rulers that are not a single glyph (None and empty select the default)."""
    if ruler and len(ruler) != 1:
        raise ValueError(f"ruler must be exactly one character, got {ruler!r}")


class CommandShell:
    """Line-oriented command shell with nested sessions.

    All registration, lookup and accessor calls act on the current
    session, the innermost one started and not yet ended.
    """

    def __init__(
        self,
        settings: Optional[ShellSettings] = None,
        stdout: Optional[TextIO] = None,
        input_source: Optional[InputSource] = None,
        terminal_size: Optional[Callable[[], TerminalSize]] = None
    ):
        """Initialize shell.

        Args:
            settings: Capacities and session defaults
            stdout: Output sink (default: sys.stdout)
            input_source: Line source (default: StreamInput on stdin)
            terminal_size: Terminal geometry provider used by ``help``
        """
        self.settings = settings or ShellSettings()
        self.stdout = stdout or sys.stdout
        self.table = CommandTable(self.settings.max_commands * self.settings.max_depth)
        self.stack = FrameStack(
            self.table,
            max_depth=self.settings.max_depth,
            commands_per_frame=self.settings.max_commands,
        )
        self.completer = NameCompleter(self.table, lambda: self.current_frame.registry)
        self.input = input_source or StreamInput(
            stdout=self.stdout, max_length=self.settings.max_input_length
        )
        self._terminal_size = terminal_size or get_terminal_size

    @property
    def current_frame(self) -> SessionFrame:
        """The current session.

        Raises:
            NoActiveSessionError: If no session is active
        """
        return self.stack.current

    @property
    def depth(self) -> int:
        """Number of active sessions."""
        return self.stack.depth

    def terminal_size(self) -> TerminalSize:
        return self._terminal_size()

    # Session lifecycle

    def start_session(
        self,
        prompt: Optional[str] = None,
        intro: Optional[str] = None,
        doc_header: Optional[str] = None,
        undoc_header: Optional[str] = None,
        ruler: Optional[str] = None,
        use_default_exit: bool = True
    ) -> SessionFrame:
        """Start a session and make it current.

        The session gets a ``help`` command, and an ``exit`` command if
        ``use_default_exit`` is set. None (or an empty ruler) selects the
        configured default. The loop is not run; call ``commandloop``.

        Args:
            prompt: Prompt shown before each line
            intro: Banner shown when the loop starts
            doc_header: Title of the documented commands listing
            undoc_header: Title of the undocumented commands listing
            ruler: Glyph underlining the listing titles
            use_default_exit: Register the built-in ``exit`` command

        Returns:
            The new session frame

        Raises:
            ValueError: If ``ruler`` is longer than one character
            NestingDepthExceeded: If the maximum depth is reached (fatal)
        """
        _check_ruler(ruler)
        defaults = self.settings
        frame = self.stack.push(
            prompt=defaults.prompt if prompt is None else prompt,
            intro=defaults.intro if intro is None else intro,
            doc_header=defaults.doc_header if doc_header is None else doc_header,
            undoc_header=defaults.undoc_header if undoc_header is None else undoc_header,
            ruler=ruler or defaults.ruler,
            empty_line_handler=emptyline_command,
            unknown_command_handler=functools.partial(unknown_command, self),
        )

        self.register(functools.partial(help_command, self), "help", HELP_DESCRIPTION)
        if use_default_exit:
            self.register(functools.partial(exit_command, self), "exit", EXIT_DESCRIPTION)

        logger.debug(f"Started session at depth {frame.depth} with prompt {frame.prompt!r}")
        return frame

    @contextmanager
    def session(self, **kwargs) -> Iterator[SessionFrame]:
        """Start a session that ends when the block exits.

        Example:
            >>> with shell.session(prompt="sub> ") as frame:
            ...     shell.register(do_hello, "hello")
            ...     shell.commandloop()
        """
        frame = self.start_session(**kwargs)
        with self.stack.guard(frame):
            yield frame

    def end_session(self) -> None:
        """End the current session without running its loop."""
        self.stack.pop()

    # Registry

    def register(
        self,
        handler: CommandHandler,
        name: str,
        help: Optional[str] = None
    ) -> ReturnCode:
        """Register a command in the current session.

        Args:
            handler: Called with the parsed arguments (None when the
                command was given none); returns a status code
            name: Command name
            help: Help text; None makes the command undocumented

        Returns:
            OK, or TOO_MANY_COMMANDS if the session is full
        """
        try:
            self.table.append(self.current_frame.registry, CommandEntry(name, handler, help))
        except TooManyCommandsError as e:
            logger.warning(str(e))
            return ReturnCode.TOO_MANY_COMMANDS
        return ReturnCode.OK

    def command(
        self,
        name: Optional[str] = None,
        help: Optional[str] = None
    ) -> Callable[[CommandHandler], CommandHandler]:
        """Decorator registering a function in the current session.

        Args:
            name: Command name (default: the function name)
            help: Help text

        Returns:
            Decorator function
        """
        def decorator(func: CommandHandler) -> CommandHandler:
            self.register(func, name or func.__name__, help)
            return func
        return decorator

    def lookup(self, name: str) -> Optional[CommandEntry]:
        """Find a command in the current session."""
        return self.table.lookup(self.current_frame.registry, name)

    def complete(self, text: str, state: int) -> Optional[str]:
        """Complete a command name of the current session (readline protocol)."""
        return self.completer.complete(text, state)

    def get_command_count(self) -> int:
        """Number of commands registered in the current session."""
        return self.current_frame.registry.count

    # Current session settings

    @property
    def prompt(self) -> str:
        return self.current_frame.prompt

    @prompt.setter
    def prompt(self, value: Optional[str]) -> None:
        self.current_frame.prompt = self.settings.prompt if value is None else value

    @property
    def intro(self) -> str:
        return self.current_frame.intro

    @intro.setter
    def intro(self, value: Optional[str]) -> None:
        self.current_frame.intro = self.settings.intro if value is None else value

    @property
    def doc_header(self) -> str:
        return self.current_frame.doc_header

    @doc_header.setter
    def doc_header(self, value: Optional[str]) -> None:
        self.current_frame.doc_header = self.settings.doc_header if value is None else value

    @property
    def undoc_header(self) -> str:
        return self.current_frame.undoc_header

    @undoc_header.setter
    def undoc_header(self, value: Optional[str]) -> None:
        self.current_frame.undoc_header = (
            self.settings.undoc_header if value is None else value
        )

    @property
    def ruler(self) -> str:
        return self.current_frame.ruler

    @ruler.setter
    def ruler(self, value: Optional[str]) -> None:
        _check_ruler(value)
        self.current_frame.ruler = value or self.settings.ruler

    def set_emptyline_handler(self, handler: Optional[CommandHandler]) -> None:
        """Replace the current session's empty-line handler (None restores the no-op)."""
        self.current_frame.empty_line_handler = handler or emptyline_command

    def set_unknown_command_handler(self, handler: Optional[UnknownCommandHandler]) -> None:
        """Replace the current session's handler for unregistered names."""
        self.current_frame.unknown_command_handler = (
            handler or functools.partial(unknown_command, self)
        )

    # Dispatch

    def commandloop(self) -> None:
        """Run the current session until it terminates, then end it.

        The loop ends when ``exit`` is invoked or the input source reaches
        end of input. The session is popped on every exit path.

        Raises:
            OutOfMemory: If the input source cannot allocate a line (fatal)
        """
        frame = self.current_frame

        with self.stack.guard(frame):
            if frame.intro:
                self.stdout.write(f"\n{frame.intro}\n\n")

            while not frame.terminated:
                try:
                    line = self.input.read_line(frame.prompt)
                except MemoryError as e:
                    logger.critical("Out of memory while reading input")
                    raise OutOfMemory("Out of memory while reading input") from e
                except KeyboardInterrupt:
                    # Ctrl+C
                    self.stdout.write('\n')
                    continue

                if line is None:
                    frame.terminate()
                    break

                self.execute_line(line)

        logger.debug(f"Session at depth {frame.depth} ended")

    def execute_line(self, line: str) -> int:
        """Dispatch a single line of input in the current session.

        Args:
            line: Raw input line

        Returns:
            The handler's status code
        """
        frame = self.current_frame
        line = trim_line(line)

        if not line:
            return frame.empty_line_handler(None)

        self.input.add_history(line)
        command_word, rest = split_command_line(line)

        args: Optional[ArgList]
        try:
            args = tokenize(rest)
        except MemoryError:
            logger.error(f"Out of memory parsing arguments of '{command_word}'")
            args = None

        try:
            entry = self.lookup(command_word)
            if entry is None:
                return frame.unknown_command_handler(command_word, args)

            logger.debug(f"Dispatching '{command_word}' with {args!r}")
            try:
                return entry.handler(args)
            except Exception as e:
                logger.exception(f"Command '{command_word}' failed")
                self.stdout.write(f"Error: {e}\n")
                return ReturnCode.ARGUMENT_ERROR
        finally:
            if args is not None:
                args.release()


_shell: Optional[CommandShell] = None


def get_shell() -> CommandShell:
    """Get or create the process-wide shell.

    Returns:
        Shell instance
    """
    global _shell
    if _shell is None:
        _shell = CommandShell()
    return _shell


def reset_shell(**kwargs) -> CommandShell:
    """Replace the process-wide shell.

    Args:
        **kwargs: Passed to ``CommandShell``

    Returns:
        The new shell
    """
    global _shell
    _shell = CommandShell(**kwargs)
    return _shell
