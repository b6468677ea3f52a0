from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

from cmdframe.errors import ReturnCode
from cmdframe.lib.config_parser import ShellSettings, load_config
from cmdframe.shell.console import HAS_READLINE, ReadlineInput, ScriptedInput
from cmdframe.shell.parser import ArgList
from cmdframe.shell.repl import CommandShell, get_shell, reset_shell

PROG_INTRO = (
    "cmdframe - A simple demo program with a submenu.\n"
    "You can use this as a reference on how to use the library!"
)
SUBMENU_INTRO = "This is a submenu!"
PRINTARGS_HELP = (
    "This is a very long help string for a command.\n"
    "As you can see, this is concatenated properly. It's pretty good!"
)


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging.

    Args:
        verbose: Enable debug logging
        quiet: Suppress info logging
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def do_hello(args: Optional[ArgList]) -> int:
    get_shell().stdout.write("\nHello, world!\n")
    return ReturnCode.OK


def do_printargs(args: Optional[ArgList]) -> int:
    """Echo every argument with its position."""
    out = get_shell().stdout
    if not args:
        out.write("\nNo arguments provided!\n")
        return ReturnCode.OK

    out.write(f"\nTotal arguments = {args.count}")
    for i, arg in enumerate(args):
        out.write(f"\nArgument {i}: '{arg}'")
    out.write("\n")
    return ReturnCode.OK


def do_submenu(args: Optional[ArgList]) -> int:
    """Run a nested session with its own commands."""
    shell = get_shell()
    shell.start_session(prompt="cmdframe/submenu> ", intro=SUBMENU_INTRO)
    shell.register(do_hello, "hello")
    shell.register(do_printargs, "printargs")
    shell.commandloop()
    return ReturnCode.OK


def build_demo_shell(shell: CommandShell) -> CommandShell:
    """Start the top-level demo session on ``shell``.

    Args:
        shell: Shell with no active session

    Returns:
        The same shell, ready for ``commandloop``
    """
    shell.start_session(prompt="cmdframe> ", intro=PROG_INTRO)
    shell.register(do_hello, "hello")
    shell.register(do_printargs, "printargs", PRINTARGS_HELP)
    shell.register(do_submenu, "submenu", "Open a nested session with its own commands.")
    return shell


def load_settings(config_path: Path) -> ShellSettings:
    """Load settings from ``config_path``, or defaults if it does not exist."""
    if config_path.exists():
        logger.debug(f"Loading configuration from {config_path}")
        return load_config(config_path)
    logger.debug(f"No configuration at {config_path}, using defaults")
    return ShellSettings()


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = argparse.ArgumentParser(
        description="Interactive demo of the cmdframe command shell",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        '--config', '-c',
        type=Path,
        default=Path('cmdframe.yaml'),
        help='Path to configuration file (default: cmdframe.yaml)'
    )
    parser.add_argument(
        '--script',
        type=Path,
        metavar='FILE',
        help='Read commands from FILE instead of the terminal'
    )
    parser.add_argument(
        '--no-readline',
        action='store_true',
        help='Read plain lines without history or completion'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose (debug) logging'
    )
    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress informational output'
    )

    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.quiet)

    try:
        settings = load_settings(args.config)
    except Exception as e:
        logger.error(f"Invalid configuration {args.config}: {e}")
        return 1

    shell = reset_shell(settings=settings)

    if args.script:
        if not args.script.exists():
            logger.error(f"Script not found: {args.script}")
            return 1
        shell.input = ScriptedInput.from_file(args.script, echo=True, stdout=shell.stdout)
    elif HAS_READLINE and not args.no_readline and sys.stdin.isatty():
        shell.input = ReadlineInput(
            completer=shell.complete,
            history_file=settings.history_file,
            history_length=settings.history_length,
        )

    build_demo_shell(shell)
    shell.commandloop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
