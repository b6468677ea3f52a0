"""cmdframe - embeddable command-dispatch engine.

Build interactive, line-oriented command shells: register handlers by
name, and let the REPL read, parse and dispatch lines until the session
ends.

Features:
- Quote-aware argument parsing
- Nested sessions (submenus) with their own prompt and commands
- Built-in help listing, word-wrapped to the terminal width
- Readline history and command-name completion
"""

__version__ = "1.0.0"
__license__ = "MIT"

from cmdframe.errors import ReturnCode
from cmdframe.shell.parser import ArgList
from cmdframe.shell.repl import CommandShell
from cmdframe.cli import main

__all__ = ["main", "CommandShell", "ArgList", "ReturnCode", "__version__"]
