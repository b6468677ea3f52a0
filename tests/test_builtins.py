"""Tests for the built-in help and exit commands."""

from cmdframe.errors import ReturnCode

PRINTARGS_HELP = "Print every argument."

LISTING = (
    "\nDocumented Commands:\n"
    + "=" * 21 + "\n"
    + "help exit printargs \n"
    + "\nUndocumented Commands:\n"
    + "=" * 23 + "\n"
    + "hello \n"
    + "\n"
)


def demo_shell(make_shell, lines=(), width=80):
    shell = make_shell(lines, width=width)
    shell.start_session()
    shell.register(lambda args: ReturnCode.OK, "hello")
    shell.register(lambda args: ReturnCode.OK, "printargs", PRINTARGS_HELP)
    return shell


class TestHelpListing:
    """Test help without arguments."""

    def test_listing(self, make_shell, out):
        """Documented commands are listed first, then undocumented ones."""
        shell = demo_shell(make_shell)
        assert shell.execute_line("help") == ReturnCode.OK
        assert out.getvalue() == LISTING

    def test_listing_is_idempotent(self, make_shell, out):
        """Listing twice gives the same output, whatever ran before."""
        shell = demo_shell(make_shell)
        shell.execute_line("hello")
        shell.execute_line("help")
        first = out.getvalue()
        out.seek(0)
        out.truncate()
        shell.execute_line("help")
        assert out.getvalue() == first

    def test_undocumented_group_omitted_when_empty(self, make_shell, out):
        """Without undocumented commands only one group is shown."""
        shell = make_shell()
        shell.start_session()
        shell.execute_line("help")
        assert out.getvalue() == "\nDocumented Commands:\n" + "=" * 21 + "\nhelp exit \n\n"

    def test_custom_headers_and_ruler(self, make_shell, out):
        """Headers and ruler come from the current session."""
        shell = make_shell()
        shell.start_session(doc_header="Docs", ruler="-", use_default_exit=False)
        shell.execute_line("help")
        assert out.getvalue() == "\nDocs\n-----\nhelp \n\n"

    def test_listing_wraps_at_terminal_width(self, make_shell, out):
        """Names move to a new line before reaching the terminal width."""
        shell = make_shell(width=10)
        shell.start_session()
        shell.register(lambda args: ReturnCode.OK, "printargs", PRINTARGS_HELP)
        shell.execute_line("help")
        assert out.getvalue() == (
            "\nDocumented Commands:\n" + "=" * 21 + "\n"
            "help \nexit \nprintargs \n\n"
        )

    def test_listing_unwrapped_when_width_unknown(self, make_shell, out):
        """A zero width disables wrapping."""
        shell = demo_shell(make_shell, width=0)
        shell.execute_line("help")
        assert out.getvalue() == LISTING

    def test_listing_in_submenu(self, make_shell, out):
        """A submenu lists only its own commands."""
        shell = demo_shell(make_shell)
        shell.start_session(use_default_exit=False)
        shell.execute_line("help")
        assert out.getvalue() == "\nDocumented Commands:\n" + "=" * 21 + "\nhelp \n\n"


class TestHelpForCommand:
    """Test help with an argument."""

    def test_documented_command(self, make_shell, out):
        """The help text follows the command name."""
        shell = demo_shell(make_shell)
        assert shell.execute_line("help printargs") == ReturnCode.OK
        assert out.getvalue() == "printargs   Print every argument. \n"

    def test_help_text_wraps_with_indent(self, make_shell, out):
        """Wrapped help lines are indented under the first one."""
        shell = make_shell(width=30, pprint_right_offset=1)
        shell.start_session()
        shell.register(lambda args: 1, "cmd", "one two three four five six")
        shell.execute_line("help cmd")
        assert out.getvalue() == (
            "cmd   one two three four \n"
            "      five six \n"
        )

    def test_undocumented_command(self, make_shell, out):
        """Commands without help say so."""
        shell = demo_shell(make_shell)
        assert shell.execute_line("help hello") == ReturnCode.OK
        assert out.getvalue() == "\n(No documentation)\n"

    def test_missing_command(self, make_shell, out):
        """An unknown name is reported without the unknown-command message."""
        shell = demo_shell(make_shell)
        assert shell.execute_line("help nope") == ReturnCode.UNKNOWN_COMMAND
        assert out.getvalue() == "Command 'nope' was not found.\n"

    def test_too_many_arguments(self, make_shell, out):
        """More than one argument is refused."""
        shell = demo_shell(make_shell)
        assert shell.execute_line("help hello printargs") == ReturnCode.TOO_MANY_ARGS
        assert out.getvalue() == "Too many arguments for the 'help' command!\n"


class TestExit:
    """Test the exit command."""

    def test_exit_terminates_current_session_only(self, make_shell):
        """Exit in a submenu leaves the parent running."""
        shell = make_shell()
        outer = shell.start_session()
        inner = shell.start_session()
        shell.execute_line("exit")
        assert inner.terminated
        assert not outer.terminated
