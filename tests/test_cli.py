"""Tests for the demo command-line program."""

from cmdframe.cli import main


class TestDemoScript:
    """Test running the demo shell from a script."""

    def test_script_with_submenu(self, tmp_path, capsys):
        """The demo runs commands in both the main menu and the submenu."""
        script = tmp_path / "demo.txt"
        script.write_text(
            "hello\n"
            'printargs a "b c"\n'
            "submenu\n"
            "printargs\n"
            "exit\n"
            "exit\n"
        )
        code = main(["--script", str(script), "--config", str(tmp_path / "none.yaml")])
        out = capsys.readouterr().out

        assert code == 0
        assert "Hello, world!" in out
        assert "Total arguments = 2" in out
        assert "Argument 0: 'a'" in out
        assert "Argument 1: 'b c'" in out
        assert "This is a submenu!" in out
        assert "cmdframe/submenu> printargs" in out
        assert "No arguments provided!" in out

    def test_config_applies(self, tmp_path, capsys):
        """Configured defaults are used by the demo session."""
        config = tmp_path / "cmdframe.yaml"
        config.write_text("doc_header: 'Commands'\nruler: '-'\n")
        script = tmp_path / "demo.txt"
        script.write_text("help\n")
        assert main(["--script", str(script), "--config", str(config)]) == 0
        out = capsys.readouterr().out
        assert "\nCommands\n---------\n" in out

    def test_missing_script(self, tmp_path):
        """A missing script is reported with a failure code."""
        assert main(["--script", str(tmp_path / "nope.txt"),
                     "--config", str(tmp_path / "none.yaml")]) == 1

    def test_invalid_config(self, tmp_path):
        """An invalid configuration is reported with a failure code."""
        config = tmp_path / "cmdframe.yaml"
        config.write_text("ruler: '=='\n")
        assert main(["--config", str(config)]) == 1
