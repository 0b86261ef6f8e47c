"""Unit tests for the CLI entry point."""

from careergalaxy.cli.main import main


class TestMain:
    def test_help_lists_commands(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("tree", "layout", "trace", "stats", "search"):
            assert command in result.output
