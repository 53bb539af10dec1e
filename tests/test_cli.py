# =============================================================================
# test_cli.py - Command-Line Interface Tests
# =============================================================================
# Tests for the lualex command: token dumps, diagnostics and exit codes.
# =============================================================================

import pytest
from click.testing import CliRunner

from lualex import __version__
from lualex.cli.errors import ExitCode
from lualex.cli.main import format_token, main
from lualex.source import Position
from lualex.tokens import Token, TokenType


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def lua_file(tmp_path):
    """Write a Lua source file and return its path."""
    def write(text: str, name: str = "test.lua"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return write


# =============================================================================
# Token Formatting Tests
# =============================================================================

class TestFormatToken:
    """Test the one-line token format."""

    def test_keyword(self):
        token = Token(TokenType.LOCAL, None, Position(1, 1, 0))
        assert format_token(token) == "1:1       LOCAL"

    def test_name(self):
        token = Token(TokenType.NAME, "x", Position(1, 7, 6))
        assert format_token(token) == "1:7       NAME        'x'"

    def test_string_value_is_quoted(self):
        token = Token(TokenType.STRING, "a\nb", Position(12, 40, 300))
        assert format_token(token) == "12:40     STRING      'a\\nb'"


# =============================================================================
# Command Tests
# =============================================================================

class TestLualexCLI:
    """Test the lualex command."""

    def test_cli_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Tokenize a Lua source file" in result.output
        assert "--errors-only" in result.output

    def test_cli_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_cli_token_dump(self, runner, lua_file):
        path = lua_file("local x = 10\n")
        result = runner.invoke(main, [str(path)])
        assert result.exit_code == ExitCode.SUCCESS
        lines = result.output.splitlines()
        assert lines == [
            "1:1       LOCAL",
            "1:7       NAME        'x'",
            "1:9       ASSIGN",
            "1:11      INTEGER     10",
            "2:1       EOS",
        ]

    def test_cli_lex_error_exit_code(self, runner, lua_file):
        path = lua_file("x = @\n", "bad.lua")
        result = runner.invoke(main, [str(path)])
        assert result.exit_code == ExitCode.LEX_ERROR
        assert "bad.lua:1:5: error: unexpected character '@'" in result.output
        assert "1 error" in result.output

    def test_cli_errors_only(self, runner, lua_file):
        path = lua_file("return 'ok'\n")
        result = runner.invoke(main, ["--errors-only", str(path)])
        assert result.exit_code == ExitCode.SUCCESS
        assert "RETURN" not in result.output

    def test_cli_max_errors(self, runner, lua_file):
        path = lua_file("@ @ @ @\n")
        result = runner.invoke(main, ["-e", "-n", "2", str(path)])
        assert result.exit_code == ExitCode.LEX_ERROR
        assert "too many errors, stopped after 2" in result.output

    def test_cli_max_errors_from_env(self, runner, lua_file):
        path = lua_file("@ @ @ @\n")
        result = runner.invoke(main, ["-e", str(path)], env={"LUALEX_MAX_ERRORS": "3"})
        assert result.exit_code == ExitCode.LEX_ERROR
        assert "stopped after 3" in result.output

    def test_cli_resync_trivia(self, runner, lua_file):
        path = lua_file("$abc def\n")
        result = runner.invoke(main, ["--resync", "trivia", str(path)])
        assert result.exit_code == ExitCode.LEX_ERROR
        assert "'abc'" not in result.output
        assert "'def'" in result.output

    def test_cli_invalid_max_errors(self, runner, lua_file):
        path = lua_file("x\n")
        result = runner.invoke(main, ["-n", "0", str(path)])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_cli_invalid_resync(self, runner, lua_file):
        path = lua_file("x\n")
        result = runner.invoke(main, ["--resync", "never", str(path)])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_cli_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path / "missing.lua")])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_cli_invalid_utf8(self, runner, tmp_path):
        path = tmp_path / "latin1.lua"
        path.write_bytes(b"s = '\xe9t\xe9'\n")
        result = runner.invoke(main, [str(path)])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "Error:" in result.output

    def test_cli_verbose_count(self, runner, lua_file):
        path = lua_file("a = b\n")
        result = runner.invoke(main, ["-v", str(path)])
        assert result.exit_code == ExitCode.SUCCESS
        assert "Tokenized: 3 tokens" in result.output
