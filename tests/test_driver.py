# =============================================================================
# test_driver.py - Whole-Unit Tokenization and Options Tests
# =============================================================================
# Tests for tokenize(), lex_all() and LexerOptions.
# =============================================================================

import io
import logging

import pytest
from lualex.config import RESYNC_NEXT, RESYNC_TRIVIA, LexerOptions
from lualex.driver import LexResult, lex_all, tokenize
from lualex.errors import LexErrorKind, UnterminatedStringError
from lualex.source import Position
from lualex.tokens import TokenType


def kinds(result: LexResult) -> list:
    return [error.kind for error in result.errors]


# =============================================================================
# tokenize() Tests
# =============================================================================

class TestTokenize:
    """Test fail-fast tokenization."""

    def test_returns_all_tokens(self):
        tokens = tokenize("local x = 10")
        assert [t.type for t in tokens] == [
            TokenType.LOCAL, TokenType.NAME, TokenType.ASSIGN, TokenType.INTEGER,
            TokenType.EOS,
        ]

    def test_raises_first_error(self):
        with pytest.raises(UnterminatedStringError) as exc_info:
            tokenize("a = 'b\nc = @", "bad.lua")
        assert exc_info.value.filename == "bad.lua"


# =============================================================================
# lex_all() Tests
# =============================================================================

class TestLexAll:
    """Test error-collecting tokenization."""

    def test_clean_source(self):
        result = lex_all("return 1")
        assert result.ok
        assert result.token_count == 2
        assert not result.truncated

    def test_empty_source(self):
        result = lex_all("")
        assert [t.type for t in result.tokens] == [TokenType.EOS]
        assert result.token_count == 0

    def test_recovers_after_error(self):
        result = lex_all("x = @ 1")
        assert [t.type for t in result.tokens] == [
            TokenType.NAME, TokenType.ASSIGN, TokenType.INTEGER, TokenType.EOS,
        ]
        assert kinds(result) == [LexErrorKind.UNEXPECTED_CHARACTER]
        assert not result.ok

    def test_errors_in_source_order(self):
        source = "a = 'x\nb = 1e\nc = \"\\q\"\nd = [[open"
        result = lex_all(source)
        assert kinds(result) == [
            LexErrorKind.UNTERMINATED_STRING,
            LexErrorKind.INVALID_NUMBER_LITERAL,
            LexErrorKind.INVALID_ESCAPE_SEQUENCE,
            LexErrorKind.UNTERMINATED_LONG_BRACKET,
        ]
        lines = [error.position.line for error in result.errors]
        assert lines == [1, 2, 3, 4]
        assert result.tokens[-1].type == TokenType.EOS

    def test_filename_argument(self):
        result = lex_all("@", filename="f.lua")
        assert result.errors[0].filename == "f.lua"

    def test_filename_from_options(self):
        result = lex_all("@", options=LexerOptions(filename="opt.lua"))
        assert result.errors[0].filename == "opt.lua"

    def test_max_errors_truncates(self):
        result = lex_all("@ @ @ @ x", options=LexerOptions(max_errors=2))
        assert len(result.errors) == 2
        assert result.truncated
        assert result.tokens[-1].type == TokenType.EOS
        assert result.tokens[-1].position == Position(1, 6, 5)
        assert "too many errors, stopped after 2" in result.collector.report()

    def test_limit_reached_at_end_is_not_truncated(self):
        """Hitting the limit on the last lexeme finishes normally."""
        result = lex_all("x @  -- done\n", options=LexerOptions(max_errors=1))
        assert len(result.errors) == 1
        assert not result.truncated
        assert [t.type for t in result.tokens] == [TokenType.NAME, TokenType.EOS]
        assert result.tokens[-1].position == Position(2, 1, 13)
        assert "too many errors" not in result.collector.report()

    def test_very_long_integer_literal(self):
        result = lex_all("x = " + "9" * 5000)
        assert result.ok
        assert result.tokens[2].type is TokenType.FLOAT
        assert result.tokens[2].value == float("inf")

    def test_resync_next_rescans_rest(self):
        """By default, the text after a bad character is scanned again."""
        result = lex_all("$abc def", options=LexerOptions(resync=RESYNC_NEXT))
        assert [t.value for t in result.tokens[:-1]] == ["abc", "def"]

    def test_resync_trivia_skips_to_whitespace(self):
        result = lex_all("$abc def", options=LexerOptions(resync=RESYNC_TRIVIA))
        assert [t.value for t in result.tokens[:-1]] == ["def"]

    def test_stream_source(self):
        result = lex_all(io.StringIO("a..b"))
        assert result.ok
        assert result.tokens[1].type == TokenType.CONCAT

    def test_errors_are_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="lualex.driver"):
            lex_all("x = @", filename="log.lua")
        assert "log.lua:1:5: error: unexpected character" in caplog.text


# =============================================================================
# LexerOptions Tests
# =============================================================================

class TestLexerOptions:
    """Test option defaults, validation and environment loading."""

    def test_defaults(self):
        options = LexerOptions()
        assert options.filename == "<input>"
        assert options.max_errors == 20
        assert options.resync == RESYNC_NEXT

    def test_invalid_max_errors(self):
        with pytest.raises(ValueError):
            LexerOptions(max_errors=0)

    def test_invalid_resync(self):
        with pytest.raises(ValueError):
            LexerOptions(resync="line")

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("LUALEX_MAX_ERRORS", "5")
        monkeypatch.setenv("LUALEX_RESYNC", "trivia")
        options = LexerOptions.from_env()
        assert options.max_errors == 5
        assert options.resync == RESYNC_TRIVIA

    def test_from_env_unset(self, monkeypatch):
        monkeypatch.delenv("LUALEX_MAX_ERRORS", raising=False)
        monkeypatch.delenv("LUALEX_RESYNC", raising=False)
        assert LexerOptions.from_env() == LexerOptions()

    def test_from_env_ignores_invalid_values(self, monkeypatch):
        monkeypatch.setenv("LUALEX_MAX_ERRORS", "lots")
        monkeypatch.setenv("LUALEX_RESYNC", "sometimes")
        options = LexerOptions.from_env()
        assert options.max_errors == 20
        assert options.resync == RESYNC_NEXT

    def test_from_env_ignores_zero(self, monkeypatch):
        monkeypatch.setenv("LUALEX_MAX_ERRORS", "0")
        assert LexerOptions.from_env().max_errors == 20
