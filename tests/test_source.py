# =============================================================================
# test_source.py - Source Cursor Unit Tests
# =============================================================================
# Tests for the character-level reader underneath the tokenizer.
#
# Test coverage includes:
#   - Line, column and UTF-8 byte offset tracking
#   - Peek, match and the single level of pushback
#   - Idempotent end of input
#   - Reading from non-seekable text streams
# =============================================================================

import io

import pytest
from lualex.source import EOF, Position, SourceCursor


class OneWayStream:
    """Text stream that can only be read forward, in small pieces."""

    def __init__(self, text: str):
        self._text = text

    def read(self, size: int = -1) -> str:
        chunk, self._text = self._text[:3], self._text[3:]
        return chunk


def drain(cursor: SourceCursor) -> str:
    chars = []
    while not cursor.at_end():
        chars.append(cursor.advance())
    return "".join(chars)


# =============================================================================
# Position Tracking Tests
# =============================================================================

class TestPositionTracking:
    """Test line/column/offset bookkeeping."""

    def test_initial_position(self):
        """A fresh cursor is at line 1, column 1, offset 0."""
        cursor = SourceCursor("abc")
        assert cursor.position() == Position(1, 1, 0)

    def test_column_advances(self):
        cursor = SourceCursor("abc")
        cursor.advance()
        cursor.advance()
        assert cursor.position() == Position(1, 3, 2)

    def test_newline_resets_column(self):
        """A newline moves to the next line and resets the column."""
        cursor = SourceCursor("ab\ncd")
        for _ in range(3):
            cursor.advance()
        assert cursor.position() == Position(2, 1, 3)

    def test_carriage_return_is_not_a_line_break(self):
        """Only '\\n' counts as a line break for positions."""
        cursor = SourceCursor("\r\n")
        cursor.advance()
        assert cursor.position() == Position(1, 2, 1)
        cursor.advance()
        assert cursor.position() == Position(2, 1, 2)

    def test_multibyte_offset(self):
        """Columns count characters, offsets count UTF-8 bytes."""
        cursor = SourceCursor("é€😀x")
        assert cursor.advance() == "é"
        assert cursor.position() == Position(1, 2, 2)
        assert cursor.advance() == "€"
        assert cursor.position() == Position(1, 3, 5)
        assert cursor.advance() == "😀"
        assert cursor.position() == Position(1, 4, 9)

    def test_position_str(self):
        assert str(Position(3, 7, 42)) == "3:7"

    def test_positions_are_ordered(self):
        assert Position(1, 5, 4) < Position(2, 1, 5)


# =============================================================================
# Lookahead and Pushback Tests
# =============================================================================

class TestLookahead:
    """Test peek, match and pushback."""

    def test_peek_does_not_consume(self):
        cursor = SourceCursor("ab")
        assert cursor.peek() == "a"
        assert cursor.peek() == "a"
        assert cursor.advance() == "a"
        assert cursor.peek() == "b"

    def test_match(self):
        cursor = SourceCursor("=>")
        assert cursor.match("=")
        assert not cursor.match("=")
        assert cursor.match(">")

    def test_pushback_restores_character_and_position(self):
        cursor = SourceCursor("ab\nc")
        cursor.advance()
        cursor.advance()
        cursor.advance()
        assert cursor.position() == Position(2, 1, 3)
        cursor.pushback()
        assert cursor.position() == Position(1, 3, 2)
        assert cursor.peek() == "\n"
        assert cursor.advance() == "\n"
        assert cursor.advance() == "c"

    def test_pushback_after_peek(self):
        """Peeking past a character does not prevent pushing it back."""
        cursor = SourceCursor("-x")
        assert cursor.advance() == "-"
        assert cursor.peek() == "x"
        cursor.pushback()
        assert cursor.advance() == "-"
        assert cursor.advance() == "x"
        assert cursor.at_end()

    def test_double_pushback_rejected(self):
        """Only one level of pushback is supported."""
        cursor = SourceCursor("ab")
        cursor.advance()
        cursor.advance()
        cursor.pushback()
        with pytest.raises(RuntimeError):
            cursor.pushback()

    def test_pushback_without_advance_rejected(self):
        with pytest.raises(RuntimeError):
            SourceCursor("a").pushback()

    def test_line_text_tracks_consumed_line(self):
        cursor = SourceCursor("first\nsecond")
        for _ in range(9):
            cursor.advance()
        assert cursor.line_text() == "sec"
        cursor.pushback()
        assert cursor.line_text() == "se"


# =============================================================================
# End of Input Tests
# =============================================================================

class TestEndOfInput:
    """Test the end-of-input sentinel."""

    def test_empty_source(self):
        cursor = SourceCursor("")
        assert cursor.at_end()
        assert cursor.peek() == EOF

    def test_eof_is_idempotent(self):
        """Advancing at the end keeps returning EOF without moving."""
        cursor = SourceCursor("a")
        cursor.advance()
        for _ in range(3):
            assert cursor.advance() == EOF
        assert cursor.position() == Position(1, 2, 1)

    def test_eof_is_not_a_character(self):
        assert EOF == ""
        assert len(EOF) != 1


# =============================================================================
# Stream Input Tests
# =============================================================================

class TestStreamInput:
    """Test reading from text streams."""

    def test_string_io(self):
        cursor = SourceCursor(io.StringIO("local x"), "x.lua")
        assert drain(cursor) == "local x"
        assert cursor.filename == "x.lua"

    def test_non_seekable_stream(self):
        """Streams are only read forward, chunk by chunk."""
        cursor = SourceCursor(OneWayStream("hello\nworld"))
        assert drain(cursor) == "hello\nworld"
        assert cursor.position() == Position(2, 6, 11)

    def test_file_stream(self, tmp_path):
        path = tmp_path / "unicode.lua"
        path.write_text("s = 'ünï'", encoding="utf-8")
        with open(path, encoding="utf-8") as f:
            cursor = SourceCursor(f, str(path))
            assert drain(cursor) == "s = 'ünï'"
