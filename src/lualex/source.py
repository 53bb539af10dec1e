"""
Source Cursor
=============

This module implements the character-level reader the tokenizer scans
from. It owns one source unit and hands out Unicode characters one at a
time while tracking where in the source each character came from.

Position Tracking
-----------------
Every character consumed moves the cursor position forward:

| Character | Line   | Column | Offset                    |
|-----------|--------|--------|---------------------------|
| "\\n"      | +1     | reset  | +1                        |
| other     | (same) | +1     | + UTF-8 length of the char|

Columns count characters, not bytes, so a multi-byte character is one
column wide. The offset is the byte offset into the UTF-8 encoding of
the source, which is what editors and other tools usually report.

Lookahead
---------
The cursor supports exactly one character of lookahead (peek) and one
character of pushback. This is all the Lua grammar needs: every
multi-character decision can be made by looking one character past the
part already matched.

Input Sources
-------------
A cursor can read from an in-memory string or from any text stream
with a ``read(size)`` method. Streams are read in chunks and never
seeked, so pipes and sockets wrapped in a text reader work too.

Example Usage
-------------
>>> cursor = SourceCursor("a\\nb")
>>> cursor.advance(), cursor.advance(), cursor.position()
('a', '\\n', Position(line=2, column=1, offset=2))
"""

from dataclasses import dataclass
from typing import Iterator, Optional, TextIO, Union


# End-of-input sentinel. The empty string can never be a character read
# from the source, so it doubles as a falsy "nothing left" marker.
EOF = ""

# Chunk size used when pulling text from a stream
READ_CHUNK_SIZE = 4096


# =============================================================================
# Position
# =============================================================================

@dataclass(frozen=True, order=True)
class Position:
    """
    A location in a source unit.

    Attributes:
        line: Line number (1-indexed)
        column: Column number in characters (1-indexed)
        offset: Byte offset into the UTF-8 encoded source (0-indexed)
    """
    line: int = 1
    column: int = 1
    offset: int = 0

    def __str__(self) -> str:
        """Format as 'line:column' for diagnostics."""
        return f"{self.line}:{self.column}"


START = Position(1, 1, 0)


def _utf8_length(char: str) -> int:
    """Number of bytes the character occupies in UTF-8."""
    code = ord(char)
    if code < 0x80:
        return 1
    if code < 0x800:
        return 2
    if code < 0x10000:
        return 3
    return 4


def _iter_stream(stream: TextIO) -> Iterator[str]:
    """Yield the characters of a text stream, reading it in chunks."""
    while True:
        chunk = stream.read(READ_CHUNK_SIZE)
        if not chunk:
            return
        yield from chunk


# =============================================================================
# Source Cursor
# =============================================================================

class SourceCursor:
    """
    Position-aware character reader over one source unit.

    Usage:
        cursor = SourceCursor(source_text, "main.lua")
        while not cursor.at_end():
            char = cursor.advance()

    Attributes:
        filename: Name of the source unit (for error reporting)
    """

    def __init__(self, source: Union[str, TextIO], filename: str = "<input>"):
        """
        Initialize the cursor.

        Args:
            source: The source text, or a text stream to read it from
            filename: Name of the source unit (for error messages)
        """
        self.filename = filename

        if isinstance(source, str):
            self._chars: Iterator[str] = iter(source)
        else:
            self._chars = _iter_stream(source)

        # Characters read from the input but not yet consumed, next one
        # last. Holds at most a peeked character and a pushed back one.
        self._pending: list[str] = []

        self._line = 1
        self._column = 1
        self._offset = 0

        # Last consumed character and the position it was read from,
        # kept so it can be pushed back once.
        self._last: Optional[tuple[str, Position, int]] = None

        # Consumed text of the current line, for error context
        self._line_chars: list[str] = []

    # =========================================================================
    # Character Access
    # =========================================================================

    def peek(self) -> str:
        """
        Look at the next character without consuming it.

        Returns:
            The next character, or EOF at the end of input
        """
        if not self._pending:
            self._pending.append(next(self._chars, EOF))
        return self._pending[-1]

    def advance(self) -> str:
        """
        Consume and return the next character.

        Updates line, column and offset tracking. At the end of input
        this returns EOF without moving, no matter how often it is
        called.
        """
        char = self.peek()
        if char == EOF:
            return EOF
        self._pending.pop()

        self._last = (char, self.position(), len(self._line_chars))

        self._offset += _utf8_length(char)
        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_chars = []
        else:
            self._column += 1
            self._line_chars.append(char)

        return char

    def pushback(self) -> None:
        """
        Un-consume the character returned by the last advance().

        Only one level of pushback is supported, and the pushed back
        character becomes the next one peek() and advance() see.

        Raises:
            RuntimeError: If there is no character to push back
        """
        if self._last is None:
            raise RuntimeError("pushback() needs a preceding advance()")

        char, position, line_length = self._last
        self._last = None
        self._pending.append(char)
        self._line = position.line
        self._column = position.column
        self._offset = position.offset

        if char == "\n":
            # The previous line is not kept, so context restarts empty
            self._line_chars = []
        else:
            del self._line_chars[line_length:]

    def match(self, expected: str) -> bool:
        """
        Consume the next character if it equals expected.

        Returns:
            True if matched and consumed, False otherwise
        """
        if self.peek() == expected:
            self.advance()
            return True
        return False

    def at_end(self) -> bool:
        """Check if the whole source has been consumed."""
        return self.peek() == EOF

    # =========================================================================
    # Position Information
    # =========================================================================

    def position(self) -> Position:
        """Position of the next character to be consumed."""
        return Position(self._line, self._column, self._offset)

    def line_text(self) -> str:
        """Consumed text of the current line, used as error context."""
        return "".join(self._line_chars)

    def __repr__(self) -> str:
        return f"SourceCursor({self.filename!r}, at {self.position()})"
