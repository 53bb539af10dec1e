"""
Lua Lexer Error Hierarchy
=========================

This module defines the exceptions raised while tokenizing Lua source.
All exceptions inherit from LuaLexError, allowing callers to catch every
lexer-related error with a single except clause if desired.

Exception Hierarchy
-------------------
LuaLexError (base)
├── LexError - positioned lexical error, tagged with a LexErrorKind
│   ├── UnterminatedStringError - quoted string runs past end of line/input
│   ├── UnterminatedLongBracketError - long string/comment never closed
│   ├── InvalidEscapeSequenceError - unknown backslash escape
│   ├── InvalidNumberLiteralError - malformed numeral
│   └── UnexpectedCharacterError - character that starts no token
├── UnexpectedTokenError - token stream consumer got the wrong token
└── LexFailedError - aggregate report from an ErrorCollector

Recovery
--------
None of these errors leave the tokenizer in a broken state. The
tokenizer has always consumed the offending text when it raises, so the
caller may keep scanning to collect further diagnostics, or stop.

Error Message Format
--------------------
    filename:line:column: error: description
        source_line_text
            ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from enum import Enum
from typing import List, Optional

from lualex.source import Position


# =============================================================================
# Base Exception
# =============================================================================

class LuaLexError(Exception):
    """
    Base exception for all lualex errors.

    Attributes:
        message: The error description
        filename: Name of the source unit (optional)
        position: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The source text of the error line (optional)
    """

    def __init__(
        self,
        message: str,
        filename: Optional[str] = None,
        position: Optional[Position] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.filename = filename
        self.position = position
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def location(self) -> str:
        """Format as 'filename:line:column' (parts that are known)."""
        parts = [self.filename or "<input>"]
        if self.position is not None:
            parts.append(str(self.position))
        return ":".join(parts)

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            main.lua:3:11: error: unterminated string
                local s = "abc
                          ^
            hint: close the string with '"' before the end of the line
        """
        parts = []

        # Location prefix
        if self.position is not None:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.position is not None:
            parts.append(f"    {self.source_line}")
            padding = " " * (4 + self.position.column - 1)
            parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Lexical Errors
# =============================================================================

class LexErrorKind(Enum):
    """Classification of lexical errors."""
    UNTERMINATED_STRING = "unterminated string"
    UNTERMINATED_LONG_BRACKET = "unterminated long bracket"
    INVALID_ESCAPE_SEQUENCE = "invalid escape sequence"
    INVALID_NUMBER_LITERAL = "malformed number"
    UNEXPECTED_CHARACTER = "unexpected character"


class LexError(LuaLexError):
    """
    A positioned lexical error.

    Subclasses fix the kind; constructing LexError directly is allowed
    for callers that only know the kind at run time.

    Attributes:
        kind: The LexErrorKind classification
        text: The offending source text or character
    """

    kind: LexErrorKind

    def __init__(
        self,
        kind: LexErrorKind,
        text: str,
        position: Position,
        filename: Optional[str] = None,
        message: Optional[str] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.kind = kind
        self.text = text
        if message is None:
            message = f"{kind.value} near {text!r}"
        super().__init__(
            message,
            filename=filename,
            position=position,
            hint=hint,
            source_line=source_line,
        )


class UnterminatedStringError(LexError):
    """
    Quoted string not closed before the end of the line or input.

    Example:
        local s = "hello    -- missing closing quote
    """

    def __init__(
        self,
        text: str,
        position: Position,
        filename: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        quote = text[:1] or '"'
        super().__init__(
            LexErrorKind.UNTERMINATED_STRING,
            text,
            position,
            filename=filename,
            message="unterminated string",
            hint=f"close the string with {quote!r} before the end of the line",
            source_line=source_line,
        )


class UnterminatedLongBracketError(LexError):
    """
    Long string or long comment without a matching close.

    The close must use the same number of '=' signs as the opener:
    [==[ ... ]==] is closed by ]==] only.
    """

    def __init__(
        self,
        text: str,
        position: Position,
        level: int,
        filename: Optional[str] = None,
        message: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.level = level
        closer = "]" + "=" * level + "]"
        super().__init__(
            LexErrorKind.UNTERMINATED_LONG_BRACKET,
            text,
            position,
            filename=filename,
            message=message or "unterminated long bracket",
            hint=f"close it with '{closer}'",
            source_line=source_line,
        )


class InvalidEscapeSequenceError(LexError):
    """Unknown or malformed backslash escape inside a quoted string."""

    def __init__(
        self,
        text: str,
        position: Position,
        filename: Optional[str] = None,
        message: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            LexErrorKind.INVALID_ESCAPE_SEQUENCE,
            text,
            position,
            filename=filename,
            message=message or f"invalid escape sequence {text!r}",
            source_line=source_line,
        )


class InvalidNumberLiteralError(LexError):
    """
    Malformed numeral.

    Examples:
        1e      -- exponent without digits
        0x      -- hex prefix without digits
        3abc    -- numeral runs into a name
    """

    def __init__(
        self,
        text: str,
        position: Position,
        filename: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            LexErrorKind.INVALID_NUMBER_LITERAL,
            text,
            position,
            filename=filename,
            message=f"malformed number near {text!r}",
            source_line=source_line,
        )


class UnexpectedCharacterError(LexError):
    """Character that cannot start any token."""

    def __init__(
        self,
        char: str,
        position: Position,
        filename: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            LexErrorKind.UNEXPECTED_CHARACTER,
            char,
            position,
            filename=filename,
            message=f"unexpected character {char!r} (U+{ord(char):04X})",
            source_line=source_line,
        )


# =============================================================================
# Consumer-Side Errors
# =============================================================================

class UnexpectedTokenError(LuaLexError):
    """
    Token stream consumer found a different token than it required.

    Raised by TokenStream.expect(); positioned at the token found.
    """

    def __init__(
        self,
        found: str,
        expected: str,
        position: Optional[Position] = None,
        filename: Optional[str] = None,
    ):
        self.found = found
        self.expected = expected
        super().__init__(
            f"unexpected token {found!r}",
            filename=filename,
            position=position,
            hint=f"expected {expected!r}",
        )


class LexFailedError(LuaLexError):
    """
    Aggregate error holding a formatted report of several errors.

    The message is already a complete report and is passed through
    without another prefix.
    """

    def _format_message(self) -> str:
        return self.message


# =============================================================================
# Error Collection (for multi-error reporting)
# =============================================================================

class ErrorCollector:
    """
    Collects lexical errors for batch reporting.

    Callers that resynchronize after an error use this to gather several
    diagnostics in one pass instead of stopping at the first.

    Example:
        collector = ErrorCollector(max_errors=20)

        while not collector.should_stop():
            try:
                token = tokenizer.scan()
            except LexError as e:
                collector.add(e)
                continue
            ...

        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: int = 20):
        """
        Initialize the error collector.

        Args:
            max_errors: Number of errors after which should_stop() is True
        """
        self.errors: List[LexError] = []
        self.max_errors = max_errors

        # Set by the caller when it stops with input left unscanned
        self.truncated = False

    def add(self, error: LexError) -> None:
        """Add an error to the collection."""
        self.errors.append(error)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def should_stop(self) -> bool:
        """Return True if max_errors has been reached."""
        return len(self.errors) >= self.max_errors

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def report(self) -> str:
        """Format all errors for display."""
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")  # Blank line between errors

        if self.truncated:
            lines.append(f"too many errors, stopped after {self.max_errors}")

        error_word = "error" if len(self.errors) == 1 else "errors"
        lines.append(f"{len(self.errors)} {error_word}")

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors."""
        self.errors.clear()
        self.truncated = False

    def raise_if_errors(self) -> None:
        """Raise a LexFailedError if any errors were collected."""
        if self.has_errors():
            raise LexFailedError(self.report())
