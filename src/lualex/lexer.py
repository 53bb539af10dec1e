"""
Lua Tokenizer
=============

This module implements the scanner that turns Lua source text into
tokens for a parser. Each call to Tokenizer.scan() skips whitespace and
comments, then reads exactly one token.

Token Categories
----------------
- Keywords and names: letters, digits and underscores, not starting
  with a digit
- Numbers: decimal and hexadecimal integers and floats
- Strings: "double" or 'single' quoted with escapes, or [[long]] strings
- Operators and punctuation, matched longest first

Number Formats
--------------
| Format        | Example      | Token          |
|---------------|--------------|----------------|
| Decimal       | 123          | INTEGER 123    |
| Decimal float | 1.5, .5, 3.  | FLOAT          |
| Exponent      | 1e10, 2E-3   | FLOAT          |
| Hexadecimal   | 0x1F         | INTEGER 31     |
| Hex float     | 0x1.8p3, 0xAp-1 | FLOAT       |

An integer that does not fit a signed 64-bit value becomes a FLOAT.

Comments
--------
- Line comment: -- comment
- Long comment: --[[ comment ]] or --[==[ comment ]==]

Escape Sequences
----------------
\\a \\b \\f \\n \\r \\t \\v \\\\ \\" \\', \\xHH (two hex digits),
\\ddd (up to three decimal digits, at most 255), \\z (skip following
whitespace), \\u{XXX} (code point), and a backslash before a line break,
which puts a newline into the string.

Long Brackets
-------------
A long bracket opens with '[', any number of '=', and '['. It is closed
only by ']', the same number of '=', and ']'. [==[ a ]] b ]==] is the
string " a ]] b ". A line break right after the opener is dropped.

Example Usage
-------------
>>> from lualex.lexer import Tokenizer
>>> tokenizer = Tokenizer("local x = 10", "main.lua")
>>> for token in tokenizer.tokens():
...     print(token)
Token(LOCAL, 1:1)
Token(NAME, 'x', 1:7)
Token(ASSIGN, 1:9)
Token(INTEGER, 10, 1:11)
Token(EOS, 1:13)
"""

import logging
import math
import string
from typing import Iterator, Optional, TextIO, Union

from lualex.errors import (
    InvalidEscapeSequenceError,
    InvalidNumberLiteralError,
    LexError,
    UnexpectedCharacterError,
    UnterminatedLongBracketError,
    UnterminatedStringError,
)
from lualex.source import EOF, Position, SourceCursor
from lualex.tokens import KEYWORDS, Token, TokenType

logger = logging.getLogger(__name__)


# =============================================================================
# Character Classes
# =============================================================================
# Frozensets rather than strings: the EOF sentinel is the empty string,
# which is "in" every string but in no set.

WHITESPACE = frozenset(" \t\r\n\v\f")
NEWLINES = frozenset("\r\n")
DIGITS = frozenset(string.digits)
HEX_DIGITS = frozenset(string.hexdigits)
IDENT_START = frozenset(string.ascii_letters + "_")
IDENT_CHARS = frozenset(string.ascii_letters + string.digits + "_")

# Characters that may not directly follow a numeral
NUMERAL_TAIL = IDENT_CHARS | {"."}

INT64_MAX = 2**63 - 1

# Decimal digits in INT64_MAX; any longer run is out of range
INT64_DIGITS = len(str(INT64_MAX))

# Largest value accepted in a \u{XXX} escape
UTF8_ESCAPE_MAX = 0x7FFFFFFF


# =============================================================================
# Tokenizer
# =============================================================================

class Tokenizer:
    """
    Tokenizes Lua source code.

    The tokenizer owns its SourceCursor for its whole lifetime. Every
    scan() call returns one token or raises one LexError. Errors are
    raised after the offending text has been consumed, so calling
    scan() again continues with the rest of the source.

    Once the end of the source is reached, every further scan() returns
    the same EOS token.

    Usage:
        tokenizer = Tokenizer(source_text, filename)
        token = tokenizer.scan()

    Attributes:
        filename: Name of the source unit (for error reporting)
    """

    # Escapes that stand for a single fixed character
    SIMPLE_ESCAPES = {
        "a": "\a",      # Bell
        "b": "\b",      # Backspace
        "f": "\f",      # Form feed
        "n": "\n",      # Newline
        "r": "\r",      # Carriage return
        "t": "\t",      # Tab
        "v": "\v",      # Vertical tab
        "\\": "\\",     # Backslash
        '"': '"',       # Double quote
        "'": "'",       # Single quote
    }

    # Operators and delimiters that never start a longer token
    SINGLE_TOKENS = {
        "+": TokenType.ADD,
        "-": TokenType.SUB,
        "*": TokenType.MUL,
        "%": TokenType.MOD,
        "^": TokenType.POW,
        "#": TokenType.LEN,
        "&": TokenType.BIT_AND,
        "|": TokenType.BIT_OR,
        "(": TokenType.PAR_L,
        ")": TokenType.PAR_R,
        "{": TokenType.CURLY_L,
        "}": TokenType.CURLY_R,
        "]": TokenType.SQUR_R,
        ";": TokenType.SEMI_COLON,
        ",": TokenType.COMMA,
    }

    def __init__(
        self,
        source: Union[str, TextIO, SourceCursor],
        filename: str = "<input>",
    ):
        """
        Initialize the tokenizer.

        Args:
            source: Source text, a text stream, or a SourceCursor to take over
            filename: Name of the source unit (ignored for a SourceCursor)
        """
        if isinstance(source, SourceCursor):
            self._cursor = source
        else:
            self._cursor = SourceCursor(source, filename)
        self.filename = self._cursor.filename

        # Set once the end of input is reached; returned from then on
        self._eos: Optional[Token] = None

    @property
    def cursor(self) -> SourceCursor:
        return self._cursor

    @property
    def done(self) -> bool:
        """True once EOS has been produced."""
        return self._eos is not None

    def scan(self) -> Token:
        """
        Scan the next token.

        Returns:
            The next Token; EOS at and after the end of input

        Raises:
            LexError: If the next lexeme is malformed
        """
        if self._eos is not None:
            return self._eos

        try:
            return self._scan_token()
        except LexError as e:
            logger.debug(f"{self.filename}:{e.position}: {e.kind.name} near {e.text!r}")
            raise

    def tokens(self) -> Iterator[Token]:
        """
        Generate tokens up to and including EOS.

        Raises:
            LexError: On the first malformed lexeme
        """
        while True:
            token = self.scan()
            yield token
            if token.type is TokenType.EOS:
                return

    def resynchronize(self) -> int:
        """
        Skip ahead to the next whitespace or the end of input.

        For callers that recover from an error by dropping the rest of
        the broken lexeme rather than rescanning it character by
        character.

        Returns:
            Number of characters skipped
        """
        cursor = self._cursor
        skipped = 0
        while (char := cursor.peek()) != EOF and char not in WHITESPACE:
            cursor.advance()
            skipped += 1
        if skipped:
            logger.debug(f"{self.filename}:{cursor.position()}: skipped {skipped} characters")
        return skipped

    # =========================================================================
    # Token Dispatch
    # =========================================================================

    def _scan_token(self) -> Token:
        cursor = self._cursor
        self._skip_trivia()

        start = cursor.position()
        char = cursor.peek()

        if char == EOF:
            self._eos = Token(TokenType.EOS, None, start)
            logger.debug(f"{self.filename}:{start}: end of input")
            return self._eos

        if char in IDENT_START:
            return self._scan_name(start)

        if char in DIGITS:
            return self._scan_number(start)

        if char == ".":
            # ".5" is a number, "." and ".." are operators
            cursor.advance()
            next_char = cursor.peek()
            cursor.pushback()
            if next_char in DIGITS:
                return self._scan_number(start)
            return self._scan_operator(start)

        if char == '"' or char == "'":
            return self._scan_quoted_string(start)

        if char == "[":
            cursor.advance()
            if cursor.peek() in ("[", "="):
                return self._scan_long_string(start)
            return Token(TokenType.SQUR_L, None, start)

        return self._scan_operator(start)

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_trivia(self) -> None:
        """Skip all whitespace and comments."""
        cursor = self._cursor
        while True:
            char = cursor.peek()

            if char in WHITESPACE:
                cursor.advance()
                continue

            if char == "-":
                start = cursor.position()
                cursor.advance()
                if cursor.peek() != "-":
                    # A lone minus is the SUB operator
                    cursor.pushback()
                    return
                cursor.advance()
                self._skip_comment(start)
                continue

            return

    def _skip_comment(self, start: Position) -> None:
        """
        Skip a comment whose '--' has been consumed.

        Raises:
            UnterminatedLongBracketError: If a long comment is not closed
        """
        cursor = self._cursor

        if cursor.match("["):
            level, opened = self._read_long_bracket_opener()
            if opened:
                self._read_long_bracket_body(level, start, "--[" + "=" * level + "[")
                return

        # Line comment, including "--[" openers that turned out not to be
        # long brackets
        while (char := cursor.peek()) != EOF and char not in NEWLINES:
            cursor.advance()

    # =========================================================================
    # Names and Keywords
    # =========================================================================

    def _scan_name(self, start: Position) -> Token:
        """
        Scan a name or keyword.

        Keywords are distinguished by exact, case-sensitive lookup in
        the keyword table.
        """
        cursor = self._cursor
        chars = []
        while cursor.peek() in IDENT_CHARS:
            chars.append(cursor.advance())

        name = "".join(chars)

        keyword = KEYWORDS.get(name)
        if keyword is not None:
            return Token(keyword, None, start)

        return Token(TokenType.NAME, name, start)

    # =========================================================================
    # Numbers
    # =========================================================================

    def _scan_number(self, start: Position) -> Token:
        """
        Scan a numeric literal.

        Handles:
        - Decimal: 3, 3.0, 3.1416, 314.16e-2, 0.31416E1, .5
        - Hexadecimal: 0xff, 0x0.1E, 0xA23p-4, 0X1.921FB54442D18P+1
        """
        cursor = self._cursor
        chars = []

        if cursor.peek() == "0":
            chars.append(cursor.advance())
            if cursor.peek() in ("x", "X"):
                chars.append(cursor.advance())
                return self._scan_hex_number(start, chars)

        is_float = False
        self._read_digits(chars, DIGITS)

        if cursor.peek() == ".":
            chars.append(cursor.advance())
            is_float = True
            self._read_digits(chars, DIGITS)

        if cursor.peek() in ("e", "E"):
            chars.append(cursor.advance())
            is_float = True
            self._read_exponent(chars, start)

        self._check_numeral_end(chars, start)

        text = "".join(chars)
        if is_float or len(text.lstrip("0")) > INT64_DIGITS:
            # float() has no digit limit and saturates to inf
            return Token(TokenType.FLOAT, float(text), start)
        return self._make_integer(int(text), start)

    def _scan_hex_number(self, start: Position, chars: list[str]) -> Token:
        """Scan the rest of a hexadecimal numeral after its 0x prefix."""
        cursor = self._cursor
        is_float = False

        digit_count = self._read_digits(chars, HEX_DIGITS)

        if cursor.peek() == ".":
            chars.append(cursor.advance())
            is_float = True
            digit_count += self._read_digits(chars, HEX_DIGITS)

        if digit_count == 0:
            self._raise_malformed_number(chars, start)

        if cursor.peek() in ("p", "P"):
            chars.append(cursor.advance())
            is_float = True
            self._read_exponent(chars, start)

        self._check_numeral_end(chars, start)

        text = "".join(chars)
        if is_float:
            try:
                value = float.fromhex(text)
            except OverflowError:
                value = math.inf
            return Token(TokenType.FLOAT, value, start)
        return self._make_integer(int(text, 16), start)

    def _read_digits(self, chars: list[str], digits: frozenset) -> int:
        """Append a run of digits from the given class, returning its length."""
        cursor = self._cursor
        count = 0
        while cursor.peek() in digits:
            chars.append(cursor.advance())
            count += 1
        return count

    def _read_exponent(self, chars: list[str], start: Position) -> None:
        """Read an optionally signed decimal exponent after e/E/p/P."""
        cursor = self._cursor
        if cursor.peek() in ("+", "-"):
            chars.append(cursor.advance())
        if self._read_digits(chars, DIGITS) == 0:
            self._raise_malformed_number(chars, start)

    def _check_numeral_end(self, chars: list[str], start: Position) -> None:
        """A numeral must not run straight into a name or another dot."""
        if self._cursor.peek() in NUMERAL_TAIL:
            self._raise_malformed_number(chars, start)

    def _raise_malformed_number(self, chars: list[str], start: Position) -> None:
        """Consume the rest of a malformed numeral and raise."""
        cursor = self._cursor
        while cursor.peek() in NUMERAL_TAIL:
            chars.append(cursor.advance())
        raise InvalidNumberLiteralError(
            "".join(chars),
            start,
            filename=self.filename,
            source_line=self._context(start),
        )

    def _make_integer(self, value: int, start: Position) -> Token:
        """Integers outside the signed 64-bit range become floats."""
        if value <= INT64_MAX:
            return Token(TokenType.INTEGER, value, start)
        try:
            return Token(TokenType.FLOAT, float(value), start)
        except OverflowError:
            return Token(TokenType.FLOAT, math.inf, start)

    # =========================================================================
    # Quoted Strings
    # =========================================================================

    def _scan_quoted_string(self, start: Position) -> Token:
        """
        Scan a single- or double-quoted string literal.

        Raises:
            UnterminatedStringError: If a line break or the end of input
                comes before the closing quote
            InvalidEscapeSequenceError: On an unknown or malformed escape
        """
        cursor = self._cursor
        quote = cursor.advance()

        chars = []
        while True:
            char = cursor.peek()

            if char == quote:
                cursor.advance()
                return Token(TokenType.STRING, "".join(chars), start)

            if char == EOF or char in NEWLINES:
                # The line break is left for the next scan
                raise UnterminatedStringError(
                    quote + "".join(chars),
                    start,
                    filename=self.filename,
                    source_line=self._context(start),
                )

            if char == "\\":
                escape_start = cursor.position()
                cursor.advance()
                try:
                    chars.append(self._scan_escape(escape_start))
                except InvalidEscapeSequenceError:
                    self._skip_string_rest(quote)
                    raise
            else:
                chars.append(cursor.advance())

    def _scan_escape(self, escape_start: Position) -> str:
        """
        Scan an escape sequence after its backslash.

        Returns:
            The text the escape stands for (empty for \\z and at the end
            of input, where the caller reports the unterminated string)
        """
        cursor = self._cursor
        char = cursor.peek()

        if char == EOF:
            return ""

        # Backslash-newline continues the string on the next line
        if char in NEWLINES:
            self._skip_newline()
            return "\n"

        if char in self.SIMPLE_ESCAPES:
            cursor.advance()
            return self.SIMPLE_ESCAPES[char]

        # Hex escape: \xHH, exactly two digits
        if char == "x":
            cursor.advance()
            digits = []
            for _ in range(2):
                if cursor.peek() not in HEX_DIGITS:
                    self._raise_bad_escape("\\x" + "".join(digits), escape_start,
                                           "hexadecimal digit expected")
                digits.append(cursor.advance())
            return chr(int("".join(digits), 16))

        # \z skips the following whitespace, line breaks included
        if char == "z":
            cursor.advance()
            while (char := cursor.peek()) in WHITESPACE:
                if char in NEWLINES:
                    self._skip_newline()
                else:
                    cursor.advance()
            return ""

        if char == "u":
            cursor.advance()
            return self._scan_utf8_escape(escape_start)

        # Decimal escape: \ddd, up to three digits
        if char in DIGITS:
            digits = []
            while len(digits) < 3 and cursor.peek() in DIGITS:
                digits.append(cursor.advance())
            value = int("".join(digits))
            if value > 255:
                self._raise_bad_escape("\\" + "".join(digits), escape_start,
                                       "decimal escape too large")
            return chr(value)

        # Unknown escape; consume it so scanning can resume after it
        cursor.advance()
        self._raise_bad_escape("\\" + char, escape_start)

    def _scan_utf8_escape(self, escape_start: Position) -> str:
        """Scan the {XXX} part of a \\u{XXX} escape."""
        cursor = self._cursor
        text = "\\u"

        if not cursor.match("{"):
            self._raise_bad_escape(text, escape_start, "missing '{' in \\u{xxxx}")
        text += "{"

        value = 0
        digit_count = 0
        while cursor.peek() in HEX_DIGITS:
            digit = cursor.advance()
            text += digit
            value = value * 16 + int(digit, 16)
            digit_count += 1
            if value > UTF8_ESCAPE_MAX:
                self._raise_bad_escape(text, escape_start, "UTF-8 value too large")

        if digit_count == 0:
            self._raise_bad_escape(text, escape_start, "hexadecimal digit expected")
        if not cursor.match("}"):
            self._raise_bad_escape(text, escape_start, "missing '}' in \\u{xxxx}")
        text += "}"

        if value > 0x10FFFF:
            self._raise_bad_escape(text, escape_start, "code point outside Unicode range")
        return chr(value)

    def _raise_bad_escape(
        self,
        text: str,
        escape_start: Position,
        reason: Optional[str] = None,
    ) -> None:
        message = f"invalid escape sequence {text!r}"
        if reason:
            message = f"{message}: {reason}"
        raise InvalidEscapeSequenceError(
            text,
            escape_start,
            filename=self.filename,
            message=message,
            source_line=self._context(escape_start),
        )

    def _skip_string_rest(self, quote: str) -> None:
        """
        Skip to the end of a quoted string after a bad escape.

        Stops after the closing quote, or before a line break or the
        end of input.
        """
        cursor = self._cursor
        while (char := cursor.peek()) != EOF and char not in NEWLINES:
            cursor.advance()
            if char == quote:
                return
            if char == "\\" and cursor.peek() != EOF:
                cursor.advance()

    # =========================================================================
    # Long Brackets
    # =========================================================================

    def _scan_long_string(self, start: Position) -> Token:
        """
        Scan a long string whose opening '[' has been consumed.

        Raises:
            UnterminatedLongBracketError: On a bad opener or missing close
        """
        level, opened = self._read_long_bracket_opener()
        opener = "[" + "=" * level
        if not opened:
            raise UnterminatedLongBracketError(
                opener,
                start,
                level,
                filename=self.filename,
                message="invalid long bracket delimiter",
                source_line=self._context(start),
            )
        value = self._read_long_bracket_body(level, start, opener + "[")
        return Token(TokenType.STRING, value, start)

    def _read_long_bracket_opener(self) -> tuple[int, bool]:
        """
        Read the '='* '[' part of a long bracket opener.

        Returns:
            (level, opened): the number of '=' read, and whether the
            second '[' followed them
        """
        cursor = self._cursor
        level = 0
        while cursor.match("="):
            level += 1
        return level, cursor.match("[")

    def _read_long_bracket_body(self, level: int, start: Position, opener: str) -> str:
        """
        Read long bracket content up to the close of the same level.

        A line break directly after the opener is not part of the
        content. A close with a different number of '=' is content.

        Returns:
            The content, verbatim
        """
        cursor = self._cursor

        if cursor.peek() in NEWLINES:
            self._skip_newline()

        chars = []
        while True:
            char = cursor.advance()

            if char == EOF:
                raise UnterminatedLongBracketError(
                    opener,
                    start,
                    level,
                    filename=self.filename,
                    source_line=self._context(start),
                )

            if char == "]":
                count = 0
                while cursor.match("="):
                    count += 1
                if count == level and cursor.match("]"):
                    return "".join(chars)
                # Not our close; a following ']' may start the real one
                chars.append("]" + "=" * count)
                continue

            chars.append(char)

    # =========================================================================
    # Operators
    # =========================================================================

    def _scan_operator(self, start: Position) -> Token:
        """
        Scan an operator or delimiter.

        Longer operators win: '...' over '..' over '.', '//' over '/',
        and so on. One character of lookahead decides every case.
        """
        cursor = self._cursor
        char = cursor.advance()

        if char in self.SINGLE_TOKENS:
            return Token(self.SINGLE_TOKENS[char], None, start)

        if char == "/":
            token_type = TokenType.IDIV if cursor.match("/") else TokenType.DIV
            return Token(token_type, None, start)

        if char == "=":
            token_type = TokenType.EQUAL if cursor.match("=") else TokenType.ASSIGN
            return Token(token_type, None, start)

        if char == "~":
            token_type = TokenType.NOT_EQ if cursor.match("=") else TokenType.BIT_XOR
            return Token(token_type, None, start)

        if char == ":":
            token_type = TokenType.DOUB_COLON if cursor.match(":") else TokenType.COLON
            return Token(token_type, None, start)

        if char == "<":
            if cursor.match("<"):
                return Token(TokenType.SHIFT_L, None, start)
            if cursor.match("="):
                return Token(TokenType.LES_EQ, None, start)
            return Token(TokenType.LESS, None, start)

        if char == ">":
            if cursor.match(">"):
                return Token(TokenType.SHIFT_R, None, start)
            if cursor.match("="):
                return Token(TokenType.GRE_EQ, None, start)
            return Token(TokenType.GREATER, None, start)

        if char == ".":
            if cursor.match("."):
                if cursor.match("."):
                    return Token(TokenType.DOTS, None, start)
                return Token(TokenType.CONCAT, None, start)
            return Token(TokenType.DOT, None, start)

        # Unknown character, already consumed
        raise UnexpectedCharacterError(
            char,
            start,
            filename=self.filename,
            source_line=self._context(start),
        )

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _skip_newline(self) -> None:
        """Skip one line break: \\n, \\r, \\r\\n or \\n\\r."""
        cursor = self._cursor
        first = cursor.advance()
        next_char = cursor.peek()
        if next_char in NEWLINES and next_char != first:
            cursor.advance()

    def _context(self, start: Position) -> Optional[str]:
        """Source line for an error at start, if still on that line."""
        if self._cursor.position().line != start.line:
            return None
        return self._cursor.line_text()

    def __repr__(self) -> str:
        return f"Tokenizer({self.filename!r}, at {self._cursor.position()})"
