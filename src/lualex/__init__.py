"""
lualex - Lexical Analyzer for Lua Source
========================================

This package converts Lua source text into a stream of typed tokens
for a parser to consume.

Main Components
---------------
- **source**: SourceCursor, a position-tracking character reader with
  one character of lookahead and pushback
- **lexer**: Tokenizer, the scanner producing one token per scan() call
- **stream**: TokenStream, one-token lookahead for parsers
- **errors**: positioned lexical errors and an error collector
- **driver**: whole-unit helpers, tokenize() and lex_all()

Pipeline
--------
    parser -> TokenStream.next()/peek() -> Tokenizer.scan() -> SourceCursor

Quick Start
-----------
    >>> from lualex import TokenStream, TokenType
    >>> stream = TokenStream("return a..b")
    >>> [token.type.name for token in stream]
    ['RETURN', 'NAME', 'CONCAT', 'NAME', 'EOS']

Or use the command-line tool:
    $ lualex script.lua
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from lualex.config import LexerOptions
from lualex.driver import LexResult, lex_all, tokenize
from lualex.errors import (
    ErrorCollector,
    InvalidEscapeSequenceError,
    InvalidNumberLiteralError,
    LexError,
    LexErrorKind,
    LexFailedError,
    LuaLexError,
    UnexpectedCharacterError,
    UnexpectedTokenError,
    UnterminatedLongBracketError,
    UnterminatedStringError,
)
from lualex.lexer import Tokenizer
from lualex.source import EOF, Position, SourceCursor
from lualex.stream import TokenStream
from lualex.tokens import KEYWORDS, Token, TokenType

__all__ = [
    # Version info
    "__version__",
    # Scanning
    "SourceCursor",
    "Position",
    "EOF",
    "Tokenizer",
    "TokenStream",
    "Token",
    "TokenType",
    "KEYWORDS",
    # Whole-unit helpers
    "LexerOptions",
    "LexResult",
    "lex_all",
    "tokenize",
    # Exception hierarchy
    "LuaLexError",
    "LexError",
    "LexErrorKind",
    "UnterminatedStringError",
    "UnterminatedLongBracketError",
    "InvalidEscapeSequenceError",
    "InvalidNumberLiteralError",
    "UnexpectedCharacterError",
    "UnexpectedTokenError",
    "LexFailedError",
    "ErrorCollector",
]
