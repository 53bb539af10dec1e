"""
Token Stream
============

The parser-facing side of the lexer: a pull-based stream over a
Tokenizer with one token of lookahead.

    stream = TokenStream("local x = 10", "main.lua")
    stream.peek()   # Token(LOCAL, 1:1), not consumed
    stream.next()   # Token(LOCAL, 1:1)
    stream.next()   # Token(NAME, 'x', 1:7)

Lexical errors come out of next() and peek() as LexError exceptions.
An error seen by peek() is held in the lookahead slot just like a token:
peek() keeps raising it until next() consumes it, after which scanning
continues with the rest of the source.

After the end of input, next() returns the EOS token forever, so a
parser can poll in a simple loop without special-casing exhaustion.
"""

import logging
from typing import Iterator, Optional, TextIO, Union

from lualex.errors import LexError, UnexpectedTokenError
from lualex.lexer import Tokenizer
from lualex.source import START, Position, SourceCursor
from lualex.tokens import SYMBOLS, Token, TokenType

logger = logging.getLogger(__name__)


class TokenStream:
    """
    One-token lookahead over a Tokenizer.

    Attributes:
        tokenizer: The underlying Tokenizer
    """

    def __init__(
        self,
        source: Union[Tokenizer, str, TextIO, SourceCursor],
        filename: str = "<input>",
    ):
        """
        Initialize the stream.

        Args:
            source: A Tokenizer to wrap, or anything a Tokenizer accepts
            filename: Name of the source unit (when a Tokenizer is built)
        """
        if isinstance(source, Tokenizer):
            self.tokenizer = source
        else:
            self.tokenizer = Tokenizer(source, filename)

        # Lookahead slot: the next token, or the error scanning it raised
        self._lookahead: Optional[Union[Token, LexError]] = None
        self._position: Position = START

    @property
    def filename(self) -> str:
        return self.tokenizer.filename

    # =========================================================================
    # Core Interface
    # =========================================================================

    def peek(self) -> Token:
        """
        Return the next token without consuming it.

        Raises:
            LexError: If the next lexeme is malformed (again on every
                peek until next() consumes the error)
        """
        if self._lookahead is None:
            try:
                self._lookahead = self.tokenizer.scan()
            except LexError as e:
                self._lookahead = e

        if isinstance(self._lookahead, LexError):
            raise self._lookahead
        return self._lookahead

    def next(self) -> Token:
        """
        Consume and return the next token.

        Raises:
            LexError: If the next lexeme is malformed
        """
        pending = self._lookahead
        self._lookahead = None

        if pending is None:
            token = self.tokenizer.scan()
        elif isinstance(pending, LexError):
            raise pending
        else:
            token = pending

        self._position = token.position
        return token

    def position(self) -> Position:
        """Position of the most recently returned token."""
        return self._position

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including the first EOS."""
        while True:
            token = self.next()
            yield token
            if token.type is TokenType.EOS:
                return

    # =========================================================================
    # Parser Helpers
    # =========================================================================

    def check(self, *token_types: TokenType) -> bool:
        """Return True if the next token has one of the given types."""
        return self.peek().type in token_types

    def accept(self, *token_types: TokenType) -> Optional[Token]:
        """Consume the next token if it has one of the given types."""
        if self.check(*token_types):
            return self.next()
        return None

    def expect(self, token_type: TokenType) -> Token:
        """
        Consume a token of the given type.

        Raises:
            UnexpectedTokenError: If the next token has another type
            LexError: If the next lexeme is malformed
        """
        token = self.peek()
        if token.type is not token_type:
            expected = SYMBOLS.get(token_type, token_type.name.lower())
            logger.debug(f"{self.filename}:{token.position}: expected {expected}, got {token.lexeme}")
            raise UnexpectedTokenError(
                token.lexeme,
                expected,
                position=token.position,
                filename=self.filename,
            )
        return self.next()

    def __repr__(self) -> str:
        return f"TokenStream({self.filename!r}, at {self._position})"
