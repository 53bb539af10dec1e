"""
Whole-Unit Tokenization
=======================

Convenience entry points for tokenizing a complete source unit at once,
for tools that want a token list rather than a stream.

- tokenize(): stop at the first error (raises it)
- lex_all(): keep going after errors, collecting diagnostics

Usage
-----
>>> from lualex.driver import lex_all
>>> result = lex_all("x = @ 1")
>>> [t.type.name for t in result.tokens]
['NAME', 'ASSIGN', 'INTEGER', 'EOS']
>>> result.errors[0].kind.name
'UNEXPECTED_CHARACTER'
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, TextIO, Union

from lualex.config import RESYNC_TRIVIA, LexerOptions
from lualex.errors import ErrorCollector, LexError
from lualex.lexer import Tokenizer
from lualex.tokens import Token, TokenType

logger = logging.getLogger(__name__)


@dataclass
class LexResult:
    """
    Result of tokenizing a whole source unit.

    Attributes:
        tokens: Tokens produced, always ending with EOS
        collector: The errors encountered, in source order
        truncated: True if the error limit stopped scanning with input left
    """
    tokens: List[Token] = field(default_factory=list)
    collector: ErrorCollector = field(default_factory=ErrorCollector)
    truncated: bool = False

    @property
    def errors(self) -> List[LexError]:
        return self.collector.errors

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def token_count(self) -> int:
        """Number of tokens, not counting the final EOS."""
        return len(self.tokens) - 1


def _at_end(tokenizer: Tokenizer) -> bool:
    """
    Check whether only trivia is left.

    Scans one token ahead; the token is dropped, which is fine since the
    caller stops either way. At the end this leaves the sticky EOS.
    """
    try:
        return tokenizer.scan().type is TokenType.EOS
    except LexError:
        return False


def tokenize(source: Union[str, TextIO], filename: str = "<input>") -> List[Token]:
    """
    Tokenize a source unit, stopping at the first error.

    Returns:
        All tokens, ending with EOS

    Raises:
        LexError: On the first malformed lexeme
    """
    return list(Tokenizer(source, filename).tokens())


def lex_all(
    source: Union[str, TextIO],
    filename: Optional[str] = None,
    options: Optional[LexerOptions] = None,
) -> LexResult:
    """
    Tokenize a source unit, recovering from errors.

    After each error scanning resumes right after the offending text
    (or at the next whitespace with resync="trivia"). Scanning stops
    at the end of input or after options.max_errors errors.

    Args:
        source: Source text or text stream
        filename: Name used in diagnostics (overrides options.filename)
        options: Error limit and recovery mode

    Returns:
        LexResult with tokens and collected errors
    """
    options = options or LexerOptions()
    tokenizer = Tokenizer(source, filename or options.filename)
    collector = ErrorCollector(max_errors=options.max_errors)
    result = LexResult(collector=collector)

    while True:
        try:
            token = tokenizer.scan()
        except LexError as e:
            logger.warning(str(e).splitlines()[0])
            collector.add(e)
            if collector.should_stop():
                result.truncated = collector.truncated = not _at_end(tokenizer)
                if not result.truncated:
                    result.tokens.append(tokenizer.scan())
                break
            if options.resync == RESYNC_TRIVIA:
                tokenizer.resynchronize()
            continue

        result.tokens.append(token)
        if token.type is TokenType.EOS:
            break

    if result.truncated:
        # Keep the EOS invariant even when stopping early
        result.tokens.append(Token(TokenType.EOS, None, tokenizer.cursor.position()))
        logger.debug(f"{tokenizer.filename}: stopped after {collector.error_count()} errors")

    return result
