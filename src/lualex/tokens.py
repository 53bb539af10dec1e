"""
Lua Token Definitions
=====================

Token types, the reserved keyword table, and the Token value class
produced by the tokenizer.

Token Categories
----------------
- Keywords: and, break, do, else, elseif, end, false, for, function,
  goto, if, in, local, nil, not, or, repeat, return, then, true,
  until, while
- Operators: + - * / // % ^ # & ~ | << >> == ~= <= >= < > =
- Punctuation: ( ) { } [ ] :: ; : , . .. ...
- Literals: integers, floats, strings
- Names: identifiers that are not keywords
- EOS: end of the source unit
"""

from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import Mapping, Union

from lualex.source import Position


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for Lua source.

    Keywords have one member each so the parser can dispatch on the
    type alone without comparing strings.
    """

    # === Keywords ===
    AND = auto()            # and
    BREAK = auto()          # break
    DO = auto()             # do
    ELSE = auto()           # else
    ELSEIF = auto()         # elseif
    END = auto()            # end
    FALSE = auto()          # false
    FOR = auto()            # for
    FUNCTION = auto()       # function
    GOTO = auto()           # goto
    IF = auto()             # if
    IN = auto()             # in
    LOCAL = auto()          # local
    NIL = auto()            # nil
    NOT = auto()            # not
    OR = auto()             # or
    REPEAT = auto()         # repeat
    RETURN = auto()         # return
    THEN = auto()           # then
    TRUE = auto()           # true
    UNTIL = auto()          # until
    WHILE = auto()          # while

    # === Arithmetic Operators ===
    ADD = auto()            # +
    SUB = auto()            # -
    MUL = auto()            # *
    DIV = auto()            # /
    IDIV = auto()           # //
    MOD = auto()            # %
    POW = auto()            # ^
    LEN = auto()            # #

    # === Bitwise Operators ===
    BIT_AND = auto()        # &
    BIT_XOR = auto()        # ~ (also unary bitwise not)
    BIT_OR = auto()         # |
    SHIFT_L = auto()        # <<
    SHIFT_R = auto()        # >>

    # === Relational Operators ===
    EQUAL = auto()          # ==
    NOT_EQ = auto()         # ~=
    LES_EQ = auto()         # <=
    GRE_EQ = auto()         # >=
    LESS = auto()           # <
    GREATER = auto()        # >

    ASSIGN = auto()         # =

    # === Delimiters ===
    PAR_L = auto()          # (
    PAR_R = auto()          # )
    CURLY_L = auto()        # {
    CURLY_R = auto()        # }
    SQUR_L = auto()         # [
    SQUR_R = auto()         # ]
    DOUB_COLON = auto()     # ::
    SEMI_COLON = auto()     # ;
    COLON = auto()          # :
    COMMA = auto()          # ,
    DOT = auto()            # .
    CONCAT = auto()         # ..
    DOTS = auto()           # ...

    # === Literals and Names ===
    INTEGER = auto()        # 64-bit signed integer
    FLOAT = auto()          # 64-bit float
    STRING = auto()         # quoted or long-bracket string
    NAME = auto()           # identifier

    # === Structural ===
    EOS = auto()            # end of source


# =============================================================================
# Keyword and Symbol Tables
# =============================================================================

# Reserved words. Read-only so that every tokenizer, in any thread, sees
# the same table.
KEYWORDS: Mapping[str, TokenType] = MappingProxyType({
    "and": TokenType.AND,
    "break": TokenType.BREAK,
    "do": TokenType.DO,
    "else": TokenType.ELSE,
    "elseif": TokenType.ELSEIF,
    "end": TokenType.END,
    "false": TokenType.FALSE,
    "for": TokenType.FOR,
    "function": TokenType.FUNCTION,
    "goto": TokenType.GOTO,
    "if": TokenType.IF,
    "in": TokenType.IN,
    "local": TokenType.LOCAL,
    "nil": TokenType.NIL,
    "not": TokenType.NOT,
    "or": TokenType.OR,
    "repeat": TokenType.REPEAT,
    "return": TokenType.RETURN,
    "then": TokenType.THEN,
    "true": TokenType.TRUE,
    "until": TokenType.UNTIL,
    "while": TokenType.WHILE,
})

# Source spelling of every fixed token, for messages and token dumps
SYMBOLS: Mapping[TokenType, str] = MappingProxyType({
    **{token_type: word for word, token_type in KEYWORDS.items()},
    TokenType.ADD: "+",
    TokenType.SUB: "-",
    TokenType.MUL: "*",
    TokenType.DIV: "/",
    TokenType.IDIV: "//",
    TokenType.MOD: "%",
    TokenType.POW: "^",
    TokenType.LEN: "#",
    TokenType.BIT_AND: "&",
    TokenType.BIT_XOR: "~",
    TokenType.BIT_OR: "|",
    TokenType.SHIFT_L: "<<",
    TokenType.SHIFT_R: ">>",
    TokenType.EQUAL: "==",
    TokenType.NOT_EQ: "~=",
    TokenType.LES_EQ: "<=",
    TokenType.GRE_EQ: ">=",
    TokenType.LESS: "<",
    TokenType.GREATER: ">",
    TokenType.ASSIGN: "=",
    TokenType.PAR_L: "(",
    TokenType.PAR_R: ")",
    TokenType.CURLY_L: "{",
    TokenType.CURLY_R: "}",
    TokenType.SQUR_L: "[",
    TokenType.SQUR_R: "]",
    TokenType.DOUB_COLON: "::",
    TokenType.SEMI_COLON: ";",
    TokenType.COLON: ":",
    TokenType.COMMA: ",",
    TokenType.DOT: ".",
    TokenType.CONCAT: "..",
    TokenType.DOTS: "...",
})


# =============================================================================
# Token Data Class
# =============================================================================

TokenValue = Union[int, float, str, None]


@dataclass(frozen=True)
class Token:
    """
    A single token from Lua source.

    Tokens hold copies of their payload, never references into the
    source, so they stay valid after the tokenizer is gone.

    Attributes:
        type: The TokenType classification
        value: int for INTEGER, float for FLOAT, str for STRING and NAME,
            None for everything else
        position: Where the token starts in the source
    """
    type: TokenType
    value: TokenValue = None
    position: Position = Position()

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.position})"
        return f"Token({self.type.name}, {self.position})"

    @property
    def line(self) -> int:
        return self.position.line

    @property
    def column(self) -> int:
        return self.position.column

    @property
    def lexeme(self) -> str:
        """Source-like spelling of the token, used in messages."""
        if self.type in SYMBOLS:
            return SYMBOLS[self.type]
        if self.type is TokenType.EOS:
            return "<eos>"
        if self.type is TokenType.STRING:
            return repr(self.value)
        return str(self.value)

    def is_keyword(self) -> bool:
        """Return True if this token is a reserved word."""
        return self.type in _KEYWORD_TYPES

    def is_literal(self) -> bool:
        """Return True if this token carries a literal constant."""
        return self.type in (
            TokenType.INTEGER,
            TokenType.FLOAT,
            TokenType.STRING,
            TokenType.NIL,
            TokenType.TRUE,
            TokenType.FALSE,
        )


_KEYWORD_TYPES = frozenset(KEYWORDS.values())
