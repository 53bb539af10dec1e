"""
Lexer Configuration
===================

Options for whole-unit tokenization (lex_all and the lualex command).
Configuration can come from:
- Default values (defined here)
- Environment variables
- Command-line options, which override both
"""

from dataclasses import dataclass
import os


# Recovery strategies after a lexical error
RESYNC_NEXT = "next"        # resume right after the consumed bad text
RESYNC_TRIVIA = "trivia"    # also skip to the next whitespace
RESYNC_MODES = (RESYNC_NEXT, RESYNC_TRIVIA)


@dataclass
class LexerOptions:
    """
    Options for tokenizing a whole source unit.

    Attributes:
        filename: Name used in diagnostics (default: "<input>")
        max_errors: Stop after this many errors (default: 20)
        resync: Recovery after an error, "next" or "trivia" (default: "next")
    """
    filename: str = "<input>"
    max_errors: int = 20
    resync: str = RESYNC_NEXT

    def __post_init__(self):
        if self.max_errors < 1:
            raise ValueError(f"max_errors must be at least 1, got {self.max_errors}")
        if self.resync not in RESYNC_MODES:
            raise ValueError(f"resync must be one of {RESYNC_MODES}, got {self.resync!r}")

    @classmethod
    def from_env(cls) -> "LexerOptions":
        """
        Create LexerOptions from environment variables.

        Environment variables (all optional):
            LUALEX_MAX_ERRORS: Error limit (positive integer)
            LUALEX_RESYNC: Recovery mode ("next" or "trivia")

        Invalid values are ignored and the default is kept.
        """
        options = cls()

        if max_errors := os.environ.get("LUALEX_MAX_ERRORS"):
            try:
                value = int(max_errors)
            except ValueError:
                value = 0
            if value >= 1:
                options.max_errors = value

        if resync := os.environ.get("LUALEX_RESYNC"):
            if resync in RESYNC_MODES:
                options.resync = resync

        return options
