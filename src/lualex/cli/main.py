"""
lualex - Lua Tokenizer Command-Line Interface
=============================================

Tokenizes a Lua source file and prints one token per line, or just the
lexical diagnostics. Useful for checking what the lexer makes of a file
and as a quick lexical lint.

Usage Examples
--------------
Dump tokens:
    $ lualex script.lua

Only report lexical errors:
    $ lualex --errors-only script.lua

Collect at most 5 errors, skipping to whitespace after each:
    $ lualex --max-errors 5 --resync trivia script.lua

Verbose mode (debug logging):
    $ lualex -v script.lua

Exit Codes
----------
0 - No lexical errors
1 - Lexical errors reported
2 - Invalid arguments or unreadable file
3 - Internal error
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from lualex import __version__
from lualex.cli.errors import ExitCode, handle_cli_exception
from lualex.config import RESYNC_MODES, LexerOptions
from lualex.driver import lex_all
from lualex.tokens import Token

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(name)s: %(message)s" if verbose else "%(message)s",
    )


def format_token(token: Token) -> str:
    """Format a token as 'line:column  TYPE  value'."""
    line = f"{str(token.position):<10}{token.type.name:<12}"
    if token.value is not None:
        line += repr(token.value)
    return line.rstrip()


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-e", "--errors-only",
    is_flag=True,
    help="Print diagnostics only, not the token list",
)
@click.option(
    "-n", "--max-errors",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many errors (default: 20, or $LUALEX_MAX_ERRORS)",
)
@click.option(
    "-r", "--resync",
    type=click.Choice(RESYNC_MODES),
    default=None,
    help="Recovery after an error: resume at the next character (next) "
         "or at the next whitespace (trivia). Default: next, or $LUALEX_RESYNC",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="lualex")
def main(
    input_file: Path,
    errors_only: bool,
    max_errors: Optional[int],
    resync: Optional[str],
    verbose: bool,
) -> None:
    """
    Tokenize a Lua source file.

    INPUT_FILE is the Lua source file to tokenize (UTF-8).

    \b
    Examples:
        lualex script.lua                # Dump all tokens
        lualex -e script.lua             # Only report errors
        lualex -n 5 -r trivia script.lua # Limit and recovery mode
    """
    setup_logging(verbose)

    options = LexerOptions.from_env()
    options.filename = str(input_file)
    if max_errors is not None:
        options.max_errors = max_errors
    if resync is not None:
        options.resync = resync

    try:
        logger.info(f"Tokenizing {input_file}")
        with open(input_file, encoding="utf-8") as source:
            result = lex_all(source, options=options)
    except Exception as e:
        handle_cli_exception(e, verbose)

    if not errors_only:
        for token in result.tokens:
            click.echo(format_token(token))

    if verbose:
        click.echo(f"Tokenized: {result.token_count} tokens", err=True)

    if not result.ok:
        click.echo(result.collector.report(), err=True)
        sys.exit(ExitCode.LEX_ERROR)


if __name__ == "__main__":
    main()
