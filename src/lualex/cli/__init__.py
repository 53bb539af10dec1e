"""
lualex Command-Line Interface
=============================

This package provides the ``lualex`` command, a Click-based tool that
tokenizes a Lua source file and prints its tokens or diagnostics.
"""

__all__ = ["main"]

from lualex.cli.main import main
