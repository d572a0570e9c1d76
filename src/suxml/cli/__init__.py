"""Command-line interface for suxml.

Checks, reformats and prints the line projection of XML files.
"""

from .main import main

__all__ = ["main"]
