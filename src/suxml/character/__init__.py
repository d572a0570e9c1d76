"""Character layer for suxml.

Provides the ``Scanner`` cursor that the tree builder consumes.
"""

from .scanner import WHITESPACE, Scanner

__all__ = [
    "WHITESPACE",
    "Scanner",
]
