"""
SQL statement rendering.
"""

from .compiler import StatementCompiler

__all__ = ["StatementCompiler"]
