"""
Command building entry points.
"""

from .builder import CommandBuilder

__all__ = ["CommandBuilder"]
