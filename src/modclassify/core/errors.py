"""
Exception types raised by the classification pipeline.

Only malformed inputs raise. Numeric corner cases (constant score vectors,
modules with no gene overlap, zero-range normalization) have defined outputs
and never surface as exceptions.
"""

from __future__ import annotations

__all__ = ['InputError']


class InputError(ValueError):
    """
    Raised when an expression matrix, gene module set or method selector
    violates a precondition.

    Subclasses ValueError so callers that already guard loaders with
    ``except ValueError`` keep working.
    """
    pass
