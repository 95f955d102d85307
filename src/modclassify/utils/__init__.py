"""Utility modules for writing results."""

from modclassify.utils.fileio import (
    atomic_write_json,
    atomic_write_text,
)

__all__ = [
    # Atomic file-write utilities
    'atomic_write_json',
    'atomic_write_text',
]
