"""
Infrastructure layer for gitplumb.

Low-level filesystem helpers used by the repository and object store.
"""

from .file_store import write_atomic, write_exclusive

__all__ = [
    'write_atomic',
    'write_exclusive',
]
