"""
Domain layer for gitplumb.

Contains pure value objects with no I/O or side effects:
- ContentHash: 20-byte SHA-1 digest with hex and shard-path helpers
- ObjectKind: blob, tree, commit or tag
- TypedObject: kind + payload, addressed by its ContentHash
"""

from .hash import ContentHash, EMPTY_BLOB_HASH
from .object import ObjectKind, TypedObject

__all__ = [
    'ContentHash',
    'EMPTY_BLOB_HASH',
    'ObjectKind',
    'TypedObject',
]
