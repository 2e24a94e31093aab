"""
Typed object domain objects for gitplumb.

A TypedObject is a kind plus raw payload bytes. Its hash is computed over
the canonical serialization ``b"<kind> <len>\\0" + data``, the same bytes
that get compressed into the loose object file.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Union

from ..exceptions import InvalidKind
from .hash import ContentHash


class ObjectKind(Enum):
    """The four object kinds known to the store."""
    BLOB = "blob"
    TREE = "tree"
    COMMIT = "commit"
    TAG = "tag"

    @classmethod
    def parse(cls, token: Union[str, bytes]) -> 'ObjectKind':
        """
        Parse a lowercase kind token.

        Matching is case-sensitive: "blob" is valid, "Blob" is not.

        Raises:
            InvalidKind: For any token other than blob, tree, commit or tag
        """
        if isinstance(token, bytes):
            try:
                token = token.decode('ascii')
            except UnicodeDecodeError:
                raise InvalidKind(token.decode('ascii', errors='replace'))
        for kind in cls:
            if kind.value == token:
                return kind
        raise InvalidKind(token)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TypedObject:
    """
    Immutable typed payload with its content hash.

    The hash is always derived from kind and data; it cannot be passed in.
    """

    kind: ObjectKind
    data: bytes
    hash: ContentHash = field(init=False)

    def __post_init__(self):
        if not isinstance(self.kind, ObjectKind):
            raise InvalidKind(str(self.kind))
        data = bytes(self.data)
        object.__setattr__(self, 'data', data)
        object.__setattr__(self, 'hash', ContentHash.from_bytes(_header(self.kind, len(data)) + data))

    @classmethod
    def new(cls, kind: ObjectKind, data: bytes) -> 'TypedObject':
        return cls(kind=kind, data=data)

    @property
    def size(self) -> int:
        return len(self.data)

    def header(self) -> bytes:
        """Return ``b"<kind> <size>\\0"``, identical to the hashed header."""
        return _header(self.kind, len(self.data))

    def serialize(self) -> bytes:
        """Return the uncompressed on-disk form: header followed by data."""
        return self.header() + self.data

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind.value,
            'size': self.size,
            'hash': self.hash.to_hex(),
        }


def _header(kind: ObjectKind, size: int) -> bytes:
    return f"{kind.value} {size}\0".encode('ascii')
