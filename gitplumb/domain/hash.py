"""
ContentHash domain object for gitplumb.

A ContentHash is the 20-byte SHA-1 digest that addresses an object in
the store. The binary digest is the in-memory representation; hex is
only used for display, parsing and on-disk paths.
"""

import hashlib
import string
from dataclasses import dataclass
from typing import Tuple

from ..exceptions import InvalidHash

DIGEST_SIZE = 20
HEX_LENGTH = DIGEST_SIZE * 2

_HEX_DIGITS = frozenset(string.hexdigits)


@dataclass(frozen=True)
class ContentHash:
    """
    Immutable 160-bit content digest.

    Examples:
        ContentHash.from_bytes(b"blob 0\\0").to_hex()
            -> "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391"
        ContentHash.from_hex("E69DE29B...").path_parts()
            -> ("e6", "9de29bb2d1d6434b8b29ae775ad8c2e48c5391")
    """

    raw: bytes

    def __post_init__(self):
        if not isinstance(self.raw, bytes):
            raise InvalidHash(f"Invalid hash: expected bytes, got {type(self.raw).__name__}")
        if len(self.raw) != DIGEST_SIZE:
            raise InvalidHash(
                f"Invalid hash length: expected {DIGEST_SIZE} bytes, got {len(self.raw)}"
            )

    @classmethod
    def from_bytes(cls, data: bytes) -> 'ContentHash':
        """Hash ``data`` with SHA-1."""
        return cls(hashlib.sha1(data).digest())

    @classmethod
    def from_hex(cls, hex_string: str) -> 'ContentHash':
        """
        Parse a 40-character hex digest (either case).

        Raises:
            InvalidHash: If the string is not exactly 40 hex digits
        """
        if len(hex_string) != HEX_LENGTH:
            raise InvalidHash(
                f"Invalid hash length: expected {HEX_LENGTH} characters, got {len(hex_string)}"
            )
        if not _HEX_DIGITS.issuperset(hex_string):
            raise InvalidHash(f"Invalid hash: {hex_string!r} contains non-hex characters")
        return cls(bytes.fromhex(hex_string))

    def to_hex(self) -> str:
        return self.raw.hex()

    def path_parts(self) -> Tuple[str, str]:
        """Split the hex form into the shard directory and file name."""
        hex_string = self.to_hex()
        return hex_string[:2], hex_string[2:]

    def __str__(self) -> str:
        return self.to_hex()

    def __repr__(self) -> str:
        return f"ContentHash({self.to_hex()!r})"


# Digest of "blob 0\0": the empty blob.
EMPTY_BLOB_HASH = ContentHash.from_hex("e69de29bb2d1d6434b8b29ae775ad8c2e48c5391")
