"""
Loose object store for gitplumb.

Objects live at ``.git/objects/<first 2 hex>/<remaining 38 hex>`` as
zlib-compressed ``b"<kind> <size>\\0" + data``. Files are write-once:
content addressing means an existing file already holds the same bytes.
"""

import os
import zlib
from pathlib import Path
from typing import Iterator, Optional, Union
import logging

from .domain.hash import ContentHash, HEX_LENGTH
from .domain.object import ObjectKind, TypedObject
from .exceptions import (
    DecompressionError,
    HashMismatch,
    InvalidHash,
    InvalidSize,
    MalformedHeader,
    ObjectAlreadyExists,
    ObjectNotFound,
    SizeMismatch,
    StoreIOError,
)
from .infra.file_store import write_exclusive
from .repository import Repository, check_format_version

logger = logging.getLogger(__name__)

COMPRESSION_LEVEL = zlib.Z_DEFAULT_COMPRESSION

HashLike = Union[ContentHash, str]


def _as_hash(value: HashLike) -> ContentHash:
    if isinstance(value, ContentHash):
        return value
    return ContentHash.from_hex(value)


def object_path(repo: Repository, object_hash: HashLike) -> Path:
    """Return the loose object path for ``object_hash`` in ``repo``."""
    directory, filename = _as_hash(object_hash).path_parts()
    return repo.objects_dir / directory / filename


def write_object(obj: TypedObject, repo: Repository) -> ContentHash:
    """
    Compress ``obj`` into the repository's object directory.

    Returns:
        The object's hash

    Raises:
        ObjectAlreadyExists: If a file is already present at the object's path
        UnsupportedFormatVersion: If the repository is not version 0
        StoreIOError: On any other filesystem failure
    """
    check_format_version(repo.settings)
    path = object_path(repo, obj.hash)
    if path.exists():
        raise ObjectAlreadyExists(path)

    compressed = zlib.compress(obj.serialize(), COMPRESSION_LEVEL)
    try:
        write_exclusive(path, compressed)
    except FileExistsError as e:
        # Another writer got there between the check and the link.
        raise ObjectAlreadyExists(path) from e
    except OSError as e:
        raise StoreIOError(f"Failed to write object file {path}: {e}") from e

    logger.debug(f"Wrote {obj.kind} {obj.hash} ({obj.size} bytes)")
    return obj.hash


def _decompress(compressed: bytes, path: Path) -> bytes:
    """Inflate a whole object file; truncation and trailing bytes are errors."""
    decompressor = zlib.decompressobj()
    try:
        raw = decompressor.decompress(compressed)
    except zlib.error as e:
        logger.warning(f"Corrupt object at {path}: {e}")
        raise DecompressionError(f"Failed to decompress object data at {path}: {e}") from e

    if not decompressor.eof:
        logger.warning(f"Corrupt object at {path}: truncated stream")
        raise DecompressionError(f"Failed to decompress object data at {path}: truncated stream")
    if decompressor.unused_data:
        logger.warning(f"Corrupt object at {path}: garbage after stream")
        raise DecompressionError(
            f"Garbage at end of object {path}: {len(decompressor.unused_data)} extra bytes"
        )
    return raw


def parse_object(raw: bytes) -> TypedObject:
    """
    Decode the decompressed contents of an object file.

    Raises:
        MalformedHeader: If there is no NUL byte or the header is not "<kind> <size>"
        InvalidKind: If the kind token is unknown
        InvalidSize: If the size token is not a non-negative decimal integer
        SizeMismatch: If the payload length differs from the declared size
    """
    header, sep, payload = raw.partition(b"\0")
    if not sep:
        raise MalformedHeader("Invalid object header: missing null terminator")

    try:
        header_text = header.decode('ascii')
    except UnicodeDecodeError as e:
        raise MalformedHeader(f"Invalid object header: {header!r} is not ASCII") from e

    kind_token, space, size_token = header_text.partition(" ")
    if not space:
        raise MalformedHeader(f"Invalid object header: missing type or size in {header_text!r}")

    kind = ObjectKind.parse(kind_token)
    if not (size_token.isascii() and size_token.isdigit()):
        raise InvalidSize(size_token)
    size = int(size_token)

    if len(payload) != size:
        raise SizeMismatch(size, len(payload))

    return TypedObject.new(kind, payload)


def read_object(repo: Repository, object_hash: HashLike) -> TypedObject:
    """
    Read and validate an object from the repository.

    The content is re-hashed after decoding and compared with the hash it
    was requested by.

    Raises:
        InvalidHash: If ``object_hash`` is a malformed hex string
        ObjectNotFound: If no file exists for the hash
        DecompressionError: If the file is not a valid zlib stream
        MalformedHeader, InvalidKind, InvalidSize, SizeMismatch: See parse_object
        HashMismatch: If the content does not hash to ``object_hash``
        UnsupportedFormatVersion: If the repository is not version 0
        StoreIOError: On any other filesystem failure
    """
    check_format_version(repo.settings)
    expected = _as_hash(object_hash)
    path = object_path(repo, expected)

    try:
        with open(path, 'rb') as f:
            compressed = f.read()
    except FileNotFoundError as e:
        raise ObjectNotFound(path) from e
    except IsADirectoryError as e:
        raise ObjectNotFound(path) from e
    except OSError as e:
        raise StoreIOError(f"Failed to open object file {path}: {e}") from e

    raw = _decompress(compressed, path)
    obj = parse_object(raw)
    if obj.hash != expected:
        logger.warning(f"Object at {path} hashes to {obj.hash}")
        raise HashMismatch(expected.to_hex(), obj.hash.to_hex())

    logger.debug(f"Read {obj.kind} {obj.hash} ({obj.size} bytes)")
    return obj


def contains_object(repo: Repository, object_hash: HashLike) -> bool:
    return object_path(repo, object_hash).is_file()


def iter_objects(repo: Repository) -> Iterator[ContentHash]:
    """
    Yield the hashes of all loose objects, in sorted order.

    Entries that are not a 2-character shard holding 38-character hex
    names (temp files, stray files) are skipped.
    """
    objects_dir = repo.objects_dir
    if not objects_dir.is_dir():
        return
    for shard in sorted(os.listdir(objects_dir)):
        shard_path = objects_dir / shard
        if len(shard) != 2 or not shard_path.is_dir():
            continue
        for name in sorted(os.listdir(shard_path)):
            if len(name) != HEX_LENGTH - 2:
                continue
            try:
                yield ContentHash.from_hex(shard + name)
            except InvalidHash:
                continue


def hash_object(data: bytes, kind: ObjectKind = ObjectKind.BLOB,
                repo: Optional[Repository] = None) -> ContentHash:
    """
    Compute the hash of ``data`` as an object of ``kind``.

    When ``repo`` is given the object is also stored. An object that is
    already present is left as is, like ``git hash-object -w``.
    """
    obj = TypedObject.new(kind, data)
    if repo is not None:
        try:
            write_object(obj, repo)
        except ObjectAlreadyExists:
            logger.debug(f"Object {obj.hash} already stored")
    return obj.hash


class ObjectStore:
    """
    Object store bound to one repository.

    Example:
        repo = Repository.find(".")
        store = ObjectStore(repo)
        oid = store.write(TypedObject.new(ObjectKind.BLOB, b"hello"))
        store.read(oid).data  # b"hello"
    """

    def __init__(self, repo: Repository):
        self.repo = repo

    def write(self, obj: TypedObject) -> ContentHash:
        return write_object(obj, self.repo)

    def read(self, object_hash: HashLike) -> TypedObject:
        return read_object(self.repo, object_hash)

    def contains(self, object_hash: HashLike) -> bool:
        return contains_object(self.repo, object_hash)

    def object_path(self, object_hash: HashLike) -> Path:
        return object_path(self.repo, object_hash)

    def iter_objects(self) -> Iterator[ContentHash]:
        return iter_objects(self.repo)

    def __contains__(self, object_hash: HashLike) -> bool:
        return self.contains(object_hash)

    def __iter__(self) -> Iterator[ContentHash]:
        return self.iter_objects()
