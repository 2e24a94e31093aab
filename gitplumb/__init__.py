"""
gitplumb - A content-addressable object store using git's loose object format.

Objects are typed payloads (blob, tree, commit, tag) addressed by the
SHA-1 of ``b"<kind> <size>\\0" + data`` and stored zlib-compressed under
``.git/objects/<2 hex>/<38 hex>``.

Quick Start:
    import gitplumb

    # Create a repository, or find the one containing a path
    repo = gitplumb.Repository.initialize("~/projects/demo")
    repo = gitplumb.Repository.find("~/projects/demo/src/pkg")

    # Store and read back an object
    store = gitplumb.ObjectStore(repo)
    oid = store.write(gitplumb.TypedObject.new(gitplumb.ObjectKind.BLOB, b"hello\\n"))
    store.read(oid).data  # b"hello\\n"

    # Hash without storing
    gitplumb.hash_object(b"")  # e69de29bb2d1d6434b8b29ae775ad8c2e48c5391

Settings:
    Layered from defaults, ``.git/config`` (INI) and GITPLUMB_*
    environment variables, e.g. GITPLUMB_CORE_BARE=true.
"""

__version__ = "0.1.0"

# Domain objects
from .domain import ContentHash, EMPTY_BLOB_HASH, ObjectKind, TypedObject

# Repository and settings
from .config import CoreSettings, Settings, resolve_settings
from .repository import Repository

# Object store
from .object_store import (
    ObjectStore,
    hash_object,
    read_object,
    write_object,
)

# Errors
from .exceptions import (
    GitPlumbError,
    InvalidHash,
    ObjectNotFound,
    ObjectAlreadyExists,
    AlreadyInitialized,
    CorruptObject,
    DecompressionError,
    MalformedHeader,
    InvalidKind,
    InvalidSize,
    SizeMismatch,
    HashMismatch,
    NoRepository,
    UnsupportedFormatVersion,
    ConfigError,
    StoreIOError,
)

__all__ = [
    # Version
    "__version__",
    # Domain objects
    "ContentHash",
    "EMPTY_BLOB_HASH",
    "ObjectKind",
    "TypedObject",
    # Repository and settings
    "CoreSettings",
    "Settings",
    "resolve_settings",
    "Repository",
    # Object store
    "ObjectStore",
    "hash_object",
    "read_object",
    "write_object",
    # Errors
    "GitPlumbError",
    "InvalidHash",
    "ObjectNotFound",
    "ObjectAlreadyExists",
    "AlreadyInitialized",
    "CorruptObject",
    "DecompressionError",
    "MalformedHeader",
    "InvalidKind",
    "InvalidSize",
    "SizeMismatch",
    "HashMismatch",
    "NoRepository",
    "UnsupportedFormatVersion",
    "ConfigError",
    "StoreIOError",
]
