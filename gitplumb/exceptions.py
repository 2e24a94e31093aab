"""
Exception hierarchy for gitplumb.

Every failure raised by the object store, the repository layer and the
settings loader derives from GitPlumbError. Each class carries the exit
code the CLI should use when the error reaches the top level.
"""

from pathlib import Path
from typing import Optional, Union

from . import exit_codes


class GitPlumbError(Exception):
    """Base class for gitplumb errors."""

    exit_code = exit_codes.GENERAL_ERROR

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidHash(GitPlumbError, ValueError):
    """Raised when a hex digest or raw digest has the wrong shape."""

    exit_code = exit_codes.DATA_ERROR


class ObjectNotFound(GitPlumbError):
    """Raised when no object file exists at the derived path."""

    exit_code = exit_codes.OBJECT_NOT_FOUND

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"Object not found at {self.path}")


class ObjectAlreadyExists(GitPlumbError):
    """Raised when writing an object whose file is already present."""

    exit_code = exit_codes.ALREADY_EXISTS

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"Object already exists at {self.path}")


class AlreadyInitialized(GitPlumbError):
    """Raised when initializing over an existing metadata directory."""

    exit_code = exit_codes.ALREADY_EXISTS

    def __init__(self, gitdir: Union[str, Path]):
        self.gitdir = Path(gitdir)
        super().__init__(f"Directory is already a git repository: {self.gitdir}")


# Corrupt or inconsistent stored objects
class CorruptObject(GitPlumbError):
    """Base class for objects that cannot be decoded."""

    exit_code = exit_codes.DATA_ERROR


class DecompressionError(CorruptObject):
    pass


class MalformedHeader(CorruptObject):
    pass


class InvalidKind(CorruptObject, ValueError):
    """Raised for an object kind token outside blob/tree/commit/tag."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Invalid object type: {token!r}")


class InvalidSize(CorruptObject):
    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Invalid object size: {token!r}")


class SizeMismatch(CorruptObject):
    def __init__(self, declared: int, actual: int):
        self.declared = declared
        self.actual = actual
        super().__init__(
            f"Object size mismatch: header specifies {declared} bytes "
            f"but found {actual} bytes"
        )


class HashMismatch(CorruptObject):
    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Object hash mismatch: expected {expected}, content hashes to {actual}")


# Repository and settings
class NoRepository(GitPlumbError):
    """Raised when no metadata directory can be located."""

    exit_code = exit_codes.NO_REPOSITORY

    def __init__(self, start: Union[str, Path]):
        self.start = Path(start)
        super().__init__(f"Not a git repository (or any of the parent directories): {self.start}")


class UnsupportedFormatVersion(GitPlumbError):
    """Raised when core.repositoryformatversion is not 0."""

    exit_code = exit_codes.UNSUPPORTED

    def __init__(self, version: int):
        self.version = version
        super().__init__(f"Unsupported repositoryformatversion: {version}")


class ConfigError(GitPlumbError):
    """Raised when there's a configuration error."""

    exit_code = exit_codes.CONFIG_ERROR


class StoreIOError(GitPlumbError):
    """Filesystem failure not covered by a more specific error."""

    exit_code = exit_codes.IO_ERROR
