"""
File store infrastructure for gitplumb.

Provides byte-level file persistence with:
- Atomic replacement (write to temp, then rename)
- Atomic exclusive creation (write to temp, then hard-link; fails if the
  target already exists, so readers never see a partial file), with an
  O_EXCL claim for filesystems that lack hard links
- Automatic parent directory creation
"""

import os
import tempfile
from pathlib import Path
from typing import Union
import logging

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def _write_temp(directory: Path, name: str, data: bytes) -> str:
    """Write data to a fresh temp file in ``directory`` and return its path."""
    fd, temp_path = tempfile.mkstemp(
        dir=directory,
        prefix=f".{name}.",
        suffix=".tmp"
    )
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
    except BaseException:
        _discard(temp_path)
        raise
    return temp_path


def _discard(temp_path: str) -> None:
    try:
        os.unlink(temp_path)
    except FileNotFoundError:
        pass


def write_atomic(path: PathLike, data: bytes) -> None:
    """
    Write ``data`` to ``path``, replacing any existing file atomically.

    Args:
        path: Destination file
        data: Full file contents
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = _write_temp(path.parent, path.name, data)
    try:
        os.replace(temp_path, path)
    except BaseException:
        _discard(temp_path)
        raise


def write_exclusive(path: PathLike, data: bytes, mode: int = 0o444) -> None:
    """
    Create ``path`` with ``data`` only if it does not exist yet.

    The content is written to a temp file in the destination directory and
    then hard-linked into place. ``os.link`` refuses to replace an existing
    name, so of several concurrent writers exactly one succeeds and the
    rest see FileExistsError. The temp file is removed on every path.

    On filesystems without hard links the name is claimed with
    ``O_CREAT | O_EXCL`` and the temp file is renamed over the claim.
    Creation stays exclusive; a reader racing the writer may briefly see
    an empty file.

    Args:
        path: Destination file
        data: Full file contents
        mode: Permission bits for the created file

    Raises:
        FileExistsError: If ``path`` already exists
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = _write_temp(path.parent, path.name, data)
    try:
        os.chmod(temp_path, mode)
        try:
            os.link(temp_path, path)
        except FileExistsError:
            raise
        except OSError as e:
            logger.debug(f"Hard link unavailable for {path} ({e}), claiming with O_EXCL")
            _claim_and_replace(temp_path, path, mode)
    finally:
        _discard(temp_path)
    logger.debug(f"Created {path} ({len(data)} bytes)")


def _claim_and_replace(temp_path: str, path: Path, mode: int) -> None:
    fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, mode)
    os.close(fd)
    try:
        os.replace(temp_path, path)
    except BaseException:
        _discard(str(path))
        raise
