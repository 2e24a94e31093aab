"""
Repository discovery and initialization for gitplumb.

A Repository pairs a working tree with its ``.git`` metadata directory
and the settings snapshot read when it was opened. It holds paths only;
no file handles stay open between calls.
"""

import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union
import logging

from .config import (
    SUPPORTED_FORMAT_VERSION,
    Settings,
    dump_settings,
    resolve_settings,
)
from .exceptions import (
    AlreadyInitialized,
    NoRepository,
    StoreIOError,
    UnsupportedFormatVersion,
)
from .infra.file_store import write_atomic

logger = logging.getLogger(__name__)

GITDIR_NAME = ".git"
DEFAULT_BRANCH = "master"
DEFAULT_DESCRIPTION = "Unnamed repository; edit this file 'description' to name the repository.\n"
LAYOUT_DIRECTORIES = ("branches", "objects", "refs/tags", "refs/heads")


def check_format_version(settings: Settings) -> None:
    """Raise UnsupportedFormatVersion unless the settings describe version 0."""
    if settings.format_version != SUPPORTED_FORMAT_VERSION:
        raise UnsupportedFormatVersion(settings.format_version)


@dataclass(frozen=True)
class Repository:
    """
    A working tree and its metadata directory.

    Obtain instances with Repository.find(), Repository.open() or
    Repository.initialize() rather than constructing them directly.

    Attributes:
        worktree: Root of the working tree
        gitdir: ``worktree / ".git"``
        settings: Settings resolved when the repository was opened
    """

    worktree: Path
    gitdir: Path
    settings: Settings = field(default_factory=Settings)

    @property
    def objects_dir(self) -> Path:
        return self.gitdir / "objects"

    @property
    def config_path(self) -> Path:
        return self.gitdir / "config"

    def path(self, *parts: str) -> Path:
        """Join ``parts`` under the metadata directory."""
        return self.gitdir.joinpath(*parts)

    @classmethod
    def open(cls, path: Union[str, Path]) -> 'Repository':
        """
        Open the repository whose working tree is exactly ``path``.

        Raises:
            NoRepository: If ``path/.git`` is not a directory
            UnsupportedFormatVersion: If the repository is not version 0
            ConfigError: If the repository config is malformed
        """
        worktree = Path(path).expanduser().resolve()
        gitdir = worktree / GITDIR_NAME
        if not gitdir.is_dir():
            raise NoRepository(worktree)

        settings = resolve_settings(gitdir / "config")
        check_format_version(settings)

        logger.debug(f"Opened repository at {worktree}")
        return cls(worktree=worktree, gitdir=gitdir, settings=settings)

    @classmethod
    def find(cls, start_path: Union[str, Path] = ".") -> 'Repository':
        """
        Locate the repository containing ``start_path``.

        Checks ``start_path/.git`` and then each parent directory in turn.

        Raises:
            NoRepository: If the filesystem root is reached without a match
        """
        start = Path(start_path).expanduser().resolve()
        for candidate in (start, *start.parents):
            if (candidate / GITDIR_NAME).is_dir():
                return cls.open(candidate)
        raise NoRepository(start)

    @classmethod
    def initialize(cls, path: Union[str, Path],
                   settings: Optional[Settings] = None) -> 'Repository':
        """
        Create a new repository at ``path``.

        Creates the working tree if needed, then the metadata directory
        with branches/, objects/, refs/tags/, refs/heads/, a description
        file, HEAD pointing at refs/heads/master, and the config file.

        Args:
            path: Working tree root
            settings: Settings to write; resolved from defaults and the
                environment when omitted

        Raises:
            AlreadyInitialized: If ``path/.git`` already exists
            UnsupportedFormatVersion: If the settings are not version 0
            StoreIOError: If the layout cannot be written; the partial
                metadata directory is removed first
        """
        if settings is None:
            settings = resolve_settings()
        check_format_version(settings)

        worktree = Path(path).expanduser().resolve()
        gitdir = worktree / GITDIR_NAME

        try:
            worktree.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreIOError(f"Cannot create working tree {worktree}: {e}") from e

        try:
            # mkdir without exist_ok is the exclusive claim on the repository.
            os.mkdir(gitdir)
        except FileExistsError as e:
            raise AlreadyInitialized(gitdir) from e
        except OSError as e:
            raise StoreIOError(f"Cannot create repository at {worktree}: {e}") from e

        repo = cls(worktree=worktree, gitdir=gitdir, settings=settings)
        try:
            for directory in LAYOUT_DIRECTORIES:
                repo.path(directory).mkdir(parents=True, exist_ok=True)
            write_atomic(repo.path("description"), DEFAULT_DESCRIPTION.encode('utf-8'))
            write_atomic(repo.path("HEAD"), f"ref: refs/heads/{DEFAULT_BRANCH}\n".encode('utf-8'))
            write_atomic(repo.config_path, dump_settings(settings).encode('utf-8'))
        except OSError as e:
            # The directory is ours from the mkdir above; remove the partial layout.
            logger.warning(f"Failed to populate {gitdir}, removing it: {e}")
            shutil.rmtree(gitdir, ignore_errors=True)
            raise StoreIOError(f"Cannot populate {gitdir}: {e}") from e

        logger.info(f"Initialized empty repository in {gitdir}")
        return repo
