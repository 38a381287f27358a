# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""On-disk cache of cloned repositories, keyed by repository identifier.

Layout::

    <cache-root>/<tool>/<version>/protoc.lock
    <cache-root>/<tool>/<version>/repos/<identifier>/...

A directory under ``repos/`` only counts as a cached repository when it
holds a ``.git`` directory.  Everything else is a leftover of a failed attempt
or a parent of nested entries and is never trusted.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from protoremote.candidates import CandidatesExhaustedError, first_success
from protoremote.resolver.paths import (
    DEFAULT_HOSTING_PATTERNS,
    HostingPattern,
    clone_candidates,
    open_candidates,
)
from protoremote.vcs.base import METADATA_MARKER, Repository, VcsBackend, VcsError, has_metadata_marker

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_TOOL_NAME = "protoc"
LOCK_FILE_NAME = "protoc.lock"


class ResolutionError(Exception):
    """Raised when a remote import path cannot be resolved to a local file."""


class CloneError(ResolutionError):
    """Raised when no candidate repository of an import path could be cloned."""


@dataclass(frozen=True)
class CacheLayout:
    """Paths of the cache directory tree.

    Attributes:
        root: User cache root, e.g. ``~/.cache``.
        version: Version namespace, so that caches of different releases
            never share state.
        tool_name: Name of the tool directory under *root*.
    """

    root: Path
    version: str
    tool_name: str = DEFAULT_TOOL_NAME

    @property
    def base_dir(self) -> Path:
        return self.root / self.tool_name / self.version

    @property
    def repos_dir(self) -> Path:
        return self.base_dir / "repos"

    @property
    def lock_path(self) -> Path:
        return self.base_dir / LOCK_FILE_NAME

    def repo_dir(self, identifier: str) -> Path:
        """Return the cache directory of the repository named *identifier*."""
        return self.repos_dir.joinpath(*identifier.split("/"))


class RepositoryCache:
    """Opens cached repositories and clones missing ones.

    Callers must hold the cache's ProcessLock while using it; the cache itself
    does no locking.

    Args:
        layout: Cache directory layout.
        backend: Git backend used to open and clone working copies.
        hosting_patterns: Known hosting layouts tried before the generic
            prefix search when cloning.
    """

    def __init__(
        self,
        layout: CacheLayout,
        backend: VcsBackend,
        hosting_patterns: tuple[HostingPattern, ...] = DEFAULT_HOSTING_PATTERNS,
    ) -> None:
        self.layout = layout
        self.backend = backend
        self.hosting_patterns = hosting_patterns

    def open(self, identifier: str) -> Repository | None:
        """Return a handle to the cached repository *identifier*, or None.

        No network access is performed.
        """
        directory = self.layout.repo_dir(identifier)
        # The backend may accept a directory nested in some other working copy,
        # so the marker is checked first.
        if not has_metadata_marker(directory):
            return None
        try:
            return self.backend.open(identifier, directory)
        except VcsError as exc:
            logger.debug("Cannot open cached directory %s: %s", directory, exc)
            return None

    def clone(self, identifier: str) -> Repository:
        """Clone *identifier* into its cache directory.

        A directory that already holds a working copy is left alone and the
        clone fails.  A leftover directory without git metadata is removed
        first unless it contains other cached repositories.  On failure, git
        metadata left behind is removed so that the directory is not mistaken
        for a valid entry later, and empty directories created by this call
        are removed.

        Raises:
            CloneError: If *identifier* does not name a directory below the
                cache, the directory cannot be prepared, or the backend fails
                to clone.
        """
        directory = self.layout.repo_dir(identifier)
        if not _is_below(directory, self.layout.repos_dir):
            raise CloneError(f"clone of '{identifier}' refused: {directory} is outside {self.layout.repos_dir}")
        if has_metadata_marker(directory):
            raise CloneError(f"clone of '{identifier}' failed: {directory} already holds a repository")
        created = not directory.exists()
        try:
            if not created and not _holds_cache_entries(directory):
                logger.info("Removing stale cache directory %s", directory)
                shutil.rmtree(directory)
                created = True
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CloneError(f"clone of '{identifier}' failed: cannot prepare {directory}: {exc}") from exc
        logger.info("Trying to clone %s into %s", identifier, directory)
        try:
            repository = self.backend.clone(identifier, directory)
        except VcsError as exc:
            if has_metadata_marker(directory):
                shutil.rmtree(directory, ignore_errors=True)
            if created:
                _prune_empty_directories(directory, self.layout.repos_dir)
            raise CloneError(f"clone of '{identifier}' failed: {exc}") from exc
        logger.info("Cloned repository %s into %s", identifier, directory)
        return repository

    def invalidate(self, identifier: str) -> None:
        """Delete the cache entry of *identifier* if it exists."""
        directory = self.layout.repo_dir(identifier)
        if directory.exists():
            logger.info("Invalidate cached directory: %s", directory)
            shutil.rmtree(directory)

    def locate(self, path: str) -> tuple[Repository, Path] | None:
        """Find the cached repository owning *path*, preferring the longest prefix.

        Returns:
            The repository handle and the local path of *path* inside it, or
            None if no prefix of *path* is cached.
        """
        for identifier, subpath in open_candidates(path):
            repository = self.open(identifier)
            if repository is not None:
                logger.info("Use cached repository: %s", repository.directory)
                return repository, _join(repository.directory, subpath)
        return None

    def materialize(self, path: str) -> tuple[Repository, Path]:
        """Clone the repository owning *path*.

        A path matching a hosting pattern has a single candidate.  Otherwise
        prefixes are cloned from the shortest to the longest until one works.

        Returns:
            The repository handle and the local path of *path* inside it.

        Raises:
            CloneError: If no candidate could be cloned.
        """
        candidates = clone_candidates(path, self.hosting_patterns)
        try:
            (_, subpath), repository = first_success(
                candidates,
                lambda candidate: self.clone(candidate[0]),
                errors=(CloneError,),
            )
        except CandidatesExhaustedError as exc:
            if len(exc.failures) == 1:
                raise CloneError(f"clone failed: {path}: {exc.last_error}") from exc.last_error
            raise CloneError(f"clone failed: {path}") from exc
        return repository, _join(repository.directory, subpath)


# ################
# Implementation
# ################


def _join(directory: Path, subpath: str) -> Path:
    if not subpath:
        return directory
    return directory.joinpath(*subpath.split("/"))


def _prune_empty_directories(directory: Path, stop: Path) -> None:
    """Remove *directory* and its parents below *stop* while they are empty."""
    while directory != stop and directory.is_relative_to(stop):
        if directory.exists():
            if any(directory.iterdir()):
                return
            directory.rmdir()
        directory = directory.parent


def _holds_cache_entries(directory: Path) -> bool:
    """Return True if *directory* is, or contains, a git working copy."""
    return any(True for _ in directory.rglob(METADATA_MARKER))


def _is_below(directory: Path, root: Path) -> bool:
    """Return True if *directory* resolves to a path strictly inside *root*."""
    resolved = directory.resolve()
    base = root.resolve()
    return resolved != base and resolved.is_relative_to(base)
