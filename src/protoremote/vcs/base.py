# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Version-control capability interface shared by all git backends."""

import re
from abc import ABC, abstractmethod
from pathlib import Path

# ###############
# Public Interface
# ###############

METADATA_MARKER = ".git"
LATEST_REVISION = "latest"
FALLBACK_BRANCHES = ("master", "main")


class VcsError(Exception):
    """Raised when a version-control operation fails."""


class Repository(ABC):
    """A git working copy bound to one directory of the repository cache.

    Attributes:
        identifier: Repository identifier, e.g. ``github.com/org/project``.
        directory: Local working directory of the clone.
    """

    def __init__(self, identifier: str, directory: Path) -> None:
        self.identifier = identifier
        self.directory = directory

    @abstractmethod
    def checkout(self, revision: str) -> None:
        """Move the working directory to *revision*.

        An empty revision or ``latest`` means the tip of the default branch.
        A named revision is looked up as a tag first and used verbatim
        otherwise (e.g. a commit hash).

        Raises:
            VcsError: If the revision cannot be checked out.
        """

    @abstractmethod
    def fetch(self) -> None:
        """Update the local repository from its remote without checking out.

        Raises:
            VcsError: If the remote cannot be reached.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.identifier!r}, {str(self.directory)!r})"


class VcsBackend(ABC):
    """Factory that binds :class:`Repository` handles to cache directories."""

    @abstractmethod
    def open(self, identifier: str, directory: Path) -> Repository:
        """Bind a handle to an existing working copy; no network access.

        Raises:
            VcsError: If *directory* is not a usable working copy.
        """

    @abstractmethod
    def clone(self, identifier: str, directory: Path) -> Repository:
        """Clone the remote named by *identifier* into *directory*.

        Raises:
            VcsError: If the clone fails.
        """


def has_metadata_marker(directory: Path) -> bool:
    """Return True if *directory* holds git metadata (``.git`` is a directory)."""
    return (directory / METADATA_MARKER).is_dir()


def extract_default_branch(remote_info: str) -> str:
    """Extract the advertised default branch from ``git remote show`` output.

    Returns:
        The branch name following ``HEAD branch:``, or an empty string if the
        marker is missing, empty or reports an unknown branch.
    """
    match = _HEAD_BRANCH_RE.search(remote_info)
    if match is None:
        return ""
    branch = match.group(1)
    if branch == "(unknown)":
        return ""
    return branch


def default_branch_candidates(remote_info: str) -> list[str]:
    """Return the branches to try, in order, when moving to the default branch."""
    branch = extract_default_branch(remote_info)
    if branch:
        return [branch]
    return list(FALLBACK_BRANCHES)


def short_tag_name(ref: str) -> str:
    """Strip the ``refs/tags/`` namespace from a tag reference."""
    return ref.removeprefix("refs/tags/")


# ################
# Implementation
# ################

_HEAD_BRANCH_RE = re.compile(r"HEAD branch:[ \t]*(\S*)")
