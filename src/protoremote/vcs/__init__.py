# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Git backends used to populate the repository cache."""

from protoremote.vcs.base import (
    LATEST_REVISION,
    METADATA_MARKER,
    Repository,
    VcsBackend,
    VcsError,
    default_branch_candidates,
    extract_default_branch,
    has_metadata_marker,
)
from protoremote.vcs.git_command import GitCommandBackend, GitCommandRepository
from protoremote.vcs.netrc_auth import netrc_credentials

BACKEND_NAMES = ("command", "library")


def create_backend(name: str, url_prefix: str | None = None) -> VcsBackend:
    """Create the git backend registered under *name*.

    Args:
        name: ``"command"`` for the ``git`` executable, ``"library"`` for GitPython.
        url_prefix: Optional prefix used to build clone URLs from identifiers.

    Raises:
        ValueError: If *name* is not a known backend.
    """
    if name == "command":
        if url_prefix is None:
            return GitCommandBackend()
        return GitCommandBackend(url_prefix=url_prefix)
    if name == "library":
        from protoremote.vcs.git_library import GitLibraryBackend

        return GitLibraryBackend(url_prefix=url_prefix)
    raise ValueError(f"Unknown git backend '{name}', expected one of {', '.join(BACKEND_NAMES)}")


__all__ = [
    "BACKEND_NAMES",
    "GitCommandBackend",
    "GitCommandRepository",
    "LATEST_REVISION",
    "METADATA_MARKER",
    "Repository",
    "VcsBackend",
    "VcsError",
    "create_backend",
    "default_branch_candidates",
    "extract_default_branch",
    "has_metadata_marker",
    "netrc_credentials",
]
