# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Git backend built on the GitPython client library."""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

import git
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from protoremote.candidates import CandidatesExhaustedError, first_success
from protoremote.vcs.base import (
    LATEST_REVISION,
    Repository,
    VcsBackend,
    VcsError,
    default_branch_candidates,
)
from protoremote.vcs.netrc_auth import netrc_credentials

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ###############
# Public Interface
# ###############


class GitLibraryRepository(Repository):
    """Working copy accessed through a :class:`git.Repo` object."""

    def __init__(self, identifier: str, directory: Path, repo: git.Repo) -> None:
        super().__init__(identifier, directory)
        self.repo = repo

    def checkout(self, revision: str) -> None:
        """Check out *revision*, peeling annotated tags to their commit.

        Raises:
            VcsError: If the revision is unknown or the checkout fails.
        """
        if revision in ("", LATEST_REVISION):
            if self.repo.head.is_detached:
                self._checkout_default_branch()
            target = self._head_commit()
            logger.info("Using HEAD revision %s", target)
        else:
            target = _call_git(lambda: self._resolve_tag(revision)) or revision

        _call_git(lambda: self.repo.git.checkout("-q", target))

    def fetch(self) -> None:
        """Fetch branches and tags from ``origin``.

        Raises:
            VcsError: If there is no ``origin`` remote or the fetch fails.
        """

        def _fetch() -> None:
            self.repo.remote("origin").fetch(tags=True)

        _call_git(_fetch)

    def _head_commit(self) -> str:
        try:
            return self.repo.head.commit.hexsha
        except ValueError as exc:
            raise VcsError(f"Repository {self.directory} has no commits") from exc

    def _checkout_default_branch(self) -> None:
        try:
            remote_info = self.repo.git.remote("show", "origin")
        except GitCommandError as exc:
            logger.info("Cannot query remote of %s, guessing default branch: %s", self.directory, exc)
            remote_info = ""

        try:
            first_success(
                default_branch_candidates(remote_info),
                lambda name: self.repo.git.checkout("-q", name),
                errors=(GitCommandError,),
            )
        except CandidatesExhaustedError as exc:
            raise VcsError(f"Cannot check out default branch in {self.directory}: {exc.last_error}") from exc

    def _resolve_tag(self, revision: str) -> str | None:
        """Return the commit a tag named *revision* points at, or None."""
        for tag_ref in self.repo.tags:
            if tag_ref.name != revision:
                continue
            if tag_ref.tag is not None:
                # Annotated tags are objects of their own; peel to the commit.
                commit = tag_ref.commit.hexsha
            else:
                commit = tag_ref.object.hexsha
            logger.info("Using tag %s revision %s", tag_ref.path, commit)
            return commit
        return None


class GitLibraryBackend(VcsBackend):
    """Backend that opens and clones repositories with GitPython.

    Args:
        url_prefix: Prepended to the identifier to form the clone URL.  When
            omitted, ``https://`` is used for hosts with ``.netrc``
            credentials and ``ssh://git@`` otherwise.
        netrc_path: Explicit ``.netrc`` location, mainly for tests.
    """

    def __init__(self, url_prefix: str | None = None, netrc_path: Path | None = None) -> None:
        self.url_prefix = url_prefix
        self.netrc_path = netrc_path

    def open(self, identifier: str, directory: Path) -> GitLibraryRepository:
        try:
            repo = git.Repo(directory)
        except (InvalidGitRepositoryError, NoSuchPathError) as exc:
            raise VcsError(f"Not a git repository: {directory}") from exc
        return GitLibraryRepository(identifier, directory, repo)

    def clone(self, identifier: str, directory: Path) -> GitLibraryRepository:
        url = self.clone_url(identifier)

        def _clone() -> git.Repo:
            return git.Repo.clone_from(url, directory)

        repo = _call_git(_clone)
        return GitLibraryRepository(identifier, directory, repo)

    def clone_url(self, identifier: str) -> str:
        """Return the URL the repository named by *identifier* is cloned from."""
        if self.url_prefix is not None:
            return self.url_prefix + identifier
        host = identifier.split("/", 1)[0]
        if netrc_credentials(host, self.netrc_path) is not None:
            return f"https://{identifier}.git"
        return f"ssh://git@{identifier}.git"


# ################
# Implementation
# ################


def _call_git(operation: Callable[[], T]) -> T:
    """Run a GitPython operation, translating its errors into VcsError."""
    try:
        return operation()
    except GitCommandError as exc:
        raise VcsError(str(exc).strip()) from exc
    except ValueError as exc:
        raise VcsError(str(exc)) from exc
