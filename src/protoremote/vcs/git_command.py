# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Git backend that delegates every operation to the ``git`` executable."""

import logging
import os
import subprocess
from pathlib import Path

from protoremote.candidates import CandidatesExhaustedError, first_success
from protoremote.vcs.base import (
    LATEST_REVISION,
    Repository,
    VcsBackend,
    VcsError,
    default_branch_candidates,
    short_tag_name,
)

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_URL_PREFIX = "https://"


class GitCommandRepository(Repository):
    """Working copy driven through ``git -C <directory> ...`` invocations."""

    def checkout(self, revision: str) -> None:
        """Check out *revision*, peeling annotated tags to their commit.

        For an unspecified or latest revision a detached working copy is first
        moved back onto the remote's default branch.  Named revisions are
        checked out directly, so a revision already present locally needs no
        access to the remote.

        Raises:
            VcsError: If the default branch or *revision* cannot be checked out.
        """
        if revision in ("", LATEST_REVISION):
            if self._is_detached():
                self._checkout_default_branch()
            target = "HEAD"
        else:
            target = self._resolve_tag(revision) or revision
        _run_git(["-C", str(self.directory), "checkout", "-q", target])

    def fetch(self) -> None:
        """Fetch branches and tags from ``origin``.

        Raises:
            VcsError: If git exits with a non-zero code.
        """
        _run_git(["-C", str(self.directory), "fetch", "--tags", "origin"], timeout=_NETWORK_TIMEOUT)

    def _is_detached(self) -> bool:
        result = _run_git_raw(["-C", str(self.directory), "symbolic-ref", "-q", "HEAD"])
        return result.returncode != 0

    def _checkout_default_branch(self) -> None:
        result = _run_git_raw(
            ["-C", str(self.directory), "remote", "show", "origin"],
            timeout=_NETWORK_TIMEOUT,
        )
        if result.returncode != 0:
            logger.info("Cannot query remote of %s, guessing default branch: %s", self.directory, result.stderr.strip())
            remote_info = ""
        else:
            remote_info = result.stdout

        try:
            branch, _ = first_success(
                default_branch_candidates(remote_info),
                lambda name: _run_git(["-C", str(self.directory), "checkout", "-q", name]),
                errors=(VcsError,),
            )
        except CandidatesExhaustedError as exc:
            raise VcsError(f"Cannot check out default branch in {self.directory}: {exc.last_error}") from exc
        logger.debug("Checked out default branch %s in %s", branch, self.directory)

    def _resolve_tag(self, revision: str) -> str | None:
        """Return the commit a tag named *revision* points at, or None."""
        output = _run_git(
            [
                "-C",
                str(self.directory),
                "for-each-ref",
                "--format=%(refname) %(objecttype) %(objectname) %(*objectname)",
                "refs/tags",
            ]
        )
        for line in output.splitlines():
            fields = line.split()
            if len(fields) < 3 or short_tag_name(fields[0]) != revision:
                continue
            if fields[1] == "tag" and len(fields) == 4:
                # Annotated tag, use the peeled target.
                commit = fields[3]
            else:
                commit = fields[2]
            logger.info("Using tag %s revision %s", fields[0], commit)
            return commit
        return None


class GitCommandBackend(VcsBackend):
    """Backend that opens and clones repositories with the ``git`` executable.

    Args:
        url_prefix: Prepended to the identifier to form the clone URL.
    """

    def __init__(self, url_prefix: str = DEFAULT_URL_PREFIX) -> None:
        self.url_prefix = url_prefix

    def open(self, identifier: str, directory: Path) -> GitCommandRepository:
        _run_git(["-C", str(directory), "rev-parse"], timeout=10)
        return GitCommandRepository(identifier, directory)

    def clone(self, identifier: str, directory: Path) -> GitCommandRepository:
        _run_git(["clone", "-q", self.url_prefix + identifier, str(directory)], timeout=_NETWORK_TIMEOUT)
        return GitCommandRepository(identifier, directory)


# ################
# Implementation
# ################

_NETWORK_TIMEOUT = 600


def _run_git_raw(args: list[str], *, timeout: int = 120) -> subprocess.CompletedProcess[str]:
    """Run a git command and return the raw CompletedProcess result.

    Raises:
        VcsError: If git is not found on PATH or the command times out.
    """
    try:
        return subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            timeout=timeout,
            env=_git_environment(),
        )
    except FileNotFoundError as exc:
        raise VcsError("git executable not found on PATH") from exc
    except subprocess.TimeoutExpired as exc:
        raise VcsError(f"Git command timed out: git {' '.join(args)}") from exc


def _run_git(args: list[str], *, timeout: int = 120) -> str:
    """Run a git command and return stdout, raising VcsError on non-zero exit.

    Raises:
        VcsError: If git is not found, times out, or exits with a non-zero code.
    """
    result = _run_git_raw(args, timeout=timeout)
    if result.returncode != 0:
        raise VcsError(f"git {' '.join(args)}: {result.stderr.strip()}")
    return result.stdout


def _git_environment() -> dict[str, str]:
    env = dict(os.environ)
    # Never block on a credential prompt; fail the attempt instead.
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env
