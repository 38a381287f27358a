# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures: an in-memory git backend and real local git remotes."""

import shutil
import subprocess
from pathlib import Path

import pytest

from protoremote.cache.repository_cache import CacheLayout
from protoremote.vcs.base import LATEST_REVISION, METADATA_MARKER, Repository, VcsBackend, VcsError

# ###############
# Fake backend
# ###############


class FakeRepository(Repository):
    """Repository whose revisions live in the owning FakeBackend."""

    def __init__(self, backend: "FakeBackend", identifier: str, directory: Path) -> None:
        super().__init__(identifier, directory)
        self.backend = backend
        self.head = ""
        self.checkouts: list[str] = []
        self.fetches = 0

    def checkout(self, revision: str) -> None:
        self.checkouts.append(revision)
        if revision in ("", LATEST_REVISION):
            self.head = "HEAD"
            return
        if revision not in self.backend.local_revisions[self.identifier]:
            raise VcsError(f"unknown revision {revision}")
        self.head = revision

    def fetch(self) -> None:
        self.fetches += 1
        if self.backend.offline:
            raise VcsError("remote unreachable")
        self.backend.local_revisions[self.identifier] = set(self.backend.remotes[self.identifier])


class FakeBackend(VcsBackend):
    """Backend cloning from an in-memory map of identifier to revisions.

    Attributes:
        remotes: Identifier to the revisions the remote knows.
        local_revisions: Identifier to the revisions of the local clone.
        clone_attempts: Identifiers passed to clone(), in order.
        leave_marker_on_failure: Create ``.git`` before failing a clone.
        offline: Make fetch() fail.
    """

    def __init__(self) -> None:
        self.remotes: dict[str, set[str]] = {}
        self.local_revisions: dict[str, set[str]] = {}
        self.clone_attempts: list[str] = []
        self.repositories: list[FakeRepository] = []
        self.leave_marker_on_failure = False
        self.offline = False

    def add_remote(self, identifier: str, *revisions: str) -> None:
        self.remotes[identifier] = set(revisions)

    def open(self, identifier: str, directory: Path) -> FakeRepository:
        if identifier not in self.local_revisions:
            self.local_revisions[identifier] = set(self.remotes.get(identifier, ()))
        return self._track(FakeRepository(self, identifier, directory))

    def clone(self, identifier: str, directory: Path) -> FakeRepository:
        self.clone_attempts.append(identifier)
        if identifier not in self.remotes:
            if self.leave_marker_on_failure:
                (directory / METADATA_MARKER).mkdir(parents=True, exist_ok=True)
            raise VcsError(f"repository not found: {identifier}")
        (directory / METADATA_MARKER).mkdir(parents=True, exist_ok=True)
        self.local_revisions[identifier] = set(self.remotes[identifier])
        return self._track(FakeRepository(self, identifier, directory))

    def _track(self, repository: FakeRepository) -> FakeRepository:
        self.repositories.append(repository)
        return repository


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def layout(tmp_path: Path) -> CacheLayout:
    return CacheLayout(root=tmp_path / "cache", version="3.22.2")


def make_cached_entry(layout: CacheLayout, identifier: str) -> Path:
    """Create a directory that looks like a cached clone of *identifier*."""
    directory = layout.repo_dir(identifier)
    (directory / METADATA_MARKER).mkdir(parents=True)
    return directory


# ###############
# Real git remotes
# ###############

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")

_GIT_IDENTITY = [
    "-c",
    "user.name=protoc-remote tests",
    "-c",
    "user.email=tests@example.com",
    "-c",
    "commit.gpgsign=false",
    "-c",
    "tag.gpgsign=false",
]


def git(*args: str, cwd: Path | None = None) -> str:
    """Run git in *cwd* and return its stripped stdout."""
    result = subprocess.run(
        ["git", *_GIT_IDENTITY, *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


class GitRemote:
    """A local repository standing in for a hosted remote."""

    def __init__(self, directory: Path, branch: str) -> None:
        self.directory = directory
        directory.mkdir(parents=True)
        git("init", "-q", cwd=directory)
        git("symbolic-ref", "HEAD", f"refs/heads/{branch}", cwd=directory)

    def commit(self, files: dict[str, str], message: str = "update") -> str:
        """Write *files*, commit them and return the new commit hash."""
        for name, content in files.items():
            target = self.directory / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        git("add", "-A", cwd=self.directory)
        git("commit", "-q", "-m", message, cwd=self.directory)
        return self.head()

    def tag(self, name: str, annotated: bool = True) -> None:
        if annotated:
            git("tag", "-a", name, "-m", f"release {name}", cwd=self.directory)
        else:
            git("tag", name, cwd=self.directory)

    def head(self) -> str:
        return git("rev-parse", "HEAD", cwd=self.directory)


class GitRemotes:
    """Factory of local remotes served under one ``file://`` URL prefix."""

    def __init__(self, root: Path) -> None:
        self.root = root

    @property
    def url_prefix(self) -> str:
        return self.root.as_uri() + "/"

    def create(self, identifier: str, files: dict[str, str], branch: str = "main") -> GitRemote:
        remote = GitRemote(self.root.joinpath(*identifier.split("/")), branch)
        remote.commit(files, message="initial")
        return remote


@pytest.fixture
def git_remotes(tmp_path: Path) -> GitRemotes:
    return GitRemotes(tmp_path / "remotes")


def head_of(directory: Path) -> str:
    """Return the commit checked out in *directory*."""
    return git("rev-parse", "HEAD", cwd=directory)
