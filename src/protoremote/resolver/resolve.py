# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resolution of remote import tokens to files in the repository cache."""

import logging
from pathlib import Path

from protoremote.cache.repository_cache import RepositoryCache, ResolutionError
from protoremote.resolver.revision import RevisionKind, parse_import_token
from protoremote.vcs.base import Repository, VcsError

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class CheckoutError(ResolutionError):
    """Raised when a revision cannot be checked out, even after a fetch."""


class ImportResolver:
    """Turns ``host/org/project/path/file.proto[@revision]`` into a local path.

    Steps for each token:

    1. Split off the revision (``latest``, a tag or commit, or nothing).
    2. Look the path up in the cache; a ``latest`` request discards the hit.
    3. Clone the owning repository if it is not cached.
    4. Check out the revision.  If that fails, fetch once and retry; a fetch
       failure is only logged so that cached repositories work offline.

    Args:
        cache: Repository cache, used under the caller's ProcessLock.
    """

    def __init__(self, cache: RepositoryCache) -> None:
        self.cache = cache

    def resolve(self, raw_token: str) -> Path:
        """Return the local path of the file named by *raw_token*.

        Raises:
            CloneError: If the owning repository cannot be cloned.
            CheckoutError: If the revision cannot be checked out.
        """
        token = parse_import_token(raw_token)

        located = self.cache.locate(token.path)
        if located is not None and token.kind is RevisionKind.LATEST:
            self.cache.invalidate(located[0].identifier)
            located = None
        if located is None:
            located = self.cache.materialize(token.path)

        repository, local_path = located
        self._checkout(repository, token.revision)
        return local_path

    def _checkout(self, repository: Repository, revision: str) -> None:
        """Check out *revision*, fetching and retrying once on failure."""
        try:
            repository.checkout(revision)
            return
        except VcsError as exc:
            logger.info("Checkout of '%s' in %s failed, fetching: %s", revision, repository.directory, exc)

        try:
            repository.fetch()
        except VcsError as exc:
            logger.warning("fetch failed: %s", exc)

        try:
            repository.checkout(revision)
        except VcsError as exc:
            raise CheckoutError(f"cannot check out '{revision or 'HEAD'}' in {repository.identifier}: {exc}") from exc
