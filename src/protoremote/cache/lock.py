# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Advisory whole-cache lock serialising concurrent wrapper invocations."""

import errno
import logging
from pathlib import Path
from types import TracebackType
from typing import TextIO

try:
    import fcntl
except ImportError:  # Windows has no flock(); locking is best effort there.
    fcntl = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class LockError(Exception):
    """Raised when the cache lock cannot be created or acquired."""


class ProcessLock:
    """Exclusive ``flock`` on a lock file, held as a context manager.

    The lock blocks until every other holder has released it.  File systems
    that do not implement ``flock`` are treated as if the lock was granted.

    Example::

        with ProcessLock(layout.lock_path):
            ...  # exclusive access to the repository cache
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._file: TextIO | None = None

    @property
    def locked(self) -> bool:
        return self._file is not None

    def acquire(self) -> None:
        """Open the lock file and take the exclusive lock.

        Raises:
            LockError: If the lock file cannot be created or locked.
        """
        if self._file is not None:
            raise LockError(f"Lock {self.path} is already held by this object")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            lock_file = open(self.path, "a+")
        except OSError as exc:
            raise LockError(f"Cannot create lock file '{self.path}': {exc}") from exc

        try:
            _flock(lock_file, _LOCK_EX)
        except OSError as exc:
            lock_file.close()
            raise LockError(f"Cannot lock '{self.path}': {exc}") from exc
        self._file = lock_file
        logger.debug("Acquired cache lock %s", self.path)

    def release(self) -> None:
        """Release the lock and close the lock file; a no-op if not held."""
        lock_file, self._file = self._file, None
        if lock_file is None:
            return
        try:
            _flock(lock_file, _LOCK_UN)
        finally:
            lock_file.close()
        logger.debug("Released cache lock %s", self.path)

    def __enter__(self) -> "ProcessLock":
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.release()


# ################
# Implementation
# ################

_LOCK_EX = fcntl.LOCK_EX if fcntl is not None else 0
_LOCK_UN = fcntl.LOCK_UN if fcntl is not None else 0
_UNSUPPORTED = {errno.ENOSYS, errno.ENOTSUP, errno.EOPNOTSUPP}


def _flock(lock_file: TextIO, operation: int) -> None:
    """Apply *operation* to *lock_file*, ignoring unsupported-lock errors."""
    if fcntl is None:
        return
    while True:
        try:
            fcntl.flock(lock_file.fileno(), operation)
            return
        except InterruptedError:
            continue
        except OSError as exc:
            if exc.errno in _UNSUPPORTED:
                logger.debug("File locking not supported for %s: %s", lock_file.name, exc)
                return
            raise
