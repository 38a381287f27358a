# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Ordered trial of candidates until one of them succeeds."""

from collections.abc import Callable, Iterable
from typing import TypeVar

# ###############
# Public Interface
# ###############

C = TypeVar("C")
R = TypeVar("R")


class CandidatesExhaustedError(Exception):
    """Raised when every candidate failed (or there were none to try).

    Attributes:
        failures: ``(candidate, error)`` pairs in the order they were tried.
    """

    def __init__(self, message: str, failures: list[tuple[object, BaseException]]) -> None:
        super().__init__(message)
        self.failures = failures

    @property
    def last_error(self) -> BaseException | None:
        """The error raised by the last candidate tried, if any."""
        return self.failures[-1][1] if self.failures else None


def first_success(
    candidates: Iterable[C],
    attempt: Callable[[C], R],
    *,
    errors: tuple[type[BaseException], ...] = (Exception,),
) -> tuple[C, R]:
    """Call *attempt* on each candidate in order and return the first success.

    Args:
        candidates: Candidates to try, in priority order.
        attempt: Callable invoked with one candidate; raising one of *errors*
            marks the candidate as failed.
        errors: Exception types that mean "try the next candidate".  Anything
            else propagates immediately.

    Returns:
        A ``(candidate, result)`` tuple for the first candidate that succeeded.

    Raises:
        CandidatesExhaustedError: If no candidate succeeded.
    """
    failures: list[tuple[object, BaseException]] = []
    for candidate in candidates:
        try:
            return candidate, attempt(candidate)
        except errors as exc:
            failures.append((candidate, exc))
    if not failures:
        raise CandidatesExhaustedError("no candidates to try", failures)
    raise CandidatesExhaustedError(f"all {len(failures)} candidate(s) failed", failures)
