# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Candidate repository boundaries inside a remote import path.

Nothing in a path like ``example.com/group/project/protos/a.proto`` says
where the repository ends and the file path inside it begins.  Two searches
are used:

* **open** (cache lookup) tries every prefix from the longest to the shortest,
  so that a nested repository that was cloned before wins over its parents.
* **clone** first matches well-known hosting layouts
  (``host/organization/project``) and otherwise tries every prefix from the
  shortest to the longest, cloning each until one succeeds.
"""

import re
from dataclasses import dataclass

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class HostingPattern:
    """A regular expression recognising a hosting service's path layout.

    The pattern must match the whole path and define two groups: the
    repository identifier and the (possibly empty) remainder.
    """

    name: str
    regex: re.Pattern[str]

    def split(self, path: str) -> tuple[str, str] | None:
        """Return ``(identifier, subpath)`` if *path* matches, else None."""
        match = self.regex.fullmatch(path)
        if match is None:
            return None
        return match.group(1), match.group(2).lstrip("/")


class HostingPatternError(ValueError):
    """Raised when a hosting pattern is not a usable regular expression."""


def compile_hosting_pattern(expression: str, name: str | None = None) -> HostingPattern:
    """Compile *expression* into a :class:`HostingPattern`.

    Raises:
        HostingPatternError: If the expression is invalid or does not define
            exactly two groups.
    """
    try:
        regex = re.compile(expression)
    except re.error as exc:
        raise HostingPatternError(f"Invalid hosting pattern {expression!r}: {exc}") from exc
    if regex.groups < 2:
        raise HostingPatternError(
            f"Hosting pattern {expression!r} must define two groups (identifier and subpath)"
        )
    return HostingPattern(name=name or expression, regex=regex)


DEFAULT_HOSTING_PATTERNS: tuple[HostingPattern, ...] = (
    compile_hosting_pattern(
        r"(github\.com/[A-Za-z0-9_.\-]+/[A-Za-z0-9_.\-]+)((?:/(?:[^\W\d_]|[0-9_.\-])+)*)",
        name="github",
    ),
    compile_hosting_pattern(
        r"(bitbucket\.org/[A-Za-z0-9_.\-]+/[A-Za-z0-9_.\-]+)((?:/[A-Za-z0-9_.\-]+)*)",
        name="bitbucket",
    ),
)


def split_segments(path: str) -> list[str]:
    """Split a slash-separated path into its non-empty segments."""
    return [segment for segment in path.split("/") if segment]


def open_candidates(path: str) -> list[tuple[str, str]]:
    """Return ``(identifier, subpath)`` pairs from the longest prefix to the shortest."""
    segments = split_segments(path)
    return _confined([_split_at(segments, i) for i in range(len(segments), 0, -1)])


def clone_candidates(
    path: str,
    patterns: tuple[HostingPattern, ...] | list[HostingPattern] = DEFAULT_HOSTING_PATTERNS,
) -> list[tuple[str, str]]:
    """Return the ``(identifier, subpath)`` pairs to clone, in order.

    A path matching one of *patterns* yields a single candidate.  Otherwise
    every prefix is returned, from the shortest to the longest.  Identifiers
    with a ``.`` or ``..`` segment are never returned.
    """
    for pattern in patterns:
        split = pattern.split(path)
        if split is not None:
            return _confined([split])
    segments = split_segments(path)
    return _confined([_split_at(segments, i) for i in range(1, len(segments) + 1)])


# ################
# Implementation
# ################


def _split_at(segments: list[str], index: int) -> tuple[str, str]:
    return "/".join(segments[:index]), "/".join(segments[index:])


def _confined(candidates: list[tuple[str, str]]) -> list[tuple[str, str]]:
    """Drop candidates whose identifier would leave the repository directory."""
    return [
        (identifier, subpath)
        for identifier, subpath in candidates
        if not any(segment in (".", "..") for segment in identifier.split("/"))
    ]
